"""Color palette."""

# RGB tuples
BG = (10, 8, 24)
HUD_TEXT = (220, 220, 220)
HUD_DIM = (120, 120, 140)
TITLE = (80, 220, 100)
ACCENT = (66, 135, 245)
WARNING = (220, 60, 60)
GOLD = (245, 200, 66)

RIG = (200, 220, 255)
RIG_OUTLINE = (90, 130, 200)
SHIELD = (80, 180, 255)
LASER = (255, 80, 200)
LASER_HIT = (255, 240, 120)
HIT_FLASH = (255, 255, 255)
SHIELD_FLASH = (255, 60, 60)

HEALTH_HIGH = (80, 220, 100)
HEALTH_MID = (245, 200, 66)
HEALTH_LOW = (220, 60, 60)

WHITE_KEY = (240, 240, 240)
BLACK_KEY = (30, 30, 30)
KEY_HELD = (80, 220, 100)

# One hue per pitch class, C through B
PITCH_CLASS_COLORS = [
    (230, 70, 70),
    (230, 120, 60),
    (235, 170, 50),
    (225, 215, 60),
    (150, 210, 60),
    (70, 200, 90),
    (60, 200, 170),
    (60, 170, 225),
    (70, 110, 230),
    (130, 80, 230),
    (190, 70, 220),
    (225, 70, 160),
]

# Charge meter, by power level
POWER_COLORS = {
    1: (120, 180, 255),
    2: (120, 255, 160),
    3: (255, 210, 90),
    4: (255, 90, 90),
}
