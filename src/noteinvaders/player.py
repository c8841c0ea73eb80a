"""Player rig: smoothed horizontal aim, ammunition and the shield band."""

from __future__ import annotations

import math

from noteinvaders.config import MAX_AMMO
from noteinvaders.models import RigView

RIG_WIDTH = 40.0
RIG_HEIGHT = 30.0
RIG_BOTTOM_MARGIN = 100.0
SHIELD_HEIGHT = 30.0
SHIELD_WIDTH_FRACTION = 0.95
SLEW_RATE = 14.0  # 1/s, exponential approach toward the aim
SNAP_DISTANCE = 0.1


class PlayerRig:
    def __init__(self, field_width: float, field_height: float, max_ammo: int = MAX_AMMO) -> None:
        self.width = RIG_WIDTH
        self.height = RIG_HEIGHT
        self.max_ammo = max_ammo
        self.ammo = max_ammo
        self.field_width = field_width
        self.field_height = field_height
        self.x = field_width / 2 - self.width / 2
        self.y = field_height - RIG_BOTTOM_MARGIN
        self.target_x = self.x

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def shield_y(self) -> float:
        return self.y - SHIELD_HEIGHT

    @property
    def shield_width(self) -> float:
        return self.field_width * SHIELD_WIDTH_FRACTION

    @property
    def shield_x(self) -> float:
        return (self.field_width - self.shield_width) / 2

    def resize(self, field_width: float, field_height: float) -> None:
        self.field_width = field_width
        self.field_height = field_height
        self.y = field_height - RIG_BOTTOM_MARGIN
        limit = max(0.0, field_width - self.width)
        self.x = min(self.x, limit)
        self.target_x = min(self.target_x, limit)

    def move_to(self, x: float) -> None:
        """Aim so the rig is centred on ``x``, keeping it inside the field."""
        limit = max(0.0, self.field_width - self.width)
        self.target_x = max(0.0, min(limit, x - self.width / 2))

    def update(self, dt: float) -> None:
        dx = self.target_x - self.x
        if abs(dx) < SNAP_DISTANCE:
            self.x = self.target_x
            return
        self.x += dx * (1.0 - math.exp(-SLEW_RATE * dt))

    def has_ammo(self) -> bool:
        return self.ammo > 0

    def consume_ammo(self) -> None:
        self.ammo = max(0, self.ammo - 1)

    def refill(self, amount: int) -> int:
        """Add ammunition up to the cap. Returns how much was actually added."""
        before = self.ammo
        self.ammo = max(0, min(self.max_ammo, self.ammo + amount))
        return self.ammo - before

    def shield_contains(self, x: float, y: float) -> bool:
        return (
            self.shield_x <= x <= self.shield_x + self.shield_width
            and self.shield_y <= y <= self.shield_y + SHIELD_HEIGHT
        )

    def view(self) -> RigView:
        return RigView(
            x=self.x,
            y=self.y,
            width=self.width,
            height=self.height,
            ammo=self.ammo,
            max_ammo=self.max_ammo,
            shield_x=self.shield_x,
            shield_y=self.shield_y,
            shield_width=self.shield_width,
            shield_height=SHIELD_HEIGHT,
        )
