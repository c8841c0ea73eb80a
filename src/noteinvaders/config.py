"""Global constants and default settings."""

from __future__ import annotations

from dataclasses import dataclass

WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
FPS = 60
WINDOW_TITLE = "Note Invaders"

# Full MIDI pitch space
MIDI_NOTE_MIN = 0
MIDI_NOTE_MAX = 127

# Range reported by a MIDI device that does not advertise its own (C2..C7)
DEFAULT_DEVICE_MIN = 36
DEFAULT_DEVICE_MAX = 96

# Semitones of target variety per wave (three octaves)
WAVE_RANGE_SPAN = 36
WAVE_RANGE_SHIFT = 5
WAVE_RANGE_JITTER = 12

# Match rules
WAVES_TOTAL = 5
BASE_TARGET_COUNT = 5
MAX_HEALTH = 100
SHIELD_PENALTY_FRACTION = 0.2
MAX_AMMO = 60
SURVIVAL_AMMO_MULTIPLIER = 1.25

# Scoring
POINTS_PER_TARGET = 100
POINTS_PER_AMMO = 10
POINTS_PER_HEALTH = 10
POINTS_PER_WAVE = 500

# Timing (seconds)
WAVE_TRANSITION_TIME = 2.0
PAUSE_PENALTY = 2.5
NOTE_DEBOUNCE = 0.1
SINGLE_FIRE_DELAY = 0.1
CHARGE_FIRE_DELAY = 0.16
RELEASE_FIRE_DELAY = 0.1
CHARGE_COOLDOWN = 0.1
CHARGE_MAX_HOLD = 10.0
UNFOCUSED_MAX_STEP = 0.25

# Charge power levels
MAX_POWER = 4

# Chord generation
CHORD_ROOT_HEADROOM = 12
UNCOMMON_CHORD_ATTEMPTS = 50


@dataclass
class GameTuning:
    """Every gameplay constant a match reads, with the defaults above."""

    waves_total: int = WAVES_TOTAL
    base_target_count: int = BASE_TARGET_COUNT
    max_health: int = MAX_HEALTH
    shield_penalty_fraction: float = SHIELD_PENALTY_FRACTION
    max_ammo: int = MAX_AMMO
    survival_ammo_multiplier: float = SURVIVAL_AMMO_MULTIPLIER
    points_per_target: int = POINTS_PER_TARGET
    points_per_ammo: int = POINTS_PER_AMMO
    points_per_health: int = POINTS_PER_HEALTH
    points_per_wave: int = POINTS_PER_WAVE
    wave_transition_time: float = WAVE_TRANSITION_TIME
    pause_penalty: float = PAUSE_PENALTY
    note_debounce: float = NOTE_DEBOUNCE
    single_fire_delay: float = SINGLE_FIRE_DELAY
    charge_fire_delay: float = CHARGE_FIRE_DELAY
    release_fire_delay: float = RELEASE_FIRE_DELAY
    charge_cooldown: float = CHARGE_COOLDOWN
    charge_max_hold: float = CHARGE_MAX_HOLD
    unfocused_max_step: float = UNFOCUSED_MAX_STEP
    hide_uncommon_chords: bool = True

    @property
    def shield_penalty(self) -> float:
        return self.max_health * self.shield_penalty_fraction
