"""Core data models shared across the engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class GameMode(Enum):
    CLASSIC = auto()
    SURVIVAL = auto()


class NoteMode(Enum):
    SINGLE = auto()
    CHORD = auto()


class GameState(Enum):
    TITLE = auto()
    PLAYING = auto()
    WAVE_TRANSITION = auto()
    PAUSED = auto()
    GAME_OVER = auto()
    VICTORY = auto()


class TargetState(Enum):
    ALIVE = auto()
    DYING = auto()
    DEAD = auto()


class DefeatReason(Enum):
    OUT_OF_AMMO = "You ran out of ammo!"
    SHIELD_DESTROYED = "Your shield was destroyed by an enemy!"


@dataclass(frozen=True)
class PitchRange:
    """Inclusive MIDI pitch interval."""

    min: int
    max: int

    @property
    def span(self) -> int:
        return self.max - self.min

    def clamp(self, pitch: int) -> int:
        return max(self.min, min(self.max, pitch))


@dataclass
class LiveNoteEvent:
    pitch: int
    velocity: int
    timestamp: float
    is_note_on: bool


@dataclass(frozen=True)
class HighScore:
    score: int = 0
    wave: int = 0


@dataclass(frozen=True)
class Palette:
    """Vertical background gradient: top, middle, bottom RGB."""

    top: tuple[int, int, int]
    middle: tuple[int, int, int]
    bottom: tuple[int, int, int]


@dataclass(frozen=True)
class TargetView:
    x: float
    y: float
    width: float
    height: float
    label: str
    pitch_class: int  # root pitch class, drives the colour
    state: TargetState
    hit_flash: float  # 0..1, remaining fraction
    shield_flash: float  # 0..1, remaining fraction
    death_progress: float  # 0 while alive, 1 when the fade is done


@dataclass(frozen=True)
class RigView:
    x: float
    y: float
    width: float
    height: float
    ammo: int
    max_ammo: int
    shield_x: float
    shield_y: float
    shield_width: float
    shield_height: float


@dataclass(frozen=True)
class ProjectileView:
    start: tuple[float, float]
    head: tuple[float, float]
    target: tuple[float, float]
    power: int
    alpha: float
    hit: bool
    progress: float


@dataclass(frozen=True)
class ChargeView:
    power: int
    held: tuple[int, ...]
    elapsed: float
    chord_name: str | None = None


@dataclass
class MatchResult:
    """Score breakdown shown on the game-over and victory screens."""

    base_score: int = 0
    ammo_bonus: int = 0
    health_bonus: int = 0
    wave_bonus: int = 0
    final_score: int = 0
    waves_completed: int = 0
    is_high_score: bool = False
    reason: DefeatReason | None = None


@dataclass(frozen=True)
class MatchSnapshot:
    state: GameState
    game_mode: GameMode
    note_mode: NoteMode
    wave: int
    waves_total: int | None
    health: float
    max_health: int
    score: int
    high_score: HighScore
    palette: Palette
    rig: RigView | None
    targets: tuple[TargetView, ...] = ()
    projectiles: tuple[ProjectileView, ...] = ()
    charge: ChargeView | None = None
    transition_remaining: float = 0.0
    result: MatchResult | None = None
    pitch_range: PitchRange | None = None
