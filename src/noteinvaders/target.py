"""Falling targets bound to a single pitch or a chord."""

from __future__ import annotations

import math

from noteinvaders.chords import ChordSpec, note_name, notes_match_chord
from noteinvaders.models import TargetState, TargetView

TARGET_SIZE = 85.0
WOBBLE_RATE = 30.0  # px/s at the peak of the sine
HIT_FLASH_DURATION = 0.5
SHIELD_FLASH_DURATION = 1.0
DEATH_DURATION = 0.3


class Target:
    """A descending objective.

    Position is the top-left corner. A target is either a single pitch
    (``chord is None``) or a chord; in the chord case ``pitch`` is the root.
    """

    def __init__(
        self,
        x: float,
        y: float,
        pitch: int,
        chord: ChordSpec | None = None,
        speed: float = 14.0,
        wobble_speed: float = 1.25,
        animation_offset: float = 0.0,
    ) -> None:
        self.x = x
        self.y = y
        self.width = TARGET_SIZE
        self.height = TARGET_SIZE
        self.pitch = pitch
        self.chord = chord
        self.speed = speed  # px/s
        self.wobble_speed = wobble_speed

        self.state = TargetState.ALIVE
        self.animation_time = animation_offset
        self.hit_time = 0.0
        self.shield_hit_time = 0.0
        self.death_time = 0.0
        self.has_hit_shield = False

    @classmethod
    def single(cls, pitch: int, x: float, y: float, **kwargs) -> Target:
        return cls(x, y, pitch, None, **kwargs)

    @classmethod
    def for_chord(cls, chord: ChordSpec, x: float, y: float, **kwargs) -> Target:
        return cls(x, y, chord.root, chord, **kwargs)

    @property
    def label(self) -> str:
        if self.chord is not None:
            return self.chord.name
        return note_name(self.pitch)

    @property
    def is_alive(self) -> bool:
        return self.state == TargetState.ALIVE

    @property
    def is_dead(self) -> bool:
        return self.state == TargetState.DEAD

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def update(self, dt: float) -> None:
        if self.state == TargetState.DEAD:
            return

        self._advance_flashes(dt)

        if self.state == TargetState.ALIVE:
            self.animation_time += dt
            self.y += self.speed * dt
            self.x += math.sin(self.animation_time * self.wobble_speed) * WOBBLE_RATE * dt
            return

        self.death_time -= dt
        if self.death_time <= 0:
            self.death_time = 0.0
            self.state = TargetState.DEAD

    def _advance_flashes(self, dt: float) -> None:
        if self.hit_time > 0:
            self.hit_time = max(0.0, self.hit_time - dt)
        if self.shield_hit_time > 0:
            self.shield_hit_time = max(0.0, self.shield_hit_time - dt)

    def matches(self, played_pitch: int, played_pitches: list[int] | tuple[int, ...] | None = None) -> bool:
        """Single targets need the exact pitch; chord targets need the held set."""
        if self.chord is None:
            return played_pitch == self.pitch
        if not played_pitches:
            return False
        return notes_match_chord(list(played_pitches), list(self.chord.notes))

    def start_hit_flash(self) -> None:
        self.hit_time = HIT_FLASH_DURATION

    def start_shield_flash(self) -> None:
        if not self.has_hit_shield:
            self.shield_hit_time = SHIELD_FLASH_DURATION
            self.has_hit_shield = True

    def start_death(self) -> None:
        if self.state == TargetState.ALIVE:
            self.state = TargetState.DYING
            self.death_time = DEATH_DURATION

    def is_below_shield(self, shield_y: float) -> bool:
        return self.bottom > shield_y

    def boundary_points(self) -> list[tuple[float, float]]:
        """Four corners plus the bottom centre."""
        left, right = self.x, self.x + self.width
        top, bottom = self.y, self.bottom
        return [
            (left, top),
            (right, top),
            (left, bottom),
            (right, bottom),
            (left + self.width / 2, bottom),
        ]

    def view(self) -> TargetView:
        death_progress = 0.0
        if self.state == TargetState.DYING:
            death_progress = 1.0 - self.death_time / DEATH_DURATION
        elif self.state == TargetState.DEAD:
            death_progress = 1.0
        return TargetView(
            x=self.x,
            y=self.y,
            width=self.width,
            height=self.height,
            label=self.label,
            pitch_class=self.pitch % 12,
            state=self.state,
            hit_flash=self.hit_time / HIT_FLASH_DURATION,
            shield_flash=self.shield_hit_time / SHIELD_FLASH_DURATION,
            death_progress=death_progress,
        )
