"""Chord-mode charge: accumulate held pitches into a multi-note shot.

The controller only decides. It returns a ``ChargeShot`` when the charge
should fire and stays in the firing state until the match calls ``finish()``
after resolving the shot, so notes arriving in the same frame cannot trigger
a second decision.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable

from noteinvaders.chords import identify_chord
from noteinvaders.config import CHARGE_COOLDOWN, CHARGE_MAX_HOLD, MAX_POWER
from noteinvaders.models import ChargeView
from noteinvaders.ports import AudioFeedback
from noteinvaders.target import Target

logger = logging.getLogger(__name__)

FAST_FADE = 0.01


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Charging:
    held: tuple[int, ...]  # press order, no duplicates
    started_at: float
    firing: bool = False

    @property
    def power(self) -> int:
        return power_for(len(self.held))


ChargeState = Idle | Charging


def power_for(held_count: int) -> int:
    return max(1, min(held_count, MAX_POWER))


@dataclass(frozen=True)
class ChargeShot:
    """A fire decision. ``target`` is None for a release."""

    target: Target | None
    power: int
    aim_pitch: int | None

    @property
    def is_release(self) -> bool:
        return self.target is None


class ChargeFireController:
    def __init__(
        self,
        cooldown: float = CHARGE_COOLDOWN,
        max_hold: float = CHARGE_MAX_HOLD,
        audio: AudioFeedback | None = None,
    ) -> None:
        self.cooldown = cooldown
        self.max_hold = max_hold
        self.audio = audio
        self.state: ChargeState = Idle()
        self.last_release = float("-inf")

    def note_on(
        self,
        pitch: int,
        now: float,
        targets: Iterable[Target],
        can_fire: bool = True,
    ) -> ChargeShot | None:
        state = self.state
        if isinstance(state, Idle):
            if now - self.last_release <= self.cooldown:
                return None
            state = Charging(held=(pitch,), started_at=now)
            self.state = state
            logger.debug("Charge started on %d", pitch)
            if self.audio:
                self.audio.play_charge_sound(1)
        elif state.firing:
            return None
        elif pitch not in state.held:
            old_power = state.power
            state = replace(state, held=state.held + (pitch,))
            self.state = state
            if old_power < state.power < MAX_POWER and self.audio:
                self.audio.play_charge_sound(state.power)

        match = next(
            (t for t in targets if t.is_alive and t.matches(pitch, state.held)),
            None,
        )
        if match is not None:
            return self._fire(state, ChargeShot(match, state.power, state.held[-1]))

        if len(state.held) >= MAX_POWER:
            return self._release(state, now, can_fire)
        if now - state.started_at >= self.max_hold:
            return self._release(state, now, can_fire)
        return None

    def note_off(self, pitch: int, now: float, can_fire: bool = True) -> ChargeShot | None:
        state = self.state
        if not isinstance(state, Charging) or state.firing or pitch not in state.held:
            return None

        old_power = state.power
        state = replace(state, held=tuple(p for p in state.held if p != pitch))
        self.state = state
        if not state.held:
            return self._release(state, now, can_fire)

        if state.power < old_power and self.audio:
            self.audio.play_charge_sound(state.power)
        return None

    def check_timeout(self, now: float, can_fire: bool = True) -> ChargeShot | None:
        """Force-release a charge once it has been held for ``max_hold``."""
        state = self.state
        if not isinstance(state, Charging) or state.firing:
            return None
        if now - state.started_at < self.max_hold:
            return None
        logger.debug("Charge held %.1fs, releasing", now - state.started_at)
        return self._release(state, now, can_fire)

    def finish(self, now: float) -> None:
        """Return to Idle after the shot resolved; starts the cooldown."""
        self._reset(now)

    def cancel(self, now: float) -> None:
        """Drop the charge without firing."""
        if isinstance(self.state, Charging):
            logger.debug("Charge cancelled")
        self._reset(now)

    def view(self, now: float) -> ChargeView | None:
        state = self.state
        if not isinstance(state, Charging):
            return None
        return ChargeView(
            power=state.power,
            held=state.held,
            elapsed=now - state.started_at,
            chord_name=identify_chord(state.held),
        )

    def _fire(self, state: Charging, shot: ChargeShot) -> ChargeShot:
        self.state = replace(state, firing=True)
        if self.audio:
            self.audio.stop_charge_sound(FAST_FADE)
        logger.debug(
            "Charge fired: %s power=%d",
            "release" if shot.is_release else shot.target.label,
            shot.power,
        )
        return shot

    def _release(self, state: Charging, now: float, can_fire: bool) -> ChargeShot | None:
        if not can_fire:
            # Nothing to shoot with; drop the charge instead of holding it open
            self._reset(now)
            return None
        aim = state.held[-1] if state.held else None
        return self._fire(state, ChargeShot(None, state.power, aim))

    def _reset(self, now: float) -> None:
        was_active = isinstance(self.state, Charging)
        self.state = Idle()
        self.last_release = now
        if was_active and self.audio:
            self.audio.stop_charge_sound(FAST_FADE)
