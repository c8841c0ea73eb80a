"""Interfaces the match talks to. Concrete implementations live in the shell modules."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from noteinvaders.models import HighScore, LiveNoteEvent, PitchRange


@runtime_checkable
class InputSource(Protocol):
    """Queues note events until the game loop drains them with ``poll``."""

    def poll(self) -> LiveNoteEvent | None: ...

    def close(self) -> None: ...

    def pitch_range(self) -> PitchRange: ...


@runtime_checkable
class AudioFeedback(Protocol):
    """Fire-and-forget sound cues."""

    def play_hit(self) -> None: ...

    def play_miss(self) -> None: ...

    def play_destroyed(self) -> None: ...

    def play_explosive(self) -> None: ...

    def play_shield_hit(self) -> None: ...

    def play_charge_sound(self, power: int) -> None: ...

    def stop_charge_sound(self, fade_seconds: float = 0.1) -> None: ...

    def play_wave_complete(self) -> None: ...

    def play_game_start(self) -> None: ...

    def play_game_over(self, is_high_score: bool) -> None: ...

    def play_victory(self, is_high_score: bool) -> None: ...


@runtime_checkable
class ScoreStore(Protocol):
    def load(self, key: str) -> HighScore: ...

    def save(self, score: int, key: str, wave: int) -> bool: ...
