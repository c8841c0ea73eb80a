"""Shared fakes for the match's ports."""

from __future__ import annotations

import random

import pytest

from noteinvaders.config import GameTuning
from noteinvaders.match import Match
from noteinvaders.models import GameMode, HighScore, LiveNoteEvent, NoteMode, PitchRange


class FakeInput:
    def __init__(self, pitch_range: PitchRange = PitchRange(36, 96)) -> None:
        self.events: list[LiveNoteEvent] = []
        self._range = pitch_range
        self.closed = False

    def press(self, pitch: int) -> None:
        self.events.append(LiveNoteEvent(pitch=pitch, velocity=100, timestamp=0.0, is_note_on=True))

    def release(self, pitch: int) -> None:
        self.events.append(LiveNoteEvent(pitch=pitch, velocity=0, timestamp=0.0, is_note_on=False))

    def poll(self) -> LiveNoteEvent | None:
        if self.events:
            return self.events.pop(0)
        return None

    def pitch_range(self) -> PitchRange:
        return self._range

    def close(self) -> None:
        self.closed = True


class RecordingAudio:
    """Records every cue as (name, args)."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _record(name):
        def cue(self, *args):
            self.calls.append((name, args))
        return cue

    play_hit = _record("play_hit")
    play_miss = _record("play_miss")
    play_destroyed = _record("play_destroyed")
    play_explosive = _record("play_explosive")
    play_shield_hit = _record("play_shield_hit")
    play_charge_sound = _record("play_charge_sound")
    stop_charge_sound = _record("stop_charge_sound")
    play_wave_complete = _record("play_wave_complete")
    play_game_start = _record("play_game_start")
    play_game_over = _record("play_game_over")
    play_victory = _record("play_victory")


class MemoryScoreStore:
    def __init__(self, initial: dict[str, HighScore] | None = None) -> None:
        self.records: dict[str, HighScore] = dict(initial or {})
        self.saves: list[tuple[int, str, int]] = []

    def load(self, key: str) -> HighScore:
        return self.records.get(key, HighScore())

    def save(self, score: int, key: str, wave: int) -> bool:
        self.saves.append((score, key, wave))
        if score <= self.records.get(key, HighScore()).score:
            return False
        self.records[key] = HighScore(score, wave)
        return True

    def all_scores(self) -> dict[str, HighScore]:
        return dict(self.records)


@pytest.fixture
def audio() -> RecordingAudio:
    return RecordingAudio()


@pytest.fixture
def scores() -> MemoryScoreStore:
    return MemoryScoreStore()


@pytest.fixture
def make_match(audio, scores):
    """Build a Match on a 1280x720 field with seeded randomness."""

    def _make(
        game_mode: GameMode = GameMode.CLASSIC,
        note_mode: NoteMode = NoteMode.SINGLE,
        tuning: GameTuning | None = None,
        input_source: FakeInput | None = None,
        seed: int = 7,
    ) -> Match:
        return Match(
            input_source=input_source or FakeInput(),
            audio=audio,
            scores=scores,
            tuning=tuning,
            rng=random.Random(seed),
            game_mode=game_mode,
            note_mode=note_mode,
            field_width=1280,
            field_height=720,
        )

    return _make
