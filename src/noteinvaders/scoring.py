"""Score arithmetic for kills, victories and defeats."""

from __future__ import annotations

import math

from noteinvaders.config import GameTuning
from noteinvaders.models import GameMode, MatchResult, NoteMode


def score_key(game_mode: GameMode, note_mode: NoteMode) -> str:
    """High-score key: 'classic', 'survival', 'classic_chord', 'survival_chord'."""
    key = game_mode.name.lower()
    if note_mode == NoteMode.CHORD:
        key += "_chord"
    return key


def kill_points(power: int, tuning: GameTuning) -> int:
    return tuning.points_per_target * power


def victory_result(
    base_score: int,
    ammo: int,
    health: float,
    wave: int,
    game_mode: GameMode,
    tuning: GameTuning,
) -> MatchResult:
    """Bonuses for leftover ammo and health plus every wave cleared."""
    ammo_bonus = ammo * tuning.points_per_ammo
    health_bonus = _round_half_up(health) * tuning.points_per_health
    if game_mode == GameMode.CLASSIC:
        waves_completed = tuning.waves_total
    else:
        waves_completed = wave
    wave_bonus = waves_completed * tuning.points_per_wave
    return MatchResult(
        base_score=base_score,
        ammo_bonus=ammo_bonus,
        health_bonus=health_bonus,
        wave_bonus=wave_bonus,
        final_score=base_score + ammo_bonus + health_bonus + wave_bonus,
        waves_completed=waves_completed,
    )


def game_over_result(base_score: int, wave: int, tuning: GameTuning) -> MatchResult:
    """Only waves fully cleared before the fatal one earn a bonus."""
    waves_completed = max(0, wave - 1)
    wave_bonus = waves_completed * tuning.points_per_wave
    return MatchResult(
        base_score=base_score,
        wave_bonus=wave_bonus,
        final_score=base_score + wave_bonus,
        waves_completed=waves_completed,
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
