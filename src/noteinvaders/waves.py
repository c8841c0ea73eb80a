"""Wave layout: pitch sub-ranges, target batches, background palettes."""

from __future__ import annotations

import logging
import random

from noteinvaders.chords import random_chord
from noteinvaders.config import (
    BASE_TARGET_COUNT,
    CHORD_ROOT_HEADROOM,
    WAVE_RANGE_JITTER,
    WAVE_RANGE_SHIFT,
    WAVE_RANGE_SPAN,
)
from noteinvaders.models import NoteMode, Palette, PitchRange
from noteinvaders.target import Target

logger = logging.getLogger(__name__)

FIELD_PADDING = 0.1  # fraction of the width kept free on each side
SPAWN_Y_MIN = 20.0
SPAWN_Y_MAX = 100.0
SPEED_MIN = 12.5
SPEED_JITTER = 3.0
WOBBLE_MIN = 1.0
WOBBLE_JITTER = 0.5
ANIMATION_STAGGER = 0.2

PALETTES: tuple[Palette, ...] = (
    Palette(top=(0, 0, 30), middle=(10, 0, 50), bottom=(30, 0, 70)),  # blue
    Palette(top=(0, 20, 20), middle=(0, 40, 30), bottom=(0, 60, 40)),  # green
    Palette(top=(30, 0, 10), middle=(50, 0, 20), bottom=(70, 10, 30)),  # red
    Palette(top=(20, 0, 30), middle=(40, 0, 60), bottom=(60, 20, 80)),  # purple
    Palette(top=(30, 20, 0), middle=(60, 40, 0), bottom=(80, 60, 20)),  # gold
)


def palette_for_wave(wave: int) -> Palette:
    index = max(0, min(wave - 1, len(PALETTES) - 1))
    return PALETTES[index]


def target_count(wave: int, base: int = BASE_TARGET_COUNT) -> int:
    return base + (wave - 1)


def centered_range(device: PitchRange, span: int = WAVE_RANGE_SPAN) -> PitchRange:
    """The device's centre +/- half a span; the whole device if it is narrower."""
    if device.span < span:
        return device
    center = (device.min + device.max) // 2
    half = span // 2
    return PitchRange(max(device.min, center - half), min(device.max, center + half))


def pitch_range_for_wave(
    wave: int,
    device: PitchRange,
    rng: random.Random | None = None,
    span: int = WAVE_RANGE_SPAN,
) -> PitchRange:
    """Pick a ``span``-wide window of the device range for this wave.

    The window shifts up by a few semitones each wave plus a bounded random
    jitter, wrapping inside the device. Devices narrower than ``span`` use
    their whole range.
    """
    rng = rng or random.Random()
    available = device.span - span
    if available < 0:
        logger.debug("Device range %d-%d narrower than %d, using all of it", device.min, device.max, span)
        return device

    wave_offset = (wave - 1) * WAVE_RANGE_SHIFT % available if available else 0
    jitter = rng.randint(0, min(WAVE_RANGE_JITTER, available))
    start = (wave_offset + jitter) % (available + 1)
    result = PitchRange(device.min + start, device.min + start + span)
    logger.debug("Wave %d pitch range %d-%d", wave, result.min, result.max)
    return result


def pitch_to_x(pitch: int, field_width: float, pitch_range: PitchRange) -> float:
    """Horizontal field position of a pitch, with padding on both sides."""
    padding = field_width * FIELD_PADDING
    if pitch_range.span <= 0:
        return field_width / 2
    position = (pitch_range.clamp(pitch) - pitch_range.min) / pitch_range.span
    return padding + position * (field_width - 2 * padding)


def _draw_unique(
    low: int,
    high: int,
    count: int,
    rng: random.Random,
) -> list[int]:
    """``count`` values from ``[low, high]``, distinct while the range allows."""
    if high < low:
        high = low
    candidates = high - low + 1
    if count > candidates:
        logger.warning(
            "Only %d distinct pitches in %d-%d for %d targets; allowing repeats",
            candidates, low, high, count,
        )

    values: list[int] = []
    used: set[int] = set()
    for _ in range(count):
        if len(used) >= candidates:
            used.clear()
        value = rng.randint(low, high)
        while value in used:
            value = rng.randint(low, high)
        used.add(value)
        values.append(value)
    return values


def generate_targets(
    wave: int,
    note_mode: NoteMode,
    pitch_range: PitchRange,
    field_width: float,
    rng: random.Random | None = None,
    base_count: int = BASE_TARGET_COUNT,
    hide_uncommon: bool = True,
) -> list[Target]:
    """Spawn the batch for one wave."""
    rng = rng or random.Random()
    count = target_count(wave, base_count)

    if note_mode == NoteMode.CHORD:
        pitches = _draw_unique(pitch_range.min, pitch_range.max - CHORD_ROOT_HEADROOM, count, rng)
    else:
        pitches = _draw_unique(pitch_range.min, pitch_range.max, count, rng)

    targets = []
    for i, pitch in enumerate(pitches):
        kwargs = dict(
            speed=SPEED_MIN + rng.random() * SPEED_JITTER,
            wobble_speed=WOBBLE_MIN + rng.random() * WOBBLE_JITTER,
            animation_offset=i * ANIMATION_STAGGER,
        )
        y = rng.uniform(SPAWN_Y_MIN, SPAWN_Y_MAX)
        centre_x = pitch_to_x(pitch, field_width, pitch_range)

        if note_mode == NoteMode.CHORD:
            chord = random_chord(pitch, pitch, rng=rng, hide_uncommon=hide_uncommon)
            target = Target.for_chord(chord, 0.0, y, **kwargs)
        else:
            target = Target.single(pitch, 0.0, y, **kwargs)
        target.x = centre_x - target.width / 2
        targets.append(target)

    logger.debug("Wave %d: %d targets (%s)", wave, len(targets), ", ".join(t.label for t in targets))
    return targets
