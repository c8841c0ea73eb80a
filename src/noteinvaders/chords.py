"""Chord table: chord types, octave-agnostic matching, naming and random chords."""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass

from noteinvaders.config import UNCOMMON_CHORD_ATTEMPTS

logger = logging.getLogger(__name__)


NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Enharmonic spellings per pitch class, primary spelling first
_SPELLINGS: dict[int, tuple[str, ...]] = {
    0: ("C", "B#"),
    1: ("C#", "Db"),
    2: ("D",),
    3: ("D#", "Eb"),
    4: ("E", "Fb"),
    5: ("F", "E#"),
    6: ("F#", "Gb"),
    7: ("G",),
    8: ("G#", "Ab"),
    9: ("A",),
    10: ("A#", "Bb"),
    11: ("B", "Cb"),
}

# Chord type -> intervals above the root
CHORD_TYPES: dict[str, tuple[int, ...]] = {
    "maj": (0, 4, 7),
    "min": (0, 3, 7),
    "dim": (0, 3, 6),
    "aug": (0, 4, 8),
    "7": (0, 4, 7, 10),
    "maj6": (0, 4, 7, 9),
    "min6": (0, 3, 7, 9),
    "maj7": (0, 4, 7, 11),
    "min7": (0, 3, 7, 10),
    "dim7": (0, 3, 6, 9),
    "half-dim7": (0, 3, 6, 10),
    "minMaj7": (0, 3, 7, 11),
}

CHORD_ABBREVIATIONS: dict[str, str] = {
    "maj": "M",
    "min": "m",
    "dim": "°",
    "aug": "+",
    "7": "⁷",
    "maj6": "⁶",
    "min6": "‐⁶",
    "maj7": "Δ⁷",
    "min7": "‐⁷",
    "dim7": "°⁷",
    "half-dim7": "ø⁷",
    "minMaj7": "m(Δ⁷)",
}

_COMMON_MAJOR_KEYS = frozenset(
    {"C", "G", "D", "A", "E", "B", "Cb", "F#", "Gb", "C#", "Db", "Ab", "Eb", "Bb", "F"}
)
_COMMON_MINOR_KEYS = frozenset(
    {"A", "E", "B", "F#", "C#", "G#", "D#", "Eb", "A#", "Bb", "F", "C", "G", "D"}
)

# Chord types judged against the major or the minor key list
_MAJOR_FAMILY = frozenset({"maj", "aug", "7", "maj6", "maj7"})
_MINOR_FAMILY = frozenset({"min", "dim", "half-dim7", "minMaj7", "min6", "min7", "dim7"})

_FLAT_PREFERRED = frozenset({"min", "dim", "dim7", "half-dim7"})


@dataclass(frozen=True)
class ChordSpec:
    """A concrete chord: root pitch plus chord type."""

    root: int
    chord_type: str
    notes: tuple[int, ...]
    name: str


def note_name(pitch: int, octave: bool = True) -> str:
    """Primary spelling of a MIDI pitch, e.g. 61 -> 'C#4'."""
    name = _SPELLINGS[pitch % 12][0]
    if not octave:
        return name
    return f"{name}{pitch // 12 - 1}"


def chord_notes(root: int, chord_type: str) -> tuple[int, ...]:
    """Reference pitches of a chord built on ``root``; empty for unknown types."""
    intervals = CHORD_TYPES.get(chord_type)
    if intervals is None:
        logger.error("Unknown chord type: %s", chord_type)
        return ()
    return tuple(root + i for i in intervals)


def chord_pitch_classes(root: int, chord_type: str) -> frozenset[int]:
    return frozenset(n % 12 for n in chord_notes(root, chord_type))


def notes_match_chord(played: list[int] | tuple[int, ...], chord: list[int] | tuple[int, ...]) -> bool:
    """True if ``played`` spells ``chord`` in any octave.

    Both sides are reduced to pitch classes and compared as sorted lists, so the
    number of notes must agree as well.
    """
    if len(played) != len(chord):
        return False
    return sorted(p % 12 for p in played) == sorted(c % 12 for c in chord)


def is_common_chord(root_name: str, chord_type: str) -> bool:
    """Whether a chord on ``root_name`` belongs to a commonly used key.

    ``root_name`` may carry an octave suffix ('F#3'); it is ignored.
    """
    name = re.sub(r"-?\d+$", "", root_name)
    if chord_type in _MAJOR_FAMILY:
        return name in _COMMON_MAJOR_KEYS
    if chord_type in _MINOR_FAMILY:
        return name in _COMMON_MINOR_KEYS
    return True


def chord_name(
    root: int,
    chord_type: str,
    abbreviate: bool = False,
    preferred_spelling: str | None = None,
) -> str:
    """Display name such as 'Cmaj7', 'Ebmin' or, abbreviated, 'CΔ⁷'."""
    spellings = _SPELLINGS[root % 12]
    if preferred_spelling and preferred_spelling in spellings:
        root_name = preferred_spelling
    else:
        root_name = spellings[0]
        if chord_type in _FLAT_PREFERRED:
            flats = [s for s in spellings if "b" in s]
            if flats:
                root_name = flats[0]

    if abbreviate and chord_type in CHORD_ABBREVIATIONS:
        return f"{root_name}{CHORD_ABBREVIATIONS[chord_type]}"
    return f"{root_name}{chord_type}"


def random_chord(
    min_root: int,
    max_root: int,
    rng: random.Random | None = None,
    hide_uncommon: bool = True,
    max_attempts: int = UNCOMMON_CHORD_ATTEMPTS,
) -> ChordSpec:
    """Draw a random chord with a root in ``[min_root, max_root]``.

    With ``hide_uncommon`` the draw is repeated up to ``max_attempts`` times to
    avoid chords outside the common keys, then falls back to any chord.
    """
    rng = rng or random.Random()
    types = list(CHORD_TYPES)

    for _ in range(max_attempts):
        root = rng.randint(min_root, max_root)
        chord_type = rng.choice(types)
        if hide_uncommon and not is_common_chord(note_name(root), chord_type):
            continue
        return _spec(root, chord_type)

    logger.debug("No common chord on roots %d-%d after %d attempts", min_root, max_root, max_attempts)
    return _spec(rng.randint(min_root, max_root), rng.choice(types))


def _spec(root: int, chord_type: str) -> ChordSpec:
    return ChordSpec(
        root=root,
        chord_type=chord_type,
        notes=chord_notes(root, chord_type),
        name=chord_name(root, chord_type),
    )


def identify_chord(pitches: set[int] | tuple[int, ...]) -> str | None:
    """Name the chord a set of held pitches spells exactly, if any."""
    if len(pitches) < 3:
        return None
    pitch_classes = frozenset(p % 12 for p in pitches)
    if len(pitch_classes) != len(pitches):
        return None

    for root in range(12):
        intervals = frozenset((pc - root) % 12 for pc in pitch_classes)
        for chord_type, template in CHORD_TYPES.items():
            if intervals == frozenset(template):
                return chord_name(root, chord_type)
    return None
