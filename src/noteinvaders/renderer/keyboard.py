"""Render a strip of piano keys for the wave's pitch range along the bottom edge."""

from __future__ import annotations

import pygame

from noteinvaders.models import PitchRange
from noteinvaders.renderer.colors import BLACK_KEY, KEY_HELD, WHITE_KEY
from noteinvaders.waves import pitch_to_x

KEYBOARD_HEIGHT = 40

# Which MIDI pitches are black keys (within an octave)
_BLACK_OFFSETS = {1, 3, 6, 8, 10}


def is_black_key(pitch: int) -> bool:
    return (pitch % 12) in _BLACK_OFFSETS


def render_keyboard(surface: pygame.Surface, pitch_range: PitchRange, held: set[int]) -> None:
    """Draw one key per pitch at the x where that pitch fires."""
    w, h = surface.get_size()
    top = h - KEYBOARD_HEIGHT
    count = max(1, pitch_range.span + 1)
    key_w = max(2, int((w * 0.8) / count) - 1)

    # White keys first, black keys shorter and on top
    for black in (False, True):
        for pitch in range(pitch_range.min, pitch_range.max + 1):
            if is_black_key(pitch) != black:
                continue
            x = pitch_to_x(pitch, w, pitch_range)
            if pitch in held:
                color = KEY_HELD
            else:
                color = BLACK_KEY if black else WHITE_KEY
            height = int(KEYBOARD_HEIGHT * 0.6) if black else KEYBOARD_HEIGHT
            rect = pygame.Rect(int(x - key_w / 2), top, key_w, height)
            pygame.draw.rect(surface, color, rect)
