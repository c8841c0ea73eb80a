"""Sound cues played through FluidSynth + SoundFonts."""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

import fluidsynth

logger = logging.getLogger(__name__)

# General MIDI programs per cue channel
PIANO_CHANNEL = 0
EFFECTS_CHANNEL = 1
CHARGE_CHANNEL = 2
JINGLE_CHANNEL = 3
DRUM_CHANNEL = 9

_EFFECTS_PROGRAM = 80  # square lead
_CHARGE_PROGRAM = 91  # choir pad
_JINGLE_PROGRAM = 56  # trumpet

_CHARGE_PITCHES = {1: 48, 2: 55, 3: 60, 4: 67}

# (offset seconds, pitch, duration seconds)
_GAME_START = [(0.0, 60, 0.12), (0.12, 64, 0.12), (0.24, 67, 0.12), (0.36, 72, 0.3)]
_WAVE_COMPLETE = [(0.0, 67, 0.1), (0.1, 72, 0.1), (0.2, 76, 0.25)]
_GAME_OVER = [(0.0, 67, 0.25), (0.25, 63, 0.25), (0.5, 60, 0.6)]
_VICTORY = [(0.0, 72, 0.12), (0.12, 72, 0.12), (0.24, 72, 0.12), (0.36, 79, 0.5)]
_HIGH_SCORE_TAIL = [(0.9, 84, 0.15), (1.05, 88, 0.15), (1.2, 91, 0.5)]


def _detect_audio_driver() -> str:
    """Auto-detect the appropriate FluidSynth audio driver for the platform."""
    if sys.platform == "linux":
        return "pulseaudio"
    elif sys.platform == "darwin":
        return "coreaudio"
    elif sys.platform == "win32":
        return "dsound"
    return "alsa"


class AudioEngine:
    """Wraps FluidSynth and turns game events into short cues."""

    def __init__(self, soundfont_path: str | Path | None = None) -> None:
        self.fs = fluidsynth.Synth(gain=0.8)
        self.fs.start(driver=_detect_audio_driver())
        self._sfid: int | None = None
        # (due_time, pitch, channel, velocity); velocity 0 means note-off
        self._pending: list[tuple[float, int, int, int]] = []
        self._charge_pitch: int | None = None
        if soundfont_path:
            self.load_soundfont(soundfont_path)

    def load_soundfont(self, path: str | Path) -> None:
        self._sfid = self.fs.sfload(str(path))
        self.fs.program_select(PIANO_CHANNEL, self._sfid, 0, 0)
        self.fs.program_select(EFFECTS_CHANNEL, self._sfid, 0, _EFFECTS_PROGRAM)
        self.fs.program_select(CHARGE_CHANNEL, self._sfid, 0, _CHARGE_PROGRAM)
        self.fs.program_select(JINGLE_CHANNEL, self._sfid, 0, _JINGLE_PROGRAM)
        self.fs.program_select(DRUM_CHANNEL, self._sfid, 128, 0)
        logger.info("Loaded SoundFont %s", path)

    # -- Raw notes (echo of what the player plays) -------------------------

    def note_on(self, pitch: int, velocity: int = 80, channel: int = PIANO_CHANNEL) -> None:
        self.fs.noteon(channel, pitch, velocity)

    def note_off(self, pitch: int, channel: int = PIANO_CHANNEL) -> None:
        self.fs.noteoff(channel, pitch)

    def _blip(self, pitch: int, duration: float, velocity: int = 90, channel: int = EFFECTS_CHANNEL) -> None:
        self.fs.noteon(channel, pitch, velocity)
        self._pending.append((time.time() + duration, pitch, channel, 0))

    def _sequence(self, notes: list[tuple[float, int, float]], channel: int = JINGLE_CHANNEL) -> None:
        now = time.time()
        for offset, pitch, duration in notes:
            self._pending.append((now + offset, pitch, channel, 100))
            self._pending.append((now + offset + duration, pitch, channel, 0))

    def flush_pending_offs(self) -> None:
        """Call each frame to start and release scheduled cue notes."""
        now = time.time()
        remaining: list[tuple[float, int, int, int]] = []
        for due, pitch, channel, velocity in sorted(self._pending):
            if now < due:
                remaining.append((due, pitch, channel, velocity))
            elif velocity:
                self.fs.noteon(channel, pitch, velocity)
            else:
                self.fs.noteoff(channel, pitch)
        self._pending = remaining

    # -- Game cues ---------------------------------------------------------

    def play_hit(self) -> None:
        self._blip(84, 0.08)

    def play_miss(self) -> None:
        self._blip(45, 0.12, velocity=70)

    def play_destroyed(self) -> None:
        self._blip(49, 0.3, velocity=110, channel=DRUM_CHANNEL)  # crash cymbal

    def play_explosive(self) -> None:
        self._blip(36, 0.25, velocity=127, channel=DRUM_CHANNEL)  # kick

    def play_shield_hit(self) -> None:
        self._blip(38, 0.2, velocity=120, channel=DRUM_CHANNEL)  # snare
        self._blip(40, 0.25, velocity=100)

    def play_charge_sound(self, power: int) -> None:
        pitch = _CHARGE_PITCHES.get(max(1, min(4, power)), 48)
        if self._charge_pitch is not None:
            self.fs.noteoff(CHARGE_CHANNEL, self._charge_pitch)
        self.fs.noteon(CHARGE_CHANNEL, pitch, 60 + 15 * power)
        self._charge_pitch = pitch

    def stop_charge_sound(self, fade_seconds: float = 0.1) -> None:
        if self._charge_pitch is None:
            return
        self._pending.append((time.time() + fade_seconds, self._charge_pitch, CHARGE_CHANNEL, 0))
        self._charge_pitch = None

    def play_wave_complete(self) -> None:
        self._sequence(_WAVE_COMPLETE)

    def play_game_start(self) -> None:
        self._sequence(_GAME_START)

    def play_game_over(self, is_high_score: bool) -> None:
        self._sequence(_GAME_OVER + (_HIGH_SCORE_TAIL if is_high_score else []))

    def play_victory(self, is_high_score: bool) -> None:
        self._sequence(_VICTORY + (_HIGH_SCORE_TAIL if is_high_score else []))

    def all_notes_off(self) -> None:
        for ch in range(16):
            for pitch in range(128):
                self.fs.noteoff(ch, pitch)
        self._pending.clear()
        self._charge_pitch = None

    def shutdown(self) -> None:
        self.all_notes_off()
        self.fs.delete()
