"""Note input from MIDI keyboards and from the computer keyboard."""

from __future__ import annotations

import logging
import time
from collections import deque

import mido
import pygame
import rtmidi

from noteinvaders.config import DEFAULT_DEVICE_MAX, DEFAULT_DEVICE_MIN
from noteinvaders.models import LiveNoteEvent, PitchRange

logger = logging.getLogger(__name__)


class MidiDeviceError(Exception):
    """Raised when no MIDI device is found or connection fails."""


# Computer keyboard -> MIDI pitch mapping
_LOWER_ROW = {
    pygame.K_z: 60, pygame.K_x: 62, pygame.K_c: 64, pygame.K_v: 65,
    pygame.K_b: 67, pygame.K_n: 69, pygame.K_m: 71, pygame.K_COMMA: 72,
    pygame.K_PERIOD: 74, pygame.K_SLASH: 76,
}
_MIDDLE_ROW = {
    pygame.K_s: 61, pygame.K_d: 63, pygame.K_g: 66, pygame.K_h: 68,
    pygame.K_j: 70, pygame.K_l: 73, pygame.K_SEMICOLON: 75,
}
_UPPER_ROW = {
    pygame.K_q: 72, pygame.K_w: 74, pygame.K_e: 76, pygame.K_r: 77,
    pygame.K_t: 79, pygame.K_y: 81, pygame.K_u: 83, pygame.K_i: 84,
    pygame.K_o: 86, pygame.K_p: 88,
}
# Black keys for the upper row, laid out like a tracker keyboard
_NUMBER_ROW = {
    pygame.K_2: 73, pygame.K_3: 75, pygame.K_5: 78, pygame.K_6: 80,
    pygame.K_7: 82, pygame.K_9: 85, pygame.K_0: 87,
}
_KEY_TO_PITCH: dict[int, int] = {**_LOWER_ROW, **_MIDDLE_ROW, **_UPPER_ROW, **_NUMBER_ROW}

KEYBOARD_RANGE = PitchRange(min(_KEY_TO_PITCH.values()), max(_KEY_TO_PITCH.values()))


def decode_message(data: list[int] | tuple[int, ...], timestamp: float) -> LiveNoteEvent | None:
    """Turn raw MIDI bytes into a note event; anything else yields None."""
    try:
        msg = mido.Message.from_bytes(list(data))
    except (ValueError, TypeError):
        logger.debug("Ignoring undecodable MIDI bytes %r", data)
        return None

    if msg.type == "note_on" and msg.velocity > 0:
        return LiveNoteEvent(pitch=msg.note, velocity=msg.velocity, timestamp=timestamp, is_note_on=True)
    if msg.type == "note_off" or msg.type == "note_on":
        return LiveNoteEvent(pitch=msg.note, velocity=0, timestamp=timestamp, is_note_on=False)
    return None


class KeyboardInput:
    """Fallback input using computer keyboard mapped to piano notes."""

    def __init__(self, velocity: int = 80) -> None:
        self._velocity = velocity
        self._events: deque[LiveNoteEvent] = deque()
        self._held: set[int] = set()

    def feed_event(self, event: pygame.event.Event) -> None:
        """Call from the game loop for each pygame event."""
        if event.type == pygame.KEYDOWN and event.key in _KEY_TO_PITCH:
            pitch = _KEY_TO_PITCH[event.key]
            if pitch not in self._held:
                self._held.add(pitch)
                self._events.append(LiveNoteEvent(
                    pitch=pitch, velocity=self._velocity,
                    timestamp=time.time(), is_note_on=True,
                ))
        elif event.type == pygame.KEYUP and event.key in _KEY_TO_PITCH:
            pitch = _KEY_TO_PITCH[event.key]
            if pitch in self._held:
                self._held.discard(pitch)
                self._events.append(LiveNoteEvent(
                    pitch=pitch, velocity=0,
                    timestamp=time.time(), is_note_on=False,
                ))

    def release_all(self) -> None:
        """Queue note-offs for every held key, e.g. when the window loses focus."""
        for pitch in sorted(self._held):
            self._events.append(LiveNoteEvent(pitch=pitch, velocity=0, timestamp=time.time(), is_note_on=False))
        self._held.clear()

    def poll(self) -> LiveNoteEvent | None:
        if self._events:
            return self._events.popleft()
        return None

    def pitch_range(self) -> PitchRange:
        return KEYBOARD_RANGE

    def close(self) -> None:
        self._events.clear()
        self._held.clear()


class MergedInput:
    """Several sources drained as one. The first source sets the pitch range."""

    def __init__(self, *sources: KeyboardInput | MidiInput | None) -> None:
        self.sources = [s for s in sources if s is not None]

    def poll(self) -> LiveNoteEvent | None:
        for source in self.sources:
            event = source.poll()
            if event is not None:
                return event
        return None

    def pitch_range(self) -> PitchRange:
        if not self.sources:
            return PitchRange(DEFAULT_DEVICE_MIN, DEFAULT_DEVICE_MAX)
        return self.sources[0].pitch_range()

    def close(self) -> None:
        for source in self.sources:
            source.close()


class MidiInput:
    """A hardware MIDI input port read through python-rtmidi."""

    def __init__(
        self,
        port_index: int | None = None,
        pitch_range: PitchRange | None = None,
    ) -> None:
        self.midi_in = rtmidi.MidiIn()
        self._port_index = port_index
        self._range = pitch_range or PitchRange(DEFAULT_DEVICE_MIN, DEFAULT_DEVICE_MAX)
        self._open = False
        self.port_name: str | None = None

    @staticmethod
    def list_ports() -> list[str]:
        midi_in = rtmidi.MidiIn()
        return midi_in.get_ports()

    def open(self) -> None:
        ports = self.midi_in.get_ports()
        if not ports:
            raise MidiDeviceError("No MIDI input devices found")
        idx = self._port_index if self._port_index is not None else 0
        if not 0 <= idx < len(ports):
            raise MidiDeviceError(f"MIDI port {idx} out of range (found {len(ports)})")
        self.midi_in.open_port(idx)
        self.port_name = ports[idx]
        self._open = True
        logger.info("Opened MIDI input %r", self.port_name)

    def poll(self) -> LiveNoteEvent | None:
        """Non-blocking: the next note event, skipping non-note messages."""
        if not self._open:
            return None
        while True:
            msg = self.midi_in.get_message()
            if msg is None:
                return None
            data, _delta = msg
            event = decode_message(data, time.time())
            if event is not None:
                return event

    def pitch_range(self) -> PitchRange:
        return self._range

    def close(self) -> None:
        if self._open:
            self.midi_in.close_port()
            self._open = False
            logger.info("Closed MIDI input %r", self.port_name)
