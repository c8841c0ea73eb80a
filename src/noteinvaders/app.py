"""Top-level application: initializes pygame, manages screens, and runs the game loop."""

from __future__ import annotations

import logging

import pygame

from noteinvaders.config import FPS, WINDOW_HEIGHT, WINDOW_TITLE, WINDOW_WIDTH, GameTuning
from noteinvaders.midi_input import KeyboardInput
from noteinvaders.models import GameMode, NoteMode
from noteinvaders.views.base import ViewContext, ViewManager
from noteinvaders.views.game_view import GameView
from noteinvaders.views.menu_view import MenuView

logger = logging.getLogger(__name__)


class App:
    def __init__(
        self,
        soundfont: str | None = None,
        midi_port: int | None = None,
        game_mode: GameMode = GameMode.CLASSIC,
        note_mode: NoteMode = NoteMode.SINGLE,
        tuning: GameTuning | None = None,
    ) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption(WINDOW_TITLE)
        self.clock = pygame.time.Clock()

        # Build shared context; optional subsystems degrade to None
        self._midi_input = self._try_midi(midi_port)
        self._audio = self._try_audio(soundfont)
        self._scores = self._try_scores()
        self._keyboard_input = KeyboardInput()

        context = ViewContext(
            screen_size=(WINDOW_WIDTH, WINDOW_HEIGHT),
            midi_input=self._midi_input,
            audio=self._audio,
            scores=self._scores,
            keyboard_input=self._keyboard_input,
            game_mode=game_mode,
            note_mode=note_mode,
            tuning=tuning or GameTuning(),
        )

        self.views = ViewManager(context)
        self.views.register(MenuView)
        self.views.register(GameView)

        # Start on the title screen
        self.views.switch("menu")

    def run(self) -> None:
        running = True
        while running:
            dt = self.clock.tick(FPS) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                else:
                    self._keyboard_input.feed_event(event)
                    if not self.views.handle_event(event):
                        running = False
            if running:
                if not self.views.update(dt):
                    running = False
            self.views.draw(self.screen)
            pygame.display.flip()

        self._cleanup()
        pygame.quit()

    def _cleanup(self) -> None:
        self.views.close()
        if self._midi_input:
            self._midi_input.close()
        if self._audio:
            self._audio.shutdown()
        if self._scores:
            self._scores.close()

    @staticmethod
    def _try_midi(port_index: int | None):
        try:
            from noteinvaders.midi_input import MidiInput
            mi = MidiInput(port_index)
            mi.open()
            return mi
        except Exception as exc:
            logger.warning("MIDI input unavailable, using the computer keyboard: %s", exc)
            return None

    @staticmethod
    def _try_audio(soundfont: str | None):
        try:
            from noteinvaders.audio import AudioEngine
            return AudioEngine(soundfont)
        except Exception as exc:
            logger.warning("Audio disabled: %s", exc)
            return None

    @staticmethod
    def _try_scores():
        try:
            from noteinvaders.high_scores import HighScoreStore
            return HighScoreStore()
        except Exception as exc:
            logger.warning("High scores will not be saved: %s", exc)
            return None
