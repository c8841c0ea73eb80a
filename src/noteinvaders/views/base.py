"""Screen plumbing shared by the menu and the game."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, Protocol, runtime_checkable

import pygame

from noteinvaders.config import GameTuning
from noteinvaders.models import GameMode, NoteMode

if TYPE_CHECKING:
    from noteinvaders.audio import AudioEngine
    from noteinvaders.high_scores import HighScoreStore
    from noteinvaders.midi_input import KeyboardInput, MidiInput

logger = logging.getLogger(__name__)


@dataclass
class ViewContext:
    """Shared state passed to views on entry."""

    screen_size: tuple[int, int]
    midi_input: MidiInput | None
    audio: AudioEngine | None
    scores: HighScoreStore | None
    keyboard_input: KeyboardInput | None = None
    game_mode: GameMode = GameMode.CLASSIC
    note_mode: NoteMode = NoteMode.SINGLE
    tuning: GameTuning = field(default_factory=GameTuning)


@dataclass
class ViewAction:
    """Navigation command returned by views."""

    kind: Literal["switch", "quit"]
    target: str | None = None
    context_patch: dict[str, Any] | None = None


@runtime_checkable
class View(Protocol):
    """A full-screen game state."""

    name: str
    display_name: str

    def on_enter(self, context: ViewContext) -> None: ...
    def on_exit(self) -> None: ...
    def handle_event(self, event: pygame.event.Event) -> ViewAction | None: ...
    def update(self, dt: float) -> ViewAction | None: ...
    def draw(self, surface: pygame.Surface) -> None: ...


class ViewManager:
    """Holds the one active screen and routes the game loop to it."""

    def __init__(self, context: ViewContext) -> None:
        self._factories: dict[str, type] = {}
        self._active: View | None = None
        self._context = context

    @property
    def context(self) -> ViewContext:
        return self._context

    @property
    def active_view(self) -> View | None:
        return self._active

    def register(self, view_cls: type) -> None:
        self._factories[view_cls.name] = view_cls

    def switch(self, view_name: str, **context_overrides: Any) -> None:
        """Leave the current screen and enter ``view_name`` with a patched context."""
        self.close()
        if context_overrides:
            valid = {k: v for k, v in context_overrides.items() if hasattr(self._context, k)}
            # Mode choices stick, e.g. when returning to the menu
            self._context = dataclasses.replace(self._context, **valid)
        view = self._factories[view_name]()
        logger.debug("Entering view %s", view_name)
        view.on_enter(self._context)
        self._active = view

    def close(self) -> None:
        if self._active is not None:
            self._active.on_exit()
            self._active = None

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Route one event. False means the app should quit."""
        if self._active is None:
            return False
        return self._apply(self._active.handle_event(event))

    def update(self, dt: float) -> bool:
        if self._active is None:
            return False
        return self._apply(self._active.update(dt))

    def draw(self, surface: pygame.Surface) -> None:
        if self._active is not None:
            self._active.draw(surface)

    def _apply(self, action: ViewAction | None) -> bool:
        if action is None:
            return True
        if action.kind == "quit":
            return False
        self.switch(action.target, **(action.context_patch or {}))
        return True
