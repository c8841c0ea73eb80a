"""Gameplay view: runs a Match and draws it."""

from __future__ import annotations

import logging

import pygame

from noteinvaders.match import Match
from noteinvaders.midi_input import MergedInput
from noteinvaders.models import GameMode, GameState
from noteinvaders.renderer.hud import render_hud, render_overlay
from noteinvaders.renderer.keyboard import render_keyboard
from noteinvaders.renderer.playfield import render_playfield
from noteinvaders.views.base import ViewAction, ViewContext

logger = logging.getLogger(__name__)

_FOCUS_LOST = {pygame.WINDOWFOCUSLOST, pygame.WINDOWMINIMIZED}
_FOCUS_GAINED = {pygame.WINDOWFOCUSGAINED, pygame.WINDOWRESTORED}


class GameView:
    name = "game"
    display_name = "Note Invaders"

    def __init__(self) -> None:
        self._context: ViewContext | None = None
        self._match: Match | None = None
        self._held: set[int] = set()

    @property
    def match(self) -> Match | None:
        return self._match

    def on_enter(self, context: ViewContext) -> None:
        self._context = context
        self._held = set()
        width, height = context.screen_size
        self._match = Match(
            input_source=MergedInput(context.midi_input, context.keyboard_input),
            audio=context.audio,
            scores=context.scores,
            tuning=context.tuning,
            game_mode=context.game_mode,
            note_mode=context.note_mode,
            field_width=width,
            field_height=height,
        )
        self._match.start_game()

    def on_exit(self) -> None:
        if self._match is not None and self._match.state == GameState.PLAYING:
            self._match.return_to_title()
        if self._context and self._context.audio:
            self._context.audio.all_notes_off()

    def handle_event(self, event: pygame.event.Event) -> ViewAction | None:
        match = self._match
        if match is None:
            return None

        if event.type in _FOCUS_LOST:
            match.set_focus(False)
            if self._context and self._context.keyboard_input:
                self._context.keyboard_input.release_all()
            return None
        if event.type in _FOCUS_GAINED:
            match.set_focus(True)
            return None
        if event.type == pygame.VIDEORESIZE:
            match.resize(event.w, event.h)
            return None

        if event.type != pygame.KEYDOWN:
            return None

        state = match.state
        if event.key == pygame.K_ESCAPE:
            if state == GameState.PLAYING:
                match.pause()
                return None
            match.return_to_title()
            return ViewAction(kind="switch", target="menu")
        elif event.key == pygame.K_RETURN:
            if state == GameState.PAUSED:
                match.resume()
            elif state in (GameState.GAME_OVER, GameState.VICTORY):
                match.restart()
        elif event.key == pygame.K_END and match.game_mode == GameMode.SURVIVAL:
            match.end_survival()

        return None

    def update(self, dt: float) -> ViewAction | None:
        match = self._match
        if match is None:
            return None

        audio = self._context.audio if self._context else None
        for evt in match.process_input():
            if evt.is_note_on:
                self._held.add(evt.pitch)
                if audio:
                    audio.note_on(evt.pitch, evt.velocity)
            else:
                self._held.discard(evt.pitch)
                if audio:
                    audio.note_off(evt.pitch)

        match.tick(dt)
        if audio:
            audio.flush_pending_offs()
        return None

    def draw(self, surface: pygame.Surface) -> None:
        match = self._match
        if match is None:
            return

        snapshot = match.snapshot()
        render_playfield(surface, snapshot)
        if snapshot.pitch_range is not None:
            render_keyboard(surface, snapshot.pitch_range, self._held)
        render_hud(surface, snapshot)
        render_overlay(surface, snapshot)
