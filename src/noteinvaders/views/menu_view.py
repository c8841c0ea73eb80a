"""Title screen: pick game mode and note mode, see high scores."""

from __future__ import annotations

import pygame

from noteinvaders.models import GameMode, HighScore, NoteMode
from noteinvaders.renderer import colors as colors_mod
from noteinvaders.scoring import score_key
from noteinvaders.views.base import ViewAction, ViewContext

_MODE_BLURBS = {
    GameMode.CLASSIC: "Clear every wave to win",
    GameMode.SURVIVAL: "Endless waves, ammo refills between them",
}


class MenuView:
    name = "menu"
    display_name = "Title Screen"

    def __init__(self) -> None:
        self._context: ViewContext | None = None
        self._game_mode = GameMode.CLASSIC
        self._note_mode = NoteMode.SINGLE
        self._high_scores: dict[str, HighScore] = {}
        self._font: pygame.font.Font | None = None
        self._title_font: pygame.font.Font | None = None

    def on_enter(self, context: ViewContext) -> None:
        self._context = context
        self._game_mode = context.game_mode
        self._note_mode = context.note_mode
        self._font = pygame.font.SysFont("monospace", 20)
        self._title_font = pygame.font.SysFont("monospace", 48, bold=True)
        self._load_scores()

    def on_exit(self) -> None:
        pass

    def _load_scores(self) -> None:
        self._high_scores = {
            score_key(game_mode, note_mode): HighScore()
            for game_mode in GameMode
            for note_mode in NoteMode
        }
        if self._context and self._context.scores:
            self._high_scores.update(self._context.scores.all_scores())

    def handle_event(self, event: pygame.event.Event) -> ViewAction | None:
        if event.type != pygame.KEYDOWN:
            return None

        if event.key == pygame.K_ESCAPE:
            return ViewAction(kind="quit")

        if event.key in (pygame.K_UP, pygame.K_DOWN, pygame.K_TAB):
            modes = list(GameMode)
            self._game_mode = modes[(modes.index(self._game_mode) + 1) % len(modes)]
        elif event.key in (pygame.K_LEFT, pygame.K_RIGHT):
            self._note_mode = NoteMode.CHORD if self._note_mode == NoteMode.SINGLE else NoteMode.SINGLE
        elif event.key == pygame.K_RETURN:
            return ViewAction(
                kind="switch",
                target="game",
                context_patch={"game_mode": self._game_mode, "note_mode": self._note_mode},
            )

        return None

    def update(self, dt: float) -> ViewAction | None:
        # Notes played on the title screen must not carry into the next game
        if self._context:
            for source in (self._context.midi_input, self._context.keyboard_input):
                while source is not None and source.poll() is not None:
                    pass
        return None

    def draw(self, surface: pygame.Surface) -> None:
        if not self._font or not self._title_font:
            return

        surface.fill(colors_mod.BG)
        w, h = surface.get_size()

        title = self._title_font.render("Note Invaders", True, colors_mod.TITLE)
        surface.blit(title, (w // 2 - title.get_width() // 2, 60))

        y = 180
        for game_mode in GameMode:
            selected = game_mode == self._game_mode
            prefix = "> " if selected else "  "
            color = colors_mod.TITLE if selected else colors_mod.HUD_TEXT
            text = self._font.render(f"{prefix}{game_mode.name.title():<10}{_MODE_BLURBS[game_mode]}", True, color)
            surface.blit(text, (w // 2 - 300, y))
            y += 32

        notes = "Chords" if self._note_mode == NoteMode.CHORD else "Single notes"
        mode_text = self._font.render(f"Play: < {notes} >  (Left/Right)", True, colors_mod.ACCENT)
        surface.blit(mode_text, (w // 2 - 300, y + 20))

        y += 90
        header = self._font.render("High scores", True, colors_mod.HUD_TEXT)
        surface.blit(header, (w // 2 - 300, y))
        y += 32
        for key, best in self._high_scores.items():
            wave = f"(wave {best.wave})" if best.wave > 0 else ""
            row = self._font.render(f"  {key:<16}{best.score:>8} {wave}", True, colors_mod.HUD_DIM)
            surface.blit(row, (w // 2 - 300, y))
            y += 26

        if self._context:
            source = "MIDI keyboard" if self._context.midi_input else "Computer keyboard (Z-/, Q-P, 2-0 rows)"
            status = self._font.render(f"Input: {source}", True, colors_mod.HUD_DIM)
            surface.blit(status, (40, h - 80))

        legend = self._font.render("Up/Down: mode | Left/Right: notes/chords | Enter: start | Esc: quit", True, (120, 120, 140))
        surface.blit(legend, (40, h - 40))
