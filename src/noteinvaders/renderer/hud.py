"""Heads-up display: score, wave, ammo, health, charge meter and end screens."""

from __future__ import annotations

import pygame

from noteinvaders.chords import note_name
from noteinvaders.models import ChargeView, GameState, MatchSnapshot
from noteinvaders.renderer.colors import (
    GOLD,
    HEALTH_HIGH,
    HEALTH_LOW,
    HEALTH_MID,
    HUD_DIM,
    HUD_TEXT,
    POWER_COLORS,
    TITLE,
    WARNING,
)


def render_hud(surface: pygame.Surface, snapshot: MatchSnapshot) -> None:
    font = pygame.font.SysFont("monospace", 20)
    w, _h = surface.get_size()

    wave = f"Wave: {snapshot.wave}"
    if snapshot.waves_total is not None:
        wave += f"/{snapshot.waves_total}"
    lines = [
        f"Score: {snapshot.score}",
        wave,
    ]
    if snapshot.rig is not None:
        lines.append(f"Ammo: {snapshot.rig.ammo}/{snapshot.rig.max_ammo}")

    y = 10
    for line in lines:
        text = font.render(line, True, HUD_TEXT)
        surface.blit(text, (10, y))
        y += 28

    high = snapshot.high_score
    high_text = f"High: {high.score}" + (f" (Wave {high.wave})" if high.wave > 0 else "")
    rendered = font.render(high_text, True, HUD_DIM)
    surface.blit(rendered, (w - rendered.get_width() - 10, 10))

    _render_health(surface, snapshot.health, snapshot.max_health)
    if snapshot.charge is not None:
        _render_charge(surface, snapshot.charge)


def _render_health(surface: pygame.Surface, health: float, max_health: int) -> None:
    w, _h = surface.get_size()
    bar = pygame.Rect(w - 210, 42, 200, 14)
    fraction = max(0.0, min(1.0, health / max_health)) if max_health else 0.0
    if fraction > 0.6:
        color = HEALTH_HIGH
    elif fraction > 0.3:
        color = HEALTH_MID
    else:
        color = HEALTH_LOW
    pygame.draw.rect(surface, (40, 40, 50), bar)
    pygame.draw.rect(surface, color, (bar.x, bar.y, int(bar.w * fraction), bar.h))
    pygame.draw.rect(surface, HUD_DIM, bar, 1)


def _render_charge(surface: pygame.Surface, charge: ChargeView) -> None:
    font = pygame.font.SysFont("monospace", 18)
    w, h = surface.get_size()
    color = POWER_COLORS.get(charge.power, HUD_TEXT)

    seg_w, seg_h = 40, 10
    x0 = w // 2 - 2 * (seg_w + 4)
    y0 = h - 60
    for level in range(1, 5):
        rect = pygame.Rect(x0 + (level - 1) * (seg_w + 4), y0, seg_w, seg_h)
        if level <= charge.power:
            pygame.draw.rect(surface, color, rect)
        pygame.draw.rect(surface, HUD_DIM, rect, 1)

    notes = " ".join(note_name(p) for p in charge.held)
    if charge.chord_name:
        notes += f"  [{charge.chord_name}]"
    text = font.render(notes, True, color)
    surface.blit(text, (w // 2 - text.get_width() // 2, y0 - 24))


def render_overlay(surface: pygame.Surface, snapshot: MatchSnapshot) -> None:
    """Banner for transitions, pause and the end-of-game summary."""
    big = pygame.font.SysFont("monospace", 44, bold=True)
    font = pygame.font.SysFont("monospace", 20)
    w, h = surface.get_size()

    if snapshot.state == GameState.WAVE_TRANSITION:
        _center(surface, big.render(f"Wave {snapshot.wave}", True, TITLE), h // 2 - 40)
        _center(surface, font.render("Get ready...", True, HUD_TEXT), h // 2 + 20)
        return

    if snapshot.state == GameState.PAUSED:
        _dim(surface)
        _center(surface, big.render("Paused", True, HUD_TEXT), h // 2 - 60)
        _center(surface, font.render("Enter: resume (with penalty) | Esc: menu", True, HUD_DIM), h // 2)
        return

    if snapshot.state not in (GameState.GAME_OVER, GameState.VICTORY) or snapshot.result is None:
        return

    _dim(surface)
    result = snapshot.result
    if snapshot.state == GameState.VICTORY:
        heading = big.render("Victory!", True, GOLD)
    else:
        heading = big.render("Game Over", True, WARNING)
    y = h // 2 - 150
    _center(surface, heading, y)
    y += 60
    if result.reason is not None:
        _center(surface, font.render(result.reason.value, True, HUD_TEXT), y)
        y += 36

    rows = [("Score", result.base_score)]
    if snapshot.state == GameState.VICTORY:
        rows += [("Ammo bonus", result.ammo_bonus), ("Health bonus", result.health_bonus)]
    rows += [
        (f"Wave bonus ({result.waves_completed} waves)", result.wave_bonus),
        ("Final score", result.final_score),
    ]
    for label, value in rows:
        _center(surface, font.render(f"{label:<28}{value:>8}", True, HUD_TEXT), y)
        y += 28

    if result.is_high_score:
        y += 8
        _center(surface, font.render("New high score!", True, GOLD), y)
    _center(surface, font.render("Enter: play again | Esc: menu", True, HUD_DIM), h - 60)


def _center(surface: pygame.Surface, text: pygame.Surface, y: int) -> None:
    surface.blit(text, (surface.get_width() // 2 - text.get_width() // 2, y))


def _dim(surface: pygame.Surface) -> None:
    shade = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    shade.fill((0, 0, 0, 150))
    surface.blit(shade, (0, 0))
