"""Draw the play field: background gradient, targets, rig, shield and lasers."""

from __future__ import annotations

from functools import lru_cache

import pygame

from noteinvaders.models import MatchSnapshot, Palette, ProjectileView, RigView, TargetState, TargetView
from noteinvaders.renderer.colors import (
    HIT_FLASH,
    LASER,
    LASER_HIT,
    PITCH_CLASS_COLORS,
    RIG,
    RIG_OUTLINE,
    SHIELD,
    SHIELD_FLASH,
)


@lru_cache(maxsize=8)
def _font(size: int) -> pygame.font.Font:
    return pygame.font.SysFont("monospace", size, bold=True)


def _lerp(a: tuple[int, int, int], b: tuple[int, int, int], t: float) -> tuple[int, int, int]:
    return (
        int(a[0] + (b[0] - a[0]) * t),
        int(a[1] + (b[1] - a[1]) * t),
        int(a[2] + (b[2] - a[2]) * t),
    )


def render_background(surface: pygame.Surface, palette: Palette) -> None:
    """Three-stop vertical gradient."""
    w, h = surface.get_size()
    half = max(1, h // 2)
    for y in range(h):
        if y < half:
            color = _lerp(palette.top, palette.middle, y / half)
        else:
            color = _lerp(palette.middle, palette.bottom, (y - half) / max(1, h - half))
        pygame.draw.line(surface, color, (0, y), (w, y))


def render_target(surface: pygame.Surface, target: TargetView) -> None:
    if target.state == TargetState.DEAD:
        return

    color = PITCH_CLASS_COLORS[target.pitch_class % 12]
    if target.hit_flash > 0:
        color = _lerp(color, HIT_FLASH, target.hit_flash)
    if target.shield_flash > 0:
        color = _lerp(color, SHIELD_FLASH, target.shield_flash)
    alpha = int(255 * (1.0 - target.death_progress))

    size = (int(target.width), int(target.height))
    sprite = pygame.Surface(size, pygame.SRCALPHA)
    body = sprite.get_rect().inflate(-6, -6)
    pygame.draw.ellipse(sprite, (*color, alpha), body)
    pygame.draw.ellipse(sprite, (255, 255, 255, alpha // 2), body, 2)

    font = _font(18 if len(target.label) <= 4 else 14)
    label = font.render(target.label, True, (10, 10, 20))
    label.set_alpha(alpha)
    sprite.blit(label, label.get_rect(center=sprite.get_rect().center))
    surface.blit(sprite, (int(target.x), int(target.y)))


def render_rig(surface: pygame.Surface, rig: RigView) -> None:
    shield = pygame.Surface((int(rig.shield_width), int(rig.shield_height)), pygame.SRCALPHA)
    shield.fill((*SHIELD, 50))
    pygame.draw.line(shield, (*SHIELD, 200), (0, 0), (int(rig.shield_width), 0), 2)
    surface.blit(shield, (int(rig.shield_x), int(rig.shield_y)))

    x, y, w, h = rig.x, rig.y, rig.width, rig.height
    hull = [(x + w / 2, y), (x + w, y + h), (x, y + h)]
    pygame.draw.polygon(surface, RIG, hull)
    pygame.draw.polygon(surface, RIG_OUTLINE, hull, 2)


def render_projectile(surface: pygame.Surface, projectile: ProjectileView) -> None:
    if projectile.progress <= 0:
        return
    color = LASER_HIT if projectile.hit else LASER
    alpha = int(255 * projectile.alpha)
    w, h = surface.get_size()
    layer = pygame.Surface((w, h), pygame.SRCALPHA)
    width = 2 + 2 * projectile.power
    start = (int(projectile.start[0]), int(projectile.start[1]))
    head = (int(projectile.head[0]), int(projectile.head[1]))
    pygame.draw.line(layer, (*color, alpha), start, head, width)
    pygame.draw.line(layer, (255, 255, 255, alpha), start, head, max(1, width // 3))
    surface.blit(layer, (0, 0))


def render_playfield(surface: pygame.Surface, snapshot: MatchSnapshot) -> None:
    render_background(surface, snapshot.palette)

    # Fading targets underneath, then live ones with the lowest drawn last
    dying = [t for t in snapshot.targets if t.state == TargetState.DYING]
    alive = sorted((t for t in snapshot.targets if t.state == TargetState.ALIVE), key=lambda t: t.y)
    for target in dying + alive:
        render_target(surface, target)

    for projectile in snapshot.projectiles:
        render_projectile(surface, projectile)

    if snapshot.rig is not None:
        render_rig(surface, snapshot.rig)
