"""Laser beams. Purely time-driven presentation state."""

from __future__ import annotations

from noteinvaders.models import ProjectileView

BASE_DURATION = 0.3
DURATION_PER_POWER = 0.05


class Projectile:
    def __init__(
        self,
        start: tuple[float, float],
        target: tuple[float, float],
        power: int = 1,
        delay: float = 0.0,
    ) -> None:
        self.start = start
        self.target = target
        self.power = max(1, min(4, power))
        self.delay = delay
        self.duration = BASE_DURATION + DURATION_PER_POWER * (self.power - 1)
        self.time = 0.0
        self.active = True
        self.hit = False

    def update(self, dt: float) -> None:
        if not self.active:
            return
        if self.delay > 0:
            self.delay -= dt
            if self.delay > 0:
                return
            dt = -self.delay
            self.delay = 0.0

        self.time += dt
        if self.time >= self.duration:
            self.active = False

    def mark_hit(self) -> None:
        self.hit = True

    @property
    def progress(self) -> float:
        return min(1.0, self.time / self.duration)

    @property
    def head(self) -> tuple[float, float]:
        """End of the beam: extends over the first half, then holds."""
        extend = min(1.0, self.progress * 2)
        (x1, y1), (x2, y2) = self.start, self.target
        return x1 + (x2 - x1) * extend, y1 + (y2 - y1) * extend

    @property
    def alpha(self) -> float:
        if self.progress <= 0.5:
            return 1.0
        return max(0.0, 1.0 - (self.progress - 0.5) * 2)

    def view(self) -> ProjectileView:
        return ProjectileView(
            start=self.start,
            head=self.head,
            target=self.target,
            power=self.power,
            alpha=self.alpha,
            hit=self.hit,
            progress=self.progress,
        )
