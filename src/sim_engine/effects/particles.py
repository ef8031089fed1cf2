# MIT License (see LICENSE)
"""
Transient visual particles: bursts, sparks, glow, confetti, bubbles, trails.

The particle system only tracks state. Drawing is delegated to a sink
(usually a RendererAdapter) through draw(), which receives a tuple of
the live particles. The sink must not mutate them.

All particle quantities are in screen space: pixels, pixels/s and
pixels/s² with +y pointing down, independent of any physical gravity a
simulation integrates.

Example:
    ps = ParticleSystem(rng=12345)
    ps.emit((400, 300), 20, "#fbbf24", SPARKS)
    while ps.count:
        ps.update(1 / 60)
        ps.draw(renderer)
"""
from __future__ import annotations
import math
from dataclasses import dataclass, replace
from typing import Protocol, Sequence

import numpy as np

from ..constants import MIN_PARTICLE_LIFETIME, MIN_PARTICLE_SIZE, REFERENCE_FRAME_DT

SHAPES = ("circle", "square", "star", "spark")

CONFETTI_COLORS = ("#ef4444", "#22c55e", "#3b82f6", "#f59e0b", "#a855f7", "#ec4899")


@dataclass
class Particle:
    """
    A single live particle.

    Attributes:
        x, y: Position in pixels.
        vx, vy: Velocity in px/s.
        size: Radius (or edge length) in pixels.
        color: Color string or tag understood by the renderer.
        shape: One of SHAPES.
        gravity: Vertical acceleration in px/s² (+ is down).
        drag: Velocity retention per reference frame (1/60 s), in (0, 1].
        life: Remaining lifetime in seconds.
        max_life: Lifetime sampled at emission.
    """
    x: float
    y: float
    vx: float
    vy: float
    size: float
    color: str
    shape: str
    gravity: float
    drag: float
    life: float
    max_life: float

    @property
    def life_fraction(self) -> float:
        """Remaining life in [0, 1]; renderers use it as fade alpha."""
        return max(0.0, self.life / self.max_life)

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class EmitConfig:
    """
    Emission profile. Every field has a default; presets override a few.

    Each emitted particle samples speed, lifetime and size uniformly in
    [value - variance, value + variance] and its direction uniformly in
    [angle - spread, angle + spread] (radians). A spread of π covers the
    full circle.
    """
    speed: float = 150.0
    speed_variance: float = 50.0
    lifetime: float = 0.8
    lifetime_variance: float = 0.3
    gravity: float = 200.0
    size: float = 4.0
    size_variance: float = 2.0
    drag: float = 0.98
    shape: str = "circle"
    angle: float = 0.0
    spread: float = math.pi

    def __post_init__(self) -> None:
        if self.shape not in SHAPES:
            raise ValueError(f"unknown particle shape {self.shape!r}; expected one of {SHAPES}")
        if min(self.speed_variance, self.lifetime_variance, self.size_variance) < 0:
            raise ValueError("variances must be >= 0")
        if self.spread < 0:
            raise ValueError(f"spread must be >= 0, got {self.spread}")
        if not 0.0 < self.drag <= 1.0:
            raise ValueError(f"drag must be in (0, 1], got {self.drag}")


# =============================================================================
# Presets
# =============================================================================

# Fast, small, short-lived streaks.
SPARKS = EmitConfig(speed=250.0, lifetime=0.4, size=2.0, size_variance=1.0,
                    shape="spark", gravity=100.0)

# Slow, large, long-lived, drifting upward.
GLOW = EmitConfig(speed=40.0, lifetime=1.2, size=6.0, size_variance=3.0,
                  gravity=-20.0, drag=0.96)

# Celebration burst thrown upward in a fan.
CONFETTI = EmitConfig(speed=275.0, speed_variance=75.0, lifetime=1.5,
                      size=5.5, size_variance=1.5, shape="square",
                      gravity=300.0, drag=0.97,
                      angle=-math.pi / 2, spread=math.pi * 0.4)

# Rising bubbles.
BUBBLES = EmitConfig(speed=30.0, speed_variance=15.0, lifetime=2.0,
                     size=5.0, size_variance=3.0, gravity=-80.0, drag=0.99,
                     angle=-math.pi / 2, spread=math.pi * 0.2)

# Exhaust behind a moving object; angle is set per call.
TRAIL = EmitConfig(speed=30.0, lifetime=0.6, size=3.0, gravity=0.0, drag=0.95,
                   spread=math.pi * 0.15)


class ParticleSink(Protocol):
    """Anything that can draw a particle snapshot. Must not mutate the particles."""

    def draw_particles(self, particles: Sequence[Particle]) -> None:
        ...


class ParticleSystem:
    """
    Pool of transient particles with sampled lifetimes.

    Args:
        rng: numpy Generator, an integer seed, or None for fresh entropy.
             Passing a seed makes emission reproducible in tests.
    """

    def __init__(self, rng: np.random.Generator | int | None = None) -> None:
        self._rng = np.random.default_rng(rng)
        self._particles: list[Particle] = []

    @property
    def count(self) -> int:
        """Number of live particles."""
        return len(self._particles)

    @property
    def particles(self) -> tuple[Particle, ...]:
        """
        Tuple of the live particles.

        The tuple is a copy, but the Particle objects are the pool's own.
        Sinks must treat them as read-only.
        """
        return tuple(self._particles)

    def emit(
        self,
        origin: tuple[float, float],
        count: int,
        color: str,
        config: EmitConfig | None = None,
    ) -> None:
        """
        Spawn count particles at origin.

        Args:
            origin: (x, y) in pixels.
            count: Number of particles (>= 0).
            color: Color/tag copied onto every particle.
            config: Emission profile; defaults to EmitConfig().
        """
        count = int(count)
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        if count == 0:
            return
        o = config if config is not None else EmitConfig()
        rng = self._rng
        x0, y0 = float(origin[0]), float(origin[1])

        angles = rng.uniform(o.angle - o.spread, o.angle + o.spread, count)
        speeds = rng.uniform(o.speed - o.speed_variance, o.speed + o.speed_variance, count)
        lives = np.maximum(
            MIN_PARTICLE_LIFETIME,
            rng.uniform(o.lifetime - o.lifetime_variance, o.lifetime + o.lifetime_variance, count),
        )
        sizes = np.maximum(
            MIN_PARTICLE_SIZE,
            rng.uniform(o.size - o.size_variance, o.size + o.size_variance, count),
        )

        for i in range(count):
            life = float(lives[i])
            self._particles.append(Particle(
                x=x0,
                y=y0,
                vx=float(np.cos(angles[i]) * speeds[i]),
                vy=float(np.sin(angles[i]) * speeds[i]),
                size=float(sizes[i]),
                color=color,
                shape=o.shape,
                gravity=o.gravity,
                drag=o.drag,
                life=life,
                max_life=life,
            ))

    def emit_sparks(self, origin, count: int, color: str = "#fbbf24") -> None:
        """Emit sparks (fast, small, short-lived)."""
        self.emit(origin, count, color, SPARKS)

    def emit_glow(self, origin, count: int, color: str = "#60a5fa") -> None:
        """Emit glow particles (slow, large, long-lived)."""
        self.emit(origin, count, color, GLOW)

    def emit_confetti(self, origin, count: int = 30) -> None:
        """Emit confetti, cycling through CONFETTI_COLORS."""
        for i in range(int(count)):
            self.emit(origin, 1, CONFETTI_COLORS[i % len(CONFETTI_COLORS)], CONFETTI)

    def emit_bubbles(self, origin, count: int, color: str = "rgba(100,200,255,0.6)") -> None:
        """Emit bubbles (rising, narrow fan)."""
        self.emit(origin, count, color, BUBBLES)

    def emit_trail(self, origin, heading: float, color: str = "#a855f7") -> None:
        """Emit two trail particles pointing away from heading (radians)."""
        self.emit(origin, 2, color, replace(TRAIL, angle=heading + math.pi))

    def update(self, dt: float) -> None:
        """
        Advance every particle by dt and drop expired ones.

        Per particle: move by v·dt, add gravity·dt to vy, decay velocity by
        drag ** (dt / REFERENCE_FRAME_DT), then subtract dt from life.
        Expired particles are filtered out in one pass, so the cost is O(n)
        regardless of how many die this frame.
        """
        dt = float(dt)
        if not dt > 0.0 or not self._particles:
            return

        frames = dt / REFERENCE_FRAME_DT
        alive: list[Particle] = []
        for p in self._particles:
            p.x += p.vx * dt
            p.y += p.vy * dt
            p.vy += p.gravity * dt
            if p.drag != 1.0:
                decay = p.drag ** frames
                p.vx *= decay
                p.vy *= decay
            p.life -= dt
            if p.life > 0.0:
                alive.append(p)
        self._particles = alive

    def clear(self) -> None:
        """Remove all particles immediately (used on simulation reset)."""
        self._particles = []

    def draw(self, sink: ParticleSink) -> None:
        """Hand the live particles to a renderer."""
        sink.draw_particles(self.particles)
