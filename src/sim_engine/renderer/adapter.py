# MIT License (see LICENSE)
"""
Renderer adapters for simulation visualization.

This module provides an abstract base class for rendering and concrete
debug implementations. The engine has no rendering dependency; a canvas,
pygame or web front end implements RendererAdapter and receives
read-only snapshots each frame.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence, TextIO
import sys

from ..effects.particles import Particle
from ..scoring.challenge import ChallengeState
from ..scoring.popups import ScorePopup
from ..types import PhysicalState

if TYPE_CHECKING:
    from ..scene import Simulation


class RendererAdapter(ABC):
    """
    Abstract base class for renderer implementations.

    Usage:
        renderer = MyRenderer()
        renderer.begin_frame(sim.time)
        for name, state in sim.states.items():
            renderer.draw_state(name, state)
        sim.particles.draw(renderer)
        renderer.end_frame()

    Or use the convenience method:
        renderer.render_simulation(sim, now)
    """

    @abstractmethod
    def begin_frame(self, time: float) -> None:
        """
        Begin a new frame for rendering.

        Args:
            time: Current simulation time in seconds.
        """
        ...

    @abstractmethod
    def draw_state(self, name: str, state: PhysicalState) -> None:
        """Draw one simulated body."""
        ...

    @abstractmethod
    def draw_particles(self, particles: Sequence[Particle]) -> None:
        """Draw the live particle snapshot."""
        ...

    def draw_challenge(self, state: ChallengeState) -> None:
        """Draw the scoreboard. Optional; default does nothing."""

    def draw_popup(self, popup: ScorePopup, now: float) -> None:
        """Draw one score popup faded for `now`. Optional."""

    @abstractmethod
    def end_frame(self) -> None:
        """Finalize the current frame."""
        ...

    def render_simulation(self, sim: "Simulation", now: float) -> None:
        """
        Convenience method to render everything a simulation exposes.

        Args:
            sim: The simulation to render.
            now: Wall-clock seconds, used to fade popups.
        """
        sim.render(self, now)


class DebugRenderer(RendererAdapter):
    """
    Console/text debug renderer for development and testing.

    Example output:
        === Frame t=0.0167 ===
        [bob] @ (0.52) v=(-0.01)
        particles: 12
        challenge: score=5 attempts=2 streak=2
        popup 'Great!' +2 alpha=0.83
    """

    def __init__(self, output: TextIO | None = None, verbose: bool = True):
        """
        Initialize the debug renderer.

        Args:
            output: Output stream (defaults to sys.stdout).
            verbose: If True, include velocity info.
        """
        self.output = output or sys.stdout
        self.verbose = verbose

    def begin_frame(self, time: float) -> None:
        self.output.write(f"=== Frame t={time:.4f} ===\n")

    def draw_state(self, name: str, state: PhysicalState) -> None:
        pos = ", ".join(f"{c:.2f}" for c in state.position)
        line = f"[{name}] @ ({pos})"
        if self.verbose:
            vel = ", ".join(f"{c:.2f}" for c in state.velocity)
            line += f" v=({vel})"
        self.output.write(line + "\n")

    def draw_particles(self, particles: Sequence[Particle]) -> None:
        self.output.write(f"particles: {len(particles)}\n")

    def draw_challenge(self, state: ChallengeState) -> None:
        self.output.write(
            f"challenge: score={state.score} attempts={state.attempts} streak={state.streak}\n"
        )

    def draw_popup(self, popup: ScorePopup, now: float) -> None:
        self.output.write(f"popup {popup.text!r} +{popup.points} alpha={popup.alpha(now):.2f}\n")

    def end_frame(self) -> None:
        self.output.write("\n")
        self.output.flush()


class NullRenderer(RendererAdapter):
    """
    No-op renderer that does nothing.

    Useful as a placeholder or for benchmarks without rendering overhead.
    """

    def begin_frame(self, time: float) -> None:
        pass

    def draw_state(self, name: str, state: PhysicalState) -> None:
        pass

    def draw_particles(self, particles: Sequence[Particle]) -> None:
        pass

    def end_frame(self) -> None:
        pass


class BufferedRenderer(RendererAdapter):
    """
    Renderer that buffers frame data for later retrieval.

    Example:
        renderer = BufferedRenderer()
        for _ in range(100):
            sim.tick(1 / 60)
            sim.render(renderer, now)

        for frame in renderer.frames:
            print(f"t={frame['time']}, particles={len(frame['particles'])}")
    """

    def __init__(self):
        self.frames: list[dict] = []
        self._current_frame: dict | None = None

    def begin_frame(self, time: float) -> None:
        self._current_frame = {
            "time": time,
            "states": {},
            "particles": [],
            "challenge": None,
            "popups": [],
        }

    def draw_state(self, name: str, state: PhysicalState) -> None:
        if self._current_frame is None:
            return
        self._current_frame["states"][name] = state.snapshot()

    def draw_particles(self, particles: Sequence[Particle]) -> None:
        if self._current_frame is None:
            return
        self._current_frame["particles"] = [
            {
                "position": p.position,
                "size": p.size,
                "color": p.color,
                "shape": p.shape,
                "life_fraction": p.life_fraction,
            }
            for p in particles
        ]

    def draw_challenge(self, state: ChallengeState) -> None:
        if self._current_frame is None:
            return
        self._current_frame["challenge"] = {
            "score": state.score,
            "attempts": state.attempts,
            "streak": state.streak,
        }

    def draw_popup(self, popup: ScorePopup, now: float) -> None:
        if self._current_frame is None:
            return
        self._current_frame["popups"].append({
            "text": popup.text,
            "points": popup.points,
            "position": (popup.x, popup.y - popup.y_offset(now)),
            "alpha": popup.alpha(now),
        })

    def end_frame(self) -> None:
        if self._current_frame is not None:
            self.frames.append(self._current_frame)
            self._current_frame = None

    def clear(self) -> None:
        """Clear all buffered frames."""
        self.frames.clear()
