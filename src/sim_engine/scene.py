# MIT License (see LICENSE)
"""
The simulation host: one interactive screen's frame loop.

The Simulation class composes the engine pieces for a single screen:
- Named physical states advanced by one Integrator.
- One ParticleSystem for visual effects.
- Optionally one ChallengeScorer with its session state and popups.

Each tick runs, in order:
    1. Clamp the wall-clock delta.
    2. Integrate every active state (sub-stepped).
    3. Update particles.
    4. Check the domain bounds and report states that left it.
Challenge results are folded in when the host submits them, and
render() hands read-only snapshots to a renderer.

Structure:
    - Host creates a Simulation and adds states with add_state().
    - Host calls sim.tick(dt) from a single-flight animation loop.
    - Host calls sim.render(renderer, now) after each tick.
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field

from .core.integrators import Integrator, NonFiniteStateError
from .effects.particles import ParticleSystem
from .scoring.challenge import (
    AccuracyResult,
    ChallengeScorer,
    ChallengeState,
    Tier,
    create_challenge_state,
    tier_color,
)
from .scoring.popups import ScorePopup, prune_popups
from .types import Domain, FieldSpec, PhysicalState
from .util import clamp_dt

logger = logging.getLogger(__name__)

# Audio cue names the host's sound layer understands, per tier.
TIER_CUES = {
    Tier.PERFECT: "success",
    Tier.GREAT: "correct",
    Tier.CLOSE: "correct",
    Tier.MISS: "incorrect",
}


def _check_mass(name: str, state: PhysicalState) -> None:
    if not state.mass > 0:
        raise ValueError(f"state {name!r} must have mass > 0, got {state.mass}")


def cue_for_tier(tier: Tier) -> str:
    """Audio cue the host should play for a result tier."""
    return TIER_CUES[Tier(tier)]


@dataclass
class TickReport:
    """
    What happened during one tick.

    Attributes:
        dt: Clamped delta actually integrated (0 when paused).
        exited: States that left the domain during this tick.
        dropped: True if the whole tick was dropped because of non-finite
                 values (lenient mode). Nothing advanced, dt is 0.
    """
    dt: float = 0.0
    exited: list[str] = field(default_factory=list)
    dropped: bool = False


@dataclass
class Simulation:
    """
    One simulation screen.

    Attributes:
        integrator: Shared integrator (force law + config) for all states.
        field_spec: Uniform magnetic field, or None.
        particles: Visual particle pool.
        scorer: Challenge scorer; None for screens without challenges.
        domain: Bounds; states leaving it stop being integrated.
        states: Current state per body name.
        challenge: Current challenge session state.
        popups: Score popups not yet expired.
        exited: Names of states that left the domain.
        time: Simulated time in seconds.
        running: False while paused.
    """
    integrator: Integrator = field(default_factory=Integrator)
    field_spec: FieldSpec | None = None
    particles: ParticleSystem = field(default_factory=ParticleSystem)
    scorer: ChallengeScorer | None = None
    domain: Domain | None = None

    # Internal state
    states: dict[str, PhysicalState] = field(default_factory=dict)
    challenge: ChallengeState = field(default_factory=create_challenge_state)
    popups: list[ScorePopup] = field(default_factory=list)
    exited: set[str] = field(default_factory=set)
    time: float = 0.0
    running: bool = True

    def __post_init__(self) -> None:
        for name, state in self.states.items():
            _check_mass(name, state)
        self._initial: dict[str, PhysicalState] = {
            name: s.copy() for name, s in self.states.items()
        }
        self._in_tick = False

    def add_state(self, name: str, state: PhysicalState) -> None:
        """
        Register a body. Its current value also becomes its reset value.

        Raises:
            ValueError: If the name is already used or mass <= 0.
        """
        if name in self.states:
            raise ValueError(f"state {name!r} already exists")
        _check_mass(name, state)
        self.states[name] = state.copy()
        self._initial[name] = state.copy()

    @property
    def needs_frame(self) -> bool:
        """Whether the host should keep scheduling animation frames."""
        return self.running or self.particles.count > 0 or bool(self.popups)

    def pause(self) -> None:
        self.running = False

    def resume(self) -> None:
        self.running = True

    def tick(self, wall_dt: float) -> TickReport:
        """
        Advance the simulation by one frame.

        Args:
            wall_dt: Wall-clock seconds since the previous frame. Clamped to
                     [0, integrator.config.max_dt].

        A tick commits fully or not at all. If any state fails to advance,
        states, particles and time keep their previous values.

        Raises:
            RuntimeError: If called while another tick is in progress.
            NonFiniteStateError: Non-finite wall_dt in strict mode.
        """
        if self._in_tick:
            raise RuntimeError("tick() is not re-entrant; a tick is already running")
        if not self.running:
            return TickReport()

        self._in_tick = True
        try:
            if not math.isfinite(wall_dt):
                if self.integrator.config.strict:
                    raise NonFiniteStateError(f"non-finite frame dt: {wall_dt!r}")
                logger.warning("Dropping tick: non-finite frame dt (%r)", wall_dt)
                return TickReport(dropped=True)

            dt = clamp_dt(wall_dt, self.integrator.config.max_dt)
            dropped_before = self.integrator.dropped_ticks

            # 1. Integrate; nothing is committed until every state has advanced
            advanced = {}
            for name, state in self.states.items():
                if name in self.exited:
                    continue
                advanced[name] = self.integrator.advance(state, self.field_spec, dt)
            if self.integrator.dropped_ticks > dropped_before:
                return TickReport(dropped=True)
            self.states.update(advanced)

            # 2. Effects
            self.particles.update(dt)

            # 3. Bounds
            exited = []
            if self.domain is not None:
                for name, state in self.states.items():
                    if name in self.exited:
                        continue
                    if not self.domain.contains(state.position):
                        self.exited.add(name)
                        exited.append(name)
                if exited:
                    logger.info("States left the domain at t=%.3f: %s", self.time + dt, exited)

            self.time += dt
            logger.debug("tick dt=%.4f particles=%d", dt, self.particles.count)
            return TickReport(dt=dt, exited=exited)
        finally:
            self._in_tick = False

    def reset(self, states: dict[str, PhysicalState] | None = None) -> None:
        """
        Replace all states wholesale and clear transient effects.

        Args:
            states: New initial states. If None, the states recorded by
                    add_state() (or the constructor) are restored.

        The challenge session is kept; use start_challenge() to reset it.
        """
        if self._in_tick:
            raise RuntimeError("cannot reset during a tick")
        if states is not None:
            for name, state in states.items():
                _check_mass(name, state)
            self._initial = {name: s.copy() for name, s in states.items()}
        self.states = {name: s.copy() for name, s in self._initial.items()}
        self.particles.clear()
        self.popups = []
        self.exited = set()
        self.time = 0.0
        logger.info("Simulation reset with %d state(s)", len(self.states))

    def start_challenge(self, description: str) -> ChallengeState:
        """Begin a fresh, active challenge session."""
        self.challenge = self._require_scorer().start(description)
        return self.challenge

    def submit_prediction(
        self,
        predicted: float,
        actual: float,
        tolerance: float,
        position: tuple[float, float],
        now: float,
    ) -> AccuracyResult:
        """
        Score a numeric prediction and apply the visual side effects.

        Returns the result so the host can choose an audio cue
        (see cue_for_tier).
        """
        result = self._require_scorer().evaluate(predicted, actual, tolerance)
        return self._apply_result(result, position, now)

    def submit_target(
        self,
        point: tuple[float, float],
        target: tuple[float, float],
        tolerance: float,
        now: float,
    ) -> AccuracyResult:
        """Score a click against a target; effects spawn at the click."""
        result = self._require_scorer().evaluate_target(point, target, tolerance)
        return self._apply_result(result, point, now)

    def _apply_result(
        self,
        result: AccuracyResult,
        position: tuple[float, float],
        now: float,
    ) -> AccuracyResult:
        self.challenge = self._require_scorer().record(self.challenge, result)
        x, y = float(position[0]), float(position[1])
        self.popups.append(
            ScorePopup.from_result(result, x, y, now, bonus=self.challenge.last_bonus)
        )
        if result.tier == Tier.PERFECT:
            self.particles.emit_confetti((x, y), 30)
        elif result.tier in (Tier.GREAT, Tier.CLOSE):
            self.particles.emit_sparks((x, y), 12, tier_color(result.tier))
        return result

    def _require_scorer(self) -> ChallengeScorer:
        if self.scorer is None:
            raise RuntimeError("this simulation has no challenge scorer")
        return self.scorer

    def render(self, renderer, now: float) -> None:
        """
        Hand the current snapshots to a renderer and prune expired popups.

        Args:
            renderer: A RendererAdapter.
            now: Wall-clock seconds, used to fade popups.
        """
        self.popups = prune_popups(self.popups, now)
        renderer.begin_frame(self.time)
        for name, state in self.states.items():
            renderer.draw_state(name, state)
        self.particles.draw(renderer)
        if self.scorer is not None:
            renderer.draw_challenge(self.challenge)
        for popup in self.popups:
            renderer.draw_popup(popup, now)
        renderer.end_frame()
