# MIT License (see LICENSE)
"""
Numerical integrators for the simulation engine.

This module provides time-stepping methods to advance a PhysicalState:
    dx/dt = v,     dv/dt = a(x, t) + (q/m) v × B

Available integrators:
- semi_implicit_step: Semi-implicit (symplectic) Euler for
  velocity-independent forces such as gravity, pendulum torque, springs.
- boris_step: Boris rotation for magnetic (v × B) motion. Conserves |v|
  to machine precision because the velocity update is an exact rotation.
- Integrator: Dispatches between the two, applies exponential damping,
  validates inputs and sub-steps a frame delta.

Reference:
    Semi-implicit Euler: https://en.wikipedia.org/wiki/Semi-implicit_Euler_method
    Boris pusher: https://en.wikipedia.org/wiki/Particle-in-cell#The_particle_mover
"""
from __future__ import annotations
import logging
import math
from dataclasses import replace

import numpy as np

from ..config import IntegratorConfig
from ..types import PhysicalState, FieldSpec
from ..util import all_finite, as_vec3, clamp_dt, cross3, norm2
from .forces import ForceLaw, NoForce

logger = logging.getLogger(__name__)


class NonFiniteStateError(ValueError):
    """Raised in strict mode when a state, field or dt contains NaN/inf."""


def semi_implicit_step(
    state: PhysicalState,
    accel: np.ndarray,
    dt: float,
    damping: float = 0.0,
) -> PhysicalState:
    """
    Advance a state by dt with semi-implicit Euler.

    The update is
        v(t+dt) = (v(t) + a(t)·dt) · exp(-damping·dt)
        x(t+dt) = x(t) + v(t+dt)·dt

    Using the updated velocity for the position makes the scheme
    symplectic, so undamped oscillators keep bounded energy over long runs.
    Damping is exponential, hence independent of how dt is subdivided.

    Args:
        state: State at time t (not modified).
        accel: Acceleration a(t), same shape as state.position.
        dt: Timestep in seconds (>= 0).
        damping: Velocity damping rate in 1/s.

    Returns:
        New state at time t + dt.
    """
    v = state.velocity + accel * dt
    if damping > 0.0:
        v = v * math.exp(-damping * dt)
    x = state.position + v * dt
    return replace(state, position=x, velocity=v, time=state.time + dt)


def boris_step(
    state: PhysicalState,
    B: np.ndarray,
    charge: float,
    mass: float,
    dt: float,
    accel: np.ndarray | None = None,
    damping: float = 0.0,
) -> PhysicalState:
    """
    Advance a charged state through a magnetic field with the Boris method.

    With half-step rotation vector t = (q/m)·B·(dt/2):
        v'    = v + v × t
        s     = 2t / (1 + |t|²)
        v_new = v + v' × s
        x    += v_new · dt

    The map v -> v_new is an exact rotation about B, so |v| is preserved to
    rounding error for any dt, matching the fact that the magnetic force
    does no work. A zero field gives t = s = 0 and straight-line motion
    without any division by |B|.

    If accel is given (electric field, gravity, ...) it is applied as two
    half kicks around the rotation.

    Args:
        state: 2-D or 3-D state (not modified). Planar states are embedded
               in 3-D with v_z = 0 and need B along z.
        B: Field 3-vector.
        charge: Particle charge q.
        mass: Particle mass m (> 0).
        dt: Timestep in seconds.
        accel: Optional velocity-independent acceleration.
        damping: Velocity damping rate in 1/s.

    Raises:
        ValueError: For 1-D states, or planar states with in-plane B.

    Reference:
        J. P. Boris, "Relativistic plasma simulation", 1970.
    """
    dim = state.dim
    if dim == 1:
        raise ValueError("magnetic motion needs a 2-D or 3-D state")
    B = as_vec3(B)
    if dim == 2 and (B[0] != 0.0 or B[1] != 0.0):
        raise ValueError("planar states only support a field along z")

    v = as_vec3(state.velocity)
    half_kick = None
    if accel is not None:
        half_kick = as_vec3(accel) * (0.5 * dt)
        v = v + half_kick

    # Rotation
    t = (charge / mass) * B * (0.5 * dt)
    v_prime = v + cross3(v, t)
    s = (2.0 / (1.0 + norm2(t))) * t
    v_new = v + cross3(v_prime, s)

    if half_kick is not None:
        v_new = v_new + half_kick
    if damping > 0.0:
        v_new = v_new * math.exp(-damping * dt)

    v_out = v_new[:dim].copy()
    x = state.position + v_out * dt
    return replace(state, position=x, velocity=v_out, time=state.time + dt)


class Integrator:
    """
    Generic integrator shared by every simulation screen.

    The per-screen physics lives in the injected force law; the integrator
    decides how to advance the state:
      - no field (or a zero field): semi-implicit Euler under the force law;
      - non-zero field: Boris rotation, with the force law as half kicks.

    Usage:
        integrator = Integrator(PendulumTorque(length=2.0, gravity=9.8))
        state = integrator.step(state, None, 0.0, 1.0, dt=1/240)

        # or, once per rendered frame:
        state = integrator.advance(state, field, frame_dt)

    Attributes:
        force_law: Velocity-independent force strategy.
        config: Sub-stepping, clamping, damping and strictness.
        dropped_ticks: Number of frames frozen because of non-finite values
                       (lenient mode only).
    """

    def __init__(
        self,
        force_law: ForceLaw | None = None,
        config: IntegratorConfig | None = None,
    ) -> None:
        self.force_law = force_law if force_law is not None else NoForce()
        self.config = config if config is not None else IntegratorConfig()
        self.dropped_ticks = 0

    def step(
        self,
        state: PhysicalState,
        field: FieldSpec | None,
        charge: float,
        mass: float,
        dt: float,
    ) -> PhysicalState:
        """
        Advance state by one timestep.

        Args:
            state: Current state (not modified).
            field: Magnetic field, or None for field-free motion.
            charge: Charge used for the magnetic rotation and force law.
            mass: Mass in kg; must be > 0.
            dt: Timestep in seconds. Negative values are treated as 0.

        Returns:
            The new state. A copy of the input for dt <= 0, and in lenient
            mode also when the inputs or result are non-finite.

        Raises:
            ValueError: If mass <= 0.
            NonFiniteStateError: On NaN/inf in strict mode.
        """
        new = self._try_step(state, field, charge, mass, dt)
        if new is None:
            self.dropped_ticks += 1
            return state.copy()
        return new

    def advance(
        self,
        state: PhysicalState,
        field: FieldSpec | None,
        frame_dt: float,
    ) -> PhysicalState:
        """
        Advance state by one rendered frame using sub-steps.

        frame_dt is clamped to [0, config.max_dt] and split into
        config.substeps equal steps. Charge and mass come from the state.
        If any sub-step is rejected the whole frame is dropped and the
        frame-start state is returned.
        """
        if not all_finite(frame_dt):
            self._reject("frame dt", frame_dt)
            self.dropped_ticks += 1
            return state.copy()
        dt = clamp_dt(frame_dt, self.config.max_dt)
        if dt == 0.0:
            return state.copy()

        n = int(self.config.substeps)
        h = dt / n
        current = state
        for _ in range(n):
            nxt = self._try_step(current, field, state.charge, state.mass, h)
            if nxt is None:
                self.dropped_ticks += 1
                return state.copy()
            current = nxt
        return current

    def _try_step(
        self,
        state: PhysicalState,
        field: FieldSpec | None,
        charge: float,
        mass: float,
        dt: float,
    ) -> PhysicalState | None:
        """One validated step; None means the tick must be dropped."""
        if not mass > 0:
            raise ValueError(f"mass must be > 0, got {mass}")

        field_vec = None if field is None or field.is_zero else field.vector
        if not all_finite(state.position, state.velocity, state.time, charge, dt, field_vec):
            self._reject("input state", state)
            return None

        dt = float(dt)
        if dt <= 0.0:
            return state.copy()

        accel = self.force_law.acceleration(state, charge, mass)
        damping = self.config.damping
        if field_vec is None:
            new = semi_implicit_step(state, accel, dt, damping)
        else:
            if isinstance(self.force_law, NoForce):
                accel = None
            new = boris_step(state, field_vec, charge, mass, dt, accel=accel, damping=damping)

        if not all_finite(new.position, new.velocity):
            self._reject("integrated state", new)
            return None
        return new

    def _reject(self, what: str, value) -> None:
        """Raise in strict mode; otherwise log so the caller drops the tick."""
        if self.config.strict:
            raise NonFiniteStateError(f"non-finite {what}: {value!r}")
        logger.warning("Dropping tick: non-finite %s (%r)", what, value)
