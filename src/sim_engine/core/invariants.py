# MIT License (see LICENSE)
"""
Utilities for calculating physical invariants and conserved quantities.

Used for verifying integrator correctness and debugging drift. Under a
pure magnetic field speed (and so kinetic energy) is constant; an
undamped pendulum conserves its mechanical energy.
"""
from __future__ import annotations
import math

import numpy as np

from ..types import PhysicalState


def speed(state: PhysicalState) -> float:
    """|v| of a state."""
    return float(np.linalg.norm(state.velocity))


def kinetic_energy(states: list[PhysicalState]) -> float:
    """
    Total translational kinetic energy of a set of states.

    T = Σ 0.5 * m * v²
    """
    ke = 0.0
    for s in states:
        if s.mass <= 0:
            continue
        ke += 0.5 * s.mass * float(np.dot(s.velocity, s.velocity))
    return ke


def relative_drift(before: float, after: float) -> float:
    """|after - before| / |before|, or the absolute change when before is 0."""
    if before == 0.0:
        return abs(after)
    return abs(after - before) / abs(before)


def pendulum_energy(state: PhysicalState, length: float, gravity: float) -> float:
    """
    Mechanical energy per unit mass of a 1-D pendulum state.

    E/m = ½ L² ω² + g L (1 - cos θ)
    """
    theta = float(state.position[0])
    omega = float(state.velocity[0])
    return 0.5 * length * length * omega * omega + gravity * length * (1.0 - math.cos(theta))


def cyclotron_period(charge: float, mass: float, b: float) -> float:
    """
    Period of circular motion in a uniform field, T = 2π m / (|q| B).

    Returns inf when the particle is neutral or the field is zero.
    """
    qb = abs(charge * b)
    if qb == 0.0:
        return math.inf
    return 2.0 * math.pi * mass / qb
