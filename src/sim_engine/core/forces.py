# MIT License (see LICENSE)
"""
Force laws for the generic integrator.

Each simulation screen plugs one of these strategies into an Integrator
instead of hand-rolling its own update loop. A force law maps a state to
an acceleration and must not depend on velocity: velocity-dependent
magnetic motion is handled by the Boris rotation in integrators.py.

Key concepts:
- acceleration(state, charge, mass) returns an array shaped like
  state.position.
- Laws compose through CompositeForce, which sums accelerations.
- Mass has already been validated (> 0) by the integrator when called.
"""
from __future__ import annotations
from typing import Protocol

import numpy as np

from ..types import PhysicalState
from ..util import f64


class ForceLaw(Protocol):
    """Velocity-independent acceleration model."""

    def acceleration(self, state: PhysicalState, charge: float, mass: float) -> np.ndarray:
        ...


class NoForce:
    """Free motion: zero acceleration."""

    def acceleration(self, state: PhysicalState, charge: float, mass: float) -> np.ndarray:
        return np.zeros_like(state.position)


class UniformGravity:
    """
    Constant gravitational acceleration.

    Implements a = g (independent of mass).

    Args:
        g: Acceleration vector, e.g. (0, -9.81) for y-up coordinates.
    """

    def __init__(self, g) -> None:
        self.g = f64(g)

    def acceleration(self, state: PhysicalState, charge: float, mass: float) -> np.ndarray:
        if self.g.shape != state.position.shape:
            raise ValueError(
                f"gravity shape {self.g.shape} does not match state shape {state.position.shape}"
            )
        return self.g.copy()


class PendulumTorque:
    """
    Simple pendulum on a 1-D angular state.

    Implements θ'' = -(g/L) sin θ, with θ measured from the downward
    vertical. Works at large amplitude (no small-angle approximation).

    Args:
        length: Rod length in meters (> 0).
        gravity: Gravitational acceleration magnitude in m/s² (> 0).
    """

    def __init__(self, length: float, gravity: float = 9.81) -> None:
        if length <= 0:
            raise ValueError(f"pendulum length must be > 0, got {length}")
        if not gravity > 0:
            raise ValueError(f"pendulum gravity must be > 0, got {gravity}")
        self.length = float(length)
        self.gravity = float(gravity)

    @property
    def small_angle_period(self) -> float:
        """T = 2π √(L/g)."""
        return float(2.0 * np.pi * np.sqrt(self.length / self.gravity))

    def acceleration(self, state: PhysicalState, charge: float, mass: float) -> np.ndarray:
        return -(self.gravity / self.length) * np.sin(state.position)


class SpringCoupling:
    """
    Hookean spring pulling the state toward an anchor.

    Implements a = -k (x - anchor) / m.

    Args:
        k: Spring constant in N/m.
        anchor: Rest position; defaults to the origin.
    """

    def __init__(self, k: float, anchor=None) -> None:
        self.k = float(k)
        self.anchor = None if anchor is None else f64(anchor)

    def acceleration(self, state: PhysicalState, charge: float, mass: float) -> np.ndarray:
        anchor = np.zeros_like(state.position) if self.anchor is None else self.anchor
        return -(self.k / mass) * (state.position - anchor)


class UniformElectricField:
    """
    Force on a charge in a uniform electric field.

    Implements a = q E / m. The magnetic part of the Lorentz force is not
    here; pass a FieldSpec to the integrator for that.

    Args:
        E: Electric field vector in V/m.
    """

    def __init__(self, E) -> None:
        self.E = f64(E)

    def acceleration(self, state: PhysicalState, charge: float, mass: float) -> np.ndarray:
        if charge == 0.0:
            return np.zeros_like(state.position)
        return (charge / mass) * self.E


class CompositeForce:
    """Sum of several force laws."""

    def __init__(self, *laws: ForceLaw) -> None:
        self.laws = list(laws)

    def acceleration(self, state: PhysicalState, charge: float, mass: float) -> np.ndarray:
        a = np.zeros_like(state.position)
        for law in self.laws:
            a += law.acceleration(state, charge, mass)
        return a
