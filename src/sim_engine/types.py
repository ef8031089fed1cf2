# MIT License (see LICENSE)
"""
Core type definitions for the simulation engine.

Defines the fundamental data structures:
- PhysicalState: kinematic state of one simulated body (or angular DOF).
- FieldSpec: an external uniform magnetic field.
- Domain: axis-aligned bounds used for "left the simulation" checks.

The equations of motion advanced by the integrators are
  dx/dt = v
  dv/dt = a(x, t) + (q/m) v × B
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace

import numpy as np

from .util import f64, norm, unit


# =============================================================================
# Physical State
# =============================================================================

@dataclass
class PhysicalState:
    """
    Kinematic state of a single simulated degree-of-freedom set.

    Position and velocity share a shape of 1, 2 or 3 components. 1-D states
    carry angular coordinates (a pendulum angle in radians and its angular
    velocity); 2-D and 3-D states carry Cartesian positions.

    Attributes:
        position: Position vector (m, or rad for angular states).
        velocity: Velocity vector, same shape as position.
        time: Elapsed simulated time in seconds.
        mass: Mass in kg. Integrators reject mass <= 0.
        charge: Electric charge (or charge sign) used by magnetic motion.

    Note:
        A state is owned by one simulation instance. Integrators return a
        new state instead of mutating this one; resets replace it wholesale.
    """
    position: np.ndarray | tuple[float, ...] | float = (0.0, 0.0)
    velocity: np.ndarray | tuple[float, ...] | float = (0.0, 0.0)
    time: float = 0.0
    mass: float = 1.0
    charge: float = 0.0

    def __post_init__(self) -> None:
        """Convert position/velocity to float64 arrays for consistent numerics."""
        self.position = f64(self.position)
        self.velocity = f64(self.velocity)
        self.time = float(self.time)
        if self.position.ndim != 1 or self.position.shape[0] not in (1, 2, 3):
            raise ValueError(
                f"position must have 1, 2 or 3 components, got shape {self.position.shape}"
            )
        if self.velocity.shape != self.position.shape:
            raise ValueError(
                f"velocity shape {self.velocity.shape} does not match "
                f"position shape {self.position.shape}"
            )

    @property
    def dim(self) -> int:
        """Number of spatial components."""
        return int(self.position.shape[0])

    @property
    def speed(self) -> float:
        """Magnitude of the velocity vector."""
        return norm(self.velocity)

    def copy(self) -> "PhysicalState":
        """Deep copy; the arrays are not shared with the original."""
        return replace(self, position=self.position.copy(), velocity=self.velocity.copy())

    def snapshot(self) -> dict:
        """Plain-data view for renderers and debugging."""
        return {
            "position": self.position.tolist(),
            "velocity": self.velocity.tolist(),
            "time": self.time,
            "mass": self.mass,
            "charge": self.charge,
        }


# =============================================================================
# External Field
# =============================================================================

@dataclass(frozen=True)
class FieldSpec:
    """
    Uniform magnetic field, immutable per integration call.

    Attributes:
        magnitude: Field strength in Tesla (or screen-space equivalent).
                   May be negative, which flips the direction.
        direction: Direction 3-vector; normalized on use. Defaults to +z,
                   i.e. out of the screen for planar simulations.
    """
    magnitude: float = 0.0
    direction: tuple[float, float, float] = (0.0, 0.0, 1.0)

    def __post_init__(self) -> None:
        d = f64(self.direction)
        if d.shape != (3,):
            raise ValueError(f"field direction must be a 3-vector, got shape {d.shape}")
        if self.magnitude != 0.0 and norm(d) < 1e-12:
            raise ValueError("a non-zero field needs a non-zero direction")
        object.__setattr__(self, "direction", tuple(float(c) for c in d))

    @classmethod
    def along_z(cls, bz: float) -> "FieldSpec":
        """Field perpendicular to the simulation plane (the usual 2-D case)."""
        return cls(magnitude=float(bz), direction=(0.0, 0.0, 1.0))

    @property
    def is_zero(self) -> bool:
        return self.magnitude == 0.0

    @property
    def vector(self) -> np.ndarray:
        """Field as a 3-vector [Bx, By, Bz]. Zero fields never divide."""
        if self.is_zero:
            return np.zeros(3, dtype=np.float64)
        return self.magnitude * unit(f64(self.direction))


# =============================================================================
# Domain Bounds
# =============================================================================

@dataclass(frozen=True)
class Domain:
    """
    Axis-aligned box a simulated body is expected to stay inside.

    Attributes:
        lower: Minimum corner, same dimensionality as the checked states.
        upper: Maximum corner.
    """
    lower: tuple[float, ...]
    upper: tuple[float, ...]
    _lo: np.ndarray = field(init=False, repr=False, compare=False)
    _hi: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lo, hi = f64(self.lower), f64(self.upper)
        if lo.shape != hi.shape:
            raise ValueError("domain corners must have the same shape")
        if np.any(lo > hi):
            raise ValueError("domain lower corner must not exceed upper corner")
        object.__setattr__(self, "_lo", lo)
        object.__setattr__(self, "_hi", hi)

    def contains(self, position: np.ndarray) -> bool:
        """True if the position lies inside the box (edges inclusive)."""
        p = f64(position)
        if p.shape != self._lo.shape:
            raise ValueError(
                f"position shape {p.shape} does not match domain shape {self._lo.shape}"
            )
        return bool(np.all(p >= self._lo) and np.all(p <= self._hi))
