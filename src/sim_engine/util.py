# MIT License (see LICENSE)
"""
Utility functions for vector math and numeric operations.

Provides the small vector helpers shared by the integrators, the particle
system and the scorer. States may be 1-D (angular coordinates), 2-D or
3-D, so these helpers work on arrays of any length unless noted.
"""
from __future__ import annotations
import math
import os

import numpy as np


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Scalars become 1-element vectors so angular states (a pendulum angle)
    go through the same code path as positional ones.
    """
    return np.atleast_1d(np.array(x, dtype=np.float64))


def norm2(v: np.ndarray) -> float:
    """Squared magnitude of a vector. Avoids sqrt for performance."""
    return float(np.dot(v, v))


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a vector."""
    return float(np.sqrt(norm2(v)))


def unit(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """
    Return a unit (normalized) vector in the same direction as v.

    Returns zero vector if |v| < eps to avoid division by zero.
    """
    n = norm(v)
    if n < eps:
        return np.zeros_like(v, dtype=np.float64)
    return v / n


def as_vec3(v: np.ndarray) -> np.ndarray:
    """
    Embed a 2-D or 3-D vector in 3-D space (z = 0 for planar vectors).

    Raises:
        ValueError: For vectors that are not 2-D or 3-D.
    """
    v = f64(v)
    if v.shape == (3,):
        return v
    if v.shape == (2,):
        return np.array([v[0], v[1], 0.0], dtype=np.float64)
    raise ValueError(f"Expected a 2-D or 3-D vector, got shape {v.shape}")


def cross3(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    3-D cross product a × b, written out to avoid np.cross overhead on
    tiny arrays inside the Boris loop.
    """
    return np.array([
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    ], dtype=np.float64)


def clamp_dt(dt: float, max_dt: float) -> float:
    """
    Clamp a wall-clock delta into [0, max_dt].

    Negative deltas (clock skew) become 0; long hitches or backgrounded tabs
    are capped so a single tick never integrates an unstable step.
    """
    dt = float(dt)
    if not math.isfinite(dt) or dt <= 0.0:
        return 0.0
    return min(dt, max_dt)


def all_finite(*values) -> bool:
    """True if every scalar/array argument contains only finite numbers."""
    for v in values:
        if v is None:
            continue
        if not np.all(np.isfinite(v)):
            return False
    return True


def strict_mode() -> bool:
    """Check if non-finite states should raise, via environment variable."""
    return os.environ.get("SIM_ENGINE_STRICT", "1") == "1"
