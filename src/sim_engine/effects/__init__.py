# MIT License (see LICENSE)
"""
Visual effects.

This subpackage provides:
    - ParticleSystem: pool of transient particles with sampled lifetimes.
    - EmitConfig and the named presets (SPARKS, GLOW, CONFETTI, BUBBLES, TRAIL).
"""
from .particles import (
    Particle,
    ParticleSystem,
    EmitConfig,
    SPARKS,
    GLOW,
    CONFETTI,
    BUBBLES,
    TRAIL,
    CONFETTI_COLORS,
)

__all__ = [
    "Particle",
    "ParticleSystem",
    "EmitConfig",
    "SPARKS",
    "GLOW",
    "CONFETTI",
    "BUBBLES",
    "TRAIL",
    "CONFETTI_COLORS",
]
