# MIT License (see LICENSE)
"""
sim_engine - shared engine for interactive physics simulation screens.

This package provides the pieces every screen reuses: a numerical
integrator (with Boris rotation for magnetic motion), a transient particle
system for visual effects, and a prediction-challenge scorer.

Main entry points:
    - Simulation: One screen's frame loop composing the pieces below.
    - Integrator: Advances a PhysicalState under a pluggable force law.
    - PhysicalState, FieldSpec, Domain: Data records.
    - ParticleSystem: Emit/update/clear/draw transient particles.
    - ChallengeScorer: Error -> tier -> session score with streak bonus.

Submodules:
    - core: Force laws, integrators, invariants.
    - effects: Particle system and presets.
    - scoring: Accuracy tiers, challenge state, score popups.
    - renderer: Optional rendering adapters.

Example:
    from sim_engine import Simulation, Integrator, PhysicalState
    from sim_engine.core import PendulumTorque

    sim = Simulation(integrator=Integrator(PendulumTorque(length=2.0, gravity=9.8)))
    sim.add_state("bob", PhysicalState(position=0.52, velocity=0.0))
    sim.tick(1 / 60)
"""
from .scene import Simulation, TickReport, cue_for_tier
from .types import PhysicalState, FieldSpec, Domain
from .config import IntegratorConfig, ScoringConfig
from .core.integrators import Integrator, NonFiniteStateError
from .effects.particles import ParticleSystem, EmitConfig
from .scoring.challenge import ChallengeScorer, AccuracyResult, ChallengeState, Tier

__all__ = [
    # Host
    "Simulation",
    "TickReport",
    "cue_for_tier",
    # State
    "PhysicalState",
    "FieldSpec",
    "Domain",
    # Config
    "IntegratorConfig",
    "ScoringConfig",
    # Engine
    "Integrator",
    "NonFiniteStateError",
    "ParticleSystem",
    "EmitConfig",
    "ChallengeScorer",
    "AccuracyResult",
    "ChallengeState",
    "Tier",
]
