# MIT License (see LICENSE)
"""
Core physics simulation components.

This subpackage provides:
    - Force laws: gravity, pendulum torque, spring coupling, electric field.
    - Integrators: semi-implicit Euler, Boris rotation, the Integrator
      dispatcher with sub-stepping.
    - Invariants: speed, kinetic energy, pendulum energy helpers.

Typical usage:
    from sim_engine.core import Integrator, PendulumTorque

    integrator = Integrator(PendulumTorque(length=2.0, gravity=9.8))
    state = integrator.advance(state, None, frame_dt)
"""
from .forces import (
    ForceLaw,
    NoForce,
    UniformGravity,
    PendulumTorque,
    SpringCoupling,
    UniformElectricField,
    CompositeForce,
)
from .integrators import (
    Integrator,
    NonFiniteStateError,
    semi_implicit_step,
    boris_step,
)

__all__ = [
    # Forces
    "ForceLaw",
    "NoForce",
    "UniformGravity",
    "PendulumTorque",
    "SpringCoupling",
    "UniformElectricField",
    "CompositeForce",
    # Integrators
    "Integrator",
    "NonFiniteStateError",
    "semi_implicit_step",
    "boris_step",
]
