from sim_engine.config import IntegratorConfig
from sim_engine.core.forces import PendulumTorque
from sim_engine.core.integrators import Integrator
from sim_engine.core.invariants import pendulum_energy, relative_drift
from sim_engine.logging_config import setup_logging
from sim_engine.scene import Simulation
from sim_engine.types import PhysicalState
import numpy as np

setup_logging()

L, g = 2.0, 9.8
law = PendulumTorque(length=L, gravity=g)
sim = Simulation(integrator=Integrator(law, IntegratorConfig(damping=0.0)))
sim.add_state("bob", PhysicalState(position=np.radians(30.0), velocity=0.0))

e0 = pendulum_energy(sim.states["bob"], L, g)
for _ in range(600):  # 10 s at 60 fps
    sim.tick(1 / 60)

bob = sim.states["bob"]
print("theta (deg):", float(np.degrees(bob.position[0])),
      "period (s):", law.small_angle_period,
      "energy drift:", relative_drift(e0, pendulum_energy(bob, L, g)))
