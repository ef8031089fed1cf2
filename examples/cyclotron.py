from sim_engine.core.invariants import cyclotron_period
from sim_engine.renderer import DebugRenderer
from sim_engine.scene import Simulation
from sim_engine.types import PhysicalState, FieldSpec, Domain

B = 2.0
sim = Simulation(field_spec=FieldSpec.along_z(B), domain=Domain(lower=(-10.0, -10.0), upper=(10.0, 10.0)))
sim.add_state("proton", PhysicalState(position=(0.0, 0.0), velocity=(3.0, 0.0), charge=1.0, mass=1.0))
sim.add_state("electron", PhysicalState(position=(0.0, 0.0), velocity=(3.0, 0.0), charge=-1.0, mass=0.25))

T = cyclotron_period(1.0, 1.0, B)
renderer = DebugRenderer(verbose=False)
frames = int(round(T * 60))
for i in range(frames):
    sim.tick(1 / 60)
    if i % 30 == 0:
        sim.render(renderer, now=sim.time)

for name, state in sim.states.items():
    print(name, "speed:", state.speed, "position:", state.position)
