from sim_engine.config import IntegratorConfig
from sim_engine.core.forces import UniformGravity
from sim_engine.core.integrators import Integrator
from sim_engine.renderer import BufferedRenderer
from sim_engine.scene import Simulation, cue_for_tier
from sim_engine.scoring.challenge import ChallengeScorer, accuracy_percent
from sim_engine.types import PhysicalState

sim = Simulation(
    integrator=Integrator(UniformGravity((0.0, -9.8)), IntegratorConfig(substeps=4)),
    scorer=ChallengeScorer(),
)
sim.add_state("ball", PhysicalState(position=(0.0, 0.0), velocity=(5.0, 5.0)))
sim.start_challenge("How far does the ball travel before landing?")

actual = 2 * 5.0 * 5.0 / 9.8
renderer = BufferedRenderer()
now = 0.0
for guess in (4.0, 5.2, 5.1, 5.1, 5.1):
    result = sim.submit_prediction(guess, actual, tolerance=actual, position=(200.0, 120.0), now=now)
    print(f"guess={guess:.2f}  {result.label:<10} +{result.points}  cue={cue_for_tier(result.tier)}")
    for _ in range(30):
        sim.tick(1 / 60)
        now += 1 / 60
    sim.render(renderer, now)

state = sim.challenge
print("score:", state.score, "best streak:", state.best_streak, "accuracy:", accuracy_percent(state), "%")
print("frames:", len(renderer.frames), "particles in last frame:", len(renderer.frames[-1]["particles"]))
