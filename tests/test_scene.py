import io

import numpy as np
import pytest
from sim_engine.config import IntegratorConfig
from sim_engine.core.forces import UniformGravity
from sim_engine.core.integrators import Integrator, NonFiniteStateError
from sim_engine.core.invariants import speed
from sim_engine.effects.particles import ParticleSystem
from sim_engine.renderer import BufferedRenderer, DebugRenderer, NullRenderer
from sim_engine.scene import Simulation, cue_for_tier
from sim_engine.scoring.challenge import ChallengeScorer, Tier
from sim_engine.types import PhysicalState, FieldSpec, Domain


def _sim(**kw) -> Simulation:
    kw.setdefault("integrator", Integrator(config=IntegratorConfig(strict=True)))
    kw.setdefault("particles", ParticleSystem(rng=0))
    return Simulation(**kw)


def test_tick_integrates_then_updates_particles():
    sim = _sim(integrator=Integrator(UniformGravity((0.0, -9.8)), IntegratorConfig(strict=True)))
    sim.add_state("ball", PhysicalState(position=(0.0, 10.0), velocity=(1.0, 0.0)))
    sim.particles.emit((0.0, 0.0), 5, "#fff")
    life_before = [p.life for p in sim.particles.particles]

    report = sim.tick(1 / 60)
    assert report.dt == pytest.approx(1 / 60)
    assert sim.time == pytest.approx(1 / 60)
    assert sim.states["ball"].position[0] == pytest.approx(1 / 60)
    assert sim.states["ball"].velocity[1] < 0
    assert all(p.life < l for p, l in zip(sim.particles.particles, life_before))


def test_tick_clamps_hitches():
    sim = _sim()
    sim.add_state("p", PhysicalState(position=(0.0, 0.0), velocity=(1.0, 0.0)))
    report = sim.tick(3.0)
    assert report.dt == pytest.approx(0.05)
    assert sim.states["p"].position[0] == pytest.approx(0.05)
    assert sim.tick(-1.0).dt == 0.0


def test_pause_resume_and_needs_frame():
    sim = _sim()
    sim.add_state("p", PhysicalState(position=(0.0, 0.0), velocity=(1.0, 0.0)))
    assert sim.needs_frame
    sim.pause()
    assert not sim.needs_frame
    report = sim.tick(1 / 60)
    assert report.dt == 0.0
    assert sim.states["p"].position[0] == 0.0

    sim.particles.emit((0.0, 0.0), 1, "#fff")
    assert sim.needs_frame
    sim.resume()
    sim.tick(1 / 60)
    assert sim.states["p"].position[0] > 0.0


def test_reset_replaces_state_wholesale():
    sim = _sim(scorer=ChallengeScorer())
    initial = PhysicalState(position=(0.0, 0.0), velocity=(1.0, 0.0))
    sim.add_state("p", initial)
    for _ in range(10):
        sim.tick(1 / 60)
    sim.submit_prediction(1.0, 1.0, 1.0, (10.0, 10.0), now=0.0)
    assert sim.particles.count > 0 and sim.popups

    sim.reset()
    assert np.array_equal(sim.states["p"].position, initial.position)
    assert sim.states["p"] is not initial
    assert sim.time == 0.0
    assert sim.particles.count == 0
    assert sim.popups == []
    assert sim.challenge.attempts == 1

    sim.reset({"q": PhysicalState(position=(5.0, 5.0), velocity=(0.0, 0.0))})
    assert list(sim.states) == ["q"]
    sim.reset()
    assert list(sim.states) == ["q"]


def test_duplicate_state_name_rejected():
    sim = _sim()
    sim.add_state("p", PhysicalState())
    with pytest.raises(ValueError):
        sim.add_state("p", PhysicalState())


def test_domain_exit_reported_once_and_frozen():
    sim = _sim(domain=Domain(lower=(-1.0, -1.0), upper=(1.0, 1.0)))
    sim.add_state("fast", PhysicalState(position=(0.9, 0.0), velocity=(10.0, 0.0)))
    sim.add_state("still", PhysicalState(position=(0.0, 0.0), velocity=(0.0, 0.0)))

    report = sim.tick(0.05)
    assert report.exited == ["fast"]
    frozen = sim.states["fast"].position.copy()

    report = sim.tick(0.05)
    assert report.exited == []
    assert np.array_equal(sim.states["fast"].position, frozen)
    assert sim.exited == {"fast"}


def test_tick_is_not_reentrant():
    sim = _sim()

    class Reentrant:
        def acceleration(self, state, charge, mass):
            sim.tick(1 / 60)
            return np.zeros_like(state.position)

    sim.integrator = Integrator(Reentrant(), IntegratorConfig(strict=True))
    sim.add_state("p", PhysicalState())
    with pytest.raises(RuntimeError):
        sim.tick(1 / 60)
    # The guard is released after the failed tick
    sim.integrator = Integrator(config=IntegratorConfig(strict=True))
    assert sim.tick(1 / 60).dt > 0


def test_non_finite_frame_dt():
    strict = _sim()
    with pytest.raises(NonFiniteStateError):
        strict.tick(float("nan"))

    lenient = _sim(integrator=Integrator(config=IntegratorConfig(strict=False)))
    lenient.add_state("p", PhysicalState(position=(0.0, 0.0), velocity=(1.0, 0.0)))
    report = lenient.tick(float("inf"))
    assert report.dropped and report.dt == 0.0
    assert lenient.time == 0.0


def test_submit_prediction_effects_and_cues():
    sim = _sim(scorer=ChallengeScorer())
    sim.start_challenge("Predict g")
    assert sim.challenge.active

    result = sim.submit_prediction(9.8, 9.8, 9.8, (50.0, 60.0), now=1.0)
    assert result.tier == Tier.PERFECT
    assert sim.challenge.score == 3
    assert sim.particles.count == 30
    assert sim.popups[-1].text == "Perfect!" and sim.popups[-1].x == 50.0
    assert cue_for_tier(result.tier) == "success"

    sim.particles.clear()
    result = sim.submit_prediction(15.0, 9.8, 9.8, (50.0, 60.0), now=2.0)
    assert result.tier == Tier.MISS
    assert sim.particles.count == 0
    assert sim.challenge.streak == 0
    assert cue_for_tier(result.tier) == "incorrect"

    result = sim.submit_target((3.0, 4.0), (0.0, 0.0), 100.0, now=3.0)
    assert result.tier == Tier.GREAT
    assert sim.particles.count == 12
    assert cue_for_tier("close") == "correct"


def test_submit_without_scorer_fails():
    sim = _sim()
    with pytest.raises(RuntimeError):
        sim.submit_prediction(1.0, 1.0, 1.0, (0.0, 0.0), now=0.0)


def test_render_snapshots_and_prunes_popups():
    sim = _sim(scorer=ChallengeScorer())
    sim.add_state("p", PhysicalState(position=(1.0, 2.0), velocity=(0.0, 0.0)))
    sim.submit_prediction(11.0, 9.8, 9.8, (0.0, 100.0), now=0.0)

    renderer = BufferedRenderer()
    sim.render(renderer, now=0.75)
    frame = renderer.frames[-1]
    assert frame["states"]["p"]["position"] == [1.0, 2.0]
    assert len(frame["particles"]) == 12
    assert frame["challenge"] == {"score": 2, "attempts": 1, "streak": 1}
    assert frame["popups"][0]["alpha"] == pytest.approx(0.5)
    assert frame["popups"][0]["position"] == (0.0, pytest.approx(55.0))

    sim.render(renderer, now=5.0)
    assert sim.popups == []
    assert renderer.frames[-1]["popups"] == []

    out = io.StringIO()
    sim.render(DebugRenderer(output=out), now=5.0)
    text = out.getvalue()
    assert "[p] @ (1.00, 2.00)" in text
    assert "challenge: score=2" in text


def test_cyclotron_screen_conserves_speed():
    sim = _sim(field_spec=FieldSpec.along_z(4.0))
    sim.add_state("p+", PhysicalState(position=(0.0, 0.0), velocity=(3.0, 0.0), charge=1.0, mass=1.0))
    sim.add_state("e-", PhysicalState(position=(0.0, 0.0), velocity=(3.0, 0.0), charge=-1.0, mass=0.5))
    sim.tick(1 / 60)
    # Opposite charges curve in opposite directions
    assert sim.states["p+"].position[1] < 0.0 < sim.states["e-"].position[1]
    for _ in range(599):
        sim.tick(1 / 60)
    for name in ("p+", "e-"):
        assert speed(sim.states[name]) == pytest.approx(3.0, rel=1e-9)


def test_render_simulation_convenience():
    sim = _sim(scorer=ChallengeScorer())
    sim.add_state("p", PhysicalState())
    sim.submit_target((0.0, 0.0), (0.0, 0.0), 10.0, now=0.0)
    NullRenderer().render_simulation(sim, now=0.1)
    renderer = BufferedRenderer()
    renderer.render_simulation(sim, now=0.1)
    assert len(renderer.frames) == 1
    assert len(renderer.frames[0]["particles"]) == 30
    renderer.clear()
    assert renderer.frames == []


def test_massless_states_rejected_before_any_tick():
    sim = _sim()
    with pytest.raises(ValueError):
        sim.add_state("b", PhysicalState(mass=0.0))
    assert "b" not in sim.states
    with pytest.raises(ValueError):
        sim.reset({"b": PhysicalState(mass=-1.0)})
    with pytest.raises(ValueError):
        _sim(states={"b": PhysicalState(mass=float("nan"))})


def test_failed_tick_commits_nothing():
    """A bad second state leaves the first one, the clock and the particles untouched."""
    sim = _sim()
    sim.add_state("a", PhysicalState(position=(0.0, 0.0), velocity=(1.0, 0.0)))
    sim.add_state("b", PhysicalState(position=(float("nan"), 0.0), velocity=(0.0, 0.0)))
    sim.particles.emit((0.0, 0.0), 3, "#fff")
    life_before = [p.life for p in sim.particles.particles]

    with pytest.raises(NonFiniteStateError):
        sim.tick(1 / 60)
    assert sim.states["a"].position[0] == 0.0
    assert sim.time == 0.0
    assert [p.life for p in sim.particles.particles] == life_before


def test_lenient_drop_freezes_the_whole_tick():
    sim = _sim(integrator=Integrator(config=IntegratorConfig(strict=False)))
    sim.add_state("a", PhysicalState(position=(0.0, 0.0), velocity=(1.0, 0.0)))
    sim.add_state("b", PhysicalState(position=(float("nan"), 0.0), velocity=(0.0, 0.0)))
    sim.particles.emit((0.0, 0.0), 3, "#fff")
    life_before = [p.life for p in sim.particles.particles]

    report = sim.tick(1 / 60)
    assert report.dropped
    assert report.dt == 0.0
    assert sim.time == 0.0
    assert sim.states["a"].position[0] == 0.0
    assert sim.time == sim.states["a"].time == sim.states["b"].time
    assert [p.life for p in sim.particles.particles] == life_before
    assert sim.integrator.dropped_ticks == 1
