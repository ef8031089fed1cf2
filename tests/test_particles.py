import math

import numpy as np
import pytest
from sim_engine.effects.particles import (
    ParticleSystem, EmitConfig, CONFETTI_COLORS, SPARKS,
)


class RecordingSink:
    def __init__(self):
        self.calls = []

    def draw_particles(self, particles):
        self.calls.append(particles)


def test_emit_then_count():
    ps = ParticleSystem(rng=1)
    ps.emit((100.0, 50.0), 25, "#fff")
    assert ps.count == 25
    assert all(p.life_fraction == 1.0 for p in ps.particles)
    assert all(p.position == (100.0, 50.0) for p in ps.particles)


def test_all_particles_expire():
    """After elapsed time >= every sampled lifetime, the pool is empty."""
    ps = ParticleSystem(rng=2)
    ps.emit((0.0, 0.0), 40, "#fff")
    longest = max(p.max_life for p in ps.particles)
    dt = 1 / 60
    elapsed = 0.0
    while elapsed < longest + dt:
        ps.update(dt)
        elapsed += dt
    assert ps.count == 0
    assert ps.particles == ()


def test_life_never_increases_and_count_tracks_live():
    ps = ParticleSystem(rng=3)
    ps.emit((0.0, 0.0), 30, "#fff")
    last = {id(p): p.life for p in ps.particles}
    for _ in range(50):
        ps.update(1 / 60)
        assert ps.count == len(ps.particles)
        for p in ps.particles:
            assert p.life > 0
            assert p.life <= last[id(p)]
            last[id(p)] = p.life


def test_sampling_stays_within_variance():
    cfg = EmitConfig(speed=150, speed_variance=50, lifetime=0.8, lifetime_variance=0.3,
                     size=4, size_variance=2, angle=0.5, spread=0.25)
    ps = ParticleSystem(rng=4)
    ps.emit((0.0, 0.0), 500, "#fff", cfg)
    for p in ps.particles:
        speed = math.hypot(p.vx, p.vy)
        assert 100.0 - 1e-9 <= speed <= 200.0 + 1e-9
        assert 0.5 <= p.max_life <= 1.1
        assert 2.0 <= p.size <= 6.0
        assert 0.25 - 1e-9 <= math.atan2(p.vy, p.vx) <= 0.75 + 1e-9


def test_lifetime_and_size_floors():
    cfg = EmitConfig(lifetime=0.05, lifetime_variance=0.0, size=0.2, size_variance=0.0)
    ps = ParticleSystem(rng=5)
    ps.emit((0.0, 0.0), 10, "#fff", cfg)
    assert all(p.max_life == pytest.approx(0.1) for p in ps.particles)
    assert all(p.size == 1.0 for p in ps.particles)


def test_seeded_emission_is_reproducible():
    a, b = ParticleSystem(rng=42), ParticleSystem(rng=42)
    a.emit((10.0, 10.0), 20, "#abc")
    b.emit((10.0, 10.0), 20, "#abc")
    assert [(p.vx, p.vy, p.life, p.size) for p in a.particles] == \
           [(p.vx, p.vy, p.life, p.size) for p in b.particles]


def test_update_order_position_then_gravity():
    """Position uses the velocity from before this frame's gravity kick."""
    cfg = EmitConfig(speed=0.0, speed_variance=0.0, gravity=100.0, drag=1.0,
                     lifetime=5.0, lifetime_variance=0.0)
    ps = ParticleSystem(rng=6)
    ps.emit((0.0, 0.0), 1, "#fff", cfg)
    ps.update(0.1)
    p = ps.particles[0]
    assert p.y == pytest.approx(0.0)
    assert p.vy == pytest.approx(10.0)
    ps.update(0.1)
    assert p.y == pytest.approx(1.0)
    assert p.life == pytest.approx(4.8)


def test_drag_is_frame_rate_independent():
    cfg = EmitConfig(speed=100.0, speed_variance=0.0, gravity=0.0, drag=0.9,
                     lifetime=10.0, lifetime_variance=0.0, spread=0.0)
    fast, slow = ParticleSystem(rng=7), ParticleSystem(rng=7)
    fast.emit((0.0, 0.0), 1, "#fff", cfg)
    slow.emit((0.0, 0.0), 1, "#fff", cfg)
    for _ in range(60):
        fast.update(1 / 60)
    for _ in range(30):
        slow.update(1 / 30)
    expected = 100.0 * 0.9 ** 60
    assert fast.particles[0].vx == pytest.approx(expected, rel=1e-9)
    assert slow.particles[0].vx == pytest.approx(expected, rel=1e-9)


def test_large_dt_drops_everything_and_zero_dt_is_noop():
    ps = ParticleSystem(rng=8)
    ps.emit((0.0, 0.0), 10, "#fff")
    before = [(p.x, p.y, p.life) for p in ps.particles]
    ps.update(0.0)
    ps.update(-1.0)
    assert [(p.x, p.y, p.life) for p in ps.particles] == before
    ps.update(10.0)
    assert ps.count == 0


def test_clear_and_draw():
    ps = ParticleSystem(rng=9)
    ps.emit((0.0, 0.0), 5, "#fff")
    sink = RecordingSink()
    ps.draw(sink)
    assert len(sink.calls) == 1 and len(sink.calls[0]) == 5
    assert isinstance(sink.calls[0], tuple)
    ps.clear()
    assert ps.count == 0
    ps.draw(sink)
    assert sink.calls[-1] == ()


def test_emit_validation():
    ps = ParticleSystem(rng=10)
    ps.emit((0.0, 0.0), 0, "#fff")
    assert ps.count == 0
    with pytest.raises(ValueError):
        ps.emit((0.0, 0.0), -1, "#fff")
    with pytest.raises(ValueError):
        EmitConfig(shape="hexagon")
    with pytest.raises(ValueError):
        EmitConfig(drag=0.0)
    with pytest.raises(ValueError):
        EmitConfig(speed_variance=-1.0)
    with pytest.raises(ValueError):
        EmitConfig(spread=-0.1)


def test_presets():
    ps = ParticleSystem(rng=11)
    ps.emit_sparks((0.0, 0.0), 8)
    assert all(p.shape == "spark" and p.gravity == SPARKS.gravity for p in ps.particles)

    ps.clear()
    ps.emit_confetti((0.0, 0.0), 12)
    assert [p.color for p in ps.particles] == [CONFETTI_COLORS[i % 6] for i in range(12)]
    assert all(p.shape == "square" and p.vy < 0 for p in ps.particles)
    assert all(200.0 <= math.hypot(p.vx, p.vy) <= 350.0 for p in ps.particles)

    ps.clear()
    ps.emit_trail((0.0, 0.0), heading=0.0)
    assert ps.count == 2
    assert all(p.vx < 0 for p in ps.particles)

    ps.clear()
    ps.emit_glow((0.0, 0.0), 4)
    ps.emit_bubbles((0.0, 0.0), 4)
    assert ps.count == 8
    assert all(p.gravity < 0 for p in ps.particles)


def test_generator_can_be_injected():
    rng = np.random.default_rng(99)
    ps = ParticleSystem(rng=rng)
    ps.emit((0.0, 0.0), 3, "#fff")
    assert ps.count == 3


def test_particles_snapshot_is_a_copy_of_the_pool():
    ps = ParticleSystem(rng=12)
    ps.emit((0.0, 0.0), 2, "#fff")
    snap = ps.particles
    ps.emit((0.0, 0.0), 3, "#fff")
    assert len(snap) == 2 and ps.count == 5
    ps.clear()
    assert len(snap) == 2
