"""
Microbenchmark: time per particle update vs pool size.
Run:
  python benchmarks/bench_particles.py
"""
import time
from sim_engine.effects.particles import ParticleSystem, EmitConfig

def run(n: int, frames: int = 300):
    ps = ParticleSystem(rng=12345)  # determinism
    # long-lived so the pool size stays ~constant while timing
    cfg = EmitConfig(lifetime=60.0, lifetime_variance=0.0)
    ps.emit((0.0, 0.0), n, "#ffffff", cfg)

    # warmup
    for _ in range(30):
        ps.update(1 / 60)

    t0 = time.perf_counter()
    for _ in range(frames):
        ps.update(1 / 60)
    t1 = time.perf_counter()

    return (t1 - t0) / frames

if __name__ == "__main__":
    for n in [10, 100, 500, 1000, 5000]:
        per_frame = run(n)
        print(f"N={n:5d}  update={1e3*per_frame:8.3f} ms  frames/s={1/per_frame:10.1f}")
