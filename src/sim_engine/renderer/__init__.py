# MIT License (see LICENSE)
"""
Rendering adapters for visualization.

This subpackage provides abstract and concrete renderer implementations:
    - RendererAdapter: Abstract base class defining the rendering interface.
    - DebugRenderer: Text/console output for debugging.
    - NullRenderer: No-op renderer for benchmarks.
    - BufferedRenderer: Records frames for playback or assertions.

The engine has no rendering dependency; these adapters are optional.

Typical usage:
    from sim_engine.renderer import DebugRenderer

    renderer = DebugRenderer()
    sim.render(renderer, now)
"""
from .adapter import (
    RendererAdapter,
    DebugRenderer,
    NullRenderer,
    BufferedRenderer,
)

__all__ = [
    "RendererAdapter",
    "DebugRenderer",
    "NullRenderer",
    "BufferedRenderer",
]
