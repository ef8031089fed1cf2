# MIT License (see LICENSE)
"""
Engine-wide default constants.

Times are in seconds. Particle quantities live in screen (pixel) space,
independent of whatever physical units a simulation integrates in.
"""
from __future__ import annotations

# Largest wall-clock delta a single tick may integrate. Frame hitches and
# backgrounded tabs otherwise produce multi-second steps.
MAX_FRAME_DT: float = 0.05

# Frame period that per-frame retention factors (particle drag) refer to.
REFERENCE_FRAME_DT: float = 1.0 / 60.0

# Default number of integration sub-steps per visible frame.
DEFAULT_SUBSTEPS: int = 4

# Score popups fade out over this many seconds while rising.
POPUP_DURATION: float = 1.5
POPUP_RISE_SPEED: float = 60.0  # px/s
POPUP_SCALE_PULSE: float = 0.3

# Floors applied after sampling particle lifetime/size.
MIN_PARTICLE_LIFETIME: float = 0.1
MIN_PARTICLE_SIZE: float = 1.0
