# constants.py
"""
Application-level constants.

These values are fixed for the lifetime of the engine. They define the
particle field's look and motion (density anchor, wrap margin, hue cycle,
link distance) and the host window defaults. Anything a user is expected
to tune lives in config.json instead.
"""

# --- Density ---
# Reference viewport the base count is calibrated against (1440x900).
REFERENCE_AREA = 1440 * 900
# The field never drops below this many particles, however small the surface.
MIN_PARTICLE_COUNT = 40

# --- Seeding ranges ---
VELOCITY_RANGE = (-0.25, 0.25)
SIZE_RANGE = (0.6, 1.8)
# Hue cycle: blue (210) -> purple (265) -> pink (320).
HUE_MIN = 210.0
HUE_MAX = 320.0

# --- Per-frame motion ---
# Particles may drift this far past an edge before wrapping to the other side.
WRAP_MARGIN = 20.0
# Added to every hue once per frame, not scaled by elapsed time.
HUE_DRIFT = 0.02

# --- Rendering ---
SATURATION = 80
LIGHTNESS = 65
# Particle alpha is opacity + this boost, capped at PARTICLE_ALPHA_CAP.
PARTICLE_ALPHA_BOOST = 0.2
PARTICLE_ALPHA_CAP = 0.9
# Pairs closer than this (strictly) are linked.
LINK_MAX_DISTANCE = 140.0
LINK_MIN_WIDTH = 0.4
LINK_WIDTH_SCALE = 1.2

# --- Default field configuration ---
DEFAULT_BASE_COUNT = 120
DEFAULT_OPACITY = 0.5
DEFAULT_LINK = True

# --- Host window defaults ---
FPS = 60
WINDOW_SIZE = (1440, 900)
BACKGROUND_COLOR = (11, 11, 20) # Near-black navy
# The field layer is composited over the background at this opacity.
LAYER_OPACITY = 0.6
