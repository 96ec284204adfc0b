"""
Physical Constants & Lab Defaults
=================================
Fixed values shared by the solver, the stepping engine and the
command-line runner:
  - Standard gravity used by default
  - Default launch parameters
  - Valid input ranges (the input layer clamps into these)
  - Fixed simulation time step (~60 frames per second)

All values are SI (m, s, m/s, m/s²) except the launch angle, which is
entered in degrees and converted to radians internally.
"""

import numpy as np


# ── Physical constants ─────────────────────────────────────────────────────
STANDARD_GRAVITY     = 9.8         # m/s²  (simplified textbook value)

# ── Default launch parameters ──────────────────────────────────────────────
DEFAULT_INITIAL_SPEED = 20.0       # m/s
DEFAULT_LAUNCH_ANGLE  = 45.0       # degrees (maximum range for a given speed)

# ── Parameter limits (min, max) ────────────────────────────────────────────
LIMITS = {
    'speed':   (1.0, 100.0),       # m/s   (100 m/s ≈ 360 km/h)
    'angle':   (5.0, 85.0),        # degrees, never fully horizontal/vertical
    'gravity': (1.0, 20.0),        # m/s²  (about 2× Earth)
}

PHYSICAL_ANGLE_RANGE = (0.0, 90.0)  # degrees, any launch the solver accepts

# ── Simulation settings ────────────────────────────────────────────────────
TIME_STEP       = 0.016            # s  per tick (≈ 60 FPS)
DECIMAL_PLACES  = 2                # precision of printed results

# ── Angle conversion ───────────────────────────────────────────────────────
DEG_TO_RAD = np.pi / 180.0
RAD_TO_DEG = 180.0 / np.pi
