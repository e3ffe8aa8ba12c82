"""
Physical and Engagement Constants for Intercept Simulation

All constants are in SI units (meters, seconds, m/s, m/s²).

Axis convention (right-handed, Y-up):
    - X: East [m]
    - Y: Altitude [m] (up)
    - Z: North [m]

References:
    - CODATA 2018: Standard acceleration of gravity
    - Zarchan, P. (2012). "Tactical and Strategic Missile Guidance", 6th Ed.
"""

from typing import Final

# =============================================================================
# ENVIRONMENT
# =============================================================================

GRAVITY: Final[float] = 9.81
"""Downward gravitational acceleration magnitude [m/s²] along the altitude axis"""

GROUND_ALTITUDE: Final[float] = 0.0
"""Ground plane altitude [m]; a missile below this has impacted"""

ALTITUDE_AXIS: Final[int] = 1
"""Index of the altitude (up) component in [x, y, z]"""

# =============================================================================
# TIME STEPPING
# =============================================================================

DEFAULT_DT: Final[float] = 0.016
"""Physics time step [s] (~60 steps per second)"""

DEFAULT_TICK_PERIOD: Final[float] = DEFAULT_DT
"""Wall-clock period of the background tick loop [s]"""

# =============================================================================
# ENGAGEMENT
# =============================================================================

CAPTURE_RADIUS_M: Final[float] = 5.0
"""Miss distance below which an intercept is declared [m]"""

MISSILE_MAX_ACCELERATION: Final[float] = 300.0
"""Interceptor structural acceleration limit [m/s²] (~30 g)"""

TARGET_MAX_ACCELERATION: Final[float] = 90.0
"""Target acceleration limit [m/s²] (~9 g); carried for observability"""

DEFAULT_NAVIGATION_GAIN: Final[float] = 4.0
"""Proportional navigation gain N (typical range 3-5)"""

DEFAULT_GUIDANCE_MODE: Final[str] = "ProNav"
"""Guidance law used at reset and for unrecognised mode names"""

# =============================================================================
# NUMERICAL DEGENERACY THRESHOLDS
# =============================================================================

MIN_RANGE_M: Final[float] = 1e-6
"""Line-of-sight length below which guidance commands are zero [m]"""

MIN_SPEED_MPS: Final[float] = 1e-6
"""Interceptor speed below which pursuit laws cannot align velocity [m/s]"""

CLOSING_SPEED_EPS: Final[float] = 1.0
"""Floor on closing speed used for time-to-go estimates [m/s]"""
