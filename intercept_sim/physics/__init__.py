"""
InterceptSim Physics Package

Vector math, kinematic integration and engagement constants.

Modules:
    - constants: Gravity, time step, capture radius, acceleration limits
    - vector: Vector3 value type
    - kinematics: Semi-implicit Euler integrator and acceleration limiting
"""

from .constants import (
    CAPTURE_RADIUS_M,
    DEFAULT_DT,
    DEFAULT_GUIDANCE_MODE,
    DEFAULT_NAVIGATION_GAIN,
    DEFAULT_TICK_PERIOD,
    GRAVITY,
    MISSILE_MAX_ACCELERATION,
    TARGET_MAX_ACCELERATION,
)
from .kinematics import advance, limit_acceleration
from .vector import Vector3

__all__ = [
    # Constants
    "GRAVITY",
    "DEFAULT_DT",
    "DEFAULT_TICK_PERIOD",
    "CAPTURE_RADIUS_M",
    "MISSILE_MAX_ACCELERATION",
    "TARGET_MAX_ACCELERATION",
    "DEFAULT_NAVIGATION_GAIN",
    "DEFAULT_GUIDANCE_MODE",
    # Vector math
    "Vector3",
    # Kinematics
    "advance",
    "limit_acceleration",
]
