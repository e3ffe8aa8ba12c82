"""
Kinematics Integrator

Advances point-mass kinematics by one fixed time step and enforces
acceleration-magnitude limits.

Integration scheme: semi-implicit (symplectic) Euler

    v_new = v + a * dt
    x_new = x + v_new * dt

Velocity is updated first, so the position step uses the new velocity. This
has better energy behaviour than explicit Euler at the same small dt without
the cost of a higher-order integrator.

References:
    - Hairer, Lubich, Wanner (2006). "Geometric Numerical Integration", Ch. I.1
    - Zarchan, P. (2012). "Tactical and Strategic Missile Guidance", Ch. 2
"""

import math
from typing import Tuple

import numba
import numpy as np

from .vector import Vector3


@numba.jit(nopython=True, cache=True)
def _semi_implicit_euler(
    pos: np.ndarray, vel: np.ndarray, acc: np.ndarray, dt: float
) -> Tuple[np.ndarray, np.ndarray]:
    """
    JIT-compiled semi-implicit Euler step.

    Args:
        pos: Current position [x, y, z]
        vel: Current velocity [vx, vy, vz]
        acc: Applied acceleration [ax, ay, az]
        dt: Time step [s]

    Returns:
        Tuple of (new_position, new_velocity)
    """
    new_vel = vel + acc * dt
    new_pos = pos + new_vel * dt
    return new_pos, new_vel


def advance(
    position: Vector3, velocity: Vector3, acceleration: Vector3, dt: float
) -> Tuple[Vector3, Vector3]:
    """
    Advance one entity's position and velocity by dt.

    Args:
        position: Current position [m]
        velocity: Current velocity [m/s]
        acceleration: Net acceleration applied over the step [m/s²]
        dt: Time step [s], must be positive and finite

    Returns:
        Tuple of (new_position, new_velocity)

    Raises:
        ValueError: If dt is not a positive finite number
    """
    if not math.isfinite(dt) or dt <= 0:
        raise ValueError(f"Time step must be positive and finite, got {dt}")

    new_pos, new_vel = _semi_implicit_euler(
        position.to_array(), velocity.to_array(), acceleration.to_array(), float(dt)
    )
    return Vector3.from_array(new_pos), Vector3.from_array(new_vel)


def limit_acceleration(acceleration: Vector3, max_magnitude: float) -> Vector3:
    """
    Clamp an acceleration vector to a maximum magnitude.

    Direction is preserved when clamping occurs; vectors within the limit
    are returned unchanged.

    Args:
        acceleration: Commanded acceleration [m/s²]
        max_magnitude: Structural limit [m/s²], must be non-negative

    Returns:
        Acceleration with |a| <= max_magnitude

    Raises:
        ValueError: If max_magnitude is negative
    """
    if max_magnitude < 0:
        raise ValueError(f"Acceleration limit must be non-negative, got {max_magnitude}")

    mag = acceleration.magnitude
    if mag <= max_magnitude:
        return acceleration

    # Re-check after scaling so rounding can never leave |a| above the cap
    limited = acceleration * (max_magnitude / mag)
    if limited.magnitude > max_magnitude:
        limited = limited * (1.0 - 1e-15)
    return limited
