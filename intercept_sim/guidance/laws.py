"""
Guidance Laws

Stateless closed-loop guidance laws that turn interceptor and target
kinematics into a commanded acceleration.

Commands are expressed in the gravity-free guidance frame. Gravity is added
by the engine after limiting, so any sag it causes shows up as line-of-sight
error on the next tick and the law corrects it through feedback.

Laws:
    - ProNav: proportional navigation, a = N * Vc * (omega x r_hat)
    - PurePursuit: align velocity with the bearing to the target
    - LeadPursuit: align velocity with a predicted intercept point

References:
    - Zarchan, P. (2012). "Tactical and Strategic Missile Guidance", Ch. 2, 8
    - Shneydor, N.A. (1998). "Missile Guidance and Pursuit", Ch. 3, 5
"""

import logging
from typing import Callable, Dict, List, Protocol, Tuple

import numpy as np

from intercept_sim.physics.constants import (
    CLOSING_SPEED_EPS,
    DEFAULT_GUIDANCE_MODE,
    DEFAULT_NAVIGATION_GAIN,
    MIN_RANGE_M,
    MIN_SPEED_MPS,
)
from intercept_sim.physics.vector import Vector3

logger = logging.getLogger(__name__)


class Kinematic(Protocol):
    """Anything with a position and velocity (Entity or EntityState)."""

    position: Vector3
    velocity: Vector3


def _relative_geometry(
    interceptor: Kinematic, target: Kinematic
) -> Tuple[np.ndarray, np.ndarray]:
    """Line-of-sight vector and relative velocity (target minus interceptor)."""
    r = target.position.to_array() - interceptor.position.to_array()
    v = target.velocity.to_array() - interceptor.velocity.to_array()
    return r, v


class GuidanceLaw:
    """
    Base class for guidance laws.

    Subclasses implement compute_command() as a pure function of the current
    interceptor and target kinematics. No state is kept between calls, so
    laws can be swapped mid-flight.
    """

    name = "Guidance"

    def compute_command(self, interceptor: Kinematic, target: Kinematic, dt: float) -> Vector3:
        """
        Compute the commanded acceleration for the interceptor.

        Args:
            interceptor: Interceptor kinematics
            target: Target kinematics
            dt: Time step [s]

        Returns:
            Commanded acceleration [m/s²] in the guidance frame
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ProportionalNavigation(GuidanceLaw):
    """
    True proportional navigation (3D vector form).

        r     = p_t - p_m
        v     = v_t - v_m
        Vc    = -(r . v) / |r|
        omega = (r x v) / |r|²
        a     = N * Vc * (omega x r_hat)

    The command is always perpendicular to the line of sight.

    Reference: Zarchan (2012), Eq. 2.1 and Ch. 8
    """

    name = "ProNav"

    def __init__(self, navigation_gain: float = DEFAULT_NAVIGATION_GAIN):
        """
        Args:
            navigation_gain: Effective navigation ratio N (typically 3-5)
        """
        self.navigation_gain = navigation_gain

    def compute_command(self, interceptor: Kinematic, target: Kinematic, dt: float) -> Vector3:
        r, v = _relative_geometry(interceptor, target)
        range_m = np.linalg.norm(r)

        # Co-located: LOS direction undefined
        if range_m < MIN_RANGE_M:
            return Vector3.zero()

        r_hat = r / range_m
        closing_velocity = -np.dot(r, v) / range_m
        los_rate = np.cross(r, v) / (range_m * range_m)

        accel = self.navigation_gain * closing_velocity * np.cross(los_rate, r_hat)
        return Vector3.from_array(accel)

    def __repr__(self) -> str:
        return f"ProportionalNavigation(navigation_gain={self.navigation_gain})"


def _steer_toward(
    interceptor: Kinematic, aim_point: np.ndarray, max_accel: float, dt: float
) -> Vector3:
    """
    Acceleration that rotates the interceptor velocity onto the aim bearing
    within one step, keeping current speed.
    """
    to_aim = aim_point - interceptor.position.to_array()
    distance = np.linalg.norm(to_aim)
    if distance < MIN_RANGE_M:
        return Vector3.zero()

    bearing = to_aim / distance
    vel = interceptor.velocity.to_array()
    speed = np.linalg.norm(vel)

    # Stationary interceptor: push straight down the bearing at full authority
    if speed < MIN_SPEED_MPS:
        return Vector3.from_array(bearing * max_accel)

    desired_vel = bearing * speed
    return Vector3.from_array((desired_vel - vel) / dt)


class PurePursuit(GuidanceLaw):
    """
    Pure pursuit: steer the velocity vector at the target's current position.

    No prediction of target motion; against a crossing target the
    interceptor ends up in a tail chase.

    Reference: Shneydor (1998), Ch. 3
    """

    name = "PurePursuit"

    def compute_command(self, interceptor: Kinematic, target: Kinematic, dt: float) -> Vector3:
        max_accel = getattr(interceptor, "max_acceleration", 0.0)
        return _steer_toward(interceptor, target.position.to_array(), max_accel, dt)


class LeadPursuit(GuidanceLaw):
    """
    Lead pursuit: steer at a predicted intercept point.

        t_go = |r| / max(Vc, eps)
        aim  = p_t + v_t * t_go

    Reference: Shneydor (1998), Ch. 5
    """

    name = "LeadPursuit"

    def compute_command(self, interceptor: Kinematic, target: Kinematic, dt: float) -> Vector3:
        r, v = _relative_geometry(interceptor, target)
        range_m = np.linalg.norm(r)
        if range_m < MIN_RANGE_M:
            return Vector3.zero()

        closing_velocity = -np.dot(r, v) / range_m
        time_to_go = range_m / max(closing_velocity, CLOSING_SPEED_EPS)
        aim_point = target.position.to_array() + target.velocity.to_array() * time_to_go

        max_accel = getattr(interceptor, "max_acceleration", 0.0)
        return _steer_toward(interceptor, aim_point, max_accel, dt)


# =============================================================================
# REGISTRY
# =============================================================================

GUIDANCE_LAWS: Dict[str, Callable[[], GuidanceLaw]] = {
    ProportionalNavigation.name: ProportionalNavigation,
    PurePursuit.name: PurePursuit,
    LeadPursuit.name: LeadPursuit,
}


def _normalize_key(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch.isalnum())


def register_guidance_law(name: str, factory: Callable[[], GuidanceLaw]) -> None:
    """
    Register a guidance law under a mode name.

    Args:
        name: Mode name accepted by get_guidance_law()
        factory: Zero-argument callable returning a GuidanceLaw
    """
    GUIDANCE_LAWS[name] = factory
    logger.debug("Registered guidance law %s", name)


def available_guidance_modes() -> List[str]:
    """Names accepted by get_guidance_law()."""
    return list(GUIDANCE_LAWS)


def resolve_guidance_mode(name: str) -> str:
    """
    Map a requested mode name to a registered one.

    Matching ignores case, spaces and punctuation ("pure pursuit" matches
    "PurePursuit"). Unknown names resolve to the default mode.
    """
    if name in GUIDANCE_LAWS:
        return name

    key = _normalize_key(name or "")
    for registered in GUIDANCE_LAWS:
        if _normalize_key(registered) == key:
            return registered

    logger.warning("Unknown guidance mode %r, falling back to %s", name, DEFAULT_GUIDANCE_MODE)
    return DEFAULT_GUIDANCE_MODE


def get_guidance_law(name: str) -> GuidanceLaw:
    """
    Create the guidance law registered under name.

    Args:
        name: Guidance mode name

    Returns:
        GuidanceLaw instance; the default law for unrecognised names
    """
    return GUIDANCE_LAWS[resolve_guidance_mode(name)]()
