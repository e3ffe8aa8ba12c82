"""
Scenario and Engine Configuration

Dataclass configuration for the engagement geometry and the engine's
physics/timing parameters, plus construction of the entities a reset
restores.

Default scenario (Y-up: X=East, Y=Altitude, Z=North):
    - Target at (5000, 2000, 5000) m flying (-200, 0, -100) m/s, level
    - Missile at the origin with launch velocity (10, 10, 10) m/s
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Tuple

from intercept_sim.physics.constants import (
    CAPTURE_RADIUS_M,
    DEFAULT_DT,
    DEFAULT_GUIDANCE_MODE,
    DEFAULT_NAVIGATION_GAIN,
    DEFAULT_TICK_PERIOD,
    GRAVITY,
    MISSILE_MAX_ACCELERATION,
    TARGET_MAX_ACCELERATION,
)
from intercept_sim.physics.vector import Vector3

from .objects import Entity, make_missile, make_target

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityConfig:
    """Initial conditions for one entity."""

    entity_id: str
    position: Vector3
    velocity: Vector3
    max_acceleration: float


@dataclass(frozen=True)
class ScenarioConfig:
    """Engagement geometry restored on every reset."""

    name: str = "Default Engagement"
    description: str = "Level crossing target, ground-launched interceptor"
    duration_s: float = 120.0
    target: EntityConfig = field(
        default_factory=lambda: EntityConfig(
            entity_id="target-1",
            position=Vector3(5000.0, 2000.0, 5000.0),
            velocity=Vector3(-200.0, 0.0, -100.0),
            max_acceleration=TARGET_MAX_ACCELERATION,
        )
    )
    missile: EntityConfig = field(
        default_factory=lambda: EntityConfig(
            entity_id="missile-1",
            position=Vector3(0.0, 0.0, 0.0),
            velocity=Vector3(10.0, 10.0, 10.0),
            max_acceleration=MISSILE_MAX_ACCELERATION,
        )
    )

    def validated(self) -> "ScenarioConfig":
        """
        Return a copy safe to integrate.

        An entity with a non-finite position or velocity is replaced by its
        default; a negative or non-finite acceleration limit falls back to
        the role default.
        """
        defaults = ScenarioConfig()
        target = _validated_entity(self.target, defaults.target)
        missile = _validated_entity(self.missile, defaults.missile)
        if target is self.target and missile is self.missile:
            return self
        return replace(self, target=target, missile=missile)

    def build_entities(self, guidance_mode: str) -> Tuple[Entity, Entity]:
        """
        Construct fresh target and missile entities.

        Args:
            guidance_mode: Guidance law name mirrored onto the missile

        Returns:
            Tuple of (target, missile)
        """
        target = make_target(
            self.target.entity_id,
            self.target.position,
            self.target.velocity,
            self.target.max_acceleration,
        )
        missile = make_missile(
            self.missile.entity_id,
            self.missile.position,
            self.missile.velocity,
            self.missile.max_acceleration,
            guidance_mode=guidance_mode,
        )
        return target, missile


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine physics and timing parameters.

    Attributes:
        dt_s: Physics time step [s]
        tick_period_s: Wall-clock period of the background loop [s]
        capture_radius_m: Intercept distance threshold [m]
        gravity_mps2: Gravity magnitude applied to the missile [m/s²]
        guidance_mode: Guidance law selected at reset
        navigation_gain: ProNav gain N
    """

    dt_s: float = DEFAULT_DT
    tick_period_s: float = DEFAULT_TICK_PERIOD
    capture_radius_m: float = CAPTURE_RADIUS_M
    gravity_mps2: float = GRAVITY
    guidance_mode: str = DEFAULT_GUIDANCE_MODE
    navigation_gain: float = DEFAULT_NAVIGATION_GAIN

    def validated(self) -> "EngineConfig":
        """
        Return a copy with invalid values replaced by defaults.

        Non-positive or non-finite time steps, periods, radii and gains fall
        back to their defaults; a negative or non-finite gravity falls back
        to standard gravity. Each substitution is logged.
        """
        defaults = EngineConfig()
        changes = {}

        for name in ("dt_s", "tick_period_s", "capture_radius_m", "navigation_gain"):
            value = getattr(self, name)
            if not _is_positive(value):
                logger.warning(
                    "Invalid %s=%r, using default %r", name, value, getattr(defaults, name)
                )
                changes[name] = getattr(defaults, name)

        if not (_is_number(self.gravity_mps2) and self.gravity_mps2 >= 0):
            logger.warning(
                "Invalid gravity_mps2=%r, using default %r", self.gravity_mps2, GRAVITY
            )
            changes["gravity_mps2"] = GRAVITY

        if not isinstance(self.guidance_mode, str) or not self.guidance_mode:
            changes["guidance_mode"] = DEFAULT_GUIDANCE_MODE

        return replace(self, **changes) if changes else self


def _validated_entity(config: EntityConfig, default: EntityConfig) -> EntityConfig:
    if not (config.position.is_finite() and config.velocity.is_finite()):
        logger.warning("Non-finite initial state for %s, using defaults", config.entity_id)
        return replace(default, entity_id=config.entity_id)

    if not (_is_number(config.max_acceleration) and config.max_acceleration >= 0):
        logger.warning(
            "Invalid max_acceleration=%r for %s, using %r",
            config.max_acceleration,
            config.entity_id,
            default.max_acceleration,
        )
        return replace(config, max_acceleration=default.max_acceleration)

    return config


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _is_positive(value) -> bool:
    return _is_number(value) and value > 0
