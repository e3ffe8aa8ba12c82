"""
Simulation Objects

Kinematic entities and the observable simulation snapshot.

Coordinate system: right-handed, Y-up
    - x: East [m]
    - y: Altitude [m]
    - z: North [m]

Entities are mutable and owned exclusively by the SimulationEngine.
Observers only ever receive EntityState / SimulationState copies.

References:
    - Zarchan, P. (2012). "Tactical and Strategic Missile Guidance"
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from intercept_sim.physics.constants import ALTITUDE_AXIS
from intercept_sim.physics.vector import Vector3


class EntityRole(Enum):
    """Entity role tags."""

    TARGET = "Target"
    MISSILE = "Missile"


class SimulationStatus(Enum):
    """Engine run status."""

    STOPPED = "Stopped"
    RUNNING = "Running"
    INTERCEPTED = "Intercepted"  # Terminal
    CRASHED = "Crashed"  # Terminal

    @property
    def is_terminal(self) -> bool:
        """True for end states that only a reset clears."""
        return self in (SimulationStatus.INTERCEPTED, SimulationStatus.CRASHED)


@dataclass(frozen=True)
class EntityState:
    """
    Immutable point-in-time copy of an Entity.

    Attributes:
        entity_id: Stable identifier
        role: Target or Missile
        position: Position [m]
        velocity: Velocity [m/s]
        acceleration: Last applied acceleration [m/s²]
        max_acceleration: Acceleration limit [m/s²]
        guidance_mode: Active guidance law name (observability only)
    """

    entity_id: str
    role: EntityRole
    position: Vector3
    velocity: Vector3
    acceleration: Vector3
    max_acceleration: float
    guidance_mode: str = ""

    @property
    def altitude(self) -> float:
        """Altitude [m]."""
        return self.position.to_tuple()[ALTITUDE_AXIS]

    @property
    def speed(self) -> float:
        """Speed [m/s]."""
        return self.velocity.magnitude

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.entity_id,
            "role": self.role.value,
            "position": self.position.to_dict(),
            "velocity": self.velocity.to_dict(),
            "acceleration": self.acceleration.to_dict(),
            "maxAccel": self.max_acceleration,
            "guidanceMode": self.guidance_mode,
        }


class Entity:
    """
    Mutable kinematic entity (target or interceptor).

    Position and velocity are replaced as whole Vector3 values, never
    updated component-wise, so a snapshot can't see half an update.
    """

    def __init__(
        self,
        entity_id: str,
        role: EntityRole,
        position: Vector3,
        velocity: Optional[Vector3] = None,
        max_acceleration: float = 0.0,
        guidance_mode: str = "",
    ):
        """
        Initialize entity.

        Args:
            entity_id: Stable string identifier
            role: Target or Missile
            position: Initial position [m]
            velocity: Initial velocity [m/s]
            max_acceleration: Acceleration magnitude cap [m/s²]
            guidance_mode: Guidance law name mirrored for observers
        """
        self.entity_id = entity_id
        self.role = role
        self.position = position
        self.velocity = velocity if velocity is not None else Vector3.zero()
        self.acceleration = Vector3.zero()
        self.max_acceleration = max_acceleration
        self.guidance_mode = guidance_mode

    @property
    def altitude(self) -> float:
        """Altitude [m]."""
        return self.position.to_tuple()[ALTITUDE_AXIS]

    @property
    def speed(self) -> float:
        """Speed [m/s]."""
        return self.velocity.magnitude

    def range_to(self, other: "Entity") -> float:
        """Slant range to another entity [m]."""
        return self.position.distance_to(other.position)

    def snapshot(self) -> EntityState:
        """Immutable copy of the current state."""
        return EntityState(
            entity_id=self.entity_id,
            role=self.role,
            position=self.position,
            velocity=self.velocity,
            acceleration=self.acceleration,
            max_acceleration=self.max_acceleration,
            guidance_mode=self.guidance_mode,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return self.snapshot().to_dict()

    def __repr__(self) -> str:
        return (
            f"Entity({self.entity_id!r}, {self.role.value}, "
            f"pos={self.position!r}, vel={self.velocity!r})"
        )


def make_target(
    entity_id: str, position: Vector3, velocity: Vector3, max_acceleration: float
) -> Entity:
    """Create a target entity."""
    return Entity(entity_id, EntityRole.TARGET, position, velocity, max_acceleration)


def make_missile(
    entity_id: str,
    position: Vector3,
    velocity: Vector3,
    max_acceleration: float,
    guidance_mode: str = "",
) -> Entity:
    """Create an interceptor entity."""
    return Entity(
        entity_id, EntityRole.MISSILE, position, velocity, max_acceleration, guidance_mode
    )


@dataclass(frozen=True)
class SimulationState:
    """
    Complete observable simulation state at a point in time.

    Entities are ordered target first, then interceptor.
    """

    entities: Tuple[EntityState, ...] = ()
    status: SimulationStatus = SimulationStatus.STOPPED
    time: float = 0.0
    intercept: bool = False

    def _by_role(self, role: EntityRole) -> Optional[EntityState]:
        for entity in self.entities:
            if entity.role is role:
                return entity
        return None

    @property
    def target(self) -> Optional[EntityState]:
        return self._by_role(EntityRole.TARGET)

    @property
    def missile(self) -> Optional[EntityState]:
        return self._by_role(EntityRole.MISSILE)

    @property
    def separation_m(self) -> float:
        """Missile-target distance [m] (inf if either is missing)."""
        target, missile = self.target, self.missile
        if target is None or missile is None:
            return float("inf")
        return missile.position.distance_to(target.position)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "entities": [entity.to_dict() for entity in self.entities],
            "status": self.status.value,
            "time": self.time,
            "intercept": self.intercept,
        }
