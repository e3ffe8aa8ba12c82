"""
InterceptSim Simulation Package

Engagement engine, entity model and scenario configuration.
"""

from .engine import SimulationEngine
from .objects import Entity, EntityRole, EntityState, SimulationState, SimulationStatus
from .scenario import EngineConfig, EntityConfig, ScenarioConfig

__all__ = [
    "SimulationEngine",
    "Entity",
    "EntityRole",
    "EntityState",
    "SimulationState",
    "SimulationStatus",
    "EngineConfig",
    "EntityConfig",
    "ScenarioConfig",
]
