"""
InterceptSim Source Package

Missile/target engagement simulation with:
- Semi-implicit Euler point-mass kinematics with acceleration limiting
- Runtime-selectable guidance (ProNav, pure pursuit, lead pursuit)
- Thread-safe start/stop/reset/step/observe engine surface
- YAML scenario configuration
"""

from intercept_sim.guidance import (
    GuidanceLaw,
    LeadPursuit,
    ProportionalNavigation,
    PurePursuit,
    get_guidance_law,
)
from intercept_sim.io import ScenarioLoader, load_scenario
from intercept_sim.physics import (
    CAPTURE_RADIUS_M,
    DEFAULT_DT,
    GRAVITY,
    Vector3,
    advance,
    limit_acceleration,
)
from intercept_sim.simulation import (
    EngineConfig,
    EntityRole,
    ScenarioConfig,
    SimulationEngine,
    SimulationState,
    SimulationStatus,
)

__version__ = "1.0.0"
__author__ = "InterceptSim Contributors"

__all__ = [
    # Physics
    "Vector3",
    "advance",
    "limit_acceleration",
    "GRAVITY",
    "DEFAULT_DT",
    "CAPTURE_RADIUS_M",
    # Guidance
    "GuidanceLaw",
    "ProportionalNavigation",
    "PurePursuit",
    "LeadPursuit",
    "get_guidance_law",
    # Simulation
    "SimulationEngine",
    "SimulationState",
    "SimulationStatus",
    "EntityRole",
    "EngineConfig",
    "ScenarioConfig",
    # I/O
    "ScenarioLoader",
    "load_scenario",
]
