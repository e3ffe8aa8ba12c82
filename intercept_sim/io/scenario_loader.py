"""
Scenario Loader

YAML-based scenario configuration parser for InterceptSim.

Loads engagement scenarios from YAML files and creates configured
SimulationEngine instances. Any key left out takes its default.

File layout:

    scenario:
      name: Crossing target
      description: ...
      duration_seconds: 60
    simulation:
      dt_s: 0.016
      tick_period_s: 0.016
      capture_radius_m: 5.0
      gravity_mps2: 9.81
      guidance_mode: ProNav
      navigation_gain: 4.0
    target:
      id: target-1
      position: {x_m: 5000, y_m: 2000, z_m: 5000}
      velocity: {vx_mps: -200, vy_mps: 0, vz_mps: -100}
      max_acceleration_mps2: 90
    missile:
      id: missile-1
      position: {x_m: 0, y_m: 0, z_m: 0}
      velocity: {vx_mps: 10, vy_mps: 10, vz_mps: 10}
      max_acceleration_mps2: 300

Usage:
    loader = ScenarioLoader('scenarios/default.yaml')
    engine = loader.create_simulation_engine()
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from intercept_sim.physics.vector import Vector3
from intercept_sim.simulation.engine import SimulationEngine
from intercept_sim.simulation.scenario import EngineConfig, EntityConfig, ScenarioConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedScenario:
    """Parsed scenario file: engagement geometry plus engine parameters."""

    scenario: ScenarioConfig
    engine: EngineConfig


class ScenarioLoader:
    """
    Loads engagement scenarios from YAML files.

    Usage:
        loader = ScenarioLoader('scenarios/default.yaml')
        config = loader.get_config()
        engine = loader.create_simulation_engine()
    """

    def __init__(self, filepath: Optional[str] = None):
        """
        Initialize scenario loader.

        Args:
            filepath: Path to YAML scenario file (optional)
        """
        self.filepath = filepath
        self.data: Dict[str, Any] = {}
        self._config: Optional[LoadedScenario] = None

        if filepath:
            self.load(filepath)

    def load(self, filepath: str) -> bool:
        """
        Load scenario from YAML file.

        Args:
            filepath: Path to YAML scenario file

        Returns:
            True if loaded successfully

        Raises:
            FileNotFoundError: If file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Scenario file not found: {filepath}")

        self.filepath = filepath

        with open(filepath, "r", encoding="utf-8") as f:
            self.data = yaml.safe_load(f) or {}

        self._config = self.parse(self.data)
        logger.info("Loaded scenario %r from %s", self._config.scenario.name, filepath)
        return True

    @classmethod
    def parse(cls, data: Dict[str, Any]) -> LoadedScenario:
        """Parse an already-loaded YAML mapping."""
        defaults = ScenarioConfig()
        scenario = data.get("scenario", {}) or {}

        scenario_config = ScenarioConfig(
            name=scenario.get("name", defaults.name),
            description=scenario.get("description", defaults.description),
            duration_s=float(scenario.get("duration_seconds", defaults.duration_s)),
            target=cls._parse_entity(data.get("target", {}) or {}, defaults.target),
            missile=cls._parse_entity(data.get("missile", {}) or {}, defaults.missile),
        )

        return LoadedScenario(
            scenario=scenario_config,
            engine=cls._parse_engine(data.get("simulation", {}) or {}),
        )

    @staticmethod
    def _parse_engine(sim: Dict[str, Any]) -> EngineConfig:
        """Parse engine parameters; validation happens in the engine."""
        defaults = EngineConfig()
        dt = float(sim.get("dt_s", defaults.dt_s))

        return EngineConfig(
            dt_s=dt,
            # Tick period follows dt unless given explicitly
            tick_period_s=float(sim.get("tick_period_s", dt)),
            capture_radius_m=float(sim.get("capture_radius_m", defaults.capture_radius_m)),
            gravity_mps2=float(sim.get("gravity_mps2", defaults.gravity_mps2)),
            guidance_mode=str(sim.get("guidance_mode", defaults.guidance_mode)),
            navigation_gain=float(sim.get("navigation_gain", defaults.navigation_gain)),
        )

    @staticmethod
    def _parse_entity(entity: Dict[str, Any], default: EntityConfig) -> EntityConfig:
        """Parse one entity block, filling gaps from the default entity."""
        pos = entity.get("position", {}) or {}
        vel = entity.get("velocity", {}) or {}
        p0, v0 = default.position, default.velocity

        return EntityConfig(
            entity_id=str(entity.get("id", default.entity_id)),
            position=Vector3(
                float(pos.get("x_m", p0.x)),
                float(pos.get("y_m", p0.y)),
                float(pos.get("z_m", p0.z)),
            ),
            velocity=Vector3(
                float(vel.get("vx_mps", v0.x)),
                float(vel.get("vy_mps", v0.y)),
                float(vel.get("vz_mps", v0.z)),
            ),
            max_acceleration=float(
                entity.get("max_acceleration_mps2", default.max_acceleration)
            ),
        )

    def get_config(self) -> Optional[LoadedScenario]:
        """
        Get parsed scenario configuration.

        Returns:
            LoadedScenario or None if not loaded
        """
        return self._config

    def get_scenario_name(self) -> str:
        """Get scenario name."""
        if self._config:
            return self._config.scenario.name
        return "Unknown"

    def create_simulation_engine(self) -> SimulationEngine:
        """
        Create a SimulationEngine from the loaded scenario.

        Returns:
            Configured SimulationEngine instance in the Stopped state

        Raises:
            ValueError: If no scenario is loaded
        """
        if not self._config:
            raise ValueError("No scenario loaded. Call load() first.")

        return SimulationEngine(config=self._config.engine, scenario=self._config.scenario)


def load_scenario(filepath: str) -> LoadedScenario:
    """
    Convenience function to load a scenario file.

    Args:
        filepath: Path to YAML scenario file

    Returns:
        LoadedScenario instance
    """
    loader = ScenarioLoader(filepath)
    return loader.get_config()
