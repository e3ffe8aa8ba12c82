"""
InterceptSim I/O Package

YAML scenario loading.
"""

from .scenario_loader import ScenarioLoader, load_scenario

__all__ = ["ScenarioLoader", "load_scenario"]
