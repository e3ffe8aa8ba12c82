#!/usr/bin/env python3
"""
Headless Engagement CLI

Run a single missile/target engagement without any transport or display.

Usage:
    python headless.py                              # Default scenario
    python headless.py --guidance PurePursuit       # Different law
    python headless.py --config scenarios/default.yaml

Examples:
    # Quick ProNav run
    python headless.py --duration 60

    # Drive the background tick loop in real time and poll snapshots
    python headless.py --realtime --duration 5
"""

import argparse
import logging
import os
import sys
import time
from dataclasses import replace

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from intercept_sim.guidance import available_guidance_modes
from intercept_sim.io import ScenarioLoader
from intercept_sim.simulation import (
    EngineConfig,
    ScenarioConfig,
    SimulationEngine,
    SimulationState,
)


def build_engine(args: argparse.Namespace) -> SimulationEngine:
    """Create the engine from a YAML file or the built-in default scenario."""
    if args.config:
        loaded = ScenarioLoader(args.config).get_config()
        engine_config, scenario = loaded.engine, loaded.scenario
    else:
        engine_config, scenario = EngineConfig(), ScenarioConfig()

    if args.dt is not None:
        engine_config = replace(engine_config, dt_s=args.dt, tick_period_s=args.dt)

    engine = SimulationEngine(config=engine_config, scenario=scenario)
    if args.guidance:
        engine.set_guidance_mode(args.guidance)
    return engine


def run_realtime(
    engine: SimulationEngine, duration_s: float, poll_hz: float = 30.0
) -> SimulationState:
    """Run the background loop, polling snapshots like a transport would."""
    engine.start()
    deadline = time.perf_counter() + duration_s

    try:
        while time.perf_counter() < deadline:
            state = engine.get_state()
            if state.status.is_terminal:
                break
            time.sleep(1.0 / poll_hz)
    finally:
        engine.stop()

    return engine.get_state()


def main():
    parser = argparse.ArgumentParser(description="Run headless intercept simulation")

    # Config file
    parser.add_argument("--config", type=str, default=None, help="YAML scenario file")

    # Engagement parameters
    parser.add_argument(
        "--guidance",
        type=str,
        default=None,
        help=f"Guidance law ({', '.join(available_guidance_modes())})",
    )
    parser.add_argument(
        "--duration", type=float, default=None, help="Simulated duration in seconds"
    )
    parser.add_argument("--dt", type=float, default=None, help="Physics time step in seconds")

    # Options
    parser.add_argument(
        "--realtime", action="store_true", help="Use the background tick loop (wall-clock time)"
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress output")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.config and not os.path.exists(args.config):
        print(f"Error: Config file not found: {args.config}")
        return 1

    engine = build_engine(args)
    duration = args.duration if args.duration is not None else engine.scenario.duration_s

    if not args.quiet:
        print("=" * 60)
        print("InterceptSim Headless Mode")
        print("=" * 60)
        print(f"Scenario: {engine.scenario.name}")
        print(f"Guidance: {engine.guidance_mode}")
        print(f"Time step: {engine.dt * 1000:.1f} ms")
        print(f"Duration: {duration:.1f} s")
        print("=" * 60)

    wall_start = time.perf_counter()
    if args.realtime:
        state = run_realtime(engine, duration)
    else:
        state = engine.run(duration)
    runtime = time.perf_counter() - wall_start

    if not args.quiet:
        missile = state.missile
        print("\n--- RESULTS ---")
        print(f"Status: {state.status.value}")
        print(f"Simulated time: {state.time:.3f} s")
        print(f"Separation: {state.separation_m:.2f} m")
        print(f"Missile speed: {missile.speed:.1f} m/s, altitude {missile.altitude:.1f} m")
        print(f"Runtime: {runtime * 1000:.1f} ms")
        print("=" * 60)
    else:
        # Machine-readable output
        print(f"{state.status.value} {state.time:.3f} {state.separation_m:.3f}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
