"""
Simulation Engine

Fixed-step engagement loop for one target and one guided interceptor.

Features:
    - Discrete time evolution (semi-implicit Euler, fixed dt)
    - Runtime-selectable guidance law
    - Acceleration limiting and gravity composition
    - Intercept / ground-impact outcome checks
    - Thread-safe control surface (start, stop, reset, set_guidance_mode,
      step, get_state) driven by a background tick thread

State machine:
    Stopped -> Running -> {Intercepted | Crashed}
    Running -> Stopped (pause)
    any     -> Stopped with fresh entities (reset)

Concurrency:
    One background thread per start() is the only periodic writer. Every
    mutation runs under the write side of a reader/writer lock; get_state()
    takes the read side and returns an immutable snapshot. The loop waits for
    its next tick outside the lock and re-checks its cancellation token under
    the lock before touching state, so a stale tick can't run after a stop or
    reset.

Reference: Zarchan, "Tactical and Strategic Missile Guidance", 6th Ed., Ch. 2
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Iterator, List, Optional

from intercept_sim.guidance import (
    GuidanceLaw,
    ProportionalNavigation,
    available_guidance_modes,
    get_guidance_law,
    resolve_guidance_mode,
)
from intercept_sim.physics.constants import GROUND_ALTITUDE
from intercept_sim.physics.kinematics import advance, limit_acceleration
from intercept_sim.physics.vector import Vector3

from .objects import SimulationState, SimulationStatus
from .scenario import EngineConfig, ScenarioConfig

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Writer-preferring reader/writer lock.

    Any number of readers may hold the lock together; a writer holds it
    alone. Waiting writers block new readers so ticks are never starved by
    fast pollers. Not reentrant.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class SimulationEngine:
    """
    Engagement simulation engine.

    Owns the target, the interceptor, the active guidance law, simulated
    time and run status. Nothing outside the engine mutates entities.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        scenario: Optional[ScenarioConfig] = None,
    ):
        """
        Initialize simulation engine in the Stopped state.

        Args:
            config: Physics and timing parameters (defaults if None)
            scenario: Initial engagement geometry restored on reset
        """
        self.config = (config or EngineConfig()).validated()
        self.scenario = (scenario or ScenarioConfig()).validated()

        self._lock = ReadWriteLock()
        self._gravity = Vector3(0.0, -self.config.gravity_mps2, 0.0)

        # Background loop; the Event doubles as the loop's identity token
        self._loop_thread: Optional[threading.Thread] = None
        self._loop_stop: Optional[threading.Event] = None

        with self._lock.write_locked():
            self._reset_locked()

    # =========================================================================
    # CONTROL SURFACE
    # =========================================================================

    def start(self) -> None:
        """
        Begin firing ticks at the configured period.

        No-op if already running. A terminal engagement (Intercepted or
        Crashed) stays terminal until reset().
        """
        with self._lock.write_locked():
            if self._status is SimulationStatus.RUNNING:
                return
            if self._status.is_terminal:
                logger.info("Engagement already %s; reset before starting", self._status.value)
                return

            self._status = SimulationStatus.RUNNING
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run_loop,
                args=(stop_event,),
                name="intercept-sim-tick",
                daemon=True,
            )
            self._loop_stop = stop_event
            self._loop_thread = thread
            self._publish_locked()
            thread.start()
            mode = self._guidance_mode

        logger.info(
            "Simulation started (guidance=%s, dt=%.4f s, tick=%.4f s)",
            mode,
            self.config.dt_s,
            self.config.tick_period_s,
        )

    def stop(self) -> None:
        """
        Halt the tick loop and pause the simulation.

        No-op unless running. Terminal statuses are never overwritten.
        """
        stopped = False
        with self._lock.write_locked():
            thread = self._cancel_loop_locked()
            if self._status is SimulationStatus.RUNNING:
                self._status = SimulationStatus.STOPPED
                self._publish_locked()
                stopped = True
            elapsed = self._time

        self._join(thread)
        if stopped:
            logger.info("Simulation stopped at t=%.3f s", elapsed)

    def reset(self) -> None:
        """
        Cancel any running loop and restore the initial scenario.

        Entities are rebuilt from the scenario, elapsed time and the
        intercept flag are cleared, the default guidance law is restored and
        the status is Stopped. The old loop thread has exited when this
        returns.
        """
        with self._lock.write_locked():
            thread = self._cancel_loop_locked()
            self._reset_locked()

        self._join(thread)
        logger.info("Simulation reset to scenario %r", self.scenario.name)

    def set_guidance_mode(self, name: str) -> str:
        """
        Switch the active guidance law.

        Legal in any status; takes effect on the next tick. Unrecognised
        names fall back to the default law.

        Args:
            name: Guidance mode name (see available_guidance_modes())

        Returns:
            Name of the guidance mode actually selected
        """
        mode = resolve_guidance_mode(name)
        law = self._build_law(mode)

        with self._lock.write_locked():
            self._guidance_mode = mode
            self._guidance_law = law
            self._missile.guidance_mode = mode
            self._publish_locked()

        logger.debug("Guidance mode set to %s (requested %r)", mode, name)
        return mode

    def step(self) -> bool:
        """
        Advance the simulation by one tick.

        No-op unless running. Safe to call directly for deterministic
        single-stepping.

        Returns:
            True if a physics step was executed
        """
        with self._lock.write_locked():
            return self._step_locked()

    def get_state(self) -> SimulationState:
        """Immutable point-in-time snapshot of the simulation."""
        with self._lock.read_locked():
            return self._state

    def run(self, duration_s: float) -> SimulationState:
        """
        Step synchronously for a duration of simulated time.

        Intended for headless runs and tests: no background thread is used.
        A running background loop is cancelled first. Stops early on a
        terminal outcome; otherwise the engine is left Stopped (paused).

        Args:
            duration_s: Simulated time to run [s]

        Returns:
            Final SimulationState
        """
        with self._lock.write_locked():
            thread = self._cancel_loop_locked()
            if self._status is SimulationStatus.STOPPED:
                self._status = SimulationStatus.RUNNING
                self._publish_locked()
        self._join(thread)

        n_steps = int(duration_s / self.config.dt_s)
        for _ in range(n_steps):
            if not self.step():
                break

        with self._lock.write_locked():
            if self._status is SimulationStatus.RUNNING:
                self._status = SimulationStatus.STOPPED
                self._publish_locked()
            return self._state

    def close(self) -> None:
        """Stop the loop and wait for the tick thread to exit."""
        self.stop()

    def __enter__(self) -> "SimulationEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def status(self) -> SimulationStatus:
        """Current run status."""
        return self.get_state().status

    @property
    def is_running(self) -> bool:
        return self.status is SimulationStatus.RUNNING

    @property
    def guidance_mode(self) -> str:
        """Name of the active guidance law."""
        with self._lock.read_locked():
            return self._guidance_mode

    @property
    def guidance_law(self) -> GuidanceLaw:
        with self._lock.read_locked():
            return self._guidance_law

    @property
    def dt(self) -> float:
        """Physics time step [s]."""
        return self.config.dt_s

    @property
    def tick_period_s(self) -> float:
        """Wall-clock tick period [s]."""
        return self.config.tick_period_s

    @property
    def simulation_time(self) -> float:
        """Elapsed simulated time [s]."""
        return self.get_state().time

    @staticmethod
    def available_guidance_modes() -> List[str]:
        return available_guidance_modes()

    # =========================================================================
    # INTERNALS (caller holds the write lock for *_locked methods)
    # =========================================================================

    def _build_law(self, mode: str) -> GuidanceLaw:
        law = get_guidance_law(mode)
        if isinstance(law, ProportionalNavigation):
            law.navigation_gain = self.config.navigation_gain
        return law

    def _reset_locked(self) -> None:
        self._guidance_mode = resolve_guidance_mode(self.config.guidance_mode)
        self._guidance_law = self._build_law(self._guidance_mode)
        self._target, self._missile = self.scenario.build_entities(self._guidance_mode)
        self._status = SimulationStatus.STOPPED
        self._time = 0.0
        self._intercept = False
        self._publish_locked()

    def _publish_locked(self) -> None:
        """Replace the observable snapshot (target first, then missile)."""
        self._state = SimulationState(
            entities=(self._target.snapshot(), self._missile.snapshot()),
            status=self._status,
            time=self._time,
            intercept=self._intercept,
        )

    def _cancel_loop_locked(self) -> Optional[threading.Thread]:
        """Signal the current loop to exit; returns its thread for joining."""
        if self._loop_stop is not None:
            self._loop_stop.set()
        thread = self._loop_thread
        self._loop_stop = None
        self._loop_thread = None
        return thread

    @staticmethod
    def _join(thread: Optional[threading.Thread]) -> None:
        # The tick thread cancels itself on terminal outcomes; never self-join
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _run_loop(self, stop_event: threading.Event) -> None:
        """Background tick loop; waits outside the lock between ticks."""
        period = self.config.tick_period_s
        next_tick = time.perf_counter() + period

        while not stop_event.wait(max(0.0, next_tick - time.perf_counter())):
            self._tick(stop_event)

            next_tick += period
            # Fell behind by more than a tick: resync instead of bursting
            now = time.perf_counter()
            if now - next_tick > period:
                next_tick = now + period

    def _tick(self, stop_event: threading.Event) -> None:
        with self._lock.write_locked():
            if stop_event.is_set() or stop_event is not self._loop_stop:
                return
            self._step_locked()

    def _step_locked(self) -> bool:
        if self._status is not SimulationStatus.RUNNING:
            return False

        dt = self.config.dt_s
        missile, target = self._missile, self._target

        # 1. Guidance command (gravity-free frame)
        command = self._guidance_law.compute_command(missile, target, dt)
        if not command.is_finite():
            logger.warning(
                "Non-finite command from %s at t=%.3f s, holding zero",
                self._guidance_mode,
                self._time,
            )
            command = Vector3.zero()

        # 2. Structural limit
        command = limit_acceleration(command, missile.max_acceleration)

        # 3. Gravity; the law sees the resulting sag next tick and corrects it
        missile.acceleration = command + self._gravity

        # 4. Target autopilot holds level flight (lift cancels gravity)
        target.acceleration = Vector3.zero()

        # 5. Integrate
        missile.position, missile.velocity = advance(
            missile.position, missile.velocity, missile.acceleration, dt
        )
        target.position, target.velocity = advance(
            target.position, target.velocity, target.acceleration, dt
        )

        # 6. Time
        self._time += dt

        # 7. Outcomes
        self._check_outcome_locked()
        self._publish_locked()
        return True

    def _check_outcome_locked(self) -> None:
        missile, target = self._missile, self._target
        separation = missile.range_to(target)

        if separation < self.config.capture_radius_m:
            self._intercept = True
            self._status = SimulationStatus.INTERCEPTED
            logger.info(
                "INTERCEPT at t=%.3f s, miss distance %.2f m (%s)",
                self._time,
                separation,
                self._guidance_mode,
            )
        elif missile.altitude < GROUND_ALTITUDE:
            p = missile.position
            missile.position = Vector3(p.x, GROUND_ALTITUDE, p.z)
            missile.velocity = Vector3.zero()
            self._status = SimulationStatus.CRASHED
            logger.info(
                "Missile ground impact at t=%.3f s, %.1f m from target", self._time, separation
            )

        if self._status.is_terminal:
            self._cancel_loop_locked()
