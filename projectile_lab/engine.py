"""
Simulation Engine
=================
Time-stepped playback of a closed-form trajectory.

The engine owns the current ProjectileState and the TrajectoryData of the
run, and moves through four states:

    IDLE ──play()──▶ RUNNING ──pause()──▶ PAUSED ──play()──▶ RUNNING
                        │
                        └── t ≥ time of flight ──▶ COMPLETED

    reset() returns any state to IDLE.

Ticks are driven by an injected scheduler (`schedule(callback) -> handle`)
so the engine runs the same under a display loop, a matplotlib animation
or a test. Each tick advances a fixed virtual clock, never wall-clock time:

    t_n = n · Δt
    position(t_n), velocity(t_n)  from the kinematic equations
    final sample clamped to (range, 0) with velocity (vx, −vy)
"""

import logging
import math
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, Optional

from .constants import TIME_STEP
from .errors import InvalidParameterError
from .kinematics import ORIGIN, Vector2D, position_at, speed_at, velocity_at
from .projectile import LaunchParameters, Limits
from .results import DerivedResults, compute_results
from .trajectory import TrajectoryData

logger = logging.getLogger(__name__)

StateCallback = Callable[['ProjectileState'], None]


class SimulationStatus(Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    PAUSED = 'paused'
    COMPLETED = 'completed'


@dataclass(frozen=True)
class ProjectileState:
    """Snapshot of the projectile at one instant."""
    position: Vector2D       # m
    velocity: Vector2D       # m/s
    elapsed_time: float      # s since launch
    is_active: bool

    @classmethod
    def zero(cls) -> 'ProjectileState':
        return cls(ORIGIN, ORIGIN, 0.0, False)

    @property
    def speed(self) -> float:
        return speed_at(self.velocity)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Engine settings.

    `limits` optionally narrows the accepted parameter range (e.g. LIMITS);
    by default any physically valid launch is accepted.
    """
    time_step: float = TIME_STEP     # s of virtual time per tick
    limits: Optional[Limits] = None

    def __post_init__(self):
        if not (math.isfinite(self.time_step) and self.time_step > 0):
            raise InvalidParameterError(
                f"time step must be positive, got {self.time_step} s")


# ══════════════════════════════════════════════════════════════════════════
#  Scheduling
# ══════════════════════════════════════════════════════════════════════════

class TickHandle:
    """Cancellation handle for one scheduled callback."""

    def __init__(self, callback: Callable[[], None]):
        self._callback = callback
        self._cancelled = False
        self._fired = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._cancelled or self._fired

    def cancel(self) -> None:
        self._cancelled = True

    def fire(self) -> None:
        if self.done:
            return
        self._fired = True
        self._callback()


class FrameScheduler:
    """
    Manual frame loop: one batch of callbacks per frame.

    Callbacks scheduled while a frame is running wait for the next frame,
    like a display's "request next frame" primitive.
    """

    def __init__(self):
        self._queue: Deque[TickHandle] = deque()
        self.frame_count = 0

    def schedule(self, callback: Callable[[], None]) -> TickHandle:
        handle = TickHandle(callback)
        self._queue.append(handle)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for h in self._queue if not h.done)

    def run_frame(self) -> int:
        """Fire everything queued before this frame. Returns the number fired."""
        batch, self._queue = self._queue, deque()
        self.frame_count += 1
        fired = 0
        for handle in batch:
            if not handle.done:
                handle.fire()
                fired += 1
        return fired

    def run_until_idle(self, max_frames: int = 1_000_000) -> int:
        """Run frames until nothing is pending. Returns frames run."""
        frames = 0
        while self.pending and frames < max_frames:
            self.run_frame()
            frames += 1
        return frames


# ══════════════════════════════════════════════════════════════════════════
#  Engine
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EngineSnapshot:
    """Everything a renderer reads in one frame."""
    status: SimulationStatus
    state: ProjectileState
    results: DerivedResults
    trajectory: TrajectoryData
    progress: float

    @property
    def is_playing(self) -> bool:
        return self.status is SimulationStatus.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.status is SimulationStatus.PAUSED


class SimulationEngine:
    """
    Play / pause / reset state machine over one projectile flight.

    Parameters
    ----------
    params : LaunchParameters, replaceable at any time; validated when set
             (InvalidParameterError), applied to runs started from IDLE
    config : SimulationConfig
    scheduler : object with schedule(callback) -> handle (handle.cancel());
                defaults to a FrameScheduler available as `engine.scheduler`
    on_state_updated : called with the new ProjectileState every tick
    on_completed : called once when the projectile lands
    """

    def __init__(self, params: Optional[LaunchParameters] = None,
                 config: Optional[SimulationConfig] = None,
                 scheduler=None,
                 on_state_updated: Optional[StateCallback] = None,
                 on_completed: Optional[Callable[[], None]] = None):
        self.config = config if config is not None else SimulationConfig()
        self.scheduler = scheduler if scheduler is not None else FrameScheduler()
        self.on_state_updated = on_state_updated
        self.on_completed = on_completed

        self._status = SimulationStatus.IDLE
        self.params = params if params is not None else LaunchParameters()
        self._state = ProjectileState.zero()
        self._trajectory = TrajectoryData()
        self._ticks = 0

        # Frozen for the run in progress
        self._run_params: Optional[LaunchParameters] = None
        self._run_results: Optional[DerivedResults] = None

        self._pending = None
        self._generation = 0

    # ── Inputs ────────────────────────────────────────────────────────────

    @property
    def params(self) -> LaunchParameters:
        return self._params

    @params.setter
    def params(self, value: LaunchParameters):
        if not isinstance(value, LaunchParameters):
            raise TypeError(f"expected LaunchParameters, got {type(value).__name__}")
        value.validate(self.config.limits)
        if self._status is not SimulationStatus.IDLE:
            logger.debug("parameters replaced while %s; applied after reset",
                         self._status.value)
        self._params = value

    # ── Outputs ───────────────────────────────────────────────────────────

    @property
    def status(self) -> SimulationStatus:
        return self._status

    @property
    def state(self) -> ProjectileState:
        return self._state

    @property
    def results(self) -> DerivedResults:
        """Results of the run in progress, or of the current params while IDLE."""
        if self._run_results is not None:
            return self._run_results
        return compute_results(self._params)

    @property
    def trajectory(self) -> TrajectoryData:
        """Copy of the recorded history."""
        return self._trajectory.copy()

    @property
    def is_playing(self) -> bool:
        return self._status is SimulationStatus.RUNNING

    @property
    def is_paused(self) -> bool:
        return self._status is SimulationStatus.PAUSED

    @property
    def is_completed(self) -> bool:
        return self._status is SimulationStatus.COMPLETED

    @property
    def elapsed_time(self) -> float:
        """Virtual clock of the current run (s)."""
        return self._state.elapsed_time

    @property
    def progress(self) -> float:
        """Fraction of the flight shown so far, in [0, 1]."""
        if self._run_results is None:
            return 0.0
        flight_time = self._run_results.time_of_flight
        if flight_time <= 0:
            return 0.0
        return min(self._state.elapsed_time / flight_time, 1.0)

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            status=self._status,
            state=self._state,
            results=self.results,
            trajectory=self.trajectory,
            progress=self.progress,
        )

    # ── Commands ──────────────────────────────────────────────────────────

    def play(self) -> None:
        """Start from IDLE or resume from PAUSED. No-op while RUNNING or COMPLETED."""
        if self._status is SimulationStatus.RUNNING:
            return
        if self._status is SimulationStatus.COMPLETED:
            logger.debug("play() ignored: run already completed, reset first")
            return

        if self._status is SimulationStatus.IDLE:
            params = self._params.validate(self.config.limits)
            results = compute_results(params)
            self._run_params = params
            self._run_results = results
            self._ticks = 0
            self._trajectory.clear()
            self._trajectory.append(ORIGIN, results.launch_velocity, 0.0)
            logger.debug("run started: v0=%.3f m/s, angle=%.2f°, g=%.3f m/s², "
                         "T=%.4f s", params.initial_speed,
                         params.launch_angle_deg, params.gravity,
                         results.time_of_flight)
        else:
            logger.debug("resumed at t=%.4f s", self._state.elapsed_time)

        self._status = SimulationStatus.RUNNING
        self._schedule_tick()

    def pause(self) -> None:
        """Stop ticking and keep state, trajectory and clock. Only acts while RUNNING."""
        if self._status is not SimulationStatus.RUNNING:
            return
        self._cancel_pending()
        self._status = SimulationStatus.PAUSED
        logger.debug("paused at t=%.4f s", self._state.elapsed_time)

    def reset(self) -> None:
        """Cancel any pending tick and return to the zero state."""
        self._cancel_pending()
        self._ticks = 0
        self._state = ProjectileState.zero()
        self._trajectory.clear()
        self._run_params = None
        self._run_results = None
        self._status = SimulationStatus.IDLE
        logger.debug("reset")

    # ── Stepping ──────────────────────────────────────────────────────────

    def _schedule_tick(self) -> None:
        self._generation += 1
        generation = self._generation
        self._pending = self.scheduler.schedule(lambda: self._tick(generation))

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _tick(self, generation: int) -> None:
        # A tick that outlived a pause/reset must not touch the run
        if generation != self._generation or self._status is not SimulationStatus.RUNNING:
            logger.debug("stale tick ignored")
            return
        self._pending = None

        results = self._run_results
        g = self._run_params.gravity
        self._ticks += 1
        t = self._ticks * self.config.time_step

        if t >= results.time_of_flight:
            self._complete(results)
            return

        vx, vy = results.initial_velocity_x, results.initial_velocity_y
        position = position_at(vx, vy, g, t)
        velocity = velocity_at(vx, vy, g, t)

        self._state = ProjectileState(position, velocity, t, True)
        self._trajectory.append(position, velocity, t)

        if self.on_state_updated is not None:
            self.on_state_updated(self._state)

        # The callback may have paused or reset the engine
        if self._status is SimulationStatus.RUNNING and generation == self._generation:
            self._schedule_tick()

    def _complete(self, results: DerivedResults) -> None:
        # Zero-length flight: the landing sample replaces the launch sample
        if results.is_degenerate:
            self._trajectory.clear()
        self._state = ProjectileState(
            position=results.landing_position,
            velocity=results.landing_velocity,
            elapsed_time=results.time_of_flight,
            is_active=False,
        )
        self._trajectory.append(self._state.position, self._state.velocity,
                                self._state.elapsed_time)
        self._status = SimulationStatus.COMPLETED
        logger.info("landed at x=%.3f m after %.4f s (%d samples)",
                    results.horizontal_range, results.time_of_flight,
                    len(self._trajectory))

        if self.on_completed is not None:
            self.on_completed()
