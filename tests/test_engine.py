"""
Unit Tests for the Simulation Engine
====================================
Drives the play/pause/reset state machine synchronously through a
FrameScheduler and checks lifecycle, ordering and cancellation.
Run: python -m pytest tests/ -v
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from projectile_lab.constants import LIMITS
from projectile_lab.engine import (
    FrameScheduler, ProjectileState, SimulationConfig, SimulationEngine,
    SimulationStatus,
)
from projectile_lab.errors import InvalidParameterError
from projectile_lab.kinematics import Vector2D
from projectile_lab.projectile import LaunchParameters
from projectile_lab.results import compute_results


class LeakyHandle:
    """Handle whose cancel() does nothing, like a late-firing host timer."""

    def __init__(self, callback):
        self.callback = callback

    def cancel(self):
        pass


class LeakyScheduler:
    def __init__(self):
        self.queue = []

    def schedule(self, callback):
        handle = LeakyHandle(callback)
        self.queue.append(handle)
        return handle

    def fire_all(self):
        batch, self.queue = self.queue, []
        for handle in batch:
            handle.callback()


@pytest.fixture
def params():
    return LaunchParameters(20.0, 45.0, 9.8)


@pytest.fixture
def engine(params):
    updates, completions = [], []
    eng = SimulationEngine(
        params,
        on_state_updated=updates.append,
        on_completed=lambda: completions.append(True),
    )
    eng.updates = updates
    eng.completions = completions
    return eng


def run_until(engine, predicate, max_frames=10_000):
    for _ in range(max_frames):
        if predicate():
            return
        engine.scheduler.run_frame()
    raise AssertionError("condition never reached")


class TestFrameScheduler:

    def test_callbacks_fire_once(self):
        sched = FrameScheduler()
        calls = []
        sched.schedule(lambda: calls.append(1))
        assert sched.pending == 1
        assert sched.run_frame() == 1
        assert sched.run_frame() == 0
        assert calls == [1]

    def test_cancelled_callback_never_fires(self):
        sched = FrameScheduler()
        calls = []
        handle = sched.schedule(lambda: calls.append(1))
        handle.cancel()
        assert handle.cancelled
        assert sched.pending == 0
        sched.run_frame()
        assert calls == []

    def test_rescheduled_callback_waits_for_next_frame(self):
        sched = FrameScheduler()
        calls = []

        def tick():
            calls.append(sched.frame_count)
            if len(calls) < 3:
                sched.schedule(tick)

        sched.schedule(tick)
        frames = sched.run_until_idle()
        assert frames == 3
        assert calls == [1, 2, 3]


class TestLifecycle:

    def test_initial_state_is_idle_and_zero(self, engine):
        assert engine.status is SimulationStatus.IDLE
        assert engine.state == ProjectileState.zero()
        assert len(engine.trajectory) == 0
        assert engine.progress == 0.0
        assert not engine.is_playing and not engine.is_paused

    def test_play_initialises_trajectory(self, engine):
        engine.play()
        traj = engine.trajectory
        assert engine.is_playing
        assert traj.times == (0.0,)
        assert traj.positions == (Vector2D(0.0, 0.0),)
        assert traj.velocities[0] == engine.results.launch_velocity
        assert engine.scheduler.pending == 1

    def test_play_twice_is_idempotent(self, engine):
        engine.play()
        engine.play()
        assert engine.scheduler.pending == 1
        assert len(engine.trajectory) == 1
        engine.scheduler.run_frame()
        assert len(engine.trajectory) == 2
        assert len(engine.updates) == 1

    def test_runs_to_completion(self, engine):
        results = engine.results
        engine.play()
        engine.scheduler.run_until_idle()

        assert engine.status is SimulationStatus.COMPLETED
        assert engine.is_completed and not engine.is_playing
        state = engine.state
        assert not state.is_active
        assert state.position == (results.horizontal_range, 0.0)
        assert state.velocity == (results.initial_velocity_x, -results.initial_velocity_y)
        assert state.elapsed_time == results.time_of_flight
        assert engine.progress == 1.0
        assert engine.completions == [True]

    def test_landing_sample_is_last(self, engine):
        results = engine.results
        engine.play()
        engine.scheduler.run_until_idle()
        position, velocity, t = engine.trajectory.last()
        assert t == results.time_of_flight
        assert position == results.landing_position
        assert velocity == results.landing_velocity

    def test_one_update_per_intermediate_tick(self, engine):
        engine.play()
        engine.scheduler.run_until_idle()
        # launch sample and landing sample are not announced as updates
        assert len(engine.updates) == len(engine.trajectory) - 2
        assert all(s.is_active for s in engine.updates)

    def test_pause_keeps_state_and_stops_ticking(self, engine):
        engine.play()
        for _ in range(10):
            engine.scheduler.run_frame()
        before = engine.snapshot()
        engine.pause()

        assert engine.is_paused
        assert engine.scheduler.pending == 0
        for _ in range(5):
            engine.scheduler.run_frame()
        assert engine.state == before.state
        assert engine.trajectory.times == before.trajectory.times

    def test_resume_continues_without_reset(self, engine):
        engine.play()
        for _ in range(5):
            engine.scheduler.run_frame()
        engine.pause()
        n = len(engine.trajectory)
        t = engine.state.elapsed_time
        engine.play()
        engine.scheduler.run_frame()
        assert len(engine.trajectory) == n + 1
        assert engine.state.elapsed_time > t

    def test_pause_outside_running_is_noop(self, engine):
        engine.pause()
        assert engine.status is SimulationStatus.IDLE

    def test_play_after_completion_is_noop(self, engine):
        engine.play()
        engine.scheduler.run_until_idle()
        n = len(engine.trajectory)
        engine.play()
        engine.scheduler.run_until_idle()
        assert engine.status is SimulationStatus.COMPLETED
        assert len(engine.trajectory) == n
        assert engine.completions == [True]

    @pytest.mark.parametrize('frames', [0, 7, None])
    def test_reset_from_any_state(self, engine, frames):
        engine.play()
        if frames is None:
            engine.scheduler.run_until_idle()
        else:
            for _ in range(frames):
                engine.scheduler.run_frame()
            engine.pause()
        engine.reset()

        assert engine.status is SimulationStatus.IDLE
        assert engine.state == ProjectileState.zero()
        assert len(engine.trajectory) == 0
        assert engine.scheduler.pending == 0
        assert engine.progress == 0.0

    def test_reset_while_running_cancels_tick(self, engine):
        engine.play()
        engine.scheduler.run_frame()
        engine.reset()
        assert engine.scheduler.pending == 0
        engine.scheduler.run_until_idle()
        assert engine.state == ProjectileState.zero()

    def test_can_run_again_after_reset(self, engine):
        engine.play()
        engine.scheduler.run_until_idle()
        first = engine.trajectory.times
        engine.reset()
        engine.play()
        engine.scheduler.run_until_idle()
        assert engine.trajectory.times == first
        assert engine.completions == [True, True]


class TestTiming:

    def test_times_strictly_increasing(self, engine):
        engine.play()
        engine.scheduler.run_until_idle()
        times = np.array(engine.trajectory.times)
        assert np.all(np.diff(times) > 0)

    def test_fixed_step_between_samples(self, engine):
        engine.play()
        engine.scheduler.run_until_idle()
        times = np.array(engine.trajectory.times[:-1])
        assert np.allclose(np.diff(times), engine.config.time_step)

    def test_samples_never_below_ground(self, engine):
        engine.play()
        engine.scheduler.run_until_idle()
        ys = engine.trajectory.as_arrays()['y']
        assert np.all(ys >= -1e-9)

    def test_progress_monotonic_and_bounded(self, engine):
        engine.play()
        progress = []
        while engine.scheduler.pending:
            engine.scheduler.run_frame()
            progress.append(engine.progress)
        assert all(0.0 <= p <= 1.0 for p in progress)
        assert progress == sorted(progress)
        assert progress[-1] == 1.0

    def test_pause_resume_lands_at_same_time(self, params):
        uninterrupted = SimulationEngine(params)
        uninterrupted.play()
        uninterrupted.scheduler.run_until_idle()

        engine = SimulationEngine(params)
        engine.play()
        run_until(engine, lambda: engine.state.elapsed_time >= 1.0)
        engine.pause()
        for _ in range(20):
            engine.scheduler.run_frame()
        engine.play()
        engine.scheduler.run_until_idle()

        assert engine.state.elapsed_time == uninterrupted.state.elapsed_time
        assert engine.state.elapsed_time == compute_results(params).time_of_flight
        assert engine.trajectory.times == uninterrupted.trajectory.times

    def test_time_step_independent_of_frames(self, params):
        coarse = SimulationEngine(params, SimulationConfig(time_step=0.1))
        coarse.play()
        frames = coarse.scheduler.run_until_idle()
        # ceil(T / dt) ticks, the last one lands
        assert frames == int(np.ceil(coarse.results.time_of_flight / 0.1))
        assert coarse.state.elapsed_time == coarse.results.time_of_flight

    def test_tick_landing_exactly_on_flight_time(self):
        # vy = 9.8 m/s, g = 9.8 → T = 2.0 s, reached exactly on the 8th tick
        params = LaunchParameters(9.8, 90.0, 9.8)
        engine = SimulationEngine(params, SimulationConfig(time_step=0.25))
        engine.play()
        engine.scheduler.run_until_idle()
        times = engine.trajectory.times
        assert times[-1] == engine.results.time_of_flight
        assert len(times) == len(set(times))
        assert engine.is_completed

    def test_degenerate_flight_completes_on_first_tick(self):
        completions = []
        engine = SimulationEngine(LaunchParameters(15.0, 0.0, 9.8),
                                  on_completed=lambda: completions.append(1))
        engine.play()
        assert engine.scheduler.run_until_idle() == 1
        assert engine.is_completed
        assert engine.progress == 0.0
        assert engine.state.elapsed_time == 0.0
        assert engine.state.position == (0.0, 0.0)
        assert completions == [1]
        # the landing sample replaces the launch sample
        assert engine.trajectory.times == (0.0,)
        assert engine.trajectory.positions == ((0.0, 0.0),)
        assert engine.trajectory.velocities == ((15.0, 0.0),)


class TestCancellation:

    def test_stale_tick_after_pause_is_ignored(self, params):
        sched = LeakyScheduler()
        engine = SimulationEngine(params, scheduler=sched)
        engine.play()
        sched.fire_all()
        engine.pause()
        state = engine.state
        n = len(engine.trajectory)
        sched.fire_all()
        assert engine.state == state
        assert len(engine.trajectory) == n

    def test_stale_tick_after_reset_is_ignored(self, params):
        sched = LeakyScheduler()
        engine = SimulationEngine(params, scheduler=sched)
        engine.play()
        engine.reset()
        sched.fire_all()
        assert engine.state == ProjectileState.zero()
        assert len(engine.trajectory) == 0

    def test_pause_then_play_does_not_double_step(self, params):
        sched = LeakyScheduler()
        engine = SimulationEngine(params, scheduler=sched)
        engine.play()
        engine.pause()
        engine.play()
        sched.fire_all()
        # two callbacks fired, only the live one advanced the clock
        assert len(engine.trajectory) == 2
        assert len(sched.queue) == 1

    def test_pause_from_update_callback(self, params):
        engine = SimulationEngine(params)
        engine.on_state_updated = lambda state: engine.pause()
        engine.play()
        engine.scheduler.run_until_idle()
        assert engine.is_paused
        assert len(engine.trajectory) == 2


class TestParameters:

    def test_invalid_params_rejected_at_construction(self):
        with pytest.raises(InvalidParameterError):
            SimulationEngine(LaunchParameters(20.0, 45.0, 0.0))

    def test_invalid_params_rejected_when_set(self, engine, params):
        with pytest.raises(InvalidParameterError):
            engine.params = LaunchParameters(20.0, 45.0, 0.0)
        assert engine.params == params
        assert engine.status is SimulationStatus.IDLE
        assert engine.snapshot().results == compute_results(params)

    def test_invalid_params_rejected_while_paused(self, engine, params):
        engine.play()
        engine.scheduler.run_frame()
        engine.pause()
        with pytest.raises(InvalidParameterError):
            engine.params = LaunchParameters(-5.0, 45.0, 9.8)
        assert engine.params == params
        assert engine.is_paused

    def test_configured_limits_enforced(self):
        with pytest.raises(InvalidParameterError):
            SimulationEngine(LaunchParameters(20.0, 2.0, 9.8),
                             SimulationConfig(limits=LIMITS))

        engine = SimulationEngine(config=SimulationConfig(limits=LIMITS))
        with pytest.raises(InvalidParameterError):
            engine.params = LaunchParameters(20.0, 2.0, 9.8)
        assert engine.params == LaunchParameters()

    def test_invalid_time_step(self):
        with pytest.raises(InvalidParameterError):
            SimulationConfig(time_step=0.0)

    def test_params_must_be_launch_parameters(self, engine):
        with pytest.raises(TypeError):
            engine.params = (20.0, 45.0, 9.8)

    def test_results_follow_params_while_idle(self, engine):
        engine.params = LaunchParameters(10.0, 30.0, 9.8)
        assert engine.results == compute_results(LaunchParameters(10.0, 30.0, 9.8))

    def test_results_frozen_while_paused(self, engine, params):
        engine.play()
        engine.scheduler.run_frame()
        engine.pause()
        engine.params = LaunchParameters(50.0, 60.0, 3.0)
        assert engine.results == compute_results(params)

        engine.play()
        engine.scheduler.run_until_idle()
        assert engine.state.elapsed_time == compute_results(params).time_of_flight

        engine.reset()
        assert engine.results == compute_results(LaunchParameters(50.0, 60.0, 3.0))


class TestSnapshot:

    def test_snapshot_reflects_engine(self, engine):
        engine.play()
        for _ in range(3):
            engine.scheduler.run_frame()
        snap = engine.snapshot()
        assert snap.is_playing and not snap.is_paused
        assert snap.state == engine.state
        assert snap.results == engine.results
        assert snap.progress == engine.progress
        assert len(snap.trajectory) == 4

    def test_snapshot_trajectory_is_a_copy(self, engine):
        engine.play()
        snap = engine.snapshot()
        snap.trajectory.append((1.0, 1.0), (0.0, 0.0), 99.0)
        assert len(engine.trajectory) == 1
