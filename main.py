#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  PROJECTILE MOTION LAB: Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Runs one complete lab session:
    1. Launch parameters (clamped to the lab's input limits)
    2. Closed-form results
    3. Stepped playback through the simulation engine
    4. Trajectory and motion graphs
    5. Prediction scoring (optional)
    6. Validation against worked textbook scenarios
    7. Animated flight GIF

  All outputs saved to outputs/ directory.

  Usage:
    python main.py                                  # defaults: 20 m/s, 45°, 9.8 m/s²
    python main.py --speed 30 --angle 60 --gravity 1.62
    python main.py --predict 2.9 10 41              # score predictions (T, H, R)
    python main.py --quick                          # skip animation
═══════════════════════════════════════════════════════════════════════════════
"""

import argparse
import logging
import os
import sys
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from projectile_lab.constants import (
    DEFAULT_INITIAL_SPEED, DEFAULT_LAUNCH_ANGLE, LIMITS, STANDARD_GRAVITY,
    TIME_STEP,
)
from projectile_lab.comparison import (
    Predictions, compare_predictions, format_comparison, run_all_validations,
)
from projectile_lab.engine import SimulationConfig, SimulationEngine
from projectile_lab.errors import InvalidParameterError
from projectile_lab.projectile import LaunchParameters
from projectile_lab.visualization import (
    plot_trajectory, plot_motion_graphs, plot_comparison, plot_validation,
    create_engine_animation, ensure_output_dir,
)

import matplotlib.pyplot as plt

logger = logging.getLogger("projectile_lab.main")


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Projectile motion lab: closed-form solver and stepped playback.")
    parser.add_argument("--speed", type=float, default=DEFAULT_INITIAL_SPEED,
                        help=f"launch speed in m/s (default {DEFAULT_INITIAL_SPEED})")
    parser.add_argument("--angle", type=float, default=DEFAULT_LAUNCH_ANGLE,
                        help=f"launch angle in degrees (default {DEFAULT_LAUNCH_ANGLE})")
    parser.add_argument("--gravity", type=float, default=STANDARD_GRAVITY,
                        help=f"gravitational acceleration in m/s² (default {STANDARD_GRAVITY})")
    parser.add_argument("--time-step", type=float, default=TIME_STEP,
                        help=f"virtual seconds per tick (default {TIME_STEP})")
    parser.add_argument("--predict", type=float, nargs=3,
                        metavar=("TOF", "HEIGHT", "RANGE"),
                        help="score predictions of time of flight, max height and range")
    parser.add_argument("--output", default="outputs",
                        help="directory for plots and the animation (default outputs)")
    parser.add_argument("--quick", action="store_true",
                        help="skip the animated GIF")
    parser.add_argument("--verbose", action="store_true",
                        help="log engine lifecycle events")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    start_time = time.time()
    out = ensure_output_dir(args.output)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Launch Parameters
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Launch Parameters")
    requested = LaunchParameters(args.speed, args.angle, args.gravity)
    params = requested.clamped(LIMITS)
    if params != requested:
        logger.warning("parameters clamped to lab limits: %s -> %s", requested, params)
    print(f"  Speed   : {params.initial_speed:>8.2f} m/s")
    print(f"  Angle   : {params.launch_angle_deg:>8.2f} °")
    print(f"  Gravity : {params.gravity:>8.2f} m/s²")

    try:
        config = SimulationConfig(time_step=args.time_step, limits=LIMITS)
    except InvalidParameterError as exc:
        print(f"  ✗ {exc}")
        return 2

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Closed-form Results
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Closed-form Results")
    engine = SimulationEngine(params, config)
    results = engine.results
    print(results.summary())

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Stepped Playback
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Stepped Playback")
    engine.play()
    frames = engine.scheduler.run_until_idle()
    trajectory = engine.trajectory
    final = engine.state
    print(f"  Frames run    : {frames}")
    print(f"  Samples       : {len(trajectory)}")
    print(f"  Landing time  : {final.elapsed_time:.4f} s")
    print(f"  Landing point : ({final.position.x:.3f}, {final.position.y:.3f}) m")
    print(f"  Landing speed : {final.speed:.3f} m/s")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Trajectory & Motion Graphs
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Trajectory & Motion Graphs")
    fig_traj = plot_trajectory(trajectory, results,
                               save_path=f'{out}/01_trajectory.png')
    plt.close(fig_traj)
    print(f"  ✓ Saved: {out}/01_trajectory.png")

    fig_graphs = plot_motion_graphs(trajectory, results,
                                    save_path=f'{out}/02_motion_graphs.png')
    plt.close(fig_graphs)
    print(f"  ✓ Saved: {out}/02_motion_graphs.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Prediction Scoring
    # ══════════════════════════════════════════════════════════════════════
    if args.predict:
        section("PHASE 5: Your Predictions")
        comparisons = compare_predictions(Predictions(*args.predict), results)
        print(format_comparison(comparisons))
        fig_cmp = plot_comparison(comparisons,
                                  save_path=f'{out}/03_predictions.png')
        plt.close(fig_cmp)
        print(f"\n  ✓ Saved: {out}/03_predictions.png")
    else:
        section("PHASE 5: Predictions SKIPPED (use --predict TOF HEIGHT RANGE)")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Validation
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 6: Validation (Worked Scenarios)")
    validation = run_all_validations(verbose=True)
    fig_val = plot_validation(validation, save_path=f'{out}/04_validation.png')
    plt.close(fig_val)
    print(f"  ✓ Saved: {out}/04_validation.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 7: Flight Animation
    # ══════════════════════════════════════════════════════════════════════
    if not args.quick:
        section("PHASE 7: Flight Animation (GIF)")
        engine.reset()
        create_engine_animation(engine,
                                save_path=f'{out}/05_flight_animation.gif',
                                frames=120)
        print(f"  ✓ Saved: {out}/05_flight_animation.gif")
    else:
        section("PHASE 7: Animation SKIPPED (--quick mode)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"\n  All outputs saved to: {os.path.abspath(out)}/")
    print(f"  Total runtime: {elapsed:.1f} seconds\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
