"""
Visualization Engine
====================
Plots and animation over what the simulation engine produces:
  1. Trajectory (height vs horizontal distance) with launch/peak/landing
  2. Motion graphs (displacement-time, velocity-time)
  3. Prediction comparison bars
  4. Reference scenario validation
  5. Animated flight (GIF), driven tick-by-tick through a FrameScheduler
"""

import os
from typing import List

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .comparison import ComparisonResult, ValidationResult
from .engine import FrameScheduler, ProjectileState, SimulationEngine
from .results import DerivedResults
from .trajectory import SERIES, TrajectoryData, highlight_points


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
    'font_family': 'monospace',
}

HIGHLIGHT_STYLE = {
    'launch':  ('o', '#00e676'),
    'peak':    ('^', '#10b981'),
    'landing': ('x', '#f59e0b'),
}

ACCURACY_COLORS = {
    'Excellent!': '#00e676',
    'Good': '#ffeb3b',
    'Close': '#ff6b35',
    'Try again': '#ff5252',
}


def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def _legend(ax, **kwargs):
    ax.legend(facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'], **kwargs)


def _save(fig, save_path):
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


def _flight_limits(results: DerivedResults):
    return (max(results.horizontal_range * 1.1, 10.0),
            max(results.max_height * 1.3, 10.0))


# ══════════════════════════════════════════════════════════════════════════
#  1. Trajectory Plot
# ══════════════════════════════════════════════════════════════════════════

def plot_trajectory(trajectory: TrajectoryData, results: DerivedResults,
                    title: str = 'Projectile Trajectory',
                    save_path: str = None, show: bool = False) -> plt.Figure:
    """Height vs horizontal distance, with launch, peak and landing marked."""
    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    data = trajectory.as_arrays()
    ax.plot(data['x'], data['y'], color=STYLE['accent_colors'][0],
            linewidth=2.5, label='Path')

    for point in highlight_points(results):
        marker, color = HIGHLIGHT_STYLE[point.kind]
        ax.plot(point.position.x, point.position.y, marker, color=color,
                markersize=10, markeredgewidth=2, label=point.label, zorder=5)

    # Dashed drop line under the peak
    apex = results.apex_position
    ax.plot([apex.x, apex.x], [0, apex.y], '--',
            color=HIGHLIGHT_STYLE['peak'][1], alpha=0.6)

    x_max, y_max = _flight_limits(results)
    ax.set_xlim(0, x_max)
    ax.set_ylim(0, y_max)
    ax.set_xlabel('Horizontal distance (m)', fontsize=12)
    ax.set_ylabel('Height (m)', fontsize=12)
    ax.set_title(title, fontsize=13, fontweight='bold')
    _legend(ax, loc='upper right', fontsize=10)

    plt.tight_layout()
    _save(fig, save_path)
    if show:
        plt.show()
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  2. Motion Graphs
# ══════════════════════════════════════════════════════════════════════════

def plot_motion_graphs(trajectory: TrajectoryData, results: DerivedResults,
                       save_path: str = None) -> plt.Figure:
    """2×2 grid: x(t), y(t), vx(t), vy(t)."""
    fig, axes = plt.subplots(2, 2, figsize=(14, 8))
    _apply_dark_style(fig, axes)

    t_max = max(results.time_of_flight * 1.1, 1.0)
    for ax, name, color in zip(axes.flatten(), ('x', 'y', 'vx', 'vy'),
                               STYLE['accent_colors']):
        _, _, label, unit = SERIES[name]
        points = trajectory.series(name)
        ax.plot([p.time for p in points], [p.value for p in points],
                color=color, linewidth=2)
        ax.axhline(y=0, color='#555', linestyle='--', alpha=0.5)
        ax.set_xlim(0, t_max)
        ax.set_xlabel('Time (s)')
        ax.set_ylabel(f'{label} ({unit})')
        ax.set_title(label.upper(), fontweight='bold')

    fig.suptitle('DISPLACEMENT & VELOCITY vs TIME', fontsize=15,
                 fontweight='bold', color='#00d4ff')
    plt.tight_layout()
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  3. Prediction Comparison
# ══════════════════════════════════════════════════════════════════════════

def plot_comparison(comparisons: List[ComparisonResult],
                    save_path: str = None) -> plt.Figure:
    """Predicted vs actual bars, one panel per quantity."""
    fig, axes = plt.subplots(1, len(comparisons), figsize=(5 * len(comparisons), 5))
    axes = np.atleast_1d(axes)
    _apply_dark_style(fig, axes)

    for ax, c in zip(axes, comparisons):
        ax.bar(['Predicted', 'Actual'], [c.predicted, c.actual],
               color=[ACCURACY_COLORS[c.accuracy_label], '#00d4ff'],
               edgecolor='#444')
        ax.set_ylabel(c.unit)
        ax.set_title(f'{c.label}\n{c.percent_error:.1f}% ({c.accuracy_label})',
                     fontweight='bold')

    plt.tight_layout()
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  4. Validation
# ══════════════════════════════════════════════════════════════════════════

def plot_validation(validation: List[ValidationResult],
                    save_path: str = None) -> plt.Figure:
    """Per-scenario closed-form error and engine landing-time agreement."""
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))
    _apply_dark_style(fig, axes)
    names = [v.name for v in validation]
    idx = np.arange(len(validation))

    ax = axes[0]
    ax.bar(idx, [v.max_error_pct for v in validation], color='#00d4ff')
    ax.set_xticks(idx)
    ax.set_xticklabels(names, rotation=20, ha='right')
    ax.set_ylabel('Max error vs reference (%)')
    ax.set_title('Closed-form Error', fontweight='bold')

    ax = axes[1]
    ax.bar(idx - 0.2, [v.computed['time_of_flight'] for v in validation],
           width=0.4, color='#ff6b35', label='Closed form')
    ax.bar(idx + 0.2, [v.engine_landing_time for v in validation],
           width=0.4, color='#00e676', label='Engine')
    ax.set_xticks(idx)
    ax.set_xticklabels(names, rotation=20, ha='right')
    ax.set_ylabel('Time of flight (s)')
    ax.set_title('Landing Time', fontweight='bold')
    _legend(ax, fontsize=9)

    plt.tight_layout()
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  5. Animated Flight (GIF)
# ══════════════════════════════════════════════════════════════════════════

def record_frames(engine: SimulationEngine,
                  max_frames: int = 100_000) -> List[ProjectileState]:
    """
    Play the engine to completion, one scheduler frame at a time.

    Returns the projectile state after every frame. The engine must use a
    FrameScheduler; it is started if idle.
    """
    scheduler = engine.scheduler
    if not isinstance(scheduler, FrameScheduler):
        raise TypeError("record_frames needs an engine driven by a FrameScheduler")

    engine.play()
    states = [engine.state]
    while scheduler.pending and len(states) <= max_frames:
        scheduler.run_frame()
        states.append(engine.state)
    return states


def create_engine_animation(engine: SimulationEngine,
                            save_path: str = 'outputs/flight_anim.gif',
                            frames: int = 100) -> str:
    """Create animated GIF of the engine's flight with trail."""
    from matplotlib.animation import FuncAnimation, PillowWriter

    states = record_frames(engine)
    results = engine.results

    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)
    x_max, y_max = _flight_limits(results)
    ax.set_xlim(0, x_max)
    ax.set_ylim(0, y_max)
    ax.set_xlabel('Horizontal distance (m)', fontsize=12)
    ax.set_ylabel('Height (m)', fontsize=12)
    ax.set_title(f'Flight Animation (v₀={engine.params.initial_speed:.1f} m/s, '
                 f'θ={engine.params.launch_angle_deg:.1f}°)',
                 fontsize=14, fontweight='bold')

    trail_line, = ax.plot([], [], color='#00d4ff', linewidth=1.5, alpha=0.6)
    point, = ax.plot([], [], 'o', color='#00d4ff', markersize=8)
    time_text = ax.text(0.02, 0.95, '', transform=ax.transAxes,
                        color=STYLE['text_color'], fontsize=11, fontfamily='monospace')

    xs = np.array([s.position.x for s in states])
    ys = np.array([s.position.y for s in states])

    # Subsample for animation
    total_pts = len(states)
    step = max(1, total_pts // frames)
    indices = list(range(0, total_pts, step))
    if indices[-1] != total_pts - 1:
        indices.append(total_pts - 1)

    def init():
        trail_line.set_data([], [])
        point.set_data([], [])
        time_text.set_text('')
        return trail_line, point, time_text

    def animate(frame_idx):
        idx = indices[min(frame_idx, len(indices) - 1)]
        state = states[idx]
        trail_line.set_data(xs[:idx+1], ys[:idx+1])
        point.set_data([xs[idx]], [ys[idx]])
        progress = (min(state.elapsed_time / results.time_of_flight, 1.0)
                    if results.time_of_flight > 0 else 0.0)
        time_text.set_text(
            f't={state.elapsed_time:.2f}s | v={state.speed:.1f} m/s | '
            f'h={state.position.y:.1f} m | {progress:.0%}'
        )
        return trail_line, point, time_text

    anim = FuncAnimation(fig, animate, init_func=init, frames=len(indices),
                         interval=50, blit=True)
    anim.save(save_path, writer=PillowWriter(fps=20),
              savefig_kwargs={'facecolor': STYLE['bg_color']})
    plt.close(fig)
    return save_path
