"""
Trajectory History
==================
Append-only record of one run: parallel sequences of position,
velocity and elapsed time, one entry per tick, in chronological order.

Also derives the data collaborators draw from the history:
  - graph series (displacement-time, velocity-time) as DataPoints
  - highlight points (launch, peak, landing) from DerivedResults
  - numpy arrays for plotting
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np

from .kinematics import ORIGIN, Vector2D
from .results import DerivedResults


@dataclass(frozen=True)
class DataPoint:
    """One graph sample."""
    time: float     # s, x-axis
    value: float    # m or m/s, y-axis


@dataclass(frozen=True)
class HighlightPoint:
    """Notable point on the path."""
    position: Vector2D
    label: str
    kind: str       # 'launch' | 'peak' | 'landing'


SERIES = {
    # name: (source, component, label, unit)
    'x':  ('positions', 0, 'Horizontal displacement', 'm'),
    'y':  ('positions', 1, 'Vertical displacement', 'm'),
    'vx': ('velocities', 0, 'Horizontal velocity', 'm/s'),
    'vy': ('velocities', 1, 'Vertical velocity', 'm/s'),
}


@dataclass
class TrajectoryData:
    """Recorded samples of a run. The three sequences always have equal length."""
    _positions: List[Vector2D] = field(default_factory=list)
    _velocities: List[Vector2D] = field(default_factory=list)
    _times: List[float] = field(default_factory=list)

    @property
    def positions(self) -> Tuple[Vector2D, ...]:
        return tuple(self._positions)

    @property
    def velocities(self) -> Tuple[Vector2D, ...]:
        return tuple(self._velocities)

    @property
    def times(self) -> Tuple[float, ...]:
        return tuple(self._times)

    def __len__(self) -> int:
        return len(self._times)

    @property
    def is_empty(self) -> bool:
        return not self._times

    def append(self, position: Vector2D, velocity: Vector2D, time: float) -> None:
        self._positions.append(Vector2D(*position))
        self._velocities.append(Vector2D(*velocity))
        self._times.append(float(time))

    def clear(self) -> None:
        self._positions.clear()
        self._velocities.clear()
        self._times.clear()

    def copy(self) -> 'TrajectoryData':
        return TrajectoryData(list(self._positions), list(self._velocities),
                              list(self._times))

    def last(self) -> Tuple[Vector2D, Vector2D, float]:
        """Most recent (position, velocity, time) sample."""
        if not self._times:
            raise IndexError("trajectory is empty")
        return self._positions[-1], self._velocities[-1], self._times[-1]

    def as_arrays(self) -> Dict[str, np.ndarray]:
        """Column arrays: time, x, y, vx, vy, speed. Each has shape (N,)."""
        pos = np.array(self._positions, dtype=float).reshape(-1, 2)
        vel = np.array(self._velocities, dtype=float).reshape(-1, 2)
        return {
            'time': np.array(self._times, dtype=float),
            'x': pos[:, 0],
            'y': pos[:, 1],
            'vx': vel[:, 0],
            'vy': vel[:, 1],
            'speed': np.hypot(vel[:, 0], vel[:, 1]),
        }

    def series(self, name: str) -> List[DataPoint]:
        """Graph series 'x', 'y', 'vx' or 'vy' against time."""
        if name not in SERIES:
            raise KeyError(f"Unknown series '{name}'. "
                           f"Choose from: {list(SERIES.keys())}")
        source, component, _, _ = SERIES[name]
        values = getattr(self, '_' + source)
        return [DataPoint(t, v[component]) for t, v in zip(self._times, values)]


def highlight_points(results: DerivedResults) -> List[HighlightPoint]:
    """Launch, peak and landing markers for a solved launch."""
    return [
        HighlightPoint(ORIGIN, 'Launch', 'launch'),
        HighlightPoint(results.apex_position,
                       f'Peak: {results.max_height:.1f}m', 'peak'),
        HighlightPoint(results.landing_position,
                       f'Range: {results.horizontal_range:.1f}m', 'landing'),
    ]
