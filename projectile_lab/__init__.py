"""
Projectile Motion Lab
=====================
Simulation core of an interactive projectile-motion lesson:
  - Closed-form kinematics (no drag, uniform gravity, flat ground)
  - Derived results: time of flight, peak height, range
  - Stepped play/pause/reset engine with an injectable frame scheduler
  - Trajectory history, graph series and launch/peak/landing markers
  - Student prediction scoring and worked reference scenarios

The engine advances a fixed virtual clock and records one sample per
tick, so a run is deterministic regardless of display frame rate.
"""

from .constants import (
    STANDARD_GRAVITY, DEFAULT_INITIAL_SPEED, DEFAULT_LAUNCH_ANGLE,
    LIMITS, TIME_STEP,
)
from .errors import ProjectileLabError, InvalidParameterError
from .kinematics import (
    Vector2D, velocity_components, time_to_apex, time_of_flight,
    max_height, horizontal_range, position_at, velocity_at, speed_at,
)
from .projectile import LaunchParameters
from .results import DerivedResults, compute_results
from .trajectory import TrajectoryData, DataPoint, HighlightPoint, highlight_points
from .engine import (
    SimulationEngine, SimulationConfig, SimulationStatus, ProjectileState,
    EngineSnapshot, FrameScheduler, TickHandle,
)
from .comparison import (
    Predictions, ComparisonResult, compare_predictions, accuracy_label,
    REFERENCE_SCENARIOS, validate_scenario, run_all_validations,
)

__version__ = "1.0.0"
__all__ = [
    'STANDARD_GRAVITY', 'DEFAULT_INITIAL_SPEED', 'DEFAULT_LAUNCH_ANGLE',
    'LIMITS', 'TIME_STEP',
    'ProjectileLabError', 'InvalidParameterError',
    'Vector2D', 'velocity_components', 'time_to_apex', 'time_of_flight',
    'max_height', 'horizontal_range', 'position_at', 'velocity_at', 'speed_at',
    'LaunchParameters', 'DerivedResults', 'compute_results',
    'TrajectoryData', 'DataPoint', 'HighlightPoint', 'highlight_points',
    'SimulationEngine', 'SimulationConfig', 'SimulationStatus',
    'ProjectileState', 'EngineSnapshot', 'FrameScheduler', 'TickHandle',
    'Predictions', 'ComparisonResult', 'compare_predictions', 'accuracy_label',
    'REFERENCE_SCENARIOS', 'validate_scenario', 'run_all_validations',
]
