"""
Predictions & Reference Checks
==============================
Two ways of holding the solver up against known numbers:

1. **Student predictions**: before launching, a student predicts time of
   flight, peak height and range. After landing, each prediction is
   compared with the closed-form value (absolute difference, % error,
   accuracy label).

2. **Reference scenarios**: hand-worked textbook launches with published
   answers. Each one is solved in closed form *and* played through the
   stepping engine, and both are checked against the expected values.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from .constants import LIMITS, STANDARD_GRAVITY
from .engine import SimulationConfig, SimulationEngine
from .projectile import LaunchParameters
from .results import DerivedResults, compute_results

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
#  Student predictions
# ══════════════════════════════════════════════════════════════════════════

ACCURACY_LEVELS = [
    # (max % error, label)
    (5.0, 'Excellent!'),
    (10.0, 'Good'),
    (20.0, 'Close'),
]


@dataclass(frozen=True)
class Predictions:
    """Student's guesses, entered before launch. Negative entries become 0."""
    time_of_flight: float = 0.0     # s
    max_height: float = 0.0         # m
    horizontal_range: float = 0.0   # m

    def __post_init__(self):
        for name in ('time_of_flight', 'max_height', 'horizontal_range'):
            object.__setattr__(self, name, max(0.0, float(getattr(self, name))))


@dataclass(frozen=True)
class ComparisonResult:
    """One predicted-vs-actual row."""
    label: str
    predicted: float
    actual: float
    difference: float       # |predicted − actual|
    percent_error: float    # % of actual, 0 when actual is 0
    unit: str

    @property
    def accuracy_label(self) -> str:
        return accuracy_label(self.percent_error)


def accuracy_label(percent_error: float) -> str:
    for threshold, label in ACCURACY_LEVELS:
        if percent_error <= threshold:
            return label
    return 'Try again'


def _compare(label: str, predicted: float, actual: float, unit: str) -> ComparisonResult:
    difference = abs(predicted - actual)
    percent = difference / actual * 100.0 if actual > 0 else 0.0
    return ComparisonResult(label, predicted, actual, difference, percent, unit)


def compare_predictions(predictions: Predictions,
                        results: DerivedResults) -> List[ComparisonResult]:
    """Compare predictions with actual results: time of flight, height, range."""
    return [
        _compare('Time of Flight', predictions.time_of_flight,
                 results.time_of_flight, 's'),
        _compare('Maximum Height', predictions.max_height,
                 results.max_height, 'm'),
        _compare('Horizontal Range', predictions.horizontal_range,
                 results.horizontal_range, 'm'),
    ]


def format_comparison(comparisons: List[ComparisonResult]) -> str:
    lines = [f"{'Quantity':<18} {'Predicted':>12} {'Actual':>12} "
             f"{'Error %':>8}  Verdict",
             "-" * 64]
    for c in comparisons:
        lines.append(f"{c.label:<18} {c.predicted:>10.2f} {c.unit:<1} "
                     f"{c.actual:>10.2f} {c.unit:<1} {c.percent_error:>7.1f}%  "
                     f"{c.accuracy_label}")
    return '\n'.join(lines)


# ══════════════════════════════════════════════════════════════════════════
#  Reference scenarios (worked examples)
# ══════════════════════════════════════════════════════════════════════════

# expected values: (vx, vy, time_of_flight, max_height, horizontal_range)
REFERENCE_SCENARIOS = [
    {
        'name': '45° launch (max range)',
        'speed': 20.0, 'angle': 45.0, 'gravity': STANDARD_GRAVITY,
        'expected': (14.142, 14.142, 2.886, 10.204, 40.816),
    },
    {
        'name': 'Near-vertical (90° clamped)',
        'speed': 10.0, 'angle': 90.0, 'gravity': STANDARD_GRAVITY,
        'clamp': True,
        'expected': (0.872, 9.962, 2.033, 5.063, 1.772),
    },
    {
        'name': 'Near-horizontal 5°',
        'speed': 20.0, 'angle': 5.0, 'gravity': STANDARD_GRAVITY,
        'expected': (19.924, 1.743, 0.356, 0.155, 7.087),
    },
    {
        'name': 'Lunar 45° launch',
        'speed': 20.0, 'angle': 45.0, 'gravity': 1.62,
        'expected': (14.142, 14.142, 17.459, 61.728, 246.914),
    },
]


@dataclass
class ValidationResult:
    """Result of one reference scenario."""
    name: str
    params: LaunchParameters
    expected: Dict[str, Optional[float]]
    computed: Dict[str, float]
    errors_pct: Dict[str, float]
    engine_landing_time: float
    engine_landing_x: float

    @property
    def max_error_pct(self) -> float:
        return max(self.errors_pct.values()) if self.errors_pct else 0.0


_FIELDS = ('initial_velocity_x', 'initial_velocity_y', 'time_of_flight',
           'max_height', 'horizontal_range')


def _scenario_params(scenario: dict) -> LaunchParameters:
    params = LaunchParameters(scenario['speed'], scenario['angle'],
                              scenario['gravity'])
    if scenario.get('clamp'):
        params = params.clamped(LIMITS)
    return params


def validate_scenario(scenario: dict, time_step: Optional[float] = None) -> ValidationResult:
    """Solve one scenario in closed form, then play it through the engine."""
    params = _scenario_params(scenario)
    results = compute_results(params)

    expected = dict(zip(_FIELDS, scenario['expected']))
    computed = {f: getattr(results, f) for f in _FIELDS}
    errors = {}
    for f, ref in expected.items():
        if not ref:
            continue
        errors[f] = 100.0 * abs(computed[f] - ref) / abs(ref)

    config = SimulationConfig() if time_step is None else SimulationConfig(time_step)
    engine = SimulationEngine(params, config)
    engine.play()
    engine.scheduler.run_until_idle()
    landing = engine.state
    logger.debug("%s: worst error %.4f%%, engine landed at t=%.4f s",
                 scenario['name'], max(errors.values(), default=0.0),
                 landing.elapsed_time)

    return ValidationResult(
        name=scenario['name'],
        params=params,
        expected=expected,
        computed=computed,
        errors_pct=errors,
        engine_landing_time=landing.elapsed_time,
        engine_landing_x=landing.position.x,
    )


def run_all_validations(scenarios: Optional[List[dict]] = None,
                        verbose: bool = True) -> List[ValidationResult]:
    """Validate every reference scenario, optionally printing a table."""
    scenarios = REFERENCE_SCENARIOS if scenarios is None else scenarios
    results = [validate_scenario(s) for s in scenarios]

    if verbose:
        print(f"\n{'='*75}")
        print("  VALIDATION: worked textbook scenarios")
        print(f"{'='*75}")
        print(f"{'Scenario':<28} {'ToF (s)':>8} {'H (m)':>8} {'R (m)':>9} "
              f"{'Max err %':>10} {'Engine T':>9}")
        print("-" * 75)
        for r in results:
            print(f"{r.name:<28} {r.computed['time_of_flight']:>8.3f} "
                  f"{r.computed['max_height']:>8.3f} "
                  f"{r.computed['horizontal_range']:>9.3f} "
                  f"{r.max_error_pct:>10.2f} {r.engine_landing_time:>9.3f}")
        worst = np.max([r.max_error_pct for r in results]) if results else 0.0
        print("-" * 75)
        status = "✓ PASS" if worst < 0.5 else "✗ CHECK SOLVER"
        print(f"  Worst error: {worst:.2f}%  Status: {status}")
        print(f"{'='*75}\n")

    return results
