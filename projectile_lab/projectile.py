"""
Launch Parameters
=================
Defines the LaunchParameters dataclass: the three inputs a student sets
before launching.

  - initial_speed     (m/s)
  - launch_angle_deg  (degrees above horizontal)
  - gravity           (m/s², downward)

Instances are immutable and are passed into the solver and engine by
value. `validate()` enforces the physical domain, `clamped()` mirrors
the input layer by pulling every value into the configured LIMITS.
"""

import math
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from .constants import (
    DEFAULT_INITIAL_SPEED, DEFAULT_LAUNCH_ANGLE, LIMITS, PHYSICAL_ANGLE_RANGE,
    STANDARD_GRAVITY,
)
from .errors import InvalidParameterError
from .kinematics import Vector2D, velocity_components

Limits = Dict[str, Tuple[float, float]]


def _clamp(value: float, bounds: Tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))


@dataclass(frozen=True)
class LaunchParameters:
    """
    Initial conditions for a single run.
    """
    initial_speed: float = DEFAULT_INITIAL_SPEED     # m/s
    launch_angle_deg: float = DEFAULT_LAUNCH_ANGLE   # degrees above horizontal
    gravity: float = STANDARD_GRAVITY                # m/s²

    def launch_velocity(self) -> Vector2D:
        """Launch speed + angle as a (vx, vy) vector."""
        return Vector2D(*velocity_components(self.initial_speed,
                                             self.launch_angle_deg))

    def validate(self, limits: Optional[Limits] = None) -> 'LaunchParameters':
        """
        Reject parameters the closed-form solution cannot handle.

        The launch angle must lie in [0°, 90°], or inside limits['angle']
        when `limits` is given. Returns self so calls can be chained.
        """
        for name in ('initial_speed', 'launch_angle_deg', 'gravity'):
            if not math.isfinite(getattr(self, name)):
                raise InvalidParameterError(
                    f"{name} must be finite, got {getattr(self, name)!r}")
        if self.gravity <= 0:
            raise InvalidParameterError(
                f"gravity must be positive, got {self.gravity} m/s²")
        if self.initial_speed < 0:
            raise InvalidParameterError(
                f"initial speed must be non-negative, got {self.initial_speed} m/s")
        low, high = PHYSICAL_ANGLE_RANGE
        if limits is not None and 'angle' in limits:
            low, high = limits['angle']
        if not low <= self.launch_angle_deg <= high:
            raise InvalidParameterError(
                f"launch angle {self.launch_angle_deg}° outside "
                f"[{low}°, {high}°]")
        return self

    def clamped(self, limits: Optional[Limits] = None) -> 'LaunchParameters':
        """Copy with each value pulled into the configured limits."""
        limits = LIMITS if limits is None else limits
        return replace(
            self,
            initial_speed=_clamp(self.initial_speed, limits['speed']),
            launch_angle_deg=_clamp(self.launch_angle_deg, limits['angle']),
            gravity=_clamp(self.gravity, limits['gravity']),
        )
