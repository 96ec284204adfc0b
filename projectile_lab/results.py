"""
Derived Results
===============
Composes the closed-form kinematics into the full outcome of a launch:

    1. velocity components   (vx, vy)
    2. time values           (time to apex, time of flight)
    3. heights and distances (max height, horizontal range)

Output: DerivedResults dataclass, a pure function of LaunchParameters.
"""

from dataclasses import dataclass

from . import kinematics
from .constants import DECIMAL_PLACES
from .kinematics import Vector2D
from .projectile import LaunchParameters


@dataclass(frozen=True)
class DerivedResults:
    """Closed-form outcome of one parameter set."""
    initial_velocity_x: float    # m/s, constant throughout the flight
    initial_velocity_y: float    # m/s
    time_to_max_height: float    # s
    time_of_flight: float        # s, always 2 × time_to_max_height
    max_height: float            # m
    horizontal_range: float      # m

    @property
    def launch_velocity(self) -> Vector2D:
        return Vector2D(self.initial_velocity_x, self.initial_velocity_y)

    @property
    def landing_velocity(self) -> Vector2D:
        """Same speed as launch, vertical component mirrored."""
        return Vector2D(self.initial_velocity_x, -self.initial_velocity_y)

    @property
    def landing_position(self) -> Vector2D:
        return Vector2D(self.horizontal_range, 0.0)

    @property
    def apex_position(self) -> Vector2D:
        return Vector2D(self.horizontal_range / 2.0, self.max_height)

    @property
    def is_degenerate(self) -> bool:
        """True when there is no vertical launch velocity (zero-length flight)."""
        return self.time_of_flight == 0

    def summary(self) -> str:
        """Human-readable summary string."""
        p = DECIMAL_PLACES
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  DERIVED RESULTS                                     ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Launch vx    : {self.initial_velocity_x:>10.{p}f} m/s{'':<22s} ║",
            f"║  Launch vy    : {self.initial_velocity_y:>10.{p}f} m/s{'':<22s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Time to peak : {self.time_to_max_height:>10.{p}f} s{'':<24s} ║",
            f"║  Flight time  : {self.time_of_flight:>10.{p}f} s{'':<24s} ║",
            f"║  Max height   : {self.max_height:>10.{p}f} m{'':<24s} ║",
            f"║  Range        : {self.horizontal_range:>10.{p}f} m{'':<24s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)


def compute_results(params: LaunchParameters) -> DerivedResults:
    """
    Solve a launch in closed form.

    Raises InvalidParameterError for gravity ≤ 0 or negative speed
    rather than returning NaN/inf.
    """
    params.validate()
    g = params.gravity

    vx, vy = kinematics.velocity_components(params.initial_speed,
                                            params.launch_angle_deg)

    t_apex = kinematics.time_to_apex(vy, g)
    t_flight = kinematics.time_of_flight(vy, g)

    h_max = kinematics.max_height(vy, g)
    r = kinematics.horizontal_range(vx, t_flight)

    return DerivedResults(
        initial_velocity_x=vx,
        initial_velocity_y=vy,
        time_to_max_height=t_apex,
        time_of_flight=t_flight,
        max_height=h_max,
        horizontal_range=r,
    )
