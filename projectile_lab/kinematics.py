"""
Closed-Form Kinematics
======================
Textbook equations of projectile motion under uniform gravity:

    x(t)  = vx · t
    y(t)  = vy · t − ½ g t²
    vx(t) = vx               (no horizontal force)
    vy(t) = vy − g t

Assumptions:
  - constant g, no air resistance
  - motion in the x-y plane
  - launch and landing at the same elevation (y = 0)

Every function here is pure. Nothing guards against g = 0; callers
validate parameters first (see LaunchParameters.validate).
"""

from typing import NamedTuple, Tuple

import numpy as np

from .constants import DEG_TO_RAD


class Vector2D(NamedTuple):
    """Planar vector (m or m/s)."""
    x: float
    y: float

    @property
    def magnitude(self) -> float:
        return speed_at(self)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y])


ORIGIN = Vector2D(0.0, 0.0)


# ── Launch velocity ────────────────────────────────────────────────────────

def velocity_components(speed: float, angle_deg: float) -> Tuple[float, float]:
    """
    Split launch speed into (vx, vy).

    vx = v₀ cos θ,  vy = v₀ sin θ   (θ given in degrees)
    """
    angle = angle_deg * DEG_TO_RAD
    return float(speed * np.cos(angle)), float(speed * np.sin(angle))


# ── Time ───────────────────────────────────────────────────────────────────

def time_to_apex(vy: float, g: float) -> float:
    """Time to reach the peak, where vertical velocity is zero: t = vy / g."""
    return vy / g


def time_of_flight(vy: float, g: float) -> float:
    """
    Total flight time back to launch elevation: T = 2 vy / g.

    Only valid when launch and landing heights are equal.
    """
    return 2.0 * vy / g


# ── Height & range ─────────────────────────────────────────────────────────

def max_height(vy: float, g: float) -> float:
    """Peak height: h = vy² / (2g)."""
    return vy * vy / (2.0 * g)


def horizontal_range(vx: float, flight_time: float) -> float:
    """Horizontal distance covered: R = vx · T."""
    return vx * flight_time


# ── State at time t ────────────────────────────────────────────────────────

def position_at(vx: float, vy: float, g: float, t: float) -> Vector2D:
    """
    Position after t seconds.

    Beyond the time of flight this is an extrapolation below ground
    and must be clamped before display.
    """
    return Vector2D(vx * t, vy * t - 0.5 * g * t * t)


def velocity_at(vx: float, vy: float, g: float, t: float) -> Vector2D:
    return Vector2D(vx, vy - g * t)


def speed_at(velocity) -> float:
    """Resultant speed |v| = √(vx² + vy²)."""
    return float(np.hypot(velocity[0], velocity[1]))
