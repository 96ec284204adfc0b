"""Exceptions raised by the projectile lab."""


class ProjectileLabError(Exception):
    """Base class for all lab errors."""


class InvalidParameterError(ProjectileLabError, ValueError):
    """
    Launch or simulation parameter outside its valid domain.

    Raised before a run starts: gravity must be positive, speed must be
    non-negative, every value must be finite and, when limits are given,
    the launch angle must lie inside them.
    """
