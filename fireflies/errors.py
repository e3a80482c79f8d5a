"""Exceptions raised by the flock registry and vector helpers."""


class FlockError(Exception):
    """Base class for flock registry errors."""


class CapacityError(FlockError):
    """Raised when adding an agent to a registry that is already full."""

    def __init__(self, capacity: int):
        super().__init__(f"Flock is full ({capacity} agents)")
        self.capacity = capacity


class LeadershipOrderError(FlockError):
    """Raised when an add would break the leaders-first ordering."""


class DegenerateVelocity(FlockError, ArithmeticError):
    """A velocity with zero magnitude has no direction."""
