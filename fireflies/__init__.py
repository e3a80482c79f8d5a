"""Fireflies flock simulation core."""

from .bounds import Bounds
from .agent import Agent
from .flock import Flock
from .steering import SteeringEngine
from .simulation import Simulation, SimulationState
from .colors import ColorMode, ColorModeKind, agent_color, apply_color_mode
from .spawner import Spawner
from .commands import CommandInterpreter
from .errors import CapacityError, DegenerateVelocity, FlockError, LeadershipOrderError

__all__ = [
    "Bounds",
    "Agent",
    "Flock",
    "SteeringEngine",
    "Simulation",
    "SimulationState",
    "ColorMode",
    "ColorModeKind",
    "agent_color",
    "apply_color_mode",
    "Spawner",
    "CommandInterpreter",
    "CapacityError",
    "DegenerateVelocity",
    "FlockError",
    "LeadershipOrderError",
]
