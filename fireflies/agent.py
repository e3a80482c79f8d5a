"""Individual firefly: a view onto one slot of the flock's arrays."""

import numpy as np
from typing import Optional, Tuple


class Agent:
    """
    A single firefly in the simulation.

    Agents do not own any state. Each one is a handle (registry index) paired
    with the flock that stores its data, so ``led_by`` can refer to another
    agent by index without the two objects referencing each other.

    Attributes:
        position: 3D position vector (writable view)
        velocity: 3D velocity vector (writable view)
        heading: Unit vector along the velocity
        is_leader: Whether this agent wanders freely
        led_by: Index of the assigned leader, or None
        color: RGB color tuple (0-1 range)
        transparency: Edge fade amount, 0 = opaque, 1 = invisible
    """

    __slots__ = ("flock", "index")

    def __init__(self, flock, index: int):
        self.flock = flock
        self.index = index

    def __repr__(self) -> str:
        role = "leader" if self.is_leader else "follower"
        return f"Agent({self.index}, {role}, led_by={self.led_by})"

    def __eq__(self, other) -> bool:
        return (isinstance(other, Agent)
                and other.flock is self.flock
                and other.index == self.index)

    def __hash__(self) -> int:
        return hash((id(self.flock), self.index))

    @property
    def position(self) -> np.ndarray:
        return self.flock.positions[self.index]

    @position.setter
    def position(self, value):
        self.flock.positions[self.index] = value

    @property
    def velocity(self) -> np.ndarray:
        return self.flock.velocities[self.index]

    @velocity.setter
    def velocity(self, value):
        self.flock.velocities[self.index] = value

    @property
    def heading(self) -> np.ndarray:
        return self.flock.headings[self.index]

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    @property
    def is_leader(self) -> bool:
        return bool(self.flock.is_leader[self.index])

    @property
    def led_by(self) -> Optional[int]:
        leader = int(self.flock.led_by[self.index])
        return leader if leader >= 0 else None

    @property
    def color(self) -> Tuple[float, float, float]:
        r, g, b = self.flock.colors[self.index]
        return (float(r), float(g), float(b))

    @color.setter
    def color(self, value):
        self.flock.colors[self.index] = value

    @property
    def transparency(self) -> float:
        return float(self.flock.transparency[self.index])
