"""Paced admission of new fireflies into the simulation."""

import numpy as np
from typing import Optional

from config import fireflies as config
from .errors import DegenerateVelocity
from .vectors import direction


class Spawner:
    """
    Adds one firefly every ``interval`` seconds until the flock is full.

    New agents get a uniformly random position inside the bounds and a random
    direction at a speed between the minimum speed and the current cap.
    """

    def __init__(self, simulation, interval: float = None,
                 rng: Optional[np.random.Generator] = None):
        self.simulation = simulation
        self.interval = float(interval if interval is not None else config.SPAWN["interval"])
        self.rng = rng if rng is not None else simulation.rng
        self._elapsed = 0.0
        self._announced_full = False

    @property
    def done(self) -> bool:
        return self.simulation.flock.is_full

    def random_velocity(self) -> np.ndarray:
        while True:
            try:
                heading = direction(self.rng.normal(size=3))
            except DegenerateVelocity:
                continue
            speed = self.rng.uniform(self.simulation.min_speed, self.simulation.state.max_speed)
            return heading * speed

    def spawn_one(self) -> int:
        """Admit a single agent immediately and return its index."""
        position = self.simulation.bounds.random_point(self.rng)
        return self.simulation.add_agent(position, self.random_velocity())

    def fill(self, count: int = None) -> int:
        """Admit ``count`` agents at once (all remaining capacity by default)."""
        flock = self.simulation.flock
        remaining = flock.max_participants - len(flock)
        count = remaining if count is None else min(count, remaining)
        for _ in range(count):
            self.spawn_one()
        return count

    def update(self, dt: float) -> int:
        """Admit however many agents are due after ``dt`` seconds; returns how many."""
        if self.done:
            if not self._announced_full:
                print(f"[Spawn] Flock at capacity ({len(self.simulation.flock)} fireflies)")
                self._announced_full = True
            return 0

        self._elapsed += dt
        spawned = 0
        while self._elapsed >= self.interval and not self.done:
            self._elapsed -= self.interval
            self.spawn_one()
            spawned += 1
        return spawned
