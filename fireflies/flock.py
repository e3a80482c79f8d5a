"""Flock registry - ordered arena of agents plus leadership management."""

import numpy as np
from typing import Iterator, List, Optional

from config import fireflies as config
from .agent import Agent
from .colors import hsv_color, hue_of, random_color
from .errors import CapacityError, FlockError, LeadershipOrderError
from .vectors import direction


class Flock:
    """
    Owns every firefly as struct-of-arrays storage indexed by registry position.

    The first ``num_leaders`` slots always hold leaders and every later slot
    holds a follower. Agents are never removed or reordered, so an index is a
    stable handle for the lifetime of the flock. Neighbour queries are a
    linear scan over ``positions[:len(flock)]``; there is no spatial index.
    """

    def __init__(self, num_leaders: int = None, max_participants: int = None,
                 rng: Optional[np.random.Generator] = None):
        self.num_leaders = int(num_leaders if num_leaders is not None
                               else config.FLOCK["num_leaders"])
        self.max_participants = int(max_participants if max_participants is not None
                                    else config.FLOCK["max_participants"])
        if self.num_leaders < 1:
            raise ValueError("A flock needs at least one leader")
        if self.max_participants < self.num_leaders:
            raise ValueError("max_participants must be at least num_leaders")

        self.rng = rng if rng is not None else np.random.default_rng()
        self.changeup_min = int(config.FLOCK["changeup_min"])
        self.changeup_max = int(config.FLOCK["changeup_max"])
        self.assign_saturation = float(config.FLOCK["assign_saturation"])

        n = self.max_participants
        self.positions = np.zeros((n, 3), dtype=np.float64)
        self.velocities = np.zeros((n, 3), dtype=np.float64)
        self.headings = np.zeros((n, 3), dtype=np.float64)
        self.colors = np.ones((n, 3), dtype=np.float64)
        self.transparency = np.zeros(n, dtype=np.float64)
        self.is_leader = np.zeros(n, dtype=np.bool_)
        self.led_by = np.full(n, -1, dtype=np.int32)
        self.count = 0

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[Agent]:
        for i in range(self.count):
            yield Agent(self, i)

    def __getitem__(self, index: int) -> Agent:
        if index < 0:
            index += self.count
        if not 0 <= index < self.count:
            raise IndexError(f"Agent index {index} out of range")
        return Agent(self, index)

    @property
    def is_full(self) -> bool:
        return self.count >= self.max_participants

    @property
    def eligible(self) -> int:
        """Number of followers that leadership changeup can pick from."""
        return self.count - self.num_leaders

    def leaders(self) -> List[Agent]:
        return [Agent(self, i) for i in range(min(self.count, self.num_leaders))]

    def followers(self) -> List[Agent]:
        return [Agent(self, i) for i in range(self.num_leaders, self.count)]

    def add_agent(self, position, velocity, is_leader: bool) -> int:
        """
        Append an agent and return its index.

        Raises:
            CapacityError: if the flock already holds max_participants agents
            LeadershipOrderError: if the add would break leaders-first ordering
            DegenerateVelocity: if velocity is the zero vector
        """
        if self.is_full:
            raise CapacityError(self.max_participants)
        if is_leader and self.count >= self.num_leaders:
            raise LeadershipOrderError(
                f"Leaders must occupy the first {self.num_leaders} slots"
            )
        if not is_leader and self.count < self.num_leaders:
            raise LeadershipOrderError(
                f"Followers cannot be added before all {self.num_leaders} leaders"
            )

        i = self.count
        velocity = np.asarray(velocity, dtype=np.float64)
        self.headings[i] = direction(velocity)
        self.positions[i] = position
        self.velocities[i] = velocity
        self.transparency[i] = 0.0
        self.is_leader[i] = is_leader
        self.led_by[i] = -1
        self.count += 1
        return i

    def assign_leader(self, index: int, leader: Optional[int]):
        """
        Set or clear the leader a follower steers toward.

        With a leader, the follower takes the leader's hue at reduced
        saturation. Clearing the leader gives it an independent random hue.
        """
        if not 0 <= index < self.count:
            raise IndexError(f"Agent index {index} out of range")
        if self.is_leader[index]:
            raise FlockError(f"Agent {index} is a leader and cannot be led")

        if leader is None:
            self.led_by[index] = -1
            self.colors[index] = random_color(self.rng)
            return

        if leader == index:
            raise FlockError(f"Agent {index} cannot lead itself")
        if not 0 <= leader < self.count or not self.is_leader[leader]:
            raise FlockError(f"Agent {leader} is not a leader")

        self.led_by[index] = leader
        self.colors[index] = hsv_color(
            hue_of(self.colors[leader]), self.assign_saturation, 1.0
        )

    def perform_changeup(self, rng: Optional[np.random.Generator] = None) -> int:
        """
        Reshuffle leadership among a random handful of followers.

        Picks k followers (independently, so the same one can be picked
        twice) and toggles each: a led follower is released, a free one is
        assigned a random leader.

        Returns:
            Number of toggles performed
        """
        rng = rng if rng is not None else self.rng
        eligible = self.eligible
        if eligible <= 0:
            return 0

        low = min(self.changeup_min, eligible)
        high = min(self.changeup_max, eligible)
        k = int(rng.integers(low, high + 1))

        for _ in range(k):
            index = int(rng.integers(self.num_leaders, self.count))
            if self.led_by[index] >= 0:
                self.assign_leader(index, None)
            else:
                leader = int(rng.integers(0, self.num_leaders))
                self.assign_leader(index, leader)

        return k
