"""Shared fixtures for the fireflies tests."""

import numpy as np
import pytest

from fireflies import Bounds, Flock, Simulation


def make_bounds(height=40.0, radius=30.0, center=(0.0, 0.0, 0.0), transition=5.0):
    return Bounds(height=height, radius=radius, center=np.array(center),
                  transition_distance=transition)


def fill_flock(flock, positions, velocities):
    """Add agents in order; the first num_leaders become leaders."""
    for position, velocity in zip(positions, velocities):
        flock.add_agent(position, velocity, is_leader=len(flock) < flock.num_leaders)
    return flock


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def bounds():
    """Cylinder of height 40 and radius 30 centered on the origin."""
    return make_bounds()


@pytest.fixture
def flock(rng):
    """Empty flock: 5 leaders, room for 50."""
    return Flock(num_leaders=5, max_participants=50, rng=rng)


@pytest.fixture
def simulation(bounds, rng):
    sim = Simulation(bounds=bounds, flock=Flock(num_leaders=5, max_participants=50, rng=rng), rng=rng)
    sim.state.max_speed = 15.0
    return sim
