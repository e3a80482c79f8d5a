"""Tests for paced admission of new fireflies."""

import numpy as np

from fireflies import Spawner


class TestSpawner:

    def test_paced_admission(self, simulation):
        spawner = Spawner(simulation, interval=0.5)
        assert spawner.update(0.4) == 0
        assert spawner.update(0.2) == 1
        assert spawner.update(1.0) == 2
        assert len(simulation.flock) == 3

    def test_stops_at_capacity(self, simulation, capsys):
        spawner = Spawner(simulation, interval=0.1)
        spawner.update(100.0)
        assert len(simulation.flock) == simulation.flock.max_participants
        assert spawner.done
        assert spawner.update(1.0) == 0
        assert "at capacity" in capsys.readouterr().out

    def test_spawned_state_within_limits(self, simulation, bounds):
        Spawner(simulation).fill()
        flock = simulation.flock
        speeds = np.linalg.norm(flock.velocities[:len(flock)], axis=1)
        assert np.all(speeds >= simulation.min_speed)
        assert np.all(speeds <= simulation.state.max_speed)
        for agent in flock:
            assert bounds.contains(agent.position)

    def test_fill_partial(self, simulation):
        assert Spawner(simulation).fill(4) == 4
        assert Spawner(simulation).fill(100) == 46
