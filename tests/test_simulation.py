"""Tests for the per-tick simulation step."""

import colorsys

import numpy as np
import pytest

from fireflies import CapacityError, ColorMode, Flock, Simulation, Spawner
from fireflies.colors import hsv_color, hue_of
from conftest import make_bounds


DT = 1.0 / 30.0


def populated(simulation, n=15):
    Spawner(simulation).fill(n)
    return simulation


def single_agent_sim(position, velocity, rng):
    """A leader at index 0 plus one follower; tests move the leader out of range."""
    sim = Simulation(bounds=make_bounds(), flock=Flock(num_leaders=1, max_participants=4, rng=rng), rng=rng)
    sim.state.max_speed = 15.0
    sim.add_agent([0.0, 0.0, 0.0], [0.0, 0.0, 1.0])
    sim.add_agent(position, velocity)
    return sim


class TestScenario:

    def test_hundred_ticks_respect_speed_cap(self, simulation):
        populated(simulation, 15)
        flock = simulation.flock
        assert sum(a.is_leader for a in flock) == 5

        for _ in range(100):
            simulation.step(DT)
            speeds = np.linalg.norm(flock.velocities[:len(flock)], axis=1)
            assert np.all(speeds <= 15.0 + 1e-9)
            assert np.all(speeds >= 0.1 - 1e-9)
            assert len(flock) == 15

    def test_positions_stay_in_vertical_range(self, simulation, bounds):
        populated(simulation, 30)
        flock = simulation.flock
        for _ in range(200):
            simulation.step(DT)
            ys = flock.positions[:len(flock), 1]
            assert np.all(ys >= bounds.bottom) and np.all(ys <= bounds.top)

    def test_positions_stay_in_radius(self, simulation, bounds):
        populated(simulation, 30)
        flock = simulation.flock
        for _ in range(200):
            simulation.step(DT)
            offsets = flock.positions[:len(flock)] - bounds.center
            h_sq = offsets[:, 0] ** 2 + offsets[:, 2] ** 2
            assert np.all(h_sq <= bounds.squared_radius + 1e-9)

    def test_leadership_invariant_holds(self, simulation):
        populated(simulation, 40)
        simulation.state.changeup_timer = 0.0
        flock = simulation.flock
        for _ in range(100):
            simulation.step(0.5)
            assert np.all(flock.is_leader[:5])
            assert not np.any(flock.is_leader[5:len(flock)])
            assert np.all(flock.led_by[:5] == -1)

    def test_headings_are_unit(self, simulation):
        populated(simulation, 20)
        simulation.run(30, DT)
        flock = simulation.flock
        norms = np.linalg.norm(flock.headings[:len(flock)], axis=1)
        assert np.allclose(norms, 1.0)

    def test_empty_flock_steps(self, simulation):
        simulation.run(5, DT)
        assert simulation.ticks == 5


class TestIntegration:

    def test_speed_clamped_up_to_minimum(self, rng):
        sim = single_agent_sim([0.0, 0.0, 0.0], [0.001, 0.0, 0.0], rng)
        sim.flock.positions[0] = [0.0, 0.0, 29.0]
        sim.flock.positions[1] = [0.0, 0.0, -29.0]
        sim.step(DT)
        assert sim.flock[1].speed == pytest.approx(0.1, rel=1e-6)

    def test_zero_velocity_keeps_heading(self, rng, capsys):
        sim = single_agent_sim([0.0, 0.0, 0.0], [0.0, 2.0, 0.0], rng)
        sim.flock.positions[0] = [0.0, 0.0, 29.0]
        sim.flock.positions[1] = [0.0, 0.0, -29.0]
        sim.flock.velocities[1] = [0.0, 0.0, 0.0]
        sim.step(DT)
        follower = sim.flock[1]
        assert np.allclose(follower.heading, [0.0, 1.0, 0.0])
        assert np.allclose(follower.velocity, [0.0, 0.1, 0.0])
        assert "Degenerate velocity" in capsys.readouterr().out

    def test_position_advances_by_velocity(self, rng):
        sim = single_agent_sim([0.0, 0.0, 0.0], [3.0, 0.0, 0.0], rng)
        sim.flock.positions[0] = [0.0, 0.0, 29.0]
        sim.flock.positions[1] = [-10.0, 0.0, -5.0]
        sim.step(DT)
        assert np.allclose(sim.flock[1].position, [-10.0 + 3.0 * DT, 0.0, -5.0])


class TestWrapAndFade:

    def test_vertical_wrap_top(self, rng):
        sim = single_agent_sim([0.0, 19.95, 0.0], [0.0, 3.0, 0.0], rng)
        sim.flock.positions[0] = [0.0, 0.0, 29.0]
        sim.step(DT)
        assert sim.flock[1].position[1] == pytest.approx(19.95 + 3.0 * DT - 40.0)

    def test_vertical_wrap_bottom(self, rng):
        sim = single_agent_sim([0.0, -19.95, 0.0], [0.0, -3.0, 0.0], rng)
        sim.flock.positions[0] = [0.0, 0.0, 29.0]
        sim.step(DT)
        assert sim.flock[1].position[1] == pytest.approx(-19.95 - 3.0 * DT + 40.0)

    def test_radial_wrap_moves_closer_to_axis(self, rng, bounds):
        sim = single_agent_sim([29.95, 0.0, 0.0], [3.0, 0.0, 0.0], rng)
        sim.flock.positions[0] = [0.0, 0.0, -29.0]
        before = bounds.squared_horizontal_distance(np.array([29.95 + 3.0 * DT, 0.0, 0.0]))
        assert before > bounds.squared_radius
        sim.step(DT)
        after = bounds.squared_horizontal_distance(sim.flock[1].position)
        assert after < before
        assert sim.flock[1].position[0] == pytest.approx(29.95 + 3.0 * DT - 60.0)

    def test_fade_ramps(self, rng):
        sim = single_agent_sim([0.0, 17.5, 0.0], [0.1, 0.0, 0.0], rng)
        sim.flock.positions[0] = [0.0, 0.0, 29.0]
        sim.step(DT)
        assert sim.flock[1].transparency == pytest.approx(0.5, abs=0.01)

    def test_opaque_in_core(self, rng):
        sim = single_agent_sim([0.0, 0.0, 0.0], [0.1, 0.0, 0.0], rng)
        sim.flock.positions[0] = [0.0, 0.0, 29.0]
        sim.step(DT)
        assert sim.flock[1].transparency == 0.0

    def test_radial_fade_takes_maximum(self, rng):
        # h^2 = 650 is 25 beyond the check distance of 625: a full fade
        x = np.sqrt(650.0)
        sim = single_agent_sim([x, 0.0, 0.0], [0.0, 0.0, 0.1], rng)
        sim.flock.positions[0] = [-29.0, 0.0, 0.0]
        sim.step(DT)
        assert sim.flock[1].transparency == pytest.approx(1.0)

    def test_fade_does_not_change_motion(self, rng):
        a = single_agent_sim([0.0, 17.5, 0.0], [1.0, 0.0, 0.0], rng)
        b = single_agent_sim([0.0, 17.5, 0.0], [1.0, 0.0, 0.0], rng)
        for sim in (a, b):
            sim.flock.positions[0] = [0.0, 0.0, 29.0]
        b.flock.transparency[1] = 0.9
        a.step(DT)
        b.step(DT)
        assert np.allclose(a.flock.positions[1], b.flock.positions[1])


class TestGlobalEffects:

    def test_rainbow_hue_advances(self, simulation):
        simulation.state.rainbow_speed = 0.5
        simulation.step(0.5)
        assert simulation.state.rainbow_hue == pytest.approx(0.25)
        simulation.step(2.0)
        assert simulation.state.rainbow_hue == pytest.approx(0.25)

    def test_rainbow_mode_overrides_colors(self, simulation):
        populated(simulation, 10)
        simulation.set_color_mode(ColorMode.rainbow(0.2))
        simulation.step(DT)
        expected = hsv_color(simulation.state.rainbow_hue)
        for agent in simulation.flock:
            assert np.allclose(agent.color, expected)

    def test_changeup_fires_on_cooldown(self, simulation, capsys):
        populated(simulation, 20)
        simulation.state.changeup_timer = 0.05
        simulation.step(DT)
        assert not np.any(simulation.flock.led_by >= 0)
        simulation.step(DT)
        assert np.any(simulation.flock.led_by[5:20] >= 0)
        assert simulation.state.changeup_timer == simulation.changeup_cooldown
        assert "Leadership changeup" in capsys.readouterr().out

    def test_changeup_tints_newly_led_follower_in_random_mode(self, rng):
        sim = single_agent_sim([10.0, 0.0, 0.0], [1.0, 0.0, 0.0], rng)
        sim.set_color_mode(ColorMode.random())
        sim.state.changeup_timer = 0.0
        sim.step(DT)

        follower = sim.flock[1]
        assert follower.led_by == 0
        hue, saturation, value = colorsys.rgb_to_hsv(*follower.color)
        assert hue == pytest.approx(hue_of(sim.flock[0].color))
        assert saturation == pytest.approx(0.7)
        assert value == pytest.approx(1.0)

    def test_rainbow_color_not_applied_outside_rainbow_mode(self, simulation):
        populated(simulation, 10)
        simulation.set_color_mode(ColorMode.fixed_hue(0.3))
        simulation.step(DT)
        for agent in simulation.flock:
            assert np.allclose(agent.color, hsv_color(0.3))


class TestTickOrdering:
    """Agents later in the registry steer against already-advanced earlier agents."""

    def test_follower_sees_updated_predecessor(self, rng):
        sim = Simulation(bounds=make_bounds(), flock=Flock(num_leaders=1, max_participants=3, rng=rng), rng=rng)
        sim.state.max_speed = 15.0
        sim.add_agent([0.0, 0.0, 20.0], [0.0, 0.0, 1.0])
        sim.add_agent([0.0, -5.0, -10.0], [1.0, 0.0, 0.0])
        sim.add_agent([0.0, 5.0, -10.0], [1.0, 0.0, 0.0])
        flock = sim.flock

        pre_positions = flock.positions.copy()
        pre_velocities = flock.velocities.copy()
        sim.step(DT)
        post_positions = flock.positions.copy()
        post_velocities = flock.velocities.copy()

        # Steering for agent 2 against the state at the start of the tick
        flock.positions[:] = pre_positions
        flock.velocities[:] = pre_velocities
        stale = pre_velocities[2] + sim.steering.acceleration(flock, 2, 15.0) * DT

        # ...and against agents 0 and 1 already advanced this tick
        flock.positions[:2] = post_positions[:2]
        flock.velocities[:2] = post_velocities[:2]
        relaxed = pre_velocities[2] + sim.steering.acceleration(flock, 2, 15.0) * DT

        assert np.allclose(post_velocities[2], relaxed)
        assert not np.allclose(post_velocities[2], stale)

    def test_first_follower_sees_previous_state(self, rng):
        sim = Simulation(bounds=make_bounds(), flock=Flock(num_leaders=1, max_participants=3, rng=rng), rng=rng)
        sim.state.max_speed = 15.0
        sim.add_agent([0.0, 0.0, 20.0], [0.0, 0.0, 1.0])
        sim.add_agent([0.0, -5.0, -10.0], [1.0, 0.0, 0.0])
        sim.add_agent([0.0, 5.0, -10.0], [1.0, 0.0, 0.0])
        sim.step(DT)
        # Agent 1 read agent 2 before agent 2 moved: alignment +x, cohesion +y
        expected = np.array([1.0, 0.0, 0.0]) + np.array([15.0 * 0.3, 15.0, 0.0]) * DT
        assert np.allclose(sim.flock.velocities[1], expected)


class TestAdmission:

    def test_first_agents_become_leaders(self, simulation):
        populated(simulation, 7)
        assert [a.is_leader for a in simulation.flock] == [True] * 5 + [False] * 2

    def test_capacity_error(self, simulation):
        populated(simulation, 50)
        with pytest.raises(CapacityError):
            simulation.add_agent([0, 0, 0], [1, 0, 0])

    def test_set_max_speed(self, simulation):
        assert simulation.set_max_speed(8.0)
        assert simulation.state.max_speed == 8.0
        assert not simulation.set_max_speed(-1.0)
        assert not simulation.set_max_speed(float("nan"))
        assert simulation.state.max_speed == 8.0
        assert simulation.set_max_speed(0.01)
        assert simulation.state.max_speed == simulation.min_speed
