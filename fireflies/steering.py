"""Steering engine - desired acceleration for one firefly, Numba JIT-compiled."""

import math
import numpy as np
from numba import njit

from config import fireflies as config


# Fixed blend of the three follower behaviours and the leader random walk.
# Module globals are frozen into the compiled kernels.
SEPARATION_WEIGHT = float(config.STEERING["separation_weight"])
ALIGNMENT_WEIGHT = float(config.STEERING["alignment_weight"])
COHESION_WEIGHT = float(config.STEERING["cohesion_weight"])
LEADER_WANDER = float(config.STEERING["leader_wander"])


# ============================================================================
# NUMBA JIT-COMPILED STEERING FUNCTIONS
# ============================================================================

@njit(cache=True)
def scaled_direction(x: float, y: float, z: float, length: float) -> np.ndarray:
    """Rescale (x, y, z) to the given length; a zero vector stays zero."""
    out = np.zeros(3)
    mag = math.sqrt(x * x + y * y + z * z)
    if mag > 0.0:
        out[0] = x / mag * length
        out[1] = y / mag * length
        out[2] = z / mag * length
    return out


@njit(cache=True)
def leader_acceleration(heading: np.ndarray, wander: np.ndarray, max_speed: float) -> np.ndarray:
    """Random-walk steering: current heading biased heavily by a random unit vector."""
    return scaled_direction(
        heading[0] + wander[0] * LEADER_WANDER,
        heading[1] + wander[1] * LEADER_WANDER,
        heading[2] + wander[2] * LEADER_WANDER,
        max_speed,
    )


@njit(cache=True)
def follower_acceleration(
    i: int,
    positions: np.ndarray,
    velocities: np.ndarray,
    led_by: np.ndarray,
    count: int,
    max_speed: float,
    check_range_sq: float,
    avoid_radius_sq: float,
) -> np.ndarray:
    """Separation, alignment and cohesion against every other agent in range."""
    px = positions[i, 0]
    py = positions[i, 1]
    pz = positions[i, 2]

    sep_x, sep_y, sep_z = 0.0, 0.0, 0.0
    match_x, match_y, match_z = 0.0, 0.0, 0.0
    coh_x, coh_y, coh_z = 0.0, 0.0, 0.0
    num_checked = 0

    for j in range(count):
        if j == i:
            continue

        dx = positions[j, 0] - px
        dy = positions[j, 1] - py
        dz = positions[j, 2] - pz
        dist_sq = dx * dx + dy * dy + dz * dz

        if dist_sq <= check_range_sq:
            num_checked += 1

            if dist_sq <= avoid_radius_sq:
                sep_x -= dx
                sep_y -= dy
                sep_z -= dz

            match_x += velocities[j, 0]
            match_y += velocities[j, 1]
            match_z += velocities[j, 2]

            coh_x += dx
            coh_y += dy
            coh_z += dz

    separation = scaled_direction(sep_x, sep_y, sep_z, max_speed)

    alignment = np.zeros(3)
    cohesion = np.zeros(3)
    if num_checked > 0:
        alignment = scaled_direction(
            match_x / num_checked, match_y / num_checked, match_z / num_checked, max_speed
        )
        cohesion = scaled_direction(
            coh_x / num_checked, coh_y / num_checked, coh_z / num_checked, max_speed
        )

    leader = led_by[i]
    if leader >= 0:
        # An assigned leader replaces flock-centre cohesion entirely
        cohesion = scaled_direction(
            positions[leader, 0] - px,
            positions[leader, 1] - py,
            positions[leader, 2] - pz,
            max_speed,
        )

    return (separation * SEPARATION_WEIGHT
            + alignment * ALIGNMENT_WEIGHT
            + cohesion * COHESION_WEIGHT)


@njit(cache=True)
def agent_acceleration(
    i: int,
    positions: np.ndarray,
    velocities: np.ndarray,
    headings: np.ndarray,
    is_leader: np.ndarray,
    led_by: np.ndarray,
    wander: np.ndarray,
    count: int,
    max_speed: float,
    check_range_sq: float,
    avoid_radius_sq: float,
) -> np.ndarray:
    """Dispatch to the leader or follower steering path."""
    if is_leader[i]:
        return leader_acceleration(headings[i], wander[i], max_speed)
    return follower_acceleration(
        i, positions, velocities, led_by, count,
        max_speed, check_range_sq, avoid_radius_sq,
    )


# ============================================================================
# PYTHON ENTRY POINT
# ============================================================================

class SteeringEngine:
    """Holds the perception radii and computes accelerations against a flock."""

    def __init__(self, check_range: float = None, avoid_radius: float = None):
        self.check_range = float(check_range if check_range is not None
                                 else config.STEERING["check_range"])
        self.avoid_radius = float(avoid_radius if avoid_radius is not None
                                  else config.STEERING["avoid_radius"])

    @property
    def check_range_sq(self) -> float:
        return self.check_range * self.check_range

    @property
    def avoid_radius_sq(self) -> float:
        return self.avoid_radius * self.avoid_radius

    def acceleration(self, flock, index: int, max_speed: float,
                     wander: np.ndarray = None) -> np.ndarray:
        """
        Desired acceleration for one agent given the flock's current state.

        Read-only entry point for inspecting a single agent; the step kernel
        calls ``agent_acceleration`` directly. Allocates a full-size wander
        array per call, so it is not meant for per-tick use.

        Args:
            flock: Registry to read neighbours from
            index: Agent to steer
            max_speed: Current speed cap, also the length of each behaviour
            wander: Random unit vector for a leader (ignored for followers)
        """
        if wander is None:
            wander = np.zeros(3)
        wander_rows = np.zeros((flock.max_participants, 3), dtype=np.float64)
        wander_rows[index] = wander
        return agent_acceleration(
            index,
            flock.positions,
            flock.velocities,
            flock.headings,
            flock.is_leader,
            flock.led_by,
            wander_rows,
            len(flock),
            float(max_speed),
            self.check_range_sq,
            self.avoid_radius_sq,
        )
