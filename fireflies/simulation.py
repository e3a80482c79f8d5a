"""Simulation step - integrates the flock one tick at a time."""

import math
import numpy as np
from dataclasses import dataclass
from numba import njit
from typing import Optional

from config import fireflies as config
from .bounds import Bounds
from .colors import ColorMode, ColorModeKind, agent_color, apply_color_mode, hsv_color
from .flock import Flock
from .steering import SteeringEngine, agent_acceleration
from .vectors import random_unit_vectors


# ============================================================================
# NUMBA JIT-COMPILED STEP KERNEL
# ============================================================================

@njit(cache=True)
def advance_agents(
    positions: np.ndarray,
    velocities: np.ndarray,
    headings: np.ndarray,
    colors: np.ndarray,
    transparency: np.ndarray,
    is_leader: np.ndarray,
    led_by: np.ndarray,
    wander: np.ndarray,
    degenerate: np.ndarray,
    count: int,
    dt: float,
    max_speed: float,
    min_speed: float,
    check_range_sq: float,
    avoid_radius_sq: float,
    cx: float,
    cz: float,
    height: float,
    radius: float,
    squared_radius: float,
    squared_radius_check: float,
    squared_transition: float,
    transition: float,
    top: float,
    bottom: float,
    y_max: float,
    y_min: float,
    rainbow: bool,
    rainbow_color: np.ndarray,
) -> int:
    """
    Advance every agent in registry order, in place.

    Agents are updated one after another, so agent i steers against the
    already-advanced state of agents 0..i-1 and the previous state of the rest.
    Returns the number of agents whose velocity collapsed to zero; those keep
    their previous heading and are flagged in ``degenerate``.
    """
    recovered = 0

    for i in range(count):
        acc = agent_acceleration(
            i, positions, velocities, headings, is_leader, led_by, wander,
            count, max_speed, check_range_sq, avoid_radius_sq,
        )

        vx = velocities[i, 0] + acc[0] * dt
        vy = velocities[i, 1] + acc[1] * dt
        vz = velocities[i, 2] + acc[2] * dt

        speed = math.sqrt(vx * vx + vy * vy + vz * vz)
        if speed > 0.0:
            fx = vx / speed
            fy = vy / speed
            fz = vz / speed
            degenerate[i] = False
        else:
            fx = headings[i, 0]
            fy = headings[i, 1]
            fz = headings[i, 2]
            degenerate[i] = True
            recovered += 1

        speed = min(max(speed, min_speed), max_speed)
        velocities[i, 0] = fx * speed
        velocities[i, 1] = fy * speed
        velocities[i, 2] = fz * speed
        headings[i, 0] = fx
        headings[i, 1] = fy
        headings[i, 2] = fz

        positions[i, 0] += velocities[i, 0] * dt
        positions[i, 1] += velocities[i, 1] * dt
        positions[i, 2] += velocities[i, 2] * dt

        # Vertical wrap
        if positions[i, 1] > top:
            positions[i, 1] -= height
        elif positions[i, 1] < bottom:
            positions[i, 1] += height

        # Radial wrap: jump across to the far side of the cylinder
        hx = positions[i, 0] - cx
        hz = positions[i, 2] - cz
        h_sq = hx * hx + hz * hz
        if h_sq > squared_radius:
            h_len = math.sqrt(h_sq)
            positions[i, 0] -= hx / h_len * radius * 2.0
            positions[i, 2] -= hz / h_len * radius * 2.0
            hx = positions[i, 0] - cx
            hz = positions[i, 2] - cz
            h_sq = hx * hx + hz * hz

        # Edge fade, cosmetic only
        y = positions[i, 1]
        fade = 0.0
        if y > y_max:
            fade = max(fade, (y - y_max) / transition)
        if y < y_min:
            fade = max(fade, (y_min - y) / transition)
        if h_sq > squared_radius_check:
            fade = max(fade, (h_sq - squared_radius_check) / squared_transition)
        transparency[i] = min(fade, 1.0)

        if rainbow:
            colors[i, 0] = rainbow_color[0]
            colors[i, 1] = rainbow_color[1]
            colors[i, 2] = rainbow_color[2]

    return recovered


# ============================================================================
# SIMULATION
# ============================================================================

@dataclass
class SimulationState:
    """Mutable global parameters, owned by the Simulation."""
    color_mode: ColorMode
    rainbow_speed: float
    rainbow_hue: float
    changeup_timer: float
    max_speed: float


def parse_color_mode(name: str, rainbow_speed: float) -> ColorMode:
    """Configured mode name to a ColorMode (hue modes default to hue 0)."""
    kind = ColorModeKind(name)
    if kind is ColorModeKind.RAINBOW:
        return ColorMode.rainbow(rainbow_speed)
    return ColorMode(kind)


class Simulation:
    """
    Owns the flock, the bounds and the global simulation state.

    Everything runs on one thread: ``step`` completes before spawns or
    commands touch the flock again.
    """

    def __init__(self, bounds: Optional[Bounds] = None, flock: Optional[Flock] = None,
                 rng: Optional[np.random.Generator] = None,
                 steering: Optional[SteeringEngine] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.bounds = bounds if bounds is not None else Bounds.from_config()
        self.flock = flock if flock is not None else Flock(rng=self.rng)
        self.steering = steering if steering is not None else SteeringEngine()

        self.min_speed = float(config.SIMULATION["min_speed"])
        self.changeup_cooldown = float(config.FLOCK["changeup_cooldown"])
        self.mode_saturation = float(config.FLOCK["mode_saturation"])

        rainbow_speed = float(config.SIMULATION["rainbow_speed"])
        self.state = SimulationState(
            color_mode=parse_color_mode(config.SIMULATION["color_mode"], rainbow_speed),
            rainbow_speed=rainbow_speed,
            rainbow_hue=0.0,
            changeup_timer=self.changeup_cooldown,
            max_speed=float(config.SIMULATION["max_speed"]),
        )

        self._degenerate = np.zeros(self.flock.max_participants, dtype=np.bool_)
        self.ticks = 0
        self.elapsed = 0.0

    # ------------------------------------------------------------------
    # Registry mutation between ticks
    # ------------------------------------------------------------------

    def add_agent(self, position, velocity) -> int:
        """
        Admit a new agent; the first ``num_leaders`` admitted become leaders.

        Raises:
            CapacityError: if the flock is full
        """
        flock = self.flock
        is_leader = len(flock) < flock.num_leaders
        index = flock.add_agent(position, velocity, is_leader)
        flock.colors[index] = agent_color(
            self.state.color_mode,
            index,
            is_leader,
            flock.num_leaders,
            None,
            self.rng,
            rainbow_hue=self.state.rainbow_hue,
        )
        return index

    def set_color_mode(self, mode: ColorMode):
        """Select a color mode and recolor the whole flock for it."""
        if mode.is_rainbow:
            self.state.rainbow_speed = mode.value
        self.state.color_mode = mode
        apply_color_mode(
            self.flock, mode, self.rng,
            rainbow_hue=self.state.rainbow_hue,
            follower_saturation=self.mode_saturation,
        )

    def set_max_speed(self, value: float) -> bool:
        """
        Change the global speed cap.

        Non-finite or non-positive values are ignored; the cap never drops
        below the minimum speed.
        """
        if not math.isfinite(value) or value <= 0:
            return False
        self.state.max_speed = max(float(value), self.min_speed)
        return True

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def step(self, dt: float):
        """Advance the simulation by ``dt`` seconds."""
        state = self.state
        flock = self.flock
        bounds = self.bounds
        count = len(flock)

        state.rainbow_hue = (state.rainbow_hue + state.rainbow_speed * dt) % 1.0
        rainbow = state.color_mode.is_rainbow
        rainbow_color = np.zeros(3, dtype=np.float64)
        if rainbow:
            rainbow_color[:] = hsv_color(state.rainbow_hue)

        wander = np.zeros((flock.max_participants, 3), dtype=np.float64)
        leaders = min(count, flock.num_leaders)
        if leaders:
            wander[:leaders] = random_unit_vectors(self.rng, leaders)

        recovered = 0
        if count:
            recovered = advance_agents(
                flock.positions,
                flock.velocities,
                flock.headings,
                flock.colors,
                flock.transparency,
                flock.is_leader,
                flock.led_by,
                wander,
                self._degenerate,
                count,
                float(dt),
                state.max_speed,
                self.min_speed,
                self.steering.check_range_sq,
                self.steering.avoid_radius_sq,
                float(bounds.center[0]),
                float(bounds.center[2]),
                bounds.height,
                bounds.radius,
                bounds.squared_radius,
                bounds.squared_radius_check_distance,
                bounds.squared_transition_distance,
                bounds.transition_distance,
                bounds.top,
                bounds.bottom,
                bounds.y_max,
                bounds.y_min,
                rainbow,
                rainbow_color,
            )
        if recovered:
            flagged = np.flatnonzero(self._degenerate[:count]).tolist()
            print(f"[Sim] Degenerate velocity on agents {flagged}, kept previous heading")

        state.changeup_timer -= dt
        if state.changeup_timer <= 0:
            changed = flock.perform_changeup(self.rng)
            if changed:
                print(f"[Flock] Leadership changeup: {changed} followers toggled")
            state.changeup_timer = self.changeup_cooldown

        self.ticks += 1
        self.elapsed += dt

    def run(self, ticks: int, dt: float):
        """Step a fixed number of ticks without a window."""
        for _ in range(ticks):
            self.step(dt)
