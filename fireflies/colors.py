"""Color modes and the policy that turns them into per-agent colors."""

import colorsys
import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

Color = Tuple[float, float, float]


class ColorModeKind(Enum):
    LEADER = "leader"
    RANDOM = "random"
    FIXED_HUE = "hue"
    RAINBOW = "rainbow"


@dataclass(frozen=True)
class ColorMode:
    """
    Active color mode.

    ``value`` carries the hue for FIXED_HUE and the hue speed (cycles per
    second) for RAINBOW; it is unused by the other kinds.
    """
    kind: ColorModeKind
    value: float = 0.0

    @classmethod
    def leader(cls) -> "ColorMode":
        return cls(ColorModeKind.LEADER)

    @classmethod
    def random(cls) -> "ColorMode":
        return cls(ColorModeKind.RANDOM)

    @classmethod
    def fixed_hue(cls, hue: float) -> "ColorMode":
        return cls(ColorModeKind.FIXED_HUE, float(hue) % 1.0)

    @classmethod
    def rainbow(cls, speed: float) -> "ColorMode":
        return cls(ColorModeKind.RAINBOW, float(speed))

    @property
    def is_rainbow(self) -> bool:
        return self.kind is ColorModeKind.RAINBOW

    def __str__(self) -> str:
        if self.kind in (ColorModeKind.FIXED_HUE, ColorModeKind.RAINBOW):
            return f"{self.kind.value} {self.value:g}"
        return self.kind.value


def hsv_color(hue: float, saturation: float = 1.0, value: float = 1.0) -> Color:
    """HSV (0-1 range) to an RGB tuple."""
    return colorsys.hsv_to_rgb(hue % 1.0, saturation, value)


def hue_of(color) -> float:
    """Hue of an RGB color."""
    return colorsys.rgb_to_hsv(float(color[0]), float(color[1]), float(color[2]))[0]


def random_color(rng: np.random.Generator) -> Color:
    return hsv_color(rng.random())


def agent_color(
    mode: ColorMode,
    index: int,
    is_leader: bool,
    num_leaders: int,
    leader_color: Optional[Color],
    rng: np.random.Generator,
    rainbow_hue: float = 0.0,
    follower_saturation: float = 0.8,
) -> Color:
    """
    Derive one agent's display color.

    Args:
        mode: Active color mode
        index: Registry position of the agent
        is_leader: Whether the agent is a leader
        num_leaders: Number of leader slots at the front of the registry
        leader_color: Current color of the agent's assigned leader, if any
        rng: Source of random hues
        rainbow_hue: Shared hue used by RAINBOW mode
        follower_saturation: Tint applied to followers of a leader

    Returns:
        RGB tuple (0-1 range)
    """
    if mode.kind is ColorModeKind.LEADER:
        if is_leader:
            return hsv_color(index / num_leaders)
        if leader_color is not None:
            return hsv_color(hue_of(leader_color), follower_saturation, 1.0)
        return random_color(rng)

    if mode.kind is ColorModeKind.RANDOM:
        return random_color(rng)

    if mode.kind is ColorModeKind.FIXED_HUE:
        return hsv_color(mode.value)

    return hsv_color(rainbow_hue)


def apply_color_mode(flock, mode: ColorMode, rng: np.random.Generator,
                     rainbow_hue: float = 0.0, follower_saturation: float = 0.8):
    """
    Recolor every agent in the flock for a newly selected mode.

    Agents are visited in registry order, so leaders are recolored before any
    follower reads its leader's color.
    """
    for agent in flock:
        leader = agent.led_by
        leader_color = flock.colors[leader] if leader is not None else None
        agent.color = agent_color(
            mode,
            agent.index,
            agent.is_leader,
            flock.num_leaders,
            leader_color,
            rng,
            rainbow_hue=rainbow_hue,
            follower_saturation=follower_saturation,
        )
