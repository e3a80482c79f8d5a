"""Cylindrical containment volume the flock lives in."""

import math
import numpy as np
from dataclasses import dataclass, field
from typing import Sequence

from config import fireflies as config


@dataclass(frozen=True, eq=False)
class Bounds:
    """
    Immutable geometry of the containment cylinder.

    The cylinder axis is vertical (y). Everything that the simulation step
    needs every tick is derived once here.

    Attributes:
        height: Vertical extent of the volume
        radius: Radius of the cylinder
        center: 3D center point
        transition_distance: Width of the fade zone along every edge
    """
    height: float
    radius: float
    center: np.ndarray
    transition_distance: float

    squared_radius: float = field(init=False)
    squared_radius_check_distance: float = field(init=False)
    squared_transition_distance: float = field(init=False)
    top: float = field(init=False)
    bottom: float = field(init=False)
    y_max: float = field(init=False)
    y_min: float = field(init=False)

    def __post_init__(self):
        center = np.array(self.center, dtype=np.float64)
        if center.shape != (3,):
            raise ValueError(f"center must be a 3D point, got shape {center.shape}")
        if self.height <= 0 or self.radius <= 0:
            raise ValueError("Bounds height and radius must be positive")
        if not 0 < self.transition_distance < self.radius:
            raise ValueError("transition_distance must be in (0, radius)")
        if self.transition_distance >= self.height / 2:
            raise ValueError("transition_distance must be less than height / 2")

        center.setflags(write=False)
        top = center[1] + self.height / 2
        bottom = center[1] - self.height / 2

        # Frozen dataclass: derived fields go through object.__setattr__
        derived = {
            "center": center,
            "squared_radius": self.radius ** 2,
            "squared_radius_check_distance": (self.radius - self.transition_distance) ** 2,
            "squared_transition_distance": self.transition_distance ** 2,
            "top": float(top),
            "bottom": float(bottom),
            "y_max": float(top - self.transition_distance),
            "y_min": float(bottom + self.transition_distance),
        }
        for name, value in derived.items():
            object.__setattr__(self, name, value)

    @classmethod
    def from_volume(cls, position: Sequence[float], size: Sequence[float],
                    transition_distance: float) -> "Bounds":
        """
        Build bounds from a box-shaped volume description.

        Args:
            position: Center of the volume
            size: (diameter_x, height, diameter_z)
            transition_distance: Width of the fade zone
        """
        return cls(
            height=float(size[1]),
            radius=min(float(size[0]), float(size[2])) / 2,
            center=np.array(position, dtype=np.float64),
            transition_distance=float(transition_distance),
        )

    @classmethod
    def from_config(cls) -> "Bounds":
        """Build bounds from the configured VOLUME."""
        return cls.from_volume(
            config.VOLUME["position"],
            config.VOLUME["size"],
            config.VOLUME["transition_distance"],
        )

    def horizontal_offset(self, point: np.ndarray) -> np.ndarray:
        """Offset of a point from the cylinder axis, projected onto the xz plane."""
        return np.array([point[0] - self.center[0], 0.0, point[2] - self.center[2]])

    def squared_horizontal_distance(self, point: np.ndarray) -> float:
        dx = point[0] - self.center[0]
        dz = point[2] - self.center[2]
        return float(dx * dx + dz * dz)

    def contains(self, point: np.ndarray) -> bool:
        """True if the point lies inside the cylinder (edges inclusive)."""
        return (self.bottom <= point[1] <= self.top
                and self.squared_horizontal_distance(point) <= self.squared_radius)

    def random_point(self, rng: np.random.Generator) -> np.ndarray:
        """Uniformly sample a point inside the cylinder."""
        r = self.radius * math.sqrt(rng.random())
        theta = rng.uniform(0.0, 2 * math.pi)
        return np.array([
            self.center[0] + r * math.cos(theta),
            rng.uniform(self.bottom, self.top),
            self.center[2] + r * math.sin(theta),
        ])
