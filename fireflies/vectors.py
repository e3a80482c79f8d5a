"""Small vector helpers shared outside the numba kernels."""

import numpy as np

from .errors import DegenerateVelocity


def direction(vector: np.ndarray) -> np.ndarray:
    """
    Return the unit vector pointing along ``vector``.

    Raises:
        DegenerateVelocity: if the vector has zero length
    """
    magnitude = float(np.linalg.norm(vector))
    if magnitude == 0.0:
        raise DegenerateVelocity("Cannot take the direction of a zero vector")
    return np.asarray(vector, dtype=np.float64) / magnitude


def random_unit_vectors(rng: np.random.Generator, count: int) -> np.ndarray:
    """Draw ``count`` directions uniformly distributed on the unit sphere."""
    vectors = rng.normal(size=(count, 3))
    norms = np.linalg.norm(vectors, axis=1)
    # A normal sample of exactly zero is vanishingly rare; redraw it.
    while np.any(norms == 0.0):
        bad = norms == 0.0
        vectors[bad] = rng.normal(size=(int(bad.sum()), 3))
        norms = np.linalg.norm(vectors, axis=1)
    return vectors / norms[:, None]
