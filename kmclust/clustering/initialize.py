"""
Random selection of initial centroids from the data points.
"""

from __future__ import annotations

from typing import Optional, Union

import numpy as np

from ..errors import InvalidK


__all__ = ["SeedLike", "as_generator", "initialize_centroids"]

SeedLike = Union[int, np.random.SeedSequence, np.random.Generator]


def as_generator(seed: Optional[SeedLike]) -> np.random.Generator:
    """Return a Generator no matter how the seed is specified."""
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def check_k(k: int, n_samples: int) -> None:
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k <= 0 or k > n_samples:
        raise InvalidK(k, n_samples)


def initialize_centroids(
    points: np.ndarray,
    k: int,
    seed: Optional[SeedLike] = None,
) -> np.ndarray:
    """
    Pick ``k`` distinct data points uniformly at random as starting centroids.

    Parameters
    ----------
    points
        Sample matrix with shape (n_samples, n_features).
    k
        Number of centroids, 1 <= k <= n_samples.
    seed
        Integer seed, SeedSequence or Generator. ``None`` draws fresh entropy
        from the operating system.

    Returns
    -------
    np.ndarray
        Copy of the selected rows, shape (k, n_features).

    Notes
    -----
    When the matrix holds at least ``k`` distinct rows, only one
    representative per distinct row is eligible, so no two starting centroids
    coincide. Duplicates are only possible when fewer than ``k`` distinct rows
    exist.
    """

    points = np.asarray(points, dtype=np.float64)
    check_k(k, points.shape[0])
    rng = as_generator(seed)

    _, first_index = np.unique(points, axis=0, return_index=True)
    candidates = np.sort(first_index)
    if candidates.size < k:
        candidates = np.arange(points.shape[0])

    chosen = rng.choice(candidates, size=k, replace=False)
    return points[chosen].copy()
