"""
Nearest-centroid assignment.
"""

from __future__ import annotations

import numpy as np

from .distance import pairwise_squared_distances


__all__ = ["assign"]


def assign(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Index of the nearest centroid for each point.

    Equidistant centroids resolve to the lowest index, which keeps labels
    reproducible when two centroids coincide.
    """

    distances = pairwise_squared_distances(points, centroids)
    # argmin returns the first occurrence of the minimum.
    return np.argmin(distances, axis=1).astype(np.intp, copy=False)
