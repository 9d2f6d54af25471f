"""
Squared Euclidean distance and the within-cluster sum of squares objective.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np
from sklearn.metrics import pairwise_distances

from ..errors import DimensionMismatch


__all__ = [
    "squared_distance",
    "pairwise_squared_distances",
    "within_cluster_ss",
    "total_sum_of_squares",
]

VectorLike = Union[Sequence[float], np.ndarray]


def squared_distance(point: VectorLike, centroid: VectorLike) -> float:
    """
    Sum over dimensions of the squared coordinate differences.
    """

    a = np.asarray(point, dtype=np.float64)
    b = np.asarray(centroid, dtype=np.float64)
    if a.shape != b.shape or a.ndim != 1:
        raise DimensionMismatch(
            f"point and centroid must be vectors of equal length; got {a.shape} and {b.shape}."
        )
    diff = a - b
    return float(np.dot(diff, diff))


def pairwise_squared_distances(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Squared Euclidean distances between every point and every centroid.

    Returns an array of shape (n_samples, n_centroids). The ``sqeuclidean``
    metric is evaluated on coordinate differences, so a point that coincides
    with a centroid is at distance exactly zero.
    """

    if points.shape[1] != centroids.shape[1]:
        raise DimensionMismatch(
            f"points have {points.shape[1]} features but centroids have {centroids.shape[1]}."
        )
    return pairwise_distances(points, centroids, metric="sqeuclidean")


def within_cluster_ss(
    points: np.ndarray,
    labels: np.ndarray,
    centroids: np.ndarray,
) -> float:
    """
    Total within-cluster sum of squares (WCSS).

    Parameters
    ----------
    points
        Sample matrix with shape (n_samples, n_features).
    labels
        Cluster index for each sample.
    centroids
        Centroid matrix with shape (k, n_features).
    """

    points = np.asarray(points, dtype=np.float64)
    centroids = np.asarray(centroids, dtype=np.float64)
    labels = np.asarray(labels)
    if labels.size and not np.issubdtype(labels.dtype, np.integer):
        raise DimensionMismatch(f"labels must be integer cluster indices; got dtype {labels.dtype}.")

    if points.ndim != 2 or centroids.ndim != 2 or points.shape[1] != centroids.shape[1]:
        raise DimensionMismatch(
            f"points {points.shape} and centroids {centroids.shape} are not compatible."
        )
    if labels.shape != (points.shape[0],):
        raise DimensionMismatch(
            f"labels has shape {labels.shape}, expected ({points.shape[0]},)."
        )
    if labels.size and (labels.min() < 0 or labels.max() >= centroids.shape[0]):
        raise DimensionMismatch(
            f"labels must lie in [0, {centroids.shape[0]}); "
            f"found range [{labels.min()}, {labels.max()}]."
        )

    residuals = points - centroids[labels]
    return float(np.sum(residuals * residuals))


def total_sum_of_squares(points: np.ndarray) -> float:
    """Squared deviations of all points from the global mean."""

    points = np.asarray(points, dtype=np.float64)
    residuals = points - points.mean(axis=0)
    return float(np.sum(residuals * residuals))
