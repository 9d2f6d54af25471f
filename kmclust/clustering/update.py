"""
Centroid update step with explicit empty-cluster recovery.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np

from ..errors import DimensionMismatch, EmptyClusterRecovered
from .initialize import SeedLike, as_generator


__all__ = ["update"]

logger = logging.getLogger(__name__)


def update(
    points: np.ndarray,
    labels: np.ndarray,
    k: int,
    rng: Optional[SeedLike] = None,
    *,
    iteration: int = 0,
) -> Tuple[np.ndarray, Tuple[EmptyClusterRecovered, ...]]:
    """
    Recompute each centroid as the mean of its assigned points.

    Parameters
    ----------
    points
        Sample matrix with shape (n_samples, n_features).
    labels
        Current cluster index of each sample, in [0, k).
    k
        Number of clusters; the result always has exactly ``k`` rows.
    rng
        Source of randomness for re-seeding empty clusters.
    iteration
        Iteration number recorded on any recovery anomaly.

    Returns
    -------
    centroids, anomalies
        New (k, n_features) centroid matrix and one ``EmptyClusterRecovered``
        record per cluster that had to be re-seeded.
    """

    labels = np.asarray(labels)
    if labels.size and not np.issubdtype(labels.dtype, np.integer):
        raise DimensionMismatch(f"labels must be integer cluster indices; got dtype {labels.dtype}.")
    if labels.shape != (points.shape[0],):
        raise DimensionMismatch(
            f"labels has shape {labels.shape}, expected ({points.shape[0]},)."
        )
    if labels.size and (labels.min() < 0 or labels.max() >= k):
        raise DimensionMismatch(f"labels must lie in [0, {k}).")

    counts = np.bincount(labels, minlength=k)
    sums = np.zeros((k, points.shape[1]), dtype=np.float64)
    np.add.at(sums, labels, points)

    centroids = np.zeros_like(sums)
    filled = counts > 0
    centroids[filled] = sums[filled] / counts[filled, None]

    empty = np.flatnonzero(~filled)
    if empty.size == 0:
        return centroids, ()

    generator = as_generator(rng)
    anomalies: List[EmptyClusterRecovered] = []
    occupied = filled.copy()
    for cluster in empty:
        candidates = _rows_not_matching(points, centroids[occupied])
        if candidates.size == 0:
            candidates = np.arange(points.shape[0])
        sample_index = int(generator.choice(candidates))
        centroids[cluster] = points[sample_index]
        occupied[cluster] = True

        record = EmptyClusterRecovered(
            iteration=iteration,
            cluster=int(cluster),
            sample_index=sample_index,
        )
        anomalies.append(record)
        logger.warning(
            "Cluster %d became empty at iteration %d; re-seeded from sample %d.",
            record.cluster,
            record.iteration,
            record.sample_index,
        )

    return centroids, tuple(anomalies)


def _rows_not_matching(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Row indices of ``points`` that are not exactly equal to any centroid."""
    if centroids.shape[0] == 0:
        return np.arange(points.shape[0])
    matches = (points[:, None, :] == centroids[None, :, :]).all(axis=2).any(axis=1)
    return np.flatnonzero(~matches)
