"""
Lloyd's k-means driven to assignment stability or an iteration budget.

A single call to :func:`run_kmeans` is self-contained: it owns its centroid
set and label vector and only reads the shared sample matrix, so separate
runs can execute concurrently.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from ..data_io import MatrixLike, as_data_matrix, sample_index
from ..errors import EmptyClusterRecovered
from .assignment import assign
from .distance import within_cluster_ss
from .initialize import SeedLike, as_generator, check_k, initialize_centroids
from .update import update


__all__ = ["DEFAULT_MAX_ITER", "RunState", "RunResult", "run_kmeans"]

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITER = 10_000


class RunState(str, Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    MAX_ITER_REACHED = "max_iter_reached"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class RunResult:
    """
    Outcome of one k-means run.

    Attributes
    ----------
    k:
        Number of clusters requested (and returned).
    centroids:
        Final centroid matrix, shape (k, n_features).
    labels:
        Final cluster index of each sample, shape (n_samples,).
    wcss:
        Within-cluster sum of squares of ``labels`` against ``centroids``.
    n_iter:
        Number of update/assign iterations performed.
    converged:
        True when the labels stopped changing before the budget ran out.
    state:
        Terminal state of the run.
    anomalies:
        Empty-cluster recoveries that happened during the run.
    sample_ids:
        Row labels of the input matrix, if it had any.
    seed:
        Integer seed the run was started with, if one was given.
    """

    k: int
    centroids: np.ndarray
    labels: np.ndarray
    wcss: float
    n_iter: int
    converged: bool
    state: RunState
    anomalies: Tuple[EmptyClusterRecovered, ...] = ()
    sample_ids: Optional[Tuple[str, ...]] = None
    seed: Optional[int] = None

    @property
    def cancelled(self) -> bool:
        return self.state is RunState.CANCELLED

    def membership(self) -> pd.Series:
        """Cluster label of each sample, keyed by sample ID."""
        index = sample_index(self.sample_ids, len(self.labels))
        return pd.Series(self.labels, index=index, name="cluster")


def run_kmeans(
    data: MatrixLike,
    k: int,
    *,
    max_iter: int = DEFAULT_MAX_ITER,
    seed: Optional[SeedLike] = None,
    cancel_event: Optional[threading.Event] = None,
) -> RunResult:
    """
    Cluster the rows of ``data`` into ``k`` groups.

    Parameters
    ----------
    data
        Complete numeric matrix (DataMatrix, DataFrame or 2-D array).
    k
        Number of clusters, 1 <= k <= n_samples.
    max_iter
        Iteration budget. Reaching it is reported as ``MAX_ITER_REACHED``
        with ``converged=False``, not raised.
    seed
        Seed for centroid initialisation and empty-cluster re-seeding.
        Identical inputs and seed give bit-identical results.
    cancel_event
        Checked before every iteration; once set, the run stops with state
        ``CANCELLED`` and returns its current labels and centroids.

    Raises
    ------
    NonFiniteInput
        The matrix contains NaN or infinite values.
    InvalidK
        ``k`` is not in [1, n_samples].
    DimensionMismatch
        The matrix is not two-dimensional.
    """

    matrix = as_data_matrix(data).require_finite()
    points = matrix.values
    check_k(k, matrix.n_samples)
    if max_iter < 1:
        raise ValueError("max_iter must be at least 1.")

    rng = as_generator(seed)
    centroids = initialize_centroids(points, k, rng)
    labels = assign(points, centroids)

    state = RunState.RUNNING
    n_iter = 0
    anomalies: List[EmptyClusterRecovered] = []
    while state is RunState.RUNNING:
        if cancel_event is not None and cancel_event.is_set():
            state = RunState.CANCELLED
            break

        n_iter += 1
        centroids, recovered = update(points, labels, k, rng, iteration=n_iter)
        anomalies.extend(recovered)
        new_labels = assign(points, centroids)

        if np.array_equal(new_labels, labels):
            state = RunState.CONVERGED
        elif n_iter >= max_iter:
            state = RunState.MAX_ITER_REACHED
        labels = new_labels

    wcss = within_cluster_ss(points, labels, centroids)
    logger.debug(
        "k-means k=%d stopped in state %s after %d iterations (wcss=%.6g, %d empty-cluster recoveries).",
        k,
        state.value,
        n_iter,
        wcss,
        len(anomalies),
    )

    labels.setflags(write=False)
    centroids.setflags(write=False)
    return RunResult(
        k=int(k),
        centroids=centroids,
        labels=labels,
        wcss=wcss,
        n_iter=n_iter,
        converged=state is RunState.CONVERGED,
        state=state,
        anomalies=tuple(anomalies),
        sample_ids=matrix.sample_ids,
        seed=int(seed) if isinstance(seed, (int, np.integer)) else None,
    )
