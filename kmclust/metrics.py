"""
Utilities for summarizing and comparing clustering results.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd
from sklearn.metrics import adjusted_mutual_info_score, adjusted_rand_score

from .clustering.distance import pairwise_squared_distances
from .clustering.kmeans import RunResult
from .data_io import MatrixLike, as_data_matrix


def cluster_counts(labels: np.ndarray, *, k: Optional[int] = None, name: str = "cluster") -> pd.DataFrame:
    """
    Return a DataFrame of cluster sizes.

    When ``k`` is given, clusters 0..k-1 with no members are listed with
    size zero.
    """

    labels = np.asarray(labels, dtype=int)
    minlength = k if k is not None else 0
    counts = np.bincount(labels, minlength=minlength) if labels.size else np.zeros(minlength, dtype=int)
    frame = pd.DataFrame({name: np.arange(counts.size), "size": counts})
    if k is None:
        frame = frame[frame["size"] > 0]
    return frame.reset_index(drop=True)


def partition_metrics(labels_a: np.ndarray, labels_b: np.ndarray) -> pd.Series:
    """
    Compute adjusted Rand index (ARI) and adjusted mutual information (AMI).
    """

    ari = adjusted_rand_score(labels_a, labels_b)
    ami = adjusted_mutual_info_score(labels_a, labels_b)
    return pd.Series({"ARI": ari, "AMI": ami})


def membership_table(result: RunResult, data: MatrixLike) -> pd.DataFrame:
    """
    Cluster label and squared distance to the assigned centroid per sample.

    The frame is indexed by sample ID and is the hand-off to annotation and
    plotting steps downstream.
    """

    matrix = as_data_matrix(data)
    distances = pairwise_squared_distances(matrix.values, np.asarray(result.centroids))
    own = distances[np.arange(len(result.labels)), result.labels]
    membership = result.membership()
    return pd.DataFrame(
        {"cluster": membership.to_numpy(), "squared_distance": own},
        index=membership.index,
    )
