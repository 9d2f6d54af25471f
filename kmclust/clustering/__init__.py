"""
K-means building blocks: distance, initialisation, assignment, update and the
convergence loop that ties them together.
"""

from .assignment import assign
from .distance import (
    pairwise_squared_distances,
    squared_distance,
    total_sum_of_squares,
    within_cluster_ss,
)
from .initialize import initialize_centroids
from .kmeans import DEFAULT_MAX_ITER, RunResult, RunState, run_kmeans
from .update import update

__all__ = [
    "assign",
    "pairwise_squared_distances",
    "squared_distance",
    "total_sum_of_squares",
    "within_cluster_ss",
    "initialize_centroids",
    "DEFAULT_MAX_ITER",
    "RunResult",
    "RunState",
    "run_kmeans",
    "update",
]
