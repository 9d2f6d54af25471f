"""
K-means clustering with cluster-count sweeps for elbow-based model selection.

This package provides the clustering engine for a complete, numeric sample
matrix: a single run returning labels, centroids and the within-cluster sum of
squares, and a sweep over k = 1..k_max collecting the WCSS curve. Use the
modules from notebooks to keep interactive code light and reproducible.
"""

from .data_io import DataMatrix, as_data_matrix, load_matrix, matrix_from_frame
from .errors import (
    DimensionMismatch,
    EmptyClusterRecovered,
    InvalidK,
    KMeansError,
    NonFiniteInput,
)
from .clustering import (
    DEFAULT_MAX_ITER,
    RunResult,
    RunState,
    assign,
    initialize_centroids,
    run_kmeans,
    squared_distance,
    total_sum_of_squares,
    update,
    within_cluster_ss,
)
from .metrics import cluster_counts, membership_table, partition_metrics
from .sweep import (
    SweepEntry,
    SweepResult,
    run_repeated_sweeps,
    run_sweep,
    summarize_sweeps,
)

__all__ = [
    "DataMatrix",
    "as_data_matrix",
    "load_matrix",
    "matrix_from_frame",
    "DimensionMismatch",
    "EmptyClusterRecovered",
    "InvalidK",
    "KMeansError",
    "NonFiniteInput",
    "DEFAULT_MAX_ITER",
    "RunResult",
    "RunState",
    "assign",
    "initialize_centroids",
    "run_kmeans",
    "squared_distance",
    "total_sum_of_squares",
    "update",
    "within_cluster_ss",
    "cluster_counts",
    "membership_table",
    "partition_metrics",
    "SweepEntry",
    "SweepResult",
    "run_repeated_sweeps",
    "run_sweep",
    "summarize_sweeps",
]
