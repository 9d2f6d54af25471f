"""
Error types raised by the k-means engine.

Fatal errors subclass ``ValueError`` so callers that already guard argument
validation with ``except ValueError`` keep working. Empty-cluster recovery is
not an exception: it is recorded on the run result as an anomaly.
"""

from __future__ import annotations

from dataclasses import dataclass


__all__ = [
    "KMeansError",
    "InvalidK",
    "DimensionMismatch",
    "NonFiniteInput",
    "EmptyClusterRecovered",
]


class KMeansError(ValueError):
    """Base class for errors that abort a single k-means run."""


class InvalidK(KMeansError):
    """Requested cluster count is not in [1, n_samples]."""

    def __init__(self, k: int, n_samples: int):
        super().__init__(f"k must be in [1, {n_samples}]; received k={k}.")
        self.k = k
        self.n_samples = n_samples


class DimensionMismatch(KMeansError):
    """Vector lengths or label indices are inconsistent."""


class NonFiniteInput(KMeansError):
    """The sample matrix contains NaN or infinite entries."""

    def __init__(self, n_bad: int):
        super().__init__(
            f"Sample matrix contains {n_bad} non-finite entries; "
            "impute or filter missing values before clustering."
        )
        self.n_bad = n_bad


@dataclass(frozen=True)
class EmptyClusterRecovered:
    """
    A cluster lost all of its points and was re-seeded from the data.

    Attributes
    ----------
    iteration:
        Iteration (1-based) of the update step that found the empty cluster.
    cluster:
        Index of the empty cluster.
    sample_index:
        Row of the sample matrix used as the replacement centroid.
    """

    iteration: int
    cluster: int
    sample_index: int
