"""
Shared fixtures for the k-means engine tests.
"""

import numpy as np
import pandas as pd
import pytest
from sklearn.datasets import make_blobs

from kmclust.data_io import DataMatrix


@pytest.fixture
def four_points():
    """Two tight pairs far apart: {A, B} near the origin, {C, D} near (10, 10)."""
    values = np.array(
        [
            [0.0, 0.0],
            [0.0, 1.0],
            [10.0, 10.0],
            [10.0, 11.0],
        ]
    )
    return DataMatrix(values=values, sample_ids=("A", "B", "C", "D"), feature_names=("x", "y"))


@pytest.fixture
def blobs():
    """Three well separated Gaussian blobs with their generating labels."""
    values, labels = make_blobs(
        n_samples=60,
        n_features=4,
        centers=[[0, 0, 0, 0], [12, 12, 0, 0], [0, 12, 12, 0]],
        cluster_std=0.5,
        random_state=0,
    )
    return values, labels


@pytest.fixture
def noise_matrix():
    """Unstructured Gaussian noise, 200 samples by 3 features."""
    rng = np.random.default_rng(42)
    return rng.normal(size=(200, 3))


@pytest.fixture
def expression_frame():
    """Small sample-by-gene table as handed over by preprocessing."""
    rng = np.random.default_rng(3)
    return pd.DataFrame(
        rng.normal(size=(12, 5)),
        index=[f"GSM{i:04d}" for i in range(12)],
        columns=[f"gene_{j}" for j in range(5)],
    )
