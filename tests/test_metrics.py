"""
Tests for result summaries.
"""

import numpy as np
import pytest

from kmclust.clustering.kmeans import run_kmeans
from kmclust.metrics import cluster_counts, membership_table, partition_metrics


@pytest.mark.unit
class TestMetrics:
    def test_cluster_counts(self):
        frame = cluster_counts(np.array([0, 2, 2, 0, 2]))
        assert list(frame["cluster"]) == [0, 2]
        assert list(frame["size"]) == [2, 3]

    def test_cluster_counts_with_k_lists_empty_clusters(self):
        frame = cluster_counts(np.array([0, 2, 2]), k=4)
        assert list(frame["cluster"]) == [0, 1, 2, 3]
        assert list(frame["size"]) == [1, 0, 2, 0]

    def test_partition_metrics_ignore_label_permutation(self):
        scores = partition_metrics(np.array([0, 0, 1, 1]), np.array([1, 1, 0, 0]))
        assert scores["ARI"] == pytest.approx(1.0)
        assert scores["AMI"] == pytest.approx(1.0)

    def test_membership_table(self, four_points):
        result = run_kmeans(four_points, 2, seed=0)
        table = membership_table(result, four_points)

        assert list(table.index) == ["A", "B", "C", "D"]
        assert table.index.name == "sample"
        np.testing.assert_allclose(table["squared_distance"], [0.25, 0.25, 0.25, 0.25])
        assert table["squared_distance"].sum() == pytest.approx(result.wcss)
