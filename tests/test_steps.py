"""
Unit tests for initialisation, assignment and update steps.
"""

import numpy as np
import pytest

from kmclust.clustering.assignment import assign
from kmclust.clustering.initialize import initialize_centroids
from kmclust.clustering.update import update
from kmclust.errors import DimensionMismatch, EmptyClusterRecovered, InvalidK


@pytest.mark.unit
class TestInitializeCentroids:
    def test_shape_and_rows_come_from_data(self, four_points):
        centroids = initialize_centroids(four_points.values, 3, seed=0)

        assert centroids.shape == (3, 2)
        for row in centroids:
            assert any(np.array_equal(row, point) for point in four_points.values)

    def test_same_seed_same_centroids(self, blobs):
        values, _ = blobs
        first = initialize_centroids(values, 5, seed=11)
        second = initialize_centroids(values, 5, seed=11)
        np.testing.assert_array_equal(first, second)

    def test_returns_a_copy(self, four_points):
        values = four_points.values.copy()
        centroids = initialize_centroids(values, 2, seed=1)
        centroids[:] = -1.0
        np.testing.assert_array_equal(values, four_points.values)

    def test_avoids_duplicate_rows_when_possible(self):
        points = np.array([[0.0, 0.0], [0.0, 0.0], [0.0, 0.0], [1.0, 1.0], [2.0, 2.0]])
        for seed in range(20):
            centroids = initialize_centroids(points, 3, seed=seed)
            assert np.unique(centroids, axis=0).shape[0] == 3

    def test_duplicates_allowed_when_unavoidable(self):
        points = np.array([[0.0, 0.0], [0.0, 0.0], [1.0, 1.0]])
        centroids = initialize_centroids(points, 3, seed=0)
        assert centroids.shape == (3, 2)

    @pytest.mark.parametrize("k", [0, -1, 5])
    def test_invalid_k(self, four_points, k):
        with pytest.raises(InvalidK):
            initialize_centroids(four_points.values, k, seed=0)

    def test_unseeded_call(self, four_points):
        centroids = initialize_centroids(four_points.values, 2)
        assert centroids.shape == (2, 2)


@pytest.mark.unit
class TestAssign:
    def test_nearest_centroid(self, four_points):
        centroids = np.array([[10.0, 10.0], [0.0, 0.0]])
        labels = assign(four_points.values, centroids)
        np.testing.assert_array_equal(labels, [1, 1, 0, 0])

    def test_ties_go_to_lowest_index(self):
        points = np.array([[0.0, 0.0], [1.0, 0.0]])
        centroids = np.array([[-1.0, 0.0], [1.0, 0.0], [-1.0, 0.0]])
        labels = assign(points, centroids)
        # The origin is equidistant from all three centroids.
        assert labels[0] == 0
        assert labels[1] == 1

    def test_identical_centroids(self):
        points = np.array([[0.0], [5.0]])
        centroids = np.array([[1.0], [1.0]])
        np.testing.assert_array_equal(assign(points, centroids), [0, 0])

    def test_does_not_mutate_inputs(self, four_points):
        points = four_points.values.copy()
        centroids = np.array([[1.0, 1.0], [9.0, 9.0]])
        before = centroids.copy()
        assign(points, centroids)
        np.testing.assert_array_equal(points, four_points.values)
        np.testing.assert_array_equal(centroids, before)


@pytest.mark.unit
class TestUpdate:
    def test_means_of_assigned_points(self, four_points):
        centroids, anomalies = update(four_points.values, np.array([0, 0, 1, 1]), 2, rng=0)

        np.testing.assert_allclose(centroids, [[0.0, 0.5], [10.0, 10.5]])
        assert anomalies == ()

    def test_empty_cluster_is_reseeded(self, four_points):
        centroids, anomalies = update(
            four_points.values,
            np.array([0, 0, 0, 0]),
            2,
            rng=3,
            iteration=4,
        )

        assert centroids.shape == (2, 2)
        np.testing.assert_allclose(centroids[0], [5.0, 5.5])
        assert len(anomalies) == 1
        record = anomalies[0]
        assert isinstance(record, EmptyClusterRecovered)
        assert record.iteration == 4
        assert record.cluster == 1
        np.testing.assert_array_equal(centroids[1], four_points.values[record.sample_index])

    def test_reseed_skips_rows_that_are_centroids(self):
        points = np.array([[0.0], [1.0], [2.0]])
        labels = np.array([1, 1, 1])
        for seed in range(20):
            centroids, anomalies = update(points, labels, 2, rng=seed)
            # Cluster 1 sits exactly on row 1, so row 1 is not eligible.
            assert anomalies[0].sample_index in (0, 2)
            assert centroids[0, 0] != centroids[1, 0]

    def test_reseed_logs_warning(self, four_points, caplog):
        with caplog.at_level("WARNING", logger="kmclust.clustering.update"):
            update(four_points.values, np.zeros(4, dtype=int), 3, rng=0, iteration=2)
        assert sum("became empty" in message for message in caplog.messages) == 2

    def test_always_k_rows(self, four_points):
        centroids, anomalies = update(four_points.values, np.zeros(4, dtype=int), 4, rng=0)
        assert centroids.shape == (4, 2)
        assert [record.cluster for record in anomalies] == [1, 2, 3]
        assert np.unique(centroids, axis=0).shape[0] == 4

    def test_label_out_of_range(self, four_points):
        with pytest.raises(DimensionMismatch):
            update(four_points.values, np.array([0, 1, 2, 0]), 2)

    def test_non_integer_labels(self, four_points):
        with pytest.raises(DimensionMismatch):
            update(four_points.values, np.array([0.0, 0.5, 1.0, 1.0]), 2)
