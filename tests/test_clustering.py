"""Tests for the HDBSCAN-backed clustering collaborator."""

import numpy as np
import pytest

from samplesummary.core.clustering import (
    Center,
    ClusteringConfig,
    FeatureClusterer,
    NOISE_LABEL,
    sort_by_weight,
)
from samplesummary.core.statistics import OwnedPoints, ReferencedPoints


@pytest.fixture
def clusterer():
    return FeatureClusterer(ClusteringConfig(min_cluster_size=15))


class TestClusteringConfig:
    def test_defaults(self):
        config = ClusteringConfig()

        assert config.min_cluster_size == 5
        assert config.allow_single_cluster is True

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_cluster_size": 1},
            {"min_samples": 0},
            {"cluster_selection_epsilon": -0.1},
            {"cluster_selection_method": "kmeans"},
        ],
    )
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            ClusteringConfig(**kwargs)


class TestCenter:
    def test_representative_is_first_candidate(self):
        center = Center([np.array([1.0]), np.array([2.0])], 3.0)

        np.testing.assert_array_equal(center.representative, [1.0])

    def test_sort_by_weight(self):
        centers = [Center([np.zeros(1)], w) for w in (1.0, 5.0, 2.0)]

        assert [c.weight for c in sort_by_weight(centers)] == [5.0, 2.0, 1.0]


class TestCluster:
    def test_heaviest_blob_first(self, clusterer, blob_batch, distance):
        centers = clusterer.cluster(OwnedPoints(blob_batch), distance, max_clusters=4)

        assert 2 <= len(centers) <= 4
        weights = [c.weight for c in centers]
        assert weights == sorted(weights, reverse=True)
        np.testing.assert_allclose(centers[0].representative, [10.0, 10.0], atol=1.0)
        assert sum(weights) <= 90.0 + 1e-6

    def test_respects_cap(self, clusterer, blob_batch, distance):
        centers = clusterer.cluster(OwnedPoints(blob_batch), distance, max_clusters=1)

        assert len(centers) == 1
        np.testing.assert_allclose(centers[0].representative, [10.0, 10.0], atol=1.0)

    def test_parallel_distance_matrix(self, clusterer, blob_batch, distance):
        serial = clusterer.cluster(OwnedPoints(blob_batch), distance, max_clusters=4)
        parallel = clusterer.cluster(OwnedPoints(blob_batch), distance, max_clusters=4, parallel_enabled=True)

        assert [c.weight for c in serial] == [c.weight for c in parallel]

    def test_small_batch_becomes_singletons(self, distance):
        clusterer = FeatureClusterer(ClusteringConfig(min_cluster_size=5))
        points = [([0.0, 0.0], 1.0), ([1.0, 1.0], 5.0), ([2.0, 2.0], 2.0)]

        centers = clusterer.cluster(OwnedPoints(points), distance, max_clusters=2)

        assert [c.weight for c in centers] == [5.0, 2.0]
        np.testing.assert_array_equal(centers[0].representative, [1.0, 1.0])
        np.testing.assert_array_equal(centers[1].representative, [2.0, 2.0])

    def test_rejects_zero_cap(self, clusterer, blob_batch, distance):
        with pytest.raises(ValueError):
            clusterer.cluster(OwnedPoints(blob_batch), distance, max_clusters=0)


class TestMultiCluster:
    def test_representatives(self, clusterer, blob_batch, distance):
        matrix = np.stack([p for p, _ in blob_batch])
        points = ReferencedPoints([(matrix[i], w) for i, (_, w) in enumerate(blob_batch)])

        centers = clusterer.multi_cluster(points, distance, 3, 0.2, max_clusters=4)

        assert 2 <= len(centers) <= 4
        for center in centers:
            assert 1 <= len(center.representatives) <= 3
            # the first representative is an actual member of the batch
            assert np.any(np.all(matrix == center.representative, axis=1))

    def test_full_shrinkage_collapses_representatives(self, clusterer, blob_batch, distance):
        centers = clusterer.multi_cluster(OwnedPoints(blob_batch), distance, 3, 1.0, max_clusters=2)

        for center in centers:
            for representative in center.representatives[1:]:
                np.testing.assert_allclose(representative, center.representative, atol=1e-6)

    def test_identical_points_yield_one_representative(self, distance):
        clusterer = FeatureClusterer(ClusteringConfig(min_cluster_size=5))
        points = [([1.0, 1.0], 1.0)] * 3

        centers = clusterer.multi_cluster(OwnedPoints(points), distance, 3, 0.5, max_clusters=5)

        # three singletons, each with only itself to represent it
        assert len(centers) == 3
        assert all(len(c.representatives) == 1 for c in centers)

    @pytest.mark.parametrize("count, shrinkage", [(0, 0.5), (2, -0.1), (2, 1.5)])
    def test_rejects_invalid_arguments(self, clusterer, blob_batch, distance, count, shrinkage):
        with pytest.raises(ValueError):
            clusterer.multi_cluster(OwnedPoints(blob_batch), distance, count, shrinkage, max_clusters=2)


class TestClusterStats:
    def test_get_cluster_stats(self):
        labels = np.array([0, 0, 1, NOISE_LABEL, 1, NOISE_LABEL])

        stats = FeatureClusterer().get_cluster_stats(labels)

        assert stats["n_clusters"] == 2
        assert stats["n_outliers"] == 2
        assert stats["n_samples"] == 6
        assert stats["outlier_ratio"] == pytest.approx(1.0 / 3.0)
