"""Shared fixtures for samplesummary tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from samplesummary.core.clustering import Center


def euclidean(a, b):
    return float(np.linalg.norm(np.asarray(a) - np.asarray(b)))


class RecordingClusterer:
    """Clusterer stub that returns fixed centers and records its calls."""

    def __init__(self, centers):
        self.centers = centers
        self.calls = []

    def cluster(self, points, distance, max_clusters, parallel_enabled=False):
        self.calls.append(
            {
                "method": "cluster",
                "n_points": len(points),
                "distance": distance,
                "max_clusters": max_clusters,
                "parallel_enabled": parallel_enabled,
            }
        )
        return list(self.centers)

    def multi_cluster(
        self,
        points,
        distance,
        representatives_per_cluster,
        shrinkage,
        max_clusters,
        parallel_enabled=False,
    ):
        self.calls.append(
            {
                "method": "multi_cluster",
                "n_points": len(points),
                "distance": distance,
                "representatives_per_cluster": representatives_per_cluster,
                "shrinkage": shrinkage,
                "max_clusters": max_clusters,
                "parallel_enabled": parallel_enabled,
            }
        )
        return list(self.centers)


@pytest.fixture
def distance():
    return euclidean


@pytest.fixture
def two_point_batch():
    return [([0.0], 1.0), ([10.0], 1.0)]


@pytest.fixture
def random_batch():
    rng = np.random.default_rng(7)
    values = rng.normal(loc=3.0, scale=10.0, size=(60, 3)).astype(np.float32)
    weights = rng.uniform(0.0, 2.0, size=60)
    return [(values[i], float(weights[i])) for i in range(60)]


@pytest.fixture
def blob_batch():
    """Two tight blobs; the one around (10, 10) carries twice the weight."""
    rng = np.random.default_rng(0)
    low = rng.normal(loc=0.0, scale=0.3, size=(30, 2)).astype(np.float32)
    high = rng.normal(loc=10.0, scale=0.3, size=(30, 2)).astype(np.float32)
    points = [(row, 1.0) for row in low] + [(row, 2.0) for row in high]
    return points


@pytest.fixture
def make_clusterer():
    def _make(weights, dimensions=2):
        centers = [
            Center([np.full(dimensions, float(i), dtype=np.float32)], weight)
            for i, weight in enumerate(weights)
        ]
        return RecordingClusterer(centers)

    return _make


@pytest.fixture
def recording_clusterer():
    return RecordingClusterer
