"""HDBSCAN-based clustering of weighted points into weighted centers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence, Tuple
import logging

import hdbscan
import numpy as np
from sklearn.metrics import pairwise_distances

from ..utils.validation import check_argument
from .statistics import PointAccessor


logger = logging.getLogger(__name__)

DistanceFn = Callable[[np.ndarray, np.ndarray], float]

NOISE_LABEL = -1


@dataclass
class Center:
    """A weighted cluster center with one or more representative vectors."""

    representatives: List[np.ndarray] = field(default_factory=list)
    weight: float = 0.0

    @property
    def representative(self) -> np.ndarray:
        return self.representatives[0]


class Clusterer(Protocol):
    """Anything that turns weighted points into at most ``max_clusters`` centers."""

    def cluster(
        self,
        points: PointAccessor,
        distance: DistanceFn,
        max_clusters: int,
        parallel_enabled: bool = False,
    ) -> List[Center]:
        ...

    def multi_cluster(
        self,
        points: PointAccessor,
        distance: DistanceFn,
        representatives_per_cluster: int,
        shrinkage: float,
        max_clusters: int,
        parallel_enabled: bool = False,
    ) -> List[Center]:
        ...


@dataclass
class ClusteringConfig:
    """Configuration for HDBSCAN clustering of weighted points."""

    min_cluster_size: int = 5
    min_samples: int = 1
    cluster_selection_epsilon: float = 0.0
    cluster_selection_method: str = "eom"
    allow_single_cluster: bool = True

    def __post_init__(self) -> None:
        """Validate numeric configuration values after dataclass initialization."""
        if self.min_cluster_size < 2:
            raise ValueError("min_cluster_size must be at least 2")
        if self.min_samples < 1:
            raise ValueError("min_samples must be positive")
        if self.cluster_selection_epsilon < 0:
            raise ValueError("cluster_selection_epsilon must be non-negative")
        if self.cluster_selection_method not in {"eom", "leaf"}:
            raise ValueError(f"Unknown cluster selection method: {self.cluster_selection_method}")


class FeatureClusterer:
    """
    Cluster weighted points with HDBSCAN over a caller-supplied distance.

    The pairwise distance matrix is built with the caller's distance function
    and clustered with ``metric="precomputed"``. Points labelled as noise
    become singleton clusters. Clusters are ranked by total weight and only
    the ``max_clusters`` heaviest are kept.

    Example:
        >>> clusterer = FeatureClusterer(ClusteringConfig(min_cluster_size=3))
        >>> centers = clusterer.cluster(OwnedPoints(points), euclidean, max_clusters=4)
    """

    def __init__(self, config: Optional[ClusteringConfig] = None):
        """Initialize the clusterer with optional configuration overrides."""
        self.config = config or ClusteringConfig()

    def _to_numpy_points(self, points: PointAccessor) -> Tuple[np.ndarray, np.ndarray]:
        check_argument(len(points) > 0, "cannot cluster an empty list")
        coordinates = np.stack([points.coordinate_at(i) for i in range(len(points))])
        weights = points.weights().astype(np.float64)
        return coordinates.astype(np.float64, copy=False), weights

    def compute_distance_matrix(
        self,
        coordinates: np.ndarray,
        distance: DistanceFn,
        parallel_enabled: bool = False,
    ) -> np.ndarray:
        """Compute the pairwise distance matrix with the caller's distance function."""
        n_jobs = -1 if parallel_enabled else None
        matrix = pairwise_distances(coordinates, metric=distance, n_jobs=n_jobs)
        return matrix.astype(np.float64)

    def label_points(self, distance_matrix: np.ndarray) -> np.ndarray:
        """Run HDBSCAN on a precomputed distance matrix and return labels."""
        n_samples = distance_matrix.shape[0]
        if n_samples < self.config.min_cluster_size:
            return np.full(n_samples, NOISE_LABEL, dtype=np.int64)

        clusterer = hdbscan.HDBSCAN(
            min_cluster_size=self.config.min_cluster_size,
            min_samples=self.config.min_samples,
            cluster_selection_epsilon=self.config.cluster_selection_epsilon,
            metric="precomputed",
            cluster_selection_method=self.config.cluster_selection_method,
            allow_single_cluster=self.config.allow_single_cluster,
        )
        return clusterer.fit_predict(distance_matrix).astype(np.int64)

    def _heaviest_groups(
        self,
        labels: np.ndarray,
        weights: np.ndarray,
        max_clusters: int,
    ) -> List[np.ndarray]:
        groups = [np.flatnonzero(labels == label) for label in np.unique(labels[labels != NOISE_LABEL])]
        groups.extend(np.array([i]) for i in np.flatnonzero(labels == NOISE_LABEL))

        # least weighted clusters are evicted first
        groups.sort(key=lambda idx: float(weights[idx].sum()), reverse=True)
        return groups[:max_clusters]

    @staticmethod
    def _weighted_centroid(coordinates: np.ndarray, weights: np.ndarray) -> np.ndarray:
        total = weights.sum()
        if total > 0:
            return (weights @ coordinates) / total
        return coordinates.mean(axis=0)

    def _scattered_representatives(
        self,
        coordinates: np.ndarray,
        weights: np.ndarray,
        member_distances: np.ndarray,
        distance: DistanceFn,
        count: int,
        shrinkage: float,
    ) -> List[np.ndarray]:
        centroid = self._weighted_centroid(coordinates, weights)
        anchor = int(np.argmin([distance(row, centroid) for row in coordinates]))
        chosen = [anchor]

        # farthest-first traversal from the member nearest the centroid
        nearest = member_distances[anchor].copy()
        while len(chosen) < min(count, coordinates.shape[0]):
            candidate = int(np.argmax(nearest))
            if nearest[candidate] <= 0:
                break
            chosen.append(candidate)
            nearest = np.minimum(nearest, member_distances[candidate])

        first = coordinates[anchor]
        representatives = [first.astype(np.float32)]
        for index in chosen[1:]:
            point = coordinates[index]
            representatives.append((point + shrinkage * (first - point)).astype(np.float32))
        return representatives

    def cluster(
        self,
        points: PointAccessor,
        distance: DistanceFn,
        max_clusters: int,
        parallel_enabled: bool = False,
    ) -> List[Center]:
        """
        Cluster points into at most ``max_clusters`` centers.

        Each center is represented by the weighted centroid of its members.

        Args:
            points: Weighted batch
            distance: Symmetric non-negative distance between two vectors
            max_clusters: Upper bound on the number of returned centers
            parallel_enabled: Compute the distance matrix on all cores

        Returns:
            List of centers, heaviest first
        """
        check_argument(max_clusters > 0, "max_clusters has to be positive")
        coordinates, weights = self._to_numpy_points(points)
        distance_matrix = self.compute_distance_matrix(coordinates, distance, parallel_enabled)
        labels = self.label_points(distance_matrix)
        logger.debug(f"Cluster stats: {self.get_cluster_stats(labels)}")

        centers = []
        for idx in self._heaviest_groups(labels, weights, max_clusters):
            centroid = self._weighted_centroid(coordinates[idx], weights[idx])
            centers.append(Center([centroid.astype(np.float32)], float(weights[idx].sum())))
        return centers

    def multi_cluster(
        self,
        points: PointAccessor,
        distance: DistanceFn,
        representatives_per_cluster: int,
        shrinkage: float,
        max_clusters: int,
        parallel_enabled: bool = False,
    ) -> List[Center]:
        """
        Cluster points into centers carrying several representatives each.

        The first representative of a center is its member closest to the
        weighted centroid; the others are well-scattered members pulled toward
        the first one by ``shrinkage``.

        Args:
            points: Weighted batch
            distance: Symmetric non-negative distance between two vectors
            representatives_per_cluster: Maximum representatives per center
            shrinkage: Fraction in [0, 1] by which scattered representatives
                move toward the first one
            max_clusters: Upper bound on the number of returned centers
            parallel_enabled: Compute the distance matrix on all cores

        Returns:
            List of centers, heaviest first
        """
        check_argument(max_clusters > 0, "max_clusters has to be positive")
        check_argument(representatives_per_cluster > 0, "need at least one representative per cluster")
        check_argument(0.0 <= shrinkage <= 1.0, "shrinkage has to be in [0, 1]")
        coordinates, weights = self._to_numpy_points(points)
        distance_matrix = self.compute_distance_matrix(coordinates, distance, parallel_enabled)
        labels = self.label_points(distance_matrix)
        logger.debug(f"Cluster stats: {self.get_cluster_stats(labels)}")

        centers = []
        for idx in self._heaviest_groups(labels, weights, max_clusters):
            representatives = self._scattered_representatives(
                coordinates[idx],
                weights[idx],
                distance_matrix[np.ix_(idx, idx)],
                distance,
                representatives_per_cluster,
                shrinkage,
            )
            centers.append(Center(representatives, float(weights[idx].sum())))
        return centers

    def get_cluster_stats(self, labels: np.ndarray) -> dict:
        """Summarize clustering outputs."""
        unique_labels = np.unique(labels)
        n_clusters = len(unique_labels[unique_labels != NOISE_LABEL])
        n_outliers = int(np.sum(labels == NOISE_LABEL))

        return {
            "n_clusters": n_clusters,
            "n_outliers": n_outliers,
            "n_samples": int(len(labels)),
            "outlier_ratio": n_outliers / len(labels) if len(labels) > 0 else 0.0,
        }


def sort_by_weight(centers: Sequence[Center]) -> List[Center]:
    """Return centers ordered by weight, heaviest first."""
    return sorted(centers, key=lambda center: center.weight, reverse=True)
