"""
Summarize a batch of weighted points.

The summarizer computes the weighted statistics of a batch and, when asked
for typical points, delegates to a clustering collaborator and normalizes
its centers into relative weights:

1. Compute statistics (lower/upper fractions 0.1/0.9); invalid input fails here
2. Stop if ``max_number`` is 0
3. Ask the clusterer for at most ``min(D * 5, max_number)`` centers
4. Sort centers by weight, heaviest first
5. Emit each center's first representative and ``weight / sum(weights)``
"""

from __future__ import annotations

from typing import List, Optional, Sequence
import logging

import numpy as np

from ..utils.config_utils import LOWER_FRACTION, MAX_NUMBER_PER_DIMENSION, UPPER_FRACTION
from ..utils.validation import ClusteringContractError, EmptyBatchError, check_argument
from .clustering import Center, Clusterer, DistanceFn, FeatureClusterer, sort_by_weight
from .statistics import OwnedPoints, PointAccessor, ReferencedPoints, WeightedPoint, compute_statistics
from .summary import SampleSummary


logger = logging.getLogger(__name__)


def max_clusters_for(dimensions: int, max_number: int) -> int:
    """Cluster cap requested from the collaborator for a given dimension."""
    return min(dimensions * MAX_NUMBER_PER_DIMENSION, max_number)


def _summarize_statistics(points: PointAccessor) -> SampleSummary:
    check_argument(len(points) > 0, "cannot be empty list", EmptyBatchError)
    dimensions = points.dimension_hint()
    statistics = compute_statistics(dimensions, points, LOWER_FRACTION, UPPER_FRACTION, same_length=True)
    return SampleSummary.from_statistics(statistics)


def _attach_typical(summary: SampleSummary, centers: Sequence[Center], max_allowed: int) -> SampleSummary:
    check_argument(
        len(centers) <= max_allowed,
        f"clusterer returned {len(centers)} centers, at most {max_allowed} allowed",
        ClusteringContractError,
    )
    ordered = sort_by_weight(centers)
    center_sum = float(sum(center.weight for center in ordered))
    check_argument(
        center_sum > 0.0 or not ordered,
        "clusterer returned centers whose weights are all zero",
        ClusteringContractError,
    )

    summary_points: List[np.ndarray] = []
    relative_weight: List[float] = []
    for center in ordered:
        summary_points.append(center.representative)
        relative_weight.append(center.weight / center_sum)

    summary.add_typical(summary_points, relative_weight)
    logger.debug(f"Attached {len(summary_points)} typical points")
    return summary


def summarize(
    points: Sequence[WeightedPoint],
    distance: DistanceFn,
    max_number: int,
    parallel_enabled: bool = False,
    clusterer: Optional[Clusterer] = None,
) -> SampleSummary:
    """
    Summarize owned ``(vector, weight)`` points.

    Args:
        points: Nonempty batch; every point must have the dimension of the first
        distance: Symmetric non-negative distance used for clustering only
        max_number: Maximum number of typical points; 0 skips clustering
        parallel_enabled: Hint forwarded to the clusterer
        clusterer: Clustering collaborator (defaults to FeatureClusterer)

    Returns:
        SampleSummary with statistics and, if requested, typical points

    Example:
        >>> summary = summarize(points, lambda a, b: float(np.linalg.norm(a - b)), max_number=3)
        >>> summary.relative_weight.sum()
    """
    accessor = OwnedPoints(points)
    summary = _summarize_statistics(accessor)
    if max_number == 0:
        return summary

    max_allowed = max_clusters_for(summary.dimensions, max_number)
    logger.debug(f"Requesting at most {max_allowed} clusters for {len(accessor)} points")
    clusterer = clusterer or FeatureClusterer()
    centers = clusterer.cluster(accessor, distance, max_allowed, parallel_enabled)
    return _attach_typical(summary, centers, max_allowed)


def multi_summarize_ref(
    points: Sequence[WeightedPoint],
    distance: DistanceFn,
    representatives_per_cluster: int,
    shrinkage: float,
    max_number: int,
    parallel_enabled: bool = False,
    clusterer: Optional[Clusterer] = None,
) -> SampleSummary:
    """
    Summarize ``(slice, weight)`` points with a multi-representative clusterer.

    ``representatives_per_cluster`` and ``shrinkage`` are passed through to
    the clusterer; only the first representative of each center is kept.
    """
    accessor = ReferencedPoints(points)
    summary = _summarize_statistics(accessor)
    if max_number == 0:
        return summary

    max_allowed = max_clusters_for(summary.dimensions, max_number)
    logger.debug(f"Requesting at most {max_allowed} multi-representative clusters for {len(accessor)} points")
    clusterer = clusterer or FeatureClusterer()
    centers = clusterer.multi_cluster(
        accessor,
        distance,
        representatives_per_cluster,
        shrinkage,
        max_allowed,
        parallel_enabled,
    )
    return _attach_typical(summary, centers, max_allowed)
