"""Initialization for the `samplesummary.core` package.

Responsibilities:
- Compute weighted statistics (mean, deviation, order statistics) of a batch.
- Hold the results in a SampleSummary aggregate.
- Turn clustering output into normalized typical points.
"""

from .statistics import (
    PointAccessor,
    OwnedPoints,
    ReferencedPoints,
    QuantileCursor,
    WeightedStatistics,
    compute_statistics,
)
from .summary import SampleSummary
from .clustering import Center, Clusterer, ClusteringConfig, FeatureClusterer
from .summarizer import summarize, multi_summarize_ref, max_clusters_for

__all__ = [
    'PointAccessor',
    'OwnedPoints',
    'ReferencedPoints',
    'QuantileCursor',
    'WeightedStatistics',
    'compute_statistics',
    'SampleSummary',
    'Center',
    'Clusterer',
    'ClusteringConfig',
    'FeatureClusterer',
    'summarize',
    'multi_summarize_ref',
    'max_clusters_for',
]
