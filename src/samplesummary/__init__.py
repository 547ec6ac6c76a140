"""
samplesummary - Robust summaries of weighted point batches.

This package computes the total weight, mean, weighted median, lower/upper
weighted percentiles and standard deviation of a batch of weighted vectors,
plus an optional set of typical points obtained by clustering.

Modules:
    core: Statistics engine, SampleSummary aggregate, clustering and summarizer
    utils: Logging, validation errors, policy constants and config helpers

Example:
    >>> import numpy as np
    >>> from samplesummary import summarize
    >>>
    >>> points = [(np.array([0.0, 1.0]), 1.0), (np.array([2.0, 3.0]), 2.0)]
    >>> summary = summarize(points, lambda a, b: float(np.linalg.norm(a - b)), max_number=0)
    >>> summary.mean
"""


__version__ = '0.1.0'

from .core import (
    SampleSummary,
    FeatureClusterer,
    ClusteringConfig,
    Center,
    summarize,
    multi_summarize_ref,
)

__all__ = [
    '__version__',
    'SampleSummary',
    'FeatureClusterer',
    'ClusteringConfig',
    'Center',
    'summarize',
    'multi_summarize_ref',
]
