"""Weighted statistics over a batch of weighted points.

Computes per-dimension mean, deviation and three weighted order statistics
(lower percentile, median, upper percentile) in one pass per dimension.
Coordinates are stored in single precision and the moments are accumulated
in double precision.

Two input shapes share the same routine through :class:`PointAccessor`:

- :class:`OwnedPoints` for owned vectors (lists, numpy arrays, torch tensors)
- :class:`ReferencedPoints` for borrowed slices (numpy views, memoryviews)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple
import logging

import numpy as np
import torch

from ..utils.validation import (
    DimensionMismatchError,
    EmptyBatchError,
    InvalidFractionError,
    InvalidTotalWeightError,
    NegativeWeightError,
    NonFiniteCoordinateError,
    ZeroDimensionError,
    check_argument,
)


logger = logging.getLogger(__name__)

WeightedPoint = Tuple[Any, float]


class PointAccessor(ABC):
    """Read-only view over a batch of ``(coordinates, weight)`` pairs.

    Subclasses only decide how the coordinate vector of a point is fetched.
    """

    def __init__(self, points: Sequence[WeightedPoint]):
        self._points = points

    def __len__(self) -> int:
        return len(self._points)

    def weights(self) -> np.ndarray:
        """Return the point weights in input order, narrowed to ``float32``."""
        return np.asarray([weight for _, weight in self._points], dtype=np.float32)

    @abstractmethod
    def coordinate_at(self, index: int) -> np.ndarray:
        """Return the coordinate vector of the point at ``index``."""

    def dimension_hint(self) -> int:
        """Number of coordinates of the first point."""
        return int(self.coordinate_at(0).shape[0])


class OwnedPoints(PointAccessor):
    """Accessor for points that own their coordinate vectors.

    Vectors may be lists, numpy arrays or torch tensors; each one is copied
    to a fresh ``float32`` array.
    """

    def coordinate_at(self, index: int) -> np.ndarray:
        vector = self._points[index][0]
        if isinstance(vector, torch.Tensor):
            vector = vector.detach().cpu().numpy()
        return np.array(vector, dtype=np.float32).reshape(-1)


class ReferencedPoints(PointAccessor):
    """Accessor for points that reference slices of a shared buffer.

    Slices that already hold ``float32`` data are read in place.
    """

    def coordinate_at(self, index: int) -> np.ndarray:
        return np.asarray(self._points[index][0], dtype=np.float32).reshape(-1)


@dataclass(frozen=True)
class WeightedStatistics:
    """Per-dimension statistics of one batch."""

    total_weight: float
    mean: np.ndarray
    median: np.ndarray
    lower: np.ndarray
    upper: np.ndarray
    deviation: np.ndarray


class QuantileCursor:
    """Weighted order-statistic picker over values sorted ascending.

    The cursor keeps its position and the weight accumulated before it, so
    successive calls to :meth:`pick` must use nondecreasing targets. It
    advances while the weight up to and including the current element stays
    below the target, and it never moves past the last element even when the
    target is not reached.
    """

    def __init__(self, values: np.ndarray, weights: np.ndarray):
        self.values = values
        self.weights = [float(w) for w in weights]
        self.index = 0
        self.running = 0.0
        self._last_target = float("-inf")

    def pick(self, target: float) -> float:
        check_argument(
            target >= self._last_target,
            "targets have to be nondecreasing",
            ValueError,
        )
        self._last_target = target

        last = len(self.weights) - 1
        while self.index < last and self.running + self.weights[self.index] < target:
            self.running += self.weights[self.index]
            self.index += 1
        return self.values[self.index]


def _validate_batch(
    dimensions: int,
    points: PointAccessor,
    lower_fraction: float,
    upper_fraction: float,
) -> Tuple[np.ndarray, float]:
    check_argument(len(points) > 0, "cannot be empty list", EmptyBatchError)
    check_argument(lower_fraction < 0.5, "lower fraction has to be less than half", InvalidFractionError)
    check_argument(upper_fraction > 0.5, "upper fraction has to be larger than half", InvalidFractionError)
    check_argument(dimensions > 0, "cannot have 0 dimensions", ZeroDimensionError)

    weights = points.weights()
    # NaN weights fail this comparison as well
    check_argument(
        bool(np.all(weights >= 0)),
        "point weights have to be non-negative",
        NegativeWeightError,
    )

    total_weight = float(np.sum(weights, dtype=np.float64))
    check_argument(np.isfinite(total_weight), "cannot have infinite weights", InvalidTotalWeightError)
    check_argument(total_weight > 0.0, "weights cannot be all zero", InvalidTotalWeightError)
    return weights, total_weight


def _gather_coordinates(dimensions: int, points: PointAccessor, same_length: bool) -> np.ndarray:
    coordinates = np.empty((len(points), dimensions), dtype=np.float32)
    for i in range(len(points)):
        vector = points.coordinate_at(i)
        if same_length:
            check_argument(
                vector.shape[0] == dimensions,
                f"points have to be of same length, point {i} has {vector.shape[0]} coordinates, expected {dimensions}",
                DimensionMismatchError,
            )
        check_argument(
            vector.shape[0] >= dimensions,
            f"point {i} has {vector.shape[0]} coordinates, expected {dimensions}",
            DimensionMismatchError,
        )
        row = vector[:dimensions]
        if not np.all(np.isfinite(row)):
            column = int(np.flatnonzero(~np.isfinite(row))[0])
            raise NonFiniteCoordinateError(
                f"cannot have NaN or infinite values, point {i} coordinate {column}"
            )
        coordinates[i] = row
    return coordinates


def compute_statistics(
    dimensions: int,
    points: PointAccessor,
    lower_fraction: float,
    upper_fraction: float,
    same_length: bool = False,
) -> WeightedStatistics:
    """
    Compute weighted mean, deviation and order statistics per dimension.

    Args:
        dimensions: Number of leading coordinates to summarize (D > 0)
        points: Accessor over the weighted batch
        lower_fraction: Cumulative weight fraction of the lower statistic (< 0.5)
        upper_fraction: Cumulative weight fraction of the upper statistic (> 0.5)
        same_length: Require every point to have exactly D coordinates; by
            default only the leading D coordinates of longer points are read

    Returns:
        WeightedStatistics with float32 vectors of length D

    Raises:
        EmptyBatchError, InvalidFractionError, ZeroDimensionError,
        NegativeWeightError, InvalidTotalWeightError, DimensionMismatchError,
        NonFiniteCoordinateError: On invalid input, checked in that order

    Note:
        Weights and coordinates are narrowed to float32 before validation, so
        a finite weight beyond the float32 range (e.g. 1e39) becomes infinite
        and is reported as InvalidTotalWeightError.
    """
    weights, total_weight = _validate_batch(dimensions, points, lower_fraction, upper_fraction)
    coordinates = _gather_coordinates(dimensions, points, same_length)

    wide_weights = weights.astype(np.float64)
    wide_values = coordinates.astype(np.float64)
    sum_values = wide_weights @ wide_values
    sum_values_sq = wide_weights @ (wide_values * wide_values)

    mean = sum_values / total_weight
    variance = sum_values_sq / total_weight - mean * mean
    # Rounding can leave a tiny negative variance for constant columns
    deviation = np.sqrt(np.maximum(variance, 0.0))

    lower_target = total_weight * lower_fraction
    median_target = total_weight * 0.5
    upper_target = total_weight * upper_fraction

    lower: List[float] = []
    median: List[float] = []
    upper: List[float] = []
    for j in range(dimensions):
        order = np.argsort(coordinates[:, j])
        cursor = QuantileCursor(coordinates[order, j], weights[order])
        lower.append(cursor.pick(lower_target))
        median.append(cursor.pick(median_target))
        upper.append(cursor.pick(upper_target))

    logger.debug(
        f"Computed statistics for {len(points)} points over {dimensions} dimensions "
        f"(total_weight={total_weight})"
    )

    return WeightedStatistics(
        total_weight=total_weight,
        mean=mean.astype(np.float32),
        median=np.asarray(median, dtype=np.float32),
        lower=np.asarray(lower, dtype=np.float32),
        upper=np.asarray(upper, dtype=np.float32),
        deviation=deviation.astype(np.float32),
    )
