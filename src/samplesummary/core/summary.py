"""Summary aggregate returned by the summarizer."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..utils.config_utils import DEFAULT_PERCENTILE, LOWER_FRACTION, UPPER_FRACTION
from ..utils.validation import (
    DimensionMismatchError,
    EmptyBatchError,
    InvalidFractionError,
    SummaryStateError,
    check_argument,
)
from .statistics import (
    OwnedPoints,
    ReferencedPoints,
    WeightedPoint,
    WeightedStatistics,
    compute_statistics,
)


def _frozen(values: Any) -> np.ndarray:
    array = np.array(values, dtype=np.float32)
    array.flags.writeable = False
    return array


class SampleSummary:
    """
    Statistics of a weighted batch plus optional typical points.

    A summary is built once from a batch (statistics only) and may be
    extended exactly once with clustering-derived typical points through
    :meth:`add_typical`. All vectors are read-only ``float32`` arrays.

    Attributes:
        total_weight: Sum of the input weights
        mean: Per-dimension weighted mean
        median: Per-dimension weighted median
        lower: Per-dimension lower weighted percentile
        upper: Per-dimension upper weighted percentile
        deviation: Per-dimension weighted standard deviation
        summary_points: Typical points, heaviest first
        relative_weight: Normalized weight of each typical point

    Example:
        >>> summary = SampleSummary.from_points(1, [([0.0], 1.0), ([10.0], 1.0)])
        >>> summary.mean, summary.median
        (array([5.], dtype=float32), array([0.], dtype=float32))
    """

    def __init__(
        self,
        total_weight: float,
        mean: Sequence[float],
        median: Sequence[float],
        lower: Sequence[float],
        upper: Sequence[float],
        deviation: Sequence[float],
    ):
        self.total_weight = float(total_weight)
        self.mean = _frozen(mean)
        self.median = _frozen(median)
        self.lower = _frozen(lower)
        self.upper = _frozen(upper)
        self.deviation = _frozen(deviation)

        dimensions = self.mean.shape[0]
        for name in ("median", "lower", "upper", "deviation"):
            check_argument(
                getattr(self, name).shape[0] == dimensions,
                f"{name} has to have {dimensions} entries",
                DimensionMismatchError,
            )

        self.summary_points: List[np.ndarray] = []
        self.relative_weight: np.ndarray = _frozen([])
        self._extended = False

    @classmethod
    def from_statistics(cls, statistics: WeightedStatistics) -> "SampleSummary":
        """Wrap the output of :func:`compute_statistics`."""
        return cls(
            total_weight=statistics.total_weight,
            mean=statistics.mean,
            median=statistics.median,
            lower=statistics.lower,
            upper=statistics.upper,
            deviation=statistics.deviation,
        )

    @classmethod
    def from_points(
        cls,
        dimensions: int,
        points: Sequence[WeightedPoint],
        lower_fraction: float = LOWER_FRACTION,
        upper_fraction: float = UPPER_FRACTION,
    ) -> "SampleSummary":
        """Summarize a batch of owned ``(vector, weight)`` points."""
        statistics = compute_statistics(dimensions, OwnedPoints(points), lower_fraction, upper_fraction)
        return cls.from_statistics(statistics)

    @classmethod
    def from_references(
        cls,
        dimensions: int,
        points: Sequence[WeightedPoint],
        lower_fraction: float = LOWER_FRACTION,
        upper_fraction: float = UPPER_FRACTION,
    ) -> "SampleSummary":
        """Summarize a batch of ``(slice, weight)`` points read in place."""
        statistics = compute_statistics(dimensions, ReferencedPoints(points), lower_fraction, upper_fraction)
        return cls.from_statistics(statistics)

    @classmethod
    def from_percentile(
        cls,
        points: Sequence[WeightedPoint],
        percentile: float = DEFAULT_PERCENTILE,
    ) -> "SampleSummary":
        """
        Summarize with a symmetric percentile envelope.

        The lower statistic sits at ``1 - percentile`` and the upper one at
        ``percentile`` of the cumulative weight.

        Args:
            points: Owned ``(vector, weight)`` points
            percentile: Upper fraction, strictly between 0.5 and 1

        Returns:
            SampleSummary without typical points
        """
        check_argument(len(points) > 0, "point list cannot be empty", EmptyBatchError)
        check_argument(percentile > 0.5, "percentile has to be more than 0.5", InvalidFractionError)
        check_argument(percentile < 1.0, "percentile has to be less than 1", InvalidFractionError)
        accessor = OwnedPoints(points)
        statistics = compute_statistics(
            accessor.dimension_hint(), accessor, 1.0 - percentile, percentile, same_length=True
        )
        return cls.from_statistics(statistics)

    @classmethod
    def from_point(cls, point: Sequence[float], weight: float = 1.0) -> "SampleSummary":
        """Summary of a single weighted point, which is also its only typical point."""
        summary = cls.from_points(len(point), [(point, weight)])
        summary.add_typical([summary.median], [1.0])
        return summary

    @property
    def dimensions(self) -> int:
        return int(self.mean.shape[0])

    def add_typical(
        self,
        summary_points: Sequence[Sequence[float]],
        relative_weight: Sequence[float],
    ) -> None:
        """
        Attach typical points and their relative weights as one pair.

        Args:
            summary_points: Representative vectors, each of length ``dimensions``
            relative_weight: One weight per representative

        Raises:
            DimensionMismatchError: If lengths or dimensions disagree
            SummaryStateError: If typical points were already attached
        """
        check_argument(not self._extended, "typical points can only be added once", SummaryStateError)
        check_argument(
            len(summary_points) == len(relative_weight),
            "incorrect lengths of fields",
            DimensionMismatchError,
        )
        points = [_frozen(point) for point in summary_points]
        for point in points:
            check_argument(
                point.shape == (self.dimensions,),
                f"incorrect length points, expected {self.dimensions}",
                DimensionMismatchError,
            )

        self.summary_points = points
        self.relative_weight = _frozen(relative_weight)
        self._extended = True

    def to_dict(self, precision: Optional[int] = None) -> Dict[str, Any]:
        """Return a JSON-serializable view of the summary."""

        def _list(values: np.ndarray) -> List[float]:
            items = [float(v) for v in values]
            if precision is not None:
                items = [round(v, precision) for v in items]
            return items

        return {
            "total_weight": self.total_weight,
            "dimensions": self.dimensions,
            "mean": _list(self.mean),
            "median": _list(self.median),
            "lower": _list(self.lower),
            "upper": _list(self.upper),
            "deviation": _list(self.deviation),
            "summary_points": [_list(point) for point in self.summary_points],
            "relative_weight": _list(self.relative_weight),
        }

    def __repr__(self) -> str:
        return (
            f"SampleSummary(total_weight={self.total_weight}, dimensions={self.dimensions}, "
            f"typical_points={len(self.summary_points)})"
        )
