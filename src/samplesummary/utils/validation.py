"""Argument checking and error types for sample summarization.

Every bad-input condition is a subclass of ``ValueError`` so callers that
already guard with ``except ValueError`` keep working.
"""


from typing import Type


class SummarizationError(ValueError):
    """Base class for all summarization input errors."""


class EmptyBatchError(SummarizationError):
    """The batch of weighted points is empty."""


class InvalidFractionError(SummarizationError):
    """A lower/upper fraction is on the wrong side of one half."""


class ZeroDimensionError(SummarizationError):
    """The requested number of dimensions is zero."""


class NegativeWeightError(SummarizationError):
    """A point carries a negative (or NaN) weight."""


class InvalidTotalWeightError(SummarizationError):
    """The total weight is zero or not finite."""


class NonFiniteCoordinateError(SummarizationError):
    """A coordinate is NaN or infinite."""


class DimensionMismatchError(SummarizationError):
    """A point or summary vector has the wrong number of coordinates."""


class SummaryStateError(SummarizationError):
    """A summary was extended more than once."""


class ClusteringContractError(SummarizationError):
    """The clustering collaborator returned more centers than allowed."""


def check_argument(
    condition: bool,
    message: str,
    error_cls: Type[ValueError] = SummarizationError,
) -> None:
    """
    Abort the current call with ``error_cls(message)`` if ``condition`` is false.

    Args:
        condition: Value that must hold
        message: Description used as the exception message
        error_cls: Exception type raised on failure

    Raises:
        error_cls: If condition is false

    Example:
        >>> check_argument(len(points) > 0, "cannot be empty list", EmptyBatchError)
    """
    if not condition:
        raise error_cls(message)
