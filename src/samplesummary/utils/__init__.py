"""
Utility modules for samplesummary.

This module provides:
- Logging utilities
- Argument validation and error types
- Policy constants and OmegaConf configuration helpers
"""


from .logging import get_logger, setup_logger, log_config
from .validation import (
    check_argument,
    SummarizationError,
    EmptyBatchError,
    InvalidFractionError,
    ZeroDimensionError,
    NegativeWeightError,
    InvalidTotalWeightError,
    NonFiniteCoordinateError,
    DimensionMismatchError,
    SummaryStateError,
    ClusteringContractError,
)
from .config_utils import (
    MAX_NUMBER_PER_DIMENSION,
    LOWER_FRACTION,
    UPPER_FRACTION,
    DEFAULT_PERCENTILE,
    get_config_value,
    save_config,
)

__all__ = [
    # Logging
    'get_logger',
    'setup_logger',
    'log_config',
    # Validation
    'check_argument',
    'SummarizationError',
    'EmptyBatchError',
    'InvalidFractionError',
    'ZeroDimensionError',
    'NegativeWeightError',
    'InvalidTotalWeightError',
    'NonFiniteCoordinateError',
    'DimensionMismatchError',
    'SummaryStateError',
    'ClusteringContractError',
    # Config
    'MAX_NUMBER_PER_DIMENSION',
    'LOWER_FRACTION',
    'UPPER_FRACTION',
    'DEFAULT_PERCENTILE',
    'get_config_value',
    'save_config',
]
