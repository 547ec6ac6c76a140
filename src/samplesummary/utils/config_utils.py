"""Configuration constants and OmegaConf helpers.

The constants below encode the summarization policy and are shared by the
statistics engine and the summarizer. YAML configs for the command-line
script are read and saved through OmegaConf.
"""


from pathlib import Path
from typing import Any

from omegaconf import DictConfig, OmegaConf

from .logging import get_logger

logger = get_logger(__name__)


# Cluster cap per input dimension; the requested cap is min(D * 5, max_number).
MAX_NUMBER_PER_DIMENSION = 5

# Fractions used by summarize() and multi_summarize_ref().
LOWER_FRACTION = 0.1
UPPER_FRACTION = 0.9

# Percentile used by SampleSummary.from_percentile() when none is given.
DEFAULT_PERCENTILE = 0.9


def get_config_value(
    cfg: DictConfig,
    key: str,
    default: Any = None,
) -> Any:
    """
    Safely get config value with default fallback.

    Args:
        cfg: Configuration
        key: Dot-separated key path (e.g., "clustering.min_cluster_size")
        default: Default value if key not found

    Returns:
        Config value or default

    Example:
        >>> max_number = get_config_value(cfg, "summary.max_number", default=10)
    """
    try:
        value = cfg
        for part in key.split('.'):
            value = value[part]
        return value
    except (KeyError, AttributeError, TypeError):
        return default


def save_config(cfg: DictConfig, output_path: str) -> None:
    """
    Save configuration to YAML file.

    Args:
        cfg: Configuration to save
        output_path: Path to save config file
    """
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        OmegaConf.save(config=cfg, f=f, resolve=True)
    logger.info(f"Configuration saved to: {output_path}")
