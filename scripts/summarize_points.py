#!/usr/bin/env python3
"""
Summarize a batch of weighted points stored on disk.

Loads the points (and optional weights), computes the weighted statistics and
typical points, and writes:
    - summary.json
    - config.yaml (resolved configuration)

Accepted inputs:
    - .npy file with an (N, D) array, plus optional .npy weights of shape (N,)
    - .pkl file with a list of (vector, weight) pairs

Usage:
    python scripts/summarize_points.py \
        points_file=./data/points.npy \
        weights_file=./data/weights.npy \
        summary.max_number=8 \
        summary.distance=cosine
"""


import json
import pickle
import sys
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import hydra
import numpy as np
from omegaconf import DictConfig, OmegaConf

# Add src to path for imports
src_path = Path(__file__).resolve().parent.parent / "src"
sys.path.insert(0, str(src_path))

from samplesummary.core.clustering import ClusteringConfig, FeatureClusterer
from samplesummary.core.summarizer import multi_summarize_ref, summarize
from samplesummary.utils.config_utils import get_config_value, save_config
from samplesummary.utils.logging import log_config, setup_logger


def _euclidean(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.linalg.norm(a - b))


def _manhattan(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.abs(a - b).sum())


def _cosine(a: np.ndarray, b: np.ndarray) -> float:
    norm = float(np.linalg.norm(a) * np.linalg.norm(b))
    if norm == 0.0:
        return 0.0
    return max(0.0, 1.0 - float(np.dot(a, b)) / norm)


DISTANCES: Dict[str, Callable[[np.ndarray, np.ndarray], float]] = {
    "euclidean": _euclidean,
    "manhattan": _manhattan,
    "cosine": _cosine,
}


def _resolve_output_dir(cfg: DictConfig) -> Path:
    """Resolve output directory from config or Hydra runtime directory."""
    if cfg.get("output_dir"):
        return Path(str(cfg.output_dir))
    runtime_dir = hydra.core.hydra_config.HydraConfig.get().runtime.output_dir
    return Path(str(runtime_dir))


def _build_clustering_config(cfg: DictConfig) -> ClusteringConfig:
    """Build typed clustering config from Hydra dict config."""
    return ClusteringConfig(
        min_cluster_size=int(get_config_value(cfg, "clustering.min_cluster_size", 5)),
        min_samples=int(get_config_value(cfg, "clustering.min_samples", 1)),
        cluster_selection_epsilon=float(get_config_value(cfg, "clustering.cluster_selection_epsilon", 0.0)),
        cluster_selection_method=str(get_config_value(cfg, "clustering.cluster_selection_method", "eom")),
        allow_single_cluster=bool(get_config_value(cfg, "clustering.allow_single_cluster", True)),
    )


def _load_points(cfg: DictConfig) -> List[Tuple[np.ndarray, float]]:
    """Load (vector, weight) pairs from .npy or .pkl inputs."""
    points_path = Path(str(cfg.points_file))
    if not points_path.is_file():
        raise FileNotFoundError(f"Points file not found: {points_path}")

    if points_path.suffix == ".pkl":
        with open(points_path, "rb") as f:
            pairs = pickle.load(f)
        return [(np.asarray(vector, dtype=np.float32), float(weight)) for vector, weight in pairs]

    matrix = np.load(points_path).astype(np.float32, copy=False)
    if matrix.ndim != 2:
        raise ValueError(f"Points array must be 2D, got shape {matrix.shape}")

    if cfg.get("weights_file"):
        weights_path = Path(str(cfg.weights_file))
        if not weights_path.is_file():
            raise FileNotFoundError(f"Weights file not found: {weights_path}")
        weights = np.load(weights_path).astype(np.float64, copy=False)
    else:
        weights = np.ones(matrix.shape[0], dtype=np.float64)

    if weights.shape != (matrix.shape[0],):
        raise ValueError(
            f"Length mismatch: points={matrix.shape[0]}, weights={weights.shape}"
        )

    # rows are views into the loaded matrix
    return [(matrix[i], float(weights[i])) for i in range(matrix.shape[0])]


@hydra.main(config_path="../configs", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    """Summarize the configured batch and persist the result."""
    output_dir = _resolve_output_dir(cfg)
    output_dir.mkdir(parents=True, exist_ok=True)

    logger = setup_logger(
        name="summarize_points",
        log_file=str(output_dir / "logs" / "summarize_points.log"),
        level=get_config_value(cfg, "log_level", "INFO"),
    )
    log_config(logger, OmegaConf.to_container(cfg, resolve=True))

    distance_name = str(get_config_value(cfg, "summary.distance", "euclidean"))
    if distance_name not in DISTANCES:
        raise ValueError(
            f"Unknown distance: {distance_name}. Available: {sorted(DISTANCES)}"
        )
    distance = DISTANCES[distance_name]

    points = _load_points(cfg)
    logger.info(f"Loaded {len(points)} points from {cfg.points_file}")

    clusterer = FeatureClusterer(_build_clustering_config(cfg))
    max_number = int(get_config_value(cfg, "summary.max_number", 10))
    parallel_enabled = bool(get_config_value(cfg, "summary.parallel_enabled", False))

    if get_config_value(cfg, "summary.multi_representative", False):
        summary = multi_summarize_ref(
            points,
            distance,
            representatives_per_cluster=int(get_config_value(cfg, "summary.representatives_per_cluster", 3)),
            shrinkage=float(get_config_value(cfg, "summary.shrinkage", 0.2)),
            max_number=max_number,
            parallel_enabled=parallel_enabled,
            clusterer=clusterer,
        )
    else:
        summary = summarize(
            points,
            distance,
            max_number=max_number,
            parallel_enabled=parallel_enabled,
            clusterer=clusterer,
        )

    logger.info(f"total_weight={summary.total_weight}")
    logger.info(f"typical points={len(summary.summary_points)}")

    summary_path = output_dir / "summary.json"
    with open(summary_path, "w") as f:
        precision = get_config_value(cfg, "summary.precision")
        json.dump(summary.to_dict(precision=precision), f, indent=2)
    save_config(cfg, str(output_dir / "config.yaml"))

    logger.info(f"Summary written to: {summary_path}")


if __name__ == "__main__":
    main()
