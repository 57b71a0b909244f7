"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates that all required fields are present.
"""

import logging
import math
from pathlib import Path
from typing import Dict, Any, List

import yaml

logger = logging.getLogger(__name__)

VALID_AGGREGATION_MODES = ("mean", "median")


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")

    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    required_sections = ["global", "elo", "aggregation", "data"]
    for section in required_sections:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    if "data" in config:
        data = config["data"] or {}
        if "path" not in (data.get("candidates") or {}):
            issues.append("Missing data.candidates.path")
        if "path" not in (data.get("swipes") or {}):
            issues.append("Missing data.swipes.path")

    if "elo" in config:
        elo = config["elo"] or {}
        k_factor = elo.get("k_factor", 32)
        base_rating = elo.get("base_rating", 1200)
        if not _is_finite_number(k_factor) or k_factor <= 0:
            issues.append(f"elo.k_factor must be a positive number, got {k_factor}")
        if not _is_finite_number(base_rating):
            issues.append(f"elo.base_rating must be a finite number, got {base_rating}")

    if "aggregation" in config:
        mode = (config["aggregation"] or {}).get("mode", "mean")
        if mode not in VALID_AGGREGATION_MODES:
            issues.append(f"Unknown aggregation mode: {mode}")

    max_workers = get_config_value(config, "scoring.max_workers", 1)
    if not isinstance(max_workers, int) or max_workers < 1:
        issues.append(f"scoring.max_workers must be a positive integer, got {max_workers}")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "elo.k_factor")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)
