"""
File I/O utilities for the fuel analysis pipeline.
Handles loading YAML configuration and CSV data, and preparing output directories.
"""

import yaml
import pandas as pd
from pathlib import Path
from typing import Any, Dict, Union
from .logging_utils import get_logger

logger = get_logger(__name__)


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Configuration dictionary (empty if the file has no content)

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is malformed

    Example:
        >>> config = load_config("config/pipeline_config.yaml")
        >>> print(config['split']['random_seed'])
        123
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.info(f"Loading config from: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    return config or {}


def load_csv(file_path: Union[str, Path], **kwargs) -> pd.DataFrame:
    """
    Load CSV file into pandas DataFrame.

    Args:
        file_path: Path to CSV file
        **kwargs: Additional arguments passed to pd.read_csv

    Returns:
        DataFrame containing CSV data

    Raises:
        FileNotFoundError: If the CSV file doesn't exist

    Example:
        >>> df = load_csv("FuelConsumption.csv")
        >>> print(f"Loaded {len(df)} rows")
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"CSV file not found: {file_path}")

    logger.info(f"Loading CSV: {file_path}")

    df = pd.read_csv(file_path, **kwargs)
    logger.info(f"Loaded {len(df)} rows")

    return df


def ensure_dir(directory: Union[str, Path]) -> Path:
    """Create a directory (and parents) if it does not exist yet."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    return directory
