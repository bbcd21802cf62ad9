"""
Configuration Management

Loads and manages pipeline configuration from YAML files and environment variables.
"""

import copy
import os
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv

from .utils.file_utils import load_config as load_yaml_config
from .utils.logging_utils import get_logger

logger = get_logger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_CONFIG: Dict[str, Any] = {
    'data': {
        'path': 'FuelConsumption.csv'
    },
    'output': {
        'plots_dir': 'plots'
    },
    'split': {
        'train_fraction': 0.8,
        'random_seed': 123,
        'stratify': True,
        'n_bins': 4
    },
    'scaling': {
        'fit_on': 'full',
        'ddof': 1
    },
    'boxcox': {
        'lambda_min': -2.0,
        'lambda_max': 2.0,
        'lambda_step': 0.1,
        'keep_threshold': 0.1,
        'log_threshold': 0.001,
        'show_progress': False
    },
    'visualization': {
        'dpi': 100,
        'histogram_bins': 30
    },
    'logging': {
        'level': 'INFO',
        'file': {
            'enabled': False,
            'path': 'logs/pipeline.log'
        }
    }
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into ``base`` recursively, returning ``base``."""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


class Config:
    """
    Pipeline configuration manager.

    Loads configuration from:
    1. Built-in defaults
    2. YAML file (config/pipeline_config.yaml)
    3. Environment variables (.env)

    Example:
        >>> config = Config()
        >>> print(config.get('split.random_seed'))
        123
    """

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to YAML config file (optional)
        """
        # Load .env file if it exists
        env_path = PROJECT_ROOT / '.env'
        if env_path.exists():
            load_dotenv(env_path)
            logger.info(f"Loaded environment variables from: {env_path}")

        if config_file is None:
            config_file = PROJECT_ROOT / 'config' / 'pipeline_config.yaml'

        self.config = copy.deepcopy(DEFAULT_CONFIG)
        if Path(config_file).exists():
            _deep_merge(self.config, load_yaml_config(config_file))
            logger.info(f"Loaded config from: {config_file}")
        else:
            logger.warning(f"Config file not found: {config_file} - using defaults")

        self._apply_env_overrides()

    def _apply_env_overrides(self):
        """Apply environment variable overrides to config."""
        if os.getenv('FUEL_DATA_PATH'):
            self.set('data.path', os.getenv('FUEL_DATA_PATH'))

        if os.getenv('PLOTS_DIR'):
            self.set('output.plots_dir', os.getenv('PLOTS_DIR'))

        if os.getenv('RANDOM_SEED'):
            self.set('split.random_seed', int(os.getenv('RANDOM_SEED')))

        if os.getenv('SCALE_ON'):
            self.set('scaling.fit_on', os.getenv('SCALE_ON'))

        if os.getenv('LOG_LEVEL'):
            self.set('logging.level', os.getenv('LOG_LEVEL'))

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Config key (e.g., 'split.random_seed')
            default: Default value if key not found

        Returns:
            Configuration value

        Example:
            >>> config.get('output.plots_dir')
            'plots'
            >>> config.get('nonexistent.key', 'default')
            'default'
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """
        Set a configuration value using dot notation.

        Args:
            key: Config key (e.g., 'data.path')
            value: Value to set
        """
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def get_stage_config(self, stage: str) -> Dict[str, Any]:
        """
        Get configuration for a specific section.

        Args:
            stage: Section name ('split', 'scaling', 'boxcox', 'visualization', ...)

        Returns:
            Section configuration dictionary
        """
        return self.config.get(stage, {})

    def to_dict(self) -> Dict[str, Any]:
        """Get the full configuration as a dictionary."""
        return copy.deepcopy(self.config)
