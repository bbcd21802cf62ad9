"""
Utility modules for the fuel analysis pipeline.
Provides common functionality for logging, file I/O, and statistics.
"""

from .logging_utils import setup_logger, get_logger
from .file_utils import load_config, load_csv, ensure_dir
from .stats_utils import (
    infer_column_type,
    calculate_basic_stats,
    count_missing,
    count_duplicate_rows,
)

__all__ = [
    'setup_logger',
    'get_logger',
    'load_config',
    'load_csv',
    'ensure_dir',
    'infer_column_type',
    'calculate_basic_stats',
    'count_missing',
    'count_duplicate_rows',
]
