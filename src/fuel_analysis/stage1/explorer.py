"""
Explorer - Stage 1

Produces a factual overview of the loaded dataset:
- Structure (shape and column types)
- Per-column descriptive statistics
- Missing-value counts
- Duplicate-row count

Purely observational: results are logged and returned, the input is not modified.
"""

import pandas as pd
from typing import Dict, Any, Optional
from tqdm import tqdm

from ..utils.logging_utils import get_logger
from ..utils.stats_utils import (
    infer_column_type,
    calculate_basic_stats,
    count_missing,
    count_duplicate_rows
)

logger = get_logger(__name__)


class Explorer:
    """
    Stage 1: Explorer

    Summarizes a dataset the way ``str()``, ``summary()``, ``colSums(is.na())``
    and ``duplicated()`` would in an interactive session.

    Example:
        >>> explorer = Explorer()
        >>> summary = explorer.explore(df)
        >>> print(summary['row_count'], summary['duplicate_rows'])
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the Explorer.

        Args:
            config: Configuration dict (top_k_values, show_progress)
        """
        self.config = {
            'top_k_values': 10,
            'show_progress': False
        }

        if config:
            self.config.update(config)

    def explore(self, df: pd.DataFrame) -> Dict[str, Any]:
        """
        Generate the exploration summary for a dataset.

        Args:
            df: Dataset to describe

        Returns:
            Summary dictionary with structure, statistics, missing and duplicate counts
        """
        summary = {
            'row_count': len(df),
            'column_count': len(df.columns),
            'dtypes': {col: str(dtype) for col, dtype in df.dtypes.items()},
            'columns': {},
            'missing_values': count_missing(df),
            'duplicate_rows': count_duplicate_rows(df)
        }

        for col_name in tqdm(df.columns, desc="Summarizing columns",
                             disable=not self.config['show_progress']):
            col_type = infer_column_type(df[col_name])
            summary['columns'][col_name] = {
                'type': col_type,
                **calculate_basic_stats(df[col_name], col_type, top_k=self.config['top_k_values'])
            }

        self._log_summary(summary)

        return summary

    def _log_summary(self, summary: Dict[str, Any]) -> None:
        """Write the summary to the log in readable blocks."""
        logger.info("Dataset Structure:")
        logger.info(f"  {summary['row_count']} rows x {summary['column_count']} columns")
        for col, dtype in summary['dtypes'].items():
            logger.info(f"  {col}: {dtype}")

        logger.info("Summary Statistics:")
        for col, stats in summary['columns'].items():
            if stats['type'] == 'numeric':
                logger.info(
                    f"  {col}: min={stats['min']:.3f} q25={stats['q25']:.3f} "
                    f"median={stats['median']:.3f} mean={stats['mean']:.3f} "
                    f"q75={stats['q75']:.3f} max={stats['max']:.3f} std={stats['std']:.3f}"
                )
            else:
                logger.info(
                    f"  {col}: {stats['cardinality']} levels, mode={stats['mode']} "
                    f"top={stats['top_values']}"
                )

        logger.info("Missing Values:")
        for col, n in summary['missing_values'].items():
            logger.info(f"  {col}: {n}")

        logger.info(f"Number of duplicate rows: {summary['duplicate_rows']}")
