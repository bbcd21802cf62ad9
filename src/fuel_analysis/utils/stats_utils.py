"""
Statistical utilities for the fuel analysis pipeline.
Provides column type inference, descriptive statistics and data quality counts.
"""

import pandas as pd
from typing import Dict, Any
from .logging_utils import get_logger

logger = get_logger(__name__)


def infer_column_type(series: pd.Series) -> str:
    """
    Infer the analysis type of a pandas Series.

    Args:
        series: Pandas Series to analyze

    Returns:
        One of: 'numeric', 'categorical'

    Example:
        >>> infer_column_type(pd.Series([2.0, 2.4, 3.5]))
        'numeric'
        >>> infer_column_type(pd.Series(['SUV - SMALL', 'COMPACT']))
        'categorical'
    """
    if pd.api.types.is_bool_dtype(series):
        return 'categorical'

    if pd.api.types.is_numeric_dtype(series):
        return 'numeric'

    return 'categorical'


def calculate_basic_stats(
    series: pd.Series,
    col_type: str,
    top_k: int = 10
) -> Dict[str, Any]:
    """
    Calculate basic statistics for a Series based on its type.

    Numeric columns get count, mean, std, min, quartiles and max (the
    figures R's ``summary()`` prints). Categorical columns get cardinality,
    mode and the most frequent values.

    Args:
        series: Pandas Series to analyze
        col_type: Column type ('numeric' or 'categorical')
        top_k: Number of most frequent values to keep for categoricals

    Returns:
        Dictionary of statistics

    Example:
        >>> s = pd.Series([10, 20, 30, 40, 50])
        >>> stats = calculate_basic_stats(s, 'numeric')
        >>> print(stats['mean'])
        30.0
    """
    stats = {
        'null_count': int(series.isna().sum()),
        'null_rate': float(series.isna().mean()) if len(series) else 0.0,
        'total_count': len(series)
    }

    non_null = series.dropna()

    if col_type == 'numeric':
        numeric_series = pd.to_numeric(non_null)
        stats.update({
            'count': int(numeric_series.count()),
            'mean': float(numeric_series.mean()),
            'std': float(numeric_series.std()),
            'min': float(numeric_series.min()),
            'q25': float(numeric_series.quantile(0.25)),
            'median': float(numeric_series.median()),
            'q75': float(numeric_series.quantile(0.75)),
            'max': float(numeric_series.max())
        })

    elif col_type == 'categorical':
        value_counts = non_null.astype(str).value_counts()
        stats.update({
            'count': int(value_counts.sum()),
            'cardinality': len(value_counts),
            'top_values': {str(k): int(v) for k, v in value_counts.head(top_k).items()},
            'mode': str(value_counts.index[0]) if len(value_counts) > 0 else None
        })

    else:
        raise ValueError(f"Unknown column type: {col_type}")

    return stats


def count_missing(df: pd.DataFrame) -> Dict[str, int]:
    """Missing-value count per column, in column order."""
    return {col: int(n) for col, n in df.isna().sum().items()}


def count_duplicate_rows(df: pd.DataFrame) -> int:
    """
    Count rows that exactly repeat an earlier row.

    Equal to the number of rows minus the number of distinct rows.

    Example:
        >>> count_duplicate_rows(pd.DataFrame({'a': [1, 1, 2]}))
        1
    """
    return int(df.duplicated(keep='first').sum())
