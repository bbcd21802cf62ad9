"""
Loader - Stage 1

Reads the fuel consumption CSV into a DataFrame and checks that the
expected columns are present and parse as their expected types.
"""

import pandas as pd
from pathlib import Path
from typing import Union

from ..constants import CATEGORICAL_COLUMNS, NUMERIC_COLUMNS, REQUIRED_COLUMNS
from ..exceptions import DataLoadError, ValidationError
from ..utils.file_utils import load_csv
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


def load_fuel_data(file_path: Union[str, Path]) -> pd.DataFrame:
    """
    Load the fuel consumption dataset.

    Numeric columns are cast to float and categorical columns to text.
    Columns outside the required schema are kept as pandas parsed them.

    Args:
        file_path: Path to the CSV file

    Returns:
        DataFrame with one row per vehicle

    Raises:
        DataLoadError: If the file is missing, unreadable, lacks a required
            column, or a numeric column holds non-numeric values
        ValidationError: If the file has a header but no data rows

    Example:
        >>> df = load_fuel_data("FuelConsumption.csv")
        >>> df['CO2EMISSIONS'].dtype
        dtype('float64')
    """
    file_path = Path(file_path)

    try:
        df = load_csv(file_path)
    except FileNotFoundError as e:
        raise DataLoadError(str(e)) from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as e:
        raise DataLoadError(f"Could not read {file_path}: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise DataLoadError(f"Missing required columns in {file_path.name}: {missing}")

    if len(df) == 0:
        raise ValidationError(f"Dataset {file_path.name} has no rows")

    df = df.copy()

    for col in NUMERIC_COLUMNS:
        parsed = pd.to_numeric(df[col], errors='coerce')
        bad = parsed.isna() & df[col].notna()
        if bad.any():
            examples = df.loc[bad, col].astype(str).unique()[:3].tolist()
            raise DataLoadError(
                f"Column '{col}' has {int(bad.sum())} non-numeric values (e.g. {examples})"
            )
        df[col] = parsed.astype(float)

    for col in CATEGORICAL_COLUMNS:
        df[col] = df[col].where(df[col].isna(), df[col].astype(str).str.strip())

    logger.info(f"Loaded dataset: {len(df)} rows, {len(df.columns)} columns")

    return df
