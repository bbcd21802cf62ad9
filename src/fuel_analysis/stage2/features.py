"""
Feature Transformer - Stage 2

Prepares the loaded dataset for modelling:
- Categorical columns become pandas categoricals (sorted levels, like R factors)
- Numeric predictors are z-score scaled
"""

import numpy as np
import pandas as pd
from typing import Dict, Any, List, Optional

from ..constants import CATEGORICAL_COLUMNS, SCALED_PREDICTORS
from ..exceptions import ValidationError
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


class FeatureTransformer:
    """
    Encodes categorical columns and standardizes numeric predictors.

    Scaling statistics are learned by ``fit`` and applied by ``transform``,
    so the caller decides which rows they come from.

    Example:
        >>> transformer = FeatureTransformer()
        >>> encoded = transformer.encode(df)
        >>> scaled = transformer.fit_transform(encoded)
    """

    def __init__(
        self,
        categorical_columns: Optional[List[str]] = None,
        numeric_columns: Optional[List[str]] = None,
        ddof: int = 1
    ):
        """
        Initialize the Feature Transformer.

        Args:
            categorical_columns: Columns to encode as categoricals
            numeric_columns: Columns to z-score scale
            ddof: Delta degrees of freedom for the standard deviation
                (1 matches R's ``scale()``)
        """
        self.categorical_columns = list(categorical_columns or CATEGORICAL_COLUMNS)
        self.numeric_columns = list(numeric_columns or SCALED_PREDICTORS)
        self.ddof = ddof

        self.means_: Dict[str, float] = {}
        self.stds_: Dict[str, float] = {}
        self.unscaled_: List[str] = []

    def encode(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Convert categorical columns to pandas categoricals.

        Args:
            df: Loaded dataset

        Returns:
            Encoded copy of the dataset
        """
        encoded = df.copy()

        for col in self.categorical_columns:
            values = encoded[col].astype(object)
            values = values.where(values.isna(), values.astype(str))
            levels = sorted(values.dropna().unique())
            encoded[col] = pd.Categorical(values, categories=levels)
            logger.debug(f"Encoded {col}: {len(levels)} levels")

        logger.info(f"Encoded {len(self.categorical_columns)} categorical columns")

        return encoded

    def fit(self, df: pd.DataFrame) -> "FeatureTransformer":
        """
        Learn mean and standard deviation of each numeric predictor.

        Args:
            df: Rows the statistics are computed from

        Returns:
            self
        """
        if len(df) == 0:
            raise ValidationError("Cannot fit scaling statistics on an empty dataset")

        self.means_ = {}
        self.stds_ = {}
        self.unscaled_ = []

        for col in self.numeric_columns:
            values = df[col].astype(float)
            mean = float(values.mean())
            std = float(values.std(ddof=self.ddof))

            self.means_[col] = mean
            self.stds_[col] = std

            # Zero-variance columns pass through unscaled
            if not np.isfinite(std) or std == 0.0:
                self.unscaled_.append(col)
                logger.warning(f"Column '{col}' has zero variance - left unscaled")

        return self

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Apply the learned z-score scaling.

        Args:
            df: Dataset to scale

        Returns:
            Scaled copy of the dataset
        """
        if not self.means_:
            raise ValidationError("FeatureTransformer.transform called before fit")

        scaled = df.copy()

        for col in self.numeric_columns:
            if col in self.unscaled_:
                continue
            scaled[col] = (scaled[col].astype(float) - self.means_[col]) / self.stds_[col]

        logger.info(
            f"Scaled {len(self.numeric_columns) - len(self.unscaled_)} numeric predictors"
        )

        return scaled

    def fit_transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Fit scaling statistics on ``df`` and scale it."""
        return self.fit(df).transform(df)

    def get_params(self) -> Dict[str, Any]:
        """Scaling statistics, for logging and reports."""
        return {
            'ddof': self.ddof,
            'means': dict(self.means_),
            'stds': dict(self.stds_),
            'unscaled': list(self.unscaled_)
        }
