"""
Evaluator - Stage 4

Scores a fitted model on the held-out partition.
"""

import numpy as np
import pandas as pd
from dataclasses import dataclass
from scipy.special import boxcox
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score
from typing import Any, Dict

from ..constants import TARGET_COLUMN
from ..exceptions import ValidationError
from ..stage3.models import FittedModel
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class EvaluationResult:
    """
    Held-out performance of one model.

    ``r_squared`` is the R-squared of the training fit; ``test_r_squared``
    is computed on the held-out rows.
    """

    predictions: pd.Series
    actual: pd.Series
    r_squared: float
    rmse: float
    mae: float
    test_r_squared: float
    n_scored: int
    n_dropped: int

    def metrics(self) -> Dict[str, Any]:
        return {
            'r_squared': self.r_squared,
            'rmse': self.rmse,
            'mae': self.mae,
            'test_r_squared': self.test_r_squared,
            'n_scored': self.n_scored,
            'n_dropped': self.n_dropped
        }


class Evaluator:
    """
    Computes R-squared, RMSE and MAE for a model on test rows.

    Example:
        >>> result = Evaluator().evaluate(model, test_df)
        >>> print(f"RMSE: {result.rmse:.3f}")
    """

    def __init__(self, target: str = TARGET_COLUMN):
        self.target = target

    def evaluate(self, model: FittedModel, test_df: pd.DataFrame) -> EvaluationResult:
        """
        Predict the test rows and score the predictions.

        Rows the model cannot score (missing values, categories unseen in
        training) are dropped with a warning.

        Args:
            model: Fitted model
            test_df: Test partition

        Returns:
            EvaluationResult

        Raises:
            ValidationError: If no test row can be scored
        """
        mask = model.scorable_mask(test_df) & test_df[self.target].notna()
        n_dropped = int((~mask).sum())

        if n_dropped:
            logger.warning(
                f"Dropping {n_dropped} test rows with missing values or categories unseen in training"
            )

        scored = test_df[mask]
        if len(scored) == 0:
            raise ValidationError("No test rows can be scored by the model")

        predictions = model.predict(scored)
        actual = self._response_values(model, scored[self.target])

        y_true = actual.to_numpy(dtype=float)
        y_pred = predictions.to_numpy(dtype=float)

        mse = mean_squared_error(y_true, y_pred)
        rmse = float(np.sqrt(mse))
        mae = float(mean_absolute_error(y_true, y_pred))
        test_r2 = float(r2_score(y_true, y_pred)) if len(y_true) >= 2 else float('nan')

        result = EvaluationResult(
            predictions=predictions,
            actual=actual,
            r_squared=model.rsquared,
            rmse=rmse,
            mae=mae,
            test_r_squared=test_r2,
            n_scored=len(scored),
            n_dropped=n_dropped
        )

        logger.info(
            f"Evaluated on {result.n_scored} test rows: R-squared (train)={result.r_squared:.4f}, "
            f"RMSE={result.rmse:.4f}, MAE={result.mae:.4f}, R-squared (test)={result.test_r_squared:.4f}"
        )

        return result

    @staticmethod
    def _response_values(model: FittedModel, y: pd.Series) -> pd.Series:
        """Target on the scale the model predicts."""
        if model.response == 'log':
            return np.log(y.astype(float))
        if model.response == 'boxcox':
            return pd.Series(boxcox(y.to_numpy(dtype=float), model.lam), index=y.index)
        return y.astype(float)
