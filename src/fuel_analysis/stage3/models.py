"""
Model Fitting Module

Fits the ordinary least squares regression of CO2 emissions on vehicle
attributes. Categorical predictors are dummy coded with the first level
as reference; the response can be the raw target, its log, or a Box-Cox
power transform of it.
"""

import numpy as np
import pandas as pd
import patsy
import statsmodels.api as sm
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..constants import CATEGORICAL_COLUMNS, MODEL_PREDICTORS, TARGET_COLUMN
from ..exceptions import ValidationError
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

RESPONSES = ('identity', 'log', 'boxcox')


def build_formula(
    predictors: List[str],
    response: str = 'identity',
    lam: Optional[float] = None,
    target: str = TARGET_COLUMN
) -> str:
    """
    Build the patsy formula for a response transform.

    Example:
        >>> build_formula(['ENGINESIZE', 'FUELTYPE'], response='log')
        'np.log(CO2EMISSIONS) ~ ENGINESIZE + FUELTYPE'
    """
    if response == 'identity':
        lhs = target
    elif response == 'log':
        lhs = f"np.log({target})"
    elif response == 'boxcox':
        if lam is None or lam == 0:
            raise ValueError("Box-Cox response needs a non-zero lambda")
        lhs = f"I(({target} ** {lam!r} - 1) / {lam!r})"
    else:
        raise ValueError(f"Unknown response transform: {response}")

    return f"{lhs} ~ {' + '.join(predictors)}"


@dataclass(frozen=True)
class FittedModel:
    """
    A fitted OLS regression and what is needed to score new rows.

    Attributes:
        formula: patsy formula the model was fitted with
        response: 'identity', 'log' or 'boxcox'
        lam: Box-Cox lambda for the 'boxcox' response
        result: statsmodels regression results
        design_info: patsy design info of the right-hand side
        predictors: right-hand side columns
        levels: categorical levels seen in training, per column
        target: untransformed target values of the fitted rows
        row_index: labels of the rows used in the fit
    """

    formula: str
    response: str
    lam: Optional[float]
    result: sm.regression.linear_model.RegressionResultsWrapper
    design_info: patsy.DesignInfo
    predictors: List[str] = field(default_factory=list)
    levels: Dict[str, List[str]] = field(default_factory=dict)
    target: np.ndarray = field(default=None, repr=False)
    row_index: pd.Index = field(default=None, repr=False)

    @property
    def params(self) -> pd.Series:
        return self.result.params

    @property
    def bse(self) -> pd.Series:
        return self.result.bse

    @property
    def resid(self) -> pd.Series:
        return self.result.resid

    @property
    def fittedvalues(self) -> pd.Series:
        return self.result.fittedvalues

    @property
    def rsquared(self) -> float:
        return float(self.result.rsquared)

    @property
    def nobs(self) -> int:
        return int(self.result.nobs)

    @property
    def exog(self) -> np.ndarray:
        return self.result.model.exog

    def standardized_residuals(self) -> np.ndarray:
        """Internally studentized residuals (what R's ``plot.lm`` calls standardized)."""
        return np.asarray(self.result.get_influence().resid_studentized_internal)

    def scorable_mask(self, df: pd.DataFrame) -> pd.Series:
        """
        Rows that can be scored: no missing predictor and every categorical
        value was seen in training.
        """
        mask = df[self.predictors].notna().all(axis=1)
        for col, levels in self.levels.items():
            mask &= df[col].astype(str).isin(levels)

        return mask

    def predict(self, df: pd.DataFrame) -> pd.Series:
        """
        Predict the (possibly transformed) response for new rows.

        Raises:
            ValidationError: If a row has a missing predictor or an unseen category
        """
        mask = self.scorable_mask(df)
        if not mask.all():
            raise ValidationError(
                f"{int((~mask).sum())} rows have missing predictors or categories unseen in training"
            )

        frame = df.copy()
        for col, levels in self.levels.items():
            frame[col] = pd.Categorical(frame[col].astype(str), categories=levels)

        (exog,) = patsy.build_design_matrices([self.design_info], frame, return_type='dataframe')

        return pd.Series(np.asarray(self.result.predict(exog)), index=df.index, name='predicted')

    def coefficient_table(self) -> pd.DataFrame:
        """Coefficients with standard errors, t statistics and p-values."""
        return pd.DataFrame({
            'coefficient': self.result.params,
            'std_error': self.result.bse,
            't_value': self.result.tvalues,
            'p_value': self.result.pvalues
        })


class ModelFitter:
    """
    Fits the CO2 emissions regression.

    Example:
        >>> fitter = ModelFitter()
        >>> model = fitter.fit(train_df)
        >>> print(model.rsquared)
    """

    def __init__(
        self,
        predictors: Optional[List[str]] = None,
        target: str = TARGET_COLUMN
    ):
        """
        Initialize the Model Fitter.

        Args:
            predictors: Right-hand side columns, in formula order
            target: Response column
        """
        self.predictors = list(predictors or MODEL_PREDICTORS)
        self.target = target

    def fit(
        self,
        train_df: pd.DataFrame,
        response: str = 'identity',
        lam: Optional[float] = None
    ) -> FittedModel:
        """
        Fit OLS on the training rows.

        Args:
            train_df: Training partition
            response: 'identity', 'log' or 'boxcox'
            lam: Box-Cox lambda (only for response='boxcox')

        Returns:
            FittedModel

        Raises:
            ValidationError: If there are no rows, the response is not finite,
                or the design matrix is rank deficient
        """
        if response not in RESPONSES:
            raise ValueError(f"Unknown response transform: {response}")

        if len(train_df) == 0:
            raise ValidationError("Cannot fit a model on an empty training set")

        formula = build_formula(self.predictors, response=response, lam=lam, target=self.target)
        logger.info(f"Fitting OLS: {formula}")

        frame = train_df.copy()
        levels = {}
        for col in self.predictors:
            if col in CATEGORICAL_COLUMNS or isinstance(frame[col].dtype, pd.CategoricalDtype):
                # Levels absent from the training rows would give all-zero dummy columns
                values = frame[col].astype(object)
                values = values.where(values.isna(), values.astype(str))
                used = sorted(values.dropna().unique())
                frame[col] = pd.Categorical(values, categories=used)
                levels[col] = used

        with np.errstate(divide='ignore', invalid='ignore'):
            endog, exog = patsy.dmatrices(
                formula,
                frame,
                return_type='dataframe',
                eval_env=patsy.EvalEnvironment.capture()
            )

        if not np.isfinite(endog.to_numpy()).all():
            raise ValidationError(f"Response of '{formula}' is not finite for every training row")

        n_rows, n_cols = exog.shape
        rank = np.linalg.matrix_rank(exog.to_numpy())
        if rank < n_cols:
            raise ValidationError(
                f"Design matrix is rank deficient (rank {rank} < {n_cols} columns)"
            )
        if n_rows <= n_cols:
            raise ValidationError(
                f"Not enough training rows ({n_rows}) for {n_cols} coefficients"
            )

        result = sm.OLS(endog, exog).fit()

        logger.info(
            f"  n={int(result.nobs)}, coefficients={n_cols}, R-squared={result.rsquared:.4f}"
        )

        return FittedModel(
            formula=formula,
            response=response,
            lam=lam,
            result=result,
            design_info=exog.design_info,
            predictors=list(self.predictors),
            levels=levels,
            target=frame.loc[exog.index, self.target].to_numpy(dtype=float),
            row_index=exog.index
        )
