"""
Box-Cox Transform Search

Finds the power transform of the target that maximizes the profile
log-likelihood of the regression (MASS::boxcox), then decides whether the
model has to be refitted on a log or power-transformed response.
"""

import numpy as np
import pandas as pd
import statsmodels.api as sm
from dataclasses import dataclass
from scipy.special import boxcox
from tqdm import tqdm
from typing import Optional

from .models import FittedModel, ModelFitter
from ..exceptions import ValidationError
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

KEEP = 'keep'
LOG = 'log'
POWER = 'boxcox'


@dataclass(frozen=True)
class BoxCoxResult:
    """Profile log-likelihood over the lambda grid."""

    lambdas: np.ndarray
    log_likelihood: np.ndarray
    best_lambda: float

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({'lambda': self.lambdas, 'log_likelihood': self.log_likelihood})


def choose_transform(
    lam: float,
    keep_threshold: float = 0.1,
    log_threshold: float = 0.001
) -> str:
    """
    Decide what to do with a Box-Cox lambda.

    Returns:
        'keep' when lambda is within ``keep_threshold`` of 1, 'log' when it
        is within ``log_threshold`` of 0, 'boxcox' otherwise

    Example:
        >>> choose_transform(0.95)
        'keep'
        >>> choose_transform(0.0)
        'log'
        >>> choose_transform(0.5)
        'boxcox'
    """
    if abs(lam - 1) <= keep_threshold:
        return KEEP
    if abs(lam) < log_threshold:
        return LOG
    return POWER


class BoxCoxSearch:
    """
    Grid search for the Box-Cox lambda of a fitted model's response.

    Example:
        >>> search = BoxCoxSearch()
        >>> result = search.search(model)
        >>> print(result.best_lambda)
    """

    def __init__(
        self,
        lambda_min: float = -2.0,
        lambda_max: float = 2.0,
        lambda_step: float = 0.1,
        show_progress: bool = False
    ):
        if lambda_max <= lambda_min or lambda_step <= 0:
            raise ValidationError(
                f"Invalid lambda grid: [{lambda_min}, {lambda_max}] step {lambda_step}"
            )

        self.lambda_min = lambda_min
        self.lambda_max = lambda_max
        self.lambda_step = lambda_step
        self.show_progress = show_progress

    def grid(self) -> np.ndarray:
        """Candidate lambdas, endpoints included."""
        n_points = int(round((self.lambda_max - self.lambda_min) / self.lambda_step)) + 1
        return np.round(np.linspace(self.lambda_min, self.lambda_max, n_points), 10)

    def search(self, model: FittedModel) -> BoxCoxResult:
        """
        Evaluate the profile log-likelihood for every lambda on the grid.

        For each lambda the target is transformed, regressed on the model's
        design matrix, and scored as ``-n/2 * log(SSR) + (lambda - 1) * sum(log y)``.

        Args:
            model: Model fitted on the untransformed target

        Returns:
            BoxCoxResult

        Raises:
            ValidationError: If the target has non-positive values
        """
        y = np.asarray(model.target, dtype=float)

        if y.size == 0:
            raise ValidationError("Box-Cox search needs at least one observation")
        if not np.all(y > 0):
            raise ValidationError(
                f"Box-Cox needs a strictly positive target; found {int(np.sum(y <= 0))} "
                f"non-positive values"
            )

        exog = np.asarray(model.exog, dtype=float)
        n = y.size
        sum_log_y = float(np.sum(np.log(y)))

        lambdas = self.grid()
        log_likelihood = np.empty(len(lambdas))

        for i, lam in enumerate(tqdm(lambdas, desc="Box-Cox search", disable=not self.show_progress)):
            yt = boxcox(y, lam)
            ssr = sm.OLS(yt, exog).fit().ssr
            log_likelihood[i] = -n / 2 * np.log(ssr) + (lam - 1) * sum_log_y

        best_lambda = float(lambdas[int(np.nanargmax(log_likelihood))])

        logger.info(f"Box-Cox search: best lambda = {best_lambda:.2f}")

        return BoxCoxResult(
            lambdas=lambdas,
            log_likelihood=log_likelihood,
            best_lambda=best_lambda
        )


def transform_model(
    model: FittedModel,
    train_df: pd.DataFrame,
    lam: float,
    fitter: Optional[ModelFitter] = None,
    decision: Optional[str] = None,
    keep_threshold: float = 0.1,
    log_threshold: float = 0.001
) -> FittedModel:
    """
    Refit ``model`` on a transformed response when lambda calls for it.

    Args:
        model: Model fitted on the untransformed target
        train_df: Training partition the model was fitted on
        lam: Box-Cox lambda
        fitter: Fitter used for the refit (defaults to one with the model's predictors)
        decision: 'keep', 'log' or 'boxcox' as returned by ``choose_transform``;
            derived from ``lam`` and the thresholds when omitted
        keep_threshold: Distance from 1 within which no transform is applied
        log_threshold: Distance from 0 within which the log transform is used

    Returns:
        The original model object, or a new model with a log or power response
    """
    if decision is None:
        decision = choose_transform(lam, keep_threshold=keep_threshold, log_threshold=log_threshold)
    elif decision not in (KEEP, LOG, POWER):
        raise ValueError(f"Unknown transform decision: {decision}")

    if decision == KEEP:
        logger.info(f"Lambda {lam:.2f} is close to 1 - keeping the original model")
        return model

    fitter = fitter or ModelFitter(predictors=model.predictors)

    if decision == LOG:
        logger.info(f"Lambda {lam:.2f} is close to 0 - refitting with log(target)")
        return fitter.fit(train_df, response='log')

    logger.info(f"Refitting with Box-Cox power transform, lambda = {lam:.2f}")
    return fitter.fit(train_df, response='boxcox', lam=float(lam))
