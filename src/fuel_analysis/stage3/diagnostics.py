"""
Regression Diagnostics

Hypothesis tests on the residuals of a fitted model:
- Breusch-Pagan test for heteroscedasticity
- Durbin-Watson test for first-order autocorrelation
"""

import numpy as np
from dataclasses import dataclass, asdict
from scipy import stats
from statsmodels.stats.diagnostic import het_breuschpagan
from statsmodels.stats.stattools import durbin_watson
from typing import Any, Dict

from .models import FittedModel
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

ALTERNATIVES = ('greater', 'less', 'two-sided')


@dataclass(frozen=True)
class DiagnosticResults:
    """Test statistics and p-values for one fitted model."""

    bp_statistic: float
    bp_pvalue: float
    bp_df: int
    dw_statistic: float
    dw_pvalue: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def durbin_watson_pvalue(
    dw: float,
    exog: np.ndarray,
    alternative: str = 'greater'
) -> float:
    """
    P-value of the Durbin-Watson statistic from the normal approximation.

    Mean and variance of the statistic under the null are the exact moments
    for the given design matrix (the approximation R's ``lmtest::dwtest``
    falls back to). ``alternative='greater'`` tests for positive
    autocorrelation.

    Args:
        dw: Durbin-Watson statistic
        exog: Design matrix (n x k) including the intercept column
        alternative: 'greater', 'less' or 'two-sided'

    Returns:
        p-value, or NaN when the moments are undefined
    """
    if alternative not in ALTERNATIVES:
        raise ValueError(f"Unknown alternative: {alternative}")

    X = np.asarray(exog, dtype=float)
    n, k = X.shape

    if n < 3 or n <= k:
        logger.warning("Too few observations for the Durbin-Watson p-value")
        return float('nan')

    # A is the n x n first-difference quadratic form; AX and X'AX without building it
    D = np.diff(X, axis=0)
    AX = np.zeros_like(X)
    AX[:-1] -= D
    AX[1:] += D

    Q1 = np.linalg.inv(X.T @ X)
    XAXQ = (D.T @ D) @ Q1

    P = 2 * (n - 1) - np.trace(XAXQ)
    Q = 2 * (3 * n - 4) - 2 * np.trace((AX.T @ AX) @ Q1) + np.trace(XAXQ @ XAXQ)

    dmean = P / (n - k)
    dvar = 2.0 / ((n - k) * (n - k + 2)) * (Q - P * dmean)

    if not np.isfinite(dvar) or dvar <= 0:
        logger.warning("Durbin-Watson variance is not positive - p-value undefined")
        return float('nan')

    sd = np.sqrt(dvar)

    if alternative == 'greater':
        return float(stats.norm.cdf(dw, loc=dmean, scale=sd))
    if alternative == 'less':
        return float(stats.norm.sf(dw, loc=dmean, scale=sd))
    return float(2 * stats.norm.sf(abs(dw - dmean), scale=sd))


def run_diagnostics(model: FittedModel) -> DiagnosticResults:
    """
    Run the Breusch-Pagan and Durbin-Watson tests on a fitted model.

    The Breusch-Pagan statistic is the studentized (Koenker) form: n times
    the R-squared of the squared residuals regressed on the model's
    regressors, chi-squared with one degree of freedom per regressor.

    Args:
        model: Fitted model (not modified)

    Returns:
        DiagnosticResults
    """
    resid = np.asarray(model.resid, dtype=float)
    exog = np.asarray(model.exog, dtype=float)

    bp_stat, bp_pvalue, _, _ = het_breuschpagan(resid, exog, robust=True)
    bp_df = exog.shape[1] - 1

    dw_stat = float(durbin_watson(resid))
    dw_pvalue = durbin_watson_pvalue(dw_stat, exog, alternative='greater')

    results = DiagnosticResults(
        bp_statistic=float(bp_stat),
        bp_pvalue=float(bp_pvalue),
        bp_df=int(bp_df),
        dw_statistic=dw_stat,
        dw_pvalue=dw_pvalue
    )

    logger.info(
        f"Breusch-Pagan: BP={results.bp_statistic:.4f}, df={results.bp_df}, "
        f"p-value={results.bp_pvalue:.4g}"
    )
    logger.info(f"Durbin-Watson: DW={results.dw_statistic:.4f}, p-value={results.dw_pvalue:.4g}")

    return results
