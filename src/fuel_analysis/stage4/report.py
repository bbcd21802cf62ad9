"""
Results summary printed at the end of a run.
"""

from typing import List, Optional

from .evaluator import EvaluationResult
from ..stage3.diagnostics import DiagnosticResults
from ..stage3.transform import BoxCoxResult

CONCLUSIONS = [
    "1. Model Fit: The R-squared value indicates the proportion of variance explained",
    "2. Heteroscedasticity: Based on BP test results",
    "3. Autocorrelation: Based on DW test results",
]

RECOMMENDATIONS = [
    "1. Consider feature importance for future model iterations",
    "2. Examine non-linear relationships if present",
    "3. Consider interaction terms for improved model fit",
]


def _fmt(value: float) -> str:
    return f"{value:.7g}"


def build_report(
    evaluation: EvaluationResult,
    diagnostics: DiagnosticResults,
    boxcox: Optional[BoxCoxResult] = None
) -> List[str]:
    """
    Lines of the final model performance report.

    Args:
        evaluation: Held-out evaluation of the original model
        diagnostics: Test results for the original model
        boxcox: Box-Cox search result (optional)

    Returns:
        Report lines, blank lines separating sections
    """
    lines = [
        "Model Performance Metrics:",
        f"R-squared: {_fmt(evaluation.r_squared)}",
        f"RMSE: {_fmt(evaluation.rmse)}",
        f"MAE: {_fmt(evaluation.mae)}",
        f"Held-out R-squared: {_fmt(evaluation.test_r_squared)}",
        "",
        "Statistical Tests:",
        f"Breusch-Pagan test p-value: {_fmt(diagnostics.bp_pvalue)}",
        f"Durbin-Watson test p-value: {_fmt(diagnostics.dw_pvalue)}",
    ]

    if boxcox is not None:
        lines.append(f"Box-Cox lambda: {_fmt(boxcox.best_lambda)}")

    lines += ["", "Conclusions:"] + CONCLUSIONS
    lines += ["", "Recommendations:"] + RECOMMENDATIONS

    return lines
