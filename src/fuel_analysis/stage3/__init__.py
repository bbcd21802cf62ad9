"""
Stage 3: Modelling

Fits the OLS regression, runs residual diagnostics and searches for a
Box-Cox transform of the target.
"""

from .models import ModelFitter, FittedModel, build_formula
from .diagnostics import DiagnosticResults, run_diagnostics
from .transform import BoxCoxSearch, BoxCoxResult, choose_transform, transform_model

__all__ = [
    'ModelFitter',
    'FittedModel',
    'build_formula',
    'DiagnosticResults',
    'run_diagnostics',
    'BoxCoxSearch',
    'BoxCoxResult',
    'choose_transform',
    'transform_model',
]
