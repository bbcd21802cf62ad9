"""
Fuel consumption CO2 analysis.

Loads a fuel consumption table, explores and plots it, fits an OLS model of
CO2 emissions, runs residual diagnostics and a Box-Cox transform search,
and reports held-out accuracy.
"""

from .exceptions import PipelineError, DataLoadError, ValidationError, PlotWriteError

__version__ = "0.1.0"

__all__ = [
    'PipelineError',
    'DataLoadError',
    'ValidationError',
    'PlotWriteError',
]
