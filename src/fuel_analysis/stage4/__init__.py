"""
Stage 4: Outputs

Produces the pipeline's outputs:
- Exploratory and diagnostic plots
- Held-out evaluation metrics
- The final text report
"""

from .visualizer import Visualizer, correlation_matrix
from .evaluator import Evaluator, EvaluationResult
from .report import build_report

__all__ = ['Visualizer', 'correlation_matrix', 'Evaluator', 'EvaluationResult', 'build_report']
