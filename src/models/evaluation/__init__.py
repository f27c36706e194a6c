"""
Evaluation utilities for forecast estimators.

This package exposes regression metrics and the holdout/walk-forward
evaluation runner.
"""

from src.models.evaluation.evaluation_runner import (
    EvaluationRunner,
    FoldFailure,
    FoldResult,
    PredictionRecord,
    WalkForwardReport,
    summarize_residuals,
)
from src.models.evaluation.metrics import (
    RegressionMetrics,
    average_metrics,
    compute_regression_metrics,
)

__all__ = [
    "EvaluationRunner",
    "FoldFailure",
    "FoldResult",
    "PredictionRecord",
    "WalkForwardReport",
    "summarize_residuals",
    "RegressionMetrics",
    "average_metrics",
    "compute_regression_metrics",
]
