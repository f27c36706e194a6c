"""
Regression Metrics for Forecast Evaluation

This module scores (predicted, actual) label pairs with RMSE, MAE and R²,
and aggregates per-fold scores for walk-forward evaluation.
"""

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error

from src.utils.logger import get_logger

logger = get_logger(__name__)

ArrayLike = Union[pd.Series, np.ndarray, Sequence[float]]


@dataclass(frozen=True)
class RegressionMetrics:
    """
    Error metrics over one fold's test rows

    r2 is None when the actual labels are constant (SS_tot == 0).
    """

    rmse: float
    mae: float
    r2: Optional[float]
    n_samples: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def __str__(self) -> str:
        r2 = "undefined" if self.r2 is None else f"{self.r2:.4f}"
        return f"RMSE={self.rmse:.4f}, MAE={self.mae:.4f}, R²={r2} (n={self.n_samples})"


def r2_score_or_none(y_true: np.ndarray, y_pred: np.ndarray) -> Optional[float]:
    """
    Coefficient of determination 1 - SS_res / SS_tot

    SS_tot is taken against the mean of `y_true` itself. Returns None instead
    of NaN/Infinity when SS_tot is zero.
    """
    ss_tot = float(np.sum((y_true - y_true.mean()) ** 2))
    if ss_tot == 0:
        return None
    ss_res = float(np.sum((y_true - y_pred) ** 2))
    return 1.0 - ss_res / ss_tot


def compute_regression_metrics(y_true: ArrayLike, y_pred: ArrayLike) -> RegressionMetrics:
    """
    Compute RMSE, MAE and R² for a set of predictions

    Args:
        y_true: Actual labels
        y_pred: Predicted labels

    Returns:
        RegressionMetrics

    Raises:
        ValueError: On empty input, length mismatch or non-finite values
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    if len(y_true) != len(y_pred):
        raise ValueError(f"Array length mismatch: y_true={len(y_true)}, y_pred={len(y_pred)}")
    if len(y_true) == 0:
        raise ValueError("Cannot compute metrics on empty arrays")
    if not np.isfinite(y_pred).all():
        raise ValueError("Predictions contain NaN or infinite values")
    if not np.isfinite(y_true).all():
        raise ValueError("Actual labels contain NaN or infinite values")

    metrics = RegressionMetrics(
        rmse=math.sqrt(mean_squared_error(y_true, y_pred)),
        mae=float(mean_absolute_error(y_true, y_pred)),
        r2=r2_score_or_none(y_true, y_pred),
        n_samples=len(y_true),
    )
    logger.debug(f"Computed metrics: {metrics}")
    return metrics


def average_metrics(metrics_list: Sequence[RegressionMetrics]) -> Optional[RegressionMetrics]:
    """
    Arithmetic mean of per-fold metrics

    R² is averaged over the folds where it is defined, and is None when it is
    undefined in every fold. n_samples is the total across folds.

    Returns:
        Averaged RegressionMetrics, or None for an empty list
    """
    if not metrics_list:
        return None

    defined_r2 = [m.r2 for m in metrics_list if m.r2 is not None]
    return RegressionMetrics(
        rmse=float(np.mean([m.rmse for m in metrics_list])),
        mae=float(np.mean([m.mae for m in metrics_list])),
        r2=float(np.mean(defined_r2)) if defined_r2 else None,
        n_samples=int(sum(m.n_samples for m in metrics_list)),
    )
