"""
Evaluation Runner

Fits an externally supplied estimator on each split, scores its predictions
on the test slice and aggregates walk-forward metrics. A failure inside one
walk-forward fold is isolated: it is logged, recorded, and excluded from the
average while the remaining folds still run.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np
import pandas as pd

from src.data_utils.split_planner import Fold, WalkForwardPlan
from src.models.base_model import BaseModel
from src.models.evaluation.metrics import RegressionMetrics, average_metrics, compute_regression_metrics
from src.utils.core.exceptions import DegenerateSplitError
from src.utils.logger import get_logger

logger = get_logger(__name__)

ModelFactory = Callable[[], BaseModel]


@dataclass(frozen=True)
class PredictionRecord:
    """One (predicted, actual) pair of a test row"""

    symbol: str
    timestamp: pd.Timestamp
    predicted: float
    actual: float

    @property
    def residual(self) -> float:
        return self.actual - self.predicted


@dataclass
class FoldResult:
    fold_id: int
    metrics: RegressionMetrics
    predictions: List[PredictionRecord]
    train_rows: int
    test_rows: int
    train_range: str
    test_range: str
    model: Optional[BaseModel] = None


@dataclass(frozen=True)
class FoldFailure:
    fold_id: int
    error_type: str
    message: str


@dataclass
class WalkForwardReport:
    """Per-fold results, isolated failures and the averaged metrics"""

    fold_results: List[FoldResult] = field(default_factory=list)
    failures: List[FoldFailure] = field(default_factory=list)
    average: Optional[RegressionMetrics] = None
    skipped: bool = False
    reason: Optional[str] = None

    @property
    def fold_metrics(self) -> List[RegressionMetrics]:
        return [result.metrics for result in self.fold_results]


class EvaluationRunner:
    """
    Runs holdout and walk-forward evaluation for an estimator factory

    Each fold gets a fresh estimator from `model_factory`, so no state leaks
    from one fold's training into another.
    """

    def evaluate_fold(self, fold: Fold, model_factory: ModelFactory) -> FoldResult:
        """
        Fit on the fold's train slice and score predictions on its test slice

        Raises:
            DegenerateSplitError: If either slice is empty (checked before fitting)
            ValueError: If the estimator returns the wrong number of predictions
        """
        if fold.train_rows == 0 or fold.test_rows == 0:
            raise DegenerateSplitError(
                f"Fold {fold.fold_id} has an empty partition",
                n_rows=fold.train_rows + fold.test_rows,
                train_rows=fold.train_rows,
                test_rows=fold.test_rows,
            )

        start_time = time.time()
        model = model_factory()
        model.fit(fold.train.x, fold.train.y)
        predictions = np.asarray(model.predict(fold.test.x), dtype=float).ravel()

        y_test = fold.test.y.to_numpy(dtype=float)
        if len(predictions) != len(y_test):
            raise ValueError(
                f"Estimator returned {len(predictions)} predictions for {len(y_test)} test rows"
            )

        metrics = compute_regression_metrics(y_test, predictions)
        records = [
            PredictionRecord(symbol=symbol, timestamp=timestamp, predicted=float(pred), actual=float(actual))
            for symbol, timestamp, pred, actual in zip(
                fold.test.symbols, fold.test.timestamps, predictions, y_test
            )
        ]

        logger.info(
            f"📊 Fold {fold.fold_id}: train={fold.train_rows} ({fold.train_period}), "
            f"test={fold.test_rows} ({fold.test_period}) -> {metrics} "
            f"in {time.time() - start_time:.2f}s"
        )
        return FoldResult(
            fold_id=fold.fold_id,
            metrics=metrics,
            predictions=records,
            train_rows=fold.train_rows,
            test_rows=fold.test_rows,
            train_range=fold.train_period,
            test_range=fold.test_period,
            model=model,
        )

    def evaluate_holdout(self, fold: Fold, model_factory: ModelFactory) -> FoldResult:
        """Evaluate the single holdout split; errors propagate to the caller"""
        result = self.evaluate_fold(fold, model_factory)
        logger.info(f"✅ Holdout evaluation: {result.metrics}")
        return result

    def evaluate_walk_forward(self, plan: WalkForwardPlan, model_factory: ModelFactory) -> WalkForwardReport:
        """
        Evaluate every fold of a walk-forward plan in order

        Returns:
            WalkForwardReport with per-fold results and their arithmetic mean;
            a skipped plan yields a skipped report
        """
        if plan.skipped:
            return WalkForwardReport(skipped=True, reason=plan.reason)

        report = WalkForwardReport()
        for fold in plan.folds:
            try:
                report.fold_results.append(self.evaluate_fold(fold, model_factory))
            except Exception as e:
                logger.warning(f"⚠ Fold {fold.fold_id} failed, excluded from average: {type(e).__name__}: {e}")
                report.failures.append(
                    FoldFailure(fold_id=fold.fold_id, error_type=type(e).__name__, message=str(e))
                )

        report.average = average_metrics(report.fold_metrics)
        if report.average is None:
            logger.warning("⚠ All walk-forward folds failed; no averaged metrics")
        else:
            logger.info(
                f"✅ Walk-forward average over {len(report.fold_results)}/{len(plan.folds)} folds: "
                f"{report.average}"
            )
        return report


def summarize_residuals(predictions: List[PredictionRecord], limit: int = 10) -> List[Tuple[float, float, float]]:
    """
    Log the first `limit` (actual, predicted, residual) triples

    Returns:
        The logged triples
    """
    triples = [
        (record.actual, record.predicted, record.residual)
        for record in predictions
        if np.isfinite(record.actual) and np.isfinite(record.predicted)
    ][:limit]

    if triples:
        logger.info("Residuals Analysis:")
        for actual, predicted, residual in triples:
            logger.info(f"   Actual: {actual:.2f}, Predicted: {predicted:.2f}, Residual: {residual:.2f}")
    return triples
