"""End-to-end forecast evaluation.

Runs raw bars through enrichment, supervised row construction, the holdout
split and walk-forward folds, and returns everything a reporting or charting
collaborator needs. Recoverable conditions (too few rows, degenerate split,
failing folds) become warnings on the report; invariant violations propagate.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

import pandas as pd

from src.data_utils.schemas import Bar, EnrichedBar, bars_to_frame
from src.data_utils.split_planner import SplitPlanner
from src.data_utils.target_engineering import SupervisedFrameBuilder
from src.feature_engineering.config import EngineConfig
from src.feature_engineering.technical_indicators.feature_enricher import (
    FeatureEnricher,
    frame_to_enriched_bars,
)
from src.models.evaluation.evaluation_runner import (
    EvaluationRunner,
    FoldResult,
    ModelFactory,
    WalkForwardReport,
    summarize_residuals,
)
from src.utils.core.exceptions import DegenerateSplitError, InsufficientDataError
from src.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_COMPLETED = "completed"
STATUS_SKIPPED = "skipped_insufficient_data"


@dataclass
class ForecastEvaluationReport:
    status: str
    enriched: List[EnrichedBar]
    n_rows: int = 0
    holdout: Optional[FoldResult] = None
    walk_forward: Optional[WalkForwardReport] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return self.status == STATUS_COMPLETED


def _log_feature_importance(result: FoldResult, top_n: int = 10) -> None:
    get_importance = getattr(result.model, "get_feature_importance", None)
    importance = get_importance() if get_importance is not None else None
    if importance is None or importance.empty:
        return
    logger.info("Feature Importance:")
    for row in importance.head(top_n).itertuples(index=False):
        logger.info(f"   {row.feature}: {row.importance:.4f}")


def run_forecast_evaluation(
    bars: Union[Iterable[Bar], pd.DataFrame],
    model_factory: ModelFactory,
    config: Optional[EngineConfig] = None,
    min_rows: Optional[int] = None,
) -> ForecastEvaluationReport:
    """
    Evaluate a next-bar close estimator on a set of daily bars

    Args:
        bars: Bars for any number of symbols, in any order
        model_factory: Zero-argument callable returning a fresh estimator
        config: Engine configuration (defaults when omitted)
        min_rows: Override for the minimum supervised row count

    Returns:
        ForecastEvaluationReport; status is "skipped_insufficient_data" when
        too few supervised rows exist to train
    """
    config = config or EngineConfig()
    raw = bars if isinstance(bars, pd.DataFrame) else bars_to_frame(bars)

    logger.info("=" * 80)
    logger.info(f"📊 [START] Forecast evaluation on {len(raw)} bars")
    logger.info("=" * 80)

    enriched_frame = FeatureEnricher(config.indicators).enrich_frame(raw)
    report = ForecastEvaluationReport(
        status=STATUS_COMPLETED, enriched=frame_to_enriched_bars(enriched_frame)
    )

    try:
        frame = SupervisedFrameBuilder(config.supervised).build(enriched_frame, min_rows=min_rows)
    except InsufficientDataError as e:
        report.status = STATUS_SKIPPED
        report.n_rows = e.available
        report.warnings.append(str(e))
        logger.warning(f"⚠ Training skipped: {e}")
        return report

    report.n_rows = len(frame)
    planner = SplitPlanner(config.splits)
    runner = EvaluationRunner()

    try:
        report.holdout = runner.evaluate_holdout(planner.holdout(frame), model_factory)
    except DegenerateSplitError as e:
        report.warnings.append(str(e))
        logger.warning(f"⚠ Holdout evaluation skipped: {e}")

    if report.holdout is not None:
        summarize_residuals(report.holdout.predictions)
        _log_feature_importance(report.holdout)

    report.walk_forward = runner.evaluate_walk_forward(planner.walk_forward(frame), model_factory)
    if report.walk_forward.skipped:
        report.warnings.append(report.walk_forward.reason)
    for failure in report.walk_forward.failures:
        report.warnings.append(f"Fold {failure.fold_id} failed: {failure.error_type}: {failure.message}")

    logger.info("=" * 80)
    logger.info("✅ FORECAST EVALUATION COMPLETED")
    logger.info("=" * 80)
    logger.info(f"📏 Supervised rows: {report.n_rows}")
    if report.holdout is not None:
        logger.info(f"🎯 Holdout: {report.holdout.metrics}")
    if report.walk_forward.average is not None:
        logger.info(f"🎯 Walk-forward average: {report.walk_forward.average}")
    logger.info("=" * 80)
    return report
