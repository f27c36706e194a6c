"""
Target Engineering Module

This module turns indicator-enriched bars into supervised rows whose label is
the close of the immediately following bar of the same symbol.

Leakage prevention is structural: features come from bar i, the label from
bar i+1, and the shift never crosses a symbol boundary.
"""

from typing import Iterable, List, Optional, Union

import pandas as pd

from src.data_utils.feature_engineering import (
    DERIVED_FEATURE_COLUMNS,
    add_derived_price_features,
    check_finite_features,
)
from src.data_utils.schemas import (
    BAR_COLUMNS,
    INDICATOR_COLUMNS,
    LABEL_COLUMN,
    META_COLUMNS,
    EnrichedBar,
    SupervisedFrame,
    bars_to_frame,
)
from src.feature_engineering.config import SupervisedFrameConfig
from src.utils.core.exceptions import InsufficientDataError, InvariantViolationError
from src.utils.logger import get_logger

logger = get_logger(__name__)

EnrichedInput = Union[pd.DataFrame, Iterable[EnrichedBar]]


class SupervisedFrameBuilder:
    """
    Builds the ordered (features, next-bar close) row sequence

    Rows are grouped by symbol and ascending by feature timestamp within each
    symbol; the split planner relies on this order.
    """

    def __init__(self, config: Optional[SupervisedFrameConfig] = None):
        self.config = config or SupervisedFrameConfig()

    @property
    def feature_columns(self) -> List[str]:
        columns = list(INDICATOR_COLUMNS)
        if self.config.INCLUDE_DERIVED_FEATURES:
            columns += DERIVED_FEATURE_COLUMNS
        return columns

    def build(self, enriched: EnrichedInput, min_rows: Optional[int] = None) -> SupervisedFrame:
        """
        Build the supervised frame from enriched bars (any order)

        Args:
            enriched: EnrichedBar list or enriched DataFrame
            min_rows: Override for the configured minimum row count

        Returns:
            SupervisedFrame with one row per bar that has full indicator
            history and a following bar

        Raises:
            InsufficientDataError: If fewer than `min_rows` rows are produced
            InvariantViolationError: On duplicate timestamps or a broken
                ordering/leakage guarantee
        """
        required_rows = self.config.MIN_ROWS if min_rows is None else min_rows
        frame = self._to_frame(enriched)

        logger.info(f"🎯 Building supervised rows from {len(frame)} enriched bars")

        rows = self._label_next_bar(frame) if not frame.empty else frame.iloc[0:0].copy()
        if not rows.empty and self.config.INCLUDE_DERIVED_FEATURES:
            rows = add_derived_price_features(rows)

        feature_columns = self.feature_columns
        output_columns = META_COLUMNS + feature_columns + [LABEL_COLUMN]
        for column in output_columns:
            if column not in rows.columns:
                rows[column] = pd.Series(dtype=float)
        rows = rows[output_columns].reset_index(drop=True)

        self._check_guarantees(rows, feature_columns)

        if len(rows) < required_rows:
            logger.warning(
                f"⚠ Insufficient supervised rows: {len(rows)} produced, {required_rows} required"
            )
            raise InsufficientDataError(required=required_rows, available=len(rows))

        logger.info(
            f"✅ Built {len(rows)} supervised rows for {rows['symbol'].nunique()} symbols "
            f"({len(feature_columns)} features)"
        )
        return SupervisedFrame(rows, feature_columns)

    @staticmethod
    def _to_frame(enriched: EnrichedInput) -> pd.DataFrame:
        frame = enriched.copy() if isinstance(enriched, pd.DataFrame) else bars_to_frame(enriched)
        if frame.empty:
            return pd.DataFrame(columns=BAR_COLUMNS + INDICATOR_COLUMNS)

        missing = [col for col in BAR_COLUMNS + INDICATOR_COLUMNS if col not in frame.columns]
        if missing:
            raise ValueError(f"Missing required columns: {missing}")

        frame["timestamp"] = pd.to_datetime(frame["timestamp"])
        frame[INDICATOR_COLUMNS] = frame[INDICATOR_COLUMNS].astype(float)
        frame = frame.sort_values(["symbol", "timestamp"], kind="mergesort").reset_index(drop=True)

        duplicated = frame.duplicated(subset=["symbol", "timestamp"])
        if duplicated.any():
            offending = frame.loc[duplicated.idxmax()]
            raise InvariantViolationError(
                "Duplicate bar timestamp within symbol",
                symbol=offending["symbol"],
                timestamp=offending["timestamp"],
            )
        return frame

    @staticmethod
    def _label_next_bar(frame: pd.DataFrame) -> pd.DataFrame:
        grouped = frame.groupby("symbol", sort=False)
        labelled = frame.copy()
        labelled[LABEL_COLUMN] = grouped["close"].shift(-1)
        labelled["label_timestamp"] = grouped["timestamp"].shift(-1)

        has_history = labelled[INDICATOR_COLUMNS].notna().all(axis=1)
        has_label = labelled[LABEL_COLUMN].notna()
        kept = labelled[has_history & has_label].copy()

        for symbol, count in kept.groupby("symbol").size().items():
            logger.debug(f"{symbol}: {count} supervised rows")
        return kept

    @staticmethod
    def _check_guarantees(rows: pd.DataFrame, feature_columns: List[str]) -> None:
        if rows.empty:
            return

        leaked = rows["label_timestamp"] <= rows["timestamp"]
        if leaked.any():
            offending = rows.loc[leaked.idxmax()]
            raise InvariantViolationError(
                "Label bar does not follow feature bar",
                symbol=offending["symbol"],
                timestamp=offending["timestamp"],
            )

        ordered = rows.sort_values(["symbol", "timestamp"], kind="mergesort").index
        if not ordered.equals(rows.index):
            raise InvariantViolationError("Supervised rows are not ordered by (symbol, timestamp)")

        finite = check_finite_features(rows, feature_columns)
        if not finite.all():
            offending = rows.loc[(~finite).idxmax()]
            raise InvariantViolationError(
                "Non-finite feature value",
                symbol=offending["symbol"],
                timestamp=offending["timestamp"],
            )
