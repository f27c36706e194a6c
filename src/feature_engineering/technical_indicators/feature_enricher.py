"""
Feature Enricher for Technical Indicators

This module attaches the day-over-day change, short/long moving averages and
RSI to every bar. Indicators are computed per symbol against that symbol's
own close series only, so no window ever crosses a symbol boundary.
"""

import time
from typing import Iterable, List, Optional

import pandas as pd

from src.data_utils.schemas import (
    BAR_COLUMNS,
    ENRICHED_COLUMNS,
    MA_LONG_COLUMN,
    MA_SHORT_COLUMN,
    PREVIOUS_CHANGE_COLUMN,
    PRICE_CHANGE_COLUMN,
    RSI_COLUMN,
    Bar,
    EnrichedBar,
    bars_to_frame,
)
from src.feature_engineering.config import IndicatorConfig
from src.feature_engineering.technical_indicators.base import to_optional
from src.feature_engineering.technical_indicators.momentum_indicators import (
    calculate_previous_day_change,
    calculate_price_change,
    calculate_simple_rsi,
)
from src.feature_engineering.technical_indicators.trend_indicators import calculate_sma
from src.utils.core.exceptions import InvariantViolationError
from src.utils.logger import get_logger

logger = get_logger(__name__, utility="feature_engineering")


class FeatureEnricher:
    """
    Applies the indicator calculator per symbol and attaches results to each bar

    Insufficient history never raises: those positions simply carry undefined
    indicators. Contract breaches by the upstream data (duplicate timestamps,
    non-positive closes) raise InvariantViolationError.
    """

    def __init__(self, config: Optional[IndicatorConfig] = None):
        """
        Initialize the enricher

        Args:
            config: Indicator windows (defaults 5/20/14)
        """
        self.config = config or IndicatorConfig()
        logger.debug(
            f"Initialized FeatureEnricher (ma={self.config.MA_SHORT_WINDOW}/"
            f"{self.config.MA_LONG_WINDOW}, rsi={self.config.RSI_WINDOW})"
        )

    def enrich(self, bars: Iterable[Bar]) -> List[EnrichedBar]:
        """
        Enrich an unordered list of bars across any number of symbols

        Returns:
            EnrichedBar list sorted by (symbol, timestamp), same cardinality as input
        """
        enriched = self.enrich_frame(bars_to_frame(bars))
        return frame_to_enriched_bars(enriched)

    def enrich_frame(self, data: pd.DataFrame) -> pd.DataFrame:
        """
        Enrich an OHLCV DataFrame with one row per (symbol, timestamp)

        Args:
            data: DataFrame with columns symbol, timestamp, open, high, low, close, volume

        Returns:
            New DataFrame sorted by (symbol, timestamp) with indicator columns
            added; NaN marks an undefined indicator
        """
        missing_columns = [col for col in BAR_COLUMNS if col not in data.columns]
        if missing_columns:
            raise ValueError(f"Missing required columns: {missing_columns}")

        if data.empty:
            empty = data.copy()
            for column in ENRICHED_COLUMNS:
                empty[column] = pd.Series(dtype=float)
            return empty

        start_time = time.time()
        frame = data.copy()
        frame["timestamp"] = pd.to_datetime(frame["timestamp"])
        frame = frame.sort_values(["symbol", "timestamp"], kind="mergesort").reset_index(drop=True)

        self._check_unique_timestamps(frame)

        enriched_groups = [
            self._enrich_symbol(symbol, group) for symbol, group in frame.groupby("symbol", sort=True)
        ]
        result = pd.concat(enriched_groups, ignore_index=True)

        logger.info(
            f"Enrichment complete: {len(result)} bars across {result['symbol'].nunique()} symbols "
            f"in {time.time() - start_time:.3f}s"
        )
        return result

    def _enrich_symbol(self, symbol: str, group: pd.DataFrame) -> pd.DataFrame:
        close = group["close"].astype(float).reset_index(drop=True)
        self._check_positive_closes(symbol, group)

        enriched = group.reset_index(drop=True).copy()
        enriched[PRICE_CHANGE_COLUMN] = calculate_price_change(close).to_numpy()
        enriched[PREVIOUS_CHANGE_COLUMN] = calculate_previous_day_change(close).to_numpy()
        enriched[MA_SHORT_COLUMN] = calculate_sma(close, self.config.MA_SHORT_WINDOW).to_numpy()
        enriched[MA_LONG_COLUMN] = calculate_sma(close, self.config.MA_LONG_WINDOW).to_numpy()
        enriched[RSI_COLUMN] = calculate_simple_rsi(close, self.config.RSI_WINDOW).to_numpy()

        logger.debug(
            f"{symbol}: {len(enriched)} bars, "
            f"{int(enriched[[MA_SHORT_COLUMN, MA_LONG_COLUMN, RSI_COLUMN]].notna().all(axis=1).sum())} "
            "with full indicator history"
        )
        return enriched

    @staticmethod
    def _check_unique_timestamps(frame: pd.DataFrame) -> None:
        duplicated = frame.duplicated(subset=["symbol", "timestamp"], keep="first")
        if duplicated.any():
            first = frame.loc[duplicated.idxmax()]
            raise InvariantViolationError(
                "Duplicate bar timestamp within symbol",
                symbol=first["symbol"],
                timestamp=first["timestamp"],
            )

    @staticmethod
    def _check_positive_closes(symbol: str, group: pd.DataFrame) -> None:
        invalid = group["close"].isna() | (group["close"] <= 0)
        if invalid.any():
            offending = group.loc[invalid.idxmax()]
            raise InvariantViolationError(
                f"Close price must be positive, got {offending['close']!r}",
                symbol=symbol,
                timestamp=offending["timestamp"],
            )


def frame_to_enriched_bars(frame: pd.DataFrame) -> List[EnrichedBar]:
    """Convert an enriched DataFrame to EnrichedBar models (NaN -> None)"""
    bars = []
    for record in frame.to_dict("records"):
        payload = {column: record[column] for column in BAR_COLUMNS}
        payload["timestamp"] = pd.Timestamp(payload["timestamp"]).to_pydatetime()
        for column in ENRICHED_COLUMNS:
            payload[column] = to_optional(record.get(column))
        bars.append(EnrichedBar(**payload))
    return bars


def to_frame(enriched_bars: Iterable[EnrichedBar]) -> pd.DataFrame:
    """Convert EnrichedBar models back to a DataFrame (None -> NaN) for charting"""
    frame = bars_to_frame(enriched_bars)
    for column in ENRICHED_COLUMNS:
        if column not in frame.columns:
            frame[column] = pd.Series(dtype=float)
        frame[column] = frame[column].astype(float)
    return frame
