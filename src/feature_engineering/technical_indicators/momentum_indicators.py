"""
Momentum Technical Indicators

This module implements the simplified (non-smoothed) Relative Strength Index
and day-over-day price change percentages.
"""

from typing import Optional

import numpy as np
import pandas as pd

try:
    import ta
except ImportError:
    raise ImportError("ta is required. Install with: pip install ta")

from src.feature_engineering.technical_indicators.base import (
    CloseSeries,
    as_close_array,
    validate_closes,
    validate_index,
    validate_window,
    validate_window_closes,
)
from src.utils.core.exceptions import InvariantViolationError

RSI_MAX = 100.0


def _rsi_from_averages(avg_gain, avg_loss):
    """RSI = 100 - 100 / (1 + gain/loss); 100 when the average loss is zero"""
    with np.errstate(divide="ignore", invalid="ignore"):
        rsi = RSI_MAX - RSI_MAX / (1.0 + avg_gain / avg_loss)
    return np.where(avg_loss == 0, RSI_MAX, rsi)


def relative_strength_index(closes: CloseSeries, index: int, window: int) -> Optional[float]:
    """
    Relative Strength Index at `index` using the `window` deltas ending there

    Gains and loss magnitudes are summed and divided by `window` (zero deltas
    included), without Wilder's exponential smoothing.

    Returns:
        RSI in [0, 100], or None when index < window (w deltas need w + 1 closes)

    Raises:
        InvariantViolationError: If a close in the window is not a positive number
    """
    window = validate_window(window)
    values = as_close_array(closes)
    index = validate_index(values, index)
    if index < window:
        return None

    validate_window_closes(values, index - window, index + 1)
    deltas = np.diff(values[index - window : index + 1])
    avg_gain = deltas[deltas > 0].sum() / window
    avg_loss = -deltas[deltas < 0].sum() / window
    return float(_rsi_from_averages(avg_gain, avg_loss))


def calculate_simple_rsi(close: pd.Series, window: int) -> pd.Series:
    """
    Calculate the simplified RSI for every position of a close series

    `ta.momentum.rsi` applies Wilder smoothing, so the window sums are taken
    directly here. The first `window` positions are NaN.
    """
    window = validate_window(window)
    validate_closes(close)

    result = np.full(len(close), np.nan)
    if len(close) > window:
        deltas = np.diff(close.to_numpy(dtype=float))
        windows = np.lib.stride_tricks.sliding_window_view(deltas, window)
        avg_gain = np.where(windows > 0, windows, 0.0).sum(axis=1) / window
        avg_loss = np.where(windows < 0, -windows, 0.0).sum(axis=1) / window
        result[window:] = _rsi_from_averages(avg_gain, avg_loss)

    return pd.Series(result, index=close.index, name=f"rsi_{window}")


def price_change_percent(prev_close: float, cur_close: float) -> float:
    """
    Percentage change from the previous close to the current close

    Raises:
        InvariantViolationError: If the previous close is zero
    """
    if prev_close == 0:
        raise InvariantViolationError(
            f"Cannot compute price change from a zero previous close (current={cur_close})"
        )
    return (cur_close - prev_close) / prev_close * 100


def calculate_price_change(close: pd.Series) -> pd.Series:
    """Day-over-day change in percent; NaN for the first bar"""
    validate_closes(close)
    change = ta.momentum.roc(close, window=1, fillna=False)
    return change.rename("price_change_pct")


def calculate_previous_day_change(close: pd.Series) -> pd.Series:
    """The previous bar's day-over-day change; NaN for the first two bars"""
    return calculate_price_change(close).shift(1).rename("previous_day_change")
