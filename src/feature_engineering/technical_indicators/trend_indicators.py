"""
Trend Technical Indicators

Simple moving averages over a symbol's close series.
"""

from typing import Optional

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


def moving_average(closes: CloseSeries, index: int, window: int) -> Optional[float]:
    """
    Arithmetic mean of the closes at positions [index - window + 1, index]

    Args:
        closes: Chronologically ordered close prices of one symbol
        index: 0-based position of the current bar
        window: Number of closes to average

    Returns:
        The mean, or None when fewer than `window` closes are available

    Raises:
        InvariantViolationError: If a close in the window is not a positive number
    """
    window = validate_window(window)
    values = as_close_array(closes)
    index = validate_index(values, index)
    if index < window - 1:
        return None
    validate_window_closes(values, index - window + 1, index + 1)
    return float(values[index - window + 1 : index + 1].sum() / window)


def calculate_sma(close: pd.Series, window: int) -> pd.Series:
    """
    Calculate the simple moving average for every position of a close series

    Positions with fewer than `window` closes are NaN (no partial averages).
    """
    window = validate_window(window)
    validate_closes(close)
    sma = ta.trend.sma_indicator(close, window=window, fillna=False)
    return sma.rename(f"sma_{window}")
