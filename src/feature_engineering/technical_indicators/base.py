"""
Shared helpers for technical indicator calculations

Indicators are computed over a single symbol's chronologically ordered close
series. An indicator that lacks enough trailing history is *undefined*: NaN
inside pandas objects and None at the model boundary, never zero.
"""

import math
from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

from src.utils.core.exceptions import InvariantViolationError

CloseSeries = Union[Sequence[float], np.ndarray, pd.Series]


def validate_window(window: int) -> int:
    """Ensure the window is a positive integer"""
    if isinstance(window, bool) or not isinstance(window, (int, np.integer)) or window < 1:
        raise ValueError(f"Window must be a positive integer, got {window!r}")
    return int(window)


def as_close_array(closes: CloseSeries) -> np.ndarray:
    """Return closes as a float array (positional, chronological)"""
    if isinstance(closes, pd.Series):
        return closes.to_numpy(dtype=float)
    return np.asarray(closes, dtype=float)


def validate_index(closes: np.ndarray, index: int) -> int:
    if not 0 <= index < len(closes):
        raise IndexError(f"Position {index} out of range for series of length {len(closes)}")
    return int(index)


def validate_closes(close: pd.Series, symbol: Optional[str] = None) -> None:
    """
    Check the positive-price invariant before computing indicators

    Raises:
        InvariantViolationError: If any close is missing, zero or negative
    """
    invalid = close.isna() | (close <= 0)
    if invalid.any():
        position = invalid.to_numpy().nonzero()[0][0]
        raise InvariantViolationError(
            f"Close prices must be positive, got {close.iloc[position]!r} at position {position}",
            symbol=symbol,
            timestamp=close.index[position] if isinstance(close.index, pd.DatetimeIndex) else None,
        )


def validate_window_closes(values: np.ndarray, start: int, stop: int) -> None:
    """
    Check the positive-price invariant for positions [start, stop)

    Raises:
        InvariantViolationError: If any close in the window is missing, zero or negative
    """
    window = values[start:stop]
    invalid = ~np.isfinite(window) | (window <= 0)
    if invalid.any():
        position = start + int(invalid.nonzero()[0][0])
        raise InvariantViolationError(
            f"Close prices must be positive, got {float(values[position])!r} at position {position}"
        )


def to_optional(value) -> Optional[float]:
    """Map NaN/None to None and anything else to float"""
    if value is None:
        return None
    value = float(value)
    return None if math.isnan(value) else value
