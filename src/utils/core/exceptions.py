"""
Engine Error Taxonomy

Named conditions raised by the feature engineering and evaluation engine.
Recoverable conditions (insufficient data, degenerate splits) are handled by
the orchestration layer; invariant violations are fatal and carry the
offending symbol/timestamp.
"""

from typing import Any, Optional


class ForecastEngineError(Exception):
    """Base class for all engine errors"""


class InvariantViolationError(ForecastEngineError, ValueError):
    """Upstream data broke a contract (duplicate timestamps, non-positive prices)"""

    def __init__(self, message: str, symbol: Optional[str] = None, timestamp: Any = None):
        self.symbol = symbol
        self.timestamp = timestamp
        context = []
        if symbol is not None:
            context.append(f"symbol={symbol}")
        if timestamp is not None:
            context.append(f"timestamp={timestamp}")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class InsufficientDataError(ForecastEngineError):
    """Too few supervised rows to train or split meaningfully"""

    def __init__(self, required: int, available: int, message: Optional[str] = None):
        self.required = required
        self.available = available
        super().__init__(
            message or f"Insufficient data: need at least {required} rows, got {available}"
        )


class DegenerateSplitError(ForecastEngineError):
    """Split parameters produced an empty train or test partition"""

    def __init__(self, message: str, n_rows: int = 0, train_rows: int = 0, test_rows: int = 0):
        self.n_rows = n_rows
        self.train_rows = train_rows
        self.test_rows = test_rows
        super().__init__(
            f"{message} (rows={n_rows}, train={train_rows}, test={test_rows})"
        )
