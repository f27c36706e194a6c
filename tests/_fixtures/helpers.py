from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from src.data_utils.schemas import INDICATOR_COLUMNS, LABEL_COLUMN, Bar, SupervisedFrame


def make_bars(closes: Sequence[float], symbol: str = "BTC", start: str = "2024-01-01") -> List[Bar]:
    """Return daily bars for one symbol with the given closes (open = close, 1% range)."""
    timestamps = pd.date_range(start, periods=len(closes), freq="D")
    return [
        Bar(
            symbol=symbol,
            timestamp=ts.to_pydatetime(),
            open=float(close),
            high=float(close) * 1.01,
            low=float(close) * 0.99,
            close=float(close),
            volume=1000.0 + i,
        )
        for i, (ts, close) in enumerate(zip(timestamps, closes))
    ]


def make_linear_bars(n: int = 60, symbol: str = "BTC", start_price: float = 100.0, step: float = 1.0) -> List[Bar]:
    """Return n bars whose close increases by `step` every day."""
    return make_bars([start_price + step * i for i in range(n)], symbol=symbol)


def make_random_walk_bars(n: int = 150, symbol: str = "BTC", seed: int = 42, start_price: float = 100.0) -> List[Bar]:
    """Return n bars following a strictly positive geometric random walk."""
    rng = np.random.default_rng(seed)
    closes = start_price * np.exp(np.cumsum(rng.normal(0, 0.02, n)))
    return make_bars(closes, symbol=symbol)


def make_bar_frame(bars: Sequence[Bar]) -> pd.DataFrame:
    """Return the bars as a raw OHLCV DataFrame."""
    return pd.DataFrame([bar.model_dump() for bar in bars])


def make_supervised_frame(n: int, symbols: Optional[Sequence[str]] = None) -> SupervisedFrame:
    """Return an ordered SupervisedFrame with n rows per symbol and synthetic features."""
    symbols = list(symbols or ["BTC"])
    parts = []
    for offset, symbol in enumerate(symbols):
        timestamps = pd.date_range("2024-01-01", periods=n, freq="D")
        close = 100.0 + offset * 50 + np.arange(n, dtype=float)
        part = pd.DataFrame(
            {
                "symbol": symbol,
                "timestamp": timestamps,
                "label_timestamp": timestamps + pd.Timedelta(days=1),
                INDICATOR_COLUMNS[0]: close - 2.0,
                INDICATOR_COLUMNS[1]: close - 9.5,
                INDICATOR_COLUMNS[2]: np.full(n, 100.0),
                LABEL_COLUMN: close + 1.0,
            }
        )
        parts.append(part)
    return SupervisedFrame(pd.concat(parts, ignore_index=True), list(INDICATOR_COLUMNS))
