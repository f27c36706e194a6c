"""
Data schemas for daily OHLCV bars and supervised training rows
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

BAR_COLUMNS = ["symbol", "timestamp", "open", "high", "low", "close", "volume"]
META_COLUMNS = ["symbol", "timestamp", "label_timestamp"]
LABEL_COLUMN = "label"

PRICE_CHANGE_COLUMN = "price_change_pct"
PREVIOUS_CHANGE_COLUMN = "previous_day_change"
MA_SHORT_COLUMN = "ma_short"
MA_LONG_COLUMN = "ma_long"
RSI_COLUMN = "rsi"
# Indicators that must all be defined before a bar becomes a training row
INDICATOR_COLUMNS = [MA_SHORT_COLUMN, MA_LONG_COLUMN, RSI_COLUMN]
ENRICHED_COLUMNS = [PRICE_CHANGE_COLUMN, PREVIOUS_CHANGE_COLUMN] + INDICATOR_COLUMNS


class Bar(BaseModel):
    """
    Validated OHLCV (Open, High, Low, Close, Volume) observation

    Bars are produced by the fetch collaborator and are immutable afterwards.
    """

    symbol: str = Field(..., min_length=1, description="Asset symbol")
    timestamp: datetime = Field(..., description="Bar date (day granularity)")
    open: float = Field(..., gt=0, description="Opening price")
    high: float = Field(..., gt=0, description="Highest price")
    low: float = Field(..., gt=0, description="Lowest price")
    close: float = Field(..., gt=0, description="Closing price")
    volume: float = Field(..., ge=0, description="Traded volume")

    model_config = ConfigDict(frozen=True)

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v):
        """Validate and normalise the symbol"""
        symbol = v.strip().upper()
        if not symbol:
            raise ValueError("Symbol cannot be empty")
        if not symbol.replace(".", "").replace("-", "").replace("/", "").isalnum():
            raise ValueError(f"Invalid symbol format: {symbol}")
        return symbol

    @field_validator("timestamp", mode="before")
    @classmethod
    def promote_date(cls, v):
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime(v.year, v.month, v.day)
        return v

    @model_validator(mode="after")
    def validate_price_range(self):
        if self.high < self.low:
            raise ValueError(f"High price ({self.high}) must be >= Low price ({self.low})")
        return self


class EnrichedBar(Bar):
    """
    Bar plus derived indicators

    Each indicator is None until enough trailing history exists for its window.
    """

    price_change_pct: Optional[float] = None
    previous_day_change: Optional[float] = None
    ma_short: Optional[float] = None
    ma_long: Optional[float] = None
    rsi: Optional[float] = None

    @property
    def has_indicators(self) -> bool:
        return all(getattr(self, name) is not None for name in INDICATOR_COLUMNS)


def bars_to_frame(bars) -> pd.DataFrame:
    """Convert a sequence of Bar (or EnrichedBar) models into a DataFrame"""
    records = [bar.model_dump() for bar in bars]
    if not records:
        return pd.DataFrame(columns=BAR_COLUMNS)
    df = pd.DataFrame.from_records(records)
    df["timestamp"] = pd.to_datetime(df["timestamp"])
    return df


def _optional(value) -> Optional[float]:
    if value is None:
        return None
    value = float(value)
    return None if math.isnan(value) else value


@dataclass(frozen=True)
class SupervisedRow:
    """One training/evaluation example: features of bar i, label = close of bar i+1"""

    symbol: str
    timestamp: pd.Timestamp
    label_timestamp: pd.Timestamp
    label: float
    features: Mapping[str, float] = field(default_factory=dict)


class SupervisedFrame:
    """
    Ordered sequence of supervised rows backed by a single DataFrame

    Rows are grouped by symbol and ascending by feature timestamp within a
    symbol. The frame is read-only; `slice` returns a new frame.
    """

    def __init__(self, data: pd.DataFrame, feature_columns: List[str]):
        missing = [c for c in META_COLUMNS + [LABEL_COLUMN] + list(feature_columns) if c not in data.columns]
        if missing:
            raise ValueError(f"Missing required columns: {missing}")
        self._data = data.reset_index(drop=True)
        self.feature_columns = list(feature_columns)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[SupervisedRow]:
        return iter(self.to_rows())

    @property
    def data(self) -> pd.DataFrame:
        return self._data.copy()

    @property
    def x(self) -> pd.DataFrame:
        return self._data[self.feature_columns].copy()

    @property
    def y(self) -> pd.Series:
        return self._data[LABEL_COLUMN].copy()

    @property
    def symbols(self) -> pd.Series:
        return self._data["symbol"].copy()

    @property
    def timestamps(self) -> pd.Series:
        return self._data["timestamp"].copy()

    @property
    def empty(self) -> bool:
        return self._data.empty

    def slice(self, start: int, stop: int) -> "SupervisedFrame":
        """Positional slice [start, stop) of the row sequence"""
        return SupervisedFrame(self._data.iloc[start:stop], self.feature_columns)

    def date_range(self) -> Optional[Tuple[pd.Timestamp, pd.Timestamp]]:
        if self._data.empty:
            return None
        return self._data["timestamp"].min(), self._data["timestamp"].max()

    def to_rows(self) -> List[SupervisedRow]:
        rows = []
        for record in self._data.to_dict("records"):
            features: Dict[str, float] = {
                name: _optional(record[name]) for name in self.feature_columns
            }
            rows.append(
                SupervisedRow(
                    symbol=record["symbol"],
                    timestamp=record["timestamp"],
                    label_timestamp=record["label_timestamp"],
                    label=float(record[LABEL_COLUMN]),
                    features=features,
                )
            )
        return rows

    def __repr__(self) -> str:
        return f"SupervisedFrame(rows={len(self)}, features={self.feature_columns})"
