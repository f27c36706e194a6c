import random

import numpy as np
import pandas as pd
import pytest

from src.data_utils.schemas import ENRICHED_COLUMNS, EnrichedBar
from src.feature_engineering.config import IndicatorConfig
from src.feature_engineering.technical_indicators.feature_enricher import FeatureEnricher, to_frame
from src.utils.core.exceptions import InvariantViolationError
from tests._fixtures import make_bar_frame, make_linear_bars, make_random_walk_bars


@pytest.mark.unit
def test_enrich_preserves_cardinality_and_sorts_by_symbol_then_time(two_symbol_bars):
    """
    Setup: two symbols' bars shuffled together

    Execution: FeatureEnricher.enrich

    Verification: same number of bars, grouped by symbol, ascending time
    """
    shuffled = list(two_symbol_bars)
    random.Random(7).shuffle(shuffled)

    enriched = FeatureEnricher().enrich(shuffled)

    assert len(enriched) == len(two_symbol_bars)
    assert all(isinstance(bar, EnrichedBar) for bar in enriched)
    keys = [(bar.symbol, bar.timestamp) for bar in enriched]
    assert keys == sorted(keys)


@pytest.mark.unit
def test_indicators_never_cross_symbol_boundaries():
    btc = make_random_walk_bars(n=40, symbol="BTC", seed=1)
    eth = make_random_walk_bars(n=40, symbol="ETH", seed=2, start_price=2000.0)
    enricher = FeatureEnricher()

    together = enricher.enrich(btc + eth)
    alone = enricher.enrich(eth)

    eth_together = [bar for bar in together if bar.symbol == "ETH"]
    assert [bar.model_dump() for bar in eth_together] == [bar.model_dump() for bar in alone]


@pytest.mark.unit
def test_undefined_indicators_until_enough_history():
    enriched = FeatureEnricher().enrich(make_linear_bars(n=30))

    assert all(bar.ma_short is None for bar in enriched[:4])
    assert all(bar.ma_short is not None for bar in enriched[4:])
    assert all(bar.ma_long is None for bar in enriched[:19])
    assert enriched[19].ma_long == pytest.approx(np.mean([100.0 + i for i in range(20)]))
    assert all(bar.rsi is None for bar in enriched[:14])
    assert enriched[14].rsi == 100.0
    assert enriched[0].price_change_pct is None
    assert enriched[1].price_change_pct == pytest.approx(1.0)
    assert enriched[1].previous_day_change is None
    assert enriched[2].previous_day_change == pytest.approx(1.0)

    assert not enriched[18].has_indicators
    assert enriched[19].has_indicators


@pytest.mark.unit
def test_custom_windows_from_config():
    config = IndicatorConfig(MA_SHORT_WINDOW=2, MA_LONG_WINDOW=3, RSI_WINDOW=2)

    enriched = FeatureEnricher(config).enrich(make_linear_bars(n=6))

    assert enriched[1].ma_short == pytest.approx(100.5)
    assert enriched[2].ma_long == pytest.approx(101.0)
    assert enriched[1].rsi is None
    assert enriched[2].rsi == 100.0


@pytest.mark.unit
def test_duplicate_timestamp_is_an_invariant_violation():
    bars = make_linear_bars(n=10, symbol="SOL")
    bars.append(bars[3])

    with pytest.raises(InvariantViolationError) as excinfo:
        FeatureEnricher().enrich(bars)

    assert excinfo.value.symbol == "SOL"
    assert excinfo.value.timestamp == pd.Timestamp(bars[3].timestamp)


@pytest.mark.unit
def test_non_positive_close_names_symbol_and_timestamp():
    frame = make_bar_frame(make_linear_bars(n=10, symbol="ADA"))
    frame.loc[5, "close"] = 0.0

    with pytest.raises(InvariantViolationError) as excinfo:
        FeatureEnricher().enrich_frame(frame)

    assert excinfo.value.symbol == "ADA"
    assert excinfo.value.timestamp == frame.loc[5, "timestamp"]


@pytest.mark.unit
def test_enrich_frame_missing_columns_and_empty_input():
    with pytest.raises(ValueError, match="Missing required columns"):
        FeatureEnricher().enrich_frame(pd.DataFrame({"symbol": ["BTC"], "close": [1.0]}))

    empty = FeatureEnricher().enrich_frame(make_bar_frame(make_linear_bars(n=3)).iloc[0:0])
    assert empty.empty
    assert set(ENRICHED_COLUMNS).issubset(empty.columns)
    assert FeatureEnricher().enrich([]) == []


@pytest.mark.unit
def test_to_frame_maps_undefined_to_nan():
    enriched = FeatureEnricher().enrich(make_linear_bars(n=25))

    frame = to_frame(enriched)

    assert len(frame) == 25
    assert frame["ma_long"].iloc[:19].isna().all()
    assert frame["ma_long"].iloc[19] == pytest.approx(enriched[19].ma_long)
