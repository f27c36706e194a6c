"""
Technical Indicators Package

This package provides the per-symbol indicator calculations attached to
every daily bar before supervised rows are built.

Indicator Categories:
- Trend: simple moving averages (short and long window)
- Momentum: simplified RSI, day-over-day price change

Usage:
    from src.feature_engineering.technical_indicators import FeatureEnricher

    enriched = FeatureEnricher().enrich(bars)
"""

from src.feature_engineering.technical_indicators.feature_enricher import (
    FeatureEnricher,
    frame_to_enriched_bars,
    to_frame,
)
from src.feature_engineering.technical_indicators.momentum_indicators import (
    calculate_previous_day_change,
    calculate_price_change,
    calculate_simple_rsi,
    price_change_percent,
    relative_strength_index,
)
from src.feature_engineering.technical_indicators.trend_indicators import (
    calculate_sma,
    moving_average,
)

__all__ = [
    # Enrichment
    'FeatureEnricher',
    'frame_to_enriched_bars',
    'to_frame',

    # Trend indicators
    'moving_average',
    'calculate_sma',

    # Momentum indicators
    'relative_strength_index',
    'calculate_simple_rsi',
    'price_change_percent',
    'calculate_price_change',
    'calculate_previous_day_change',
]
