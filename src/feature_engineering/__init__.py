"""
Feature Engineering for the Forecast Evaluation Engine

This package turns raw daily bars into indicator-enriched bars.

Main Components:
- Technical Indicators: moving averages, simplified RSI, price change
- Configuration: indicator windows, supervised frame and split settings

Usage:
    from src.feature_engineering.technical_indicators import FeatureEnricher

    enricher = FeatureEnricher()
    enriched_bars = enricher.enrich(bars)
"""
