"""
Feature Engineering Module

This module provides the price transforms added to each supervised row on top
of the indicator features. Every transform reads the *current* bar only; the
label bar's price never enters a feature.
"""

from typing import List

import numpy as np
import pandas as pd

from src.data_utils.schemas import MA_LONG_COLUMN
from src.utils.logger import get_logger

logger = get_logger(__name__)

LOG_PRICE_COLUMN = "log_price"
PRICE_RATIO_COLUMN = "price_ratio"
PRICE_SQUARED_COLUMN = "price_squared"
DERIVED_FEATURE_COLUMNS = [LOG_PRICE_COLUMN, PRICE_RATIO_COLUMN, PRICE_SQUARED_COLUMN]


def add_derived_price_features(features_df: pd.DataFrame, ma_column: str = MA_LONG_COLUMN) -> pd.DataFrame:
    """
    Add log-price, price/SMA ratio and squared-price features

    The SMA ratio converts an absolute moving average (SMA_20 = $150) into a
    relative position of the price (close/SMA_20 = 0.95).

    Args:
        features_df: DataFrame with a 'close' column and the long moving average
        ma_column: Moving average column used for the ratio

    Returns:
        DataFrame with additional derived features
    """
    missing = [col for col in ("close", ma_column) if col not in features_df.columns]
    if missing:
        raise ValueError(f"Missing required columns for derived features: {missing}")

    features_enhanced = features_df.copy()
    current_price = features_enhanced["close"].astype(float)

    features_enhanced[LOG_PRICE_COLUMN] = np.log(current_price)
    features_enhanced[PRICE_RATIO_COLUMN] = current_price / features_enhanced[ma_column]
    features_enhanced[PRICE_SQUARED_COLUMN] = current_price**2

    logger.debug(f"Added derived price features: {DERIVED_FEATURE_COLUMNS}")
    return features_enhanced


def check_finite_features(features_df: pd.DataFrame, feature_columns: List[str]) -> pd.Series:
    """
    Boolean mask of rows whose feature values are all finite

    Infinite values can only come from a degenerate moving average, which the
    positive-price invariant rules out; callers treat a False entry as a contract
    breach rather than cleaning the value.
    """
    values = features_df[feature_columns].to_numpy(dtype=float)
    return pd.Series(np.isfinite(values).all(axis=1), index=features_df.index)
