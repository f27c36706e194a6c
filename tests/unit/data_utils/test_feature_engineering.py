import numpy as np
import pandas as pd
import pytest

from src.data_utils.feature_engineering import (
    DERIVED_FEATURE_COLUMNS,
    add_derived_price_features,
    check_finite_features,
)


@pytest.mark.unit
def test_add_derived_price_features_values():
    """
    Setup: two rows with close and long moving average

    Execution: add_derived_price_features

    Verification: log price, SMA ratio and squared price computed per row,
    input frame left untouched
    """
    df = pd.DataFrame({"close": [100.0, 200.0], "ma_long": [80.0, 250.0]})

    out = add_derived_price_features(df)

    assert list(out.columns[-3:]) == DERIVED_FEATURE_COLUMNS
    np.testing.assert_allclose(out["log_price"], np.log([100.0, 200.0]))
    np.testing.assert_allclose(out["price_ratio"], [1.25, 0.8])
    np.testing.assert_allclose(out["price_squared"], [10000.0, 40000.0])
    assert "log_price" not in df.columns


@pytest.mark.unit
def test_add_derived_price_features_missing_columns():
    with pytest.raises(ValueError, match="ma_long"):
        add_derived_price_features(pd.DataFrame({"close": [1.0]}))


@pytest.mark.unit
def test_check_finite_features_flags_inf_and_nan():
    df = pd.DataFrame({"a": [1.0, np.inf, 2.0], "b": [0.5, 0.5, np.nan]})

    mask = check_finite_features(df, ["a", "b"])

    assert mask.tolist() == [True, False, False]
