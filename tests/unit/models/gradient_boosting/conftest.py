from typing import Iterator

import numpy as np
import pandas as pd
import pytest

from src.models.gradient_boosting.random_forest_model import RandomForestModel


class SimpleDataFactory:
    """Lightweight factory to generate deterministic tabular data for tests."""

    @staticmethod
    def create_dataframe(n_rows: int = 100) -> pd.DataFrame:
        close = np.linspace(10, 20, n_rows)
        return pd.DataFrame(
            {
                "ma_short": close - 0.2,
                "ma_long": close - 0.9,
                "rsi": np.linspace(30, 70, n_rows),
                "log_price": np.log(close),
            }
        )

    @staticmethod
    def create_target_series(n_rows: int = 100) -> pd.Series:
        return pd.Series(np.linspace(10.1, 20.1, n_rows))


@pytest.fixture(scope="session")
def sample_tabular_data() -> Iterator[dict]:
    """Provide a small, deterministic dataset for models to consume in tests."""

    x = SimpleDataFactory.create_dataframe(n_rows=120)
    y = SimpleDataFactory.create_target_series(n_rows=120)

    yield {"x": x, "y": y}


@pytest.fixture
def rf_model_instance() -> RandomForestModel:
    return RandomForestModel(config={"n_estimators": 20})
