from unittest.mock import Mock

import numpy as np
import pandas as pd
import pytest

from src.models.base_model import BaseModel
from src.models.baseline_model import PersistenceModel


class DummyModel(BaseModel):
    """Minimal concrete implementation for testing BaseModel behavior."""

    def _create_model(self, **kwargs):
        return Mock()

    def fit(self, x, y, **kwargs):
        # simple behavior: store feature names and mark trained
        self.feature_names = list(x.columns)
        self.model = self._create_model()
        # echo the first feature so column order is observable
        self.model.predict = Mock(side_effect=lambda inp: inp.iloc[:, 0].to_numpy())
        self.feature_importance = np.array([0.25, 0.75])
        self.is_trained = True
        return self


@pytest.fixture
def sample_dataframe():
    # three rows, two feature columns
    return pd.DataFrame({"f1": [1.0, 2.0, 3.0], "f2": [0.1, 0.2, 0.3]})


@pytest.fixture
def sample_series():
    return pd.Series([2.0, 3.0, 4.0])


@pytest.mark.unit
def test_predict_raises_if_untrained(sample_dataframe):
    # Setup
    model = DummyModel("dummy")

    # Execution / Verification
    with pytest.raises(ValueError, match="Model must be trained before making predictions"):
        model.predict(sample_dataframe)


@pytest.mark.unit
@pytest.mark.parametrize("feature_order", [("f1", "f2"), ("f2", "f1")])
def test_feature_name_order_enforced(sample_dataframe, sample_series, feature_order):
    # Setup
    model = DummyModel("dummy").fit(sample_dataframe, sample_series)

    # Execution - call predict with columns reordered
    preds = model.predict(sample_dataframe[list(feature_order)])

    # Verification: training order (f1 first) is restored
    assert isinstance(preds, np.ndarray)
    np.testing.assert_allclose(preds, [1.0, 2.0, 3.0])


@pytest.mark.unit
def test_feature_importance_sorted_after_fit(sample_dataframe, sample_series):
    model = DummyModel("dummy", config={"alpha": 1})
    assert model.get_feature_importance() is None

    model.fit(sample_dataframe, sample_series)

    importance = model.get_feature_importance()
    assert importance["feature"].tolist() == ["f2", "f1"]


@pytest.mark.unit
def test_persistence_model_predicts_current_close():
    """
    Setup: features carrying log_price of the current close

    Execution: fit then predict with the persistence baseline

    Verification: predictions equal exp(log_price), whatever the training labels
    """
    close = np.array([100.0, 101.5, 99.25])
    x = pd.DataFrame({"ma_short": [1.0, 2.0, 3.0], "log_price": np.log(close)})

    model = PersistenceModel().fit(x, pd.Series([0.0, 0.0, 0.0]))

    np.testing.assert_allclose(model.predict(x), close)
    assert model.feature_names == ["log_price"]


@pytest.mark.unit
def test_persistence_model_requires_log_price():
    with pytest.raises(ValueError, match="log_price"):
        PersistenceModel().fit(pd.DataFrame({"ma_short": [1.0]}), pd.Series([1.0]))
