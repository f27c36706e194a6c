"""
Naive persistence baseline

Predicts that the next close equals the current close. The current close is
recovered from the log-price feature, so the baseline sees exactly the same
feature matrix as any other estimator.
"""

import numpy as np
import pandas as pd

from src.data_utils.feature_engineering import LOG_PRICE_COLUMN
from src.models.base_model import BaseModel
from src.utils.logger import get_logger

logger = get_logger(__name__)


class _LastClose:
    """Stateless predictor: exp(log_price)"""

    def predict(self, x: pd.DataFrame) -> np.ndarray:
        return np.exp(x[LOG_PRICE_COLUMN].to_numpy(dtype=float))


class PersistenceModel(BaseModel):
    """
    "Predict last label" baseline for benchmarking trained estimators
    """

    def __init__(self, model_name: str = "persistence_baseline"):
        super().__init__(model_name)

    def _create_model(self, **kwargs):
        return _LastClose()

    def fit(self, x: pd.DataFrame, y: pd.Series, **kwargs) -> "PersistenceModel":
        if LOG_PRICE_COLUMN not in x.columns:
            raise ValueError(
                f"PersistenceModel requires the '{LOG_PRICE_COLUMN}' feature; "
                "enable derived features when building the supervised frame"
            )
        self.model = self._create_model()
        self.feature_names = [LOG_PRICE_COLUMN]
        self.is_trained = True
        logger.debug(f"{self.model_name} ready ({len(x)} training rows ignored)")
        return self
