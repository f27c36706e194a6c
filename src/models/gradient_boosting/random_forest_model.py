"""
Random Forest Model Implementation

This module provides a RandomForestModel class for next-bar close
prediction, following the BaseModel architecture.
"""

from typing import Optional, Dict, Any

import pandas as pd
from sklearn.ensemble import RandomForestRegressor

from src.models.base_model import BaseModel
from src.utils.core.logger import get_logger

logger = get_logger(__name__)


class RandomForestModel(BaseModel):
    """
    Random Forest regressor over the supervised row features
    """

    def __init__(
        self,
        model_name: str = "random_forest_forecaster",
        config: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize RandomForestModel
        Args:
            model_name: Name used in logs and reports
            config: RandomForestRegressor parameters
        """
        super().__init__(model_name, config)
        logger.debug(f"Initialized {model_name} (RandomForestModel)")

    def _create_model(self, **kwargs):
        """
        Create the underlying RandomForestRegressor instance
        Returns:
            RandomForestRegressor instance
        """
        params = self.config.copy()
        params.update(kwargs)
        # Set default hyperparameters if not specified
        params.setdefault("n_estimators", 100)
        params.setdefault("min_samples_leaf", 1)
        params.setdefault("max_features", "sqrt")
        params.setdefault("random_state", 42)
        return RandomForestRegressor(**params)

    def fit(self, x: pd.DataFrame, y: pd.Series, **kwargs) -> "RandomForestModel":
        """
        Train the Random Forest model
        Args:
            x: Training features
            y: Training targets
            **kwargs: Additional RandomForestRegressor parameters
        Returns:
            Self for method chaining
        """
        self.model = self._create_model(**kwargs)
        self.model.fit(x, y)
        self.is_trained = True
        self.feature_names = list(x.columns)
        if hasattr(self.model, "feature_importances_"):
            self.feature_importance = self.model.feature_importances_
        else:
            self.feature_importance = None
        logger.info(f"RandomForestModel trained on {x.shape[0]} samples, {x.shape[1]} features.")
        return self
