"""
Base Model Class

This module provides an abstract base class for the estimators evaluated by
the engine. An estimator is fitted on a training slice and predicts the next
bar's close for every row of a test slice.
"""
import numpy as np
import pandas as pd
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

from src.utils.logger import get_logger

logger = get_logger(__name__)


class BaseModel(ABC):
    """
    Abstract base class for all forecast estimators
    """

    def __init__(self, model_name: str, config: Optional[Dict[str, Any]] = None):
        """
        Initialize base model

        Args:
            model_name: Name of the model for logging and reports
            config: Model configuration parameters
        """
        self.model_name = model_name
        self.config = config or {}
        self.model = None
        self.is_trained = False
        self.feature_names = None
        self.feature_importance = None

        logger.debug(f"Initialized {model_name} model")

    @abstractmethod
    def _create_model(self, **kwargs) -> Any:
        """
        Create the underlying model instance

        Returns:
            Model instance
        """
        pass

    @abstractmethod
    def fit(self, x: pd.DataFrame, y: pd.Series, **kwargs) -> 'BaseModel':
        """
        Train the model

        Args:
            x: Training features
            y: Training targets (next-bar close)
            **kwargs: Additional training parameters

        Returns:
            Self for method chaining
        """
        pass

    def predict(self, x: pd.DataFrame) -> np.ndarray:
        """
        Make predictions

        Args:
            x: Features for prediction

        Returns:
            Predictions array, one value per row
        """
        if not self.is_trained:
            raise ValueError("Model must be trained before making predictions")

        if self.feature_names is not None:
            # Ensure feature order matches training
            x = x[self.feature_names]

        return np.asarray(self.model.predict(x), dtype=float)

    def get_feature_importance(self) -> Optional[pd.DataFrame]:
        """
        Get feature importance scores

        Returns:
            DataFrame with feature names and importance scores
        """
        if not self.is_trained or self.feature_importance is None:
            return None

        importance_df = pd.DataFrame({
            'feature': self.feature_names,
            'importance': self.feature_importance
        }).sort_values('importance', ascending=False).reset_index(drop=True)

        return importance_df
