"""
Tree Ensemble Models Package

This package contains tree-ensemble estimators for next-bar close prediction.
"""

from src.models.gradient_boosting.random_forest_model import RandomForestModel

__all__ = ["RandomForestModel"]
