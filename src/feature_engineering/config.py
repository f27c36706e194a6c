"""
Feature Engineering and Evaluation Configuration

This module provides centralized configuration for indicator windows,
supervised frame construction and chronological split planning.

Defaults are plain literals so engine components can be constructed with
injected configuration in tests. Reading the process environment is left to
bootstrap code via `EngineConfig.from_env()`.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import dotenv


@dataclass
class IndicatorConfig:
    """Window sizes for the technical indicators attached to each bar"""

    MA_SHORT_WINDOW: int = 5
    MA_LONG_WINDOW: int = 20
    RSI_WINDOW: int = 14

    def validate_config(self) -> List[str]:
        errors = []
        for name in ("MA_SHORT_WINDOW", "MA_LONG_WINDOW", "RSI_WINDOW"):
            if getattr(self, name) < 1:
                errors.append(f"{name} must be at least 1")
        if self.MA_SHORT_WINDOW >= self.MA_LONG_WINDOW:
            errors.append("MA_SHORT_WINDOW must be smaller than MA_LONG_WINDOW")
        return errors

    def __post_init__(self):
        _raise_on_errors(self.validate_config())


@dataclass
class SupervisedFrameConfig:
    """Configuration for turning enriched bars into (features, label) rows"""

    MIN_ROWS: int = 50
    INCLUDE_DERIVED_FEATURES: bool = True

    def validate_config(self) -> List[str]:
        errors = []
        if self.MIN_ROWS < 1:
            errors.append("MIN_ROWS must be at least 1")
        return errors

    def __post_init__(self):
        _raise_on_errors(self.validate_config())


@dataclass
class SplitConfig:
    """Configuration for the holdout split and walk-forward folds"""

    # Holdout
    HOLDOUT_RATIO: float = 0.8

    # Walk-forward: fold f trains on the first (GROWTH_START + GROWTH_STEP * f) of rows
    N_FOLDS: int = 3
    GROWTH_START: float = 0.5
    GROWTH_STEP: float = 0.1
    TEST_FRACTION: float = 0.1
    MIN_TEST_ROWS: int = 5
    MIN_ROWS_PER_FOLD: int = 20

    def validate_config(self) -> List[str]:
        errors = []
        if not 0 < self.HOLDOUT_RATIO < 1:
            errors.append("HOLDOUT_RATIO must be between 0 and 1")
        if self.N_FOLDS < 1:
            errors.append("N_FOLDS must be at least 1")
        if not 0 < self.GROWTH_START < 1:
            errors.append("GROWTH_START must be between 0 and 1")
        if self.GROWTH_STEP <= 0:
            errors.append("GROWTH_STEP must be positive")
        if not 0 < self.TEST_FRACTION < 1:
            errors.append("TEST_FRACTION must be between 0 and 1")
        if self.MIN_TEST_ROWS < 1:
            errors.append("MIN_TEST_ROWS must be at least 1")
        if self.MIN_ROWS_PER_FOLD < 1:
            errors.append("MIN_ROWS_PER_FOLD must be at least 1")
        return errors

    def __post_init__(self):
        _raise_on_errors(self.validate_config())


@dataclass
class EngineConfig:
    """Main configuration class that combines all sub-configurations"""

    indicators: IndicatorConfig = field(default_factory=IndicatorConfig)
    supervised: SupervisedFrameConfig = field(default_factory=SupervisedFrameConfig)
    splits: SplitConfig = field(default_factory=SplitConfig)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "EngineConfig":
        """Create configuration from environment variables (and an optional .env file)"""
        dotenv.load_dotenv(env_file)
        return cls(
            indicators=IndicatorConfig(
                MA_SHORT_WINDOW=int(os.getenv("FE_MA_SHORT_WINDOW", "5")),
                MA_LONG_WINDOW=int(os.getenv("FE_MA_LONG_WINDOW", "20")),
                RSI_WINDOW=int(os.getenv("FE_RSI_WINDOW", "14")),
            ),
            supervised=SupervisedFrameConfig(
                MIN_ROWS=int(os.getenv("FE_MIN_ROWS", "50")),
                INCLUDE_DERIVED_FEATURES=os.getenv("FE_DERIVED_FEATURES", "true").strip().lower()
                in {"1", "true", "yes"},
            ),
            splits=SplitConfig(
                HOLDOUT_RATIO=float(os.getenv("EVAL_HOLDOUT_RATIO", "0.8")),
                N_FOLDS=int(os.getenv("EVAL_N_FOLDS", "3")),
                GROWTH_START=float(os.getenv("EVAL_GROWTH_START", "0.5")),
                GROWTH_STEP=float(os.getenv("EVAL_GROWTH_STEP", "0.1")),
                TEST_FRACTION=float(os.getenv("EVAL_TEST_FRACTION", "0.1")),
                MIN_TEST_ROWS=int(os.getenv("EVAL_MIN_TEST_ROWS", "5")),
                MIN_ROWS_PER_FOLD=int(os.getenv("EVAL_MIN_ROWS_PER_FOLD", "20")),
            ),
        )

    def get_config_summary(self) -> Dict[str, Any]:
        """
        Get a summary of current configuration

        Returns:
            Dictionary with configuration summary
        """
        return {
            "indicator_windows": (
                self.indicators.MA_SHORT_WINDOW,
                self.indicators.MA_LONG_WINDOW,
                self.indicators.RSI_WINDOW,
            ),
            "min_rows": self.supervised.MIN_ROWS,
            "derived_features": self.supervised.INCLUDE_DERIVED_FEATURES,
            "holdout_ratio": self.splits.HOLDOUT_RATIO,
            "n_folds": self.splits.N_FOLDS,
            "fold_schedule": (self.splits.GROWTH_START, self.splits.GROWTH_STEP),
        }


def _raise_on_errors(errors: List[str]) -> None:
    if errors:
        raise ValueError(
            "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
        )
