# Core utilities package
# Contains foundational infrastructure utilities for the application

__all__ = [
    "get_logger",
    "add_file_sink",
    "shutdown_logging",
    "ForecastEngineError",
    "InvariantViolationError",
    "InsufficientDataError",
    "DegenerateSplitError",
]

from .logger import get_logger, add_file_sink, shutdown_logging
from .exceptions import (
    ForecastEngineError,
    InvariantViolationError,
    InsufficientDataError,
    DegenerateSplitError,
)
