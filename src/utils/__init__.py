# Shared utilities: logging and the engine error taxonomy

from .core.logger import get_logger, add_file_sink, shutdown_logging
from .core.exceptions import (
    ForecastEngineError,
    InvariantViolationError,
    InsufficientDataError,
    DegenerateSplitError,
)

__all__ = [
    "get_logger",
    "add_file_sink",
    "shutdown_logging",
    "ForecastEngineError",
    "InvariantViolationError",
    "InsufficientDataError",
    "DegenerateSplitError",
]
