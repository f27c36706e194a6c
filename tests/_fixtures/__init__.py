"""Fixtures package for tests.

Re-export commonly used factories and helpers for convenient imports
from `tests._fixtures` package.
"""

from .helpers import (
    make_bars,
    make_linear_bars,
    make_random_walk_bars,
    make_bar_frame,
    make_supervised_frame,
)

__all__ = [
    "make_bars",
    "make_linear_bars",
    "make_random_walk_bars",
    "make_bar_frame",
    "make_supervised_frame",
]
