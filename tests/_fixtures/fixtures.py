import pytest
import numpy as np
from loguru import logger

from src.utils.core.logger import get_logger
from tests._fixtures.helpers import make_linear_bars, make_random_walk_bars


# Central deterministic seed fixture for all tests (numeric libs)
@pytest.fixture(scope="session", autouse=True)
def factory_seed():
    """
    Set a single deterministic seed for Python and NumPy random generators.

    Runs once per test session so any numpy/random-based behavior is
    deterministic in CI. Returns the seed value (42).
    """
    seed = 42

    import random

    random.seed(seed)
    np.random.seed(seed)

    return seed


@pytest.fixture
def linear_bars():
    """60 daily bars of one symbol with close rising by 1.0 per day."""
    return make_linear_bars(n=60)


@pytest.fixture
def two_symbol_bars():
    """Two interleaved-date symbols with independent random walks (150 bars each)."""
    return make_random_walk_bars(n=150, symbol="BTC", seed=1) + make_random_walk_bars(
        n=150, symbol="ETH", seed=2, start_price=20.0
    )


@pytest.fixture
def loguru_messages():
    """
    Capture loguru records emitted during a test.

    loguru bypasses the stdlib logging tree that `caplog` hooks into, so a
    synchronous list sink is attached for the duration of the test.
    """
    get_logger(__name__)  # initialize central sinks before attaching ours
    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG", format="{message}")
    yield records
    logger.remove(sink_id)
