"""
Chronological Split Planning

This module partitions the ordered supervised row sequence into a single
holdout split and into walk-forward folds with growing training windows.
Rows are never shuffled: every split is a pair of contiguous positional
slices with the training slice first.
"""

import math
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from src.data_utils.schemas import SupervisedFrame
from src.feature_engineering.config import SplitConfig
from src.utils.core.exceptions import DegenerateSplitError
from src.utils.logger import get_logger

logger = get_logger(__name__)


def floor_fraction(n_rows: int, fraction: float) -> int:
    """floor(n_rows * fraction), ignoring binary float residue (1000 * 0.7 -> 700)"""
    return int(math.floor(round(n_rows * fraction, 9)))


@dataclass(frozen=True)
class Fold:
    """A (train, test) pair of contiguous chronological slices"""

    fold_id: int
    train: SupervisedFrame
    test: SupervisedFrame
    train_end: int
    test_end: int

    @property
    def train_rows(self) -> int:
        return len(self.train)

    @property
    def test_rows(self) -> int:
        return len(self.test)

    @property
    def train_period(self) -> str:
        return _describe_range(self.train)

    @property
    def test_period(self) -> str:
        return _describe_range(self.test)


@dataclass
class WalkForwardPlan:
    """Walk-forward folds, or a skipped plan with the reason it was skipped"""

    n_rows: int
    requested_folds: int
    folds: List[Fold] = field(default_factory=list)
    skipped: bool = False
    reason: Optional[str] = None

    def __len__(self) -> int:
        return len(self.folds)

    def __iter__(self) -> Iterator[Fold]:
        return iter(self.folds)


def _describe_range(frame: SupervisedFrame) -> str:
    date_range = frame.date_range()
    if date_range is None:
        return "No data"
    start, end = date_range
    return f"{start.strftime('%Y-%m-%d')} to {end.strftime('%Y-%m-%d')}"


class SplitPlanner:
    """
    Plans holdout and walk-forward splits over a SupervisedFrame

    Both modes rely on the frame's (symbol, timestamp) row order as produced
    by SupervisedFrameBuilder.
    """

    def __init__(self, config: Optional[SplitConfig] = None):
        self.config = config or SplitConfig()

    def holdout(self, frame: SupervisedFrame, ratio: Optional[float] = None) -> Fold:
        """
        Single chronological train/test split

        Args:
            frame: Ordered supervised rows
            ratio: Fraction of rows used for training (default HOLDOUT_RATIO)

        Returns:
            Fold with fold_id 0: train = rows[0:split), test = rows[split:n)

        Raises:
            ValueError: If ratio is not in (0, 1)
            DegenerateSplitError: If either partition would be empty
        """
        ratio = self.config.HOLDOUT_RATIO if ratio is None else ratio
        if not 0 < ratio < 1:
            raise ValueError(f"Holdout ratio must be between 0 and 1, got {ratio}")

        n_rows = len(frame)
        if n_rows < 2:
            raise DegenerateSplitError(
                f"Holdout split needs at least 2 rows, got {n_rows}", n_rows=n_rows
            )

        split_index = floor_fraction(n_rows, ratio)
        if split_index == 0 or split_index == n_rows:
            raise DegenerateSplitError(
                f"Holdout ratio {ratio} leaves an empty partition for {n_rows} rows",
                n_rows=n_rows,
                train_rows=split_index,
                test_rows=n_rows - split_index,
            )

        fold = Fold(
            fold_id=0,
            train=frame.slice(0, split_index),
            test=frame.slice(split_index, n_rows),
            train_end=split_index,
            test_end=n_rows,
        )
        logger.info(f"✅ Holdout train set: {fold.train_rows} rows ({fold.train_period})")
        logger.info(f"✅ Holdout test set: {fold.test_rows} rows ({fold.test_period})")
        return fold

    def walk_forward(self, frame: SupervisedFrame, n_folds: Optional[int] = None) -> WalkForwardPlan:
        """
        Walk-forward folds with growing training windows

        Fold f (1-based) trains on rows[0:floor(n * (GROWTH_START + GROWTH_STEP * f)))
        and tests on the following max(MIN_TEST_ROWS, floor(n * TEST_FRACTION))
        rows, capped at n. Planning stops at the first fold that would leave
        MIN_TEST_ROWS or fewer trailing rows.

        Returns:
            WalkForwardPlan; skipped (not an error) when n < n_folds * MIN_ROWS_PER_FOLD
            or when no fold fits
        """
        cfg = self.config
        n_folds = cfg.N_FOLDS if n_folds is None else n_folds
        if n_folds < 1:
            raise ValueError(f"n_folds must be at least 1, got {n_folds}")

        n_rows = len(frame)
        plan = WalkForwardPlan(n_rows=n_rows, requested_folds=n_folds)

        required_rows = n_folds * cfg.MIN_ROWS_PER_FOLD
        if n_rows < required_rows:
            plan.skipped = True
            plan.reason = (
                f"Walk-forward needs at least {required_rows} rows for {n_folds} folds, got {n_rows}"
            )
            logger.warning(f"⚠ Skipping walk-forward evaluation: {plan.reason}")
            return plan

        test_size = max(cfg.MIN_TEST_ROWS, floor_fraction(n_rows, cfg.TEST_FRACTION))
        previous_train_end = 0

        for fold_id in range(1, n_folds + 1):
            train_end = floor_fraction(n_rows, cfg.GROWTH_START + cfg.GROWTH_STEP * fold_id)
            if train_end >= n_rows - cfg.MIN_TEST_ROWS:
                logger.info(
                    f"Stopping walk-forward at fold {fold_id}: train end {train_end} leaves "
                    f"fewer than {cfg.MIN_TEST_ROWS + 1} test rows"
                )
                break
            if train_end <= previous_train_end:
                logger.debug(f"Fold {fold_id} does not grow the training window, skipped")
                continue

            test_end = min(n_rows, train_end + test_size)
            plan.folds.append(
                Fold(
                    fold_id=fold_id,
                    train=frame.slice(0, train_end),
                    test=frame.slice(train_end, test_end),
                    train_end=train_end,
                    test_end=test_end,
                )
            )
            previous_train_end = train_end
            logger.debug(f"Fold {fold_id}: train [0, {train_end}), test [{train_end}, {test_end})")

        if not plan.folds:
            plan.skipped = True
            plan.reason = f"No walk-forward fold leaves a test tail for {n_rows} rows"
            logger.warning(f"⚠ Skipping walk-forward evaluation: {plan.reason}")
            return plan

        logger.info(f"📊 Planned {len(plan.folds)} walk-forward folds over {n_rows} rows")
        return plan
