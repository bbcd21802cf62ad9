"""
Splitter - Stage 2

Partitions rows into train and test sets with a seeded split that is
stratified on quantile groups of the target, like caret's
``createDataPartition`` does for a numeric outcome.
"""

import numpy as np
import pandas as pd
from dataclasses import dataclass
from sklearn.model_selection import train_test_split
from typing import Optional

from ..constants import TARGET_COLUMN
from ..exceptions import ValidationError
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SplitResult:
    """Row labels of the two partitions."""

    train_index: pd.Index
    test_index: pd.Index
    stratified: bool

    @property
    def n_train(self) -> int:
        return len(self.train_index)

    @property
    def n_test(self) -> int:
        return len(self.test_index)

    def apply(self, df: pd.DataFrame):
        """Return ``(train_df, test_df)`` for a frame indexed like the split input."""
        return df.loc[self.train_index], df.loc[self.test_index]


class Splitter:
    """
    Seeded train/test splitter.

    Example:
        >>> splitter = Splitter(train_fraction=0.8, random_seed=123)
        >>> split = splitter.split(df)
        >>> train_df, test_df = split.apply(df)
    """

    def __init__(
        self,
        train_fraction: float = 0.8,
        random_seed: int = 123,
        stratify: bool = True,
        n_bins: int = 4
    ):
        if not 0.0 < train_fraction < 1.0:
            raise ValidationError(f"train_fraction must be between 0 and 1, got {train_fraction}")

        self.train_fraction = train_fraction
        self.random_seed = random_seed
        self.stratify = stratify
        self.n_bins = n_bins

    def split(self, df: pd.DataFrame, target: str = TARGET_COLUMN) -> SplitResult:
        """
        Split the rows of ``df``.

        Args:
            df: Dataset to partition
            target: Column whose distribution is preserved across partitions

        Returns:
            SplitResult with disjoint train and test row labels
        """
        if len(df) < 2:
            raise ValidationError(f"Need at least 2 rows to split, got {len(df)}")

        positions = np.arange(len(df))
        strata = self._strata(df[target]) if self.stratify else None

        if strata is not None:
            train_pos, test_pos = train_test_split(
                positions,
                train_size=self.train_fraction,
                random_state=self.random_seed,
                stratify=strata
            )
        else:
            train_pos, test_pos = train_test_split(
                positions,
                train_size=self.train_fraction,
                random_state=self.random_seed
            )

        # Keep the original row order inside each partition
        train_pos = np.sort(train_pos)
        test_pos = np.sort(test_pos)

        result = SplitResult(
            train_index=df.index[train_pos],
            test_index=df.index[test_pos],
            stratified=strata is not None
        )

        logger.info(
            f"Split: {result.n_train} train, {result.n_test} test "
            f"({'stratified' if result.stratified else 'random'}, seed={self.random_seed})"
        )

        return result

    def _strata(self, y: pd.Series) -> Optional[np.ndarray]:
        """
        Quantile groups of the target, or None when stratifying is not possible.

        Groups are cut from the non-missing targets; rows with a missing
        target join the largest group.
        """
        n = len(y)
        n_train = int(np.floor(self.train_fraction * n))
        n_test = n - n_train

        valid = y.notna().to_numpy()
        n_valid = int(valid.sum())
        # caret cuts at up to 5 quantile breaks, which makes up to 4 groups
        groups = min(self.n_bins, n_valid - 1)

        if groups < 2 or y[valid].nunique() < 2:
            logger.warning("Target has too few distinct values to stratify - using a random split")
            return None

        binned = pd.qcut(y[valid], q=groups, labels=False, duplicates='drop')
        binned = binned.astype(int).to_numpy()

        strata = np.empty(n, dtype=int)
        strata[valid] = binned
        if n_valid < n:
            largest = int(np.bincount(binned).argmax())
            strata[~valid] = largest
            logger.warning(
                f"{n - n_valid} rows with a missing target assigned to quantile group {largest}"
            )

        counts = np.bincount(strata)
        counts = counts[counts > 0]

        if len(counts) < 2 or counts.min() < 2 or min(n_train, n_test) < len(counts):
            logger.warning(
                "Target quantile groups too small to stratify - falling back to random split"
            )
            return None

        return strata
