# scaling.py
"""
Z-score feature scaling.

Statistics are fitted once on the training rows and then reused unchanged for
cross-validation folds and the holdout set, so no fold or holdout row ever
influences the mean/std used to scale it.
"""

from dataclasses import dataclass

import numpy as np

from .data import Dataset
from .errors import DegenerateFeature, InvalidArgument


@dataclass(frozen=True, eq=False)
class ScalingStatistics:
    mean: np.ndarray
    std: np.ndarray

    @property
    def n_features(self) -> int:
        return int(self.mean.size)


class FeatureScaler:
    """Per-column (v - mean) / std with the sample standard deviation (ddof=1)."""

    @staticmethod
    def fit(reference_rows: np.ndarray) -> ScalingStatistics:
        """
        Compute per-column mean and sample standard deviation.

        Args:
            reference_rows: 2-D array, one row per observation

        Returns:
            ScalingStatistics for every column

        Raises:
            DegenerateFeature: a column is constant or there are fewer than 2 rows
        """
        X = np.asarray(reference_rows, dtype=float)
        if X.ndim != 2:
            raise InvalidArgument(f"reference rows must be 2-D, got shape {X.shape}")
        if X.shape[0] < 2:
            # sample std is undefined for a single row; every column is degenerate
            raise DegenerateFeature(0, "at least 2 reference rows are needed to estimate std")

        mean = X.mean(axis=0)
        std = X.std(axis=0, ddof=1)
        zero = np.flatnonzero(std == 0.0)
        if zero.size:
            raise DegenerateFeature(int(zero[0]))

        mean.setflags(write=False)
        std.setflags(write=False)
        return ScalingStatistics(mean=mean, std=std)

    @staticmethod
    def transform(rows: np.ndarray, stats: ScalingStatistics) -> np.ndarray:
        X = np.asarray(rows, dtype=float)
        if X.ndim != 2 or X.shape[1] != stats.n_features:
            raise InvalidArgument(
                f"expected rows with {stats.n_features} columns, got shape {X.shape}"
            )
        return (X - stats.mean) / stats.std

    @classmethod
    def transform_dataset(cls, dataset: Dataset, stats: ScalingStatistics) -> Dataset:
        return Dataset(cls.transform(dataset.features, stats), dataset.labels, dataset.feature_names)
