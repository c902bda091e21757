"""
Shared fixtures for cvselect tests.

Synthetic data only: every dataset is generated from a seeded numpy Generator
so results are identical run to run.
"""

import numpy as np
import pytest

from cvselect.core.data import Dataset
from cvselect.core.splitting import train_holdout_split

LINEAR_WEIGHTS = np.array([2.0, -1.0, 0.5])


def make_linear_dataset(n_rows: int = 100, n_features: int = 3, seed: int = 7, margin: float = 0.3) -> Dataset:
    """Rows labelled by a fixed linear rule with no noise.

    Points closer than ``margin`` to the decision boundary are redrawn so the
    classes are cleanly separable.
    """
    rng = np.random.default_rng(seed)
    weights = LINEAR_WEIGHTS[:n_features]
    rows = []
    while len(rows) < n_rows:
        x = rng.normal(size=n_features)
        if abs(x @ weights) > margin:
            rows.append(x)
    X = np.vstack(rows)
    y = (X @ weights > 0).astype(int)
    return Dataset(X, y)


@pytest.fixture
def linear_dataset():
    """100 rows, 3 features, labels from a known linear rule."""
    return make_linear_dataset()


@pytest.fixture
def linear_split(linear_dataset):
    """80/20 split of the linear dataset with seed 42."""
    split = train_holdout_split(linear_dataset.n_rows, 0.8, seed=42)
    training, holdout = split.apply(linear_dataset)
    return {"split": split, "training": training, "holdout": holdout}


@pytest.fixture
def blob_dataset():
    """Two Gaussian blobs with very different feature scales."""
    rng = np.random.default_rng(3)
    n = 60
    X0 = rng.normal(loc=[0.0, 0.0], scale=[1.0, 100.0], size=(n, 2))
    X1 = rng.normal(loc=[4.0, 0.0], scale=[1.0, 100.0], size=(n, 2))
    X = np.vstack([X0, X1])
    y = np.array([0] * n + [1] * n)
    return Dataset(X, y, feature_names=("signal", "wide_noise"))


@pytest.fixture
def dataset_factory():
    """Callable building linear datasets of any size."""
    return make_linear_dataset
