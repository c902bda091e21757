# data.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .errors import InvalidArgument


@dataclass(frozen=True, eq=False)
class Dataset:
    """Feature matrix plus binary labels, already cleaned upstream.

    Rows with missing values must be dropped before a Dataset is built; the
    constructor rejects NaN/inf and any label outside {0, 1}.
    """

    features: np.ndarray
    labels: np.ndarray
    feature_names: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        X = np.array(self.features, dtype=float)
        y = np.array(self.labels)
        if X.ndim != 2:
            raise InvalidArgument(f"features must be 2-D, got shape {X.shape}")
        if y.ndim != 1:
            raise InvalidArgument(f"labels must be 1-D, got shape {y.shape}")
        if X.shape[0] != y.shape[0]:
            raise InvalidArgument(
                f"features have {X.shape[0]} rows but labels have {y.shape[0]}"
            )
        if not np.all(np.isfinite(X)):
            raise InvalidArgument("features contain NaN or infinite values")
        if y.size and not np.isin(y, (0, 1)).all():
            bad = sorted(set(y.tolist()) - {0, 1})
            raise InvalidArgument(f"labels must be 0 or 1, found {bad[:5]}")
        if self.feature_names is not None and len(self.feature_names) != X.shape[1]:
            raise InvalidArgument(
                f"{len(self.feature_names)} feature names for {X.shape[1]} columns"
            )
        X.setflags(write=False)
        y = y.astype(int)
        y.setflags(write=False)
        object.__setattr__(self, "features", X)
        object.__setattr__(self, "labels", y)
        if self.feature_names is not None:
            object.__setattr__(self, "feature_names", tuple(self.feature_names))

    @property
    def n_rows(self) -> int:
        return int(self.features.shape[0])

    @property
    def n_features(self) -> int:
        return int(self.features.shape[1])

    def __len__(self) -> int:
        return self.n_rows

    def subset(self, indices: Sequence[int]) -> "Dataset":
        idx = np.asarray(indices, dtype=int)
        return Dataset(self.features[idx], self.labels[idx], self.feature_names)

    @classmethod
    def from_frame(cls, df: pd.DataFrame, label_column: str) -> "Dataset":
        """Build a Dataset from a cleaned DataFrame with one label column."""
        if label_column not in df.columns:
            raise InvalidArgument(f"label column {label_column!r} not in frame")
        feature_df = df.drop(columns=[label_column])
        return cls(
            features=feature_df.to_numpy(dtype=float),
            labels=df[label_column].to_numpy(),
            feature_names=tuple(str(c) for c in feature_df.columns),
        )
