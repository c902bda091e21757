# knn.py
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.spatial.distance import cdist

from .base import Learner, is_integer
from ..core.errors import FitFailure, UnsupportedConfiguration
from ..core.grid import Configuration


@dataclass(frozen=True, eq=False)
class KnnModel:
    features: np.ndarray
    labels: np.ndarray
    k: int


class KnnLearner(Learner):
    """k-nearest-neighbours majority vote on Euclidean distance.

    Inputs must already be z-scored with statistics fitted on the training set
    (``requires_scaling``). Fitting only stores the rows.

    Tie policy, both deterministic:
    - equal distances: the training row that comes first wins the neighbour slot
    - equal votes (even k, k/2 neighbours of each label): predict 1
    """

    name = "knn"
    hyperparameters = ("k",)
    requires_scaling = True

    def _check(self, config: Configuration) -> None:
        k = config["k"]
        if not is_integer(k) or k < 1:
            raise UnsupportedConfiguration(f"k must be an integer >= 1, got {k!r}")

    def _fit(self, X: np.ndarray, y: np.ndarray, config: Configuration) -> KnnModel:
        k = int(config["k"])
        if k > X.shape[0]:
            raise FitFailure(f"k={k} neighbours requested but only {X.shape[0]} training rows")
        features = X.copy()
        labels = y.copy()
        features.setflags(write=False)
        labels.setflags(write=False)
        return KnnModel(features=features, labels=labels, k=k)

    def _predict(self, model: KnnModel, X: np.ndarray) -> np.ndarray:
        distances = cdist(X, model.features, metric="euclidean")
        nearest = np.argsort(distances, axis=1, kind="stable")[:, : model.k]
        ones = model.labels[nearest].sum(axis=1)
        return (2 * ones >= model.k).astype(int)

    def n_features(self, model: KnnModel) -> int:
        return int(model.features.shape[1])
