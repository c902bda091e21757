# logistic_regression.py
from __future__ import annotations

import numpy as np
from sklearn.linear_model import LogisticRegression

from .base import Learner
from ..core.grid import Configuration


class LogisticLearner(Learner):
    """Unregularized maximum-likelihood logistic regression.

    Takes no hyperparameters; the only valid configuration is the empty one.
    ``C=inf`` switches off sklearn's default L2 penalty.
    """

    name = "logistic"
    hyperparameters = ()

    def __init__(self, max_iter: int = 1000):
        self.max_iter = max_iter

    def _check(self, config: Configuration) -> None:
        pass

    def _fit(self, X: np.ndarray, y: np.ndarray, config: Configuration) -> LogisticRegression:
        clf = LogisticRegression(C=np.inf, solver="lbfgs", max_iter=self.max_iter)
        clf.fit(X, y)
        return clf

    def _predict(self, model: LogisticRegression, X: np.ndarray) -> np.ndarray:
        return model.predict(X)

    def n_features(self, model: LogisticRegression) -> int:
        return int(model.n_features_in_)

    def __repr__(self) -> str:
        return f"LogisticLearner(max_iter={self.max_iter})"
