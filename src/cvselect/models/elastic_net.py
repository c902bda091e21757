# elastic_net.py
from __future__ import annotations

import numpy as np
from sklearn.linear_model import SGDClassifier

from .base import Learner, is_real
from ..core.errors import FitFailure, UnsupportedConfiguration
from ..core.grid import Configuration


class ElasticNetLearner(Learner):
    """Elastic-net regularized logistic classifier.

    Minimizes ``mean(log_loss) + lambda * (alpha * |w|_1 + (1 - alpha) / 2 * |w|_2^2)``
    with an unpenalized intercept. ``alpha`` mixes L1 (1.0) and L2 (0.0),
    ``lambda`` scales the whole penalty. This is exactly the objective of
    sklearn's ``SGDClassifier(loss="log_loss", penalty="elasticnet")`` with
    ``alpha=lambda`` and ``l1_ratio=alpha``.

    SGD shuffles every epoch, so ``random_state`` fixes the result for a given
    training set. A fit that runs all ``max_iter`` epochs without meeting ``tol``
    did not converge and raises FitFailure.
    """

    name = "elastic_net"
    hyperparameters = ("alpha", "lambda")

    def __init__(self, random_state: int = 1414, max_iter: int = 1000, tol: float = 1e-4):
        self.random_state = random_state
        self.max_iter = max_iter
        self.tol = tol

    def _check(self, config: Configuration) -> None:
        alpha, lam = config["alpha"], config["lambda"]
        if not is_real(alpha) or not 0.0 <= alpha <= 1.0:
            raise UnsupportedConfiguration(f"alpha must be a number in [0, 1], got {alpha!r}")
        if not is_real(lam) or lam <= 0.0:
            raise UnsupportedConfiguration(f"lambda must be a number > 0, got {lam!r}")

    def _fit(self, X: np.ndarray, y: np.ndarray, config: Configuration) -> SGDClassifier:
        clf = SGDClassifier(
            loss="log_loss",
            penalty="elasticnet",
            alpha=float(config["lambda"]),
            l1_ratio=float(config["alpha"]),
            max_iter=self.max_iter,
            tol=self.tol,
            random_state=self.random_state,
        )
        clf.fit(X, y)
        # same condition sklearn uses to emit ConvergenceWarning
        if self.tol is not None and clf.n_iter_ >= self.max_iter:
            raise FitFailure(
                f"SGD did not converge within max_iter={self.max_iter} epochs (tol={self.tol})"
            )
        if not np.all(np.isfinite(clf.coef_)) or not np.all(np.isfinite(clf.intercept_)):
            raise FloatingPointError("coefficients diverged to a non-finite value")
        return clf

    def _predict(self, model: SGDClassifier, X: np.ndarray) -> np.ndarray:
        return model.predict(X)

    def n_features(self, model: SGDClassifier) -> int:
        return int(model.n_features_in_)

    def __repr__(self) -> str:
        return f"ElasticNetLearner(random_state={self.random_state}, max_iter={self.max_iter})"
