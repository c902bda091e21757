# cross_validation.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Mapping, Tuple, Union

import numpy as np

from .errors import InsufficientData, InvalidArgument
from .metrics import count_correct

if TYPE_CHECKING:
    from ..models.base import Learner

logger = logging.getLogger(__name__)

Fold = Tuple[np.ndarray, np.ndarray]


def kfold_indices(n_rows: int, k: int = 10, rng: Union[int, np.random.Generator] = 42) -> List[Fold]:
    """Unstratified k-fold assignment over ``range(n_rows)``.

    Rows are shuffled once and cut into ``k`` contiguous chunks whose sizes differ
    by at most one. Label balance across folds is not enforced.
    """
    if k < 2:
        raise InvalidArgument(f"k-fold cross-validation needs k >= 2, got {k}")
    if k > n_rows:
        raise InsufficientData(f"cannot make {k} folds from {n_rows} rows")
    if not isinstance(rng, np.random.Generator):
        rng = np.random.default_rng(rng)

    order = rng.permutation(n_rows)
    folds = []
    for test_idx in np.array_split(order, k):
        mask = np.ones(n_rows, dtype=bool)
        mask[test_idx] = False
        folds.append((np.flatnonzero(mask), np.sort(test_idx)))
    return folds


@dataclass(frozen=True)
class CVScore:
    accuracy: float
    fold_accuracies: Tuple[float, ...]
    n_evaluated: int


class CrossValidator:
    """k-fold accuracy estimate for one learner + configuration.

    Accuracy is pooled: total correct predictions over all folds divided by the
    total number of rows evaluated. Fold models are discarded after scoring.
    """

    def __init__(self, k: int = 10):
        if k < 2:
            raise InvalidArgument(f"k-fold cross-validation needs k >= 2, got {k}")
        self.k = k

    def evaluate_folds(
        self,
        features: np.ndarray,
        labels: np.ndarray,
        learner: "Learner",
        configuration: Mapping,
        rng: Union[int, np.random.Generator] = 42,
    ) -> CVScore:
        X = np.asarray(features, dtype=float)
        y = np.asarray(labels)
        folds = kfold_indices(len(y), self.k, rng)

        correct = 0
        evaluated = 0
        fold_accuracies = []
        for fi, (tr_idx, te_idx) in enumerate(folds):
            model = learner.fit(X[tr_idx], y[tr_idx], configuration)
            yhat = learner.predict(model, X[te_idx])
            fold_correct = count_correct(y[te_idx], yhat)
            correct += fold_correct
            evaluated += len(te_idx)
            fold_accuracies.append(fold_correct / len(te_idx))
            logger.debug(
                "[%s %s] fold %d/%d acc=%.4f", learner.name, configuration, fi + 1, self.k, fold_accuracies[-1]
            )

        return CVScore(
            accuracy=correct / evaluated,
            fold_accuracies=tuple(fold_accuracies),
            n_evaluated=evaluated,
        )

    def evaluate(
        self,
        features: np.ndarray,
        labels: np.ndarray,
        learner: "Learner",
        configuration: Mapping,
        rng: Union[int, np.random.Generator] = 42,
    ) -> float:
        return self.evaluate_folds(features, labels, learner, configuration, rng).accuracy


def cross_validate(
    features: np.ndarray,
    labels: np.ndarray,
    learner: "Learner",
    configuration: Mapping,
    k: int = 10,
    rng: Union[int, np.random.Generator] = 42,
) -> float:
    return CrossValidator(k).evaluate(features, labels, learner, configuration, rng)
