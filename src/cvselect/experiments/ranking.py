# ranking.py
from typing import List, Sequence

from .results import TrialResult
from ..core.errors import EmptyInput, InvalidArgument

METRICS = ("cv_accuracy", "holdout_accuracy")


class ResultRanker:
    """Order trials by an accuracy metric, best first.

    ``sorted`` is stable, so among equal accuracies the input (grid enumeration)
    order is kept. Trials without a value for the metric (failed, timed out) go
    after every scored trial, still in input order; they are never treated as
    zero or perfect accuracy.
    """

    def __init__(self, metric: str = "cv_accuracy"):
        if metric not in METRICS:
            raise InvalidArgument(f"metric must be one of {METRICS}, got {metric!r}")
        self.metric = metric

    def rank(self, results: Sequence[TrialResult]) -> List[TrialResult]:
        def key(r: TrialResult):
            value = r.metric(self.metric)
            if r.failed or value is None:
                return (1, 0.0)
            return (0, -value)

        return sorted(results, key=key)

    def best(self, results: Sequence[TrialResult]) -> TrialResult:
        if not results:
            raise EmptyInput("cannot pick the best of zero trial results")
        top = self.rank(results)[0]
        if top.failed or top.metric(self.metric) is None:
            raise EmptyInput(f"none of the {len(results)} trial results succeeded")
        return top

    def top(self, results: Sequence[TrialResult], n: int = 5) -> List[TrialResult]:
        return [r for r in self.rank(results) if not r.failed][:n]


def rank(results: Sequence[TrialResult], metric: str = "cv_accuracy") -> List[TrialResult]:
    return ResultRanker(metric).rank(results)


def best(results: Sequence[TrialResult], metric: str = "cv_accuracy") -> TrialResult:
    return ResultRanker(metric).best(results)
