# results.py
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

import numpy as np
import pandas as pd

from ..core.grid import Configuration


class TrialStatus(str, enum.Enum):
    OK = "ok"
    FAILED = "failed"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class TrialResult:
    """Outcome of one (learner family, configuration) trial.

    A trial that did not complete carries ``status`` FAILED or TIMEOUT, the error
    message, and no accuracy figures.
    """

    learner: str
    configuration: Configuration
    index: int
    cv_accuracy: Optional[float] = None
    holdout_accuracy: Optional[float] = None
    status: TrialStatus = TrialStatus.OK
    error: Optional[str] = None
    duration: float = 0.0

    @property
    def failed(self) -> bool:
        return self.status is not TrialStatus.OK

    def metric(self, name: str) -> Optional[float]:
        if name not in ("cv_accuracy", "holdout_accuracy"):
            raise ValueError(f"Unknown metric: {name}")
        return getattr(self, name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "learner": self.learner,
            "configuration": dict(self.configuration),
            "index": self.index,
            "cv_accuracy": self.cv_accuracy,
            "holdout_accuracy": self.holdout_accuracy,
            "status": self.status.value,
            "error": self.error,
            "duration": self.duration,
        }

    @classmethod
    def failure(cls, learner: str, configuration: Configuration, index: int, error: BaseException,
                status: TrialStatus = TrialStatus.FAILED, duration: float = 0.0) -> "TrialResult":
        message = f"{type(error).__name__}: {error}" if str(error) else type(error).__name__
        return cls(learner, configuration, index, status=status, error=message, duration=duration)


def results_to_frame(results: Iterable[TrialResult]) -> pd.DataFrame:
    """One row per trial, one column per hyperparameter.

    Failed trials keep NaN accuracies so a renderer can show them distinctly.
    """
    rows = []
    for r in results:
        row = {
            "learner": r.learner,
            "index": r.index,
            "configuration": str(r.configuration),
        }
        row.update({f"param_{k}": v for k, v in r.configuration.items()})
        row.update(
            {
                "cv_accuracy": np.nan if r.cv_accuracy is None else r.cv_accuracy,
                "holdout_accuracy": np.nan if r.holdout_accuracy is None else r.holdout_accuracy,
                "status": r.status.value,
                "error": r.error,
                "duration": r.duration,
            }
        )
        rows.append(row)
    columns = ["learner", "index", "configuration", "cv_accuracy", "holdout_accuracy", "status", "error", "duration"]
    return pd.DataFrame(rows, columns=None if rows else columns)
