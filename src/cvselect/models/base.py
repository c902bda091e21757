# base.py
from __future__ import annotations

import numbers
from abc import ABC, abstractmethod
from typing import Any, Mapping, Tuple

import numpy as np

from ..core.errors import FitFailure, HarnessError, InvalidArgument, UnsupportedConfiguration
from ..core.grid import Configuration


class Learner(ABC):
    """Capability contract every learner family implements.

    A learner is stateless: ``fit`` returns a new model object and never mutates
    the learner, so one instance can be shared by concurrent trials.

    Subclasses declare ``name``, ``hyperparameters`` and ``requires_scaling`` and
    implement ``_check``, ``_fit`` and ``_predict``.
    """

    name: str = "learner"
    hyperparameters: Tuple[str, ...] = ()
    requires_scaling: bool = False

    def validate(self, configuration: Mapping[str, Any]) -> Configuration:
        config = configuration if isinstance(configuration, Configuration) else Configuration(configuration)
        unknown = [key for key in config if key not in self.hyperparameters]
        if unknown:
            raise UnsupportedConfiguration(
                f"{self.name} does not accept hyperparameter(s) {unknown}; "
                f"expected {list(self.hyperparameters)}"
            )
        missing = [key for key in self.hyperparameters if key not in config]
        if missing:
            raise UnsupportedConfiguration(f"{self.name} requires hyperparameter(s) {missing}")
        self._check(config)
        return config

    def fit(self, features: np.ndarray, labels: np.ndarray, configuration: Mapping[str, Any]) -> Any:
        config = self.validate(configuration)
        X = np.asarray(features, dtype=float)
        y = np.asarray(labels, dtype=int)
        if X.ndim != 2 or X.shape[0] != y.shape[0]:
            raise InvalidArgument(f"cannot fit on features {X.shape} and labels {y.shape}")
        if X.shape[0] == 0:
            raise FitFailure(f"{self.name} cannot be fitted on zero rows")
        try:
            return self._fit(X, y, config)
        except HarnessError:
            raise
        except Exception as exc:
            # solver errors of any type become per-trial failures
            raise FitFailure(f"{self.name} {config} failed to fit: {exc}") from exc

    def predict(self, model: Any, features: np.ndarray) -> np.ndarray:
        X = np.asarray(features, dtype=float)
        if X.ndim == 1:
            X = X.reshape(1, -1)
        expected = self.n_features(model)
        if X.shape[1] != expected:
            raise InvalidArgument(f"model was fitted on {expected} features, got {X.shape[1]}")
        try:
            predicted = self._predict(model, X)
        except HarnessError:
            raise
        except Exception as exc:
            raise FitFailure(f"{self.name} failed to predict: {exc}") from exc
        return np.asarray(predicted, dtype=int)

    def predict_label(self, model: Any, feature_vector: np.ndarray) -> int:
        return int(self.predict(model, np.asarray(feature_vector, dtype=float).reshape(1, -1))[0])

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    @abstractmethod
    def _check(self, config: Configuration) -> None:
        """Raise UnsupportedConfiguration if a value is outside its domain."""

    @abstractmethod
    def _fit(self, X: np.ndarray, y: np.ndarray, config: Configuration) -> Any:
        ...

    @abstractmethod
    def _predict(self, model: Any, X: np.ndarray) -> np.ndarray:
        ...

    @abstractmethod
    def n_features(self, model: Any) -> int:
        ...


def is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and np.isfinite(value)


def is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)
