# config.py
"""
Experiment configuration.

An ExperimentConfig is immutable and validated on construction; every problem
found is reported at once in a single InvalidArgument. Configs can be built in
code, from a mapping, or from a YAML file:

    train_fraction: 0.8
    folds: 10
    seed: 1414
    learners: [logistic, elastic_net, knn]
    grids:
      knn: {k: [1, 6, 11]}
"""

import copy
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import yaml

from .core.errors import InvalidArgument
from .core.grid import HyperparameterGrid
from .models.models_registry import HYPERPARAMETER_GRIDS, canonical_name

logger = logging.getLogger(__name__)

RANKING_METRICS = ("cv_accuracy", "holdout_accuracy")


def _grid_key(name: str) -> str:
    # grids for custom Learner subclasses are keyed by their own name
    try:
        return canonical_name(name)
    except InvalidArgument:
        return str(name)


def _default_grids() -> Dict[str, Dict[str, List[Any]]]:
    return copy.deepcopy(HYPERPARAMETER_GRIDS)


@dataclass(frozen=True)
class ExperimentConfig:
    """
    Configuration for one model-selection experiment.
    """
    # Splitting
    train_fraction: float = 0.8
    seed: int = 1414

    # Cross-validation and search
    folds: int = 10
    max_workers: Optional[int] = 1
    trial_timeout: Optional[float] = None
    ranking_metric: str = "cv_accuracy"

    # Learner families and their grids
    learners: Tuple[str, ...] = ("logistic", "elastic_net", "knn")
    grids: Mapping[str, Mapping[str, Sequence[Any]]] = field(default_factory=_default_grids)

    def __post_init__(self):
        errors = self.validate()
        if errors:
            raise InvalidArgument(f"Configuration validation failed: {errors}")
        learners = tuple(canonical_name(name) for name in self.learners)
        # partial grids override the defaults family by family
        grids = _default_grids()
        grids.update({_grid_key(name): dict(axes or {}) for name, axes in self.grids.items()})
        object.__setattr__(self, "learners", learners)
        object.__setattr__(self, "grids", grids)

    def validate(self) -> List[str]:
        """Validate experiment parameters; returns a list of problems."""
        errors = []

        if isinstance(self.train_fraction, bool) or not isinstance(self.train_fraction, (int, float)) \
                or not 0 < self.train_fraction < 1:
            errors.append(f"train_fraction must be between 0 and 1: {self.train_fraction}")

        if isinstance(self.folds, bool) or not isinstance(self.folds, int) or self.folds < 2:
            errors.append(f"folds must be an integer >= 2: {self.folds}")

        if isinstance(self.seed, bool) or not isinstance(self.seed, int) or self.seed < 0:
            errors.append(f"seed must be a non-negative integer: {self.seed}")

        if self.max_workers is not None and (not isinstance(self.max_workers, int) or self.max_workers < 1):
            errors.append(f"max_workers must be a positive integer or None: {self.max_workers}")

        if self.trial_timeout is not None and (
            not isinstance(self.trial_timeout, (int, float)) or self.trial_timeout <= 0
        ):
            errors.append(f"trial_timeout must be positive or None: {self.trial_timeout}")

        if self.ranking_metric not in RANKING_METRICS:
            errors.append(f"ranking_metric must be one of {RANKING_METRICS}: {self.ranking_metric}")

        if isinstance(self.learners, str) or not self.learners:
            errors.append(f"learners must be a non-empty list of names: {self.learners!r}")
        else:
            for name in self.learners:
                try:
                    canonical_name(name)
                except InvalidArgument as exc:
                    errors.append(str(exc))

        if not isinstance(self.grids, Mapping):
            errors.append(f"grids must map learner names to axes: {self.grids!r}")
        else:
            for name, axes in self.grids.items():
                try:
                    HyperparameterGrid.coerce(axes)
                except InvalidArgument as exc:
                    errors.append(f"grid {name!r}: {exc}")

        return errors

    def grid_for(self, learner_name: str) -> HyperparameterGrid:
        return HyperparameterGrid(self.grids.get(_grid_key(learner_name), {}))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "train_fraction": self.train_fraction,
            "seed": self.seed,
            "folds": self.folds,
            "max_workers": self.max_workers,
            "trial_timeout": self.trial_timeout,
            "ranking_metric": self.ranking_metric,
            "learners": list(self.learners),
            "grids": copy.deepcopy(dict(self.grids)),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExperimentConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidArgument(f"Unknown configuration keys: {unknown}")
        kwargs = dict(data)
        if "learners" in kwargs and kwargs["learners"] is not None and not isinstance(kwargs["learners"], str):
            kwargs["learners"] = tuple(kwargs["learners"])
        if "grids" in kwargs and kwargs["grids"] is None:
            kwargs["grids"] = {}
        return cls(**kwargs)


def load_experiment_config(config_path: Union[str, Path]) -> ExperimentConfig:
    """
    Load an ExperimentConfig from a YAML file.

    Args:
        config_path: Path to a YAML mapping of ExperimentConfig fields

    Returns:
        Validated ExperimentConfig

    Raises:
        InvalidArgument: the file is missing, not valid YAML, or fails validation
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise InvalidArgument(f"Configuration file not found: {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InvalidArgument(f"Invalid YAML configuration: {e}") from e

    if not isinstance(data, dict):
        raise InvalidArgument(f"Configuration must be a mapping, got {type(data).__name__}")

    config = ExperimentConfig.from_dict(data)
    logger.info("loaded experiment config from %s: learners=%s", config_file, list(config.learners))
    return config
