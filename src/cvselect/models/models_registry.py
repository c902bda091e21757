# models_registry.py
from typing import Any, Dict, List, Tuple

import numpy as np

from .base import Learner
from .elastic_net import ElasticNetLearner
from .knn import KnnLearner
from .logistic_regression import LogisticLearner
from ..core.errors import InvalidArgument
from ..core.grid import HyperparameterGrid

# ---------------- Hyperparameter grids ----------------

HYPERPARAMETER_GRIDS: Dict[str, Dict[str, List[Any]]] = {
    "logistic": {},
    "elastic_net": {
        "alpha": [0.0, 0.2, 0.4, 0.6, 0.8, 1.0],
        "lambda": [0.001, 0.1, 1.0],
    },
    "knn": {
        "k": [int(k) for k in np.arange(1, 97, 5)],
    },
}

_ALIASES = {
    "logistic": "logistic",
    "lr": "logistic",
    "logreg": "logistic",
    "elastic_net": "elastic_net",
    "elasticnet": "elastic_net",
    "enet": "elastic_net",
    "glmnet": "elastic_net",
    "knn": "knn",
}


def canonical_name(name: str) -> str:
    key = str(name).lower().replace("-", "_")
    if key not in _ALIASES:
        raise InvalidArgument(f"Unknown learner: {name!r}; choose from {available_learners()}")
    return _ALIASES[key]


def available_learners() -> List[str]:
    return list(HYPERPARAMETER_GRIDS)


def create_learner(name: str, random_state: int = 1414) -> Learner:
    name = canonical_name(name)
    if name == "logistic":
        return LogisticLearner()
    if name == "elastic_net":
        return ElasticNetLearner(random_state=random_state)
    return KnnLearner()


def get_learner_and_grid(name: str, random_state: int = 1414) -> Tuple[Learner, HyperparameterGrid]:
    """
    Return (learner, grid) for a learner family name or alias.
    """
    name = canonical_name(name)
    return create_learner(name, random_state), HyperparameterGrid(HYPERPARAMETER_GRIDS[name])
