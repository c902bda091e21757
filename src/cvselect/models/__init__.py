# Learner families behind the common Learner interface

from .base import Learner
from .logistic_regression import LogisticLearner
from .elastic_net import ElasticNetLearner
from .knn import KnnLearner, KnnModel
from .models_registry import HYPERPARAMETER_GRIDS, available_learners, create_learner, get_learner_and_grid

__all__ = [
    "Learner",
    "LogisticLearner",
    "ElasticNetLearner",
    "KnnLearner",
    "KnnModel",
    "HYPERPARAMETER_GRIDS",
    "available_learners",
    "create_learner",
    "get_learner_and_grid",
]
