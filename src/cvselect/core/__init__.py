# Core components: data, splitting, scaling, grids, cross-validation, metrics

from .data import Dataset
from .splitting import RandomSplitter, Split, train_holdout_split
from .scaling import FeatureScaler, ScalingStatistics
from .grid import Configuration, HyperparameterGrid
from .cross_validation import CrossValidator, CVScore, cross_validate, kfold_indices
from .metrics import accuracy_score, confusion_matrix, count_correct

__all__ = [
    "Dataset",
    "RandomSplitter",
    "Split",
    "train_holdout_split",
    "FeatureScaler",
    "ScalingStatistics",
    "Configuration",
    "HyperparameterGrid",
    "CrossValidator",
    "CVScore",
    "cross_validate",
    "kfold_indices",
    "accuracy_score",
    "confusion_matrix",
    "count_correct",
]
