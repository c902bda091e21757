"""
cvselect: cross-validated model selection for binary classifiers.

Splits a cleaned dataset into training and holdout rows, grid-searches
hyperparameters for several learner families with k-fold cross-validation,
ranks the configurations by accuracy and checks the winners on the holdout set.

Key modules:
- core.splitting: reproducible train/holdout split
- core.scaling: z-score feature scaling
- core.cross_validation: unstratified k-fold accuracy
- models: logistic, elastic-net and kNN learners behind one interface
- experiments.hyperparameter_tuning: grid search engine
- experiments.ranking: result ranking
- experiments.experimental_pipeline: end-to-end orchestration
"""

import logging

from .config import ExperimentConfig, load_experiment_config
from .core import (
    CrossValidator,
    Dataset,
    FeatureScaler,
    HyperparameterGrid,
    RandomSplitter,
    train_holdout_split,
)
from .core.errors import (
    DegenerateFeature,
    EmptyInput,
    FitFailure,
    HarnessError,
    InsufficientData,
    InvalidArgument,
    UnsupportedConfiguration,
)
from .experiments import ExperimentalPipeline, GridSearchEngine, ResultRanker, TrialResult, TrialStatus
from .models import ElasticNetLearner, KnnLearner, Learner, LogisticLearner, get_learner_and_grid

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach a plain text stream handler to the package logger."""
    logger = logging.getLogger(__name__)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


__all__ = [
    "ExperimentConfig",
    "load_experiment_config",
    "Dataset",
    "RandomSplitter",
    "train_holdout_split",
    "FeatureScaler",
    "CrossValidator",
    "HyperparameterGrid",
    "Learner",
    "LogisticLearner",
    "ElasticNetLearner",
    "KnnLearner",
    "get_learner_and_grid",
    "GridSearchEngine",
    "ResultRanker",
    "TrialResult",
    "TrialStatus",
    "ExperimentalPipeline",
    "HarnessError",
    "InvalidArgument",
    "DegenerateFeature",
    "UnsupportedConfiguration",
    "InsufficientData",
    "FitFailure",
    "EmptyInput",
    "configure_logging",
]
