# Experiment components: grid search, ranking, orchestration

from .results import TrialResult, TrialStatus, results_to_frame
from .ranking import ResultRanker
from .hyperparameter_tuning import GridSearchEngine
from .experimental_pipeline import ExperimentalPipeline, ExperimentReport, FinalEvaluation

__all__ = [
    "TrialResult",
    "TrialStatus",
    "results_to_frame",
    "ResultRanker",
    "GridSearchEngine",
    "ExperimentalPipeline",
    "ExperimentReport",
    "FinalEvaluation",
]
