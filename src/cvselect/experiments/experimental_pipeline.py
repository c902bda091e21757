#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Model-Selection Experiment Pipeline

Coordinates one experiment end to end:
1. Reproducible train/holdout split
2. Feature scaling (fitted on training rows only, once) for learners that need it
3. Grid search with k-fold cross-validation per learner family
4. Ranking and selection of the best configuration per family
5. Final holdout evaluation of each selected configuration

Holdout accuracy is reported for every trial and again for each winner. The
holdout set therefore also informs model choice; read it accordingly.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from ..config import ExperimentConfig
from ..core.data import Dataset
from ..core.errors import EmptyInput
from ..core.grid import Configuration
from ..core.metrics import accuracy_score, confusion_matrix
from ..core.scaling import FeatureScaler, ScalingStatistics
from ..core.splitting import RandomSplitter, Split
from ..models.base import Learner
from ..models.models_registry import create_learner
from .hyperparameter_tuning import GridSearchEngine
from .ranking import ResultRanker
from .results import TrialResult, results_to_frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class FinalEvaluation:
    """Selected configuration of one learner family, refitted on all training rows."""

    learner: str
    configuration: Configuration
    cv_accuracy: float
    holdout_accuracy: float
    confusion: np.ndarray
    trial: TrialResult


@dataclass(eq=False)
class ExperimentReport:
    split: Split
    scaling: Optional[ScalingStatistics]
    trials: List[TrialResult] = field(default_factory=list)
    finals: Dict[str, FinalEvaluation] = field(default_factory=dict)
    ranking_metric: str = "cv_accuracy"

    def trials_for(self, learner_name: str) -> List[TrialResult]:
        return [t for t in self.trials if t.learner == learner_name]

    def failed_trials(self) -> List[TrialResult]:
        return [t for t in self.trials if t.failed]

    def to_frame(self) -> pd.DataFrame:
        return results_to_frame(self.trials)

    def best_overall(self) -> FinalEvaluation:
        if not self.finals:
            raise EmptyInput("no learner family produced a successful trial")
        winner = ResultRanker(self.ranking_metric).best([f.trial for f in self.finals.values()])
        return self.finals[winner.learner]


class ExperimentalPipeline:
    """
    Split once, scale once, grid-search each learner family, evaluate winners.
    """

    def __init__(self, config: ExperimentConfig = None):
        self.config = config or ExperimentConfig()
        self.splitter = RandomSplitter(self.config.train_fraction)
        self.engine = GridSearchEngine(
            k=self.config.folds,
            seed=self.config.seed,
            max_workers=self.config.max_workers,
            trial_timeout=self.config.trial_timeout,
        )
        self.ranker = ResultRanker(self.config.ranking_metric)

    def resolve_learners(self, learners: Optional[Iterable[Union[str, Learner]]] = None) -> List[Learner]:
        resolved = []
        for item in learners if learners is not None else self.config.learners:
            if isinstance(item, Learner):
                resolved.append(item)
            else:
                resolved.append(create_learner(item, random_state=self.config.seed))
        return resolved

    def prepare(self, dataset: Dataset, learners: List[Learner]) -> Tuple[Split, Dataset, Dataset, Optional[ScalingStatistics]]:
        split, training, holdout = self.splitter.split_dataset(dataset, self.config.seed)
        stats = None
        if any(learner.requires_scaling for learner in learners):
            stats = FeatureScaler.fit(training.features)
            logger.info("fitted scaling statistics on %d training rows", training.n_rows)
        return split, training, holdout, stats

    def run(
        self,
        dataset: Dataset,
        learners: Optional[Iterable[Union[str, Learner]]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ExperimentReport:
        """
        Run the full experiment.

        Args:
            dataset: Cleaned features + binary labels
            learners: Learner names or instances (default: ``config.learners``)
            cancel_event: Stops the current search; completed trials are kept

        Returns:
            ExperimentReport with every trial and one FinalEvaluation per family
            that had at least one successful trial
        """
        learners = self.resolve_learners(learners)
        split, training, holdout, stats = self.prepare(dataset, learners)
        scaled_training = scaled_holdout = None
        if stats is not None:
            scaled_training = FeatureScaler.transform_dataset(training, stats)
            scaled_holdout = FeatureScaler.transform_dataset(holdout, stats)

        report = ExperimentReport(split=split, scaling=stats, ranking_metric=self.config.ranking_metric)
        for learner in learners:
            if cancel_event is not None and cancel_event.is_set():
                logger.warning("experiment cancelled before %s", learner.name)
                break
            tr, ho = (scaled_training, scaled_holdout) if learner.requires_scaling else (training, holdout)
            trials = self.engine.search(tr, ho, learner, self.config.grid_for(learner.name), cancel_event=cancel_event)
            report.trials.extend(trials)

            try:
                chosen = self.ranker.best(trials)
            except EmptyInput as exc:
                logger.warning("no configuration selected for %s: %s", learner.name, exc)
                continue
            report.finals[learner.name] = self.evaluate_final(learner, chosen, tr, ho)

        return report

    def evaluate_final(self, learner: Learner, trial: TrialResult, training: Dataset, holdout: Dataset) -> FinalEvaluation:
        """Refit the chosen configuration on all training rows and score the holdout."""
        model = learner.fit(training.features, training.labels, trial.configuration)
        y_pred = learner.predict(model, holdout.features)
        holdout_acc = accuracy_score(holdout.labels, y_pred)
        logger.info(
            "selected %s %s: cv_acc=%.4f holdout_acc=%.4f",
            learner.name, trial.configuration, trial.cv_accuracy, holdout_acc,
        )
        return FinalEvaluation(
            learner=learner.name,
            configuration=trial.configuration,
            cv_accuracy=trial.cv_accuracy,
            holdout_accuracy=holdout_acc,
            confusion=confusion_matrix(holdout.labels, y_pred),
            trial=trial,
        )
