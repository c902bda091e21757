#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Hyperparameter Grid Search

This module drives k-fold cross-validation over every configuration of a
hyperparameter grid for one learner family, and scores each configuration
directly on the holdout set as well.

Features:
- Cartesian-product grid expansion, results in enumeration order
- Per-trial failure capture (bad hyperparameters, fitting errors)
- Optional thread-pool execution with a per-trial timeout
- Cooperative cancellation that keeps already-completed trials
- Independent, reproducible fold assignment per trial (master seed + trial index)
"""

import logging
import os
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, Dict, List, Optional, Set

import numpy as np

from ..core.cross_validation import CrossValidator
from ..core.data import Dataset
from ..core.errors import FitFailure, InsufficientData, InvalidArgument, UnsupportedConfiguration
from ..core.grid import Configuration, HyperparameterGrid
from ..core.metrics import accuracy_score
from ..models.base import Learner
from .results import TrialResult, TrialStatus

logger = logging.getLogger(__name__)


class TrialTimeout(Exception):
    """Marker used to build the error message of a timed-out trial."""


class GridSearchEngine:
    """
    Grid search over one learner family with CV and holdout accuracy per trial.

    Trials are independent. Each one derives its own generator from
    ``(seed, trial index)``, fits its own models, and only reads the shared
    training/holdout arrays, so trials can run on a thread pool without locks.
    """

    def __init__(
        self,
        k: int = 10,
        seed: int = 1414,
        max_workers: Optional[int] = 1,
        trial_timeout: Optional[float] = None,
        poll_interval: float = 0.05,
    ):
        """
        Initialize grid search engine.

        Args:
            k: Number of cross-validation folds
            seed: Master seed; trial ``i`` uses ``default_rng([seed, i])`` for its folds
            max_workers: Worker threads (1 = sequential, None = one per CPU)
            trial_timeout: Seconds after which a running trial is marked TIMEOUT
            poll_interval: Seconds between checks for timeouts and cancellation
        """
        if max_workers is not None and max_workers < 1:
            raise InvalidArgument(f"max_workers must be >= 1, got {max_workers}")
        if trial_timeout is not None and trial_timeout <= 0:
            raise InvalidArgument(f"trial_timeout must be > 0, got {trial_timeout}")
        self.k = k
        self.seed = seed
        self.max_workers = max_workers
        self.trial_timeout = trial_timeout
        self.poll_interval = poll_interval

    def search(
        self,
        training: Dataset,
        holdout: Dataset,
        learner: Learner,
        grid: Any = None,
        k: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[TrialResult]:
        """
        Evaluate every configuration of ``grid`` for ``learner``.

        Args:
            training: Rows used for cross-validation and the holdout refit
            holdout: Rows scored by the model refitted on all of ``training``
            learner: Learner family to tune
            grid: HyperparameterGrid or ``{axis: [values]}`` mapping (None = empty grid)
            k: Fold count, defaults to the engine's ``k``
            cancel_event: When set, unfinished trials are abandoned

        Returns:
            One TrialResult per completed configuration, in grid enumeration order

        Raises:
            InvalidArgument: k < 2 or training/holdout dimensionality differ
            InsufficientData: k exceeds the training rows or the holdout is empty
        """
        grid = HyperparameterGrid.coerce(grid)
        k = self.k if k is None else k
        self._check_inputs(training, holdout, k)

        configurations = grid.configurations()
        workers = self._resolve_workers(len(configurations))
        logger.info(
            "grid search %s: %d configuration(s), %d-fold CV, %d train / %d holdout rows, workers=%d",
            learner.name, len(configurations), k, training.n_rows, holdout.n_rows, workers,
        )

        if workers == 1 and self.trial_timeout is None:
            results = self._run_sequential(configurations, training, holdout, learner, k, cancel_event)
        else:
            results = self._run_parallel(configurations, training, holdout, learner, k, cancel_event, workers)

        results.sort(key=lambda r: r.index)
        n_failed = sum(r.failed for r in results)
        logger.info(
            "grid search %s finished: %d/%d trial(s) completed, %d failed",
            learner.name, len(results), len(configurations), n_failed,
        )
        return results

    def run_trial(
        self,
        index: int,
        configuration: Configuration,
        training: Dataset,
        holdout: Dataset,
        learner: Learner,
        k: int,
    ) -> TrialResult:
        """Cross-validate one configuration, then refit on all training rows and score the holdout."""
        start = time.perf_counter()
        try:
            config = learner.validate(configuration)
            rng = np.random.default_rng([self.seed, index])
            cv_acc = CrossValidator(k).evaluate(training.features, training.labels, learner, config, rng)
            model = learner.fit(training.features, training.labels, config)
            holdout_acc = accuracy_score(holdout.labels, learner.predict(model, holdout.features))
        except (UnsupportedConfiguration, FitFailure) as exc:
            duration = time.perf_counter() - start
            logger.warning("[%s #%d %s] trial failed: %s", learner.name, index, configuration, exc)
            return TrialResult.failure(learner.name, configuration, index, exc, duration=duration)

        duration = time.perf_counter() - start
        logger.info(
            "[%s #%d %s] cv_acc=%.4f holdout_acc=%.4f (%.2fs)",
            learner.name, index, config, cv_acc, holdout_acc, duration,
        )
        return TrialResult(
            learner=learner.name,
            configuration=config,
            index=index,
            cv_accuracy=float(cv_acc),
            holdout_accuracy=float(holdout_acc),
            duration=duration,
        )

    # ---------------- internal ----------------

    @staticmethod
    def _check_inputs(training: Dataset, holdout: Dataset, k: int) -> None:
        if k < 2:
            raise InvalidArgument(f"k-fold cross-validation needs k >= 2, got {k}")
        if k > training.n_rows:
            raise InsufficientData(f"cannot make {k} folds from {training.n_rows} training rows")
        if holdout.n_rows == 0:
            raise InsufficientData("holdout set is empty")
        if training.n_features != holdout.n_features:
            raise InvalidArgument(
                f"training has {training.n_features} features but holdout has {holdout.n_features}"
            )

    def _resolve_workers(self, n_trials: int) -> int:
        cpu = os.cpu_count() or 1
        if self.max_workers is None:
            return max(1, min(cpu, n_trials))
        return max(1, min(self.max_workers, n_trials))

    def _run_sequential(self, configurations, training, holdout, learner, k, cancel_event) -> List[TrialResult]:
        results = []
        for index, configuration in enumerate(configurations):
            if cancel_event is not None and cancel_event.is_set():
                logger.warning(
                    "grid search %s cancelled after %d/%d trial(s)", learner.name, len(results), len(configurations)
                )
                break
            results.append(self.run_trial(index, configuration, training, holdout, learner, k))
        return results

    def _run_parallel(self, configurations, training, holdout, learner, k, cancel_event, workers) -> List[TrialResult]:
        started: Dict[int, float] = {}

        def task(index: int, configuration: Configuration) -> TrialResult:
            started[index] = time.monotonic()
            return self.run_trial(index, configuration, training, holdout, learner, k)

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix=f"grid-{learner.name}")
        futures: Dict[Future, int] = {
            executor.submit(task, index, configuration): index
            for index, configuration in enumerate(configurations)
        }
        pending: Set[Future] = set(futures)
        stuck: Set[Future] = set()
        results: List[TrialResult] = []

        try:
            while pending:
                if cancel_event is not None and cancel_event.is_set():
                    # keep trials that finished before the cancel was seen
                    finished = [f for f in pending if f.done() and not f.cancelled()]
                    for future in finished:
                        pending.discard(future)
                        results.append(future.result())
                    logger.warning(
                        "grid search %s cancelled after %d/%d trial(s)",
                        learner.name, len(results), len(configurations),
                    )
                    break

                done, pending = wait(pending, timeout=self.poll_interval, return_when=FIRST_COMPLETED)
                for future in done:
                    results.append(future.result())

                if self.trial_timeout is None:
                    continue
                now = time.monotonic()
                for future in list(pending):
                    index = futures[future]
                    t0 = started.get(index)
                    if t0 is not None and now - t0 > self.trial_timeout:
                        pending.discard(future)
                        stuck.add(future)
                        results.append(self._timeout_result(learner, configurations[index], index, now - t0))

                stuck = {f for f in stuck if not f.done()}
                if pending and len(stuck) >= workers:
                    # every worker is held by a timed-out fit; queued trials can never start
                    for future in list(pending):
                        if future.cancel():
                            pending.discard(future)
                            index = futures[future]
                            results.append(
                                self._timeout_result(
                                    learner, configurations[index], index, 0.0,
                                    reason="no free worker, all are held by timed-out trials",
                                )
                            )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        return results

    def _timeout_result(
        self, learner: Learner, configuration: Configuration, index: int, elapsed: float, reason: str = None
    ) -> TrialResult:
        reason = reason or f"exceeded {self.trial_timeout}s"
        logger.warning("[%s #%d %s] trial timed out: %s", learner.name, index, configuration, reason)
        return TrialResult.failure(
            learner.name,
            configuration,
            index,
            TrialTimeout(reason),
            status=TrialStatus.TIMEOUT,
            duration=elapsed,
        )
