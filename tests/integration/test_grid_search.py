"""
Integration tests for the grid search engine.

Covers per-trial failure capture, reproducibility across worker counts,
per-trial timeouts and cooperative cancellation.
"""

import threading
import time

import numpy as np
import pytest

from cvselect.core.errors import InsufficientData, InvalidArgument
from cvselect.core.grid import HyperparameterGrid
from cvselect.core.scaling import FeatureScaler
from cvselect.experiments.hyperparameter_tuning import GridSearchEngine
from cvselect.experiments.results import TrialStatus
from cvselect.models.base import Learner
from cvselect.models.elastic_net import ElasticNetLearner
from cvselect.models.knn import KnnLearner
from cvselect.models.logistic_regression import LogisticLearner


class SleepyLearner(Learner):
    """Constant-label learner whose fit sleeps ``delay`` seconds."""

    name = "sleepy"
    hyperparameters = ("delay",)

    def _check(self, config):
        pass

    def _fit(self, X, y, config):
        time.sleep(config["delay"])
        return {"label": int(round(y.mean())), "n_features": X.shape[1]}

    def _predict(self, model, X):
        return np.full(X.shape[0], model["label"])

    def n_features(self, model):
        return model["n_features"]


class CancellingLearner(SleepyLearner):
    """Sets an event on the first fit of a chosen configuration."""

    name = "cancelling"

    def __init__(self, event, trigger_delay):
        self.event = event
        self.trigger_delay = trigger_delay

    def _fit(self, X, y, config):
        if config["delay"] == self.trigger_delay:
            self.event.set()
        return super()._fit(X, y, config)


class ExplodingLearner(SleepyLearner):
    """Raises a plain RuntimeError from the solver for one configuration."""

    name = "exploding"
    hyperparameters = ("x",)

    def _fit(self, X, y, config):
        if config["x"] == 1:
            raise RuntimeError("solver blew up")
        return {"label": int(round(y.mean())), "n_features": X.shape[1]}


class BrokenPredictLearner(ExplodingLearner):
    """Fits fine but cannot predict for one configuration."""

    name = "broken_predict"

    def _fit(self, X, y, config):
        return {"label": 0, "n_features": X.shape[1], "x": config["x"]}

    def _predict(self, model, X):
        if model["x"] == 1:
            raise KeyError("lost state")
        return super()._predict(model, X)



class CountingLearner(SleepyLearner):
    """Signals once a given number of fits has returned."""

    name = "counting"

    def __init__(self, fits_before_signal):
        self.remaining = fits_before_signal
        self.lock = threading.Lock()
        self.signal = threading.Event()

    def _fit(self, X, y, config):
        model = super()._fit(X, y, config)
        if config["delay"] < 0.5:
            with self.lock:
                self.remaining -= 1
                if self.remaining == 0:
                    self.signal.set()
        return model


class LateCancel:
    """Reports cancellation only after the first trial has had time to finish."""

    def __init__(self, learner):
        self.learner = learner

    def is_set(self):
        self.learner.signal.wait(5.0)
        time.sleep(0.1)
        return True


@pytest.fixture
def scaled_split(linear_split):
    stats = FeatureScaler.fit(linear_split["training"].features)
    return (
        FeatureScaler.transform_dataset(linear_split["training"], stats),
        FeatureScaler.transform_dataset(linear_split["holdout"], stats),
    )


class TestGridSearchEngine:

    def test_one_result_per_configuration(self, linear_split):
        engine = GridSearchEngine(k=5, seed=1)
        grid = HyperparameterGrid({"alpha": [0.0, 0.5, 1.0], "lambda": [0.001, 0.1]})
        results = engine.search(linear_split["training"], linear_split["holdout"], ElasticNetLearner(), grid)
        assert len(results) == 6
        assert [r.index for r in results] == list(range(6))
        assert [dict(r.configuration) for r in results] == [dict(c) for c in grid]
        for r in results:
            assert r.status is TrialStatus.OK
            assert 0.0 <= r.cv_accuracy <= 1.0
            assert 0.0 <= r.holdout_accuracy <= 1.0

    def test_empty_grid_for_logistic(self, linear_split):
        results = GridSearchEngine(k=10).search(linear_split["training"], linear_split["holdout"], LogisticLearner())
        assert len(results) == 1
        assert dict(results[0].configuration) == {}
        assert results[0].cv_accuracy >= 0.95

    def test_failed_configurations_are_kept(self, scaled_split):
        training, holdout = scaled_split
        grid = {"k": [1, 500, 5]}
        results = GridSearchEngine(k=5).search(training, holdout, KnnLearner(), grid)
        assert [r.status for r in results] == [TrialStatus.OK, TrialStatus.FAILED, TrialStatus.OK]
        failed = results[1]
        assert failed.cv_accuracy is None and failed.holdout_accuracy is None
        assert "FitFailure" in failed.error

    def test_rejected_hyperparameters_are_kept(self, linear_split):
        grid = {"alpha": [0.5, 2.0], "lambda": [0.1]}
        results = GridSearchEngine(k=5).search(
            linear_split["training"], linear_split["holdout"], ElasticNetLearner(), grid
        )
        assert [r.failed for r in results] == [False, True]
        assert "UnsupportedConfiguration" in results[1].error

    @pytest.mark.parametrize("max_workers", [1, 3])
    def test_unexpected_solver_error_is_a_failed_trial(self, linear_split, max_workers):
        results = GridSearchEngine(k=2, max_workers=max_workers).search(
            linear_split["training"], linear_split["holdout"], ExplodingLearner(), {"x": [0, 1, 2]}
        )
        assert [r.status for r in results] == [TrialStatus.OK, TrialStatus.FAILED, TrialStatus.OK]
        assert "FitFailure" in results[1].error and "solver blew up" in results[1].error
        assert results[0].cv_accuracy is not None and results[2].cv_accuracy is not None

    def test_prediction_error_is_a_failed_trial(self, linear_split):
        results = GridSearchEngine(k=2).search(
            linear_split["training"], linear_split["holdout"], BrokenPredictLearner(), {"x": [0, 1]}
        )
        assert [r.failed for r in results] == [False, True]
        assert "failed to predict" in results[1].error

    def test_non_converging_elastic_net_fails(self, linear_split):
        grid = {"alpha": [0.5], "lambda": [0.001]}
        results = GridSearchEngine(k=2).search(
            linear_split["training"], linear_split["holdout"], ElasticNetLearner(max_iter=5), grid
        )
        assert results[0].status is TrialStatus.FAILED
        assert "did not converge" in results[0].error

    def test_insufficient_rows_for_folds(self, linear_dataset):
        training, holdout = linear_dataset.subset(range(5)), linear_dataset.subset(range(5, 10))
        with pytest.raises(InsufficientData):
            GridSearchEngine(k=10).search(training, holdout, LogisticLearner())

    def test_invalid_fold_count(self, linear_split):
        with pytest.raises(InvalidArgument):
            GridSearchEngine().search(linear_split["training"], linear_split["holdout"], LogisticLearner(), k=1)

    def test_parallel_matches_sequential(self, scaled_split):
        training, holdout = scaled_split
        grid = {"k": [1, 3, 5, 7, 9, 11]}
        sequential = GridSearchEngine(k=5, seed=9, max_workers=1).search(training, holdout, KnnLearner(), grid)
        parallel = GridSearchEngine(k=5, seed=9, max_workers=4).search(training, holdout, KnnLearner(), grid)
        assert [(r.index, r.cv_accuracy, r.holdout_accuracy) for r in sequential] == [
            (r.index, r.cv_accuracy, r.holdout_accuracy) for r in parallel
        ]

    def test_run_trial_is_reproducible(self, scaled_split):
        training, holdout = scaled_split
        engine = GridSearchEngine(k=5, seed=3)
        a = engine.run_trial(0, HyperparameterGrid({"k": [1]}).configurations()[0], training, holdout, KnnLearner(), 5)
        b = engine.run_trial(0, HyperparameterGrid({"k": [1]}).configurations()[0], training, holdout, KnnLearner(), 5)
        assert a.cv_accuracy == b.cv_accuracy

    def test_trial_timeout(self, linear_split):
        engine = GridSearchEngine(k=2, max_workers=2, trial_timeout=0.3, poll_interval=0.01)
        grid = {"delay": [0.0, 1.0, 0.01]}
        start = time.monotonic()
        results = engine.search(linear_split["training"], linear_split["holdout"], SleepyLearner(), grid)
        assert time.monotonic() - start < 1.0
        assert [r.status for r in results] == [TrialStatus.OK, TrialStatus.TIMEOUT, TrialStatus.OK]
        assert results[1].cv_accuracy is None

    def test_cancel_keeps_completed_trials(self, linear_split):
        event = threading.Event()
        learner = CancellingLearner(event, trigger_delay=0.001)
        grid = {"delay": [0.0, 0.001, 0.002, 0.003]}
        results = GridSearchEngine(k=2).search(
            linear_split["training"], linear_split["holdout"], learner, grid, cancel_event=event
        )
        assert [r.index for r in results] == [0, 1]
        assert all(r.status is TrialStatus.OK for r in results)

    def test_cancel_collects_trials_finished_meanwhile(self, linear_split):
        # k=2 folds plus the refit: three fits per trial
        learner = CountingLearner(fits_before_signal=3)
        results = GridSearchEngine(k=2, max_workers=2).search(
            linear_split["training"], linear_split["holdout"], learner, {"delay": [0.01, 1.0]},
            cancel_event=LateCancel(learner),
        )
        assert [r.index for r in results] == [0]
        assert results[0].status is TrialStatus.OK

    def test_cancel_before_start(self, linear_split):
        event = threading.Event()
        event.set()
        results = GridSearchEngine(k=2, max_workers=2).search(
            linear_split["training"], linear_split["holdout"], SleepyLearner(), {"delay": [0.0, 0.01]},
            cancel_event=event,
        )
        assert results == []

    def test_engine_argument_validation(self):
        with pytest.raises(InvalidArgument):
            GridSearchEngine(max_workers=0)
        with pytest.raises(InvalidArgument):
            GridSearchEngine(trial_timeout=0)
