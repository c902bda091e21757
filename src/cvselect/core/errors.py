# errors.py
"""Error taxonomy for the model-selection harness.

InvalidArgument, DegenerateFeature, InsufficientData and EmptyInput are fatal for
the operation that raised them. UnsupportedConfiguration and FitFailure are
recovered per trial by the grid search and recorded on the TrialResult.
"""


class HarnessError(Exception):
    """Base class for every error raised by cvselect."""


class InvalidArgument(HarnessError, ValueError):
    """Bad split fraction, fold count, grid axis or dataset shape."""


class DegenerateFeature(HarnessError, ValueError):
    """A feature column has zero standard deviation and cannot be scaled."""

    def __init__(self, column: int, message: str = None):
        self.column = column
        super().__init__(message or f"feature column {column} has zero standard deviation")


class UnsupportedConfiguration(HarnessError, ValueError):
    """A hyperparameter is unknown to the learner or outside its accepted domain."""


class InsufficientData(HarnessError, ValueError):
    """Too few rows for the requested fold count or split."""


class FitFailure(HarnessError, RuntimeError):
    """A learner's fitting procedure raised or did not produce a usable model."""


class EmptyInput(HarnessError, ValueError):
    """An operation that needs at least one result was given none."""
