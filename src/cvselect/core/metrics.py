#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Accuracy Metrics for Binary Classification

Small, dependency-light scoring helpers used by cross-validation, the grid
search and the final holdout evaluation:
- Correct-prediction counting (folds are aggregated by total correct / total rows)
- Accuracy
- 2x2 confusion matrix
"""

from typing import Optional, Sequence

import numpy as np

from .errors import InvalidArgument


def _as_pair(y_true, y_pred):
    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)
    if y_true.shape != y_pred.shape:
        raise InvalidArgument(
            f"y_true and y_pred must have the same shape, got {y_true.shape} and {y_pred.shape}"
        )
    return y_true, y_pred


def count_correct(y_true: np.ndarray, y_pred: np.ndarray) -> int:
    """Number of positions where the predicted label equals the true label."""
    y_true, y_pred = _as_pair(y_true, y_pred)
    return int(np.sum(y_true == y_pred))


def accuracy_score(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Fraction of correct predictions.

    Args:
        y_true: Ground truth labels
        y_pred: Predicted labels

    Returns:
        Accuracy score (0.0 to 1.0)

    Raises:
        InvalidArgument: lengths differ or there is nothing to score
    """
    y_true, y_pred = _as_pair(y_true, y_pred)
    if y_true.size == 0:
        raise InvalidArgument("accuracy is undefined for zero rows")
    return count_correct(y_true, y_pred) / float(y_true.size)


def confusion_matrix(
    y_true: np.ndarray, y_pred: np.ndarray, labels: Optional[Sequence[int]] = (0, 1)
) -> np.ndarray:
    """
    Confusion matrix with true labels on rows and predicted labels on columns.

    Args:
        y_true: Ground truth labels
        y_pred: Predicted labels
        labels: Label order for rows/columns (default binary 0, 1)

    Returns:
        Integer matrix of shape (len(labels), len(labels))
    """
    y_true, y_pred = _as_pair(y_true, y_pred)
    if labels is None:
        labels = sorted(set(y_true.tolist()) | set(y_pred.tolist()))

    label_to_idx = {label: i for i, label in enumerate(labels)}
    cm = np.zeros((len(labels), len(labels)), dtype=int)
    for true_label, pred_label in zip(y_true.tolist(), y_pred.tolist()):
        if true_label not in label_to_idx or pred_label not in label_to_idx:
            raise InvalidArgument(f"label pair ({true_label}, {pred_label}) not in {list(labels)}")
        cm[label_to_idx[true_label], label_to_idx[pred_label]] += 1
    return cm
