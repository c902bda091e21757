# splitting.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from .data import Dataset
from .errors import InsufficientData, InvalidArgument

logger = logging.getLogger(__name__)

SeedLike = Union[int, np.random.Generator]


@dataclass(frozen=True, eq=False)
class Split:
    train_indices: np.ndarray
    holdout_indices: np.ndarray

    @property
    def n_train(self) -> int:
        return int(self.train_indices.size)

    @property
    def n_holdout(self) -> int:
        return int(self.holdout_indices.size)

    def apply(self, dataset: Dataset) -> Tuple[Dataset, Dataset]:
        return dataset.subset(self.train_indices), dataset.subset(self.holdout_indices)


def _rng(seed: SeedLike) -> np.random.Generator:
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def train_holdout_split(dataset_size: int, train_fraction: float = 0.8, seed: SeedLike = 1414) -> Split:
    """Shuffle ``range(dataset_size)`` and cut it into training and holdout indices.

    The first ``round(dataset_size * train_fraction)`` shuffled indices (half rounds
    up) become training rows. Same size, fraction and integer seed always give the
    same partition.
    """
    if not 0.0 < train_fraction < 1.0:
        raise InvalidArgument(f"train_fraction must be in (0, 1), got {train_fraction}")
    if int(dataset_size) != dataset_size or dataset_size <= 0:
        raise InvalidArgument(f"dataset_size must be a positive integer, got {dataset_size}")
    dataset_size = int(dataset_size)

    n_train = int(np.floor(dataset_size * train_fraction + 0.5))
    if n_train == 0 or n_train == dataset_size:
        raise InsufficientData(
            f"{dataset_size} rows cannot be split {train_fraction:.2f}/{1 - train_fraction:.2f} "
            f"with both sides non-empty"
        )

    order = _rng(seed).permutation(dataset_size)
    train_idx = np.sort(order[:n_train])
    holdout_idx = np.sort(order[n_train:])
    train_idx.setflags(write=False)
    holdout_idx.setflags(write=False)
    logger.info("split %d rows -> %d train / %d holdout", dataset_size, n_train, dataset_size - n_train)
    return Split(train_idx, holdout_idx)


class RandomSplitter:
    """Reproducible train/holdout partitioner with a fixed training fraction."""

    def __init__(self, train_fraction: float = 0.8):
        if not 0.0 < train_fraction < 1.0:
            raise InvalidArgument(f"train_fraction must be in (0, 1), got {train_fraction}")
        self.train_fraction = train_fraction

    def split(self, dataset_size: int, seed: SeedLike) -> Split:
        return train_holdout_split(dataset_size, self.train_fraction, seed)

    def split_dataset(self, dataset: Dataset, seed: SeedLike) -> Tuple[Split, Dataset, Dataset]:
        split = self.split(dataset.n_rows, seed)
        training, holdout = split.apply(dataset)
        return split, training, holdout
