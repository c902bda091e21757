# grid.py
from __future__ import annotations

import itertools
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Sequence, Tuple

import numpy as np

from .errors import InvalidArgument


class Configuration(Mapping):
    """Immutable, hashable hyperparameter name -> value mapping.

    Key order is the order the axes were declared in, so ``str(config)`` and
    ``dict(config)`` read the same way the grid does. The empty configuration is
    valid for learners without hyperparameters.
    """

    __slots__ = ("_items",)

    def __init__(self, values: Mapping = None, **kwargs: Any):
        merged = dict(values or {}, **kwargs)
        for key in merged:
            if not isinstance(key, str):
                raise InvalidArgument(f"hyperparameter names must be strings, got {key!r}")
        object.__setattr__(self, "_items", tuple(merged.items()))

    def __setattr__(self, name, value):
        raise AttributeError("Configuration is immutable")

    def __getitem__(self, key: str) -> Any:
        for k, v in self._items:
            if k == key:
                return v
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return (k for k, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __hash__(self) -> int:
        return hash(frozenset(self._items))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._items) == dict(other.items())
        return NotImplemented

    def __repr__(self) -> str:
        return f"Configuration({dict(self._items)!r})"

    def __str__(self) -> str:
        if not self._items:
            return "{}"
        return "{" + ", ".join(f"{k}={v}" for k, v in self._items) + "}"


def _plain(value: Any) -> Any:
    # numpy scalars from np.arange/linspace axes compare and print like Python numbers
    if isinstance(value, np.generic):
        return value.item()
    return value


class HyperparameterGrid:
    """Named, ordered axes expanding to their Cartesian product.

    ``len(grid)`` equals the product of the axis lengths; a grid with no axes
    expands to exactly one empty Configuration. The last axis varies fastest,
    matching ``itertools.product``.
    """

    def __init__(self, axes: Mapping = None, **kwargs: Sequence[Any]):
        merged = dict(axes or {}, **kwargs)
        self._axes: Dict[str, Tuple[Any, ...]] = {}
        for name, values in merged.items():
            if not isinstance(name, str) or not name:
                raise InvalidArgument(f"axis names must be non-empty strings, got {name!r}")
            if isinstance(values, (str, bytes)) or not hasattr(values, "__iter__"):
                raise InvalidArgument(f"axis {name!r} must be a sequence of values, got {values!r}")
            values = tuple(_plain(v) for v in values)
            if not values:
                raise InvalidArgument(f"axis {name!r} has no candidate values")
            try:
                distinct = len(set(values))
            except TypeError as exc:
                raise InvalidArgument(f"axis {name!r} values must be hashable scalars: {exc}") from exc
            if distinct != len(values):
                raise InvalidArgument(f"axis {name!r} has duplicate values: {list(values)}")
            self._axes[name] = values

    @property
    def axes(self) -> Dict[str, Tuple[Any, ...]]:
        return dict(self._axes)

    @property
    def axis_names(self) -> List[str]:
        return list(self._axes)

    def __len__(self) -> int:
        size = 1
        for values in self._axes.values():
            size *= len(values)
        return size

    def __iter__(self) -> Iterator[Configuration]:
        keys = list(self._axes)
        for values in itertools.product(*[self._axes[k] for k in keys]):
            yield Configuration(dict(zip(keys, values)))

    def configurations(self) -> List[Configuration]:
        return list(self)

    def __repr__(self) -> str:
        return f"HyperparameterGrid({self.axes!r})"

    @classmethod
    def coerce(cls, grid: Any) -> "HyperparameterGrid":
        if isinstance(grid, cls):
            return grid
        if grid is None:
            return cls()
        if isinstance(grid, Mapping):
            return cls(grid)
        raise InvalidArgument(f"cannot build a hyperparameter grid from {type(grid).__name__}")
