"""Symmetric, mutable table of distances between cluster identifiers."""
from __future__ import annotations

import math
from typing import Dict, Hashable, Iterable, Optional, Sequence, Set

import numpy as np

from hclust.errors import InvalidArgumentError

# Returned for pairs with no recorded distance. NaN never compares smaller
# than anything, so it is never picked as a closest pair.
NOT_AVAILABLE = math.nan


def is_available(distance: float) -> bool:
    return not math.isnan(distance)


class DistanceTable:
    """Mapping from unordered identifier pairs to a distance.

    Every `set_distance(a, b, d)` is stored under both (a, b) and (b, a), so
    lookups never depend on argument order.
    """

    def __init__(self) -> None:
        self._rows: Dict[Hashable, Dict[Hashable, float]] = {}

    @classmethod
    def from_items(cls, items: Sequence) -> "DistanceTable":
        """Table keyed by positional index, seeded from `clusterable_distance`."""
        if items is None:
            raise InvalidArgumentError("items must not be None")
        table = cls()
        n_items = len(items)
        for i in range(n_items):
            for j in range(i, n_items):
                table.set_distance(i, j, float(items[i].clusterable_distance(items[j])))
        return table

    @classmethod
    def from_matrix(cls, matrix) -> "DistanceTable":
        """Table keyed by row index from a square, symmetric distance matrix."""
        if matrix is None:
            raise InvalidArgumentError("matrix must not be None")
        values = np.asarray(matrix, dtype=np.float64)
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise InvalidArgumentError(
                "distance matrix must be square; received shape %s" % (values.shape,)
            )
        if not np.allclose(values, values.T, equal_nan=True):
            raise InvalidArgumentError("distance matrix must be symmetric")
        table = cls()
        n_items = values.shape[0]
        for i in range(n_items):
            for j in range(i, n_items):
                table.set_distance(i, j, float(values[i, j]))
        return table

    def set_distance(self, a: Hashable, b: Hashable, distance: float) -> None:
        self._rows.setdefault(a, {})[b] = distance
        self._rows.setdefault(b, {})[a] = distance

    def get_distance(self, a: Hashable, b: Hashable) -> float:
        """Stored distance between `a` and `b`, or NOT_AVAILABLE if none was recorded."""
        return self._rows.get(a, {}).get(b, NOT_AVAILABLE)

    def remove_distances_of(self, item: Hashable) -> None:
        """Drop `item`'s row and every reference to it held by the remaining rows."""
        row = self._rows.pop(item, None)
        if row is None:
            return
        for other in row:
            other_row = self._rows.get(other)
            if other_row is not None:
                other_row.pop(item, None)

    def items(self) -> Set[Hashable]:
        """Identifiers that currently own a row."""
        return set(self._rows)

    def size(self) -> int:
        return len(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, item: Hashable) -> bool:
        return item in self._rows

    def format_table(self, ids: Optional[Iterable[Hashable]] = None) -> str:
        """Aligned text dump, one row per identifier (sorted when possible)."""
        keys = list(ids) if ids is not None else list(self._rows)
        try:
            keys.sort()
        except TypeError:
            pass  # mixed identifier types keep insertion order
        if not keys:
            return ""
        width = max(len(str(key)) for key in keys)
        lines = []
        for row_key in keys:
            cells = " ".join(" %4.3f " % self.get_distance(row_key, col_key) for col_key in keys)
            lines.append("%s  %s" % (str(row_key).rjust(width), cells))
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.format_table()

    def __repr__(self) -> str:
        return f"DistanceTable(size={self.size()})"
