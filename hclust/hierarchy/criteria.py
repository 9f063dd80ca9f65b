"""Lance-Williams update formulas for the supported linkage criteria.

Each criterion answers one question: once clusters i and j merge, how far is
the merged cluster from some other cluster k? The inputs are the three
pre-merge distances (dik, djk, dij) and the three pre-merge cardinalities
(ci, cj, ck).
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Union

from hclust.errors import InvalidArgumentError, UnimplementedError

MergeFormula = Callable[[float, float, float, int, int, int], float]

# SciPy linkage methods that are recognised but not provided here.
UNIMPLEMENTED_METHODS = frozenset({"centroid", "median"})

_WARD_RELATIVE_TOLERANCE = 1e-9


def single_merge_distance(dik: float, djk: float, dij: float, ci: int, cj: int, ck: int) -> float:
    return min(dik, djk)


def complete_merge_distance(dik: float, djk: float, dij: float, ci: int, cj: int, ck: int) -> float:
    return max(dik, djk)


def average_merge_distance(dik: float, djk: float, dij: float, ci: int, cj: int, ck: int) -> float:
    return (ci * dik + cj * djk) / (ci + cj)


def weighted_merge_distance(dik: float, djk: float, dij: float, ci: int, cj: int, ck: int) -> float:
    return (dik + djk) / 2.0


def ward_merge_distance(dik: float, djk: float, dij: float, ci: int, cj: int, ck: int) -> float:
    """Ward's minimum-variance update.

    Only meaningful when the seed distances are Euclidean. A negative radicand
    (non-Euclidean input) yields NaN rather than an exception.
    """
    total = float(ci + cj + ck)
    positive = ((ck + ci) / total) * dik * dik + ((ck + cj) / total) * djk * djk
    dist2 = positive - (ck / total) * dij * dij
    if dist2 < 0:
        # Rounding noise around zero (coincident centroids) is clipped.
        return 0.0 if dist2 >= -_WARD_RELATIVE_TOLERANCE * positive else math.nan
    return math.sqrt(dist2)


class LinkageCriterion(Enum):
    """Closed set of linkage criteria, each bound to its update formula."""

    SINGLE = ("single", single_merge_distance)
    COMPLETE = ("complete", complete_merge_distance)
    AVERAGE = ("average", average_merge_distance)
    WEIGHTED = ("weighted", weighted_merge_distance)
    WARD = ("ward", ward_merge_distance)

    def __init__(self, label: str, formula: MergeFormula) -> None:
        self.label = label
        self.formula = formula

    def merge_distance(self, dik: float, djk: float, dij: float, ci: int, cj: int, ck: int) -> float:
        return self.formula(dik, djk, dij, ci, cj, ck)

    @property
    def is_monotonic(self) -> bool:
        """True if merge levels never decrease along the merge sequence."""
        return self is not LinkageCriterion.WEIGHTED

    @classmethod
    def from_name(cls, name: Union[str, "LinkageCriterion"]) -> "LinkageCriterion":
        """Resolve a criterion from its (case-insensitive) name."""
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise InvalidArgumentError(f"Invalid linkage: {name!r}")
        key = name.strip().lower()
        for criterion in cls:
            if criterion.label == key:
                return criterion
        if key in UNIMPLEMENTED_METHODS:
            raise UnimplementedError(f"Linkage '{key}' is not implemented")
        raise InvalidArgumentError(f"Invalid linkage: {name}")

    def __str__(self) -> str:
        return self.label
