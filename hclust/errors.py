"""Exception taxonomy for the clustering engine."""
from __future__ import annotations

import operator
from numbers import Integral


class HClustError(Exception):
    """Base class for every error raised by hclust."""


class InvalidArgumentError(HClustError, ValueError):
    """Raised when a caller supplies an unusable argument (empty items, bad counts, unknown names)."""


class OutOfRangeError(InvalidArgumentError):
    """Raised when a numeric argument falls outside its permitted interval."""


class InvalidStateError(HClustError, RuntimeError):
    """Raised when an object is asked to do something its current state does not allow."""


class UnimplementedError(HClustError, NotImplementedError):
    """Raised for variants that are recognised but intentionally not provided."""


def require_in_range(value: Integral, name: str, low: int, high: int) -> int:
    """Return `value` as a plain int if `low <= value <= high`, else raise OutOfRangeError.

    Any integral type is accepted (NumPy integers included); bools are not.
    """
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidArgumentError(f"{name} must be an integer; received {value!r}")
    value = operator.index(value)
    if value < low or value > high:
        raise OutOfRangeError(f"{name} must be in [{low}, {high}]; received {value}")
    return value
