"""Protocol for objects the engine can cluster."""
from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T", bound="Clusterable")


@runtime_checkable
class Clusterable(Protocol):
    """An item that can report its distance to another item of the same type.

    Distances must be non-negative and symmetric. The engine never looks at
    anything else on the item.
    """

    def clusterable_distance(self, other: Any) -> float:
        ...


def clusterable_label(item: Any) -> str:
    """Human-readable label for `item`, preferring its own `clusterable_label()`."""
    label = getattr(item, "clusterable_label", None)
    if callable(label):
        return str(label())
    return str(item)
