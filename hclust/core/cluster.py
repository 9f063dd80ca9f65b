"""Flat cluster produced by cutting a dendrogram."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List

from hclust.core.clusterable import clusterable_label
from hclust.errors import InvalidArgumentError


@dataclass
class Cluster:
    """A cluster identifier plus the original items it groups."""

    id: int  # Dendrogram cluster id of the node this cluster was cut at
    members: List[Any] = field(default_factory=list)

    def add_member(self, member: Any) -> None:
        self.members.append(member)

    def add_members(self, members: Iterable[Any]) -> None:
        if members is None:
            raise InvalidArgumentError("members must not be None")
        self.members.extend(members)

    @property
    def size(self) -> int:
        return len(self.members)

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.members)

    def __str__(self) -> str:
        lines = [f"Cluster Id = {self.id}", f"Members ({self.size}) = {{"]
        lines.extend(f"\t{clusterable_label(member)}" for member in self.members)
        lines.append("}")
        return "\n".join(lines) + "\n"
