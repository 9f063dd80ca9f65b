"""Data models for agglomerative clustering results and dendrograms."""
from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Tuple

import numpy as np

from hclust.errors import InvalidStateError
from hclust.hierarchy.criteria import LinkageCriterion


@dataclass(frozen=True)
class LinkageStep:
    """One merge event of the agglomeration."""

    cluster_id_1: int
    cluster_id_2: int
    merged_cluster_id: int
    merged_cardinality: int  # Original items under the merged cluster
    level: float  # Distance between the pair just before the merge

    def __str__(self) -> str:
        return (
            f"LinkageStep{{{self.cluster_id_1} + {self.cluster_id_2} -> {self.merged_cluster_id}"
            f" (n={self.merged_cardinality}, level={self.level:.8f})}}"
        )


@dataclass(frozen=True)
class LinkageResult:
    """Frozen merge history of a single engine run."""

    criterion: Optional[LinkageCriterion]  # None for histories imported from a linkage matrix
    n_items: int
    target_cluster_count: int
    steps: Tuple[LinkageStep, ...] = ()

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[LinkageStep]:
        return iter(self.steps)

    def __getitem__(self, nth: int) -> LinkageStep:
        return self.steps[nth]

    @property
    def is_valid(self) -> bool:
        """True if at least one merge happened."""
        return len(self.steps) >= 1

    @property
    def is_complete(self) -> bool:
        """True if the agglomeration went all the way down to a single root."""
        return len(self.steps) == self.n_items - 1

    def last(self) -> LinkageStep:
        if not self.steps:
            raise InvalidStateError("linkage result has no steps")
        return self.steps[-1]

    def levels(self) -> List[float]:
        return [step.level for step in self.steps]

    def to_linkage_matrix(self) -> np.ndarray:
        """SciPy-format linkage matrix: rows of [id_1, id_2, level, cardinality]."""
        matrix = np.zeros((len(self.steps), 4), dtype=np.float64)
        for row, step in enumerate(self.steps):
            matrix[row] = (
                step.cluster_id_1,
                step.cluster_id_2,
                step.level,
                step.merged_cardinality,
            )
        return matrix

    def __str__(self) -> str:
        lines = [f"Linkage: {self.criterion or 'unknown'}"]
        lines.extend(str(step) for step in self.steps)
        return "\n".join(lines) + "\n"


@dataclass(eq=False)
class DendrogramNode:
    """A dendrogram node. Leaves have no children and carry the original item.

    Children are owned by their parent; the parent link is a weak reference
    used only for upward traversal. Children and items are set once while the
    dendrogram is built and are read-only afterwards.
    """

    cluster_id: int
    height: float
    _left: Optional["DendrogramNode"] = field(default=None, init=False, repr=False)
    _right: Optional["DendrogramNode"] = field(default=None, init=False, repr=False)
    _item: Any = field(default=None, init=False, repr=False)
    _decorated: bool = field(default=False, init=False, repr=False)
    _parent_ref: Optional[weakref.ReferenceType] = field(default=None, init=False, repr=False)

    @property
    def left(self) -> Optional["DendrogramNode"]:
        return self._left

    @property
    def right(self) -> Optional["DendrogramNode"]:
        return self._right

    @property
    def is_leaf(self) -> bool:
        return self._left is None and self._right is None

    @property
    def item(self) -> Any:
        if not self.is_leaf:
            raise InvalidStateError(f"Node {self.cluster_id} is not a leaf")
        return self._item

    @property
    def parent(self) -> Optional["DendrogramNode"]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def children(self) -> List["DendrogramNode"]:
        return [child for child in (self._left, self._right) if child is not None]

    def attach_children(self, left: "DendrogramNode", right: "DendrogramNode") -> None:
        if not self.is_leaf or self._decorated:
            raise InvalidStateError(f"Node {self.cluster_id} already has its contents")
        for child in (left, right):
            if child._parent_ref is not None:
                raise InvalidStateError(f"Node {child.cluster_id} already has a parent")
        self._left = left
        self._right = right
        left._parent_ref = weakref.ref(self)
        right._parent_ref = weakref.ref(self)

    def decorate(self, item: Any) -> None:
        if not self.is_leaf:
            raise InvalidStateError(f"Node {self.cluster_id} is not a leaf")
        if self._decorated:
            raise InvalidStateError(f"Leaf {self.cluster_id} already carries an item")
        self._item = item
        self._decorated = True

    def __str__(self) -> str:
        return f"DendrogramNode{{{self.cluster_id}}}"
