"""Full agglomerative clustering of a list of items."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple, Union

from hclust.errors import InvalidArgumentError
from hclust.hierarchy.criteria import LinkageCriterion
from hclust.hierarchy.linkage import Linkage
from hclust.hierarchy.models import LinkageResult


@dataclass(frozen=True)
class HierarchicalClusteringResult:
    """Snapshot of the clustered items paired with their merge history.

    `items[i]` is the item behind singleton cluster id `i`, so later changes to
    the caller's own list cannot desynchronise ids from items.
    """

    items: Tuple[Any, ...]
    linkage: LinkageResult

    @property
    def n_items(self) -> int:
        return len(self.items)

    def item_for(self, cluster_id: int) -> Any:
        """Original item behind a singleton cluster id."""
        if not 0 <= cluster_id < len(self.items):
            raise InvalidArgumentError(
                f"cluster id {cluster_id} is not a singleton (n_items={len(self.items)})"
            )
        return self.items[cluster_id]


class HierarchicalClustering:
    """Runs a complete agglomeration for the configured linkage criterion."""

    def __init__(self, linkage: Union[str, LinkageCriterion, None] = None) -> None:
        self._engine = Linkage(linkage, on_reuse="reset")

    @property
    def criterion(self) -> LinkageCriterion:
        return self._engine.criterion

    def cluster(self, items: Optional[Sequence]) -> HierarchicalClusteringResult:
        if items is None:
            raise InvalidArgumentError("items must not be None")
        snapshot = tuple(items)
        linkage_result = self._engine.compute(snapshot, 1)
        return HierarchicalClusteringResult(items=snapshot, linkage=linkage_result)
