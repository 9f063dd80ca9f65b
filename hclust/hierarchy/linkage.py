"""Agglomerative linkage engine driven by Lance-Williams updates."""
from __future__ import annotations

import logging
import math
import time
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from hclust.config import REUSE_POLICIES, get_clustering_settings
from hclust.core.distance_table import DistanceTable
from hclust.errors import InvalidArgumentError, InvalidStateError, require_in_range
from hclust.hierarchy.criteria import LinkageCriterion
from hclust.hierarchy.models import LinkageResult, LinkageStep

logger = logging.getLogger(__name__)


class _LinkageRun:
    """Mutable state of one agglomeration; discarded once the run finishes."""

    def __init__(self, criterion: LinkageCriterion, table: DistanceTable, n_items: int) -> None:
        self.criterion = criterion
        self.table = table
        self.n_items = n_items
        self.cardinality: Dict[int, int] = {cluster_id: 1 for cluster_id in range(n_items)}
        self.steps: List[LinkageStep] = []
        self.next_cluster_id = n_items

    def select_closest_pair(self) -> Tuple[int, int]:
        """Closest active pair; ties go to the lexicographically smallest (id_1, id_2)."""
        ids = sorted(self.table.items())
        best_pair: Optional[Tuple[int, int]] = None
        best_distance = math.inf
        for pos, id_1 in enumerate(ids[:-1]):
            for id_2 in ids[pos + 1:]:
                distance = self.table.get_distance(id_1, id_2)
                if distance < best_distance or (best_pair is None and distance == math.inf):
                    best_distance = distance
                    best_pair = (id_1, id_2)
        if best_pair is None:
            raise InvalidStateError(
                "No comparable cluster pair among %d active clusters" % len(ids)
            )
        return best_pair

    def merge(self, cluster_i: int, cluster_j: int) -> LinkageStep:
        merged_id = self.next_cluster_id
        level = self.table.get_distance(cluster_i, cluster_j)
        ci = self.cardinality[cluster_i]
        cj = self.cardinality[cluster_j]

        for cluster_k in self.table.items():
            if cluster_k == cluster_i or cluster_k == cluster_j:
                continue
            distance = self.criterion.merge_distance(
                self.table.get_distance(cluster_i, cluster_k),
                self.table.get_distance(cluster_j, cluster_k),
                level,
                ci,
                cj,
                self.cardinality[cluster_k],
            )
            self.table.set_distance(merged_id, cluster_k, distance)

        self.table.set_distance(merged_id, merged_id, 0.0)
        self.table.remove_distances_of(cluster_i)
        self.table.remove_distances_of(cluster_j)

        del self.cardinality[cluster_i]
        del self.cardinality[cluster_j]
        self.cardinality[merged_id] = ci + cj

        step = LinkageStep(cluster_i, cluster_j, merged_id, ci + cj, level)
        self.steps.append(step)
        self.next_cluster_id += 1
        return step

    def run(self, target_cluster_count: int) -> LinkageResult:
        while self.table.size() > target_cluster_count:
            cluster_i, cluster_j = self.select_closest_pair()
            step = self.merge(cluster_i, cluster_j)
            logger.debug("merge %s", step)
        return LinkageResult(
            criterion=self.criterion,
            n_items=self.n_items,
            target_cluster_count=target_cluster_count,
            steps=tuple(self.steps),
        )


class Linkage:
    """Agglomerative clustering engine for one linkage criterion.

    Every call to `compute` works on fresh per-run state and returns a new,
    frozen `LinkageResult`. The latest result is also exposed through the
    engine itself (`len`, iteration, indexing, `last()`).

    `on_reuse` decides what a second `compute` does: "reset" replaces the
    latest result, "reject" raises InvalidStateError.
    """

    def __init__(
        self,
        criterion: Union[str, LinkageCriterion, None] = None,
        on_reuse: Optional[str] = None,
    ) -> None:
        settings = None
        if criterion is None or on_reuse is None:
            settings = get_clustering_settings()
        self.criterion = LinkageCriterion.from_name(criterion if criterion is not None else settings.linkage)
        policy = on_reuse if on_reuse is not None else settings.on_reuse
        if not isinstance(policy, str) or policy.lower() not in REUSE_POLICIES:
            raise InvalidArgumentError(
                f"on_reuse must be one of {', '.join(REUSE_POLICIES)}; received {on_reuse!r}"
            )
        self.on_reuse = policy.lower()
        self._result: Optional[LinkageResult] = None

    def compute(self, items: Sequence, target_cluster_count: int = 1) -> LinkageResult:
        """Agglomerate `items` until `target_cluster_count` clusters remain.

        Cluster ids 0..n-1 are the positions of `items`; merged clusters get
        n, n+1, ... in merge order.
        """
        if items is None:
            raise InvalidArgumentError("items must not be None")
        snapshot = list(items)
        target = self._check_request(len(snapshot), target_cluster_count)
        return self._run(DistanceTable.from_items(snapshot), len(snapshot), target)

    def compute_from_matrix(self, matrix, target_cluster_count: int = 1) -> LinkageResult:
        """Agglomerate from a precomputed square distance matrix (row i = cluster i)."""
        table = DistanceTable.from_matrix(matrix)
        target = self._check_request(table.size(), target_cluster_count)
        return self._run(table, table.size(), target)

    def _check_request(self, n_items: int, target_cluster_count: int) -> int:
        if self._result is not None and self.on_reuse == "reject":
            raise InvalidStateError(
                "Linkage already computed; create a new Linkage or use on_reuse='reset'"
            )
        if n_items == 0:
            raise InvalidArgumentError("items must not be empty")
        try:
            return require_in_range(target_cluster_count, "target_cluster_count", 1, n_items)
        except InvalidArgumentError:
            logger.warning(
                "Rejected linkage request: target_cluster_count=%r for %d items",
                target_cluster_count,
                n_items,
            )
            raise

    def _run(self, table: DistanceTable, n_items: int, target_cluster_count: int) -> LinkageResult:
        t_start = time.time()
        logger.info(
            "Computing %s linkage: %d items, target_cluster_count=%d",
            self.criterion,
            n_items,
            target_cluster_count,
        )
        result = _LinkageRun(self.criterion, table, n_items).run(target_cluster_count)
        self._result = result
        logger.info(
            "Linkage complete: criterion=%s steps=%d elapsed=%.3fs",
            self.criterion,
            len(result),
            time.time() - t_start,
        )
        return result

    @property
    def result(self) -> Optional[LinkageResult]:
        return self._result

    @property
    def steps(self) -> Tuple[LinkageStep, ...]:
        return self._result.steps if self._result is not None else ()

    @property
    def is_valid(self) -> bool:
        return len(self.steps) >= 1

    def last(self) -> LinkageStep:
        if not self.steps:
            raise InvalidStateError("Linkage has not produced any steps")
        return self.steps[-1]

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[LinkageStep]:
        return iter(self.steps)

    def __getitem__(self, nth: int) -> LinkageStep:
        return self.steps[nth]

    def __str__(self) -> str:
        lines = [f"Linkage: {self.criterion}"]
        lines.extend(str(step) for step in self.steps)
        return "\n".join(lines) + "\n"
