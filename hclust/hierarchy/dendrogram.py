"""Dendrogram built from a complete merge history, with cluster-count cuts."""
from __future__ import annotations

import heapq
import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from scipy.cluster.hierarchy import is_valid_linkage

from hclust.errors import InvalidArgumentError, InvalidStateError, require_in_range
from hclust.hierarchy.models import DendrogramNode, LinkageResult, LinkageStep
from hclust.hierarchy.result import HierarchicalClusteringResult

logger = logging.getLogger(__name__)


class Dendrogram:
    """Binary merge tree over the items of a clustering result.

    Leaves are the original items (cluster ids 0..n-1, height 0); every
    internal node is one merge, at the height the merge happened.
    """

    def __init__(self, clustering_result: HierarchicalClusteringResult) -> None:
        if clustering_result is None:
            raise InvalidArgumentError("clustering_result must not be None")
        self.clustering_result = clustering_result
        self._nodes: Dict[int, DendrogramNode] = {}
        self._root = self._build_tree(clustering_result.linkage, clustering_result.items)

    @classmethod
    def from_linkage_matrix(cls, linkage_matrix, items: Sequence) -> "Dendrogram":
        """Build a dendrogram from a SciPy linkage matrix over `items`."""
        if items is None:
            raise InvalidArgumentError("items must not be None")
        matrix = np.asarray(linkage_matrix, dtype=np.float64)
        snapshot = tuple(items)
        if len(snapshot) > 1:
            try:
                is_valid_linkage(matrix, throw=True, name="linkage_matrix")
            except (TypeError, ValueError) as exc:
                raise InvalidArgumentError(f"Invalid linkage matrix: {exc}") from exc
        if matrix.shape[0] != len(snapshot) - 1:
            raise InvalidArgumentError(
                "linkage matrix has %d rows but %d items were given (expected %d rows)"
                % (matrix.shape[0], len(snapshot), len(snapshot) - 1)
            )
        n_items = len(snapshot)
        steps = tuple(
            LinkageStep(
                cluster_id_1=int(row[0]),
                cluster_id_2=int(row[1]),
                merged_cluster_id=n_items + pos,
                merged_cardinality=int(row[3]),
                level=float(row[2]),
            )
            for pos, row in enumerate(matrix)
        )
        linkage = LinkageResult(
            criterion=None, n_items=n_items, target_cluster_count=1, steps=steps
        )
        return cls(HierarchicalClusteringResult(items=snapshot, linkage=linkage))

    @property
    def root(self) -> DendrogramNode:
        return self._root

    @property
    def leaf_count(self) -> int:
        # One leaf per clustered item.
        return len(self.clustering_result.items)

    def node(self, cluster_id: int) -> DendrogramNode:
        try:
            return self._nodes[cluster_id]
        except KeyError:
            raise InvalidArgumentError(f"No dendrogram node with cluster id {cluster_id}") from None

    def leaves_of(self, tree_root: DendrogramNode) -> List[DendrogramNode]:
        """Leaf descendants of `tree_root`, left to right (tree order, not input order)."""
        if tree_root is None:
            raise InvalidArgumentError("tree_root must not be None")
        leaves: List[DendrogramNode] = []
        stack = [tree_root]
        while stack:
            node = stack.pop()
            if node.is_leaf:
                leaves.append(node)
                continue
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)
        return leaves

    def cut_by_cluster_count(self, n_clusters: int) -> List[DendrogramNode]:
        """Split the highest nodes first until `n_clusters` subtrees remain.

        Returns the subtree roots ordered by descending height. Equal heights
        are split latest-merge first.
        """
        n_clusters = require_in_range(n_clusters, "n_clusters", 1, self.leaf_count)

        splittable: List[Tuple[float, int, DendrogramNode]] = []
        leaves: List[DendrogramNode] = []

        def offer(node: DendrogramNode) -> None:
            if node.is_leaf:
                leaves.append(node)
            else:
                heapq.heappush(splittable, (-node.height, -node.cluster_id, node))

        offer(self._root)
        while len(splittable) + len(leaves) < n_clusters:
            if not splittable:
                raise InvalidStateError(
                    "Cannot cut into %d clusters: only leaves remain" % n_clusters
                )
            _, _, node = heapq.heappop(splittable)
            offer(node.left)
            offer(node.right)

        frontier = [node for _, _, node in sorted(splittable, key=lambda entry: entry[:2])]
        frontier.extend(sorted(leaves, key=lambda leaf: -leaf.cluster_id))
        logger.debug(
            "cut: n_clusters=%d roots=%s",
            n_clusters,
            [node.cluster_id for node in frontier][:20],
        )
        return frontier

    def _build_tree(self, linkage: LinkageResult, items: Tuple[Any, ...]) -> DendrogramNode:
        t_start = time.time()
        n_items = len(items)
        if n_items == 0:
            raise InvalidStateError("Cannot build a dendrogram over zero items")
        if linkage.n_items != n_items:
            raise InvalidStateError(
                "Merge history covers %d items but %d items were given" % (linkage.n_items, n_items)
            )
        if not linkage.is_complete:
            raise InvalidStateError(
                "Merge history is incomplete: %d steps for %d items (need %d); "
                "compute the linkage with target_cluster_count=1"
                % (len(linkage), n_items, n_items - 1)
            )

        if n_items == 1:
            root = DendrogramNode(cluster_id=0, height=0.0)
            root.decorate(items[0])
            self._nodes[0] = root
            return root

        steps_by_merge: Dict[int, LinkageStep] = {
            step.merged_cluster_id: step for step in linkage
        }
        # Ids only grow, so the last recorded step produced the root.
        root_step = linkage.last()
        root = DendrogramNode(cluster_id=root_step.merged_cluster_id, height=root_step.level)
        self._nodes[root.cluster_id] = root

        unvisited = [root]
        while unvisited:
            node = unvisited.pop()
            step = steps_by_merge[node.cluster_id]
            left = self._make_child(step.cluster_id_1, steps_by_merge, n_items)
            right = self._make_child(step.cluster_id_2, steps_by_merge, n_items)
            node.attach_children(left, right)
            for child in (left, right):
                if child.cluster_id < n_items:
                    child.decorate(items[child.cluster_id])
                else:
                    unvisited.append(child)

        if len(self._nodes) != 2 * n_items - 1:
            raise InvalidStateError(
                "Merge history does not form a single tree: reached %d of %d nodes"
                % (len(self._nodes), 2 * n_items - 1)
            )
        logger.debug(
            "Built dendrogram: %d leaves, root=%d height=%.6f in %.3fs",
            n_items,
            root.cluster_id,
            root.height,
            time.time() - t_start,
        )
        return root

    def _make_child(
        self, cluster_id: int, steps_by_merge: Dict[int, LinkageStep], n_items: int
    ) -> DendrogramNode:
        if cluster_id in self._nodes:
            raise InvalidStateError(f"Cluster {cluster_id} is merged more than once")
        if cluster_id < n_items:
            child = DendrogramNode(cluster_id=cluster_id, height=0.0)
        else:
            step: Optional[LinkageStep] = steps_by_merge.get(cluster_id)
            if step is None:
                raise InvalidStateError(f"No merge step produced cluster {cluster_id}")
            child = DendrogramNode(cluster_id=cluster_id, height=step.level)
        self._nodes[cluster_id] = child
        return child

    def format_tree(self) -> str:
        """Text rendering, one line per node, internal nodes with their height."""
        lines: List[str] = []
        stack: List[Tuple[DendrogramNode, str, str]] = [(self._root, "", "")]
        while stack:
            node, connector, indent = stack.pop()
            label = f"{indent}{connector}Cluster {node.cluster_id}"
            if not node.is_leaf:
                label += f" ({node.height:.3f})"
            lines.append(label)
            child_indent = indent + ("" if not connector else ("    " if connector == "└── " else "│   "))
            children = node.children
            for pos in range(len(children) - 1, -1, -1):
                is_last = pos == len(children) - 1
                stack.append((children[pos], "└── " if is_last else "├── ", child_indent))
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.format_tree()
