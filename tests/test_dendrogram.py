"""Tests for hclust/hierarchy/dendrogram.py - tree construction, traversal and cuts."""
from __future__ import annotations

import numpy as np
import pytest
from scipy.cluster.hierarchy import linkage as scipy_linkage

from hclust.errors import InvalidArgumentError, InvalidStateError, OutOfRangeError
from hclust.hierarchy import (
    Dendrogram,
    HierarchicalClustering,
    HierarchicalClusteringResult,
    Linkage,
)
from tests.helpers.points import GOLDEN_COORDS, Scalar


# Single linkage over the golden points produces:
#
#   step 0: 4 + 6  -> 7   (0.1119)
#   step 1: 5 + 7  -> 8   (0.1484)
#   step 2: 0 + 3  -> 9   (0.4612)
#   step 3: 8 + 9  -> 10  (0.4792)
#   step 4: 2 + 10 -> 11  (0.7469)
#   step 5: 1 + 11 -> 12  (0.8290)  root
#
#               12
#              /  \
#             1    11
#                 /  \
#                2    10
#                    /  \
#                   8    9
#                  / \  / \
#                 5  7 0   3
#                   / \
#                  4   6
@pytest.fixture
def dendrogram(single_result) -> Dendrogram:
    return Dendrogram(single_result)


def leaf_ids(dendrogram, node):
    return [leaf.cluster_id for leaf in dendrogram.leaves_of(node)]


class TestConstruction:
    """Building the tree from a merge history."""

    @pytest.mark.unit
    def test_root_is_last_merge(self, dendrogram):
        assert dendrogram.root.cluster_id == 12
        assert dendrogram.root.height == pytest.approx(0.82895022, abs=1e-6)
        assert dendrogram.root.parent is None

    @pytest.mark.unit
    def test_children_follow_merge_steps(self, dendrogram):
        root = dendrogram.root
        assert (root.left.cluster_id, root.right.cluster_id) == (1, 11)
        node_10 = dendrogram.node(10)
        assert (node_10.left.cluster_id, node_10.right.cluster_id) == (8, 9)
        assert node_10.height == pytest.approx(0.47921023, abs=1e-6)

    @pytest.mark.unit
    def test_leaves_have_zero_height_and_items(self, dendrogram, single_result):
        for cluster_id in range(7):
            leaf = dendrogram.node(cluster_id)
            assert leaf.is_leaf
            assert leaf.height == 0.0
            assert leaf.item is single_result.items[cluster_id]

    @pytest.mark.unit
    def test_internal_node_item_raises(self, dendrogram):
        with pytest.raises(InvalidStateError, match="not a leaf"):
            dendrogram.root.item

    @pytest.mark.unit
    def test_decorating_internal_node_raises(self, dendrogram):
        with pytest.raises(InvalidStateError):
            dendrogram.root.decorate("x")

    @pytest.mark.unit
    def test_children_are_read_only(self, dendrogram):
        root = dendrogram.root
        with pytest.raises(AttributeError):
            root.left = dendrogram.node(0)
        with pytest.raises(AttributeError):
            root.right = None
        assert root.right is dendrogram.node(11)

    @pytest.mark.unit
    def test_built_tree_cannot_be_rewired(self, dendrogram):
        with pytest.raises(InvalidStateError):
            dendrogram.root.attach_children(dendrogram.node(0), dendrogram.node(3))
        with pytest.raises(InvalidStateError):
            dendrogram.node(0).attach_children(dendrogram.node(1), dendrogram.node(2))

    @pytest.mark.unit
    def test_leaf_item_cannot_be_replaced(self, dendrogram, single_result):
        leaf = dendrogram.node(4)
        with pytest.raises(InvalidStateError, match="already"):
            leaf.decorate("x")
        assert leaf.item is single_result.items[4]

    @pytest.mark.unit
    def test_parent_links_point_upwards(self, dendrogram):
        for cluster_id in range(12):
            node = dendrogram.node(cluster_id)
            assert node.parent is not None
            assert node in node.parent.children

    @pytest.mark.unit
    def test_every_cluster_id_has_a_node(self, dendrogram):
        for cluster_id in range(13):
            assert dendrogram.node(cluster_id).cluster_id == cluster_id
        with pytest.raises(InvalidArgumentError):
            dendrogram.node(13)

    @pytest.mark.unit
    def test_leaf_count(self, dendrogram):
        assert dendrogram.leaf_count == 7

    @pytest.mark.unit
    def test_partial_history_raises(self, points):
        partial = Linkage("single").compute(points, 2)
        result = HierarchicalClusteringResult(items=tuple(points), linkage=partial)
        with pytest.raises(InvalidStateError, match="incomplete"):
            Dendrogram(result)

    @pytest.mark.unit
    def test_item_count_mismatch_raises(self, points, single_result):
        result = HierarchicalClusteringResult(items=tuple(points[:5]), linkage=single_result.linkage)
        with pytest.raises(InvalidStateError):
            Dendrogram(result)

    @pytest.mark.unit
    def test_none_result_raises(self):
        with pytest.raises(InvalidArgumentError):
            Dendrogram(None)

    @pytest.mark.unit
    def test_single_item_dendrogram(self):
        item = Scalar(3.0)
        dendrogram = Dendrogram(HierarchicalClustering("single").cluster([item]))
        assert dendrogram.root.is_leaf
        assert dendrogram.root.item is item
        assert dendrogram.cut_by_cluster_count(1) == [dendrogram.root]


class TestLeavesOf:
    """Depth-first leaf enumeration."""

    @pytest.mark.unit
    def test_root_leaves_in_tree_order(self, dendrogram):
        assert leaf_ids(dendrogram, dendrogram.root) == [1, 2, 5, 4, 6, 0, 3]

    @pytest.mark.unit
    def test_subtree_leaves(self, dendrogram):
        assert leaf_ids(dendrogram, dendrogram.node(8)) == [5, 4, 6]
        assert leaf_ids(dendrogram, dendrogram.node(9)) == [0, 3]

    @pytest.mark.unit
    def test_leaf_of_leaf_is_itself(self, dendrogram):
        leaf = dendrogram.node(4)
        assert dendrogram.leaves_of(leaf) == [leaf]

    @pytest.mark.unit
    def test_deep_chain_does_not_recurse(self):
        """A caterpillar tree deeper than the recursion limit builds and walks fine."""
        n_items = 3000
        rows = [[0, 1, 1.0, 2]]
        for k in range(1, n_items - 1):
            rows.append([k + 1, n_items + k - 1, float(k + 1), k + 2])
        dendrogram = Dendrogram.from_linkage_matrix(np.array(rows, dtype=float), range(n_items))

        leaves = dendrogram.leaves_of(dendrogram.root)
        assert len(leaves) == n_items
        assert sorted(leaf.item for leaf in leaves) == list(range(n_items))
        assert len(dendrogram.format_tree().splitlines()) == 2 * n_items - 1
        assert len(dendrogram.cut_by_cluster_count(n_items)) == n_items


class TestCutByClusterCount:
    """Priority-driven cuts to a target number of clusters."""

    @pytest.mark.unit
    def test_one_cluster_is_root(self, dendrogram):
        assert dendrogram.cut_by_cluster_count(1) == [dendrogram.root]

    @pytest.mark.unit
    def test_n_clusters_are_all_leaves(self, dendrogram):
        roots = dendrogram.cut_by_cluster_count(7)
        assert len(roots) == 7
        assert all(node.is_leaf for node in roots)
        assert {node.cluster_id for node in roots} == set(range(7))

    @pytest.mark.unit
    def test_highest_nodes_split_first(self, dendrogram):
        assert {n.cluster_id for n in dendrogram.cut_by_cluster_count(2)} == {1, 11}
        assert {n.cluster_id for n in dendrogram.cut_by_cluster_count(3)} == {1, 2, 10}
        assert {n.cluster_id for n in dendrogram.cut_by_cluster_count(4)} == {1, 2, 8, 9}

    @pytest.mark.unit
    def test_roots_ordered_by_height(self, dendrogram):
        roots = dendrogram.cut_by_cluster_count(4)
        heights = [node.height for node in roots]
        assert heights == sorted(heights, reverse=True)

    @pytest.mark.unit
    @pytest.mark.parametrize("k", range(1, 8))
    def test_cut_partitions_leaves(self, dendrogram, k):
        roots = dendrogram.cut_by_cluster_count(k)
        assert len(roots) == k
        collected = [cid for root in roots for cid in leaf_ids(dendrogram, root)]
        assert sorted(collected) == list(range(7))

    @pytest.mark.unit
    @pytest.mark.parametrize("k", [0, 8, -3])
    def test_out_of_range(self, dendrogram, k):
        with pytest.raises(OutOfRangeError):
            dendrogram.cut_by_cluster_count(k)

    @pytest.mark.unit
    @pytest.mark.parametrize("k", [2.0, "3", True])
    def test_count_must_be_int(self, dendrogram, k):
        with pytest.raises(InvalidArgumentError):
            dendrogram.cut_by_cluster_count(k)

    @pytest.mark.unit
    def test_numpy_integer_counts(self, dendrogram):
        for k in np.arange(1, 8):
            roots = dendrogram.cut_by_cluster_count(k)
            assert len(roots) == int(k)
        assert [r.cluster_id for r in dendrogram.cut_by_cluster_count(np.int32(3))] == [10, 2, 1]

    @pytest.mark.unit
    def test_cut_does_not_modify_tree(self, dendrogram):
        before = str(dendrogram)
        dendrogram.cut_by_cluster_count(5)
        assert str(dendrogram) == before

    @pytest.mark.unit
    def test_equal_heights_split_later_merge_first(self):
        # Four points at equal spacing: every merge happens at height 1.0
        items = [Scalar(v) for v in (0.0, 1.0, 2.0, 3.0)]
        dendrogram = Dendrogram(HierarchicalClustering("single").cluster(items))
        roots = dendrogram.cut_by_cluster_count(2)
        assert len(roots) == 2
        collected = sorted(cid for root in roots for cid in leaf_ids(dendrogram, root))
        assert collected == [0, 1, 2, 3]


class TestLinkageMatrixInterop:
    """Dendrograms built from SciPy linkage matrices."""

    @pytest.mark.integration
    def test_from_scipy_matches_engine(self, points, dendrogram):
        matrix = scipy_linkage(GOLDEN_COORDS, method="single")
        imported = Dendrogram.from_linkage_matrix(matrix, points)
        assert str(imported) == str(dendrogram)
        assert imported.root.height == pytest.approx(dendrogram.root.height)

    @pytest.mark.integration
    def test_round_trip_through_linkage_matrix(self, single_result, dendrogram):
        matrix = single_result.linkage.to_linkage_matrix()
        imported = Dendrogram.from_linkage_matrix(matrix, single_result.items)
        for k in range(1, 8):
            ours = {n.cluster_id for n in dendrogram.cut_by_cluster_count(k)}
            theirs = {n.cluster_id for n in imported.cut_by_cluster_count(k)}
            assert ours == theirs

    @pytest.mark.unit
    def test_invalid_matrix_raises(self, points):
        bad = np.array([[0, 0, 1.0, 2]] * 6, dtype=float)
        with pytest.raises(InvalidArgumentError, match="Invalid linkage matrix"):
            Dendrogram.from_linkage_matrix(bad, points)

    @pytest.mark.unit
    def test_row_count_mismatch_raises(self, points):
        matrix = scipy_linkage(GOLDEN_COORDS[:4], method="single")
        with pytest.raises(InvalidArgumentError, match="rows"):
            Dendrogram.from_linkage_matrix(matrix, points)


@pytest.mark.unit
def test_format_tree(dendrogram):
    lines = dendrogram.format_tree().splitlines()
    assert lines[0] == "Cluster 12 (0.829)"
    assert lines[1] == "├── Cluster 1"
    assert lines[2] == "└── Cluster 11 (0.747)"
    assert lines[3] == "    ├── Cluster 2"
    assert len(lines) == 13
