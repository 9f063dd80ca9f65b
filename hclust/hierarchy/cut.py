"""Turn a dendrogram cut into flat clusters of original items."""
from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from hclust.core.cluster import Cluster
from hclust.hierarchy.dendrogram import Dendrogram
from hclust.hierarchy.models import DendrogramNode
from hclust.hierarchy.result import HierarchicalClusteringResult

logger = logging.getLogger(__name__)


def clusters_from_cut(dendrogram: Dendrogram, roots: Sequence[DendrogramNode]) -> List[Cluster]:
    """One cluster per cut root, keeping the root's cluster id and its leaf items."""
    clusters: List[Cluster] = []
    for root in roots:
        cluster = Cluster(root.cluster_id)
        cluster.add_members(leaf.item for leaf in dendrogram.leaves_of(root))
        clusters.append(cluster)
    return clusters


def cut_by_number_of_clusters(
    clustering_result: HierarchicalClusteringResult, n_clusters: int
) -> List[Cluster]:
    """Build the dendrogram of `clustering_result` and flatten it into `n_clusters` clusters."""
    dendrogram = Dendrogram(clustering_result)
    clusters = clusters_from_cut(dendrogram, dendrogram.cut_by_cluster_count(n_clusters))
    logger.info(
        "Cut %d items into %d clusters (sizes=%s)",
        dendrogram.leaf_count,
        len(clusters),
        [cluster.size for cluster in clusters][:20],
    )
    return clusters


def labels_from_cut(dendrogram: Dendrogram, roots: Sequence[DendrogramNode]) -> np.ndarray:
    """Label per item position: the cluster id of the cut root that holds it."""
    labels = np.full(dendrogram.leaf_count, -1, dtype=np.int64)
    for root in roots:
        for leaf in dendrogram.leaves_of(root):
            labels[leaf.cluster_id] = root.cluster_id
    return labels
