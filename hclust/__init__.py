"""Agglomerative hierarchical clustering with dendrogram cuts."""

from .core import NOT_AVAILABLE, Cluster, Clusterable, DistanceTable
from .errors import (
    HClustError,
    InvalidArgumentError,
    InvalidStateError,
    OutOfRangeError,
    UnimplementedError,
)
from .hierarchy import (
    Dendrogram,
    DendrogramNode,
    HierarchicalClustering,
    HierarchicalClusteringResult,
    Linkage,
    LinkageCriterion,
    LinkageResult,
    LinkageStep,
    clusters_from_cut,
    cut_by_number_of_clusters,
    labels_from_cut,
)

__all__ = [
    "Cluster",
    "Clusterable",
    "DistanceTable",
    "NOT_AVAILABLE",
    "HClustError",
    "InvalidArgumentError",
    "InvalidStateError",
    "OutOfRangeError",
    "UnimplementedError",
    "Dendrogram",
    "DendrogramNode",
    "HierarchicalClustering",
    "HierarchicalClusteringResult",
    "Linkage",
    "LinkageCriterion",
    "LinkageResult",
    "LinkageStep",
    "clusters_from_cut",
    "cut_by_number_of_clusters",
    "labels_from_cut",
]
