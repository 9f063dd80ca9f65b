"""Hierarchy package: linkage engine, dendrogram and cuts."""
from hclust.hierarchy.criteria import LinkageCriterion
from hclust.hierarchy.models import (
    DendrogramNode,
    LinkageResult,
    LinkageStep,
)
from hclust.hierarchy.linkage import Linkage
from hclust.hierarchy.result import (
    HierarchicalClustering,
    HierarchicalClusteringResult,
)
from hclust.hierarchy.dendrogram import Dendrogram
from hclust.hierarchy.cut import (
    clusters_from_cut,
    cut_by_number_of_clusters,
    labels_from_cut,
)
