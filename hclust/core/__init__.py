"""Building blocks shared by the clustering algorithms."""
from hclust.core.cluster import Cluster
from hclust.core.clusterable import Clusterable, clusterable_label
from hclust.core.distance_table import NOT_AVAILABLE, DistanceTable, is_available

__all__ = [
    "Cluster",
    "Clusterable",
    "clusterable_label",
    "DistanceTable",
    "NOT_AVAILABLE",
    "is_available",
]
