"""heatmap-analytics: clustering and significance testing behind heatmap charts."""

from ._version import __version__
from .api import Heatmap, GroupComparison, compare_groups, repeated_measures_anova
from .config import DEFAULT_LINKAGE
from .core.errors import AnalyticsError, InvalidInput
from .transform.cluster import (
    ClusterEngine,
    ClusterNode,
    Internal,
    Leaf,
    flip_root,
    flip_tree,
    leaf_order,
)
from .transform.distance import euclidean


def cluster(vectors, linkage: str = DEFAULT_LINKAGE):
    """Agglomerative clustering of ``vectors``; see ``ClusterEngine.cluster``."""
    return ClusterEngine.cluster(vectors, linkage=linkage)


__all__ = [
    "__version__",
    "Heatmap",
    "GroupComparison",
    "compare_groups",
    "repeated_measures_anova",
    "AnalyticsError",
    "InvalidInput",
    "ClusterEngine",
    "ClusterNode",
    "Internal",
    "Leaf",
    "cluster",
    "euclidean",
    "flip_root",
    "flip_tree",
    "leaf_order",
]
