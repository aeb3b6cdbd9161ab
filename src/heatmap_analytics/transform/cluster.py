"""ClusterEngine: agglomerative hierarchical clustering with NaN-tolerant distances."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Union

import numpy as np

from ..config import DEFAULT_LINKAGE, VALID_LINKAGES
from ..core.validation import validate_choice, validate_vectors
from .distance import DistanceMatrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Leaf:
    """A single input item, identified by its row index in the input."""

    index: int
    height: float = 0.0

    @property
    def leaves(self) -> tuple[int, ...]:
        return (self.index,)

    @property
    def is_leaf(self) -> bool:
        return True


@dataclass(frozen=True)
class Internal:
    """A merge of two subtrees at linkage distance ``height``.

    ``leaves`` holds every subsumed input index, left block then right
    block, as of when this node was built.
    """

    left: "ClusterNode"
    right: "ClusterNode"
    height: float
    leaves: tuple[int, ...]

    @property
    def is_leaf(self) -> bool:
        return False

    @property
    def size(self) -> int:
        return len(self.leaves)


ClusterNode = Union[Leaf, Internal]


@dataclass(frozen=True)
class DendrogramNode:
    """A single branch/merge in the dendrogram tree.

    Coordinates are in "dendrogram space" (leaf-index units on the
    leaf axis, linkage distance on the merge axis). A renderer converts
    these to pixel coordinates.
    """

    # The two child positions on the leaf axis
    left: float
    right: float
    # The merge height (distance)
    height: float
    # The heights of the two children (0 for leaves)
    left_height: float
    right_height: float
    # Item IDs in this subtree (for click-to-select)
    member_ids: tuple


@dataclass(frozen=True)
class ClusterResult:
    """A cluster tree together with the IDs of the clustered items."""

    tree: ClusterNode | None
    ids: np.ndarray              # item IDs (in input order)

    @property
    def leaf_order(self) -> np.ndarray:
        """IDs in clustered order."""
        return self.ids[leaf_order(self.tree)] if self.tree is not None else self.ids[:0]

    @property
    def linkage_matrix(self) -> np.ndarray:
        return to_linkage_matrix(self.tree)

    @property
    def dendrogram_nodes(self) -> tuple[DendrogramNode, ...]:
        return tuple(dendrogram_nodes(self.tree, self.ids))


class ClusterEngine:
    """Agglomerative clustering with a deterministic merge order.

    Each step merges the closest pair of active clusters, then derives the
    new cluster's distances from its children's using the linkage rule.
    Active ids are kept ascending and new clusters take id ``n + step``,
    so the pair scan order (lower id first, then higher id) is a total
    order and ties always resolve the same way.
    """

    VALID_LINKAGES = VALID_LINKAGES

    @classmethod
    def cluster(
        cls,
        vectors,
        linkage: str = DEFAULT_LINKAGE,
    ) -> ClusterNode | None:
        """Build the merge tree over ``vectors``.

        Parameters
        ----------
        vectors : sequence of equal-length numeric sequences, or (n, m) array
            Items to cluster. NaN marks a missing entry.
        linkage : str
            "single", "complete" or "average" (UPGMA).

        Returns
        -------
        None for no vectors, a ``Leaf`` for one, otherwise the root
        ``Internal`` node.
        """
        validate_choice(linkage, cls.VALID_LINKAGES, "linkage method")
        data = validate_vectors(vectors)
        n = data.shape[0]
        if n == 0:
            return None
        if n == 1:
            return Leaf(0)

        nodes: list[ClusterNode] = [Leaf(i) for i in range(n)]
        dist = DistanceMatrix.from_vectors(data, capacity=2 * n - 1)
        active = list(range(n))

        while len(active) > 1:
            lo, hi, height = dist.closest_pair(np.array(active))
            left, right = nodes[lo], nodes[hi]
            merged = Internal(
                left=left,
                right=right,
                height=height,
                leaves=left.leaves + right.leaves,
            )
            new_id = len(nodes)
            nodes.append(merged)

            active.remove(lo)
            active.remove(hi)
            if active:
                others = np.array(active)
                linked = cls._link(
                    linkage,
                    dist.many(lo, others),
                    dist.many(hi, others),
                    len(left.leaves),
                    len(right.leaves),
                )
                dist.set_many(new_id, others, linked)
            # new_id is larger than every other id, so ``active`` stays sorted
            active.append(new_id)

        logger.debug(
            "Clustered %d vectors with %s linkage (root height %.6g)",
            n, linkage, nodes[-1].height,
        )
        return nodes[-1]

    @staticmethod
    def _link(
        linkage: str,
        d_left: np.ndarray,
        d_right: np.ndarray,
        n_left: int,
        n_right: int,
    ) -> np.ndarray:
        """Distances from a merged cluster, given those from its two children."""
        if linkage == "single":
            return np.minimum(d_left, d_right)
        if linkage == "complete":
            return np.maximum(d_left, d_right)
        return (d_left * n_left + d_right * n_right) / (n_left + n_right)


def leaf_order(tree: ClusterNode | None) -> list[int]:
    """Input indices in depth-first, left-to-right order."""
    if tree is None:
        return []
    order: list[int] = []
    stack: list[ClusterNode] = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            order.append(node.index)
        else:
            stack.append(node.right)
            stack.append(node.left)
    return order


def iter_internal(tree: ClusterNode | None) -> Iterator[Internal]:
    """Internal nodes in post-order (left subtree, right subtree, node)."""
    if tree is None:
        return
    stack: list[ClusterNode] = [tree]
    reverse_post: list[Internal] = []
    while stack:
        node = stack.pop()
        if isinstance(node, Internal):
            reverse_post.append(node)
            stack.append(node.left)
            stack.append(node.right)
    yield from reversed(reverse_post)


def flip_tree(tree: ClusterNode | None) -> ClusterNode | None:
    """Mirror image: left and right swapped at every internal node.

    Builds new internal nodes; the input is untouched. Leaves are
    immutable and shared.
    """
    if tree is None or isinstance(tree, Leaf):
        return tree
    flipped: dict[int, ClusterNode] = {}
    for node in iter_internal(tree):
        left = node.right if isinstance(node.right, Leaf) else flipped[id(node.right)]
        right = node.left if isinstance(node.left, Leaf) else flipped[id(node.left)]
        flipped[id(node)] = Internal(
            left=left,
            right=right,
            height=node.height,
            leaves=left.leaves + right.leaves,
        )
    return flipped[id(tree)]


def flip_root(tree: ClusterNode | None) -> ClusterNode | None:
    """Swap only the root's children; both subtrees are shared with the input."""
    if tree is None or isinstance(tree, Leaf):
        return tree
    return Internal(
        left=tree.right,
        right=tree.left,
        height=tree.height,
        leaves=tree.right.leaves + tree.left.leaves,
    )


def to_linkage_matrix(tree: ClusterNode | None) -> np.ndarray:
    """Convert a tree over indices 0..n-1 into a scipy-style linkage matrix.

    Rows follow post-order, so ``scipy.cluster.hierarchy.leaves_list``
    reproduces ``leaf_order(tree)``. Columns: left id, right id, height,
    leaf count; internal ids are ``n + row``.
    """
    if tree is None or isinstance(tree, Leaf):
        return np.empty((0, 4))
    n = len(tree.leaves)
    Z = np.empty((n - 1, 4), dtype=np.float64)
    cluster_ids: dict[int, int] = {}
    for row, node in enumerate(iter_internal(tree)):
        left_id = node.left.index if isinstance(node.left, Leaf) else cluster_ids[id(node.left)]
        right_id = node.right.index if isinstance(node.right, Leaf) else cluster_ids[id(node.right)]
        Z[row] = (left_id, right_id, node.height, len(node.leaves))
        cluster_ids[id(node)] = n + row
    return Z


def dendrogram_nodes(
    tree: ClusterNode | None,
    ids: np.ndarray | None = None,
) -> list[DendrogramNode]:
    """One DendrogramNode per merge, children before parents.

    Leaf-axis positions are visual positions in ``leaf_order(tree)``; each
    branch sits at the mean position of its members. ``ids`` maps input
    indices to item IDs (defaults to the indices themselves).
    """
    if tree is None or isinstance(tree, Leaf):
        return []
    order = leaf_order(tree)
    leaf_pos = {index: pos for pos, index in enumerate(order)}
    if ids is None:
        ids = np.arange(max(order) + 1)

    nodes = []
    for node in iter_internal(tree):
        left_positions = [leaf_pos[m] for m in node.left.leaves]
        right_positions = [leaf_pos[m] for m in node.right.leaves]
        nodes.append(DendrogramNode(
            left=sum(left_positions) / len(left_positions),
            right=sum(right_positions) / len(right_positions),
            height=node.height,
            left_height=node.left.height,
            right_height=node.right.height,
            member_ids=tuple(ids[m] for m in node.leaves),
        ))
    return nodes
