"""Serializers: convert cluster trees to and from JSON-compatible dicts.

Trees are stored as a flat node list (children before parents), each
internal node naming its children by list position. This keeps both
directions iterative, so deep trees never hit the recursion limit.
Non-finite heights (incomparable vectors) are written as JSON
``Infinity``, which Python's json module reads back.
"""

from __future__ import annotations

import json
from typing import Any

from ..core.errors import InvalidInput
from ..transform.cluster import ClusterNode, Internal, Leaf

FORMAT_NAME = "cluster-tree"
FORMAT_VERSION = 1


def tree_to_dict(tree: ClusterNode | None) -> dict[str, Any] | None:
    """Serialize a tree; ``None`` stays ``None``."""
    if tree is None:
        return None
    stack: list[ClusterNode] = [tree]
    reverse_post: list[ClusterNode] = []
    while stack:
        node = stack.pop()
        reverse_post.append(node)
        if isinstance(node, Internal):
            stack.append(node.left)
            stack.append(node.right)

    positions: dict[int, int] = {}
    nodes: list[dict[str, Any]] = []
    for node in reversed(reverse_post):
        if isinstance(node, Leaf):
            entry = {"kind": "leaf", "index": node.index, "height": node.height}
        else:
            entry = {
                "kind": "internal",
                "left": positions[id(node.left)],
                "right": positions[id(node.right)],
                "height": node.height,
                "leaves": list(node.leaves),
            }
        positions[id(node)] = len(nodes)
        nodes.append(entry)

    return {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "root": len(nodes) - 1,
        "nodes": nodes,
    }


def tree_from_dict(data: dict[str, Any] | None) -> ClusterNode | None:
    """Rebuild a tree written by ``tree_to_dict``."""
    if data is None:
        return None
    if data.get("format") != FORMAT_NAME:
        raise InvalidInput(
            f"Not a serialized cluster tree (format={data.get('format')!r})."
        )
    built: list[ClusterNode] = []
    for pos, entry in enumerate(data["nodes"]):
        kind = entry.get("kind")
        if kind == "leaf":
            built.append(Leaf(int(entry["index"]), float(entry.get("height", 0.0))))
        elif kind == "internal":
            left_pos, right_pos = int(entry["left"]), int(entry["right"])
            if not (0 <= left_pos < pos and 0 <= right_pos < pos):
                raise InvalidInput(
                    f"Node {pos} refers to children ({left_pos}, {right_pos}) "
                    "that do not precede it."
                )
            left, right = built[left_pos], built[right_pos]
            leaves = entry.get("leaves")
            built.append(Internal(
                left=left,
                right=right,
                height=float(entry["height"]),
                leaves=tuple(int(i) for i in leaves) if leaves is not None
                else left.leaves + right.leaves,
            ))
        else:
            raise InvalidInput(f"Node {pos} has unknown kind {kind!r}.")
    root = int(data["root"])
    if not 0 <= root < len(built):
        raise InvalidInput(f"Root position {root} is out of range for {len(built)} nodes.")
    return built[root]


def tree_to_json(tree: ClusterNode | None, **kwargs: Any) -> str:
    """Serialize a tree as a JSON string (``null`` for no tree)."""
    return json.dumps(tree_to_dict(tree), **kwargs)


def tree_from_json(text: str) -> ClusterNode | None:
    return tree_from_dict(json.loads(text))
