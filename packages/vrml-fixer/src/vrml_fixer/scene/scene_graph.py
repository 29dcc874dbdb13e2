# SPDX-License-Identifier: MIT
"""Scene graph container and traversal helpers.

Node references are shared: a node may be reachable from several parent
fields, so every traversal here visits each distinct node at most once.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from vrml_fixer.scene.fields import MFNode, SFNode
from vrml_fixer.scene.nodes import GroupingNode, Node, SceneRoot


class Scene:
    """Complete scene: a root grouping node owning the top-level nodes."""

    def __init__(self, children: Iterable[Node] | None = None):
        """Initialize scene.

        Args:
            children: Optional initial top-level nodes
        """
        self.root = SceneRoot()
        if children is not None:
            self.root.children.extend(children)

    @property
    def children(self) -> MFNode:
        """Top-level nodes."""
        return self.root.children

    def get_all_nodes(self) -> list[Node]:
        """Get every distinct node reachable from the root, root excluded."""
        return [n for n in walk(self.root) if n is not self.root]

    def get_nodes_of_type(self, node_type: type[Node]) -> list[Node]:
        """Get every distinct reachable node of the given class."""
        return [n for n in walk(self.root) if isinstance(n, node_type)]


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Iterate over every node referenced from a field of ``node``.

    Nodes are yielded in field declaration order; a node referenced twice
    is yielded twice.
    """
    for _, field in node.node_fields():
        if isinstance(field, SFNode):
            if field.value is not None:
                yield field.value
        else:
            yield from field


def walk(root: Node) -> Iterator[Node]:
    """Depth-first pre-order traversal visiting each distinct node once."""
    seen: set[Node] = set()
    stack = [root]
    while stack:
        node = stack.pop()
        if node in seen:
            continue
        seen.add(node)
        yield node
        stack.extend(reversed(list(iter_child_nodes(node))))


def count_references(root: Node) -> dict[Node, int]:
    """Count how many field slots reference each node reachable from root.

    The root itself counts as referenced once.
    """
    counts: dict[Node, int] = {root: 1}
    for node in walk(root):
        for child in iter_child_nodes(node):
            counts[child] = counts.get(child, 0) + 1
    return counts


def grouping_nodes(root: Node) -> Iterator[GroupingNode]:
    """Iterate over the distinct grouping nodes reachable from root."""
    for node in walk(root):
        if isinstance(node, GroupingNode):
            yield node
