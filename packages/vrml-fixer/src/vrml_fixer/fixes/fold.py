# SPDX-License-Identifier: MIT
"""Fold sibling transforms with identical parameters into one."""

from __future__ import annotations

import logging

from vrml_fixer.scene.fields import Rotation, Vec3
from vrml_fixer.scene.nodes import GroupingNode, Node, Switch, Transform
from vrml_fixer.scene.scene_graph import count_references, iter_child_nodes

logger = logging.getLogger(__name__)

TransformKey = tuple[Vec3, Rotation, Vec3, Rotation, Vec3]


def transform_key(transform: Transform) -> TransformKey:
    """All parameters of a transform, compared by exact value."""
    return (
        transform.center,
        transform.rotation,
        transform.scale,
        transform.scale_orientation,
        transform.translation,
    )


def fold_children(group: GroupingNode, ref_counts: dict[Node, int]) -> int:
    """Fold the duplicate Transform children of one grouping node.

    The first transform of each parameter group survives and receives the
    children of the others, in order. Transforms referenced from more than
    one place are left alone.

    Returns:
        Number of transforms removed from the group
    """
    by_key: dict[TransformKey, list[Transform]] = {}
    for child in group.children:
        if isinstance(child, Transform) and ref_counts.get(child, 0) == 1:
            by_key.setdefault(transform_key(child), []).append(child)

    removed: set[Node] = set()
    for members in by_key.values():
        survivor, *others = members
        for other in others:
            survivor.children.extend(other.children)
            other.children = []
            removed.add(other)

    if removed:
        group.children = [c for c in group.children if c not in removed]
    return len(removed)


def fold_transforms(root: Node) -> int:
    """Fold duplicate transforms in every grouping node reachable from root.

    Parents are folded before their children, so children gathered onto a
    surviving transform are folded in turn.

    Returns:
        Total number of transforms removed
    """
    ref_counts = count_references(root)
    visited: set[Node] = set()
    removed = 0

    def visit(node: Node) -> None:
        nonlocal removed
        if node in visited:
            return
        visited.add(node)
        if isinstance(node, GroupingNode) and not isinstance(node, Switch):
            removed += fold_children(node, ref_counts)
        for child in iter_child_nodes(node):
            visit(child)

    visit(root)
    if removed:
        logger.info("Folded %d duplicate transforms", removed)
    return removed
