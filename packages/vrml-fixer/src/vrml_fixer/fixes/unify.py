# SPDX-License-Identifier: MIT
"""Merge the face-set shapes of a group that share an appearance."""

from __future__ import annotations

import logging

from vrml_fixer.fixes.faces import dedupe_faces, get_faces, index_faces
from vrml_fixer.scene.nodes import (
    Coordinate,
    GroupingNode,
    IndexedFaceSet,
    Node,
    Shape,
    Switch,
)
from vrml_fixer.scene.scene_graph import grouping_nodes

logger = logging.getLogger(__name__)


def merge_shapes(
    appearance: Node | None,
    shapes: list[Shape],
    ignore_winding: bool = True,
) -> Shape:
    """Build one shape holding the deduplicated faces of ``shapes``.

    The new face set is ``solid FALSE`` because merged faces no longer
    agree on a consistent orientation.
    """
    faces = [face for shape in shapes for face in get_faces(shape.geometry)]
    unique_faces = dedupe_faces(faces, ignore_winding)
    points, coord_index = index_faces(unique_faces)

    geometry = IndexedFaceSet(
        coord=Coordinate(point=points),
        coordIndex=coord_index,
        solid=False,
    )
    logger.debug(
        "Merged %d shapes: %d of %d faces kept, %d points",
        len(shapes),
        len(unique_faces),
        len(faces),
        len(points),
    )
    return Shape(appearance=appearance, geometry=geometry)


def unify_group(group: GroupingNode, ignore_winding: bool = True) -> int:
    """Replace the face-set shapes of a group with one shape per appearance.

    Appearances are compared by identity. Each merged shape takes the place
    of the first shape of its appearance; other children keep their order.

    Returns:
        Number of shapes that were replaced
    """
    children = list(group.children)
    shapes_by_appearance: dict[Node | None, list[Shape]] = {}
    seen: set[Node] = set()
    for child in children:
        if child in seen:
            continue
        if isinstance(child, Shape) and isinstance(child.geometry, IndexedFaceSet):
            seen.add(child)
            shapes_by_appearance.setdefault(child.appearance, []).append(child)

    if not shapes_by_appearance:
        return 0

    merged = {
        appearance: merge_shapes(appearance, shapes, ignore_winding)
        for appearance, shapes in shapes_by_appearance.items()
    }

    new_children: list[Node] = []
    placed: set[Node | None] = set()
    for child in children:
        if child not in seen:
            new_children.append(child)
            continue
        appearance = child.appearance
        if appearance not in placed:
            placed.add(appearance)
            new_children.append(merged[appearance])
    group.children = new_children
    return len(seen)


def unify_shapes(root: Node, ignore_winding: bool = True) -> int:
    """Unify shapes in every grouping node reachable from root.

    Switch nodes are skipped since their children are addressed by position.

    Returns:
        Total number of shapes that were replaced
    """
    groups = [node for node in grouping_nodes(root) if not isinstance(node, Switch)]
    replaced = 0
    for group in groups:
        replaced += unify_group(group, ignore_winding)
    if replaced:
        logger.info("Unified %d face-set shapes in %d groups", replaced, len(groups))
    return replaced
