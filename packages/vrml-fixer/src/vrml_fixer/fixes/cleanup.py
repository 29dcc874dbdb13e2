# SPDX-License-Identifier: MIT
"""Structural cleanup of a scene graph.

A single bottom-up pass that normalizes degenerate rotations, shares
appearances that wrap the same material, resets a few material values,
overrides face-set solidity and unwraps single-child groups and identity
transforms. Every step returns the node that should take the original's
place, and the caller stores it into its own field.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from vrml_fixer.scene.fields import MFNode, RGB, Rotation, SFNode, SFRotation, Vec3
from vrml_fixer.scene.nodes import (
    Appearance,
    Group,
    IndexedFaceSet,
    Material,
    Node,
    Transform,
)
from vrml_fixer.scene.scene_graph import Scene

logger = logging.getLogger(__name__)


@dataclass
class CleanupContext:
    """State of one cleanup run.

    The appearance cache maps a Material to the first Appearance seen
    wrapping it. It and the replacement memo are keyed by node identity
    and must not be reused across independent runs.
    """

    ambient_intensity: float = 0.2
    shininess: float = 0.2
    specular_color: RGB = RGB(0.0, 0.0, 0.0)
    force_solid: bool | None = True

    appearances: dict[Node, Appearance] = field(default_factory=dict)
    replacements: dict[Node, Node] = field(default_factory=dict)
    unwrapped: int = 0
    shared_appearances: int = 0


def normalize_rotations(node: Node) -> None:
    """Give zero-angle rotations the default axis so they count as default."""
    for item in node.fields.values():
        if isinstance(item, SFRotation) and item.value.angle == 0.0:
            item.value = Rotation.identity()


def is_identity_transform(transform: Transform) -> bool:
    return (
        transform.scale == Vec3(1.0, 1.0, 1.0)
        and transform.rotation.angle == 0.0
        and transform.translation == Vec3(0.0, 0.0, 0.0)
    )


def _unwrap(node: Node, context: CleanupContext) -> Node:
    if isinstance(node, Group) and len(node.children) == 1:
        context.unwrapped += 1
        return node.children[0]
    if (
        isinstance(node, Transform)
        and len(node.children) == 1
        and is_identity_transform(node)
    ):
        context.unwrapped += 1
        return node.children[0]
    return node


def cleanup(node: Node, context: CleanupContext) -> Node:
    """Clean up ``node`` and everything below it.

    Returns:
        The node that should replace ``node`` in its parent
    """
    if node in context.replacements:
        return context.replacements[node]
    context.replacements[node] = node

    normalize_rotations(node)

    if isinstance(node, Appearance) and node.material is not None:
        first = context.appearances.setdefault(node.material, node)
        if first is not node:
            context.shared_appearances += 1
            context.replacements[node] = first
            return first
    elif isinstance(node, Material):
        node.ambient_intensity = context.ambient_intensity
        node.shininess = context.shininess
        node.specular_color = context.specular_color
    elif isinstance(node, IndexedFaceSet) and context.force_solid is not None:
        node.solid = context.force_solid

    for _, item in node.node_fields():
        if isinstance(item, SFNode):
            if item.value is not None:
                item.value = cleanup(item.value, context)
        elif isinstance(item, MFNode):
            item.value = [cleanup(child, context) for child in item]

    replacement = _unwrap(node, context)
    context.replacements[node] = replacement
    return replacement


def cleanup_scene(scene: Scene, context: CleanupContext | None = None) -> CleanupContext:
    """Run one cleanup pass over a whole scene.

    Returns:
        The context used, holding the run's counters
    """
    if context is None:
        context = CleanupContext()
    cleanup(scene.root, context)
    logger.info(
        "Cleanup unwrapped %d nodes and shared %d appearances",
        context.unwrapped,
        context.shared_appearances,
    )
    return context
