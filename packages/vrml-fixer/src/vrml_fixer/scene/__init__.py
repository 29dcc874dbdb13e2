# SPDX-License-Identifier: MIT
"""Scene representation: fields, nodes and the scene graph."""

from .fields import RGB, Field, MField, Rotation, SField, Vec2, Vec3
from .nodes import (
    NODE_TYPES,
    Appearance,
    Coordinate,
    Group,
    GroupingNode,
    IndexedFaceSet,
    IndexedLineSet,
    Material,
    Node,
    SceneRoot,
    Shape,
    Switch,
    Transform,
    Viewpoint,
    create_node,
)
from .scene_graph import Scene, count_references, iter_child_nodes, walk

__all__ = [
    "Scene",
    "Node",
    "NODE_TYPES",
    "create_node",
    "GroupingNode",
    "SceneRoot",
    "Group",
    "Transform",
    "Switch",
    "Shape",
    "Appearance",
    "Material",
    "IndexedFaceSet",
    "IndexedLineSet",
    "Coordinate",
    "Viewpoint",
    "Field",
    "SField",
    "MField",
    "Vec2",
    "Vec3",
    "RGB",
    "Rotation",
    "walk",
    "iter_child_nodes",
    "count_references",
]
