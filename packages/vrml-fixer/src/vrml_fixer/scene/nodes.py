# SPDX-License-Identifier: MIT
"""Scene node kinds.

Each node class declares its fields in ``FIELDS`` as an ordered mapping
from VRML field name to a factory building the field with its default.
Node classes with a ``type_name`` register themselves in ``NODE_TYPES``,
which is the closed set of kinds the readers and the writer understand.

Nodes compare and hash by identity: two nodes built separately are never
the same node, however equal their fields are.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, ClassVar, Iterator

from vrml_fixer.errors import UnsupportedNodeError
from vrml_fixer.scene.fields import (
    Field,
    MFColor,
    MFFloat,
    MFInt32,
    MFNode,
    MFRotation,
    MFString,
    MFVec2f,
    MFVec3f,
    SFBool,
    SFFloat,
    SFInt32,
    SFNode,
    SFRotation,
    SFString,
    SFTime,
    SFVec2f,
    SFVec3f,
    SFColor,
)

NODE_TYPES: dict[str, type[Node]] = {}

FieldFactory = Callable[[], Field]


def _true() -> SFBool:
    return SFBool(True)


def _value(name: str) -> property:
    """Property reading and writing the value of a single-value field."""

    def fget(self: Node) -> Any:
        return self.fields[name].value

    def fset(self: Node, value: Any) -> None:
        self.fields[name].value = value

    return property(fget, fset, doc=f"Value of the ``{name}`` field.")


def _multi(name: str) -> property:
    """Property returning a multi-value field container; assigning replaces its items."""

    def fget(self: Node) -> Any:
        return self.fields[name]

    def fset(self: Node, values: Any) -> None:
        self.fields[name].value = values

    return property(fget, fset, doc=f"The ``{name}`` field.")


class Node:
    """Base class of every scene node."""

    type_name: ClassVar[str] = ""
    FIELDS: ClassVar[dict[str, FieldFactory]] = {}
    UNEXPOSED: ClassVar[frozenset[str]] = frozenset()
    DEFAULT_CONTAINER: ClassVar[str] = "children"

    def __init_subclass__(cls, register: bool = True, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if register and cls.type_name:
            NODE_TYPES[cls.type_name] = cls

    def __init__(self, **values: Any):
        """Create a node with every field at its default.

        Args:
            **values: Initial field values keyed by VRML field name
        """
        self.name: str | None = None
        self.fields: dict[str, Field] = {
            field_name: factory() for field_name, factory in self.FIELDS.items()
        }
        for field_name, value in values.items():
            self[field_name].value = value

    def __getitem__(self, field_name: str) -> Field:
        try:
            return self.fields[field_name]
        except KeyError:
            raise KeyError(f"{self.type_name} has no field {field_name!r}") from None

    @property
    def exposed_fields(self) -> frozenset[str]:
        """Names of the fields written to output."""
        return frozenset(self.fields) - self.UNEXPOSED

    def node_fields(self) -> Iterator[tuple[str, SFNode | MFNode]]:
        """Iterate over the reference-typed fields, in declaration order."""
        for field_name, field in self.fields.items():
            if isinstance(field, (SFNode, MFNode)):
                yield field_name, field

    def __repr__(self) -> str:
        label = self.name if self.name else hex(id(self))
        return f"<{self.type_name or type(self).__name__} {label}>"


def create_node(type_name: str) -> Node:
    """Create a node of the named kind.

    Raises:
        UnsupportedNodeError: if the kind is not registered
    """
    node_class = NODE_TYPES.get(type_name)
    if node_class is None:
        raise UnsupportedNodeError(type_name)
    return node_class()


# Grouping nodes

_BBOX_FIELDS: dict[str, FieldFactory] = {
    "bboxCenter": SFVec3f,
    "bboxSize": partial(SFVec3f, (-1.0, -1.0, -1.0)),
}


class GroupingNode(Node):
    """A node owning an ordered list of child nodes."""

    CHILDREN_FIELD: ClassVar[str] = "children"
    FIELDS = {
        "children": MFNode,
        "addChildren": MFNode,
        "removeChildren": MFNode,
        **_BBOX_FIELDS,
    }
    UNEXPOSED = frozenset({"addChildren", "removeChildren"})

    @property
    def children(self) -> MFNode:
        return self.fields[self.CHILDREN_FIELD]

    @children.setter
    def children(self, values: Any) -> None:
        self.fields[self.CHILDREN_FIELD].value = values


class SceneRoot(GroupingNode, register=False):
    """Invisible root holding the top-level nodes of a scene."""

    type_name = "Scene"
    FIELDS = {"children": MFNode}
    UNEXPOSED = frozenset()


class Group(GroupingNode):
    type_name = "Group"


class Transform(GroupingNode):
    type_name = "Transform"
    FIELDS = {
        **GroupingNode.FIELDS,
        "center": SFVec3f,
        "rotation": SFRotation,
        "scale": partial(SFVec3f, (1.0, 1.0, 1.0)),
        "scaleOrientation": SFRotation,
        "translation": SFVec3f,
    }

    center = _value("center")
    rotation = _value("rotation")
    scale = _value("scale")
    scale_orientation = _value("scaleOrientation")
    translation = _value("translation")


class Switch(GroupingNode):
    """Grouping node rendering at most one of its children.

    Children are positionally addressed by ``whichChoice``, so transformations
    that reorder or merge children leave Switch nodes alone.
    """

    type_name = "Switch"
    CHILDREN_FIELD = "choice"
    FIELDS = {
        "choice": MFNode,
        "whichChoice": partial(SFInt32, -1),
    }
    UNEXPOSED = frozenset()

    which_choice = _value("whichChoice")


class Anchor(GroupingNode):
    type_name = "Anchor"
    FIELDS = {
        **GroupingNode.FIELDS,
        "description": SFString,
        "parameter": MFString,
        "url": MFString,
    }


class Collision(GroupingNode):
    type_name = "Collision"
    FIELDS = {
        **GroupingNode.FIELDS,
        "collide": _true,
        "proxy": SFNode,
    }


# Shape and appearance


class Shape(Node):
    type_name = "Shape"
    FIELDS = {
        "appearance": SFNode,
        "geometry": SFNode,
    }

    appearance = _value("appearance")
    geometry = _value("geometry")


class Appearance(Node):
    type_name = "Appearance"
    DEFAULT_CONTAINER = "appearance"
    FIELDS = {
        "material": SFNode,
        "texture": SFNode,
        "textureTransform": SFNode,
    }

    material = _value("material")
    texture = _value("texture")
    texture_transform = _value("textureTransform")


class Material(Node):
    type_name = "Material"
    DEFAULT_CONTAINER = "material"
    FIELDS = {
        "ambientIntensity": partial(SFFloat, 0.2),
        "diffuseColor": partial(SFColor, (0.8, 0.8, 0.8)),
        "emissiveColor": SFColor,
        "shininess": partial(SFFloat, 0.2),
        "specularColor": SFColor,
        "transparency": SFFloat,
    }

    ambient_intensity = _value("ambientIntensity")
    diffuse_color = _value("diffuseColor")
    emissive_color = _value("emissiveColor")
    shininess = _value("shininess")
    specular_color = _value("specularColor")
    transparency = _value("transparency")


class ImageTexture(Node):
    type_name = "ImageTexture"
    DEFAULT_CONTAINER = "texture"
    FIELDS = {
        "url": MFString,
        "repeatS": _true,
        "repeatT": _true,
    }


class TextureTransform(Node):
    type_name = "TextureTransform"
    DEFAULT_CONTAINER = "textureTransform"
    FIELDS = {
        "center": SFVec2f,
        "rotation": SFFloat,
        "scale": partial(SFVec2f, (1.0, 1.0)),
        "translation": SFVec2f,
    }


# Geometry


class GeometryNode(Node):
    DEFAULT_CONTAINER = "geometry"


class IndexedFaceSet(GeometryNode):
    type_name = "IndexedFaceSet"
    FIELDS = {
        "color": SFNode,
        "coord": SFNode,
        "normal": SFNode,
        "texCoord": SFNode,
        "ccw": _true,
        "colorIndex": MFInt32,
        "colorPerVertex": _true,
        "convex": _true,
        "coordIndex": MFInt32,
        "creaseAngle": SFFloat,
        "normalIndex": MFInt32,
        "normalPerVertex": _true,
        "solid": _true,
        "texCoordIndex": MFInt32,
    }

    coord = _value("coord")
    coord_index = _multi("coordIndex")
    solid = _value("solid")


class IndexedLineSet(GeometryNode):
    type_name = "IndexedLineSet"
    FIELDS = {
        "color": SFNode,
        "coord": SFNode,
        "colorIndex": MFInt32,
        "colorPerVertex": _true,
        "coordIndex": MFInt32,
    }

    coord = _value("coord")
    coord_index = _multi("coordIndex")


class PointSet(GeometryNode):
    type_name = "PointSet"
    FIELDS = {
        "color": SFNode,
        "coord": SFNode,
    }


class Box(GeometryNode):
    type_name = "Box"
    FIELDS = {"size": partial(SFVec3f, (2.0, 2.0, 2.0))}


class Cone(GeometryNode):
    type_name = "Cone"
    FIELDS = {
        "bottomRadius": partial(SFFloat, 1.0),
        "height": partial(SFFloat, 2.0),
        "side": _true,
        "bottom": _true,
    }


class Cylinder(GeometryNode):
    type_name = "Cylinder"
    FIELDS = {
        "bottom": _true,
        "height": partial(SFFloat, 2.0),
        "radius": partial(SFFloat, 1.0),
        "side": _true,
        "top": _true,
    }


class Sphere(GeometryNode):
    type_name = "Sphere"
    FIELDS = {"radius": partial(SFFloat, 1.0)}


# Geometric properties


class Coordinate(Node):
    type_name = "Coordinate"
    DEFAULT_CONTAINER = "coord"
    FIELDS = {"point": MFVec3f}

    point = _multi("point")


class Normal(Node):
    type_name = "Normal"
    DEFAULT_CONTAINER = "normal"
    FIELDS = {"vector": MFVec3f}


class Color(Node):
    type_name = "Color"
    DEFAULT_CONTAINER = "color"
    FIELDS = {"color": MFColor}


class TextureCoordinate(Node):
    type_name = "TextureCoordinate"
    DEFAULT_CONTAINER = "texCoord"
    FIELDS = {"point": MFVec2f}


# Bindable, lights and environment


class Viewpoint(Node):
    type_name = "Viewpoint"
    FIELDS = {
        "fieldOfView": partial(SFFloat, 0.785398),
        "jump": _true,
        "orientation": SFRotation,
        "position": partial(SFVec3f, (0.0, 0.0, 10.0)),
        "description": SFString,
    }

    orientation = _value("orientation")
    position = _value("position")
    description = _value("description")


class Background(Node):
    type_name = "Background"
    FIELDS = {
        "groundAngle": MFFloat,
        "groundColor": MFColor,
        "skyAngle": MFFloat,
        "skyColor": partial(MFColor, [(0.0, 0.0, 0.0)]),
    }


class NavigationInfo(Node):
    type_name = "NavigationInfo"
    FIELDS = {
        "avatarSize": partial(MFFloat, [0.25, 1.6, 0.75]),
        "headlight": _true,
        "speed": partial(SFFloat, 1.0),
        "type": partial(MFString, ["WALK", "ANY"]),
        "visibilityLimit": SFFloat,
    }


class WorldInfo(Node):
    type_name = "WorldInfo"
    FIELDS = {
        "info": MFString,
        "title": SFString,
    }


class PointLight(Node):
    type_name = "PointLight"
    FIELDS = {
        "ambientIntensity": SFFloat,
        "attenuation": partial(SFVec3f, (1.0, 0.0, 0.0)),
        "color": partial(SFColor, (1.0, 1.0, 1.0)),
        "intensity": partial(SFFloat, 1.0),
        "location": SFVec3f,
        "on": _true,
        "radius": partial(SFFloat, 100.0),
    }


class DirectionalLight(Node):
    type_name = "DirectionalLight"
    FIELDS = {
        "ambientIntensity": SFFloat,
        "color": partial(SFColor, (1.0, 1.0, 1.0)),
        "direction": partial(SFVec3f, (0.0, 0.0, -1.0)),
        "intensity": partial(SFFloat, 1.0),
        "on": _true,
    }


# Animation and scripting; carried through verbatim, never interpreted


class TimeSensor(Node):
    type_name = "TimeSensor"
    FIELDS = {
        "cycleInterval": partial(SFTime, 1.0),
        "enabled": _true,
        "loop": SFBool,
        "startTime": SFTime,
        "stopTime": SFTime,
    }


class CoordinateInterpolator(Node):
    type_name = "CoordinateInterpolator"
    FIELDS = {
        "key": MFFloat,
        "keyValue": MFVec3f,
    }


class OrientationInterpolator(Node):
    type_name = "OrientationInterpolator"
    FIELDS = {
        "key": MFFloat,
        "keyValue": MFRotation,
    }


class PositionInterpolator(Node):
    type_name = "PositionInterpolator"
    FIELDS = {
        "key": MFFloat,
        "keyValue": MFVec3f,
    }


class Script(Node):
    type_name = "Script"
    FIELDS = {
        "url": MFString,
        "directOutput": SFBool,
        "mustEvaluate": SFBool,
    }
