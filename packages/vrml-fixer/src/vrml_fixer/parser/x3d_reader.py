# SPDX-License-Identifier: MIT
"""Read X3D (XML encoding) into the same scene graph the VRML parser builds.

This is a thin adapter, far from a complete X3D reader:
- attributes are mapped onto the fields the node kind declares; anything
  else is reported and skipped
- nested elements are stored into their ``containerField`` (or the node
  kind's default container)
- NavigationInfo, Background and DirectionalLight children of grouping
  nodes are dropped, as are ROUTEs
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path

from vrml_fixer.errors import MalformedValueError, UnresolvedReferenceError
from vrml_fixer.scene.fields import Field, MField, MFNode, MFString, SField, SFNode, SFString
from vrml_fixer.scene.nodes import (
    Background,
    DirectionalLight,
    GroupingNode,
    NavigationInfo,
    Node,
    create_node,
)
from vrml_fixer.scene.scene_graph import Scene

logger = logging.getLogger(__name__)

QUOTED_STRING_PATTERN = re.compile(r'"((?:[^"\\]|\\.)*)"', re.DOTALL)
ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)

DEFAULT_SKIPPED_TYPES: tuple[type[Node], ...] = (NavigationInfo, Background, DirectionalLight)
IGNORED_ELEMENTS = frozenset({"ROUTE", "head", "meta", "component", "unit"})
SILENT_ATTRIBUTES = frozenset({"DEF", "USE", "containerField"})


def local_name(tag: str) -> str:
    """Strip an XML namespace from a tag or attribute name."""
    return tag.rsplit("}", 1)[-1]


def split_numbers(text: str) -> list[str]:
    return text.replace(",", " ").split()


def split_strings(text: str) -> list[str]:
    """Split an X3D MFString attribute (``'"a" "b"'``) into its items.

    An attribute without any quotes is taken as a single item.
    """
    items = QUOTED_STRING_PATTERN.findall(text)
    if items:
        return [ESCAPE_PATTERN.sub(r"\1", item) for item in items]
    stripped = text.strip()
    return [stripped] if stripped else []


class X3dReader:
    """Builds a Scene from an X3D element tree.

    ``defs`` maps DEF names to nodes, so that USE resolves to the very
    node instance defined earlier.
    """

    def __init__(self, skipped_types: tuple[type[Node], ...] = DEFAULT_SKIPPED_TYPES):
        self.defs: dict[str, Node] = {}
        self.skipped_types = skipped_types

    def read(self, root: ET.Element) -> Scene:
        """Read the ``Scene`` element of an ``X3D`` document root.

        Raises:
            MalformedValueError: if there is no Scene element
        """
        scene_element = root if local_name(root.tag) == "Scene" else None
        if scene_element is None:
            scene_element = next(
                (child for child in root if local_name(child.tag) == "Scene"), None
            )
        if scene_element is None:
            raise MalformedValueError("X3D document has no Scene element")

        scene = Scene()
        self._read_children(scene.root, scene_element)
        return scene

    def read_node(self, element: ET.Element) -> Node:
        """Read one element and its descendants into a node.

        Raises:
            UnsupportedNodeError: if the element names an unknown node kind
            UnresolvedReferenceError: if USE names an undefined node
            MalformedValueError: if an attribute value can't be decoded
        """
        use = element.get("USE")
        if use is not None:
            if use not in self.defs:
                raise UnresolvedReferenceError(use)
            return self.defs[use]

        tag = local_name(element.tag)
        node = create_node(tag)
        def_name = element.get("DEF")
        if def_name is not None:
            node.name = def_name
            self.defs[def_name] = node

        for raw_name, text in element.attrib.items():
            attr = local_name(raw_name)
            if attr in SILENT_ATTRIBUTES:
                continue
            field = node.fields.get(attr)
            if field is None or isinstance(field, (SFNode, MFNode)):
                logger.warning("Ignoring attribute %s on node %s", attr, tag)
                continue
            self._set_field(field, text, attr, tag)

        self._read_children(node, element)
        return node

    def _set_field(self, field: Field, text: str, attr: str, tag: str) -> None:
        try:
            if isinstance(field, SFString):
                field.value = text
            elif isinstance(field, MFString):
                field.value = split_strings(text)
            elif isinstance(field, MField):
                field.value = field.parse_values(split_numbers(text))
            elif isinstance(field, SField):
                field.value = field.parse_components(split_numbers(text))
        except MalformedValueError as e:
            raise MalformedValueError(f"Attribute {attr} on node {tag}: {e}") from e

    def _read_children(self, parent: Node, element: ET.Element) -> None:
        for child_element in element:
            if not isinstance(child_element.tag, str):
                continue  # comments and processing instructions
            tag = local_name(child_element.tag)
            if tag in IGNORED_ELEMENTS:
                logger.warning("Ignoring %s element in %s", tag, local_name(element.tag))
                continue
            child = self.read_node(child_element)
            if isinstance(parent, GroupingNode) and isinstance(child, self.skipped_types):
                logger.debug("Skipping %s", child.type_name)
                continue
            self._attach(parent, child, child_element.get("containerField"))

    @staticmethod
    def _attach(parent: Node, child: Node, container: str | None) -> None:
        field_name = container or child.DEFAULT_CONTAINER
        if field_name == "children" and isinstance(parent, GroupingNode):
            field_name = parent.CHILDREN_FIELD
        field = parent.fields.get(field_name)
        if isinstance(field, SFNode):
            field.value = child
        elif isinstance(field, MFNode):
            field.append(child)
        else:
            raise MalformedValueError(
                f"{child.type_name} cannot be nested in {parent.type_name} "
                f"(no node field {field_name!r})"
            )


def read_x3d_file(path: Path | str) -> Scene:
    """Read an X3D file."""
    path = Path(path)
    logger.info("Reading X3D %s", path)
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise MalformedValueError(f"{path}: {e}") from e
    return X3dReader().read(root)
