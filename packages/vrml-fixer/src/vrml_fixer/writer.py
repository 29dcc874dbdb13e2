# SPDX-License-Identifier: MIT
"""VRML97 writer with DEF/USE reference discovery and default elision."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Callable, TextIO

import numpy as np

from vrml_fixer.errors import UnsupportedNodeError
from vrml_fixer.scene.fields import (
    Field,
    MField,
    MFNode,
    SFBool,
    SField,
    SFColor,
    SFFloat,
    SFInt32,
    SFNode,
    SFRotation,
    SFString,
    SFVec2f,
    SFVec3f,
)
from vrml_fixer.scene.nodes import NODE_TYPES, Node
from vrml_fixer.scene.scene_graph import Scene, iter_child_nodes, walk

logger = logging.getLogger(__name__)

VRML_HEADER = "#VRML V2.0 utf8"


def format_float(value: float) -> str:
    """Shortest decimal text that parses back to the same float."""
    return np.format_float_positional(value, unique=True, trim="-")


def quote_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _format_components(value: tuple[float, ...]) -> str:
    return " ".join(format_float(c) for c in value)


_FORMATTERS: dict[type[SField], Callable[[Any], str]] = {
    SFBool: lambda v: "TRUE" if v else "FALSE",
    SFInt32: str,
    SFFloat: format_float,
    SFString: quote_string,
    SFVec2f: _format_components,
    SFVec3f: _format_components,
    SFColor: _format_components,
    SFRotation: _format_components,
}


def format_value(field_class: type[SField], value: Any) -> str:
    """Encode one single value of the given field class as VRML text."""
    for cls in field_class.__mro__:
        formatter = _FORMATTERS.get(cls)
        if formatter is not None:
            return formatter(value)
    raise NotImplementedError(f"No text encoding for {field_class.kind}")


def _field_rank(field: Field) -> int:
    # value fields, then single references, then arrays
    if isinstance(field, MField):
        return 2
    if isinstance(field, SFNode):
        return 1
    return 0


class VrmlWriter:
    """Serializes a scene graph as VRML97 text.

    Nodes reachable more than once are written in full the first time,
    prefixed with ``DEF <name>``, and as ``USE <name>`` afterwards. Names
    are ``ref_<n>`` in discovery order, so output is deterministic.
    """

    def __init__(self, stream: TextIO, indent: int = 0):
        """Initialize writer.

        Args:
            stream: Text stream receiving the output
            indent: Spaces per nesting level (0 disables indentation)
        """
        self._stream = stream
        self.indent = indent
        self.node_ids: dict[Node, int] = {}
        self.node_lengths: dict[Node, int] = {}
        self.scene: Scene | None = None
        self._refs: dict[Node, int] = {}
        self._ref_names: dict[Node, str] = {}
        self._refs_written: set[Node] = set()
        self._depth = 0
        self._position = 0

    def _reset(self) -> None:
        self.node_lengths = {}
        self._refs = {}
        self._ref_names = {}
        self._refs_written = set()
        self._depth = 0
        self._position = 0

    def _write(self, text: str) -> None:
        self._stream.write(text)
        self._position += len(text)

    def _write_indent(self) -> None:
        if self.indent > 0 and self._depth > 0:
            self._write(" " * (self.indent * self._depth))

    def _write_line(self, text: str) -> None:
        self._write_indent()
        self._write(text + "\n")

    def assign_node_ids(self, root: Node) -> dict[Node, int]:
        """Number every distinct node reachable from root, depth-first.

        Nodes that already have an id keep it.

        Returns:
            The writer's node id mapping
        """
        for node in walk(root):
            if node not in self.node_ids:
                self.node_ids[node] = len(self.node_ids)
        return self.node_ids

    def discover_refs(self, node: Node | None) -> None:
        """Count how many times each distinct node is reached."""
        if node is None:
            return
        if node in self._refs:
            self._refs[node] += 1
            return
        self._refs[node] = 1
        for child in iter_child_nodes(node):
            self.discover_refs(child)

    @property
    def ref_names(self) -> dict[Node, str]:
        """Names given to shared nodes by the last ``write_scene``."""
        return dict(self._ref_names)

    def write_scene(self, scene: Scene) -> None:
        """Write the header followed by every top-level node."""
        self._reset()
        self.scene = scene
        self.discover_refs(scene.root)
        shared = [node for node, count in self._refs.items() if count > 1]
        self._ref_names = {node: f"ref_{i}" for i, node in enumerate(shared)}
        if shared:
            logger.debug("%d shared nodes will be written with DEF/USE", len(shared))

        self._write_line(VRML_HEADER)
        for child in scene.root.children:
            self.write_node(child)

    def write_node(self, node: Node) -> None:
        """Write one node, starting at the current cursor position.

        Raises:
            UnsupportedNodeError: if the node kind has no writer mapping
        """
        start = self._position
        name = self._ref_names.get(node)
        if name is not None:
            if node in self._refs_written:
                self._write(f"USE {name}\n")
                return
            self._refs_written.add(node)
            self._write(f"DEF {name} ")

        if NODE_TYPES.get(node.type_name) is not type(node):
            raise UnsupportedNodeError(node.type_name or type(node).__name__)

        self._write(f"{node.type_name} {{\n")
        self._depth += 1
        exposed = node.exposed_fields
        fields = sorted(
            ((n, f) for n, f in node.fields.items() if n in exposed),
            key=lambda item: (_field_rank(item[1]), item[0]),
        )
        for field_name, field in fields:
            if not field.is_default():
                self._write_field(field_name, field)
        self._depth -= 1
        self._write_line("}")
        self.node_lengths[node] = self._position - start

    def _write_field(self, field_name: str, field: Field) -> None:
        if isinstance(field, SFNode):
            self._write_indent()
            self._write(f"{field_name} ")
            self.write_node(field.value)
        elif isinstance(field, MFNode):
            self._write_line(f"{field_name} [")
            self._depth += 1
            for child in field:
                self._write_indent()
                self.write_node(child)
            self._depth -= 1
            self._write_line("]")
        elif isinstance(field, MField):
            self._write_line(f"{field_name} [")
            self._depth += 1
            for item in field:
                self._write_line(format_value(field.ITEM, item))
            self._depth -= 1
            self._write_line("]")
        else:
            self._write_line(f"{field_name} {format_value(type(field), field.value)}")


def write_vrml_file(scene: Scene, path: Path | str, indent: int = 0) -> VrmlWriter:
    """Write a scene to a VRML file.

    The file is closed on every exit path; a failure part way through
    leaves partial output behind.

    Returns:
        The writer, for its node length bookkeeping
    """
    path = Path(path)
    with path.open("w", encoding="utf-8", newline="\n") as stream:
        writer = VrmlWriter(stream, indent=indent)
        writer.write_scene(scene)
    logger.info("Wrote %s", path)
    return writer


def to_vrml_string(scene: Scene, indent: int = 0) -> str:
    """Serialize a scene to a VRML string."""
    stream = io.StringIO()
    VrmlWriter(stream, indent=indent).write_scene(scene)
    return stream.getvalue()
