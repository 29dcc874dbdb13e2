# SPDX-License-Identifier: MIT
"""Parse VRML97 text into a scene graph.

Only the node kinds of ``vrml_fixer.scene.nodes`` are understood. PROTO
declarations are rejected and ROUTE statements are dropped.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from vrml_fixer.errors import MalformedValueError, UnresolvedReferenceError, UnsupportedNodeError
from vrml_fixer.parser.tokenizer import Token, TokenType, tokenize
from vrml_fixer.scene.fields import Field, MField, MFNode, MFString, SField, SFNode, SFString
from vrml_fixer.scene.nodes import Node, create_node
from vrml_fixer.scene.scene_graph import Scene

logger = logging.getLogger(__name__)

VRML97_HEADER_PREFIX = "#VRML V2.0"


class VrmlParser:
    """Recursive-descent parser over a VRML97 token stream."""

    def __init__(self, tokens: Iterable[Token]):
        self._tokens = list(tokens)
        self._pos = 0
        self.defs: dict[str, Node] = {}

    def parse(self, scene: Scene | None = None) -> Scene:
        """Parse every top-level statement into ``scene``.

        Args:
            scene: Scene to append to; a new one is created if omitted

        Returns:
            The populated scene
        """
        if scene is None:
            scene = Scene()
        while not self._at_end():
            node = self._parse_statement()
            if node is not None:
                scene.children.append(node)
        return scene

    # Token helpers

    def _at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def _peek(self) -> Token:
        if self._at_end():
            raise MalformedValueError("Unexpected end of input")
        return self._tokens[self._pos]

    def _next(self) -> Token:
        token = self._peek()
        self._pos += 1
        return token

    def _expect_punct(self, char: str) -> None:
        token = self._next()
        if not token.is_punct(char):
            raise MalformedValueError(f"Expected {char!r} on line {token.line}, got {token.text!r}")

    def _next_word(self) -> str:
        token = self._next()
        if token.type is not TokenType.WORD:
            raise MalformedValueError(f"Expected a name on line {token.line}, got {token.text!r}")
        return token.text

    # Statements

    def _parse_statement(self) -> Node | None:
        token = self._peek()
        if token.is_word("ROUTE"):
            self._skip_route()
            return None
        if token.is_word("PROTO") or token.is_word("EXTERNPROTO"):
            raise UnsupportedNodeError(token.text)
        return self._parse_node()

    def _skip_route(self) -> None:
        line = self._next().line
        source = self._next_word()
        if self._next_word() != "TO":
            raise MalformedValueError(f"Expected TO in ROUTE on line {line}")
        target = self._next_word()
        logger.warning("Ignoring ROUTE %s TO %s on line %d", source, target, line)

    def _parse_node(self) -> Node | None:
        word = self._next_word()
        if word == "NULL":
            return None
        if word == "USE":
            name = self._next_word()
            if name not in self.defs:
                raise UnresolvedReferenceError(name)
            return self.defs[name]
        if word == "DEF":
            name = self._next_word()
            return self._parse_node_body(self._next_word(), name)
        return self._parse_node_body(word)

    def _parse_node_body(self, type_name: str, def_name: str | None = None) -> Node:
        node = create_node(type_name)
        if def_name is not None:
            node.name = def_name
            self.defs[def_name] = node

        self._expect_punct("{")
        while not self._peek().is_punct("}"):
            if self._peek().is_word("ROUTE"):
                self._skip_route()
                continue
            token = self._next()
            field = node.fields.get(token.text)
            if token.type is not TokenType.WORD or field is None:
                raise MalformedValueError(
                    f"Unknown field {token.text!r} on {type_name} (line {token.line})"
                )
            self._parse_field_value(field, token.line)
        self._expect_punct("}")
        return node

    # Field values

    def _parse_field_value(self, field: Field, line: int) -> None:
        if isinstance(field, SFNode):
            field.value = self._parse_node()
        elif isinstance(field, MFNode):
            if self._peek().is_punct("["):
                self._next()
                nodes = []
                while not self._peek().is_punct("]"):
                    node = self._parse_statement()
                    if node is not None:
                        nodes.append(node)
                self._next()
                field.value = nodes
            else:
                node = self._parse_node()
                field.value = [] if node is None else [node]
        elif isinstance(field, MField):
            if self._peek().is_punct("["):
                self._next()
                tokens = []
                while not self._peek().is_punct("]"):
                    tokens.append(self._next())
                self._next()
            else:
                tokens = self._take(field.ITEM.COMPONENTS)
            field.value = field.parse_values(self._token_texts(tokens, field))
        elif isinstance(field, SField):
            tokens = self._take(field.COMPONENTS)
            field.value = field.parse_components(self._token_texts(tokens, field))
        else:
            raise MalformedValueError(f"Cannot parse a {field.kind} on line {line}")

    def _take(self, count: int) -> list[Token]:
        tokens = []
        for _ in range(count):
            token = self._next()
            if token.type is TokenType.PUNCT:
                raise MalformedValueError(f"Unexpected {token.text!r} on line {token.line}")
            tokens.append(token)
        return tokens

    @staticmethod
    def _token_texts(tokens: list[Token], field: Field) -> list[str]:
        wants_strings = isinstance(field, (SFString, MFString))
        for token in tokens:
            if token.type is TokenType.PUNCT or (token.type is TokenType.STRING) != wants_strings:
                raise MalformedValueError(
                    f"Invalid {field.kind} value {token.text!r} on line {token.line}"
                )
        return [token.text for token in tokens]


def parse_vrml(text: str) -> Scene:
    """Parse VRML97 text into a new scene."""
    stripped = text.lstrip("\ufeff")
    if not stripped.startswith(VRML97_HEADER_PREFIX):
        logger.warning("Input does not start with a %r header", VRML97_HEADER_PREFIX)
    return VrmlParser(tokenize(stripped)).parse()


def read_vrml_file(path: Path | str) -> Scene:
    """Read and parse a VRML97 file."""
    path = Path(path)
    logger.info("Reading VRML %s", path)
    return parse_vrml(path.read_text(encoding="utf-8"))
