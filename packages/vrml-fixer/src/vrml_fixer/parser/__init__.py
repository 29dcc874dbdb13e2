# SPDX-License-Identifier: MIT
"""Readers that build a scene graph from VRML97 or X3D input."""

from .tokenizer import Token, TokenType, tokenize
from .vrml_parser import VrmlParser, parse_vrml, read_vrml_file
from .x3d_reader import X3dReader, read_x3d_file

__all__ = [
    "Token",
    "TokenType",
    "tokenize",
    "VrmlParser",
    "parse_vrml",
    "read_vrml_file",
    "X3dReader",
    "read_x3d_file",
]
