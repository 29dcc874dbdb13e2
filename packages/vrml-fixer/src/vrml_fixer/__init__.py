# SPDX-License-Identifier: MIT
"""VRML Fixer - Simplify and rewrite VRML97/X3D scene graphs."""

from vrml_fixer.config import PipelineConfig
from vrml_fixer.errors import (
    MalformedValueError,
    UnresolvedReferenceError,
    UnsupportedNodeError,
    VrmlError,
)
from vrml_fixer.pipeline import apply_fixes, process_file, read_scene
from vrml_fixer.scene import Scene
from vrml_fixer.writer import VrmlWriter, to_vrml_string, write_vrml_file

__version__ = "0.1.0"
__all__ = [
    "PipelineConfig",
    "VrmlError",
    "UnsupportedNodeError",
    "MalformedValueError",
    "UnresolvedReferenceError",
    "Scene",
    "VrmlWriter",
    "apply_fixes",
    "process_file",
    "read_scene",
    "to_vrml_string",
    "write_vrml_file",
]
