# SPDX-License-Identifier: MIT
"""Exceptions raised while reading, transforming or writing a scene."""

from __future__ import annotations


class VrmlError(Exception):
    """Base class for all scene errors. None of them are recoverable."""


class UnsupportedNodeError(VrmlError, NotImplementedError):
    """A node kind with no reader or writer mapping was encountered."""

    def __init__(self, type_name: str):
        super().__init__(f"Node type {type_name} not implemented")
        self.type_name = type_name


class MalformedValueError(VrmlError, ValueError):
    """A field value could not be decoded or is structurally invalid."""


class UnresolvedReferenceError(VrmlError, LookupError):
    """A USE names an identifier that was never defined."""

    def __init__(self, name: str):
        super().__init__(f"USE of undefined name {name!r}")
        self.name = name
