# SPDX-License-Identifier: MIT
"""Typed field containers for scene nodes.

Every field remembers the default it was declared with, so that
``is_default`` can compare against a freshly built default instance
instead of a hardcoded literal. Vector-like values are immutable named
tuples, which gives exact value equality and hashing for free.
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterable, Iterator, NamedTuple

from vrml_fixer.errors import MalformedValueError


class Vec2(NamedTuple):
    """2D vector (texture coordinates)."""

    x: float
    y: float


class Vec3(NamedTuple):
    """3D vector (points, translations, scales)."""

    x: float
    y: float
    z: float


class RGB(NamedTuple):
    """RGB color with values 0-1."""

    r: float
    g: float
    b: float


class Rotation(NamedTuple):
    """Axis-angle rotation, angle in radians."""

    x: float
    y: float
    z: float
    angle: float

    @classmethod
    def identity(cls) -> Rotation:
        """The rotation VRML uses as its default."""
        return cls(0.0, 0.0, 1.0, 0.0)


_UNSET: Any = object()


class Field:
    """Base class for all field containers."""

    kind: ClassVar[str] = ""
    DEFAULT: ClassVar[Any] = None

    def __init__(self, default: Any = _UNSET):
        self.default = self.coerce(self.DEFAULT if default is _UNSET else default)
        self._value = self.default

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        self._value = self.coerce(new_value)

    @classmethod
    def coerce(cls, value: Any) -> Any:
        return value

    def make_default(self) -> Field:
        """Create a fresh instance of this field holding its default value."""
        return type(self)(self.default)

    def is_default(self) -> bool:
        """Check whether the field currently holds its declared default."""
        return self == self.make_default()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"


class SField(Field):
    """Single-value field."""

    COMPONENTS: ClassVar[int] = 1

    @classmethod
    def parse_components(cls, parts: list[str]) -> Any:
        """Decode the textual components of one value.

        Raises:
            MalformedValueError: if the component count or a number is wrong
        """
        if len(parts) != cls.COMPONENTS:
            raise MalformedValueError(
                f"{cls.kind} expects {cls.COMPONENTS} components, got {len(parts)}: "
                f"{' '.join(parts)!r}"
            )
        try:
            return cls._from_parts(parts)
        except ValueError as e:
            raise MalformedValueError(f"Invalid {cls.kind} value {' '.join(parts)!r}") from e

    @classmethod
    def _from_parts(cls, parts: list[str]) -> Any:
        raise NotImplementedError(cls.kind)


class SFBool(SField):
    kind = "SFBool"
    DEFAULT = False

    @classmethod
    def coerce(cls, value: Any) -> bool:
        return bool(value)

    @classmethod
    def _from_parts(cls, parts: list[str]) -> bool:
        text = parts[0].lower()
        if text not in ("true", "false"):
            raise ValueError(parts[0])
        return text == "true"


def _parse_int(text: str) -> int:
    if text.lower().lstrip("+-").startswith("0x"):
        return int(text, 16)
    return int(text)


class SFInt32(SField):
    kind = "SFInt32"
    DEFAULT = 0

    @classmethod
    def coerce(cls, value: Any) -> int:
        return int(value)

    @classmethod
    def _from_parts(cls, parts: list[str]) -> int:
        return _parse_int(parts[0])


class SFFloat(SField):
    kind = "SFFloat"
    DEFAULT = 0.0

    @classmethod
    def coerce(cls, value: Any) -> float:
        return float(value)

    @classmethod
    def _from_parts(cls, parts: list[str]) -> float:
        return float(parts[0])


class SFTime(SFFloat):
    kind = "SFTime"


class SFString(SField):
    kind = "SFString"
    DEFAULT = ""

    @classmethod
    def coerce(cls, value: Any) -> str:
        return str(value)

    @classmethod
    def _from_parts(cls, parts: list[str]) -> str:
        return parts[0]


class SFVec2f(SField):
    kind = "SFVec2f"
    COMPONENTS = 2
    DEFAULT = Vec2(0.0, 0.0)

    @classmethod
    def coerce(cls, value: Any) -> Vec2:
        return Vec2(*(float(c) for c in value))

    @classmethod
    def _from_parts(cls, parts: list[str]) -> Vec2:
        return Vec2(*(float(p) for p in parts))


class SFVec3f(SField):
    kind = "SFVec3f"
    COMPONENTS = 3
    DEFAULT = Vec3(0.0, 0.0, 0.0)

    @classmethod
    def coerce(cls, value: Any) -> Vec3:
        return Vec3(*(float(c) for c in value))

    @classmethod
    def _from_parts(cls, parts: list[str]) -> Vec3:
        return Vec3(*(float(p) for p in parts))


class SFColor(SField):
    kind = "SFColor"
    COMPONENTS = 3
    DEFAULT = RGB(0.0, 0.0, 0.0)

    @classmethod
    def coerce(cls, value: Any) -> RGB:
        return RGB(*(float(c) for c in value))

    @classmethod
    def _from_parts(cls, parts: list[str]) -> RGB:
        return RGB(*(float(p) for p in parts))


class SFRotation(SField):
    kind = "SFRotation"
    COMPONENTS = 4
    DEFAULT = Rotation.identity()

    @classmethod
    def coerce(cls, value: Any) -> Rotation:
        return Rotation(*(float(c) for c in value))

    @classmethod
    def _from_parts(cls, parts: list[str]) -> Rotation:
        return Rotation(*(float(p) for p in parts))


class SFNode(SField):
    """Shared reference to another node, or None."""

    kind = "SFNode"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value is other._value

    __hash__ = None  # type: ignore[assignment]


class MField(Field):
    """Ordered, growable sequence of single values."""

    ITEM: ClassVar[type[SField]] = SField
    DEFAULT = ()

    def __init__(self, default: Any = _UNSET):
        self.default = tuple(self.coerce(self.DEFAULT if default is _UNSET else default))
        self._value = self.coerce(self.default)

    @classmethod
    def coerce(cls, value: Any) -> list:
        return [cls.ITEM.coerce(v) for v in value]

    def append(self, value: Any) -> None:
        self._value.append(self.ITEM.coerce(value))

    def extend(self, values: Iterable[Any]) -> None:
        for value in values:
            self.append(value)

    def clear(self) -> None:
        self._value.clear()

    def __iter__(self) -> Iterator[Any]:
        return iter(self._value)

    def __len__(self) -> int:
        return len(self._value)

    def __getitem__(self, index: int) -> Any:
        return self._value[index]

    @classmethod
    def parse_values(cls, parts: list[str]) -> list:
        """Decode a flat token list into item values.

        Raises:
            MalformedValueError: if the tokens don't split into whole items
        """
        size = cls.ITEM.COMPONENTS
        if len(parts) % size != 0:
            raise MalformedValueError(
                f"{cls.kind} expects a multiple of {size} components, got {len(parts)}"
            )
        return [
            cls.ITEM.parse_components(parts[i : i + size])
            for i in range(0, len(parts), size)
        ]


class MFInt32(MField):
    kind = "MFInt32"
    ITEM = SFInt32


class MFFloat(MField):
    kind = "MFFloat"
    ITEM = SFFloat


class MFString(MField):
    kind = "MFString"
    ITEM = SFString


class MFVec2f(MField):
    kind = "MFVec2f"
    ITEM = SFVec2f


class MFVec3f(MField):
    kind = "MFVec3f"
    ITEM = SFVec3f


class MFColor(MField):
    kind = "MFColor"
    ITEM = SFColor


class MFRotation(MField):
    kind = "MFRotation"
    ITEM = SFRotation


class MFNode(MField):
    """Ordered list of shared node references."""

    kind = "MFNode"
    ITEM = SFNode

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return len(self._value) == len(other._value) and all(
            a is b for a, b in zip(self._value, other._value)
        )

    __hash__ = None  # type: ignore[assignment]
