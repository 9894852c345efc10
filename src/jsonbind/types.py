"""Runtime type kinds and fixed-width primitive types."""

from __future__ import annotations

import ctypes
from dataclasses import dataclass
from typing import Any, ClassVar, Self, dataclass_transform


class FixedInt(int):
    """Base for integers that wrap to a fixed bit width on decode."""

    bits: ClassVar[int] = 64
    signed: ClassVar[bool] = True

    def __init_subclass__(cls, bits: int = 64, *, signed: bool = True) -> None:
        """Record the width of an integer subclass."""
        super().__init_subclass__()
        cls.bits = bits
        cls.signed = signed

    @classmethod
    def coerce(cls, value: int) -> Self:
        """Wrap value to this width with two's complement semantics."""
        value &= (1 << cls.bits) - 1
        if cls.signed and value >= 1 << (cls.bits - 1):
            value -= 1 << cls.bits
        return cls(value)


class Int8(FixedInt, bits=8):
    """Signed 8-bit integer (sbyte)."""


class UInt8(FixedInt, bits=8, signed=False):
    """Unsigned 8-bit integer (byte)."""


class Int16(FixedInt, bits=16):
    """Signed 16-bit integer (short)."""


class UInt16(FixedInt, bits=16, signed=False):
    """Unsigned 16-bit integer (ushort)."""


class Int32(FixedInt, bits=32):
    """Signed 32-bit integer (int)."""


class UInt32(FixedInt, bits=32, signed=False):
    """Unsigned 32-bit integer (uint)."""


class Int64(FixedInt, bits=64):
    """Signed 64-bit integer (long)."""


class UInt64(FixedInt, bits=64, signed=False):
    """Unsigned 64-bit integer (ulong)."""


class Float32(float):
    """Single precision float."""

    @classmethod
    def coerce(cls, value: float) -> Self:
        """Round value through IEEE single precision."""
        return cls(ctypes.c_float(value).value)


class Char(str):
    """A single UTF-16 code unit, stored as a one character string."""

    __slots__ = ()

    @classmethod
    def coerce(cls, value: str) -> Self:
        """Keep only the first character, ``"\\0"`` for empty text."""
        return cls(value[:1] or "\0")


@dataclass(frozen=True)
@dataclass_transform(frozen_default=True)
class Kind:
    """Base for resolved type kinds.

    Every annotation the converter sees resolves to exactly one kind, and
    encode/decode dispatch on the kind instead of re-inspecting the
    annotation on every call.
    """

    tag: ClassVar[str]
    registry: ClassVar[dict[str, type[Kind]]] = {}

    def __init_subclass__(cls, tag: str | None = None) -> None:
        """Register kind subclass with automatic tag derivation."""
        dataclass(frozen=True)(cls)
        cls.tag = tag if tag is not None else cls.__name__.lower().removesuffix("kind")

        if (existing := Kind.registry.get(cls.tag)) and existing is not cls:
            msg = (
                f"Tag '{cls.tag}' already registered to {existing}. "
                "Choose a different tag."
            )
            raise ValueError(msg)

        Kind.registry[cls.tag] = cls


class PrimitiveKind(Kind, tag="primitive"):
    """Scalar kind: bool, int, float, str, Decimal or a fixed-width type."""

    py_type: type


class EnumKind(Kind, tag="enum"):
    """Enumeration, encoded by its underlying value."""

    enum_type: type


class SequenceKind(Kind, tag="sequence"):
    """Homogeneous ordered collection: list[int] -> SequenceKind(element=...).

    ``container`` is the concrete type built on decode (list, tuple, set,
    frozenset).
    """

    element: Kind
    container: type = list


class TupleKind(Kind, tag="tuple"):
    """Fixed-length heterogeneous tuple: tuple[int, str]."""

    elements: tuple[Kind, ...]


class MappingKind(Kind, tag="mapping"):
    """String-keyed mapping: dict[str, int] -> MappingKind(value=...)."""

    value: Kind


class OptionalKind(Kind, tag="optional"):
    """``T | None``; null decodes to None, anything else as T."""

    inner: Kind


class AnyKind(Kind, tag="any"):
    """Unconstrained target; the node itself is returned."""


class NodeKind(Kind, tag="node"):
    """Target is a tree node type; the node is returned unchanged."""


class CompositeKind(Kind, tag="composite"):
    """User class, converted member by member or through its overrides."""

    cls: type


class UnsupportedKind(Kind, tag="unsupported"):
    """Annotation the converter cannot handle."""

    py_type: Any
    reason: str = ""
