"""Type codec registry and the type-directed object/tree converter."""

from __future__ import annotations

import base64
import enum
import logging
from collections import deque
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, ClassVar

from jsonbind.config import ConvertOptions
from jsonbind.errors import Diagnostic, DiagnosticKind, EnumValueError, type_name
from jsonbind.nodes import (
    JSONArray,
    JSONNode,
    JSONObject,
    as_array,
    as_bool,
    as_char,
    as_decimal,
    as_float,
    as_int,
    as_object,
    as_str,
    is_node,
)
from jsonbind.schema import extract_kind, type_schema
from jsonbind.types import (
    AnyKind,
    Char,
    CompositeKind,
    EnumKind,
    FixedInt,
    Float32,
    Kind,
    MappingKind,
    NodeKind,
    OptionalKind,
    PrimitiveKind,
    SequenceKind,
    TupleKind,
    UnsupportedKind,
)

_NO_SCALAR_FORM = (complex, bytes, bytearray, memoryview)


class TypeCodecs:
    """Registry of encode/decode functions for types the converter cannot
    walk member by member (datetime, bytes, third-party classes).

    A codec takes precedence over every other rule for its exact type.

    Usage:
        TypeCodecs.register(
            UUID,
            encode=str,
            decode=lambda node: UUID(node),
        )
    """

    _registry: ClassVar[
        dict[type, tuple[Callable[[Any], Any], Callable[[Any], Any]]]
    ] = {}

    @classmethod
    def register[T](
        cls,
        typ: type[T],
        encode: Callable[[T], Any],
        decode: Callable[[Any], T],
    ) -> None:
        """Register encode/decode functions for a type.

        Args:
            typ: The type to register (e.g., datetime, UUID)
            encode: Function to convert T into a value the converter can
                encode (the result is encoded recursively)
            decode: Function to convert a tree node into T

        """
        cls._registry[typ] = (encode, decode)

    @classmethod
    def get[T](
        cls,
        typ: type[T],
    ) -> tuple[Callable[[T], Any], Callable[[Any], T]] | None:
        """Get codec for type, or None if not registered."""
        return cls._registry.get(typ)

    @classmethod
    def unregister(cls, typ: type) -> bool:
        """Unregister a type's codec.

        Returns:
            True if the type was registered and removed, False otherwise.

        """
        if typ in cls._registry:
            del cls._registry[typ]
            return True
        return False

    @classmethod
    def clear(cls) -> None:
        """Clear codec registry and re-register builtins."""
        cls._registry.clear()
        _register_builtins()


def _from_text[T](parse: Callable[[str], T]) -> Callable[[JSONNode], T | None]:
    """Wrap a text parser so non-text or unparsable nodes decode to None."""

    def decode(node: JSONNode) -> T | None:
        if not isinstance(node, str):
            return None
        try:
            return parse(node)
        except ValueError:
            return None

    return decode


def _seconds(node: JSONNode) -> timedelta:
    """Read a node as a duration in seconds, zero when out of range."""
    try:
        return timedelta(seconds=as_float(node))
    except (ValueError, OverflowError):
        return timedelta()


def _register_builtins() -> None:
    """Pre-register codecs for Python builtin types."""
    TypeCodecs.register(
        bytes,
        encode=lambda b: base64.b64encode(b).decode("ascii"),
        decode=_from_text(lambda text: base64.b64decode(text, validate=True)),
    )

    TypeCodecs.register(
        datetime,
        encode=lambda dt: dt.isoformat(),
        decode=_from_text(datetime.fromisoformat),
    )

    TypeCodecs.register(
        date,
        encode=lambda d: d.isoformat(),
        decode=_from_text(date.fromisoformat),
    )

    TypeCodecs.register(
        time,
        encode=lambda t: t.isoformat(),
        decode=_from_text(time.fromisoformat),
    )

    TypeCodecs.register(
        timedelta,
        encode=lambda td: td.total_seconds(),
        decode=_seconds,
    )


# Register builtins on module load
_register_builtins()


class Converter:
    """Converts between Python objects and JSON tree nodes.

    Encoding is driven by the runtime type of each value. Decoding is driven
    by the target annotation, resolved once into a Kind.

    Unsupported types are logged at ERROR and recorded in ``diagnostics``;
    the call returns None rather than raising.
    """

    def __init__(
        self,
        options: ConvertOptions | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the converter.

        Args:
            options: Conversion settings (defaults apply when omitted)
            logger: Optional logger for diagnostics

        """
        self.options = options or ConvertOptions()
        self.logger = logger or logging.getLogger(__name__)
        self.diagnostics: deque[Diagnostic] = deque(
            maxlen=self.options.max_diagnostics,
        )

    # -- encoding ----------------------------------------------------------

    def encode(self, obj: Any, ignore: Iterable[str] | None = None) -> JSONNode:
        """Convert an object to a tree node.

        Args:
            obj: The value to convert
            ignore: Qualified member names (``module.Class.member``) to leave
                out of every composite written during this call

        Returns:
            The tree node, or None when obj is None or cannot be encoded.

        """
        return self._encode(obj, frozenset(ignore or ()))

    def _encode(self, obj: Any, ignore: frozenset[str]) -> JSONNode:  # noqa: PLR0911
        if obj is None:
            return None
        if is_node(obj):
            return obj

        typ = type(obj)
        if codec := TypeCodecs.get(typ):
            encode, _ = codec
            return self._encode(encode(obj), ignore)

        # Enum before int: IntEnum members are ints
        if isinstance(obj, enum.Enum):
            return self._encode(obj.value, ignore)
        if isinstance(obj, bool):
            return obj
        if isinstance(obj, int):
            return int(obj)
        if isinstance(obj, float):
            return float(obj)
        if isinstance(obj, str):
            return str(obj)
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, _NO_SCALAR_FORM):
            self._diagnose("encode", typ, "no JSON scalar form")
            return None

        if isinstance(obj, Mapping):
            return self._encode_mapping(obj, ignore)
        if isinstance(obj, Iterable):
            return JSONArray(self._encode(item, ignore) for item in obj)

        return self._encode_composite(obj, ignore)

    def _encode_mapping(self, obj: Mapping[Any, Any], ignore: frozenset[str]) -> JSONNode:
        if not all(isinstance(key, str) for key in obj):
            self._diagnose("encode", type(obj), "mapping keys must be str")
            return None
        result = JSONObject()
        for key, value in obj.items():
            encoded = self._encode(value, ignore)
            if encoded is not None:
                result[key] = encoded
        return result

    def _encode_composite(self, obj: Any, ignore: frozenset[str]) -> JSONNode:
        schema = type_schema(type(obj))
        if schema.encoder:
            return obj.encode()
        if schema.excluded:
            return None

        effective = ignore | schema.ignored
        result = JSONObject()
        for member in schema.members:
            if not member.encodable or member.qualname in effective:
                continue
            value = getattr(obj, member.name, None)
            if value is None:
                continue
            encoded = self._encode(value, effective)
            if encoded is not None:
                result[member.name] = encoded
        return result

    # -- decoding ----------------------------------------------------------

    def decode(self, node: JSONNode, target: Any) -> Any:
        """Convert a tree node to an instance of the target annotation.

        Args:
            node: The tree node to read
            target: A class or annotation such as ``list[int]``

        Returns:
            The decoded value; None for a None node or target.

        Raises:
            TypeError: If a composite target has no default constructor
            EnumValueError: If enum validation is enabled and fails

        """
        if node is None or target is None:
            return None
        return self._decode(node, extract_kind(target))

    def decode_into(self, node: JSONNode, instance: Any) -> None:
        """Populate an existing instance from an object node."""
        if node is None or instance is None:
            return
        self._populate(node, instance)

    def _decode(self, node: JSONNode, kind: Kind) -> Any:  # noqa: PLR0911
        match kind:
            case OptionalKind(inner=inner):
                return None if node is None else self._decode(node, inner)
            case AnyKind() | NodeKind():
                return node
            case PrimitiveKind(py_type=py_type):
                return self._decode_primitive(node, py_type)
            case EnumKind(enum_type=enum_type):
                return self._decode_enum(node, enum_type)
            case UnsupportedKind(py_type=py_type, reason=reason):
                if isinstance(py_type, type) and (codec := TypeCodecs.get(py_type)):
                    return None if node is None else codec[1](node)
                self._diagnose("decode", py_type, reason)
                return None

        if node is None:
            return None

        match kind:
            case SequenceKind(element=element, container=container):
                items = as_array(node)
                if items is None:
                    return None
                return container(self._decode(item, element) for item in items)
            case TupleKind(elements=elements):
                items = as_array(node)
                if items is None:
                    return None
                return tuple(
                    self._decode(item, element)
                    for item, element in zip(items, elements, strict=False)
                )
            case MappingKind(value=value):
                entries = as_object(node)
                if entries is None:
                    return None
                return {key: self._decode(item, value) for key, item in entries.items()}
            case CompositeKind(cls=cls):
                if codec := TypeCodecs.get(cls):
                    return codec[1](node)
                instance = cls()
                self._populate(node, instance)
                return instance

        self._diagnose("decode", kind, "unhandled kind")
        return None

    def _decode_primitive(self, node: JSONNode, py_type: type) -> Any:  # noqa: PLR0911
        if py_type is bool:
            return as_bool(node)
        if issubclass(py_type, FixedInt):
            return py_type.coerce(as_int(node))
        if py_type is int:
            return as_int(node)
        if issubclass(py_type, Float32):
            return py_type.coerce(as_float(node))
        if py_type is float:
            return as_float(node)
        if issubclass(py_type, Char):
            return py_type.coerce(as_char(node))
        if py_type is str:
            return as_str(node)
        if py_type is Decimal:
            return as_decimal(node)
        self._diagnose("decode", py_type, "unsupported primitive")
        return None

    def _decode_enum(self, node: JSONNode, enum_type: type[enum.Enum]) -> Any:
        raw = as_int(node) if _int_valued(enum_type) else node
        try:
            return enum_type(raw)
        except ValueError:
            if self.options.validate_enums:
                raise EnumValueError(enum_type, raw) from None
            return raw

    def _populate(self, node: JSONNode, instance: Any) -> None:
        schema = type_schema(type(instance))
        if schema.decoder:
            instance.decode(node)
            return
        entries = as_object(node)
        if entries is None:
            return
        for member in schema.members:
            if member.decodable and member.name in entries:
                setattr(instance, member.name, self._decode(entries[member.name], member.kind))

    def _diagnose(self, operation: str, py_type: Any, detail: str) -> None:
        diagnostic = Diagnostic(
            kind=DiagnosticKind.UNSUPPORTED_TYPE,
            operation=operation,
            py_type=py_type,
            detail=detail,
        )
        self.diagnostics.append(diagnostic)
        self.logger.error(
            "%s: unsupported type %s (%s)",
            operation,
            type_name(py_type),
            detail,
        )


def _int_valued(enum_type: type[enum.Enum]) -> bool:
    if issubclass(enum_type, int):
        return True
    return all(isinstance(member.value, int) for member in enum_type)


_default = Converter()


def default_converter() -> Converter:
    """Return the converter used by the module-level functions."""
    return _default


def configure(**changes: Any) -> Converter:
    """Replace the default converter with one using updated options.

    Example:
        configure(indent=2, validate_enums=True)

    """
    global _default  # noqa: PLW0603
    _default = Converter(replace(_default.options, **changes), _default.logger)
    return _default


def to_json_node(obj: Any, ignore: Iterable[str] | None = None) -> JSONNode:
    """Convert an object to a tree node with the default converter."""
    return _default.encode(obj, ignore)


def from_node(node: JSONNode, target: Any) -> Any:
    """Convert a tree node to the target type with the default converter."""
    return _default.decode(node, target)
