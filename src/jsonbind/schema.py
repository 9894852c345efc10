"""Kind extraction and member reflection for composite types."""

from __future__ import annotations

import enum
import inspect
import logging
import types
from collections.abc import (
    Collection,
    Iterable,
    Mapping,
    MutableMapping,
    MutableSequence,
    MutableSet,
    Sequence,
)
from collections.abc import Set as AbstractSet
from dataclasses import InitVar, dataclass
from decimal import Decimal
from typing import (
    Annotated,
    Any,
    ClassVar,
    Literal,
    NewType,
    TypeAliasType,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from jsonbind.markers import (
    Decoder,
    Encoder,
    Exclude,
    Include,
    Marker,
    Transient,
    markers_of,
)
from jsonbind.nodes import JSONArray, JSONNode, JSONObject
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

logger = logging.getLogger(__name__)

_PRIMITIVES: frozenset[type] = frozenset({bool, int, float, str, Decimal})
_NO_SCALAR_FORM: frozenset[type] = frozenset({complex, bytes, bytearray, memoryview})

_SEQUENCE_ORIGINS: dict[Any, type] = {
    list: list,
    Sequence: list,
    MutableSequence: list,
    Collection: list,
    Iterable: list,
    set: set,
    MutableSet: set,
    AbstractSet: set,
    frozenset: frozenset,
}
_MAPPING_ORIGINS = (dict, Mapping, MutableMapping)

_kind_cache: dict[Any, Kind] = {}
_schema_cache: dict[type, TypeSchema] = {}


def extract_kind(py_type: Any) -> Kind:
    """Resolve a Python annotation to its Kind.

    Results are cached by annotation; annotations that cannot be hashed are
    resolved on every call.
    """
    try:
        return _kind_cache[py_type]
    except KeyError:
        kind = _kind_cache[py_type] = _extract_kind(py_type)
        return kind
    except TypeError:
        return _extract_kind(py_type)


def _extract_kind(py_type: Any) -> Kind:  # noqa: C901, PLR0911, PLR0912
    origin = get_origin(py_type)
    args = get_args(py_type)

    if origin is Annotated:
        return extract_kind(args[0])

    if py_type is Any or py_type is object:
        return AnyKind()

    if py_type is JSONNode or py_type in (JSONArray, JSONObject):
        return NodeKind()

    # PEP 695 aliases, plain and generic
    if isinstance(py_type, TypeAliasType):
        return extract_kind(py_type.__value__)
    if isinstance(origin, TypeAliasType):
        params = origin.__type_params__
        if len(params) != len(args):
            return UnsupportedKind(
                py_type,
                f"alias {origin.__name__} expects {len(params)} arguments",
            )
        return extract_kind(
            _substitute_type_params(origin.__value__, dict(zip(params, args, strict=True))),
        )

    if isinstance(py_type, NewType):
        return extract_kind(py_type.__supertype__)

    if isinstance(py_type, TypeVar):
        bound = py_type.__bound__
        return extract_kind(bound) if bound is not None else AnyKind()

    if isinstance(py_type, type):
        if py_type in _NO_SCALAR_FORM:
            return UnsupportedKind(py_type, "no JSON scalar form")
        if issubclass(py_type, enum.Enum):
            return EnumKind(py_type)
        if py_type in _PRIMITIVES or issubclass(py_type, FixedInt | Float32 | Char):
            return PrimitiveKind(py_type)
        if py_type is type(None):
            return UnsupportedKind(py_type, "NoneType is not a value type")

    if isinstance(py_type, types.UnionType) or origin is Union:
        options = [a for a in args if a is not type(None)]
        if len(options) != 1:
            return UnsupportedKind(py_type, "unions of several types")
        inner = extract_kind(options[0])
        return OptionalKind(inner) if len(options) < len(args) else inner

    if origin is Literal:
        literal_types = {type(a) for a in args}
        if len(literal_types) == 1:
            return extract_kind(literal_types.pop())
        return UnsupportedKind(py_type, "mixed literal values")

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:  # noqa: PLR2004
            return SequenceKind(extract_kind(args[0]), tuple)
        return TupleKind(tuple(extract_kind(a) for a in args))
    if py_type is tuple:
        return SequenceKind(AnyKind(), tuple)

    if (container := _SEQUENCE_ORIGINS.get(origin)) is not None:
        return SequenceKind(extract_kind(args[0]) if args else AnyKind(), container)
    if isinstance(py_type, type) and (container := _SEQUENCE_ORIGINS.get(py_type)):
        return SequenceKind(AnyKind(), container)

    if origin in _MAPPING_ORIGINS:
        if args and args[0] not in (str, Any):
            return UnsupportedKind(py_type, "mapping keys must be str")
        return MappingKind(extract_kind(args[1]) if args else AnyKind())
    if py_type in _MAPPING_ORIGINS:
        return MappingKind(AnyKind())

    # Parameterised user generics (Box[int]) convert like their class
    if isinstance(origin, type):
        return CompositeKind(origin)
    if isinstance(py_type, type):
        return CompositeKind(py_type)

    return UnsupportedKind(py_type, "unrecognised annotation")


def _substitute_type_params(type_expr: Any, substitutions: dict[Any, Any]) -> Any:
    """Recursively substitute type parameters in a type expression."""
    if type_expr in substitutions:
        return substitutions[type_expr]

    origin = get_origin(type_expr)
    args = get_args(type_expr)

    if origin is None or not args:
        return type_expr

    new_args = tuple(_substitute_type_params(arg, substitutions) for arg in args)

    # UnionType (| operator) needs special reconstruction
    if isinstance(type_expr, types.UnionType):
        result = new_args[0]
        for arg in new_args[1:]:
            result = result | arg
        return result

    return origin[new_args]


def qualified_name(cls: type, member: str) -> str:
    """Return the ignore-set name of a member: ``module.Qualname.member``."""
    return f"{cls.__module__}.{cls.__qualname__}.{member}"


@dataclass(frozen=True)
class MemberSchema:
    """Schema for one field or property of a composite type.

    ``encodable``/``decodable`` hold the visibility decision for each
    direction; the ignore set is applied per call on top of them.
    """

    name: str
    kind: Kind
    declaring: type
    is_property: bool
    public: bool
    readable: bool
    writable: bool
    markers: tuple[Marker, ...] = ()

    @property
    def qualname(self) -> str:
        return qualified_name(self.declaring, self.name)

    def has_marker(self, marker_type: type[Marker]) -> bool:
        return any(isinstance(m, marker_type) for m in self.markers)

    @property
    def encodable(self) -> bool:
        return self.readable and self._visible()

    @property
    def decodable(self) -> bool:
        return self.writable and self._visible()

    def _visible(self) -> bool:
        if self.has_marker(Exclude):
            return False
        if not self.is_property and self.has_marker(Transient):
            return False
        return self.public or self.has_marker(Include)


@dataclass(frozen=True)
class TypeSchema:
    """Complete member table for a composite class.

    Fields come first, then properties, each in declaration order with base
    classes ahead of subclasses.
    """

    cls: type
    fields: tuple[MemberSchema, ...]
    properties: tuple[MemberSchema, ...]
    ignored: frozenset[str]
    excluded: bool
    encoder: bool
    decoder: bool

    @property
    def members(self) -> tuple[MemberSchema, ...]:
        return self.fields + self.properties

    def member(self, name: str) -> MemberSchema | None:
        """Get a member by name, or None."""
        for m in self.members:
            if m.name == name:
                return m
        return None


def type_schema(cls: type) -> TypeSchema:
    """Get the (cached) member table for a class.

    Raises:
        NameError: If an annotation names something not visible from the
            module that defines the class (a local class under postponed
            evaluation, for example)
        TypeError: If an annotation is not a valid type expression

    """
    if (cached := _schema_cache.get(cls)) is not None:
        return cached
    schema = _schema_cache[cls] = _build_type_schema(cls)
    logger.debug(
        "Built schema for %s: %d fields, %d properties",
        cls.__qualname__,
        len(schema.fields),
        len(schema.properties),
    )
    return schema


def clear_schema_cache() -> None:
    """Drop cached kinds and member tables."""
    _kind_cache.clear()
    _schema_cache.clear()


def _build_type_schema(cls: type) -> TypeSchema:
    hierarchy = [k for k in reversed(cls.__mro__) if k is not object]
    properties = _collect_properties(hierarchy)
    fields = _collect_fields(cls, hierarchy, exclude=set(properties))

    scoped: list[str] = []
    excluded = False
    for klass in hierarchy:
        for marker in markers_of(klass):
            if isinstance(marker, Exclude):
                if marker.field:
                    scoped.append(marker.field)
                else:
                    excluded = True

    ignored = frozenset(qualified_name(k, name) for name in scoped for k in hierarchy)

    return TypeSchema(
        cls=cls,
        fields=tuple(fields),
        properties=tuple(properties.values()),
        ignored=ignored,
        excluded=excluded,
        encoder=issubclass(cls, Encoder),
        decoder=issubclass(cls, Decoder),
    )


def _collect_fields(
    cls: type,
    hierarchy: list[type],
    exclude: set[str],
) -> list[MemberSchema]:
    hints = get_type_hints(cls, include_extras=True)

    declared: dict[str, type] = {}
    for klass in hierarchy:
        for name in inspect.get_annotations(klass):
            declared[name] = klass

    fields: list[MemberSchema] = []
    for name, klass in declared.items():
        if name in exclude or name.startswith("__"):
            continue
        annotation = hints[name]
        if _is_class_level(annotation):
            continue
        markers: tuple[Marker, ...] = ()
        if get_origin(annotation) is Annotated:
            markers = tuple(m for m in annotation.__metadata__ if isinstance(m, Marker))
        fields.append(
            MemberSchema(
                name=name,
                kind=extract_kind(annotation),
                declaring=klass,
                is_property=False,
                public=not name.startswith("_"),
                readable=True,
                writable=True,
                markers=markers,
            ),
        )
    return fields


def _is_class_level(annotation: Any) -> bool:
    if get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return (
        annotation is ClassVar
        or get_origin(annotation) is ClassVar
        or isinstance(annotation, InitVar)
        or annotation is InitVar
    )


def _collect_properties(hierarchy: list[type]) -> dict[str, MemberSchema]:
    properties: dict[str, MemberSchema] = {}
    for klass in hierarchy:
        for name, attr in vars(klass).items():
            if not isinstance(attr, property) or name.startswith("__"):
                continue
            properties[name] = MemberSchema(
                name=name,
                kind=_property_kind(attr),
                declaring=klass,
                is_property=True,
                public=not name.startswith("_"),
                readable=attr.fget is not None,
                writable=attr.fset is not None,
                markers=markers_of(attr),
            )
    return properties


def _property_kind(prop: property) -> Kind:
    if prop.fget is None:
        return AnyKind()
    hints = get_type_hints(prop.fget, include_extras=True)
    return extract_kind(hints.get("return", Any))
