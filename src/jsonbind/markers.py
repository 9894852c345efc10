"""Serialization markers and override capabilities.

Markers are declared once, when a class is defined, and read by
:func:`jsonbind.schema.type_schema`:

    @Exclude("password")              # scoped class marker
    @dataclass
    class Account:
        name: str = ""
        tags: Annotated[list[str], Exclude()] = field(default_factory=list)
        _token: Annotated[str, Include()] = ""
        cache: Annotated[dict[str, int], Transient()] = field(default_factory=dict)

        @property
        @Exclude()
        def display(self) -> str:
            return self.name.title()

A type that needs full control over its wire shape subclasses
:class:`Encoder` and/or :class:`Decoder` instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jsonbind.nodes import JSONNode

_MARKERS_ATTR = "__jsonbind_markers__"


@dataclass(frozen=True)
class Marker:
    """Base for declarative markers.

    A marker instance is usable in ``Annotated[...]`` metadata and as a
    decorator on classes, property getters and properties.
    """

    def __call__[T](self, target: T) -> T:
        """Attach this marker to a class, function or property."""
        holder: Any = target.fget if isinstance(target, property) else target
        if holder is None:
            msg = f"{type(self).__name__} cannot decorate a property without a getter"
            raise TypeError(msg)
        current = (
            vars(holder).get(_MARKERS_ATTR, ())
            if isinstance(holder, type)
            else getattr(holder, _MARKERS_ATTR, ())
        )
        setattr(holder, _MARKERS_ATTR, (*current, self))
        return target


@dataclass(frozen=True)
class Exclude(Marker):
    """Keep a member, a named field, or a whole type out of the output.

    On a member, the member is skipped even when it also carries
    :class:`Include`. On a class, ``Exclude("name")`` suppresses the field
    ``name`` anywhere in the hierarchy of the serialized instance, and a
    bare ``Exclude()`` keeps instances of the class from being written.
    """

    field: str = ""


@dataclass(frozen=True)
class Include(Marker):
    """Force a non-public field or property into the output."""


@dataclass(frozen=True)
class Transient(Marker):
    """Never serialize this field, in either direction."""


def markers_of(target: Any) -> tuple[Marker, ...]:
    """Return the markers attached directly to target.

    Classes report only their own markers, not inherited ones.
    """
    if isinstance(target, property):
        target = target.fget
    if target is None:
        return ()
    if isinstance(target, type):
        return vars(target).get(_MARKERS_ATTR, ())
    return getattr(target, _MARKERS_ATTR, ())


class Encoder(ABC):
    """Capability: the instance produces its own tree node."""

    @abstractmethod
    def encode(self) -> JSONNode:
        """Return the tree node representing this instance."""
        ...


class Decoder(ABC):
    """Capability: the instance populates itself from a tree node."""

    @abstractmethod
    def decode(self, node: JSONNode) -> None:
        """Populate this instance from node."""
        ...
