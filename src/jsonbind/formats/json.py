"""JSON text adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from jsonbind.codecs import default_converter
from jsonbind.nodes import dumps, parse

if TYPE_CHECKING:
    from collections.abc import Iterable

    from jsonbind.codecs import Converter
    from jsonbind.nodes import JSONNode


def to_json(
    obj: Any,
    pretty: bool = False,  # noqa: FBT001, FBT002
    ignore: Iterable[str] | None = None,
    *,
    converter: Converter | None = None,
) -> str:
    """Serialize an object to JSON text.

    Args:
        obj: The object to serialize
        pretty: Indent the output (by ``ConvertOptions.indent`` spaces)
            instead of writing it compactly
        ignore: Qualified member names to leave out
        converter: Converter to use (default converter when omitted)

    Returns:
        JSON text, or an empty string when obj encodes to nothing

    """
    converter = converter or default_converter()
    node = converter.encode(obj, ignore)
    if node is None:
        return ""
    return dumps(node, converter.options.indent if pretty else None)


def from_json(
    source: str | JSONNode,
    target: Any,
    *,
    converter: Converter | None = None,
) -> Any:
    """Deserialize JSON text or a tree node into the target type.

    A ``str`` source is always parsed as JSON text; use
    :func:`jsonbind.from_node` to decode a string node.

    Args:
        source: JSON text or a tree node
        target: Class or annotation to build
        converter: Converter to use (default converter when omitted)

    Returns:
        The decoded value, or None for empty text or a None target

    Raises:
        json.JSONDecodeError: If source is text that is not valid JSON

    """
    if target is None or source is None or source == "":
        return None
    node = parse(source) if isinstance(source, str) else source
    return (converter or default_converter()).decode(node, target)


def from_json_into(
    source: str | JSONNode,
    instance: Any,
    *,
    converter: Converter | None = None,
) -> None:
    """Deserialize JSON text or a tree node into an existing instance."""
    if instance is None or source is None or source == "":
        return
    node = parse(source) if isinstance(source, str) else source
    (converter or default_converter()).decode_into(node, instance)
