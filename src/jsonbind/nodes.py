"""JSON tree nodes, text parsing and scalar coercion accessors.

A tree node is one of the JSON-compatible Python values: ``None``, ``bool``,
``int``, ``float``, ``str``, ``JSONArray`` or ``JSONObject``. The two
container classes are thin ``list``/``dict`` subclasses so that a value that
is already a tree can be told apart from an ordinary mapping or sequence.

The ``as_*`` accessors never raise on a kind mismatch. They fall back to a
zero-like default, and the converter inherits that leniency as-is.
"""

from __future__ import annotations

import json
import math
from decimal import Decimal, InvalidOperation
from typing import Any


class JSONArray(list):
    """Ordered sequence of tree nodes."""

    __slots__ = ()


class JSONObject(dict):
    """String-keyed tree node mapping, insertion ordered."""

    __slots__ = ()


type JSONScalar = None | bool | int | float | str
type JSONNode = JSONScalar | JSONArray | JSONObject


def is_node(value: Any) -> bool:
    """Return True if value is a container tree node (array or object)."""
    return isinstance(value, JSONArray | JSONObject)


def wrap(value: Any) -> JSONNode:
    """Convert plain JSON builtins (dicts and lists) into tree nodes."""
    if isinstance(value, dict):
        return JSONObject((str(k), wrap(v)) for k, v in value.items())
    if isinstance(value, list | tuple):
        return JSONArray(wrap(item) for item in value)
    return value


def parse(text: str) -> JSONNode:
    """Parse JSON text into a tree node.

    Raises:
        json.JSONDecodeError: If text is not valid JSON

    """
    return wrap(json.loads(text))


def dumps(node: JSONNode, indent: int | None = None) -> str:
    """Render a tree node as JSON text.

    Args:
        node: The tree to render
        indent: Spaces per nesting level, None for compact output

    Returns:
        Compact text (no whitespace) or indented text with ``": "``
        key separators.

    """
    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(node, indent=indent, separators=separators, ensure_ascii=False)


def as_float(node: JSONNode) -> float:
    """Read a node as a float, 0.0 when it has no numeric reading."""
    if isinstance(node, bool):
        return 1.0 if node else 0.0
    if isinstance(node, int | float):
        return float(node)
    if isinstance(node, str):
        try:
            return float(node.strip())
        except ValueError:
            return 0.0
    return 0.0


def as_int(node: JSONNode) -> int:
    """Read a node as an integer, truncating toward zero."""
    if isinstance(node, bool):
        return int(node)
    if isinstance(node, int):
        return node
    if isinstance(node, str):
        try:
            return int(node.strip())
        except ValueError:
            pass
    value = as_float(node)
    if not math.isfinite(value):
        return 0
    return int(value)


def as_bool(node: JSONNode) -> bool:
    """Read a node as a bool.

    Strings "true"/"false" parse case-insensitively, any other non-empty
    string is True. Numbers are True when non-zero. Null and containers are
    False.
    """
    if isinstance(node, bool):
        return node
    if isinstance(node, int | float):
        return node != 0
    if isinstance(node, str):
        lowered = node.strip().lower()
        if lowered in ("true", "false"):
            return lowered == "true"
        return bool(node)
    return False


def as_str(node: JSONNode) -> str | None:
    """Read a node as text; null stays None, containers render as JSON."""
    if node is None:
        return None
    if isinstance(node, str):
        return node
    if isinstance(node, bool):
        return "true" if node else "false"
    return dumps(node)


def as_decimal(node: JSONNode) -> Decimal:
    """Read a node as a Decimal, Decimal(0) when the text does not parse."""
    if isinstance(node, bool):
        return Decimal(int(node))
    if isinstance(node, int):
        return Decimal(node)
    if isinstance(node, float):
        return Decimal(repr(node)) if math.isfinite(node) else Decimal(0)
    if isinstance(node, str):
        try:
            return Decimal(node.strip())
        except InvalidOperation:
            return Decimal(0)
    return Decimal(0)


def as_char(node: JSONNode) -> str:
    """Read a node as a single character.

    Text yields its first character, numbers are read as a UTF-16 code
    unit, anything else yields ``"\\0"``.
    """
    if isinstance(node, str):
        return node[0] if node else "\0"
    if isinstance(node, int | float) and not isinstance(node, bool):
        return chr(as_int(node) & 0xFFFF)
    return "\0"


def as_array(node: JSONNode) -> JSONArray | None:
    """Return the node if it is an array, else None."""
    if isinstance(node, JSONArray):
        return node
    if isinstance(node, list):
        return JSONArray(node)
    return None


def as_object(node: JSONNode) -> JSONObject | None:
    """Return the node if it is an object, else None."""
    if isinstance(node, JSONObject):
        return node
    if isinstance(node, dict):
        return JSONObject(node)
    return None
