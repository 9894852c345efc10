"""Text format adapters.

Each format module provides to_<format> and from_<format> functions
that work with the core Converter.
"""

from jsonbind.formats.json import from_json, from_json_into, to_json

__all__ = ["from_json", "from_json_into", "to_json"]
