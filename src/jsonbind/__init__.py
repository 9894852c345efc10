"""jsonbind - Type-directed conversion between Python objects and JSON."""

import logging

from jsonbind.codecs import (
    Converter,
    TypeCodecs,
    configure,
    default_converter,
    from_node,
    to_json_node,
)
from jsonbind.config import ConvertOptions
from jsonbind.errors import (
    Diagnostic,
    DiagnosticKind,
    EnumValueError,
    JSONBindError,
)
from jsonbind.formats.json import (
    from_json,
    from_json_into,
    to_json,
)
from jsonbind.markers import (
    Decoder,
    Encoder,
    Exclude,
    Include,
    Transient,
)
from jsonbind.nodes import (
    JSONArray,
    JSONNode,
    JSONObject,
    dumps,
    parse,
)
from jsonbind.schema import (
    MemberSchema,
    TypeSchema,
    extract_kind,
    type_schema,
)
from jsonbind.structs import from_bytes, to_bytes
from jsonbind.types import (
    Char,
    Float32,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Fixed-width primitives
    "Char",
    # Conversion
    "ConvertOptions",
    "Converter",
    # Capabilities and markers
    "Decoder",
    # Errors
    "Diagnostic",
    "DiagnosticKind",
    "Encoder",
    "EnumValueError",
    "Exclude",
    "Float32",
    "Include",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    # Tree nodes
    "JSONArray",
    "JSONBindError",
    "JSONNode",
    "JSONObject",
    # Schema
    "MemberSchema",
    "Transient",
    "TypeCodecs",
    "TypeSchema",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "configure",
    "default_converter",
    "dumps",
    "extract_kind",
    "from_bytes",
    "from_json",
    "from_json_into",
    "from_node",
    "parse",
    "to_bytes",
    "to_json",
    "to_json_node",
    "type_schema",
]
