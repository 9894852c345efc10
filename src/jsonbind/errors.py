"""Error and diagnostic types for the converter.

Most conversion problems are not raised. Scalar mismatches fall back to
the node accessors' defaults, and unsupported types are reported as a
:class:`Diagnostic` on the converter's logger while the call returns None.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class JSONBindError(Exception):
    """Base class for errors raised by jsonbind."""


class EnumValueError(JSONBindError, ValueError):
    """An integer does not name a member of the target enum.

    Only raised when ``ConvertOptions.validate_enums`` is enabled.
    """

    def __init__(self, enum_type: type, value: Any) -> None:
        super().__init__(f"{value!r} is not a valid {enum_type.__qualname__}")
        self.enum_type = enum_type
        self.value = value


class DiagnosticKind(StrEnum):
    UNSUPPORTED_TYPE = "unsupported-type"


@dataclass(frozen=True)
class Diagnostic:
    """A conversion problem that was logged instead of raised."""

    kind: DiagnosticKind
    operation: str
    py_type: Any
    detail: str = ""

    def format(self) -> str:
        """Format the diagnostic for display."""
        text = f"{self.operation}: {self.kind} {type_name(self.py_type)}"
        return f"{text} ({self.detail})" if self.detail else text


def type_name(py_type: Any) -> str:
    """Readable name for a class or annotation."""
    if isinstance(py_type, type):
        return py_type.__qualname__
    return repr(py_type)
