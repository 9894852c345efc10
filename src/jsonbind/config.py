"""Converter configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ConvertOptions:
    """Settings shared by every call made through one Converter.

    Attributes:
        indent: Spaces per level for pretty JSON text
        validate_enums: Raise EnumValueError when an integer names no enum
            member, instead of returning the raw integer
        max_diagnostics: How many recent diagnostics a converter keeps

    """

    indent: int = 4
    validate_enums: bool = False
    max_diagnostics: int = 100

    def __post_init__(self) -> None:
        if self.indent < 0:
            msg = f"indent must be >= 0, got {self.indent}"
            raise ValueError(msg)
        if self.max_diagnostics < 0:
            msg = f"max_diagnostics must be >= 0, got {self.max_diagnostics}"
            raise ValueError(msg)
