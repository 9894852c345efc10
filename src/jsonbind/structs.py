"""Fixed-layout struct to bytes marshalling.

The byte image is the platform's in-memory layout of the ctypes structure
(field order, padding and byte order included), so it round trips exactly
on one platform but is not portable between platforms with different
layout rules.
"""

from __future__ import annotations

import ctypes

type CStruct = ctypes.Structure | ctypes.Union


def to_bytes(value: CStruct) -> bytes:
    """Copy a ctypes structure into a new bytes object.

    Raises:
        TypeError: If value is not a ctypes Structure or Union

    """
    if not isinstance(value, ctypes.Structure | ctypes.Union):
        msg = f"Expected a ctypes Structure or Union, got {type(value).__name__}"
        raise TypeError(msg)
    return bytes(value)


def from_bytes[T: CStruct](cls: type[T], data: bytes | bytearray | memoryview) -> T:
    """Build a ctypes structure from its byte image.

    Only the first ``ctypes.sizeof(cls)`` bytes are read.

    Raises:
        ValueError: If data is shorter than the structure

    """
    size = ctypes.sizeof(cls)
    if len(data) < size:
        msg = f"{cls.__name__} needs {size} bytes, got {len(data)}"
        raise ValueError(msg)
    return cls.from_buffer_copy(bytes(data[:size]))
