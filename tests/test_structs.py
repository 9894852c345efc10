"""Tests for jsonbind.structs module."""

import ctypes

import pytest

from jsonbind.structs import from_bytes, to_bytes


class Header(ctypes.Structure):
    _fields_ = [
        ("kind", ctypes.c_uint8),
        ("flags", ctypes.c_uint8),
        ("length", ctypes.c_uint16),
        ("sequence", ctypes.c_int32),
    ]


class Packed(ctypes.Structure):
    _pack_ = 1
    _fields_ = [
        ("tag", ctypes.c_char),
        ("value", ctypes.c_uint32),
    ]


class Word(ctypes.Union):
    _fields_ = [
        ("whole", ctypes.c_uint32),
        ("bytes", ctypes.c_uint8 * 4),
    ]


class TestToBytes:
    """Test copying structures into bytes."""

    def test_length_matches_layout(self) -> None:
        assert len(to_bytes(Header())) == ctypes.sizeof(Header)

    def test_packed_layout(self) -> None:
        assert len(to_bytes(Packed(b"x", 1))) == 5

    def test_rejects_non_struct(self) -> None:
        with pytest.raises(TypeError, match="ctypes Structure"):
            to_bytes(b"abc")  # type: ignore[arg-type]


class TestFromBytes:
    """Test rebuilding structures from bytes."""

    def test_round_trip(self) -> None:
        header = Header(kind=3, flags=0x81, length=512, sequence=-7)
        restored = from_bytes(Header, to_bytes(header))
        assert (restored.kind, restored.flags, restored.length, restored.sequence) == (
            3,
            0x81,
            512,
            -7,
        )

    def test_union(self) -> None:
        word = Word(whole=0x01020304)
        assert from_bytes(Word, to_bytes(word)).whole == 0x01020304

    def test_extra_bytes_ignored(self) -> None:
        data = to_bytes(Packed(b"a", 9)) + b"\xff\xff"
        assert from_bytes(Packed, data).value == 9

    def test_accepts_bytearray(self) -> None:
        data = bytearray(to_bytes(Packed(b"a", 9)))
        assert from_bytes(Packed, data).tag == b"a"

    def test_copy_is_independent(self) -> None:
        data = bytearray(to_bytes(Packed(b"a", 9)))
        restored = from_bytes(Packed, data)
        data[1] = 0
        assert restored.value == 9

    def test_short_data_rejected(self) -> None:
        with pytest.raises(ValueError, match="needs 5 bytes, got 2"):
            from_bytes(Packed, b"\x00\x01")
