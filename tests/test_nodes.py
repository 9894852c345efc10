"""Tests for jsonbind.nodes module."""

import json
from decimal import Decimal

import pytest

from jsonbind.nodes import (
    JSONArray,
    JSONObject,
    as_array,
    as_bool,
    as_char,
    as_decimal,
    as_float,
    as_int,
    as_object,
    as_str,
    dumps,
    is_node,
    parse,
    wrap,
)


class TestParse:
    """Test parsing JSON text into tree nodes."""

    def test_parse_object_produces_json_object(self) -> None:
        node = parse('{"a": 1, "b": [1, 2]}')
        assert isinstance(node, JSONObject)
        assert isinstance(node["b"], JSONArray)
        assert node == {"a": 1, "b": [1, 2]}

    def test_parse_preserves_key_order(self) -> None:
        node = parse('{"z": 1, "a": 2, "m": 3}')
        assert list(node) == ["z", "a", "m"]

    def test_parse_scalars(self) -> None:
        assert parse("1") == 1
        assert parse("true") is True
        assert parse("null") is None
        assert parse('"x"') == "x"

    def test_parse_invalid_text_raises(self) -> None:
        with pytest.raises(json.JSONDecodeError):
            parse("{not json")

    def test_wrap_converts_nested_builtins(self) -> None:
        node = wrap({"items": [{"x": 1}]})
        assert isinstance(node, JSONObject)
        assert isinstance(node["items"], JSONArray)
        assert isinstance(node["items"][0], JSONObject)

    def test_is_node(self) -> None:
        assert is_node(JSONObject())
        assert is_node(JSONArray())
        assert not is_node({})
        assert not is_node([])
        assert not is_node(1)


class TestDumps:
    """Test rendering tree nodes as text."""

    def test_compact_has_no_whitespace(self) -> None:
        node = JSONObject(IntTest=1, BoolTest=True)
        assert dumps(node) == '{"IntTest":1,"BoolTest":true}'

    def test_indented(self) -> None:
        node = JSONObject(Id=1, Name="Test")
        text = dumps(node, 4)
        assert '"Id": 1' in text
        assert '"Name": "Test"' in text
        assert text.startswith("{\n    ")

    def test_non_ascii_is_kept(self) -> None:
        assert dumps("年") == '"年"'


class TestScalarAccessors:
    """Test coercion accessors and their fallbacks."""

    @pytest.mark.parametrize(
        ("node", "expected"),
        [
            (3, 3),
            (3.9, 3),
            (-3.9, -3),
            ("42", 42),
            ("4.5", 4),
            (True, 1),
            ("abc", 0),
            (None, 0),
            (JSONArray([1]), 0),
            (float("nan"), 0),
        ],
    )
    def test_as_int(self, node: object, expected: int) -> None:
        assert as_int(node) == expected

    @pytest.mark.parametrize(
        ("node", "expected"),
        [(1, 1.0), ("2.5", 2.5), (False, 0.0), ("x", 0.0), (None, 0.0)],
    )
    def test_as_float(self, node: object, expected: float) -> None:
        assert as_float(node) == expected

    @pytest.mark.parametrize(
        ("node", "expected"),
        [
            (True, True),
            (0, False),
            (2, True),
            ("true", True),
            ("FALSE", False),
            ("yes", True),
            ("", False),
            (None, False),
            (JSONObject(), False),
        ],
    )
    def test_as_bool(self, node: object, expected: bool) -> None:  # noqa: FBT001
        assert as_bool(node) is expected

    def test_as_str(self) -> None:
        assert as_str("x") == "x"
        assert as_str(None) is None
        assert as_str(True) == "true"
        assert as_str(12) == "12"
        assert as_str(JSONArray([1, 2])) == "[1,2]"

    def test_as_decimal(self) -> None:
        assert as_decimal("1.10") == Decimal("1.10")
        assert as_decimal(3) == Decimal(3)
        assert as_decimal(0.5) == Decimal("0.5")
        assert as_decimal("bad") == Decimal(0)

    def test_as_char(self) -> None:
        assert as_char("hello") == "h"
        assert as_char("") == "\0"
        assert as_char(65) == "A"
        assert as_char(None) == "\0"


class TestContainerAccessors:
    """Test array/object accessors."""

    def test_as_array(self) -> None:
        arr = JSONArray([1])
        assert as_array(arr) is arr
        assert as_array([1, 2]) == [1, 2]
        assert as_array(JSONObject()) is None
        assert as_array("x") is None

    def test_as_object(self) -> None:
        obj = JSONObject(a=1)
        assert as_object(obj) is obj
        assert isinstance(as_object({"a": 1}), JSONObject)
        assert as_object(JSONArray()) is None
        assert as_object(None) is None
