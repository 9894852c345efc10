"""End-to-end tests through the public jsonbind API."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Annotated

import pytest

from jsonbind import (
    Decoder,
    Encoder,
    Exclude,
    Include,
    JSONArray,
    JSONNode,
    JSONObject,
    from_json,
    from_json_into,
    from_node,
    to_json,
    to_json_node,
)
from jsonbind.schema import qualified_name


class Rank(enum.IntEnum):
    BRONZE = 0
    SILVER = 1
    GOLD = 2


@dataclass
class Sample:
    IntTest: int = 0
    BoolTest: bool = False


@dataclass
class Profile:
    name: str = ""
    age: int = 0
    ratio: float = 0.0
    active: bool = False
    rank: Rank = Rank.BRONZE
    tags: list[str] = field(default_factory=list)
    scores: dict[str, int] = field(default_factory=dict)
    friend: Sample | None = None


@dataclass
class Labelled:
    Field: str = ""
    other: int = 0


@dataclass
class AlsoLabelled:
    Field: str = ""


@dataclass
class Bundle:
    labelled: Labelled | None = None
    also: AlsoLabelled | None = None


@dataclass
class Contested:
    kept: int = 1
    contested: Annotated[int, Exclude(), Include()] = 2


class Snapshot(Encoder, Decoder):
    """Encodes itself as a one-element array."""

    reads: list[str]

    def __init__(self) -> None:
        self.reads = []
        self.value = 0

    @property
    def visible(self) -> int:
        self.reads.append("visible")
        return self.value

    def encode(self) -> JSONNode:
        return JSONArray([self.value])

    def decode(self, node: JSONNode) -> None:
        self.value = node[0]


class TestRoundTrip:
    """Test decode(encode(v)) reproduces v."""

    def test_all_public_fields(self) -> None:
        profile = Profile(
            name="ada",
            age=36,
            ratio=0.25,
            active=True,
            rank=Rank.GOLD,
            tags=["x", "y"],
            scores={"math": 10},
            friend=Sample(IntTest=1, BoolTest=True),
        )
        assert from_json(to_json(profile), Profile) == profile
        assert from_node(to_json_node(profile), Profile) == profile

    def test_pretty_text_round_trips(self) -> None:
        profile = Profile(name="ada", tags=["x"])
        assert from_json(to_json(profile, pretty=True), Profile) == profile


class TestOmission:
    """Test null members are omitted and missing keys are left alone."""

    def test_none_member_not_emitted(self) -> None:
        assert "friend" not in json.loads(to_json(Profile()))

    def test_missing_keys_keep_current_values(self) -> None:
        profile = Profile(name="keep", age=5)
        from_json_into('{"age": 6}', profile)
        assert profile.name == "keep"
        assert profile.age == 6


class TestExclusionPrecedence:
    """Test Exclude wins over Include on the same member."""

    def test_not_emitted(self) -> None:
        assert json.loads(to_json(Contested())) == {"kept": 1}

    def test_not_read(self) -> None:
        contested = from_json('{"kept": 5, "contested": 9}', Contested)
        assert contested == Contested(kept=5, contested=2)


class TestIgnoreSet:
    """Test per-call suppression of one type's member."""

    def test_only_named_type_affected(self) -> None:
        bundle = Bundle(
            labelled=Labelled(Field="a", other=1),
            also=AlsoLabelled(Field="b"),
        )
        text = to_json(bundle, ignore={qualified_name(Labelled, "Field")})
        assert json.loads(text) == {
            "labelled": {"other": 1},
            "also": {"Field": "b"},
        }

    def test_root_instance_affected(self) -> None:
        text = to_json(Labelled(Field="a"), ignore={qualified_name(Labelled, "Field")})
        assert text == '{"other":0}'


class TestOverridePrecedence:
    """Test Encoder/Decoder types bypass member reflection."""

    def test_encode_uses_override(self) -> None:
        snapshot = Snapshot()
        snapshot.value = 4
        assert to_json(snapshot) == "[4]"
        assert snapshot.reads == []

    def test_decode_uses_override(self) -> None:
        snapshot = from_json("[7]", Snapshot)
        assert snapshot.value == 7
        assert snapshot.reads == []


class TestOrderingAndEnums:
    """Test sequence order and enum encoding."""

    def test_sequence_order(self) -> None:
        assert to_json([3, 1, 2]) == "[3,1,2]"
        assert from_json("[3,1,2]", list[int]) == [3, 1, 2]

    def test_enum_as_integer(self) -> None:
        assert to_json(Rank.GOLD) == "2"
        assert to_json_node(Rank.GOLD) == 2
        assert from_json("2", Rank) is Rank.GOLD

    def test_enum_in_composite(self) -> None:
        assert json.loads(to_json(Profile(rank=Rank.SILVER)))["rank"] == 1


class TestConcreteScenario:
    """Test the IntTest/BoolTest sample end to end."""

    def test_encode(self) -> None:
        assert to_json(Sample(IntTest=1, BoolTest=True)) == '{"IntTest":1,"BoolTest":true}'

    def test_decode(self) -> None:
        sample = from_json('{"IntTest":1,"BoolTest":true}', Sample)
        assert sample.IntTest == 1
        assert sample.BoolTest is True

    @pytest.mark.parametrize(
        "node",
        [JSONObject(IntTest=1, BoolTest=True), {"IntTest": 1, "BoolTest": True}],
    )
    def test_decode_from_node(self, node: JSONNode) -> None:
        assert from_node(node, Sample) == Sample(IntTest=1, BoolTest=True)
