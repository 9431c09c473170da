import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import pytest

from siojson.convert import TMAP_KEY
from siojson.structs import (
    ConversionError,
    bytes_to_struct,
    json_file_to_struct,
    json_object_to_struct,
    struct_to_bytes,
    struct_to_json_object,
    to_json_file,
    trimmed_key_map_for_struct,
)

LONG_BOOL = "boolKey_8_EDBB36654CF43866C376DE921373AF23"


class Mood(Enum):
    Happy = 0
    Grumpy = 1


@dataclass
class Inner:
    label_2_1A2B3C4D: str = ""


@dataclass
class Outer:
    boolKey_8_EDBB36654CF43866C376DE921373AF23: bool = False
    count_3_5E6F7A8B: int = 0
    mood_4_9C0D1E2F: Mood = Mood.Happy
    payload_5_3A4B5C6D: bytes = b""
    inner_6_7E8F9A0B: Inner = field(default_factory=Inner)
    items_7_1C2D3E4F: list[Inner] = field(default_factory=list)
    lookup_9_5A6B7C8D: dict[str, Inner] = field(default_factory=dict)


@dataclass
class Plain:
    name: str
    score: float = 0.0
    tags: list[str] = field(default_factory=list)
    when: Optional[datetime] = None
    data: bytes = b""


@dataclass
class WithMood:
    mood: Mood = Mood.Happy


def _sample_outer():
    return Outer(
        boolKey_8_EDBB36654CF43866C376DE921373AF23=True,
        count_3_5E6F7A8B=7,
        mood_4_9C0D1E2F=Mood.Grumpy,
        payload_5_3A4B5C6D=b"\x01\x02",
        inner_6_7E8F9A0B=Inner("x"),
        items_7_1C2D3E4F=[Inner("a"), Inner("b")],
        lookup_9_5A6B7C8D={"alpha": Inner("c")},
    )


def test_key_map_top_level():
    key_map = trimmed_key_map_for_struct(Outer)
    assert key_map.long_key == "Outer"
    assert key_map.sub_map["boolKey"].long_key == LONG_BOOL
    assert set(key_map.sub_map) == {"boolKey", "count", "mood", "payload", "inner", "items", "lookup"}


def test_key_map_nested_struct_list_and_map():
    key_map = trimmed_key_map_for_struct(Outer)
    assert key_map.sub_map["inner"].sub_map["label"].long_key == "label_2_1A2B3C4D"
    assert key_map.sub_map["items"].sub_map["label"].long_key == "label_2_1A2B3C4D"
    tmap = key_map.sub_map["lookup"].sub_map[TMAP_KEY]
    assert tmap.long_key == TMAP_KEY
    assert tmap.sub_map["label"].long_key == "label_2_1A2B3C4D"


def test_key_map_rejects_non_dataclass():
    with pytest.raises(ConversionError):
        trimmed_key_map_for_struct(int)


def test_blueprint_export_trims_keys():
    obj = struct_to_json_object(_sample_outer(), True)
    assert set(obj) == {"boolKey", "count", "mood", "payload", "inner", "items", "lookup"}
    assert obj["inner"] == {"label": "x"}
    assert obj["items"] == [{"label": "a"}, {"label": "b"}]
    assert obj["lookup"] == {"alpha": {"label": "c"}}
    assert obj["mood"] == "Grumpy"
    assert obj["payload"] == b"\x01\x02"


def test_plain_export_keeps_keys_and_byte_lists():
    obj = struct_to_json_object(Plain("n", data=b"\x03\x04"))
    assert obj["name"] == "n"
    assert obj["data"] == [3, 4]
    assert obj["when"] is None


def test_export_rejects_non_dataclass():
    with pytest.raises(ConversionError):
        struct_to_json_object(object())


def test_blueprint_round_trip():
    original = _sample_outer()
    obj = struct_to_json_object(original, True)
    assert json_object_to_struct(obj, Outer, True) == original


def test_plain_round_trip():
    original = Plain("n", 1.5, ["a", "b"], datetime(2021, 5, 6, 7, 8, 9), b"\x00\xff")
    obj = struct_to_json_object(original)
    assert json_object_to_struct(obj, Plain) == original


def test_import_does_not_mutate_input():
    obj = {"boolKey": True, "inner": {"label": "q"}}
    json_object_to_struct(obj, Outer, True)
    assert obj == {"boolKey": True, "inner": {"label": "q"}}


def test_blueprint_enum_matches_case_insensitively():
    result = json_object_to_struct({"mood": "grumpy"}, Outer, True)
    assert result.mood_4_9C0D1E2F is Mood.Grumpy


def test_plain_enum_needs_exact_name():
    with pytest.raises(ConversionError):
        json_object_to_struct({"mood": "grumpy"}, WithMood)
    assert json_object_to_struct({"mood": "Grumpy"}, WithMood).mood is Mood.Grumpy


def test_enum_from_number_and_unknown():
    assert json_object_to_struct({"mood": 1}, WithMood).mood is Mood.Grumpy
    with pytest.raises(ConversionError):
        json_object_to_struct({"mood": 5}, WithMood)
    with pytest.raises(ConversionError):
        json_object_to_struct({"mood": "Sleepy"}, WithMood, True)


def test_integer_from_string():
    result = json_object_to_struct({"count": "42"}, Outer, True)
    assert result.count_3_5E6F7A8B == 42


def test_bytes_from_base64_in_blueprint():
    result = json_object_to_struct({"payload": "AQI="}, Outer, True)
    assert result.payload_5_3A4B5C6D == b"\x01\x02"
    with pytest.raises(ConversionError):
        json_object_to_struct({"payload": "!!!"}, Outer, True)


def test_datetime_keywords_and_iso():
    assert json_object_to_struct({"name": "n", "when": "min"}, Plain).when == datetime.min
    assert json_object_to_struct({"name": "n", "when": "max"}, Plain).when == datetime.max
    parsed = json_object_to_struct({"name": "n", "when": "2020-01-02T03:04:05Z"}, Plain).when
    assert parsed == datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    with pytest.raises(ConversionError):
        json_object_to_struct({"name": "n", "when": "not a date"}, Plain)


def test_null_and_missing_fields_keep_defaults():
    result = json_object_to_struct({"name": "n", "score": None}, Plain)
    assert result == Plain("n")


def test_missing_required_field_raises():
    with pytest.raises(ConversionError):
        json_object_to_struct({"score": 2.0}, Plain)


def test_array_from_non_array_raises():
    with pytest.raises(ConversionError):
        json_object_to_struct({"name": "n", "tags": "x"}, Plain)


def test_struct_to_bytes_blueprint_format():
    data = struct_to_bytes(_sample_outer(), True)
    decoded = json.loads(data.decode("utf-8"))
    assert decoded["boolKey"] is True
    assert decoded["payload"] == "AQI="
    assert LONG_BOOL not in decoded


def test_bytes_round_trip():
    original = _sample_outer()
    assert bytes_to_struct(struct_to_bytes(original, True), Outer, True) == original
    plain = Plain("n", 2.0, ["t"])
    assert bytes_to_struct(struct_to_bytes(plain), Plain) == plain


def test_garbage_bytes_give_defaults():
    assert bytes_to_struct(b"not json", Outer, True) == Outer()


def test_file_round_trip(tmp_path):
    path = tmp_path / "struct.json"
    original = _sample_outer()
    to_json_file(path, original, True)
    assert json_file_to_struct(path, Outer, True) == original


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        json_file_to_struct(tmp_path / "absent.json", Outer, True)