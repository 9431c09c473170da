import base64

import pytest

from siojson.model import JsonObject, JsonType, JsonValue


def test_number_value_round_trip():
    value = JsonValue.from_number(2.5)
    assert value.type is JsonType.NUMBER
    assert value.as_number() == 2.5


def test_number_encodes_with_six_decimals():
    assert JsonValue.from_number(3).as_string() == "3.000000"


def test_string_value():
    value = JsonValue.from_string("hello")
    assert value.type is JsonType.STRING
    assert value.as_string() == "hello"
    assert value.type_string == "String"


def test_bool_value():
    value = JsonValue.from_bool(True)
    assert value.type is JsonType.BOOLEAN
    assert value.as_bool() is True


def test_binary_value_round_trip():
    value = JsonValue.from_binary(b"\x00\x01\xfe")
    assert value.type is JsonType.BINARY
    assert value.type_string == "String"
    assert value.as_binary() == b"\x00\x01\xfe"


def test_string_as_binary_reads_hex():
    assert JsonValue.from_string("0aff").as_binary() == b"\x0a\xff"
    assert JsonValue.from_string("zz").as_binary() == b""


def test_array_value_round_trip():
    items = [JsonValue.from_number(1), JsonValue.from_string("x"), JsonValue.from_bool(False)]
    array = JsonValue.from_array(items)
    assert array.type is JsonType.ARRAY
    assert array.as_array() == items


def test_object_value_shares_fields():
    obj = JsonObject()
    value = JsonValue.from_object(obj)
    obj.set_string_field("name", "abc")
    assert value.as_object().get_string_field("name") == "abc"


@pytest.mark.parametrize(
    "text, kind",
    [
        ("", JsonType.NULL),
        ("12.5", JsonType.NUMBER),
        ("true", JsonType.BOOLEAN),
        ('{"a":1}', JsonType.OBJECT),
        ("[1,2]", JsonType.ARRAY),
        ("hello", JsonType.STRING),
    ],
)
def test_from_json_string_guesses_type(text, kind):
    assert JsonValue.from_json_string(text).type is kind


def test_unset_value():
    value = JsonValue()
    assert value.type is JsonType.NONE
    assert value.is_null()
    assert value.encode_json() == ""
    with pytest.raises(TypeError):
        value.as_number()


def test_non_string_as_string_is_json_text():
    value = JsonValue.from_json_string('{"a":[1,2]}')
    assert value.as_string() == '{"a":[1,2]}'


def test_decode_encode_round_trip():
    text = '{"a":1,"b":"x","c":[true,null]}'
    obj = JsonObject()
    obj.decode_json(text)
    assert obj.encode_json() == text
    assert obj.encode_json_to_single_string() == text
    assert obj.field_names() == ["a", "b", "c"]


def test_decode_failure_resets():
    obj = JsonObject()
    obj.set_bool_field("flag", True)
    with pytest.raises(ValueError):
        obj.decode_json("[1, 2]")
    assert obj.field_names() == []


def test_fields_and_removal():
    obj = JsonObject()
    obj.set_number_field("n", 4)
    assert obj.has_field("n")
    assert not obj.has_field("")
    assert obj.get_field("missing") is None
    obj.remove_field("n")
    assert not obj.has_field("n")


def test_empty_name_is_ignored():
    obj = JsonObject()
    obj.set_string_field("", "x")
    assert obj.field_names() == []


def test_typed_getters():
    obj = JsonObject()
    obj.set_number_field("n", 7)
    obj.set_string_field("s", "text")
    obj.set_bool_field("b", True)
    assert obj.get_number_field("n") == 7.0
    assert obj.get_string_field("s") == "text"
    assert obj.get_bool_field("b") is True


def test_typed_getter_wrong_type_raises():
    obj = JsonObject()
    obj.set_string_field("s", "text")
    with pytest.raises(KeyError):
        obj.get_number_field("s")
    with pytest.raises(KeyError):
        obj.get_object_field("missing")


def test_set_field_and_get_field():
    obj = JsonObject()
    obj.set_field("v", JsonValue.from_string("abc"))
    assert obj.get_field("v") == JsonValue.from_string("abc")


def test_set_array_field_drops_unset_and_binary():
    obj = JsonObject()
    obj.set_array_field(
        "arr",
        [JsonValue.from_number(1), JsonValue(), JsonValue.from_binary(b"ab"), JsonValue.from_string("s")],
    )
    assert obj.get_array_field("arr") == [JsonValue.from_number(1), JsonValue.from_string("s")]


def test_merge_with_and_without_overwrite():
    base = JsonObject()
    base.set_string_field("a", "old")
    other = JsonObject()
    other.set_string_field("a", "new")
    other.set_bool_field("b", True)

    base.merge_json_object(other, False)
    assert base.get_string_field("a") == "old"
    assert base.get_bool_field("b") is True

    base.merge_json_object(other, True)
    assert base.get_string_field("a") == "new"


def test_object_field_round_trip():
    inner = JsonObject()
    inner.set_number_field("x", 1)
    outer = JsonObject()
    outer.set_object_field("inner", inner)
    assert outer.get_object_field("inner") == inner


def test_binary_field_round_trip_and_base64():
    obj = JsonObject()
    obj.set_binary_field("raw", b"\x01\x02")
    assert obj.get_binary_field("raw") == b"\x01\x02"
    obj.set_string_field("enc", base64.b64encode(b"data").decode("ascii"))
    assert obj.get_binary_field("enc") == b"data"
    obj.set_string_field("bad", "!!!")
    assert obj.get_binary_field("bad") == b""
    with pytest.raises(KeyError):
        obj.get_binary_field("missing")


def test_uniform_array_round_trips():
    obj = JsonObject()
    obj.set_number_array_field("nums", [1.5, 2.0])
    obj.set_string_array_field("strs", ["a", "b"])
    obj.set_bool_array_field("flags", [True, False])
    assert obj.get_number_array_field("nums") == [1.5, 2.0]
    assert obj.get_string_array_field("strs") == ["a", "b"]
    assert obj.get_bool_array_field("flags") == [True, False]


def test_object_array_round_trip():
    first = JsonObject()
    first.set_number_field("i", 1)
    second = JsonObject()
    second.set_number_field("i", 2)
    obj = JsonObject()
    obj.set_object_array_field("objs", [first, second])
    assert obj.get_object_array_field("objs") == [first, second]


def test_uniform_array_wrong_element_raises():
    obj = JsonObject()
    obj.set_string_array_field("strs", ["a"])
    with pytest.raises(TypeError):
        obj.get_number_array_field("strs")
    with pytest.raises(KeyError):
        obj.get_bool_array_field("missing")


def test_reset_clears_fields():
    obj = JsonObject()
    obj.set_bool_field("b", False)
    obj.reset()
    assert obj.encode_json() == "{}"