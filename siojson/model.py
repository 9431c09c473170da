"""Wrappers around JSON values and JSON objects.

A :class:`JsonValue` holds one plain JSON value. Null is ``None``, numbers are
``int`` or ``float``, arrays are lists, objects are dicts and binary payloads
are ``bytes``. A value that holds nothing at all has the type
:attr:`JsonType.NONE`. A :class:`JsonObject` wraps a dict and offers typed
access to its fields.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from .convert import json_string_to_value, to_json_string


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


_UNSET: Any = _Unset()


class JsonType(Enum):
    """Kinds of JSON value, binary payloads included."""

    NONE = "None"
    NULL = "Null"
    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    ARRAY = "Array"
    OBJECT = "Object"
    BINARY = "Binary"


def _type_of(value: Any) -> JsonType:
    if value is _UNSET:
        return JsonType.NONE
    if value is None:
        return JsonType.NULL
    if isinstance(value, bool):
        return JsonType.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonType.NUMBER
    if isinstance(value, str):
        return JsonType.STRING
    if isinstance(value, (bytes, bytearray)):
        return JsonType.BINARY
    if isinstance(value, (list, tuple)):
        return JsonType.ARRAY
    if isinstance(value, dict):
        return JsonType.OBJECT
    return JsonType.NONE


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_number(value: Any) -> float:
    if isinstance(value, (bool, int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if _is_number(value):
        return value != 0
    if isinstance(value, str):
        return value.lower() == "true"
    return False


@dataclass
class JsonValue:
    """A single JSON value."""

    value: Any = _UNSET

    @classmethod
    def from_number(cls, number: float) -> "JsonValue":
        return cls(float(number))

    @classmethod
    def from_string(cls, text: str) -> "JsonValue":
        return cls(str(text))

    @classmethod
    def from_bool(cls, flag: bool) -> "JsonValue":
        return cls(bool(flag))

    @classmethod
    def from_array(cls, values: Iterable["JsonValue"]) -> "JsonValue":
        """Make an array value that shares the roots of ``values``."""
        return cls([item.value if item.value is not _UNSET else None for item in values])

    @classmethod
    def from_object(cls, obj: "JsonObject") -> "JsonValue":
        """Make an object value that shares the fields of ``obj``."""
        return cls(obj.values)

    @classmethod
    def from_binary(cls, data: bytes) -> "JsonValue":
        return cls(bytes(data))

    @classmethod
    def from_json_string(cls, text: str) -> "JsonValue":
        """Make a value from text, guessing the JSON type it stands for."""
        return cls(json_string_to_value(text))

    @property
    def type(self) -> JsonType:
        return _type_of(self.value)

    @property
    def type_string(self) -> str:
        """Name of the JSON type; binary payloads count as strings."""
        kind = self.type
        return JsonType.STRING.value if kind is JsonType.BINARY else kind.value

    def _require(self, wanted: str) -> None:
        if self.value is _UNSET:
            raise TypeError(f"Json value of type '{self.type_string}' used as a '{wanted}'")

    def is_null(self) -> bool:
        return self.value is _UNSET or self.value is None

    def as_number(self) -> float:
        self._require("Number")
        return _to_number(self.value)

    def as_string(self) -> str:
        """Return a string as it is and any other value as JSON text."""
        self._require("String")
        if isinstance(self.value, str):
            return self.value
        return self.encode_json()

    def as_bool(self) -> bool:
        self._require("Boolean")
        return _to_bool(self.value)

    def as_array(self) -> list["JsonValue"]:
        self._require("Array")
        if isinstance(self.value, (list, tuple)):
            return [JsonValue(item) for item in self.value]
        return []

    def as_object(self) -> "JsonObject":
        """Wrap an object value; anything else gives an empty object."""
        self._require("Object")
        if isinstance(self.value, dict):
            return JsonObject(self.value)
        return JsonObject()

    def as_binary(self) -> bytes:
        """Return binary data; a string is read as hex, failing to empty bytes."""
        self._require("Binary")
        if isinstance(self.value, (bytes, bytearray)):
            return bytes(self.value)
        if isinstance(self.value, str):
            try:
                return bytes.fromhex(self.value)
            except ValueError:
                return b""
        return b""

    def encode_json(self) -> str:
        if self.value is _UNSET:
            return ""
        return to_json_string(self.value)


@dataclass
class JsonObject:
    """A JSON object with typed field access."""

    values: dict = field(default_factory=dict)

    def reset(self) -> None:
        """Drop all fields, detaching from any dict shared before."""
        self.values = {}

    def encode_json(self) -> str:
        return to_json_string(self.values)

    def encode_json_to_single_string(self) -> str:
        """Encode as condensed JSON, which never spans lines."""
        return self.encode_json()

    def decode_json(self, text: str) -> None:
        """Replace the fields with those of a JSON object text.

        Raises ``ValueError`` if the text is not a JSON object; the object is
        left empty then.
        """
        try:
            parsed = json.loads(text)
        except ValueError:
            parsed = None
        if not isinstance(parsed, dict):
            self.reset()
            raise ValueError(f"Json decoding failed for: {text}")
        self.values = parsed

    def field_names(self) -> list[str]:
        return list(self.values)

    def has_field(self, name: str) -> bool:
        return bool(name) and name in self.values

    def remove_field(self, name: str) -> None:
        if name:
            self.values.pop(name, None)

    def get_field(self, name: str) -> JsonValue | None:
        if not name or name not in self.values:
            return None
        return JsonValue(self.values[name])

    def set_field(self, name: str, value: JsonValue) -> None:
        if not name:
            return
        self.values[name] = None if value.value is _UNSET else value.value

    def _typed(self, name: str, kind: JsonType) -> Any:
        if name in self.values:
            raw = self.values[name]
            actual = _type_of(raw)
            if actual is kind or (kind is JsonType.STRING and actual is JsonType.BINARY):
                return raw
        raise KeyError(f"No field with name {name} of type {kind.value}")

    def get_number_field(self, name: str) -> float:
        return float(self._typed(name, JsonType.NUMBER))

    def set_number_field(self, name: str, number: float) -> None:
        if name:
            self.values[name] = float(number)

    def get_string_field(self, name: str) -> str:
        return to_json_string(self._typed(name, JsonType.STRING))

    def set_string_field(self, name: str, text: str) -> None:
        if name:
            self.values[name] = str(text)

    def get_bool_field(self, name: str) -> bool:
        return self._typed(name, JsonType.BOOLEAN)

    def set_bool_field(self, name: str, flag: bool) -> None:
        if name:
            self.values[name] = bool(flag)

    def get_array_field(self, name: str) -> list[JsonValue]:
        return [JsonValue(item) for item in self._typed(name, JsonType.ARRAY)]

    def set_array_field(self, name: str, values: Iterable[JsonValue]) -> None:
        """Store copies of the given values; empty and binary values are left out."""
        if not name:
            return
        items = []
        for item in values:
            kind = item.type
            if kind in (JsonType.NONE, JsonType.BINARY):
                continue
            if kind is JsonType.ARRAY:
                items.append(list(item.value))
            else:
                items.append(item.value)
        self.values[name] = items

    def merge_json_object(self, other: "JsonObject", overwrite: bool) -> None:
        """Copy the fields of ``other``, keeping existing ones unless ``overwrite``."""
        for key in other.field_names():
            if not overwrite and self.has_field(key):
                continue
            value = other.get_field(key)
            if value is not None:
                self.set_field(key, value)

    def get_object_field(self, name: str) -> "JsonObject":
        return JsonObject(self._typed(name, JsonType.OBJECT))

    def set_object_field(self, name: str, obj: "JsonObject") -> None:
        if name:
            self.values[name] = obj.values

    def get_binary_field(self, name: str) -> bytes:
        """Return binary data; a string field is decoded as base64."""
        if name not in self.values or self.values[name] is None:
            raise KeyError(f"No field with name {name}")
        raw = self.values[name]
        if isinstance(raw, (bytes, bytearray)):
            return bytes(raw)
        if isinstance(raw, str):
            try:
                return base64.b64decode(raw, validate=True)
            except (binascii.Error, ValueError):
                return b""
        return b""

    def set_binary_field(self, name: str, data: bytes) -> None:
        if name:
            self.values[name] = bytes(data)

    def _array_of(self, name: str, kind: JsonType) -> list:
        items = self._typed(name, JsonType.ARRAY)
        for item in items:
            actual = _type_of(item)
            if actual is not kind and not (kind is JsonType.STRING and actual is JsonType.BINARY):
                raise TypeError(f"Not {kind.value} element in array with field name {name}")
        return list(items)

    def get_number_array_field(self, name: str) -> list[float]:
        return [float(item) for item in self._array_of(name, JsonType.NUMBER)]

    def set_number_array_field(self, name: str, numbers: Iterable[float]) -> None:
        if name:
            self.values[name] = [float(number) for number in numbers]

    def get_string_array_field(self, name: str) -> list[str]:
        return [to_json_string(item) for item in self._array_of(name, JsonType.STRING)]

    def set_string_array_field(self, name: str, strings: Iterable[str]) -> None:
        if name:
            self.values[name] = [str(text) for text in strings]

    def get_bool_array_field(self, name: str) -> list[bool]:
        return self._array_of(name, JsonType.BOOLEAN)

    def set_bool_array_field(self, name: str, flags: Iterable[bool]) -> None:
        if name:
            self.values[name] = [bool(flag) for flag in flags]

    def get_object_array_field(self, name: str) -> list["JsonObject"]:
        return [JsonObject(item) for item in self._array_of(name, JsonType.OBJECT)]

    def set_object_array_field(self, name: str, objects: Iterable["JsonObject"]) -> None:
        if name:
            self.values[name] = [obj.values for obj in objects]