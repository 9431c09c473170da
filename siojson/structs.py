"""Conversion between dataclass instances and JSON objects.

Dataclasses play the part of structs: their fields are filled from the
fields of a JSON object with the same names. Blueprint structs carry long
generated field names such as ``boolKey_8_EDBB36654CF43866C376DE921373AF23``.
Their JSON form uses the trimmed names (``boolKey``), and a key map built
from the dataclass turns trimmed names back into long ones when reading.
"""

from __future__ import annotations

import base64
import binascii
import copy
import dataclasses
import re
import types
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Union, get_args, get_origin

from .convert import (
    TMAP_KEY,
    TrimmedKeyMap,
    replace_json_value_names_with_map,
    to_json_object,
    to_json_string,
    trim_key,
    trim_value_key_names,
)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_BARE_CONTAINERS = (list, tuple, set, frozenset, dict)

# Annotation names understood when a field's type is given as text.
_NAMED_TYPES: dict[str, Any] = {
    "int": int,
    "float": float,
    "str": str,
    "bool": bool,
    "bytes": bytes,
    "bytearray": bytearray,
    "datetime": datetime,
    "list": list,
    "tuple": tuple,
    "set": set,
    "frozenset": frozenset,
    "dict": dict,
    "Any": Any,
    "object": object,
}


class ConversionError(ValueError):
    """Raised when a JSON value cannot be stored into a struct field."""


def _is_struct_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def _unwrap_optional(tp: Any) -> Any:
    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
        return Any
    return tp


def _resolve_annotation(annotation: Any) -> Any:
    if isinstance(annotation, str):
        return _NAMED_TYPES.get(annotation.strip(), Any)
    return annotation


def _field_types(cls: type) -> dict[str, Any]:
    return {f.name: _resolve_annotation(f.type) for f in dataclasses.fields(cls)}


def _container_parts(tp: Any) -> tuple[Any, tuple]:
    origin = get_origin(tp)
    if origin is None and tp in _BARE_CONTAINERS:
        return tp, ()
    return origin, get_args(tp)


# --------------------------------------------------------------------------
# Key maps


def _fill_for_type(key_map: TrimmedKeyMap, tp: Any) -> None:
    tp = _unwrap_optional(tp)
    if _is_struct_type(tp):
        _fill_for_struct(key_map, tp)
        return
    origin, args = _container_parts(tp)
    if origin in (list, tuple):
        if args:
            _fill_for_type(key_map, args[0])
    elif origin is dict:
        sub = TrimmedKeyMap(long_key=TMAP_KEY)
        key_map.sub_map[sub.long_key] = sub
        if len(args) == 2:
            _fill_for_type(sub, args[1])


def _fill_for_struct(key_map: TrimmedKeyMap, cls: type) -> None:
    if not key_map.long_key:
        key_map.long_key = cls.__name__
    hints = _field_types(cls)
    for f in dataclasses.fields(cls):
        long_key = f.name
        trimmed = trim_key(long_key)
        sub = TrimmedKeyMap(long_key=long_key)
        _fill_for_type(sub, hints.get(f.name, Any))
        key_map.sub_map[trimmed if trimmed is not None else long_key] = sub


def trimmed_key_map_for_struct(cls: type) -> TrimmedKeyMap:
    """Build the map from trimmed field names to long field names of ``cls``."""
    if not _is_struct_type(cls):
        raise ConversionError(f"{cls!r} is not a dataclass")
    key_map = TrimmedKeyMap()
    _fill_for_struct(key_map, cls)
    return key_map


# --------------------------------------------------------------------------
# Export


def _export(value: Any, blueprint: bool) -> Any:
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value) if blueprint else list(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _export_struct(value, blueprint)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_export(item, blueprint) for item in value]
    if isinstance(value, dict):
        return {_export_key(key): _export(item, blueprint) for key, item in value.items()}
    return str(value)


def _export_key(key: Any) -> str:
    if isinstance(key, Enum):
        return key.name
    return key if isinstance(key, str) else str(key)


def _export_struct(instance: Any, blueprint: bool) -> dict:
    return {f.name: _export(getattr(instance, f.name), blueprint) for f in dataclasses.fields(instance)}


def struct_to_json_object(instance: Any, is_blueprint_struct: bool = False) -> dict:
    """Turn a dataclass instance into a JSON object.

    Blueprint structs get their keys trimmed and keep byte fields as binary
    values; other structs keep their keys and write bytes as number lists.
    """
    if not dataclasses.is_dataclass(instance) or isinstance(instance, type):
        raise ConversionError(f"{instance!r} is not a dataclass instance")
    obj = _export_struct(instance, is_blueprint_struct)
    if is_blueprint_struct:
        trim_value_key_names(obj)
    return obj


# --------------------------------------------------------------------------
# Import


def _as_number(value: Any) -> float:
    if isinstance(value, (bool, int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def _import_enum(value: Any, enum_cls: type[Enum], blueprint: bool) -> Enum:
    if isinstance(value, str):
        member = enum_cls.__members__.get(value)
        if member is None and blueprint:
            lowered = value.lower()
            for name, candidate in enum_cls.__members__.items():
                if name.lower() == lowered:
                    member = candidate
        if member is None:
            raise ConversionError(f"unable to import enum {enum_cls.__name__} from string value {value!r}")
        return member
    try:
        return enum_cls(int(_as_number(value)))
    except ValueError as exc:
        raise ConversionError(f"no member of {enum_cls.__name__} for value {value!r}") from exc


def _import_int(value: Any) -> int:
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else 0
    return int(_as_number(value))


def _import_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _import_bytes(value: Any, blueprint: bool) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, list):
        try:
            return bytes(int(_as_number(item)) for item in value)
        except ValueError as exc:
            raise ConversionError(f"byte array holds a value out of range: {exc}") from exc
    if blueprint and isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ConversionError(f"base64 decoding failed for {value!r}") from exc
    raise ConversionError("attempted to import a byte array from an unsupported JSON value")


def _import_datetime(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ConversionError("attempted to import a date from a non-string JSON value")
    if value == "min":
        return datetime.min
    if value == "max":
        return datetime.max
    if value == "now":
        return datetime.now(timezone.utc).replace(tzinfo=None)
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.strptime(value, "%Y.%m.%d-%H.%M.%S")
    except ValueError as exc:
        raise ConversionError(f"unable to import date from {value!r}") from exc


def _import(value: Any, tp: Any, blueprint: bool) -> Any:
    tp = _unwrap_optional(tp)
    if value is None:
        return None
    if tp is Any or tp is object:
        return copy.deepcopy(value)
    if isinstance(tp, type) and issubclass(tp, Enum):
        return _import_enum(value, tp, blueprint)
    if tp is bool:
        return value if isinstance(value, bool) else False
    if tp is int:
        return _import_int(value)
    if tp is float:
        return _as_number(value)
    if tp is str:
        return _import_str(value)
    if tp in (bytes, bytearray):
        return tp(_import_bytes(value, blueprint))
    if tp is datetime:
        return _import_datetime(value)
    if _is_struct_type(tp):
        if not isinstance(value, dict):
            raise ConversionError(f"attempted to import {tp.__name__} from a non-object JSON value")
        return _build(value, tp, blueprint)

    origin, args = _container_parts(tp)
    if origin in (list, tuple):
        if not isinstance(value, list):
            raise ConversionError("attempted to import an array from a non-array JSON value")
        inner = args[0] if args else Any
        items = [_import(item, inner, blueprint) for item in value]
        return items if origin is list else tuple(items)
    if origin in (set, frozenset):
        if not isinstance(value, list):
            raise ConversionError("attempted to import a set from a non-array JSON value")
        inner = args[0] if args else Any
        return origin(_import(item, inner, blueprint) for item in value if item is not None)
    if origin is dict:
        if not isinstance(value, dict):
            raise ConversionError("attempted to import a map from a non-object JSON value")
        key_type, value_type = args if len(args) == 2 else (Any, Any)
        return {
            _import(key, key_type, blueprint): _import(item, value_type, blueprint)
            for key, item in value.items()
            if item is not None
        }

    if isinstance(tp, type):
        if isinstance(value, tp):
            return value
        try:
            return tp(value)
        except (TypeError, ValueError) as exc:
            raise ConversionError(f"unable to import {tp.__name__} from {value!r}") from exc
    return value


def _build(attributes: dict, cls: type, blueprint: bool) -> Any:
    hints = _field_types(cls)
    init_values: dict[str, Any] = {}
    late_values: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        raw = attributes.get(f.name)
        if raw is None:
            continue
        try:
            converted = _import(raw, hints.get(f.name, Any), blueprint)
        except ConversionError as exc:
            raise ConversionError(f"unable to parse {cls.__name__}.{f.name} from JSON: {exc}") from exc
        (init_values if f.init else late_values)[f.name] = converted
    try:
        instance = cls(**init_values)
    except TypeError as exc:
        raise ConversionError(f"unable to construct {cls.__name__}: {exc}") from exc
    for name, converted in late_values.items():
        object.__setattr__(instance, name, converted)
    return instance


def json_object_to_struct(obj: dict, cls: type, is_blueprint_struct: bool = False) -> Any:
    """Build an instance of the dataclass ``cls`` from a JSON object.

    Missing or null fields keep their defaults. For blueprint structs the
    trimmed keys are first mapped back to the long field names, and enum
    names also match without regard to case.
    """
    if not _is_struct_type(cls):
        raise ConversionError(f"{cls!r} is not a dataclass")
    attributes = copy.deepcopy(obj)
    if is_blueprint_struct:
        replace_json_value_names_with_map(attributes, trimmed_key_map_for_struct(cls))
    return _build(attributes, cls, is_blueprint_struct)


def struct_to_bytes(instance: Any, is_blueprint_struct: bool = False) -> bytes:
    """Encode a dataclass instance as UTF-8 JSON text."""
    obj = struct_to_json_object(instance, is_blueprint_struct)
    if is_blueprint_struct:
        trim_value_key_names(obj)
    return to_json_string(obj).encode("utf-8")


def bytes_to_struct(data: bytes, cls: type, is_blueprint_struct: bool = False) -> Any:
    """Decode UTF-8 JSON text into an instance of ``cls``."""
    text = bytes(data).decode("utf-8-sig", errors="replace")
    return json_object_to_struct(to_json_object(text), cls, is_blueprint_struct)


def json_file_to_struct(path: str | Path, cls: type, is_blueprint_struct: bool = False) -> Any:
    """Read a JSON file into an instance of ``cls``."""
    return bytes_to_struct(Path(path).read_bytes(), cls, is_blueprint_struct)


def to_json_file(path: str | Path, instance: Any, is_blueprint_struct: bool = False) -> None:
    """Write a dataclass instance to a file as JSON."""
    Path(path).write_bytes(struct_to_bytes(instance, is_blueprint_struct))