"""Conversion between JSON text and plain Python JSON values.

JSON values are plain Python data: ``None`` for null, ``str``, ``bool``,
``int``/``float`` for numbers, ``list`` for arrays, ``dict`` for objects and
``bytes`` for binary payloads.  Binary values are written to JSON text as
base64 strings.
"""

from __future__ import annotations

import base64
import json
import re
from dataclasses import dataclass, field
from typing import Any, Optional

TMAP_KEY = "!__!INTERNAL_TMAP"
"""Marker key of a key map node whose children are the values of a map."""

_NUMERIC = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)")
_FAILED = object()


@dataclass
class TrimmedKeyMap:
    """Maps trimmed field names to their long names, recursively."""

    long_key: str = ""
    sub_map: dict[str, "TrimmedKeyMap"] = field(default_factory=dict)

    def __str__(self) -> str:
        pairs = "".join(f"{{{key}:{sub}}}," for key, sub in self.sub_map.items())
        return f"{{{self.long_key}:{pairs}}}"


def _encode_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    raise TypeError(f"value of type {type(value).__name__} is not JSON serializable")


def _condensed(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_encode_default)


def _parse(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return _FAILED


def to_json_string(value: Any) -> str:
    """Render a JSON value as text.

    Null becomes an empty string, strings are returned as they are, numbers are
    written with six decimals, booleans as ``1`` or ``0`` and arrays and objects
    as condensed JSON.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return "%f" % value
    if isinstance(value, (bytes, bytearray)):
        return _encode_default(value)
    if isinstance(value, (list, tuple, dict)):
        return _condensed(value)
    return ""


def json_string_to_array(text: str) -> list:
    """Parse text as a JSON array; anything else gives an empty list."""
    parsed = _parse(text)
    return parsed if isinstance(parsed, list) else []


def to_json_object(text: str) -> dict:
    """Parse text as a JSON object; anything else gives an empty dict."""
    parsed = _parse(text)
    return parsed if isinstance(parsed, dict) else {}


def json_string_to_value(text: str) -> Any:
    """Guess the JSON value that a piece of text stands for.

    Empty text is null, numeric text a float, text starting with ``{`` an
    object, a valid array text a list, ``true``/``false`` a bool, and any other
    text the string itself.
    """
    if not text:
        return None
    if _NUMERIC.fullmatch(text):
        return float(text)
    if text.startswith("{"):
        return to_json_object(text)
    if text.startswith("["):
        parsed = _parse(text)
        if isinstance(parsed, list):
            return parsed
    if text in ("true", "false"):
        return text == "true"
    return text


def trim_key(long_key: str) -> Optional[str]:
    """Cut a long generated field name at its second-to-last underscore.

    Returns ``None`` when the name holds fewer than two underscores.
    """
    last = long_key.rfind("_")
    if last < 0:
        return None
    second = long_key.rfind("_", 0, last)
    if second < 0:
        return None
    return long_key[:second]


def trim_value_key_names(value: Any) -> None:
    """Trim every object key inside ``value`` in place."""
    if isinstance(value, list):
        for item in value:
            trim_value_key_names(item)
    elif isinstance(value, dict):
        for key, sub_value in list(value.items()):
            trimmed = trim_key(key)
            trim_value_key_names(sub_value)
            if trimmed is not None:
                value[trimmed] = sub_value
                value.pop(key, None)


def replace_json_value_names_with_map(value: Any, key_map: TrimmedKeyMap) -> None:
    """Rename object keys inside ``value`` to the long names of ``key_map``, in place."""
    if isinstance(value, dict):
        sub_map = key_map.sub_map
        for key, sub_value in list(value.items()):
            if TMAP_KEY in sub_map:
                replace_json_value_names_with_map(sub_value, sub_map[TMAP_KEY])
            elif key in sub_map:
                entry = sub_map[key]
                replace_json_value_names_with_map(sub_value, entry)
                if key != entry.long_key:
                    value[entry.long_key] = sub_value
                    value.pop(key, None)
    elif isinstance(value, list):
        for item in value:
            replace_json_value_names_with_map(item, key_map)