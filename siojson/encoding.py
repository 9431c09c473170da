"""Percent and base64 encoding helpers."""

from __future__ import annotations

import base64
import binascii

_PERCENT_TABLE = str.maketrans(
    {
        " ": "%20",
        "!": "%21",
        '"': "%22",
        "#": "%23",
        "$": "%24",
        "&": "%26",
        "'": "%27",
        "(": "%28",
        ")": "%29",
        "*": "%2A",
        "+": "%2B",
        ",": "%2C",
        "/": "%2F",
        ":": "%3A",
        ";": "%3B",
        "=": "%3D",
        "?": "%3F",
        "@": "%40",
        "[": "%5B",
        "]": "%5D",
        "{": "%7B",
        "}": "%7D",
    }
)


def percent_encode(source: str) -> str:
    """Percent-encode the reserved URL characters of ``source``.

    The percent sign itself is left as it is.
    """
    return source.translate(_PERCENT_TABLE)


def base64_encode(source: str) -> str:
    """Encode the UTF-8 bytes of a string as base64."""
    return base64_encode_bytes(source.encode("utf-8"))


def base64_encode_bytes(source: bytes) -> str:
    """Encode bytes as base64 text."""
    return base64.b64encode(bytes(source)).decode("ascii")


def base64_decode_bytes(source: str) -> bytes:
    """Decode base64 text to bytes.

    Raises ``ValueError`` if the text is not valid base64.
    """
    try:
        return base64.b64decode(source, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid base64 text: {source!r}") from exc


def base64_decode(source: str) -> str:
    """Decode base64 text to a UTF-8 string.

    Raises ``ValueError`` if the text is not valid base64 or not UTF-8.
    """
    data = base64_decode_bytes(source)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(f"decoded base64 is not UTF-8 text: {source!r}") from exc