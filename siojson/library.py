"""High-level helpers for JSON arrays and one-shot HTTP calls."""

from __future__ import annotations

from typing import Any, Callable, Optional

from .convert import json_string_to_array
from .model import JsonObject, JsonValue
from .request import ContentType, JsonRequest, RequestStatus, RequestVerb

RequestCallback = Callable[[JsonRequest], Any]


def string_to_json_value_array(text: str) -> list[JsonValue]:
    """Parse a JSON array text into wrapped values.

    Text that is not a JSON array gives an empty list.
    """
    return [JsonValue(item) for item in json_string_to_array(text)]


def call_url(
    url: str,
    verb: RequestVerb,
    content_type: ContentType,
    json_object: Optional[JsonObject],
    callback: Optional[RequestCallback],
) -> JsonRequest:
    """Send ``json_object`` to ``url`` and hand the finished request to ``callback``.

    The callback runs exactly once, whether the request succeeded or failed.
    A missing ``json_object`` is replaced by an empty one. The request is
    returned so its response can be inspected afterwards.
    """
    request = JsonRequest(verb=verb, content_type=content_type)
    request.request_object = json_object if json_object is not None else JsonObject()

    def on_done(finished: JsonRequest) -> None:
        if on_done in finished.on_request_complete:
            finished.on_request_complete.remove(on_done)
        if on_done in finished.on_request_fail:
            finished.on_request_fail.remove(on_done)
        if callback is not None:
            callback(finished)

    request.on_request_complete.append(on_done)
    request.on_request_fail.append(on_done)

    request.reset_response_data()
    request.process_url(url)
    return request


def get_url_binary(url: str, verb: RequestVerb, content_type: ContentType) -> bytes:
    """Fetch ``url`` and return the raw response body.

    Raises ``ConnectionError`` if no response could be obtained.
    """
    received: list[bytes] = []
    request = JsonRequest(verb=verb, content_type=content_type)
    request.should_have_binary_response = True
    request.on_binary_result = received.append

    request.reset_response_data()
    status = request.process_url(url)
    if status is not RequestStatus.SUCCEEDED or not received:
        raise ConnectionError(f"request to {url} failed")
    return received[-1]