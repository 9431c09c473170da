"""HTTP requests that send and receive JSON objects."""

from __future__ import annotations

import base64
import json
import urllib.error
import urllib.request
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from .encoding import percent_encode
from .model import JsonObject, JsonValue

Transport = Callable[[urllib.request.Request], "tuple[int, Iterable[tuple[str, str]], bytes]"]


class RequestVerb(Enum):
    """HTTP verbs a request can use."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DEL = "DELETE"
    CUSTOM = "CUSTOM"


class ContentType(Enum):
    """How the request object is sent."""

    X_WWW_FORM_URLENCODED_URL = "x_www_form_urlencoded_url"
    X_WWW_FORM_URLENCODED_BODY = "x_www_form_urlencoded_body"
    JSON = "json"
    BINARY = "binary"


class RequestStatus(Enum):
    """Progress of a request."""

    NOT_STARTED = 0
    PROCESSING = 1
    FAILED = 2
    FAILED_CONNECTION_ERROR = 3
    SUCCEEDED = 4


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    raise TypeError(f"value of type {type(value).__name__} is not JSON serializable")


def _urllib_transport(timeout: float) -> Transport:
    def send(request: urllib.request.Request):
        try:
            with urllib.request.urlopen(request, timeout=timeout) as response:
                return response.status, list(response.headers.items()), response.read()
        except urllib.error.HTTPError as err:
            headers = list(err.headers.items()) if err.headers is not None else []
            return err.code, headers, err.read()

    return send


class JsonRequest:
    """An HTTP request carrying a JSON object and receiving one back.

    Listeners in ``on_request_complete`` and ``on_request_fail`` are called
    with the request when it finishes. With ``should_have_binary_response``
    set, the raw response body is kept in ``result_binary`` and handed to
    ``on_binary_result``.
    """

    def __init__(
        self,
        verb: RequestVerb = RequestVerb.GET,
        content_type: ContentType = ContentType.X_WWW_FORM_URLENCODED_URL,
        transport: Optional[Transport] = None,
        timeout: float = 30.0,
    ) -> None:
        self.verb = verb
        self.custom_verb = ""
        self.content_type = content_type
        self.binary_content_type = "application/octet-stream"
        self.request_bytes = b""
        self.request_headers: dict[str, str] = {}
        self.should_have_binary_response = False
        self.on_request_complete: list[Callable[["JsonRequest"], Any]] = []
        self.on_request_fail: list[Callable[["JsonRequest"], Any]] = []
        self.on_binary_result: Optional[Callable[[bytes], Any]] = None
        self.tags: list[str] = []
        self.request_object = JsonObject()
        self.response_object = JsonObject()
        self.response_content = ""
        self.result_binary = b""
        self._transport = transport if transport is not None else _urllib_transport(timeout)
        self.reset_data()

    def set_header(self, name: str, value: str) -> None:
        """Add a header sent with every request, after the content type."""
        self.request_headers[name] = value

    # -- reset ----------------------------------------------------------

    def reset_data(self) -> None:
        self.reset_request_data()
        self.reset_response_data()

    def reset_request_data(self) -> None:
        self.request_object.reset()
        self.url = ""
        self.status = RequestStatus.NOT_STARTED

    def reset_response_data(self) -> None:
        self.response_object.reset()
        self.response_headers: dict[str, str] = {}
        self.response_code = -1
        self.is_valid_json_response = False

    def cancel(self) -> None:
        """Drop any response data received so far."""
        self.reset_response_data()

    # -- response access -----------------------------------------------

    def get_response_header(self, name: str) -> str:
        """Return a response header, or an empty string if it was not sent."""
        return self.response_headers.get(name, "")

    def all_response_headers(self) -> list[str]:
        return [f"{key}: {value}" for key, value in self.response_headers.items()]

    # -- processing ----------------------------------------------------

    def _method(self) -> str:
        if self.verb is RequestVerb.CUSTOM:
            return self.custom_verb
        return self.verb.value

    def _form_params(self, first_separator: str) -> str:
        parts = []
        for index, (key, raw) in enumerate(self.request_object.values.items()):
            value = JsonValue(raw).as_string()
            if key and value:
                separator = first_separator if index == 0 else "&"
                parts.append(f"{separator}{percent_encode(key)}={percent_encode(value)}")
        return "".join(parts)

    def prepare(self, url: str) -> urllib.request.Request:
        """Build the HTTP request for ``url`` from the verb, content and headers.

        Raises ``ValueError`` if the URL cannot be used.
        """
        self.url = url
        headers: dict[str, str] = {}
        body: Optional[bytes] = None

        if self.content_type is ContentType.X_WWW_FORM_URLENCODED_URL:
            headers["Content-Type"] = "application/x-www-form-urlencoded"
            self.url = url + self._form_params("?")
        elif self.content_type is ContentType.X_WWW_FORM_URLENCODED_BODY:
            headers["Content-Type"] = "application/x-www-form-urlencoded"
            body = self._form_params("").encode("utf-8")
        elif self.content_type is ContentType.BINARY:
            headers["Content-Type"] = self.binary_content_type
            body = bytes(self.request_bytes)
        elif self.content_type is ContentType.JSON:
            headers["Content-Type"] = "application/json"
            text = json.dumps(
                self.request_object.values, indent="\t", ensure_ascii=False, default=_json_default
            )
            body = text.encode("utf-8")

        request = urllib.request.Request(self.url, data=body, method=self._method())
        for name, value in {**headers, **self.request_headers}.items():
            request.add_header(name, value)
        return request

    def process_url(self, url: str) -> RequestStatus:
        """Send the request to ``url`` and handle the response.

        Returns the final status; listeners are told the outcome.
        """
        request = self.prepare(url)
        self.status = RequestStatus.PROCESSING
        try:
            code, headers, content = self._transport(request)
        except OSError:
            self.reset_response_data()
            self.status = RequestStatus.FAILED_CONNECTION_ERROR
            for listener in list(self.on_request_fail):
                listener(self)
            return self.status

        self.reset_response_data()
        self.response_code = code
        self.status = RequestStatus.SUCCEEDED

        if self.should_have_binary_response:
            self.result_binary = bytes(content)
            self._notify_complete()
            if self.on_binary_result is not None:
                self.on_binary_result(self.result_binary)
            return self.status

        self.response_content = bytes(content).decode("utf-8", errors="replace")
        for name, value in headers:
            self.response_headers[name] = value
        try:
            parsed = json.loads(self.response_content)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            self.response_object.values = parsed
            self.is_valid_json_response = True
        self._notify_complete()
        return self.status

    def _notify_complete(self) -> None:
        for listener in list(self.on_request_complete):
            listener(self)

    # -- tags ----------------------------------------------------------

    def add_tag(self, tag: str) -> None:
        if tag and tag not in self.tags:
            self.tags.append(tag)

    def remove_tag(self, tag: str) -> int:
        """Remove a tag; return how many were removed."""
        count = self.tags.count(tag)
        self.tags = [item for item in self.tags if item != tag]
        return count

    def has_tag(self, tag: str) -> bool:
        return bool(tag) and tag in self.tags