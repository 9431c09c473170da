# siojson

A small JSON toolkit built around plain Python JSON values. Values may also
carry raw binary payloads as `bytes`, which are written to JSON text as base64.
The package needs nothing beyond the standard library.

## Modules

### `siojson.model`

- `JsonType`: the kinds of value: `NONE`, `NULL`, `STRING`, `NUMBER`,
  `BOOLEAN`, `ARRAY`, `OBJECT`, `BINARY`.
- `JsonValue` wraps one value. It is built with `from_number`, `from_string`,
  `from_bool`, `from_array`, `from_object`, `from_binary` or
  `from_json_string`, which guesses the type from the text. It is read with
  `as_number`, `as_string`, `as_bool`, `as_array`, `as_object` and
  `as_binary`, which reads a string as hex. `is_null` and `encode_json` are
  also provided, and `type` and `type_string` are properties. Reading a value
  that holds nothing raises `TypeError`.
- `JsonObject` wraps a dict. It offers `field_names`, `has_field`,
  `remove_field`, `get_field` and `set_field`. It has typed getters and setters
  for numbers, strings, booleans, arrays, objects and binary data, and for
  uniform arrays of numbers, strings, booleans and objects. It also has
  `merge_json_object`, `reset`, `encode_json`, `encode_json_to_single_string`
  and `decode_json`.
  - The typed getters raise `KeyError` when the field is missing or has
    another type.
  - The array getters raise `TypeError` on an element of the wrong type.
  - `get_binary_field` decodes a string field as base64.
  - `decode_json` raises `ValueError` for text that is not a JSON object, and
    leaves the object empty.

### `siojson.convert`

- `to_json_string`: turns a value into text. Null becomes `""`, strings are
  kept as they are, numbers get six decimals, booleans become `1` or `0`, and
  arrays and objects become condensed JSON.
- `json_string_to_value`: turns text into a value. Empty text becomes null,
  numeric text a float, `{...}` an object, a valid `[...]` a list, and
  `true`/`false` a bool. Any other text stays a string.
- `json_string_to_array` and `to_json_object` parse text. Text of the wrong
  shape gives an empty list or dict.
- Key trimming for long generated field names such as
  `flag_8_EDBB36654CF43866C376DE921373AF23`:
  - `trim_key` cuts at the second-to-last underscore and returns `None` when
    the name has fewer than two underscores.
  - `trim_value_key_names` trims every key in place.
  - `replace_json_value_names_with_map` renames keys back to their long names,
    using a `TrimmedKeyMap`.

### `siojson.structs`

Converts dataclass instances to JSON objects and back. The functions are
`struct_to_json_object`, `json_object_to_struct`, `struct_to_bytes`,
`bytes_to_struct`, `to_json_file` and `json_file_to_struct`.

Fields are matched by name. Missing or null fields keep their defaults.
Enums are written by member name. `datetime` fields accept ISO text and also
`min`, `max` and `now`.

With `is_blueprint_struct=True`:

- keys are trimmed on output and mapped back on input, using
  `trimmed_key_map_for_struct`;
- byte fields stay binary and may be read from base64 text;
- enum names match without regard to case.

Failures raise `ConversionError`, a subclass of `ValueError`.

### `siojson.encoding`

- `percent_encode` escapes reserved URL characters and leaves `%` alone.
- `base64_encode` and `base64_encode_bytes` encode text and bytes.
- `base64_decode` and `base64_decode_bytes` decode them, raising `ValueError`
  on invalid input.

### `siojson.request`

`JsonRequest` uses `RequestVerb`, `ContentType` and `RequestStatus`.

`prepare(url)` builds a `urllib.request.Request` from the request object. The
object is sent as URL query parameters, as a URL-encoded body, as JSON, or as
the raw `request_bytes`. Headers added with `set_header` are sent as well.

`process_url(url)` sends the request and returns the final `RequestStatus`.
It also:

- stores the response code and headers;
- parses a JSON object response into `response_object`;
- calls the listeners in `on_request_complete` or `on_request_fail`.

With `should_have_binary_response` set, the raw body is stored in
`result_binary` and handed to `on_binary_result`.

A custom `transport` callable can be passed to the constructor in place of
`urllib`.

Tags are handled with `add_tag`, `remove_tag` and `has_tag`.

### `siojson.library`

- `string_to_json_value_array` parses a JSON array into `JsonValue`s.
- `call_url` sends one request and calls a callback once with the finished
  request.
- `get_url_binary` returns the response body, or raises `ConnectionError`.

## Example

```python
from siojson.model import JsonObject
from siojson.convert import json_string_to_value, to_json_string

obj = JsonObject()
obj.set_string_field("name", "example")
obj.set_number_array_field("scores", [1, 2.5])
print(obj.encode_json())        # {"name":"example","scores":[1.0,2.5]}

value = json_string_to_value('{"a": [1, 2]}')
print(to_json_string(value))    # {"a":[1,2]}

restored = JsonObject()
restored.decode_json(obj.encode_json())
print(restored.get_string_field("name"))  # example
```

## What it does not do

There is no socket or event-stream client here and no command-line tool.
Requests run synchronously, one at a time, through `urllib`.

## Running the tests

```
pip install -e .[test]
pytest
```