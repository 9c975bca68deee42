from __future__ import annotations

import datetime as dt
import enum
import json
from typing import Any

from json2pg.errors import FieldConversionError


class JsonKind(enum.Enum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def classify(value: Any) -> JsonKind:
    if value is None:
        return JsonKind.NULL
    # bool is a subclass of int; check it first.
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise TypeError(f"Not a decoded JSON value: {type(value).__name__}")


def epoch_to_timestamp(seconds: float) -> dt.datetime:
    # Truncates toward zero, so fractional seconds are dropped.
    return dt.datetime.fromtimestamp(int(seconds), tz=dt.timezone.utc)


def encode_json_text(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, allow_nan=False)


def convert_value(field: str, value: Any, column_type: str) -> Any:
    """Return the value to bind for `field` given its column's declared type.

    Numbers headed for a timestamp column are read as Unix epoch seconds and
    objects are encoded as JSON text (for json/jsonb columns). Everything else
    is bound as decoded.
    """
    kind = classify(value)
    try:
        if kind is JsonKind.NUMBER and "timestamp" in column_type:
            return epoch_to_timestamp(value)
        if kind is JsonKind.OBJECT:
            return encode_json_text(value)
    except (ValueError, OverflowError, OSError) as e:
        raise FieldConversionError(field, e) from e
    return value
