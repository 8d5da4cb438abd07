"""Telemetry record extracted from a log line, with JSON encode/decode."""

import json
import re
from dataclasses import dataclass

# (attribute, JSON field, type) in output order
_FIELDS = (
    ("time_ms", "timeMs", int),
    ("stream_id", "streamId", str),
    ("event_type", "eventType", str),
    ("total_byte_received", "totalByteReceived", int),
    ("byte_transferred", "byteTransferred", int),
    ("duration_ms", "durationMs", int),
    ("width", "width", int),
    ("height", "height", int),
)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Lone surrogates survive json.loads but cannot be written as UTF-8.
_SURROGATE_RE = re.compile("[\ud800-\udfff]")


class RecordDecodeError(ValueError):
    """Raised when an embedded JSON object cannot be decoded into a Record."""


@dataclass(frozen=True)
class Record:
    time_ms: int = 0
    stream_id: str = ""
    event_type: str = ""
    total_byte_received: int = 0
    byte_transferred: int = 0
    duration_ms: int = 0
    width: int = 0
    height: int = 0

    @property
    def key(self) -> tuple[int, str, str]:
        """Identity used for deduplication within one read window."""
        return (self.time_ms, self.stream_id, self.event_type)


def record_from_dict(data: dict) -> Record:
    """Build a Record from a decoded JSON object. Unknown fields are ignored."""
    kwargs = {}
    for attr, name, kind in _FIELDS:
        value = data.get(name)
        if value is None:
            continue
        # bool is an int subclass but never a valid numeric field
        if kind is int and (isinstance(value, bool) or not isinstance(value, int)):
            raise RecordDecodeError(f"field {name!r}: expected integer, got {value!r}")
        if kind is int and not INT64_MIN <= value <= INT64_MAX:
            raise RecordDecodeError(f"field {name!r}: {value} out of int64 range")
        if kind is str and not isinstance(value, str):
            raise RecordDecodeError(f"field {name!r}: expected string, got {value!r}")
        if kind is str:
            value = _SURROGATE_RE.sub("\ufffd", value)
        kwargs[attr] = value
    return Record(**kwargs)


def decode_record(text: str) -> Record:
    """Decode a JSON object string into a Record."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RecordDecodeError(str(e)) from e
    if not isinstance(data, dict):
        raise RecordDecodeError(f"expected a JSON object, got {type(data).__name__}")
    return record_from_dict(data)


def record_to_dict(record: Record) -> dict:
    return {name: getattr(record, attr) for attr, name, _ in _FIELDS}


def encode_record(record: Record) -> str:
    """Compact single-line JSON for newline-delimited output."""
    return json.dumps(record_to_dict(record), separators=(",", ":"), ensure_ascii=False)
