"""Event filters: a configured value or list of values matched against event_type.

A filter in the configuration is either a single string (exact match) or a
list of strings (membership). Anything else is rejected with FilterError.
"""

from dataclasses import dataclass
from typing import Callable

from log_router.models import Record


class FilterError(ValueError):
    """Raised when no usable filter exists for an event type."""


@dataclass(frozen=True)
class Exact:
    value: str

    def matches(self, record: Record) -> bool:
        return record.event_type == self.value


@dataclass(frozen=True)
class AnyOf:
    values: frozenset[str]

    def matches(self, record: Record) -> bool:
        return record.event_type in self.values


EventFilter = Exact | AnyOf


def parse_filter(raw: object) -> EventFilter:
    """Turn a raw configured filter into Exact or AnyOf."""
    if isinstance(raw, str):
        return Exact(raw)
    if isinstance(raw, list):
        if not all(isinstance(v, str) for v in raw):
            raise FilterError(f"filter list must contain only strings: {raw!r}")
        return AnyOf(frozenset(raw))
    raise FilterError(f"unsupported filter type {type(raw).__name__}")


def build_filter(event_type: str, filters: dict) -> Callable[[Record], bool]:
    """Return the predicate configured for *event_type*."""
    if event_type not in filters:
        raise FilterError(f"no filter found for event type: {event_type}")
    try:
        return parse_filter(filters[event_type]).matches
    except FilterError as e:
        raise FilterError(f"unsupported filter for event type {event_type}: {e}") from e
