"""Extract embedded JSON records from free-form log lines."""

import logging
import re
from typing import Iterable

from log_router.models import Record, RecordDecodeError, decode_record

logger = logging.getLogger(__name__)

# Greedy: spans from the first '{' to the last '}' on the line.
JSON_OBJECT_RE = re.compile(r"\{.*\}")


def extract_json(line: str) -> str | None:
    """Return the first brace-delimited substring of *line*, or None."""
    m = JSON_OBJECT_RE.search(line)
    return m.group(0) if m else None


def parse_lines(lines: Iterable[str], seen: set) -> list[Record]:
    """Decode records from *lines*, dropping any whose key is already in *seen*.

    Keys of accepted records are added to *seen*. Lines with no embedded
    object are skipped silently; lines that fail to decode are logged.
    """
    records: list[Record] = []
    for line in lines:
        payload = extract_json(line)
        if payload is None:
            continue
        try:
            record = decode_record(payload)
        except RecordDecodeError as e:
            logger.warning("Error parsing line: %s, error: %s", line, e)
            continue

        if record.key in seen:
            logger.info("Duplicate entry detected and skipped: %s", record)
            continue
        seen.add(record.key)
        records.append(record)
    return records


def sort_by_time(records: list[Record]) -> list[Record]:
    return sorted(records, key=lambda r: r.time_ms)
