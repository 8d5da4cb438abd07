"""Route records into per-event-type output files."""

import logging
import os

from log_router.config import RouterConfig
from log_router.filters import FilterError, build_filter
from log_router.models import Record, encode_record

logger = logging.getLogger(__name__)


def append_records(path: str, records: list[Record]) -> None:
    """Append records to *path* as newline-delimited JSON, creating parent dirs."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        for record in records:
            f.write(encode_record(record) + "\n")


def categorize(records: list[Record], config: RouterConfig) -> dict[str, int]:
    """Write each configured event type's matching records.

    Returns the number of records written per event type. A bad filter or a
    failed write only affects its own event type.
    """
    written: dict[str, int] = {}
    for event_type, path in config.output_files.items():
        try:
            predicate = build_filter(event_type, config.event_filters)
        except FilterError as e:
            logger.error("Error creating filter for %s: %s", event_type, e)
            continue

        matched = [r for r in records if predicate(r)]
        if not matched:
            continue

        try:
            append_records(path, matched)
        except (OSError, ValueError) as e:
            logger.error("Error writing to file %s: %s", path, e)
            continue
        written[event_type] = len(matched)
        logger.info("Wrote %d %s record(s) to %s", len(matched), event_type, path)
    return written
