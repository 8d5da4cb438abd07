"""One polling pass: checksum gate, incremental parse, sort, categorize.

The pass is a function of (source, config, state) and returns the state for
the next pass. Checksum and offset carry over; the dedup set does not.
"""

import logging
from dataclasses import dataclass, field, replace

from log_router.categorizer import categorize
from log_router.config import RouterConfig
from log_router.parser import parse_lines, sort_by_time
from log_router.source import SourceLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollState:
    checksum: str | None = None
    offset: int = 0
    seen: frozenset = field(default_factory=frozenset)


def process_tick(source: SourceLog, config: RouterConfig, state: PollState) -> PollState:
    try:
        checksum = source.checksum()
    except OSError as e:
        logger.error("Error calculating checksum: %s", e)
        return state

    if checksum == state.checksum:
        logger.info("No changes detected in the log file, skipping processing.")
        return state
    state = replace(state, checksum=checksum)

    try:
        offset = source.resolve_offset(state.offset)
        source.seek(offset)
    except OSError as e:
        logger.error("Error seeking to last read position: %s", e)
        return state

    seen = set(state.seen)
    try:
        records = parse_lines(source.lines(), seen)
    except OSError as e:
        logger.error("Error parsing log file: %s", e)
        return state

    records = sort_by_time(records)
    logger.info("Read %d new record(s) from %s", len(records), source.path)
    categorize(records, config)

    try:
        offset = source.tell()
    except OSError as e:
        logger.error("Error updating last read position: %s", e)
        offset = state.offset

    return PollState(checksum=checksum, offset=offset, seen=frozenset())
