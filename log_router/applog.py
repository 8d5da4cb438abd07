"""Application log: every operational message appended to a fixed file."""

import logging
import sys
from datetime import datetime

APPLICATION_LOG_FILE = "applicationlogs.log"

CONSOLE_FORMAT = "%(asctime)s [log-router] %(levelname)s %(message)s"


class AppendOnlyFileHandler(logging.Handler):
    """Writes ``[RFC3339 timestamp] message`` lines, reopening the file per record."""

    def __init__(self, path: str = APPLICATION_LOG_FILE):
        super().__init__()
        self.path = path
        self._exc_formatter = logging.Formatter()

    def format_line(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).astimezone()
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}: {self._exc_formatter.formatException(record.exc_info)}"
        return f"[{stamp.isoformat(timespec='seconds')}] {message}\n"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format_line(record)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line)
        except Exception:
            self.handleError(record)


def setup_logging(path: str = APPLICATION_LOG_FILE, level: int = logging.INFO) -> AppendOnlyFileHandler:
    """Console logging on stderr plus the append-only application log."""
    logging.basicConfig(level=level, format=CONSOLE_FORMAT, stream=sys.stderr)
    root = logging.getLogger()
    root.setLevel(level)
    for existing in [h for h in root.handlers if isinstance(h, AppendOnlyFileHandler)]:
        root.removeHandler(existing)
    handler = AppendOnlyFileHandler(path)
    root.addHandler(handler)
    return handler
