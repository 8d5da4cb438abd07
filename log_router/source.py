"""Long-lived handle on the monitored log file, plus the content checksum.

The handle is opened once and only reseeked between passes. If the path
starts pointing at a different file (rotation) the handle is reopened.
"""

import hashlib
import logging
import os
from typing import BinaryIO, Iterator

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def file_checksum(path: str) -> str:
    """MD5 hex digest of the whole file at *path*."""
    digest = hashlib.md5()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


class SourceLog:
    def __init__(self, path: str):
        self.path = path
        self._file: BinaryIO | None = None
        self._identity: tuple[int, int] | None = None
        self._open()

    def _open(self) -> None:
        self._file = open(self.path, "rb")
        st = os.fstat(self._file.fileno())
        self._identity = (st.st_dev, st.st_ino)

    def close(self) -> None:
        if self._file is not None and not self._file.closed:
            self._file.close()

    def checksum(self) -> str:
        return file_checksum(self.path)

    def check_rotation(self) -> bool:
        """Reopen if the path now names a different file. Return True if reopened."""
        try:
            st = os.stat(self.path)
        except FileNotFoundError:
            return False
        if (st.st_dev, st.st_ino) == self._identity:
            return False
        logger.warning("Log file %s was replaced, reopening", self.path)
        self.close()
        self._open()
        return True

    def size(self) -> int:
        return os.fstat(self._file.fileno()).st_size

    def resolve_offset(self, offset: int) -> int:
        """Offset to resume from, reset to 0 after rotation or truncation."""
        if self.check_rotation():
            return 0
        size = self.size()
        if offset > size:
            logger.warning(
                "Log file %s truncated (size %d < offset %d), reading from start",
                self.path, size, offset,
            )
            return 0
        return offset

    def seek(self, offset: int) -> None:
        self._file.seek(offset, os.SEEK_SET)

    def lines(self) -> Iterator[str]:
        """Yield decoded lines from the current position to end of file."""
        for raw in iter(self._file.readline, b""):
            yield raw.decode("utf-8", errors="replace").rstrip("\r\n")

    def tell(self) -> int:
        return self._file.tell()
