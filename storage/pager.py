"""
PageDB Pager
============
Direct-mapped page cache over a single flat file.

Safety guarantees:
  - Identity cache: the same page number always returns the same Page
    object for the lifetime of the Pager.
  - No eviction: a page, once loaded, stays resident until it is released
    by the table at close. TABLE_MAX_PAGES is a hard ceiling, not a
    replacement policy.
  - Nothing reaches disk except through flush(). The caller chooses how
    many bytes of a page to write, so a partial last page can be persisted
    without trailing garbage.

Every OS-level failure is raised as PagerError with the original OSError
chained; the pager never retries and never exits the process itself.
"""

import logging
import os
from typing import Optional

from storage.errors import PagerError, PageNotResidentError, PageOutOfBoundsError
from storage.page import PAGE_SIZE, TABLE_MAX_PAGES, Page

logger = logging.getLogger(__name__)

FILE_MODE = 0o600


class Pager:
    """
    Owns the file descriptor and every resident page buffer.

    Pages are identified by page number; slot i of the cache holds page i
    or None when it has not been loaded.
    """

    def __init__(self, fd: int, file_path: str, file_length: int):
        self._fd: Optional[int] = fd
        self._file_path = file_path
        self._file_length = file_length
        self._pages: list[Optional[Page]] = [None] * TABLE_MAX_PAGES
        self._misses = 0
        self._flushes = 0

    @classmethod
    def open(cls, file_path: str) -> "Pager":
        """Open (creating if absent) a database file for read/write."""
        try:
            fd = os.open(file_path, os.O_RDWR | os.O_CREAT, FILE_MODE)
        except OSError as e:
            raise PagerError(f"Unable to open file '{file_path}': {e}") from e
        try:
            file_length = os.lseek(fd, 0, os.SEEK_END)
        except OSError as e:
            os.close(fd)
            raise PagerError(f"Unable to size file '{file_path}': {e}") from e
        logger.debug("opened %s (%d bytes)", file_path, file_length)
        return cls(fd, file_path, file_length)

    @property
    def file_path(self) -> str:
        return self._file_path

    @property
    def file_length(self) -> int:
        """File length recorded at open time."""
        return self._file_length

    @property
    def num_pages(self) -> int:
        """Pages present on disk at open, counting a trailing partial page."""
        full, tail = divmod(self._file_length, PAGE_SIZE)
        return full + (1 if tail else 0)

    @property
    def is_closed(self) -> bool:
        return self._fd is None

    def _require_fd(self) -> int:
        if self._fd is None:
            raise PagerError(f"Pager for '{self._file_path}' is closed")
        return self._fd

    # ─── Page cache ─────────────────────────────────────────────────

    def get_page(self, page_num: int) -> Page:
        """
        Return the resident page, loading it from disk on first access.

        Pages past the end of the file come back zero-filled. A short read
        of the last partial page is accepted as-is.
        """
        if page_num < 0 or page_num >= TABLE_MAX_PAGES:
            raise PageOutOfBoundsError(page_num, TABLE_MAX_PAGES)

        page = self._pages[page_num]
        if page is not None:
            return page

        self._misses += 1
        data = b""
        if page_num <= self.num_pages:
            data = self._read_at(page_num * PAGE_SIZE, PAGE_SIZE)
        logger.debug("page %d miss: loaded %d bytes from disk", page_num, len(data))

        page = Page(page_num, data)
        self._pages[page_num] = page
        return page

    def is_resident(self, page_num: int) -> bool:
        return 0 <= page_num < TABLE_MAX_PAGES and self._pages[page_num] is not None

    def resident_pages(self) -> list[int]:
        """Page numbers currently held in memory, ascending."""
        return [i for i, page in enumerate(self._pages) if page is not None]

    def flush(self, page_num: int, byte_count: int = PAGE_SIZE) -> None:
        """Write the first `byte_count` bytes of a resident page to its file offset."""
        if not self.is_resident(page_num):
            raise PageNotResidentError(page_num)
        if byte_count < 0 or byte_count > PAGE_SIZE:
            raise ValueError(f"byte_count must be in [0, {PAGE_SIZE}], got {byte_count}")

        data = self._pages[page_num].to_bytes(byte_count)
        self._write_at(page_num * PAGE_SIZE, data)
        self._flushes += 1
        logger.debug("page %d flushed (%d bytes)", page_num, byte_count)

    def release(self, page_num: int) -> None:
        """Drop a resident page without writing it."""
        if self.is_resident(page_num):
            self._pages[page_num] = None

    def close(self) -> None:
        """Sync and close the file. Resident pages are left for the caller."""
        fd = self._require_fd()
        self._fd = None
        try:
            os.fsync(fd)
        except OSError as e:
            os.close(fd)
            raise PagerError(f"Error syncing db file '{self._file_path}': {e}") from e
        try:
            os.close(fd)
        except OSError as e:
            raise PagerError(f"Error closing db file '{self._file_path}': {e}") from e
        logger.debug("closed %s", self._file_path)

    def stats(self) -> dict:
        """Return page cache statistics."""
        resident = len(self.resident_pages())
        return {
            "capacity": TABLE_MAX_PAGES,
            "resident": resident,
            "free": TABLE_MAX_PAGES - resident,
            "misses": self._misses,
            "flushes": self._flushes,
        }

    # ─── Raw I/O ────────────────────────────────────────────────────

    def _read_at(self, offset: int, length: int) -> bytes:
        fd = self._require_fd()
        chunks = []
        remaining = length
        try:
            os.lseek(fd, offset, os.SEEK_SET)
            while remaining > 0:
                chunk = os.read(fd, remaining)
                if not chunk:
                    break  # EOF
                chunks.append(chunk)
                remaining -= len(chunk)
        except OSError as e:
            raise PagerError(f"Error reading file at offset {offset}: {e}") from e
        return b"".join(chunks)

    def _write_at(self, offset: int, data: bytes) -> None:
        fd = self._require_fd()
        view = memoryview(data)
        try:
            os.lseek(fd, offset, os.SEEK_SET)
            while view:
                written = os.write(fd, view)
                view = view[written:]
        except OSError as e:
            raise PagerError(f"Error writing file at offset {offset}: {e}") from e

    def __repr__(self) -> str:
        return (f"Pager(path='{self._file_path}', length={self._file_length}, "
                f"resident={len(self.resident_pages())})")
