"""
PageDB Table
============
The single append-only table, stored through one Pager.

File layout:
  Headerless. Row n lives at (n // ROWS_PER_PAGE) * PAGE_SIZE
  + (n % ROWS_PER_PAGE) * ROW_SIZE. Full pages are written whole
  (padding included); the trailing partial page is written only up to
  its last row, so a closed file is exactly
  full_pages * PAGE_SIZE + partial_rows * ROW_SIZE bytes long.

Durability:
  Inserts only touch resident page buffers. close() is the one point
  where in-memory state reaches the file. A fatal error during close can
  leave some pages updated and others stale; that state is not repaired.

Scan order:
  Insertion order, bounded by the row count at the moment the scan
  starts.
"""

import logging
from enum import Enum, auto
from typing import Iterator, Optional

from storage.errors import PagerError, TableClosedError
from storage.page import (
    PAGE_SIZE, ROWS_PER_PAGE, TABLE_MAX_ROWS,
    row_location, rows_in_file,
)
from storage.pager import Pager
from storage.schema import ROW_SIZE, Row
from storage.serializer import deserialize_row, serialize_row

logger = logging.getLogger(__name__)


class ExecuteResult(Enum):
    SUCCESS = auto()
    TABLE_FULL = auto()


class Table:
    """
    Row count plus exclusive ownership of one Pager.

    Provides:
    - open(): Open or create a table file
    - insert(): Append a row (ExecuteResult.TABLE_FULL when at capacity)
    - scan_all(): Iterate rows in insertion order
    - close(): Flush resident pages and close the file
    """

    def __init__(self, pager: Pager, num_rows: int):
        self._pager: Optional[Pager] = pager
        self._num_rows = num_rows

    @classmethod
    def open(cls, file_path: str) -> "Table":
        pager = Pager.open(file_path)
        num_rows = min(rows_in_file(pager.file_length), TABLE_MAX_ROWS)

        _, tail = divmod(pager.file_length, PAGE_SIZE)
        stray = tail % ROW_SIZE if tail else 0
        if stray:
            logger.warning("%s: ignoring %d trailing bytes that do not form a row",
                           file_path, stray)
        logger.debug("opened table %s with %d rows", file_path, num_rows)
        return cls(pager, num_rows)

    @property
    def num_rows(self) -> int:
        return self._num_rows

    @property
    def pager(self) -> Pager:
        return self._ensure_open()

    @property
    def is_closed(self) -> bool:
        return self._pager is None

    # ─── Row access ─────────────────────────────────────────────────

    def _row_slot(self, row_num: int) -> memoryview:
        """Writable view of row `row_num`'s bytes inside its page."""
        page_num, byte_offset = row_location(row_num)
        page = self._ensure_open().get_page(page_num)
        return page.view(byte_offset, ROW_SIZE)

    def insert(self, row: Row) -> ExecuteResult:
        """Append a row. Duplicate ids are accepted."""
        self._ensure_open()
        if self._num_rows >= TABLE_MAX_ROWS:
            return ExecuteResult.TABLE_FULL

        serialize_row(row, self._row_slot(self._num_rows))
        self._num_rows += 1
        return ExecuteResult.SUCCESS

    def scan_all(self) -> Iterator[Row]:
        """
        Lazily yield every row in insertion order.

        Each call starts a fresh scan; the row count is captured when
        iteration begins.
        """
        self._ensure_open()
        count = self._num_rows
        for row_num in range(count):
            yield deserialize_row(self._row_slot(row_num))

    # ─── Close ──────────────────────────────────────────────────────

    def close(self) -> None:
        """
        Persist every row and close the file.

        Full pages are written whole; a trailing partial page is written
        up to its last row. Pages outside the row range are dropped
        unwritten. Closing an already-closed table is a no-op.

        The file is closed even when a flush fails; the flush error is the
        one raised.
        """
        if self._pager is None:
            return
        pager = self._pager
        self._pager = None

        try:
            self._flush_rows(pager)
        except Exception:
            try:
                pager.close()
            except PagerError:
                logger.warning("error closing %s after failed flush", pager.file_path,
                               exc_info=True)
            raise

        pager.close()
        logger.debug("closed table %s with %d rows", pager.file_path, self._num_rows)

    def _flush_rows(self, pager: Pager) -> None:
        num_full_pages, additional_rows = divmod(self._num_rows, ROWS_PER_PAGE)
        for page_num in range(num_full_pages):
            if pager.is_resident(page_num):
                pager.flush(page_num, PAGE_SIZE)
                pager.release(page_num)

        if additional_rows > 0 and pager.is_resident(num_full_pages):
            pager.flush(num_full_pages, additional_rows * ROW_SIZE)
            pager.release(num_full_pages)

        for page_num in pager.resident_pages():
            logger.debug("dropping unflushed page %d outside row range", page_num)
            pager.release(page_num)

    # ─── Utilities ──────────────────────────────────────────────────

    def _ensure_open(self) -> Pager:
        if self._pager is None:
            raise TableClosedError("Table is closed")
        return self._pager

    def __enter__(self) -> "Table":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __len__(self) -> int:
        return self._num_rows

    def __repr__(self) -> str:
        state = "closed" if self._pager is None else "open"
        return f"Table(rows={self._num_rows}, {state})"


# ─── Collaborator API ──────────────────────────────────────────────────────

def open_database(file_path: str) -> Table:
    """Open the table stored at `file_path`, creating the file if needed."""
    return Table.open(file_path)


def close_database(table: Table) -> None:
    """Flush and close. The only durability point."""
    table.close()


def insert(table: Table, row: Row) -> ExecuteResult:
    return table.insert(row)


def scan_all(table: Table) -> Iterator[Row]:
    return table.scan_all()

