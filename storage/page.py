"""
PageDB Pages
============
4KB fixed-size pages holding whole rows back to back.

Page layout:
  [0 .. ROWS_PER_PAGE * ROW_SIZE)   row slots, slot i at i * ROW_SIZE
  [ROWS_PER_PAGE * ROW_SIZE .. 4096) unused padding (287 bytes)

No row ever spans two pages. A row number maps to a page and a byte
offset purely by arithmetic:

    page_num    = row_num // ROWS_PER_PAGE
    byte_offset = (row_num % ROWS_PER_PAGE) * ROW_SIZE
    file_offset = page_num * PAGE_SIZE + byte_offset

Every access to a page's bytes goes through a range check against
PAGE_SIZE; slicing past the end of the buffer is an error, not a
silent truncation.
"""

from storage.schema import ROW_SIZE

# ─── Constants ──────────────────────────────────────────────────────────────

PAGE_SIZE = 4096                                  # bytes per page
ROWS_PER_PAGE = PAGE_SIZE // ROW_SIZE             # 13
TABLE_MAX_PAGES = 100                             # page-cache capacity
TABLE_MAX_ROWS = ROWS_PER_PAGE * TABLE_MAX_PAGES  # 1300
PAGE_PADDING = PAGE_SIZE - ROWS_PER_PAGE * ROW_SIZE


def row_location(row_num: int) -> tuple[int, int]:
    """Return (page_num, byte offset within the page) for a row number."""
    if row_num < 0:
        raise ValueError(f"row number must be non-negative, got {row_num}")
    return row_num // ROWS_PER_PAGE, (row_num % ROWS_PER_PAGE) * ROW_SIZE


def row_file_offset(row_num: int) -> int:
    """Absolute byte offset of a row in the database file."""
    page_num, byte_offset = row_location(row_num)
    return page_num * PAGE_SIZE + byte_offset


def rows_in_file(file_length: int) -> int:
    """
    Number of complete rows stored in a file of the given length.

    Full pages contribute ROWS_PER_PAGE rows each (their padding is not row
    data); the trailing partial page contributes every whole row it holds.
    """
    full_pages, tail = divmod(file_length, PAGE_SIZE)
    return full_pages * ROWS_PER_PAGE + min(tail // ROW_SIZE, ROWS_PER_PAGE)


class Page:
    """
    A PAGE_SIZE byte buffer owned by the Pager.

    The same Page object is handed out for every request of its page
    number, so writes through it are visible to later reads without any
    copy-back step.
    """

    __slots__ = ("_page_num", "_data")

    def __init__(self, page_num: int, data: bytes = b""):
        """
        Args:
            page_num: Page number within the file
            data: Bytes read from disk; may be shorter than PAGE_SIZE
                  (last page of the file). The rest stays zeroed.
        """
        if len(data) > PAGE_SIZE:
            raise ValueError(f"Page data must be at most {PAGE_SIZE} bytes, got {len(data)}")
        self._page_num = page_num
        self._data = bytearray(PAGE_SIZE)
        self._data[:len(data)] = data

    @property
    def page_num(self) -> int:
        return self._page_num

    def _check_range(self, offset: int, length: int) -> None:
        if offset < 0 or length < 0 or offset + length > PAGE_SIZE:
            raise IndexError(
                f"Page {self._page_num}: range [{offset}, {offset + length}) "
                f"outside [0, {PAGE_SIZE})")

    def view(self, offset: int, length: int) -> memoryview:
        """Writable view of [offset, offset + length) in place."""
        self._check_range(offset, length)
        return memoryview(self._data)[offset:offset + length]

    def read(self, offset: int, length: int) -> bytes:
        """Copy of [offset, offset + length)."""
        self._check_range(offset, length)
        return bytes(self._data[offset:offset + length])

    def write(self, offset: int, data: bytes) -> None:
        """Overwrite bytes starting at offset."""
        self._check_range(offset, len(data))
        self._data[offset:offset + len(data)] = data

    def to_bytes(self, length: int = PAGE_SIZE) -> bytes:
        """The first `length` bytes of the page, ready to be written."""
        return self.read(0, length)

    def __len__(self) -> int:
        return PAGE_SIZE

    def __repr__(self) -> str:
        return f"Page(num={self._page_num})"
