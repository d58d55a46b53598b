"""
PageDB Storage Errors
=====================
Fatal conditions raised by the storage layer.

Recoverable outcomes (a full table, a rejected statement) are returned as
result enums, never raised. Everything below means the process cannot
safely continue; the CLI boundary decides what to do with it.
"""


class StorageError(Exception):
    """Base class for fatal storage-layer failures."""
    pass


class PagerError(StorageError):
    """File open/seek/read/write/close failed. The OSError is the __cause__."""
    pass


class PageOutOfBoundsError(StorageError):
    """Page number outside the fixed page-cache capacity."""

    def __init__(self, page_num: int, max_pages: int):
        super().__init__(
            f"Tried to fetch page number out of bounds. {page_num} >= {max_pages}")
        self.page_num = page_num
        self.max_pages = max_pages


class PageNotResidentError(StorageError):
    """Flush requested for a page that was never loaded."""

    def __init__(self, page_num: int):
        super().__init__(f"Tried to flush null page {page_num}")
        self.page_num = page_num


class TableClosedError(StorageError):
    """Operation attempted on a table that has already been closed."""
    pass
