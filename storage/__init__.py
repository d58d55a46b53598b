"""
PageDB Storage Engine
=====================
Public API for the storage layer.

Usage:
    from storage import Row, open_database, close_database, insert, scan_all
    from storage import Table, Pager, Page, ExecuteResult
"""

from storage.errors import (
    StorageError, PagerError, PageOutOfBoundsError, PageNotResidentError,
    TableClosedError,
)
from storage.schema import (
    Row, COLUMN_USERNAME_SIZE, COLUMN_EMAIL_SIZE, ID_MAX, ROW_SIZE,
)
from storage.serializer import serialize_row, deserialize_row
from storage.page import (
    Page, PAGE_SIZE, ROWS_PER_PAGE, TABLE_MAX_PAGES, TABLE_MAX_ROWS,
    row_location, row_file_offset,
)
from storage.pager import Pager
from storage.table import (
    Table, ExecuteResult, open_database, close_database, insert, scan_all,
)

__all__ = [
    "StorageError", "PagerError", "PageOutOfBoundsError", "PageNotResidentError",
    "TableClosedError",
    "Row", "COLUMN_USERNAME_SIZE", "COLUMN_EMAIL_SIZE", "ID_MAX", "ROW_SIZE",
    "serialize_row", "deserialize_row",
    "Page", "PAGE_SIZE", "ROWS_PER_PAGE", "TABLE_MAX_PAGES", "TABLE_MAX_ROWS",
    "row_location", "row_file_offset",
    "Pager",
    "Table", "ExecuteResult", "open_database", "close_database", "insert", "scan_all",
]
