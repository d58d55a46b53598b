"""
PageDB Session
==============
Statement preparation and execution on top of one open Table.

Owns:
  - The Table (and through it the Pager and the database file)
  - Session statistics

Statement grammar (whitespace separated, case-sensitive):
  insert <id> <username> <email>
  select

Preparation failures are results, not exceptions: the REPL prints a
message and keeps going. Storage failures (StorageError) are not caught
here; they propagate to the REPL's fatal-error boundary.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Tuple

from storage.schema import ID_MAX, Row
from storage.table import ExecuteResult, Table, close_database, insert, open_database, scan_all


class SessionError(Exception):
    """Session-level misuse (statement on a closed session, etc.)."""
    pass


class MetaCommandResult(Enum):
    SUCCESS = auto()
    EXIT = auto()
    UNRECOGNIZED_COMMAND = auto()


class PrepareResult(Enum):
    SUCCESS = auto()
    NEGATIVE_ID = auto()
    STRING_TOO_LONG = auto()
    SYNTAX_ERROR = auto()
    UNRECOGNIZED_STATEMENT = auto()


class StatementType(Enum):
    INSERT = auto()
    SELECT = auto()


@dataclass
class Statement:
    type: StatementType
    row_to_insert: Optional[Row] = None


def _prepare_insert(line: str) -> Tuple[PrepareResult, Optional[Statement]]:
    tokens = line.split()
    if len(tokens) < 4:
        return PrepareResult.SYNTAX_ERROR, None
    _keyword, id_string, username, email = tokens[:4]

    try:
        row_id = int(id_string)
    except ValueError:
        return PrepareResult.SYNTAX_ERROR, None
    if row_id < 0:
        return PrepareResult.NEGATIVE_ID, None
    if row_id > ID_MAX:
        return PrepareResult.SYNTAX_ERROR, None

    row = Row(id=row_id, username=username, email=email)
    if row.validate():
        return PrepareResult.STRING_TOO_LONG, None
    return PrepareResult.SUCCESS, Statement(StatementType.INSERT, row)


def prepare_statement(line: str) -> Tuple[PrepareResult, Optional[Statement]]:
    """
    Turn one input line into a Statement.

    Returns (PrepareResult, Statement or None). Only SUCCESS carries a
    statement.
    """
    if line.startswith("insert"):
        return _prepare_insert(line)
    if line == "select":
        return PrepareResult.SUCCESS, Statement(StatementType.SELECT)
    return PrepareResult.UNRECOGNIZED_STATEMENT, None


class Session:
    """
    Database session: one open table for the life of the process.

    Usage:
        with Session("users.db") as session:
            result, stmt = prepare_statement("insert 1 alice a@x.com")
            session.execute(stmt)
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.table: Table = open_database(db_path)
        self._closed = False
        self.stats = {
            "statements_executed": 0,
            "rows_inserted": 0,
            "table_full": 0,
        }

    def do_meta_command(self, line: str) -> MetaCommandResult:
        """Handle a dot-prefixed command. `.exit` is left to the caller to act on."""
        self._check_closed()
        if line == ".exit":
            return MetaCommandResult.EXIT
        if line == ".stats":
            return MetaCommandResult.SUCCESS
        return MetaCommandResult.UNRECOGNIZED_COMMAND

    def execute(self, statement: Statement) -> Tuple[ExecuteResult, Optional[Iterator[Row]]]:
        """
        Execute a prepared statement.

        Returns: (ExecuteResult, rows)
          - INSERT: (SUCCESS | TABLE_FULL, None)
          - SELECT: (SUCCESS, lazy iterator over all rows)
        """
        self._check_closed()
        self.stats["statements_executed"] += 1

        if statement.type is StatementType.INSERT:
            result = insert(self.table, statement.row_to_insert)
            if result is ExecuteResult.SUCCESS:
                self.stats["rows_inserted"] += 1
            else:
                self.stats["table_full"] += 1
            return result, None

        return ExecuteResult.SUCCESS, scan_all(self.table)

    def storage_stats(self) -> dict:
        """Session counters merged with the pager's cache statistics."""
        self._check_closed()
        merged = dict(self.stats)
        merged["rows"] = self.table.num_rows
        merged.update({f"pages_{k}": v for k, v in self.table.pager.stats().items()})
        return merged

    def _check_closed(self):
        if self._closed:
            raise SessionError("Session is closed")

    # ─── Lifecycle ──────────────────────────────────────────────────

    def close(self) -> None:
        """Flush and close the table. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        close_database(self.table)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
