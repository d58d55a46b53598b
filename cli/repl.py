"""
PageDB Interactive REPL
=======================
Line-oriented shell with the `db > ` prompt.

Features:
  - One statement per line, no terminator
  - Meta-commands (dot-prefixed): .exit, .stats
  - Ctrl+C: discard the current line
  - EOF: same as .exit (database is closed and flushed)
  - Single fatal-error boundary: any StorageError raised below this
    point is handed to the `on_fatal` policy, which by default prints a
    diagnostic and terminates the process with status 1
"""

import sys
from typing import Callable, Optional, TextIO

from cli.renderer import Renderer
from cli.session import MetaCommandResult, PrepareResult, Session, prepare_statement
from storage.errors import StorageError
from storage.table import ExecuteResult

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

FatalHandler = Callable[[StorageError, Renderer], int]


def abort(error: StorageError, renderer: Renderer) -> int:
    """Default fatal policy: report and terminate the process."""
    renderer.render_error(error)
    sys.exit(EXIT_FAILURE)


def report(error: StorageError, renderer: Renderer) -> int:
    """Alternative fatal policy: report and return a failure status to the caller."""
    renderer.render_error(error)
    return EXIT_FAILURE


PREPARE_MESSAGES = {
    PrepareResult.NEGATIVE_ID: "ID must be positive.",
    PrepareResult.STRING_TOO_LONG: "String is too long.",
    PrepareResult.SYNTAX_ERROR: "Syntax error. Could not parse statement.",
}

EXECUTE_MESSAGES = {
    ExecuteResult.SUCCESS: "Executed.",
    ExecuteResult.TABLE_FULL: "Error: Table full.",
}


class REPL:
    """
    Interactive PageDB shell.

    Usage:
        repl = REPL("path/to/users.db")
        status = repl.run()
    """

    PROMPT = "db > "

    def __init__(self, db_path: str, *, stdin: Optional[TextIO] = None,
                 output: Optional[TextIO] = None, errors: Optional[TextIO] = None,
                 on_fatal: FatalHandler = abort):
        self.db_path = db_path
        self.stdin = stdin or sys.stdin
        self.renderer = Renderer(output, errors)
        self.on_fatal = on_fatal
        self.session: Optional[Session] = None
        self._running = False

    def run(self) -> int:
        """Main REPL loop. Returns the process exit status."""
        try:
            self.session = Session(self.db_path)
            self._running = True
            while self._running:
                self.renderer.prompt(self.PROMPT)
                try:
                    line = self.stdin.readline()
                except KeyboardInterrupt:
                    self.renderer.prompt("\n")
                    continue
                if not line:
                    break  # EOF
                self.handle_line(line.rstrip("\n"))
            self._shutdown()
        except StorageError as e:
            return self.on_fatal(e, self.renderer)
        return EXIT_SUCCESS

    def handle_line(self, line: str):
        """Process one input line (without its newline)."""
        if line.startswith("."):
            self._handle_meta_command(line)
            return

        result, statement = prepare_statement(line)
        if result is PrepareResult.UNRECOGNIZED_STATEMENT:
            self.renderer.render_message(f"Unrecognized keyword at start of '{line}'.")
            return
        if result is not PrepareResult.SUCCESS:
            self.renderer.render_message(PREPARE_MESSAGES[result])
            return

        outcome, rows = self.session.execute(statement)
        if rows is not None:
            self.renderer.render_rows(rows)
        self.renderer.render_message(EXECUTE_MESSAGES[outcome])

    # ─── Meta-Commands ──────────────────────────────────────────────

    def _handle_meta_command(self, line: str):
        result = self.session.do_meta_command(line)
        if result is MetaCommandResult.EXIT:
            self._running = False
        elif result is MetaCommandResult.SUCCESS:
            self.renderer.render_stats(self.session.storage_stats())
        else:
            self.renderer.render_message(f"Unrecognized command '{line}'")

    def _shutdown(self):
        """Clean shutdown: close the session, which flushes the table."""
        if self.session is not None:
            self.session.close()
