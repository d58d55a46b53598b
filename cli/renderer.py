"""
PageDB Result Renderer
======================
Prints statement results in the shell's line format.

  - Rows:     (<id>, <username>, <email>), one per line, streamed
  - Messages: printed verbatim (Executed., Error: Table full., ...)
  - Fatal errors: diagnostic written to the error stream
"""

import sys
from typing import Iterable, Optional, TextIO

from storage.schema import Row


class Renderer:
    """Streaming result renderer."""

    def __init__(self, output: Optional[TextIO] = None, errors: Optional[TextIO] = None):
        self.output = output or sys.stdout
        self.errors = errors or self.output

    def render_row(self, row: Row):
        self._print(f"({row.id}, {row.username}, {row.email})")

    def render_rows(self, rows: Iterable[Row]) -> int:
        """Print rows as they arrive. Returns number of rows rendered."""
        count = 0
        for row in rows:
            self.render_row(row)
            count += 1
        return count

    def render_message(self, message: str):
        """Render a status line (DML result, preparation error)."""
        if message:
            self._print(message)

    def render_stats(self, stats: dict):
        width = max((len(k) for k in stats), default=0)
        for key, value in stats.items():
            self._print(f"  {key:<{width}}  {value}")

    def render_error(self, error: Exception):
        """Render a fatal error with its class name as prefix."""
        print(f"Error[{type(error).__name__}]: {error}", file=self.errors)
        if self.errors is not self.output:
            self.errors.flush()

    def prompt(self, text: str):
        """Write the prompt without a newline."""
        self.output.write(text)
        self.output.flush()

    def _print(self, text: str):
        """Print a line to the output stream."""
        print(text, file=self.output)
