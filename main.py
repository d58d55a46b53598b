"""
PageDB: Single-Table Paged Record Store
=======================================
Entry point for the database shell.

Usage:
    python main.py [options] <database_file>

Options:
    --help              Show help
    --verbose           Log storage activity at DEBUG level
    --log-level LEVEL   Set log level (DEBUG, INFO, WARNING, ERROR)

The log level defaults to $PAGEDB_LOG_LEVEL, or WARNING when unset.
"""

import sys

from cli.logs import configure_logging


def print_help():
    print("""
PageDB: Single-Table Paged Record Store

Usage:
    python main.py [options] <database_file>

Options:
    --help              Show this help
    --verbose           Same as --log-level DEBUG
    --log-level LEVEL   DEBUG, INFO, WARNING or ERROR
                        (default: $PAGEDB_LOG_LEVEL or WARNING)

Statements:
    insert <id> <username> <email>
    select

Meta-Commands:
    .stats          Row count and page cache statistics
    .exit           Flush the database and exit
""")


def main(argv=None) -> None:
    """Parse CLI arguments and dispatch."""
    args = sys.argv[1:] if argv is None else list(argv)

    if "--help" in args or "-h" in args:
        print_help()
        return

    db_path = None
    log_level = None

    i = 0
    while i < len(args):
        if args[i] == "--verbose":
            log_level = "DEBUG"
            i += 1
        elif args[i] == "--log-level" and i + 1 < len(args):
            log_level = args[i + 1]
            i += 2
        elif args[i].startswith("-"):
            print(f"Unknown option: {args[i]}", file=sys.stderr)
            print_help()
            sys.exit(1)
        else:
            db_path = args[i]
            i += 1

    if db_path is None:
        print("Must supply a database filename.")
        sys.exit(1)

    try:
        configure_logging(log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    from cli.repl import REPL
    repl = REPL(db_path, errors=sys.stderr)
    sys.exit(repl.run())


if __name__ == "__main__":
    main()
