"""
CLI Module - Command line interface for sql-indent

Reads SQL from a file or standard input, writes the formatted SQL to
standard output.

Usage:
    sql-indent [--style STYLE] [--uppercase | --lowercase] [FILE]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from colorama import Fore, Style, just_fix_windows_console

from . import __version__
from .config import SQL_FORMAT_STYLES, UnknownStyleError
from .formatter import format_sql

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_BAD_STYLE = 2

LEVEL_COLORS = {
    logging.ERROR: Fore.RED,
    logging.WARNING: Fore.YELLOW,
    logging.INFO: Fore.RESET,
    logging.DEBUG: Fore.BLUE,
}


def _use_color(stream) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _colorize(message: str, color: str, stream) -> str:
    """Wrap message in color codes when the stream is a terminal"""
    if not _use_color(stream):
        return message
    return f"{color}{message}{Style.RESET_ALL}"


class ColoredFormatter(logging.Formatter):
    """Log formatter with a color per level"""

    def __init__(self, stream):
        super().__init__("[%(levelname)-8s] %(name)s: %(message)s")
        self.stream = stream

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelno, Fore.RESET)
        return _colorize(super().format(record), color, self.stream)


def setup_logging(verbose: bool):
    """Send package logs to stderr; DEBUG when verbose, errors are reported by main()"""
    package_logger = logging.getLogger("sql_indent")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.propagate = False

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter(sys.stderr))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.CRITICAL)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser"""
    styles = "\n".join(
        f"  {key:<12}{info['description']}" for key, info in SQL_FORMAT_STYLES.items()
    )
    parser = argparse.ArgumentParser(
        prog="sql-indent",
        description="Format SQL queries read from a file or standard input",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Styles:
{styles}

Examples:
  echo "select id, name from users" | sql-indent
  sql-indent --style aligned query.sql
  sql-indent --style streamline --uppercase < query.sql
        """
    )
    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        help="SQL file to format (default: standard input)"
    )
    parser.add_argument(
        "-s", "--style",
        default="basic",
        help="Formatting style (default: basic)"
    )
    case_group = parser.add_mutually_exclusive_group()
    case_group.add_argument(
        "--uppercase",
        dest="uppercase",
        action="store_const",
        const=True,
        help="Uppercase keywords"
    )
    case_group.add_argument(
        "--lowercase",
        dest="uppercase",
        action="store_const",
        const=False,
        help="Lowercase keywords"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug information to standard error"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    return parser


def _read_input(path: Optional[Path]) -> str:
    if path is None:
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _error(message: str):
    print(_colorize(f"error: {message}", Fore.RED, sys.stderr), file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the process exit status"""
    just_fix_windows_console()
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        sql_text = _read_input(args.file)
    except OSError as e:
        _error(f"cannot read {args.file}: {e}")
        return EXIT_IO_ERROR

    try:
        formatted = format_sql(sql_text, style=args.style, uppercase=args.uppercase)
    except UnknownStyleError as e:
        _error(str(e))
        return EXIT_BAD_STYLE

    sys.stdout.write(formatted)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
