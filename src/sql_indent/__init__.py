"""
sql-indent - Deterministic SQL formatter
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("sql-indent")
except PackageNotFoundError:
    # Package not installed, fallback to the version declared in pyproject.toml
    __version__ = "0.3.0"  # Fallback version

from .analyzer import Segment, SegmentRole, analyze
from .config import SQL_FORMAT_STYLES, FormatStyle, StyleConfig, UnknownStyleError
from .formatter import format_sql
from .renderer import render
from .tokenizer import Token, TokenType, tokenize

__all__ = [
    "format_sql",
    "tokenize",
    "analyze",
    "render",
    "Token",
    "TokenType",
    "Segment",
    "SegmentRole",
    "FormatStyle",
    "StyleConfig",
    "UnknownStyleError",
    "SQL_FORMAT_STYLES",
    "__version__",
]
