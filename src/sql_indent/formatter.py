"""
SQL Formatter - Entry point of the formatting pipeline

text -> tokenize() -> analyze() -> render() -> text

Available styles:
- basic: clause heads on their own line, 4 space indent, trailing commas
- streamline: basic with a 2 space indent and lowercase keywords
- aligned: keywords right-aligned on a river, leading commas
- dataops: basic with leading commas
"""

from typing import Optional

from .analyzer import analyze
from .config import StyleConfig, UnknownStyleError
from .renderer import render
from .tokenizer import tokenize

import logging
logger = logging.getLogger(__name__)


def format_sql(sql_text: str, style="basic", uppercase: Optional[bool] = None) -> str:
    """
    Format SQL query with specified style.

    Malformed SQL never raises: unterminated literals, unbalanced parentheses
    and unknown characters are formatted on a best-effort basis.

    Args:
        sql_text: SQL query to format
        style: Format style ("basic", "streamline", "aligned", "dataops")
        uppercase: Keyword case; None uses the style's default

    Returns:
        Formatted SQL ending with a newline, or "" for blank input

    Raises:
        UnknownStyleError: If the style name is not recognized
    """
    try:
        config = StyleConfig.create(style, uppercase)
    except UnknownStyleError as e:
        logger.error(f"SQL formatting error: {e}")
        raise

    if not sql_text or not sql_text.strip():
        return ""

    segments = analyze(tokenize(sql_text))
    logger.debug(f"Formatting {len(sql_text)} chars with style '{config.style.value}' "
                 f"({len(segments)} segments)")
    return render(segments, config)
