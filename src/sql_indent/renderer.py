"""
Renderer - Turns layout segments into styled SQL text

Every style goes through the same code; the differences (indent unit, keyword
case, comma placement, river alignment) come from the style table in config.
"""

from dataclasses import dataclass
from typing import List, Optional

from .analyzer import KeywordUnit, Piece, Segment, SegmentRole, is_keyword, is_token
from .config import JOIN_RIVER_WIDTH, RIVER_WIDTH, StyleConfig, StyleSpec
from .keywords import (
    FUNCTION_KEYWORDS,
    JOIN_KEYWORDS,
    PACKED_CLAUSES,
    SET_OPERATORS,
    SHORT_CLAUSES,
    TIGHT_OPERATORS,
    VALUE_KEYWORDS,
)
from .tokenizer import TokenType

NO_SPACE_BEFORE = (
    TokenType.CLOSE_PAREN, TokenType.COMMA, TokenType.SEMICOLON, TokenType.DOT,
    TokenType.OPEN_BRACKET, TokenType.CLOSE_BRACKET,
)
NO_SPACE_AFTER = (TokenType.OPEN_PAREN, TokenType.DOT, TokenType.OPEN_BRACKET)
CALLABLE = (TokenType.WORD, TokenType.QUOTED_IDENTIFIER)
UNARY_CONTEXT = (TokenType.OPERATOR, TokenType.COMMA, TokenType.OPEN_PAREN,
                 TokenType.OPEN_BRACKET)


@dataclass
class _Line:
    """One output line: code text plus an optional trailing line comment"""
    indent: int = 0
    text: str = ""
    comment: str = ""

    def render(self) -> str:
        body = " ".join(part for part in (self.text, self.comment) if part)
        return (" " * self.indent + body).rstrip()


def render(segments: List[Segment], config: StyleConfig) -> str:
    """
    Render segments with the given style.

    Args:
        segments: Output of analyze()
        config: Style and keyword case

    Returns:
        Formatted text ending with a single newline, or "" for no segments
    """
    if not segments:
        return ""

    spec = config.spec
    lines: List[_Line] = []
    index = 0
    while index < len(segments):
        segment = segments[index]
        indent = _indent(segment, spec)
        body = _segment_lines(segment, config.uppercase)

        if segment.role is SegmentRole.LIST_ITEM and not segment.first_item:
            if spec.leading_commas:
                if not body:
                    body = [_Line()]
                body[0].text = f", {body[0].text}" if body[0].text else ","
            elif index > 0 and not segments[index - 1].is_empty and lines:
                lines[-1].text += ","
            else:
                lines.append(_Line(indent, ","))

        for line in body:
            line.indent = indent
        lines.extend(body)

        packed = _packed_item(segments, index, spec)
        if packed is not None:
            item_lines = _segment_lines(packed, config.uppercase)
            if item_lines:
                head_line = lines[-1]
                first = item_lines.pop(0)
                head_line.text = " ".join(part for part in (head_line.text, first.text) if part)
                head_line.comment = first.comment
                item_indent = _indent(packed, spec)
                for line in item_lines:
                    line.indent = item_indent
                lines.extend(item_lines)
            index += 1
        index += 1

    rendered = [line.render() for line in lines]
    text = "\n".join(line for line in rendered if line)
    return f"{text}\n" if text else ""


def _indent(segment: Segment, spec: StyleSpec) -> int:
    """Column where a segment's lines start."""
    depth = segment.depth
    if not spec.aligned:
        return depth * spec.indent

    step = spec.indent
    if segment.role is SegmentRole.CLAUSE_HEAD:
        return step * depth + _river_padding(segment)
    if segment.role is SegmentRole.MODIFIER:
        return max(step * (depth - 1) + RIVER_WIDTH - len(_first_word(segment)), 0)
    if segment.clause == 'WITH' and segment.role is not SegmentRole.COMMENT:
        # CTE closers and ", name AS (" lines sit under WITH
        return step * max(depth - 1, 0)
    return step * depth


def _river_padding(head: Segment) -> int:
    """Spaces that right-align a clause keyword to the river."""
    keyword = head.clause or ''
    word = _first_word(head)
    if keyword == 'WITH':
        return 0
    if keyword in JOIN_KEYWORDS:
        width = len(keyword) if len(keyword) <= JOIN_RIVER_WIDTH else len(word)
        return max(JOIN_RIVER_WIDTH - width, 0)
    if len(word) > RIVER_WIDTH:
        return 1
    return RIVER_WIDTH - len(word)


def _first_word(segment: Segment) -> str:
    first = segment.pieces[0] if segment.pieces else None
    if isinstance(first, KeywordUnit):
        return first.first_word
    return first.value if first is not None else ""


def _packed_item(segments: List[Segment], index: int, spec: StyleSpec) -> Optional[Segment]:
    """Return the first list item that shares the clause head's line, if any."""
    head = segments[index]
    if head.role is not SegmentRole.CLAUSE_HEAD or index + 1 >= len(segments):
        return None
    item = segments[index + 1]
    if item.role is not SegmentRole.LIST_ITEM or not item.first_item:
        return None
    if head.clause in SET_OPERATORS or is_token(head.pieces[-1], TokenType.LINE_COMMENT):
        return None

    if spec.aligned or head.clause in PACKED_CLAUSES:
        return item
    if head.clause in SHORT_CLAUSES:
        following = segments[index + 2] if index + 2 < len(segments) else None
        if following is not None and following.role is SegmentRole.LIST_ITEM \
                and not following.first_item:
            return None
        body = [piece for piece in item.pieces if not is_token(piece, TokenType.SEMICOLON)]
        if len(body) == 1 and not is_token(body[0], TokenType.LINE_COMMENT,
                                           TokenType.BLOCK_COMMENT):
            return item
    return None


def _segment_lines(segment: Segment, uppercase: bool) -> List[_Line]:
    """Lay out a segment's pieces; line comments force a line break."""
    if segment.is_empty:
        return []

    lines = [_Line()]
    for index, piece in enumerate(segment.pieces):
        line = lines[-1]
        if is_token(piece, TokenType.LINE_COMMENT):
            line.comment = piece.value.rstrip()
            lines.append(_Line())
            continue
        if line.text and _needs_space(segment, index):
            line.text += " "
        line.text += _piece_text(piece, uppercase)

    if len(lines) > 1 and not lines[-1].text:
        lines.pop()
    return lines


def _piece_text(piece: Piece, uppercase: bool) -> str:
    if isinstance(piece, KeywordUnit):
        return piece.keyword.upper() if uppercase else piece.keyword.lower()
    return piece.value


def _needs_space(segment: Segment, index: int) -> bool:
    """Decide whether a space separates pieces[index - 1] and pieces[index]."""
    pieces = segment.pieces
    piece = pieces[index]
    previous = pieces[index - 1]

    if is_token(piece, *NO_SPACE_BEFORE) or is_token(previous, *NO_SPACE_AFTER):
        return False
    if _is_tight(piece) or _is_tight(previous):
        return False
    if _is_unary(pieces, index - 1):
        return False
    if is_token(piece, TokenType.OPEN_PAREN):
        if index == segment.opener_index:
            return True
        if is_token(previous, *CALLABLE) or is_keyword(previous, *FUNCTION_KEYWORDS):
            return False
    return True


def _is_tight(piece: Piece) -> bool:
    return is_token(piece, TokenType.OPERATOR) and piece.value in TIGHT_OPERATORS


def _is_unary(pieces: List[Piece], index: int) -> bool:
    """Check if pieces[index] is a sign that should be glued to the next piece."""
    piece = pieces[index]
    if not is_token(piece, TokenType.OPERATOR) or piece.value not in ('+', '-'):
        return False

    following = pieces[index + 1] if index + 1 < len(pieces) else None
    if following is None:
        return False
    if is_token(following, TokenType.OPERATOR, TokenType.LINE_COMMENT,
                TokenType.BLOCK_COMMENT):
        return False
    if _piece_text(following, True)[:1] in ('+', '-'):
        return False

    before = None
    for candidate in reversed(pieces[:index]):
        if not is_token(candidate, TokenType.LINE_COMMENT, TokenType.BLOCK_COMMENT):
            before = candidate
            break
    if before is None or is_token(before, *UNARY_CONTEXT):
        return True
    return isinstance(before, KeywordUnit) and before.keyword not in VALUE_KEYWORDS
