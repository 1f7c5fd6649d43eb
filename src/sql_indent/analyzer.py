"""
Structural Analyzer - Turns a token stream into layout segments

There is no syntax tree. Nesting is tracked with an explicit stack of context
frames pushed and popped at parenthesis boundaries, and clause heads are
recognized from a fixed keyword table.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .keywords import (
    BETWEEN_KEYWORDS,
    CLAUSE_KEYWORDS,
    CONDITION_CLAUSES,
    JOIN_KEYWORDS,
    MAX_UNIT_WORDS,
    PRIVILEGE_CLAUSES,
    SET_OPERATORS,
    lookup_unit,
)
from .tokenizer import Token, TokenType

import logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordUnit:
    """One or more adjacent words recognized as a single keyword"""
    keyword: str
    tokens: Tuple[Token, ...]

    @property
    def first_word(self) -> str:
        return self.keyword.split(' ', 1)[0]


Piece = Union[Token, KeywordUnit]


def is_keyword(piece: Optional[Piece], *names: str) -> bool:
    """Check if a piece is a keyword unit, optionally one of the given names."""
    if not isinstance(piece, KeywordUnit):
        return False
    return not names or piece.keyword in names


def is_token(piece: Optional[Piece], *types: TokenType) -> bool:
    """Check if a piece is a plain token of one of the given types."""
    return isinstance(piece, Token) and piece.type in types


class SegmentRole(Enum):
    """Layout role of a segment"""
    CLAUSE_HEAD = "clause_head"
    LIST_ITEM = "list_item"
    MODIFIER = "modifier"
    CLOSER = "closer"
    COMMENT = "comment"


@dataclass
class Segment:
    """
    A logical line candidate.

    Attributes:
        role: Layout role
        depth: Nesting depth (>= 0)
        pieces: Keyword units and tokens, whitespace removed
        first_item: True for the first item of a comma separated list
        clause: Clause keyword the segment belongs to
        opener_index: Index of the parenthesis in pieces that opens a nested
            block (subquery or column definitions), if any
    """
    role: SegmentRole
    depth: int
    pieces: List[Piece] = field(default_factory=list)
    first_item: bool = False
    clause: Optional[str] = None
    opener_index: Optional[int] = None

    @property
    def opens_block(self) -> bool:
        return self.opener_index is not None

    @property
    def is_empty(self) -> bool:
        return not self.pieces


class FrameKind(Enum):
    """Kind of nesting context"""
    QUERY = "query"
    DEFINITION = "definition"
    ARGUMENTS = "arguments"
    WINDOW = "window"
    CASE = "case"
    SUBSCRIPT = "subscript"


@dataclass
class _Frame:
    kind: FrameKind
    depth: int
    closer_depth: int = 0
    clause: Optional[str] = None
    next_first: bool = True
    pending_between: int = 0

    @property
    def structural(self) -> bool:
        return self.kind in (FrameKind.QUERY, FrameKind.DEFINITION)

    @property
    def item_depth(self) -> int:
        if self.kind is FrameKind.QUERY and self.clause is not None:
            return self.depth + 1
        return self.depth


def merge_keywords(tokens: Iterable[Token]) -> List[Piece]:
    """
    Merge word tokens into keyword units and drop whitespace.

    Up to three adjacent words separated only by whitespace are matched
    greedily against the multi-word table. Words that match nothing, and
    words directly next to a dot (t.order), stay plain tokens.
    """
    tokens = [token for token in tokens if token.type is not TokenType.WHITESPACE]
    pieces: List[Piece] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token.type is not TokenType.WORD or _touches_dot(tokens, index):
            pieces.append(token)
            index += 1
            continue

        run = []
        for candidate in tokens[index:index + MAX_UNIT_WORDS]:
            if candidate.type is not TokenType.WORD:
                break
            run.append(candidate)

        for size in range(len(run), 0, -1):
            words = tuple(word.value.upper() for word in run[:size])
            keyword = lookup_unit(words)
            if keyword and not _touches_dot(tokens, index + size - 1):
                pieces.append(KeywordUnit(keyword, tuple(run[:size])))
                index += size
                break
        else:
            pieces.append(token)
            index += 1
    return pieces


def _touches_dot(tokens: Sequence[Token], index: int) -> bool:
    """Check if the significant neighbour on either side is a dot."""
    for step in (-1, 1):
        neighbour = index + step
        while 0 <= neighbour < len(tokens) and tokens[neighbour].is_comment:
            neighbour += step
        if 0 <= neighbour < len(tokens) and tokens[neighbour].type is TokenType.DOT:
            return True
    return False


class _Analyzer:
    """Single forward pass over the pieces of one input"""

    def __init__(self, pieces: List[Piece]):
        self.pieces = pieces
        self.segments: List[Segment] = []
        self.current: Optional[Segment] = None
        self.frames: List[_Frame] = [_Frame(FrameKind.QUERY, 0)]

    @property
    def frame(self) -> _Frame:
        return self.frames[-1]

    def run(self) -> List[Segment]:
        for index, piece in enumerate(self.pieces):
            if isinstance(piece, KeywordUnit):
                self._keyword(piece)
            elif piece.is_comment:
                self._comment(piece)
            elif piece.type is TokenType.OPEN_PAREN:
                self._open_paren(piece, index)
            elif piece.type is TokenType.CLOSE_PAREN:
                self._close_paren(piece)
            elif piece.type is TokenType.OPEN_BRACKET:
                self._open_bracket(piece)
            elif piece.type is TokenType.CLOSE_BRACKET:
                self._close_bracket(piece)
            elif piece.type is TokenType.COMMA:
                self._comma(piece)
            elif piece.type is TokenType.SEMICOLON:
                self._semicolon(piece)
            else:
                self._append(piece)

        if all(segment.role is SegmentRole.COMMENT for segment in self.segments):
            return []
        return self.segments

    # Segment helpers

    def _start(self, role: SegmentRole, depth: int, first_item: bool = False) -> Segment:
        segment = Segment(role, max(depth, 0), first_item=first_item, clause=self.frame.clause)
        self.segments.append(segment)
        return segment

    def _append(self, piece: Piece) -> Segment:
        if self.current is None:
            frame = self.frame
            self.current = self._start(SegmentRole.LIST_ITEM, frame.item_depth,
                                       first_item=frame.next_first)
            frame.next_first = False
        self.current.pieces.append(piece)
        return self.current

    def _in_query(self) -> bool:
        frame = self.frame
        return frame.kind is FrameKind.QUERY and frame.clause not in PRIVILEGE_CLAUSES

    # Piece handlers

    def _keyword(self, unit: KeywordUnit):
        frame = self.frame
        keyword = unit.keyword

        if keyword == 'CASE':
            self._append(unit)
            self.frames.append(_Frame(FrameKind.CASE, frame.item_depth))
            return
        if keyword == 'END' and frame.kind is FrameKind.CASE:
            self.frames.pop()
            self._append(unit)
            return
        if keyword in BETWEEN_KEYWORDS:
            frame.pending_between += 1
            self._append(unit)
            return
        if keyword == 'AND' and frame.pending_between:
            frame.pending_between -= 1
            self._append(unit)
            return

        if not self._in_query():
            self._append(unit)
            return

        if keyword in CLAUSE_KEYWORDS:
            head = self._start(SegmentRole.CLAUSE_HEAD, frame.depth)
            head.clause = keyword
            head.pieces.append(unit)
            # each side of UNION starts its own block at the frame depth
            frame.clause = None if keyword in SET_OPERATORS else keyword
            frame.next_first = True
            frame.pending_between = 0
            self.current = None
        elif (keyword in ('AND', 'OR') and frame.clause in CONDITION_CLAUSES) or (
                keyword == 'ON' and frame.clause in JOIN_KEYWORDS):
            modifier = self._start(SegmentRole.MODIFIER, frame.item_depth)
            modifier.pieces.append(unit)
            self.current = modifier
        else:
            self._append(unit)

    def _comment(self, token: Token):
        if self.current is not None and not self.current.is_empty:
            self.current.pieces.append(token)
        elif self.segments:
            target = self.segments[-1]
            if target is self.current and len(self.segments) > 1:
                target = self.segments[-2]
            target.pieces.append(token)
        else:
            segment = self._start(SegmentRole.COMMENT, self.frame.depth)
            segment.pieces.append(token)

    def _next_significant(self, index: int) -> Optional[Piece]:
        for piece in self.pieces[index + 1:]:
            if isinstance(piece, KeywordUnit) or not piece.is_comment:
                return piece
        return None

    def _previous_significant(self, segment: Segment) -> Optional[Piece]:
        for piece in reversed(segment.pieces[:-1]):
            if isinstance(piece, KeywordUnit) or not piece.is_comment:
                return piece
        return None

    def _open_paren(self, token: Token, index: int):
        frame = self.frame
        segment = self._append(token)
        following = self._next_significant(index)
        previous = self._previous_significant(segment)

        if is_keyword(following, 'SELECT', 'WITH'):
            segment.opener_index = len(segment.pieces) - 1
            self.frames.append(_Frame(FrameKind.QUERY, segment.depth,
                                      closer_depth=segment.depth))
            self.current = None
        elif is_keyword(previous, 'OVER'):
            self.frames.append(_Frame(FrameKind.WINDOW, frame.item_depth))
        elif (frame.kind is FrameKind.QUERY and frame.clause == 'CREATE'
              and not segment.opens_block
              and any(is_keyword(piece, 'TABLE') for piece in segment.pieces)):
            segment.opener_index = len(segment.pieces) - 1
            self.frames.append(_Frame(FrameKind.DEFINITION, segment.depth,
                                      closer_depth=frame.depth))
            self.current = None
        else:
            self.frames.append(_Frame(FrameKind.ARGUMENTS, frame.item_depth))

    def _close_paren(self, token: Token):
        if len(self.frames) == 1 or all(f.kind is FrameKind.CASE for f in self.frames[1:]):
            logger.debug(f"Unmatched closing parenthesis at offset {token.pos}")
            self._append(token)
            return

        while self.frame.kind is FrameKind.CASE:
            self.frames.pop()
        frame = self.frames.pop()

        if frame.structural:
            closer = self._start(SegmentRole.CLOSER, frame.closer_depth)
            closer.pieces.append(token)
            self.current = closer
        else:
            self._append(token)

    def _open_bracket(self, token: Token):
        self._append(token)
        self.frames.append(_Frame(FrameKind.SUBSCRIPT, self.frame.item_depth))

    def _close_bracket(self, token: Token):
        open_kinds = [f.kind for f in self.frames[1:] if f.kind is not FrameKind.CASE]
        if not open_kinds or open_kinds[-1] is not FrameKind.SUBSCRIPT:
            logger.debug(f"Unmatched closing bracket at offset {token.pos}")
        else:
            while self.frame.kind is FrameKind.CASE:
                self.frames.pop()
            self.frames.pop()
        self._append(token)

    def _comma(self, token: Token):
        frame = self.frame
        if not frame.structural:
            self._append(token)
            return

        if self.current is None:
            self._start(SegmentRole.LIST_ITEM, frame.item_depth, first_item=frame.next_first)
        frame.next_first = False
        self.current = self._start(SegmentRole.LIST_ITEM, frame.item_depth)

    def _semicolon(self, token: Token):
        if self.current is not None:
            self.current.pieces.append(token)
        elif self.segments:
            self.segments[-1].pieces.append(token)
        else:
            self._append(token)
        self.frames = [_Frame(FrameKind.QUERY, 0)]
        self.current = None


def analyze(tokens: Iterable[Token]) -> List[Segment]:
    """
    Build layout segments from a token stream.

    Never raises. Stray closing parentheses are kept as plain tokens and
    depth never goes below zero.

    Args:
        tokens: Tokens as produced by tokenize()

    Returns:
        Segments in source order; empty for blank or comment-only input
    """
    return _Analyzer(merge_keywords(tokens)).run()
