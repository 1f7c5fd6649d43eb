"""
SQL Tokenizer - Lossless lexical scanner

Turns raw SQL text into a lazy stream of classified tokens. Every character of
the input belongs to exactly one token, so joining the token values gives the
input back. Words are not classified as keywords here; the analyzer does that.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional


class TokenType(Enum):
    """Lexical token classification"""
    WORD = "word"
    QUOTED_IDENTIFIER = "quoted_identifier"
    STRING = "string"
    NUMBER = "number"
    OPERATOR = "operator"
    COMMA = "comma"
    SEMICOLON = "semicolon"
    OPEN_PAREN = "open_paren"
    CLOSE_PAREN = "close_paren"
    OPEN_BRACKET = "open_bracket"
    CLOSE_BRACKET = "close_bracket"
    DOT = "dot"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    WHITESPACE = "whitespace"
    PARAMETER = "parameter"
    TEMPLATE = "template"


@dataclass(frozen=True)
class Token:
    """A classified slice of the input text"""
    type: TokenType
    value: str
    pos: int

    @property
    def is_comment(self) -> bool:
        return self.type in (TokenType.LINE_COMMENT, TokenType.BLOCK_COMMENT)

    @property
    def is_significant(self) -> bool:
        return self.type is not TokenType.WHITESPACE and not self.is_comment


PUNCTUATION = {
    '(': TokenType.OPEN_PAREN,
    ')': TokenType.CLOSE_PAREN,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
    '.': TokenType.DOT,
    ']': TokenType.CLOSE_BRACKET,
}

OPERATORS_3 = ('->>', '#>>', '!~*')
OPERATORS_2 = ('<>', '!=', '<=', '>=', '||', '::', '->', '#>', '==', '@>', '<@',
               '&&', '<<', '>>', '~*', '!~')

IDENTIFIER_QUOTES = {'"': '"', '`': '`', '[': ']'}
STRING_PREFIXES = frozenset('eEnNbBxX')

# Tokens after which a sign belongs to the following number: "= -1", "(-2", "[-1"
_SIGNED_NUMBER_CONTEXT = (
    None, TokenType.OPERATOR, TokenType.COMMA, TokenType.OPEN_PAREN,
    TokenType.OPEN_BRACKET, TokenType.SEMICOLON,
)


def _is_word_start(char: str) -> bool:
    return char.isalpha() or char == '_'


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char in ('_', '$')


def _scan_quoted(text: str, start: int, closer: str) -> int:
    """Return the end of a quoted run opened at start; doubled closers are escapes."""
    pos = start + 1
    length = len(text)
    while pos < length:
        if text[pos] == closer:
            if pos + 1 < length and text[pos + 1] == closer:
                pos += 2
                continue
            return pos + 1
        pos += 1
    return length


def _scan_number(text: str, start: int) -> int:
    """Digits, one optional decimal point, optional exponent, trailing word chars."""
    pos = start
    length = len(text)
    while pos < length and text[pos].isdigit():
        pos += 1
    if pos < length and text[pos] == '.':
        pos += 1
        while pos < length and text[pos].isdigit():
            pos += 1
    if pos < length and text[pos] in 'eE':
        exponent = pos + 1
        if exponent < length and text[exponent] in '+-':
            exponent += 1
        if exponent < length and text[exponent].isdigit():
            pos = exponent
            while pos < length and text[pos].isdigit():
                pos += 1
    # 0x1F, 10rows: keep glued characters in one token
    while pos < length and _is_word_char(text[pos]):
        pos += 1
    return pos


def _dollar_tag(text: str, start: int) -> Optional[str]:
    """Return the opening tag of a $tag$ quoted string at start, if any."""
    pos = start + 1
    length = len(text)
    if pos < length and text[pos] == '$':
        return '$$'
    if pos < length and _is_word_start(text[pos]):
        while pos < length and (text[pos].isalnum() or text[pos] == '_'):
            pos += 1
        if pos < length and text[pos] == '$':
            return text[start:pos + 1]
    return None


def tokenize(text: str) -> Iterator[Token]:
    """
    Tokenize SQL text.

    Never raises: unterminated strings and comments run to the end of the
    input, and unknown characters become single character operators.

    Args:
        text: SQL text

    Yields:
        Tokens in source order; their values concatenate back to text
    """
    pos = 0
    length = len(text)
    previous: Optional[TokenType] = None

    while pos < length:
        char = text[pos]
        nxt = text[pos + 1] if pos + 1 < length else ''
        start = pos

        if char.isspace():
            while pos < length and text[pos].isspace():
                pos += 1
            yield Token(TokenType.WHITESPACE, text[start:pos], start)
            continue

        if char == "'":
            token_type, pos = TokenType.STRING, _scan_quoted(text, pos, "'")
        elif char in STRING_PREFIXES and nxt == "'":
            token_type, pos = TokenType.STRING, _scan_quoted(text, pos + 1, "'")
        elif char == '[' and pos > 0 and (_is_word_char(text[pos - 1])
                                          or text[pos - 1] in ')]"'):
            # arr[1], array[1, 2], (expr)[1]: subscripts, not [quoted] names
            token_type, pos = TokenType.OPEN_BRACKET, pos + 1
        elif char in IDENTIFIER_QUOTES:
            token_type = TokenType.QUOTED_IDENTIFIER
            pos = _scan_quoted(text, pos, IDENTIFIER_QUOTES[char])
        elif char == '-' and nxt == '-':
            end = text.find('\n', pos)
            token_type, pos = TokenType.LINE_COMMENT, length if end == -1 else end
        elif char == '/' and nxt == '*':
            end = text.find('*/', pos + 2)
            token_type, pos = TokenType.BLOCK_COMMENT, length if end == -1 else end + 2
        elif char == '{' and nxt == '{':
            end = text.find('}}', pos + 2)
            token_type, pos = TokenType.TEMPLATE, length if end == -1 else end + 2
        elif char.isdigit():
            token_type, pos = TokenType.NUMBER, _scan_number(text, pos)
        elif char == '.' and nxt.isdigit() and not (
                pos > 0 and (_is_word_char(text[pos - 1]) or text[pos - 1] in ')"\'`]')):
            token_type, pos = TokenType.NUMBER, _scan_number(text, pos)
        elif char in '+-' and nxt.isdigit() and previous in _SIGNED_NUMBER_CONTEXT:
            token_type, pos = TokenType.NUMBER, _scan_number(text, pos + 1)
        elif _is_word_start(char):
            pos += 1
            while pos < length and _is_word_char(text[pos]):
                pos += 1
            token_type = TokenType.WORD
        elif char == '$' and nxt.isdigit():
            pos += 1
            while pos < length and text[pos].isdigit():
                pos += 1
            token_type = TokenType.PARAMETER
        elif char == '$' and _dollar_tag(text, pos):
            tag = _dollar_tag(text, pos)
            end = text.find(tag, pos + len(tag))
            token_type, pos = TokenType.STRING, length if end == -1 else end + len(tag)
        elif char == '?':
            token_type, pos = TokenType.PARAMETER, pos + 1
        elif char == ':' and _is_word_start(nxt):
            pos += 1
            while pos < length and _is_word_char(text[pos]):
                pos += 1
            token_type = TokenType.PARAMETER
        elif char == '@' and (_is_word_start(nxt) or (nxt == '@' and pos + 2 < length
                                                       and _is_word_start(text[pos + 2]))):
            pos += 2
            while pos < length and _is_word_char(text[pos]):
                pos += 1
            token_type = TokenType.PARAMETER
        elif char in PUNCTUATION:
            token_type, pos = PUNCTUATION[char], pos + 1
        elif text.startswith(OPERATORS_3, pos):
            token_type, pos = TokenType.OPERATOR, pos + 3
        elif text.startswith(OPERATORS_2, pos):
            token_type, pos = TokenType.OPERATOR, pos + 2
        else:
            token_type, pos = TokenType.OPERATOR, pos + 1

        token = Token(token_type, text[start:pos], start)
        if token.is_significant:
            previous = token_type
        yield token
