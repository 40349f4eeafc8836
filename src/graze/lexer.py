"""
Tokenizer for graze source text.

Converts source text into a stream of tokens for the parser.
Supports:
- Names (function names) and the 'let' keyword
- $-prefixed variable references
- Integer literals (unsigned 64-bit) and float literals
- Separators: '=>' (pipe), ';' (concat) and newlines
- Parentheses for nested argument expressions
- '!' at the end of a line to continue an instruction on the next line
"""

import re
from typing import Iterator, List, Optional
from .tokens import (
    Token, TokenType, TokenSource, Position, KEYWORDS, is_name_char,
)
from .errors import LexerError, LexerErrorKind


U64_MAX = 2 ** 64 - 1
_U64_DIGITS = len(str(U64_MAX))

_DIGITS = "0123456789"
_FLOAT_RE = re.compile(r"[0-9]+\.[0-9]+(?:[eE][+-]?[0-9]+)?")


class Tokenizer(TokenSource):
    """
    Tokenizer for graze source text.

    Lookahead is served from a single buffered token rather than by
    copying the scan state.

    Usage:
        tokenizer = Tokenizer(source)
        token = tokenizer.read_token()

    Or for streaming:
        for token in Tokenizer(source):
            process(token)
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0            # Current offset in source
        self.line = 0           # Current line (0-indexed)
        self.column = 0         # Current column (0-indexed)
        self._lines: Optional[List[str]] = None
        self._peeked: Optional[Token] = None

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (0-indexed)."""
        if 0 <= line_num < len(self.lines):
            return self.lines[line_num]
        return None

    # =========================================================================
    # TokenSource contract
    # =========================================================================

    def read_token(self) -> Token:
        """Consume and return the next token."""
        if self._peeked is not None:
            token, self._peeked = self._peeked, None
            return token
        return self._scan_token()

    def peek_token(self) -> Token:
        """Return the next token without consuming it."""
        if self._peeked is None:
            self._peeked = self._scan_token()
        return self._peeked

    def position(self) -> Position:
        """Position of the next unread token (or of the scan cursor)."""
        if self._peeked is not None:
            return self._peeked.position
        return self._location()

    # =========================================================================
    # Character navigation
    # =========================================================================

    def _location(self) -> Position:
        return Position(self.line, self.column)

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 0
        else:
            self.column += 1
        return ch

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _error(self, kind: LexerErrorKind, position: Optional[Position] = None,
               detail: Optional[str] = None) -> LexerError:
        if position is None:
            position = self._location()
        return LexerError(kind, position, self.get_source_line(position.line), detail)

    def _make_token(self, token_type: TokenType, value, start: Position,
                    start_offset: int) -> Token:
        return Token(token_type, value, self.source[start_offset:self.pos], start)

    # =========================================================================
    # Scanning
    # =========================================================================

    def _skip_whitespace(self) -> None:
        """Skip horizontal whitespace and '!' line continuations."""
        while not self._is_at_end():
            ch = self._peek()
            if ch == '!':
                self._advance()
                if self._peek() == '\n':
                    self._advance()
                elif self._peek() == '\r' and self._peek(1) == '\n':
                    self._advance()
                    self._advance()
                else:
                    raise self._error(LexerErrorKind.EXPECTED_NEWLINE_AFTER_BANG)
                continue
            if ch in '\r\n' or not ch.isspace():
                return
            self._advance()

    def _scan_run(self) -> str:
        """Consume the maximal run of name characters."""
        start = self.pos
        while not self._is_at_end() and is_name_char(self._peek()):
            self._advance()
        return self.source[start:self.pos]

    def _scan_variable(self) -> Token:
        start, offset = self._location(), self.pos
        self._advance()  # consume '$'
        if self._peek() in _DIGITS:
            raise self._error(LexerErrorKind.EMPTY_VARIABLE_NAME)
        name = self._scan_run()
        if not name:
            raise self._error(LexerErrorKind.EMPTY_VARIABLE_NAME)
        return self._make_token(TokenType.VARIABLE, name, start, offset)

    def _scan_number(self) -> Token:
        start, offset = self._location(), self.pos
        text = self._scan_run()
        if all(ch in _DIGITS for ch in text):
            # More digits than U64_MAX never fits; int() may also refuse it
            if len(text.lstrip('0')) > _U64_DIGITS:
                raise self._error(LexerErrorKind.INVALID_LITERAL, start, text[:_U64_DIGITS] + "...")
            value = int(text)
            if value > U64_MAX:
                raise self._error(LexerErrorKind.INVALID_LITERAL, start, text)
            return self._make_token(TokenType.NUMBER, value, start, offset)
        if _FLOAT_RE.fullmatch(text):
            return self._make_token(TokenType.NUMBER, float(text), start, offset)
        raise self._error(LexerErrorKind.INVALID_LITERAL, start, text)

    def _scan_name(self) -> Token:
        start, offset = self._location(), self.pos
        text = self._scan_run()
        if not text:
            raise self._error(LexerErrorKind.EMPTY_FUNCTION_NAME, start)
        if text in KEYWORDS:
            return self._make_token(KEYWORDS[text], text, start, offset)
        return self._make_token(TokenType.NAME, text, start, offset)

    def _scan_token(self) -> Token:
        """Scan the next token."""
        self._skip_whitespace()

        start, offset = self._location(), self.pos
        if self._is_at_end():
            return Token(TokenType.EOF, None, "", start)

        ch = self._peek()

        if ch == '\n':
            self._advance()
            return self._make_token(TokenType.NEWLINE, None, start, offset)
        if ch == '\r':
            self._advance()
            if self._peek() != '\n':
                raise self._error(LexerErrorKind.INVALID_CRLF_SEQUENCE)
            self._advance()
            return self._make_token(TokenType.NEWLINE, None, start, offset)

        single_char_tokens = {
            ';': TokenType.CONCAT,
            '(': TokenType.PAREN_LEFT,
            ')': TokenType.PAREN_RIGHT,
        }
        if ch in single_char_tokens:
            self._advance()
            return self._make_token(single_char_tokens[ch], ch, start, offset)

        if ch == '=':
            self._advance()
            if self._peek() != '>':
                raise self._error(LexerErrorKind.INVALID_PIPE)
            self._advance()
            return self._make_token(TokenType.PIPE, "=>", start, offset)

        if ch == '$':
            return self._scan_variable()

        if ch in _DIGITS:
            return self._scan_number()

        return self._scan_name()

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens, ending with (and including) EOF."""
        while True:
            token = self.read_token()
            yield token
            if token.type == TokenType.EOF:
                break


def tokenize(source: str) -> List[Token]:
    """
    Convenience function to tokenize source text.

    Args:
        source: The source text to tokenize

    Returns:
        List of tokens, ending with an EOF token

    Raises:
        LexerError: If tokenization fails
    """
    return Tokenizer(source).tokenize()
