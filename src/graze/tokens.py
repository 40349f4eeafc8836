"""
Token types for the graze tokenizer.

Also defines the TokenSource contract the parser reads from, so a parser
can be driven by a live Tokenizer or by a pre-built token list.
"""

from abc import ABC, abstractmethod
from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, List, Union


class TokenType(Enum):
    """All token types recognized by the tokenizer."""

    # --- Literals and names ---
    NUMBER = auto()             # 42, 1.5
    NAME = auto()               # pnt2, add, screen
    VARIABLE = auto()           # $x

    # --- Keywords ---
    LET = auto()                # let

    # --- Separators ---
    PIPE = auto()               # => (suppress drawing)
    CONCAT = auto()             # ;  (draw and continue)
    NEWLINE = auto()            # end of instruction

    # --- Delimiters ---
    PAREN_LEFT = auto()         # (
    PAREN_RIGHT = auto()        # )

    # --- Special ---
    EOF = auto()                # end of input


@dataclass(frozen=True)
class Position:
    """A zero-based position in source text."""
    line: int
    column: int

    def __str__(self) -> str:
        # Rendered one-based for humans
        return f"{self.line + 1}:{self.column + 1}"


@dataclass(frozen=True)
class Token:
    """A single token from the tokenizer."""
    type: TokenType
    value: Any              # int/float for NUMBER, str for NAME/VARIABLE
    lexeme: str             # Source text as written
    position: Position

    def __str__(self) -> str:
        if self.type in (TokenType.NUMBER, TokenType.NAME, TokenType.VARIABLE):
            return f"{self.type.name}({self.value!r})"
        return self.type.name


# Keyword mapping - maps string to token type
KEYWORDS: dict = {
    "let": TokenType.LET,
}

# Characters that end a name or variable run (in addition to whitespace)
NAME_TERMINATORS = frozenset(";()'$=!")

# Tokens that separate expressions, and whether they request drawing
SEPARATORS: dict = {
    TokenType.PIPE: False,
    TokenType.CONCAT: True,
    TokenType.NEWLINE: True,
    TokenType.EOF: True,
}


def is_name_char(ch: str) -> bool:
    """Check if a character may appear in a name or variable identifier."""
    return not ch.isspace() and ch not in NAME_TERMINATORS


class TokenSource(ABC):
    """
    A pull-based source of tokens with single-token lookahead.

    The parser only depends on this contract, never on how the tokens
    are produced.
    """

    @abstractmethod
    def read_token(self) -> Token:
        """Consume and return the next token."""

    @abstractmethod
    def peek_token(self) -> Token:
        """Return the next token without consuming it."""

    @abstractmethod
    def position(self) -> Position:
        """Position of the next unread token."""


class TokenStream(TokenSource):
    """
    A TokenSource over an already tokenized list.

    Reads past the end keep returning the final EOF token.
    """

    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].type != TokenType.EOF:
            end = tokens[-1].position if tokens else Position(0, 0)
            tokens = list(tokens) + [Token(TokenType.EOF, None, "", end)]
        self.tokens = tokens
        self.pos = 0

    def read_token(self) -> Token:
        token = self.peek_token()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def peek_token(self) -> Token:
        return self.tokens[self.pos]

    def position(self) -> Position:
        return self.tokens[self.pos].position


def as_token_source(tokens: Union[TokenSource, List[Token]]) -> TokenSource:
    """Wrap a token list in a TokenStream; pass TokenSources through."""
    if isinstance(tokens, TokenSource):
        return tokens
    return TokenStream(list(tokens))
