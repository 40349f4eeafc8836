"""
Graze exceptions and diagnostics.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E4xx: Evaluation errors

Each stage raises its own exception type; nothing recovers internally, so
the first error of whichever stage produced it aborts the pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional
from .tokens import Position, Token


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    code: str                       # E001, E101, E401, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity = ErrorSeverity.ERROR
    position: Optional[Position] = None     # Evaluation errors carry none
    source_line: Optional[str] = None       # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        # Header: location: severity[code]: message
        header = f"{self.severity.value}[{self.code}]: {self.message}"
        if self.position is not None:
            header = f"{self.position}: {header}"
        parts.append(header)

        # Source line with caret
        if show_source and self.position is not None and self.source_line is not None:
            line_num = str(self.position.line + 1)
            parts.append("    |")
            parts.append(f"{line_num:>3} | {self.source_line}")
            parts.append(f"    | {' ' * self.position.column}^")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        data = {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "position": None,
            "hints": self.hints,
        }
        if self.position is not None:
            data["position"] = {
                "line": self.position.line,
                "column": self.position.column,
            }
        return data


class GrazeError(Exception):
    """Base exception for all graze errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    def __str__(self) -> str:
        return self.diagnostic.format()


# --- Lexical errors ---

class LexerErrorKind(Enum):
    """Kinds of tokenizer failure, valued by their error code."""
    INVALID_CRLF_SEQUENCE = "E001"
    EMPTY_VARIABLE_NAME = "E002"
    EMPTY_FUNCTION_NAME = "E003"
    INVALID_LITERAL = "E004"
    INVALID_PIPE = "E005"
    EXPECTED_NEWLINE_AFTER_BANG = "E006"


_LEXER_MESSAGES = {
    LexerErrorKind.INVALID_CRLF_SEQUENCE: "carriage return is not followed by a newline",
    LexerErrorKind.EMPTY_VARIABLE_NAME: "expected a variable name after '$'",
    LexerErrorKind.EMPTY_FUNCTION_NAME: "expected a function name",
    LexerErrorKind.INVALID_LITERAL: "invalid number literal",
    LexerErrorKind.INVALID_PIPE: "expected '>' after '=' to form a pipe",
    LexerErrorKind.EXPECTED_NEWLINE_AFTER_BANG: "expected a newline after '!'",
}

_LEXER_HINTS = {
    LexerErrorKind.EMPTY_VARIABLE_NAME: ["variable names may not start with a digit"],
    LexerErrorKind.INVALID_LITERAL: [
        "integers must fit in 64 bits; floats are written like 1.5 or 2.0e3",
    ],
    LexerErrorKind.EXPECTED_NEWLINE_AFTER_BANG: [
        "'!' continues an instruction on the next line and must end the line",
    ],
}


class LexerError(GrazeError):
    """Error during tokenization (E0xx)."""

    def __init__(self, kind: LexerErrorKind, position: Position,
                 source_line: Optional[str] = None, detail: Optional[str] = None):
        self.kind = kind
        self.position = position
        message = _LEXER_MESSAGES[kind]
        if detail:
            message = f"{message} '{detail}'"
        super().__init__(Diagnostic(
            code=kind.value,
            message=message,
            position=position,
            source_line=source_line,
            hints=list(_LEXER_HINTS.get(kind, [])),
        ))


# --- Syntactic errors ---

class ParserErrorKind(Enum):
    """Kinds of parser failure, valued by their error code."""
    INVALID_TOKEN = "E101"
    UNEXPECTED_TOKEN = "E102"
    EXPECTED_EXPRESSION = "E103"
    UNCLOSED_DELIMITER = "E104"
    EXPECTED_IDENTIFIER = "E105"


class ParserError(GrazeError):
    """Error during parsing (E1xx)."""

    def __init__(self, kind: ParserErrorKind, message: str, position: Position,
                 source_line: Optional[str] = None, payload: Any = None,
                 cause: Optional[LexerError] = None):
        self.kind = kind
        self.position = position
        self.payload = payload      # Offending Token for UNEXPECTED_TOKEN
        self.cause = cause          # Wrapped lexer error for INVALID_TOKEN
        super().__init__(Diagnostic(
            code=kind.value,
            message=message,
            position=position,
            source_line=source_line,
        ))


def error_invalid_token(cause: LexerError) -> ParserError:
    """E101: The tokenizer failed while the parser was reading."""
    return ParserError(
        ParserErrorKind.INVALID_TOKEN,
        f"invalid token: {cause.diagnostic.message}",
        cause.position,
        source_line=cause.diagnostic.source_line,
        cause=cause,
    )


def error_unexpected_token(token: Token, source_line: Optional[str] = None) -> ParserError:
    """E102: A token that cannot appear here."""
    found = token.lexeme if token.lexeme.strip() else token.type.name
    return ParserError(
        ParserErrorKind.UNEXPECTED_TOKEN,
        f"unexpected token '{found}'",
        token.position,
        source_line=source_line,
        payload=token,
    )


def error_expected_expression(position: Position, source_line: Optional[str] = None) -> ParserError:
    """E103: An expression was required but none was found."""
    return ParserError(
        ParserErrorKind.EXPECTED_EXPRESSION,
        "expected an expression",
        position,
        source_line=source_line,
    )


def error_unclosed_delimiter(position: Position, source_line: Optional[str] = None) -> ParserError:
    """E104: A '(' without its matching ')'."""
    return ParserError(
        ParserErrorKind.UNCLOSED_DELIMITER,
        "expected ')' to close '('",
        position,
        source_line=source_line,
    )


def error_expected_identifier(position: Position, source_line: Optional[str] = None) -> ParserError:
    """E105: 'let' must be followed by a name."""
    return ParserError(
        ParserErrorKind.EXPECTED_IDENTIFIER,
        "expected a name after 'let'",
        position,
        source_line=source_line,
    )


# --- Evaluation errors ---

class EvalErrorKind(Enum):
    """Kinds of evaluation failure, valued by their error code."""
    STACK_UNDERFLOW = "E401"
    INVALID_ARGUMENT = "E402"
    VARIABLE_NOT_FOUND = "E403"
    FUNCTION_NOT_FOUND = "E404"
    TYPE_ERROR = "E405"
    INT_LITERAL_TOO_LARGE = "E406"
    MISSING_ARGUMENT = "E407"
    NON_REAL_RESULT = "E408"
    DIVISION_BY_ZERO = "E409"
    INTEGER_OVERFLOW = "E410"


_EVAL_MESSAGES = {
    EvalErrorKind.STACK_UNDERFLOW: "stack underflow",
    EvalErrorKind.INVALID_ARGUMENT: "invalid argument",
    EvalErrorKind.VARIABLE_NOT_FOUND: "variable not in scope",
    EvalErrorKind.FUNCTION_NOT_FOUND: "function not in scope",
    EvalErrorKind.TYPE_ERROR: "invalid type for operation",
    EvalErrorKind.INT_LITERAL_TOO_LARGE: "integer literal too large to fit in a 64-bit integer",
    EvalErrorKind.MISSING_ARGUMENT: "too few arguments for this function call",
    EvalErrorKind.NON_REAL_RESULT: "non-real result",
    EvalErrorKind.DIVISION_BY_ZERO: "division by zero",
    EvalErrorKind.INTEGER_OVERFLOW: "integer result does not fit in a 64-bit integer",
}


class EvalError(GrazeError):
    """
    Error during evaluation (E4xx).

    Evaluation errors are reported without a source position.
    """

    def __init__(self, kind: EvalErrorKind, detail: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        message = _EVAL_MESSAGES[kind]
        if detail:
            message = f"{message}: {detail}"
        super().__init__(Diagnostic(code=kind.value, message=message))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EvalError):
            return NotImplemented
        return self.kind == other.kind and self.detail == other.detail

    def __hash__(self) -> int:
        return hash((self.kind, self.detail))


def error_variable_not_found(name: str) -> EvalError:
    """E403: Reference to a variable that was never bound."""
    return EvalError(EvalErrorKind.VARIABLE_NOT_FOUND, f"${name}")


def error_function_not_found(name: str) -> EvalError:
    """E404: Call to a function that is not registered."""
    return EvalError(EvalErrorKind.FUNCTION_NOT_FOUND, name)
