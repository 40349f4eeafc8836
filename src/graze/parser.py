"""
Recursive descent parser for graze programs.

Pulls tokens from a TokenSource (one token of lookahead) and builds a
Program. Grammar:

    program     := instruction*
    instruction := (expr separator)*
    separator   := '=>' | ';' | NEWLINE | EOF     # '=>' suppresses drawing
    expr        := NUMBER | VARIABLE | NAME arg*
                 | 'let' NAME arg?
                 | 'screen' arg arg
    arg         := VARIABLE | NUMBER | '(' expr ')'
"""

import logging
from typing import List, Optional, Union
from .tokens import Token, TokenType, TokenSource, Position, SEPARATORS, as_token_source
from .ast import (
    Program, Instruction, Expression, ExpressionContent, Argument,
    Literal, VariableReference, Parenthesized, FunctionCall, LetBinding, ScreenResize,
)
from .errors import (
    LexerError,
    error_invalid_token,
    error_unexpected_token,
    error_expected_expression,
    error_unclosed_delimiter,
    error_expected_identifier,
)

logger = logging.getLogger(__name__)

SCREEN_FUNCTION = "screen"


class Parser:
    """
    Recursive descent parser for graze.

    Usage:
        parser = Parser(Tokenizer(source), source=source)
        program = parser.parse_file()

    The parser stops at the first malformed construct; no partial Program
    is ever returned.
    """

    def __init__(self, tokens: Union[TokenSource, List[Token]], source: Optional[str] = None):
        self.tokens = as_token_source(tokens)
        self.source = source  # Source text for error excerpts
        self._lines: Optional[List[str]] = None

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _read(self) -> Token:
        """Consume the next token, wrapping tokenizer failures."""
        try:
            return self.tokens.read_token()
        except LexerError as e:
            raise error_invalid_token(e) from e

    def _peek(self) -> Token:
        """Look at the next token, wrapping tokenizer failures."""
        try:
            return self.tokens.peek_token()
        except LexerError as e:
            raise error_invalid_token(e) from e

    def _source_line(self, position: Position) -> Optional[str]:
        if self.source is None:
            return None
        if self._lines is None:
            self._lines = self.source.splitlines()
        if 0 <= position.line < len(self._lines):
            return self._lines[position.line]
        return None

    # =========================================================================
    # Program structure
    # =========================================================================

    def parse_file(self) -> Program:
        """Parse every instruction up to the end of input."""
        instructions = []
        while True:
            instruction = self.parse_instruction()
            if instruction is None:
                break
            instructions.append(instruction)
        logger.debug("parsed %d instruction(s)", len(instructions))
        return Program(instructions)

    def parse_instruction(self) -> Optional[Instruction]:
        """
        Parse one instruction, skipping blank lines before it.

        Returns None once the input is exhausted.
        """
        expressions: List[Expression] = []
        while True:
            position = self._peek().position
            content = self.parse_expr()
            if content is None:
                if expressions:
                    return Instruction(expressions)
                if self._peek().type == TokenType.EOF:
                    return None
                # Blank line: keep looking for the next instruction
                continue

            separator = self._read()
            if separator.type not in SEPARATORS:
                raise error_unexpected_token(separator, self._source_line(separator.position))
            expressions.append(Expression(content, SEPARATORS[separator.type], position))

            if separator.type in (TokenType.NEWLINE, TokenType.EOF):
                return Instruction(expressions)

    # =========================================================================
    # Expressions
    # =========================================================================

    def parse_expr(self) -> Optional[ExpressionContent]:
        """
        Parse one expression.

        Returns None when the next token ends the instruction (newline or
        end of input); that token is consumed.
        """
        token = self._read()

        if token.type == TokenType.NUMBER:
            return Literal(token.value)
        if token.type == TokenType.VARIABLE:
            return VariableReference(token.value)
        if token.type == TokenType.NAME:
            if token.value == SCREEN_FUNCTION:
                return self._parse_screen()
            return self._parse_call(token.value)
        if token.type == TokenType.LET:
            return self._parse_let()
        if token.type in (TokenType.NEWLINE, TokenType.EOF):
            return None

        raise error_unexpected_token(token, self._source_line(token.position))

    def _parse_call(self, name: str) -> FunctionCall:
        """Greedily collect arguments following a function name."""
        arguments = []
        while True:
            argument = self.parse_arg()
            if argument is None:
                break
            arguments.append(argument)
        return FunctionCall(name, arguments)

    def _parse_let(self) -> LetBinding:
        name = self._read()
        if name.type != TokenType.NAME:
            raise error_expected_identifier(name.position, self._source_line(name.position))
        return LetBinding(name.value, self.parse_arg())

    def _parse_screen(self) -> ScreenResize:
        width = self._require_arg()
        height = self._require_arg()
        return ScreenResize(width, height)

    def _require_arg(self) -> Argument:
        position = self._peek().position
        argument = self.parse_arg()
        if argument is None:
            raise error_expected_expression(position, self._source_line(position))
        return argument

    # =========================================================================
    # Arguments
    # =========================================================================

    def parse_arg(self) -> Optional[Argument]:
        """
        Parse one argument, or return None if the next token cannot start
        one. Nothing is consumed in that case.
        """
        token = self._peek()

        if token.type == TokenType.VARIABLE:
            self._read()
            return VariableReference(token.value)
        if token.type == TokenType.NUMBER:
            self._read()
            return Literal(token.value)
        if token.type != TokenType.PAREN_LEFT:
            return None

        self._read()  # consume '('
        position = self._peek().position
        content = self.parse_expr()
        if content is None:
            raise error_expected_expression(position, self._source_line(position))

        closing = self._read()
        if closing.type != TokenType.PAREN_RIGHT:
            raise error_unclosed_delimiter(closing.position, self._source_line(closing.position))
        return Parenthesized(content)


def parse_file(tokens: Union[TokenSource, List[Token]], source: Optional[str] = None) -> Program:
    """
    Parse a token source (or token list) into a Program.

    Raises:
        ParserError: On the first malformed construct
    """
    return Parser(tokens, source=source).parse_file()


def parse(tokens: Union[TokenSource, List[Token]], source: Optional[str] = None) -> Program:
    """Alias of parse_file."""
    return parse_file(tokens, source=source)
