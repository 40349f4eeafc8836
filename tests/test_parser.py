"""
Unit tests for the graze parser.
"""

import pytest
from graze import (
    tokenize, parse, Parser, Tokenizer, TokenType, Position,
    Program, Instruction, Expression, Literal, VariableReference, Parenthesized,
    FunctionCall, LetBinding, ScreenResize, ParserError, ParserErrorKind, LexerErrorKind,
    format_ast,
)


def parse_source(source):
    return Parser(Tokenizer(source), source=source).parse_file()


def parse_error(source):
    with pytest.raises(ParserError) as exc_info:
        parse_source(source)
    return exc_info.value


class TestProgramStructure:
    """Test instructions and separators."""

    def test_empty_program(self):
        assert parse_source("").instructions == []

    def test_blank_lines_only(self):
        assert parse_source("\n\n\n").instructions == []

    def test_one_instruction_per_line(self):
        program = parse_source("pnt2 1 2\nvec2 3 4\n")
        assert len(program.instructions) == 2

    def test_blank_lines_are_skipped(self):
        program = parse_source("\n\npnt2 1 2\n\n\nvec2 3 4")
        assert len(program.instructions) == 2
        assert program.instructions[1].expressions[0].content.name == "vec2"

    def test_many_blank_lines(self):
        """Long runs of blank lines do not exhaust the call stack."""
        program = parse_source("\n" * 5000 + "x")
        assert len(program.instructions) == 1

    def test_concat_chains_expressions(self):
        """';' keeps expressions in one instruction and draws each."""
        program = parse_source("pnt2 10 10; pnt2 20 20; line")
        assert len(program.instructions) == 1
        expressions = program.instructions[0].expressions
        assert [e.content.name for e in expressions] == ["pnt2", "pnt2", "line"]
        assert all(e.draw_result for e in expressions)

    def test_pipe_suppresses_drawing(self):
        """'=>' keeps the result on the stack without drawing it."""
        program = parse_source("42 => let x")
        expressions = program.instructions[0].expressions
        assert len(expressions) == 2
        assert expressions[0].content == Literal(42)
        assert expressions[0].draw_result is False
        assert expressions[1].content == LetBinding("x", None)
        assert expressions[1].draw_result is True

    def test_trailing_separator(self):
        """A separator before the newline is allowed."""
        program = parse_source("pnt2 1 2;\nvec2 1 2 =>")
        assert len(program.instructions) == 2
        assert program.instructions[1].expressions[0].draw_result is False

    def test_expression_positions(self):
        program = parse_source("x\n  pnt2 1 2; y")
        second = program.instructions[1].expressions
        assert second[0].position == Position(1, 2)
        assert second[1].position == Position(1, 12)

    def test_accepts_token_list(self):
        """The parser also reads from a plain token list."""
        program = parse(tokenize("pnt2 1 2"))
        assert program.instructions[0].expressions[0].content == FunctionCall(
            "pnt2", [Literal(1), Literal(2)]
        )


class TestExpressions:
    """Test expression forms."""

    def content_of(self, source):
        return parse_source(source).instructions[0].expressions[0].content

    def test_literal(self):
        assert self.content_of("5") == Literal(5)

    def test_float_literal(self):
        assert self.content_of("2.5") == Literal(2.5)

    def test_variable(self):
        assert self.content_of("$p") == VariableReference("p")

    def test_call_of_unknown_name(self):
        """The parser does not know which functions exist."""
        assert self.content_of("foo 42 $x") == FunctionCall(
            "foo", [Literal(42), VariableReference("x")]
        )

    def test_parenthesized_literal(self):
        assert self.content_of("foo (42)").arguments == [Parenthesized(Literal(42))]

    def test_let_with_literal(self):
        assert self.content_of("let x 42") == LetBinding("x", Literal(42))

    def test_call_without_arguments(self):
        assert self.content_of("line") == FunctionCall("line", [])

    def test_call_with_arguments(self):
        assert self.content_of("add 1 $x") == FunctionCall(
            "add", [Literal(1), VariableReference("x")]
        )

    def test_nested_call(self):
        content = self.content_of("line (pnt2 0 0) (pnt2 1 (add 1 1))")
        assert content == FunctionCall("line", [
            Parenthesized(FunctionCall("pnt2", [Literal(0), Literal(0)])),
            Parenthesized(FunctionCall("pnt2", [
                Literal(1),
                Parenthesized(FunctionCall("add", [Literal(1), Literal(1)])),
            ])),
        ])

    def test_bare_name_is_not_an_argument(self):
        """Names are only arguments when parenthesized."""
        err = parse_error("add x 1")
        assert err.kind == ParserErrorKind.UNEXPECTED_TOKEN
        assert err.payload.type == TokenType.NAME

    def test_let_with_initializer(self):
        assert self.content_of("let a (pnt2 1 2)") == LetBinding(
            "a", Parenthesized(FunctionCall("pnt2", [Literal(1), Literal(2)]))
        )

    def test_let_from_stack(self):
        assert self.content_of("let a") == LetBinding("a", None)

    def test_let_requires_name(self):
        err = parse_error("let 5")
        assert err.kind == ParserErrorKind.EXPECTED_IDENTIFIER

    def test_screen(self):
        assert self.content_of("screen 100 $h") == ScreenResize(
            Literal(100), VariableReference("h")
        )

    def test_screen_needs_two_arguments(self):
        err = parse_error("screen 100")
        assert err.kind == ParserErrorKind.EXPECTED_EXPRESSION

    def test_parenthesized_let(self):
        content = self.content_of("add (let a 1) $a")
        assert content.arguments[0] == Parenthesized(LetBinding("a", Literal(1)))


class TestParserErrors:
    """Test parser error reporting."""

    def test_unclosed_paren(self):
        err = parse_error("add (pnt2 1 2")
        assert err.kind == ParserErrorKind.UNCLOSED_DELIMITER

    def test_empty_parens(self):
        err = parse_error("add ()")
        assert err.kind == ParserErrorKind.UNEXPECTED_TOKEN
        assert err.payload.type == TokenType.PAREN_RIGHT

    def test_paren_at_end_of_line(self):
        err = parse_error("add (\n1)")
        assert err.kind == ParserErrorKind.EXPECTED_EXPRESSION

    def test_stray_close_paren(self):
        err = parse_error(") x")
        assert err.kind == ParserErrorKind.UNEXPECTED_TOKEN
        assert err.payload.type == TokenType.PAREN_RIGHT

    def test_leading_separator(self):
        err = parse_error("; x")
        assert err.kind == ParserErrorKind.UNEXPECTED_TOKEN

    def test_unexpected_token_keeps_text(self):
        """The offending token is reported with its text."""
        err = parse_error("42 @")
        assert err.kind == ParserErrorKind.UNEXPECTED_TOKEN
        assert err.payload.type == TokenType.NAME
        assert err.payload.value == "@"
        assert err.payload.position == Position(0, 3)

    def test_double_separator(self):
        err = parse_error("x;;y")
        assert err.kind == ParserErrorKind.UNEXPECTED_TOKEN
        assert err.payload.type == TokenType.CONCAT

    def test_lexer_error_is_wrapped(self):
        """Tokenizer failures surface as invalid-token parser errors."""
        err = parse_error("add 1 = 2")
        assert err.kind == ParserErrorKind.INVALID_TOKEN
        assert err.cause.kind == LexerErrorKind.INVALID_PIPE
        assert isinstance(err.__cause__, type(err.cause))

    def test_error_has_position_and_code(self):
        err = parse_error("pnt2 1 2\nadd )")
        assert err.code == "E102"
        assert err.position == Position(1, 4)
        assert "add )" in str(err)

    def test_no_partial_program(self):
        """A failure anywhere rejects the whole file."""
        with pytest.raises(ParserError):
            parse_source("pnt2 1 2\npnt2 3 4\n)")


class TestFormatAst:
    """Test AST printing."""

    def test_format_program(self):
        text = format_ast(parse_source("42 => let x\nline (pnt2 0 0) $p"))
        lines = text.splitlines()
        assert lines[0] == "Program (2 instructions)"
        assert "Literal 42 (int)" in text
        assert "Let x (from stack)" in text
        assert "[pipe]" in text
        assert "Call line" in text
        assert "Variable $p" in text
