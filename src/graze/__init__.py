"""
graze - an interpreter for a line-oriented 2D drawing language.

This package provides:
- Tokenizer: Splits source text into tokens
- Parser: Builds a Program from tokens
- Runtime: Evaluates a Program on a stack, sending lines to a draw sink
- Output: SVG, DXF and in-memory draw sinks

Usage:
    from graze import compile_and_run

    result = compile_and_run('''
    screen 100 100
    let a (pnt2 10 10)
    let b (pnt2 90 90)
    line $a $b
    ''')
    if result.success:
        for command in result.commands:
            print(command)
    else:
        print(result.error_message)
"""

import logging

from .tokens import (
    Token,
    TokenType,
    Position,
    TokenSource,
    TokenStream,
    KEYWORDS,
)

from .lexer import (
    Tokenizer,
    tokenize,
)

from .ast import (
    AstNode,
    AstVisitor,
    Literal,
    VariableReference,
    Parenthesized,
    FunctionCall,
    LetBinding,
    ScreenResize,
    Expression,
    Instruction,
    Program,
    format_ast,
    print_ast,
)

from .parser import (
    Parser,
    parse,
    parse_file,
)

from .errors import (
    GrazeError,
    LexerError,
    LexerErrorKind,
    ParserError,
    ParserErrorKind,
    EvalError,
    EvalErrorKind,
    Diagnostic,
    ErrorSeverity,
)

from .geom import (
    Scalar,
    Point,
    Vector,
    Line,
    point,
    vect,
)

from .runtime import (
    Runtime,
    ExecutionResult,
    run,
    compile_and_run,
    Value,
    ValueType,
    BuiltinRegistry,
)

from .output import (
    DrawBuffer,
    MemoryOutput,
    SvgOutput,
    DxfOutput,
    LineCommand,
    CircleCommand,
    ResizeCommand,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Tokens
    "Token",
    "TokenType",
    "Position",
    "TokenSource",
    "TokenStream",
    "KEYWORDS",
    # Lexer
    "Tokenizer",
    "tokenize",
    # AST
    "AstNode",
    "AstVisitor",
    "Literal",
    "VariableReference",
    "Parenthesized",
    "FunctionCall",
    "LetBinding",
    "ScreenResize",
    "Expression",
    "Instruction",
    "Program",
    "format_ast",
    "print_ast",
    # Parser
    "Parser",
    "parse",
    "parse_file",
    # Errors
    "GrazeError",
    "LexerError",
    "LexerErrorKind",
    "ParserError",
    "ParserErrorKind",
    "EvalError",
    "EvalErrorKind",
    "Diagnostic",
    "ErrorSeverity",
    # Geometry
    "Scalar",
    "Point",
    "Vector",
    "Line",
    "point",
    "vect",
    # Runtime
    "Runtime",
    "ExecutionResult",
    "run",
    "compile_and_run",
    "Value",
    "ValueType",
    "BuiltinRegistry",
    # Output
    "DrawBuffer",
    "MemoryOutput",
    "SvgOutput",
    "DxfOutput",
    "LineCommand",
    "CircleCommand",
    "ResizeCommand",
]
