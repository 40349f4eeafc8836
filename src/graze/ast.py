"""
Abstract Syntax Tree (AST) node definitions for graze programs.

A Program is a list of Instructions (one per source line). Each Instruction
is a list of Expressions evaluated left to right on a shared stack; each
Expression records whether its result should be offered to the draw sink.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Union
from abc import ABC
from .tokens import Position


# =============================================================================
# Base Classes
# =============================================================================

@dataclass
class AstNode(ABC):
    """Base class for all AST nodes."""

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)


class AstVisitor(ABC):
    """Base class for AST visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        """Default visit method."""
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


# =============================================================================
# Expression content
# =============================================================================

@dataclass
class Literal(AstNode):
    """A numeric literal; ints are unsigned as written, range-checked at runtime."""
    value: Union[int, float]

    @property
    def is_integer(self) -> bool:
        return isinstance(self.value, int)


@dataclass
class VariableReference(AstNode):
    """A $-prefixed reference to a stored variable."""
    name: str


@dataclass
class Parenthesized(AstNode):
    """A nested expression used as an argument, e.g. (add 1 2)."""
    content: "ExpressionContent"


@dataclass
class FunctionCall(AstNode):
    """A call to a built-in function (e.g. pnt2 10 20)."""
    name: str
    arguments: List["Argument"] = field(default_factory=list)


@dataclass
class LetBinding(AstNode):
    """
    A variable binding.

    Without an initializer the bound value is popped off the stack, so
    `42 => let x` binds 42.
    """
    name: str
    initializer: Optional["Argument"] = None


@dataclass
class ScreenResize(AstNode):
    """Resize the output surface: screen <width> <height>."""
    width: "Argument"
    height: "Argument"


ExpressionContent = Union[Literal, VariableReference, FunctionCall, LetBinding, ScreenResize]
Argument = Union[VariableReference, Literal, Parenthesized]


# =============================================================================
# Program structure
# =============================================================================

@dataclass
class Expression(AstNode):
    """One expression of an instruction plus its draw-result flag."""
    content: ExpressionContent
    draw_result: bool
    position: Position


@dataclass
class Instruction(AstNode):
    """A line's worth of chained expressions sharing one stack lifetime."""
    expressions: List[Expression] = field(default_factory=list)


@dataclass
class Program(AstNode):
    """The root of a parsed source file."""
    instructions: List[Instruction] = field(default_factory=list)


# =============================================================================
# Printing
# =============================================================================

class AstFormatter(AstVisitor):
    """Render an AST as indented text, one node per line."""

    def __init__(self, indent: str = "  "):
        self.indent = indent
        self.depth = 0
        self.lines: List[str] = []

    def _emit(self, text: str) -> None:
        self.lines.append(f"{self.indent * self.depth}{text}")

    def _nested(self, node: AstNode) -> None:
        self.depth += 1
        node.accept(self)
        self.depth -= 1

    def visit_Program(self, node: Program) -> None:
        self._emit(f"Program ({len(node.instructions)} instructions)")
        for instruction in node.instructions:
            self._nested(instruction)

    def visit_Instruction(self, node: Instruction) -> None:
        self._emit("Instruction")
        for expression in node.expressions:
            self._nested(expression)

    def visit_Expression(self, node: Expression) -> None:
        flag = "draw" if node.draw_result else "pipe"
        self._emit(f"Expression [{flag}] @ {node.position}")
        self._nested(node.content)

    def visit_Literal(self, node: Literal) -> None:
        kind = "int" if node.is_integer else "float"
        self._emit(f"Literal {node.value!r} ({kind})")

    def visit_VariableReference(self, node: VariableReference) -> None:
        self._emit(f"Variable ${node.name}")

    def visit_Parenthesized(self, node: Parenthesized) -> None:
        self._emit("Parenthesized")
        self._nested(node.content)

    def visit_FunctionCall(self, node: FunctionCall) -> None:
        self._emit(f"Call {node.name}")
        for argument in node.arguments:
            self._nested(argument)

    def visit_LetBinding(self, node: LetBinding) -> None:
        if node.initializer is None:
            self._emit(f"Let {node.name} (from stack)")
        else:
            self._emit(f"Let {node.name}")
            self._nested(node.initializer)

    def visit_ScreenResize(self, node: ScreenResize) -> None:
        self._emit("Screen")
        self._nested(node.width)
        self._nested(node.height)


def format_ast(node: AstNode) -> str:
    """Format an AST node (usually a Program) as indented text."""
    formatter = AstFormatter()
    node.accept(formatter)
    return "\n".join(formatter.lines)


def print_ast(node: AstNode) -> None:
    """Print an AST node for debugging."""
    print(format_ast(node))
