"""
Stack-based evaluator for graze programs.

Each Instruction gets a fresh stack: expressions are evaluated left to
right, every result is pushed, drawable results are offered to the draw
sink, and the stack is cleared when the instruction ends. Variables live
for the whole run.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from .builtins import BuiltinFunction, BuiltinRegistry
from .context import Stack, Environment
from .values import Value, ValueType, VOID, int_val, float_val
from ..ast import (
    Program, Instruction, Expression, Literal, VariableReference, Parenthesized,
    FunctionCall, LetBinding, ScreenResize,
)
from ..errors import (
    Diagnostic, GrazeError, EvalError, EvalErrorKind, error_function_not_found,
)
from ..geom import I64_MAX
from ..output import DrawBuffer, DrawCommand, MemoryOutput, ResizeCommand, to_draw_command

logger = logging.getLogger(__name__)


class Runtime:
    """
    Executes a Program against a draw sink.

    The function table is a read-only snapshot of the registry taken at
    construction; later changes to the registry are not seen.
    """

    def __init__(self, output: Optional[DrawBuffer] = None,
                 registry: Optional[BuiltinRegistry] = None):
        self.output = output if output is not None else MemoryOutput()
        self.functions: Mapping[str, BuiltinFunction] = (
            registry if registry is not None else BuiltinRegistry()
        ).snapshot()
        self.stack = Stack()
        self.variables = Environment()
        self.output.reset()

    def __repr__(self):
        return f"Runtime(variables={sorted(self.variables.variables)!r}, output={self.output!r})"

    # =========================================================================
    # Execution
    # =========================================================================

    def execute(self, program: Program) -> None:
        """
        Execute every instruction in order.

        Raises:
            EvalError: On the first failing expression; earlier draws stay
                in the sink.
        """
        logger.debug("executing %d instruction(s)", len(program.instructions))
        for instruction in program.instructions:
            self.execute_instruction(instruction)

    def execute_instruction(self, instruction: Instruction) -> None:
        try:
            for expression in instruction.expressions:
                self._execute_expression(expression)
        finally:
            self.stack.clear()

    def _execute_expression(self, expression: Expression) -> None:
        value = self.evaluate(expression.content)
        logger.debug("%s: %r", expression.position, value)
        self.stack.push(value)
        if expression.draw_result:
            self._draw(value)

    def _draw(self, value: Value) -> None:
        command = to_draw_command(value)
        if command is not None:
            self._emit(command)

    def _emit(self, command: DrawCommand) -> None:
        self.output.draw(command)

    def finish(self) -> None:
        """Flush the draw sink."""
        self.output.flush()

    def get_variable(self, name: str) -> Optional[Value]:
        """Look up a variable by name (without the '$'), or None."""
        return self.variables.get(name)

    # =========================================================================
    # Evaluation
    # =========================================================================

    def evaluate(self, content) -> Value:
        """Evaluate expression content to a Value."""
        if isinstance(content, Literal):
            return self._eval_literal(content)
        elif isinstance(content, VariableReference):
            return self.variables.lookup(content.name)
        elif isinstance(content, FunctionCall):
            return self._eval_call(content)
        elif isinstance(content, LetBinding):
            return self._eval_let(content)
        elif isinstance(content, ScreenResize):
            return self._eval_screen(content)
        elif isinstance(content, Parenthesized):
            return self.evaluate(content.content)
        raise ValueError(f"cannot evaluate {content!r}")

    def evaluate_argument(self, argument) -> Value:
        return self.evaluate(argument)

    def _eval_literal(self, literal: Literal) -> Value:
        if literal.is_integer:
            if literal.value > I64_MAX:
                raise EvalError(EvalErrorKind.INT_LITERAL_TOO_LARGE, str(literal.value))
            return int_val(literal.value)
        return float_val(literal.value)

    def _eval_call(self, call: FunctionCall) -> Value:
        for argument in call.arguments:
            self.stack.push(self.evaluate_argument(argument))

        func = self.functions.get(call.name)
        if func is None:
            raise error_function_not_found(call.name)
        return func(self.stack)

    def _eval_let(self, let: LetBinding) -> Value:
        if let.initializer is not None:
            value = self.evaluate_argument(let.initializer)
        else:
            value = self.stack.pop()
        self.variables.set(let.name, value)
        logger.debug("let %s = %r", let.name, value)
        return value

    def _eval_screen(self, screen: ScreenResize) -> Value:
        width = self.evaluate_argument(screen.width)
        height = self.evaluate_argument(screen.height)
        if width.type != ValueType.SCALAR or height.type != ValueType.SCALAR:
            raise EvalError(EvalErrorKind.INVALID_ARGUMENT,
                            f"screen({width.type.value}, {height.type.value})")
        self._emit(ResizeCommand(float(width.data), float(height.data)))
        return VOID


@dataclass
class ExecutionResult:
    """Result of compiling and running a program."""
    success: bool
    error_message: Optional[str] = None
    diagnostic: Optional[Diagnostic] = None
    commands: List[DrawCommand] = field(default_factory=list)
    runtime: Optional[Runtime] = None


def run(source: str, output: Optional[DrawBuffer] = None) -> Runtime:
    """
    Tokenize, parse and execute source, then flush the sink.

    Raises:
        GrazeError: On the first lexical, syntax or evaluation error
    """
    from ..lexer import Tokenizer
    from ..parser import Parser

    program = Parser(Tokenizer(source), source=source).parse_file()
    runtime = Runtime(output)
    runtime.execute(program)
    runtime.finish()
    return runtime


def compile_and_run(source: str, output: Optional[DrawBuffer] = None) -> ExecutionResult:
    """
    High-level API to run graze source in one call.

        result = compile_and_run("line (pnt2 0 0) (pnt2 10 10)")
        if result.success:
            for command in result.commands:
                ...
        else:
            print(result.error_message)

    Errors are reported in the result rather than raised. `commands` holds
    what was drawn, including draws made before a failure, when the sink
    is a MemoryOutput (the default).
    """
    from ..lexer import Tokenizer
    from ..parser import Parser

    sink = output if output is not None else MemoryOutput()
    try:
        program = Parser(Tokenizer(source), source=source).parse_file()
    except GrazeError as e:
        return ExecutionResult(success=False, error_message=str(e), diagnostic=e.diagnostic)

    runtime = Runtime(sink)
    try:
        runtime.execute(program)
    except GrazeError as e:
        return ExecutionResult(
            success=False,
            error_message=str(e),
            diagnostic=e.diagnostic,
            commands=_recorded(sink),
            runtime=runtime,
        )
    runtime.finish()
    return ExecutionResult(success=True, commands=_recorded(sink), runtime=runtime)


def _recorded(sink: DrawBuffer) -> List[DrawCommand]:
    if isinstance(sink, MemoryOutput):
        return list(sink.commands)
    return []
