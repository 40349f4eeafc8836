"""
Built-in function registry for the graze interpreter.

Every built-in has the same shape: it receives the evaluation stack, pops
exactly its own operands and returns a Value. Arguments are pushed in
source order, so operands come off the stack last-declared first;
`reverse_pop` undoes that and hands them back in declaration order.
"""

import logging
import operator
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional

from .context import Stack
from .values import (
    Value, ValueType, wrap_value, scalar_val, point_val, vector_val, line_val,
)
from ..errors import EvalError, EvalErrorKind

logger = logging.getLogger(__name__)

BuiltinImpl = Callable[[Stack], Value]

SCALAR = ValueType.SCALAR
POINT = ValueType.POINT
VECTOR = ValueType.VECTOR


def reverse_pop(stack: Stack, count: int) -> List[Value]:
    """
    Pop `count` operands and return them in declaration order.

    Raises:
        EvalError(MISSING_ARGUMENT): If the stack runs out first
    """
    args = []
    for _ in range(count):
        try:
            args.append(stack.pop())
        except EvalError as e:
            raise EvalError(EvalErrorKind.MISSING_ARGUMENT) from e
    args.reverse()
    return args


def _type_error(name: str, *args: Value) -> EvalError:
    found = ", ".join(a.type.value for a in args)
    return EvalError(EvalErrorKind.TYPE_ERROR, f"{name}({found})")


@dataclass
class BuiltinFunction:
    """A built-in function with its implementation."""
    name: str
    arity: int
    implementation: BuiltinImpl
    doc: str = ""

    def __call__(self, stack: Stack) -> Value:
        return self.implementation(stack)


# --- Arithmetic ---

# Operand type pairs accepted by each arithmetic built-in
ARITHMETIC_RULES = {
    "add": {(SCALAR, SCALAR), (VECTOR, VECTOR), (POINT, VECTOR), (VECTOR, POINT)},
    "sub": {(SCALAR, SCALAR), (VECTOR, VECTOR), (POINT, POINT), (POINT, VECTOR)},
    "mul": {(SCALAR, SCALAR), (VECTOR, SCALAR), (SCALAR, VECTOR)},
    "div": {(SCALAR, SCALAR), (VECTOR, SCALAR)},
}

_OPERATORS = {
    "add": operator.add,
    "sub": operator.sub,
    "mul": operator.mul,
    "div": operator.truediv,
}


def _arithmetic(name: str) -> BuiltinImpl:
    allowed = ARITHMETIC_RULES[name]
    op = _OPERATORS[name]

    def _impl(stack: Stack) -> Value:
        a, b = reverse_pop(stack, 2)
        if (a.type, b.type) not in allowed:
            raise _type_error(name, a, b)
        return wrap_value(op(a.data, b.data))

    return _impl


# --- Points ---

def _pnt2(stack: Stack) -> Value:
    x, y = reverse_pop(stack, 2)
    if x.type != SCALAR or y.type != SCALAR:
        raise _type_error("pnt2", x, y)
    return point_val(x.data, y.data)


def _lvec(stack: Stack) -> Value:
    pnt, = reverse_pop(stack, 1)
    if pnt.type != POINT:
        raise _type_error("lvec", pnt)
    return vector_val(pnt.data.as_vector())


def _coordinate(name: str) -> BuiltinImpl:
    def _impl(stack: Stack) -> Value:
        arg, = reverse_pop(stack, 1)
        if arg.type not in (POINT, VECTOR):
            raise _type_error(name, arg)
        return scalar_val(getattr(arg.data, name))

    return _impl


def _jump(stack: Stack) -> Value:
    pnt, vec = reverse_pop(stack, 2)
    if pnt.type != POINT or vec.type != VECTOR:
        raise _type_error("jump", pnt, vec)
    return point_val(pnt.data + vec.data)


# --- Vectors ---

def _vec2(stack: Stack) -> Value:
    x, y = reverse_pop(stack, 2)
    if x.type != SCALAR or y.type != SCALAR:
        raise _type_error("vec2", x, y)
    return vector_val(x.data, y.data)


def _dot(stack: Stack) -> Value:
    lhs, rhs = reverse_pop(stack, 2)
    if lhs.type != VECTOR or rhs.type != VECTOR:
        raise _type_error("dot", lhs, rhs)
    return scalar_val(lhs.data.dot(rhs.data))


# --- Scalars ---

def _sqrt(stack: Stack) -> Value:
    x, = reverse_pop(stack, 1)
    if x.type != SCALAR:
        raise _type_error("sqrt", x)
    return scalar_val(x.data.sqrt())


# --- Lines ---

def _line(stack: Stack) -> Value:
    start, end = reverse_pop(stack, 2)
    if start.type != POINT or end.type != POINT:
        raise _type_error("line", start, end)
    return line_val(start.data, end.data - start.data)


def _ray(stack: Stack) -> Value:
    origin, direction = reverse_pop(stack, 2)
    if origin.type != POINT or direction.type != VECTOR:
        raise _type_error("ray", origin, direction)
    return line_val(origin.data, direction.data)


class BuiltinRegistry:
    """
    Registry of built-in functions.

    A Runtime takes a read-only snapshot of a registry when it is built,
    so registries can be extended freely beforehand without affecting
    runtimes that already exist.
    """

    def __init__(self, include_stdlib: bool = True):
        self._functions: Dict[str, BuiltinFunction] = {}
        if include_stdlib:
            self._register_all()

    def get_function(self, name: str) -> Optional[BuiltinFunction]:
        """Look up a function by name."""
        return self._functions.get(name)

    def register(self, func: BuiltinFunction) -> None:
        """Register a function, replacing any with the same name."""
        self._functions[func.name] = func

    def define(self, name: str, arity: int, implementation: BuiltinImpl, doc: str = "") -> None:
        """Register a plain callable as a built-in."""
        self.register(BuiltinFunction(name, arity, implementation, doc))

    @property
    def names(self) -> List[str]:
        return sorted(self._functions)

    def snapshot(self) -> Mapping[str, BuiltinFunction]:
        """A read-only copy of the current function table."""
        return MappingProxyType(dict(self._functions))

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def _register_all(self) -> None:
        """Register the standard library."""
        self._register_arithmetic_functions()
        self._register_point_functions()
        self._register_vector_functions()
        self._register_scalar_functions()
        self._register_line_functions()
        logger.debug("registered %d built-in functions", len(self._functions))

    def _register_arithmetic_functions(self) -> None:
        docs = {
            "add": "Add scalars or vectors, or displace a point by a vector",
            "sub": "Subtract scalars, vectors or points; point - vector is a point",
            "mul": "Multiply scalars, or scale a vector",
            "div": "Divide scalars, or shrink a vector",
        }
        for name, doc in docs.items():
            self.define(name, 2, _arithmetic(name), doc)

    def _register_point_functions(self) -> None:
        self.define("pnt2", 2, _pnt2, "Point from x and y scalars")
        self.define("lvec", 1, _lvec, "Vector from the origin to a point")
        self.define("x", 1, _coordinate("x"), "x coordinate of a point or vector")
        self.define("y", 1, _coordinate("y"), "y coordinate of a point or vector")
        self.define("jump", 2, _jump, "Point displaced by a vector")

    def _register_vector_functions(self) -> None:
        self.define("vec2", 2, _vec2, "Vector from x and y scalars")
        self.define("dot", 2, _dot, "Dot product of two vectors")

    def _register_scalar_functions(self) -> None:
        self.define("sqrt", 1, _sqrt, "Square root of a non-negative scalar")

    def _register_line_functions(self) -> None:
        self.define("line", 2, _line, "Line segment between two points")
        self.define("ray", 2, _ray, "Line segment from a point along a vector")


def create_builtin_registry() -> BuiltinRegistry:
    """Build a fresh registry holding the standard library."""
    return BuiltinRegistry()
