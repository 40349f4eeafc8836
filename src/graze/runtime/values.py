"""
Runtime value wrappers for the graze interpreter.

Values wrap Scalars and geometry from `graze.geom` with a ValueType tag
so the evaluator and built-ins can dispatch on operand types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from ..geom import Scalar, Point, Vector, Line, Number, scalar, point, vect


class ValueType(Enum):
    """Runtime value types."""
    VOID = "void"
    SCALAR = "scalar"
    POINT = "point"
    VECTOR = "vector"
    LINE = "line"


@dataclass(frozen=True)
class Value:
    """
    A runtime value with type information.

    The `data` field holds the Scalar/Point/Vector/Line (None for void).
    """
    data: Any
    type: ValueType

    def __repr__(self) -> str:
        if self.type == ValueType.VOID:
            return "Value(void)"
        return f"Value({self.data!r}, {self.type.value})"

    @property
    def is_void(self) -> bool:
        return self.type == ValueType.VOID


# The absence of a value; never pushed onto the stack
VOID = Value(None, ValueType.VOID)


# Convenience constructors

def scalar_val(s: Union[Number, Scalar]) -> Value:
    """Create a scalar value from a Scalar or raw number."""
    return Value(scalar(s), ValueType.SCALAR)


def int_val(n: int) -> Value:
    """Create an integer scalar value."""
    return Value(Scalar(int(n)), ValueType.SCALAR)


def float_val(x: float) -> Value:
    """Create a float scalar value."""
    return Value(Scalar(float(x)), ValueType.SCALAR)


def point_val(x: Union[Number, Scalar, Point], y: Union[Number, Scalar, None] = None) -> Value:
    """Create a point value from a Point or two coordinates."""
    if isinstance(x, Point):
        return Value(x, ValueType.POINT)
    return Value(point(x, y), ValueType.POINT)


def vector_val(x: Union[Number, Scalar, Vector], y: Union[Number, Scalar, None] = None) -> Value:
    """Create a vector value from a Vector or two components."""
    if isinstance(x, Vector):
        return Value(x, ValueType.VECTOR)
    return Value(vect(x, y), ValueType.VECTOR)


def line_val(origin: Point, direction: Vector) -> Value:
    """Create a line value."""
    return Value(Line(origin, direction), ValueType.LINE)


def wrap_value(data: Any) -> Value:
    """Wrap raw geometry (or None for void) with its value type."""
    if data is None:
        return VOID
    if isinstance(data, Scalar):
        return Value(data, ValueType.SCALAR)
    if isinstance(data, Point):
        return Value(data, ValueType.POINT)
    if isinstance(data, Vector):
        return Value(data, ValueType.VECTOR)
    if isinstance(data, Line):
        return Value(data, ValueType.LINE)
    raise ValueError(f"cannot wrap {data!r} as a runtime value")
