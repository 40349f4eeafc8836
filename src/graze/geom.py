"""
Numeric and geometric value model.

Scalar is a tagged union of a signed 64-bit integer and a double. Integer
operations stay integral; a float operand promotes the result to float.
Division is the exception: two integers divide to an integer only when
the division is exact.

Point and Vector hold two Scalars each:

    Point  + Vector -> Point        Vector + Vector -> Vector
    Point  - Point  -> Vector       Point  - Vector -> Point
    Vector - Vector -> Vector       Vector * Scalar -> Vector
    Vector / Scalar -> Vector

Any other combination returns NotImplemented, which the built-ins
report as a type error.
"""

import math
from dataclasses import dataclass
from typing import Union

from .errors import EvalError, EvalErrorKind

I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1

Number = Union[int, float]


def _check_i64(value: int) -> int:
    if not I64_MIN <= value <= I64_MAX:
        raise EvalError(EvalErrorKind.INTEGER_OVERFLOW, str(value))
    return value


class Scalar:
    """An Integer or Float scalar with explicit promotion rules."""

    __slots__ = ("value",)

    def __init__(self, value: Number):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"bad scalar value: {value!r}")
        if isinstance(value, int):
            _check_i64(value)
        self.value = value

    @property
    def is_integer(self) -> bool:
        return isinstance(self.value, int)

    @property
    def is_float(self) -> bool:
        return isinstance(self.value, float)

    def __float__(self) -> float:
        return float(self.value)

    def __int__(self) -> int:
        return int(self.value)

    def __repr__(self) -> str:
        return f"Scalar({self.value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scalar):
            return NotImplemented
        return self.is_integer == other.is_integer and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.is_integer, self.value))

    # --- Arithmetic ---

    def _combine(self, other: "Scalar", op) -> "Scalar":
        result = op(self.value, other.value)
        if isinstance(result, int):
            _check_i64(result)
        return Scalar(result)

    def __add__(self, other):
        if not isinstance(other, Scalar):
            return NotImplemented
        return self._combine(other, lambda a, b: a + b)

    def __sub__(self, other):
        if not isinstance(other, Scalar):
            return NotImplemented
        return self._combine(other, lambda a, b: a - b)

    def __mul__(self, other):
        if not isinstance(other, Scalar):
            return NotImplemented
        return self._combine(other, lambda a, b: a * b)

    def __truediv__(self, other):
        if not isinstance(other, Scalar):
            return NotImplemented
        if other.value == 0:
            raise EvalError(EvalErrorKind.DIVISION_BY_ZERO)
        if self.is_integer and other.is_integer and self.value % other.value == 0:
            return Scalar(_check_i64(self.value // other.value))
        return Scalar(float(self.value) / float(other.value))

    def sqrt(self) -> "Scalar":
        """Square root as a Float; negative operands have no real root."""
        if self.value < 0:
            raise EvalError(EvalErrorKind.NON_REAL_RESULT, f"sqrt of {self.value!r}")
        return Scalar(math.sqrt(self.value))


def scalar(value: Union[Number, Scalar]) -> Scalar:
    """Coerce a raw number to a Scalar; Scalars pass through."""
    if isinstance(value, Scalar):
        return value
    return Scalar(value)


@dataclass(frozen=True)
class Vector:
    """A 2D displacement."""
    x: Scalar
    y: Scalar

    def __add__(self, other):
        if isinstance(other, Vector):
            return Vector(self.x + other.x, self.y + other.y)
        if isinstance(other, Point):
            return Point(other.x + self.x, other.y + self.y)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Vector):
            return Vector(self.x - other.x, self.y - other.y)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Scalar):
            return Vector(self.x * other, self.y * other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Scalar):
            return Vector(self.x / other, self.y / other)
        return NotImplemented

    def dot(self, other: "Vector") -> Scalar:
        return self.x * other.x + self.y * other.y


@dataclass(frozen=True)
class Point:
    """A 2D location."""
    x: Scalar
    y: Scalar

    def __add__(self, other):
        if isinstance(other, Vector):
            return Point(self.x + other.x, self.y + other.y)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y)
        if isinstance(other, Vector):
            return Point(self.x - other.x, self.y - other.y)
        return NotImplemented

    def as_vector(self) -> Vector:
        """The displacement from the origin to this point."""
        return Vector(self.x, self.y)


@dataclass(frozen=True)
class Line:
    """A line segment from `origin` along `direction`."""
    origin: Point
    direction: Vector

    @property
    def end(self) -> Point:
        return self.origin + self.direction


def point(x: Union[Number, Scalar], y: Union[Number, Scalar]) -> Point:
    """Build a Point from raw numbers or Scalars."""
    return Point(scalar(x), scalar(y))


def vect(x: Union[Number, Scalar], y: Union[Number, Scalar]) -> Vector:
    """Build a Vector from raw numbers or Scalars."""
    return Vector(scalar(x), scalar(y))
