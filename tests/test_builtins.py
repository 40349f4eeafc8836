"""
Tests for the built-in function library.

Operands are pushed in declaration order, so each call below consumes
the top of the stack and the next call sees what is left.
"""

import pytest
from graze import EvalError, EvalErrorKind, Line
from graze.geom import point, vect
from graze.runtime import (
    Stack, BuiltinRegistry, BuiltinFunction, create_builtin_registry, reverse_pop,
    scalar_val, int_val, float_val, point_val, vector_val, line_val, ValueType, VOID,
)


def make_stack(*values):
    stack = Stack()
    for value in values:
        stack.push(value)
    return stack


@pytest.fixture
def registry():
    return create_builtin_registry()


def call(registry, name, stack):
    return registry.get_function(name)(stack)


class TestReversePop:
    """Test the operand-popping helper."""

    def test_declaration_order(self):
        stack = make_stack(int_val(1), int_val(2), int_val(3))
        assert reverse_pop(stack, 2) == [int_val(2), int_val(3)]
        assert len(stack) == 1

    def test_missing_argument(self):
        stack = make_stack(int_val(1))
        with pytest.raises(EvalError) as exc_info:
            reverse_pop(stack, 2)
        assert exc_info.value.kind == EvalErrorKind.MISSING_ARGUMENT


class TestStack:
    """Test the evaluation stack."""

    def test_void_is_not_pushed(self):
        stack = make_stack(VOID, int_val(1), VOID)
        assert stack.values == [int_val(1)]

    def test_underflow(self):
        with pytest.raises(EvalError) as exc_info:
            Stack().pop()
        assert exc_info.value.kind == EvalErrorKind.STACK_UNDERFLOW


class TestArithmetic:
    """Test add/sub/mul/div over scalars, points and vectors."""

    def test_add(self, registry):
        stack = make_stack(
            point_val(1, 2), point_val(3, 4),
            point_val(1, 2), vector_val(3, 4),
            vector_val(1, 2), vector_val(3, 4),
            scalar_val(1), scalar_val(2),
        )
        assert call(registry, "add", stack) == scalar_val(3)
        assert call(registry, "add", stack) == vector_val(4, 6)
        assert call(registry, "add", stack) == point_val(4, 6)
        with pytest.raises(EvalError) as exc_info:
            call(registry, "add", stack)
        assert exc_info.value.kind == EvalErrorKind.TYPE_ERROR

    def test_sub(self, registry):
        stack = make_stack(
            point_val(1, 2), point_val(3, 4),
            point_val(1, 2), vector_val(3, 4),
            vector_val(1, 2), vector_val(3, 4),
            scalar_val(1), scalar_val(2),
        )
        assert call(registry, "sub", stack) == scalar_val(-1)
        assert call(registry, "sub", stack) == vector_val(-2, -2)
        assert call(registry, "sub", stack) == point_val(-2, -2)
        assert call(registry, "sub", stack) == vector_val(-2, -2)

    def test_mul(self, registry):
        stack = make_stack(
            vector_val(1, 2), scalar_val(3),
            scalar_val(1), vector_val(3, 4),
            scalar_val(1), scalar_val(2),
        )
        assert call(registry, "mul", stack) == scalar_val(2)
        assert call(registry, "mul", stack) == vector_val(3, 4)
        assert call(registry, "mul", stack) == vector_val(3, 6)

    def test_div(self, registry):
        stack = make_stack(
            scalar_val(1), vector_val(3, 4),
            vector_val(1, 2), scalar_val(3),
            scalar_val(1), scalar_val(2),
        )
        assert call(registry, "div", stack) == scalar_val(0.5)
        result = call(registry, "div", stack)
        assert result.type == ValueType.VECTOR
        assert float(result.data.x) == pytest.approx(1 / 3)
        assert float(result.data.y) == pytest.approx(2 / 3)
        with pytest.raises(EvalError) as exc_info:
            call(registry, "div", stack)
        assert exc_info.value.kind == EvalErrorKind.TYPE_ERROR

    def test_add_vector_point(self, registry):
        stack = make_stack(vector_val(1, 1), point_val(2, 2))
        assert call(registry, "add", stack) == point_val(3, 3)

    def test_vector_minus_point_is_type_error(self, registry):
        stack = make_stack(vector_val(1, 1), point_val(2, 2))
        with pytest.raises(EvalError) as exc_info:
            call(registry, "sub", stack)
        assert exc_info.value.kind == EvalErrorKind.TYPE_ERROR

    def test_scalar_divided_by_vector_is_type_error(self, registry):
        stack = make_stack(scalar_val(1), vector_val(1, 1))
        with pytest.raises(EvalError) as exc_info:
            call(registry, "div", stack)
        assert exc_info.value.kind == EvalErrorKind.TYPE_ERROR

    def test_division_by_zero(self, registry):
        stack = make_stack(scalar_val(1), scalar_val(0))
        with pytest.raises(EvalError) as exc_info:
            call(registry, "div", stack)
        assert exc_info.value.kind == EvalErrorKind.DIVISION_BY_ZERO

    def test_missing_operand(self, registry):
        stack = make_stack(scalar_val(1))
        with pytest.raises(EvalError) as exc_info:
            call(registry, "add", stack)
        assert exc_info.value.kind == EvalErrorKind.MISSING_ARGUMENT


class TestPointFunctions:
    """Test pnt2, lvec, x, y and jump."""

    def test_pnt2(self, registry):
        stack = make_stack(scalar_val(1), scalar_val(2))
        assert call(registry, "pnt2", stack) == point_val(1, 2)

    def test_pnt2_rejects_points(self, registry):
        stack = make_stack(point_val(1, 2), scalar_val(2))
        with pytest.raises(EvalError) as exc_info:
            call(registry, "pnt2", stack)
        assert exc_info.value.kind == EvalErrorKind.TYPE_ERROR

    def test_lvec(self, registry):
        stack = make_stack(point_val(5, 6))
        assert call(registry, "lvec", stack) == vector_val(5, 6)

    def test_coordinates(self, registry):
        stack = make_stack(vector_val(7, 8), point_val(5, 6))
        assert call(registry, "x", stack) == scalar_val(5)
        assert call(registry, "y", stack) == scalar_val(8)

    def test_coordinate_of_scalar(self, registry):
        stack = make_stack(scalar_val(1))
        with pytest.raises(EvalError) as exc_info:
            call(registry, "x", stack)
        assert exc_info.value.kind == EvalErrorKind.TYPE_ERROR

    def test_jump(self, registry):
        stack = make_stack(point_val(1, 1), vector_val(2, 3))
        assert call(registry, "jump", stack) == point_val(3, 4)


class TestVectorFunctions:
    """Test vec2 and dot."""

    def test_vec2(self, registry):
        stack = make_stack(scalar_val(1), scalar_val(2))
        assert call(registry, "vec2", stack) == vector_val(1, 2)

    def test_dot(self, registry):
        stack = make_stack(vector_val(1, 2), vector_val(3, 4))
        assert call(registry, "dot", stack) == scalar_val(11)

    def test_dot_float(self, registry):
        stack = make_stack(vector_val(0.5, 1), vector_val(2, 2))
        assert call(registry, "dot", stack) == float_val(3.0)


class TestScalarFunctions:
    """Test sqrt."""

    def test_sqrt_of_square(self, registry):
        stack = make_stack(scalar_val(9))
        assert call(registry, "sqrt", stack) == float_val(3.0)

    def test_sqrt_of_negative(self, registry):
        stack = make_stack(scalar_val(-1))
        with pytest.raises(EvalError) as exc_info:
            call(registry, "sqrt", stack)
        assert exc_info.value.kind == EvalErrorKind.NON_REAL_RESULT


class TestLineFunctions:
    """Test line and ray."""

    def test_line_between_points(self, registry):
        stack = make_stack(point_val(10, 10), point_val(20, 25))
        result = call(registry, "line", stack)
        assert result == line_val(point(10, 10), vect(10, 15))
        assert result.data.end == point(20, 25)

    def test_ray(self, registry):
        stack = make_stack(point_val(1, 1), vector_val(0, 5))
        assert call(registry, "ray", stack).data == Line(point(1, 1), vect(0, 5))


class TestRegistry:
    """Test registry management."""

    def test_standard_library(self, registry):
        for name in ("add", "sub", "mul", "div", "pnt2", "vec2", "lvec",
                     "x", "y", "jump", "dot", "sqrt", "line", "ray"):
            assert name in registry

    def test_unknown_function(self, registry):
        assert registry.get_function("nope") is None

    def test_empty_registry(self):
        assert len(BuiltinRegistry(include_stdlib=False)) == 0

    def test_register_custom(self, registry):
        registry.register(BuiltinFunction("two", 0, lambda stack: int_val(2)))
        assert call(registry, "two", Stack()) == int_val(2)

    def test_snapshot_is_read_only(self, registry):
        table = registry.snapshot()
        with pytest.raises(TypeError):
            table["add"] = None

    def test_snapshot_is_a_copy(self, registry):
        table = registry.snapshot()
        registry.define("late", 0, lambda stack: VOID)
        assert "late" not in table
