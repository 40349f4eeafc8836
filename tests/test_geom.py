"""
Tests for the scalar and geometry value model.
"""

import pytest
from graze import Scalar, Point, Vector, Line, point, vect, EvalError, EvalErrorKind
from graze.geom import I64_MAX, I64_MIN


class TestScalar:
    """Test Integer/Float scalar semantics."""

    def test_integer_and_float_kinds(self):
        assert Scalar(3).is_integer
        assert Scalar(3.0).is_float

    def test_kind_matters_for_equality(self):
        """Integer 3 and Float 3.0 are different scalars."""
        assert Scalar(3) != Scalar(3.0)
        assert Scalar(3) == Scalar(3)

    def test_rejects_non_numbers(self):
        with pytest.raises(ValueError):
            Scalar("3")
        with pytest.raises(ValueError):
            Scalar(True)

    def test_integer_arithmetic_stays_integral(self):
        assert Scalar(2) + Scalar(3) == Scalar(5)
        assert Scalar(2) - Scalar(3) == Scalar(-1)
        assert Scalar(2) * Scalar(3) == Scalar(6)

    def test_float_promotes(self):
        assert Scalar(2) + Scalar(0.5) == Scalar(2.5)
        assert Scalar(2.0) * Scalar(3) == Scalar(6.0)

    def test_exact_integer_division(self):
        assert Scalar(6) / Scalar(3) == Scalar(2)

    def test_inexact_integer_division_is_float(self):
        assert Scalar(1) / Scalar(2) == Scalar(0.5)

    def test_negative_exact_division(self):
        assert Scalar(-6) / Scalar(3) == Scalar(-2)

    def test_division_by_zero(self):
        with pytest.raises(EvalError) as exc_info:
            Scalar(1) / Scalar(0)
        assert exc_info.value.kind == EvalErrorKind.DIVISION_BY_ZERO

    def test_float_division_by_zero(self):
        with pytest.raises(EvalError) as exc_info:
            Scalar(1.0) / Scalar(0.0)
        assert exc_info.value.kind == EvalErrorKind.DIVISION_BY_ZERO

    def test_overflow(self):
        with pytest.raises(EvalError) as exc_info:
            Scalar(I64_MAX) + Scalar(1)
        assert exc_info.value.kind == EvalErrorKind.INTEGER_OVERFLOW

    def test_min_divided_by_minus_one_overflows(self):
        with pytest.raises(EvalError) as exc_info:
            Scalar(I64_MIN) / Scalar(-1)
        assert exc_info.value.kind == EvalErrorKind.INTEGER_OVERFLOW

    def test_sqrt(self):
        assert Scalar(9).sqrt() == Scalar(3.0)
        assert Scalar(2.25).sqrt() == Scalar(1.5)
        assert Scalar(0).sqrt() == Scalar(0.0)

    def test_sqrt_negative(self):
        with pytest.raises(EvalError) as exc_info:
            Scalar(-4).sqrt()
        assert exc_info.value.kind == EvalErrorKind.NON_REAL_RESULT

    def test_conversions(self):
        assert float(Scalar(2)) == 2.0
        assert int(Scalar(2.7)) == 2


class TestPointsAndVectors:
    """Test the affine arithmetic table."""

    def test_point_plus_vector(self):
        assert point(1, 2) + vect(3, 4) == point(4, 6)

    def test_vector_plus_point(self):
        assert vect(3, 4) + point(1, 2) == point(4, 6)

    def test_vector_plus_vector(self):
        assert vect(1, 2) + vect(3, 4) == vect(4, 6)

    def test_point_minus_point(self):
        assert point(1, 2) - point(3, 4) == vect(-2, -2)

    def test_point_minus_vector(self):
        assert point(1, 2) - vect(3, 4) == point(-2, -2)

    def test_vector_scaling(self):
        assert vect(1, 2) * Scalar(3) == vect(3, 6)
        assert Scalar(3) * vect(1, 2) == vect(3, 6)
        assert vect(3, 6) / Scalar(3) == vect(1, 2)

    def test_dot(self):
        assert vect(1, 2).dot(vect(3, 4)) == Scalar(11)

    def test_point_plus_point_is_unsupported(self):
        with pytest.raises(TypeError):
            point(1, 2) + point(3, 4)

    def test_vector_minus_point_is_unsupported(self):
        with pytest.raises(TypeError):
            vect(1, 2) - point(3, 4)

    def test_as_vector(self):
        assert point(5, 6).as_vector() == vect(5, 6)


class TestLine:
    """Test line segments."""

    def test_end(self):
        line = Line(point(1, 1), vect(2, 3))
        assert line.end == point(3, 4)
