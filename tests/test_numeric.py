"""Unit tests for the tagged Numeric scalar."""

import unittest

from symkalk_pkg.numeric import INTEGER_MAX, INTEGER_MIN, Numeric, NumericKind
from symkalk_pkg.types import DivisionByZeroError, EvaluationError, IntegerOverflowError


class TestPromotion(unittest.TestCase):
    """Binary results take the wider kind of the two operands."""

    def test_integer_arithmetic_stays_integer(self):
        self.assertEqual(
            Numeric.from_integer(2) + Numeric.from_integer(3), Numeric.from_integer(5)
        )
        self.assertEqual(
            Numeric.from_integer(2) - Numeric.from_integer(3), Numeric.from_integer(-1)
        )
        self.assertEqual(
            Numeric.from_integer(2) * Numeric.from_integer(3), Numeric.from_integer(6)
        )

    def test_promotion_is_symmetric(self):
        real = Numeric.from_real(1.5)
        integer = Numeric.from_integer(1)
        self.assertEqual((real + integer).kind, NumericKind.REAL)
        self.assertEqual((integer + real).kind, NumericKind.REAL)
        self.assertEqual(real + integer, integer + real)

    def test_complex_wins(self):
        result = Numeric.from_integer(2) * Numeric.from_complex(1j)
        self.assertEqual(result, Numeric.from_complex(2j))


class TestDivision(unittest.TestCase):
    """Test division semantics per kind."""

    def test_integer_division_truncates_toward_zero(self):
        self.assertEqual(
            Numeric.from_integer(7) / Numeric.from_integer(2), Numeric.from_integer(3)
        )
        self.assertEqual(
            Numeric.from_integer(-7) / Numeric.from_integer(2), Numeric.from_integer(-3)
        )
        self.assertEqual(
            Numeric.from_integer(7) / Numeric.from_integer(-2), Numeric.from_integer(-3)
        )

    def test_real_division(self):
        self.assertEqual(
            Numeric.from_integer(5) / Numeric.from_real(2.0), Numeric.from_real(2.5)
        )

    def test_division_by_zero_raises_for_every_kind(self):
        for lhs, rhs in [
            (Numeric.from_integer(1), Numeric.from_integer(0)),
            (Numeric.from_real(1.0), Numeric.from_real(0.0)),
            (Numeric.from_real(1.0), Numeric.from_integer(0)),
            (Numeric.from_complex(1 + 1j), Numeric.from_integer(0)),
        ]:
            with self.assertRaises(DivisionByZeroError):
                lhs / rhs


class TestPredicates(unittest.TestCase):
    def test_zero_and_unity(self):
        self.assertTrue(Numeric.from_integer(0).is_zero())
        self.assertTrue(Numeric.from_real(0.0).is_zero())
        self.assertTrue(Numeric.from_complex(0j).is_zero())
        self.assertTrue(Numeric.from_integer(1).is_unity())
        self.assertTrue(Numeric.from_real(1.0).is_unity())
        self.assertTrue(Numeric.from_complex(1 + 0j).is_unity())
        self.assertFalse(Numeric.from_real(0.5).is_zero())
        self.assertFalse(Numeric.from_complex(1j).is_unity())


class TestPowerAndFunctions(unittest.TestCase):
    def test_integer_power_is_exact(self):
        self.assertEqual(Numeric.from_integer(2).pow(10), Numeric.from_integer(1024))
        self.assertEqual(
            Numeric.from_integer(3).pow(Numeric.from_integer(0)), Numeric.from_integer(1)
        )

    def test_negative_integer_exponent_gives_real(self):
        self.assertEqual(Numeric.from_integer(2).pow(-1), Numeric.from_real(0.5))

    def test_zero_to_negative_power_raises(self):
        with self.assertRaises(DivisionByZeroError):
            Numeric.from_integer(0).pow(-2)

    def test_fractional_power_of_negative_real_is_complex(self):
        result = Numeric.from_real(-4.0).pow(Numeric.from_real(0.5))
        self.assertEqual(result.kind, NumericKind.COMPLEX)
        self.assertAlmostEqual(result.value.imag, 2.0)

    def test_sqrt_of_negative_is_complex(self):
        self.assertEqual(Numeric.from_integer(-4).sqrt(), Numeric.from_complex(2j))

    def test_unary_functions(self):
        self.assertEqual(Numeric.from_integer(0).exp(), Numeric.from_real(1.0))
        self.assertEqual(Numeric.from_integer(0).sin(), Numeric.from_real(0.0))
        self.assertEqual(Numeric.from_integer(0).cos(), Numeric.from_real(1.0))
        self.assertEqual(-Numeric.from_integer(3), Numeric.from_integer(-3))


class TestIntegerRange(unittest.TestCase):
    """Integers are signed 64-bit; leaving the range is an evaluation error."""

    def test_bounds_are_representable(self):
        self.assertEqual(Numeric.from_integer(INTEGER_MAX).value, 2**63 - 1)
        self.assertEqual(Numeric.from_integer(INTEGER_MIN).value, -(2**63))

    def test_out_of_range_literal(self):
        with self.assertRaises(IntegerOverflowError) as ctx:
            Numeric.from_integer(2**63)
        self.assertEqual(ctx.exception.code, "INTEGER_OVERFLOW")
        self.assertIsInstance(ctx.exception, EvaluationError)

    def test_arithmetic_overflow(self):
        big = Numeric.from_integer(INTEGER_MAX)
        with self.assertRaises(IntegerOverflowError):
            big + Numeric.one()
        with self.assertRaises(IntegerOverflowError):
            big * Numeric.from_integer(2)
        with self.assertRaises(IntegerOverflowError):
            Numeric.from_integer(INTEGER_MIN) / Numeric.from_integer(-1)

    def test_power_overflow(self):
        self.assertEqual(Numeric.from_integer(2).pow(62).value, 2**62)
        with self.assertRaises(IntegerOverflowError):
            Numeric.from_integer(2).pow(63)
        with self.assertRaises(IntegerOverflowError):
            Numeric.from_integer(10).pow(400)
        self.assertEqual(Numeric.from_integer(-1).pow(1001), Numeric.from_integer(-1))

    def test_real_kind_is_unbounded(self):
        self.assertEqual(Numeric.from_real(2.0).pow(64).kind, NumericKind.REAL)


if __name__ == "__main__":
    unittest.main()
