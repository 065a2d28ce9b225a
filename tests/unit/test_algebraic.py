"""
Tests for AlgebraicNumber

Checks:
1. Construction from enclosures and from polynomials
2. Arithmetic: enclosures always, minimal polynomials when both are known
3. Refinement, minimal-polynomial definition, uniqueness
4. Galois conjugates and rendering
"""

import math
from fractions import Fraction

import pytest

from certified_algebraics.algebraic import AlgebraicNumber
from certified_algebraics.config import NumericPrecision
from certified_algebraics.enclosure import Ball
from certified_algebraics.errors import (
    AlgebraicsInputError,
    ArithmeticUndefinedError,
    NoRootFoundError,
    PrecisionExhaustedError,
)
from certified_algebraics.polynomial import IntegerPolynomial

X2_MINUS_2 = IntegerPolynomial((1, 0, -2))
X2_MINUS_3 = IntegerPolynomial((1, 0, -3))
QUINTIC = IntegerPolynomial((1, 0, 0, 0, -1, 1))


def sqrt2() -> AlgebraicNumber:
    return AlgebraicNumber.from_polynomial(X2_MINUS_2, 1)


def sqrt3() -> AlgebraicNumber:
    return AlgebraicNumber.from_polynomial(X2_MINUS_3, 1)


# =============================================================================
# CONSTRUCTION
# =============================================================================


class TestConstruction:
    """Tests for the constructors"""

    def test_from_enclosure(self) -> None:
        """Enclosure only, polynomial unknown"""
        number = AlgebraicNumber.from_enclosure(1.5, 0.25)
        assert number.enclosure == Ball(1.5, 0.25)
        assert not number.has_minimal_polynomial
        assert number.degree is None

    def test_from_polynomial_by_index(self) -> None:
        """Index into the increasing list of real roots"""
        negative = AlgebraicNumber.from_polynomial(X2_MINUS_2, 0)
        positive = AlgebraicNumber.from_polynomial(X2_MINUS_2, 1)
        assert float(negative.center) == pytest.approx(-math.sqrt(2), abs=1e-9)
        assert float(positive.center) == pytest.approx(math.sqrt(2), abs=1e-9)
        assert positive.minimal_polynomial == X2_MINUS_2
        assert positive.degree == 2

    def test_from_polynomial_by_selector(self) -> None:
        """A callable picks the root from the candidate list"""
        number = AlgebraicNumber.from_polynomial(X2_MINUS_2, lambda roots: len(roots) - 1)
        assert float(number.center) > 0

    def test_candidate_roots(self) -> None:
        """All real roots are offered in increasing order"""
        roots = AlgebraicNumber.candidate_roots(IntegerPolynomial((2, 0, -1)))
        assert len(roots) == 2
        assert roots[0].center < roots[1].center

    def test_index_out_of_range(self) -> None:
        """An index beyond the real roots raises NoRootFoundError"""
        with pytest.raises(NoRootFoundError):
            AlgebraicNumber.from_polynomial(X2_MINUS_2, 2)

    def test_no_real_roots(self) -> None:
        """x^2 + 1 offers no real root"""
        with pytest.raises(NoRootFoundError):
            AlgebraicNumber.from_polynomial(IntegerPolynomial((1, 0, 1)), 0)

    def test_repeated_roots_rejected(self) -> None:
        """Polynomials with repeated roots are malformed"""
        with pytest.raises(AlgebraicsInputError, match="repeated"):
            AlgebraicNumber.from_polynomial(IntegerPolynomial.from_integer_roots([1, 1]), 0)

    def test_coarse_error_rejected(self) -> None:
        """An error too large to separate roots is reported"""
        close = IntegerPolynomial.from_integer_roots([0, 1])
        with pytest.raises(PrecisionExhaustedError):
            AlgebraicNumber.from_polynomial(close, 0, error=10)

    def test_constant_polynomial_rejected(self) -> None:
        """A minimal polynomial has degree at least one"""
        with pytest.raises(AlgebraicsInputError):
            AlgebraicNumber(Ball(1.0, 0.1), IntegerPolynomial((3,)))

    def test_copy_is_independent(self) -> None:
        """Refining a copy leaves the original untouched"""
        original = AlgebraicNumber.from_enclosure(1.0, 0.5)
        duplicate = original.copy()
        duplicate.refine(0.1)
        assert original.radius == 0.5
        assert duplicate.radius == 0.1

    def test_release(self) -> None:
        """Release drops the owned polynomial"""
        number = sqrt2()
        number.release()
        assert not number.has_minimal_polynomial


# =============================================================================
# ARITHMETIC
# =============================================================================


class TestArithmetic:
    """Tests for add / subtract / multiply / divide / negate / invert"""

    def test_sqrt2_plus_sqrt3(self) -> None:
        """Minimal polynomial x^4 - 10x^2 + 1"""
        total = sqrt2() + sqrt3()
        assert total.minimal_polynomial == IntegerPolynomial((1, 0, -10, 0, 1))
        assert total.enclosure.contains(Fraction(math.sqrt(2) + math.sqrt(3)))
        assert total.is_uniquely_defined()

    def test_sqrt2_plus_sqrt2(self) -> None:
        """sqrt(2) + sqrt(2) has minimal polynomial x^2 - 8"""
        total = sqrt2().add(sqrt2())
        assert total.minimal_polynomial == IntegerPolynomial((1, 0, -8))

    def test_sqrt2_times_sqrt2(self) -> None:
        """sqrt(2) * sqrt(2) has minimal polynomial x - 2"""
        product = sqrt2() * sqrt2()
        assert product.minimal_polynomial == IntegerPolynomial((1, -2))
        assert float(product.center) == pytest.approx(2.0)

    def test_quintic_minus_sqrt2(self) -> None:
        """The real root of x^5 - x + 1 plus -sqrt(2)"""
        root = AlgebraicNumber.from_polynomial(QUINTIC, 0)
        negative_sqrt2 = AlgebraicNumber.from_polynomial(X2_MINUS_2, 0)
        total = root + negative_sqrt2
        assert float(total.center) == pytest.approx(-2.581518, abs=1e-6)
        assert total.minimal_polynomial == IntegerPolynomial((1, 0, -10, 0, 38, 2, -100, 40, 121, 38, -17))

    @pytest.mark.parametrize("a, b", [(2, 3), (2, 5), (3, 7), (5, 6), (2, 8), (3, 12), (6, 10)])
    def test_sums_of_square_roots(self, a: int, b: int) -> None:
        """sqrt(a) + sqrt(b): degree <= 4, enclosure holds the sum, polynomial vanishes there"""
        x = AlgebraicNumber.from_polynomial(IntegerPolynomial((1, 0, -a)), 1)
        y = AlgebraicNumber.from_polynomial(IntegerPolynomial((1, 0, -b)), 1)
        total = x + y
        expected = math.sqrt(a) + math.sqrt(b)
        assert total.degree <= 4
        assert total.enclosure.contains(Fraction(expected))
        assert abs(total.minimal_polynomial.evaluate(expected)) < 1e-6
        assert total.is_uniquely_defined()

    @pytest.mark.parametrize(
        "a, b, expected",
        [(2, 3, (1, 0, -6)), (2, 8, (1, -4)), (3, 12, (1, -6)), (5, 7, (1, 0, -35))],
    )
    def test_products_of_square_roots(self, a: int, b: int, expected: tuple) -> None:
        """sqrt(a) * sqrt(b) has minimal polynomial x^2 - ab, or x - sqrt(ab) when that is an integer"""
        x = AlgebraicNumber.from_polynomial(IntegerPolynomial((1, 0, -a)), 1)
        y = AlgebraicNumber.from_polynomial(IntegerPolynomial((1, 0, -b)), 1)
        product = x * y
        assert product.minimal_polynomial == IntegerPolynomial(expected)
        assert product.enclosure.contains(Fraction(math.sqrt(a) * math.sqrt(b)))

    def test_float64_sum_of_degree_ten(self) -> None:
        """The quintic root minus sqrt(2) in float64 keeps the exact minimal polynomial"""
        prec = NumericPrecision.float64()
        root = AlgebraicNumber.from_polynomial(QUINTIC, 0)
        negative_sqrt2 = AlgebraicNumber.from_polynomial(X2_MINUS_2, 0)
        total = root.add(negative_sqrt2, precision=prec)
        assert total.minimal_polynomial == IntegerPolynomial((1, 0, -10, 0, 38, 2, -100, 40, 121, 38, -17))

    def test_subtract(self) -> None:
        """sqrt(3) - sqrt(2) shares the quartic of the sum"""
        difference = sqrt3() - sqrt2()
        assert difference.minimal_polynomial == IntegerPolynomial((1, 0, -10, 0, 1))
        assert float(difference.center) == pytest.approx(math.sqrt(3) - math.sqrt(2), abs=1e-9)

    def test_negate(self) -> None:
        """Negation substitutes -x"""
        negative = -AlgebraicNumber.from_polynomial(IntegerPolynomial((1, -1, -1)), 1)
        assert negative.minimal_polynomial == IntegerPolynomial((1, 1, -1))
        assert float(negative.center) == pytest.approx(-(1 + math.sqrt(5)) / 2, abs=1e-9)

    def test_invert(self) -> None:
        """1 / sqrt(2) has minimal polynomial 2x^2 - 1"""
        inverse = sqrt2().invert()
        assert inverse.minimal_polynomial == IntegerPolynomial((2, 0, -1))
        assert float(inverse.center) == pytest.approx(1 / math.sqrt(2), abs=1e-9)

    def test_divide(self) -> None:
        """sqrt(2) / sqrt(2) = 1"""
        quotient = sqrt2() / sqrt2()
        assert quotient.minimal_polynomial == IntegerPolynomial((1, -1))

    def test_invert_across_zero(self) -> None:
        """An enclosure containing zero cannot be inverted"""
        with pytest.raises(ArithmeticUndefinedError):
            AlgebraicNumber.from_enclosure(0.1, 0.5).invert()

    def test_unknown_polynomial_propagates(self) -> None:
        """Only enclosures combine when a polynomial is missing"""
        total = sqrt2() + AlgebraicNumber.from_enclosure(1.0, 1e-6)
        assert not total.has_minimal_polynomial
        assert float(total.center) == pytest.approx(math.sqrt(2) + 1.0, abs=1e-9)

    def test_operands_unchanged(self) -> None:
        """Arithmetic returns a new number"""
        a, b = sqrt2(), sqrt3()
        before = (a.enclosure, a.minimal_polynomial)
        a.multiply(b)
        assert (a.enclosure, a.minimal_polynomial) == before

    def test_custom_factorer(self) -> None:
        """A caller-supplied collaborator receives the combined polynomial"""

        class KeepWhole:
            def factor(self, polynomial, enclosure):
                return polynomial

        total = sqrt2().add(sqrt2(), factorer=KeepWhole())
        assert total.minimal_polynomial == IntegerPolynomial((1, 0, -8, 0, 0))

    def test_non_algebraic_operand(self) -> None:
        """Mixing with plain numbers is not supported"""
        with pytest.raises(TypeError):
            sqrt2() + 1
        with pytest.raises(AlgebraicsInputError):
            sqrt2().add(1)


# =============================================================================
# REFINEMENT AND DEFINITION
# =============================================================================


class TestRefinement:
    """Tests for refine / define_minimal_polynomial / is_uniquely_defined"""

    def test_refine_with_polynomial(self) -> None:
        """Refining re-isolates the root inside the enclosure"""
        number = AlgebraicNumber.from_polynomial(X2_MINUS_2, 1, error=1e-3)
        number.refine(1e-12)
        assert number.radius < 1e-12
        assert float(number.center) == pytest.approx(math.sqrt(2), abs=1e-12)

    def test_refine_without_polynomial(self) -> None:
        """Without a polynomial only the radius changes"""
        number = AlgebraicNumber.from_enclosure(1.5, 0.25)
        number.refine(0.01)
        assert number.enclosure == Ball(1.5, 0.01)

    def test_refine_noop(self) -> None:
        """A tighter enclosure is left alone"""
        number = AlgebraicNumber.from_enclosure(1.5, 0.001)
        number.refine(0.01)
        assert number.radius == 0.001

    def test_refine_without_root(self) -> None:
        """A trusted enclosure holding no root surfaces on refinement"""
        number = AlgebraicNumber.from_polynomial_and_enclosure(X2_MINUS_2, Ball(3.0, 0.5))
        with pytest.raises(NoRootFoundError):
            number.refine(1e-6)

    def test_refine_requires_positive_error(self) -> None:
        """Target error must be positive"""
        with pytest.raises(AlgebraicsInputError):
            sqrt2().refine(0)

    def test_define_minimal_polynomial(self) -> None:
        """sqrt(2) +- 1e-10 discovers x^2 - 2"""
        number = AlgebraicNumber.from_enclosure(math.sqrt(2), 1e-10)
        assert number.define_minimal_polynomial(3, 2)
        assert number.minimal_polynomial == X2_MINUS_2

    def test_define_keeps_known_polynomial(self) -> None:
        """An existing polynomial is never replaced"""
        number = sqrt2()
        assert number.define_minimal_polynomial(1, 1)
        assert number.minimal_polynomial == X2_MINUS_2

    def test_define_not_found(self) -> None:
        """Failure leaves the number without a polynomial"""
        number = AlgebraicNumber.from_enclosure(math.pi, 1e-12)
        assert not number.define_minimal_polynomial(2, 2)
        assert not number.has_minimal_polynomial

    def test_uniquely_defined(self) -> None:
        """Exactly one root inside the enclosure"""
        assert sqrt2().is_uniquely_defined()
        wide = AlgebraicNumber.from_polynomial_and_enclosure(X2_MINUS_2, Ball(0.0, 2.0))
        assert not wide.is_uniquely_defined()

    def test_unknown_polynomial_is_defined(self) -> None:
        """Nothing to contradict without a polynomial"""
        assert AlgebraicNumber.from_enclosure(1.0, 1.0).is_uniquely_defined()

    def test_non_square_free_not_defined(self) -> None:
        """A repeated-root polynomial fails the check"""
        square = IntegerPolynomial.from_integer_roots([1, 1])
        number = AlgebraicNumber.from_polynomial_and_enclosure(square, Ball(1.0, 0.1))
        assert not number.is_uniquely_defined()

    def test_root_on_lower_end_is_unique(self) -> None:
        """The enclosure [1, 3] holds the root of x - 1 on its lower end"""
        number = AlgebraicNumber.from_polynomial_and_enclosure(IntegerPolynomial((1, -1)), Ball(2, 1))
        assert number.is_uniquely_defined()

    def test_refine_root_on_lower_end(self) -> None:
        """Refinement keeps a root sitting exactly on the lower end"""
        number = AlgebraicNumber.from_polynomial_and_enclosure(IntegerPolynomial((1, -1)), Ball(2, 1))
        number.refine(Fraction(1, 1000))
        assert number.enclosure == Ball(1, 0)
        assert number.is_uniquely_defined()

    def test_float_precision(self) -> None:
        """The same checks run in float64"""
        prec = NumericPrecision.float64()
        number = AlgebraicNumber.from_polynomial(X2_MINUS_2, 1, precision=prec)
        assert number.is_uniquely_defined(precision=prec)


# =============================================================================
# CONJUGATES AND RENDERING
# =============================================================================


class TestConjugatesAndRendering:
    """Tests for galois_conjugates / __str__ / describe"""

    def test_conjugates(self) -> None:
        """sqrt(2) has conjugates -+sqrt(2)"""
        conjugates = sqrt2().galois_conjugates(1e-10)
        assert len(conjugates) == 2
        assert complex(conjugates[0].center).real == pytest.approx(-math.sqrt(2))
        assert complex(conjugates[1].center).real == pytest.approx(math.sqrt(2))

    def test_conjugates_need_polynomial(self) -> None:
        """An unknown polynomial has no conjugates"""
        with pytest.raises(AlgebraicsInputError):
            AlgebraicNumber.from_enclosure(1.0, 0.1).galois_conjugates()

    def test_str(self) -> None:
        """Value and error"""
        assert str(AlgebraicNumber.from_enclosure(1.5, 0.25)) == "Approximate value: 1.500000, Error: 0.25"

    def test_describe_unknown(self) -> None:
        """Unknown polynomial is stated"""
        text = AlgebraicNumber.from_enclosure(1.5, 0.25).describe()
        assert "Minimal polynomial unknown." in text

    def test_describe_known(self) -> None:
        """Polynomial, degree and conjugates are listed"""
        text = sqrt2().describe()
        assert "Minimal polynomial: x^2 - 2" in text
        assert "Degree: 2" in text
        assert text.count("±") >= 2

    def test_to_dict(self) -> None:
        """Serialisation"""
        data = sqrt2().to_dict()
        assert data["minimal_polynomial"]["coefficients"] == [1, 0, -2]
        assert data["enclosure"]["center"] == pytest.approx(math.sqrt(2), abs=1e-9)
