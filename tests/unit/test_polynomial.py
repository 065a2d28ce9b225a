"""
Tests for integer polynomial algebra

Checks:
1. Construction and the leading-coefficient invariant
2. Ring operations on p = x^2 - 2 and q = x^3 - 1
3. Pseudo-remainder, exact division, gcd and square-free part
4. Evaluation and printing
5. Ring identities over seeded random families
"""

import random
from fractions import Fraction

import pytest

from certified_algebraics.errors import AlgebraicsInputError, PrecisionExhaustedError
from certified_algebraics.polynomial import IntegerPolynomial, strip_leading_zeros

P = IntegerPolynomial((1, 0, -2))
Q = IntegerPolynomial((1, 0, 0, -1))


def poly(*coefficients: int) -> IntegerPolynomial:
    return IntegerPolynomial(coefficients)


# =============================================================================
# CONSTRUCTION
# =============================================================================


class TestConstruction:
    """Tests for IntegerPolynomial construction"""

    def test_strip_leading_zeros(self) -> None:
        """[0, 1, 1] strips to x + 1"""
        assert strip_leading_zeros([0, 1, 1]) == (1, 1)
        assert strip_leading_zeros([0, 0]) == (0,)
        assert strip_leading_zeros([]) == (0,)

    def test_leading_zero_rejected(self) -> None:
        """The invariant forbids a zero leading coefficient"""
        with pytest.raises(AlgebraicsInputError, match="from_coefficients"):
            IntegerPolynomial((0, 1, 1))

    def test_from_coefficients_strips(self) -> None:
        """from_coefficients accepts leading zeros"""
        assert IntegerPolynomial.from_coefficients([0, 0, 3, 1]) == poly(3, 1)

    def test_non_integer_rejected(self) -> None:
        """Floats and bools are not integer coefficients"""
        with pytest.raises(AlgebraicsInputError, match="idx=1"):
            IntegerPolynomial((1, 0.5))
        with pytest.raises(AlgebraicsInputError):
            IntegerPolynomial((True, 1))

    def test_empty_rejected(self) -> None:
        """At least one coefficient is required"""
        with pytest.raises(AlgebraicsInputError):
            IntegerPolynomial(())

    def test_lowest_first(self) -> None:
        """Lowest-first input is reversed"""
        assert IntegerPolynomial.from_lowest_first([-2, 0, 1]) == P
        assert P.lowest_first() == (-2, 0, 1)

    def test_integer_roots(self) -> None:
        """Product of linear factors"""
        assert IntegerPolynomial.from_integer_roots([1, 2, 3, 4]) == poly(1, -10, 35, -50, 24)

    def test_shape(self) -> None:
        """Degree, leading and constant coefficients"""
        assert Q.degree == 3
        assert Q.leading_coefficient == 1
        assert Q.constant_term == -1
        assert Q.coefficient(3) == 1
        assert Q.coefficient(1) == 0
        assert Q.coefficient(7) == 0
        assert IntegerPolynomial.zero().is_zero
        assert IntegerPolynomial.constant(5).is_constant

    def test_monomial(self) -> None:
        """c x^k"""
        assert IntegerPolynomial.monomial(3, 2) == poly(3, 0, 0)


# =============================================================================
# RING OPERATIONS
# =============================================================================


class TestRingOperations:
    """Tests on p = x^2 - 2 and q = x^3 - 1"""

    def test_add(self) -> None:
        """p + q = x^3 + x^2 - 3"""
        assert P.add(Q) == poly(1, 1, 0, -3)
        assert P + Q == poly(1, 1, 0, -3)

    def test_subtract(self) -> None:
        """p - q = -x^3 + x^2 - 1"""
        assert P.subtract(Q) == poly(-1, 1, 0, -1)
        assert P - Q == poly(-1, 1, 0, -1)

    def test_cancelling_add(self) -> None:
        """Leading terms cancel and are stripped"""
        assert Q.add(poly(-1, 0, 0, 0)) == poly(-1)
        assert (P - P).is_zero

    def test_scale(self) -> None:
        """3p = 3x^2 - 6"""
        assert P.scale(3) == poly(3, 0, -6)
        assert P.scale(0).is_zero

    def test_raise_degree(self) -> None:
        """x^2 p = x^4 - 2x^2"""
        assert P.raise_degree(2) == poly(1, 0, -2, 0, 0)

    def test_reverse(self) -> None:
        """x^2 p(1/x) = -2x^2 + 1"""
        assert P.reverse() == poly(-2, 0, 1)

    def test_reverse_drops_trailing_zero(self) -> None:
        """Reversal of x^2 + x is 1 + x"""
        assert poly(1, 1, 0).reverse() == poly(1, 1)

    def test_multiply(self) -> None:
        """pq = x^5 - 2x^3 - x^2 + 2"""
        assert P.multiply(Q) == poly(1, 0, -2, -1, 0, 2)
        assert P * Q == Q * P

    def test_multiply_by_zero(self) -> None:
        """Zero annihilates"""
        assert P.multiply(IntegerPolynomial.zero()).is_zero

    def test_power(self) -> None:
        """p^3 = x^6 - 6x^4 + 12x^2 - 8"""
        assert P.power(3) == poly(1, 0, -6, 0, 12, 0, -8)
        assert P ** 0 == poly(1)

    def test_negative_power_rejected(self) -> None:
        """Exponents are nonnegative ints"""
        with pytest.raises(AlgebraicsInputError):
            P.power(-1)

    def test_compose(self) -> None:
        """p(q) = x^6 - 2x^3 - 1"""
        assert P.compose(Q) == poly(1, 0, 0, -2, 0, 0, -1)

    def test_linear_substitution(self) -> None:
        """p(-x + 1) = x^2 - 2x - 1"""
        assert P.linear_substitution(-1, 1) == poly(1, -2, -1)

    def test_linear_substitution_constant(self) -> None:
        """a = 0 evaluates at b"""
        assert P.linear_substitution(0, 3) == poly(7)

    def test_derivative(self) -> None:
        """p' = 2x"""
        assert P.derivative() == poly(2, 0)
        assert IntegerPolynomial.constant(4).derivative().is_zero

    def test_integer_operands(self) -> None:
        """Plain ints coerce to constants"""
        assert P + 2 == poly(1, 0, 0)
        assert 1 - P == poly(-1, 0, 3)
        assert 2 * P == P.scale(2)

    def test_operands_unchanged(self) -> None:
        """Operations never modify their inputs"""
        before = P.coefficients
        P.multiply(Q)
        P.scale(5)
        assert P.coefficients == before


# =============================================================================
# DIVISION
# =============================================================================


class TestDivision:
    """Tests for pseudo-remainder, exact division, gcd"""

    def test_pseudo_remainder(self) -> None:
        """q mod p = 2x - 1"""
        assert Q.pseudo_remainder(P) == poly(2, -1)
        assert Q % P == poly(2, -1)

    def test_pseudo_remainder_smaller_dividend(self) -> None:
        """A dividend of lower degree is returned unchanged"""
        assert P.pseudo_remainder(Q) == P

    def test_pseudo_remainder_positive_scale(self) -> None:
        """The scale factor is positive even for a negative divisor lead"""
        divisor = poly(-2, 1)
        remainder = P.pseudo_remainder(divisor)
        # true remainder of x^2 - 2 by -2x + 1 is p(1/2) = -7/4
        assert remainder.degree == 0
        assert remainder.leading_coefficient < 0

    def test_pseudo_remainder_by_zero(self) -> None:
        """The zero divisor is malformed"""
        with pytest.raises(AlgebraicsInputError):
            P.pseudo_remainder(IntegerPolynomial.zero())

    def test_exact_quotient(self) -> None:
        """(pq) / q == p"""
        assert P.multiply(Q).exact_quotient(Q) == P

    def test_inexact_quotient_rejected(self) -> None:
        """A nonzero remainder is an error"""
        with pytest.raises(AlgebraicsInputError, match="does not divide"):
            Q.exact_quotient(P)

    def test_divides(self) -> None:
        """x - 1 divides x^3 - 1 in Z[x]; 2x - 2 does not"""
        assert poly(1, -1).divides(Q)
        assert not P.divides(Q)
        assert not poly(2, -2).divides(Q)

    def test_content_and_primitive(self) -> None:
        """6x^2 - 4 = 2 (3x^2 - 2)"""
        p = poly(6, 0, -4)
        assert p.content() == 2
        assert p.primitive_part() == poly(3, 0, -2)
        assert p.negate().normalized() == poly(3, 0, -2)

    def test_gcd(self) -> None:
        """gcd((x-1)(x-2), (x-1)(x+3)) = x - 1"""
        a = IntegerPolynomial.from_integer_roots([1, 2])
        b = IntegerPolynomial.from_integer_roots([1, -3], leading=-4)
        assert a.gcd(b) == poly(1, -1)

    def test_gcd_coprime(self) -> None:
        """Coprime polynomials have gcd 1"""
        assert P.gcd(Q) == poly(1)

    def test_square_free_part(self) -> None:
        """(x - 1)^2 (x + 2) reduces to (x - 1)(x + 2)"""
        p = IntegerPolynomial.from_integer_roots([1, 1, -2], leading=3)
        assert p.square_free_part() == poly(1, 1, -2)
        assert not p.is_square_free()
        assert P.is_square_free()


# =============================================================================
# EVALUATION / PRINTING
# =============================================================================


class TestEvaluation:
    """Tests for evaluation and rendering"""

    def test_exact_evaluation(self) -> None:
        """Fractions evaluate exactly"""
        assert P.evaluate(Fraction(3, 2)) == Fraction(1, 4)
        assert P(2) == 2

    def test_float_evaluation(self) -> None:
        """Floats follow float arithmetic"""
        assert P.evaluate(1.5) == pytest.approx(0.25)

    def test_complex_evaluation(self) -> None:
        """Complex arguments are allowed"""
        assert P.evaluate(1j) == -3

    def test_sign_at(self) -> None:
        """Sign of the value"""
        assert P.sign_at(0) == -1
        assert P.sign_at(2) == 1
        assert poly(1, -1).sign_at(1) == 0

    def test_float_overflow(self) -> None:
        """A coefficient beyond float range fails as a precision error"""
        huge = poly(10**400, 1)
        assert huge.sign_at(Fraction(3, 2)) == 1
        with pytest.raises(PrecisionExhaustedError, match="overflows"):
            huge.sign_at(1.5)

    @pytest.mark.parametrize(
        "coefficients, text",
        [
            ((1, 0, -2), "x^2 - 2"),
            ((-1, 0, 2), "-x^2 + 2"),
            ((3, 0, -6), "3x^2 - 6"),
            ((2, -1), "2x - 1"),
            ((1, 0), "x"),
            ((-7,), "-7"),
            ((0,), "0"),
        ],
    )
    def test_str(self, coefficients, text: str) -> None:
        """Printing style"""
        assert str(IntegerPolynomial(coefficients)) == text

    def test_to_dict(self) -> None:
        """Serialisation"""
        assert P.to_dict() == {"coefficients": [1, 0, -2], "degree": 2, "text": "x^2 - 2"}


# =============================================================================
# IDENTITIES OVER RANDOM FAMILIES
# =============================================================================

SEEDS = range(30)


def random_polynomial(rng: random.Random, max_degree: int, *, nonzero_constant: bool = False) -> IntegerPolynomial:
    degree = rng.randint(0, max_degree)
    lead = rng.choice((-1, 1)) * rng.randint(1, 9)
    rest = [rng.randint(-9, 9) for _ in range(degree)]
    if nonzero_constant and degree > 0 and rest[-1] == 0:
        rest[-1] = rng.choice((-1, 1)) * rng.randint(1, 9)
    return IntegerPolynomial.from_coefficients([lead] + rest)


def random_point(rng: random.Random) -> Fraction:
    return Fraction(rng.randint(-20, 20), rng.randint(1, 7))


class TestRingIdentities:
    """Evaluation commutes with the ring operations"""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_add_and_subtract(self, seed: int) -> None:
        """(p + q)(x) = p(x) + q(x) and (p - q)(x) = p(x) - q(x)"""
        rng = random.Random(seed)
        p, q, x = random_polynomial(rng, 6), random_polynomial(rng, 6), random_point(rng)
        assert p.add(q)(x) == p(x) + q(x)
        assert p.subtract(q)(x) == p(x) - q(x)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_multiply(self, seed: int) -> None:
        """(p q)(x) = p(x) q(x) and deg(p q) = deg p + deg q"""
        rng = random.Random(seed)
        p, q, x = random_polynomial(rng, 6), random_polynomial(rng, 6), random_point(rng)
        product = p.multiply(q)
        assert product(x) == p(x) * q(x)
        assert product.degree == p.degree + q.degree

    @pytest.mark.parametrize("seed", SEEDS)
    def test_compose(self, seed: int) -> None:
        """p(q)(x) = p(q(x))"""
        rng = random.Random(seed)
        p, q, x = random_polynomial(rng, 4), random_polynomial(rng, 3), random_point(rng)
        assert p.compose(q)(x) == p(q(x))

    @pytest.mark.parametrize("seed", SEEDS)
    def test_reverse_twice(self, seed: int) -> None:
        """Reversing twice is the identity when the constant term is nonzero"""
        p = random_polynomial(random.Random(seed), 8, nonzero_constant=True)
        assert p.reverse().reverse() == p

    @pytest.mark.parametrize("seed", SEEDS)
    def test_strip_idempotent(self, seed: int) -> None:
        """Stripping leading zeros twice changes nothing"""
        rng = random.Random(seed)
        coefficients = [0] * rng.randint(0, 4) + [rng.randint(-3, 3) for _ in range(rng.randint(0, 5))]
        once = strip_leading_zeros(coefficients)
        assert strip_leading_zeros(once) == once
        assert once == (0,) or once[0] != 0
