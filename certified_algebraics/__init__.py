"""
Certified arithmetic on real algebraic numbers.

A real algebraic number is held as an enclosure (center, radius) together
with, when known, its square-free integer minimal polynomial. Sums and
products get their polynomials from resultants; bare enclosures get one from
a nearest-subset-sum search.
"""

from .algebraic import AlgebraicNumber, RootSelector
from .config import (
    ComputeBudget,
    NumericKind,
    NumericPrecision,
    get_default_budget,
    get_default_precision,
    set_default_budget,
    set_default_precision,
)
from .enclosure import Ball, ComplexBall, RootList
from .errors import (
    AlgebraicsError,
    AlgebraicsInputError,
    AmbiguousFactorError,
    ArithmeticUndefinedError,
    NoRootFoundError,
    PrecisionExhaustedError,
    SingularMatrixError,
    SubsetSumInfeasibleError,
)
from .factoring import Factorer, RootRecombinationFactorer
from .integers import continued_fraction_denominator, gcd, lcm
from .interpolation import interpolate
from .matrices import LUDecomposition, determinant, invert, lu_decompose
from .minpoly import (
    MinimalPolynomialSearch,
    find_minimal_polynomial,
    search_minimal_polynomial,
    subset_to_polynomial,
    to_subset_sum,
)
from .polynomial import IntegerPolynomial, strip_leading_zeros
from .resultant import combine_minimal_polynomial, resultant_product, resultant_sum, sylvester_matrix
from .roots import (
    SturmSequence,
    all_real_roots,
    durand_kerner,
    has_sign_change,
    isolate_real_roots,
    root_count,
    root_upper_bound,
)
from .subset_sum import (
    SubsetSumCertificate,
    SubsetSumProblem,
    SubsetSumSolution,
    nearest_subset_sum,
    subset_sum_certificate,
)

__version__ = "0.1.0"

__all__ = [
    "AlgebraicNumber",
    "RootSelector",
    "ComputeBudget",
    "NumericKind",
    "NumericPrecision",
    "get_default_budget",
    "get_default_precision",
    "set_default_budget",
    "set_default_precision",
    "Ball",
    "ComplexBall",
    "RootList",
    "AlgebraicsError",
    "AlgebraicsInputError",
    "AmbiguousFactorError",
    "ArithmeticUndefinedError",
    "NoRootFoundError",
    "PrecisionExhaustedError",
    "SingularMatrixError",
    "SubsetSumInfeasibleError",
    "Factorer",
    "RootRecombinationFactorer",
    "continued_fraction_denominator",
    "gcd",
    "lcm",
    "interpolate",
    "LUDecomposition",
    "determinant",
    "invert",
    "lu_decompose",
    "MinimalPolynomialSearch",
    "find_minimal_polynomial",
    "search_minimal_polynomial",
    "subset_to_polynomial",
    "to_subset_sum",
    "IntegerPolynomial",
    "strip_leading_zeros",
    "combine_minimal_polynomial",
    "resultant_product",
    "resultant_sum",
    "sylvester_matrix",
    "SturmSequence",
    "all_real_roots",
    "durand_kerner",
    "has_sign_change",
    "isolate_real_roots",
    "root_count",
    "root_upper_bound",
    "SubsetSumCertificate",
    "SubsetSumProblem",
    "SubsetSumSolution",
    "nearest_subset_sum",
    "subset_sum_certificate",
]
