"""Executable contract for the library's public operations.

Each operation is described as a collection of:
- preconditions: what inputs must satisfy before the operation
- postconditions: what the output must satisfy given valid inputs
- error conditions: what inputs must cause specific exceptions
- algebraic properties: relationships that must hold between calls

Postconditions are checked against *reference models* that compute the
same answers a different way (exact ``Fraction`` arithmetic, decimal
strings, repeated multiplication).  Validation tools iterate over the
contract to auto-generate conformance tests and search for counterexamples.

Layers
------
Box               finite integer interval used to drive exhaustive checks
OperationContract per-operation contract (pre/post/error/properties)
BranchSpec        every decision point that white-box tests must cover
LibraryContract   the full contract for the library
build_contract()  constructs the LibraryContract
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Callable

from errors import (
    BasisOutOfRangeError,
    NegativeExponentError,
    UnsupportedRoundingModeError,
)
from rounding import RoundingMode
from settings import Settings


# ---------------------------------------------------------------------------
# Box
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Box:
    """Inclusive integer interval [lo, hi]."""

    lo: int
    hi: int

    def __post_init__(self) -> None:
        if self.lo > self.hi:
            raise ValueError(f"lo ({self.lo}) must be <= hi ({self.hi})")

    def contains(self, v: int) -> bool:
        return self.lo <= v <= self.hi

    @property
    def width(self) -> int:
        return self.hi - self.lo + 1

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)

    def nonzero_values(self) -> list[int]:
        return [v for v in self.all_values() if v != 0]


# ---------------------------------------------------------------------------
# Contract building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Precondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free input values the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationContract:
    name: str
    preconditions: list[Precondition]
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class LibraryContract:
    """Complete contract for the library."""

    operations: dict[str, OperationContract]
    branches: list[BranchSpec]

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out

    def branch_ids(self, operation: str | None = None) -> list[str]:
        return [
            b.id for b in self.branches
            if operation is None or b.operation == operation
        ]


# ---------------------------------------------------------------------------
# Reference models
# ---------------------------------------------------------------------------

def reference_divide(dividend: int, divisor: int, mode: RoundingMode) -> int:
    """Round the exact rational ``dividend / divisor`` with ``Fraction`` arithmetic."""
    exact = Fraction(dividend, divisor)
    lo = math.floor(exact)
    hi = math.ceil(exact)
    if lo == hi:
        return lo

    toward_zero, away = (lo, hi) if exact > 0 else (hi, lo)

    if mode == RoundingMode.TO_ZERO:
        return toward_zero
    if mode == RoundingMode.AWAY_FROM_ZERO:
        return away
    if mode == RoundingMode.TO_NEGATIVE_INFINITY:
        return lo
    if mode == RoundingMode.TO_POSITIVE_INFINITY:
        return hi

    frac = exact - lo
    if frac < Fraction(1, 2):
        return lo
    if frac > Fraction(1, 2):
        return hi

    if mode == RoundingMode.MIDPOINT_TO_EVEN:
        return lo if lo % 2 == 0 else hi
    if mode == RoundingMode.MIDPOINT_AWAY_FROM_ZERO:
        return away
    if mode == RoundingMode.MIDPOINT_TO_ZERO:
        return toward_zero
    if mode == RoundingMode.MIDPOINT_TO_NEGATIVE_INFINITY:
        return lo
    return hi


def reference_digit_count(value: int) -> int:
    """Length of the decimal string of ``abs(value)``.

    Limited to values the interpreter will convert to ``str``.
    """
    return len(str(abs(value)))


def reference_trailing_zeros(value: int) -> int:
    if value == 0:
        return 0
    s = str(abs(value))
    return len(s) - len(s.rstrip("0"))


def reference_power(basis: int, exponent: int) -> int:
    """``basis ** exponent`` by repeated multiplication."""
    result = 1
    for _ in range(exponent):
        result *= basis
    return result


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

# Exponents below this are cached by a default-configured registry.
_DEFAULT_MAX_SIZE = Settings().default_max_size

ALL_MODES: tuple[RoundingMode, ...] = tuple(RoundingMode)

# Modes whose result for -x equals the negated result for x.
SYMMETRIC_MODES: tuple[RoundingMode, ...] = (
    RoundingMode.TO_ZERO,
    RoundingMode.AWAY_FROM_ZERO,
    RoundingMode.MIDPOINT_TO_EVEN,
    RoundingMode.MIDPOINT_AWAY_FROM_ZERO,
    RoundingMode.MIDPOINT_TO_ZERO,
)


def _divides_exactly(value: int, tz: int) -> bool:
    m = abs(value)
    return m % 10 ** tz == 0 and (m == 0 or m % 10 ** (tz + 1) != 0)


def build_contract() -> LibraryContract:
    """Construct the full contract."""

    # --------------------------------------------------------------- divide
    divide_contract = OperationContract(
        name="divide",
        preconditions=[
            Precondition(
                "nonzero_divisor",
                "Divisor is not zero",
                lambda a, d, mode: d != 0,
            ),
            Precondition(
                "known_mode",
                "Mode is one of the nine rounding modes",
                lambda a, d, mode: mode in ALL_MODES,
            ),
        ],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result equals the exact quotient rounded per mode",
                lambda a, d, mode, result: result == reference_divide(a, d, mode),
            ),
            Postcondition(
                "result_bracketed",
                "floor(a/d) <= result <= ceil(a/d)",
                lambda a, d, mode, result: (
                    math.floor(Fraction(a, d)) <= result <= math.ceil(Fraction(a, d))
                ),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "div_by_zero_error",
                "ZeroDivisionError when divisor is zero",
                lambda a, d, mode: d == 0 and mode in ALL_MODES,
                ZeroDivisionError,
            ),
            ErrorCondition(
                "unknown_mode_error",
                "UnsupportedRoundingModeError for an undefined mode ordinal",
                lambda a, d, mode: mode not in ALL_MODES,
                UnsupportedRoundingModeError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "zero_numerator", "divide(0, d, m) == 0 for d != 0", 1,
                lambda divide, d: d == 0 or all(
                    divide(0, d, m) == 0 for m in ALL_MODES
                ),
            ),
            AlgebraicProperty(
                "identity", "divide(a, 1, m) == a", 1,
                lambda divide, a: all(divide(a, 1, m) == a for m in ALL_MODES),
            ),
            AlgebraicProperty(
                "self", "divide(a, a, m) == 1 for a != 0", 1,
                lambda divide, a: a == 0 or all(
                    divide(a, a, m) == 1 for m in ALL_MODES
                ),
            ),
            AlgebraicProperty(
                "sign_symmetry",
                "divide(-a, d, m) == -divide(a, d, m) for symmetric modes", 2,
                lambda divide, a, d: d == 0 or all(
                    divide(-a, d, m) == -divide(a, d, m) for m in SYMMETRIC_MODES
                ),
            ),
            AlgebraicProperty(
                "floor_ceiling_duality",
                "divide(-a, d, FLOOR) == -divide(a, d, CEILING)", 2,
                lambda divide, a, d: d == 0 or (
                    divide(-a, d, RoundingMode.TO_NEGATIVE_INFINITY)
                    == -divide(a, d, RoundingMode.TO_POSITIVE_INFINITY)
                ),
            ),
            AlgebraicProperty(
                "floor_matches_floordiv",
                "divide(a, d, TO_NEGATIVE_INFINITY) == a // d", 2,
                lambda divide, a, d: d == 0 or (
                    divide(a, d, RoundingMode.TO_NEGATIVE_INFINITY) == a // d
                ),
            ),
        ],
    )

    # --------------------------------------------------------- count_digits
    count_digits_contract = OperationContract(
        name="count_digits",
        preconditions=[
            Precondition(
                "int_input", "Value is an int",
                lambda v: isinstance(v, int) and not isinstance(v, bool),
            ),
        ],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result equals the length of the decimal string of abs(v)",
                lambda v, result: result == reference_digit_count(v),
            ),
            Postcondition(
                "at_least_one", "Result is at least 1",
                lambda v, result: result >= 1,
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "sign_invariance", "count_digits(v) == count_digits(-v)", 1,
                lambda count_digits, v: count_digits(v) == count_digits(-v),
            ),
            AlgebraicProperty(
                "powers_of_ten", "count_digits(10**k) == k + 1", 1,
                lambda count_digits, k: k < 0 or count_digits(10 ** k) == k + 1,
            ),
            AlgebraicProperty(
                "below_powers_of_ten", "count_digits(10**k - 1) == k for k >= 1", 1,
                lambda count_digits, k: k < 1 or count_digits(10 ** k - 1) == k,
            ),
        ],
    )

    # --------------------------------------- count_digits_and_trailing_zeros
    cdtz_contract = OperationContract(
        name="count_digits_and_trailing_zeros",
        preconditions=[
            Precondition(
                "int_input", "Value is an int",
                lambda v: isinstance(v, int) and not isinstance(v, bool),
            ),
        ],
        postconditions=[
            Postcondition(
                "digits_correct",
                "Digit count equals the length of the decimal string of abs(v)",
                lambda v, result: result.digits == reference_digit_count(v),
            ),
            Postcondition(
                "trailing_zeros_correct",
                "Trailing zero count matches the decimal string",
                lambda v, result: (
                    result.trailing_zeros == reference_trailing_zeros(v)
                ),
            ),
            Postcondition(
                "exact_power_of_ten_divisor",
                "10**tz divides v and 10**(tz+1) does not (v != 0)",
                lambda v, result: _divides_exactly(v, result.trailing_zeros),
            ),
            Postcondition(
                "fewer_zeros_than_digits",
                "trailing_zeros < digits",
                lambda v, result: result.trailing_zeros < result.digits,
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "sign_invariance",
                "count(v) == count(-v)", 1,
                lambda cdtz, v: cdtz(v) == cdtz(-v),
            ),
            AlgebraicProperty(
                "powers_of_ten", "count(10**k) == (k + 1, k)", 1,
                lambda cdtz, k: k < 0 or tuple(cdtz(10 ** k)) == (k + 1, k),
            ),
            AlgebraicProperty(
                "scaling_by_ten",
                "count(v * 10) == (digits + 1, trailing_zeros + 1) for v != 0", 1,
                lambda cdtz, v: v == 0 or tuple(cdtz(v * 10)) == (
                    cdtz(v).digits + 1, cdtz(v).trailing_zeros + 1,
                ),
            ),
        ],
    )

    # -------------------------------------------------------- pow_cache_get
    pow_cache_contract = OperationContract(
        name="pow_cache_get",
        preconditions=[
            Precondition(
                "basis_in_range", "3 <= basis <= 10",
                lambda basis, e: 3 <= basis <= 10,
            ),
            Precondition(
                "non_negative_exponent", "exponent >= 0",
                lambda basis, e: e >= 0,
            ),
        ],
        postconditions=[
            Postcondition(
                "result_correct", "Result equals basis ** exponent",
                lambda basis, e, result: result == reference_power(basis, e),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "basis_out_of_range",
                "BasisOutOfRangeError when basis is outside [3, 10]",
                lambda basis, e: not 3 <= basis <= 10,
                BasisOutOfRangeError,
            ),
            ErrorCondition(
                "negative_exponent",
                "NegativeExponentError when exponent < 0",
                lambda basis, e: 3 <= basis <= 10 and e < 0,
                NegativeExponentError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "successive_ratio",
                "get(e + 1) == get(e) * basis", 2,
                lambda get, basis, e: e < 0 or not 3 <= basis <= 10 or (
                    get(basis, e + 1) == get(basis, e) * basis
                ),
            ),
            AlgebraicProperty(
                "idempotent", "get(e) is get(e) once cached", 2,
                lambda get, basis, e: e < 0 or not 3 <= basis <= 10 or (
                    e >= _DEFAULT_MAX_SIZE or get(basis, e) is get(basis, e)
                ),
            ),
        ],
    )

    # -------------------------------------------------------------- branches
    branches = [
        # divide
        BranchSpec("RND-INVALID-MODE", "Undefined mode rejected",
                   "mode not in RoundingMode", "divide"),
        BranchSpec("RND-TO-ZERO", "Truncation returned directly",
                   "mode == TO_ZERO", "divide"),
        BranchSpec("RND-EXACT", "No remainder, quotient unchanged",
                   "r == 0", "divide"),
        BranchSpec("RND-FLOOR", "Floor adjusts negative inexact quotients",
                   "mode == TO_NEGATIVE_INFINITY and r != 0", "divide"),
        BranchSpec("RND-CEILING", "Ceiling adjusts positive inexact quotients",
                   "mode == TO_POSITIVE_INFINITY and r != 0", "divide"),
        BranchSpec("RND-AWAY", "Every inexact quotient moves away from zero",
                   "mode == AWAY_FROM_ZERO and r != 0", "divide"),
        BranchSpec("RND-NEAREST-ABOVE-HALF", "Remainder above half rounds away",
                   "2*|r| > |d|", "divide"),
        BranchSpec("RND-NEAREST-BELOW-HALF", "Remainder below half truncates",
                   "2*|r| < |d|", "divide"),
        BranchSpec("RND-HALF-AWAY", "Midpoint rounds away from zero",
                   "2*|r| == |d| and mode == MIDPOINT_AWAY_FROM_ZERO", "divide"),
        BranchSpec("RND-HALF-EVEN", "Midpoint rounds to the even neighbour",
                   "2*|r| == |d| and mode == MIDPOINT_TO_EVEN", "divide"),
        BranchSpec("RND-HALF-TO-ZERO", "Midpoint truncates",
                   "2*|r| == |d| and mode == MIDPOINT_TO_ZERO", "divide"),
        BranchSpec("RND-HALF-DOWN", "Midpoint rounds toward -inf",
                   "2*|r| == |d| and mode == MIDPOINT_TO_NEGATIVE_INFINITY",
                   "divide"),
        BranchSpec("RND-HALF-UP", "Midpoint rounds toward +inf",
                   "2*|r| == |d| and mode == MIDPOINT_TO_POSITIVE_INFINITY",
                   "divide"),
        # count_digits
        BranchSpec("CD-SMALL", "Single digit values",
                   "-10 < v < 10", "count_digits"),
        BranchSpec("CD-ESTIMATE-EXACT", "Bit-length estimate already exact",
                   "|v| < 10**estimate", "count_digits"),
        BranchSpec("CD-ESTIMATE-LOW", "Bit-length estimate one short",
                   "|v| >= 10**estimate", "count_digits"),
        # count_digits_and_trailing_zeros
        BranchSpec("TZ-SMALL-VALUE", "Single digit values",
                   "-10 < v < 10", "count_digits_and_trailing_zeros"),
        BranchSpec("TZ-ODD", "Odd values have no trailing zeros",
                   "v odd", "count_digits_and_trailing_zeros"),
        BranchSpec("TZ-TIER-SMALL", "64-bit magnitude scan",
                   "|v| <= 2**64 - 1", "count_digits_and_trailing_zeros"),
        BranchSpec("TZ-TIER-MEDIUM", "128-bit magnitude split scan",
                   "2**64 <= |v| <= 2**128 - 1",
                   "count_digits_and_trailing_zeros"),
        BranchSpec("TZ-TIER-LARGE-LIMBS", "Limb radix conversion",
                   "|v| >= 2**128 and optimizations enabled",
                   "count_digits_and_trailing_zeros"),
        BranchSpec("TZ-TIER-LARGE-DECIMAL", "Exact decimal digit fallback",
                   "|v| >= 2**128 and fast path unavailable",
                   "count_digits_and_trailing_zeros"),
        # pow cache
        BranchSpec("PC-BASIS-INVALID", "Basis outside [3, 10] rejected",
                   "basis < 3 or basis > 10", "pow_cache"),
        BranchSpec("PC-HIT", "Populated entry returned without locking",
                   "e < size", "pow_cache"),
        BranchSpec("PC-GROW", "Miss below max_size grows the cache",
                   "size <= e < max_size", "pow_cache"),
        BranchSpec("PC-GROW-RACE-LOST", "Another thread already grew the cache",
                   "e < size after acquiring the lock", "pow_cache"),
        BranchSpec("PC-UNCACHED", "Exponent beyond max_size computed directly",
                   "e >= max_size", "pow_cache"),
        BranchSpec("PC-NEGATIVE", "Negative exponent rejected",
                   "e < 0", "pow_cache"),
    ]

    return LibraryContract(
        operations={
            "divide": divide_contract,
            "count_digits": count_digits_contract,
            "count_digits_and_trailing_zeros": cdtz_contract,
            "pow_cache_get": pow_cache_contract,
        },
        branches=branches,
    )
