"""Property-based tests using Hypothesis.

These tests verify relationships that must hold for *all* inputs.  They
complement the white-box tests by exploring the input space broadly
rather than targeting specific branches.
"""
from __future__ import annotations

import math
from fractions import Fraction

from hypothesis import HealthCheck, assume, given, settings
from hypothesis.strategies import integers, sampled_from

from contract import SYMMETRIC_MODES, reference_divide
from digits import count_digits, count_digits_and_trailing_zeros
from division import divide, truncated_divmod
from powcache import PowCacheRegistry
from rounding import RoundingMode

# ---------------------------------------------------------------------------
# Shared configuration
# ---------------------------------------------------------------------------

REGISTRY = PowCacheRegistry()
modes = sampled_from(list(RoundingMode))
small = integers(min_value=-1000, max_value=1000)
wide = integers(min_value=-(10 ** 60), max_value=10 ** 60)
nonzero_wide = wide.filter(lambda v: v != 0)
# Values well past 2**128 but still convertible to str for the checks.
huge = integers(min_value=-(10 ** 300), max_value=10 ** 300)


# ===================================================================
# DIVISION
# ===================================================================

class TestDivisionProperties:

    @given(a=wide, d=nonzero_wide, mode=modes)
    @settings(max_examples=500)
    def test_matches_exact_rational(self, a, d, mode):
        assert divide(a, d, mode) == reference_divide(a, d, mode)

    @given(a=wide, d=nonzero_wide, mode=modes)
    def test_bracketed_by_floor_and_ceiling(self, a, d, mode):
        exact = Fraction(a, d)
        assert math.floor(exact) <= divide(a, d, mode) <= math.ceil(exact)

    @given(a=wide, d=nonzero_wide, mode=modes)
    def test_exact_quotients_unchanged(self, a, d, mode):
        assert divide(a * d, d, mode) == a

    @given(a=wide, d=nonzero_wide, mode=sampled_from(SYMMETRIC_MODES))
    def test_sign_symmetry(self, a, d, mode):
        assert divide(-a, d, mode) == -divide(a, d, mode)

    @given(a=wide, d=nonzero_wide)
    def test_floor_ceiling_duality(self, a, d):
        floor = divide(-a, d, RoundingMode.TO_NEGATIVE_INFINITY)
        ceiling = divide(a, d, RoundingMode.TO_POSITIVE_INFINITY)
        assert floor == -ceiling

    @given(a=wide, d=nonzero_wide)
    def test_floor_is_floordiv(self, a, d):
        assert divide(a, d, RoundingMode.TO_NEGATIVE_INFINITY) == a // d

    @given(a=wide, d=nonzero_wide)
    def test_midpoint_modes_agree_off_the_midpoint(self, a, d):
        assume(2 * abs(truncated_divmod(a, d)[1]) != abs(d))
        results = {divide(a, d, m) for m in RoundingMode if m.is_midpoint}
        assert len(results) == 1

    @given(a=small, d=integers(min_value=1, max_value=1000))
    def test_directed_modes_differ_by_at_most_one(self, a, d):
        floor = divide(a, d, RoundingMode.TO_NEGATIVE_INFINITY)
        ceiling = divide(a, d, RoundingMode.TO_POSITIVE_INFINITY)
        assert ceiling - floor == (0 if a % d == 0 else 1)

    @given(a=wide, d=nonzero_wide)
    def test_truncated_divmod_identity(self, a, d):
        q, r = truncated_divmod(a, d)
        assert q * d + r == a
        assert abs(r) < abs(d)


# ===================================================================
# DIGIT COUNTING
# ===================================================================

class TestDigitProperties:

    @given(v=huge)
    @settings(max_examples=500)
    def test_digits_match_decimal_string(self, v):
        assert count_digits(v) == len(str(abs(v)))

    @given(v=huge)
    def test_sign_invariance(self, v):
        assert count_digits(v) == count_digits(-v)
        assert count_digits_and_trailing_zeros(v) == count_digits_and_trailing_zeros(-v)

    @given(v=huge)
    @settings(max_examples=500)
    def test_trailing_zeros_match_decimal_string(self, v):
        s = str(abs(v))
        expected_tz = 0 if v == 0 else len(s) - len(s.rstrip("0"))
        assert count_digits_and_trailing_zeros(v) == (len(s), expected_tz)

    @given(m=integers(min_value=1, max_value=10 ** 80), k=integers(min_value=0, max_value=120))
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_scaling_by_powers_of_ten(self, m, k):
        assume(m % 10 != 0)
        digits, tz = count_digits_and_trailing_zeros(m * 10 ** k)
        assert digits == count_digits(m) + k
        assert tz == k

    @given(v=huge)
    def test_zeros_fewer_than_digits(self, v):
        digits, tz = count_digits_and_trailing_zeros(v)
        assert 0 <= tz < digits

    @given(k=integers(min_value=1, max_value=600))
    def test_power_of_ten_boundaries(self, k):
        assert count_digits(10 ** k - 1) == k
        assert count_digits(10 ** k) == k + 1


# ===================================================================
# POWER CACHE
# ===================================================================

class TestPowCacheProperties:

    @given(basis=integers(min_value=3, max_value=10), e=integers(min_value=0, max_value=1500))
    @settings(max_examples=300)
    def test_value(self, basis, e):
        assert REGISTRY.get_cache(basis).get(e) == basis ** e

    @given(basis=integers(min_value=3, max_value=10), e=integers(min_value=0, max_value=1200))
    def test_successive_ratio(self, basis, e):
        cache = REGISTRY.get_cache(basis)
        assert cache.get(e + 1) == cache.get(e) * basis

    @given(basis=integers(min_value=3, max_value=10), e=integers(min_value=0, max_value=1023))
    def test_size_bounded(self, basis, e):
        cache = REGISTRY.get_cache(basis)
        cache.get(e)
        assert e < cache.size <= cache.max_size
