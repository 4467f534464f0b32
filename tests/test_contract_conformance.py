"""Contract conformance tests.

These tests are *driven by* the contract: they iterate over every
postcondition, error condition, and algebraic property defined in
``contract.build_contract`` and verify the implementation satisfies them.

If the contract changes (e.g. a new postcondition is added), these tests
automatically cover it without any manual test authoring.
"""
from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis.strategies import integers, sampled_from

from contract import ALL_MODES, Box, build_contract
from digits import count_digits, count_digits_and_trailing_zeros
from division import divide
from powcache import PowCacheRegistry

# ---------------------------------------------------------------------------
# Configuration: a small box so exhaustive checks are fast
# ---------------------------------------------------------------------------

BOX = Box(lo=-16, hi=16)
CONTRACT = build_contract()
REGISTRY = PowCacheRegistry()
bounded = integers(min_value=BOX.lo, max_value=BOX.hi)
values = integers(min_value=-(10 ** 200), max_value=10 ** 200)
bases = integers(min_value=3, max_value=10)
exponents = integers(min_value=0, max_value=1100)


def pow_cache_get(basis: int, e: int) -> int:
    return REGISTRY.get_cache(basis).get(e)


OPS = {
    "divide": divide,
    "count_digits": count_digits,
    "count_digits_and_trailing_zeros": count_digits_and_trailing_zeros,
    "pow_cache_get": pow_cache_get,
}


def _check_postconditions(op_name: str, *args) -> None:
    result = OPS[op_name](*args)
    for post in CONTRACT.operations[op_name].postconditions:
        assert post.check(*args, result), (
            f"Postcondition '{post.name}' failed: {op_name}{args} = {result}"
        )


# ===================================================================
# POSTCONDITIONS: property-based
# ===================================================================

class TestPostconditions:
    """Every postcondition in the contract holds for random inputs."""

    @given(a=values, d=values, mode=sampled_from(ALL_MODES))
    @settings(max_examples=300)
    def test_divide_postconditions(self, a, d, mode):
        if d == 0:
            d = 1
        _check_postconditions("divide", a, d, mode)

    @given(v=values)
    @settings(max_examples=300)
    def test_count_digits_postconditions(self, v):
        _check_postconditions("count_digits", v)

    @given(v=values)
    @settings(max_examples=300)
    def test_count_digits_and_trailing_zeros_postconditions(self, v):
        _check_postconditions("count_digits_and_trailing_zeros", v)

    @given(m=integers(min_value=1, max_value=10 ** 50), k=integers(min_value=0, max_value=150))
    def test_trailing_zero_heavy_postconditions(self, m, k):
        _check_postconditions("count_digits_and_trailing_zeros", m * 10 ** k)

    @given(basis=bases, e=exponents)
    @settings(max_examples=200)
    def test_pow_cache_postconditions(self, basis, e):
        _check_postconditions("pow_cache_get", basis, e)


# ===================================================================
# ERROR CONDITIONS
# ===================================================================

class TestErrorConditions:
    """Every error condition in the contract triggers correctly."""

    @pytest.mark.parametrize("inputs", [
        (5, 0, mode) for mode in ALL_MODES
    ] + [
        (5, 2, -1), (5, 2, 9), (5, 0, 9),
    ])
    def test_divide(self, inputs):
        triggered = [
            ec for ec in CONTRACT.operations["divide"].error_conditions
            if ec.trigger(*inputs)
        ]
        assert len(triggered) == 1
        with pytest.raises(triggered[0].exception):
            divide(*inputs)

    @pytest.mark.parametrize("inputs", [
        (1, 0), (2, 5), (11, 0), (0, -1), (5, -1), (10, -7),
    ])
    def test_pow_cache(self, inputs):
        triggered = [
            ec for ec in CONTRACT.operations["pow_cache_get"].error_conditions
            if ec.trigger(*inputs)
        ]
        assert len(triggered) == 1
        with pytest.raises(triggered[0].exception):
            pow_cache_get(*inputs)


# ===================================================================
# ALGEBRAIC PROPERTIES: property-based
# ===================================================================

class TestAlgebraicProperties:
    """Every algebraic property in the contract holds for random inputs."""

    @given(a=bounded, b=bounded)
    @settings(max_examples=300)
    def test_divide_binary_properties(self, a, b):
        for op_name, prop in CONTRACT.all_properties:
            if op_name != "divide" or prop.arity != 2:
                continue
            assert prop.check(divide, a, b), (
                f"Property '{prop.name}' failed for {op_name}({a}, {b})"
            )

    @given(a=values)
    @settings(max_examples=300)
    def test_unary_properties(self, a):
        for op_name, prop in CONTRACT.all_properties:
            if prop.arity != 1 or op_name == "pow_cache_get":
                continue
            arg = a
            if prop.name in ("powers_of_ten", "below_powers_of_ten"):
                arg = a % 400
            assert prop.check(OPS[op_name], arg), (
                f"Property '{prop.name}' failed for {op_name}({arg})"
            )

    @given(basis=bases, e=exponents)
    def test_pow_cache_properties(self, basis, e):
        for op_name, prop in CONTRACT.all_properties:
            if op_name != "pow_cache_get":
                continue
            assert prop.check(pow_cache_get, basis, e), (
                f"Property '{prop.name}' failed for {op_name}({basis}, {e})"
            )


# ===================================================================
# EXHAUSTIVE VERIFICATION: small box
# ===================================================================

class TestExhaustive:
    """For a small box, check *every* input against the postconditions."""

    def test_all_divide_triples(self):
        checked = 0
        for a in BOX.all_values():
            for d in BOX.nonzero_values():
                for mode in ALL_MODES:
                    _check_postconditions("divide", a, d, mode)
                    checked += 1
        assert checked == BOX.width * (BOX.width - 1) * len(ALL_MODES)

    def test_all_digit_counts(self):
        for v in range(-20_000, 20_001):
            _check_postconditions("count_digits", v)
            _check_postconditions("count_digits_and_trailing_zeros", v)

    def test_all_small_powers(self):
        for basis in range(3, 11):
            for e in range(200):
                _check_postconditions("pow_cache_get", basis, e)

    def test_box_dimensions(self):
        assert BOX.width == 33
        assert len(BOX.nonzero_values()) == 32
        assert BOX.contains(0) and not BOX.contains(17)


# ===================================================================
# CONTRACT SHAPE
# ===================================================================

class TestContractShape:

    def test_every_operation_has_an_implementation(self):
        assert set(CONTRACT.operations) == set(OPS)

    def test_every_operation_has_postconditions(self):
        for name, op in CONTRACT.operations.items():
            assert op.postconditions, name

    def test_branch_ids_unique(self):
        ids = CONTRACT.branch_ids()
        assert len(ids) == len(set(ids))

    def test_branch_ids_by_operation(self):
        assert "RND-HALF-EVEN" in CONTRACT.branch_ids("divide")
        assert "RND-HALF-EVEN" not in CONTRACT.branch_ids("pow_cache")

    def test_idempotent_requires_cached_identity(self):
        idempotent = next(
            prop for op_name, prop in CONTRACT.all_properties
            if op_name == "pow_cache_get" and prop.name == "idempotent"
        )
        assert idempotent.check(pow_cache_get, 3, 300)
        assert not idempotent.check(lambda basis, e: basis ** e, 3, 300)
        # Uncached exponents are only required to agree in value.
        assert idempotent.check(lambda basis, e: basis ** e, 3, 5000)

    def test_box_rejects_inverted_bounds(self):
        with pytest.raises(ValueError):
            Box(lo=3, hi=2)
