"""Counterexample search: discovers gaps in implementation or tests.

This module runs independently of the test suite.  It systematically
searches for:

1. Postcondition violations: inputs where the implementation doesn't
   match the contract's reference model.
2. Error condition violations: inputs that should raise but don't (or
   raise the wrong exception).
3. Property violations: algebraic relationships that fail for some
   input combination.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Callable

sys.path.insert(0, ".")

from contract import ALL_MODES, Box, LibraryContract, build_contract
from digits import count_digits, count_digits_and_trailing_zeros
from division import divide
from limbs import optimizations_enabled
from powcache import PowCacheRegistry


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.operation}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found: all checks passed.")
        return "\n".join(lines)


def implementations(registry: PowCacheRegistry) -> dict[str, Callable[..., Any]]:
    """Map each contract operation name to the callable under test."""
    return {
        "divide": divide,
        "count_digits": count_digits,
        "count_digits_and_trailing_zeros": count_digits_and_trailing_zeros,
        "pow_cache_get": lambda basis, e: registry.get_cache(basis).get(e),
    }


def digit_samples(box: Box, max_power: int) -> list[int]:
    """Every value in ``box`` plus powers of ten and their neighbours."""
    samples = list(box.all_values())
    for k in range(max_power + 1):
        p = 10 ** k
        samples.extend((p - 1, p, p + 1, -p, 2 * p, 5 * p))
    return samples


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def _call_inputs(op_name: str, inputs: tuple, ops: dict[str, Callable[..., Any]]) -> Any:
    return ops[op_name](*inputs)


def search_postcondition_violations(
    contract: LibraryContract,
    ops: dict[str, Callable[..., Any]],
    inputs_by_op: dict[str, list[tuple]],
) -> tuple[list[Counterexample], int]:
    """Verify postconditions for every supplied input tuple."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_contract in contract.operations.items():
        for inputs in inputs_by_op.get(op_name, []):
            # Skip inputs that are supposed to error
            should_error = any(
                ec.trigger(*inputs) for ec in op_contract.error_conditions
            )
            checks += 1
            if should_error:
                continue

            try:
                result = _call_inputs(op_name, inputs, ops)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    operation=op_name,
                    inputs=inputs,
                    expected="no error",
                    actual=f"{type(e).__name__}: {e}",
                    description="Operation raised an unexpected exception",
                ))
                continue

            for post in op_contract.postconditions:
                if not post.check(*inputs, result):
                    cxs.append(Counterexample(
                        category="postcondition_violation",
                        operation=op_name,
                        inputs=inputs,
                        expected=post.description,
                        actual=f"result={result}",
                        description=f"Postcondition '{post.name}' violated",
                    ))

    return cxs, checks


def search_error_condition_violations(
    contract: LibraryContract,
    ops: dict[str, Callable[..., Any]],
    inputs_by_op: dict[str, list[tuple]],
) -> tuple[list[Counterexample], int]:
    """Verify every error condition triggers the right exception."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_contract in contract.operations.items():
        for inputs in inputs_by_op.get(op_name, []):
            for ec in op_contract.error_conditions:
                if not ec.trigger(*inputs):
                    continue
                checks += 1
                try:
                    result = _call_inputs(op_name, inputs, ops)
                    cxs.append(Counterexample(
                        category="missing_error",
                        operation=op_name,
                        inputs=inputs,
                        expected=f"{ec.exception.__name__}",
                        actual=f"result={result}",
                        description=(
                            f"Error condition '{ec.name}' should have "
                            f"triggered but didn't"
                        ),
                    ))
                except ec.exception:
                    pass  # expected
                except Exception as e:
                    cxs.append(Counterexample(
                        category="wrong_error",
                        operation=op_name,
                        inputs=inputs,
                        expected=f"{ec.exception.__name__}",
                        actual=f"{type(e).__name__}: {e}",
                        description=f"Wrong exception type for '{ec.name}'",
                    ))

    return cxs, checks


def search_property_violations(
    contract: LibraryContract,
    ops: dict[str, Callable[..., Any]],
    box: Box,
) -> tuple[list[Counterexample], int]:
    """Exhaustively check every algebraic property over ``box``."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, prop in contract.all_properties:
        op = ops[op_name]
        if prop.arity == 2:
            combos = [(a, b) for a in box.all_values() for b in box.all_values()]
        else:
            combos = [(a,) for a in box.all_values()]

        for combo in combos:
            checks += 1
            if not prop.check(op, *combo):
                cxs.append(Counterexample(
                    category="property_violation",
                    operation=op_name,
                    inputs=combo,
                    expected=prop.description,
                    actual="property does not hold",
                    description=f"Property '{prop.name}' violated",
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def build_inputs(box: Box, max_power: int) -> dict[str, list[tuple]]:
    """Input tuples per operation for one search configuration."""
    unknown_modes = (-1, len(ALL_MODES), 42)
    divide_inputs = [
        (a, d, m)
        for a in box.all_values()
        for d in box.all_values()
        for m in ALL_MODES
    ]
    divide_inputs.extend((7, 2, m) for m in unknown_modes)

    digit_inputs = [(v,) for v in digit_samples(box, max_power)]

    pow_inputs = [
        (basis, e)
        for basis in range(1, 13)
        for e in range(-2, max_power + 1)
    ]

    return {
        "divide": divide_inputs,
        "count_digits": digit_inputs,
        "count_digits_and_trailing_zeros": digit_inputs,
        "pow_cache_get": pow_inputs,
    }


def run_search(box: Box, max_power: int) -> SearchReport:
    """Run complete counterexample search for one configuration."""
    contract = build_contract()
    ops = implementations(PowCacheRegistry())
    inputs_by_op = build_inputs(box, max_power)
    report = SearchReport()

    for cxs, checks in (
        search_postcondition_violations(contract, ops, inputs_by_op),
        search_error_condition_violations(contract, ops, inputs_by_op),
        search_property_violations(contract, ops, box),
    ):
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    """Run counterexample search across several configurations."""
    configs = [
        ("box [-12, 12], powers to 10**40", Box(-12, 12), 40),
        ("box [-30, 30], powers to 10**160", Box(-30, 30), 160),
    ]

    print(f"limb optimizations enabled: {optimizations_enabled()}")

    all_passed = True
    for name, box, max_power in configs:
        print(f"\n--- Configuration: {name} ---")
        report = run_search(box, max_power)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL CONFIGURATIONS PASSED")
    else:
        print("SOME CONFIGURATIONS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
