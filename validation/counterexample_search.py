"""Counterexample search — discovers gaps in implementation or tests.

This module runs independently of the test suite.  It systematically
searches the contract's small domains for:

1. Postcondition violations: admissible inputs where the evaluator
   doesn't match the reference definitions.
2. Error condition violations: inputs that should raise but don't (or
   raise the wrong exception).
3. Property violations: algebraic relationships that fail for some
   admissible input combination.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import sys
from dataclasses import dataclass, field

sys.path.insert(0, ".")

from bounds import WORD, Bounds
from contract import BUDGET_ERRORS, HyperContract, build_contract
from hyperop import DEFAULT_MAX_DEPTH, _describe


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
            lines.append("\nNo counterexamples found — all checks passed.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_postcondition_violations(
    contract: HyperContract,
) -> tuple[list[Counterexample], int]:
    """Verify postconditions for every admissible input."""
    calc = contract.calculator()
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_spec in contract.operations.items():
        op = getattr(calc, op_name)
        for args in op_spec.inputs():
            checks += 1
            # Skip inputs that are supposed to error
            if op_spec.expected_error(*args) is not None:
                continue

            try:
                result = op(*args)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    operation=op_name,
                    inputs=args,
                    expected="no error",
                    actual=f"{type(e).__name__}: {e}",
                    description="Operation raised an unexpected exception",
                ))
                continue

            for post in op_spec.postconditions:
                if not post.check(*args, result):
                    cxs.append(Counterexample(
                        category="postcondition_violation",
                        operation=op_name,
                        inputs=args,
                        expected=post.description,
                        actual=f"result={_describe(result)}",
                        description=f"Postcondition '{post.name}' violated",
                    ))

    return cxs, checks


def search_error_condition_violations(
    contract: HyperContract,
) -> tuple[list[Counterexample], int]:
    """Verify every error condition triggers the right exception.

    Triggers are cheap to evaluate over the whole domain, and a
    triggered budget error surfaces before any large value is built.
    """
    calc = contract.calculator()
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_spec in contract.operations.items():
        op = getattr(calc, op_name)
        for args in op_spec.all_inputs():
            ec = op_spec.expected_error(*args)
            if ec is None:
                continue
            checks += 1
            try:
                result = op(*args)
                cxs.append(Counterexample(
                    category="missing_error",
                    operation=op_name,
                    inputs=args,
                    expected=f"{ec.exception.__name__}",
                    actual=f"result={_describe(result)}",
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
                    inputs=args,
                    expected=f"{ec.exception.__name__}",
                    actual=f"{type(e).__name__}: {e}",
                    description=f"Wrong exception type for '{ec.name}'",
                ))

    return cxs, checks


def search_property_violations(
    contract: HyperContract,
) -> tuple[list[Counterexample], int]:
    """Check every algebraic property on every admissible input."""
    calc = contract.calculator()
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, prop in contract.all_properties:
        for args in contract.operations[op_name].inputs():
            checks += 1
            try:
                ok = prop.check(calc, *args)
            except BUDGET_ERRORS:
                continue
            if not ok:
                cxs.append(Counterexample(
                    category="property_violation",
                    operation=op_name,
                    inputs=args,
                    expected=prop.description,
                    actual="property does not hold",
                    description=f"Property '{prop.name}' violated",
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(
    word: Bounds = WORD,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_bits: int | None = None,
) -> SearchReport:
    """Run complete counterexample search for one configuration."""
    contract = build_contract(word, max_depth, max_bits)
    report = SearchReport()

    for search_fn in (
        search_postcondition_violations,
        search_error_condition_violations,
        search_property_violations,
    ):
        cxs, checks = search_fn(contract)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    """Run counterexample search across several configurations."""
    configs = [
        ("default word, unlimited", WORD, DEFAULT_MAX_DEPTH, None),
        ("squaring only [0, 0]", Bounds(0, 0), DEFAULT_MAX_DEPTH, None),
        ("shallow walk (depth 1)", WORD, 1, None),
        ("narrow values (64 bits)", WORD, DEFAULT_MAX_DEPTH, 64),
    ]

    all_passed = True
    for name, word, max_depth, max_bits in configs:
        print(f"\n--- Configuration: {name} ---")
        report = run_search(word, max_depth, max_bits)
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
