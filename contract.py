"""Formal contract for the hyperoperation evaluator.

Each operation is specified as a collection of:
- preconditions: which inputs are admissible for exhaustive checking
- postconditions: what the output must satisfy given admissible inputs
- error conditions: what inputs must cause specific exceptions
- algebraic properties: mathematical relationships that must hold

The contract is machine-readable.  Validation tools iterate over it to
auto-generate conformance tests and search for counterexamples.

Layers
------
reference_*       slow, obviously-correct definitions used in predicates
tractable()       inputs whose value is small enough to enumerate
OperationSpec     per-operation contract (pre/post/error/properties)
BranchSpec        every decision point that white-box tests must cover
HyperContract     the full contract for a configured calculator
build_contract()  constructs a HyperContract for a given configuration
"""
from __future__ import annotations

import itertools
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Callable

from bounds import WORD, Bounds
from hyperop import (
    DEFAULT_MAX_DEPTH,
    HyperCalculator,
    RecursionBudgetExceeded,
    ResultSizeExceeded,
    pow_by_squaring,
)


# ---------------------------------------------------------------------------
# Reference definitions
# ---------------------------------------------------------------------------

def reference_pow(base: int, exp: int) -> int:
    """Repeated multiplication; only for small exponents."""
    result = 1
    for _ in range(exp):
        result *= base
    return result


def reference_hyper(order: int, base: int, exp: int) -> int:
    """Textbook recursive definition of the hyperoperation sequence.

    Recursion depth grows with ``exp`` and ``order``; keep both small.
    """
    if order == 0:
        return exp + 1
    if order == 1:
        return base + exp
    if order == 2:
        return base * exp
    if order == 3:
        return reference_pow(base, exp)
    if exp == 0:
        return 1
    return reference_hyper(order - 1, base, reference_hyper(order, base, exp - 1))


def reference_ackermann(m: int, n: int) -> int:
    """Classical double recursion; tractable for m <= 3 and n <= 5."""
    if m == 0:
        return n + 1
    if n == 0:
        return reference_ackermann(m - 1, 1)
    return reference_ackermann(m - 1, reference_ackermann(m, n - 1))


def reference_graham(n: int, base: int = 3) -> int:
    x = 4
    for _ in range(n):
        x = reference_hyper(x + 2, base, base)
    return x


def tractable(order: int, base: int, exp: int) -> bool:
    """True when H(order, base, exp) is small enough to compute in a test run."""
    if order <= 3 or base <= 1 or exp <= 1:
        return True
    if base == 2 and exp == 2:
        return True
    if order == 4:
        return exp <= 3 or (base == 2 and exp <= 5)
    if order == 5:
        return (base, exp) in ((2, 3), (3, 2))
    return False


def walk_depth(order: int, base: int, exp: int) -> int:
    """Pending frames the evaluator needs for H(order, base, exp)."""
    if order < 4 or base < 2 or exp < 2 or (base, exp) == (2, 2):
        return 0
    return order - 3


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
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationSpec:
    name: str
    arity: int
    domain: Bounds      # every argument is drawn from this range
    preconditions: list[Precondition]
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty] = field(default_factory=list)

    def all_inputs(self) -> Iterator[tuple[int, ...]]:
        return itertools.product(self.domain.all_values(), repeat=self.arity)

    def admissible(self, *args: int) -> bool:
        return all(pre.check(*args) for pre in self.preconditions)

    def inputs(self) -> Iterator[tuple[int, ...]]:
        """Every domain tuple that satisfies all preconditions."""
        return (args for args in self.all_inputs() if self.admissible(*args))

    def expected_error(self, *args: int) -> ErrorCondition | None:
        for ec in self.error_conditions:
            if ec.trigger(*args):
                return ec
        return None


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class HyperContract:
    """Complete contract for a configured calculator."""

    word: Bounds
    max_depth: int
    max_bits: int | None
    operations: dict[str, OperationSpec]
    branches: list[BranchSpec]

    def calculator(self) -> HyperCalculator:
        return HyperCalculator(
            word=self.word, max_depth=self.max_depth, max_bits=self.max_bits
        )

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


# Exceptions a budgeted calculator may legitimately raise
BUDGET_ERRORS = (RecursionBudgetExceeded, ResultSizeExceeded)


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract(
    word: Bounds = WORD,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_bits: int | None = None,
) -> HyperContract:
    """Construct the full evaluator contract for a configuration."""

    def _too_wide(value: int) -> bool:
        return max_bits is not None and value.bit_length() > max_bits

    # ------------------------------------------------------------------ pow
    pow_spec = OperationSpec(
        name="pow",
        arity=2,
        domain=Bounds(0, 12),
        preconditions=[
            Precondition(
                "non_negative",
                "Both inputs are non-negative",
                lambda base, exp: base >= 0 and exp >= 0,
            ),
        ],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result equals repeated multiplication",
                lambda base, exp, result: result == reference_pow(base, exp),
            ),
            Postcondition(
                "result_within_budget",
                "Result fits the bit budget",
                lambda base, exp, result: not _too_wide(result),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "bit_budget",
                "ResultSizeExceeded when base ** exp is wider than max_bits",
                lambda base, exp: _too_wide(reference_pow(base, exp)),
                ResultSizeExceeded,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "zero_exponent", "pow(a, 0) == 1",
                lambda calc, a, _: calc.pow(a, 0) == 1,
            ),
            AlgebraicProperty(
                "unit_exponent", "pow(a, 1) == a",
                lambda calc, a, _: calc.pow(a, 1) == a,
            ),
            AlgebraicProperty(
                "squaring_agrees", "pow(a, b) == pow_by_squaring(a, b)",
                lambda calc, a, b: calc.pow(a, b) == pow_by_squaring(a, b),
            ),
            AlgebraicProperty(
                "product_of_powers", "pow(a, b + 1) == pow(a, b) * a",
                lambda calc, a, b: calc.pow(a, b + 1) == calc.pow(a, b) * a,
            ),
        ],
    )

    # ------------------------------------------------------------- hyper_op
    hyper_spec = OperationSpec(
        name="hyper_op",
        arity=3,
        domain=Bounds(0, 5),
        preconditions=[
            Precondition(
                "non_negative",
                "All inputs are non-negative",
                lambda order, base, exp: min(order, base, exp) >= 0,
            ),
            Precondition(
                "tractable",
                "Value small enough to enumerate",
                tractable,
            ),
        ],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result equals the recursive definition",
                lambda order, base, exp, result: (
                    result == reference_hyper(order, base, exp)
                ),
            ),
            Postcondition(
                "result_within_budget",
                "Result fits the bit budget",
                lambda order, base, exp, result: not _too_wide(result),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "depth_budget",
                "RecursionBudgetExceeded when the walk needs more than max_depth frames",
                lambda order, base, exp: walk_depth(order, base, exp) > max_depth,
                RecursionBudgetExceeded,
            ),
            ErrorCondition(
                "bit_budget",
                "ResultSizeExceeded when the value is wider than max_bits",
                lambda order, base, exp: (
                    max_bits is not None and tractable(order, base, exp)
                    and _too_wide(reference_hyper(order, base, exp))
                ),
                ResultSizeExceeded,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "successor", "H(0, a, n) == n + 1",
                lambda calc, _, a, n: calc.hyper_op(0, a, n) == n + 1,
            ),
            AlgebraicProperty(
                "addition", "H(1, a, n) == a + n",
                lambda calc, _, a, n: calc.hyper_op(1, a, n) == a + n,
            ),
            AlgebraicProperty(
                "multiplication", "H(2, a, n) == a * n",
                lambda calc, _, a, n: calc.hyper_op(2, a, n) == a * n,
            ),
            AlgebraicProperty(
                "zero_exponent", "H(k, a, 0) == 1 for k >= 3",
                lambda calc, k, a, _: k < 3 or calc.hyper_op(k, a, 0) == 1,
            ),
            AlgebraicProperty(
                "unit_exponent", "H(k, a, 1) == a for k >= 2",
                lambda calc, k, a, _: k < 2 or calc.hyper_op(k, a, 1) == a,
            ),
            AlgebraicProperty(
                "unit_base", "H(k, 1, n) == 1 for k >= 3",
                lambda calc, k, _, n: k < 3 or calc.hyper_op(k, 1, n) == 1,
            ),
            AlgebraicProperty(
                "zero_base_parity", "H(k, 0, n) == 1 - n % 2 for k >= 4",
                lambda calc, k, _, n: k < 4 or calc.hyper_op(k, 0, n) == 1 - n % 2,
            ),
            AlgebraicProperty(
                "two_two_is_four", "H(k, 2, 2) == 4 for k >= 1",
                lambda calc, k, _a, _n: k < 1 or calc.hyper_op(k, 2, 2) == 4,
            ),
            AlgebraicProperty(
                "recurrence", "H(k, a, n) == H(k-1, a, H(k, a, n-1)) for k >= 4, n >= 1",
                lambda calc, k, a, n: (
                    k < 4 or n < 1
                    or calc.hyper_op(k, a, n)
                    == calc.hyper_op(k - 1, a, calc.hyper_op(k, a, n - 1))
                ),
            ),
        ],
    )

    # ------------------------------------------------------------ ackermann
    ack_spec = OperationSpec(
        name="ackermann",
        arity=2,
        domain=Bounds(0, 5),
        preconditions=[
            Precondition(
                "non_negative",
                "Both inputs are non-negative",
                lambda m, n: m >= 0 and n >= 0,
            ),
            Precondition(
                "classical_reference",
                "Classical recursion terminates quickly (m <= 3)",
                lambda m, n: m <= 3,
            ),
        ],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result equals the classical double recursion",
                lambda m, n, result: result == reference_ackermann(m, n),
            ),
            Postcondition(
                "exceeds_argument",
                "A(m, n) > n",
                lambda m, n, result: result > n,
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "depth_budget",
                "RecursionBudgetExceeded when H(m, 2, n + 3) needs more than max_depth frames",
                lambda m, n: walk_depth(m, 2, n + 3) > max_depth,
                RecursionBudgetExceeded,
            ),
            ErrorCondition(
                "bit_budget",
                "ResultSizeExceeded when H(m, 2, n + 3) is wider than max_bits",
                lambda m, n: (
                    max_bits is not None and tractable(m, 2, n + 3)
                    and _too_wide(reference_hyper(m, 2, n + 3))
                ),
                ResultSizeExceeded,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "row_zero", "A(0, n) == n + 1",
                lambda calc, _, n: calc.ackermann(0, n) == n + 1,
            ),
            AlgebraicProperty(
                "row_one", "A(1, n) == n + 2",
                lambda calc, _, n: calc.ackermann(1, n) == n + 2,
            ),
            AlgebraicProperty(
                "row_two", "A(2, n) == 2n + 3",
                lambda calc, _, n: calc.ackermann(2, n) == 2 * n + 3,
            ),
            AlgebraicProperty(
                "row_three", "A(3, n) == 2 ** (n + 3) - 3",
                lambda calc, _, n: calc.ackermann(3, n) == 2 ** (n + 3) - 3,
            ),
            AlgebraicProperty(
                "column_zero", "A(m, 0) == A(m - 1, 1) for m >= 1",
                lambda calc, m, _: (
                    m < 1 or calc.ackermann(m, 0) == calc.ackermann(m - 1, 1)
                ),
            ),
        ],
    )

    # --------------------------------------------------------------- graham
    graham_spec = OperationSpec(
        name="graham",
        arity=2,
        domain=Bounds(0, 3),
        preconditions=[
            Precondition(
                "non_negative",
                "Both inputs are non-negative",
                lambda n, base: n >= 0 and base >= 0,
            ),
            Precondition(
                "tractable",
                "Terms stay small (n == 0 or base <= 2)",
                lambda n, base: n == 0 or base <= 2,
            ),
        ],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result equals the iterated recursive definition",
                lambda n, base, result: result == reference_graham(n, base),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "depth_budget",
                "RecursionBudgetExceeded when H(6, base, base) needs more than max_depth frames",
                lambda n, base: n >= 1 and walk_depth(6, base, base) > max_depth,
                RecursionBudgetExceeded,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "starts_at_four", "graham(0, b) == 4",
                lambda calc, _, b: calc.graham(0, b) == 4,
            ),
            AlgebraicProperty(
                "base_two_fixed_point", "graham(n, 2) == 4",
                lambda calc, n, _: calc.graham(n, 2) == 4,
            ),
        ],
    )

    # -------------------------------------------------------------- branches
    branches = [
        # Input validation (_validate)
        BranchSpec(
            "INPUT-VALID",
            "All inputs non-negative",
            "all(v >= 0 for v in values)",
            "validation",
        ),
        BranchSpec(
            "INPUT-NEGATIVE",
            "A negative input is rejected with ValueError",
            "any(v < 0 for v in values)",
            "validation",
        ),
        # Bit budget (_check_bits)
        BranchSpec(
            "BITS-UNLIMITED",
            "No bit budget configured",
            "max_bits is None",
            "budget",
        ),
        BranchSpec(
            "BITS-WITHIN",
            "Value fits the bit budget",
            "value.bit_length() <= max_bits",
            "budget",
        ),
        BranchSpec(
            "BITS-EXCEEDED",
            "ResultSizeExceeded raised",
            "value.bit_length() > max_bits",
            "budget",
        ),
        # Exponentiation (_pow)
        BranchSpec(
            "POW-ZERO-EXP",
            "Zero exponent yields 1",
            "exp == 0",
            "pow",
        ),
        BranchSpec(
            "POW-ZERO-BASE",
            "Zero base yields 0",
            "base == 0 and exp > 0",
            "pow",
        ),
        BranchSpec(
            "POW-ONE-BASE",
            "Unit base yields 1",
            "base == 1",
            "pow",
        ),
        BranchSpec(
            "POW-BITS-FLOOR",
            "Result provably wider than the budget, refused before computing",
            "(base.bit_length() - 1) * exp + 1 > max_bits",
            "pow",
        ),
        BranchSpec(
            "POW-FAST",
            "Exponent fits the machine word, built-in exponentiation",
            "word.contains(exp)",
            "pow",
        ),
        BranchSpec(
            "POW-SQUARE",
            "Exponent exceeds the machine word, exponentiation by squaring",
            "not word.contains(exp)",
            "pow",
        ),
        # Closed forms (_direct)
        BranchSpec("HYP-SUCC", "Successor", "order == 0", "hyper_op"),
        BranchSpec("HYP-ADD", "Addition", "order == 1", "hyper_op"),
        BranchSpec("HYP-MUL", "Multiplication", "order == 2", "hyper_op"),
        BranchSpec("HYP-POW", "Exponentiation", "order == 3", "hyper_op"),
        BranchSpec(
            "HYP-EXP-ZERO",
            "Empty tower yields 1",
            "order >= 4 and exp == 0",
            "hyper_op",
        ),
        BranchSpec(
            "HYP-EXP-ONE",
            "Single-element tower yields base",
            "order >= 4 and exp == 1",
            "hyper_op",
        ),
        BranchSpec(
            "HYP-BASE-ONE",
            "Towers of ones yield 1",
            "order >= 4 and base == 1 and exp >= 2",
            "hyper_op",
        ),
        BranchSpec(
            "HYP-BASE-ZERO",
            "Towers of zeros alternate by exponent parity",
            "order >= 4 and base == 0 and exp >= 2",
            "hyper_op",
        ),
        BranchSpec(
            "HYP-TWO-TWO",
            "H(k, 2, 2) collapses to 2 * 2 at every order",
            "order >= 4 and base == 2 and exp == 2",
            "hyper_op",
        ),
        BranchSpec(
            "HYP-WALK",
            "Non-degenerate order >= 4 needs the exponent walk",
            "order >= 4 and base >= 2 and exp >= 2 and (base, exp) != (2, 2)",
            "hyper_op",
        ),
        # Exponent walk (_walk)
        BranchSpec(
            "WALK-RESOLVE",
            "Next step has a closed form at the lower order",
            "_direct(order - 1, base, acc) is not None",
            "walk",
        ),
        BranchSpec(
            "WALK-DESCEND",
            "Next step pushes a frame one order lower",
            "_direct(order - 1, base, acc) is None and depth < max_depth",
            "walk",
        ),
        BranchSpec(
            "WALK-RETURN",
            "Finished frame hands its value to the parent",
            "frame.remaining == 0",
            "walk",
        ),
        BranchSpec(
            "WALK-DEPTH-EXCEEDED",
            "RecursionBudgetExceeded raised",
            "depth >= max_depth and a descent is needed",
            "walk",
        ),
        # Facades
        BranchSpec(
            "ACK-OK",
            "Hyperoperation value at least 3",
            "H(m, 2, n + 3) >= 3",
            "ackermann",
        ),
        BranchSpec(
            "ACK-UNDERFLOW",
            "Checked subtraction refuses to go negative",
            "H(m, 2, n + 3) < 3",
            "ackermann",
        ),
        BranchSpec(
            "GRAHAM-FIRST",
            "The first term is 4",
            "n == 0",
            "graham",
        ),
        BranchSpec(
            "GRAHAM-BASE-TWO",
            "Base 2 keeps every term at 4",
            "n >= 1 and base == 2",
            "graham",
        ),
        BranchSpec(
            "GRAHAM-BASE-DEGENERATE",
            "Bases 0 and 1 collapse every term to 1",
            "n >= 1 and base <= 1",
            "graham",
        ),
        BranchSpec(
            "GRAHAM-ITERATE",
            "Each term becomes H(x + 2, base, base)",
            "n >= 1 and base >= 3",
            "graham",
        ),
    ]

    return HyperContract(
        word=word,
        max_depth=max_depth,
        max_bits=max_bits,
        operations={
            "pow": pow_spec,
            "hyper_op": hyper_spec,
            "ackermann": ack_spec,
            "graham": graham_spec,
        },
        branches=branches,
    )
