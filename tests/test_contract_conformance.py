"""Contract conformance tests.

These tests are *driven by* the contract: they iterate over every
postcondition, error condition, and algebraic property defined in
``contract.build_contract`` and verify the evaluator satisfies them.

If the contract changes (e.g. a new postcondition is added), these
tests automatically cover it.
"""
from __future__ import annotations

import pytest

from bounds import Bounds
from contract import (
    BUDGET_ERRORS,
    build_contract,
    reference_ackermann,
    reference_hyper,
    tractable,
    walk_depth,
)
from hyperop import RecursionBudgetExceeded, ResultSizeExceeded
from validation.counterexample_search import run_search

# ---------------------------------------------------------------------------
# Configurations: unlimited, squaring-only, shallow walk, narrow values
# ---------------------------------------------------------------------------

CONTRACT = build_contract()
CALC = CONTRACT.calculator()

CONFIGS = {
    "unlimited": {},
    "squaring": {"word": Bounds(0, 0)},
    "shallow": {"max_depth": 1},
    "narrow": {"max_bits": 64},
}


# ===================================================================
# POSTCONDITIONS: exhaustive over each operation's domain
# ===================================================================

class TestPostconditions:
    """Every postcondition holds for every admissible input."""

    @pytest.mark.parametrize("op_name", sorted(CONTRACT.operations))
    def test_postconditions(self, op_name):
        op_spec = CONTRACT.operations[op_name]
        op = getattr(CALC, op_name)
        checked = 0
        for args in op_spec.inputs():
            result = op(*args)
            for post in op_spec.postconditions:
                assert post.check(*args, result), (
                    f"Postcondition '{post.name}' failed: {op_name}{args} = {result}"
                )
            checked += 1
        assert checked > 0


# ===================================================================
# ERROR CONDITIONS
# ===================================================================

class TestErrorConditions:
    """Every error condition triggers exactly where the contract says."""

    @pytest.mark.parametrize("config", ["shallow", "narrow"])
    def test_triggers_raise(self, config):
        contract = build_contract(**CONFIGS[config])
        calc = contract.calculator()
        triggered = 0
        for op_name, op_spec in contract.operations.items():
            op = getattr(calc, op_name)
            for args in op_spec.all_inputs():
                ec = op_spec.expected_error(*args)
                if ec is None:
                    continue
                triggered += 1
                with pytest.raises(ec.exception):
                    op(*args)
        assert triggered > 0

    @pytest.mark.parametrize("op_name", ["hyper_op", "ackermann", "graham"])
    def test_shallow_config_reaches_every_depth_budget(self, op_name):
        contract = build_contract(**CONFIGS["shallow"])
        op_spec = contract.operations[op_name]
        hits = [
            args for args in op_spec.all_inputs()
            if (ec := op_spec.expected_error(*args)) is not None
            and ec.name == "depth_budget"
        ]
        assert hits, f"{op_name} never exceeds max_depth in its domain"

    def test_unlimited_config_has_no_reachable_errors(self):
        for op_spec in CONTRACT.operations.values():
            for args in op_spec.inputs():
                assert op_spec.expected_error(*args) is None

    def test_budget_errors_are_builtin_families(self):
        assert issubclass(RecursionBudgetExceeded, RecursionError)
        assert issubclass(ResultSizeExceeded, OverflowError)
        assert set(BUDGET_ERRORS) == {RecursionBudgetExceeded, ResultSizeExceeded}


# ===================================================================
# ALGEBRAIC PROPERTIES: exhaustive
# ===================================================================

class TestAlgebraicProperties:
    """Every algebraic property holds on every admissible input."""

    @pytest.mark.parametrize(
        "op_name, prop",
        CONTRACT.all_properties,
        ids=[f"{op}-{p.name}" for op, p in CONTRACT.all_properties],
    )
    def test_property(self, op_name, prop):
        for args in CONTRACT.operations[op_name].inputs():
            assert prop.check(CALC, *args), (
                f"Property '{prop.name}' failed for {op_name}{args}"
            )


# ===================================================================
# REFERENCE DEFINITIONS
# ===================================================================

class TestReferences:
    """The references agree with each other where they overlap."""

    def test_ackermann_matches_hyperoperation(self):
        for m in range(4):
            for n in range(5):
                assert reference_ackermann(m, n) == reference_hyper(m, 2, n + 3) - 3

    def test_walk_depth(self):
        assert walk_depth(3, 5, 5) == 0
        assert walk_depth(9, 1, 5) == 0
        assert walk_depth(9, 5, 1) == 0
        assert walk_depth(10, 2, 2) == 0
        assert walk_depth(10, 2, 3) == 7

    def test_tractable_excludes_towers(self):
        assert tractable(4, 2, 5)
        assert not tractable(4, 3, 4)
        assert not tractable(5, 3, 3)
        assert not tractable(6, 3, 3)

    def test_branch_ids_unique(self):
        ids = [b.id for b in CONTRACT.branches]
        assert len(ids) == len(set(ids))


# ===================================================================
# COUNTEREXAMPLE SEARCH
# ===================================================================

class TestCounterexampleSearch:

    @pytest.mark.parametrize("config", sorted(CONFIGS))
    def test_no_counterexamples(self, config):
        report = run_search(**CONFIGS[config])
        assert report.passed, report.summary()
        assert report.checks_run > 0
