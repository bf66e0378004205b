"""Hyperoperation evaluator over unbounded non-negative integers.

The evaluator computes the Knuth hyperoperation sequence

    H(0, a, b) = b + 1
    H(1, a, b) = a + b
    H(2, a, b) = a * b
    H(3, a, b) = a ** b
    H(n, a, b) = H(n - 1, a, H(n, a, b - 1))       n >= 4, H(n, a, 1) = a

and builds the Ackermann-Peter function and Graham's sequence on top of
it.  Orders >= 4 are walked on an explicit stack of pending frames, so
deep orders fail with ``RecursionBudgetExceeded`` instead of exhausting
the interpreter stack.

Decision branches are annotated with their branch-IDs (see contract.py
BranchSpec) so white-box tests can trace coverage back to the contract.
No floating point is used anywhere on the numeric path.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from bounds import WORD, Bounds

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100_000


def _describe(value: int) -> str:
    """Short rendering of a possibly astronomical integer."""
    if value.bit_length() <= 64:
        return str(value)
    return f"<{value.bit_length()}-bit integer>"


class RecursionBudgetExceeded(RecursionError):
    """Raised when an order walk needs more pending frames than allowed."""

    def __init__(self, order: int, max_depth: int) -> None:
        self.order = order
        self.max_depth = max_depth
        super().__init__(
            f"hyperoperation of order {_describe(order)} needs more than "
            f"{max_depth} pending frames"
        )


class ResultSizeExceeded(OverflowError):
    """Raised when a value would be wider than the configured bit budget."""

    def __init__(self, bits: int, max_bits: int) -> None:
        self.bits = bits
        self.max_bits = max_bits
        super().__init__(
            f"result needs at least {_describe(bits)} bits, budget is {max_bits}"
        )


def pow_by_squaring(base: int, exp: int) -> int:
    """Compute ``base ** exp`` with O(log exp) multiplications."""
    result = 1
    while exp > 1:
        if exp & 1:
            result *= base
        exp >>= 1
        base *= base
    return result * base if exp else result


@dataclass
class _Frame:
    """Pending walk at one order: ``acc = H(order - 1, base, acc)`` repeated."""

    order: int
    remaining: int
    acc: int


@dataclass(frozen=True)
class HyperCalculator:
    word: Bounds = WORD
    max_depth: int = DEFAULT_MAX_DEPTH
    max_bits: int | None = None

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")
        if self.max_bits is not None and self.max_bits < 1:
            raise ValueError(f"max_bits must be >= 1, got {self.max_bits}")

    # -- internal helpers ---------------------------------------------------

    def _validate(self, **values: int) -> None:
        """Reject negative inputs.

        Branches: INPUT-VALID, INPUT-NEGATIVE
        """
        for name, v in values.items():
            if v < 0:                                             # INPUT-NEGATIVE
                raise ValueError(
                    f"`{name}` must be non-negative, got -{_describe(-v)}"
                )
        # (falls through) INPUT-VALID

    def _check_bits(self, value: int) -> int:
        """Enforce the bit budget on a produced value.

        Branches: BITS-UNLIMITED, BITS-WITHIN, BITS-EXCEEDED
        """
        if self.max_bits is None:                                 # BITS-UNLIMITED
            return value
        bits = value.bit_length()
        if bits > self.max_bits:                                  # BITS-EXCEEDED
            raise ResultSizeExceeded(bits, self.max_bits)
        return value                                              # BITS-WITHIN

    def _pow(self, base: int, exp: int) -> int:
        """Branches: POW-ZERO-EXP, POW-ZERO-BASE, POW-ONE-BASE,
                     POW-BITS-FLOOR, POW-FAST, POW-SQUARE
        """
        if exp == 0:                                              # POW-ZERO-EXP
            return 1
        if base == 0:                                             # POW-ZERO-BASE
            return 0
        if base == 1:                                             # POW-ONE-BASE
            return 1

        if self.max_bits is not None:
            # base >= 2 ** (bits - 1), so the result has at least this many bits
            floor_bits = (base.bit_length() - 1) * exp + 1
            if floor_bits > self.max_bits:                        # POW-BITS-FLOOR
                raise ResultSizeExceeded(floor_bits, self.max_bits)

        if self.word.contains(exp):                               # POW-FAST
            return self._check_bits(base ** exp)
        return self._check_bits(pow_by_squaring(base, exp))       # POW-SQUARE

    def _direct(self, order: int, base: int, exp: int) -> int | None:
        """Closed-form cases of H; ``None`` when the exponent walk is needed.

        Branches: HYP-SUCC, HYP-ADD, HYP-MUL, HYP-POW, HYP-EXP-ZERO,
                  HYP-EXP-ONE, HYP-BASE-ONE, HYP-BASE-ZERO, HYP-TWO-TWO,
                  HYP-WALK
        """
        if order == 0:                                            # HYP-SUCC
            return self._check_bits(exp + 1)
        if order == 1:                                            # HYP-ADD
            return self._check_bits(base + exp)
        if order == 2:                                            # HYP-MUL
            return self._check_bits(base * exp)
        if order == 3:                                            # HYP-POW
            return self._pow(base, exp)

        if exp == 0:                                              # HYP-EXP-ZERO
            return 1
        if exp == 1:                                              # HYP-EXP-ONE
            return base
        if base == 1:                                             # HYP-BASE-ONE
            return 1
        if base == 0:                                             # HYP-BASE-ZERO
            # towers of zeros alternate, starting from 0 ** 0 == 1
            return 1 - (exp & 1)
        if base == 2 and exp == 2:                                # HYP-TWO-TWO
            # H(k, 2, 2) == H(k - 1, 2, 2) == ... == 2 * 2
            return 4
        return None                                               # HYP-WALK

    def _walk(self, order: int, base: int, exp: int) -> int:
        """Evaluate H(order, base, exp) for a non-degenerate order >= 4.

        The top frame either resolves ``H(order - 1, base, acc)`` in closed
        form or pushes a frame one order lower, so the stack holds at most
        ``order - 3`` frames.

        Branches: WALK-RESOLVE, WALK-DESCEND, WALK-RETURN, WALK-DEPTH-EXCEEDED
        """
        logger.debug(
            "walk start: order=%s base=%s exp=%s",
            _describe(order), _describe(base), _describe(exp),
        )
        stack = [_Frame(order, exp - 1, base)]
        deepest = 1

        while True:
            top = stack[-1]

            if top.remaining == 0:                                # WALK-RETURN
                stack.pop()
                if not stack:
                    logger.debug(
                        "walk done: %d-bit result, depth %d",
                        top.acc.bit_length(), deepest,
                    )
                    return top.acc
                parent = stack[-1]
                parent.acc = top.acc
                parent.remaining -= 1
                continue

            value = self._direct(top.order - 1, base, top.acc)
            if value is not None:                                 # WALK-RESOLVE
                top.acc = value
                top.remaining -= 1
                continue

            if len(stack) >= self.max_depth:                      # WALK-DEPTH-EXCEEDED
                raise RecursionBudgetExceeded(order, self.max_depth)

            # WALK-DESCEND
            stack.append(_Frame(top.order - 1, top.acc - 1, base))
            if len(stack) > deepest:
                deepest = len(stack)
                if deepest & (deepest - 1) == 0:
                    logger.debug("walk reached depth %d", deepest)

    # -- public operations --------------------------------------------------

    def pow(self, base: int, exp: int) -> int:
        """``base ** exp`` for unbounded operands.

        Exponents inside ``word`` go to the built-in routine; larger ones
        use exponentiation by squaring.  ``pow(0, 0) == 1``.
        """
        self._validate(base=base, exp=exp)
        return self._pow(base, exp)

    def hyper_op(self, order: int, base: int, exp: int) -> int:
        """Hyperoperation H(order, base, exp)."""
        self._validate(order=order, base=base, exp=exp)
        value = self._direct(order, base, exp)
        if value is not None:
            return value
        return self._walk(order, base, exp)

    def ackermann(self, m: int, n: int) -> int:
        """Ackermann-Peter function, as ``H(m, 2, n + 3) - 3``.

        Branches: ACK-OK, ACK-UNDERFLOW
        """
        self._validate(m=m, n=n)
        value = self.hyper_op(m, 2, n + 3)
        if value < 3:                                             # ACK-UNDERFLOW
            raise ArithmeticError(
                f"H({_describe(m)}, 2, {_describe(n + 3)}) = {value} is below 3"
            )
        return value - 3                                          # ACK-OK

    def graham(self, n: int, base: int = 3) -> int:
        """n-th term of Graham's sequence: x = 4, then x = H(x + 2, base, base).

        ``graham(1)`` is already 3↑↑↑↑3; only ``n == 0`` or ``base <= 2``
        finish in practice, and those have closed forms.

        Branches: GRAHAM-FIRST, GRAHAM-BASE-TWO, GRAHAM-BASE-DEGENERATE,
                  GRAHAM-ITERATE
        """
        self._validate(n=n, base=base)
        if n == 0:                                                # GRAHAM-FIRST
            return 4
        if base == 2:                                             # GRAHAM-BASE-TWO
            return 4
        if base <= 1:                                             # GRAHAM-BASE-DEGENERATE
            # H(6, b, b) == 1, then H(3, b, b) == 1 for b in (0, 1)
            return 1

        # GRAHAM-ITERATE
        x = 4
        for step in range(n):
            x = self.hyper_op(x + 2, base, base)
            logger.debug("graham step %d: %d-bit term", step + 1, x.bit_length())
        return x


# ---------------------------------------------------------------------------
# Module-level API on a default calculator
# ---------------------------------------------------------------------------

_default = HyperCalculator()


def pow(base: int, exp: int) -> int:
    return _default.pow(base, exp)


def hyper_op(order: int, base: int, exp: int) -> int:
    return _default.hyper_op(order, base, exp)


def ackermann(m: int, n: int) -> int:
    return _default.ackermann(m, n)


def graham(n: int, base: int = 3) -> int:
    return _default.graham(n, base)


H = hyper_op
A = ackermann
