"""
Bounds layer for the hyperoperation evaluator.

Values in this project are unbounded, so bounds never constrain a
result.  They describe fixed-width ranges instead: the machine word that
selects the fast exponentiation path, and the small domains the contract
enumerates exhaustively.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Bounds:
    """Inclusive integer interval [lo, hi]."""

    lo: int
    hi: int

    def __post_init__(self) -> None:
        if self.lo > self.hi:
            raise ValueError(f"lo ({self.lo}) must be <= hi ({self.hi})")

    @property
    def width(self) -> int:
        """Total number of representable values."""
        return self.hi - self.lo + 1

    def contains(self, value: int) -> bool:
        return self.lo <= value <= self.hi

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)


def unsigned(bits: int) -> Bounds:
    """Range of an unsigned machine integer with the given width."""
    if bits < 1:
        raise ValueError(f"bit width must be positive, got {bits}")
    return Bounds(lo=0, hi=(1 << bits) - 1)


# ---------------------------------------------------------------------------
# Common bounds presets
# ---------------------------------------------------------------------------

U8 = unsigned(8)
U16 = unsigned(16)
U32 = unsigned(32)
U64 = unsigned(64)

# Word used to pick the built-in exponentiation path
WORD = U32
