"""Request and response models for the hyperoperation front ends.

Arguments arrive as decimal numerals (command line, URL path) or as
JSON integers.  Both are validated here, before anything reaches the
evaluator: a malformed numeral is reported against the argument that
carried it and is never coerced into something else.
"""

from __future__ import annotations

import re
import sys
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

_NUMERAL = re.compile(r"[0-9]+")
_SHOWN_CHARS = 40


def allow_long_numerals() -> None:
    """Lift the int <-> str digit limit (Python 3.11+).

    Ackermann values already reach ~20k digits at A(4, 2).
    """
    sys.set_int_max_str_digits(0)


class NumeralError(ValueError):
    """Raised when text is not a non-negative decimal numeral."""

    def __init__(self, name: str, text: str) -> None:
        self.name = name
        self.text = text
        shown = text if len(text) <= _SHOWN_CHARS else text[: _SHOWN_CHARS - 3] + "..."
        super().__init__(f"{shown!r} is not a non-negative decimal numeral")


def parse_numeral(text: str, name: str) -> int:
    """Parse a plain ASCII decimal numeral.

    Signs, whitespace, underscores and exponents are rejected.
    """
    if not _NUMERAL.fullmatch(text):
        raise NumeralError(name, text)
    return int(text)


def _coerce_numeral(value: Any, name: str) -> Any:
    if isinstance(value, bool):
        raise ValueError(f"`{name}` must be an integer, not a boolean")
    if isinstance(value, str):
        return parse_numeral(value, name)
    if isinstance(value, int):
        return value
    raise ValueError(
        f"`{name}` must be an integer or a decimal numeral, got {type(value).__name__}"
    )


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class HyperOpRequest(BaseModel):
    """Arguments of H(order, base, exp)."""

    order: int = Field(
        ...,
        ge=0,
        description="0 successor, 1 addition, 2 multiplication, 3 exponentiation, 4 tetration, ...",
    )
    base: int = Field(..., ge=0)
    exp: int = Field(..., ge=0)

    @field_validator("order", "base", "exp", mode="before")
    @classmethod
    def decimal_numeral(cls, v: Any, info: ValidationInfo) -> Any:
        return _coerce_numeral(v, info.field_name)


class AckermannRequest(BaseModel):
    """Arguments of A(m, n)."""

    m: int = Field(..., ge=0)
    n: int = Field(..., ge=0)

    @field_validator("m", "n", mode="before")
    @classmethod
    def decimal_numeral(cls, v: Any, info: ValidationInfo) -> Any:
        return _coerce_numeral(v, info.field_name)


class GrahamRequest(BaseModel):
    """Arguments of graham(n, base)."""

    n: int = Field(..., ge=0)
    base: int = Field(default=3, ge=0)

    @field_validator("n", "base", mode="before")
    @classmethod
    def decimal_numeral(cls, v: Any, info: ValidationInfo) -> Any:
        return _coerce_numeral(v, info.field_name)


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------

class ComputationResult(BaseModel):
    """One evaluated value.

    `value` is a decimal string so arbitrarily large results survive JSON.
    """

    operation: str = Field(..., min_length=1)
    arguments: dict[str, str] = Field(default_factory=dict)
    value: str = Field(..., pattern=r"^[0-9]+$")
    bits: int = Field(..., ge=0)

    @classmethod
    def from_value(
        cls, operation: str, arguments: dict[str, int], value: int
    ) -> ComputationResult:
        return cls(
            operation=operation,
            arguments={k: str(v) for k, v in arguments.items()},
            value=str(value),
            bits=value.bit_length(),
        )
