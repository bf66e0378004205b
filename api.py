"""FastAPI endpoints for hyperoperation evaluation.

Routes
------
GET /hyperop/{order}/{base}/{exp}   H(order, base, exp)
GET /ackermann/{m}/{n}              A(m, n)
GET /graham/{n}?base=3              n-th term of Graham's sequence

Path segments are validated as decimal numerals; values are returned as
decimal strings.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, ValidationError

from hyperop import HyperCalculator, RecursionBudgetExceeded, ResultSizeExceeded
from models import AckermannRequest, ComputationResult, GrahamRequest, HyperOpRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["hyperop"])

# The calculator instance is injected by the app factory (see app.py).
_calculator: HyperCalculator | None = None


def set_calculator(calculator: HyperCalculator) -> None:
    """Inject the calculator. Called once at app startup."""
    global _calculator
    _calculator = calculator


def get_calculator() -> HyperCalculator:
    assert _calculator is not None, "Calculator not initialized"
    return _calculator


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _invalid(e: ValidationError) -> HTTPException:
    detail = [
        {"field": err["loc"][0] if err["loc"] else None, "msg": err["msg"]}
        for err in e.errors(include_url=False)
    ]
    return HTTPException(status_code=422, detail=detail)


def _too_large(e: Exception) -> HTTPException:
    return HTTPException(status_code=413, detail=str(e))


def _parse(model: type[BaseModel], **fields: Any) -> BaseModel:
    try:
        return model.model_validate(fields)
    except ValidationError as e:
        raise _invalid(e) from e


def _evaluate(operation: str, method: str, request: BaseModel) -> ComputationResult:
    arguments = request.model_dump()
    calc = get_calculator()
    try:
        value = getattr(calc, method)(**arguments)
    except (RecursionBudgetExceeded, ResultSizeExceeded) as e:
        logger.info("%s refused: %s", operation, e)
        raise _too_large(e) from e
    return ComputationResult.from_value(operation, arguments, value)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/hyperop/{order}/{base}/{exp}", response_model=ComputationResult)
def hyperop(order: str, base: str, exp: str) -> ComputationResult:
    """Evaluate H(order, base, exp)."""
    request = _parse(HyperOpRequest, order=order, base=base, exp=exp)
    return _evaluate("hyperop", "hyper_op", request)


@router.get("/ackermann/{m}/{n}", response_model=ComputationResult)
def ackermann(m: str, n: str) -> ComputationResult:
    """Evaluate A(m, n)."""
    request = _parse(AckermannRequest, m=m, n=n)
    return _evaluate("ackermann", "ackermann", request)


@router.get("/graham/{n}", response_model=ComputationResult)
def graham(
    n: str,
    base: str = Query(default="3", description="Tower base (3 for Graham's number)"),
) -> ComputationResult:
    """Evaluate the n-th term of Graham's sequence."""
    request = _parse(GrahamRequest, n=n, base=base)
    return _evaluate("graham", "graham", request)
