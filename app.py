"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

from fastapi import FastAPI

from api import router, set_calculator
from hyperop import HyperCalculator
from models import allow_long_numerals

# A request may not pin the server on an astronomical value
SERVICE_MAX_DEPTH = 10_000
SERVICE_MAX_BITS = 1 << 20


def create_app(calculator: HyperCalculator | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional calculator for testing; uses budgeted defaults if omitted.
    """
    if calculator is None:
        calculator = HyperCalculator(
            max_depth=SERVICE_MAX_DEPTH, max_bits=SERVICE_MAX_BITS
        )

    allow_long_numerals()
    set_calculator(calculator)

    app = FastAPI(
        title="Hyperoperation API",
        description=(
            "Exact evaluation of the hyperoperation sequence, the "
            "Ackermann-Peter function and Graham's sequence over unbounded "
            "non-negative integers. Values are returned as decimal strings."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
