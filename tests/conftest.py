"""Shared fixtures for evaluator tests."""
from __future__ import annotations

import pytest

from bounds import Bounds
from hyperop import HyperCalculator
from models import allow_long_numerals

# Exponent range [0, 0]: every exponent >= 1 takes the squaring path
NO_WORD = Bounds(lo=0, hi=0)


@pytest.fixture(autouse=True, scope="session")
def _long_numerals() -> None:
    allow_long_numerals()


@pytest.fixture
def calc() -> HyperCalculator:
    return HyperCalculator()


@pytest.fixture
def calc_squaring() -> HyperCalculator:
    return HyperCalculator(word=NO_WORD)


@pytest.fixture
def calc_shallow() -> HyperCalculator:
    return HyperCalculator(max_depth=2)


@pytest.fixture
def calc_narrow() -> HyperCalculator:
    return HyperCalculator(max_bits=64)
