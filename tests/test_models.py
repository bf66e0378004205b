"""Tests for the request/response models and numeral parsing."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from models import (
    AckermannRequest,
    ComputationResult,
    GrahamRequest,
    HyperOpRequest,
    NumeralError,
    parse_numeral,
)


# ---------------------------------------------------------------------------
# parse_numeral
# ---------------------------------------------------------------------------

class TestParseNumeral:

    @pytest.mark.parametrize("text, expected", [
        ("0", 0),
        ("42", 42),
        ("007", 7),
        ("1" + "0" * 60, 10**60),
    ])
    def test_valid(self, text, expected):
        assert parse_numeral(text, "n") == expected

    @pytest.mark.parametrize("text", [
        "", "-1", "+1", " 1", "1 ", "1_000", "1e3", "0x10", "1.0", "abc", "٣",
    ])
    def test_rejected(self, text):
        with pytest.raises(NumeralError) as exc_info:
            parse_numeral(text, "base")
        assert exc_info.value.name == "base"
        assert exc_info.value.text == text

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            parse_numeral("x", "n")

    def test_long_garbage_is_truncated(self):
        with pytest.raises(NumeralError) as exc_info:
            parse_numeral("x" * 500, "n")
        assert len(str(exc_info.value)) < 100
        assert "..." in str(exc_info.value)

    def test_huge_numeral(self):
        text = "9" * 10_000
        assert parse_numeral(text, "n") == 10**10_000 - 1


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class TestHyperOpRequest:

    def test_from_numerals(self):
        req = HyperOpRequest.model_validate({"order": "4", "base": "3", "exp": "3"})
        assert (req.order, req.base, req.exp) == (4, 3, 3)

    def test_from_integers(self):
        req = HyperOpRequest(order=4, base=3, exp=3)
        assert req.exp == 3

    def test_bad_numeral_names_field(self):
        with pytest.raises(ValidationError) as exc_info:
            HyperOpRequest.model_validate({"order": "4", "base": "three", "exp": "3"})
        errors = exc_info.value.errors()
        assert len(errors) == 1
        assert errors[0]["loc"] == ("base",)
        assert "not a non-negative decimal numeral" in errors[0]["msg"]

    def test_negative_integer_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            HyperOpRequest(order=4, base=3, exp=-1)
        assert exc_info.value.errors()[0]["loc"] == ("exp",)

    def test_boolean_rejected(self):
        with pytest.raises(ValidationError, match="boolean"):
            HyperOpRequest(order=True, base=3, exp=3)

    def test_float_rejected(self):
        with pytest.raises(ValidationError, match="float"):
            HyperOpRequest(order=4.0, base=3, exp=3)

    def test_missing_field(self):
        with pytest.raises(ValidationError):
            HyperOpRequest.model_validate({"order": "4", "base": "3"})


class TestAckermannRequest:

    def test_valid(self):
        req = AckermannRequest.model_validate({"m": "4", "n": "2"})
        assert (req.m, req.n) == (4, 2)

    def test_signed_numeral_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            AckermannRequest.model_validate({"m": "-4", "n": "2"})
        assert exc_info.value.errors()[0]["loc"] == ("m",)


class TestGrahamRequest:

    def test_default_base(self):
        assert GrahamRequest.model_validate({"n": "1"}).base == 3

    def test_explicit_base(self):
        assert GrahamRequest.model_validate({"n": "1", "base": "2"}).base == 2


# ---------------------------------------------------------------------------
# ComputationResult
# ---------------------------------------------------------------------------

class TestComputationResult:

    def test_from_value(self):
        result = ComputationResult.from_value("ackermann", {"m": 4, "n": 1}, 65533)
        assert result.value == "65533"
        assert result.arguments == {"m": "4", "n": "1"}
        assert result.bits == 16

    def test_zero(self):
        result = ComputationResult.from_value("hyperop", {}, 0)
        assert result.value == "0"
        assert result.bits == 0

    def test_large_value_is_exact(self):
        value = 2**65536 - 3
        result = ComputationResult.from_value("ackermann", {"m": 4, "n": 2}, value)
        assert int(result.value) == value
        assert result.bits == 65536

    def test_value_must_be_numeral(self):
        with pytest.raises(ValidationError):
            ComputationResult(operation="x", value="-1", bits=1)

    def test_operation_required(self):
        with pytest.raises(ValidationError):
            ComputationResult(operation="", value="1", bits=1)

    def test_json_roundtrip(self):
        result = ComputationResult.from_value("hyperop", {"order": 3}, 2**100)
        restored = ComputationResult.model_validate_json(result.model_dump_json())
        assert restored == result
