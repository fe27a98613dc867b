"""Unit tests for exact decimal helpers."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation

import pytest

from stakeview.bignumber import (
    bn,
    bn_or_zero,
    bn_plus,
    bn_sum,
    bn_times,
    bn_to_string,
    from_base_unit,
    to_base_unit,
)


class TestBn:
    def test_float_goes_through_str(self) -> None:
        assert bn(0.1) == Decimal("0.1")

    def test_string_is_stripped(self) -> None:
        assert bn(" 12.5 ") == Decimal("12.5")

    def test_bool_rejected(self) -> None:
        with pytest.raises(InvalidOperation):
            bn(True)

    def test_garbage_raises(self) -> None:
        with pytest.raises(InvalidOperation):
            bn("abc")


class TestBnOrZero:
    @pytest.mark.parametrize("value", [None, "", "abc", "NaN", "Infinity", object()])
    def test_bad_input_is_zero(self, value) -> None:
        assert bn_or_zero(value) == 0

    def test_good_input_passes(self) -> None:
        assert bn_or_zero("42") == Decimal(42)


class TestArithmetic:
    def test_sum_starts_from_zero(self) -> None:
        assert bn_sum([]) == 0
        assert bn_sum(["1", 2, Decimal("0.5")]) == Decimal("3.5")

    def test_sum_ignores_bad_values(self) -> None:
        assert bn_sum(["1", None, "x"]) == Decimal(1)

    def test_plus_and_times(self) -> None:
        assert bn_plus("0.1", "0.2") == Decimal("0.3")
        assert bn_times("2500000", "0.00001") == Decimal("25")

    def test_no_precision_loss_on_large_amounts(self) -> None:
        wei = "123456789012345678901234567890"
        assert bn_to_string(bn_plus(wei, "1")) == "123456789012345678901234567891"


class TestBaseUnits:
    @pytest.mark.parametrize(
        "display, precision",
        [
            ("0", 6),
            ("12", 0),
            ("1.5", 6),
            ("0.00000001", 8),
            ("3.141592653589793238", 18),
        ],
    )
    def test_round_trip(self, display: str, precision: int) -> None:
        base = to_base_unit(display, precision)
        assert base == base.to_integral_value()
        assert bn_to_string(from_base_unit(base, precision)) == display

    def test_from_base_unit(self) -> None:
        assert from_base_unit("2500000", 6) == Decimal("2.5")

    def test_to_base_unit(self) -> None:
        assert to_base_unit("0.00000001", 8) == Decimal(1)


class TestBnToString:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (Decimal("25.0"), "25"),
            (Decimal("1E-8"), "0.00000001"),
            (Decimal("1.25E+6"), "1250000"),
            (Decimal("0E-18"), "0"),
            (None, "0"),
            ("-3.50", "-3.5"),
        ],
    )
    def test_plain_notation(self, value, expected: str) -> None:
        assert bn_to_string(value) == expected
