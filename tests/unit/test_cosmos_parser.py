"""Unit tests for Cosmos staking response parsing."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from stakeview.chains.cosmos.parser import (
    parse_completion_time,
    parse_delegation,
    parse_staking_data,
    parse_validator,
)
from stakeview.errors import InvalidResponseError
from tests.sample_data import ATOM, VAL_A, VAL_B


class TestParseValidator:
    def test_parses(self, sample_validator_payload: dict) -> None:
        validator = parse_validator(sample_validator_payload)
        assert validator.address == VAL_A
        assert validator.moniker == "Alpha"
        assert validator.tokens == Decimal("1000000000000")
        assert validator.apr == Decimal("0.12")
        assert validator.commission == Decimal("0.05")

    def test_flat_commission(self, sample_validator_payload: dict) -> None:
        payload = dict(sample_validator_payload, commission="0.1")
        assert parse_validator(payload).commission == Decimal("0.1")

    def test_missing_fields_default_to_zero(self) -> None:
        validator = parse_validator({"address": VAL_A})
        assert validator.apr == 0
        assert validator.tokens == 0
        assert validator.moniker == ""

    def test_requires_address(self) -> None:
        with pytest.raises(InvalidResponseError):
            parse_validator({"moniker": "x"})


class TestParseCompletionTime:
    def test_iso(self) -> None:
        assert parse_completion_time("2022-03-01T12:00:00Z") == datetime(
            2022, 3, 1, 12, tzinfo=timezone.utc
        )

    def test_nanoseconds_truncated(self) -> None:
        parsed = parse_completion_time("2024-01-21T00:00:00.123456789Z")
        assert parsed.microsecond == 123456

    def test_unix_seconds(self) -> None:
        expected = datetime(2022, 3, 1, 12, tzinfo=timezone.utc)
        assert parse_completion_time(1646136000) == expected
        assert parse_completion_time("1646136000") == expected

    @pytest.mark.parametrize("bad", [None, "", "not-a-date"])
    def test_invalid(self, bad) -> None:
        with pytest.raises(InvalidResponseError):
            parse_completion_time(bad)


class TestParseStakingData:
    def test_parses_account(self, sample_account_payload: dict) -> None:
        record = parse_staking_data(sample_account_payload)
        assert [d.validator_address for d in record.delegations] == [VAL_A, VAL_B]
        assert record.undelegations[0].entries[0].amount == Decimal("250000")
        assert record.rewards[0].rewards[0].amount == Decimal("1234.56")
        assert record.validator_ids == (VAL_A, VAL_B)

    def test_empty_account(self) -> None:
        record = parse_staking_data({"delegations": None})
        assert record.delegations == ()
        assert record.undelegations == ()
        assert record.rewards == ()

    def test_not_an_object(self) -> None:
        with pytest.raises(InvalidResponseError):
            parse_staking_data([])

    def test_flat_validator_address(self) -> None:
        delegation = parse_delegation(
            {"assetId": ATOM, "amount": "5", "validatorAddress": VAL_B}
        )
        assert delegation.validator_address == VAL_B
