"""Unit tests for data models."""
from __future__ import annotations

import dataclasses
from decimal import Decimal

import pytest

from stakeview.models import (
    Delegation,
    FetchError,
    FetchErrorKind,
    FetchResult,
    MergedActiveStakingOpportunity,
    StakingRecord,
    Undelegation,
    Validator,
    ValidatorReward,
)


class TestFrozen:
    def test_validator_is_immutable(self, validator_a: Validator) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            validator_a.apr = Decimal("0.5")  # type: ignore[misc]

    def test_record_is_immutable(self, sample_staking_record: StakingRecord) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample_staking_record.delegations = ()  # type: ignore[misc]


class TestStakingRecord:
    def test_empty_defaults(self) -> None:
        record = StakingRecord()
        assert record.delegations == ()
        assert record.validator_ids == ()

    def test_validator_ids_first_seen_order(self) -> None:
        record = StakingRecord(
            delegations=(
                Delegation(asset_id="x", amount=Decimal(1), validator_address="b"),
                Delegation(asset_id="y", amount=Decimal(1), validator_address="a"),
                Delegation(asset_id="x", amount=Decimal(1), validator_address="b"),
            ),
            undelegations=(Undelegation(validator_address="c"),),
            rewards=(ValidatorReward(validator_address="a"), ValidatorReward(validator_address="d")),
        )
        assert record.validator_ids == ("b", "a", "c", "d")

    def test_equal_records_compare_equal(self, sample_staking_record: StakingRecord) -> None:
        clone = dataclasses.replace(sample_staking_record)
        assert clone == sample_staking_record
        assert clone is not sample_staking_record


class TestFetchResult:
    def test_ok(self) -> None:
        assert FetchResult(data=1).ok

    def test_error(self) -> None:
        result = FetchResult(error=FetchError(kind=FetchErrorKind.TRANSPORT, message="boom"))
        assert not result.ok
        assert result.data is None


class TestMergedActiveStakingOpportunity:
    def test_position_defaults_to_zero(self) -> None:
        opp = MergedActiveStakingOpportunity(
            address="v",
            moniker="m",
            apr=Decimal("0.1"),
            tokens=Decimal(1),
            commission=Decimal(0),
            token_address="118",
            asset_id="cosmos:cosmoshub-4/slip44:118",
            chain="cosmos",
            tvl=Decimal(0),
        )
        assert opp.crypto_amount == 0
        assert opp.fiat_amount == 0
        assert opp.rewards == 0
