"""Staking selectors: delegations, unbondings and rewards per account.

Argument order follows the data hierarchy: ``(state, account_specifier,
validator_address, asset_id)`` for validator-scoped selectors and
``(state, account_specifier, asset_id)`` for account-wide ones. Amounts are
base-unit strings.

Reward lookups assume one denom per validator per account: the first entry
for an asset wins and duplicates are not merged.
"""
from __future__ import annotations

from collections import defaultdict
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..bignumber import (
    ZERO,
    bn_or_zero,
    bn_plus,
    bn_sum,
    bn_times,
    bn_to_string,
    from_base_unit,
)
from ..caip import split_account_specifier
from ..errors import MissingAssetPrecisionError
from ..models import Asset, MarketData, Reward, StakingRecord, UndelegationEntry
from ..state import StakingData
from ..state.collaborators import find_fee_asset_id
from .memo import arg, create_selector, pick, value_equal

# Mapping results are shared through the selector caches and must stay read-only.
_EMPTY: Mapping = MappingProxyType({})


def select_staking_data(state: Any, *_: Any) -> StakingData:
    return state.staking.snapshot


def select_assets(state: Any, *_: Any) -> Mapping[str, Asset]:
    return state.assets.snapshot


def select_market_data(state: Any, *_: Any) -> Mapping[str, MarketData]:
    return state.market_data.snapshot


# ---------------------------------------------------------------------------
# Account record
# ---------------------------------------------------------------------------


def _record_for_account(
    data: StakingData, account_specifier: str
) -> Optional[StakingRecord]:
    return data.by_account_specifier.get(account_specifier)


# (state, account_specifier) -> StakingRecord | None
select_staking_data_by_account_specifier = create_selector(
    select_staking_data, arg(0), combiner=_record_for_account
)

_account_record = pick(select_staking_data_by_account_specifier, 0)


# ---------------------------------------------------------------------------
# Delegations
# ---------------------------------------------------------------------------


def _delegation_amount_by_asset(
    record: Optional[StakingRecord], asset_id: str
) -> str:
    if record is None:
        return "0"
    return bn_to_string(
        bn_sum(d.amount for d in record.delegations if d.asset_id == asset_id)
    )


def _delegation_amounts_by_validator(
    record: Optional[StakingRecord], asset_id: str
) -> Mapping[str, str]:
    if record is None:
        return _EMPTY
    totals: dict[str, Any] = defaultdict(lambda: ZERO)
    for d in record.delegations:
        if d.asset_id == asset_id:
            totals[d.validator_address] = bn_plus(totals[d.validator_address], d.amount)
    return MappingProxyType(
        {address: bn_to_string(amount) for address, amount in totals.items()}
    )


# (state, account_specifier, asset_id) -> str
select_delegation_crypto_amount_by_asset_id = create_selector(
    _account_record, arg(1), combiner=_delegation_amount_by_asset
)

# (state, account_specifier, asset_id) -> {validator_address: str}
select_delegation_amounts_by_validator = create_selector(
    _account_record,
    arg(1),
    combiner=_delegation_amounts_by_validator,
    equal=value_equal,
)

# (state, account_specifier, validator_address, asset_id) -> str
select_delegation_crypto_amount_by_asset_id_and_validator = create_selector(
    pick(select_delegation_amounts_by_validator, 0, 2),
    arg(1),
    combiner=lambda amounts, validator_address: amounts.get(validator_address, "0"),
)


# ---------------------------------------------------------------------------
# Unbondings
# ---------------------------------------------------------------------------


def _unbonding_entries_by_validator(
    record: Optional[StakingRecord], validator_address: str
) -> tuple[UndelegationEntry, ...]:
    if record is None:
        return ()
    for undelegation in record.undelegations:
        if undelegation.validator_address == validator_address:
            return undelegation.entries
    return ()


def _unbonding_entries_by_asset(
    record: Optional[StakingRecord], asset_id: str
) -> Mapping[str, tuple[UndelegationEntry, ...]]:
    if record is None:
        return _EMPTY
    buckets: dict[str, tuple[UndelegationEntry, ...]] = {}
    for undelegation in record.undelegations:
        matching = tuple(e for e in undelegation.entries if e.asset_id == asset_id)
        buckets[undelegation.validator_address] = (
            buckets.get(undelegation.validator_address, ()) + matching
        )
    return MappingProxyType(buckets)


# (state, account_specifier, validator_address) -> entries
select_unbonding_entries_by_validator = create_selector(
    _account_record, arg(1), combiner=_unbonding_entries_by_validator
)

# (state, account_specifier, asset_id) -> {validator_address: entries}
select_unbonding_entries_by_asset_id = create_selector(
    _account_record,
    arg(1),
    combiner=_unbonding_entries_by_asset,
    equal=value_equal,
)

# (state, account_specifier, validator_address, asset_id) -> str
select_unbonding_crypto_amount_by_asset_id_and_validator = create_selector(
    pick(select_unbonding_entries_by_asset_id, 0, 2),
    arg(1),
    combiner=lambda buckets, validator_address: bn_to_string(
        bn_sum(e.amount for e in buckets.get(validator_address, ()))
    ),
)

# (state, account_specifier, validator_address, asset_id) -> str
select_total_bonding_crypto_amount_by_asset_id_and_validator = create_selector(
    select_unbonding_crypto_amount_by_asset_id_and_validator,
    select_delegation_crypto_amount_by_asset_id_and_validator,
    combiner=lambda unbonding, delegation: bn_to_string(bn_plus(unbonding, delegation)),
)


# ---------------------------------------------------------------------------
# Rewards
# ---------------------------------------------------------------------------


def _rewards_by_validator(
    record: Optional[StakingRecord], validator_address: str
) -> tuple[Reward, ...]:
    if record is None:
        return ()
    rewards: list[Reward] = []
    for validator_reward in record.rewards:
        if validator_reward.validator_address == validator_address:
            rewards.extend(validator_reward.rewards)
    return tuple(rewards)


def _reward_amount_for_asset(rewards: tuple[Reward, ...], asset_id: str) -> str:
    for reward in rewards:
        if reward.asset_id == asset_id:
            return bn_to_string(reward.amount)
    return ""


def _reward_amounts_by_validator(
    record: Optional[StakingRecord], asset_id: str
) -> Mapping[str, str]:
    if record is None:
        return _EMPTY
    amounts: dict[str, str] = {}
    for validator_reward in record.rewards:
        if validator_reward.validator_address in amounts:
            continue
        amount = _reward_amount_for_asset(validator_reward.rewards, asset_id)
        if amount:
            amounts[validator_reward.validator_address] = amount
    return MappingProxyType(amounts)


# (state, account_specifier, validator_address) -> rewards
select_rewards_by_validator = create_selector(
    _account_record,
    arg(1),
    combiner=_rewards_by_validator,
    equal=value_equal,
)

# (state, account_specifier, validator_address, asset_id) -> str, "" when absent
select_rewards_crypto_amount_by_asset_id = create_selector(
    pick(select_rewards_by_validator, 0, 1),
    arg(2),
    combiner=_reward_amount_for_asset,
)

# (state, account_specifier, asset_id) -> {validator_address: str}
select_reward_amounts_by_validator = create_selector(
    _account_record,
    arg(1),
    combiner=_reward_amounts_by_validator,
    equal=value_equal,
)

# (state, account_specifier, asset_id) -> str
select_total_rewards_crypto_amount_by_asset_id = create_selector(
    select_reward_amounts_by_validator,
    combiner=lambda amounts: bn_to_string(bn_sum(amounts.values())),
)


# ---------------------------------------------------------------------------
# Account and portfolio totals
# ---------------------------------------------------------------------------


def _fee_asset_for_account(
    assets: Mapping[str, Asset], account_specifier: str
) -> Asset:
    chain_id, _ = split_account_specifier(account_specifier)
    fee_asset_id = find_fee_asset_id(assets, chain_id)
    if fee_asset_id is None:
        raise MissingAssetPrecisionError(
            f"{chain_id}/slip44",
            f"No fee asset with a known precision registered for chain '{chain_id}'",
        )
    return assets[fee_asset_id]


def _total_delegation_crypto_for_account(
    record: Optional[StakingRecord],
    assets: Mapping[str, Asset],
    account_specifier: str,
) -> str:
    if record is None or not record.delegations:
        return "0"
    fee_asset = _fee_asset_for_account(assets, account_specifier)
    return _delegation_amount_by_asset(record, fee_asset.asset_id)


def _total_delegation_fiat(
    data: StakingData,
    assets: Mapping[str, Asset],
    market_data: Mapping[str, MarketData],
) -> str:
    total = ZERO
    for account_specifier, record in data.by_account_specifier.items():
        if not record.delegations:
            continue
        fee_asset = _fee_asset_for_account(assets, account_specifier)
        crypto = _delegation_amount_by_asset(record, fee_asset.asset_id)
        market = market_data.get(fee_asset.asset_id)
        price = bn_or_zero(market.price if market else None)
        fiat = bn_times(from_base_unit(crypto, fee_asset.precision), price)
        total = bn_plus(total, fiat)
    return bn_to_string(total)


# (state, account_specifier) -> base-unit delegation sum in the chain's fee asset
select_total_staking_delegation_crypto_by_account_specifier = create_selector(
    _account_record,
    select_assets,
    arg(0),
    combiner=_total_delegation_crypto_for_account,
)

# (state) -> fiat value of every account's fee-asset delegations
select_total_staking_delegation_fiat = create_selector(
    select_staking_data,
    select_assets,
    select_market_data,
    combiner=_total_delegation_fiat,
)
