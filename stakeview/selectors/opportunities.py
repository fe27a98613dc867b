"""Merged staking opportunity views: validator records joined with asset,
price and the user's own position. Recomputed on demand, never stored."""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..bignumber import bn_or_zero, bn_sum, bn_times, bn_to_string, from_base_unit
from ..errors import MissingAssetPrecisionError
from ..models import (
    Asset,
    MarketData,
    MergedActiveStakingOpportunity,
    MergedStakingOpportunity,
    PortfolioAccount,
    StakingOpportunitiesSummary,
    Validator,
)
from ..state import ValidatorData
from .memo import arg, create_selector, pick, value_equal
from .staking import (
    select_assets,
    select_delegation_amounts_by_validator,
    select_market_data,
    select_reward_amounts_by_validator,
)
from .validators import select_is_validator_data_loaded, select_validator_data


def select_portfolio_accounts(state: Any, *_: Any) -> Mapping[str, PortfolioAccount]:
    return state.portfolio.snapshot


def _validator_ids(
    accounts: Mapping[str, PortfolioAccount], account_specifier: str
) -> tuple[str, ...]:
    account = accounts.get(account_specifier)
    return account.validator_ids if account else ()


# (state, account_specifier) -> validator addresses the account is staked with
select_validator_ids_by_account_specifier = create_selector(
    select_portfolio_accounts,
    arg(0),
    combiner=_validator_ids,
    equal=value_equal,
)


def _require_asset(assets: Mapping[str, Asset], asset_id: str) -> Asset:
    asset = assets.get(asset_id)
    if asset is None:
        raise MissingAssetPrecisionError(asset_id)
    return asset


def _price(market_data: Mapping[str, MarketData], asset_id: str):
    market = market_data.get(asset_id)
    return bn_or_zero(market.price if market else None)


def _merge(validator: Validator, asset: Asset, price: Any) -> dict[str, Any]:
    return dict(
        address=validator.address,
        moniker=validator.moniker,
        apr=validator.apr,
        tokens=validator.tokens,
        commission=validator.commission,
        token_address=str(asset.slip44),
        asset_id=asset.asset_id,
        chain=asset.chain,
        tvl=bn_times(from_base_unit(validator.tokens, asset.precision), price),
    )


def _merged_opportunity(
    data: ValidatorData,
    assets: Mapping[str, Asset],
    market_data: Mapping[str, MarketData],
    asset_id: str,
    validator_address: str,
) -> Optional[MergedStakingOpportunity]:
    validator = data.by_address.get(validator_address)
    if validator is None:
        return None
    asset = _require_asset(assets, asset_id)
    return MergedStakingOpportunity(
        **_merge(validator, asset, _price(market_data, asset_id))
    )


def _merged_opportunities(
    data: ValidatorData,
    assets: Mapping[str, Asset],
    market_data: Mapping[str, MarketData],
    asset_id: str,
    validator_addresses: Optional[Iterable[str]],
) -> tuple[MergedStakingOpportunity, ...]:
    if not validator_addresses:
        return ()
    asset = _require_asset(assets, asset_id)
    price = _price(market_data, asset_id)
    return tuple(
        MergedStakingOpportunity(**_merge(data.by_address[address], asset, price))
        for address in validator_addresses
        if address in data.by_address
    )


def _merged_active_opportunities(
    validator_ids: tuple[str, ...],
    data: ValidatorData,
    assets: Mapping[str, Asset],
    market_data: Mapping[str, MarketData],
    delegations: Mapping[str, str],
    rewards: Mapping[str, str],
    asset_id: str,
) -> tuple[MergedActiveStakingOpportunity, ...]:
    if not validator_ids:
        return ()
    asset = _require_asset(assets, asset_id)
    price = _price(market_data, asset_id)
    opportunities: list[MergedActiveStakingOpportunity] = []
    for address in validator_ids:
        validator = data.by_address.get(address)
        if validator is None:
            continue
        crypto_amount = from_base_unit(delegations.get(address, "0"), asset.precision)
        opportunities.append(
            MergedActiveStakingOpportunity(
                **_merge(validator, asset, price),
                crypto_amount=crypto_amount,
                fiat_amount=bn_times(crypto_amount, price),
                rewards=from_base_unit(rewards.get(address), asset.precision),
            )
        )
    return tuple(opportunities)


def _summary(
    opportunities: tuple[MergedActiveStakingOpportunity, ...], is_loaded: bool
) -> StakingOpportunitiesSummary:
    return StakingOpportunitiesSummary(
        opportunities=opportunities,
        total_balance=bn_to_string(bn_sum(o.fiat_amount for o in opportunities)),
        is_loaded=is_loaded,
    )


# (state, asset_id, validator_address) -> MergedStakingOpportunity | None
select_merged_staking_opportunity = create_selector(
    select_validator_data,
    select_assets,
    select_market_data,
    arg(0),
    arg(1),
    combiner=_merged_opportunity,
    equal=value_equal,
)

# (state, asset_id, validator_addresses) -> opportunities for loaded validators
select_merged_staking_opportunities = create_selector(
    select_validator_data,
    select_assets,
    select_market_data,
    arg(0),
    arg(1),
    combiner=_merged_opportunities,
    equal=value_equal,
)

# (state, account_specifier, asset_id) -> the user's positions, display units
select_merged_active_staking_opportunities = create_selector(
    pick(select_validator_ids_by_account_specifier, 0),
    select_validator_data,
    select_assets,
    select_market_data,
    select_delegation_amounts_by_validator,
    select_reward_amounts_by_validator,
    arg(1),
    combiner=_merged_active_opportunities,
    equal=value_equal,
)

# (state, account_specifier, asset_id) -> StakingOpportunitiesSummary
select_staking_opportunities_summary = create_selector(
    select_merged_active_staking_opportunities,
    select_is_validator_data_loaded,
    combiner=_summary,
)
