"""Derived views over the staking state."""
from .memo import Selector, arg, create_selector, pick, value_equal
from .opportunities import (
    select_merged_active_staking_opportunities,
    select_merged_staking_opportunities,
    select_merged_staking_opportunity,
    select_portfolio_accounts,
    select_staking_opportunities_summary,
    select_validator_ids_by_account_specifier,
)
from .staking import (
    select_delegation_amounts_by_validator,
    select_delegation_crypto_amount_by_asset_id,
    select_delegation_crypto_amount_by_asset_id_and_validator,
    select_reward_amounts_by_validator,
    select_rewards_by_validator,
    select_rewards_crypto_amount_by_asset_id,
    select_staking_data_by_account_specifier,
    select_total_bonding_crypto_amount_by_asset_id_and_validator,
    select_total_rewards_crypto_amount_by_asset_id,
    select_total_staking_delegation_crypto_by_account_specifier,
    select_total_staking_delegation_fiat,
    select_unbonding_crypto_amount_by_asset_id_and_validator,
    select_unbonding_entries_by_asset_id,
    select_unbonding_entries_by_validator,
)
from .validators import (
    select_is_validator_data_loaded,
    select_single_validator,
    select_validator_data,
    select_validator_status,
    select_validators_by_ids,
)

__all__ = [
    "Selector",
    "arg",
    "create_selector",
    "pick",
    "value_equal",
    "select_delegation_amounts_by_validator",
    "select_delegation_crypto_amount_by_asset_id",
    "select_delegation_crypto_amount_by_asset_id_and_validator",
    "select_is_validator_data_loaded",
    "select_merged_active_staking_opportunities",
    "select_merged_staking_opportunities",
    "select_merged_staking_opportunity",
    "select_portfolio_accounts",
    "select_reward_amounts_by_validator",
    "select_rewards_by_validator",
    "select_rewards_crypto_amount_by_asset_id",
    "select_single_validator",
    "select_staking_data_by_account_specifier",
    "select_staking_opportunities_summary",
    "select_total_bonding_crypto_amount_by_asset_id_and_validator",
    "select_total_rewards_crypto_amount_by_asset_id",
    "select_total_staking_delegation_crypto_by_account_specifier",
    "select_total_staking_delegation_fiat",
    "select_unbonding_crypto_amount_by_asset_id_and_validator",
    "select_unbonding_entries_by_asset_id",
    "select_unbonding_entries_by_validator",
    "select_validator_data",
    "select_validator_ids_by_account_specifier",
    "select_validator_status",
    "select_validators_by_ids",
]
