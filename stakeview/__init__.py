"""stakeview: proof-of-stake delegation tracking and derived staking views."""
from .models import (
    Asset,
    Delegation,
    FetchError,
    FetchErrorKind,
    FetchResult,
    FetchStatus,
    MarketData,
    MergedActiveStakingOpportunity,
    MergedStakingOpportunity,
    PortfolioAccount,
    Reward,
    StakingRecord,
    Undelegation,
    UndelegationEntry,
    Validator,
    ValidatorReward,
)
from .state import StakingState

__version__ = "0.1.0"

__all__ = [
    "Asset",
    "Delegation",
    "FetchError",
    "FetchErrorKind",
    "FetchResult",
    "FetchStatus",
    "MarketData",
    "MergedActiveStakingOpportunity",
    "MergedStakingOpportunity",
    "PortfolioAccount",
    "Reward",
    "StakingRecord",
    "StakingState",
    "Undelegation",
    "UndelegationEntry",
    "Validator",
    "ValidatorReward",
]
