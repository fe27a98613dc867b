"""Data models: all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


# ---------------------------------------------------------------------------
# On-chain records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Validator:
    """A validator as returned by a chain adapter. ``tokens`` is in base units."""

    address: str
    moniker: str
    apr: Decimal
    tokens: Decimal
    commission: Decimal = Decimal(0)


@dataclass(frozen=True)
class Delegation:
    asset_id: str
    amount: Decimal
    validator_address: str


@dataclass(frozen=True)
class UndelegationEntry:
    asset_id: str
    amount: Decimal
    completion_time: datetime


@dataclass(frozen=True)
class Undelegation:
    """Unbonding entries grouped under the validator they leave."""

    validator_address: str
    entries: tuple[UndelegationEntry, ...] = ()


@dataclass(frozen=True)
class Reward:
    asset_id: str
    amount: Decimal


@dataclass(frozen=True)
class ValidatorReward:
    validator_address: str
    rewards: tuple[Reward, ...] = ()


@dataclass(frozen=True)
class StakingRecord:
    """Everything one account has staked, unbonding or accrued."""

    delegations: tuple[Delegation, ...] = ()
    undelegations: tuple[Undelegation, ...] = ()
    rewards: tuple[ValidatorReward, ...] = ()

    @property
    def validator_ids(self) -> tuple[str, ...]:
        """Validator addresses referenced anywhere in the record, first seen first."""
        seen: dict[str, None] = {}
        for d in self.delegations:
            seen.setdefault(d.validator_address, None)
        for u in self.undelegations:
            seen.setdefault(u.validator_address, None)
        for r in self.rewards:
            seen.setdefault(r.validator_address, None)
        return tuple(seen)


# ---------------------------------------------------------------------------
# Collaborator data
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Asset:
    asset_id: str
    chain_id: str
    chain: str
    symbol: str
    precision: int
    slip44: int = 0
    name: str = ""


@dataclass(frozen=True)
class MarketData:
    price: Decimal


@dataclass(frozen=True)
class PortfolioAccount:
    validator_ids: tuple[str, ...] = ()
    staking_data: StakingRecord = field(default_factory=StakingRecord)


# ---------------------------------------------------------------------------
# Fetch lifecycle
# ---------------------------------------------------------------------------


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"


class FetchErrorKind(str, Enum):
    TRANSPORT = "transport"
    ADAPTER_NOT_FOUND = "adapter_not_found"
    INVALID_RESPONSE = "invalid_response"
    INVALID_ACCOUNT = "invalid_account"


@dataclass(frozen=True)
class FetchError:
    kind: FetchErrorKind
    message: str
    key: str = ""


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of a coordinator fetch: exactly one of ``data`` / ``error`` is set."""

    data: Optional[T] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Derived views (never stored)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MergedStakingOpportunity:
    address: str
    moniker: str
    apr: Decimal
    tokens: Decimal
    commission: Decimal
    token_address: str
    asset_id: str
    chain: str
    tvl: Decimal


@dataclass(frozen=True)
class MergedActiveStakingOpportunity(MergedStakingOpportunity):
    """Opportunity joined with the user's own position, in display units."""

    crypto_amount: Decimal = Decimal(0)
    fiat_amount: Decimal = Decimal(0)
    rewards: Decimal = Decimal(0)


@dataclass(frozen=True)
class StakingOpportunitiesSummary:
    opportunities: tuple[MergedActiveStakingOpportunity, ...] = ()
    total_balance: str = "0"
    is_loaded: bool = False
