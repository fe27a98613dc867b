"""Chain adapter protocol: per-chain staking data source."""
from typing import Protocol

from ..models import StakingRecord, Validator


class ChainAdapter(Protocol):
    """Abstract interface for reading staking data from one chain."""

    async def get_validator(self, address: str) -> Validator: ...

    async def get_staking_data(self, account_address: str) -> StakingRecord: ...


class ChainAdapterResolver(Protocol):
    """Anything that can hand out the adapter for a chain id."""

    def by_chain_id(self, chain_id: str) -> ChainAdapter: ...
