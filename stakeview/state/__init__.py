"""In-memory state: the staking stores plus the collaborator stores."""
from __future__ import annotations

from .collaborators import AssetStore, MarketDataStore, PortfolioStore
from .staking_store import StakingData, StakingStore
from .store import Store
from .validator_store import ValidatorData, ValidatorStore


class StakingState:
    """Root object handed to every selector."""

    def __init__(self) -> None:
        self.validators = ValidatorStore()
        self.staking = StakingStore()
        self.market_data = MarketDataStore()
        self.assets = AssetStore()
        self.portfolio = PortfolioStore()

    @property
    def stores(self) -> tuple[Store, ...]:
        return (
            self.validators,
            self.staking,
            self.market_data,
            self.assets,
            self.portfolio,
        )

    @property
    def revision(self) -> tuple[int, ...]:
        """Changes whenever any store is written."""
        return tuple(store.revision for store in self.stores)

    def clear(self) -> None:
        for store in self.stores:
            store.clear()


__all__ = [
    "AssetStore",
    "MarketDataStore",
    "PortfolioStore",
    "StakingData",
    "StakingState",
    "StakingStore",
    "Store",
    "ValidatorData",
    "ValidatorStore",
]
