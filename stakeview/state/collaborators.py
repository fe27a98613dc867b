"""Read-mostly stores for data owned outside the staking core.

Market prices, the asset registry and portfolio accounts are refreshed out of
band; they live in stores only so that selectors can see when they change.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ..caip import is_fee_asset_id
from ..models import Asset, MarketData, PortfolioAccount
from .store import Store

_EMPTY: Mapping = MappingProxyType({})


def find_fee_asset_id(assets: Mapping[str, Asset], chain_id: str) -> Optional[str]:
    """First registered native (slip44) asset on ``chain_id``."""
    for asset in assets.values():
        if asset.chain_id == chain_id and is_fee_asset_id(asset.asset_id):
            return asset.asset_id
    return None


class MarketDataStore(Store[Mapping[str, MarketData]]):
    name = "market_data_store"

    def __init__(self) -> None:
        super().__init__(_EMPTY)

    def get(self, asset_id: str) -> Optional[MarketData]:
        return self.snapshot.get(asset_id)

    def upsert(self, prices: Mapping[str, MarketData]) -> None:
        merged = dict(self.snapshot)
        merged.update(prices)
        self._commit(MappingProxyType(merged))


class AssetStore(Store[Mapping[str, Asset]]):
    name = "asset_store"

    def __init__(self) -> None:
        super().__init__(_EMPTY)

    def get(self, asset_id: str) -> Optional[Asset]:
        return self.snapshot.get(asset_id)

    def upsert(self, assets: Iterable[Asset]) -> None:
        merged = dict(self.snapshot)
        for asset in assets:
            merged[asset.asset_id] = asset
        self._commit(MappingProxyType(merged))

    def fee_asset_id(self, chain_id: str) -> Optional[str]:
        return find_fee_asset_id(self.snapshot, chain_id)


class PortfolioStore(Store[Mapping[str, PortfolioAccount]]):
    name = "portfolio_store"

    def __init__(self) -> None:
        super().__init__(_EMPTY)

    def get(self, account_specifier: str) -> Optional[PortfolioAccount]:
        return self.snapshot.get(account_specifier)

    def upsert(self, account_specifier: str, account: PortfolioAccount) -> None:
        merged = dict(self.snapshot)
        merged[account_specifier] = account
        self._commit(MappingProxyType(merged))
