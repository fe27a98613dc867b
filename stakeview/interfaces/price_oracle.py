"""Price oracle protocol: price feed abstraction."""
from typing import Protocol

from ..models import MarketData


class PriceOracle(Protocol):
    """Abstract interface for fetching asset prices keyed by asset id."""

    async def fetch_prices(
        self, asset_ids: list[str] | None = None
    ) -> dict[str, MarketData]: ...
