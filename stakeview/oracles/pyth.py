"""Pyth Network (Hermes) price oracle keyed by asset id."""
import logging
import ssl
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

import aiohttp
import certifi

from ..config import PythConfig
from ..models import MarketData

logger = logging.getLogger(__name__)


def build_price_url(hermes_url: str, feed_ids: list[str]) -> str:
    """Hermes latest-price URL for ``feed_ids`` (sorted, deduplicated)."""
    query = "&".join(f"ids[]={feed_id}" for feed_id in sorted(set(feed_ids)))
    return f"{hermes_url}?{query}"


def parse_feed_price(item: Mapping[str, Any]) -> Optional[Decimal]:
    """``price * 10**expo`` for one parsed feed entry; ``None`` if malformed."""
    price_data = item.get("price") or {}
    try:
        return Decimal(int(price_data["price"])).scaleb(int(price_data.get("expo", 0)))
    except (KeyError, TypeError, ValueError, InvalidOperation):
        return None


def parse_price_updates(
    data: Mapping[str, Any], feeds: Mapping[str, str]
) -> dict[str, MarketData]:
    """Map a Hermes response onto asset ids. Several assets may share one feed.

    Examples:
        {"parsed": [{"id": "aa", "price": {"price": "850000000", "expo": -8}}]},
        {"cosmos:cosmoshub-4/slip44:118": "aa"}
        → {"cosmos:cosmoshub-4/slip44:118": MarketData(price=Decimal("8.50000000"))}
    """
    assets_by_feed: dict[str, list[str]] = {}
    for asset_id, feed_id in feeds.items():
        assets_by_feed.setdefault(feed_id.lower().removeprefix("0x"), []).append(asset_id)

    prices: dict[str, MarketData] = {}
    for item in data.get("parsed") or []:
        feed_id = str(item.get("id", "")).lower().removeprefix("0x")
        asset_ids = assets_by_feed.get(feed_id)
        if not asset_ids:
            continue
        price = parse_feed_price(item)
        if price is None:
            logger.warning("Skipping malformed Pyth entry for feed %s", feed_id)
            continue
        for asset_id in asset_ids:
            prices[asset_id] = MarketData(price=price)
    return prices


class PythOracle:
    """Fetch prices from Pyth Network, keyed by asset id."""

    def __init__(self, config: PythConfig) -> None:
        self.hermes_url = config.hermes_url
        self.feeds = dict(config.feeds)

    async def _get_json(self, url: str) -> Optional[dict[str, Any]]:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)
        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.get(url) as response:
                if response.status != 200:
                    logger.error("Pyth request failed: HTTP %s", response.status)
                    return None
                return await response.json()

    async def fetch_prices(
        self, asset_ids: list[str] | None = None
    ) -> dict[str, MarketData]:
        """Fetch current prices for ``asset_ids`` (all configured feeds if None).

        Never raises: failures are logged and yield an empty result.
        """
        feeds = self.feeds
        if asset_ids is not None:
            wanted = set(asset_ids)
            feeds = {k: v for k, v in feeds.items() if k in wanted}
        if not feeds:
            return {}

        try:
            data = await self._get_json(build_price_url(self.hermes_url, list(feeds.values())))
        except Exception as e:
            logger.error("Error fetching prices from Pyth: %s", e)
            return {}
        if data is None:
            return {}

        prices = parse_price_updates(data, feeds)
        for asset_id, market in sorted(prices.items()):
            logger.debug("Pyth price %s: %s", asset_id, market.price)
        logger.info("Fetched %d prices from Pyth", len(prices))
        return prices
