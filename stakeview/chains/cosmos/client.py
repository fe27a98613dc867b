"""Cosmos staking API client with endpoint fallback."""
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ...caip import split_account_specifier
from ...config import ChainConfig
from ...errors import ChainAdapterError
from ...models import StakingRecord, Validator
from . import parser

logger = logging.getLogger(__name__)


class CosmosClient:
    """Cosmos SDK chain adapter over an HTTP staking API, with automatic endpoint fallback."""

    def __init__(self, chain_id: str, config: ChainConfig) -> None:
        self.chain_id = chain_id
        self.endpoints = list(config.api_endpoints)
        self.timeout = config.request_timeout
        self.current_endpoint_index = 0

    async def api_get(self, path: str) -> dict[str, Any]:
        """GET ``path`` with fallback to alternative endpoints."""
        if not self.endpoints:
            raise ChainAdapterError(
                f"No API endpoints configured for {self.chain_id}", self.chain_id
            )

        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            index = (self.current_endpoint_index + attempt) % len(self.endpoints)
            base_url = self.endpoints[index].rstrip("/")
            url = f"{base_url}{path}"

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.get(
                        url, timeout=aiohttp.ClientTimeout(total=self.timeout)
                    ) as response:
                        if response.status != 200:
                            raise ChainAdapterError(
                                f"HTTP {response.status} from {url}", self.chain_id
                            )
                        result = await response.json()

                        if index != self.current_endpoint_index:
                            logger.info("Switched to API endpoint: %s", base_url)
                            self.current_endpoint_index = index

                        return result
            except Exception as e:
                last_error = e
                logger.warning("API endpoint %s failed: %s", base_url, e)
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

        raise ChainAdapterError(
            f"All API endpoints failed. Last error: {last_error}", self.chain_id
        )

    async def get_validator(self, address: str) -> Validator:
        """Fetch one validator's metadata and total stake."""
        data = await self.api_get(f"/api/v1/validators/{address}")
        return parser.parse_validator(data)

    async def get_staking_data(self, account_address: str) -> StakingRecord:
        """Fetch delegations, unbondings and rewards for an account address.

        Accepts either a bare address or a CAIP-10 account specifier.
        """
        if account_address.count(":") == 2:
            _, account_address = split_account_specifier(account_address)
        data = await self.api_get(f"/api/v1/account/{account_address}")
        return parser.parse_staking_data(data)
