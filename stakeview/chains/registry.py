"""Chain adapter registry: one adapter per CAIP-2 chain id."""
from __future__ import annotations

import logging
from typing import Callable

from ..config import AppConfig, ChainConfig
from ..errors import AdapterNotFoundError
from ..interfaces.chain import ChainAdapter
from .cosmos import CosmosClient

logger = logging.getLogger(__name__)

# Adapter factories keyed by CAIP-2 namespace.
_ADAPTER_FACTORIES: dict[str, Callable[[str, ChainConfig], ChainAdapter]] = {
    "cosmos": lambda chain_id, cfg: CosmosClient(chain_id, cfg),
}


class ChainAdapterRegistry:
    """Registry of chain adapters keyed by chain id."""

    def __init__(self) -> None:
        self._adapters: dict[str, ChainAdapter] = {}

    @classmethod
    def from_config(cls, config: AppConfig) -> ChainAdapterRegistry:
        registry = cls()
        for chain_id, chain_cfg in config.chains.items():
            namespace = chain_id.split(":")[0]
            factory = _ADAPTER_FACTORIES.get(namespace)
            if factory:
                registry.register(chain_id, factory(chain_id, chain_cfg))
            else:
                logger.warning("No adapter factory for chain '%s'", chain_id)
        return registry

    def register(self, chain_id: str, adapter: ChainAdapter) -> None:
        if chain_id in self._adapters:
            logger.warning("Adapter for '%s' already registered, replacing", chain_id)
        self._adapters[chain_id] = adapter
        logger.info("Registered chain adapter for '%s'", chain_id)

    def unregister(self, chain_id: str) -> ChainAdapter | None:
        return self._adapters.pop(chain_id, None)

    def by_chain_id(self, chain_id: str) -> ChainAdapter:
        adapter = self._adapters.get(chain_id)
        if adapter is None:
            raise AdapterNotFoundError(chain_id)
        return adapter

    @property
    def chain_ids(self) -> list[str]:
        return list(self._adapters)
