"""Chain adapters."""
from .cosmos import CosmosClient
from .registry import ChainAdapterRegistry

__all__ = ["ChainAdapterRegistry", "CosmosClient"]
