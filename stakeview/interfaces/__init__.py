"""Protocol interfaces for stakeview's external collaborators."""
from .chain import ChainAdapter, ChainAdapterResolver
from .price_oracle import PriceOracle

__all__ = ["ChainAdapter", "ChainAdapterResolver", "PriceOracle"]
