"""Service modules"""
from .fetch_coordinator import FetchCoordinator
from .staking_service import StakingService

__all__ = ["FetchCoordinator", "StakingService"]
