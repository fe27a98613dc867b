"""Exception hierarchy for stakeview."""
from __future__ import annotations


class StakeviewError(Exception):
    """Base exception for all stakeview errors."""


class ChainAdapterError(StakeviewError):
    """Transport or chain error raised by a chain adapter."""

    def __init__(self, message: str, chain_id: str = "") -> None:
        self.chain_id = chain_id
        super().__init__(message)


class AdapterNotFoundError(ChainAdapterError):
    """No adapter is registered for the requested chain."""

    def __init__(self, chain_id: str) -> None:
        super().__init__(f"No chain adapter registered for '{chain_id}'", chain_id)


class InvalidResponseError(ChainAdapterError):
    """The adapter got a response it could not turn into a model."""


class MissingAssetPrecisionError(StakeviewError):
    """An asset needed for fiat conversion has no known precision."""

    def __init__(self, asset_id: str, message: str = "") -> None:
        self.asset_id = asset_id
        super().__init__(message or f"No precision known for asset '{asset_id}'")


class ConfigError(StakeviewError, ValueError):
    """Invalid configuration."""
