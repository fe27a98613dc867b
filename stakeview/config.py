"""Configuration loader: reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .caip import is_fee_asset_id, split_account_specifier
from .errors import ConfigError
from .models import Asset

logger = logging.getLogger(__name__)

DEFAULT_VALIDATOR = "cosmosvaloper199mlc7fr6ll5t54w7tts7f4s0cvnqgc59nmuxf"

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChainConfig:
    api_endpoints: tuple[str, ...] = ()
    request_timeout: int = 30


@dataclass(frozen=True)
class AccountConfig:
    label: str = ""
    account_specifier: str = ""


@dataclass(frozen=True)
class StakingConfig:
    default_validator: str = DEFAULT_VALIDATOR
    coalesce_fetches: bool = True


@dataclass(frozen=True)
class PythConfig:
    hermes_url: str = "https://hermes.pyth.network/v2/updates/price/latest"
    feeds: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PriceOracleConfig:
    provider: str = "pyth"
    pyth: PythConfig = field(default_factory=PythConfig)


@dataclass(frozen=True)
class AppConfig:
    chains: dict[str, ChainConfig] = field(default_factory=dict)
    assets: tuple[Asset, ...] = ()
    accounts: tuple[AccountConfig, ...] = ()
    staking: StakingConfig = field(default_factory=StakingConfig)
    price_oracle: PriceOracleConfig = field(default_factory=PriceOracleConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_chains(raw: dict[str, Any]) -> dict[str, ChainConfig]:
    chains: dict[str, ChainConfig] = {}
    for chain_id, cfg in raw.items():
        cfg = cfg or {}
        chains[chain_id] = ChainConfig(
            api_endpoints=tuple(e for e in cfg.get("api_endpoints", []) if e),
            request_timeout=int(cfg.get("request_timeout", 30)),
        )
    return chains


def _build_assets(raw: list[dict[str, Any]]) -> tuple[Asset, ...]:
    assets: list[Asset] = []
    for a in raw:
        asset_id = a.get("asset_id", "")
        chain_id, _, _ = asset_id.partition("/")
        assets.append(
            Asset(
                asset_id=asset_id,
                chain_id=a.get("chain_id", chain_id),
                chain=a.get("chain", chain_id.split(":")[0]),
                symbol=a.get("symbol", ""),
                precision=int(a.get("precision", 0)),
                slip44=int(a.get("slip44", 0)),
                name=a.get("name", ""),
            )
        )
    return tuple(assets)


def _build_accounts(raw: list[dict[str, Any]]) -> tuple[AccountConfig, ...]:
    return tuple(
        AccountConfig(
            label=a.get("label", ""),
            account_specifier=a.get("account_specifier", ""),
        )
        for a in raw
    )


def _build_staking(raw: dict[str, Any]) -> StakingConfig:
    return StakingConfig(
        default_validator=raw.get("default_validator", DEFAULT_VALIDATOR),
        coalesce_fetches=bool(raw.get("coalesce_fetches", True)),
    )


def _build_price_oracle(raw: dict[str, Any]) -> PriceOracleConfig:
    pyth_raw = raw.get("pyth", {})
    return PriceOracleConfig(
        provider=raw.get("provider", "pyth"),
        pyth=PythConfig(
            hermes_url=pyth_raw.get("hermes_url", PythConfig.hermes_url),
            feeds=dict(pyth_raw.get("feeds", {})),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        chains=_build_chains(raw.get("chains", {})),
        assets=_build_assets(raw.get("assets", [])),
        accounts=_build_accounts(raw.get("accounts", [])),
        staking=_build_staking(raw.get("staking", {})),
        price_oracle=_build_price_oracle(raw.get("price_oracle", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.accounts:
        raise ConfigError("At least one account must be configured")

    for account in cfg.accounts:
        try:
            chain_id, _ = split_account_specifier(account.account_specifier)
        except ValueError:
            raise ConfigError(
                f"Account '{account.label}' has an invalid account specifier "
                f"'{account.account_specifier}'"
            ) from None
        if chain_id not in cfg.chains:
            raise ConfigError(
                f"Account '{account.label}' references unknown chain '{chain_id}'"
            )
        if not any(
            a.chain_id == chain_id and is_fee_asset_id(a.asset_id) for a in cfg.assets
        ):
            raise ConfigError(
                f"Account '{account.label}' chain '{chain_id}' has no fee asset configured"
            )

    for asset in cfg.assets:
        if asset.chain_id not in cfg.chains:
            raise ConfigError(
                f"Asset '{asset.asset_id}' references unknown chain '{asset.chain_id}'"
            )
        if asset.precision < 0:
            raise ConfigError(f"Asset '{asset.asset_id}' has a negative precision")
