"""Staking service: wires adapters, oracle, coordinator and selectors across
the configured accounts."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from ..bignumber import bn_or_zero, bn_to_string, from_base_unit
from ..caip import split_account_specifier
from ..chains.registry import ChainAdapterRegistry
from ..config import AppConfig
from ..interfaces.chain import ChainAdapterResolver
from ..interfaces.price_oracle import PriceOracle
from ..models import Asset, FetchResult, PortfolioAccount, Validator
from ..oracles import PythOracle
from ..selectors import (
    select_staking_opportunities_summary,
    select_total_rewards_crypto_amount_by_asset_id,
    select_total_staking_delegation_fiat,
    select_unbonding_crypto_amount_by_asset_id_and_validator,
)
from ..state import StakingState
from .fetch_coordinator import FetchCoordinator

logger = logging.getLogger(__name__)


class StakingService:
    """Keeps the staking state fresh for every configured account and renders reports."""

    def __init__(
        self,
        config: AppConfig,
        state: Optional[StakingState] = None,
        registry: Optional[ChainAdapterResolver] = None,
        oracle: Optional[PriceOracle] = None,
    ) -> None:
        self._config = config
        self.state = state or StakingState()
        self._registry = registry or ChainAdapterRegistry.from_config(config)
        self._oracle: PriceOracle = oracle or PythOracle(config.price_oracle.pyth)
        self.coordinator = FetchCoordinator(
            self.state,
            self._registry,
            coalesce=config.staking.coalesce_fetches,
        )
        self.state.assets.upsert(config.assets)

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    async def refresh_prices(self) -> None:
        prices = await self._oracle.fetch_prices()
        if prices:
            self.state.market_data.upsert(prices)
        else:
            logger.warning("No prices fetched; fiat values will read as zero")

    async def refresh(self) -> None:
        """Reload prices, every account's staking data, then the validators they use."""
        await self.refresh_prices()

        accounts = [a.account_specifier for a in self._config.accounts]
        results = await asyncio.gather(
            *(self.coordinator.fetch_staking_data(a) for a in accounts)
        )

        validators_by_chain: dict[str, dict[str, None]] = {}
        for account_specifier, result in zip(accounts, results):
            chain_id, _ = split_account_specifier(account_specifier)
            wanted = validators_by_chain.setdefault(chain_id, {})
            if chain_id.startswith("cosmos:") and self._config.staking.default_validator:
                wanted.setdefault(self._config.staking.default_validator, None)
            if not result.ok:
                continue
            record = result.data
            self.state.portfolio.upsert(
                account_specifier,
                PortfolioAccount(validator_ids=record.validator_ids, staking_data=record),
            )
            for address in record.validator_ids:
                wanted.setdefault(address, None)

        await asyncio.gather(
            *(
                self.coordinator.fetch_validators(chain_id, list(addresses))
                for chain_id, addresses in validators_by_chain.items()
                if addresses
            )
        )

    async def fetch_validator(
        self, chain_id: str, validator_address: str
    ) -> FetchResult[Validator]:
        return await self.coordinator.fetch_validator(chain_id, validator_address)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    @staticmethod
    def _now_str() -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

    def fee_asset(self, chain_id: str) -> Optional[Asset]:
        asset_id = self.state.assets.fee_asset_id(chain_id)
        return self.state.assets.get(asset_id) if asset_id else None

    def _account_section(self, label: str, account_specifier: str) -> str:
        chain_id, _ = split_account_specifier(account_specifier)
        asset = self.fee_asset(chain_id)
        header = f"━━ {label} ({chain_id}) ━━"
        if asset is None:
            return f"{header}\nNo fee asset configured for {chain_id}."

        summary = select_staking_opportunities_summary(
            self.state, account_specifier, asset.asset_id
        )
        if not summary.opportunities:
            return f"{header}\nNo active delegations found."

        lines: list[str] = [header]
        for opp in summary.opportunities:
            unbonding = from_base_unit(
                select_unbonding_crypto_amount_by_asset_id_and_validator(
                    self.state, account_specifier, opp.address, asset.asset_id
                ),
                asset.precision,
            )
            lines.append(
                f"{opp.moniker or opp.address} · APR {opp.apr * 100:.2f}%\n"
                f"  Staked: {bn_to_string(opp.crypto_amount)} {asset.symbol} (${opp.fiat_amount:,.2f})\n"
                f"  Unbonding: {bn_to_string(unbonding)} {asset.symbol}\n"
                f"  Rewards: {bn_to_string(opp.rewards)} {asset.symbol}"
            )

        rewards = from_base_unit(
            select_total_rewards_crypto_amount_by_asset_id(
                self.state, account_specifier, asset.asset_id
            ),
            asset.precision,
        )
        lines.append(
            f"Total staked: ${Decimal(summary.total_balance):,.2f}"
            f" · Rewards: {bn_to_string(rewards)} {asset.symbol}"
        )
        return "\n".join(lines)

    def build_report(self) -> str:
        """Render a plain-text staking report from the current state."""
        sections = [
            self._account_section(a.label or a.account_specifier, a.account_specifier)
            for a in self._config.accounts
        ]
        total_fiat = bn_or_zero(select_total_staking_delegation_fiat(self.state))

        problems: list[str] = []
        for store in (self.state.staking, self.state.validators):
            if store.last_error is not None:
                problems.append(
                    f"⚠️ Last {store.name} fetch failed ({store.last_error.kind.value}): "
                    f"{store.last_error.message}"
                )

        body = "\n\n".join(sections) if sections else "No accounts configured."
        report = (
            f"📋 Staking Report\n"
            f"\n"
            f"{body}\n"
            f"\n"
            f"Total delegated (all accounts): ${total_fiat:,.2f}\n"
        )
        if problems:
            report += "\n" + "\n".join(problems) + "\n"
        report += f"\n{self._now_str()} UTC"
        return report
