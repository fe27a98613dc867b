"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from stakeview.config import (
    AccountConfig,
    AppConfig,
    ChainConfig,
    PriceOracleConfig,
    PythConfig,
    StakingConfig,
)
from stakeview.models import (
    Asset,
    Delegation,
    MarketData,
    PortfolioAccount,
    Reward,
    StakingRecord,
    Undelegation,
    UndelegationEntry,
    Validator,
    ValidatorReward,
)
from stakeview.state import StakingState
from tests.sample_data import ACCOUNT, ATOM, CHAIN_ID, OSMO_IBC, VAL_A, VAL_B, VAL_C


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def atom_asset() -> Asset:
    return Asset(
        asset_id=ATOM,
        chain_id=CHAIN_ID,
        chain="cosmos",
        symbol="ATOM",
        precision=6,
        slip44=118,
        name="Cosmos",
    )


@pytest.fixture()
def validator_a() -> Validator:
    return Validator(
        address=VAL_A,
        moniker="Alpha",
        apr=Decimal("0.12"),
        tokens=Decimal("1000000000000"),
        commission=Decimal("0.05"),
    )


@pytest.fixture()
def validator_b() -> Validator:
    return Validator(
        address=VAL_B,
        moniker="Beta",
        apr=Decimal("0.10"),
        tokens=Decimal("2000000"),
    )


@pytest.fixture()
def sample_staking_record() -> StakingRecord:
    t1 = datetime(2024, 1, 21, tzinfo=timezone.utc)
    t2 = datetime(2024, 1, 22, tzinfo=timezone.utc)
    return StakingRecord(
        delegations=(
            Delegation(asset_id=ATOM, amount=Decimal("1000000"), validator_address=VAL_A),
            Delegation(asset_id=ATOM, amount=Decimal("500000"), validator_address=VAL_B),
            Delegation(asset_id=OSMO_IBC, amount=Decimal("42"), validator_address=VAL_A),
        ),
        undelegations=(
            Undelegation(
                validator_address=VAL_A,
                entries=(
                    UndelegationEntry(asset_id=ATOM, amount=Decimal("250000"), completion_time=t1),
                    UndelegationEntry(asset_id=OSMO_IBC, amount=Decimal("7"), completion_time=t2),
                ),
            ),
            Undelegation(
                validator_address=VAL_C,
                entries=(
                    UndelegationEntry(asset_id=OSMO_IBC, amount=Decimal("3"), completion_time=t2),
                ),
            ),
        ),
        rewards=(
            ValidatorReward(
                validator_address=VAL_A,
                rewards=(
                    Reward(asset_id=ATOM, amount=Decimal("1234")),
                    Reward(asset_id=OSMO_IBC, amount=Decimal("5")),
                ),
            ),
            ValidatorReward(
                validator_address=VAL_B,
                rewards=(Reward(asset_id=OSMO_IBC, amount=Decimal("9")),),
            ),
            ValidatorReward(
                validator_address=VAL_C,
                rewards=(Reward(asset_id=ATOM, amount=Decimal("0")),),
            ),
        ),
    )


@pytest.fixture()
def state(
    atom_asset: Asset,
    validator_a: Validator,
    validator_b: Validator,
    sample_staking_record: StakingRecord,
) -> StakingState:
    """State with one account staked to A and B, C referenced but not loaded."""
    s = StakingState()
    s.assets.upsert([atom_asset])
    s.market_data.upsert({ATOM: MarketData(price=Decimal("10"))})
    s.validators.upsert([validator_a, validator_b])
    s.staking.upsert(ACCOUNT, sample_staking_record)
    s.portfolio.upsert(
        ACCOUNT,
        PortfolioAccount(
            validator_ids=sample_staking_record.validator_ids,
            staking_data=sample_staking_record,
        ),
    )
    return s


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_chain_config() -> ChainConfig:
    return ChainConfig(
        api_endpoints=("https://api1.example.com", "https://api2.example.com"),
        request_timeout=10,
    )


@pytest.fixture()
def sample_pyth_config() -> PythConfig:
    return PythConfig(
        hermes_url="https://hermes.pyth.network/v2/updates/price/latest",
        feeds={ATOM: "atomfeed"},
    )


@pytest.fixture()
def sample_app_config(
    atom_asset: Asset,
    sample_chain_config: ChainConfig,
    sample_pyth_config: PythConfig,
) -> AppConfig:
    return AppConfig(
        chains={CHAIN_ID: sample_chain_config},
        assets=(atom_asset,),
        accounts=(AccountConfig(label="main", account_specifier=ACCOUNT),),
        staking=StakingConfig(default_validator=VAL_A, coalesce_fetches=True),
        price_oracle=PriceOracleConfig(provider="pyth", pyth=sample_pyth_config),
    )


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    chains:
      "cosmos:cosmoshub-4":
        api_endpoints: ["https://api.example.com"]
        request_timeout: 10
    assets:
      - asset_id: "cosmos:cosmoshub-4/slip44:118"
        symbol: ATOM
        precision: 6
        slip44: 118
    accounts:
      - label: main
        account_specifier: "cosmos:cosmoshub-4:cosmos1user"
    staking:
      default_validator: cosmosvaloper1alpha
      coalesce_fetches: false
    price_oracle:
      provider: pyth
      pyth:
        hermes_url: "https://hermes.example.com"
        feeds: {"cosmos:cosmoshub-4/slip44:118": "aaa"}
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Sample API payloads
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_validator_payload() -> dict:
    return {
        "address": VAL_A,
        "moniker": "Alpha",
        "tokens": "1000000000000",
        "commission": {"rate": "0.05"},
        "apr": "0.12",
    }


@pytest.fixture()
def sample_account_payload() -> dict:
    return {
        "pubkey": "cosmos1user",
        "delegations": [
            {"assetId": ATOM, "amount": "1000000", "validator": {"address": VAL_A}},
            {"assetId": ATOM, "amount": "500000", "validator": {"address": VAL_B}},
        ],
        "unbondings": [
            {
                "validator": {"address": VAL_A},
                "entries": [
                    {
                        "assetId": ATOM,
                        "amount": "250000",
                        "completionTime": "2024-01-21T00:00:00.123456789Z",
                    }
                ],
            }
        ],
        "rewards": [
            {
                "validator": {"address": VAL_A},
                "rewards": [{"assetId": ATOM, "amount": "1234.56"}],
            }
        ],
    }
