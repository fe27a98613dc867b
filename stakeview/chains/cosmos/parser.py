"""Pure parsing functions for Cosmos staking API responses: no I/O."""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

from ...bignumber import bn_or_zero
from ...errors import InvalidResponseError
from ...models import (
    Delegation,
    Reward,
    StakingRecord,
    Undelegation,
    UndelegationEntry,
    Validator,
    ValidatorReward,
)

# Chain timestamps may carry nanoseconds; datetime keeps microseconds.
_FRACTION_RE = re.compile(r"\.(\d{6})\d+")


def _validator_address(entry: dict[str, Any]) -> str:
    """Validators appear either nested (``{"validator": {"address": ...}}``) or flat."""
    validator = entry.get("validator")
    if isinstance(validator, dict):
        return validator.get("address", "")
    if isinstance(validator, str):
        return validator
    return entry.get("validatorAddress", "")


def parse_completion_time(value: Any) -> datetime:
    """Parse an ISO-8601 string or unix seconds into an aware UTC datetime.

    Examples:
        "2022-03-01T12:00:00Z" → 2022-03-01 12:00:00+00:00
        1646136000 → 2022-03-01 12:00:00+00:00
    """
    if isinstance(value, (int, float)) or (isinstance(value, str) and value.isdigit()):
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    if isinstance(value, str) and value:
        text = _FRACTION_RE.sub(r".\1", value.replace("Z", "+00:00"))
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise InvalidResponseError(f"Invalid completion time: {value!r}") from e
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise InvalidResponseError(f"Invalid completion time: {value!r}")


def parse_validator(data: dict[str, Any]) -> Validator:
    address = data.get("address", "")
    if not address:
        raise InvalidResponseError("Validator response has no address")

    commission = data.get("commission", 0)
    if isinstance(commission, dict):
        commission = commission.get("rate", 0)

    return Validator(
        address=address,
        moniker=data.get("moniker", ""),
        apr=bn_or_zero(data.get("apr")),
        tokens=bn_or_zero(data.get("tokens")),
        commission=bn_or_zero(commission),
    )


def parse_delegation(entry: dict[str, Any]) -> Delegation:
    return Delegation(
        asset_id=entry.get("assetId", ""),
        amount=bn_or_zero(entry.get("amount")),
        validator_address=_validator_address(entry),
    )


def parse_undelegation(entry: dict[str, Any]) -> Undelegation:
    return Undelegation(
        validator_address=_validator_address(entry),
        entries=tuple(
            UndelegationEntry(
                asset_id=e.get("assetId", ""),
                amount=bn_or_zero(e.get("amount")),
                completion_time=parse_completion_time(e.get("completionTime")),
            )
            for e in entry.get("entries", [])
        ),
    )


def parse_validator_reward(entry: dict[str, Any]) -> ValidatorReward:
    return ValidatorReward(
        validator_address=_validator_address(entry),
        rewards=tuple(
            Reward(asset_id=r.get("assetId", ""), amount=bn_or_zero(r.get("amount")))
            for r in entry.get("rewards", [])
        ),
    )


def parse_staking_data(data: dict[str, Any]) -> StakingRecord:
    """Parse an account response into a StakingRecord."""
    if not isinstance(data, dict):
        raise InvalidResponseError("Account response is not an object")
    return StakingRecord(
        delegations=tuple(parse_delegation(d) for d in data.get("delegations") or []),
        undelegations=tuple(
            parse_undelegation(u) for u in data.get("unbondings") or []
        ),
        rewards=tuple(parse_validator_reward(r) for r in data.get("rewards") or []),
    )
