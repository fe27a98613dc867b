"""Validator selectors."""
from __future__ import annotations

from typing import Any, Iterable, Optional

from ..models import FetchStatus, Validator
from ..state import StakingState, ValidatorData
from .memo import arg, create_selector, value_equal


def select_validator_data(state: StakingState, *_: Any) -> ValidatorData:
    return state.validators.snapshot


def select_validator_status(state: StakingState, *_: Any) -> FetchStatus:
    return state.validators.snapshot.status


def select_is_validator_data_loaded(state: StakingState, *_: Any) -> bool:
    return state.validators.snapshot.status == FetchStatus.LOADED


def _single_validator(data: ValidatorData, address: str) -> Optional[Validator]:
    return data.by_address.get(address)


def _validators_by_ids(
    data: ValidatorData, addresses: Optional[Iterable[str]]
) -> tuple[Validator, ...]:
    if not addresses:
        return ()
    return tuple(
        data.by_address[address]
        for address in addresses
        if address in data.by_address
    )


# (state, validator_address) -> Validator | None
select_single_validator = create_selector(
    select_validator_data, arg(0), combiner=_single_validator
)

# (state, validator_addresses) -> loaded validators, in request order
select_validators_by_ids = create_selector(
    select_validator_data,
    arg(0),
    combiner=_validators_by_ids,
    equal=value_equal,
)
