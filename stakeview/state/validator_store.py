"""Validator store: validators keyed by address with a fetch status."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ..models import FetchError, FetchStatus, Validator
from .store import Store


@dataclass(frozen=True)
class ValidatorData:
    status: FetchStatus = FetchStatus.IDLE
    last_error: Optional[FetchError] = None
    by_address: Mapping[str, Validator] = field(
        default_factory=lambda: MappingProxyType({})
    )
    addresses: tuple[str, ...] = ()


class ValidatorStore(Store[ValidatorData]):
    name = "validator_store"

    def __init__(self) -> None:
        super().__init__(ValidatorData())

    @property
    def status(self) -> FetchStatus:
        return self.snapshot.status

    @property
    def last_error(self) -> Optional[FetchError]:
        return self.snapshot.last_error

    @property
    def by_address(self) -> Mapping[str, Validator]:
        return self.snapshot.by_address

    @property
    def addresses(self) -> tuple[str, ...]:
        return self.snapshot.addresses

    def upsert(self, validators: Iterable[Validator]) -> None:
        """Insert or replace validators. ``addresses`` keeps each address once."""
        by_address = dict(self.snapshot.by_address)
        addresses = list(self.snapshot.addresses)
        for validator in validators:
            if validator.address not in by_address:
                addresses.append(validator.address)
            by_address[validator.address] = validator
        self._commit(
            dataclasses.replace(
                self.snapshot,
                by_address=MappingProxyType(by_address),
                addresses=tuple(addresses),
            )
        )

    def set_status(self, status: FetchStatus) -> None:
        self._commit(dataclasses.replace(self.snapshot, status=status))

    def set_error(self, error: Optional[FetchError]) -> None:
        self._commit(dataclasses.replace(self.snapshot, last_error=error))
