"""Staking store: per-account staking records with fetch statuses."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from ..models import FetchError, FetchStatus, StakingRecord
from .store import Store


@dataclass(frozen=True)
class StakingData:
    status: FetchStatus = FetchStatus.IDLE
    validator_status: FetchStatus = FetchStatus.IDLE
    last_error: Optional[FetchError] = None
    by_account_specifier: Mapping[str, StakingRecord] = field(
        default_factory=lambda: MappingProxyType({})
    )


class StakingStore(Store[StakingData]):
    name = "staking_store"

    def __init__(self) -> None:
        super().__init__(StakingData())

    @property
    def status(self) -> FetchStatus:
        return self.snapshot.status

    @property
    def validator_status(self) -> FetchStatus:
        return self.snapshot.validator_status

    @property
    def last_error(self) -> Optional[FetchError]:
        return self.snapshot.last_error

    @property
    def by_account_specifier(self) -> Mapping[str, StakingRecord]:
        return self.snapshot.by_account_specifier

    @property
    def account_specifiers(self) -> tuple[str, ...]:
        return tuple(self.snapshot.by_account_specifier)

    def upsert(self, account_specifier: str, record: StakingRecord) -> None:
        """Replace the staking record held for ``account_specifier``."""
        records = dict(self.snapshot.by_account_specifier)
        records[account_specifier] = record
        self._commit(
            dataclasses.replace(
                self.snapshot, by_account_specifier=MappingProxyType(records)
            )
        )

    def set_status(self, status: FetchStatus) -> None:
        self._commit(dataclasses.replace(self.snapshot, status=status))

    def set_validator_status(self, status: FetchStatus) -> None:
        self._commit(dataclasses.replace(self.snapshot, validator_status=status))

    def set_error(self, error: Optional[FetchError]) -> None:
        self._commit(dataclasses.replace(self.snapshot, last_error=error))
