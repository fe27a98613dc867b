"""Fetch coordinator: pulls validator and staking data through chain adapters
into the stores.

Every fetch is one-shot: no retry, backoff or timeout beyond what the adapter
itself enforces. Failures never propagate; they come back as a failed
``FetchResult`` and are recorded as the store's ``last_error``. The store
status goes ``LOADING`` when a fetch starts and ``LOADED`` once no fetch for
that store is pending, whatever the outcome.

Account specifiers must be CAIP-10; anything else fails before the adapter is
called and is never written to the staking store. After :meth:`FetchCoordinator.clear`
the results of fetches started earlier are returned to their callers but not
written back.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable

from ..caip import split_account_specifier
from ..errors import AdapterNotFoundError, InvalidResponseError
from ..interfaces.chain import ChainAdapterResolver
from ..models import (
    FetchError,
    FetchErrorKind,
    FetchResult,
    FetchStatus,
    StakingRecord,
    Validator,
)
from ..state import StakingState

logger = logging.getLogger(__name__)

_VALIDATORS = "validators"
_STAKING = "staking"


def _to_fetch_error(e: Exception, key: str) -> FetchError:
    if isinstance(e, AdapterNotFoundError):
        kind = FetchErrorKind.ADAPTER_NOT_FOUND
    elif isinstance(e, InvalidResponseError):
        kind = FetchErrorKind.INVALID_RESPONSE
    else:
        kind = FetchErrorKind.TRANSPORT
    return FetchError(kind=kind, message=str(e), key=key)


class FetchCoordinator:
    """Drives validator / staking fetches and writes results into the stores."""

    def __init__(
        self,
        state: StakingState,
        registry: ChainAdapterResolver,
        coalesce: bool = True,
    ) -> None:
        self._state = state
        self._registry = registry
        self._coalesce = coalesce
        self._in_flight: dict[tuple[str, ...], asyncio.Future] = {}
        self._pending = {_VALIDATORS: 0, _STAKING: 0}
        self._generation = 0

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def clear(self) -> None:
        """Empty every store and detach fetches still in flight."""
        self._generation += 1
        self._in_flight.clear()
        self._pending = {_VALIDATORS: 0, _STAKING: 0}
        self._state.clear()

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    # ------------------------------------------------------------------
    # Status bookkeeping
    # ------------------------------------------------------------------

    def _begin(self, kind: str) -> int:
        self._pending[kind] += 1
        if kind == _VALIDATORS:
            self._state.validators.set_status(FetchStatus.LOADING)
            self._state.staking.set_validator_status(FetchStatus.LOADING)
        else:
            self._state.staking.set_status(FetchStatus.LOADING)
        return self._generation

    def _end(self, kind: str, generation: int) -> None:
        if not self._is_current(generation):
            return
        self._pending[kind] -= 1
        if self._pending[kind] > 0:
            return
        if kind == _VALIDATORS:
            self._state.validators.set_status(FetchStatus.LOADED)
            self._state.staking.set_validator_status(FetchStatus.LOADED)
        else:
            self._state.staking.set_status(FetchStatus.LOADED)

    async def _coalesced(
        self, key: tuple[str, ...], factory: Callable[[], Awaitable[FetchResult]]
    ) -> FetchResult:
        """Share one in-flight request between concurrent callers of the same key."""
        if not self._coalesce:
            return await factory()

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._in_flight[key] = task

            def _forget(done: asyncio.Future, key: tuple[str, ...] = key) -> None:
                if self._in_flight.get(key) is done:
                    del self._in_flight[key]

            task.add_done_callback(_forget)
        else:
            logger.debug("Joining in-flight fetch %s", key)
        return await asyncio.shield(task)

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    async def fetch_validator(
        self, chain_id: str, validator_address: str
    ) -> FetchResult[Validator]:
        """Fetch one validator and upsert it into the validator store."""
        return await self._coalesced(
            (_VALIDATORS, chain_id, validator_address),
            lambda: self._fetch_validator(chain_id, validator_address),
        )

    async def _fetch_validator(
        self, chain_id: str, validator_address: str
    ) -> FetchResult[Validator]:
        generation = self._begin(_VALIDATORS)
        try:
            adapter = self._registry.by_chain_id(chain_id)
            validator = await adapter.get_validator(validator_address)
            if self._is_current(generation):
                self._state.validators.upsert([validator])
                if self._state.validators.last_error is not None:
                    self._state.validators.set_error(None)
            logger.info("Fetched validator %s on %s", validator_address, chain_id)
            return FetchResult(data=validator)
        except Exception as e:
            logger.error(
                "Error fetching validator %s on %s: %s", validator_address, chain_id, e
            )
            error = _to_fetch_error(e, validator_address)
            if self._is_current(generation):
                self._state.validators.set_error(error)
            return FetchResult(error=error)
        finally:
            self._end(_VALIDATORS, generation)

    async def fetch_validators(
        self, chain_id: str, validator_addresses: Iterable[str]
    ) -> list[FetchResult[Validator]]:
        """Fetch several validators concurrently; results follow input order."""
        addresses = list(dict.fromkeys(validator_addresses))
        return list(
            await asyncio.gather(
                *(self.fetch_validator(chain_id, address) for address in addresses)
            )
        )

    # ------------------------------------------------------------------
    # Staking data
    # ------------------------------------------------------------------

    async def fetch_staking_data(
        self, account_specifier: str, chain_id: str | None = None
    ) -> FetchResult[StakingRecord]:
        """Fetch an account's staking record and upsert it into the staking store.

        ``account_specifier`` must be CAIP-10; ``chain_id`` defaults to the
        chain it encodes.
        """
        try:
            encoded_chain_id, _ = split_account_specifier(account_specifier)
        except ValueError as e:
            logger.error("Refusing staking fetch for %r: %s", account_specifier, e)
            error = FetchError(
                kind=FetchErrorKind.INVALID_ACCOUNT, message=str(e), key=account_specifier
            )
            self._state.staking.set_error(error)
            return FetchResult(error=error)

        chain_id = chain_id or encoded_chain_id
        return await self._coalesced(
            (_STAKING, chain_id, account_specifier),
            lambda: self._fetch_staking_data(account_specifier, chain_id),
        )

    async def _fetch_staking_data(
        self, account_specifier: str, chain_id: str
    ) -> FetchResult[StakingRecord]:
        generation = self._begin(_STAKING)
        try:
            adapter = self._registry.by_chain_id(chain_id)
            record = await adapter.get_staking_data(account_specifier)
            if self._is_current(generation):
                self._state.staking.upsert(account_specifier, record)
                if self._state.staking.last_error is not None:
                    self._state.staking.set_error(None)
            logger.info(
                "Fetched staking data for %s: %d delegations, %d unbondings",
                account_specifier,
                len(record.delegations),
                len(record.undelegations),
            )
            return FetchResult(data=record)
        except Exception as e:
            logger.error("Error fetching staking data for %s: %s", account_specifier, e)
            error = _to_fetch_error(e, account_specifier)
            if self._is_current(generation):
                self._state.staking.set_error(error)
            return FetchResult(error=error)
        finally:
            self._end(_STAKING, generation)
