"""Reactive cache bound to a set of input parameters.

A `SubscriptionCache` holds the last server response for the current
parameters and tells its listeners about every state change:

    pending -> data | error

Every fetch is stamped with a generation number. Only the latest issued
generation may write the state; a slow fetch superseded by a newer one is
dropped when it finally completes (last-write-wins by start order).

A refresh that overtakes a pending parameter change is reported with the
`PARAMS` trigger: its data belongs to the new parameters, and listeners
must treat it as a full reload.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Generic, TypeVar

from core.domain.errors import FetchError, SubscriptionNotReadyError
from core.domain.state import SubscriptionState, Trigger
from core.services.errors import normalize_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

Params = Mapping[str, Any]
FetchFn = Callable[[Params], Awaitable[T]]
Listener = Callable[[SubscriptionState[T]], None]


class SubscriptionCache(Generic[T]):
    def __init__(self, fetch: FetchFn[T], *, name: str = "subscription") -> None:
        self._fetch = fetch
        self.name = name
        self._params: dict[str, Any] | None = None
        self._generation = 0
        self._state: SubscriptionState[T] = SubscriptionState.pending()
        self._listeners: list[Listener[T]] = []
        self._latest: asyncio.Future[SubscriptionState[T]] | None = None
        self._closed = False
        # Set by a parameter change until data for those parameters is applied.
        self._params_unsettled = False

    @property
    def state(self) -> SubscriptionState[T]:
        return self._state

    @property
    def params(self) -> dict[str, Any] | None:
        return dict(self._params) if self._params is not None else None

    @property
    def generation(self) -> int:
        return self._generation

    def add_listener(self, listener: Listener[T]) -> Callable[[], None]:
        """Register `listener`; returns a callable that unregisters it."""

        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    async def update(self, params: Params) -> SubscriptionState[T]:
        """Bind new parameters; re-fetch only when they differ by value."""

        new_params = dict(params)
        if self._params is not None and new_params == self._params:
            return self._state
        self._params = new_params
        return await self._issue(Trigger.PARAMS)

    async def invalidate(self) -> SubscriptionState[T]:
        """Re-fetch with the current parameters and wait for the result."""

        if self._params is None:
            raise SubscriptionNotReadyError(f"{self.name}: invalidate() before any parameters were bound")
        return await self._issue(Trigger.INVALIDATE)

    def close(self) -> None:
        """Detach listeners; results of in-flight fetches will be dropped."""

        self._closed = True
        self._generation += 1
        self._listeners.clear()

    def _emit(self, state: SubscriptionState[T]) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.warning("%s: listener failed on %s state", self.name, state.status.value, exc_info=True)

    async def _issue(self, trigger: Trigger) -> SubscriptionState[T]:
        self._generation += 1
        generation = self._generation
        params = dict(self._params or {})

        if trigger is Trigger.PARAMS:
            self._params_unsettled = True
        elif self._params_unsettled:
            # Supersedes a parameter change whose data never landed.
            trigger = Trigger.PARAMS

        done: asyncio.Future[SubscriptionState[T]] = asyncio.get_running_loop().create_future()
        self._latest = done

        try:
            return await self._settle(generation, trigger, params, done)
        except asyncio.CancelledError:
            if not done.done():
                done.cancel()
            raise
        finally:
            if not done.done():
                done.set_result(self._state)

    async def _settle(
        self,
        generation: int,
        trigger: Trigger,
        params: dict[str, Any],
        done: asyncio.Future[SubscriptionState[T]],
    ) -> SubscriptionState[T]:
        logger.debug("%s: fetch #%d (%s) %r", self.name, generation, trigger.value, params)
        self._emit(SubscriptionState.pending(generation, trigger))

        try:
            payload = await self._fetch(params)
        except Exception as exc:
            message = normalize_error(exc)
            state = SubscriptionState.failed(FetchError(message, cause=exc), generation, trigger)
        else:
            state = SubscriptionState.loaded(payload, generation, trigger)

        if self._closed:
            logger.debug("%s: fetch #%d settled after close, dropped", self.name, generation)
            done.set_result(state)
            return state

        if generation != self._generation:
            logger.debug(
                "%s: fetch #%d superseded by #%d, result dropped",
                self.name,
                generation,
                self._generation,
            )
            latest = self._latest
            if latest is None or latest is done:
                result = self._state
            else:
                try:
                    result = await asyncio.shield(latest)
                except asyncio.CancelledError:
                    done.cancel()
                    raise
            # Waiters on this generation get the newest settled state.
            done.set_result(result)
            return result

        logger.debug("%s: fetch #%d settled as %s", self.name, generation, state.status.value)
        if state.is_data:
            self._params_unsettled = False
        self._emit(state)
        done.set_result(state)
        return state
