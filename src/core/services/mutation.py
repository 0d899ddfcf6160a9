"""Mutations followed by mandatory cache invalidation.

Flow of `MutationCoordinator.perform`:

1. Precondition check on the arguments (no network call on failure).
2. `loading` on, backend mutation.
3. On success: invalidate every dependent cache and wait for all of them,
   then notify success. A refresh that fails is reported as a separate
   `InvalidationWarning`: the action did take effect.
4. On failure: notify the normalized error, leave caches alone.
5. `loading` off, exactly once, whatever happened.

Calls are not serialized: two overlapping mutations on the same cache are
kept consistent by the cache's generation counter.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from core.domain.errors import InvalidationWarning, MutationError, PreconditionError
from core.domain.state import MutationOutcome
from core.interfaces.notifier import Notifier, Severity
from core.services.errors import normalize_error
from core.services.subscription import SubscriptionCache

logger = logging.getLogger(__name__)

MutationFn = Callable[..., Awaitable[Any]]

DEFAULT_PRECONDITION_MESSAGE = "Required identifier missing from action."
REFRESH_WARNING_TITLE = "Saved, refresh failed"


@dataclass(frozen=True)
class Notice:
    title: str
    message: str


DEFAULT_SUCCESS = Notice("Success", "Done.")


def _missing(args: Mapping[str, Any], required: Sequence[str]) -> tuple[str, ...]:
    return tuple(name for name in required if args.get(name) in (None, ""))


class MutationCoordinator:
    def __init__(
        self,
        notifier: Notifier,
        *,
        on_loading: Callable[[bool], None] | None = None,
    ) -> None:
        self._notifier = notifier
        self._on_loading = on_loading
        self._in_flight = 0

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def _enter(self) -> None:
        self._in_flight += 1
        if self._in_flight == 1 and self._on_loading:
            self._on_loading(True)

    def _leave(self) -> None:
        self._in_flight -= 1
        if self._in_flight == 0 and self._on_loading:
            self._on_loading(False)

    def fail_precondition(self, message: str, *, missing: tuple[str, ...] = ()) -> MutationOutcome:
        """Report a missing-context failure without touching the backend."""

        error = PreconditionError(message, missing=missing)
        logger.info("precondition failed: %s (missing=%s)", message, ", ".join(missing) or "-")
        self._notifier.notify("Error", error.message, Severity.ERROR)
        return MutationOutcome.failure(error.message)

    async def perform(
        self,
        mutation: MutationFn,
        args: Mapping[str, Any],
        dependents: Sequence[SubscriptionCache[Any]] = (),
        *,
        required: Sequence[str] = (),
        success: Notice = DEFAULT_SUCCESS,
        precondition_message: str = DEFAULT_PRECONDITION_MESSAGE,
    ) -> MutationOutcome:
        missing = _missing(args, required)
        if missing:
            return self.fail_precondition(precondition_message, missing=missing)

        self._enter()
        try:
            try:
                value = await mutation(**args)
            except Exception as exc:
                error = MutationError(normalize_error(exc), cause=exc)
                logger.info("mutation %s failed: %s", getattr(mutation, "__name__", "?"), error.message)
                self._notifier.notify("Error", error.message, Severity.ERROR)
                return MutationOutcome.failure(error.message)

            warnings = await self._invalidate_all(dependents)
            self._notifier.notify(success.title, success.message, Severity.SUCCESS)
            for warning in warnings:
                self._notifier.notify(REFRESH_WARNING_TITLE, warning.message, Severity.INFO)
            return MutationOutcome.success(value, warnings)
        finally:
            self._leave()

    async def _invalidate_all(
        self,
        dependents: Sequence[SubscriptionCache[Any]],
    ) -> tuple[InvalidationWarning, ...]:
        if not dependents:
            return ()

        results = await asyncio.gather(
            *(cache.invalidate() for cache in dependents),
            return_exceptions=True,
        )

        warnings: list[InvalidationWarning] = []
        for cache, result in zip(dependents, results):
            if isinstance(result, BaseException):
                reason = normalize_error(result)
            elif result.is_error and result.error is not None:
                reason = result.error.message
            else:
                continue
            logger.warning("%s: refresh after mutation failed: %s", cache.name, reason)
            warnings.append(
                InvalidationWarning(
                    f"Your change was saved, but the view may be out of date: {reason}",
                    cache_name=cache.name,
                )
            )
        return tuple(warnings)
