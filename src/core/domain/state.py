"""Subscription and mutation state containers.

Plain frozen dataclasses: these are produced and consumed in-process only,
never validated from external input, so they stay out of pydantic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from core.domain.errors import FetchError, InvalidationWarning

T = TypeVar("T")


class Status(str, Enum):
    PENDING = "pending"
    DATA = "data"
    ERROR = "error"


class Trigger(str, Enum):
    """What caused a fetch: a parameter change or an explicit invalidation."""

    PARAMS = "params"
    INVALIDATE = "invalidate"


@dataclass(frozen=True)
class SubscriptionState(Generic[T]):
    """Exactly one of pending / data / error, tagged with its generation."""

    status: Status
    generation: int
    trigger: Trigger = Trigger.PARAMS
    data: T | None = None
    error: FetchError | None = None

    @classmethod
    def pending(cls, generation: int = 0, trigger: Trigger = Trigger.PARAMS) -> "SubscriptionState[T]":
        return cls(status=Status.PENDING, generation=generation, trigger=trigger)

    @classmethod
    def loaded(cls, data: T, generation: int, trigger: Trigger) -> "SubscriptionState[T]":
        return cls(status=Status.DATA, generation=generation, trigger=trigger, data=data)

    @classmethod
    def failed(cls, error: FetchError, generation: int, trigger: Trigger) -> "SubscriptionState[T]":
        return cls(status=Status.ERROR, generation=generation, trigger=trigger, error=error)

    @property
    def is_pending(self) -> bool:
        return self.status is Status.PENDING

    @property
    def is_data(self) -> bool:
        return self.status is Status.DATA

    @property
    def is_error(self) -> bool:
        return self.status is Status.ERROR

    @property
    def is_terminal(self) -> bool:
        return self.status is not Status.PENDING


@dataclass(frozen=True)
class MutationOutcome:
    """Result of `MutationCoordinator.perform`.

    `ok` is True when the backend accepted the mutation, even if some
    dependent caches failed to refresh (those show up in `warnings`).
    """

    ok: bool
    error: str | None = None
    warnings: tuple[InvalidationWarning, ...] = field(default_factory=tuple)
    value: Any = None

    @classmethod
    def success(
        cls,
        value: Any = None,
        warnings: tuple[InvalidationWarning, ...] = (),
    ) -> "MutationOutcome":
        return cls(ok=True, value=value, warnings=warnings)

    @classmethod
    def failure(cls, error: str) -> "MutationOutcome":
        return cls(ok=False, error=error)
