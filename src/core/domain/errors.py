"""Error taxonomy.

Every failure path in the core ends in one of these types. Each one maps to a
single presentation decision:

- `FetchError`: a subscription fetch failed; rendered inline, never as a toast.
- `MutationError`: a user action failed; rendered as an error notification.
- `PreconditionError`: the triggering UI context lacked a required identifier;
  short-circuited before any network call.
- `InvalidationWarning`: the mutation succeeded but the refresh after it
  failed; the user must not be told the action failed.
"""

from __future__ import annotations

from typing import Any


class SkillSyncError(Exception):
    """Base class for every error raised by this package."""


class BackendError(SkillSyncError):
    """Failure reported by (or while talking to) a backend service.

    `body` keeps the decoded payload untouched: typically a list of
    `{"message": ...}` objects or a single `{"message": ...}` object.
    """

    def __init__(
        self,
        message: str = "",
        *,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class FetchError(SkillSyncError):
    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class MutationError(SkillSyncError):
    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class PreconditionError(SkillSyncError):
    def __init__(self, message: str, *, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.missing = missing


class InvalidationWarning(SkillSyncError):
    def __init__(self, message: str, *, cache_name: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cache_name = cache_name


class SubscriptionNotReadyError(SkillSyncError):
    """Raised when a cache is invalidated before it ever received parameters."""
