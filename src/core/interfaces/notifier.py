"""Notification sink contract (toast-like messages)."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@runtime_checkable
class Notifier(Protocol):
    def notify(self, title: str, message: str, severity: Severity) -> None:
        """Show a short, user-facing message. Must not raise."""

        ...
