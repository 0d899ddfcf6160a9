"""'Show first K / show all' policy for one ordered list."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


class CollapsibleListController:
    """Expand/collapse state of a single list.

    One instance per logical list: two lists on the same screen never share
    state, even when they hold the same items.
    """

    def __init__(self, collapsed_count: int, *, expanded: bool = False) -> None:
        if collapsed_count < 0:
            raise ValueError("collapsed_count must be >= 0")
        self._collapsed_count = collapsed_count
        self._expanded = expanded

    @property
    def collapsed_count(self) -> int:
        return self._collapsed_count

    @property
    def expanded(self) -> bool:
        return self._expanded

    def visible(self, items: Sequence[T] | None) -> list[T]:
        items = list(items or [])
        if self._expanded:
            return items
        return items[: self._collapsed_count]

    def should_show_toggle(self, items: Sequence[T] | None) -> bool:
        return len(items or []) > self._collapsed_count

    def toggle(self) -> bool:
        self._expanded = not self._expanded
        return self._expanded

    def reset(self) -> None:
        self._expanded = False

    @property
    def toggle_label(self) -> str:
        return "Show less" if self._expanded else "Show more"
