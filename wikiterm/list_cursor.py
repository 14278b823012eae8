"""Wraparound single selection over an ordered sequence.

Shared by the spaces pane, the pages pane, and the sort picker. The cursor
also owns the pane's scroll offset so mouse hit-testing and rendering agree
on which item sits under a given row.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Generic, TypeVar

T = TypeVar("T")


class ListCursor(Generic[T]):
    def __init__(self, items: Sequence[T] = ()) -> None:
        self._items: list[T] = list(items)
        self.index: int | None = None
        self.offset = 0

    @property
    def items(self) -> list[T]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def set_items(self, items: Sequence[T]) -> None:
        """Swap the backing sequence.

        The selected index keeps its number, not its meaning; an index that no
        longer fits is dropped. Callers reset explicitly when the meaning
        changes (space change, refresh, search).
        """
        self._items = list(items)
        if self.index is not None and self.index >= len(self._items):
            self.index = None
        self.offset = min(self.offset, max(0, len(self._items) - 1))

    def clear_items(self) -> None:
        self._items = []
        self.reset()

    def reset(self) -> None:
        self.index = None
        self.offset = 0

    def clear_selection(self) -> None:
        self.index = None

    def selected(self) -> T | None:
        if self.index is None:
            return None
        return self._items[self.index]

    def select(self, index: int) -> T | None:
        """Select ``index``; anything outside the sequence clears the selection."""
        if 0 <= index < len(self._items):
            self.index = index
        else:
            self.index = None
        return self.selected()

    def next(self) -> None:
        if not self._items:
            return
        if self.index is None or self.index >= len(self._items) - 1:
            self.index = 0
        else:
            self.index += 1

    def previous(self) -> None:
        if not self._items:
            return
        if self.index is None or self.index == 0:
            self.index = len(self._items) - 1
        else:
            self.index -= 1

    def scroll_into_view(self, rows: int) -> int:
        """Clamp ``offset`` so the selection is visible in ``rows`` rows."""
        rows = max(1, rows)
        if self.index is not None:
            if self.index < self.offset:
                self.offset = self.index
            elif self.index >= self.offset + rows:
                self.offset = self.index - rows + 1
        self.offset = max(0, min(self.offset, max(0, len(self._items) - rows)))
        return self.offset
