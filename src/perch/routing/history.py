"""Navigation history: a stack of rendered views."""

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """A rendered view and the JSON payload it was rendered with."""

    view: str
    payload: str | None = None


class HistoryStack:
    """Entries pushed and popped at the tail only.

    The tail is the view currently displayed.
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: list[HistoryEntry] = []

    def push(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)

    def pop(self) -> HistoryEntry:
        """Remove and return the tail. Raises ``IndexError`` when empty."""
        return self._entries.pop()

    @property
    def current(self) -> HistoryEntry | None:
        return self._entries[-1] if self._entries else None

    @property
    def previous(self) -> HistoryEntry | None:
        """The entry below the tail, which ``go_back()`` returns to."""
        return self._entries[-2] if len(self._entries) > 1 else None

    @property
    def views(self) -> list[str]:
        return [entry.view for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"HistoryStack({self.views!r})"
