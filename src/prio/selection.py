"""Selection tracking for bulk actions."""

from __future__ import annotations

from collections.abc import Iterator


class SelectionTracker:
    """The set of task ids marked for a pending bulk removal.

    Ids are not validated on toggle; the task store prunes stale ids when
    it removes tasks.
    """

    def __init__(self) -> None:
        self._ids: set[int] = set()

    def toggle(self, task_id: int) -> None:
        """Select task_id if unselected, otherwise unselect it."""
        if task_id in self._ids:
            self._ids.remove(task_id)
        else:
            self._ids.add(task_id)

    def discard(self, task_id: int) -> None:
        """Unselect task_id if selected."""
        self._ids.discard(task_id)

    def clear(self) -> None:
        """Unselect everything."""
        self._ids.clear()

    def contains(self, task_id: int) -> bool:
        return task_id in self._ids

    def size(self) -> int:
        return len(self._ids)

    def ids(self) -> frozenset[int]:
        """Return a snapshot of the selected ids."""
        return frozenset(self._ids)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._ids))
