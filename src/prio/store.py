"""Task store - the ordered task collection and its active filter.

The store is the only place tasks are created or removed. Every mutation is
followed by a synchronous save through the persistence adapter, and every
removal is reconciled against the selection tracker so that it never holds
ids of deleted tasks.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Iterator

from prio.models import Counts, Filter, Priority, Task
from prio.persistence import TaskPersistence
from prio.selection import SelectionTracker

logger = logging.getLogger(__name__)


def wall_clock_ms() -> int:
    """Milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class TaskStore:
    """Newest-first task collection with a priority filter."""

    def __init__(
        self,
        persistence: TaskPersistence,
        selection: SelectionTracker | None = None,
        clock: Callable[[], int] = wall_clock_ms,
        monotonic_ids: bool = False,
    ) -> None:
        self.persistence = persistence
        self.selection = selection if selection is not None else SelectionTracker()
        self.clock = clock
        self.monotonic_ids = monotonic_ids
        self.filter = Filter.ALL
        self._tasks: list[Task] = persistence.load()

    @property
    def tasks(self) -> tuple[Task, ...]:
        """The full collection, newest first."""
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._tasks))

    def get(self, task_id: int) -> Task | None:
        """Get a task by ID."""
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def create(self, text: str, priority: Priority | str = Priority.MEDIUM) -> Task | None:
        """Add a task to the front of the collection.

        Args:
            text: Raw task text; surrounding whitespace is trimmed
            priority: Priority level or its name

        Returns:
            The new task, or None if the trimmed text is empty
        """
        text = text.strip()
        if not text:
            return None

        task = Task(id=self._next_id(), text=text, priority=Priority(priority))
        self._tasks = [task, *self._tasks]
        self._save()
        logger.debug("Created task %d (%s)", task.id, task.priority.value)
        return task

    def remove(self, task_id: int) -> bool:
        """Remove a task by ID. Returns True if removed."""
        self.selection.discard(task_id)

        remaining = [task for task in self._tasks if task.id != task_id]
        if len(remaining) == len(self._tasks):
            return False

        self._tasks = remaining
        self._save()
        logger.debug("Removed task %d", task_id)
        return True

    def remove_many(self, task_ids: Iterable[int]) -> int:
        """Remove every task whose id is in task_ids and clear the selection.

        Unknown ids are ignored. Returns the number of tasks removed.
        """
        doomed = set(task_ids)
        remaining = [task for task in self._tasks if task.id not in doomed]
        removed = len(self._tasks) - len(remaining)

        self._tasks = remaining
        self.selection.clear()
        self._save()
        logger.debug("Removed %d of %d requested tasks", removed, len(doomed))
        return removed

    def set_filter(self, value: Filter | Priority | str) -> Filter:
        """Change the active filter. Filters are never persisted."""
        self.filter = Filter(value)
        return self.filter

    def filtered_view(self, value: Filter | Priority | str | None = None) -> list[Task]:
        """Return tasks visible under a filter, preserving order.

        Uses the active filter when none is given.
        """
        active = self.filter if value is None else Filter(value)
        return [task for task in self._tasks if active.matches(task)]

    def counts(self) -> Counts:
        """Return totals for the whole collection and per priority."""
        totals = {priority: 0 for priority in Priority}
        for task in self._tasks:
            totals[task.priority] += 1

        return Counts(
            all=len(self._tasks),
            urgent=totals[Priority.URGENT],
            medium=totals[Priority.MEDIUM],
            low=totals[Priority.LOW],
        )

    def _next_id(self) -> int:
        """Clock id, bumped past the largest id when it would repeat one.

        With monotonic_ids, ids also never go below the largest id.
        """
        task_id = self.clock()
        if not self._tasks:
            return task_id

        highest = max(task.id for task in self._tasks)
        if self.monotonic_ids:
            clashes = task_id <= highest
        else:
            clashes = any(task.id == task_id for task in self._tasks)
        if clashes:
            task_id = highest + 1
        return task_id

    def _save(self) -> None:
        self.persistence.save(self._tasks)
