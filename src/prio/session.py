"""A user session over the task store, with draft input for new tasks."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from prio.config import PrioConfig
from prio.models import Counts, Filter, Priority, Task
from prio.persistence import TaskPersistence
from prio.selection import SelectionTracker
from prio.storage import JsonFileKeyValueStore, KeyValueStore
from prio.store import TaskStore, wall_clock_ms


class Session:
    """View-facing operations for one logical session.

    The selection set and the active filter live only as long as the
    session; the task collection is persisted on every mutation.
    """

    def __init__(self, store: TaskStore, default_priority: Priority = Priority.MEDIUM) -> None:
        self.store = store
        self.selection = store.selection
        self.default_priority = default_priority
        self.draft_text = ""
        self.draft_priority = default_priority

    @classmethod
    def open(
        cls,
        config: PrioConfig | None = None,
        kv: KeyValueStore | None = None,
        clock: Callable[[], int] = wall_clock_ms,
    ) -> Session:
        """Build a session from configuration, rehydrating saved tasks."""
        if config is None:
            config = PrioConfig()
        if kv is None:
            kv = JsonFileKeyValueStore(Path(config.storage.path))

        store = TaskStore(
            TaskPersistence(kv, key=config.storage.key),
            selection=SelectionTracker(),
            clock=clock,
            monotonic_ids=config.ids.monotonic,
        )
        return cls(store, default_priority=config.defaults.priority)

    # Draft input

    def submit(self) -> Task | None:
        """Create a task from the draft; reset the draft on success."""
        task = self.store.create(self.draft_text, self.draft_priority)
        if task is not None:
            self.draft_text = ""
            self.draft_priority = self.default_priority
        return task

    # Mutations

    def create(self, text: str, priority: Priority | str | None = None) -> Task | None:
        return self.store.create(text, priority or self.default_priority)

    def remove(self, task_id: int) -> bool:
        return self.store.remove(task_id)

    def remove_many(self, task_ids: set[int] | frozenset[int]) -> int:
        return self.store.remove_many(task_ids)

    def finish_selected(self) -> int:
        """Bulk-remove the current selection. No-op when nothing is selected."""
        if not self.can_finish_selection():
            return 0
        return self.store.remove_many(self.selection.ids())

    def toggle_selection(self, task_id: int) -> None:
        self.selection.toggle(task_id)

    def clear_selection(self) -> None:
        self.selection.clear()

    def set_filter(self, value: Filter | Priority | str) -> Filter:
        return self.store.set_filter(value)

    # Queries

    @property
    def filter(self) -> Filter:
        return self.store.filter

    def filtered_view(self) -> list[Task]:
        return self.store.filtered_view()

    def counts(self) -> Counts:
        return self.store.counts()

    def selection_size(self) -> int:
        return self.selection.size()

    def can_finish_selection(self) -> bool:
        return self.selection.size() > 0

    def is_selected(self, task_id: int) -> bool:
        return self.selection.contains(task_id)
