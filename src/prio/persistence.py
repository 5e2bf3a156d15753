"""Persistence adapter: saves and restores the task collection."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Literal

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from prio.models import Priority, Task
from prio.storage import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_KEY = "todos"


class StoredTask(BaseModel):
    """One entry of the stored record, matched exactly with no coercion."""

    model_config = ConfigDict(strict=True)

    id: int
    text: str
    priority: Literal["Urgent", "Medium", "Low"]

    def to_task(self) -> Task:
        return Task(id=self.id, text=self.text, priority=Priority(self.priority))


_RECORD = TypeAdapter(list[StoredTask])


class TaskPersistence:
    """Serializes the ordered task collection under a single fixed key."""

    def __init__(self, kv: KeyValueStore, key: str = DEFAULT_KEY) -> None:
        self.kv = kv
        self.key = key

    def save(self, tasks: Iterable[Task]) -> None:
        """Overwrite the stored record with the full collection."""
        payload = [task.model_dump(mode="json") for task in tasks]
        self.kv.set(self.key, json.dumps(payload))

    def load(self) -> list[Task]:
        """Restore the collection; corrupted records yield an empty list.

        Returns:
            Tasks in stored order, or [] if the key is absent or the record
            is not a valid list of tasks with unique ids.
        """
        raw = self.kv.get(self.key)
        if raw is None:
            return []

        try:
            tasks = [entry.to_task() for entry in _RECORD.validate_json(raw, strict=True)]
        except ValidationError as e:
            logger.warning(
                "Discarding corrupted record under %r (%d errors)", self.key, e.error_count()
            )
            return []

        ids = [task.id for task in tasks]
        if len(set(ids)) != len(ids):
            logger.warning("Discarding record under %r: duplicate task ids", self.key)
            return []

        logger.debug("Loaded %d tasks from %r", len(tasks), self.key)
        return tasks
