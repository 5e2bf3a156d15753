"""Shared fixtures for prio tests."""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from prio.persistence import TaskPersistence
from prio.selection import SelectionTracker
from prio.storage import MemoryKeyValueStore
from prio.store import TaskStore


@pytest.fixture
def temp_project(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary project directory and change to it."""
    original_dir = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_dir)


@pytest.fixture
def temp_prio_dir(temp_project: Path) -> Path:
    """Create a temporary .prio directory."""
    prio_dir = temp_project / ".prio"
    prio_dir.mkdir()
    return prio_dir


class CountingKeyValueStore(MemoryKeyValueStore):
    """In-memory store that counts writes."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        super().__init__(data)
        self.writes = 0

    def set(self, key: str, value: str) -> None:
        super().set(key, value)
        self.writes += 1

    def remove(self, key: str) -> None:
        if key in self.data:
            self.writes += 1
        super().remove(key)


@pytest.fixture
def kv() -> CountingKeyValueStore:
    """An empty in-memory key-value store that counts writes."""
    return CountingKeyValueStore()


@pytest.fixture
def clock() -> Callable[[], int]:
    """A fake millisecond clock that advances by one on every call."""
    ticks = iter(range(1_736_500_000_000, 1_736_500_001_000))
    return lambda: next(ticks)


@pytest.fixture
def store(kv: CountingKeyValueStore, clock: Callable[[], int]) -> TaskStore:
    """An empty task store backed by memory."""
    return TaskStore(TaskPersistence(kv), selection=SelectionTracker(), clock=clock)


@pytest.fixture
def sample_tasks_data() -> list[dict]:
    """Sample persisted task list, newest first."""
    return [
        {"id": 3, "text": "Call the plumber", "priority": "Urgent"},
        {"id": 2, "text": "Write report", "priority": "Medium"},
        {"id": 1, "text": "Water plants", "priority": "Low"},
    ]


@pytest.fixture
def sample_storage(temp_prio_dir: Path, sample_tasks_data: list[dict]) -> Path:
    """Create a storage file holding the sample tasks."""
    storage_path = temp_prio_dir / "storage.json"
    storage_path.write_text(json.dumps({"todos": json.dumps(sample_tasks_data)}))
    return storage_path
