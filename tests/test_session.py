"""Tests for prio.session module."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from prio.config import PrioConfig
from prio.models import Counts, Filter, Priority
from prio.session import Session
from prio.storage import MemoryKeyValueStore
from prio.store import TaskStore

if TYPE_CHECKING:
    from conftest import CountingKeyValueStore


@pytest.fixture
def session(store: TaskStore) -> Session:
    """A session over the in-memory store."""
    return Session(store)


class TestDraft:
    """Tests for the draft input."""

    def test_defaults(self, session: Session) -> None:
        """Test the draft starts blank at Medium."""
        assert session.draft_text == ""
        assert session.draft_priority is Priority.MEDIUM

    def test_submit_resets_draft(self, session: Session) -> None:
        """Test a successful submit clears the draft."""
        session.draft_text = "Buy milk"
        session.draft_priority = Priority.URGENT

        task = session.submit()
        assert task is not None
        assert task.priority is Priority.URGENT
        assert session.draft_text == ""
        assert session.draft_priority is Priority.MEDIUM

    def test_blank_submit_keeps_draft(self, session: Session) -> None:
        """Test a no-op submit leaves the draft alone."""
        session.draft_text = "   "
        session.draft_priority = Priority.LOW

        assert session.submit() is None
        assert session.draft_text == "   "
        assert session.draft_priority is Priority.LOW


class TestOperations:
    """Tests for the view-facing operations."""

    def test_create_uses_default_priority(self, store: TaskStore) -> None:
        """Test create falls back to the session default."""
        session = Session(store, default_priority=Priority.LOW)
        task = session.create("Water plants")
        assert task is not None
        assert task.priority is Priority.LOW

    def test_toggle_and_size(self, session: Session) -> None:
        """Test selection queries."""
        task = session.create("Buy milk")
        assert task is not None
        assert not session.can_finish_selection()

        session.toggle_selection(task.id)
        assert session.is_selected(task.id)
        assert session.selection_size() == 1
        assert session.can_finish_selection()

        session.clear_selection()
        assert session.selection_size() == 0

    def test_finish_selected(self, session: Session) -> None:
        """Test finishing removes the selected tasks only."""
        keep = session.create("keep")
        drop = session.create("drop")
        assert keep is not None and drop is not None
        session.toggle_selection(drop.id)

        assert session.finish_selected() == 1
        assert session.filtered_view() == [keep]
        assert session.selection_size() == 0

    def test_finish_empty_selection_is_noop(
        self, session: Session, kv: CountingKeyValueStore
    ) -> None:
        """Test finishing with nothing selected writes nothing."""
        session.create("Buy milk")
        writes = kv.writes
        assert session.finish_selected() == 0
        assert kv.writes == writes

    def test_remove_many(self, session: Session) -> None:
        """Test remove_many with an explicit id set."""
        task = session.create("Buy milk")
        assert task is not None
        assert session.remove_many({task.id, 1}) == 1
        assert session.counts() == Counts()

    def test_filter(self, session: Session) -> None:
        """Test filtering through the session."""
        session.create("u", Priority.URGENT)
        session.create("l", Priority.LOW)
        assert session.set_filter("Low") is Filter.LOW
        assert session.filter is Filter.LOW
        assert [t.text for t in session.filtered_view()] == ["l"]

    def test_selection_change_not_persisted(
        self, session: Session, kv: CountingKeyValueStore
    ) -> None:
        """Test selection changes never write."""
        task = session.create("Buy milk")
        assert task is not None
        writes = kv.writes
        session.toggle_selection(task.id)
        session.clear_selection()
        assert kv.writes == writes

    def test_remove(self, session: Session) -> None:
        """Test single removal through the session."""
        task = session.create("Buy milk")
        assert task is not None
        assert session.remove(task.id) is True
        assert session.remove(task.id) is False


class TestOpen:
    """Tests for Session.open."""

    def test_open_defaults(self, temp_project: Path) -> None:
        """Test a default session writes to .prio/storage.json."""
        session = Session.open()
        session.create("Buy milk")

        data = json.loads((temp_project / ".prio" / "storage.json").read_text())
        assert [t["text"] for t in json.loads(data["todos"])] == ["Buy milk"]

    def test_open_reloads(self, temp_project: Path, clock: Callable[[], int]) -> None:
        """Test a second session sees the first session's tasks."""
        first = Session.open(clock=clock)
        first.create("Buy milk", Priority.URGENT)
        first.create("Write report")

        second = Session.open(clock=clock)
        assert second.filtered_view() == first.filtered_view()
        assert second.counts() == Counts(all=2, urgent=1, medium=1, low=0)

    def test_open_with_config(self, temp_project: Path) -> None:
        """Test storage path, key and default priority come from config."""
        config = PrioConfig.model_validate(
            {
                "storage": {"path": "data/store.json", "key": "work"},
                "defaults": {"priority": "Low"},
            }
        )
        session = Session.open(config)
        task = session.create("Deploy")
        assert task is not None
        assert task.priority is Priority.LOW

        data = json.loads((temp_project / "data" / "store.json").read_text())
        assert "work" in data

    def test_open_with_kv(self) -> None:
        """Test an explicit key-value store is used as given."""
        kv = MemoryKeyValueStore()
        Session.open(kv=kv).create("Buy milk")
        assert "todos" in kv.data

    def test_open_monotonic(self) -> None:
        """Test the monotonic id option reaches the store."""
        config = PrioConfig.model_validate({"ids": {"monotonic": True}})
        session = Session.open(config, kv=MemoryKeyValueStore())
        assert session.store.monotonic_ids is True

    def test_open_corrupted(self, sample_storage: Path) -> None:
        """Test a garbage record opens as an empty session."""
        sample_storage.write_text(json.dumps({"todos": "garbage"}))
        assert Session.open().counts() == Counts()

    def test_open_sample(self, sample_storage: Path) -> None:
        """Test the sample record loads in order."""
        session = Session.open()
        assert [t.id for t in session.filtered_view()] == [3, 2, 1]

    def test_open_same_tick_reloads(self, temp_project: Path) -> None:
        """Test tasks created within one clock tick all come back."""
        first = Session.open(clock=lambda: 1000)
        first.create("Buy milk")
        first.create("Write report")

        second = Session.open(clock=lambda: 1000)
        assert [t.text for t in second.filtered_view()] == ["Write report", "Buy milk"]
