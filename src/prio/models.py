"""Data models for prio."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class Priority(str, Enum):
    """Task priority levels."""

    URGENT = "Urgent"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def _missing_(cls, value: object) -> Priority | None:
        # Accept "urgent", "LOW", etc.
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


class Filter(str, Enum):
    """Priority filter applied to the visible task list."""

    ALL = "All"
    URGENT = "Urgent"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def _missing_(cls, value: object) -> Filter | None:
        if isinstance(value, Priority):
            return cls(value.value)
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None

    def matches(self, task: Task) -> bool:
        """Check whether a task is visible under this filter."""
        if self is Filter.ALL:
            return True
        return task.priority.value == self.value


class Task(BaseModel):
    """A single task. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: int
    text: str
    priority: Priority = Priority.MEDIUM

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("task text must not be blank")
        return value

    def __str__(self) -> str:
        """Return a string representation."""
        return f"[{self.priority.value}] {self.text}"


@dataclass(frozen=True)
class Counts:
    """Per-priority task totals."""

    all: int = 0
    urgent: int = 0
    medium: int = 0
    low: int = 0

    def for_filter(self, value: Filter) -> int:
        """Return the total shown next to a filter button."""
        return getattr(self, value.value.lower())
