"""Configuration models for prio."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from prio.models import Priority


class StorageConfig(BaseModel):
    """Configuration for the durable key-value store."""

    path: str = ".prio/storage.json"
    key: str = "todos"


class DefaultsConfig(BaseModel):
    """Defaults applied to new tasks."""

    priority: Priority = Priority.MEDIUM


class IdsConfig(BaseModel):
    """Configuration for task id assignment."""

    # Bump clock ids that would collide with or precede an existing id.
    monotonic: bool = False


class LoggingConfig(BaseModel):
    """Configuration for log output."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"


class PrioConfig(BaseModel):
    """Main configuration for prio."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    ids: IdsConfig = Field(default_factory=IdsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> PrioConfig:
        """Load configuration from file or return defaults."""
        if path is None:
            path = CONFIG_FILE

        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        return cls.model_validate(data)

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = CONFIG_FILE

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)


# Default config directory
PRIO_DIR = Path(".prio")
CONFIG_FILE = PRIO_DIR / "config.json"
STORAGE_FILE = PRIO_DIR / "storage.json"
