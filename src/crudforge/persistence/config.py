"""Database configuration and client factory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crudforge.persistence.adapter import PersistenceClient


@dataclass
class DatabaseConfig:
    """Database connection configuration.

    Supports memory:// and sqlite:/// URL schemes.
    """

    url: str

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> DatabaseConfig:
        """Create config from environment variables.

        Resolution order:
        1. CRUDFORGE_DATABASE_URL env var
        2. CRUDFORGE_DB_PATH env var (converted to sqlite:/// URL)
        3. Default: memory://
        """
        url = os.environ.get("CRUDFORGE_DATABASE_URL")
        if url:
            return cls(url=url)

        db_path = os.environ.get("CRUDFORGE_DB_PATH")
        if db_path:
            if base_path and not Path(db_path).is_absolute():
                db_path = str(base_path / db_path)
            return cls(url=f"sqlite:///{db_path}")

        return cls(url="memory://")

    @property
    def is_memory(self) -> bool:
        return self.url.startswith("memory")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def sqlite_path(self) -> str:
        path = self.url.replace("sqlite:///", "", 1)
        return path or ":memory:"


def create_client(config: DatabaseConfig) -> PersistenceClient:
    """Create a persistence client based on the database URL scheme.

    Returns:
        A PersistenceClient instance (not yet connected).

    Raises:
        ValueError: For unsupported URL schemes.
    """
    if config.is_memory:
        from crudforge.persistence.memory import InMemoryClient

        return InMemoryClient()

    if config.is_sqlite:
        from crudforge.persistence.sqlite import SQLiteClient

        path = config.sqlite_path
        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        return SQLiteClient(path)

    raise ValueError(f"Unsupported database URL scheme: {config.url}")
