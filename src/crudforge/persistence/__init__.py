"""Persistence layer - collection contract and backends."""

from crudforge.persistence.adapter import (
    Collection,
    IntrospectingClient,
    ModelAwareClient,
    PersistenceClient,
    RecordNotFound,
)
from crudforge.persistence.config import DatabaseConfig, create_client
from crudforge.persistence.memory import InMemoryClient
from crudforge.persistence.sqlite import SQLiteClient

__all__ = [
    "Collection",
    "DatabaseConfig",
    "InMemoryClient",
    "IntrospectingClient",
    "ModelAwareClient",
    "PersistenceClient",
    "RecordNotFound",
    "SQLiteClient",
    "create_client",
]
