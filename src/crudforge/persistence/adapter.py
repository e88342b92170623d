"""Persistence protocols: the contract every backend implements.

A backend is a client handing out named collections. Records are plain
dicts. ``projection`` arguments are iterables of field names to return;
``None`` returns every stored field.
"""

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from crudforge.metadata.model import ModelDescriptor

Record = dict[str, Any]
Projection = Iterable[str] | None


class RecordNotFound(LookupError):
    """Raised by update/delete when no record matches the key."""


@runtime_checkable
class Collection(Protocol):
    """Operations on one named collection."""

    async def create(self, data: Record, projection: Projection = None) -> Record: ...

    async def find_unique(
        self, where: Record, projection: Projection = None
    ) -> Record | None: ...

    async def find_many(
        self, query: dict[str, Any] | None = None, projection: Projection = None
    ) -> list[Record]: ...

    async def update(
        self, where: Record, data: Record, projection: Projection = None
    ) -> Record: ...

    async def delete(self, where: Record) -> Record: ...

    async def count(self, where: Record | None = None) -> int: ...


@runtime_checkable
class PersistenceClient(Protocol):
    """Interface all persistence clients must implement.

    ``find_many`` queries accept the keys ``skip``, ``take``, ``where``
    (equality filters) and ``order_by`` ({field: "asc" | "desc"}).
    """

    def connect(self) -> None: ...

    def close(self) -> None: ...

    def collection(self, name: str) -> Collection: ...


@runtime_checkable
class ModelAwareClient(Protocol):
    """Optional capability: prepare storage for a registered model."""

    def initialize_model(self, model: ModelDescriptor) -> None: ...


@runtime_checkable
class IntrospectingClient(Protocol):
    """Optional capability: report every field a collection stores."""

    def list_fields(self, collection_name: str) -> list[str]: ...


def project(record: Record, projection: Projection) -> Record:
    """Keep only the projected keys of a record."""
    if projection is None:
        return dict(record)
    keep = set(projection)
    return {k: v for k, v in record.items() if k in keep}
