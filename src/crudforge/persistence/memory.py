"""In-memory persistence client."""

import uuid
from datetime import datetime, timezone
from typing import Any

from crudforge.metadata.model import TIMESTAMP_FIELDS, ModelDescriptor
from crudforge.persistence.adapter import (
    Projection,
    Record,
    RecordNotFound,
    project,
)


def _matches(record: Record, where: Record | None) -> bool:
    if not where:
        return True
    return all(record.get(key) == value for key, value in where.items())


class InMemoryCollection:
    """A list of dict records with insertion order preserved."""

    def __init__(self, name: str, primary_key: str = "id", timestamps: bool = False):
        self.name = name
        self.primary_key = primary_key
        self.timestamps = timestamps
        self.records: list[Record] = []

    def _find(self, where: Record) -> Record | None:
        for record in self.records:
            if _matches(record, where):
                return record
        return None

    async def create(self, data: Record, projection: Projection = None) -> Record:
        record = dict(data)
        if record.get(self.primary_key) is None:
            record[self.primary_key] = str(uuid.uuid4())
        if self.timestamps:
            now = datetime.now(timezone.utc).isoformat()
            for name in TIMESTAMP_FIELDS:
                record.setdefault(name, now)
        self.records.append(record)
        return project(record, projection)

    async def find_unique(
        self, where: Record, projection: Projection = None
    ) -> Record | None:
        record = self._find(where)
        if record is None:
            return None
        return project(record, projection)

    async def find_many(
        self, query: dict[str, Any] | None = None, projection: Projection = None
    ) -> list[Record]:
        query = query or {}
        rows = [r for r in self.records if _matches(r, query.get("where"))]

        # Apply sorts last-key-first so the first key dominates
        for key, direction in reversed(list((query.get("order_by") or {}).items())):
            rows.sort(
                key=lambda r: (r.get(key) is None, r.get(key)),
                reverse=str(direction).lower() == "desc",
            )

        skip = query.get("skip") or 0
        take = query.get("take")
        rows = rows[skip:] if take is None else rows[skip : skip + take]
        return [project(r, projection) for r in rows]

    async def update(
        self, where: Record, data: Record, projection: Projection = None
    ) -> Record:
        record = self._find(where)
        if record is None:
            raise RecordNotFound(f"No record in '{self.name}' matches {where}")
        record.update({k: v for k, v in data.items() if k != self.primary_key})
        if self.timestamps:
            record["updatedAt"] = datetime.now(timezone.utc).isoformat()
        return project(record, projection)

    async def delete(self, where: Record) -> Record:
        record = self._find(where)
        if record is None:
            raise RecordNotFound(f"No record in '{self.name}' matches {where}")
        self.records.remove(record)
        return dict(record)

    async def count(self, where: Record | None = None) -> int:
        return sum(1 for r in self.records if _matches(r, where))


class InMemoryClient:
    """Dict-backed client; collections are created on first use."""

    def __init__(self) -> None:
        self.collections: dict[str, InMemoryCollection] = {}

    def connect(self) -> None:
        pass

    def close(self) -> None:
        pass

    def initialize_model(self, model: ModelDescriptor) -> None:
        """Configure key generation and timestamps for a model's collection."""
        collection = self.collections.get(model.collection_name)
        if collection is None:
            collection = InMemoryCollection(model.collection_name)
            self.collections[model.collection_name] = collection
        collection.primary_key = model.primary_key
        collection.timestamps = model.timestamps

    def collection(self, name: str) -> InMemoryCollection:
        if name not in self.collections:
            self.collections[name] = InMemoryCollection(name)
        return self.collections[name]

    def list_fields(self, collection_name: str) -> list[str]:
        """Union of keys across stored records, in first-seen order.

        Raises:
            LookupError: If the collection holds no records yet, since the
                field set cannot be known.
        """
        collection = self.collections.get(collection_name)
        if collection is None or not collection.records:
            raise LookupError(f"No schema information for '{collection_name}'")
        seen: dict[str, None] = {}
        for record in collection.records:
            seen.update(dict.fromkeys(record))
        return list(seen)
