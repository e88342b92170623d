"""SQLite persistence client."""

import logging
import sqlite3
import uuid
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from crudforge.core.types import FieldKind, get_storage_type
from crudforge.metadata.model import TIMESTAMP_FIELDS, ModelDescriptor
from crudforge.persistence.adapter import Projection, Record, RecordNotFound

logger = logging.getLogger(__name__)


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class SQLiteCollection:
    """One table. Column names come from the model, never from requests."""

    def __init__(self, client: "SQLiteClient", name: str):
        self.client = client
        self.name = name

    @property
    def conn(self) -> sqlite3.Connection:
        if not self.client.conn:
            raise RuntimeError("Database not connected")
        return self.client.conn

    @property
    def model(self) -> ModelDescriptor | None:
        return self.client.models.get(self.name)

    @property
    def primary_key(self) -> str:
        return self.model.primary_key if self.model else "id"

    def _columns(self) -> list[str]:
        return self.client.list_fields(self.name)

    def _select_list(self, projection: Projection) -> str:
        if projection is None:
            return "*"
        columns = set(self._columns())
        wanted = [c for c in projection if c in columns]
        if not wanted:
            wanted = [self.primary_key]
        return ", ".join(_quote(c) for c in wanted)

    def _where_clause(self, where: Record | None) -> tuple[str, list[Any]]:
        if not where:
            return "", []
        columns = set(self._columns())
        parts = []
        values = []
        for key, value in where.items():
            if key not in columns:
                raise ValueError(f"Unknown column '{key}' in table '{self.name}'")
            parts.append(f"{_quote(key)} = ?")
            values.append(self._to_storage(value))
        return " WHERE " + " AND ".join(parts), values

    def _to_storage(self, value: Any) -> Any:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        return value

    def _from_row(self, row: sqlite3.Row) -> Record:
        record = dict(row)
        model = self.model
        if model:
            for name, descriptor in model.fields.items():
                if descriptor.kind is FieldKind.BOOLEAN and record.get(name) is not None:
                    record[name] = bool(record[name])
        return record

    async def create(self, data: Record, projection: Projection = None) -> Record:
        record = dict(data)
        pk = self.primary_key
        if record.get(pk) is None:
            record[pk] = str(uuid.uuid4())

        model = self.model
        if model and model.timestamps:
            now = datetime.now(timezone.utc).isoformat()
            for name in TIMESTAMP_FIELDS:
                record.setdefault(name, now)

        columns = set(self._columns())
        field_names = [k for k in record if k in columns]
        placeholders = ", ".join("?" for _ in field_names)
        values = [self._to_storage(record[k]) for k in field_names]

        sql = (
            f"INSERT INTO {_quote(self.name)} "
            f"({', '.join(_quote(k) for k in field_names)}) VALUES ({placeholders})"
        )
        self.conn.execute(sql, values)
        self.conn.commit()

        created = await self.find_unique({pk: record[pk]}, projection)
        if created is None:
            raise RecordNotFound(
                f"Inserted record {record[pk]!r} is missing from '{self.name}'"
            )
        return created

    async def find_unique(
        self, where: Record, projection: Projection = None
    ) -> Record | None:
        clause, values = self._where_clause(where)
        sql = f"SELECT {self._select_list(projection)} FROM {_quote(self.name)}{clause} LIMIT 1"
        row = self.conn.execute(sql, values).fetchone()
        return self._from_row(row) if row else None

    async def find_many(
        self, query: dict[str, Any] | None = None, projection: Projection = None
    ) -> list[Record]:
        query = query or {}
        clause, values = self._where_clause(query.get("where"))
        sql = f"SELECT {self._select_list(projection)} FROM {_quote(self.name)}{clause}"

        order_by = query.get("order_by") or {}
        if order_by:
            columns = set(self._columns())
            terms = []
            for key, direction in order_by.items():
                if key not in columns:
                    raise ValueError(f"Unknown sort column '{key}' in table '{self.name}'")
                terms.append(f"{_quote(key)} {'DESC' if str(direction).lower() == 'desc' else 'ASC'}")
            sql += " ORDER BY " + ", ".join(terms)

        take = query.get("take")
        skip = query.get("skip") or 0
        if take is not None or skip:
            sql += " LIMIT ? OFFSET ?"
            values.extend([take if take is not None else -1, skip])

        cursor = self.conn.execute(sql, values)
        return [self._from_row(row) for row in cursor.fetchall()]

    async def update(
        self, where: Record, data: Record, projection: Projection = None
    ) -> Record:
        existing = await self.find_unique(where, [self.primary_key])
        if existing is None:
            raise RecordNotFound(f"No record in '{self.name}' matches {where}")

        record = dict(data)
        model = self.model
        if model and model.timestamps:
            record["updatedAt"] = datetime.now(timezone.utc).isoformat()

        # Primary key is immutable
        columns = set(self._columns())
        updatable = [k for k in record if k in columns and k != self.primary_key]

        key = {self.primary_key: existing[self.primary_key]}
        if updatable:
            set_clause = ", ".join(f"{_quote(k)} = ?" for k in updatable)
            clause, values = self._where_clause(key)
            sql = f"UPDATE {_quote(self.name)} SET {set_clause}{clause}"
            self.conn.execute(sql, [self._to_storage(record[k]) for k in updatable] + values)
            self.conn.commit()

        updated = await self.find_unique(key, projection)
        if updated is None:
            raise RecordNotFound(f"No record in '{self.name}' matches {key}")
        return updated

    async def delete(self, where: Record) -> Record:
        existing = await self.find_unique(where)
        if existing is None:
            raise RecordNotFound(f"No record in '{self.name}' matches {where}")

        clause, values = self._where_clause({self.primary_key: existing[self.primary_key]})
        self.conn.execute(f"DELETE FROM {_quote(self.name)}{clause}", values)
        self.conn.commit()
        return existing

    async def count(self, where: Record | None = None) -> int:
        clause, values = self._where_clause(where)
        row = self.conn.execute(
            f"SELECT COUNT(*) FROM {_quote(self.name)}{clause}", values
        ).fetchone()
        return int(row[0])


class SQLiteClient:
    """Simple SQLite persistence client."""

    def __init__(self, db_path: Path | str = ":memory:"):
        self.db_path = str(db_path)
        self.conn: sqlite3.Connection | None = None
        self.models: dict[str, ModelDescriptor] = {}

    def connect(self) -> None:
        """Establish database connection."""
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def initialize_model(self, model: ModelDescriptor) -> None:
        """Create the model's table if it doesn't exist."""
        if not self.conn:
            raise RuntimeError("Database not connected")

        columns: dict[str, str] = {}
        pk_descriptor = model.fields.get(model.primary_key)
        pk_type = get_storage_type(pk_descriptor.kind) if pk_descriptor else "TEXT"
        columns[model.primary_key] = f"{_quote(model.primary_key)} {pk_type} PRIMARY KEY"

        for name, descriptor in model.fields.items():
            if name in columns:
                continue
            col_def = f"{_quote(name)} {get_storage_type(descriptor.kind)}"
            if descriptor.unique:
                col_def += " UNIQUE"
            columns[name] = col_def

        # Hidden fields may be written by hooks without being declared
        for name in sorted(model.hidden):
            columns.setdefault(name, f"{_quote(name)} TEXT")

        if model.timestamps:
            for name in TIMESTAMP_FIELDS:
                columns.setdefault(name, f"{_quote(name)} TEXT")

        sql = (
            f"CREATE TABLE IF NOT EXISTS {_quote(model.collection_name)} "
            f"({', '.join(columns.values())})"
        )
        self.conn.execute(sql)
        self.conn.commit()
        self.models[model.collection_name] = model
        logger.debug("Initialized table '%s'", model.collection_name)

    def collection(self, name: str) -> SQLiteCollection:
        return SQLiteCollection(self, name)

    def list_fields(self, collection_name: str) -> list[str]:
        """Column names of a table, in table order.

        Raises:
            LookupError: If the table does not exist.
        """
        if not self.conn:
            raise RuntimeError("Database not connected")
        rows = self.conn.execute(
            f"PRAGMA table_info({_quote(collection_name)})"
        ).fetchall()
        if not rows:
            raise LookupError(f"Table '{collection_name}' does not exist")
        return [row["name"] for row in rows]
