"""Field kind registry with storage and query-coercion defaults."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


class FieldKind(str, Enum):
    """The primitive kinds a model field can declare."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    IDENTIFIER = "identifier"


def _coerce_number(raw: str) -> Any:
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw


def _coerce_boolean(raw: str) -> Any:
    lowered = raw.lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    return raw


@dataclass
class KindInfo:
    kind: FieldKind
    storage_type: str
    # Converts a query-string value into the kind's native value
    coerce_query: Callable[[str], Any]


# Built-in field kinds
FIELD_KINDS: dict[FieldKind, KindInfo] = {
    FieldKind.STRING: KindInfo(
        kind=FieldKind.STRING,
        storage_type="TEXT",
        coerce_query=str,
    ),
    FieldKind.NUMBER: KindInfo(
        kind=FieldKind.NUMBER,
        storage_type="REAL",
        coerce_query=_coerce_number,
    ),
    FieldKind.BOOLEAN: KindInfo(
        kind=FieldKind.BOOLEAN,
        storage_type="INTEGER",  # 0/1
        coerce_query=_coerce_boolean,
    ),
    FieldKind.DATE: KindInfo(
        kind=FieldKind.DATE,
        storage_type="TEXT",  # ISO format
        coerce_query=str,
    ),
    FieldKind.IDENTIFIER: KindInfo(
        kind=FieldKind.IDENTIFIER,
        storage_type="TEXT",
        coerce_query=str,
    ),
}

# Aliases accepted in YAML model files
KIND_ALIASES: dict[str, FieldKind] = {
    "uuid": FieldKind.IDENTIFIER,
    "id": FieldKind.IDENTIFIER,
    "text": FieldKind.STRING,
    "int": FieldKind.NUMBER,
    "float": FieldKind.NUMBER,
    "bool": FieldKind.BOOLEAN,
    "datetime": FieldKind.DATE,
}


def parse_kind(name: "str | FieldKind") -> FieldKind:
    """Resolve a kind name or alias.

    Raises:
        ValueError: If the name is not a known kind.
    """
    if isinstance(name, FieldKind):
        return name
    if name in KIND_ALIASES:
        return KIND_ALIASES[name]
    return FieldKind(name)


def get_kind_info(kind: FieldKind) -> KindInfo:
    return FIELD_KINDS[kind]


def get_storage_type(kind: FieldKind) -> str:
    """Get SQLite storage type for a field kind."""
    return FIELD_KINDS[kind].storage_type
