"""Validation schema builder.

Usage:
    from crudforge.validation import build_strict_schema

    validator = build_strict_schema(user_model)
    data = validator.validate({"name": "John", "email": "john@x.com"})
"""

from crudforge.validation.schema import (
    PARTIAL,
    STRICT,
    UUID_PATTERN,
    RecordValidator,
    build_partial_schema,
    build_strict_schema,
)

__all__ = [
    "PARTIAL",
    "STRICT",
    "UUID_PATTERN",
    "RecordValidator",
    "build_partial_schema",
    "build_strict_schema",
]
