"""Request-body validation schemas built from model descriptors.

Two schemas are derived per model:
- partial: every field optional, used for updates
- strict: required fields enforced, server-generated identifiers excluded,
  used for creation

Both are pydantic models created at runtime in strict mode, so values are
never coerced across kinds ("1" is not a number, "2024-01-01" is not a
date). Keys outside the assignable field set are dropped.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Annotated, Any, Union

from pydantic import (
    AllowInfNan,
    BaseModel,
    ConfigDict,
    Field,
    Strict,
    StrictBool,
    StrictInt,
    StringConstraints,
    create_model,
)
from pydantic import ValidationError as PydanticValidationError

from crudforge.core.types import FieldKind
from crudforge.errors import FieldIssue, ValidationError
from crudforge.metadata.fields import FieldDescriptor
from crudforge.metadata.model import ModelDescriptor

UUID_PATTERN = (
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)

PARTIAL = "partial"
STRICT = "strict"

# pydantic error type -> crudforge issue code
_ERROR_CODES = {
    "missing": "REQUIRED",
    "string_too_long": "MAX_LENGTH",
    "string_pattern_mismatch": "INVALID_IDENTIFIER",
    "model_type": "INVALID_RECORD",
    "model_attributes_type": "INVALID_RECORD",
}


def _annotation(descriptor: FieldDescriptor) -> Any:
    """Map a field descriptor to a strict pydantic type."""
    kind = descriptor.kind

    if kind is FieldKind.STRING:
        return Annotated[
            str, StringConstraints(strict=True, max_length=descriptor.max_length)
        ]
    if kind is FieldKind.IDENTIFIER:
        return Annotated[
            str,
            StringConstraints(
                strict=True, pattern=UUID_PATTERN, max_length=descriptor.max_length
            ),
        ]
    if kind is FieldKind.NUMBER:
        # JSON responses cannot carry NaN or Infinity
        return Union[StrictInt, Annotated[float, Strict(), AllowInfNan(False)]]
    if kind is FieldKind.BOOLEAN:
        return StrictBool
    if kind is FieldKind.DATE:
        return Union[Annotated[datetime, Strict()], Annotated[date, Strict()]]

    raise ValueError(f"Unsupported field kind: {kind}")


@dataclass(frozen=True)
class RecordValidator:
    """A built validation schema for one model.

    Attributes:
        model_name: Model the schema was built from
        mode: "partial" or "strict"
        schema: Generated pydantic model
        defaults: Defaults filled in for omitted optional fields
    """

    model_name: str
    mode: str
    schema: type[BaseModel]
    defaults: dict[str, Any] = field(default_factory=dict)

    @property
    def field_names(self) -> list[str]:
        return [info.alias or name for name, info in self.schema.model_fields.items()]

    def validate(self, record: Any) -> dict[str, Any]:
        """Validate a record and return its normalized form.

        Only supplied (or defaulted) fields are returned, so a partial update
        never nulls out fields the client left alone.

        Raises:
            ValidationError: With one FieldIssue per problem.
        """
        try:
            instance = self.schema.model_validate(record)
        except PydanticValidationError as e:
            raise ValidationError(_issues_from(e)) from e

        data = instance.model_dump(by_alias=True, exclude_unset=True)
        for name, value in self.defaults.items():
            data.setdefault(name, value)
        return data

    def is_valid(self, record: Any) -> bool:
        try:
            self.validate(record)
        except ValidationError:
            return False
        return True


def _issues_from(error: PydanticValidationError) -> list[FieldIssue]:
    issues = []
    seen = set()
    for detail in error.errors():
        # Union kinds report one error per member under loc[1:]
        parts = detail.get("loc", ())
        loc = str(parts[0]) if parts else ""
        error_type = detail.get("type", "")
        code = _ERROR_CODES.get(error_type, "INVALID_TYPE")
        if (loc, code) in seen:
            continue
        seen.add((loc, code))
        if code == "REQUIRED":
            message = f"{loc} is required"
        elif code == "INVALID_IDENTIFIER":
            message = f"{loc} must be a valid UUID"
        else:
            message = detail.get("msg", "Invalid value")
        issues.append(FieldIssue(field=loc, message=message, code=code))
    return issues


def _build(model: ModelDescriptor, mode: str) -> RecordValidator:
    definitions: dict[str, Any] = {}
    defaults: dict[str, Any] = {}

    for index, descriptor in enumerate(model.assignable_fields()):
        if mode == STRICT and descriptor.server_generated:
            continue

        annotation = _annotation(descriptor)
        # Positional names keep field names like "schema" or "_id" from
        # clashing with BaseModel attributes; the alias is the real key.
        internal_name = f"field_{index}"

        if mode == STRICT and descriptor.required:
            definitions[internal_name] = (annotation, Field(alias=descriptor.name))
        else:
            definitions[internal_name] = (
                annotation,
                Field(default=None, alias=descriptor.name),
            )
            if mode == STRICT and descriptor.default is not None:
                defaults[descriptor.name] = descriptor.default

    schema = create_model(
        f"{model.name}{mode.capitalize()}Schema",
        __config__=ConfigDict(extra="ignore", populate_by_name=False),
        **definitions,
    )
    return RecordValidator(
        model_name=model.name, mode=mode, schema=schema, defaults=defaults
    )


def build_partial_schema(model: ModelDescriptor) -> RecordValidator:
    """Every assignable field optional; ``{}`` always validates."""
    return _build(model, PARTIAL)


def build_strict_schema(model: ModelDescriptor) -> RecordValidator:
    """Required fields enforced; primary identifier fields excluded."""
    return _build(model, STRICT)
