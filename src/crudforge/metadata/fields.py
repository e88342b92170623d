"""Field descriptors and the per-model field registry."""

from dataclasses import dataclass
from typing import Any

from crudforge.core.types import FieldKind, parse_kind
from crudforge.errors import ConfigurationError


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    kind: FieldKind = FieldKind.STRING
    required: bool = True
    unique: bool = False
    primary: bool = False
    max_length: int | None = None
    default: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, FieldKind):
            try:
                kind = parse_kind(self.kind)
            except ValueError as e:
                raise ConfigurationError(
                    f"Field '{self.name}' has unknown type '{self.kind}'"
                ) from e
            object.__setattr__(self, "kind", kind)

    @property
    def server_generated(self) -> bool:
        """Primary identifiers are assigned by the backend, never the client."""
        return self.primary and self.kind is FieldKind.IDENTIFIER

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FieldDescriptor":
        """Create a FieldDescriptor from a YAML/JSON dict."""
        try:
            kind = parse_kind(data.get("type", "string"))
        except ValueError as e:
            raise ConfigurationError(
                f"Field '{data.get('name')}' has unknown type '{data.get('type')}'"
            ) from e

        return cls(
            name=data["name"],
            kind=kind,
            required=data.get("required", True),
            unique=data.get("unique", False),
            primary=data.get("primary", data.get("primaryKey", False)),
            max_length=data.get("maxLength", data.get("length")),
            default=data.get("default"),
        )


class FieldRegistry:
    """Holds declared fields per model, keyed by model name.

    Fields are attached one at a time and keep their declaration order.
    Re-declaring a field replaces the earlier descriptor in place.

    Example:
        registry = FieldRegistry()
        registry.field("User", "id", "identifier", primary=True)
        registry.field("User", "email", "string", unique=True)
        user = define_model("User", registry=registry)
    """

    def __init__(self) -> None:
        self._fields: dict[str, dict[str, FieldDescriptor]] = {}

    def add_field(self, model_name: str, descriptor: FieldDescriptor) -> None:
        self._fields.setdefault(model_name, {})[descriptor.name] = descriptor

    def field(
        self,
        model_name: str,
        name: str,
        kind: "str | FieldKind" = FieldKind.STRING,
        **options: Any,
    ) -> FieldDescriptor:
        """Declare a field by keyword and return its descriptor."""
        try:
            resolved = parse_kind(kind)
        except ValueError as e:
            raise ConfigurationError(
                f"Field '{model_name}.{name}' has unknown type '{kind}'"
            ) from e
        descriptor = FieldDescriptor(name=name, kind=resolved, **options)
        self.add_field(model_name, descriptor)
        return descriptor

    def fields_for(self, model_name: str) -> dict[str, FieldDescriptor]:
        """Declared fields for a model in declaration order (copy)."""
        return dict(self._fields.get(model_name, {}))

    def has_model(self, model_name: str) -> bool:
        return model_name in self._fields

    def list_models(self) -> list[str]:
        return list(self._fields.keys())
