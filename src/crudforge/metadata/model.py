"""Model descriptors: storage name, keys, visibility rules, and hooks."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from crudforge.core.types import FieldKind
from crudforge.errors import ConfigurationError
from crudforge.hooks.types import ModelHooks
from crudforge.metadata.fields import FieldDescriptor, FieldRegistry

TIMESTAMP_FIELDS = ("createdAt", "updatedAt")


def default_collection_name(model_name: str) -> str:
    """``User`` -> ``users``."""
    return model_name.lower() + "s"


@dataclass(frozen=True)
class ModelDescriptor:
    """Configuration describing one model.

    Attributes:
        name: Model identity used for registry lookups
        collection_name: Persistence collection (and route segment) name
        primary_key: Primary-key field name
        timestamps: Whether createdAt/updatedAt are managed
        fillable: Ordered whitelist of mass-assignable fields
        hidden: Fields that never appear in any output
        fields: Declared field descriptors in declaration order
        hooks: Lifecycle hooks
        typed: False when built from a bare config object (every field
            is opaque text)
    """

    name: str
    collection_name: str
    primary_key: str = "id"
    timestamps: bool = True
    fillable: tuple[str, ...] = ()
    hidden: frozenset[str] = frozenset()
    fields: dict[str, FieldDescriptor] = field(default_factory=dict)
    hooks: ModelHooks = field(default_factory=ModelHooks)
    typed: bool = True

    def assignable_fields(self) -> list[FieldDescriptor]:
        """Fields a request body may set, in deterministic order.

        The fillable whitelist narrows the declared fields when present.
        Fillable names without a descriptor are treated as opaque text.
        """
        if not self.fillable:
            return list(self.fields.values())
        return [
            self.fields.get(name) or FieldDescriptor(name=name, kind=FieldKind.STRING)
            for name in self.fillable
        ]

    def get_field(self, name: str) -> FieldDescriptor | None:
        return self.fields.get(name)

    @classmethod
    def from_config(cls, name: str, config: dict[str, Any]) -> "ModelDescriptor":
        """Build a descriptor from a bare configuration object.

        This is the reduced-fidelity path: no per-field type information is
        available, so each fillable field becomes a required text field.

        Recognized keys: table_name (or tableName/table), primary_key
        (or primaryKey), timestamps, fillable, hidden, hooks.
        """
        fillable = tuple(config.get("fillable") or ())
        hooks = config.get("hooks") or ModelHooks()
        if isinstance(hooks, dict):
            hooks = ModelHooks.from_dict(hooks)

        return define_model(
            name,
            fields=[FieldDescriptor(name=f, kind=FieldKind.STRING) for f in fillable],
            table_name=(
                config.get("table_name") or config.get("tableName") or config.get("table")
            ),
            primary_key=config.get("primary_key") or config.get("primaryKey") or "id",
            timestamps=config.get("timestamps", True),
            fillable=fillable,
            hidden=config.get("hidden") or (),
            hooks=hooks,
            typed=False,
        )


def define_model(
    name: str,
    fields: Iterable[FieldDescriptor] | None = None,
    *,
    registry: FieldRegistry | None = None,
    table_name: str | None = None,
    primary_key: str | None = None,
    timestamps: bool = True,
    fillable: Iterable[str] = (),
    hidden: Iterable[str] = (),
    hooks: ModelHooks | None = None,
    typed: bool = True,
) -> ModelDescriptor:
    """Build a ModelDescriptor from explicit field descriptors.

    Fields come from ``fields`` or, when omitted, from ``registry``. The
    primary key defaults to the first field flagged ``primary``, then "id".

    Raises:
        ConfigurationError: On duplicate fields or more than one primary field.
    """
    if fields is None:
        declared = registry.fields_for(name) if registry else {}
    else:
        declared = {}
        for descriptor in fields:
            if descriptor.name in declared:
                raise ConfigurationError(
                    f"Model '{name}' declares field '{descriptor.name}' twice"
                )
            declared[descriptor.name] = descriptor

    primaries = [f.name for f in declared.values() if f.primary]
    if len(primaries) > 1:
        raise ConfigurationError(
            f"Model '{name}' declares more than one primary field: {primaries}"
        )

    if primary_key is None:
        primary_key = primaries[0] if primaries else "id"

    return ModelDescriptor(
        name=name,
        collection_name=table_name or default_collection_name(name),
        primary_key=primary_key,
        timestamps=timestamps,
        fillable=tuple(dict.fromkeys(fillable)),
        hidden=frozenset(hidden),
        fields=declared,
        hooks=hooks or ModelHooks(),
        typed=typed,
    )
