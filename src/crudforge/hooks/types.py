"""Hook system types for crudforge.

Defines the lifecycle hook slots a model can fill. Each slot holds an
optional callable; plain functions and coroutine functions are both
accepted. An empty slot behaves as identity (or no-op for before_delete).
"""

from dataclasses import dataclass, fields
from typing import Any, Callable

from crudforge.errors import ConfigurationError

# Hook point names as they appear in YAML model files, mapped to the
# ModelHooks attribute they fill.
HOOK_POINTS: dict[str, str] = {
    "beforeCreate": "before_create",
    "afterCreate": "after_create",
    "beforeUpdate": "before_update",
    "afterUpdate": "after_update",
    "beforeDelete": "before_delete",
    "afterDelete": "after_delete",
    "beforeFind": "before_find",
    "afterFind": "after_find",
}

HookFn = Callable[..., Any]


@dataclass(frozen=True)
class ModelHooks:
    """Optional lifecycle hooks for one model.

    Signatures:
        before_create(data) -> data
        after_create(data, result) -> result
        before_update(id, data) -> data
        after_update(id, data, result) -> result
        before_delete(id) -> None
        after_delete(id, result) -> result
        before_find(query) -> query (find_by_id: keep a "where" mapping)
        after_find(result_or_results) -> transformed
    """

    before_create: HookFn | None = None
    after_create: HookFn | None = None
    before_update: HookFn | None = None
    after_update: HookFn | None = None
    before_delete: HookFn | None = None
    after_delete: HookFn | None = None
    before_find: HookFn | None = None
    after_find: HookFn | None = None

    @classmethod
    def from_dict(cls, data: dict[str, HookFn]) -> "ModelHooks":
        """Build hooks from a mapping keyed by camelCase point or attribute name.

        Raises:
            ConfigurationError: If a key is not a hook point.
        """
        kwargs: dict[str, HookFn] = {}
        for key, fn in data.items():
            attr = HOOK_POINTS.get(key, key)
            if attr not in HOOK_POINTS.values():
                raise ConfigurationError(f"Unknown hook point '{key}'")
            kwargs[attr] = fn
        return cls(**kwargs)

    def defined(self) -> list[str]:
        """Names of the hook slots that are set."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]
