"""Named hook lookup for YAML model files.

A model file names its hooks (``beforeCreate: hashPassword``); the names
resolve here to functions bound in code with ``@hook``.
"""

from collections.abc import Callable

from crudforge.hooks.types import HookFn


class HookRegistry:
    """Process-wide table of hook functions keyed by name.

    Example:
        @hook("hashPassword")
        async def hash_password(data):
            ...
    """

    _hooks: dict[str, HookFn] = {}

    @classmethod
    def register(cls, name: str, hook_fn: HookFn) -> None:
        """Bind ``name`` to ``hook_fn``. The first binding of a name wins."""
        cls._hooks.setdefault(name, hook_fn)

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._hooks.pop(name, None)

    @classmethod
    def get(cls, name: str) -> HookFn:
        """Resolve a hook name.

        Raises:
            ValueError: If nothing is bound to ``name``
        """
        try:
            return cls._hooks[name]
        except KeyError:
            raise ValueError(
                f"Hook '{name}' is not registered. Bind it with @hook('{name}') "
                "before loading model files."
            ) from None

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._hooks

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(cls._hooks)

    @classmethod
    def clear(cls) -> None:
        """Forget every binding (used between tests)."""
        cls._hooks.clear()


def hook(name: str) -> Callable[[HookFn], HookFn]:
    """Register the decorated function under ``name`` and return it unchanged.

    Usage:
        @hook("stampAuthor")
        def stamp_author(data):
            return {**data, "author": "system"}
    """

    def decorator(fn: HookFn) -> HookFn:
        HookRegistry.register(name, fn)
        return fn

    return decorator
