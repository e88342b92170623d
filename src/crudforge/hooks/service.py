"""Hook execution service for crudforge.

Invokes a single lifecycle hook slot, awaiting the result when the hook
is a coroutine function. Errors propagate to the caller unchanged.
"""

import inspect
import logging
from typing import Any

from crudforge.hooks.types import ModelHooks

logger = logging.getLogger(__name__)


class HookService:
    """Runs model lifecycle hooks.

    A missing hook is a pass-through: ``run`` returns ``default``.
    """

    def __init__(self, model_name: str, hooks: ModelHooks):
        self.model_name = model_name
        self.hooks = hooks

    def has(self, point: str) -> bool:
        return getattr(self.hooks, point) is not None

    async def run(self, point: str, *args: Any, default: Any = None) -> Any:
        """Execute the hook at ``point`` with ``args``.

        Args:
            point: ModelHooks attribute name (e.g. "before_create")
            args: Positional arguments passed to the hook
            default: Value returned when the hook is unset

        Returns:
            The hook's (awaited) return value, or ``default``.
        """
        hook_fn = getattr(self.hooks, point)
        if hook_fn is None:
            return default

        logger.debug("Running %s hook for model '%s'", point, self.model_name)
        result = hook_fn(*args)
        if inspect.isawaitable(result):
            result = await result
        return result
