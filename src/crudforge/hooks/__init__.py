"""crudforge model lifecycle hook system.

Provides interception points around every repository operation:
- beforeCreate / afterCreate
- beforeUpdate / afterUpdate
- beforeDelete / afterDelete
- beforeFind / afterFind

Usage:
    from crudforge.hooks import ModelHooks, hook

    @hook("normalizeEmail")
    def normalize_email(data):
        return {**data, "email": data["email"].lower()}

    hooks = ModelHooks(before_create=normalize_email)
"""

from crudforge.hooks.registry import HookRegistry, hook
from crudforge.hooks.service import HookService
from crudforge.hooks.types import HOOK_POINTS, HookFn, ModelHooks

__all__ = [
    "HOOK_POINTS",
    "HookFn",
    "HookRegistry",
    "HookService",
    "ModelHooks",
    "hook",
]
