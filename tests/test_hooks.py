"""Tests for the model lifecycle hook system."""

import pytest

from crudforge.errors import ConfigurationError
from crudforge.hooks import HookRegistry, HookService, ModelHooks, hook


# =============================================================================
# ModelHooks
# =============================================================================


class TestModelHooks:
    def test_empty_by_default(self):
        assert ModelHooks().defined() == []

    def test_from_dict_accepts_camel_case_points(self):
        def fn(data):
            return data

        hooks = ModelHooks.from_dict({"beforeCreate": fn, "afterFind": fn})
        assert hooks.before_create is fn
        assert hooks.after_find is fn
        assert hooks.defined() == ["before_create", "after_find"]

    def test_from_dict_accepts_attribute_names(self):
        def fn(id):
            return None

        assert ModelHooks.from_dict({"before_delete": fn}).before_delete is fn

    def test_from_dict_rejects_unknown_point(self):
        with pytest.raises(ConfigurationError, match="Unknown hook point"):
            ModelHooks.from_dict({"beforeSave": lambda data: data})


# =============================================================================
# HookRegistry
# =============================================================================


class TestHookRegistry:
    def test_register_and_get(self):
        def my_hook(data):
            return data

        HookRegistry.register("myHook", my_hook)
        assert HookRegistry.get("myHook") is my_hook

    def test_register_idempotent(self):
        def hook_a(data):
            return data

        def hook_b(data):
            return data

        HookRegistry.register("myHook", hook_a)
        HookRegistry.register("myHook", hook_b)
        assert HookRegistry.get("myHook") is hook_a

    def test_get_unregistered_raises(self):
        with pytest.raises(ValueError, match="not registered"):
            HookRegistry.get("nonexistent")

    def test_is_registered(self):
        assert not HookRegistry.is_registered("myHook")
        HookRegistry.register("myHook", lambda data: data)
        assert HookRegistry.is_registered("myHook")

    def test_list_registered_sorted(self):
        HookRegistry.register("zeta", lambda data: data)
        HookRegistry.register("alpha", lambda data: data)
        assert HookRegistry.list_registered() == ["alpha", "zeta"]

    def test_unregister(self):
        HookRegistry.register("myHook", lambda data: data)
        HookRegistry.unregister("myHook")
        HookRegistry.unregister("neverRegistered")
        assert not HookRegistry.is_registered("myHook")

    def test_clear(self):
        HookRegistry.register("myHook", lambda data: data)
        HookRegistry.clear()
        assert HookRegistry.list_registered() == []


class TestHookDecorator:
    def test_decorator_registers_and_returns_function(self):
        @hook("stampAuthor")
        def stamp_author(data):
            return {**data, "author": "system"}

        assert HookRegistry.get("stampAuthor") is stamp_author
        assert stamp_author({"title": "x"}) == {"title": "x", "author": "system"}


# =============================================================================
# HookService
# =============================================================================


class TestHookService:
    @pytest.mark.asyncio
    async def test_missing_hook_returns_default(self):
        service = HookService("Post", ModelHooks())
        assert not service.has("before_create")
        assert await service.run("before_create", {"a": 1}, default={"a": 1}) == {"a": 1}

    @pytest.mark.asyncio
    async def test_sync_hook(self):
        service = HookService(
            "Post", ModelHooks(before_create=lambda data: {**data, "slug": "x"})
        )
        assert service.has("before_create")
        assert await service.run("before_create", {"a": 1}) == {"a": 1, "slug": "x"}

    @pytest.mark.asyncio
    async def test_async_hook_is_awaited(self):
        async def after_update(id, data, result):
            return {**result, "touched": id}

        service = HookService("Post", ModelHooks(after_update=after_update))
        result = await service.run("after_update", "p1", {}, {"id": "p1"})
        assert result == {"id": "p1", "touched": "p1"}

    @pytest.mark.asyncio
    async def test_hook_errors_propagate(self):
        def before_delete(id):
            raise RuntimeError("locked")

        service = HookService("Post", ModelHooks(before_delete=before_delete))
        with pytest.raises(RuntimeError, match="locked"):
            await service.run("before_delete", "p1")
