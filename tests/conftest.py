"""Shared fixtures for crudforge tests."""

import pytest

from crudforge.hooks import HookRegistry
from crudforge.metadata import FieldDescriptor, ModelDescriptor, define_model
from crudforge.persistence import InMemoryClient


@pytest.fixture(autouse=True)
def clear_hook_registry():
    """Clear hook registry before and after each test."""
    HookRegistry.clear()
    yield
    HookRegistry.clear()


@pytest.fixture
def memory_client():
    return InMemoryClient()


@pytest.fixture
def user_model():
    """Config-path User: every fillable field is text, password hidden."""
    return ModelDescriptor.from_config(
        "User",
        {"fillable": ["name", "email", "password"], "hidden": ["password"]},
    )


@pytest.fixture
def typed_user_model():
    """Explicit-path User with one field per kind."""
    return define_model(
        "User",
        fields=[
            FieldDescriptor("id", "identifier", primary=True),
            FieldDescriptor("name", "string", max_length=20),
            FieldDescriptor("email", "string", unique=True),
            FieldDescriptor("age", "number", required=False),
            FieldDescriptor("active", "boolean", required=False, default=True),
            FieldDescriptor("birthday", "date", required=False),
            FieldDescriptor("password", "string", required=False),
        ],
        hidden=["password"],
    )
