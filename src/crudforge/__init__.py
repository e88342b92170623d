"""crudforge: metadata-driven REST API generator.

Declare models, register them, and get CRUD routes with validation,
field projection, and lifecycle hooks:

    from crudforge import CrudforgeServer, InMemoryClient, ModelDescriptor

    user = ModelDescriptor.from_config(
        "User", {"fillable": ["name", "email"], "hidden": ["password"]}
    )
    CrudforgeServer(InMemoryClient()).register_model(user).generate_routes().run()
"""

from crudforge.core.types import FieldKind
from crudforge.errors import (
    ConfigurationError,
    CrudforgeError,
    FieldIssue,
    InternalError,
    NotFoundError,
    ValidationError,
)
from crudforge.hooks import HookRegistry, ModelHooks, hook
from crudforge.metadata import (
    FieldDescriptor,
    FieldRegistry,
    ModelDescriptor,
    ModelLoader,
    define_model,
)
from crudforge.persistence import InMemoryClient, SQLiteClient
from crudforge.registry import Crudforge
from crudforge.repository import Repository, compute_projection
from crudforge.validation import build_partial_schema, build_strict_schema
from crudforge.api.app import CrudforgeServer, create_app

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "Crudforge",
    "CrudforgeError",
    "CrudforgeServer",
    "FieldDescriptor",
    "FieldIssue",
    "FieldKind",
    "FieldRegistry",
    "HookRegistry",
    "InMemoryClient",
    "InternalError",
    "ModelDescriptor",
    "ModelHooks",
    "ModelLoader",
    "NotFoundError",
    "Repository",
    "SQLiteClient",
    "ValidationError",
    "build_partial_schema",
    "build_strict_schema",
    "compute_projection",
    "create_app",
    "define_model",
    "hook",
]
