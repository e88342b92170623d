"""Top-level registry: models, their repositories, and custom routes."""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import FastAPI

from crudforge.api.routes import (
    HTTP_METHODS,
    CustomRoute,
    ModelBinding,
    RouteEntry,
    RouteGenerator,
)
from crudforge.errors import ConfigurationError
from crudforge.metadata.model import ModelDescriptor
from crudforge.persistence.adapter import ModelAwareClient
from crudforge.repository.repository import Repository
from crudforge.validation.schema import (
    RecordValidator,
    build_partial_schema,
    build_strict_schema,
)

logger = logging.getLogger(__name__)

ModelRef = ModelDescriptor | str


class Crudforge:
    """Registers models and generates their REST routes.

    Registration and route generation are chainable:

        forge = Crudforge(client)
        forge.register_model(user, post).get("/health", health).generate_routes(app)

    Routes are generated once; the table is immutable afterwards.

    Raises:
        ConfigurationError: If no persistence client is given.
    """

    def __init__(self, client: Any = None):
        if client is None:
            raise ConfigurationError(
                "A persistence client is required. Pass an InMemoryClient, "
                "SQLiteClient, or another PersistenceClient implementation."
            )
        self.client = client
        self._models: dict[str, ModelDescriptor] = {}
        self._repositories: dict[str, Repository] = {}
        self._partial_schemas: dict[str, RecordValidator] = {}
        self._strict_schemas: dict[str, RecordValidator] = {}
        self._custom_routes: list[CustomRoute] = []
        self._route_table: list[RouteEntry] | None = None

    # --- Registration ---

    def register_model(self, *models: ModelDescriptor) -> "Crudforge":
        """Register models and create their repositories."""
        self._ensure_open("register models")

        for model in models:
            if model.name in self._models:
                raise ConfigurationError(f"Model '{model.name}' is already registered")
            for other in self._models.values():
                if other.collection_name == model.collection_name:
                    raise ConfigurationError(
                        f"Models '{other.name}' and '{model.name}' share the "
                        f"collection '{model.collection_name}'"
                    )

            if isinstance(self.client, ModelAwareClient):
                self.client.initialize_model(model)

            collection = self.client.collection(model.collection_name)
            self._models[model.name] = model
            self._repositories[model.name] = Repository(model, collection, self.client)
            logger.info(
                "Registered model '%s' (collection '%s')",
                model.name,
                model.collection_name,
            )
        return self

    def _key(self, model: ModelRef) -> str:
        return model if isinstance(model, str) else model.name

    def list_models(self) -> list[ModelDescriptor]:
        return list(self._models.values())

    def get_model(self, model: ModelRef) -> ModelDescriptor:
        name = self._key(model)
        if name not in self._models:
            raise ConfigurationError(f"Model '{name}' is not registered")
        return self._models[name]

    def get_repository(self, model: ModelRef) -> Repository:
        name = self._key(model)
        repository = self._repositories.get(name)
        if repository is None:
            raise ConfigurationError(
                f"Repository for {name} not found. Did you register the model?"
            )
        return repository

    def get_validation_schema(self, model: ModelRef) -> RecordValidator:
        """Partial schema (all fields optional) for updates."""
        descriptor = self.get_model(model)
        if descriptor.name not in self._partial_schemas:
            self._partial_schemas[descriptor.name] = build_partial_schema(descriptor)
        return self._partial_schemas[descriptor.name]

    def get_strict_validation_schema(self, model: ModelRef) -> RecordValidator:
        """Strict schema (required fields enforced) for creation."""
        descriptor = self.get_model(model)
        if descriptor.name not in self._strict_schemas:
            self._strict_schemas[descriptor.name] = build_strict_schema(descriptor)
        return self._strict_schemas[descriptor.name]

    # --- Custom routes ---

    def add_route(self, method: str, path: str, handler: Callable[..., Any]) -> "Crudforge":
        """Register a custom route, mounted under the base path as-is."""
        self._ensure_open("add routes")
        method = method.upper()
        if method not in HTTP_METHODS:
            raise ConfigurationError(f"Unsupported HTTP method '{method}'")
        self._custom_routes.append(CustomRoute(method, path, handler))
        return self

    def get(self, path: str, handler: Callable[..., Any]) -> "Crudforge":
        return self.add_route("GET", path, handler)

    def post(self, path: str, handler: Callable[..., Any]) -> "Crudforge":
        return self.add_route("POST", path, handler)

    def put(self, path: str, handler: Callable[..., Any]) -> "Crudforge":
        return self.add_route("PUT", path, handler)

    def delete(self, path: str, handler: Callable[..., Any]) -> "Crudforge":
        return self.add_route("DELETE", path, handler)

    def patch(self, path: str, handler: Callable[..., Any]) -> "Crudforge":
        return self.add_route("PATCH", path, handler)

    # --- Route generation ---

    @property
    def route_table(self) -> list[RouteEntry]:
        """The generated routes (empty before generation)."""
        return list(self._route_table or [])

    def _ensure_open(self, action: str) -> None:
        if self._route_table is not None:
            raise ConfigurationError(f"Cannot {action} after routes have been generated")

    def generate_routes(self, app: FastAPI, base_path: str = "/api") -> "Crudforge":
        """Mount CRUD, custom, and documentation routes on ``app``.

        Raises:
            ConfigurationError: If routes were already generated.
        """
        if self._route_table is not None:
            raise ConfigurationError("Routes have already been generated")

        bindings = [
            ModelBinding(
                model=model,
                repository=self._repositories[name],
                partial_schema=self.get_validation_schema(name),
                strict_schema=self.get_strict_validation_schema(name),
            )
            for name, model in self._models.items()
        ]
        router, entries = RouteGenerator(bindings, self._custom_routes).build(base_path)
        app.include_router(router)

        self._route_table = entries
        logger.info(
            "Generated %d routes for %d models under %s",
            len(entries),
            len(bindings),
            base_path,
        )
        return self
