"""Tests for the Crudforge registry."""

import pytest
from fastapi import FastAPI

from crudforge import Crudforge
from crudforge.api.routes import RouteKind
from crudforge.errors import ConfigurationError
from crudforge.metadata import ModelDescriptor
from crudforge.persistence import InMemoryClient, SQLiteClient
from crudforge.repository import Repository


def health():
    return {"status": "ok"}


@pytest.fixture
def forge(memory_client):
    return Crudforge(memory_client)


# =============================================================================
# Construction and registration
# =============================================================================


class TestRegistration:
    def test_client_is_required(self):
        with pytest.raises(ConfigurationError, match="persistence client is required"):
            Crudforge()

    def test_register_creates_repository(self, forge, user_model):
        forge.register_model(user_model)
        repository = forge.get_repository("User")
        assert isinstance(repository, Repository)
        assert repository.model is user_model
        assert forge.get_repository(user_model) is repository

    def test_register_is_chainable(self, forge, user_model):
        post = ModelDescriptor.from_config("Post", {"fillable": ["title"]})
        assert forge.register_model(user_model).register_model(post) is forge
        assert [m.name for m in forge.list_models()] == ["User", "Post"]

    def test_register_initializes_storage(self, tmp_path, user_model):
        client = SQLiteClient(tmp_path / "app.db")
        client.connect()
        Crudforge(client).register_model(user_model)
        assert "password" in client.list_fields("users")

    def test_duplicate_model_rejected(self, forge, user_model):
        forge.register_model(user_model)
        with pytest.raises(ConfigurationError, match="already registered"):
            forge.register_model(user_model)

    def test_shared_collection_rejected(self, forge, user_model):
        forge.register_model(user_model)
        other = ModelDescriptor.from_config("Member", {"table": "users"})
        with pytest.raises(ConfigurationError, match="share the collection"):
            forge.register_model(other)

    def test_unregistered_repository_message(self, forge):
        with pytest.raises(ConfigurationError) as exc:
            forge.get_repository("Ghost")
        assert str(exc.value) == "Repository for Ghost not found. Did you register the model?"

    def test_unregistered_model(self, forge):
        with pytest.raises(ConfigurationError, match="not registered"):
            forge.get_model("Ghost")


# =============================================================================
# Schemas
# =============================================================================


class TestSchemas:
    def test_schemas_are_cached(self, forge, user_model):
        forge.register_model(user_model)
        assert forge.get_validation_schema("User") is forge.get_validation_schema("User")
        assert forge.get_strict_validation_schema("User") is forge.get_strict_validation_schema(
            user_model
        )

    def test_schema_modes(self, forge, user_model):
        forge.register_model(user_model)
        assert forge.get_validation_schema("User").is_valid({})
        assert not forge.get_strict_validation_schema("User").is_valid({})

    def test_schema_for_unregistered_model(self, forge):
        with pytest.raises(ConfigurationError):
            forge.get_strict_validation_schema("Ghost")


# =============================================================================
# Routes
# =============================================================================


class TestRouteGeneration:
    def test_custom_route_helpers_chain(self, forge):
        result = (
            forge.get("/health", health)
            .post("/echo", health)
            .put("/a", health)
            .patch("/b", health)
            .delete("/c", health)
        )
        assert result is forge

    def test_unknown_method_rejected(self, forge):
        with pytest.raises(ConfigurationError, match="Unsupported HTTP method"):
            forge.add_route("TRACE", "/x", health)

    def test_route_table(self, forge, user_model):
        forge.register_model(user_model).get("/health", health)
        assert forge.route_table == []

        forge.generate_routes(FastAPI())
        table = [(e.method, e.path, e.kind) for e in forge.route_table]
        assert table == [
            ("GET", "/api/users", RouteKind.CRUD),
            ("GET", "/api/users/{id}", RouteKind.CRUD),
            ("POST", "/api/users", RouteKind.CRUD),
            ("PUT", "/api/users/{id}", RouteKind.CRUD),
            ("DELETE", "/api/users/{id}", RouteKind.CRUD),
            ("GET", "/api/health", RouteKind.CUSTOM),
        ]

    def test_custom_base_path(self, forge, user_model):
        forge.register_model(user_model).generate_routes(FastAPI(), base_path="/v1/")
        assert forge.route_table[0].path == "/v1/users"

    def test_second_generation_rejected(self, forge, user_model):
        app = FastAPI()
        forge.register_model(user_model).generate_routes(app)
        with pytest.raises(ConfigurationError, match="already been generated"):
            forge.generate_routes(app)

    def test_registration_closed_after_generation(self, forge, user_model):
        forge.generate_routes(FastAPI())
        with pytest.raises(ConfigurationError, match="after routes have been generated"):
            forge.register_model(user_model)
        with pytest.raises(ConfigurationError):
            forge.get("/late", health)

    def test_no_models_still_mounts_documentation(self):
        forge = Crudforge(InMemoryClient())
        forge.generate_routes(FastAPI())
        assert forge.route_table == []
