"""Tests for field projection and post-fetch hidden-field filtering."""

from crudforge.metadata import FieldDescriptor, ModelDescriptor, define_model
from crudforge.persistence import InMemoryClient
from crudforge.repository import compute_projection
from crudforge.repository.projection import filter_hidden


class FailingIntrospection:
    def collection(self, name):
        raise NotImplementedError

    def list_fields(self, collection_name):
        raise RuntimeError("schema unavailable")


class StaticIntrospection:
    def __init__(self, fields):
        self.fields = fields

    def list_fields(self, collection_name):
        return list(self.fields)


# =============================================================================
# compute_projection
# =============================================================================


class TestComputeProjection:
    def test_none_when_nothing_hidden(self):
        model = ModelDescriptor.from_config("Post", {"fillable": ["title"]})
        assert compute_projection(model) is None

    def test_mask_from_fillable(self, user_model):
        mask = compute_projection(user_model)
        assert mask == ("id", "name", "email", "createdAt", "updatedAt")

    def test_mask_includes_primary_key_not_in_fillable(self):
        model = ModelDescriptor.from_config(
            "Person",
            {"primaryKey": "personId", "fillable": ["name", "ssn"], "hidden": ["ssn"]},
        )
        mask = compute_projection(model)
        assert "personId" in mask
        assert "ssn" not in mask

    def test_mask_without_timestamps(self):
        model = ModelDescriptor.from_config(
            "Token",
            {"fillable": ["value", "secret"], "hidden": ["secret"], "timestamps": False},
        )
        assert compute_projection(model) == ("id", "value")

    def test_hidden_wins_over_fillable(self, user_model):
        assert "password" in user_model.fillable
        assert "password" not in compute_projection(user_model)

    def test_hidden_primary_key_is_excluded(self):
        model = ModelDescriptor.from_config(
            "Session", {"fillable": ["user"], "hidden": ["id"]}
        )
        assert "id" not in compute_projection(model)

    def test_introspection_used_without_fillable(self, typed_user_model):
        client = StaticIntrospection(["id", "name", "password", "createdAt"])
        assert compute_projection(typed_user_model, client) == ("id", "name", "createdAt")

    def test_none_when_introspection_fails(self, typed_user_model):
        assert compute_projection(typed_user_model, FailingIntrospection()) is None

    def test_none_when_client_cannot_introspect(self, typed_user_model):
        assert compute_projection(typed_user_model, object()) is None
        assert compute_projection(typed_user_model, None) is None

    def test_none_when_introspection_returns_nothing(self, typed_user_model):
        assert compute_projection(typed_user_model, StaticIntrospection([])) is None

    def test_in_memory_introspection_requires_records(self):
        model = define_model(
            "Post", fields=[FieldDescriptor("title"), FieldDescriptor("draft")], hidden=["draft"]
        )
        client = InMemoryClient()
        assert compute_projection(model, client) is None

        client.collection("posts").records.append({"id": "1", "title": "a", "draft": "b"})
        assert compute_projection(model, client) == ("id", "title")


# =============================================================================
# filter_hidden
# =============================================================================


class TestFilterHidden:
    def test_single_record(self):
        assert filter_hidden({"id": 1, "password": "x"}, frozenset({"password"})) == {"id": 1}

    def test_list_of_records(self):
        records = [{"id": 1, "password": "x"}, {"id": 2}]
        assert filter_hidden(records, frozenset({"password"})) == [{"id": 1}, {"id": 2}]

    def test_none_passes_through(self):
        assert filter_hidden(None, frozenset({"password"})) is None

    def test_nothing_hidden_returns_input(self):
        record = {"id": 1}
        assert filter_hidden(record, frozenset()) is record
