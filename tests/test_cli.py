"""Tests for crudforge CLI commands and settings."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from crudforge.cli.main import cli
from crudforge.config import ServerSettings


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "CRUDFORGE_DATABASE_URL",
        "CRUDFORGE_DB_PATH",
        "CRUDFORGE_BASE_PATH",
        "CRUDFORGE_MODELS_PATH",
        "CRUDFORGE_CORS_ORIGINS",
        "CRUDFORGE_PORT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def models_dir(tmp_path):
    directory = tmp_path / "models"
    directory.mkdir()
    (directory / "user.yaml").write_text(
        "model: User\nfillable: [name, email, password]\nhidden: [password]\n"
    )
    return directory


class TestRoutesCommand:
    def test_prints_route_table(self, runner, models_dir):
        result = runner.invoke(cli, ["routes", "--models", str(models_dir)])
        assert result.exit_code == 0
        assert "GET     /api/users  [CRUD]" in result.output
        assert "DELETE  /api/users/{id}  [CRUD]" in result.output
        assert "5 routes" in result.output

    def test_base_path_option(self, runner, models_dir):
        result = runner.invoke(
            cli, ["routes", "--models", str(models_dir), "--base-path", "/v1"]
        )
        assert result.exit_code == 0
        assert "/v1/users" in result.output

    def test_sqlite_database(self, runner, models_dir, tmp_path):
        db_path = tmp_path / "data" / "app.db"
        result = runner.invoke(
            cli,
            ["routes", "--models", str(models_dir), "--database-url", f"sqlite:///{db_path}"],
        )
        assert result.exit_code == 0
        assert db_path.exists()

    def test_empty_models_dir(self, runner, tmp_path):
        result = runner.invoke(cli, ["routes", "--models", str(tmp_path)])
        assert result.exit_code == 0
        assert "No routes generated" in result.output

    def test_invalid_model_file_exits_nonzero(self, runner, models_dir):
        (models_dir / "bad.yaml").write_text("model: Bad\nhooks:\n  beforeCreate: missing\n")
        result = runner.invoke(cli, ["routes", "--models", str(models_dir)])
        assert result.exit_code == 1
        assert "not registered" in result.output


class TestServerSettings:
    def test_defaults(self):
        settings = ServerSettings.from_env()
        assert settings.host == "127.0.0.1"
        assert settings.port == 8000
        assert settings.base_path == "/api"
        assert settings.cors_origins == ["*"]
        assert settings.models_path == Path("models")
        assert settings.database.is_memory

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CRUDFORGE_PORT", "9000")
        monkeypatch.setenv("CRUDFORGE_CORS_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("CRUDFORGE_DATABASE_URL", "sqlite:///app.db")

        settings = ServerSettings.from_env()
        assert settings.port == 9000
        assert settings.cors_origins == ["http://a.test", "http://b.test"]
        assert settings.database.is_sqlite

    def test_empty_cors_disables(self, monkeypatch):
        monkeypatch.setenv("CRUDFORGE_CORS_ORIGINS", "")
        assert ServerSettings.from_env().cors_origins == []
