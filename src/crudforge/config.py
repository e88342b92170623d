"""Server settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from crudforge.persistence.config import DatabaseConfig


def _split(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class ServerSettings:
    """HTTP server configuration.

    Attributes:
        host: Interface uvicorn binds to
        port: Port uvicorn listens on
        base_path: Prefix for every generated route
        cors_origins: Allowed CORS origins (["*"] allows all; [] disables CORS)
        log_level: Level for the crudforge logger and uvicorn
        models_path: Directory of YAML model files
        database: Persistence backend configuration
    """

    host: str = "127.0.0.1"
    port: int = 8000
    base_path: str = "/api"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "info"
    models_path: Path = Path("models")
    database: DatabaseConfig = field(default_factory=lambda: DatabaseConfig(url="memory://"))

    @classmethod
    def from_env(cls) -> ServerSettings:
        """Create settings from CRUDFORGE_* environment variables."""
        cors = os.environ.get("CRUDFORGE_CORS_ORIGINS")
        return cls(
            host=os.environ.get("CRUDFORGE_HOST", "127.0.0.1"),
            port=int(os.environ.get("CRUDFORGE_PORT", "8000")),
            base_path=os.environ.get("CRUDFORGE_BASE_PATH", "/api"),
            cors_origins=_split(cors) if cors is not None else ["*"],
            log_level=os.environ.get("CRUDFORGE_LOG_LEVEL", "info"),
            models_path=Path(os.environ.get("CRUDFORGE_MODELS_PATH", "models")),
            database=DatabaseConfig.from_env(),
        )
