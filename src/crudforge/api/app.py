"""FastAPI application wrapper."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crudforge.config import ServerSettings
from crudforge.logging import configure_logging
from crudforge.metadata.loader import ModelLoader
from crudforge.metadata.model import ModelDescriptor
from crudforge.persistence.config import create_client
from crudforge.registry import Crudforge

logger = logging.getLogger(__name__)


class CrudforgeServer:
    """A FastAPI app with a Crudforge registry attached.

    Every registration method returns the server so setup reads as a chain:

        CrudforgeServer(client).register_model(user).generate_routes().run()

    Args:
        client: Connected persistence client
        settings: Server settings (defaults when omitted)
        close_on_shutdown: Close ``client`` when the app shuts down
    """

    def __init__(
        self,
        client: Any = None,
        settings: ServerSettings | None = None,
        *,
        title: str = "crudforge API",
        close_on_shutdown: bool = False,
    ):
        self.settings = settings or ServerSettings()
        self.client = client
        self.close_on_shutdown = close_on_shutdown
        self.registry = Crudforge(client)
        self.app = FastAPI(title=title, lifespan=self._lifespan)

        if self.settings.cors_origins:
            # Browsers reject credentials with a wildcard origin
            wildcard = "*" in self.settings.cors_origins
            self.app.add_middleware(
                CORSMiddleware,
                allow_origins=self.settings.cors_origins,
                allow_credentials=not wildcard,
                allow_methods=["*"],
                allow_headers=["*"],
            )

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        logger.info(
            "crudforge serving %d models under %s",
            len(self.registry.list_models()),
            self.settings.base_path,
        )
        yield
        if self.close_on_shutdown and self.client is not None:
            self.client.close()

    def register_model(self, *models: ModelDescriptor) -> "CrudforgeServer":
        self.registry.register_model(*models)
        return self

    def get(self, path: str, handler: Callable[..., Any]) -> "CrudforgeServer":
        self.registry.get(path, handler)
        return self

    def post(self, path: str, handler: Callable[..., Any]) -> "CrudforgeServer":
        self.registry.post(path, handler)
        return self

    def put(self, path: str, handler: Callable[..., Any]) -> "CrudforgeServer":
        self.registry.put(path, handler)
        return self

    def delete(self, path: str, handler: Callable[..., Any]) -> "CrudforgeServer":
        self.registry.delete(path, handler)
        return self

    def patch(self, path: str, handler: Callable[..., Any]) -> "CrudforgeServer":
        self.registry.patch(path, handler)
        return self

    def use(self, middleware_class: type, **options: Any) -> "CrudforgeServer":
        """Add ASGI middleware to the app."""
        self.app.add_middleware(middleware_class, **options)
        return self

    def generate_routes(self) -> "CrudforgeServer":
        self.registry.generate_routes(self.app, self.settings.base_path)
        return self

    def run(self) -> None:
        """Serve the app with uvicorn (blocking)."""
        import uvicorn

        logger.info(
            "API available at http://%s:%d%s",
            self.settings.host,
            self.settings.port,
            self.settings.base_path,
        )
        uvicorn.run(
            self.app,
            host=self.settings.host,
            port=self.settings.port,
            log_level=self.settings.log_level.lower(),
        )


def build_server(settings: ServerSettings | None = None) -> CrudforgeServer:
    """Build a server from settings: load YAML models, connect, route.

    Raises:
        ConfigurationError: On invalid model files or registry setup.
    """
    settings = settings or ServerSettings.from_env()
    configure_logging(settings.log_level)

    loader = ModelLoader(settings.models_path)
    loader.load_all()

    client = create_client(settings.database)
    client.connect()

    server = CrudforgeServer(client, settings, close_on_shutdown=True)
    server.register_model(*(loader.get_model(name) for name in loader.list_models()))
    return server.generate_routes()


def create_app() -> FastAPI:
    """App factory for ``uvicorn crudforge.api.app:create_app --factory``."""
    return build_server().app
