"""HTTP layer: route generation and the application server.

The server lives in ``crudforge.api.app``.
"""

from crudforge.api.routes import (
    CustomRoute,
    ModelBinding,
    RouteEntry,
    RouteGenerator,
    RouteKind,
)

__all__ = [
    "CustomRoute",
    "ModelBinding",
    "RouteEntry",
    "RouteGenerator",
    "RouteKind",
]
