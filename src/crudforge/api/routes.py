"""Route generator - builds FastAPI routes from registered models.

For each model five CRUD endpoints are mounted under
``{base_path}/{collection_name}``; custom routes are mounted as-is under
``base_path``; a documentation endpoint at ``base_path`` lists them all.
"""

import asyncio
import json
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import APIRouter, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from crudforge.core.types import get_kind_info
from crudforge.errors import FieldIssue, InternalError, NotFoundError, ValidationError
from crudforge.metadata.model import ModelDescriptor
from crudforge.repository.repository import Repository
from crudforge.validation.schema import RecordValidator

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


class RouteKind(str, Enum):
    CRUD = "CRUD"
    CUSTOM = "Custom"


@dataclass(frozen=True)
class RouteEntry:
    """One generated route. Immutable once the table is built."""

    method: str
    path: str
    kind: RouteKind
    handler: Callable[..., Any]

    def to_dict(self) -> dict[str, str]:
        return {"method": self.method, "path": self.path, "type": self.kind.value}


@dataclass(frozen=True)
class CustomRoute:
    """An explicitly registered (method, path, handler) tuple."""

    method: str
    path: str
    handler: Callable[..., Any]


@dataclass(frozen=True)
class ModelBinding:
    """Everything the generator needs to serve one model."""

    model: ModelDescriptor
    repository: Repository
    partial_schema: RecordValidator
    strict_schema: RecordValidator


# =============================================================================
# Request helpers
# =============================================================================


def _positive_int(raw: str | None, default: int) -> int:
    """Parse a query value as an int >= 1, falling back to the default."""
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= 1 else default


def coerce_filters(model: ModelDescriptor, params: dict[str, str]) -> dict[str, Any]:
    """Turn remaining query parameters into equality filters.

    Values of declared fields are converted to the field's kind; anything
    else stays a string.
    """
    where: dict[str, Any] = {}
    for key, raw in params.items():
        descriptor = model.get_field(key)
        if descriptor is None:
            where[key] = raw
        else:
            where[key] = get_kind_info(descriptor.kind).coerce_query(raw)
    return where


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


async def _read_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        # NaN and Infinity are not JSON and could never be sent back
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:
        raise ValidationError(
            [FieldIssue(field="", message="Request body must be valid JSON", code="INVALID_JSON")]
        ) from e


def coerce_id(model: ModelDescriptor, raw: str) -> Any:
    """Convert a path id to the primary key's declared kind."""
    descriptor = model.get_field(model.primary_key)
    if descriptor is None:
        return raw
    return get_kind_info(descriptor.kind).coerce_query(raw)


def _json(content: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def error_response(model: ModelDescriptor, operation: str, error: Exception) -> JSONResponse:
    """Map an error from the repository layer to an HTTP response.

    ValidationError -> 400 with details, NotFoundError -> 404, anything
    else (InternalError, hook or persistence failures) -> 500.
    """
    if isinstance(error, ValidationError):
        return _json({"error": "Validation error", "details": error.to_list()}, 400)
    if isinstance(error, NotFoundError):
        return _json({"error": "Not found"}, 404)

    # Details go to the log, never to the client
    logger.error(
        "Unhandled error in %s %s",
        model.name,
        operation,
        exc_info=(type(error), error, error.__traceback__),
    )
    return _json({"error": "Internal server error"}, 500)


# =============================================================================
# CRUD handlers
# =============================================================================


def _list_handler(binding: ModelBinding) -> Callable[..., Any]:
    model, repository = binding.model, binding.repository

    async def list_records(request: Request) -> JSONResponse:
        params = dict(request.query_params)
        page = _positive_int(params.pop("page", None), DEFAULT_PAGE)
        limit = _positive_int(params.pop("limit", None), DEFAULT_LIMIT)
        where = coerce_filters(model, params)

        try:
            items, total = await asyncio.gather(
                repository.find_all(
                    {"skip": (page - 1) * limit, "take": limit, "where": where}
                ),
                repository.count(where),
            )
        except Exception as e:
            return error_response(model, "list", e)

        return _json({
            "data": items,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit),
            },
        })

    return list_records


def _get_handler(binding: ModelBinding) -> Callable[..., Any]:
    model, repository = binding.model, binding.repository

    async def get_record(id: str) -> JSONResponse:
        try:
            item = await repository.find_by_id(coerce_id(model, id))
            if item is None:
                raise NotFoundError(f"{model.name} '{id}' not found")
        except Exception as e:
            return error_response(model, "get", e)
        return _json(item)

    return get_record


def _create_handler(binding: ModelBinding) -> Callable[..., Any]:
    model, repository = binding.model, binding.repository

    async def create_record(request: Request) -> JSONResponse:
        try:
            data = binding.strict_schema.validate(await _read_body(request))
            item = await repository.create(data)
        except Exception as e:
            return error_response(model, "create", e)
        return _json(item, 201)

    return create_record


def _update_handler(binding: ModelBinding) -> Callable[..., Any]:
    model, repository = binding.model, binding.repository

    async def update_record(id: str, request: Request) -> JSONResponse:
        try:
            data = binding.partial_schema.validate(await _read_body(request))
            item = await repository.update(coerce_id(model, id), data)
        except NotFoundError as e:
            # Only single-record fetches answer 404
            return error_response(model, "update", InternalError(str(e)))
        except Exception as e:
            return error_response(model, "update", e)
        return _json(item)

    return update_record


def _delete_handler(binding: ModelBinding) -> Callable[..., Any]:
    model, repository = binding.model, binding.repository

    async def delete_record(id: str) -> Response:
        try:
            await repository.delete(coerce_id(model, id))
        except NotFoundError as e:
            return error_response(model, "delete", InternalError(str(e)))
        except Exception as e:
            return error_response(model, "delete", e)
        return Response(status_code=204)

    return delete_record


# =============================================================================
# Generator
# =============================================================================


def join_path(base_path: str, path: str) -> str:
    base = base_path.rstrip("/")
    if not path.startswith("/"):
        path = "/" + path
    return base + path


class RouteGenerator:
    """Synthesizes the route table for a set of models and custom routes."""

    def __init__(self, bindings: list[ModelBinding], custom_routes: list[CustomRoute]):
        self.bindings = bindings
        self.custom_routes = custom_routes

    def crud_entries(self, base_path: str) -> list[RouteEntry]:
        entries = []
        for binding in self.bindings:
            collection_path = join_path(base_path, binding.model.collection_name)
            item_path = collection_path + "/{id}"
            entries.extend([
                RouteEntry("GET", collection_path, RouteKind.CRUD, _list_handler(binding)),
                RouteEntry("GET", item_path, RouteKind.CRUD, _get_handler(binding)),
                RouteEntry("POST", collection_path, RouteKind.CRUD, _create_handler(binding)),
                RouteEntry("PUT", item_path, RouteKind.CRUD, _update_handler(binding)),
                RouteEntry("DELETE", item_path, RouteKind.CRUD, _delete_handler(binding)),
            ])
        return entries

    def custom_entries(self, base_path: str) -> list[RouteEntry]:
        return [
            RouteEntry(
                route.method, join_path(base_path, route.path), RouteKind.CUSTOM, route.handler
            )
            for route in self.custom_routes
        ]

    def build(self, base_path: str = "/api") -> tuple[APIRouter, list[RouteEntry]]:
        """Build the router and the route table.

        Returns:
            (router, entries) where entries lists CRUD routes first, then
            custom routes, in registration order.
        """
        crud = self.crud_entries(base_path)
        custom = self.custom_entries(base_path)
        entries = crud + custom

        router = APIRouter()
        # Custom routes match first so "/users/stats" is not taken by "/users/{id}"
        for entry in custom + crud:
            router.add_api_route(entry.path, entry.handler, methods=[entry.method])
            logger.debug("Mounted %s %s (%s)", entry.method, entry.path, entry.kind.value)

        table = [entry.to_dict() for entry in entries]

        async def list_routes() -> dict[str, Any]:
            return {"routes": table}

        router.add_api_route(base_path.rstrip("/") or "/", list_routes, methods=["GET"])
        return router, entries
