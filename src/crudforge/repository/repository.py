"""Repository: the data-access facade for one model.

Every operation follows the same shape:

    before-hook -> persistence call (projected) -> post-fetch filter -> after-hook

Failures from hooks or the persistence layer propagate unchanged. Nothing
is retried and nothing already committed is rolled back.
"""

import logging
from typing import Any

from crudforge.hooks.service import HookService
from crudforge.metadata.model import ModelDescriptor
from crudforge.persistence.adapter import Collection, Record
from crudforge.repository.projection import (
    ProjectionMask,
    compute_projection,
    filter_hidden,
)

logger = logging.getLogger(__name__)


class Repository:
    """CRUD operations for one registered model.

    Args:
        model: The model descriptor (supplies keys, visibility, and hooks)
        collection: Persistence collection for ``model.collection_name``
        client: Persistence client, used only for schema introspection
    """

    def __init__(self, model: ModelDescriptor, collection: Collection, client: Any = None):
        self.model = model
        self.collection = collection
        self.client = client
        self.hooks = HookService(model.name, model.hooks)

    # Computed per operation: introspection results can change as the
    # backend's schema does.
    def projection(self) -> ProjectionMask | None:
        return compute_projection(self.model, self.client)

    def _post_filter(self, mask: ProjectionMask | None, result: Any) -> Any:
        if mask is None:
            return filter_hidden(result, self.model.hidden)
        return result

    async def create(self, data: Record) -> Record:
        data = await self.hooks.run("before_create", data, default=data)

        mask = self.projection()
        result = await self.collection.create(data, mask)
        result = self._post_filter(mask, result)

        return await self.hooks.run("after_create", data, result, default=result)

    async def find_by_id(self, id: Any) -> Record | None:
        """Fetch one record by primary key.

        ``before_find`` receives ``{"where": {primary_key: id}}`` and must
        return a query that still carries a non-empty ``where`` mapping.

        Raises:
            ValueError: If ``before_find`` drops the ``where`` mapping.
        """
        query: dict[str, Any] = {"where": {self.model.primary_key: id}}
        query = await self.hooks.run("before_find", query, default=query)

        where = query.get("where") if isinstance(query, dict) else None
        if not where:
            raise ValueError(
                f"before_find for '{self.model.name}' returned a query without a 'where' mapping"
            )

        mask = self.projection()
        result = await self.collection.find_unique(where, mask)
        if result is None:
            return None

        result = self._post_filter(mask, result)
        return await self.hooks.run("after_find", result, default=result)

    async def find_all(self, options: dict[str, Any] | None = None) -> list[Record]:
        # before_find runs even without options; it may synthesize them
        options = await self.hooks.run("before_find", options, default=options)

        mask = self.projection()
        results = await self.collection.find_many(options, mask)
        results = self._post_filter(mask, results)

        return await self.hooks.run("after_find", results, default=results)

    async def update(self, id: Any, data: Record) -> Record:
        data = await self.hooks.run("before_update", id, data, default=data)

        mask = self.projection()
        result = await self.collection.update({self.model.primary_key: id}, data, mask)
        result = self._post_filter(mask, result)

        return await self.hooks.run("after_update", id, data, result, default=result)

    async def delete(self, id: Any) -> Record:
        await self.hooks.run("before_delete", id)

        result = await self.collection.delete({self.model.primary_key: id})
        # Deleted records are output too
        result = filter_hidden(result, self.model.hidden)

        return await self.hooks.run("after_delete", id, result, default=result)

    async def count(self, where: Record | None = None) -> int:
        return await self.collection.count(where)
