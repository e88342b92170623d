"""Field projection: which fields a data operation may return.

The preferred path pushes a whitelist into the persistence query so hidden
fields never leave the data layer. When no whitelist can be computed the
repository strips hidden fields from results after the fetch.
"""

import logging
from typing import Any

from crudforge.metadata.model import TIMESTAMP_FIELDS, ModelDescriptor
from crudforge.persistence.adapter import IntrospectingClient

logger = logging.getLogger(__name__)

ProjectionMask = tuple[str, ...]


def compute_projection(
    model: ModelDescriptor, client: Any = None
) -> ProjectionMask | None:
    """Compute the projection mask for a model.

    Args:
        model: The model descriptor
        client: Persistence client; consulted for schema introspection
            only when hidden fields exist without a fillable whitelist

    Returns:
        Ordered field names to select, or None when the query must return
        every field (and hidden fields, if any, are filtered post-fetch).
    """
    if not model.hidden:
        return None

    if model.fillable:
        candidates = [model.primary_key, *model.fillable]
        if model.timestamps:
            candidates.extend(TIMESTAMP_FIELDS)
        return _subtract(candidates, model.hidden)

    if not isinstance(client, IntrospectingClient):
        logger.debug(
            "No schema introspection for '%s'; filtering hidden fields post-fetch",
            model.collection_name,
        )
        return None

    try:
        all_fields = client.list_fields(model.collection_name)
    except Exception as e:
        logger.debug(
            "Schema introspection failed for '%s' (%s); filtering post-fetch",
            model.collection_name,
            e,
        )
        return None

    if not all_fields:
        return None
    return _subtract(all_fields, model.hidden)


def _subtract(names: list[str], hidden: frozenset[str]) -> ProjectionMask:
    return tuple(name for name in dict.fromkeys(names) if name not in hidden)


def filter_hidden(result: Any, hidden: frozenset[str]) -> Any:
    """Remove hidden keys from a record or a list of records."""
    if not hidden or result is None:
        return result
    if isinstance(result, list):
        return [filter_hidden(item, hidden) for item in result]
    if isinstance(result, dict):
        return {k: v for k, v in result.items() if k not in hidden}
    return result
