"""Data access: repositories and field projection."""

from crudforge.repository.projection import (
    ProjectionMask,
    compute_projection,
    filter_hidden,
)
from crudforge.repository.repository import Repository

__all__ = ["ProjectionMask", "Repository", "compute_projection", "filter_hidden"]
