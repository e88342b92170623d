"""Model metadata: field descriptors, model descriptors, and YAML loading."""

from crudforge.metadata.fields import FieldDescriptor, FieldRegistry
from crudforge.metadata.loader import ModelLoader
from crudforge.metadata.model import (
    TIMESTAMP_FIELDS,
    ModelDescriptor,
    default_collection_name,
    define_model,
)

__all__ = [
    "FieldDescriptor",
    "FieldRegistry",
    "ModelDescriptor",
    "ModelLoader",
    "TIMESTAMP_FIELDS",
    "default_collection_name",
    "define_model",
]
