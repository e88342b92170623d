"""Core field-kind definitions."""

from crudforge.core.types import FIELD_KINDS, FieldKind, KindInfo, get_kind_info, parse_kind

__all__ = ["FIELD_KINDS", "FieldKind", "KindInfo", "get_kind_info", "parse_kind"]
