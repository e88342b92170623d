"""Error taxonomy for crudforge.

- ValidationError: field-level issues in a request body (HTTP 400)
- NotFoundError: single-record fetch found nothing (HTTP 404)
- InternalError: any other failure from hooks or persistence (HTTP 500)
- ConfigurationError: setup-time mistakes; these abort startup
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldIssue:
    """A single field-level validation problem.

    Attributes:
        field: Name of the offending field ("" for record-level issues)
        message: Human-readable message
        code: Machine-readable code (e.g., "REQUIRED", "INVALID_TYPE")
    """

    field: str
    message: str
    code: str = "INVALID"

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "message": self.message, "code": self.code}


class CrudforgeError(Exception):
    """Base class for all crudforge errors."""


class ValidationError(CrudforgeError):
    """A record failed schema validation."""

    def __init__(self, issues: list[FieldIssue]):
        self.issues = list(issues)
        summary = "; ".join(
            f"{issue.field}: {issue.message}" if issue.field else issue.message
            for issue in self.issues
        )
        super().__init__(f"Validation failed: {summary}")

    def to_list(self) -> list[dict[str, Any]]:
        return [issue.to_dict() for issue in self.issues]


class NotFoundError(CrudforgeError):
    """A single-record lookup found no record."""


class InternalError(CrudforgeError):
    """An unclassified failure from the repository layer."""


class ConfigurationError(CrudforgeError):
    """Invalid setup: missing client, unregistered model, bad definitions."""
