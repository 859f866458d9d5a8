"""Fatal error taxonomy for the goods-return notification operation.

Each error carries a `kind` discriminant. Transport status codes are assigned
at the adapter boundary (see `adapters.payload.status_code_for`).
"""

from __future__ import annotations

KIND_VALIDATION = "validation"
KIND_NOT_FOUND = "not_found"
KIND_TEMPLATE = "template"
KIND_INTERNAL = "internal"


class ReturnOperationError(Exception):
    kind = ""


class ValidationError(ReturnOperationError):
    """A request field is missing or cannot be coerced."""

    kind = KIND_VALIDATION

    def __init__(self, field: str) -> None:
        super().__init__(f"Invalid or missing data for key: {field}")
        self.field = field


class NotFoundError(ReturnOperationError):
    """A referenced entity is absent or inconsistent with the seller."""

    kind = KIND_NOT_FOUND


class TemplateError(ReturnOperationError):
    """Built template data has an empty field."""

    kind = KIND_TEMPLATE

    def __init__(self, field: str) -> None:
        super().__init__(f"Template Data ({field}) is empty!")
        self.field = field
