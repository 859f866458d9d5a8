"""Payload adapter functions.

Mental model refresher:
- This is an adapter/edge module.
- It translates transport-shaped data (Kafka message payload) into the raw
  request mapping the operation validates, and maps operation errors back to
  transport status codes.
- It checks the envelope shape only; field rules belong to the domain.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..errors import (
    KIND_INTERNAL,
    KIND_NOT_FOUND,
    KIND_TEMPLATE,
    KIND_VALIDATION,
    ReturnOperationError,
)
from ..types import RawRequest

STATUS_CODES = {
    KIND_VALIDATION: 400,
    KIND_NOT_FOUND: 400,
    KIND_TEMPLATE: 500,
    KIND_INTERNAL: 500,
}


def parse_event_payload(payload: Mapping[str, Any]) -> tuple[str, RawRequest]:
    """Split a `{"event_id": ..., "request": {...}}` envelope."""
    event_id = _as_required_str(payload.get("event_id"), "event_id")
    request = payload.get("request")
    if not isinstance(request, Mapping):
        raise ValueError("Missing required field: request")
    return event_id, dict(request)


def status_code_for(error: ReturnOperationError) -> int:
    return STATUS_CODES.get(error.kind, 500)


def _as_required_str(value: Any, field_name: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValueError(f"Missing required field: {field_name}")
    return text
