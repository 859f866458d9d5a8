"""Request validation for goods-return notification events.

Mental model refresher:
- This is the first handoff from untyped boundary data to typed domain data.
- Every field is coerced on its own; the first field that fails stops the
  pipeline with a `ValidationError` naming it.
- `differences` is passed through untouched here. Its shape only matters for
  status-change requests and is checked by `parse_status_code` when the
  template data and the customer channels need it.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from ..errors import ValidationError
from ..types import RawRequest
from .models import NOTIFICATION_TYPE_CHANGE, ValidatedRequest

STATUS_UNSET = 0

_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1
_INT_PATTERN = re.compile(r"[+-]?(?:0|[1-9][0-9]*)")
_TAG_PATTERN = re.compile(r"<[^>]*>?")
_CONTROL_PATTERN = re.compile(r"[\x00-\x1f\x7f]")


def validate_request(raw: RawRequest) -> ValidatedRequest:
    """Coerce a raw request mapping into a `ValidatedRequest`."""
    return ValidatedRequest(
        reseller_id=_required_int(raw, "resellerId"),
        notification_type=_required_int(raw, "notificationType"),
        client_id=_required_int(raw, "clientId"),
        creator_id=_required_int(raw, "creatorId"),
        expert_id=_required_int(raw, "expertId"),
        complaint_id=_required_int(raw, "complaintId"),
        complaint_number=_required_str(raw, "complaintNumber"),
        consumption_id=_required_int(raw, "consumptionId"),
        consumption_number=_required_str(raw, "consumptionNumber"),
        agreement_number=_required_str(raw, "agreementNumber"),
        date=_required_str(raw, "date"),
        differences=raw.get("differences"),
    )


def coerce_int(value: Any) -> int | None:
    """Strict integer filter. Returns None when `value` is not integer-like."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        number = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not _INT_PATTERN.fullmatch(text):
            return None
        number = int(text)
    else:
        return None

    if number < _INT_MIN or number > _INT_MAX:
        return None
    return number


def sanitize_str(value: Any) -> str | None:
    """Strip markup and control characters. Returns None for empty results."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    text = _TAG_PATTERN.sub("", str(value))
    text = _CONTROL_PATTERN.sub("", text).strip()
    return text or None


def is_status_change(request: ValidatedRequest) -> bool:
    return request.notification_type == NOTIFICATION_TYPE_CHANGE


def parse_status_code(differences: Mapping[str, Any] | Any, key: str) -> int:
    """Read `differences[key]` as an integer status code.

    A missing or blank code reads as `STATUS_UNSET`; only a present,
    non-numeric code is a validation error.
    """
    if not isinstance(differences, Mapping):
        raise ValidationError("differences")
    raw_code = differences.get(key)
    if _is_blank(raw_code):
        return STATUS_UNSET
    code = coerce_int(raw_code)
    if code is None:
        raise ValidationError(f"differences.{key}")
    return code


def target_status(request: ValidatedRequest) -> int | None:
    """Status a status-change request moves to, or None when it has none."""
    if not is_status_change(request):
        return None
    differences = request.differences
    if not isinstance(differences, Mapping):
        return None
    if _is_blank(differences.get("to")):
        return None
    return parse_status_code(differences, "to")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _required_int(raw: RawRequest, field_name: str) -> int:
    value = coerce_int(raw.get(field_name))
    if value is None:
        raise ValidationError(field_name)
    return value


def _required_str(raw: RawRequest, field_name: str) -> str:
    value = sanitize_str(raw.get(field_name))
    if value is None:
        raise ValidationError(field_name)
    return value
