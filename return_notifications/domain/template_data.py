"""Template data rules.

Mental model refresher:
- `build_template_data` flattens the request and resolved entities into the
  fixed set of fields every email/SMS template can reference.
- `DIFFERENCES` depends on the notification type; it is the only field that
  needs the localizer.
- `validate_template_data` turns "valid request, unusable data" into a
  `TemplateError`, which the boundary reports as an internal fault.
"""

from __future__ import annotations

from ..errors import TemplateError
from ..ports import Localizer, StatusCatalog
from ..types import TemplateData
from .models import (
    NOTIFICATION_TYPE_CHANGE,
    NOTIFICATION_TYPE_NEW,
    Customer,
    Employee,
    ValidatedRequest,
)
from .request import parse_status_code

TEMPLATE_NEW_POSITION = "NewPositionAdded"
TEMPLATE_STATUS_CHANGED = "PositionStatusHasChanged"


def build_template_data(
    request: ValidatedRequest,
    client: Customer,
    creator: Employee,
    expert: Employee,
    *,
    localizer: Localizer,
    statuses: StatusCatalog,
) -> TemplateData:
    return {
        "COMPLAINT_ID": request.complaint_id,
        "COMPLAINT_NUMBER": request.complaint_number,
        "CREATOR_ID": request.creator_id,
        "CREATOR_NAME": creator.full_name,
        "EXPERT_ID": request.expert_id,
        "EXPERT_NAME": expert.full_name,
        "CLIENT_ID": request.client_id,
        "CLIENT_NAME": client.display_name,
        "CONSUMPTION_ID": request.consumption_id,
        "CONSUMPTION_NUMBER": request.consumption_number,
        "AGREEMENT_NUMBER": request.agreement_number,
        "DATE": request.date,
        "DIFFERENCES": describe_differences(
            request, localizer=localizer, statuses=statuses
        ),
    }


def describe_differences(
    request: ValidatedRequest,
    *,
    localizer: Localizer,
    statuses: StatusCatalog,
) -> str:
    """Localized description of what changed, or "" when nothing applies."""
    if request.notification_type == NOTIFICATION_TYPE_NEW:
        return localizer.localize(TEMPLATE_NEW_POSITION, None, request.reseller_id)

    if request.notification_type == NOTIFICATION_TYPE_CHANGE and request.differences:
        from_code = parse_status_code(request.differences, "from")
        to_code = parse_status_code(request.differences, "to")
        return localizer.localize(
            TEMPLATE_STATUS_CHANGED,
            {
                "FROM": statuses.status_name(from_code),
                "TO": statuses.status_name(to_code),
            },
            request.reseller_id,
        )

    return ""


def validate_template_data(template_data: TemplateData) -> None:
    for key, value in template_data.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            raise TemplateError(key)
