"""Application orchestration for the goods-return notification operation.

Mental model refresher:
- Application layer coordinates use-case flow across domain modules.
- The flow is strictly sequential and single-pass:
  1) validate the raw request
  2) resolve seller, client, creator and expert
  3) build and check template data
  4) dispatch the channels and return the aggregated result
- The first fatal error propagates unchanged; delivery outcomes never raise.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..domain.dispatch import dispatch_notifications
from ..domain.entities import (
    ROLE_CREATOR,
    ROLE_EXPERT,
    resolve_client,
    resolve_employee,
    resolve_seller,
)
from ..domain.models import NotificationResult
from ..domain.request import validate_request
from ..domain.template_data import build_template_data, validate_template_data
from ..ports import (
    Localizer,
    MessagesClient,
    NotificationManager,
    Permissions,
    Repository,
    StatusCatalog,
)
from ..types import RawRequest


@dataclass(frozen=True)
class ReturnNotificationOperation:
    """Goods-return status notification use-case bound to its collaborators."""

    repository: Repository
    localizer: Localizer
    statuses: StatusCatalog
    permissions: Permissions
    messages: MessagesClient
    notification_manager: NotificationManager

    def execute(self, raw: RawRequest) -> NotificationResult:
        request = validate_request(raw)

        seller = resolve_seller(self.repository, request.reseller_id)
        client = resolve_client(self.repository, request.client_id, seller.id)
        creator = resolve_employee(self.repository, request.creator_id, ROLE_CREATOR)
        expert = resolve_employee(self.repository, request.expert_id, ROLE_EXPERT)

        template_data = build_template_data(
            request,
            client,
            creator,
            expert,
            localizer=self.localizer,
            statuses=self.statuses,
        )
        validate_template_data(template_data)

        return dispatch_notifications(
            request,
            seller,
            client,
            template_data,
            permissions=self.permissions,
            localizer=self.localizer,
            messages=self.messages,
            notification_manager=self.notification_manager,
        )
