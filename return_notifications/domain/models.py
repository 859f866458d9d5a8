"""Typed records passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..types import ResultDict

NOTIFICATION_TYPE_NEW = 1
NOTIFICATION_TYPE_CHANGE = 2

CONTRACTOR_TYPE_CUSTOMER = 0

EVENT_CHANGE_RETURN_STATUS = "changeReturnStatus"
GOODS_RETURN_PERMIT = "tsGoodsReturn"


@dataclass(frozen=True)
class ValidatedRequest:
    reseller_id: int
    notification_type: int
    client_id: int
    creator_id: int
    expert_id: int
    complaint_id: int
    complaint_number: str
    consumption_id: int
    consumption_number: str
    agreement_number: str
    date: str
    differences: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class Seller:
    id: int
    name: str = ""


@dataclass(frozen=True)
class Customer:
    id: int
    type: int
    seller_id: int
    name: str = ""
    full_name: str = ""
    email: str | None = None
    mobile: str | None = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.name


@dataclass(frozen=True)
class Employee:
    id: int
    full_name: str


@dataclass(frozen=True)
class EmailMessage:
    email_from: str
    email_to: str
    subject: str
    body: str


@dataclass(frozen=True)
class ClientSmsResult:
    sent: bool = False
    message: str = ""


@dataclass(frozen=True)
class NotificationResult:
    employee_email_sent: bool = False
    client_email_sent: bool = False
    client_sms: ClientSmsResult = field(default_factory=ClientSmsResult)

    def to_dict(self) -> ResultDict:
        return {
            "notificationEmployeeByEmail": self.employee_email_sent,
            "notificationClientByEmail": self.client_email_sent,
            "notificationClientBySms": {
                "isSent": self.client_sms.sent,
                "message": self.client_sms.message,
            },
        }
