"""Domain layer: request rules, entity rules, template data and channel logic."""

from .dispatch import dispatch_notifications
from .entities import resolve_client, resolve_employee, resolve_seller
from .models import (
    NOTIFICATION_TYPE_CHANGE,
    NOTIFICATION_TYPE_NEW,
    ClientSmsResult,
    Customer,
    EmailMessage,
    Employee,
    NotificationResult,
    Seller,
    ValidatedRequest,
)
from .request import validate_request
from .template_data import build_template_data, validate_template_data

__all__ = [
    "NOTIFICATION_TYPE_CHANGE",
    "NOTIFICATION_TYPE_NEW",
    "ClientSmsResult",
    "Customer",
    "EmailMessage",
    "Employee",
    "NotificationResult",
    "Seller",
    "ValidatedRequest",
    "build_template_data",
    "dispatch_notifications",
    "resolve_client",
    "resolve_employee",
    "resolve_seller",
    "validate_request",
    "validate_template_data",
]
