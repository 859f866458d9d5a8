"""Goods-return status notifications: validate, resolve, build and dispatch."""

from .application.process import ReturnNotificationOperation
from .domain.models import ClientSmsResult, NotificationResult
from .errors import NotFoundError, ReturnOperationError, TemplateError, ValidationError

__all__ = [
    "ClientSmsResult",
    "NotFoundError",
    "NotificationResult",
    "ReturnNotificationOperation",
    "ReturnOperationError",
    "TemplateError",
    "ValidationError",
]
