"""Adapter layer: payload mapping, collaborator implementations and transport."""

from .consumer_handler import handle_batch, handle_message
from .in_memory import (
    ConsoleMessagesClient,
    ConsoleNotificationManager,
    InMemoryDirectory,
    StatusTable,
    TemplateLocalizer,
)
from .kafka_runtime import publish_return_event, run_return_worker_forever
from .payload import parse_event_payload, status_code_for
from .real_senders import MailgunMessagesClient, TwilioNotificationManager

__all__ = [
    "ConsoleMessagesClient",
    "ConsoleNotificationManager",
    "InMemoryDirectory",
    "MailgunMessagesClient",
    "StatusTable",
    "TemplateLocalizer",
    "TwilioNotificationManager",
    "handle_batch",
    "handle_message",
    "parse_event_payload",
    "publish_return_event",
    "run_return_worker_forever",
    "status_code_for",
]
