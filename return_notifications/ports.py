"""Capability interfaces consumed by the core.

The pipeline only talks to these protocols; concrete implementations live in
`adapters/` (in-memory stand-ins, Mailgun/Twilio senders) or in the host
application.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Protocol, Sequence

if TYPE_CHECKING:
    from .domain.models import Customer, EmailMessage, Employee, Seller


class Repository(Protocol):
    def get_seller(self, seller_id: int) -> Seller | None: ...

    def get_customer(self, customer_id: int) -> Customer | None: ...

    def get_employee(self, employee_id: int) -> Employee | None: ...


class Localizer(Protocol):
    def localize(
        self,
        template_key: str,
        params: Mapping[str, Any] | None,
        locale_scope: int,
    ) -> str: ...


class StatusCatalog(Protocol):
    def status_name(self, code: int) -> str: ...


class Permissions(Protocol):
    def email_from_for(self, seller_id: int) -> str | None: ...

    def emails_for(self, seller_id: int, permit: str) -> list[str]: ...


class MessagesClient(Protocol):
    def send(
        self,
        messages: Sequence[EmailMessage],
        seller_id: int,
        event: str,
        *,
        client_id: int | None = None,
        target_status: int | None = None,
    ) -> None: ...


class NotificationManager(Protocol):
    def send(
        self,
        seller_id: int,
        client_id: int,
        event: str,
        target_status: int,
        template_data: Mapping[str, Any],
    ) -> tuple[bool, str | None]: ...
