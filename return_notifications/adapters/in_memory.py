"""In-memory and console adapters for local smoke tests.

Mental model refresher:
- This is outbound adapter code standing in for the host application's
  storage, localization and messaging services.
- The operation calls these through its ports; it does not know which
  implementation is underneath.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence

from ..domain.models import Customer, EmailMessage, Employee, Seller

_PLACEHOLDER = re.compile(r"\{([A-Z_]+)\}")


class InMemoryDirectory:
    """Repository and permissions backed by a fixture mapping.

    Fixture shape::

        {
          "sellers": [{"id": 1, "name": "...", "email_from": "...",
                       "permits": {"tsGoodsReturn": ["a@b.c"]}}],
          "customers": [{"id": 7, "type": 0, "seller_id": 1, ...}],
          "employees": [{"id": 3, "full_name": "..."}]
        }
    """

    def __init__(self, fixtures: Mapping[str, Any]) -> None:
        self._sellers: dict[int, Seller] = {}
        self._email_from: dict[int, str] = {}
        self._permits: dict[int, dict[str, list[str]]] = {}
        self._customers: dict[int, Customer] = {}
        self._employees: dict[int, Employee] = {}

        for item in fixtures.get("sellers", []):
            seller_id = int(item["id"])
            self._sellers[seller_id] = Seller(id=seller_id, name=str(item.get("name", "")))
            if item.get("email_from"):
                self._email_from[seller_id] = str(item["email_from"])
            self._permits[seller_id] = {
                str(permit): [str(email) for email in emails]
                for permit, emails in (item.get("permits") or {}).items()
            }

        for item in fixtures.get("customers", []):
            customer = Customer(
                id=int(item["id"]),
                type=int(item.get("type", 0)),
                seller_id=int(item["seller_id"]),
                name=str(item.get("name", "")),
                full_name=str(item.get("full_name", "")),
                email=item.get("email"),
                mobile=item.get("mobile"),
            )
            self._customers[customer.id] = customer

        for item in fixtures.get("employees", []):
            employee = Employee(id=int(item["id"]), full_name=str(item.get("full_name", "")))
            self._employees[employee.id] = employee

    def get_seller(self, seller_id: int) -> Seller | None:
        return self._sellers.get(seller_id)

    def get_customer(self, customer_id: int) -> Customer | None:
        return self._customers.get(customer_id)

    def get_employee(self, employee_id: int) -> Employee | None:
        return self._employees.get(employee_id)

    def email_from_for(self, seller_id: int) -> str | None:
        return self._email_from.get(seller_id)

    def emails_for(self, seller_id: int, permit: str) -> list[str]:
        return list(self._permits.get(seller_id, {}).get(permit, []))


class TemplateLocalizer:
    """Key -> text table with `{NAME}` placeholders.

    Unknown placeholders are left as-is. Locale scopes can override the
    default table per seller id.
    """

    def __init__(
        self,
        templates: Mapping[str, str],
        overrides: Mapping[int, Mapping[str, str]] | None = None,
    ) -> None:
        self._templates = dict(templates)
        self._overrides = {int(scope): dict(table) for scope, table in (overrides or {}).items()}

    def localize(
        self,
        template_key: str,
        params: Mapping[str, Any] | None,
        locale_scope: int,
    ) -> str:
        text = self._overrides.get(locale_scope, {}).get(template_key)
        if text is None:
            text = self._templates.get(template_key, template_key)
        if not params:
            return text

        def replace(match: re.Match[str]) -> str:
            name = match.group(1)
            return str(params[name]) if name in params else match.group(0)

        return _PLACEHOLDER.sub(replace, text)


class StatusTable:
    def __init__(self, names: Mapping[int, str]) -> None:
        self._names = {int(code): str(name) for code, name in names.items()}

    def status_name(self, code: int) -> str:
        return self._names.get(code, "")


class ConsoleMessagesClient:
    def send(
        self,
        messages: Sequence[EmailMessage],
        seller_id: int,
        event: str,
        *,
        client_id: int | None = None,
        target_status: int | None = None,
    ) -> None:
        for message in messages:
            print("[EMAIL]")
            print(f"seller_id={seller_id} event={event} client_id={client_id} status={target_status}")
            print(f"from={message.email_from}")
            print(f"to={message.email_to}")
            print(f"subject={message.subject}")
            print(f"body={message.body}")


class ConsoleNotificationManager:
    def __init__(self, repository: InMemoryDirectory, localizer: TemplateLocalizer) -> None:
        self._repository = repository
        self._localizer = localizer

    def send(
        self,
        seller_id: int,
        client_id: int,
        event: str,
        target_status: int,
        template_data: Mapping[str, Any],
    ) -> tuple[bool, str | None]:
        client = self._repository.get_customer(client_id)
        if client is None or not client.mobile:
            return False, "client has no mobile number"

        print("[SMS]")
        print(f"seller_id={seller_id} event={event} status={target_status}")
        print(f"to={client.mobile}")
        print(f"message={self._localizer.localize('complaintClientSmsBody', template_data, seller_id)}")
        return True, None


DEFAULT_TEMPLATES = {
    "NewPositionAdded": "New position added",
    "PositionStatusHasChanged": "Position status has changed from {FROM} to {TO}",
    "complaintEmployeeEmailSubject": "Return {COMPLAINT_NUMBER}: {DIFFERENCES}",
    "complaintEmployeeEmailBody": (
        "Return {COMPLAINT_NUMBER} for {CLIENT_NAME} ({AGREEMENT_NUMBER}, {DATE}).\n"
        "Consumption {CONSUMPTION_NUMBER}. Creator: {CREATOR_NAME}. "
        "Expert: {EXPERT_NAME}.\n{DIFFERENCES}"
    ),
    "complaintClientEmailSubject": "Your return {COMPLAINT_NUMBER}",
    "complaintClientEmailBody": (
        "Dear {CLIENT_NAME},\n{DIFFERENCES} for return {COMPLAINT_NUMBER} "
        "of {DATE}."
    ),
    "complaintClientSmsBody": "Return {COMPLAINT_NUMBER}: {DIFFERENCES}",
}

DEFAULT_STATUS_NAMES = {
    0: "Completed",
    1: "Pending",
    2: "Rejected",
}
