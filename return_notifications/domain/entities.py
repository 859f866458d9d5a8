"""Entity resolution against the external repository.

Each lookup is independent and fails fast with a `NotFoundError`; nothing is
cached between calls.
"""

from __future__ import annotations

from ..errors import NotFoundError
from ..ports import Repository
from .models import CONTRACTOR_TYPE_CUSTOMER, Customer, Employee, Seller

ROLE_CREATOR = "Creator"
ROLE_EXPERT = "Expert"


def resolve_seller(repository: Repository, seller_id: int) -> Seller:
    seller = repository.get_seller(seller_id)
    if seller is None:
        raise NotFoundError("Seller not found!")
    return seller


def resolve_client(
    repository: Repository,
    client_id: int,
    expected_seller_id: int,
) -> Customer:
    """Return the customer only if it is a customer of `expected_seller_id`."""
    client = repository.get_customer(client_id)
    if (
        client is None
        or client.type != CONTRACTOR_TYPE_CUSTOMER
        or client.seller_id != expected_seller_id
    ):
        raise NotFoundError("Client not found or mismatched seller!")
    return client


def resolve_employee(repository: Repository, employee_id: int, role: str) -> Employee:
    employee = repository.get_employee(employee_id)
    if employee is None:
        raise NotFoundError(f"{role} not found!")
    return employee
