"""Notification channel decision logic.

Mental model refresher:
- Three independent channels: employee email, client email, client SMS.
- Each channel decides on its own whether it applies and whether the data it
  needs is present; a failure in one never stops the next from running.
- Transport exceptions are recorded in the result, never raised. There is no
  rollback, so partial delivery is a normal outcome.
"""

from __future__ import annotations

from ..ports import Localizer, MessagesClient, NotificationManager, Permissions
from ..types import TemplateData
from .models import (
    EVENT_CHANGE_RETURN_STATUS,
    GOODS_RETURN_PERMIT,
    ClientSmsResult,
    Customer,
    EmailMessage,
    NotificationResult,
    Seller,
    ValidatedRequest,
)
from .request import target_status


def dispatch_notifications(
    request: ValidatedRequest,
    seller: Seller,
    client: Customer,
    template_data: TemplateData,
    *,
    permissions: Permissions,
    localizer: Localizer,
    messages: MessagesClient,
    notification_manager: NotificationManager,
) -> NotificationResult:
    email_from = permissions.email_from_for(seller.id)

    employee_email_sent = send_employee_emails(
        seller,
        template_data,
        email_from=email_from,
        permissions=permissions,
        localizer=localizer,
        messages=messages,
    )

    client_email_sent = False
    client_sms = ClientSmsResult()
    status = target_status(request)
    if status is not None:
        client_email_sent = send_client_email(
            seller,
            client,
            template_data,
            status,
            email_from=email_from,
            localizer=localizer,
            messages=messages,
        )
        client_sms = send_client_sms(
            seller,
            client,
            template_data,
            status,
            notification_manager=notification_manager,
        )

    return NotificationResult(
        employee_email_sent=employee_email_sent,
        client_email_sent=client_email_sent,
        client_sms=client_sms,
    )


def send_employee_emails(
    seller: Seller,
    template_data: TemplateData,
    *,
    email_from: str | None,
    permissions: Permissions,
    localizer: Localizer,
    messages: MessagesClient,
) -> bool:
    """Send one email per permitted employee.

    Returns True once any send was attempted; a failed attempt still counts.
    """
    recipients = permissions.emails_for(seller.id, GOODS_RETURN_PERMIT)
    if not email_from or not recipients:
        return False

    subject = localizer.localize("complaintEmployeeEmailSubject", template_data, seller.id)
    body = localizer.localize("complaintEmployeeEmailBody", template_data, seller.id)

    attempted = False
    for recipient in recipients:
        message = EmailMessage(
            email_from=email_from, email_to=recipient, subject=subject, body=body
        )
        try:
            messages.send([message], seller.id, EVENT_CHANGE_RETURN_STATUS)
        except Exception:
            # Employee delivery is reported per attempt, not per success.
            pass
        attempted = True
    return attempted


def send_client_email(
    seller: Seller,
    client: Customer,
    template_data: TemplateData,
    status: int,
    *,
    email_from: str | None,
    localizer: Localizer,
    messages: MessagesClient,
) -> bool:
    if not email_from or not client.email:
        return False

    message = EmailMessage(
        email_from=email_from,
        email_to=client.email,
        subject=localizer.localize("complaintClientEmailSubject", template_data, seller.id),
        body=localizer.localize("complaintClientEmailBody", template_data, seller.id),
    )
    try:
        messages.send(
            [message],
            seller.id,
            EVENT_CHANGE_RETURN_STATUS,
            client_id=client.id,
            target_status=status,
        )
    except Exception:
        return False
    return True


def send_client_sms(
    seller: Seller,
    client: Customer,
    template_data: TemplateData,
    status: int,
    *,
    notification_manager: NotificationManager,
) -> ClientSmsResult:
    if not client.mobile:
        return ClientSmsResult()

    try:
        sent, error = notification_manager.send(
            seller.id, client.id, EVENT_CHANGE_RETURN_STATUS, status, template_data
        )
    except Exception as exc:
        return ClientSmsResult(sent=False, message=str(exc))

    return ClientSmsResult(sent=bool(sent), message=error or "")
