"""Real provider adapters for production-like sending.

Mental model refresher:
- This module is an outbound adapter.
- It integrates with external providers using environment-variable config.
- `MailgunMessagesClient` implements the messaging port, and
  `TwilioNotificationManager` implements the SMS notification-manager port.
  The operation only sees those ports.
"""

from __future__ import annotations

import base64
import os
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Mapping, Sequence

from ..domain.models import EmailMessage
from ..ports import Localizer, Repository

SMS_TEMPLATE = "complaintClientSmsBody"


def send_email_via_mailgun_from_env(
    *,
    from_email: str,
    to_email: str,
    subject: str,
    body: str,
    tags: Mapping[str, Any] | None = None,
) -> None:
    """Send email via Mailgun REST API using environment-variable config."""
    api_key = _required_env("MAILGUN_API_KEY")
    domain = _required_env("MAILGUN_DOMAIN")
    base_url = os.getenv("MAILGUN_API_BASE_URL", "https://api.mailgun.net").rstrip("/")
    timeout_seconds = float(os.getenv("MAILGUN_TIMEOUT_SECONDS", "10"))

    encoded_domain = urllib.parse.quote(domain, safe="")
    endpoint = f"{base_url}/v3/{encoded_domain}/messages"
    fields: dict[str, Any] = {"from": from_email, "to": to_email, "subject": subject, "text": body}
    for key, value in (tags or {}).items():
        if value is not None:
            fields[f"v:{key}"] = value
    payload = urllib.parse.urlencode(fields).encode("utf-8")

    request = urllib.request.Request(endpoint, data=payload, method="POST")
    request.add_header("Authorization", _basic_auth_header("api", api_key))
    request.add_header("Content-Type", "application/x-www-form-urlencoded")

    try:
        with urllib.request.urlopen(request, timeout=timeout_seconds) as response:
            status = int(response.getcode())
            if status < 200 or status >= 300:
                raise RuntimeError(f"Mailgun email send failed with status {status}")
            response.read()
    except urllib.error.HTTPError as exc:
        details = exc.read().decode("utf-8", errors="replace")
        raise RuntimeError(
            f"Mailgun email send failed HTTP {exc.code}: {details[:300]}"
        ) from exc
    except urllib.error.URLError as exc:
        raise RuntimeError(f"Mailgun email send failed: {exc.reason}") from exc


def send_sms_via_twilio_from_env(*, to_phone_e164: str, message: str) -> None:
    """Send SMS via Twilio REST API using environment-variable config."""
    account_sid = _required_env("TWILIO_ACCOUNT_SID")
    auth_token = _required_env("TWILIO_AUTH_TOKEN")
    from_phone = _required_env("TWILIO_FROM_PHONE")
    base_url = os.getenv("TWILIO_API_BASE_URL", "https://api.twilio.com").rstrip("/")
    timeout_seconds = float(os.getenv("TWILIO_TIMEOUT_SECONDS", "10"))

    endpoint = f"{base_url}/2010-04-01/Accounts/{account_sid}/Messages.json"
    payload = urllib.parse.urlencode(
        {"To": to_phone_e164, "From": from_phone, "Body": message}
    ).encode("utf-8")
    auth_header = _basic_auth_header(account_sid, auth_token)

    request = urllib.request.Request(endpoint, data=payload, method="POST")
    request.add_header("Authorization", auth_header)
    request.add_header("Content-Type", "application/x-www-form-urlencoded")

    try:
        with urllib.request.urlopen(request, timeout=timeout_seconds) as response:
            status = int(response.getcode())
            if status < 200 or status >= 300:
                raise RuntimeError(f"Twilio SMS send failed with status {status}")
            response.read()
    except urllib.error.HTTPError as exc:
        details = exc.read().decode("utf-8", errors="replace")
        raise RuntimeError(
            f"Twilio SMS send failed HTTP {exc.code}: {details[:300]}"
        ) from exc
    except urllib.error.URLError as exc:
        raise RuntimeError(f"Twilio SMS send failed: {exc.reason}") from exc


class MailgunMessagesClient:
    """Messaging port over Mailgun. Raises RuntimeError on delivery failure."""

    def send(
        self,
        messages: Sequence[EmailMessage],
        seller_id: int,
        event: str,
        *,
        client_id: int | None = None,
        target_status: int | None = None,
    ) -> None:
        tags = {
            "seller_id": seller_id,
            "event": event,
            "client_id": client_id,
            "target_status": target_status,
        }
        for message in messages:
            send_email_via_mailgun_from_env(
                from_email=message.email_from,
                to_email=message.email_to,
                subject=message.subject,
                body=message.body,
                tags=tags,
            )


class TwilioNotificationManager:
    """SMS notification-manager port over Twilio.

    Reports failures as `(False, error)` instead of raising.
    """

    def __init__(self, repository: Repository, localizer: Localizer) -> None:
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
            return False, f"client {client_id} has no mobile number"

        message = self._localizer.localize(SMS_TEMPLATE, template_data, seller_id)
        try:
            send_sms_via_twilio_from_env(to_phone_e164=client.mobile, message=message)
        except RuntimeError as exc:
            return False, str(exc)
        return True, None


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value.strip()


def _basic_auth_header(username: str, password: str) -> str:
    token = f"{username}:{password}".encode("utf-8")
    encoded = base64.b64encode(token).decode("ascii")
    return f"Basic {encoded}"
