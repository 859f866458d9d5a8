from __future__ import annotations

import unittest
from typing import Any

from return_notifications.adapters.consumer_handler import handle_batch, handle_message
from return_notifications.adapters.payload import parse_event_payload, status_code_for
from return_notifications.domain.models import ClientSmsResult, NotificationResult
from return_notifications.errors import NotFoundError, TemplateError, ValidationError


def make_record(value: Any, *, offset: int) -> dict[str, Any]:
    return {
        "topic": "goods_returns.status_changed",
        "partition": 0,
        "offset": offset,
        "value": value,
    }


def make_payload(**overrides: Any) -> dict[str, Any]:
    base: dict[str, Any] = {
        "event_id": "evt-1",
        "request": {"resellerId": 1, "notificationType": 2},
    }
    return base | overrides


class StubOperation:
    def __init__(self, outcome: NotificationResult | Exception) -> None:
        self.outcome = outcome
        self.requests: list[dict[str, Any]] = []

    def execute(self, raw: Any) -> NotificationResult:
        self.requests.append(dict(raw))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


class ConsumerHandlerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.committed: list[int] = []
        self.rejected: list[tuple[int, str]] = []

    def commit(self, message_record: Any) -> None:
        self.committed.append(int(message_record["offset"]))

    def reject(self, message_record: Any, reason: str) -> None:
        self.rejected.append((int(message_record["offset"]), reason))

    def test_handle_message_commits_partial_delivery(self) -> None:
        outcome = NotificationResult(
            employee_email_sent=True,
            client_sms=ClientSmsResult(sent=False, message="quota exceeded"),
        )
        operation = StubOperation(outcome)

        result = handle_message(
            make_record(make_payload(), offset=10),
            operation=operation,
            commit=self.commit,
            reject=self.reject,
        )

        self.assertEqual(result["status"], "processed_and_committed")
        self.assertEqual(result["event_id"], "evt-1")
        self.assertEqual(result["status_code"], 200)
        self.assertEqual(result["result"]["notificationClientBySms"]["message"], "quota exceeded")
        self.assertEqual(operation.requests, [{"resellerId": 1, "notificationType": 2}])
        self.assertEqual(self.committed, [10])
        self.assertEqual(self.rejected, [])

    def test_handle_message_rejects_validation_error_as_400(self) -> None:
        result = handle_message(
            make_record(make_payload(), offset=11),
            operation=StubOperation(ValidationError("clientId")),
            commit=self.commit,
            reject=self.reject,
        )

        self.assertEqual(result["status"], "operation_failed")
        self.assertEqual(result["status_code"], 400)
        self.assertFalse(result["should_commit"])
        self.assertIn("clientId", result["error"] or "")
        self.assertEqual(self.committed, [])
        self.assertEqual([offset for offset, _reason in self.rejected], [11])

    def test_handle_message_rejects_template_error_as_500(self) -> None:
        result = handle_message(
            make_record(make_payload(), offset=12),
            operation=StubOperation(TemplateError("DIFFERENCES")),
            commit=self.commit,
            reject=self.reject,
        )

        self.assertEqual(result["status_code"], 500)
        self.assertEqual(result["error_kind"], "template")
        self.assertIn("template", result["error"] or "")

    def test_handle_message_rejects_unexpected_exception_as_internal_500(self) -> None:
        result = handle_message(
            make_record(make_payload(), offset=14),
            operation=StubOperation(RuntimeError("directory connection reset")),
            commit=self.commit,
            reject=self.reject,
        )

        self.assertEqual(result["status"], "operation_failed")
        self.assertEqual(result["event_id"], "evt-1")
        self.assertEqual(result["status_code"], 500)
        self.assertEqual(result["error_kind"], "internal")
        self.assertFalse(result["should_commit"])
        self.assertIn("RuntimeError: directory connection reset", result["error"] or "")
        self.assertEqual(self.committed, [])
        self.assertEqual([offset for offset, _reason in self.rejected], [14])

    def test_handle_message_parse_failure_does_not_commit(self) -> None:
        operation = StubOperation(NotificationResult())

        result = handle_message(
            make_record({"request": {}}, offset=13),
            operation=operation,
            commit=self.commit,
            reject=self.reject,
        )

        self.assertEqual(result["status"], "parse_failed")
        self.assertEqual(result["error_kind"], "parse")
        self.assertIsNone(result["status_code"])
        self.assertIn("parse_failed", result["error"] or "")
        self.assertEqual(operation.requests, [])
        self.assertEqual(self.committed, [])
        self.assertEqual([offset for offset, _reason in self.rejected], [13])

    def test_handle_batch_mixes_commit_and_reject(self) -> None:
        records = [
            make_record(make_payload(), offset=20),
            make_record("not a dict", offset=21),
        ]

        results = handle_batch(
            records,
            operation=StubOperation(NotificationResult()),
            commit=self.commit,
            reject=self.reject,
        )

        self.assertEqual(len(results), 2)
        self.assertEqual(self.committed, [20])
        self.assertEqual([offset for offset, _reason in self.rejected], [21])


class PayloadTests(unittest.TestCase):
    def test_parse_event_payload_splits_envelope(self) -> None:
        event_id, request = parse_event_payload(
            {"event_id": " evt-2 ", "request": {"clientId": "7"}}
        )

        self.assertEqual(event_id, "evt-2")
        self.assertEqual(request, {"clientId": "7"})

    def test_parse_event_payload_requires_event_id_and_request(self) -> None:
        for payload in ({"request": {}}, {"event_id": "evt-3"}, {"event_id": "evt-3", "request": []}):
            with self.subTest(payload=payload):
                with self.assertRaises(ValueError):
                    parse_event_payload(payload)

    def test_status_code_for_error_kinds(self) -> None:
        self.assertEqual(status_code_for(ValidationError("date")), 400)
        self.assertEqual(status_code_for(NotFoundError("Seller not found!")), 400)
        self.assertEqual(status_code_for(TemplateError("DATE")), 500)


if __name__ == "__main__":
    unittest.main()
