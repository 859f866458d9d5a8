from __future__ import annotations

import unittest
from typing import Any

from return_notifications.domain.models import NOTIFICATION_TYPE_CHANGE, NOTIFICATION_TYPE_NEW
from return_notifications.domain.request import (
    coerce_int,
    sanitize_str,
    target_status,
    validate_request,
)
from return_notifications.errors import ValidationError


def make_raw(**overrides: Any) -> dict[str, Any]:
    base: dict[str, Any] = {
        "resellerId": "1",
        "notificationType": "2",
        "clientId": 7,
        "creatorId": 3,
        "expertId": 4,
        "complaintId": 100,
        "complaintNumber": "RET-100",
        "consumptionId": 200,
        "consumptionNumber": "CON-200",
        "agreementNumber": "AGR-1",
        "date": "2026-02-20",
        "differences": {"from": 1, "to": 2},
    }
    return base | overrides


class ValidateRequestTests(unittest.TestCase):
    def test_validate_request_coerces_fields(self) -> None:
        request = validate_request(make_raw())

        self.assertEqual(request.reseller_id, 1)
        self.assertEqual(request.notification_type, NOTIFICATION_TYPE_CHANGE)
        self.assertEqual(request.client_id, 7)
        self.assertEqual(request.complaint_number, "RET-100")
        self.assertEqual(request.differences, {"from": 1, "to": 2})

    def test_validate_request_defaults_differences_to_none(self) -> None:
        raw = make_raw()
        del raw["differences"]

        request = validate_request(raw)

        self.assertIsNone(request.differences)

    def test_validate_request_reports_missing_field(self) -> None:
        for field_name in (
            "resellerId",
            "notificationType",
            "clientId",
            "creatorId",
            "expertId",
            "complaintId",
            "complaintNumber",
            "consumptionId",
            "consumptionNumber",
            "agreementNumber",
            "date",
        ):
            with self.subTest(field=field_name):
                raw = make_raw()
                del raw[field_name]

                with self.assertRaises(ValidationError) as exc:
                    validate_request(raw)

                self.assertEqual(exc.exception.field, field_name)
                self.assertIn(field_name, str(exc.exception))
                self.assertEqual(exc.exception.kind, "validation")

    def test_validate_request_rejects_non_numeric_id(self) -> None:
        with self.assertRaises(ValidationError) as exc:
            validate_request(make_raw(clientId="seven"))

        self.assertEqual(exc.exception.field, "clientId")

    def test_validate_request_rejects_markup_only_string(self) -> None:
        with self.assertRaises(ValidationError) as exc:
            validate_request(make_raw(agreementNumber="<b></b>"))

        self.assertEqual(exc.exception.field, "agreementNumber")

    def test_validate_request_reports_first_invalid_field(self) -> None:
        with self.assertRaises(ValidationError) as exc:
            validate_request(make_raw(expertId=None, date=None))

        self.assertEqual(exc.exception.field, "expertId")

    def test_validate_request_accepts_zero(self) -> None:
        request = validate_request(make_raw(complaintId=0))

        self.assertEqual(request.complaint_id, 0)


class CoercionTests(unittest.TestCase):
    def test_coerce_int_accepts_integer_like_values(self) -> None:
        self.assertEqual(coerce_int(5), 5)
        self.assertEqual(coerce_int(" 42 "), 42)
        self.assertEqual(coerce_int("-3"), -3)
        self.assertEqual(coerce_int(8.0), 8)

    def test_coerce_int_rejects_invalid_values(self) -> None:
        for value in (None, True, "", "12a", "007", "1.5", 2.5, [], {}, "99999999999999999999"):
            with self.subTest(value=value):
                self.assertIsNone(coerce_int(value))

    def test_sanitize_str_strips_tags_and_control_characters(self) -> None:
        self.assertEqual(sanitize_str("<script>x</script>RET\x00-1\n"), "xRET-1")
        self.assertEqual(sanitize_str(123), "123")
        self.assertIsNone(sanitize_str("   "))
        self.assertIsNone(sanitize_str({"a": 1}))


class TargetStatusTests(unittest.TestCase):
    def test_target_status_for_status_change(self) -> None:
        request = validate_request(make_raw(differences={"from": "1", "to": "2"}))

        self.assertEqual(target_status(request), 2)

    def test_target_status_absent_for_new_positions(self) -> None:
        request = validate_request(make_raw(notificationType=NOTIFICATION_TYPE_NEW))

        self.assertIsNone(target_status(request))

    def test_target_status_absent_when_to_is_missing(self) -> None:
        for differences in (None, {}, {"from": 1}, {"from": 1, "to": ""}):
            with self.subTest(differences=differences):
                request = validate_request(make_raw(differences=differences))
                self.assertIsNone(target_status(request))


if __name__ == "__main__":
    unittest.main()
