from __future__ import annotations

import unittest
from typing import Any

from return_notifications.adapters.in_memory import StatusTable, TemplateLocalizer
from return_notifications.domain.models import (
    NOTIFICATION_TYPE_CHANGE,
    NOTIFICATION_TYPE_NEW,
    Customer,
    Employee,
    ValidatedRequest,
)
from return_notifications.domain.template_data import (
    build_template_data,
    validate_template_data,
)
from return_notifications.errors import TemplateError, ValidationError

TEMPLATES = {
    "NewPositionAdded": "New position added",
    "PositionStatusHasChanged": "Status changed from {FROM} to {TO}",
}
STATUSES = StatusTable({0: "Completed", 1: "Pending", 2: "Rejected"})


def make_request(**overrides: Any) -> ValidatedRequest:
    base: dict[str, Any] = {
        "reseller_id": 1,
        "notification_type": NOTIFICATION_TYPE_CHANGE,
        "client_id": 7,
        "creator_id": 3,
        "expert_id": 4,
        "complaint_id": 100,
        "complaint_number": "RET-100",
        "consumption_id": 200,
        "consumption_number": "CON-200",
        "agreement_number": "AGR-1",
        "date": "2026-02-20",
        "differences": {"from": 1, "to": 2},
    }
    return ValidatedRequest(**(base | overrides))


def build(request: ValidatedRequest, client: Customer | None = None) -> dict[str, Any]:
    return build_template_data(
        request,
        client or Customer(id=7, type=0, seller_id=1, name="Doe", full_name="Jane Doe"),
        Employee(id=3, full_name="Alex Creator"),
        Employee(id=4, full_name="Sam Expert"),
        localizer=TemplateLocalizer(TEMPLATES),
        statuses=STATUSES,
    )


class BuildTemplateDataTests(unittest.TestCase):
    def test_build_template_data_has_all_fields(self) -> None:
        data = build(make_request())

        self.assertEqual(
            list(data),
            [
                "COMPLAINT_ID",
                "COMPLAINT_NUMBER",
                "CREATOR_ID",
                "CREATOR_NAME",
                "EXPERT_ID",
                "EXPERT_NAME",
                "CLIENT_ID",
                "CLIENT_NAME",
                "CONSUMPTION_ID",
                "CONSUMPTION_NUMBER",
                "AGREEMENT_NUMBER",
                "DATE",
                "DIFFERENCES",
            ],
        )
        self.assertEqual(data["CREATOR_NAME"], "Alex Creator")
        self.assertEqual(data["EXPERT_NAME"], "Sam Expert")
        self.assertEqual(data["CLIENT_NAME"], "Jane Doe")

    def test_client_name_falls_back_to_short_name(self) -> None:
        data = build(make_request(), Customer(id=7, type=0, seller_id=1, name="Doe"))

        self.assertEqual(data["CLIENT_NAME"], "Doe")

    def test_new_position_ignores_differences(self) -> None:
        for differences in (None, {}, {"from": 1, "to": 2}):
            with self.subTest(differences=differences):
                data = build(
                    make_request(notification_type=NOTIFICATION_TYPE_NEW, differences=differences)
                )
                self.assertEqual(data["DIFFERENCES"], "New position added")

    def test_status_change_describes_status_names(self) -> None:
        data = build(make_request(differences={"from": "1", "to": "0"}))

        self.assertEqual(data["DIFFERENCES"], "Status changed from Pending to Completed")

    def test_seller_locale_scope_overrides_text(self) -> None:
        localizer = TemplateLocalizer(TEMPLATES, overrides={1: {"NewPositionAdded": "Nouvelle position"}})

        data = build_template_data(
            make_request(notification_type=NOTIFICATION_TYPE_NEW),
            Customer(id=7, type=0, seller_id=1, name="Doe"),
            Employee(id=3, full_name="Alex Creator"),
            Employee(id=4, full_name="Sam Expert"),
            localizer=localizer,
            statuses=STATUSES,
        )

        self.assertEqual(data["DIFFERENCES"], "Nouvelle position")

    def test_status_change_with_blank_codes_reads_them_as_unset(self) -> None:
        for differences in ({"from": 1}, {"from": 1, "to": ""}, {"from": None, "to": 2}):
            with self.subTest(differences=differences):
                data = build(make_request(differences=differences))
                self.assertTrue(data["DIFFERENCES"].startswith("Status changed from "))
                self.assertIn("Completed", data["DIFFERENCES"])

    def test_status_change_without_differences_is_empty(self) -> None:
        for differences in (None, {}):
            with self.subTest(differences=differences):
                self.assertEqual(build(make_request(differences=differences))["DIFFERENCES"], "")

    def test_unknown_notification_type_is_empty(self) -> None:
        self.assertEqual(build(make_request(notification_type=9))["DIFFERENCES"], "")

    def test_status_change_with_bad_status_code(self) -> None:
        with self.assertRaises(ValidationError) as exc:
            build(make_request(differences={"from": "x", "to": 2}))

        self.assertEqual(exc.exception.field, "differences.from")

    def test_status_change_with_non_mapping_differences(self) -> None:
        with self.assertRaises(ValidationError) as exc:
            build(make_request(differences=["1", "2"]))

        self.assertEqual(exc.exception.field, "differences")


class ValidateTemplateDataTests(unittest.TestCase):
    def test_validate_template_data_accepts_complete_data(self) -> None:
        validate_template_data(build(make_request()))

    def test_validate_template_data_rejects_empty_field(self) -> None:
        data = build(make_request(differences=None))

        with self.assertRaises(TemplateError) as exc:
            validate_template_data(data)

        self.assertEqual(exc.exception.field, "DIFFERENCES")
        self.assertEqual(exc.exception.kind, "template")
        self.assertEqual(str(exc.exception), "Template Data (DIFFERENCES) is empty!")

    def test_validate_template_data_rejects_first_empty_field(self) -> None:
        data = build(make_request())
        data["CREATOR_NAME"] = ""
        data["EXPERT_NAME"] = None

        with self.assertRaises(TemplateError) as exc:
            validate_template_data(data)

        self.assertEqual(exc.exception.field, "CREATOR_NAME")


if __name__ == "__main__":
    unittest.main()
