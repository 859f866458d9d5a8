#!/usr/bin/env python3
"""Run the goods-return notification operation locally without Kafka.

Collaborators are in-memory stand-ins; emails and SMS are printed.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from return_notifications import ReturnNotificationOperation, ReturnOperationError  # noqa: E402
from return_notifications.adapters.in_memory import (  # noqa: E402
    DEFAULT_TEMPLATES,
    ConsoleMessagesClient,
    ConsoleNotificationManager,
    InMemoryDirectory,
    StatusTable,
    TemplateLocalizer,
)
from return_notifications.adapters.payload import status_code_for  # noqa: E402

DEFAULT_FIXTURES = REPO_ROOT / "scripts" / "sample_fixtures.json"


def main() -> int:
    args = parse_args()
    fixtures = load_json(args.fixtures_file)
    request = load_json(args.request_file) if args.request_file else sample_request()
    operation = build_operation(fixtures)

    try:
        result = operation.execute(request)
    except ReturnOperationError as exc:
        print("")
        print("[FAILED]")
        print(f"status_code={status_code_for(exc)} kind={exc.kind} error={exc}")
        return 1

    print("")
    print("[SUMMARY]")
    print(json.dumps(result.to_dict(), indent=2))
    return 0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Execute the goods-return notification pipeline with sample data."
    )
    parser.add_argument(
        "--request-file",
        type=Path,
        default=None,
        help="Optional JSON file with the raw request fields.",
    )
    parser.add_argument(
        "--fixtures-file",
        type=Path,
        default=DEFAULT_FIXTURES,
        help="JSON fixtures for sellers, customers, employees and statuses.",
    )
    return parser.parse_args()


def build_operation(fixtures: dict[str, Any]) -> ReturnNotificationOperation:
    directory = InMemoryDirectory(fixtures)
    localizer = TemplateLocalizer(DEFAULT_TEMPLATES)
    statuses = StatusTable({int(code): name for code, name in fixtures.get("statuses", {}).items()})
    return ReturnNotificationOperation(
        repository=directory,
        localizer=localizer,
        statuses=statuses,
        permissions=directory,
        messages=ConsoleMessagesClient(),
        notification_manager=ConsoleNotificationManager(directory, localizer),
    )


def load_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as file_handle:
        return json.load(file_handle)


def sample_request() -> dict[str, Any]:
    return {
        "resellerId": 1,
        "notificationType": 2,
        "clientId": 7,
        "creatorId": 3,
        "expertId": 4,
        "complaintId": 100,
        "complaintNumber": "RET-100",
        "consumptionId": 200,
        "consumptionNumber": "CON-200",
        "agreementNumber": "AGR-1",
        "date": "2026-02-20",
        "differences": {"from": 1, "to": 0},
    }


if __name__ == "__main__":
    sys.exit(main())
