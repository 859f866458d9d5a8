#!/usr/bin/env python3
"""Run the Kafka goods-return worker.

The worker consumes goods-return events, resolves entities from a fixtures
file and delivers email via Mailgun and SMS via Twilio.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from return_notifications import ReturnNotificationOperation  # noqa: E402
from return_notifications.adapters.in_memory import (  # noqa: E402
    DEFAULT_TEMPLATES,
    InMemoryDirectory,
    StatusTable,
    TemplateLocalizer,
)
from return_notifications.adapters.kafka_runtime import run_return_worker_forever  # noqa: E402
from return_notifications.adapters.real_senders import (  # noqa: E402
    MailgunMessagesClient,
    TwilioNotificationManager,
)


def main() -> int:
    args = parse_args()
    _load_env_file(REPO_ROOT / ".env")
    fixtures_path = args.fixtures_file or Path(
        os.getenv("RETURN_FIXTURES_PATH", str(REPO_ROOT / "scripts" / "sample_fixtures.json"))
    )
    with fixtures_path.open("r", encoding="utf-8") as file_handle:
        fixtures = json.load(file_handle)

    directory = InMemoryDirectory(fixtures)
    localizer = TemplateLocalizer(DEFAULT_TEMPLATES)
    operation = ReturnNotificationOperation(
        repository=directory,
        localizer=localizer,
        statuses=StatusTable(
            {int(code): name for code, name in fixtures.get("statuses", {}).items()}
        ),
        permissions=directory,
        messages=MailgunMessagesClient(),
        notification_manager=TwilioNotificationManager(directory, localizer),
    )
    return run_return_worker_forever(operation)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run Kafka consumer loop for goods-return notifications."
    )
    parser.add_argument(
        "--fixtures-file",
        type=Path,
        default=None,
        help="JSON fixtures for the in-memory directory (default: RETURN_FIXTURES_PATH).",
    )
    return parser.parse_args()


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return

    for line in path.read_text(encoding="utf-8").splitlines():
        text = line.strip()
        if not text or text.startswith("#") or "=" not in text:
            continue
        key, value = text.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if value.startswith(("'", '"')) and value.endswith(("'", '"')) and len(value) >= 2:
            value = value[1:-1]
        os.environ.setdefault(key, value)


if __name__ == "__main__":
    sys.exit(main())
