#!/usr/bin/env python3
"""Publish one goods-return event to Kafka for local testing."""

from __future__ import annotations

import argparse
import os
import sys
import uuid
from pathlib import Path

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from return_notifications.adapters.kafka_runtime import publish_return_event  # noqa: E402


def main() -> int:
    _load_env_file(REPO_ROOT / ".env")
    args = parse_args()
    payload = build_payload(args)
    metadata = publish_return_event(payload, topic=args.topic)

    print("[PUBLISHED]")
    print(f"topic={metadata['topic']}")
    print(f"partition={metadata['partition']}")
    print(f"offset={metadata['offset']}")
    print(f"event_id={payload['event_id']}")
    print(f"notificationType={payload['request']['notificationType']}")
    return 0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Publish one goods-return event for Kafka testing."
    )
    parser.add_argument("--reseller-id", type=int, required=True)
    parser.add_argument("--client-id", type=int, required=True)
    parser.add_argument("--creator-id", type=int, required=True)
    parser.add_argument("--expert-id", type=int, required=True)
    parser.add_argument("--complaint-id", type=int, required=True)
    parser.add_argument("--complaint-number", required=True)
    parser.add_argument("--consumption-id", type=int, required=True)
    parser.add_argument("--consumption-number", required=True)
    parser.add_argument("--agreement-number", required=True)
    parser.add_argument("--date", required=True)
    parser.add_argument(
        "--new",
        action="store_true",
        help="Publish a new-position event instead of a status change.",
    )
    parser.add_argument("--from-status", type=int, default=None)
    parser.add_argument("--to-status", type=int, default=None)
    parser.add_argument(
        "--event-id",
        default=None,
        help="Optional event id. Default: generated UUID.",
    )
    parser.add_argument(
        "--topic",
        default=None,
        help="Override Kafka topic (defaults to KAFKA_TOPIC_GOODS_RETURNS).",
    )
    return parser.parse_args()


def build_payload(args: argparse.Namespace) -> dict[str, object]:
    if not args.new and (args.from_status is None or args.to_status is None):
        raise SystemExit("--from-status and --to-status are required for status changes.")

    request: dict[str, object] = {
        "resellerId": args.reseller_id,
        "notificationType": 1 if args.new else 2,
        "clientId": args.client_id,
        "creatorId": args.creator_id,
        "expertId": args.expert_id,
        "complaintId": args.complaint_id,
        "complaintNumber": args.complaint_number,
        "consumptionId": args.consumption_id,
        "consumptionNumber": args.consumption_number,
        "agreementNumber": args.agreement_number,
        "date": args.date,
    }
    if not args.new:
        request["differences"] = {"from": args.from_status, "to": args.to_status}

    return {
        "event_id": args.event_id or f"evt-{uuid.uuid4()}",
        "request": request,
    }


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
