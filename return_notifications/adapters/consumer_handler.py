"""Consumer-handler adapter functions (Kafka-like flow without Kafka).

Mental model refresher:
- This is the controller-like entrypoint for event processing.
- Real Kafka code would call this after polling a record.
- Flow:
  record -> parse adapter -> operation -> commit/reject decision
- This module owns transport lifecycle behavior (parse errors, status codes,
  commit callbacks), not pipeline rules.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence

from ..domain.models import NotificationResult
from ..errors import KIND_INTERNAL, ReturnOperationError
from ..types import RawRequest, Record
from .payload import parse_event_payload, status_code_for

CommitFn = Callable[[Record], None]
RejectFn = Callable[[Record, str], None]

KIND_PARSE = "parse"


class Operation(Protocol):
    def execute(self, raw: RawRequest) -> NotificationResult: ...


def handle_message(
    record: Record,
    *,
    operation: Operation,
    commit: CommitFn,
    reject: RejectFn | None = None,
) -> dict[str, Any]:
    """Handle one incoming record and decide commit/reject.

    Commit policy:
    - Commit whenever the operation returns a result. Channel outcomes are
      data, so partial delivery still commits.
    - Parse failures and operation errors, including unexpected collaborator
      exceptions (reported as 500), are rejected and not committed.
    """
    try:
        event_id, request = parse_event_payload(_get_record_payload(record))
    except Exception as exc:
        return _rejected(
            record,
            status="parse_failed",
            error=f"parse_failed: {exc}",
            error_kind=KIND_PARSE,
            status_code=None,
            reject=reject,
        )

    try:
        result = operation.execute(request)
    except ReturnOperationError as exc:
        status_code = status_code_for(exc)
        return _rejected(
            record,
            status="operation_failed",
            error=f"operation_failed: {status_code} {exc.kind}: {exc}",
            error_kind=exc.kind,
            status_code=status_code,
            reject=reject,
            event_id=event_id,
        )
    except Exception as exc:
        return _rejected(
            record,
            status="operation_failed",
            error=f"operation_failed: 500 {KIND_INTERNAL}: {type(exc).__name__}: {exc}",
            error_kind=KIND_INTERNAL,
            status_code=500,
            reject=reject,
            event_id=event_id,
        )

    commit(record)
    return {
        "status": "processed_and_committed",
        "record_meta": _record_meta(record),
        "event_id": event_id,
        "status_code": 200,
        "result": result.to_dict(),
        "should_commit": True,
        "error": None,
        "error_kind": None,
    }


def handle_batch(
    records: Sequence[Record],
    *,
    operation: Operation,
    commit: CommitFn,
    reject: RejectFn | None = None,
) -> list[dict[str, Any]]:
    """Handle a batch of records sequentially using `handle_message`."""
    results: list[dict[str, Any]] = []
    for record in records:
        result = handle_message(
            record,
            operation=operation,
            commit=commit,
            reject=reject,
        )
        results.append(result)
    return results


def _rejected(
    record: Record,
    *,
    status: str,
    error: str,
    error_kind: str,
    status_code: int | None,
    reject: RejectFn | None,
    event_id: str | None = None,
) -> dict[str, Any]:
    if reject is not None:
        reject(record, error)
    return {
        "status": status,
        "record_meta": _record_meta(record),
        "event_id": event_id,
        "status_code": status_code,
        "result": None,
        "should_commit": False,
        "error": error,
        "error_kind": error_kind,
    }


def _get_record_payload(record: Record) -> dict[str, Any]:
    payload = record.get("value")
    if not isinstance(payload, dict):
        raise ValueError("record.value must be a dict payload")
    return payload


def _record_meta(record: Record) -> dict[str, Any]:
    return {
        "topic": record.get("topic"),
        "partition": record.get("partition"),
        "offset": record.get("offset"),
    }
