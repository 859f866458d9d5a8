"""Kafka transport adapters for publishing and consuming goods-return events.

Mental model refresher:
- This module is transport glue to Kafka itself.
- Each polled record goes through the consumer-handler flow; the handler's
  outcome decides whether the offset is committed directly or the record is
  dead-lettered first.
- Dead-letter records carry the operation's error kind and status code so a
  400 (bad request, fix upstream) is distinguishable from a 500 (our fault,
  replayable).
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass
from datetime import UTC, datetime
import json
import os
from types import SimpleNamespace
from typing import Any, Mapping

from .consumer_handler import Operation, handle_message

DEFAULT_TOPIC = "goods_returns.status_changed"
KIND_DECODE = "decode"


@dataclass(frozen=True)
class WorkerSettings:
    bootstrap_servers: list[str]
    topic: str
    dlq_topic: str | None
    group_id: str
    auto_offset_reset: str
    poll_timeout_ms: int
    max_records: int
    send_timeout_seconds: float
    acks: str

    @classmethod
    def from_env(cls) -> WorkerSettings:
        topic = os.getenv("KAFKA_TOPIC_GOODS_RETURNS", DEFAULT_TOPIC)
        dlq_topic = os.getenv("KAFKA_TOPIC_GOODS_RETURNS_DLQ", f"{topic}.dlq")
        poll_timeout_ms = int(float(os.getenv("KAFKA_POLL_TIMEOUT_SECONDS", "1.0")) * 1000)
        if poll_timeout_ms <= 0:
            raise RuntimeError("KAFKA_POLL_TIMEOUT_SECONDS must be > 0")

        return cls(
            bootstrap_servers=_bootstrap_servers_from_env(),
            topic=topic,
            dlq_topic=dlq_topic if _env_flag("KAFKA_DLQ_ENABLED", default=True) else None,
            group_id=os.getenv("KAFKA_GROUP_ID", "goods-return-notifier"),
            auto_offset_reset=os.getenv("KAFKA_AUTO_OFFSET_RESET", "earliest"),
            poll_timeout_ms=poll_timeout_ms,
            max_records=int(os.getenv("KAFKA_MAX_RECORDS_PER_POLL", "50")),
            send_timeout_seconds=float(os.getenv("KAFKA_SEND_TIMEOUT_SECONDS", "10")),
            acks=os.getenv("KAFKA_PRODUCER_ACKS", "all"),
        )


def publish_return_event(
    payload: Mapping[str, Any],
    *,
    topic: str | None = None,
) -> dict[str, Any]:
    """Publish one `{"event_id", "request"}` goods-return event."""
    kafka = _import_kafka()
    settings = WorkerSettings.from_env()
    producer = _json_producer(kafka, settings)
    try:
        future = producer.send(topic or settings.topic, value=dict(payload))
        metadata = future.get(timeout=settings.send_timeout_seconds)
        producer.flush(timeout=settings.send_timeout_seconds)
    finally:
        producer.close()

    return {
        "topic": metadata.topic,
        "partition": metadata.partition,
        "offset": metadata.offset,
    }


def run_return_worker_forever(operation: Operation) -> int:
    """Consume goods-return events and run `operation` for each one."""
    worker = ReturnEventWorker(operation, WorkerSettings.from_env(), _import_kafka())
    return worker.run()


class ReturnEventWorker:
    """Poll loop with manual per-record commits and dead-lettering."""

    def __init__(self, operation: Operation, settings: WorkerSettings, kafka: Any) -> None:
        self.operation = operation
        self.settings = settings
        self._topic_partition = kafka.TopicPartition
        self._offset_and_metadata = kafka.OffsetAndMetadata
        self.consumer = kafka.KafkaConsumer(
            settings.topic,
            bootstrap_servers=settings.bootstrap_servers,
            group_id=settings.group_id,
            enable_auto_commit=False,
            auto_offset_reset=settings.auto_offset_reset,
        )
        self.dlq_producer = (
            _json_producer(kafka, settings) if settings.dlq_topic is not None else None
        )

    def run(self) -> int:
        print(
            f"[WORKER START] topic={self.settings.topic} group_id={self.settings.group_id} "
            f"dlq_topic={self.settings.dlq_topic}"
        )
        try:
            while True:
                batches = self.consumer.poll(
                    timeout_ms=self.settings.poll_timeout_ms,
                    max_records=self.settings.max_records,
                )
                for records in batches.values():
                    for message in records:
                        self.process(message)
        except KeyboardInterrupt:
            print("[WORKER STOP] received keyboard interrupt")
            return 0
        except Exception as exc:
            print(f"[WORKER ERROR] {exc}")
            return 1
        finally:
            self.close()

    def process(self, message: Any) -> dict[str, Any]:
        """Run one Kafka message through the handler and settle its offset."""
        try:
            payload = _decode_event(message.value)
        except ValueError as exc:
            outcome = {
                "status": "decode_failed",
                "event_id": None,
                "status_code": None,
                "error": f"decode_failed: {exc}",
                "error_kind": KIND_DECODE,
            }
            self._dead_letter(message, _printable(message.value), outcome)
            return outcome

        record = {
            "topic": message.topic,
            "partition": message.partition,
            "offset": message.offset,
            "value": payload,
        }
        outcome = handle_message(
            record,
            operation=self.operation,
            commit=lambda _record: self._commit(message),
        )
        if not outcome["should_commit"]:
            self._dead_letter(message, payload, outcome)

        print(
            f"[RESULT] {_position(message)} event_id={outcome['event_id']} "
            f"status={outcome['status']} status_code={outcome['status_code']} "
            f"result={outcome['result']} error={outcome['error']}"
        )
        return outcome

    def close(self) -> None:
        with suppress(Exception):
            self.consumer.close()
        if self.dlq_producer is not None:
            with suppress(Exception):
                self.dlq_producer.flush(timeout=self.settings.send_timeout_seconds)
            with suppress(Exception):
                self.dlq_producer.close()

    def _commit(self, message: Any) -> None:
        partition = self._topic_partition(message.topic, int(message.partition))
        offset = _commit_offset(self._offset_and_metadata, int(message.offset) + 1)
        self.consumer.commit(offsets={partition: offset})
        print(f"[COMMIT] {_position(message)}")

    def _dead_letter(self, message: Any, source_payload: Any, outcome: Mapping[str, Any]) -> None:
        """Publish to the DLQ and commit; leave the offset alone if that fails."""
        if self.dlq_producer is None or self.settings.dlq_topic is None:
            print(f"[NO-COMMIT] {_position(message)} reason={outcome['error']}")
            return

        dead_letter = _dead_letter_record(message, source_payload, outcome)
        try:
            future = self.dlq_producer.send(self.settings.dlq_topic, value=dead_letter)
            metadata = future.get(timeout=self.settings.send_timeout_seconds)
        except Exception as exc:
            print(
                f"[DLQ ERROR] {_position(message)} reason={outcome['error']} error={exc}"
            )
            print(f"[NO-COMMIT] {_position(message)} reason={outcome['error']}")
            return

        print(
            f"[DLQ] {_position(message)} dlq_topic={metadata.topic} "
            f"dlq_offset={metadata.offset} kind={outcome['error_kind']} "
            f"status_code={outcome['status_code']}"
        )
        self._commit(message)


def _dead_letter_record(
    message: Any,
    source_payload: Any,
    outcome: Mapping[str, Any],
) -> dict[str, Any]:
    return {
        "event_type": f"{message.topic}.dlq",
        "failed_at": datetime.now(tz=UTC).isoformat(),
        "event_id": outcome["event_id"],
        "error_kind": outcome["error_kind"],
        "status_code": outcome["status_code"],
        "failure_reason": outcome["error"],
        "source": {
            "topic": message.topic,
            "partition": int(message.partition),
            "offset": int(message.offset),
        },
        "payload": source_payload,
    }


def _commit_offset(offset_and_metadata_type: Any, offset: int) -> Any:
    """Build OffsetAndMetadata whether or not it has a `leader_epoch` field."""
    values = (offset, "", -1)
    return offset_and_metadata_type(*values[: len(offset_and_metadata_type._fields)])


def _import_kafka() -> SimpleNamespace:
    try:
        from kafka import KafkaConsumer, KafkaProducer
        from kafka.structs import OffsetAndMetadata, TopicPartition
    except ImportError as exc:
        raise RuntimeError(
            "Kafka support requires `kafka-python`. Install with: pip install kafka-python"
        ) from exc
    return SimpleNamespace(
        KafkaConsumer=KafkaConsumer,
        KafkaProducer=KafkaProducer,
        OffsetAndMetadata=OffsetAndMetadata,
        TopicPartition=TopicPartition,
    )


def _json_producer(kafka: Any, settings: WorkerSettings) -> Any:
    return kafka.KafkaProducer(
        bootstrap_servers=settings.bootstrap_servers,
        value_serializer=lambda value: json.dumps(value, separators=(",", ":")).encode("utf-8"),
        acks=settings.acks,
    )


def _decode_event(raw: bytes | str | None) -> dict[str, Any]:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if not isinstance(raw, str):
        raise ValueError(f"Unsupported Kafka payload type: {type(raw).__name__}")
    parsed = json.loads(raw)
    if not isinstance(parsed, dict):
        raise ValueError("Kafka payload must decode to a JSON object")
    return parsed


def _printable(raw: Any) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return repr(raw) if not isinstance(raw, str) else raw


def _position(message: Any) -> str:
    return f"topic={message.topic} partition={message.partition} offset={message.offset}"


def _bootstrap_servers_from_env() -> list[str]:
    raw = os.getenv("KAFKA_BOOTSTRAP_SERVERS", "")
    servers = [item.strip() for item in raw.split(",") if item.strip()]
    if not servers:
        raise RuntimeError("KAFKA_BOOTSTRAP_SERVERS must include at least one host:port")
    return servers


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"Invalid boolean value for {name}: {raw!r}")
