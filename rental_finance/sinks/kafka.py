"""Kafka sink for publishing reports to Kafka topics."""

import logging
import time
from dataclasses import dataclass, is_dataclass
from typing import Any

from confluent_kafka import KafkaException, Producer

from rental_finance.config import KafkaConfig
from rental_finance.exceptions import SinkError
from rental_finance.sinks.serialization import to_json

logger = logging.getLogger(__name__)

DEFAULT_TOPIC_PREFIX = "rental.reports"


@dataclass
class ProducerConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str
    topic_prefix: str = DEFAULT_TOPIC_PREFIX
    acks: str = "all"  # "0", "1", "all"
    batch_size: int = 16384  # bytes
    linger_ms: int = 5  # ms to wait for batching
    compression: str = "snappy"  # none, gzip, snappy, lz4
    retries: int = 3

    @classmethod
    def from_kafka_config(cls, config: KafkaConfig) -> "ProducerConfig":
        """Build producer settings from the application config."""
        return cls(
            bootstrap_servers=config.bootstrap_servers,
            topic_prefix=config.topic_prefix,
            acks=config.acks,
            linger_ms=config.linger_ms,
            compression=config.compression,
            retries=config.retries,
        )


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0
    start_time: float | None = None
    end_time: float | None = None

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0

    @property
    def throughput(self) -> float:
        """Calculate messages per second achieved."""
        if self.start_time is None or self.end_time is None:
            return 0.0
        duration = self.end_time - self.start_time
        return self.sent / duration if duration > 0 else 0.0


class KafkaSink:
    """Publish reports and records as JSON messages.

    Reports go to ``<prefix>.<report name>`` keyed by report name; record
    batches go to ``<prefix>.<entity type>`` keyed by the field in
    ``KEY_FIELDS``.
    """

    # Entity type to key field mapping
    KEY_FIELDS = {
        "properties": "property_id",
        "clients": "client_id",
        "contracts": "property_id",
        "payments": "contract_id",
        "expenses": "property_id",
    }

    def __init__(self, config: ProducerConfig | str) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : ProducerConfig | str
            Producer configuration or bootstrap servers string.
        """
        if isinstance(config, str):
            config = ProducerConfig(bootstrap_servers=config)

        self.config = config
        self.producer = self._create_producer()
        self.stats = ProducerStats()

    def _create_producer(self) -> Producer:
        """Create Kafka producer with configuration."""
        return Producer(
            {
                "bootstrap.servers": self.config.bootstrap_servers,
                "acks": self.config.acks,
                "retries": self.config.retries,
                "linger.ms": self.config.linger_ms,
                "batch.size": self.config.batch_size,
                "compression.type": self.config.compression,
            }
        )

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def topic_for(self, name: str) -> str:
        """Topic a report or entity batch is published to."""
        return f"{self.config.topic_prefix}.{name.replace('_', '-')}"

    def _get_key(self, entity_type: str, record: Any) -> str | None:
        """Extract message key from record based on entity type."""
        key_field = self.KEY_FIELDS.get(entity_type)
        if not key_field:
            return None

        if is_dataclass(record):
            return getattr(record, key_field, None)
        elif isinstance(record, dict):
            return record.get(key_field)
        return None

    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        """Send a single record or report to a Kafka topic.

        Raises
        ------
        SinkError
            If the producer rejects the message.
        """
        value = to_json(record).encode("utf-8")
        try:
            self.producer.produce(
                topic=topic,
                key=key.encode("utf-8") if key else None,
                value=value,
                callback=self._delivery_callback,
            )
        except (BufferError, KafkaException) as e:
            logger.error("Failed to produce to %s: %s", topic, e)
            raise SinkError(f"Failed to produce to {topic}: {e}") from e
        self.stats.sent += 1
        self.producer.poll(0)

    def write_report(self, name: str, report: Any) -> None:
        """Publish one report and wait for delivery."""
        if self.stats.start_time is None:
            self.stats.start_time = time.time()
        topic = self.topic_for(name)
        logger.info("Publishing report %s to %s", name, topic)
        self.send(topic, report, key=name)
        self.flush()

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Publish a batch of records to the entity's topic."""
        if self.stats.start_time is None:
            self.stats.start_time = time.time()
        topic = self.topic_for(entity_type)
        logger.info("Writing batch to %s: %d records", topic, len(records))

        for record in records:
            self.send(topic, record, key=self._get_key(entity_type, record))

        self.flush()
        logger.info(
            "Batch complete: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )

    def flush(self, timeout: float = 30.0) -> None:
        """Flush pending messages.

        Raises
        ------
        SinkError
            If messages are still queued when the timeout expires.
        """
        remaining = self.producer.flush(timeout)
        self.stats.end_time = time.time()
        if remaining:
            raise SinkError(f"{remaining} messages not delivered within {timeout}s")

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
