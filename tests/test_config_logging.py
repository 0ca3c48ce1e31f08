"""Tests for config and logging."""

import json
import logging
import os
from pathlib import Path
from unittest.mock import patch

from rental_finance.config import (
    EngineConfig,
    KafkaConfig,
    OutputConfig,
    PostgresConfig,
    ReportConfig,
)
from rental_finance.logging import JsonFormatter, get_logger, setup_logging


class TestKafkaConfig:
    """Tests for KafkaConfig."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = KafkaConfig()

        assert config.bootstrap_servers == "localhost:9092"
        assert config.acks == "all"
        assert config.linger_ms == 5
        assert config.compression == "snappy"
        assert config.retries == 3
        assert config.topic_prefix == "rental.reports"

    def test_to_dict(self) -> None:
        """Test conversion to confluent-kafka config dict."""
        config = KafkaConfig(bootstrap_servers="kafka:9092", acks="1")

        assert config.to_dict() == {
            "bootstrap.servers": "kafka:9092",
            "acks": "1",
            "linger.ms": 5,
            "compression.type": "snappy",
            "retries": 3,
        }


class TestPostgresConfig:
    """Tests for PostgresConfig."""

    def test_connection_string(self) -> None:
        config = PostgresConfig(host="db", port=5433, database="rental", user="u", password="p")
        assert config.connection_string == "postgresql://u:p@db:5433/rental"


class TestReportConfig:
    """Tests for ReportConfig."""

    def test_defaults(self) -> None:
        config = ReportConfig()

        assert config.page_size == 1000
        assert config.minimum_days_late == 1
        assert config.delinquency_sort == "days_late"
        assert config.profitability_rank == "profitability"


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_defaults(self) -> None:
        config = EngineConfig()

        assert isinstance(config.kafka, KafkaConfig)
        assert isinstance(config.postgres, PostgresConfig)
        assert isinstance(config.output, OutputConfig)
        assert config.output.json_output_dir == Path("output")
        assert config.seed is None
        assert config.log_level == "INFO"

    def test_from_env_defaults(self) -> None:
        """Unset variables fall back to defaults."""
        with patch.dict(os.environ, {}, clear=True):
            config = EngineConfig.from_env()

        assert config.postgres.database == "rental"
        assert config.report.page_size == 1000
        assert config.seed is None

    def test_from_env_overrides(self) -> None:
        env = {
            "KAFKA_BOOTSTRAP_SERVERS": "broker:29092",
            "KAFKA_TOPIC_PREFIX": "acme.reports",
            "POSTGRES_HOST": "pg",
            "POSTGRES_PORT": "15432",
            "OUTPUT_DIR": "/tmp/reports",
            "PRETTY_JSON": "true",
            "REPORT_PAGE_SIZE": "250",
            "REPORT_MIN_DAYS_LATE": "15",
            "REPORT_DELINQUENCY_SORT": "tenant",
            "REPORT_PROFITABILITY_RANK": "revenue",
            "SEED": "7",
            "LOG_LEVEL": "DEBUG",
        }
        with patch.dict(os.environ, env, clear=True):
            config = EngineConfig.from_env()

        assert config.kafka.bootstrap_servers == "broker:29092"
        assert config.kafka.topic_prefix == "acme.reports"
        assert config.postgres.host == "pg"
        assert config.postgres.port == 15432
        assert config.output.json_output_dir == Path("/tmp/reports")
        assert config.output.pretty_json is True
        assert config.report == ReportConfig(
            page_size=250,
            minimum_days_late=15,
            delinquency_sort="tenant",
            profitability_rank="revenue",
        )
        assert config.seed == 7
        assert config.log_level == "DEBUG"


class TestLogging:
    """Tests for logging setup."""

    def test_setup_logging_standard(self) -> None:
        setup_logging(level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)
        assert logging.getLogger("rental_finance").level == logging.DEBUG

    def test_setup_logging_json(self) -> None:
        setup_logging(level="INFO", format_type="json")

        root = logging.getLogger()
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_logging_invalid_level_defaults_to_info(self) -> None:
        setup_logging(level="NOPE")
        assert logging.getLogger().level == logging.INFO

    def test_external_loggers_quieted(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger("confluent_kafka").level == logging.WARNING
        assert logging.getLogger("psycopg").level == logging.WARNING
        assert logging.getLogger("faker").level == logging.WARNING

    def test_json_formatter_output(self) -> None:
        formatter = JsonFormatter()
        record = logging.LogRecord(
            name="rental_finance.engine",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Delinquency report: %d contracts",
            args=(2,),
            exc_info=None,
        )

        data = json.loads(formatter.format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "rental_finance.engine"
        assert data["message"] == "Delinquency report: 2 contracts"
        assert "timestamp" in data

    def test_json_formatter_extra(self) -> None:
        formatter = JsonFormatter()
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", (), None)
        record.extra = {"report": "summary"}

        data = json.loads(formatter.format(record))

        assert data["report"] == "summary"

    def test_json_formatter_exception(self) -> None:
        formatter = JsonFormatter()
        try:
            raise ValueError("boom")
        except ValueError:
            import sys

            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        data = json.loads(formatter.format(record))

        assert "ValueError: boom" in data["exception"]

    def test_get_logger(self) -> None:
        assert get_logger("rental_finance.test").name == "rental_finance.test"
