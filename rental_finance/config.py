"""Configuration management for rental-finance."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class KafkaConfig:
    """Kafka producer configuration for report export."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic_prefix: str = "rental.reports"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration for the record store."""

    host: str = "localhost"
    port: int = 5432
    database: str = "rental"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class ReportConfig:
    """Defaults applied when a report request leaves a parameter unset."""

    page_size: int = 1000
    minimum_days_late: int = 1
    delinquency_sort: str = "days_late"
    profitability_rank: str = "profitability"


@dataclass
class EngineConfig:
    """Main configuration for rental-finance."""

    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        import os

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            topic_prefix=os.getenv("KAFKA_TOPIC_PREFIX", "rental.reports"),
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "rental"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        report = ReportConfig(
            page_size=int(os.getenv("REPORT_PAGE_SIZE", "1000")),
            minimum_days_late=int(os.getenv("REPORT_MIN_DAYS_LATE", "1")),
            delinquency_sort=os.getenv("REPORT_DELINQUENCY_SORT", "days_late"),
            profitability_rank=os.getenv("REPORT_PROFITABILITY_RANK", "profitability"),
        )

        return cls(
            kafka=kafka,
            postgres=postgres,
            output=output,
            report=report,
            seed=int(os.getenv("SEED")) if os.getenv("SEED") else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
