"""Configuration management for buildledger."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class ApiConfig:
    """REST backend client configuration."""

    base_url: str = "http://localhost:3001"
    token: str | None = None
    timeout_seconds: float = 15.0
    retry_max_attempts: int = 3
    retry_base_seconds: float = 0.5
    retry_max_seconds: float = 5.0


@dataclass
class KafkaConfig:
    """Kafka producer configuration for the audit stream."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    audit_topic: str = "buildledger.audit"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class DemoConfig:
    """Configuration for demo data generation."""

    num_projects: int = 5
    transactions_per_project: int = 30
    paid_rate: float = 0.6
    rejected_rate: float = 0.05
    locale: str = "vi_VN"


@dataclass
class BuildLedgerConfig:
    """Main configuration for buildledger."""

    api: ApiConfig = field(default_factory=ApiConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    demo: DemoConfig = field(default_factory=DemoConfig)
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "BuildLedgerConfig":
        """Create config from environment variables."""
        import os

        api = ApiConfig(
            base_url=os.getenv("BUILDLEDGER_API_URL", "http://localhost:3001"),
            token=os.getenv("BUILDLEDGER_API_TOKEN") or None,
            timeout_seconds=float(os.getenv("BUILDLEDGER_API_TIMEOUT", "15")),
            retry_max_attempts=int(os.getenv("BUILDLEDGER_API_RETRIES", "3")),
        )

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            audit_topic=os.getenv("AUDIT_TOPIC", "buildledger.audit"),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        return cls(
            api=api,
            kafka=kafka,
            output=output,
            seed=int(os.getenv("SEED")) if os.getenv("SEED") else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
