from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import AnyUrl, BaseModel, Field, TypeAdapter


class ZablyTopic(StrEnum):
    """Event bus topic names, dotted from the owning service down to the action."""

    MP_LISTING_PUBLISHED = "mp.listing.published"
    MP_LISTING_UPDATED = "mp.listing.updated"
    MP_LISTING_UNPUBLISHED = "mp.listing.unpublished"
    MP_INSTALL_REQUESTED = "mp.install.requested"
    MP_INSTALL_CANCELLED = "mp.install.cancelled"

    OS_INSTALL_CREATED = "os.install.created"
    OS_INSTALL_STARTED = "os.install.started"
    OS_INSTALL_COMPLETED = "os.install.completed"
    OS_INSTALL_FAILED = "os.install.failed"
    OS_RUN_STARTED = "os.run.started"
    OS_RUN_COMPLETED = "os.run.completed"
    OS_RUN_FAILED = "os.run.failed"
    OS_USAGE_ROLLUP = "os.usage.rollup"

    BILLING_USAGE_RECORDED = "billing.usage.recorded"
    BILLING_INVOICE_GENERATED = "billing.invoice.generated"
    BILLING_PAYMENT_PROCESSED = "billing.payment.processed"

    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_DELETED = "user.deleted"

    TENANT_CREATED = "tenant.created"
    TENANT_UPDATED = "tenant.updated"
    TENANT_SUSPENDED = "tenant.suspended"


PricingModel = Literal["free", "one-time", "subscription", "usage-based"]
CompressionType = Literal["none", "gzip", "snappy", "lz4", "zstd"]


class BaseEventMessage(BaseModel):
    event_id: UUID
    event_type: str
    timestamp: datetime
    source_service: str
    correlation_id: str | None = None
    tenant_id: str | None = None
    user_id: str | None = None
    version: str = "1.0"


class ListingPublishedData(BaseModel):
    listing_id: str
    agent_id: str
    agent_version: str
    publisher_id: str
    category: str
    pricing_model: PricingModel
    published_at: datetime


class ListingPublishedMessage(BaseEventMessage):
    event_type: Literal["mp.listing.published"]
    data: ListingPublishedData


class ListingUpdatedData(BaseModel):
    listing_id: str
    agent_id: str
    agent_version: str
    changes: list[str]
    updated_at: datetime


class ListingUpdatedMessage(BaseEventMessage):
    event_type: Literal["mp.listing.updated"]
    data: ListingUpdatedData


class InstallRequestedData(BaseModel):
    install_request_id: str
    listing_id: str
    agent_id: str
    agent_version: str
    tenant_id: str
    requested_by: str
    config: dict[str, Any] | None = None
    # Compact JWS produced by the install ticket issuer.
    install_ticket: str


class InstallRequestedMessage(BaseEventMessage):
    event_type: Literal["mp.install.requested"]
    data: InstallRequestedData


class InstallCreatedData(BaseModel):
    install_id: str
    install_request_id: str
    agent_id: str
    agent_version: str
    tenant_id: str
    status: Literal["created"]
    created_at: datetime


class InstallCreatedMessage(BaseEventMessage):
    event_type: Literal["os.install.created"]
    data: InstallCreatedData


class InstallCompletedData(BaseModel):
    install_id: str
    agent_id: str
    agent_version: str
    tenant_id: str
    status: Literal["success", "failed"]
    duration_ms: float
    error: str | None = None
    completed_at: datetime


class InstallCompletedMessage(BaseEventMessage):
    event_type: Literal["os.install.completed"]
    data: InstallCompletedData


class RunUsage(BaseModel):
    cpu_time_ms: float
    memory_peak_mb: float
    api_calls: int
    tokens_used: int | None = None


class RunCompletedData(BaseModel):
    run_id: str
    agent_id: str
    tenant_id: str
    status: Literal["success", "error", "timeout", "cancelled"]
    duration_ms: float
    usage: RunUsage
    completed_at: datetime


class RunCompletedMessage(BaseEventMessage):
    event_type: Literal["os.run.completed"]
    data: RunCompletedData


class UsageSummary(BaseModel):
    total_runs: int
    total_duration_ms: float
    total_cpu_time_ms: float
    total_api_calls: int
    total_tokens_used: int | None = None
    estimated_cost_usd: float | None = None


class UsageRollupData(BaseModel):
    tenant_id: str
    agent_id: str
    period_start: datetime
    period_end: datetime
    usage_summary: UsageSummary


class UsageRollupMessage(BaseEventMessage):
    event_type: Literal["os.usage.rollup"]
    data: UsageRollupData


ZablyEventMessage = Annotated[
    ListingPublishedMessage
    | ListingUpdatedMessage
    | InstallRequestedMessage
    | InstallCreatedMessage
    | InstallCompletedMessage
    | RunCompletedMessage
    | UsageRollupMessage,
    Field(discriminator="event_type"),
]

_event_message_adapter: TypeAdapter[ZablyEventMessage] = TypeAdapter(ZablyEventMessage)


def parse_event_message(message: object) -> ZablyEventMessage:
    """Validate a raw bus message into the model for its ``event_type``.

    Raises ``pydantic.ValidationError`` for unknown event types or bad payloads.
    """
    if isinstance(message, (str, bytes)):
        return _event_message_adapter.validate_json(message)
    return _event_message_adapter.validate_python(message)


class TopicConfig(BaseModel):
    name: str
    partitions: int = Field(default=1, ge=1)
    replication_factor: int = Field(default=3, ge=1)
    retention_ms: int = Field(default=7 * 24 * 60 * 60 * 1000, ge=1)
    cleanup_policy: Literal["delete", "compact"] = "delete"

    max_message_bytes: int = 1048576
    compression_type: CompressionType = "snappy"

    consumer_groups: list[str] = Field(default_factory=list)
    dead_letter_topic: str | None = None


class ProducerConfig(BaseModel):
    acks: Literal["0", "1", "all"] = "all"
    retries: int = 3
    batch_size: int = 16384
    linger_ms: int = 5
    compression_type: CompressionType = "snappy"


class ConsumerConfig(BaseModel):
    group_id: str
    auto_offset_reset: Literal["earliest", "latest"] = "latest"
    enable_auto_commit: bool = True
    auto_commit_interval_ms: int = 5000
    max_poll_records: int = 500


class EventBusConfig(BaseModel):
    broker_urls: list[AnyUrl]
    security_protocol: Literal["PLAINTEXT", "SSL", "SASL_PLAINTEXT", "SASL_SSL"] = "SASL_SSL"
    sasl_mechanism: Literal["PLAIN", "SCRAM-SHA-256", "SCRAM-SHA-512"] | None = None
    ssl_ca_location: str | None = None
    ssl_certificate_location: str | None = None
    ssl_key_location: str | None = None

    producer_config: ProducerConfig = Field(default_factory=ProducerConfig)
    consumer_config: ConsumerConfig
