from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Any, Literal
from uuid import uuid4

from pydantic import AnyUrl, BaseModel, Field, TypeAdapter, ValidationError

from zably_contracts.aip.manifest import format_validation_errors


class ZablyEventType(StrEnum):
    AGENT_RUN_STARTED = "zably.run.started"
    AGENT_RUN_COMPLETED = "zably.run.completed"
    AGENT_RUN_PROGRESS = "zably.run.progress"

    MODEL_CALL = "zably.model.call"

    AGENT_INSTALL_REQUESTED = "zably.install.requested"
    AGENT_INSTALL_STARTED = "zably.install.started"
    AGENT_INSTALL_COMPLETED = "zably.install.completed"
    AGENT_UNINSTALL_REQUESTED = "zably.install.uninstall_requested"


class CloudEventAttributes(BaseModel):
    specversion: Literal["1.0"]
    type: str
    source: AnyUrl
    id: str
    time: datetime | None = None
    datacontenttype: str | None = None
    dataschema: AnyUrl | None = None
    subject: str | None = None


class ZablyCloudEventExtensions(BaseModel):
    tenantid: str | None = None
    tenantkind: Literal["individual", "organization", "enterprise", "system"] | None = None

    environment: Literal["dev", "staging", "prod"] | None = None
    region: str | None = None
    cluster: str | None = None

    traceid: str | None = None
    spanid: str | None = None

    userid: str | None = None
    sessionid: str | None = None


class BaseCloudEvent(CloudEventAttributes, ZablyCloudEventExtensions):
    data: Any = None


class AgentRunStartedData(BaseModel):
    agent_id: str
    agent_version: str
    run_id: str
    config: dict[str, Any]
    triggered_by: Literal["user", "schedule", "webhook", "event"]
    trigger_context: dict[str, Any] | None = None


class RunError(BaseModel):
    code: str
    message: str
    stack: str | None = None


class RunResourceUsage(BaseModel):
    cpu_time_ms: float | None = None
    memory_peak_mb: float | None = None
    network_bytes: int | None = None
    api_calls: int | None = None


class AgentRunCompletedData(BaseModel):
    agent_id: str
    agent_version: str
    run_id: str
    status: Literal["success", "error", "timeout", "cancelled"]
    duration_ms: float
    result: Any = None
    error: RunError | None = None
    usage: RunResourceUsage | None = None


class AgentRunProgressData(BaseModel):
    agent_id: str
    run_id: str
    progress_percent: float = Field(ge=0, le=100)
    current_step: str
    total_steps: int | None = None
    message: str | None = None


class ModelCallData(BaseModel):
    agent_id: str
    run_id: str
    model_provider: str
    model_name: str
    call_type: Literal["completion", "chat", "embedding", "image", "audio"]
    input_tokens: int | None = None
    output_tokens: int | None = None
    cost_usd: float | None = None
    duration_ms: float
    status: Literal["success", "error", "rate_limited"]
    error: str | None = None


class AgentInstallRequestedData(BaseModel):
    agent_id: str
    agent_version: str
    requested_by: str
    install_source: Literal["marketplace", "direct", "import"]
    config: dict[str, Any] | None = None


class AgentInstallStartedData(BaseModel):
    agent_id: str
    agent_version: str
    install_id: str
    tenant_id: str


class AgentInstallCompletedData(BaseModel):
    agent_id: str
    agent_version: str
    install_id: str
    tenant_id: str
    status: Literal["success", "failed"]
    duration_ms: float
    error: str | None = None


class AgentUninstallRequestedData(BaseModel):
    agent_id: str
    tenant_id: str
    requested_by: str
    reason: str | None = None


class AgentRunStartedEvent(BaseCloudEvent):
    type: Literal["zably.run.started"]
    data: AgentRunStartedData


class AgentRunCompletedEvent(BaseCloudEvent):
    type: Literal["zably.run.completed"]
    data: AgentRunCompletedData


class AgentRunProgressEvent(BaseCloudEvent):
    type: Literal["zably.run.progress"]
    data: AgentRunProgressData


class ModelCallEvent(BaseCloudEvent):
    type: Literal["zably.model.call"]
    data: ModelCallData


class AgentInstallRequestedEvent(BaseCloudEvent):
    type: Literal["zably.install.requested"]
    data: AgentInstallRequestedData


class AgentInstallStartedEvent(BaseCloudEvent):
    type: Literal["zably.install.started"]
    data: AgentInstallStartedData


class AgentInstallCompletedEvent(BaseCloudEvent):
    type: Literal["zably.install.completed"]
    data: AgentInstallCompletedData


class AgentUninstallRequestedEvent(BaseCloudEvent):
    type: Literal["zably.install.uninstall_requested"]
    data: AgentUninstallRequestedData


ZablyCloudEvent = Annotated[
    AgentRunStartedEvent
    | AgentRunCompletedEvent
    | AgentRunProgressEvent
    | ModelCallEvent
    | AgentInstallRequestedEvent
    | AgentInstallStartedEvent
    | AgentInstallCompletedEvent
    | AgentUninstallRequestedEvent,
    Field(discriminator="type"),
]

_cloud_event_adapter: TypeAdapter[ZablyCloudEvent] = TypeAdapter(ZablyCloudEvent)


def create_cloud_event(
    event_type: ZablyEventType | str,
    source: str,
    data: BaseModel | dict[str, Any],
    **extensions: Any,
) -> ZablyCloudEvent:
    """Build and validate a CloudEvent with a fresh id and the current time."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", exclude_none=True)
    return _cloud_event_adapter.validate_python(
        {
            "specversion": "1.0",
            "type": str(event_type),
            "source": source,
            "id": str(uuid4()),
            "time": datetime.now(tz=UTC),
            "data": data,
            **extensions,
        }
    )


def validate_cloud_event(event: object) -> bool:
    try:
        _cloud_event_adapter.validate_python(event)
    except ValidationError:
        return False
    return True


def get_event_validation_errors(event: object) -> list[str]:
    try:
        _cloud_event_adapter.validate_python(event)
    except ValidationError as exc:
        return format_validation_errors(exc)
    return []
