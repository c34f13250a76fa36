from zably_contracts.aip.cloudevents import (
    BaseCloudEvent,
    ZablyCloudEvent,
    ZablyEventType,
    create_cloud_event,
    get_event_validation_errors,
    validate_cloud_event,
)
from zably_contracts.aip.manifest import (
    AgentCategory,
    AgentConfigSchema,
    AgentPermission,
    AIPManifest,
    get_aip_manifest_errors,
    validate_aip_manifest,
)

__all__ = [
    "BaseCloudEvent",
    "ZablyCloudEvent",
    "ZablyEventType",
    "create_cloud_event",
    "get_event_validation_errors",
    "validate_cloud_event",
    "AgentCategory",
    "AgentConfigSchema",
    "AgentPermission",
    "AIPManifest",
    "get_aip_manifest_errors",
    "validate_aip_manifest",
]
