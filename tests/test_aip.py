from typing import Any

import pytest
from pydantic import ValidationError

from zably_contracts.aip import (
    AgentConfigSchema,
    AIPManifest,
    ZablyEventType,
    create_cloud_event,
    get_aip_manifest_errors,
    get_event_validation_errors,
    validate_aip_manifest,
    validate_cloud_event,
)
from zably_contracts.aip.cloudevents import AgentInstallStartedData, AgentRunProgressEvent


def _manifest(**overrides: Any) -> dict[str, Any]:
    manifest: dict[str, Any] = {
        "manifest_version": "1.1",
        "id": "inbox-triage",
        "name": "Inbox Triage",
        "version": "1.2.0-beta.1+build.5",
        "description": "Sorts incoming email into priority buckets.",
        "category": "productivity",
        "author": {"name": "Zably Labs", "email": "labs@zably.dev"},
        "license": {"type": "Apache-2.0"},
        "main": "dist/index.js",
        "permissions": ["email:read", "notifications:send"],
        "config_schema": {
            "rules": {
                "type": "array",
                "description": "Triage rules",
                "items": {
                    "type": "object",
                    "description": "One rule",
                    "properties": {
                        "match": {"type": "string", "description": "Sender pattern"},
                        "priority": {
                            "type": "number",
                            "description": "Priority",
                            "min": 0,
                            "max": 5,
                        },
                    },
                },
            }
        },
    }
    manifest.update(overrides)
    return manifest


def _run_progress_event(**overrides: Any) -> dict[str, Any]:
    event: dict[str, Any] = {
        "specversion": "1.0",
        "type": "zably.run.progress",
        "source": "https://os.zably.dev/runtime",
        "id": "evt-1",
        "data": {
            "agent_id": "agent123",
            "run_id": "run-1",
            "progress_percent": 40,
            "current_step": "fetching",
        },
    }
    event.update(overrides)
    return event


def test_manifest_valid() -> None:
    assert validate_aip_manifest(_manifest()) is True
    assert get_aip_manifest_errors(_manifest()) == []


def test_manifest_defaults() -> None:
    manifest = AIPManifest.model_validate(_manifest())

    assert manifest.schema_version == "1.1.0"
    assert manifest.runtime.gpu_required is False
    assert manifest.runtime.network_access is True
    assert manifest.tags == []
    assert manifest.endpoints == []


def test_recursive_config_schema() -> None:
    manifest = AIPManifest.model_validate(_manifest())
    rules = manifest.config_schema["rules"]

    assert rules.items is not None
    assert rules.items.properties is not None
    assert rules.items.properties["priority"].max == 5
    assert [path for path, _ in rules.walk("rules")] == [
        "rules",
        "rules[]",
        "rules[].match",
        "rules[].priority",
    ]


def test_config_schema_children_must_match_type() -> None:
    with pytest.raises(ValidationError, match="items is only allowed on array nodes"):
        AgentConfigSchema.model_validate(
            {
                "type": "string",
                "description": "bad",
                "items": {"type": "string", "description": "x"},
            }
        )
    with pytest.raises(ValidationError, match="properties is only allowed on object nodes"):
        AgentConfigSchema.model_validate(
            {"type": "array", "description": "bad", "properties": {}}
        )


@pytest.mark.parametrize(
    ("overrides", "path"),
    [
        ({"id": "Inbox_Triage"}, "id"),
        ({"version": "1.2"}, "version"),
        ({"description": "short"}, "description"),
        ({"category": "games"}, "category"),
        ({"permissions": ["email:delete"]}, "permissions.0"),
        ({"tags": [f"t{i}" for i in range(11)]}, "tags"),
        ({"author": {"name": "x", "email": "not-an-email"}}, "author.email"),
        ({"pricing": {"model": "free", "currency": "EURO"}}, "pricing.currency"),
    ],
)
def test_manifest_errors_name_the_field(overrides: dict[str, Any], path: str) -> None:
    manifest = _manifest(**overrides)

    assert validate_aip_manifest(manifest) is False
    errors = get_aip_manifest_errors(manifest)
    assert any(error.startswith(f"{path}:") for error in errors), errors


def test_manifest_nested_config_error_path() -> None:
    manifest = _manifest()
    manifest["config_schema"]["rules"]["items"]["properties"]["match"]["type"] = "regex"

    errors = get_aip_manifest_errors(manifest)

    assert any(
        error.startswith("config_schema.rules.items.properties.match.type:") for error in errors
    ), errors


def test_health_check_bounds() -> None:
    manifest = _manifest(health_check={"endpoint": "/health", "interval_seconds": 5})

    errors = get_aip_manifest_errors(manifest)

    assert any(error.startswith("health_check.interval_seconds:") for error in errors), errors


def test_cloud_event_valid() -> None:
    assert validate_cloud_event(_run_progress_event()) is True
    assert get_event_validation_errors(_run_progress_event()) == []


def test_cloud_event_rejects_progress_over_100() -> None:
    event = _run_progress_event()
    event["data"]["progress_percent"] = 120

    assert validate_cloud_event(event) is False
    assert any(
        "progress_percent" in error for error in get_event_validation_errors(event)
    )


def test_cloud_event_rejects_unknown_type() -> None:
    assert validate_cloud_event(_run_progress_event(type="zably.run.teleported")) is False


def test_cloud_event_rejects_wrong_specversion() -> None:
    assert validate_cloud_event(_run_progress_event(specversion="0.3")) is False


def test_create_cloud_event() -> None:
    event = create_cloud_event(
        ZablyEventType.AGENT_INSTALL_STARTED,
        "https://os.zably.dev/installer",
        AgentInstallStartedData(
            agent_id="agent123", agent_version="1.0.0", install_id="inst-1", tenant_id="t1"
        ),
        tenantid="t1",
        environment="prod",
    )

    assert event.type == "zably.install.started"
    assert event.specversion == "1.0"
    assert event.id
    assert event.time is not None
    assert event.tenantid == "t1"
    assert event.data.install_id == "inst-1"


def test_create_cloud_event_validates_data() -> None:
    with pytest.raises(ValidationError):
        create_cloud_event(
            "zably.run.progress", "https://os.zably.dev/runtime", {"agent_id": "a"}
        )


def test_create_cloud_event_from_dict() -> None:
    event = create_cloud_event(
        "zably.run.progress",
        "https://os.zably.dev/runtime",
        {"agent_id": "a", "run_id": "r", "progress_percent": 10, "current_step": "boot"},
    )

    assert isinstance(event, AgentRunProgressEvent)
