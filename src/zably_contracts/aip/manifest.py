from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BaseModel, Field, StringConstraints, ValidationError, model_validator

SemanticVersion = Annotated[
    str,
    StringConstraints(
        pattern=(
            r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
            r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
            r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
            r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
        )
    ),
]

AgentCategory = Literal[
    "productivity",
    "development",
    "data-analysis",
    "communication",
    "automation",
    "security",
    "monitoring",
    "integration",
    "ai-ml",
    "business",
    "utility",
    "entertainment",
]

AgentPermission = Literal[
    "filesystem:read",
    "filesystem:write",
    "network:http",
    "network:websocket",
    "system:exec",
    "system:env",
    "database:read",
    "database:write",
    "secrets:read",
    "secrets:write",
    "notifications:send",
    "calendar:read",
    "calendar:write",
    "email:send",
    "email:read",
]

ConfigValueType = Literal["string", "number", "boolean", "array", "object"]


class RuntimeRequirements(BaseModel):
    node_version: str | None = None
    python_version: str | None = None
    memory_mb: float | None = Field(default=None, ge=1)
    cpu_cores: float | None = Field(default=None, ge=0.1)
    disk_mb: float | None = Field(default=None, ge=1)
    gpu_required: bool = False
    network_access: bool = True

    os: list[Literal["linux", "darwin", "win32"]] | None = None
    arch: list[Literal["x64", "arm64", "arm"]] | None = None


class AgentConfigSchema(BaseModel):
    """One node of an agent's configuration schema.

    Arrays describe their element shape in ``items`` and objects their fields
    in ``properties``; both nest further ``AgentConfigSchema`` nodes.
    """

    type: ConfigValueType
    required: bool = False
    default: Any = None
    description: str
    enum: list[Any] | None = None
    min: float | None = None
    max: float | None = None
    pattern: str | None = None
    items: AgentConfigSchema | None = None
    properties: dict[str, AgentConfigSchema] | None = None

    @model_validator(mode="after")
    def _children_match_type(self) -> AgentConfigSchema:
        if self.items is not None and self.type != "array":
            raise ValueError("items is only allowed on array nodes")
        if self.properties is not None and self.type != "object":
            raise ValueError("properties is only allowed on object nodes")
        return self

    def walk(self, path: str = "") -> list[tuple[str, AgentConfigSchema]]:
        """Flatten the tree into ``(dotted path, node)`` pairs, depth first."""
        nodes = [(path, self)]
        if self.items is not None:
            nodes.extend(self.items.walk(f"{path}[]"))
        for name, child in (self.properties or {}).items():
            nodes.extend(child.walk(f"{path}.{name}" if path else name))
        return nodes


class RateLimit(BaseModel):
    requests_per_minute: int = Field(ge=1)
    burst_limit: int | None = Field(default=None, ge=1)


class AgentEndpoint(BaseModel):
    path: str
    method: Literal["GET", "POST", "PUT", "DELETE", "PATCH"]
    description: str
    parameters: dict[str, AgentConfigSchema] | None = None
    response_schema: AgentConfigSchema | None = None
    auth_required: bool = True
    rate_limit: RateLimit | None = None


class AgentAuthor(BaseModel):
    name: str
    email: Annotated[str, StringConstraints(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")] | None = None
    url: AnyUrl | None = None
    organization: str | None = None


class AgentLicense(BaseModel):
    # SPDX identifier
    type: str
    url: AnyUrl | None = None
    file: str | None = None


class AgentRepository(BaseModel):
    type: Literal["git", "svn", "mercurial"]
    url: AnyUrl
    directory: str | None = None


class UsageTier(BaseModel):
    limit: float
    price_per_unit: float


class Pricing(BaseModel):
    model: Literal["free", "one-time", "subscription", "usage-based"]
    price: float | None = Field(default=None, ge=0)
    currency: Annotated[str, StringConstraints(min_length=3, max_length=3)] | None = None
    billing_period: Literal["monthly", "yearly"] | None = None
    usage_tiers: list[UsageTier] | None = None


class HealthCheck(BaseModel):
    endpoint: str
    interval_seconds: int = Field(default=60, ge=10)
    timeout_seconds: int = Field(default=10, ge=1)


class AIPManifest(BaseModel):
    manifest_version: Literal["1.1"]
    schema_version: SemanticVersion = "1.1.0"

    id: Annotated[str, StringConstraints(pattern=r"^[a-z0-9-]+$")]
    name: Annotated[str, StringConstraints(min_length=1, max_length=100)]
    version: SemanticVersion
    description: Annotated[str, StringConstraints(min_length=10, max_length=500)]

    category: AgentCategory
    tags: list[str] = Field(default_factory=list, max_length=10)

    author: AgentAuthor
    license: AgentLicense
    repository: AgentRepository | None = None

    runtime: RuntimeRequirements = Field(default_factory=RuntimeRequirements)
    permissions: list[AgentPermission] = Field(default_factory=list)

    main: str
    endpoints: list[AgentEndpoint] = Field(default_factory=list)
    config_schema: dict[str, AgentConfigSchema] = Field(default_factory=dict)

    dependencies: dict[str, str] = Field(default_factory=dict)
    peer_dependencies: dict[str, str] = Field(default_factory=dict)

    icon: str | None = None
    screenshots: list[str] = Field(default_factory=list, max_length=5)
    readme: str | None = None
    changelog: str | None = None

    pricing: Pricing | None = None

    install_script: str | None = None
    uninstall_script: str | None = None
    health_check: HealthCheck | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None
    keywords: list[str] = Field(default_factory=list, max_length=20)
    homepage: AnyUrl | None = None
    bugs: AnyUrl | None = None


def format_validation_errors(exc: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    ]


def validate_aip_manifest(manifest: object) -> bool:
    try:
        AIPManifest.model_validate(manifest)
    except ValidationError:
        return False
    return True


def get_aip_manifest_errors(manifest: object) -> list[str]:
    try:
        AIPManifest.model_validate(manifest)
    except ValidationError as exc:
        return format_validation_errors(exc)
    return []
