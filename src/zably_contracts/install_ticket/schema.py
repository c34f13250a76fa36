from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, HttpUrl, model_validator

SigningAlgorithm = Literal["RS256", "ES256", "PS256"]
NetworkPolicy = Literal["restricted", "standard", "full"]
Environment = Literal["dev", "staging", "prod"]
# JWT NumericDate: seconds since the epoch, fractions allowed.
NumericDate = int | FiniteFloat

SUPPORTED_ALGORITHMS: tuple[str, ...] = ("RS256", "ES256", "PS256")


class ResourceLimits(BaseModel):
    memory_mb: float | None = None
    cpu_cores: float | None = None
    disk_mb: float | None = None


class InstallOptions(BaseModel):
    auto_start: bool = True
    resource_limits: ResourceLimits | None = None
    network_policy: NetworkPolicy = "standard"


class _InstallTicketBody(BaseModel):
    model_config = ConfigDict(frozen=True)

    iss: str
    sub: str
    aud: str
    nbf: NumericDate | None = None

    install_request_id: str
    agent_id: str
    agent_version: str
    listing_id: str
    tenant_id: str
    requested_by: str

    marketplace_signature: str
    pricing_verified: bool
    permissions_granted: list[str]

    config: dict[str, Any] | None = None
    install_options: InstallOptions | None = None

    environment: Environment
    region: str | None = None
    correlation_id: str | None = None


class InstallTicketInput(_InstallTicketBody):
    """Claims supplied by the marketplace; ``iat`` and ``jti`` are generated at issue time."""

    exp: NumericDate | None = None


class InstallTicketClaims(_InstallTicketBody):
    """The signed payload of an install ticket."""

    exp: NumericDate
    iat: NumericDate
    jti: str

    @model_validator(mode="after")
    def _expiry_after_issue(self) -> "InstallTicketClaims":
        if self.exp <= self.iat:
            raise ValueError("exp must be strictly greater than iat")
        return self


class InstallTicketHeader(BaseModel):
    model_config = ConfigDict(frozen=True)

    alg: SigningAlgorithm
    typ: Literal["JWT"] = "JWT"
    kid: str
    marketplace_id: str
    ticket_version: str = "1.0"


class InstallTicketJWKSDiscovery(BaseModel):
    model_config = ConfigDict(frozen=True)

    marketplace_id: str
    jwks_uri: HttpUrl
    # Matched verbatim against the ``iss`` claim, so it is kept as a plain string.
    issuer: str
    supported_algorithms: list[SigningAlgorithm]
    key_rotation_interval_hours: float = 24
    key_overlap_hours: float = 2
    ticket_validation_endpoint: HttpUrl | None = None
    revocation_endpoint: HttpUrl | None = None


class MarketplaceEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    base_url: HttpUrl
    jwks_discovery: InstallTicketJWKSDiscovery
    trusted: bool
    created_at: datetime
    last_verified: datetime


class MarketplaceRegistry(BaseModel):
    marketplaces: list[MarketplaceEntry]
    version: str
    updated_at: datetime
    next_update: datetime


class InstallTicketValidation(BaseModel):
    valid: bool
    payload: InstallTicketClaims | None = None
    errors: list[str] = Field(default_factory=list)

    signature_valid: bool
    not_expired: bool
    not_before_valid: bool
    audience_valid: bool
    issuer_valid: bool

    marketplace_verified: bool
    permissions_valid: bool
    pricing_verified: bool

    validated_at: datetime
    validator_service: str


class ClientInfo(BaseModel):
    user_agent: str | None = None
    ip_address: str | None = None
    client_id: str | None = None


class InstallTicketRequest(BaseModel):
    ticket: str
    client_info: ClientInfo | None = None
    request_id: str
    timestamp: datetime


class InstallTicketResponse(BaseModel):
    request_id: str
    status: Literal["accepted", "rejected", "pending"]

    install_id: str | None = None
    estimated_completion_time: datetime | None = None

    rejection_reason: str | None = None
    error_code: str | None = None

    response_id: str
    timestamp: datetime
    processing_time_ms: float

    @classmethod
    def rejected_from(
        cls,
        validation: InstallTicketValidation,
        *,
        request_id: str,
        response_id: str,
        processing_time_ms: float,
    ) -> "InstallTicketResponse":
        if validation.valid:
            raise ValueError("cannot build a rejection from a valid ticket")
        return cls(
            request_id=request_id,
            status="rejected",
            rejection_reason=", ".join(validation.errors),
            error_code=validation.errors[0] if validation.errors else None,
            response_id=response_id,
            timestamp=validation.validated_at,
            processing_time_ms=processing_time_ms,
        )
