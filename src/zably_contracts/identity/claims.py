from datetime import datetime
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel


class ZablyEnvironment(StrEnum):
    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class TenantKind(StrEnum):
    INDIVIDUAL = "individual"
    ORGANIZATION = "organization"
    ENTERPRISE = "enterprise"
    SYSTEM = "system"


class Role(StrEnum):
    ADMIN = "admin"
    OWNER = "owner"
    MEMBER = "member"
    VIEWER = "viewer"
    AGENT = "agent"
    SYSTEM = "system"


class Scope(StrEnum):
    AGENTS_READ = "agents:read"
    AGENTS_WRITE = "agents:write"
    AGENTS_EXECUTE = "agents:execute"
    AGENTS_INSTALL = "agents:install"
    AGENTS_UNINSTALL = "agents:uninstall"

    MARKETPLACE_READ = "marketplace:read"
    MARKETPLACE_PUBLISH = "marketplace:publish"
    MARKETPLACE_MANAGE = "marketplace:manage"

    BILLING_READ = "billing:read"
    BILLING_WRITE = "billing:write"
    USAGE_READ = "usage:read"
    USAGE_WRITE = "usage:write"

    SYSTEM_ADMIN = "system:admin"
    SYSTEM_MONITOR = "system:monitor"
    SYSTEM_DEBUG = "system:debug"

    DATA_READ = "data:read"
    DATA_WRITE = "data:write"
    DATA_DELETE = "data:delete"


class StandardClaims(BaseModel):
    iss: str
    sub: str
    aud: str | list[str]
    exp: int
    nbf: int | None = None
    iat: int
    jti: str | None = None


class ZablyClaims(BaseModel):
    tenant_id: str
    tenant_kind: TenantKind
    roles: list[Role]
    scopes: list[Scope]
    env: ZablyEnvironment

    session_id: str | None = None
    device_id: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None


class ZablyJWTPayload(StandardClaims, ZablyClaims):
    """End-user access token payload."""


class S2SJWTPayload(StandardClaims):
    """Service-to-service token payload (client credentials grant)."""

    service_name: str
    service_version: str
    client_id: str
    grant_type: Literal["client_credentials"]
    scopes: list[Scope]
    env: ZablyEnvironment


class JWTHeader(BaseModel):
    alg: Literal["RS256", "ES256", "HS256"]
    typ: Literal["JWT"]
    kid: str


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None
    trace_id: str | None = None
    timestamp: datetime


class ErrorEnvelope(BaseModel):
    error: ErrorDetail
    request_id: str | None = None


class AuthErrorCode(StrEnum):
    INVALID_TOKEN = "INVALID_TOKEN"
    EXPIRED_TOKEN = "EXPIRED_TOKEN"
    INSUFFICIENT_SCOPE = "INSUFFICIENT_SCOPE"
    INVALID_TENANT = "INVALID_TENANT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    JWKS_ERROR = "JWKS_ERROR"
    S2S_AUTH_FAILED = "S2S_AUTH_FAILED"
