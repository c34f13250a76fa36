from datetime import datetime
from typing import Any, Literal

from pydantic import AnyUrl, BaseModel

from zably_contracts.identity.claims import ZablyEnvironment


class MTLSConfig(BaseModel):
    enabled: bool = True
    client_cert_path: str
    client_key_path: str
    ca_cert_path: str
    verify_peer: bool = True
    verify_hostname: bool = True
    cipher_suites: list[str] | None = None
    min_tls_version: Literal["1.2", "1.3"] = "1.2"


class JWSHeader(BaseModel):
    alg: Literal["RS256", "ES256", "PS256"]
    typ: Literal["JWT"]
    kid: str
    crit: list[str] | None = None


class S2SAuthRequest(BaseModel):
    grant_type: Literal["client_credentials"]
    client_id: str
    client_assertion_type: Literal["urn:ietf:params:oauth:client-assertion-type:jwt-bearer"]
    client_assertion: str
    scope: str | None = None

    @property
    def scopes(self) -> list[str]:
        return self.scope.split() if self.scope else []


class S2SAuthResponse(BaseModel):
    access_token: str
    token_type: Literal["Bearer"]
    expires_in: int
    scope: str | None = None
    issued_token_type: Literal["urn:ietf:params:oauth:token-type:access_token"] | None = None


class SPIFFEConfig(BaseModel):
    enabled: bool = False
    spiffe_id: str | None = None
    trust_domain: str | None = None
    workload_api_socket: str | None = None
    svid_file_path: str | None = None
    key_file_path: str | None = None
    bundle_file_path: str | None = None
    refresh_interval_seconds: int = 300


class ServiceIdentity(BaseModel):
    service_name: str
    service_version: str
    environment: ZablyEnvironment
    namespace: str | None = None
    cluster: str | None = None

    mtls: MTLSConfig | None = None
    spiffe: SPIFFEConfig | None = None

    endpoints: list[AnyUrl]
    health_check_path: str = "/health"
    metrics_path: str = "/metrics"


class S2SRequestContext(BaseModel):
    source_service: str
    target_service: str
    request_id: str
    trace_id: str | None = None
    span_id: str | None = None
    timestamp: datetime

    client_cert_fingerprint: str | None = None
    spiffe_id: str | None = None
    jwt_claims: dict[str, Any] | None = None
