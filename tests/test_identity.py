from typing import Any

import pytest
from pydantic import ValidationError

from zably_contracts.identity import (
    JWK,
    JWKS,
    AuthErrorCode,
    JWKSRotationConfig,
    Role,
    S2SAuthRequest,
    S2SJWTPayload,
    Scope,
    ServiceIdentity,
    ZablyJWTPayload,
    has_all_scopes,
    has_any_role,
    has_any_scope,
    has_role,
    has_scope,
    is_token_expired,
    is_token_not_yet_valid,
    validate_jwt_payload,
    validate_s2s_jwt_payload,
)

NOW = 1_800_000_000


def _user_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "iss": "https://auth.zably.dev",
        "sub": "user123",
        "aud": "zably-platform",
        "exp": NOW + 3600,
        "iat": NOW,
        "tenant_id": "tenant123",
        "tenant_kind": "organization",
        "roles": ["admin", "member"],
        "scopes": ["agents:read", "agents:write"],
        "env": "dev",
    }
    payload.update(overrides)
    return payload


def _s2s_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "iss": "https://auth.zably.dev",
        "sub": "svc-marketplace",
        "aud": ["zably-os", "zably-billing"],
        "exp": NOW + 300,
        "iat": NOW,
        "service_name": "marketplace",
        "service_version": "2.4.0",
        "client_id": "marketplace-client",
        "grant_type": "client_credentials",
        "scopes": ["agents:install"],
        "env": "prod",
    }
    payload.update(overrides)
    return payload


def test_validate_jwt_payload_accepts_valid_payload() -> None:
    assert validate_jwt_payload(_user_payload(), now=NOW) is True


def test_validate_jwt_payload_rejects_expired() -> None:
    assert validate_jwt_payload(_user_payload(exp=NOW), now=NOW) is False


def test_validate_jwt_payload_rejects_not_yet_valid() -> None:
    assert validate_jwt_payload(_user_payload(nbf=NOW + 10), now=NOW) is False


def test_validate_jwt_payload_rejects_unknown_scope() -> None:
    assert validate_jwt_payload(_user_payload(scopes=["agents:fly"]), now=NOW) is False


def test_validate_jwt_payload_uses_wall_clock_by_default() -> None:
    assert validate_jwt_payload(_user_payload(exp=1, iat=0)) is False


def test_scope_helpers() -> None:
    payload = ZablyJWTPayload.model_validate(_user_payload())

    assert has_scope(payload, Scope.AGENTS_READ) is True
    assert has_scope(payload, Scope.SYSTEM_ADMIN) is False
    assert has_any_scope(payload, [Scope.SYSTEM_ADMIN, Scope.AGENTS_WRITE]) is True
    assert has_any_scope(payload, []) is False
    assert has_all_scopes(payload, [Scope.AGENTS_READ, Scope.AGENTS_WRITE]) is True
    assert has_all_scopes(payload, [Scope.AGENTS_READ, Scope.DATA_DELETE]) is False


def test_role_helpers() -> None:
    payload = ZablyJWTPayload.model_validate(_user_payload())

    assert has_role(payload, Role.ADMIN) is True
    assert has_role(payload, Role.OWNER) is False
    assert has_any_role(payload, [Role.OWNER, Role.MEMBER]) is True


def test_timing_helpers() -> None:
    payload = ZablyJWTPayload.model_validate(_user_payload(nbf=NOW + 5))

    assert is_token_expired(payload, now=NOW + 3600) is True
    assert is_token_expired(payload, now=NOW + 3599) is False
    assert is_token_not_yet_valid(payload, now=NOW) is True
    assert is_token_not_yet_valid(payload, now=NOW + 5) is False


def test_s2s_payload() -> None:
    assert validate_s2s_jwt_payload(_s2s_payload(), now=NOW) is True
    assert validate_s2s_jwt_payload(_s2s_payload(grant_type="password"), now=NOW) is False

    payload = S2SJWTPayload.model_validate(_s2s_payload())
    assert has_scope(payload, Scope.AGENTS_INSTALL) is True


def test_auth_error_codes() -> None:
    assert AuthErrorCode.INVALID_TOKEN == "INVALID_TOKEN"
    assert AuthErrorCode.EXPIRED_TOKEN == "EXPIRED_TOKEN"


def test_jwk_thumbprint_alias() -> None:
    jwk = JWK.model_validate(
        {"kty": "EC", "kid": "k1", "crv": "P-256", "x": "x", "y": "y", "x5t#S256": "thumb"}
    )

    assert jwk.x5t_s256 == "thumb"
    assert jwk.model_dump(by_alias=True, exclude_none=True)["x5t#S256"] == "thumb"


def test_jwks_rejects_unknown_key_type() -> None:
    with pytest.raises(ValidationError):
        JWKS.model_validate({"keys": [{"kty": "OKP", "kid": "k1"}]})


def test_rotation_interval_bounds() -> None:
    JWKSRotationConfig(rotation_interval_hours=24, overlap_period_hours=2)

    with pytest.raises(ValidationError):
        JWKSRotationConfig(rotation_interval_hours=8761, overlap_period_hours=2)
    with pytest.raises(ValidationError):
        JWKSRotationConfig(rotation_interval_hours=0.5, overlap_period_hours=2)


def test_s2s_auth_request_scopes() -> None:
    request = S2SAuthRequest.model_validate(
        {
            "grant_type": "client_credentials",
            "client_id": "marketplace",
            "client_assertion_type": "urn:ietf:params:oauth:client-assertion-type:jwt-bearer",
            "client_assertion": "a.b.c",
            "scope": "agents:install usage:write",
        }
    )

    assert request.scopes == ["agents:install", "usage:write"]


def test_service_identity_defaults() -> None:
    identity = ServiceIdentity.model_validate(
        {
            "service_name": "os",
            "service_version": "1.0.0",
            "environment": "staging",
            "endpoints": ["https://os.staging.zably.dev"],
        }
    )

    assert identity.health_check_path == "/health"
    assert identity.metrics_path == "/metrics"
    assert identity.mtls is None
