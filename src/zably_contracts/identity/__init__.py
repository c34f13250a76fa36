from zably_contracts.identity.claims import (
    AuthErrorCode,
    ErrorDetail,
    ErrorEnvelope,
    JWTHeader,
    Role,
    S2SJWTPayload,
    Scope,
    StandardClaims,
    TenantKind,
    ZablyClaims,
    ZablyEnvironment,
    ZablyJWTPayload,
)
from zably_contracts.identity.helpers import (
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
from zably_contracts.identity.jwks import JWK, JWKS, JWKSEndpoints, JWKSRotationConfig, KeyMetadata
from zably_contracts.identity.s2s import (
    JWSHeader,
    MTLSConfig,
    S2SAuthRequest,
    S2SAuthResponse,
    S2SRequestContext,
    ServiceIdentity,
    SPIFFEConfig,
)

__all__ = [
    "AuthErrorCode",
    "ErrorDetail",
    "ErrorEnvelope",
    "JWTHeader",
    "Role",
    "S2SJWTPayload",
    "Scope",
    "StandardClaims",
    "TenantKind",
    "ZablyClaims",
    "ZablyEnvironment",
    "ZablyJWTPayload",
    "has_all_scopes",
    "has_any_role",
    "has_any_scope",
    "has_role",
    "has_scope",
    "is_token_expired",
    "is_token_not_yet_valid",
    "validate_jwt_payload",
    "validate_s2s_jwt_payload",
    "JWK",
    "JWKS",
    "JWKSEndpoints",
    "JWKSRotationConfig",
    "KeyMetadata",
    "JWSHeader",
    "MTLSConfig",
    "S2SAuthRequest",
    "S2SAuthResponse",
    "S2SRequestContext",
    "ServiceIdentity",
    "SPIFFEConfig",
]
