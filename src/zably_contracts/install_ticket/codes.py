from enum import StrEnum


class InstallTicketErrorCode(StrEnum):
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    EXPIRED_TICKET = "EXPIRED_TICKET"
    INVALID_AUDIENCE = "INVALID_AUDIENCE"
    INVALID_ISSUER = "INVALID_ISSUER"
    MARKETPLACE_NOT_TRUSTED = "MARKETPLACE_NOT_TRUSTED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    PRICING_NOT_VERIFIED = "PRICING_NOT_VERIFIED"
    MALFORMED_TICKET = "MALFORMED_TICKET"

    # Raised by the install workflow around verification, never by the verifier.
    AGENT_NOT_FOUND = "AGENT_NOT_FOUND"
    TENANT_SUSPENDED = "TENANT_SUSPENDED"
    INSTALL_LIMIT_EXCEEDED = "INSTALL_LIMIT_EXCEEDED"
    JWKS_FETCH_FAILED = "JWKS_FETCH_FAILED"
