from zably_contracts.install_ticket import (
    InstallTicketErrorCode,
    InstallTicketValidation,
    InvalidClaimsError,
    JwksKeyResolver,
    SigningError,
    SigningMaterial,
    StaticKeyResolver,
    TicketIssuer,
    TicketVerifier,
    TrustRegistry,
    verify_install_ticket,
)

__all__ = [
    "InstallTicketErrorCode",
    "InstallTicketValidation",
    "InvalidClaimsError",
    "JwksKeyResolver",
    "SigningError",
    "SigningMaterial",
    "StaticKeyResolver",
    "TicketIssuer",
    "TicketVerifier",
    "TrustRegistry",
    "verify_install_ticket",
]
