from zably_contracts.install_ticket.codes import InstallTicketErrorCode
from zably_contracts.install_ticket.errors import (
    InstallTicketError,
    InvalidClaimsError,
    SigningError,
)
from zably_contracts.install_ticket.issuer import (
    JwsTicketSigner,
    SigningMaterial,
    TicketIssuer,
    TicketSigner,
    system_clock,
)
from zably_contracts.install_ticket.keys import JwksKeyResolver, KeyResolver, StaticKeyResolver
from zably_contracts.install_ticket.registry import TrustRegistry
from zably_contracts.install_ticket.replay import TicketReplayGuard
from zably_contracts.install_ticket.schema import (
    ClientInfo,
    InstallOptions,
    InstallTicketClaims,
    InstallTicketHeader,
    InstallTicketInput,
    InstallTicketJWKSDiscovery,
    InstallTicketRequest,
    InstallTicketResponse,
    InstallTicketValidation,
    MarketplaceEntry,
    MarketplaceRegistry,
    ResourceLimits,
)
from zably_contracts.install_ticket.verifier import (
    TicketVerifier,
    parse_install_ticket,
    verify_install_ticket,
)

__all__ = [
    "InstallTicketErrorCode",
    "InstallTicketError",
    "InvalidClaimsError",
    "SigningError",
    "JwsTicketSigner",
    "SigningMaterial",
    "TicketIssuer",
    "TicketSigner",
    "system_clock",
    "JwksKeyResolver",
    "KeyResolver",
    "StaticKeyResolver",
    "TrustRegistry",
    "TicketReplayGuard",
    "ClientInfo",
    "InstallOptions",
    "InstallTicketClaims",
    "InstallTicketHeader",
    "InstallTicketInput",
    "InstallTicketJWKSDiscovery",
    "InstallTicketRequest",
    "InstallTicketResponse",
    "InstallTicketValidation",
    "MarketplaceEntry",
    "MarketplaceRegistry",
    "ResourceLimits",
    "TicketVerifier",
    "parse_install_ticket",
    "verify_install_ticket",
]
