import logging
from collections.abc import Iterable
from datetime import UTC, datetime

import jwt
from jwt.utils import base64url_decode

from zably_contracts.core.config import settings
from zably_contracts.install_ticket.codes import InstallTicketErrorCode
from zably_contracts.install_ticket.issuer import Clock, system_clock
from zably_contracts.install_ticket.keys import KeyResolver
from zably_contracts.install_ticket.registry import TrustRegistry
from zably_contracts.install_ticket.schema import (
    InstallTicketClaims,
    InstallTicketHeader,
    InstallTicketValidation,
    MarketplaceEntry,
)

logger = logging.getLogger("zably.install_ticket.verifier")


def parse_install_ticket(token: str) -> tuple[InstallTicketHeader, InstallTicketClaims] | None:
    """Decode header and claims without checking the signature."""
    if not isinstance(token, str) or token.count(".") != 2:
        return None
    header_segment, claims_segment, signature_segment = token.split(".")
    if not header_segment or not claims_segment or not signature_segment:
        return None

    try:
        header = InstallTicketHeader.model_validate(jwt.get_unverified_header(token))
        claims = InstallTicketClaims.model_validate_json(base64url_decode(claims_segment))
    except (jwt.PyJWTError, ValueError):
        logger.debug("install_ticket_parse_failed", exc_info=True)
        return None
    return header, claims


class TicketVerifier:
    """Checks an install ticket against a trust registry snapshot.

    Every check runs and is reported on its own so a rejected ticket carries
    the full list of reasons. Only a structurally malformed token
    short-circuits. ``verify`` never raises for string input.
    """

    def __init__(
        self,
        *,
        key_resolver: KeyResolver,
        validator_service: str | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self._key_resolver = key_resolver
        self._validator_service = validator_service or settings.validator_service
        self._clock = clock
        self._jws = jwt.PyJWS()

    def verify(
        self,
        token: str,
        registry: TrustRegistry,
        audience: str,
        now: float | None = None,
        *,
        required_permissions: Iterable[str] | None = None,
    ) -> InstallTicketValidation:
        if now is None:
            now = self._clock()
        validated_at = self._validated_at(now)

        parsed = parse_install_ticket(token)
        if parsed is None:
            result = InstallTicketValidation(
                valid=False,
                payload=None,
                errors=[InstallTicketErrorCode.MALFORMED_TICKET.value],
                signature_valid=False,
                not_expired=False,
                not_before_valid=False,
                audience_valid=False,
                issuer_valid=False,
                marketplace_verified=False,
                permissions_valid=False,
                pricing_verified=False,
                validated_at=validated_at,
                validator_service=self._validator_service,
            )
            self._log_outcome(result, header=None)
            return result

        header, claims = parsed

        entry = registry.resolve_trusted(claims.iss)
        issuer_valid = entry is not None
        marketplace_verified = entry is not None and header.marketplace_id == entry.id

        signature_valid = entry is not None and self._signature_valid(token, header, entry)

        not_expired = claims.exp > now
        not_before_valid = claims.nbf is None or claims.nbf <= now

        audience_valid = claims.aud == audience

        pricing_verified = claims.pricing_verified
        permissions_valid = required_permissions is None or set(required_permissions).issubset(
            claims.permissions_granted
        )

        errors: list[str] = []
        if not marketplace_verified:
            errors.append(InstallTicketErrorCode.MARKETPLACE_NOT_TRUSTED.value)
        if not issuer_valid:
            errors.append(InstallTicketErrorCode.INVALID_ISSUER.value)
        if not signature_valid:
            errors.append(InstallTicketErrorCode.INVALID_SIGNATURE.value)
        # A ticket outside its validity window is reported once, whichever bound failed.
        if not not_expired or not not_before_valid:
            errors.append(InstallTicketErrorCode.EXPIRED_TICKET.value)
        if not audience_valid:
            errors.append(InstallTicketErrorCode.INVALID_AUDIENCE.value)
        if not pricing_verified:
            errors.append(InstallTicketErrorCode.PRICING_NOT_VERIFIED.value)
        if not permissions_valid:
            errors.append(InstallTicketErrorCode.INSUFFICIENT_PERMISSIONS.value)

        result = InstallTicketValidation(
            valid=all(
                (
                    signature_valid,
                    not_expired,
                    not_before_valid,
                    audience_valid,
                    issuer_valid,
                    marketplace_verified,
                    permissions_valid,
                    pricing_verified,
                )
            ),
            payload=claims,
            errors=errors,
            signature_valid=signature_valid,
            not_expired=not_expired,
            not_before_valid=not_before_valid,
            audience_valid=audience_valid,
            issuer_valid=issuer_valid,
            marketplace_verified=marketplace_verified,
            permissions_valid=permissions_valid,
            pricing_verified=pricing_verified,
            validated_at=validated_at,
            validator_service=self._validator_service,
        )
        self._log_outcome(result, header=header)
        return result

    def _validated_at(self, now: float) -> datetime:
        try:
            return datetime.fromtimestamp(now, tz=UTC)
        except (OverflowError, OSError, ValueError):
            # Checks still run against the supplied instant; only the stamp falls back.
            logger.warning(
                "install_ticket_now_out_of_range",
                extra={"event_name": "install_ticket_now_out_of_range", "now": repr(now)},
            )
            return datetime.fromtimestamp(self._clock(), tz=UTC)

    def _signature_valid(
        self, token: str, header: InstallTicketHeader, entry: MarketplaceEntry
    ) -> bool:
        if header.alg not in entry.jwks_discovery.supported_algorithms:
            return False

        try:
            key = self._key_resolver.resolve_key(entry, header.kid)
        except Exception:
            logger.warning(
                "install_ticket_key_resolution_failed",
                extra={
                    "event_name": "install_ticket_key_resolution_failed",
                    "iss": entry.jwks_discovery.issuer,
                    "kid": header.kid,
                },
                exc_info=True,
            )
            return False
        if key is None:
            return False

        try:
            self._jws.decode_complete(token, key=key, algorithms=[header.alg])
            return True
        except jwt.InvalidSignatureError:
            # Normal tampered/foreign-key path.
            return False
        except jwt.PyJWTError:
            logger.warning(
                "install_ticket_signature_check_failed",
                extra={"event_name": "install_ticket_signature_check_failed", "kid": header.kid},
                exc_info=True,
            )
            return False
        except Exception:
            logger.warning(
                "unexpected_error_in_install_ticket_signature_check",
                extra={"event_name": "install_ticket_signature_check_failed", "kid": header.kid},
                exc_info=True,
            )
            return False

    def _log_outcome(
        self, result: InstallTicketValidation, *, header: InstallTicketHeader | None
    ) -> None:
        claims = result.payload
        logger.info(
            "install_ticket_verified",
            extra={
                "event_name": "install_ticket_verified",
                "jti": claims.jti if claims else None,
                "iss": claims.iss if claims else None,
                "aud": claims.aud if claims else None,
                "kid": header.kid if header else None,
                "marketplace_id": header.marketplace_id if header else None,
                "ticket_version": header.ticket_version if header else None,
                "valid": result.valid,
                "errors": result.errors,
                "validator_service": self._validator_service,
            },
        )


def verify_install_ticket(
    token: str,
    registry: TrustRegistry,
    audience: str,
    now: float | None = None,
    *,
    key_resolver: KeyResolver,
    required_permissions: Iterable[str] | None = None,
    validator_service: str | None = None,
) -> InstallTicketValidation:
    verifier = TicketVerifier(key_resolver=key_resolver, validator_service=validator_service)
    return verifier.verify(
        token, registry, audience, now, required_permissions=required_permissions
    )
