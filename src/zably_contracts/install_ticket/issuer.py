import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any, Protocol
from uuid import uuid4

import jwt
from pydantic import BaseModel, ConfigDict, ValidationError

from zably_contracts.core.canonical import canonical_json_bytes
from zably_contracts.core.config import settings
from zably_contracts.install_ticket.errors import InvalidClaimsError, SigningError
from zably_contracts.install_ticket.schema import (
    InstallTicketClaims,
    InstallTicketHeader,
    InstallTicketInput,
    SigningAlgorithm,
)

logger = logging.getLogger("zably.install_ticket.issuer")

Clock = Callable[[], int]


def system_clock() -> int:
    return int(datetime.now(tz=UTC).timestamp())


class SigningMaterial(BaseModel):
    """Private key plus the identifiers published alongside it in the marketplace JWKS."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kid: str
    algorithm: SigningAlgorithm
    marketplace_id: str
    private_key: Any


class TicketSigner(Protocol):
    def sign(self, claims: Mapping[str, Any], key: SigningMaterial) -> str: ...


class JwsTicketSigner:
    """Signs the canonical JSON of a claim set as a compact JWS."""

    def __init__(self, *, ticket_version: str | None = None) -> None:
        self._ticket_version = ticket_version or settings.ticket_version
        self._jws = jwt.PyJWS()

    def sign(self, claims: Mapping[str, Any], key: SigningMaterial) -> str:
        header = InstallTicketHeader(
            alg=key.algorithm,
            kid=key.kid,
            marketplace_id=key.marketplace_id,
            ticket_version=self._ticket_version,
        )
        return self._jws.encode(
            canonical_json_bytes(claims),
            key.private_key,
            algorithm=header.alg,
            headers=header.model_dump(exclude={"alg"}),
        )


class TicketIssuer:
    def __init__(
        self,
        *,
        signer: TicketSigner | None = None,
        clock: Clock = system_clock,
        default_ttl_seconds: int | None = None,
        require_pricing_for_permissions: bool | None = None,
    ) -> None:
        self._signer = signer or JwsTicketSigner()
        self._clock = clock
        self._default_ttl = (
            default_ttl_seconds
            if default_ttl_seconds is not None
            else settings.ticket_default_ttl_seconds
        )
        self._require_pricing = (
            require_pricing_for_permissions
            if require_pricing_for_permissions is not None
            else settings.ticket_require_pricing_for_permissions
        )

    def build_claims(self, claims: InstallTicketInput | Mapping[str, Any]) -> InstallTicketClaims:
        if not isinstance(claims, InstallTicketInput):
            try:
                claims = InstallTicketInput.model_validate(claims)
            except ValidationError as exc:
                raise InvalidClaimsError(str(exc)) from exc

        iat = self._clock()
        exp = claims.exp if claims.exp is not None else iat + self._default_ttl

        if exp <= iat:
            raise InvalidClaimsError(f"exp ({exp}) must be greater than iat ({iat})")
        if claims.nbf is not None and claims.nbf > exp:
            raise InvalidClaimsError(f"nbf ({claims.nbf}) must not be after exp ({exp})")
        if self._require_pricing and claims.permissions_granted and not claims.pricing_verified:
            raise InvalidClaimsError("permissions cannot be granted without verified pricing")

        ttl_seconds = exp - iat
        if ttl_seconds > settings.ticket_max_ttl_seconds:
            logger.warning(
                "install_ticket_long_lived",
                extra={
                    "event_name": "install_ticket_long_lived",
                    "iss": claims.iss,
                    "ttl_seconds": ttl_seconds,
                },
            )

        return InstallTicketClaims(
            **claims.model_dump(exclude={"exp"}),
            exp=exp,
            iat=iat,
            jti=str(uuid4()),
        )

    def issue(
        self, claims: InstallTicketInput | Mapping[str, Any], signing_key: SigningMaterial
    ) -> str:
        ticket_claims = self.build_claims(claims)
        payload = ticket_claims.model_dump(mode="json", exclude_none=True)

        try:
            token = self._signer.sign(payload, signing_key)
        except SigningError:
            raise
        except Exception as exc:
            logger.error(
                "install_ticket_signing_failed",
                extra={
                    "event_name": "install_ticket_signing_failed",
                    "jti": ticket_claims.jti,
                    "kid": signing_key.kid,
                },
                exc_info=True,
            )
            raise SigningError(f"signer failed for kid {signing_key.kid!r}: {exc}") from exc

        logger.info(
            "install_ticket_issued",
            extra={
                "event_name": "install_ticket_issued",
                "jti": ticket_claims.jti,
                "iss": ticket_claims.iss,
                "aud": ticket_claims.aud,
                "kid": signing_key.kid,
                "marketplace_id": signing_key.marketplace_id,
                "ttl_seconds": ticket_claims.exp - ticket_claims.iat,
            },
        )
        return token
