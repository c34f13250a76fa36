import logging
from collections.abc import Mapping
from time import monotonic
from typing import Any, Protocol

import httpx
import jwt
from pydantic import ValidationError

from zably_contracts.core.config import settings
from zably_contracts.identity.jwks import JWK
from zably_contracts.install_ticket.schema import MarketplaceEntry

logger = logging.getLogger("zably.install_ticket.keys")


class KeyResolver(Protocol):
    def resolve_key(self, entry: MarketplaceEntry, kid: str) -> Any | None:
        """Return verification key material for ``kid`` or None when unknown."""
        ...


class StaticKeyResolver:
    """Resolves keys from an in-memory ``(issuer, kid) -> key`` mapping."""

    def __init__(self, keys: Mapping[tuple[str, str], Any]) -> None:
        self._keys = dict(keys)

    def resolve_key(self, entry: MarketplaceEntry, kid: str) -> Any | None:
        return self._keys.get((entry.jwks_discovery.issuer, kid))


class JwksKeyResolver:
    """Resolves keys from the marketplace JWKS endpoint named in its trust entry.

    Key sets are cached per ``jwks_uri``. A ``kid`` missing from a cached set
    triggers one refetch so freshly rotated keys are picked up.
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        cache_ttl_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = timeout if timeout is not None else settings.jwks_fetch_timeout_seconds
        self._cache_ttl = (
            cache_ttl_seconds if cache_ttl_seconds is not None else settings.jwks_cache_ttl_seconds
        )
        self._transport = transport
        self._cache: dict[str, tuple[float, jwt.PyJWKSet]] = {}

    def resolve_key(self, entry: MarketplaceEntry, kid: str) -> Any | None:
        jwks_uri = str(entry.jwks_discovery.jwks_uri)

        cached = self._cache.get(jwks_uri)
        if cached is not None and monotonic() - cached[0] < self._cache_ttl:
            key = _find_key(cached[1], kid)
            if key is not None:
                return key

        key_set = self._fetch(jwks_uri)
        if key_set is None:
            return None
        self._cache[jwks_uri] = (monotonic(), key_set)
        return _find_key(key_set, kid)

    def invalidate(self, jwks_uri: str | None = None) -> None:
        if jwks_uri is None:
            self._cache.clear()
        else:
            self._cache.pop(jwks_uri, None)

    def _fetch(self, jwks_uri: str) -> jwt.PyJWKSet | None:
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(jwks_uri, headers={"Accept": "application/json"})
                response.raise_for_status()
                document = response.json()
            if not isinstance(document, dict):
                raise ValueError("JWKS document must be a JSON object")
            usable = _signing_keys(jwks_uri, document.get("keys"))
            return jwt.PyJWKSet.from_dict({"keys": usable})
        except (httpx.HTTPError, ValueError, jwt.PyJWTError):
            logger.warning(
                "jwks_fetch_failed",
                extra={"event_name": "jwks_fetch_failed", "jwks_uri": jwks_uri},
                exc_info=True,
            )
            return None


def _find_key(key_set: jwt.PyJWKSet, kid: str) -> Any | None:
    for jwk in key_set.keys:
        if jwk.key_id == kid:
            return jwk.key
    return None


def _signing_keys(jwks_uri: str, keys: object) -> list[dict[str, Any]]:
    """Keep the entries usable for ticket signatures, skipping the rest one by one."""
    if not isinstance(keys, list):
        raise ValueError("JWKS document must carry a keys list")

    usable: list[dict[str, Any]] = []
    for raw in keys:
        try:
            jwk = JWK.model_validate(raw)
        except ValidationError:
            logger.info(
                "jwks_key_skipped",
                extra={
                    "event_name": "jwks_key_skipped",
                    "jwks_uri": jwks_uri,
                    "kid": raw.get("kid") if isinstance(raw, dict) else None,
                },
            )
            continue
        if jwk.use == "enc" or jwk.kty == "oct":
            continue
        usable.append(raw)

    if not usable:
        raise ValueError("JWKS document has no usable signing keys")
    return usable
