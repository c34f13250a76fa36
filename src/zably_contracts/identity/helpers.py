from collections.abc import Iterable
from datetime import UTC, datetime

from pydantic import ValidationError

from zably_contracts.identity.claims import Role, S2SJWTPayload, Scope, ZablyJWTPayload

TokenPayload = ZablyJWTPayload | S2SJWTPayload


def _now() -> int:
    return int(datetime.now(tz=UTC).timestamp())


def has_scope(payload: TokenPayload, required_scope: Scope) -> bool:
    return required_scope in payload.scopes


def has_any_scope(payload: TokenPayload, required_scopes: Iterable[Scope]) -> bool:
    return any(scope in payload.scopes for scope in required_scopes)


def has_all_scopes(payload: TokenPayload, required_scopes: Iterable[Scope]) -> bool:
    return all(scope in payload.scopes for scope in required_scopes)


def has_role(payload: ZablyJWTPayload, required_role: Role) -> bool:
    return required_role in payload.roles


def has_any_role(payload: ZablyJWTPayload, required_roles: Iterable[Role]) -> bool:
    return any(role in payload.roles for role in required_roles)


def is_token_expired(payload: TokenPayload, now: int | None = None) -> bool:
    current = _now() if now is None else now
    return payload.exp <= current


def is_token_not_yet_valid(payload: TokenPayload, now: int | None = None) -> bool:
    if payload.nbf is None:
        return False
    current = _now() if now is None else now
    return payload.nbf > current


def validate_jwt_payload(payload: object, now: int | None = None) -> bool:
    """Schema-check a user token payload and confirm it is inside its validity window."""
    try:
        parsed = ZablyJWTPayload.model_validate(payload)
    except ValidationError:
        return False
    return not is_token_expired(parsed, now) and not is_token_not_yet_valid(parsed, now)


def validate_s2s_jwt_payload(payload: object, now: int | None = None) -> bool:
    try:
        parsed = S2SJWTPayload.model_validate(payload)
    except ValidationError:
        return False
    return not is_token_expired(parsed, now) and not is_token_not_yet_valid(parsed, now)
