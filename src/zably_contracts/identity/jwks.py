from datetime import datetime
from typing import Literal

from pydantic import AnyUrl, BaseModel, ConfigDict, Field


class JWK(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kty: Literal["RSA", "EC", "oct"]
    use: Literal["sig", "enc"] | None = None
    key_ops: list[Literal["sign", "verify", "encrypt", "decrypt"]] | None = None
    alg: Literal["RS256", "ES256", "PS256", "HS256"] | None = None
    kid: str

    n: str | None = None
    e: str | None = None

    crv: Literal["P-256", "P-384", "P-521"] | None = None
    x: str | None = None
    y: str | None = None

    k: str | None = None

    x5c: list[str] | None = None
    x5t: str | None = None
    x5t_s256: str | None = Field(default=None, alias="x5t#S256")


class JWKS(BaseModel):
    keys: list[JWK]


class JWKSRotationConfig(BaseModel):
    rotation_interval_hours: float = Field(ge=1, le=8760)
    overlap_period_hours: float = Field(ge=1)
    key_size: int = 2048
    algorithm: Literal["RS256", "ES256"] = "RS256"
    auto_rotate: bool = True


class JWKSEndpoints(BaseModel):
    jwks_uri: AnyUrl
    issuer: AnyUrl
    token_endpoint: AnyUrl | None = None
    revocation_endpoint: AnyUrl | None = None


class KeyMetadata(BaseModel):
    kid: str
    created_at: datetime
    expires_at: datetime
    algorithm: str
    status: Literal["active", "rotating", "deprecated", "revoked"]
    usage_count: int = 0
    last_used: datetime | None = None
