from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    validator_service: str = "zably-os"

    ticket_default_ttl_seconds: int = 300
    ticket_max_ttl_seconds: int = 300
    ticket_version: str = "1.0"
    ticket_require_pricing_for_permissions: bool = True

    jwks_fetch_timeout_seconds: float = 10.0
    jwks_cache_ttl_seconds: int = 3600

    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    replay_key_prefix: str = "install_ticket:jti"
    replay_redis_fail_open: bool = False

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="ZABLY_",
        env_file=(str(BASE_DIR / ".env"), ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def redis_url(self) -> str:
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


settings = Settings()
