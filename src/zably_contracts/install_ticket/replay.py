import logging
import math

from redis.exceptions import RedisError

from zably_contracts.core.config import settings
from zably_contracts.core.redis import redis_client
from zably_contracts.install_ticket.schema import InstallTicketClaims

logger = logging.getLogger("zably.install_ticket.replay")


def _jti_key(jti: str) -> str:
    return f"{settings.replay_key_prefix}:{jti}"


class TicketReplayGuard:
    """Single-use store for ticket ids, kept until the ticket would expire anyway.

    Runs after a successful verification; the verifier itself stays free of
    shared state.
    """

    def consume(self, claims: InstallTicketClaims, *, now: float) -> bool:
        ttl_seconds = max(1, math.ceil(claims.exp - now))
        try:
            first_use = redis_client.set(_jti_key(claims.jti), "1", nx=True, ex=ttl_seconds)
        except RedisError:
            logger.warning(
                "redis_unavailable_replay_check",
                extra={"event_name": "redis_unavailable_replay_check", "jti": claims.jti},
                exc_info=True,
            )
            return settings.replay_redis_fail_open

        if not first_use:
            logger.warning(
                "install_ticket_replayed",
                extra={
                    "event_name": "install_ticket_replayed",
                    "jti": claims.jti,
                    "iss": claims.iss,
                },
            )
            return False
        return True

    def is_consumed(self, jti: str) -> bool:
        try:
            return bool(redis_client.exists(_jti_key(jti)))
        except RedisError:
            logger.warning(
                "redis_unavailable_replay_check",
                extra={"event_name": "redis_unavailable_replay_check", "jti": jti},
                exc_info=True,
            )
            return not settings.replay_redis_fail_open
