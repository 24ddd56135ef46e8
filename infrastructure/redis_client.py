"""Optional Redis connection for the session store.

REDIS_URI unset or unreachable → None, and the app keeps sessions in MongoDB.
"""

from typing import Optional
from urllib.parse import urlsplit

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from shared.logging import get_logger

log = get_logger(__name__)


def _display_host(redis_uri: str) -> str:
    """host:port of *redis_uri*, without credentials, for log lines."""
    parts = urlsplit(redis_uri)
    return parts.netloc.rsplit("@", 1)[-1] or redis_uri


async def create_redis_client(redis_uri: str) -> Optional[aioredis.Redis]:
    client: aioredis.Redis = aioredis.from_url(redis_uri, decode_responses=True)
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        log.warning(
            "redis_unavailable",
            host=_display_host(redis_uri),
            error=str(e),
            error_type=type(e).__name__,
        )
        await client.aclose()
        return None

    log.info("redis_connected", host=_display_host(redis_uri))
    return client
