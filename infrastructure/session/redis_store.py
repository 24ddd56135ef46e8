"""Redis-backed SessionStore.

Stores SessionData as JSON (not pickle) under `session:<id>` with a TTL, so
expired sessions disappear without a sweeper. Backend errors propagate to
the caller; the auth service decides how they surface.
"""

import json
from dataclasses import asdict
from typing import Optional

import redis.asyncio as aioredis

from infrastructure.session.protocol import SessionData
from shared.generators import generate_session_id
from shared.logging import get_logger

log = get_logger(__name__)


class RedisSessionStore:
    def __init__(self, redis_client: aioredis.Redis, ttl_seconds: int = 86400) -> None:
        self._redis = redis_client
        self.ttl_seconds = ttl_seconds

    def _key(self, session_id: str) -> str:
        return f"session:{session_id}"

    async def create(self, data: SessionData) -> str:
        session_id = generate_session_id()
        await self._redis.setex(
            self._key(session_id), self.ttl_seconds, json.dumps(asdict(data))
        )
        log.debug("session_created", backend="redis", customer_id=data.id)
        return session_id

    async def get(self, session_id: str) -> Optional[SessionData]:
        raw = await self._redis.get(self._key(session_id))
        if raw is None:
            return None
        return SessionData(**json.loads(raw))

    async def destroy(self, session_id: str) -> None:
        await self._redis.delete(self._key(session_id))
        log.debug("session_destroyed", backend="redis")
