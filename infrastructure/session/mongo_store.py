"""MongoDB-backed SessionStore, used when Redis is not configured.

Documents live in the `sessions` collection:
    {_id: <session id>, data: {id, name}, expires_at: <datetime>}

A TTL index on `expires_at` lets MongoDB purge expired sessions; since the
TTL monitor only runs about once a minute, reads also check `expires_at`.
"""

from datetime import timedelta
from typing import Optional

from pymongo import ASCENDING
from pymongo.asynchronous.collection import AsyncCollection

from infrastructure.session.protocol import SessionData
from shared.datetime_utils import ensure_utc, utc_now
from shared.generators import generate_session_id
from shared.logging import get_logger

log = get_logger(__name__)


class MongoSessionStore:
    def __init__(self, collection: AsyncCollection, ttl_seconds: int = 86400) -> None:
        self._col = collection
        self.ttl_seconds = ttl_seconds

    async def ensure_indexes(self) -> None:
        await self._col.create_index(
            [("expires_at", ASCENDING)], expireAfterSeconds=0, name="sessions_ttl"
        )

    async def create(self, data: SessionData) -> str:
        session_id = generate_session_id()
        await self._col.insert_one(
            {
                "_id": session_id,
                "data": {"id": data.id, "name": data.name},
                "expires_at": utc_now() + timedelta(seconds=self.ttl_seconds),
            }
        )
        log.debug("session_created", backend="mongodb", customer_id=data.id)
        return session_id

    async def get(self, session_id: str) -> Optional[SessionData]:
        doc = await self._col.find_one({"_id": session_id})
        if doc is None:
            return None
        if ensure_utc(doc["expires_at"]) <= utc_now():
            return None
        return SessionData(**doc["data"])

    async def destroy(self, session_id: str) -> None:
        await self._col.delete_one({"_id": session_id})
        log.debug("session_destroyed", backend="mongodb")
