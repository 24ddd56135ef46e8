"""SessionStore protocol used by the auth service.

A session holds the minimal `{id, name}` projection of a logged-in customer
and is addressed by the opaque id carried in the session cookie.
"""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class SessionData:
    id: str  # customer ObjectId as string
    name: str


class SessionStore(Protocol):
    async def create(self, data: SessionData) -> str:
        """Persist *data* under a fresh session id and return that id."""
        ...

    async def get(self, session_id: str) -> Optional[SessionData]: ...

    async def destroy(self, session_id: str) -> None:
        """Remove the session. Missing sessions are not an error; backend failures raise."""
        ...
