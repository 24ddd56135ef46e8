"""EmailProvider protocol used by the auth service."""

from typing import Protocol


class EmailProvider(Protocol):
    async def send_verification_email(
        self, email: str, name: str, otp_code: str, expires_in_minutes: int
    ) -> bool: ...

    async def send_welcome_email(self, email: str, name: str) -> bool: ...
