"""
Customer bearer tokens (JWT).

HS256 with JWT_SECRET by default; RS256 when both JWT_PRIVATE_KEY and
JWT_PUBLIC_KEY are configured. Tokens are stateless: nothing is persisted
and nothing can revoke a token before its `exp`.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import jwt

from config import JWTSettings
from schemas.models.customer import CUSTOMER_ROLE
from shared.datetime_utils import utc_now


class TokenService:
    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings
        if settings.use_rs256:
            # Support keys provided via env with literal \n sequences
            self._signing_key: Any = settings.jwt_private_key.replace("\\n", "\n")
            self._verifying_key: Any = settings.jwt_public_key.replace("\\n", "\n")
            self._algorithm = "RS256"
        else:
            if not settings.jwt_secret:
                raise RuntimeError(
                    "JWT_SECRET must be set when RS256 keys are not provided"
                )
            self._signing_key = settings.jwt_secret
            self._verifying_key = settings.jwt_secret
            self._algorithm = "HS256"

    @property
    def ttl_seconds(self) -> int:
        return self._settings.access_token_ttl_seconds

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def issue_customer_token(self, customer_id: str, name: str, email: str) -> str:
        """Sign a token whose subject is the customer's id."""
        now = utc_now()
        claims = {
            "iss": self._settings.jwt_issuer,
            "aud": self._settings.jwt_audience,
            "sub": str(customer_id),
            "name": name,
            "role": CUSTOMER_ROLE,
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=self.ttl_seconds)).timestamp()),
        }
        return jwt.encode(claims, self._signing_key, algorithm=self._algorithm)

    def verify(self, token: str) -> dict:
        """Decode and validate *token*.

        Raises:
            jwt.InvalidTokenError: bad signature, wrong issuer/audience, or
                expired (``jwt.ExpiredSignatureError``).
        """
        return jwt.decode(
            token,
            self._verifying_key,
            algorithms=[self._algorithm],
            audience=self._settings.jwt_audience,
            issuer=self._settings.jwt_issuer,
        )
