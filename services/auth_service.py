"""
Customer authentication service.

Orchestrates registration with email OTP verification, login (bearer token
plus server-side session), password reset and logout. Routes translate the
results into HTTP responses and cookies; every business-rule violation is
raised as a typed AppError.

Known gaps:
- no OTP resend and no attempt counter; an expired code means registering again
- password reset needs nothing beyond the email address
- neither reset nor logout revokes tokens that were already issued
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from pymongo.errors import DuplicateKeyError, PyMongoError

from config import OtpSettings
from errors import (
    DuplicateEmailError,
    InternalError,
    InvalidCredentialsError,
    InvalidOtpError,
    InvalidRequestError,
    LogoutError,
    OtpExpiredError,
    UnverifiedAccountError,
)
from infrastructure.email.protocol import EmailProvider
from infrastructure.session.protocol import SessionData, SessionStore
from repositories.customer_repository import CustomerRepository
from schemas.models.customer import CustomerDoc
from services.token_service import TokenService
from shared.crypto import codes_match, hash_password, verify_password
from shared.datetime_utils import ensure_utc, utc_now
from shared.generators import generate_otp_code
from shared.logging import get_logger

log = get_logger(__name__)

_GENERIC_ERROR = "Internal server error"


@dataclass
class LoginResult:
    token: str
    session_id: str
    customer: CustomerDoc


class AuthService:
    def __init__(
        self,
        customers: CustomerRepository,
        sessions: SessionStore,
        email_provider: EmailProvider,
        tokens: TokenService,
        otp_settings: OtpSettings,
    ) -> None:
        self._customers = customers
        self._sessions = sessions
        self._email = email_provider
        self._tokens = tokens
        self._otp = otp_settings

    async def register(self, name: str, email: str, password: str) -> None:
        """Create an unverified customer and email them a one-time code.

        The record is not rolled back if the email cannot be delivered.
        """
        if await self._customers.find_by_email(email) is not None:
            log.info("registration_failed", reason="email_exists")
            raise DuplicateEmailError("Email is already registered", field="email")

        now = utc_now()
        otp_code = generate_otp_code()
        password_hash = await asyncio.to_thread(hash_password, password)
        customer = CustomerDoc(
            name=name,
            email=email,
            password_hash=password_hash,
            is_verified=False,
            otp=otp_code,
            otp_expiry=now + timedelta(seconds=self._otp.otp_ttl_seconds),
            created_at=now,
            updated_at=now,
        )

        try:
            customer_id = await self._customers.insert(customer)
        except DuplicateKeyError:
            # Lost the race against a concurrent registration for this email
            log.info("registration_failed", reason="race_condition_duplicate")
            raise DuplicateEmailError("Email is already registered", field="email")
        except PyMongoError as e:
            log.error(
                "registration_failed",
                reason="database_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise InternalError(_GENERIC_ERROR) from e

        log.info("customer_registered", customer_id=str(customer_id))

        sent = await self._email.send_verification_email(
            email, name, otp_code, self._otp.otp_ttl_seconds // 60
        )
        if not sent:
            log.error("registration_otp_email_failed", customer_id=str(customer_id))
            raise InternalError(_GENERIC_ERROR)

    async def verify_otp(self, email: str, otp: str) -> None:
        """Mark the customer verified if *otp* matches and has not expired.

        The code is compared before the expiry so a wrong code is always
        reported as invalid, never as expired.
        """
        customer = await self._customers.find_by_email(email)
        if customer is None or customer.is_verified or customer.otp is None:
            raise InvalidRequestError("Invalid request or already verified")

        if not codes_match(otp, customer.otp):
            log.info("otp_verification_failed", customer_id=str(customer.id), reason="mismatch")
            raise InvalidOtpError("Invalid OTP", field="otp")

        if utc_now() > ensure_utc(customer.otp_expiry):
            log.info("otp_verification_failed", customer_id=str(customer.id), reason="expired")
            raise OtpExpiredError("OTP expired. Please register again.", field="otp")

        if not await self._customers.mark_verified(customer.id, customer.otp):
            log.warning("otp_verification_conflict", customer_id=str(customer.id))
            raise InvalidRequestError("Invalid request or already verified")

        log.info("customer_verified", customer_id=str(customer.id))

        # The account is already verified; the welcome email is best effort
        try:
            sent = await self._email.send_welcome_email(customer.email, customer.name)
        except Exception as e:
            log.warning(
                "welcome_email_failed",
                customer_id=str(customer.id),
                error=str(e),
                error_type=type(e).__name__,
            )
            return
        if not sent:
            log.warning("welcome_email_failed", customer_id=str(customer.id))

    async def login(self, email: str, password: str) -> LoginResult:
        """Authenticate a verified customer; issue a token and open a session.

        Unknown email and wrong password produce the same error. Verification
        is checked before the password.
        """
        customer = await self._customers.find_by_email(email)
        if customer is None:
            log.info("login_failed", reason="invalid_credentials")
            raise InvalidCredentialsError("Invalid email or password")

        if not customer.is_verified:
            log.info("login_failed", reason="unverified", customer_id=str(customer.id))
            raise UnverifiedAccountError(
                "Account not verified. Please verify your email."
            )

        valid = await asyncio.to_thread(
            verify_password, password, customer.password_hash
        )
        if not valid:
            log.info("login_failed", reason="invalid_password", customer_id=str(customer.id))
            raise InvalidCredentialsError("Invalid email or password")

        customer_id = str(customer.id)
        token = self._tokens.issue_customer_token(
            customer_id, customer.name, customer.email
        )
        session_id = await self._sessions.create(
            SessionData(id=customer_id, name=customer.name)
        )

        log.info("login_success", customer_id=customer_id)
        return LoginResult(token=token, session_id=session_id, customer=customer)

    async def reset_password(self, email: str, password: str) -> None:
        """Overwrite the password hash of the customer registered with *email*."""
        customer = await self._customers.find_by_email(email)
        if customer is None:
            log.info("password_reset_failed", reason="unknown_email")
            raise InvalidCredentialsError("Invalid email")

        password_hash = await asyncio.to_thread(hash_password, password)
        if not await self._customers.update_password_hash(customer.id, password_hash):
            # Customers are never deleted by this service, so this is unexpected
            log.error("password_reset_failed", reason="not_matched", customer_id=str(customer.id))
            raise InternalError(_GENERIC_ERROR)

        log.info("password_reset", customer_id=str(customer.id))

    async def get_session(self, session_id: Optional[str]) -> Optional[SessionData]:
        if not session_id:
            return None
        return await self._sessions.get(session_id)

    async def logout(self, session_id: Optional[str]) -> None:
        """Destroy the session; a request without one is already logged out."""
        if not session_id:
            return
        try:
            await self._sessions.destroy(session_id)
        except Exception as e:
            log.error(
                "logout_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise LogoutError("Failed to log out.") from e
        log.info("logout")
