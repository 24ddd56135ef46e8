"""
Shared fixtures and in-memory fakes.

The fakes implement the same interfaces as the MongoDB repositories, the
session stores and the email provider so services and routes can be tested
without network access.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import pytest
from bson import ObjectId
from fastapi import FastAPI
from pymongo.errors import DuplicateKeyError

from config import (
    AppSettings,
    DatabaseSettings,
    EmailSettings,
    JWTSettings,
    LoggingSettings,
    OtpSettings,
    RedisSettings,
    SentrySettings,
    SessionSettings,
)
from errors import register_error_handlers
from infrastructure.session.protocol import SessionData
from routes.auth_routes import router as auth_router
from routes.reservation_routes import router as reservation_router
from schemas.models.customer import CustomerDoc
from schemas.models.reservation import ReservationDoc
from services.auth_service import AuthService
from services.reservation_service import ReservationService
from services.token_service import TokenService

TEST_JWT_SECRET = "test-signing-secret"


class FakeCustomerRepository:
    def __init__(self) -> None:
        self.docs: dict[ObjectId, CustomerDoc] = {}

    async def ensure_indexes(self) -> None:
        pass

    async def find_by_email(self, email: str) -> Optional[CustomerDoc]:
        for doc in self.docs.values():
            if doc.email == email:
                return doc.model_copy(deep=True)
        return None

    async def insert(self, customer: CustomerDoc) -> ObjectId:
        if any(d.email == customer.email for d in self.docs.values()):
            raise DuplicateKeyError("E11000 duplicate key error collection: customers")
        stored = customer.model_copy(deep=True)
        stored.id = ObjectId()
        self.docs[stored.id] = stored
        return stored.id

    async def mark_verified(self, customer_id: ObjectId, otp: str) -> bool:
        doc = self.docs.get(customer_id)
        if doc is None or doc.is_verified or doc.otp != otp:
            return False
        doc.is_verified = True
        doc.otp = None
        doc.otp_expiry = None
        return True

    async def update_password_hash(self, customer_id: ObjectId, password_hash: str) -> bool:
        doc = self.docs.get(customer_id)
        if doc is None:
            return False
        doc.password_hash = password_hash
        return True

    # test helper
    def by_email(self, email: str) -> CustomerDoc:
        return next(d for d in self.docs.values() if d.email == email)


class FakeSessionStore:
    def __init__(self) -> None:
        self.sessions: dict[str, SessionData] = {}
        self.fail_destroy = False
        self._counter = 0

    async def create(self, data: SessionData) -> str:
        self._counter += 1
        session_id = f"sess-{self._counter}"
        self.sessions[session_id] = data
        return session_id

    async def get(self, session_id: str) -> Optional[SessionData]:
        return self.sessions.get(session_id)

    async def destroy(self, session_id: str) -> None:
        if self.fail_destroy:
            raise ConnectionError("session backend unavailable")
        self.sessions.pop(session_id, None)


class FakeEmailProvider:
    def __init__(self) -> None:
        self.verification_emails: list[dict] = []
        self.welcome_emails: list[dict] = []
        self.succeed = True
        self.welcome_error: Optional[Exception] = None

    async def send_verification_email(
        self, email: str, name: str, otp_code: str, expires_in_minutes: int
    ) -> bool:
        self.verification_emails.append(
            {"email": email, "name": name, "otp": otp_code, "minutes": expires_in_minutes}
        )
        return self.succeed

    async def send_welcome_email(self, email: str, name: str) -> bool:
        if self.welcome_error is not None:
            raise self.welcome_error
        self.welcome_emails.append({"email": email, "name": name})
        return self.succeed

    def last_otp_for(self, email: str) -> str:
        return [m for m in self.verification_emails if m["email"] == email][-1]["otp"]


class FakeReservationRepository:
    def __init__(self) -> None:
        self.docs: dict[ObjectId, ReservationDoc] = {}

    async def ensure_indexes(self) -> None:
        pass

    async def insert(self, reservation: ReservationDoc) -> ObjectId:
        new_id = ObjectId()
        self.docs[new_id] = reservation.model_copy(deep=True)
        return new_id


# ── Settings ─────────────────────────────────────────────────────────────────


def make_settings(**jwt_overrides) -> AppSettings:
    """AppSettings built explicitly so no environment or .env is consulted."""
    jwt_kwargs = {"jwt_secret": TEST_JWT_SECRET, "cookie_secure": False}
    jwt_kwargs.update(jwt_overrides)
    return AppSettings(
        env="development",
        db=DatabaseSettings(mongodb_uri="mongodb://localhost:27017/"),
        redis=RedisSettings(redis_uri=None),
        jwt=JWTSettings(**jwt_kwargs),
        session=SessionSettings(),
        otp=OtpSettings(),
        email=EmailSettings(),
        logging=LoggingSettings(),
        sentry=SentrySettings(),
    )


@pytest.fixture
def settings() -> AppSettings:
    return make_settings()


@pytest.fixture
def token_service(settings) -> TokenService:
    return TokenService(settings.jwt)


@pytest.fixture
def customers() -> FakeCustomerRepository:
    return FakeCustomerRepository()


@pytest.fixture
def sessions() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def email_provider() -> FakeEmailProvider:
    return FakeEmailProvider()


@pytest.fixture
def reservations() -> FakeReservationRepository:
    return FakeReservationRepository()


@pytest.fixture
def auth_service(customers, sessions, email_provider, token_service, settings) -> AuthService:
    return AuthService(
        customers=customers,
        sessions=sessions,
        email_provider=email_provider,
        tokens=token_service,
        otp_settings=settings.otp,
    )


@pytest.fixture
def reservation_service(reservations) -> ReservationService:
    return ReservationService(reservations)


def build_test_app(
    settings: AppSettings,
    auth_service: AuthService,
    reservation_service: ReservationService,
) -> FastAPI:
    """Minimal app with the real routers and services wired to fakes via lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.auth_service = auth_service
        app.state.reservation_service = reservation_service
        yield

    app = FastAPI(lifespan=lifespan)
    register_error_handlers(app)
    app.include_router(auth_router)
    app.include_router(reservation_router)
    return app


@pytest.fixture
def test_app(settings, auth_service, reservation_service) -> FastAPI:
    return build_test_app(settings, auth_service, reservation_service)


@pytest.fixture
def secure_test_app(auth_service, reservation_service) -> FastAPI:
    """Same wiring as test_app but with Secure cookies, as in production."""
    return build_test_app(make_settings(cookie_secure=True), auth_service, reservation_service)
