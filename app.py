"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.asynchronous.mongo_client import AsyncMongoClient

from config import AppSettings
from errors import register_error_handlers
from infrastructure.email.zeptomail import ZeptoMailProvider
from infrastructure.http_client import HttpClient
from infrastructure.redis_client import create_redis_client
from infrastructure.session.mongo_store import MongoSessionStore
from infrastructure.session.redis_store import RedisSessionStore
from repositories.customer_repository import CustomerRepository
from repositories.reservation_repository import ReservationRepository
from routes.auth_routes import router as auth_router
from routes.health_routes import router as health_router
from routes.reservation_routes import router as reservation_router
from services.auth_service import AuthService
from services.reservation_service import ReservationService
from services.token_service import TokenService
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(
        env=settings.env,
        log_level=settings.logging.log_level,
        log_format=settings.logging.log_format,
        sentry_enabled=bool(settings.sentry.sentry_dsn),
    )

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            profiles_sample_rate=settings.sentry.sentry_profile_sample_rate,
        )

    # Fails fast when no signing secret or key pair is configured
    token_service = TokenService(settings.jwt)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(
            settings.db.mongodb_uri, tz_aware=True
        )
        db = mongo_client[settings.db.db_name]
        app.state.mongo_client = mongo_client
        app.state.db = db
        app.state.settings = settings

        # Redis is optional; without it sessions are kept in MongoDB
        redis_client = None
        if settings.redis.redis_uri:
            redis_client = await create_redis_client(settings.redis.redis_uri)
        app.state.redis = redis_client

        if redis_client is not None:
            session_store = RedisSessionStore(
                redis_client, ttl_seconds=settings.session.session_ttl_seconds
            )
        else:
            session_store = MongoSessionStore(
                db["sessions"], ttl_seconds=settings.session.session_ttl_seconds
            )
            await session_store.ensure_indexes()
        log.info("session_store_selected", backend=type(session_store).__name__)

        customers = CustomerRepository(db["customers"])
        reservations = ReservationRepository(db["reservations"])
        await customers.ensure_indexes()
        await reservations.ensure_indexes()

        http_client = HttpClient()
        app.state.http_client = http_client
        email_provider = ZeptoMailProvider(
            settings.email,
            http_client,
            app_name=settings.app_name,
            app_url=settings.app_url,
        )

        app.state.auth_service = AuthService(
            customers=customers,
            sessions=session_store,
            email_provider=email_provider,
            tokens=token_service,
            otp_settings=settings.otp,
        )
        app.state.reservation_service = ReservationService(
            reservations, timezone_name=settings.restaurant_timezone
        )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await http_client.aclose()
        await mongo_client.close()
        if redis_client is not None:
            await redis_client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=None if settings.is_production else settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    # Explicit origins; the session and auth cookies need credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(reservation_router)

    return app
