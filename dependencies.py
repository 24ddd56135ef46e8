"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Services are built once in the app lifespan and
stored on app.state; tests put fakes on app.state from their own lifespan.
"""

from __future__ import annotations

from fastapi import Depends, Request

from config import AppSettings
from errors import AuthenticationError
from infrastructure.session.protocol import SessionData
from services.auth_service import AuthService
from services.reservation_service import ReservationService


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


async def get_db(request: Request):
    """Return the async MongoDB database from app.state."""
    return request.app.state.db


async def get_redis(request: Request):
    """Return the async Redis client from app.state (may be None if not configured)."""
    return request.app.state.redis


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_reservation_service(request: Request) -> ReservationService:
    return request.app.state.reservation_service


async def require_session(
    request: Request,
    settings: AppSettings = Depends(get_settings),
    auth_service: AuthService = Depends(get_auth_service),
) -> SessionData:
    """Resolve the session cookie to the logged-in customer, or 401.

    The server-side session is the only credential checked here; the bearer
    token is meant for downstream services.
    """
    session_id = request.cookies.get(settings.session.session_cookie_name)
    session = await auth_service.get_session(session_id)
    if session is None:
        raise AuthenticationError("Unauthorized. Please log in.")
    return session
