"""
Customer authentication endpoints.

POST /customer/register        create unverified account, email OTP (201)
POST /customer/verify-otp      confirm OTP, mark account verified
POST /customer/login           token + session cookie + authToken cookie
POST /customer/reset-password  overwrite password by email
POST /customer/logout          destroy server-side session (plain text)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from config import AppSettings
from dependencies import get_auth_service, get_settings
from schemas.dto.requests.auth import (
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyOtpRequest,
)
from schemas.dto.responses.auth import CustomerPublic, LoginResponse
from schemas.dto.responses.common import ErrorResponse, MessageResponse
from schemas.models.customer import CUSTOMER_ROLE
from services.auth_service import AuthService

router = APIRouter(
    prefix="/customer",
    tags=["customer"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.post("/register", status_code=201, response_model=MessageResponse)
async def register(
    body: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.register(body.name, body.email, body.password)
    return MessageResponse(
        message="OTP sent to your email. Verify to complete registration."
    )


@router.post("/verify-otp", response_model=MessageResponse)
async def verify_otp(
    body: VerifyOtpRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.verify_otp(body.email, body.otp)
    return MessageResponse(message="Registration successful!")


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    settings: AppSettings = Depends(get_settings),
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    result = await auth_service.login(body.email, body.password)
    customer = result.customer
    payload = LoginResponse(
        message="Login successful",
        token=result.token,
        role=CUSTOMER_ROLE,
        user=CustomerPublic(
            id=str(customer.id), name=customer.name, email=customer.email
        ),
    )

    resp = JSONResponse(status_code=200, content=payload.model_dump())
    resp.set_cookie(
        settings.session.session_cookie_name,
        value=result.session_id,
        max_age=settings.session.session_ttl_seconds,
        httponly=True,
        secure=settings.jwt.cookie_secure,
        samesite="lax",
        path="/",
    )
    resp.set_cookie(
        settings.jwt.auth_cookie_name,
        value=result.token,
        max_age=settings.jwt.access_token_ttl_seconds,
        httponly=True,
        secure=settings.jwt.cookie_secure,
        samesite="lax",
        path="/",
    )
    return resp


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.reset_password(body.email, body.password)
    return MessageResponse(message="Password reset successful")


@router.post("/logout", response_class=PlainTextResponse)
async def logout(
    request: Request,
    settings: AppSettings = Depends(get_settings),
    auth_service: AuthService = Depends(get_auth_service),
) -> PlainTextResponse:
    cookie_name = settings.session.session_cookie_name
    await auth_service.logout(request.cookies.get(cookie_name))
    resp = PlainTextResponse("Logged out successfully!")
    resp.delete_cookie(
        cookie_name,
        path="/",
        httponly=True,
        secure=settings.jwt.cookie_secure,
        samesite="lax",
    )
    return resp
