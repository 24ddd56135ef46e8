"""
Request DTOs for customer authentication endpoints.

RegisterRequest        POST /customer/register
VerifyOtpRequest       POST /customer/verify-otp
LoginRequest           POST /customer/login
ResetPasswordRequest   POST /customer/reset-password

Every rule is checked independently so a single 400 lists all violations.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

MIN_PASSWORD_LENGTH = 6


def _check_email(value: str) -> str:
    try:
        validate_email(value)
    except PydanticCustomError:
        raise PydanticCustomError("invalid_email", "Invalid email address") from None
    # Stored as supplied; lookups are case-sensitive
    return value


def _check_password(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise PydanticCustomError(
            "password_too_short",
            "Password must be at least {min_length} characters long",
            {"min_length": MIN_PASSWORD_LENGTH},
        )
    return value


class CredentialsRequest(BaseModel):
    """Shared ``{email, password}`` shape for login and password reset."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _valid_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def _valid_password(cls, v: str) -> str:
        return _check_password(v)


class RegisterRequest(CredentialsRequest):
    """Request body for POST /customer/register."""

    name: str

    @field_validator("name")
    @classmethod
    def _name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise PydanticCustomError("name_required", "Name is required")
        return v


class LoginRequest(CredentialsRequest):
    """Request body for POST /customer/login."""


class ResetPasswordRequest(CredentialsRequest):
    """Request body for POST /customer/reset-password.

    Only the email identifies the account; no reset code is required.
    """


class VerifyOtpRequest(BaseModel):
    """Request body for POST /customer/verify-otp.

    ``otp`` is the 6-digit code sent to the customer's email address. A JSON
    number is accepted and compared as its decimal string (leading zeros
    are lost), so a mistyped code is answered with "Invalid OTP" rather
    than a body validation error. The email is not format
    checked: an unknown address is reported by the service.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str
    otp: str

    @field_validator("otp", mode="before")
    @classmethod
    def _otp_as_text(cls, v: object) -> object:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v
