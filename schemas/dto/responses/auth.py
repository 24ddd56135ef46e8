"""
Response DTOs for customer authentication endpoints.

CustomerPublic   public-safe projection returned inside LoginResponse
LoginResponse    POST /customer/login  (200)

register, verify-otp and reset-password return common.MessageResponse.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CustomerPublic(BaseModel):
    """``{id, name, email}``; never includes the hash or OTP fields."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str


class LoginResponse(BaseModel):
    """Response body for POST /customer/login (200)."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    token: str
    role: str
    user: CustomerPublic
