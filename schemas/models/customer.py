"""
Customer document model.

Maps to the `customers` MongoDB collection.

Lifecycle:
- created unverified at registration, holding `otp` + `otp_expiry`
- verified exactly once by a matching OTP before expiry; both OTP fields
  are unset at that point
- `password_hash` may be overwritten any number of times by a reset
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import model_validator

from schemas.models.base import MongoBaseModel

CUSTOMER_ROLE = "customer"


class CustomerDoc(MongoBaseModel):
    """Document model for the `customers` collection."""

    name: str
    email: str
    password_hash: str
    is_verified: bool = False
    otp: Optional[str] = None
    otp_expiry: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _otp_fields_paired(self) -> "CustomerDoc":
        if (self.otp is None) != (self.otp_expiry is None):
            raise ValueError("otp and otp_expiry must be set together")
        return self

    def to_mongo(self) -> dict:
        data = super().to_mongo()
        # Verified customers carry no OTP fields at all
        if data.get("otp") is None:
            data.pop("otp", None)
            data.pop("otp_expiry", None)
        return data
