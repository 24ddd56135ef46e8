"""
Request DTOs for reservation endpoints.

CreateReservationRequest POST /reservation/create
"""

from __future__ import annotations

from datetime import date as Date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

MAX_GUESTS = 20


class CreateReservationRequest(BaseModel):
    """Request body for POST /reservation/create."""

    model_config = ConfigDict(populate_by_name=True)

    date: Date
    time: str = Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    guests: int = Field(ge=1, le=MAX_GUESTS)
    phone: Optional[str] = Field(default=None, max_length=20)
    special_request: Optional[str] = Field(default=None, max_length=500)
