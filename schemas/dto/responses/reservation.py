"""
Response DTOs for reservation endpoints.

ReservationApiInfo       GET /reservation/
ReservationResponse      single reservation shape
CreateReservationResponse POST /reservation/create (201)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ReservationApiInfo(BaseModel):
    """API metadata served at the reservation root."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    version: str
    endpoints: dict[str, str]
    documentation: str


class ReservationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    customer_id: str
    customer_name: str
    date: str
    time: str
    guests: int
    phone: Optional[str] = None
    special_request: Optional[str] = None
    status: str
    created_at: Optional[str] = None  # ISO 8601 string


class CreateReservationResponse(BaseModel):
    """Response body for POST /reservation/create (201)."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    reservation: ReservationResponse
