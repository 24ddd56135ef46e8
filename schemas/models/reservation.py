"""
Reservation document model.

Maps to the `reservations` MongoDB collection. A reservation always belongs
to the customer whose session created it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel, PyObjectId

RESERVATION_STATUS_PENDING = "PENDING"


class ReservationDoc(MongoBaseModel):
    """
    Document model for the `reservations` collection.

    `date` is stored as an ISO date string and `time` as "HH:MM" so the
    documents stay readable in the admin tooling.
    """

    customer_id: PyObjectId
    customer_name: str
    date: str
    time: str
    guests: int
    phone: Optional[str] = None
    special_request: Optional[str] = None
    status: str = RESERVATION_STATUS_PENDING
    created_at: Optional[datetime] = None
