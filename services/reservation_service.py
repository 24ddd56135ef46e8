"""Reservation creation for the customer behind the active session."""

from __future__ import annotations

from datetime import datetime, time
from zoneinfo import ZoneInfo

from bson import ObjectId
from pymongo.errors import PyMongoError

from errors import InternalError, ValidationError
from infrastructure.session.protocol import SessionData
from repositories.reservation_repository import ReservationRepository
from schemas.dto.requests.reservation import CreateReservationRequest
from schemas.models.reservation import ReservationDoc
from shared.datetime_utils import utc_now
from shared.logging import get_logger

log = get_logger(__name__)


class ReservationService:
    def __init__(
        self, reservations: ReservationRepository, timezone_name: str = "UTC"
    ) -> None:
        self._reservations = reservations
        self._tz = ZoneInfo(timezone_name)

    async def create(
        self, session: SessionData, request: CreateReservationRequest
    ) -> ReservationDoc:
        """Book a table for the session's customer.

        Raises:
            ValidationError: the requested slot is not in the future
                (compared in the restaurant's local time zone).
        """
        slot = datetime.combine(
            request.date, time.fromisoformat(request.time), tzinfo=self._tz
        )
        if slot <= utc_now():
            raise ValidationError(
                "Reservation time must be in the future", field="date"
            )

        reservation = ReservationDoc(
            customer_id=ObjectId(session.id),
            customer_name=session.name,
            date=request.date.isoformat(),
            time=request.time,
            guests=request.guests,
            phone=request.phone,
            special_request=request.special_request,
            created_at=utc_now(),
        )
        try:
            reservation.id = await self._reservations.insert(reservation)
        except PyMongoError as e:
            log.error(
                "reservation_create_failed",
                customer_id=session.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise InternalError("Internal server error") from e

        log.info(
            "reservation_created",
            reservation_id=str(reservation.id),
            customer_id=session.id,
            guests=reservation.guests,
        )
        return reservation
