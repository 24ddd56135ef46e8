"""
Reservation endpoints.

GET  /reservation/        API metadata
POST /reservation/create  book a table (requires an active session)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from config import AppSettings
from dependencies import get_reservation_service, get_settings, require_session
from infrastructure.session.protocol import SessionData
from schemas.dto.requests.reservation import CreateReservationRequest
from schemas.dto.responses.common import ErrorResponse
from schemas.dto.responses.reservation import (
    CreateReservationResponse,
    ReservationApiInfo,
    ReservationResponse,
)
from schemas.models.reservation import ReservationDoc
from services.reservation_service import ReservationService

router = APIRouter(
    prefix="/reservation",
    tags=["reservation"],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)

API_VERSION = "1.0.0"


def _to_response(doc: ReservationDoc) -> ReservationResponse:
    return ReservationResponse(
        id=str(doc.id),
        customer_id=str(doc.customer_id),
        customer_name=doc.customer_name,
        date=doc.date,
        time=doc.time,
        guests=doc.guests,
        phone=doc.phone,
        special_request=doc.special_request,
        status=doc.status,
        created_at=doc.created_at.isoformat() if doc.created_at else None,
    )


@router.get("/", response_model=ReservationApiInfo)
async def reservation_root(
    settings: AppSettings = Depends(get_settings),
) -> ReservationApiInfo:
    return ReservationApiInfo(
        message="Welcome to the restaurant reservation API!",
        version=API_VERSION,
        endpoints={"createReservation": "/create [POST]"},
        documentation=settings.api_docs_url,
    )


@router.post("/create", status_code=201, response_model=CreateReservationResponse)
async def create_reservation(
    body: CreateReservationRequest,
    session: SessionData = Depends(require_session),
    reservation_service: ReservationService = Depends(get_reservation_service),
) -> CreateReservationResponse:
    reservation = await reservation_service.create(session, body)
    return CreateReservationResponse(
        message="Reservation created successfully",
        reservation=_to_response(reservation),
    )
