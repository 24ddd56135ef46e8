"""Reservation repository over the `reservations` collection."""

from __future__ import annotations

from bson import ObjectId
from pymongo import ASCENDING
from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.reservation import ReservationDoc


class ReservationRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def ensure_indexes(self) -> None:
        await self._col.create_index(
            [("customer_id", ASCENDING), ("date", ASCENDING)],
            name="reservations_customer_date",
        )

    async def insert(self, reservation: ReservationDoc) -> ObjectId:
        result = await self._col.insert_one(reservation.to_mongo())
        return result.inserted_id
