"""
Customer repository: the credential store.

All writes that follow a read are conditional, so concurrent requests
cannot both win:
- registration relies on the unique index on `email`; a concurrent
  duplicate insert raises pymongo's DuplicateKeyError
- verification only flips `is_verified` while the stored OTP still matches
  and the customer is still unverified
"""

from __future__ import annotations

from typing import Optional

from bson import ObjectId
from pymongo import ASCENDING
from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.customer import CustomerDoc
from shared.datetime_utils import utc_now
from shared.logging import get_logger

log = get_logger(__name__)


class CustomerRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def ensure_indexes(self) -> None:
        await self._col.create_index(
            [("email", ASCENDING)], unique=True, name="customers_email_unique"
        )

    async def find_by_email(self, email: str) -> Optional[CustomerDoc]:
        doc = await self._col.find_one({"email": email})
        return CustomerDoc.from_mongo(doc)

    async def insert(self, customer: CustomerDoc) -> ObjectId:
        """Insert a new customer and return its id.

        Raises:
            pymongo.errors.DuplicateKeyError: the email is already registered.
        """
        result = await self._col.insert_one(customer.to_mongo())
        return result.inserted_id

    async def mark_verified(self, customer_id: ObjectId, otp: str) -> bool:
        """Verify the customer if it is still unverified with *otp* on record.

        Returns:
            True when this call performed the transition, False when another
            request got there first (or the code changed underneath).
        """
        result = await self._col.update_one(
            {"_id": customer_id, "is_verified": False, "otp": otp},
            {
                "$set": {"is_verified": True, "updated_at": utc_now()},
                "$unset": {"otp": "", "otp_expiry": ""},
            },
        )
        return result.modified_count == 1

    async def update_password_hash(
        self, customer_id: ObjectId, password_hash: str
    ) -> bool:
        result = await self._col.update_one(
            {"_id": customer_id},
            {"$set": {"password_hash": password_hash, "updated_at": utc_now()}},
        )
        return result.matched_count == 1
