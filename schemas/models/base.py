"""
Shared pieces for MongoDB document models.

PyObjectId lets pydantic accept either an ObjectId or its 24-char hex form
and keeps the ObjectId in Python mode (so it is stored as a real ObjectId),
while JSON output gets the hex string.
"""

from __future__ import annotations

from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler
from pydantic_core import core_schema


class PyObjectId(ObjectId):
    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.to_string_ser_schema(),
        )

    @staticmethod
    def _coerce(value: Any) -> ObjectId:
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        raise ValueError(f"Not a valid ObjectId: {value!r}")


class MongoBaseModel(BaseModel):
    """Document model keyed by ``_id`` (exposed as ``id``).

    ``id`` stays None until the document has been inserted.
    """

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    def to_mongo(self) -> dict:
        """Document dict for pymongo; ``_id`` is left out until assigned."""
        exclude = {"id"} if self.id is None else None
        return self.model_dump(by_alias=True, exclude=exclude)

    @classmethod
    def from_mongo(cls, data: Optional[dict]):
        """Model from a raw document, or None for a missing document."""
        if data is None:
            return None
        return cls.model_validate(data)
