"""
Document Model Base

Every stored entity is described by a Pydantic model that mirrors the shape
of its MongoDB document. MongoModel gives them a common `_id` field and the
two conversions the services need:

    book = Book.from_mongo(await db.books.find_one({"_id": oid}))
    await db.books.insert_one(book.to_mongo())
"""

from datetime import UTC, datetime
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    """
    Current time in UTC, truncated to milliseconds.

    BSON dates have millisecond precision; truncating up front keeps the
    in-memory value equal to what a later read returns.
    """
    now = datetime.now(UTC)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def parse_object_id(value: str | ObjectId) -> ObjectId | None:
    """
    Convert a path or body identifier to an ObjectId.

    Returns:
        The ObjectId, or None if the value is not a valid 24-hex id
    """
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


class MongoModel(BaseModel):
    """
    Base class for document models.

    Attributes:
        id: The document's ObjectId, stored under "_id". None until inserted.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    id: ObjectId | None = Field(default=None, alias="_id")

    @classmethod
    def from_mongo(cls, document: dict[str, Any] | None):
        """Build a model from a raw document, or return None for a miss."""
        if document is None:
            return None
        return cls.model_validate(document)

    def to_mongo(self) -> dict[str, Any]:
        """
        Dump the model as a document ready for insert.

        The "_id" key is left out while the model has no id, so the server
        assigns one.
        """
        exclude = {"id"} if self.id is None else None
        return self.model_dump(by_alias=True, exclude=exclude)
