from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pymongo.asynchronous.cursor import AsyncCursor


class MongoModel(BaseModel):
    """Base for documents keyed by a natural string id stored as ``_id``."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        return self.model_dump(by_alias=True)

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        """Iterate over an AsyncCursor and return a list of model instances."""
        return [cls.model_validate(item) async for item in cursor]
