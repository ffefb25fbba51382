"""Alias records held by the alias store."""

from datetime import datetime

from pydantic import BaseModel, Field

from sharenote.core.db import MongoModel
from sharenote.utils import now

DEFAULT_RECORD_TITLE = "Untitled"


class AliasRecord(MongoModel):
    """Share token stored under a short alias.

    The alias is the document ``_id``, so single-key operations are atomic.
    ``views`` only grows; concurrent reads may under-count it.
    """

    alias: str = Field(alias="_id")
    token: str
    title: str = DEFAULT_RECORD_TITLE
    created_at: datetime = Field(default_factory=now)
    views: int = Field(default=0, ge=0)


class AliasSummary(BaseModel):
    """Listing entry for an alias record (without the token)."""

    alias: str
    title: str
    created_at: datetime
    views: int

    @classmethod
    def from_record(cls, record: AliasRecord) -> "AliasSummary":
        return cls(alias=record.alias, title=record.title, created_at=record.created_at, views=record.views)
