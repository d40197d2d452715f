"""SQLModel table holding serialized ledger collections."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoredCollection(SQLModel, table=True):
    """Key/payload storage: one row per persisted collection."""

    __tablename__: ClassVar[str] = "stored_collection"

    key: str = Field(primary_key=True, max_length=64)
    payload: str = Field(nullable=False, default="[]")
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)
