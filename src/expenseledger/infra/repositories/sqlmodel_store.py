"""SQLModel implementation of the collection store."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable, ContextManager, Iterable

from sqlmodel import Session, select

from ...logging_config import get_logger
from ...models.stored_collection import StoredCollection
from ._payload import decode_payload

logger = get_logger(__name__)


class SQLModelCollectionStore:
    """Keeps each collection as a JSON payload in ``stored_collection``."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        self.session_factory = session_factory

    def read_all(self, key: str) -> list[dict[str, Any]]:
        with self.session_factory() as session:
            row = session.exec(select(StoredCollection).where(StoredCollection.key == key)).first()
            raw = row.payload if row else None
        if raw is None:
            return []
        return decode_payload(key, raw)

    def write_all(self, key: str, items: Iterable[dict[str, Any]]) -> None:
        payload = json.dumps(list(items), ensure_ascii=False)
        with self.session_factory() as session:
            row = session.exec(select(StoredCollection).where(StoredCollection.key == key)).first()
            if row:
                row.payload = payload
                row.updated_at = datetime.now(timezone.utc)
            else:
                row = StoredCollection(key=key, payload=payload)
            session.add(row)
            session.commit()
        logger.debug("Persisted collection %s", key, extra={"bytes": len(payload)})


__all__ = ["SQLModelCollectionStore"]
