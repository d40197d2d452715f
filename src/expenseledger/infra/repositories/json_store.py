"""JSON-file implementation of the collection store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from ...logging_config import get_logger
from ._payload import decode_payload

logger = get_logger(__name__)


class JsonFileCollectionStore:
    """Stores each collection as ``<key>.json`` inside ``directory``."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read_all(self, key: str) -> list[dict[str, Any]]:
        path = self._path(key)
        if not path.exists():
            return []
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.warning("Could not read %s; starting empty", path)
            return []
        return decode_payload(key, raw)

    def write_all(self, key: str, items: Iterable[dict[str, Any]]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        # simple atomic write
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(list(items), fh, ensure_ascii=False, indent=2)
        tmp.replace(path)
        logger.debug("Persisted collection %s to %s", key, path)


__all__ = ["JsonFileCollectionStore"]
