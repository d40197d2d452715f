"""Shared decoding for serialized collections."""

from __future__ import annotations

import json
from typing import Any

from ...logging_config import get_logger

logger = get_logger(__name__)


def decode_payload(key: str, raw: str) -> list[dict[str, Any]]:
    """Parse a stored collection, falling back to empty when unparsable."""

    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Stored collection %s is unparsable; starting empty", key)
        return []
    if not isinstance(data, list):
        logger.warning("Stored collection %s is not a list; starting empty", key)
        return []
    return [item for item in data if isinstance(item, dict)]
