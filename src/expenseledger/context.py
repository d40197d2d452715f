"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .clock import Clock, SystemClock
from .config import BaseConfig
from .domain.repositories import CollectionStore
from .infra.database import bootstrap_database
from .infra.repositories import JsonFileCollectionStore, SQLModelCollectionStore
from .logging_config import get_logger
from .services.ledger_service import ExpenseLedger

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Centralized application context with services and state."""

    config: BaseConfig
    clock: Clock
    collection_store: CollectionStore
    ledger: ExpenseLedger


def build_collection_store(config: BaseConfig) -> CollectionStore:
    """Pick the persistence backend named by the configuration."""

    if config.STORAGE == "json":
        return JsonFileCollectionStore(config.DATA_DIR)
    _engine, session_factory = bootstrap_database(config)
    return SQLModelCollectionStore(session_factory)


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    clock: Optional[Clock] = None,
    collection_store: Optional[CollectionStore] = None,
) -> AppContext:
    """Create the context and start a session (expired trash is purged)."""

    if config is None:
        config = BaseConfig()
    clock = clock or SystemClock()
    store = collection_store or build_collection_store(config)

    ledger = ExpenseLedger(store, clock=clock)
    purged = ledger.sweep_expired()
    if purged:
        logger.info("Session start purged %d expired trash entries", len(purged))

    return AppContext(config=config, clock=clock, collection_store=store, ledger=ledger)


__all__ = ["AppContext", "build_collection_store", "create_app_context"]
