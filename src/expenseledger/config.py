"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

STORAGE_BACKENDS = {"sqlite", "json"}


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "ExpenseLedger"
    DB_FILENAME = "expenseledger.db"
    LOG_FILENAME = "expenseledger.log"
    LOG_MAX_BYTES = 5 * 1024 * 1024
    LOG_BACKUP_COUNT = 3

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("EXPENSELEDGER_DEV_MODE", default=True)
        self.STORAGE = os.getenv("EXPENSELEDGER_STORAGE", "sqlite").strip().lower()
        if self.STORAGE not in STORAGE_BACKENDS:
            raise ValueError(
                f"EXPENSELEDGER_STORAGE must be one of {sorted(STORAGE_BACKENDS)}, got {self.STORAGE!r}."
            )
        self.DATABASE_URL = os.getenv("EXPENSELEDGER_DATABASE_URL", self._build_sqlite_url())

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the ledger files live."""

        data_root = os.getenv("EXPENSELEDGER_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to user-local storage.
            local_data = os.getenv("XDG_DATA_HOME") or (Path.home() / ".local" / "share")
            fallback_path = Path(local_data).expanduser() / self.APP_NAME.lower()
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        return {"connect_args": connect_args}

