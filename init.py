"""Application startup orchestration helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from db import utils as db_utils
from games.store import GameStore

logger = logging.getLogger(__name__)


def ensure_dirs(paths: Iterable[Path]) -> None:
    for path in paths:
        Path(path).mkdir(parents=True, exist_ok=True)


def initialize_store(
    dsn: str,
    *,
    timeout: float | None = None,
) -> GameStore:
    """Build the database engine for ``dsn`` and make sure the schema exists.

    Used by the application factory and by the command-line scripts so both
    start from the same store setup.
    """

    database = db_utils.build_engine_from_dsn(dsn, timeout=timeout)
    store = GameStore(database)
    try:
        store.ensure_schema()
    except Exception:
        logger.exception("Failed to prepare the games schema")
        database.dispose()
        raise
    logger.debug("Game store ready on %s", database.engine.url.render_as_string(hide_password=True))
    return store


__all__ = ["ensure_dirs", "initialize_store"]
