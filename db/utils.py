"""Shared helpers for building and using the catalog database engine."""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool
from urllib.parse import unquote, urlparse

_MEMORY_PATHS = {"", ":memory:"}


class DatabaseEngine:
    """Wrapper exposing context-managed SQLAlchemy connections."""

    def __init__(self, engine: Engine):
        self._engine = engine

    @property
    def engine(self) -> Engine:
        """Return the underlying SQLAlchemy :class:`~sqlalchemy.engine.Engine`."""

        return self._engine

    @property
    def dialect_name(self) -> str:
        return self._engine.dialect.name

    @contextmanager
    def sa_connection(self) -> Iterator[Connection]:
        """Yield a SQLAlchemy :class:`~sqlalchemy.engine.Connection`."""

        with self._engine.connect() as conn:
            yield conn

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Yield a connection inside a transaction committed on success."""

        with self._engine.begin() as conn:
            yield conn

    def dispose(self) -> None:
        """Dispose the underlying engine's connection pool."""

        self._engine.dispose()


def _configure_sqlite_connection(conn: Any, *, busy_timeout: float | None = None) -> Any:
    """Apply timeout tuning to SQLite connections."""

    if not isinstance(conn, sqlite3.Connection):
        return conn

    busy_timeout_ms = None
    if busy_timeout is not None:
        busy_timeout_ms = int(max(busy_timeout, 0) * 1000)
        if busy_timeout_ms <= 0:
            busy_timeout_ms = None

    pragmas: tuple[tuple[str, str | int | float | None], ...] = (
        ("busy_timeout", busy_timeout_ms),
        ("foreign_keys", "ON"),
    )

    for name, value in pragmas:
        if value is None:
            continue
        try:
            conn.execute(f"PRAGMA {name}={value}")
        except sqlite3.OperationalError:  # pragma: no cover - best effort only
            continue

    return conn


def _configure_mariadb_connection(conn: Any, *, lock_timeout: float | None = None) -> Any:
    """Apply session-level settings for MariaDB connections."""

    if lock_timeout is None:
        return conn

    timeout_value = max(int(lock_timeout), 1)
    cursor = conn.cursor()
    try:
        cursor.execute("SET SESSION innodb_lock_wait_timeout = %s", (timeout_value,))
    finally:
        cursor.close()

    return conn


def _resolve_sqlite_path_from_dsn(dsn: str) -> str | None:
    """Extract a filesystem path from a ``sqlite:///`` DSN string.

    Returns ``None`` for in-memory databases.
    """

    parsed = urlparse(dsn)
    if parsed.scheme.split("+", 1)[0] != "sqlite":
        raise ValueError(f"Unsupported DSN scheme for SQLite resolver: {parsed.scheme}")

    path = unquote(parsed.path or "")
    if parsed.netloc and parsed.netloc not in {"", "localhost"}:
        path = f"//{parsed.netloc}{path}"
    elif path.startswith("/"):
        # sqlite:///relative.db and sqlite:////absolute.db
        path = path[1:]

    if path in _MEMORY_PATHS:
        return None

    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = candidate.resolve()
    return os.fspath(candidate)


def build_engine_from_dsn(
    dsn: str,
    *,
    timeout: float | None = None,
    pool_size: int = 5,
    pool_recycle: int = 1_800,
    pool_pre_ping: bool = True,
) -> DatabaseEngine:
    """Return a :class:`DatabaseEngine` configured from ``dsn``."""

    parsed = urlparse(dsn)
    dialect_name = parsed.scheme.split("+", 1)[0]
    effective_timeout = timeout if timeout is not None else 5.0
    engine_kwargs: dict[str, Any] = {"future": True, "pool_pre_ping": pool_pre_ping}

    if dialect_name == "sqlite":
        sqlite_path = _resolve_sqlite_path_from_dsn(dsn)
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if sqlite_path is None:
            normalized_dsn = "sqlite://"
            engine_kwargs["poolclass"] = StaticPool
        else:
            normalized_dsn = f"sqlite:///{sqlite_path}"
            engine_kwargs["pool_size"] = pool_size
            engine_kwargs["pool_recycle"] = pool_recycle
    else:
        normalized_dsn = dsn
        engine_kwargs["pool_size"] = pool_size
        engine_kwargs["pool_recycle"] = pool_recycle

    engine = create_engine(normalized_dsn, **engine_kwargs)

    if dialect_name == "sqlite":

        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_conn, connection_record):  # type: ignore[override]
            _configure_sqlite_connection(dbapi_conn, busy_timeout=effective_timeout)
    elif dialect_name in {"mysql", "mariadb"}:

        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_conn, connection_record):  # type: ignore[override]
            _configure_mariadb_connection(dbapi_conn, lock_timeout=effective_timeout)

    return DatabaseEngine(engine)


__all__ = ["DatabaseEngine", "build_engine_from_dsn"]
