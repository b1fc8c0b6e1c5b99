"""SQLAlchemy-backed persistence for the ``games`` table."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Sequence

from sqlalchemy import (
    Boolean,
    Column,
    Integer,
    MetaData,
    String,
    Table,
    delete as sa_delete,
    func,
    insert,
    select,
    update as sa_update,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement

from db.utils import DatabaseEngine
from games.errors import DuplicateStoreIdError, StoreUnavailableError
from games.records import GameFields, GameRecord

logger = logging.getLogger(__name__)

GAMES_TABLE = "games"

# keeps IN (...) lists well under driver parameter limits
STORE_ID_BATCH_SIZE = 500

metadata = MetaData()

games_table = Table(
    GAMES_TABLE,
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("publisher_id", String(255), nullable=False),
    Column("name", String(255), nullable=False),
    Column("platform", String(32), nullable=False, index=True),
    Column("store_id", String(255), nullable=False, unique=True),
    Column("bundle_id", String(255), nullable=False),
    Column("app_version", String(64), nullable=False),
    Column("is_published", Boolean, nullable=False, default=False),
    Column("created_at", String(64)),
    Column("updated_at", String(64)),
)


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _chunked(values: Sequence[str], size: int) -> Iterable[Sequence[str]]:
    for start in range(0, len(values), size):
        yield values[start : start + size]


class GameStore:
    """Record store for catalog games.

    Every SQLAlchemy failure is re-raised as :class:`StoreUnavailableError`
    (or :class:`DuplicateStoreIdError` for ``store_id`` collisions) with the
    original exception chained.
    """

    def __init__(self, database: DatabaseEngine) -> None:
        self._database = database

    @property
    def dialect_name(self) -> str:
        return self._database.dialect_name

    def close(self) -> None:
        """Release the pooled database connections."""

        self._database.dispose()

    def ensure_schema(self) -> None:
        """Create the ``games`` table when it does not exist yet."""

        try:
            metadata.create_all(self._database.engine, tables=[games_table])
        except SQLAlchemyError as exc:
            raise StoreUnavailableError("ensure_schema") from exc

    def find_all(self, predicate: ColumnElement[bool] | None = None) -> list[GameRecord]:
        statement = select(games_table).order_by(games_table.c.id)
        if predicate is not None:
            statement = statement.where(predicate)
        try:
            with self._database.sa_connection() as conn:
                rows = conn.execute(statement).mappings().all()
        except SQLAlchemyError as exc:
            raise StoreUnavailableError("find_all") from exc
        return [GameRecord.from_row(row) for row in rows]

    def find_by_key(self, game_id: int) -> GameRecord | None:
        try:
            with self._database.sa_connection() as conn:
                row = (
                    conn.execute(select(games_table).where(games_table.c.id == game_id))
                    .mappings()
                    .first()
                )
        except SQLAlchemyError as exc:
            raise StoreUnavailableError("find_by_key") from exc
        if row is None:
            return None
        return GameRecord.from_row(row)

    def existing_store_ids(self, store_ids: Iterable[str]) -> set[str]:
        """Return the subset of ``store_ids`` already present in the table."""

        wanted = list(dict.fromkeys(store_ids))
        found: set[str] = set()
        if not wanted:
            return found
        try:
            with self._database.sa_connection() as conn:
                for batch in _chunked(wanted, STORE_ID_BATCH_SIZE):
                    result = conn.execute(
                        select(games_table.c.store_id).where(
                            games_table.c.store_id.in_(batch)
                        )
                    )
                    found.update(result.scalars().all())
        except SQLAlchemyError as exc:
            raise StoreUnavailableError("existing_store_ids") from exc
        return found

    def create(self, fields: GameFields) -> GameRecord:
        timestamp = _now_utc_iso()
        values = {**fields.to_row(), "created_at": timestamp, "updated_at": timestamp}
        try:
            with self._database.begin() as conn:
                result = conn.execute(insert(games_table).values(**values))
                game_id = result.inserted_primary_key[0]
                row = (
                    conn.execute(select(games_table).where(games_table.c.id == game_id))
                    .mappings()
                    .one()
                )
        except IntegrityError as exc:
            raise DuplicateStoreIdError(
                "create", f"store id already exists: {fields.store_id}"
            ) from exc
        except SQLAlchemyError as exc:
            raise StoreUnavailableError("create") from exc
        return GameRecord.from_row(row)

    def bulk_create(self, fields_list: Sequence[GameFields]) -> list[GameRecord]:
        """Insert every entry in a single transaction.

        Either all rows are inserted or none are.
        """

        if not fields_list:
            return []
        timestamp = _now_utc_iso()
        rows = [
            {**fields.to_row(), "created_at": timestamp, "updated_at": timestamp}
            for fields in fields_list
        ]
        store_ids = [row["store_id"] for row in rows]
        created: list[dict[str, Any]] = []
        try:
            with self._database.begin() as conn:
                conn.execute(insert(games_table), rows)
                for batch in _chunked(store_ids, STORE_ID_BATCH_SIZE):
                    created.extend(
                        conn.execute(
                            select(games_table)
                            .where(games_table.c.store_id.in_(batch))
                            .order_by(games_table.c.id)
                        )
                        .mappings()
                        .all()
                    )
        except IntegrityError as exc:
            raise DuplicateStoreIdError(
                "bulk_create", "bulk insert collided with an existing store id"
            ) from exc
        except SQLAlchemyError as exc:
            raise StoreUnavailableError("bulk_create") from exc
        return [GameRecord.from_row(row) for row in created]

    def update(self, game_id: int, fields: GameFields) -> GameRecord | None:
        """Replace every user field of ``game_id``; ``None`` when it is missing."""

        values = {**fields.to_row(), "updated_at": _now_utc_iso()}
        try:
            with self._database.begin() as conn:
                result = conn.execute(
                    sa_update(games_table)
                    .where(games_table.c.id == game_id)
                    .values(**values)
                )
                if result.rowcount == 0:
                    return None
                row = (
                    conn.execute(select(games_table).where(games_table.c.id == game_id))
                    .mappings()
                    .one()
                )
        except IntegrityError as exc:
            raise DuplicateStoreIdError(
                "update", f"store id already exists: {fields.store_id}"
            ) from exc
        except SQLAlchemyError as exc:
            raise StoreUnavailableError("update") from exc
        return GameRecord.from_row(row)

    def destroy(self, game_id: int) -> bool:
        try:
            with self._database.begin() as conn:
                result = conn.execute(
                    sa_delete(games_table).where(games_table.c.id == game_id)
                )
        except SQLAlchemyError as exc:
            raise StoreUnavailableError("destroy") from exc
        return result.rowcount > 0

    def count(self) -> int:
        try:
            with self._database.sa_connection() as conn:
                return int(
                    conn.execute(select(func.count()).select_from(games_table)).scalar_one()
                )
        except SQLAlchemyError as exc:
            raise StoreUnavailableError("count") from exc

    def clear(self) -> int:
        """Delete every game and return how many rows were removed."""

        try:
            with self._database.begin() as conn:
                result = conn.execute(sa_delete(games_table))
        except SQLAlchemyError as exc:
            raise StoreUnavailableError("clear") from exc
        logger.info("Removed %s games from the catalog", result.rowcount)
        return result.rowcount


__all__ = [
    "GAMES_TABLE",
    "GameStore",
    "STORE_ID_BATCH_SIZE",
    "games_table",
    "metadata",
]
