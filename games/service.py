"""Catalog operations exposed to the HTTP layer and scripts."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from feeds.loader import FeedSource
from games.errors import NotFoundError
from games.populate import PopulateResult, populate
from games.records import GameFields, GameRecord, SearchCriteria
from games.search import build_search_filter
from games.store import GameStore

logger = logging.getLogger(__name__)


class CatalogService:
    """List, create, update, delete, search and populate catalog games.

    The store and the feed sources are supplied by the caller; the service
    keeps no state of its own between calls.
    """

    def __init__(self, store: GameStore, feed_sources: Sequence[FeedSource]) -> None:
        self._store = store
        self._feed_sources = tuple(feed_sources)

    @property
    def store(self) -> GameStore:
        return self._store

    @property
    def feed_sources(self) -> tuple[FeedSource, ...]:
        return self._feed_sources

    def list_all(self) -> list[GameRecord]:
        return self._store.find_all()

    def create_one(self, payload: Any) -> GameRecord:
        fields = GameFields.from_payload(payload)
        record = self._store.create(fields)
        logger.info("Created game %s (%s)", record.id, record.store_id)
        return record

    def update_one(self, game_id: int, payload: Any) -> GameRecord:
        """Replace every field of ``game_id`` with the validated ``payload``."""

        fields = GameFields.from_payload(payload)
        record = self._store.update(game_id, fields)
        if record is None:
            raise NotFoundError(game_id)
        logger.info("Updated game %s", game_id)
        return record

    def delete_one(self, game_id: int) -> int:
        if not self._store.destroy(game_id):
            raise NotFoundError(game_id)
        logger.info("Deleted game %s", game_id)
        return game_id

    def search(self, payload: Any = None) -> list[GameRecord]:
        criteria = (
            payload if isinstance(payload, SearchCriteria) else SearchCriteria.from_payload(payload)
        )
        predicate = build_search_filter(criteria, dialect_name=self._store.dialect_name)
        return self._store.find_all(predicate)

    def populate(self) -> PopulateResult:
        return populate(self._store, self._feed_sources)


__all__ = ["CatalogService"]
