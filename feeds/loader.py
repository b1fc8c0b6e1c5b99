"""Load candidate games from the per-platform JSON feed files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from games.errors import MalformedFeedError, ValidationError
from games.records import FIELD_COLUMNS, GameFields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedSource:
    """A named feed file, e.g. the android top-100 list."""

    name: str
    path: Path


def _read_document(source: FeedSource) -> Any:
    try:
        text = Path(source.path).read_text(encoding="utf-8")
    except OSError as exc:
        raise MalformedFeedError(source.name, f"cannot read {source.path}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedFeedError(source.name, str(exc)) from exc


def _normalize_entry(entry: Any) -> Any:
    """Return ``entry`` with numeric field values turned into strings."""

    if not isinstance(entry, dict):
        return entry
    normalized = dict(entry)
    for wire_name in FIELD_COLUMNS:
        value = normalized.get(wire_name)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            normalized[wire_name] = str(value)
    return normalized


def load_feed(source: FeedSource) -> list[GameFields]:
    """Parse ``source`` into candidates, every one marked as published.

    Numeric values such as ``"storeId": 431946152`` are read as their string
    form. Raises :class:`MalformedFeedError` when the document is not JSON,
    lacks a ``games`` list, or holds an entry missing a required field.
    """

    document = _read_document(source)
    if not isinstance(document, dict):
        raise MalformedFeedError(source.name, "expected a JSON object at the top level")
    entries = document.get("games")
    if not isinstance(entries, list):
        raise MalformedFeedError(source.name, "expected a 'games' list")

    candidates: list[GameFields] = []
    for index, entry in enumerate(entries):
        try:
            candidates.append(GameFields.from_payload(_normalize_entry(entry), is_published=True))
        except ValidationError as exc:
            raise MalformedFeedError(source.name, f"games[{index}]: {exc}") from exc

    logger.debug("Loaded %s candidates from feed %s", len(candidates), source.name)
    return candidates


def load_candidates(sources: Iterable[FeedSource]) -> list[GameFields]:
    """Concatenate the candidates of every source, preserving source order.

    All sources are parsed before anything is returned.
    """

    candidates: list[GameFields] = []
    for source in sources:
        candidates.extend(load_feed(source))
    return candidates


__all__ = ["FeedSource", "load_candidates", "load_feed"]
