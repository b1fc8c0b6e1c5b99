"""Merge feed candidates into the catalog without duplicating store ids."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from feeds.loader import FeedSource, load_candidates
from games.records import GameFields
from games.store import GameStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PopulateResult:
    """Outcome of a populate run."""

    inserted_count: int
    skipped_count: int
    candidate_count: int

    def to_dict(self) -> dict[str, int]:
        return {
            "insertedCount": self.inserted_count,
            "skippedCount": self.skipped_count,
            "candidateCount": self.candidate_count,
        }


def partition_candidates(
    candidates: Sequence[GameFields],
    existing_store_ids: Iterable[str],
) -> tuple[list[GameFields], list[GameFields]]:
    """Split ``candidates`` into ``(new, skipped)``.

    A candidate is skipped when its ``store_id`` is already stored or was
    claimed by an earlier candidate in the same sequence. Other fields are
    not compared.
    """

    claimed = set(existing_store_ids)
    new: list[GameFields] = []
    skipped: list[GameFields] = []
    for candidate in candidates:
        if candidate.store_id in claimed:
            skipped.append(candidate)
            continue
        claimed.add(candidate.store_id)
        new.append(candidate)
    return new, skipped


def populate_from_candidates(
    store: GameStore, candidates: Sequence[GameFields]
) -> PopulateResult:
    """Insert the candidates whose ``store_id`` is not in ``store`` yet.

    Existing rows are never updated or deleted. The insert is a single batch,
    so a store failure leaves the table untouched.
    """

    existing = store.existing_store_ids(candidate.store_id for candidate in candidates)
    new, skipped = partition_candidates(candidates, existing)
    created = store.bulk_create(new)

    result = PopulateResult(
        inserted_count=len(created),
        skipped_count=len(skipped),
        candidate_count=len(candidates),
    )
    logger.info(
        "Populate finished: %s candidates, %s inserted, %s skipped",
        result.candidate_count,
        result.inserted_count,
        result.skipped_count,
    )
    return result


def populate(store: GameStore, sources: Iterable[FeedSource]) -> PopulateResult:
    """Load every feed source, then merge the candidates into ``store``.

    Feed errors surface before the store is touched.
    """

    candidates = load_candidates(sources)
    return populate_from_candidates(store, candidates)


__all__ = [
    "PopulateResult",
    "partition_candidates",
    "populate",
    "populate_from_candidates",
]
