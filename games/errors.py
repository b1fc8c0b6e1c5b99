"""Error taxonomy shared by the catalog store, feeds and service layer."""

from __future__ import annotations

from typing import Mapping


class CatalogError(RuntimeError):
    """Base class for catalog errors."""


class ValidationError(CatalogError):
    """Raised when a request body does not describe a valid game or query."""

    def __init__(self, errors: Mapping[str, str]):
        self.errors = dict(errors)
        summary = "; ".join(f"{field}: {message}" for field, message in self.errors.items())
        super().__init__(summary or "invalid input")


class NotFoundError(CatalogError):
    """Raised when a game id does not exist in the store."""

    def __init__(self, game_id: int):
        self.game_id = game_id
        super().__init__(f"game {game_id} not found")


class StoreUnavailableError(CatalogError):
    """Raised when a persistence operation cannot complete."""

    def __init__(self, operation: str, message: str | None = None):
        self.operation = operation
        super().__init__(message or f"store operation failed: {operation}")


class DuplicateStoreIdError(StoreUnavailableError):
    """Raised when an insert or update collides with an existing ``store_id``."""


class MalformedFeedError(CatalogError):
    """Raised when a feed source cannot be parsed into candidate games."""

    def __init__(self, source: str, details: str):
        self.source = source
        self.details = details
        super().__init__(f"malformed feed {source!r}: {details}")


__all__ = [
    "CatalogError",
    "DuplicateStoreIdError",
    "MalformedFeedError",
    "NotFoundError",
    "StoreUnavailableError",
    "ValidationError",
]
