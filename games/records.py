"""Game record types and request-body validation."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

from games.errors import ValidationError

# wire name -> column name
FIELD_COLUMNS: dict[str, str] = {
    "publisherId": "publisher_id",
    "name": "name",
    "platform": "platform",
    "storeId": "store_id",
    "bundleId": "bundle_id",
    "appVersion": "app_version",
}


def _clean_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


@dataclass(frozen=True)
class GameFields:
    """The user-editable fields of a game, as accepted by create and update."""

    publisher_id: str
    name: str
    platform: str
    store_id: str
    bundle_id: str
    app_version: str
    is_published: bool = False

    @classmethod
    def from_payload(cls, payload: Any, *, is_published: bool | None = None) -> "GameFields":
        """Validate ``payload`` and return the typed fields.

        Unknown keys are ignored. When ``is_published`` is given the payload's
        own ``isPublished`` is neither read nor validated.
        """

        if not isinstance(payload, Mapping):
            raise ValidationError({"body": "expected a JSON object"})

        errors: dict[str, str] = {}
        values: dict[str, str] = {}
        for wire_name, column in FIELD_COLUMNS.items():
            raw = payload.get(wire_name)
            if raw is None:
                errors[wire_name] = "is required"
                continue
            text = _clean_text(raw)
            if text is None:
                errors[wire_name] = "must be a non-empty string"
                continue
            values[column] = text

        published = is_published
        if published is None:
            published = payload.get("isPublished", False)
            if published is None:
                published = False
            if not isinstance(published, bool):
                errors["isPublished"] = "must be a boolean"

        if errors:
            raise ValidationError(errors)

        return cls(is_published=published, **values)

    def to_row(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GameRecord:
    """A persisted game."""

    id: int
    publisher_id: str
    name: str
    platform: str
    store_id: str
    bundle_id: str
    app_version: str
    is_published: bool
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "GameRecord":
        return cls(
            id=int(row["id"]),
            publisher_id=row["publisher_id"],
            name=row["name"],
            platform=row["platform"],
            store_id=row["store_id"],
            bundle_id=row["bundle_id"],
            app_version=row["app_version"],
            is_published=bool(row["is_published"]),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase payload served by the API."""

        return {
            "id": self.id,
            "publisherId": self.publisher_id,
            "name": self.name,
            "platform": self.platform,
            "storeId": self.store_id,
            "bundleId": self.bundle_id,
            "appVersion": self.app_version,
            "isPublished": self.is_published,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class SearchCriteria:
    """Optional filters accepted by the search operation."""

    name: str | None = None
    platform: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "SearchCriteria":
        """Build criteria from a request body; empty strings count as absent."""

        if payload is None:
            return cls()
        if not isinstance(payload, Mapping):
            raise ValidationError({"body": "expected a JSON object"})

        errors: dict[str, str] = {}
        values: dict[str, str | None] = {}
        for key in ("name", "platform"):
            raw = payload.get(key)
            if raw is None or raw == "":
                values[key] = None
            elif isinstance(raw, str):
                values[key] = raw
            else:
                errors[key] = "must be a string"
        if errors:
            raise ValidationError(errors)
        return cls(**values)

    @property
    def is_empty(self) -> bool:
        return self.name is None and self.platform is None


__all__ = [
    "FIELD_COLUMNS",
    "GameFields",
    "GameRecord",
    "SearchCriteria",
]
