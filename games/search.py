"""Translate search criteria into a predicate over the ``games`` table.

Name matching is a case-sensitive substring test in which ``%`` and ``_``
are literal characters. SQLite uses ``instr`` (``LIKE`` folds ASCII case
there), MySQL/MariaDB compare under a binary collation and PostgreSQL
``LIKE`` is case-sensitive already.
"""

from __future__ import annotations

from sqlalchemy import and_, func, true
from sqlalchemy.sql.elements import ColumnElement

from games.records import SearchCriteria
from games.store import games_table

_BINARY_COLLATIONS = {
    "mysql": "utf8mb4_bin",
    "mariadb": "utf8mb4_bin",
}


def _name_contains(value: str, dialect_name: str | None) -> ColumnElement[bool]:
    name_column = games_table.c.name
    if dialect_name == "sqlite":
        return func.instr(name_column, value) > 0
    collation = _BINARY_COLLATIONS.get(dialect_name or "")
    if collation:
        name_column = name_column.collate(collation)
    return name_column.contains(value, autoescape=True)


def build_search_filter(
    criteria: SearchCriteria,
    *,
    dialect_name: str | None = None,
) -> ColumnElement[bool]:
    """Return the conjunction of every supplied criterion.

    With no criteria the predicate matches all rows.
    """

    if criteria.is_empty:
        return true()

    clauses: list[ColumnElement[bool]] = []

    if criteria.name is not None:
        clauses.append(_name_contains(criteria.name, dialect_name))

    if criteria.platform is not None:
        clauses.append(games_table.c.platform == criteria.platform)

    return and_(*clauses)


__all__ = ["build_search_filter"]
