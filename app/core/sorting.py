"""ORDER BY helpers for list endpoints."""

from sqlalchemy import Table, asc, desc
from sqlalchemy.sql.elements import UnaryExpression

# Older clients send the frontend's field name
SORT_ALIASES = {"created_date": "created_at", "updated_date": "updated_at"}


def sort_clause(
    table: Table,
    sort: str | None,
    allowed: set[str],
    default: str = "-created_at",
) -> UnaryExpression:
    """
    Translate ``field`` or ``-field`` into an ORDER BY clause.

    Unknown fields fall back to ``default``'s column, keeping the requested
    direction.
    """
    raw = (sort or "").strip() or default
    descending = raw.startswith("-")
    field = SORT_ALIASES.get(raw.lstrip("-"), raw.lstrip("-"))
    if field not in allowed:
        field = default.lstrip("-")
    column = table.c[field]
    return desc(column) if descending else asc(column)
