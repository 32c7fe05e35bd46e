from __future__ import annotations

from typing import Any, Optional

from .models import QueryResult


def one(result: QueryResult) -> Optional[dict[str, Any]]:
    """First row of the result, or None when nothing matched."""
    if not result.rows:
        return None
    return result.rows[0]


def many(result: QueryResult) -> list[dict[str, Any]]:
    """All rows of the result, in the order the database returned them."""
    return result.rows
