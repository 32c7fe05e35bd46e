from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..errors import InvalidIdentifierError

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_SORT_TERM_RE = re.compile(
    r"^(?P<column>[a-zA-Z_][a-zA-Z0-9_]*)"
    r"(?:\s+(?:ASC|DESC))?"
    r"(?:\s+NULLS\s+(?:FIRST|LAST))?$",
    re.IGNORECASE,
)
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")

# Postgres truncates identifiers longer than NAMEDATALEN - 1.
MAX_IDENTIFIER_LENGTH = 63


def validate_identifier(name: str, identifier_type: str = "identifier") -> str:
    """
    Validate that an identifier (table/column name) is safe for SQL interpolation.

    ⚠️ SECURITY CONTRACT ⚠️
    This function validates identifier format but does NOT make untrusted input
    safe to use as a column name. Table names and column whitelists MUST be
    trusted (hardcoded or validated at application boundaries).

    Table names may be schema-qualified (``public.users``); each part is
    validated on its own.

    Args:
        name: The identifier to validate
        identifier_type: Description of the identifier (for error messages)

    Returns:
        The validated identifier (unchanged if valid)

    Raises:
        InvalidIdentifierError: If identifier is not a string, is empty or
            contains unsafe characters

    Example:
        >>> validate_identifier("users", "table")
        'users'
        >>> validate_identifier("'; DROP TABLE--", "table")
        InvalidIdentifierError: Invalid table "'; DROP TABLE--": ...
    """
    if not isinstance(name, str):
        raise InvalidIdentifierError(
            f"{identifier_type} must be a string, got {type(name).__name__}"
        )

    if not name:
        raise InvalidIdentifierError(f"{identifier_type} cannot be empty")

    parts = name.split(".") if identifier_type == "table" else [name]
    for part in parts:
        if not _IDENTIFIER_RE.match(part):
            raise InvalidIdentifierError(
                f"Invalid {identifier_type} {name!r}: "
                "must start with letter/underscore and contain only alphanumeric characters and underscores"
            )
        if len(part) > MAX_IDENTIFIER_LENGTH:
            raise InvalidIdentifierError(
                f"{identifier_type} {name!r} exceeds Postgres' {MAX_IDENTIFIER_LENGTH}-character limit"
            )

    return name


def validate_sort(sort: str) -> str:
    """
    Validate an ORDER BY expression such as ``"created_at DESC, id"``.

    Each comma-separated term is a column name optionally followed by
    ``ASC``/``DESC`` and ``NULLS FIRST``/``NULLS LAST``.
    """
    if not isinstance(sort, str) or not sort.strip():
        raise InvalidIdentifierError("sort must be a non-empty string")

    for term in sort.split(","):
        if not _SORT_TERM_RE.match(term.strip()):
            raise InvalidIdentifierError(f"Invalid sort term {term.strip()!r} in {sort!r}")

    return sort


def snake_case(name: str) -> str:
    """``createdAt`` -> ``created_at``, ``HTTPStatus2`` -> ``http_status_2``."""
    return "_".join(word.lower() for word in _WORD_RE.findall(name))


def quoted_snake_case(name: str) -> str:
    """Default key mapper: snake-cased, double-quoted column identifier."""
    return f'"{snake_case(name)}"'


def columns(names: Iterable[str]) -> str:
    """Comma-joined projection, in the order given."""
    return ", ".join(names)


def filter_pairs(filters: Mapping[str, Any]) -> list[tuple[str, Any]]:
    """
    Build the ordered ``(key, value)`` pairs of an equality filter.

    Keys whose value is ``None`` are dropped. The returned list is the single
    source for both the WHERE text and its parameter values.
    """
    pairs = []
    for key, value in filters.items():
        if value is None:
            continue
        pairs.append((validate_identifier(key, "filter key"), value))
    return pairs


def where(pairs: Sequence[tuple[str, Any]], start: int = 1) -> tuple[str, list[Any]]:
    """
    Render ``key = $n`` predicates joined with ``AND``.

    Placeholders are numbered from ``start`` in the order of ``pairs`` and the
    returned values follow that same order.

    Example:
        >>> where([("name", "a"), ("team_id", 3)])
        ('name = $1 AND team_id = $2', ['a', 3])
    """
    clauses = [f"{key} = ${index}" for index, (key, _) in enumerate(pairs, start=start)]
    values = [value for _, value in pairs]
    return " AND ".join(clauses), values
