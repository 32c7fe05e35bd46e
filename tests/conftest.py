from __future__ import annotations

from collections.abc import Callable
from typing import Any, Optional

import pytest

from tablecrud.db.models import QueryResult, TableSpec


class RecordingClient:
    """
    In-memory execution client.

    Records every (sql, values) pair it receives and answers with queued
    results, or an empty result once the queue is drained.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, Optional[list[Any]]]] = []
        self._results: list[QueryResult] = []

    def returns(self, rows: Optional[list[dict[str, Any]]] = None, row_count: Optional[int] = None) -> "RecordingClient":
        rows = list(rows or [])
        self._results.append(QueryResult(rows=rows, row_count=len(rows) if row_count is None else row_count))
        return self

    async def query(self, sql: str, values: Optional[list[Any]] = None) -> QueryResult:
        self.calls.append((sql, None if values is None else list(values)))
        if self._results:
            return self._results.pop(0)
        return QueryResult()

    @property
    def last_sql(self) -> str:
        return self.calls[-1][0]

    @property
    def last_values(self) -> Optional[list[Any]]:
        return self.calls[-1][1]


class RecordingEmitter:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, topic: str, payload: dict[str, Any]) -> None:
        self.events.append((topic, payload))


@pytest.fixture
def client() -> RecordingClient:
    return RecordingClient()


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


@pytest.fixture
def spec_factory(client: RecordingClient, emitter: RecordingEmitter) -> Callable[..., TableSpec]:
    """
    Factory fixture for TableSpec instances bound to the recording client/emitter.

    Usage:
        spec = spec_factory(columns=("id", "name"), map_keys=None)
    """
    def _create(**overrides: Any) -> TableSpec:
        kwargs: dict[str, Any] = {
            "name": "users",
            "columns": ("id", "name", "email"),
            "client": client,
            "emitter": emitter,
        }
        kwargs.update(overrides)
        return TableSpec(**kwargs)

    return _create


@pytest.fixture
def users(spec_factory: Callable[..., TableSpec]) -> TableSpec:
    """Default spec: table ``users``, whitelist id/name/email, no key mapper."""
    return spec_factory()
