from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Optional, Union

from ..errors import EmitError, PayloadError
from ..events.models import EVENT_TOPIC, build_event
from .client import ExecutionClient
from .helpers import columns, filter_pairs, validate_sort, where
from .metrics import observe_event, observe_query
from .models import DbAction, OperationKind, QueryResult, TableSpec
from .result import many, one

logger = logging.getLogger(__name__)

Operation = Callable[..., Any]
Record = dict[str, Any]

PAGING_KEYS = ("offset", "limit", "sort")
DEFAULT_ORDER = "id DESC"


async def _run(
    spec: TableSpec,
    kind: OperationKind,
    client: Optional[ExecutionClient],
    sql: str,
    values: Optional[Sequence[Any]] = None,
) -> QueryResult:
    """
    Issue exactly one statement on ``client`` (or the table's own client).

    Client errors propagate unchanged; the query is observed either way.
    """
    client = client if client is not None else spec.client
    logger.debug("%s.%s: %s values=%s", spec.name, kind.value, sql, values)

    start_time = time.monotonic()
    status = "success"
    try:
        if values is None:
            return await client.query(sql)
        return await client.query(sql, values)
    except Exception:
        status = "error"
        raise
    finally:
        observe_query(spec.name, kind.value, status, time.monotonic() - start_time)


async def _notify(
    spec: TableSpec,
    action: DbAction,
    item: Union[Record, list[Record], None],
) -> None:
    """
    Hand one event to the table's sink, after the mutation succeeded.

    A failing sink fails the operation with EmitError; the mutation itself is
    not undone here.
    """
    if spec.emitter is None:
        return

    try:
        pending = spec.emitter.emit(EVENT_TOPIC, build_event(spec.name, action, item))
        if inspect.isawaitable(pending):
            await pending
    except Exception as exc:
        observe_event(spec.name, action.value, "error")
        logger.warning(
            "Event sink failed for %s on %s after the statement succeeded: %s",
            action.value,
            spec.name,
            exc,
        )
        if isinstance(exc, EmitError):
            raise
        raise EmitError(f"Failed to emit {action.value} event for {spec.name}: {exc}") from exc

    observe_event(spec.name, action.value, "success")


def _paging_value(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise PayloadError(f"{name} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise PayloadError(f"{name} must be an integer, got {value!r}") from exc
    if number < 0:
        raise PayloadError(f"{name} must be >= 0, got {number}")
    return number


def _write_pairs(spec: TableSpec, allowed: frozenset, payload: Mapping[str, Any]) -> tuple[list[str], list[Any]]:
    pairs = [(key, value) for key, value in payload.items() if key in allowed]
    keys = [key for key, _ in pairs]
    if spec.map_keys:
        keys = [spec.map_keys(key) for key in keys]
    return keys, [value for _, value in pairs]


def make_count(spec: TableSpec) -> Operation:
    async def count(filters: Optional[Mapping[str, Any]] = None, client: Optional[ExecutionClient] = None) -> int:
        sql = f"SELECT count(id) FROM {spec.name}"
        values = None

        pairs = filter_pairs(filters or {})
        if pairs:
            clause, values = where(pairs)
            sql += f" WHERE {clause}"

        result = await _run(spec, OperationKind.COUNT, client, sql, values)
        return int(result.rows[0]["count"])

    return count


def make_insert(spec: TableSpec) -> Operation:
    """
    Single-row INSERT ... RETURNING.

    Keys outside the whitelist are dropped. ``spec.map_keys`` renames the
    column list only; values keep the payload's order. A payload with no
    whitelisted key inserts a row of column defaults.
    """
    allowed = frozenset(spec.columns)
    returning = columns(spec.columns)

    async def insert(item: Mapping[str, Any], client: Optional[ExecutionClient] = None) -> Optional[Record]:
        keys, values = _write_pairs(spec, allowed, item)

        if keys:
            placeholders = ", ".join(f"${index}" for index in range(1, len(values) + 1))
            sql = (
                f"INSERT INTO {spec.name} ({', '.join(keys)}) "
                f"VALUES ({placeholders}) RETURNING {returning}"
            )
            result = await _run(spec, OperationKind.INSERT, client, sql, values)
        else:
            sql = f"INSERT INTO {spec.name} DEFAULT VALUES RETURNING {returning}"
            result = await _run(spec, OperationKind.INSERT, client, sql)

        row = one(result)
        await _notify(spec, DbAction.CREATE, row)
        return row

    return insert


def make_insert_many(spec: TableSpec) -> Operation:
    """
    Multi-row INSERT ... RETURNING over a batch of heterogeneous records.

    The column list is the union of whitelisted keys present in the batch, in
    first-seen order. A key missing from a row is written as ``DEFAULT``, an
    explicit ``None`` as ``NULL``; every other value is a positional parameter.
    """
    allowed = frozenset(spec.columns)
    returning = columns(spec.columns)

    async def insert_many(
        items: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]],
        client: Optional[ExecutionClient] = None,
    ) -> list[Record]:
        if isinstance(items, Mapping):
            items = [items]
        else:
            items = list(items)

        if not items:
            return []

        keys: list[str] = []
        for item in items:
            for key in item:
                if key in allowed and key not in keys:
                    keys.append(key)

        if not keys:
            raise PayloadError(
                f"insert_many into {spec.name}: no row carries a whitelisted column"
            )

        values: list[Any] = []
        tuples = []
        for item in items:
            cells = []
            for key in keys:
                if key not in item:
                    cells.append("DEFAULT")
                elif item[key] is None:
                    cells.append("NULL")
                else:
                    values.append(item[key])
                    cells.append(f"${len(values)}")
            tuples.append(f"({', '.join(cells)})")

        names = [spec.map_keys(key) for key in keys] if spec.map_keys else keys
        sql = (
            f"INSERT INTO {spec.name} ({', '.join(names)}) "
            f"VALUES {', '.join(tuples)} RETURNING {returning}"
        )

        result = await _run(spec, OperationKind.INSERT_MANY, client, sql, values or None)
        rows = many(result)
        await _notify(spec, DbAction.CREATE, rows)
        return rows

    return insert_many


def make_select(spec: TableSpec) -> Operation:
    """
    Filtered SELECT with paging.

    ``offset``, ``limit`` and ``sort`` are read from the filter itself and fall
    back to ``spec.defaults``; every other key becomes an equality predicate,
    whitelisted or not. Rows are ordered by ``id DESC`` unless ``sort`` says
    otherwise; LIMIT/OFFSET is only added for a non-zero limit.
    """
    projection = columns(spec.columns)
    defaults = spec.defaults

    async def select(filters: Optional[Mapping[str, Any]] = None, client: Optional[ExecutionClient] = None) -> list[Record]:
        filters = dict(filters or {})
        paging = {key: filters.pop(key, None) for key in PAGING_KEYS}

        offset = paging["offset"] if paging["offset"] is not None else defaults.offset
        limit = paging["limit"] if paging["limit"] is not None else defaults.limit
        sort = paging["sort"] if paging["sort"] is not None else defaults.sort

        sql = f"SELECT {projection} FROM {spec.name}"
        values = None

        pairs = filter_pairs(filters)
        if pairs:
            clause, values = where(pairs)
            sql += f" WHERE {clause}"

        sql += f" ORDER BY {validate_sort(sort) if sort else DEFAULT_ORDER}"

        if limit:
            limit = _paging_value("limit", limit)
        if limit:
            sql += f" LIMIT {limit} OFFSET {_paging_value('offset', offset)}"

        result = await _run(spec, OperationKind.SELECT, client, sql, values)
        return many(result)

    return select


def make_select_all(spec: TableSpec) -> Operation:
    sql = f"SELECT {columns(spec.columns)} FROM {spec.name} ORDER BY {DEFAULT_ORDER}"

    async def select_all(client: Optional[ExecutionClient] = None) -> list[Record]:
        result = await _run(spec, OperationKind.SELECT_ALL, client, sql)
        return many(result)

    return select_all


def make_select_by_id(spec: TableSpec) -> Operation:
    sql = f"SELECT {columns(spec.columns)} FROM {spec.name} WHERE id = $1"

    async def select_by_id(id: Any, client: Optional[ExecutionClient] = None) -> Optional[Record]:
        result = await _run(spec, OperationKind.SELECT_BY_ID, client, sql, [id])
        return one(result)

    return select_by_id


def make_select_one(spec: TableSpec) -> Operation:
    projection = columns(spec.columns)

    async def select_one(filters: Optional[Mapping[str, Any]] = None, client: Optional[ExecutionClient] = None) -> Optional[Record]:
        sql = f"SELECT {projection} FROM {spec.name}"
        values = None

        pairs = filter_pairs(filters or {})
        if pairs:
            clause, values = where(pairs)
            sql += f" WHERE {clause}"

        sql += " LIMIT 1"

        result = await _run(spec, OperationKind.SELECT_ONE, client, sql, values)
        return one(result)

    return select_one


def make_remove(spec: TableSpec) -> Operation:
    """
    DELETE by id. Resolves to the number of deleted rows; a ``delete`` event
    carrying the removed row is emitted only when something was deleted.
    """
    sql = f"DELETE FROM {spec.name} WHERE id = $1 RETURNING {columns(spec.columns)}"

    async def remove(id: Any, client: Optional[ExecutionClient] = None) -> int:
        result = await _run(spec, OperationKind.REMOVE, client, sql, [id])

        if result.row_count:
            await _notify(spec, DbAction.DELETE, one(result))

        return result.row_count

    return remove


def make_update(spec: TableSpec) -> Operation:
    """
    Partial UPDATE by id (PATCH semantics).

    Only whitelisted keys are written; ``None`` sets the column to NULL. The id
    is always bound as the last parameter.

    Raises:
        PayloadError: If the payload holds no whitelisted key
    """
    allowed = frozenset(spec.columns)
    returning = columns(spec.columns)

    async def update(id: Any, changes: Mapping[str, Any], client: Optional[ExecutionClient] = None) -> Optional[Record]:
        keys, values = _write_pairs(spec, allowed, changes)
        if not keys:
            raise PayloadError(f"update on {spec.name}: payload has no whitelisted column to set")

        assignments = ", ".join(f"{key}=${index}" for index, key in enumerate(keys, start=1))
        sql = (
            f"UPDATE {spec.name} SET {assignments} "
            f"WHERE id = ${len(keys) + 1} RETURNING {returning}"
        )

        result = await _run(spec, OperationKind.UPDATE, client, sql, [*values, id])
        row = one(result)
        if row is not None:
            await _notify(spec, DbAction.UPDATE, row)
        return row

    return update


FACTORIES: dict[OperationKind, Callable[[TableSpec], Operation]] = {
    OperationKind.COUNT: make_count,
    OperationKind.INSERT: make_insert,
    OperationKind.INSERT_MANY: make_insert_many,
    OperationKind.SELECT: make_select,
    OperationKind.SELECT_ALL: make_select_all,
    OperationKind.SELECT_BY_ID: make_select_by_id,
    OperationKind.SELECT_ONE: make_select_one,
    OperationKind.REMOVE: make_remove,
    OperationKind.UPDATE: make_update,
}
