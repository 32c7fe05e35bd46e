from __future__ import annotations

import pytest

from tablecrud import HandlersConfig, make_handlers

pytestmark = pytest.mark.asyncio

COLUMNS = ["id", "name", "email", "team_id"]


def _handlers(db_client, table: str, **overrides):
    kwargs = {"db": db_client, "table": table, "columns": COLUMNS, "camel_case": False}
    kwargs.update(overrides)
    return make_handlers(HandlersConfig(**kwargs))


async def test_insert_then_select_by_id(db_client, fresh_table: str) -> None:
    users = _handlers(db_client, fresh_table)

    row = await users["insert"]({"name": "a", "email": "b", "extra": "x"})

    assert row["name"] == "a"
    assert row["email"] == "b"
    assert row["team_id"] == 7
    assert await users["select_by_id"](row["id"]) == row


async def test_insert_many_default_vs_null(db_client, fresh_table: str) -> None:
    users = _handlers(db_client, fresh_table)

    rows = await users["insert_many"]([
        {"name": "a"},
        {"name": "b", "team_id": None},
        {"team_id": 3},
    ])

    assert [(r["name"], r["team_id"]) for r in rows] == [("a", 7), ("b", None), (None, 3)]


async def test_select_orders_by_id_desc_and_pages(db_client, fresh_table: str) -> None:
    users = _handlers(db_client, fresh_table)
    await users["insert_many"]([{"name": f"u{i}", "team_id": i % 2} for i in range(5)])

    everything = await users["select_all"]()
    ids = [r["id"] for r in everything]
    assert ids == sorted(ids, reverse=True)

    page = await users["select"]({"team_id": 0, "limit": 2, "offset": 1})
    assert [r["name"] for r in page] == ["u2", "u0"]

    assert await users["count"]({"team_id": 1}) == 2
    assert await users["count"]({}) == 5


async def test_update_and_remove(db_client, fresh_table: str) -> None:
    users = _handlers(db_client, fresh_table)
    row = await users["insert"]({"name": "a"})

    updated = await users["update"](row["id"], {"email": "new@example.com"})
    assert updated["email"] == "new@example.com"

    assert await users["update"](row["id"] + 1000, {"email": "x"}) is None
    assert await users["remove"](row["id"] + 1000) == 0
    assert await users["remove"](row["id"]) == 1
    assert await users["select_by_id"](row["id"]) is None


async def test_select_one_and_unlisted_filter_columns(db_client, fresh_table: str) -> None:
    users = _handlers(db_client, fresh_table, columns=["id", "name"])
    await users["insert"]({"name": "a"})

    assert await users["select_one"]({"team_id": 7}) is not None
    assert await users["select_one"]({"team_id": 8}) is None


async def test_rolled_back_transaction_discards_writes(db_client, fresh_table: str) -> None:
    users = _handlers(db_client, fresh_table)

    with pytest.raises(RuntimeError):
        async with db_client.transaction() as tx:
            await users["insert"]({"name": "a"}, tx)
            assert await users["count"]({}, tx) == 1
            raise RuntimeError("abort")

    assert await users["count"]({}) == 0


async def test_default_key_mapper_writes_snake_case_columns(db_client, fresh_table: str) -> None:
    users = _handlers(db_client, fresh_table, camel_case=True, columns=["id", "name", "team_id"])

    row = await users["insert"]({"name": "a", "team_id": 2})

    assert row["team_id"] == 2
