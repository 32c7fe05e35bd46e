from .helpers import columns, filter_pairs, quoted_snake_case, snake_case, where
from .models import DbAction, OperationKind, QueryResult, SelectDefaults, TableSpec
from .result import many, one
from .client import AsyncDbClient, AsyncDbTransaction, ExecutionClient, create_client
from .operations import (
    FACTORIES,
    make_count,
    make_insert,
    make_insert_many,
    make_remove,
    make_select,
    make_select_all,
    make_select_by_id,
    make_select_one,
    make_update,
)

__all__ = [
    "AsyncDbClient",
    "AsyncDbTransaction",
    "DbAction",
    "ExecutionClient",
    "FACTORIES",
    "OperationKind",
    "QueryResult",
    "SelectDefaults",
    "TableSpec",
    "columns",
    "create_client",
    "filter_pairs",
    "make_count",
    "make_insert",
    "make_insert_many",
    "make_remove",
    "make_select",
    "make_select_all",
    "make_select_by_id",
    "make_select_one",
    "make_update",
    "many",
    "one",
    "quoted_snake_case",
    "snake_case",
    "where",
]
