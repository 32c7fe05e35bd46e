from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from .helpers import validate_identifier, validate_sort

if TYPE_CHECKING:
    from ..events import EventSink
    from .client import ExecutionClient


class OperationKind(str, Enum):
    COUNT = "count"
    INSERT = "insert"
    INSERT_MANY = "insert_many"
    SELECT = "select"
    SELECT_ALL = "select_all"
    SELECT_BY_ID = "select_by_id"
    SELECT_ONE = "select_one"
    REMOVE = "remove"
    UPDATE = "update"


class DbAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class QueryResult:
    """
    What an execution client returns for one statement.
    """
    rows: list[dict[str, Any]] = field(default_factory=list)
    row_count: int = 0


@dataclass(frozen=True)
class SelectDefaults:
    """Paging and ordering applied by ``select`` when a filter omits them."""

    offset: int = 0
    limit: Optional[int] = None
    sort: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.offset, int) or self.offset < 0:
            raise ValueError("offset must be a non-negative integer")
        if self.limit is not None and (not isinstance(self.limit, int) or self.limit < 0):
            raise ValueError("limit must be a non-negative integer or None")
        if self.sort is not None:
            validate_sort(self.sort)


@dataclass(frozen=True)
class TableSpec:
    """
    Everything an operation factory closes over.

    ``columns`` is the whitelist: it bounds what INSERT/UPDATE may write and
    is the projection of every SELECT and RETURNING clause.
    """
    name: str
    columns: tuple[str, ...]
    client: "ExecutionClient"
    emitter: Optional["EventSink"] = None
    # rewrites INSERT/UPDATE column names only, never read filters
    map_keys: Optional[Callable[[str], str]] = None
    defaults: SelectDefaults = field(default_factory=SelectDefaults)

    def __post_init__(self) -> None:
        validate_identifier(self.name, "table")
        cols = tuple(self.columns)
        for col in cols:
            validate_identifier(col, "column")
        if len(set(cols)) != len(cols):
            raise ValueError(f"columns for table {self.name!r} must be unique: {list(cols)}")
        object.__setattr__(self, "columns", cols)
