from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Union

from .db.models import OperationKind, SelectDefaults

if TYPE_CHECKING:
    from .db.client import ExecutionClient
    from .events import EventSink


@dataclass
class EmitterConfig:
    stream_prefix: str = "events:"
    maxlen: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.maxlen is not None and self.maxlen <= 0:
            raise ValueError(
                "maxlen must be > 0; use None to disable stream trimming"
            )


@dataclass
class HandlersConfig:
    """
    Input of ``make_handlers``.

    ``include`` wins over ``exclude`` when both are given. Names may be plain
    strings or ``OperationKind`` members; unknown names are ignored.

    ``camel_case`` installs the default key mapper (``createdAt`` becomes
    ``"created_at"``) unless an explicit ``map_keys`` is provided. The mapper
    only rewrites INSERT/UPDATE column lists; read filters are never mapped.
    """

    db: "ExecutionClient"
    table: str
    columns: Sequence[str]
    emitter: Optional["EventSink"] = None
    include: Optional[Sequence[Union[str, OperationKind]]] = None
    exclude: Sequence[Union[str, OperationKind]] = ()
    camel_case: bool = True
    map_keys: Optional[Callable[[str], str]] = None
    defaults: SelectDefaults = field(default_factory=SelectDefaults)

    def __post_init__(self) -> None:
        if self.db is None:
            raise ValueError("db must be an execution client exposing query()")
        if isinstance(self.columns, str):
            raise ValueError("columns must be a sequence of column names, not a string")
        if not self.columns:
            raise ValueError("columns cannot be empty")


__all__ = ["EmitterConfig", "HandlersConfig", "SelectDefaults"]
