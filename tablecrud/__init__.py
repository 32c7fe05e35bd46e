from .db import (
    FACTORIES,
    AsyncDbClient,
    OperationKind,
    QueryResult,
    SelectDefaults,
    TableSpec,
    create_client,
)
from .config import EmitterConfig, HandlersConfig
from .errors import EmitError, InvalidIdentifierError, PayloadError, TableCrudError
from .events import RedisStreamsEmitter
from .handlers import make_handlers

__all__ = [
    "AsyncDbClient",
    "EmitError",
    "EmitterConfig",
    "FACTORIES",
    "HandlersConfig",
    "InvalidIdentifierError",
    "OperationKind",
    "PayloadError",
    "QueryResult",
    "RedisStreamsEmitter",
    "SelectDefaults",
    "TableCrudError",
    "TableSpec",
    "create_client",
    "make_handlers",
]
