from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Union

from .config import HandlersConfig
from .db.helpers import quoted_snake_case
from .db.models import OperationKind, TableSpec
from .db.operations import FACTORIES, Operation

logger = logging.getLogger(__name__)


def _operation_kinds(names: Iterable[Union[str, OperationKind]]) -> list[OperationKind]:
    kinds: list[OperationKind] = []
    for name in names:
        try:
            kind = OperationKind(name)
        except ValueError:
            logger.debug("Ignoring unknown operation name %r", name)
            continue
        if kind not in kinds:
            kinds.append(kind)
    return kinds


def make_handlers(config: HandlersConfig) -> dict[str, Operation]:
    """
    Build the requested CRUD operations for one table.

    Resolution order:
    1) default key mapper, when ``camel_case`` is set and no ``map_keys`` given
    2) operation set: ``include`` if given, else every operation minus ``exclude``
    3) one operation per known name, all sharing the same ``TableSpec``

    Returns:
        Mapping of operation name (``OperationKind`` value) to coroutine function

    Example:
        users = make_handlers(HandlersConfig(
            db=client,
            table="users",
            columns=["id", "name", "email"],
            exclude=["remove"],
        ))
        user = await users["select_by_id"](42)
    """
    map_keys = config.map_keys
    if map_keys is None and config.camel_case:
        map_keys = quoted_snake_case

    spec = TableSpec(
        name=config.table,
        columns=tuple(config.columns),
        client=config.db,
        emitter=config.emitter,
        map_keys=map_keys,
        defaults=config.defaults,
    )

    if config.include is not None:
        kinds = _operation_kinds(config.include)
    else:
        excluded = _operation_kinds(config.exclude)
        kinds = [kind for kind in OperationKind if kind not in excluded]

    handlers: dict[str, Operation] = {}
    for kind in kinds:
        factory = FACTORIES.get(kind)
        if factory is not None:
            handlers[kind.value] = factory(spec)

    logger.debug("Built %s operations for %s: %s", len(handlers), spec.name, list(handlers))
    return handlers
