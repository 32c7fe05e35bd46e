from __future__ import annotations

from typing import Any, Awaitable, Mapping, Optional, Protocol, Union

from ..db.models import DbAction

EVENT_TOPIC = "db"


class EventSink(Protocol):
    """
    Receives one notification per successful mutation.

    ``emit`` may be a plain function or return an awaitable; operations await
    the result when it is awaitable.
    """

    def emit(self, topic: str, payload: Mapping[str, Any]) -> Optional[Awaitable[Any]]:
        ...


def build_event(
    table: str,
    action: DbAction,
    item: Union[dict[str, Any], list[dict[str, Any]], None],
) -> dict[str, Any]:
    return {"table": table, "action": action.value, "item": item}
