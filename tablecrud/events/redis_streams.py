from __future__ import annotations

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional
from uuid import UUID

from redis.asyncio import Redis
from redis.exceptions import RedisError

from ..config import EmitterConfig
from ..errors import EmitError

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class RedisStreamsEmitter:
    """
    Event sink that appends each mutation event to a Redis stream.

    The stream key is ``config.stream_prefix + topic``; every entry carries one
    field, ``payload``, holding the JSON-encoded event. Consumers read the
    stream with XREAD/XREADGROUP on their own terms.

    Usage:
        emitter = RedisStreamsEmitter(Redis.from_url(url), EmitterConfig())
        users = make_handlers(HandlersConfig(db=client, emitter=emitter, ...))
    """

    def __init__(self, redis: Redis, config: Optional[EmitterConfig] = None) -> None:
        self.redis = redis
        self.config = config or EmitterConfig()

    def stream_key(self, topic: str) -> str:
        return f"{self.config.stream_prefix}{topic}"

    async def emit(self, topic: str, payload: Mapping[str, Any]) -> str:
        """
        Append one event.

        Returns:
            The stream entry id (e.g. ``"1700000000000-0"``)

        Raises:
            EmitError: If the payload is not JSON-serializable or Redis fails
        """
        try:
            data = json.dumps(payload, default=_json_default)
        except (TypeError, ValueError) as exc:
            raise EmitError(f"Event payload is not JSON-serializable: {exc}") from exc

        key = self.stream_key(topic)
        kwargs: dict[str, Any] = {}
        if self.config.maxlen is not None:
            kwargs["maxlen"] = self.config.maxlen
            kwargs["approximate"] = True

        try:
            entry_id = await self.redis.xadd(key, {"payload": data}, **kwargs)
        except RedisError as exc:
            raise EmitError(f"Failed to append event to stream {key!r}: {exc}") from exc

        if isinstance(entry_id, bytes):
            entry_id = entry_id.decode()
        logger.debug("emitted %s event to %s as %s", payload.get("action"), key, entry_id)
        return entry_id
