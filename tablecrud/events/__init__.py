from __future__ import annotations

from .models import EVENT_TOPIC, EventSink, build_event
from .redis_streams import RedisStreamsEmitter

__all__ = [
    "EVENT_TOPIC",
    "EventSink",
    "RedisStreamsEmitter",
    "build_event",
]
