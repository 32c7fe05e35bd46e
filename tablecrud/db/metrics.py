from __future__ import annotations

from ..metrics.registry import DB_EVENT_TOTAL, DB_QUERY_LATENCY_SECONDS, DB_QUERY_TOTAL


def observe_query(table: str, operation: str, status: str, latency_s: float) -> None:
    """Record one statement issued by a table operation."""
    DB_QUERY_TOTAL.labels(table=table, operation=operation, status=status).inc()
    DB_QUERY_LATENCY_SECONDS.labels(table=table, operation=operation).observe(latency_s)


def observe_event(table: str, action: str, status: str) -> None:
    DB_EVENT_TOTAL.labels(table=table, action=action, status=status).inc()
