from __future__ import annotations

from prometheus_client import Counter, Histogram

DB_QUERY_TOTAL = Counter(
    "tablecrud_db_query_total",
    "Statements issued by table operations.",
    ["table", "operation", "status"],
)

DB_QUERY_LATENCY_SECONDS = Histogram(
    "tablecrud_db_query_latency_seconds",
    "Latency of statements issued by table operations.",
    ["table", "operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

DB_EVENT_TOTAL = Counter(
    "tablecrud_db_event_total",
    "Mutation events handed to the event sink.",
    ["table", "action", "status"],
)
