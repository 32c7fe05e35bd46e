from .registry import DB_EVENT_TOTAL, DB_QUERY_LATENCY_SECONDS, DB_QUERY_TOTAL

__all__ = ["DB_QUERY_TOTAL", "DB_QUERY_LATENCY_SECONDS", "DB_EVENT_TOTAL"]
