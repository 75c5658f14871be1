"""Query execution."""

from query_gateway.execution.executor import QueryExecutor, SCROLL_PAGE_SIZE

__all__ = ["QueryExecutor", "SCROLL_PAGE_SIZE"]
