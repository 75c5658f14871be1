"""
Query Gateway - compiles client filters into Elasticsearch queries and
derives the client-facing schema from live index mappings.

Main entry point for creating query orchestrators.
"""

from query_gateway.orchestrator import QueryOrchestrator

__all__ = ["QueryOrchestrator"]
