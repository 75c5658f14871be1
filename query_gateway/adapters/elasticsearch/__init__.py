"""Elasticsearch adapter for the query gateway."""

from query_gateway.adapters.elasticsearch.schema_extractor import ESFieldTypeCatalog
from query_gateway.adapters.elasticsearch.query_translator import ESQueryTranslator
from query_gateway.adapters.elasticsearch.executor import ESQueryExecutor

__all__ = ["ESFieldTypeCatalog", "ESQueryTranslator", "ESQueryExecutor"]
