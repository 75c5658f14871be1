"""
Query orchestrator - main entry point.

Wires the field type catalog, compiler, executor, schema generator and
authorization collaborators into one interface for the API layer.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from query_gateway.auth.accessibility import build_accessibility_filter
from query_gateway.auth.arborist_client import ArboristClient
from query_gateway.config import GatewayConfig
from query_gateway.core.exceptions import InputError
from query_gateway.core.interfaces import IFieldTypeCatalog, IQueryExecutor
from query_gateway.core.models import Accessibility, GeneratedSchema, IndexConfig
from query_gateway.execution.executor import SCROLL_PAGE_SIZE, QueryExecutor
from query_gateway.query.translator import FilterArg, QueryTranslator, SortArg
from query_gateway.schema.generator import SchemaGenerator
from query_gateway.schema.sdl import render_schema

logger = logging.getLogger(__name__)


class QueryOrchestrator:
    """
    Main orchestrator for the query gateway.

    Clients address indices by their configured type name; every method
    resolves that name to the Elasticsearch index first.
    """

    def __init__(
        self,
        catalog: IFieldTypeCatalog,
        query_executor: IQueryExecutor,
        indices: List[IndexConfig],
        page_size_ceiling: int = SCROLL_PAGE_SIZE,
        arborist_client: Optional[ArboristClient] = None,
        auth_filter_field: str = "auth_resource_path",
    ):
        """
        Initialize query orchestrator.

        Args:
            catalog: Field type catalog
            query_executor: Backend query executor
            indices: Indices exposed to clients
            page_size_ceiling: Largest offset + size for a bounded query
            arborist_client: Source of the caller's authorized resources
            auth_filter_field: Field holding each document's resource path
        """
        self.catalog = catalog
        self.indices = indices
        self.query_translator = QueryTranslator(catalog)
        self.query_executor = QueryExecutor(
            self.query_translator, query_executor, page_size_ceiling
        )
        self.arborist_client = arborist_client
        self.auth_filter_field = auth_filter_field

        self._schema: Optional[GeneratedSchema] = None
        self._schema_string: Optional[str] = None

    @classmethod
    def from_elasticsearch(
        cls,
        es_host: str,
        indices: List[IndexConfig],
        array_fields: Optional[Dict[str, List[str]]] = None,
        page_size_ceiling: int = SCROLL_PAGE_SIZE,
        scroll_batch_size: int = 1000,
        arborist_endpoint: Optional[str] = None,
        auth_filter_field: str = "auth_resource_path",
    ) -> "QueryOrchestrator":
        """
        Create orchestrator for an Elasticsearch cluster.

        Fetches the index mappings immediately.

        Args:
            es_host: Elasticsearch host URL
            indices: Indices exposed to clients
            array_fields: Index name -> names of fields holding lists
            page_size_ceiling: Largest offset + size for a bounded query
            scroll_batch_size: Documents per scroll page
            arborist_endpoint: Arborist base URL, if authorization is enabled
            auth_filter_field: Field holding each document's resource path

        Returns:
            Configured QueryOrchestrator
        """
        from elasticsearch import Elasticsearch

        from query_gateway.adapters.elasticsearch import (
            ESFieldTypeCatalog,
            ESQueryExecutor,
        )

        es_client = Elasticsearch(hosts=[es_host])
        catalog = ESFieldTypeCatalog(
            es_client, [cfg.index for cfg in indices], array_fields=array_fields
        )
        catalog.refresh()
        query_executor = ESQueryExecutor(es_client, scroll_batch_size=scroll_batch_size)
        arborist_client = ArboristClient(arborist_endpoint) if arborist_endpoint else None

        return cls(
            catalog=catalog,
            query_executor=query_executor,
            indices=indices,
            page_size_ceiling=page_size_ceiling,
            arborist_client=arborist_client,
            auth_filter_field=auth_filter_field,
        )

    @classmethod
    def from_config(cls, config: GatewayConfig) -> "QueryOrchestrator":
        """Create an Elasticsearch orchestrator from process configuration."""
        return cls.from_elasticsearch(
            es_host=config.es_host,
            indices=config.indices,
            array_fields=config.array_fields,
            page_size_ceiling=config.scroll_page_size,
            scroll_batch_size=config.scroll_batch_size,
            arborist_endpoint=config.arborist_endpoint,
            auth_filter_field=config.auth_filter_field,
        )

    def get_index(self, type_name: str) -> str:
        """Resolve a client type name to its index."""
        for cfg in self.indices:
            if cfg.type == type_name:
                return cfg.index
        raise InputError(f"Unknown type {type_name}")

    def build_schema(self) -> GeneratedSchema:
        """
        Generate the client-facing schema once and reuse it afterwards.

        Raises:
            SchemaGenerationError: If the catalog holds an unsupported type
        """
        if self._schema is None:
            generator = SchemaGenerator(self.catalog, self.indices)
            self._schema = generator.generate()
        return self._schema

    def schema_string(self) -> str:
        """The generated schema as SDL text."""
        if self._schema_string is None:
            self._schema_string = render_schema(self.build_schema())
            logger.debug("[schema] graphql schema %s", self._schema_string)
        return self._schema_string

    def get_mapping_fields(self, type_name: str) -> List[str]:
        """Top-level field names of a type's index."""
        return list(self.catalog.get_field_types(self.get_index(type_name)))

    def get_auth_filter(
        self,
        type_name: str,
        jwt: Optional[str],
        accessibility: Accessibility = Accessibility.ALL,
    ) -> Optional[Dict[str, Any]]:
        """
        Build the default authorization filter for a caller.

        Returns None when authorization is disabled or when every document
        is in scope.
        """
        try:
            accessibility = Accessibility(accessibility)
        except ValueError as e:
            raise InputError(f'Invalid accessibility "{accessibility}"') from e
        if self.arborist_client is None or accessibility is Accessibility.ALL:
            return None
        authorized = self.arborist_client.list_authorized_resources(jwt)
        all_resources = None
        if accessibility is Accessibility.UNACCESSIBLE:
            all_resources = self.query_executor.executor.get_distinct_values(
                self.get_index(type_name), self.auth_filter_field
            )
        return build_accessibility_filter(
            accessibility, self.auth_filter_field, authorized, all_resources
        )

    def get_data(
        self,
        type_name: str,
        filter_obj: FilterArg = None,
        fields: Optional[List[str]] = None,
        sort: SortArg = None,
        offset: int = 0,
        size: Optional[int] = None,
        auth_filter: FilterArg = None,
    ) -> List[Dict[str, Any]]:
        """Fetch one page of documents, scoped by ``auth_filter`` if given."""
        return self.query_executor.get_data(
            self.get_index(type_name),
            filter_obj=self._scope(filter_obj, auth_filter),
            fields=fields,
            sort=sort,
            offset=offset,
            size=size,
        )

    def get_count(
        self, type_name: str, filter_obj: FilterArg = None, auth_filter: FilterArg = None
    ) -> int:
        return self.query_executor.get_count(
            self.get_index(type_name), self._scope(filter_obj, auth_filter)
        )

    def download(
        self,
        type_name: str,
        filter_obj: FilterArg = None,
        fields: Optional[List[str]] = None,
        sort: SortArg = None,
        auth_filter: FilterArg = None,
    ) -> Iterator[Dict[str, Any]]:
        """Stream every matching document through the scroll path."""
        return self.query_executor.get_data_using_scroll(
            self.get_index(type_name),
            filter_obj=self._scope(filter_obj, auth_filter),
            fields=fields,
            sort=sort,
        )

    def get_aggregation_filter(
        self,
        type_name: str,
        field: str,
        filter_obj: FilterArg = None,
        filter_self: bool = True,
        auth_filter: FilterArg = None,
    ) -> Optional[Dict[str, Any]]:
        """Compile the filter for one field's aggregation."""
        return self.query_translator.compile_aggregation_filter(
            self.get_index(type_name),
            filter_obj,
            target_field=field,
            filter_self=filter_self,
            default_auth_filter=auth_filter,
        )

    @staticmethod
    def _scope(filter_obj: FilterArg, auth_filter: FilterArg) -> FilterArg:
        """AND a client filter with an authorization filter."""
        if not auth_filter:
            return filter_obj
        if not filter_obj:
            return auth_filter
        return {"AND": [filter_obj, auth_filter]}
