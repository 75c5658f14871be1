"""
Elasticsearch field type catalog.

Implements IFieldTypeCatalog on top of live index mappings.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from elasticsearch import Elasticsearch

from query_gateway.core.models import FieldType
from query_gateway.schema.catalog import FieldTypeCatalog, normalize_properties

logger = logging.getLogger(__name__)


class ESFieldTypeCatalog:
    """
    Field types read from Elasticsearch index mappings.

    Mappings are fetched on ``refresh()``. Lookups read the most recently
    fetched snapshot, so a refresh is visible to the next compile call.
    """

    def __init__(
        self,
        es_client: Elasticsearch,
        indices: Iterable[str],
        array_fields: Optional[Mapping[str, Iterable[str]]] = None,
    ):
        """
        Initialize Elasticsearch field type catalog.

        Args:
            es_client: Elasticsearch client
            indices: Names of the indices to read mappings for
            array_fields: Index name -> names of fields holding lists
        """
        self.es_client = es_client
        self.indices = list(indices)
        self.array_fields = {index: set(fields) for index, fields in (array_fields or {}).items()}
        self._catalog = FieldTypeCatalog()

    def refresh(self) -> None:
        """Fetch the current mapping of every index."""
        for index in self.indices:
            properties = self._get_mapping_properties(index)
            self._catalog.set_index(
                index, normalize_properties(properties, self.array_fields.get(index, set()))
            )
            logger.info("[catalog] loaded %d fields for index %s", len(properties), index)

    def _get_mapping_properties(self, index: str) -> Dict[str, Any]:
        """Extract the top-level ``properties`` block of an index mapping."""
        mappings = self.es_client.indices.get_mapping(index=index)
        # The response is keyed by concrete index name, which differs from
        # ``index`` when an alias is configured
        index_mapping = mappings.get(index) or next(iter(mappings.values()), {})
        return index_mapping.get("mappings", {}).get("properties", {})

    def get_field_types(self, index: str) -> Dict[str, FieldType]:
        return self._catalog.get_field_types(index)

    def get_field_type(self, index: str, field: str) -> Optional[FieldType]:
        return self._catalog.get_field_type(index, field)

    def get_nested_properties(self, index: str, field: str) -> Dict[str, FieldType]:
        return self._catalog.get_nested_properties(index, field)

    def is_array_field(self, index: str, field: str) -> bool:
        return self._catalog.is_array_field(index, field)

    def get_mapping_fields(self, index: str) -> List[str]:
        """Names of the top-level fields of an index."""
        return list(self._catalog.get_field_types(index))
