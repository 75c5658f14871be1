"""
Abstract interfaces for the gateway's collaborators.

These protocols define what the compiler and schema generator need from
the field-type catalog and from the backend client.
"""

from typing import Any, Dict, Iterator, List, Optional, Protocol

from query_gateway.core.models import FieldType


class IFieldTypeCatalog(Protocol):
    """
    Read-only access to per-index field type information.

    The compiler consults the catalog on every call and never caches it,
    so a refreshed catalog is visible to the next request.
    """

    def get_field_types(self, index: str) -> Dict[str, FieldType]:
        """
        Get all top-level fields of an index.

        Args:
            index: Elasticsearch index name

        Returns:
            Ordered mapping of field name to FieldType
        """
        ...

    def get_field_type(self, index: str, field: str) -> Optional[FieldType]:
        """
        Get a single field's type.

        Args:
            index: Elasticsearch index name
            field: Field name

        Returns:
            The FieldType, or None when the index or field is unknown
        """
        ...

    def get_nested_properties(self, index: str, field: str) -> Dict[str, FieldType]:
        """Get the sub-properties of a nested or object field."""
        ...

    def is_array_field(self, index: str, field: str) -> bool:
        """Tell whether a field holds a list of values."""
        ...


class IQueryExecutor(Protocol):
    """
    Execute compiled queries against the search backend.
    """

    def execute(self, index: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute a bounded query.

        Args:
            index: Elasticsearch index name
            body: Request body built by the query translator

        Returns:
            Dictionary of the form {"hits": {"total": int, "hits": [{"_source": {...}}]}}
        """
        ...

    def count(self, index: str, query: Optional[Dict[str, Any]] = None) -> int:
        """Count documents matching a compiled query fragment."""
        ...

    def stream(
        self,
        index: str,
        query: Optional[Dict[str, Any]] = None,
        fields: Optional[List[str]] = None,
        sort: Optional[List[Dict[str, str]]] = None,
    ) -> Iterator[Dict[str, Any]]:
        """
        Lazily yield every matching document, paginating internally.

        The returned iterator is forward-only and cannot be restarted.
        Closing it cancels the underlying scroll.
        """
        ...

    def get_distinct_values(self, index: str, field: str, size: int = 1000) -> List[Any]:
        """Get the distinct values of a field."""
        ...
