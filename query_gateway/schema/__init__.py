"""Field type catalog, type mappings and schema generation."""

from query_gateway.schema.type_mappings import TypeMapper
from query_gateway.schema.catalog import FieldTypeCatalog
from query_gateway.schema.generator import SchemaGenerator

__all__ = ["TypeMapper", "FieldTypeCatalog", "SchemaGenerator"]
