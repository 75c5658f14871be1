"""Core interfaces, models and errors for the query gateway."""

from query_gateway.core.exceptions import (
    InputError,
    InternalError,
    QueryGatewayError,
    SchemaGenerationError,
)
from query_gateway.core.interfaces import (
    IFieldTypeCatalog,
    IQueryExecutor,
)
from query_gateway.core.models import (
    Accessibility,
    FieldType,
    GeneratedSchema,
    IndexConfig,
    NumericTextType,
)

__all__ = [
    "IFieldTypeCatalog",
    "IQueryExecutor",
    "Accessibility",
    "FieldType",
    "GeneratedSchema",
    "IndexConfig",
    "NumericTextType",
    "InputError",
    "InternalError",
    "QueryGatewayError",
    "SchemaGenerationError",
]
