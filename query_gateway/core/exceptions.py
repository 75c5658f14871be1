"""
Error types raised by the query gateway.

Both kinds are final: the core never retries them.
"""


class QueryGatewayError(Exception):
    """Base class for gateway errors."""

    status_code = 500


class InputError(QueryGatewayError):
    """The caller's filter, sort or paging arguments are invalid."""

    status_code = 400


class InternalError(QueryGatewayError):
    """The field-type catalog and the gateway's type tables disagree."""

    status_code = 500


class SchemaGenerationError(InternalError):
    """The client-facing schema cannot be generated from the catalog."""
