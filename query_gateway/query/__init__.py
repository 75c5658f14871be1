"""Filter parsing and query compilation."""

from query_gateway.core.operators import Operator
from query_gateway.query.filter_builder import FilterParser
from query_gateway.query.translator import QueryTranslator

__all__ = ["FilterParser", "Operator", "QueryTranslator"]
