"""
Elasticsearch clause builders.

Turns single filter leaves into term/terms/range clauses and combines
compiled fragments with bool queries.
"""

from typing import Any, Dict, FrozenSet, List

from query_gateway.core.exceptions import InputError
from query_gateway.core.operators import Operator, resolve_operator


class ESQueryTranslator:
    """
    Builds Elasticsearch DSL fragments.

    Each field class has a closed set of legal operators; anything else is
    rejected with an input error naming the operator as the client sent it.
    """

    TEXT_OPERATORS: FrozenSet[Operator] = frozenset({Operator.EQ, Operator.IN})
    NUMERIC_OPERATORS: FrozenSet[Operator] = frozenset(Operator)

    RANGE_KEYWORDS: Dict[Operator, str] = {
        Operator.GT: "gt",
        Operator.GTE: "gte",
        Operator.LT: "lt",
        Operator.LTE: "lte",
    }

    BOOL_KEYWORDS: Dict[str, str] = {
        "and": "must",
        "or": "should",
    }

    def text_clause(self, op: str, field: str, value: Any) -> Dict[str, Any]:
        """
        Build a clause for a text/keyword field.

        Args:
            op: Operator as sent by the client
            field: Field name
            value: Filter value

        Returns:
            ES term or terms clause
        """
        operator = resolve_operator(op)
        if operator not in self.TEXT_OPERATORS:
            raise InputError(f'Invalid operation "{op}" in filter argument.')
        return self._match_clause(operator, field, value)

    def numeric_clause(self, op: str, field: str, value: Any) -> Dict[str, Any]:
        """
        Build a clause for a numeric field.

        Args:
            op: Operator as sent by the client
            field: Field name
            value: Filter value

        Returns:
            ES term, terms or single-bound range clause
        """
        operator = resolve_operator(op)
        if operator not in self.NUMERIC_OPERATORS:
            raise InputError(
                f'Invalid numeric operation "{op}" for field "{field}" in filter argument'
            )
        if operator in self.RANGE_KEYWORDS:
            return {"range": {field: {self.RANGE_KEYWORDS[operator]: value}}}
        return self._match_clause(operator, field, value)

    def combine(self, connective: str, fragments: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Join compiled fragments under ``must`` (and) or ``should`` (or)."""
        return {"bool": {self.BOOL_KEYWORDS[connective]: fragments}}

    @staticmethod
    def _match_clause(operator: Operator, field: str, value: Any) -> Dict[str, Any]:
        if operator is Operator.IN:
            return {"terms": {field: value}}
        return {"term": {field: value}}
