"""
Filter and sort compilation.

Translates client filter/sort arguments into Elasticsearch request bodies,
validating every field against the field type catalog.
"""

from typing import Any, Dict, List, Optional, Union

from query_gateway.adapters.elasticsearch.query_translator import ESQueryTranslator
from query_gateway.core.exceptions import InputError, InternalError
from query_gateway.core.interfaces import IFieldTypeCatalog
from query_gateway.core.models import NumericTextType
from query_gateway.query.filter_builder import (
    FILTER_SYNTAX_ERROR,
    Conjunction,
    Disjunction,
    FilterExpression,
    FilterParser,
    Leaf,
)
from query_gateway.schema.type_mappings import TypeMapper

FilterArg = Union[Dict[str, Any], FilterExpression, None]
SortArg = Union[List[Dict[str, str]], Dict[str, str], None]

SORT_DIRECTIONS = ("asc", "desc")


class QueryTranslator:
    """
    Compiles filters and sorts for one field type catalog.

    Holds no per-request state: the catalog is read on every call, and
    concurrent calls share nothing mutable.
    """

    def __init__(
        self,
        catalog: IFieldTypeCatalog,
        translator: Optional[ESQueryTranslator] = None,
    ):
        """
        Initialize query translator.

        Args:
            catalog: Field type catalog used for validation
            translator: Elasticsearch clause builder
        """
        self.catalog = catalog
        self.translator = translator or ESQueryTranslator()

    def compile_filter(
        self,
        index: str,
        filter_obj: FilterArg,
        target_field: Optional[str] = None,
        filter_self: bool = True,
        default_auth_filter: FilterArg = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Compile a filter into an ES query fragment.

        The tree is parsed top-down and the fragments combined bottom-up.
        Children that compile to nothing are dropped, and a combinator with
        no surviving children compiles to None rather than an empty bool.

        Args:
            index: Elasticsearch index name
            filter_obj: Client filter (wire mapping or parsed expression)
            target_field: Field being aggregated, for aggregation queries
            filter_self: Whether the aggregated field's own filter applies
            default_auth_filter: Authorization filter substituted for the
                aggregated field's own filter when ``filter_self`` is False

        Returns:
            ES query fragment, or None for an absent or empty filter

        Raises:
            InputError: Malformed filter, unknown field, or illegal operator
            InternalError: The field's ES type has no classification
        """
        expression = FilterParser.parse(filter_obj)
        if expression is None:
            return None

        if isinstance(expression, (Conjunction, Disjunction)):
            connective = "and" if isinstance(expression, Conjunction) else "or"
            fragments = []
            for child in expression.children:
                fragment = self.compile_filter(
                    index, child, target_field, filter_self, default_auth_filter
                )
                if fragment:
                    fragments.append(fragment)
            if not fragments:
                return None
            return self.translator.combine(connective, fragments)

        if isinstance(expression, Leaf):
            if target_field == expression.field and not filter_self:
                # An aggregation is never narrowed by its own field's filter,
                # but authorization still applies.
                return self.compile_filter(index, default_auth_filter)
            return self._compile_leaf(index, expression)

        raise InputError(FILTER_SYNTAX_ERROR)

    def compile_aggregation_filter(
        self,
        index: str,
        filter_obj: FilterArg,
        target_field: str,
        filter_self: bool = True,
        default_auth_filter: FilterArg = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Compile the filter for one field's aggregation.

        The authorization filter always scopes the result: it is ANDed with
        the client filter, or takes the place of the target field's own
        filter when ``filter_self`` is False. No AND is added when that
        substitution already sits on a path of conjunctions from the root.
        """
        expression = FilterParser.parse(filter_obj)
        client_fragment = self.compile_filter(
            index, expression, target_field, filter_self, default_auth_filter
        )
        auth_fragment = self.compile_filter(index, default_auth_filter)
        if auth_fragment is None or auth_fragment == client_fragment:
            return client_fragment
        if client_fragment is None:
            return auth_fragment
        if not filter_self and self._requires_field(expression, target_field):
            return client_fragment
        return self.translator.combine("and", [client_fragment, auth_fragment])

    def compile_sort(self, index: str, sort: SortArg) -> Optional[List[Dict[str, str]]]:
        """
        Normalize and validate a sort argument.

        Args:
            index: Elasticsearch index name
            sort: List of {field: direction} or a {field: direction} mapping

        Returns:
            Ordered list of {field: direction}, or None if no sort was given

        Raises:
            InputError: On any invalid entry; no partial sort is returned
        """
        if sort is None:
            return None
        if isinstance(sort, dict):
            sort = [{field: direction} for field, direction in sort.items()]
        if not isinstance(sort, list):
            raise InputError("Invalid sort argument")

        for entry in sort:
            if not isinstance(entry, dict) or len(entry) != 1:
                raise InputError("Invalid sort argument")
            field, direction = next(iter(entry.items()))
            if self.catalog.get_field_type(index, field) is None:
                raise InputError("Invalid sort argument")
            if direction not in SORT_DIRECTIONS:
                raise InputError("Invalid sort argument")
        return [dict(entry) for entry in sort]

    def build_query_body(
        self,
        index: str,
        filter_obj: FilterArg = None,
        fields: Optional[List[str]] = None,
        sort: SortArg = None,
        offset: int = 0,
        size: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Assemble a search request body.

        Args:
            index: Elasticsearch index name
            filter_obj: Client filter
            fields: Source fields to return; all fields when empty
            sort: Client sort
            offset: Index of the first hit
            size: Maximum number of hits

        Returns:
            ES request body
        """
        body: Dict[str, Any] = {"from": offset}
        query = self.compile_filter(index, filter_obj)
        if query is not None:
            body["query"] = query
        sort_body = self.compile_sort(index, sort)
        if sort_body is not None:
            body["sort"] = sort_body
        if size is not None:
            body["size"] = size
        if fields:
            body["_source"] = fields
        return body

    def _compile_leaf(self, index: str, leaf: Leaf) -> Dict[str, Any]:
        field_type = self.catalog.get_field_type(index, leaf.field)
        if field_type is None:
            raise InputError(
                f'{FILTER_SYNTAX_ERROR}: unknown field "{leaf.field}"'
            )

        numeric_text_type = TypeMapper.get_numeric_text_type(field_type.es_type)
        if numeric_text_type is NumericTextType.TEXT:
            return self.translator.text_clause(leaf.op, leaf.field, leaf.value)
        if numeric_text_type is NumericTextType.NUMERIC:
            return self.translator.numeric_clause(leaf.op, leaf.field, leaf.value)
        raise InternalError(f"ES type {field_type.es_type} not supported.")

    @classmethod
    def _requires_field(cls, expression: Optional[FilterExpression], field: str) -> bool:
        """Whether every match of ``expression`` goes through a leaf on ``field``."""
        if isinstance(expression, Leaf):
            return expression.field == field
        if isinstance(expression, Conjunction):
            return any(cls._requires_field(child, field) for child in expression.children)
        return False
