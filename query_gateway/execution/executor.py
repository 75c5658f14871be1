"""
Query execution coordinator.

Compiles client arguments and hands the result to the backend executor,
enforcing the page-size ceiling on bounded queries.
"""

from typing import Any, Dict, Iterator, List, Optional

from query_gateway.core.exceptions import InputError
from query_gateway.core.interfaces import IQueryExecutor
from query_gateway.query.translator import FilterArg, QueryTranslator, SortArg

SCROLL_PAGE_SIZE = 10000


class QueryExecutor:
    """
    Runs bounded, counting and streaming queries.

    Compilation always happens before the backend is called, so an invalid
    filter or sort never reaches Elasticsearch.
    """

    def __init__(
        self,
        translator: QueryTranslator,
        executor: IQueryExecutor,
        page_size_ceiling: int = SCROLL_PAGE_SIZE,
    ):
        """
        Initialize query executor.

        Args:
            translator: Filter/sort compiler
            executor: Backend executor implementation
            page_size_ceiling: Largest ``offset + size`` a bounded query may ask for
        """
        self.translator = translator
        self.executor = executor
        self.page_size_ceiling = page_size_ceiling

    def get_data(
        self,
        index: str,
        filter_obj: FilterArg = None,
        fields: Optional[List[str]] = None,
        sort: SortArg = None,
        offset: int = 0,
        size: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch one page of documents.

        Args:
            index: Elasticsearch index name
            filter_obj: Client filter
            fields: Source fields to return
            sort: Client sort
            offset: Index of the first document
            size: Number of documents

        Returns:
            Document sources

        Raises:
            InputError: If ``offset + size`` exceeds the page-size ceiling
        """
        if size is not None and offset + size > self.page_size_ceiling:
            raise InputError(
                f"Large graphql query forbidden for offset + size > {self.page_size_ceiling}, "
                f"offset = {offset} and size = {size}, "
                "please use download endpoint for large data queries instead."
            )
        body = self.translator.build_query_body(
            index, filter_obj=filter_obj, fields=fields, sort=sort, offset=offset, size=size
        )
        result = self.executor.execute(index, body)
        return [item["_source"] for item in result["hits"]["hits"]]

    def get_count(self, index: str, filter_obj: FilterArg = None) -> int:
        """Count the documents matching a client filter."""
        query = self.translator.compile_filter(index, filter_obj)
        return self.executor.count(index, query)

    def get_data_using_scroll(
        self,
        index: str,
        filter_obj: FilterArg = None,
        fields: Optional[List[str]] = None,
        sort: SortArg = None,
    ) -> Iterator[Dict[str, Any]]:
        """
        Stream every matching document, with no page-size ceiling.

        Filter and sort are compiled eagerly; only the returned iterator
        touches the backend.
        """
        query = self.translator.compile_filter(index, filter_obj)
        sort_body = self.translator.compile_sort(index, sort)
        return self.executor.stream(index, query=query, fields=fields, sort=sort_body)
