"""
Elasticsearch query executor.

Runs compiled request bodies and scrolls through large result sets.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from elasticsearch import Elasticsearch

logger = logging.getLogger(__name__)

# Request body keys that the client takes under a different keyword
_BODY_KEYWORDS = {
    "from": "from_",
    "_source": "source",
}


def _search_kwargs(body: Dict[str, Any]) -> Dict[str, Any]:
    return {_BODY_KEYWORDS.get(key, key): value for key, value in body.items()}


def _total_hits(hits: Dict[str, Any]) -> int:
    total = hits.get("total", 0)
    if isinstance(total, dict):
        return total.get("value", 0)
    return total


class ESQueryExecutor:
    """
    Executes Elasticsearch queries.

    Implements the IQueryExecutor interface for Elasticsearch.
    """

    def __init__(
        self,
        es_client: Elasticsearch,
        scroll_batch_size: int = 1000,
        scroll_keep_alive: str = "1m",
    ):
        """
        Initialize Elasticsearch query executor.

        Args:
            es_client: Elasticsearch client
            scroll_batch_size: Documents fetched per scroll page
            scroll_keep_alive: How long ES keeps the scroll context between pages
        """
        self.es_client = es_client
        self.scroll_batch_size = scroll_batch_size
        self.scroll_keep_alive = scroll_keep_alive

    def execute(self, index: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute a bounded search.

        Args:
            index: Index to search
            body: Request body

        Returns:
            {"hits": {"total": int, "hits": [...]}}
        """
        response = self.es_client.search(index=index, **_search_kwargs(body))
        hits = response["hits"]
        return {"hits": {"total": _total_hits(hits), "hits": hits["hits"]}}

    def count(self, index: str, query: Optional[Dict[str, Any]] = None) -> int:
        """Count documents matching a query fragment (all documents if None)."""
        if query is None:
            response = self.es_client.count(index=index)
        else:
            response = self.es_client.count(index=index, query=query)
        return response["count"]

    def stream(
        self,
        index: str,
        query: Optional[Dict[str, Any]] = None,
        fields: Optional[List[str]] = None,
        sort: Optional[List[Dict[str, str]]] = None,
    ) -> Iterator[Dict[str, Any]]:
        """
        Yield the source of every matching document using the scroll API.

        Pages of ``scroll_batch_size`` are fetched until one comes back
        empty. The scroll context is cleared when the generator finishes or
        is closed early.

        Args:
            index: Index to search
            query: Compiled query fragment (all documents if None)
            fields: Source fields to return
            sort: Compiled sort

        Yields:
            Document sources
        """
        body: Dict[str, Any] = {"size": self.scroll_batch_size}
        if query is not None:
            body["query"] = query
        if fields:
            body["_source"] = fields
        if sort:
            body["sort"] = sort

        response = self.es_client.search(
            index=index, scroll=self.scroll_keep_alive, **_search_kwargs(body)
        )
        scroll_id = response.get("_scroll_id")
        fetched = 0
        try:
            while True:
                batch = response["hits"]["hits"]
                if not batch:
                    break
                fetched += len(batch)
                logger.debug("[scroll] index %s: %d documents fetched", index, fetched)
                for hit in batch:
                    yield hit["_source"]
                response = self.es_client.scroll(
                    scroll_id=scroll_id, scroll=self.scroll_keep_alive
                )
                scroll_id = response.get("_scroll_id", scroll_id)
        finally:
            if scroll_id:
                self.es_client.clear_scroll(scroll_id=scroll_id)

    def get_distinct_values(self, index: str, field: str, size: int = 1000) -> List[Any]:
        """
        Get every distinct value of a keyword field.

        Pages through a composite aggregation, so the result is not capped
        by the page size.

        Args:
            index: Index to search
            field: Field to aggregate
            size: Buckets fetched per request

        Returns:
            Distinct values in ascending order
        """
        composite: Dict[str, Any] = {
            "size": size,
            "sources": [{"value": {"terms": {"field": field}}}],
        }
        values: List[Any] = []
        while True:
            response = self.es_client.search(
                index=index, size=0, aggs={"distinct_values": {"composite": composite}}
            )
            aggregation = response.get("aggregations", {}).get("distinct_values", {})
            buckets = aggregation.get("buckets", [])
            values.extend(bucket["key"]["value"] for bucket in buckets)
            after_key = aggregation.get("after_key")
            if not buckets or after_key is None:
                break
            composite = dict(composite, after=after_key)
        logger.debug("[distinct] index %s field %s: %d values", index, field, len(values))
        return values
