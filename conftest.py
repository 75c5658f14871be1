"""Shared fixtures: synthetic field type catalogs and a recording executor."""

from typing import Any, Dict, List, Optional

import pytest

from query_gateway.core.models import IndexConfig
from query_gateway.schema.catalog import FieldTypeCatalog

SUBJECT_MAPPING = {
    "gender": {"type": "keyword"},
    "name": {"type": "text"},
    "age": {"type": "integer"},
    "bmi": {"type": "float"},
    "visits": {"type": "long"},
    "tags": {"type": "keyword"},
    "auth_resource_path": {"type": "keyword"},
    "samples": {
        "type": "nested",
        "properties": {
            "value": {"type": "integer"},
            "sample_type": {"type": "keyword"},
        },
    },
}


class FakeExecutor:
    """Records every call and serves a fixed list of documents."""

    def __init__(self, documents: Optional[List[Dict[str, Any]]] = None, distinct_values=None):
        self.documents = documents or []
        self.distinct_values = distinct_values or []
        self.calls: List[tuple] = []

    def execute(self, index, body):
        self.calls.append(("execute", index, body))
        return {
            "hits": {
                "total": len(self.documents),
                "hits": [{"_source": doc} for doc in self.documents],
            }
        }

    def count(self, index, query=None):
        self.calls.append(("count", index, query))
        return len(self.documents)

    def stream(self, index, query=None, fields=None, sort=None):
        self.calls.append(("stream", index, query, fields, sort))
        return iter(self.documents)

    def get_distinct_values(self, index, field, size=1000):
        self.calls.append(("distinct", index, field))
        return self.distinct_values


@pytest.fixture
def catalog():
    return FieldTypeCatalog.from_es_mappings(
        {"subject_idx": SUBJECT_MAPPING},
        array_fields={"subject_idx": ["tags"]},
    )


@pytest.fixture
def indices():
    return [IndexConfig(index="subject_idx", type="subject")]


@pytest.fixture
def documents():
    return [
        {"gender": "female", "age": 31, "auth_resource_path": "/programs/a"},
        {"gender": "male", "age": 45, "auth_resource_path": "/programs/b"},
    ]


@pytest.fixture
def fake_executor(documents):
    return FakeExecutor(documents, distinct_values=["/programs/a", "/programs/b", "/programs/c"])
