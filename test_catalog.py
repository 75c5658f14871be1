"""Tests for field type catalogs."""

from unittest.mock import MagicMock

import pytest

from query_gateway.adapters.elasticsearch.schema_extractor import ESFieldTypeCatalog
from query_gateway.core.exceptions import InputError
from query_gateway.core.models import FieldType
from query_gateway.schema.catalog import normalize_properties


def test_normalize_properties():
    field_types = normalize_properties(
        {
            "tags": {"type": "keyword"},
            "address": {"properties": {"city": {"type": "keyword"}}},
            "samples": {"type": "nested", "properties": {"tags": {"type": "keyword"}}},
        },
        {"tags"},
    )

    assert field_types["tags"] == FieldType(es_type="keyword", is_array=True)
    assert field_types["address"].es_type == "object"
    assert field_types["address"].properties == {"city": FieldType(es_type="keyword")}
    assert field_types["samples"].properties["tags"].is_array


def test_catalog_lookups(catalog):
    assert catalog.get_field_type("subject_idx", "age") == FieldType(es_type="integer")
    assert catalog.get_field_type("subject_idx", "height") is None
    assert catalog.get_field_type("other_idx", "age") is None
    assert catalog.is_array_field("subject_idx", "tags")
    assert not catalog.is_array_field("subject_idx", "gender")
    assert list(catalog.get_nested_properties("subject_idx", "samples")) == ["value", "sample_type"]
    assert catalog.get_nested_properties("subject_idx", "age") == {}


def test_unknown_index_is_input_error(catalog):
    with pytest.raises(InputError, match="Unknown index"):
        catalog.get_field_types("other_idx")


def test_es_catalog_reads_mappings():
    es_client = MagicMock()
    es_client.indices.get_mapping.return_value = {
        "subject_idx": {
            "mappings": {
                "properties": {
                    "gender": {"type": "keyword"},
                    "visits": {"type": "long"},
                }
            }
        }
    }
    catalog = ESFieldTypeCatalog(es_client, ["subject_idx"], array_fields={"subject_idx": ["visits"]})
    catalog.refresh()

    es_client.indices.get_mapping.assert_called_once_with(index="subject_idx")
    assert catalog.get_field_type("subject_idx", "gender") == FieldType(es_type="keyword")
    assert catalog.is_array_field("subject_idx", "visits")
    assert catalog.get_mapping_fields("subject_idx") == ["gender", "visits"]


def test_es_catalog_follows_aliases():
    es_client = MagicMock()
    es_client.indices.get_mapping.return_value = {
        "subject_idx_v2": {"mappings": {"properties": {"age": {"type": "integer"}}}}
    }
    catalog = ESFieldTypeCatalog(es_client, ["subject"])
    catalog.refresh()

    assert catalog.get_field_type("subject", "age") == FieldType(es_type="integer")
