"""
Type mapping utilities for converting Elasticsearch types to client types.
"""

from typing import Dict, Optional

from query_gateway.core.models import NumericTextType


class TypeMapper:
    """Maps Elasticsearch field types to client scalars and filter classes."""

    OBJECT_TYPE = "Object"

    # Client scalar for each ES type
    ES_GRAPHQL_TYPE_MAP: Dict[str, str] = {
        "text": "String",
        "keyword": "String",
        "integer": "Int",
        "long": "Float",
        "short": "Int",
        "byte": "Int",
        "double": "Float",
        "float": "Float",
        "half_float": "Float",
        "scaled_float": "Float",
        "array": OBJECT_TYPE,
        "object": OBJECT_TYPE,
        "nested": OBJECT_TYPE,
    }

    # Which operator set a filterable ES type accepts
    ES_NUMERIC_TEXT_TYPE_MAP: Dict[str, NumericTextType] = {
        "text": NumericTextType.TEXT,
        "keyword": NumericTextType.TEXT,
        "integer": NumericTextType.NUMERIC,
        "long": NumericTextType.NUMERIC,
        "short": NumericTextType.NUMERIC,
        "byte": NumericTextType.NUMERIC,
        "double": NumericTextType.NUMERIC,
        "float": NumericTextType.NUMERIC,
        "half_float": NumericTextType.NUMERIC,
        "scaled_float": NumericTextType.NUMERIC,
    }

    HISTOGRAM_FOR_STRING = "HistogramForString"
    HISTOGRAM_FOR_NUMBER = "HistogramForNumber"

    GRAPHQL_HISTOGRAM_TYPE_MAP: Dict[str, str] = {
        "String": HISTOGRAM_FOR_STRING,
        "Int": HISTOGRAM_FOR_NUMBER,
        "Float": HISTOGRAM_FOR_NUMBER,
        "[String]": HISTOGRAM_FOR_STRING,
        "[Int]": HISTOGRAM_FOR_NUMBER,
        "[Float]": HISTOGRAM_FOR_NUMBER,
    }

    @classmethod
    def get_graphql_type(cls, es_type: str) -> Optional[str]:
        """
        Get the client scalar for an ES type.

        Args:
            es_type: Elasticsearch field type

        Returns:
            Client type name, or None if the type is not supported
        """
        return cls.ES_GRAPHQL_TYPE_MAP.get(es_type)

    @classmethod
    def get_numeric_text_type(cls, es_type: str) -> Optional[NumericTextType]:
        """Get the filter classification for an ES type, or None if unsupported."""
        return cls.ES_NUMERIC_TEXT_TYPE_MAP.get(es_type)

    @classmethod
    def get_histogram_type(cls, graphql_type: str) -> Optional[str]:
        """Get the aggregation type for a client type; None when not aggregatable."""
        return cls.GRAPHQL_HISTOGRAM_TYPE_MAP.get(graphql_type)

    @classmethod
    def check_consistency(cls) -> None:
        """
        Verify that every scalar ES type is both filterable and aggregatable.

        Raises:
            ValueError: If the tables have drifted apart
        """
        for es_type, graphql_type in cls.ES_GRAPHQL_TYPE_MAP.items():
            if graphql_type == cls.OBJECT_TYPE:
                continue
            if es_type not in cls.ES_NUMERIC_TEXT_TYPE_MAP:
                raise ValueError(f"ES type {es_type} has no filter classification")
            if graphql_type not in cls.GRAPHQL_HISTOGRAM_TYPE_MAP:
                raise ValueError(f"Client type {graphql_type} has no histogram type")
        for es_type in cls.ES_NUMERIC_TEXT_TYPE_MAP:
            if es_type not in cls.ES_GRAPHQL_TYPE_MAP:
                raise ValueError(f"ES type {es_type} has no client type")
