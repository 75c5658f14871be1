"""
Client-facing schema generator.

Builds the query, object and aggregation types exposed to API clients from
the field types of the configured Elasticsearch indices.
"""

import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from query_gateway.core.exceptions import SchemaGenerationError
from query_gateway.core.interfaces import IFieldTypeCatalog
from query_gateway.core.models import (
    Argument,
    EnumType,
    FieldDefinition,
    FieldType,
    GeneratedSchema,
    IndexConfig,
    ObjectType,
)
from query_gateway.schema.sdl import render_schema
from query_gateway.schema.type_mappings import TypeMapper

logger = logging.getLogger(__name__)


def first_letter_upper_case(name: str) -> str:
    return name[:1].upper() + name[1:]


def _field(name: str, type_: str, *arguments: Argument, description: Optional[str] = None) -> FieldDefinition:
    return FieldDefinition(name=name, type=type_, arguments=list(arguments), description=description)


ENTRY_POINT_ARGUMENTS = [
    Argument(name="offset", type="Int"),
    Argument(name="first", type="Int"),
    Argument(name="filter", type="JSON"),
    Argument(name="sort", type="JSON"),
    Argument(name="accessibility", type="Accessibility", default="all"),
]

AGGREGATION_ARGUMENTS = [
    Argument(name="filter", type="JSON"),
    Argument(name="filterSelf", type="Boolean", default="true"),
    Argument(name="nestedAggFields", type="JSON"),
    Argument(name="accessibility", type="Accessibility", default="all"),
]

ACCESSIBILITY_ENUM = EnumType(name="Accessibility", values=["all", "accessible", "unaccessible"])

MATCHED_ITEM_TYPE = ObjectType(
    name="MatchedItem",
    fields=[_field("field", "String"), _field("highlights", "[String]")],
)

HISTOGRAM_TYPES = [
    ObjectType(
        name=TypeMapper.HISTOGRAM_FOR_STRING,
        fields=[_field("histogram", "[BucketsForNestedStringAgg]")],
    ),
    ObjectType(
        name=TypeMapper.HISTOGRAM_FOR_NUMBER,
        fields=[
            _field(
                "histogram",
                "[BucketsForNestedNumberAgg]",
                Argument(name="rangeStart", type="Int"),
                Argument(name="rangeEnd", type="Int"),
                Argument(name="rangeStep", type="Int"),
                Argument(name="binCount", type="Int"),
            ),
            _field("asTextHistogram", "[BucketsForNestedStringAgg]"),
        ],
    ),
]

BUCKET_TYPES = [
    ObjectType(
        name="BucketsForNestedStringAgg",
        fields=[
            _field("key", "String"),
            _field("count", "Int"),
            _field("missingFields", "[BucketsForNestedMissingFields]"),
            _field("termsFields", "[BucketsForNestedTermsFields]"),
        ],
    ),
    ObjectType(
        name="BucketsForNestedMissingFields",
        fields=[_field("field", "String"), _field("count", "Int")],
    ),
    ObjectType(
        name="BucketsForNestedTermsFields",
        fields=[_field("field", "String"), _field("terms", "[BucketsForString]")],
    ),
    ObjectType(
        name="BucketsForString",
        fields=[_field("key", "String"), _field("count", "Int")],
    ),
    ObjectType(
        name="BucketsForNestedNumberAgg",
        fields=[
            _field("key", "[Float]", description="Lower and higher bounds for this bucket"),
            _field("min", "Float"),
            _field("max", "Float"),
            _field("avg", "Float"),
            _field("sum", "Float"),
            _field("count", "Int"),
            _field("missingFields", "[BucketsForNestedMissingFields]"),
            _field("termsFields", "[BucketsForNestedTermsFields]"),
        ],
    ),
]


class SchemaGenerator:
    """
    Generates the client-facing type system from a field type catalog.

    Runs once at startup. Any field whose ES type has no client mapping
    aborts generation, so an inconsistent catalog fails the boot instead of
    producing a schema that disagrees with the backend.
    """

    def __init__(self, catalog: IFieldTypeCatalog, indices: List[IndexConfig]):
        """
        Initialize schema generator.

        Args:
            catalog: Field type catalog to read from
            indices: Indices to expose, each under its client type name
        """
        self.catalog = catalog
        self.indices = indices

    def generate(self) -> GeneratedSchema:
        """
        Generate the complete type system.

        Returns:
            GeneratedSchema with every query, object and aggregation type

        Raises:
            SchemaGenerationError: If a field type cannot be mapped, or two
                indices define a nested field of the same name differently
        """
        try:
            TypeMapper.check_consistency()
        except ValueError as e:
            raise SchemaGenerationError(str(e)) from e

        # Nested type name -> (owning index, properties); each type is emitted once
        visited: Dict[str, Tuple[str, Dict[str, FieldType]]] = {}
        query_fields: List[FieldDefinition] = []
        object_types: List[ObjectType] = []
        aggregation_types: List[ObjectType] = []

        for index_config in self.indices:
            nested_types = self._discover_nested_types(index_config.index, visited)
            query_fields.extend(self._get_query_fields(index_config, nested_types))
            object_types.extend(self._get_object_types(index_config, nested_types))
            aggregation_types.append(self._get_aggregation_type(index_config))

        query_fields.append(_field("_aggregation", "Aggregation"))
        query_fields.append(_field("_mapping", "Mapping"))

        types = [MATCHED_ITEM_TYPE, ObjectType(name="Query", fields=query_fields)]
        types.extend(object_types)
        types.append(self._get_aggregation_root_type())
        types.extend(aggregation_types)
        types.extend(HISTOGRAM_TYPES)
        types.extend(BUCKET_TYPES)
        types.append(self._get_mapping_type())

        schema = GeneratedSchema(
            scalars=["JSON", TypeMapper.OBJECT_TYPE], enums=[ACCESSIBILITY_ENUM], types=types
        )
        logger.info("[schema] graphql schema generated.")
        return schema

    def build_schema_string(self) -> str:
        """Generate the type system and render it as SDL text."""
        schema_str = render_schema(self.generate())
        logger.debug("[schema] graphql schema %s", schema_str)
        return schema_str

    def _get_graphql_type(
        self, index: str, field: str, field_type: FieldType, is_array: bool
    ) -> str:
        """Map one field to its client type."""
        graphql_type = TypeMapper.get_graphql_type(field_type.es_type)
        if graphql_type is None:
            raise SchemaGenerationError(
                f"Invalid type {field_type.es_type} for field {field} in index {index}"
            )
        if field_type.es_type == "nested":
            return f"[{first_letter_upper_case(field)}]"
        if is_array:
            return f"[{graphql_type}]"
        return graphql_type

    def _get_index_field_definitions(self, index: str) -> List[FieldDefinition]:
        """Top-level fields of an index; array-ness comes from the catalog."""
        return [
            _field(
                field,
                self._get_graphql_type(
                    index, field, field_type, self.catalog.is_array_field(index, field)
                ),
            )
            for field, field_type in self.catalog.get_field_types(index).items()
        ]

    def _get_nested_field_definitions(
        self, index: str, properties: Dict[str, FieldType]
    ) -> List[FieldDefinition]:
        return [
            _field(field, self._get_graphql_type(index, field, field_type, field_type.is_array))
            for field, field_type in properties.items()
        ]

    @staticmethod
    def _claim_nested_type(
        index: str,
        field: str,
        properties: Dict[str, FieldType],
        visited: Dict[str, Tuple[str, Dict[str, FieldType]]],
    ) -> bool:
        """
        Record a nested field as the owner of its type name.

        Returns:
            True if the type still has to be emitted

        Raises:
            SchemaGenerationError: If another index already owns the type
                name with different properties
        """
        if field not in visited:
            visited[field] = (index, properties)
            return True
        owner, known_properties = visited[field]
        if owner != index and known_properties != properties:
            raise SchemaGenerationError(
                f"Nested field {field} in index {index} conflicts with "
                f"nested field {field} in index {owner}"
            )
        return False

    def _discover_nested_types(
        self, index: str, visited: Dict[str, Tuple[str, Dict[str, FieldType]]]
    ) -> List[Tuple[str, Dict[str, FieldType]]]:
        """
        Breadth-first walk over nested fields.

        Seeds the worklist with the index's top-level nested fields and
        enqueues nested sub-fields as they are found. A field name already
        in ``visited`` is never expanded again, which bounds the walk even
        when nested mappings reuse names. Indices may share a nested type
        only when its properties are identical.

        Returns:
            (field name, sub-properties) for each nested type, in BFS order
        """
        queue: Deque[Tuple[str, Dict[str, FieldType]]] = deque()
        for field, field_type in self.catalog.get_field_types(index).items():
            if field_type.es_type != "nested":
                continue
            properties = self.catalog.get_nested_properties(index, field)
            if self._claim_nested_type(index, field, properties, visited):
                queue.append((field, properties))

        discovered = []
        while queue:
            field, properties = queue.popleft()
            discovered.append((field, properties))
            for sub_field, sub_type in properties.items():
                if sub_type.es_type != "nested":
                    continue
                sub_properties = sub_type.properties or {}
                if self._claim_nested_type(index, sub_field, sub_properties, visited):
                    queue.append((sub_field, sub_properties))
        return discovered

    def _get_query_fields(
        self,
        index_config: IndexConfig,
        nested_types: List[Tuple[str, Dict[str, FieldType]]],
    ) -> List[FieldDefinition]:
        """Entry points for the index and, with the same arguments, its nested fields."""
        fields = [
            FieldDefinition(
                name=index_config.type,
                type=f"[{first_letter_upper_case(index_config.type)}]",
                arguments=list(ENTRY_POINT_ARGUMENTS),
            )
        ]
        for field, _ in nested_types:
            fields.append(
                FieldDefinition(
                    name=field,
                    type=f"[{first_letter_upper_case(field)}]",
                    arguments=list(ENTRY_POINT_ARGUMENTS),
                )
            )
        return fields

    def _get_object_types(
        self,
        index_config: IndexConfig,
        nested_types: List[Tuple[str, Dict[str, FieldType]]],
    ) -> List[ObjectType]:
        index = index_config.index
        fields = self._get_index_field_definitions(index)
        fields.append(_field("_matched", "[MatchedItem]"))
        object_types = [ObjectType(name=first_letter_upper_case(index_config.type), fields=fields)]

        for field, properties in nested_types:
            object_types.append(
                ObjectType(
                    name=first_letter_upper_case(field),
                    fields=self._get_nested_field_definitions(index, properties),
                )
            )
        return object_types

    def _get_aggregation_type(self, index_config: IndexConfig) -> ObjectType:
        """Histogram entries for every aggregatable field; nested and object fields are left out."""
        index = index_config.index
        fields = [_field("_totalCount", "Int")]
        for entry in self._get_index_field_definitions(index):
            histogram_type = TypeMapper.get_histogram_type(entry.type)
            if histogram_type:
                fields.append(_field(entry.name, histogram_type))
        return ObjectType(
            name=f"{first_letter_upper_case(index_config.type)}Aggregation",
            fields=fields,
        )

    def _get_aggregation_root_type(self) -> ObjectType:
        return ObjectType(
            name="Aggregation",
            fields=[
                FieldDefinition(
                    name=cfg.type,
                    type=f"{first_letter_upper_case(cfg.type)}Aggregation",
                    arguments=list(AGGREGATION_ARGUMENTS),
                )
                for cfg in self.indices
            ],
        )

    def _get_mapping_type(self) -> ObjectType:
        return ObjectType(
            name="Mapping",
            fields=[_field(cfg.type, "[String]") for cfg in self.indices],
        )
