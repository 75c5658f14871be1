"""
In-memory field type catalog.

Holds per-index field types, either given directly or converted from the
``properties`` block of an Elasticsearch mapping.
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from query_gateway.core.exceptions import InputError
from query_gateway.core.models import FieldType


class FieldTypeCatalog:
    """
    Field types for a set of indices.

    Implements the IFieldTypeCatalog interface. Lookups go straight to the
    underlying mapping, so ``set_index`` replacements are seen immediately.
    """

    def __init__(self, field_types: Optional[Dict[str, Dict[str, FieldType]]] = None):
        """
        Initialize catalog.

        Args:
            field_types: Mapping of index name to (field name -> FieldType)
        """
        self._field_types: Dict[str, Dict[str, FieldType]] = dict(field_types or {})

    @classmethod
    def from_es_mappings(
        cls,
        mappings: Mapping[str, Dict[str, Any]],
        array_fields: Optional[Mapping[str, Iterable[str]]] = None,
    ) -> "FieldTypeCatalog":
        """
        Build a catalog from ES mapping properties.

        Args:
            mappings: Index name -> mapping ``properties`` block
            array_fields: Index name -> names of fields holding lists

        Returns:
            Populated catalog
        """
        array_fields = array_fields or {}
        catalog = cls()
        for index, properties in mappings.items():
            catalog.set_index(
                index,
                normalize_properties(properties, set(array_fields.get(index, []))),
            )
        return catalog

    def set_index(self, index: str, field_types: Dict[str, FieldType]) -> None:
        """Replace the field types of one index."""
        self._field_types[index] = field_types

    def get_field_types(self, index: str) -> Dict[str, FieldType]:
        if index not in self._field_types:
            raise InputError(f"Unknown index {index}")
        return self._field_types[index]

    def get_field_type(self, index: str, field: str) -> Optional[FieldType]:
        return self._field_types.get(index, {}).get(field)

    def get_nested_properties(self, index: str, field: str) -> Dict[str, FieldType]:
        field_type = self.get_field_type(index, field)
        if field_type is None or not field_type.properties:
            return {}
        return field_type.properties

    def is_array_field(self, index: str, field: str) -> bool:
        field_type = self.get_field_type(index, field)
        return bool(field_type and field_type.is_array)


def normalize_properties(
    properties: Dict[str, Any], array_fields: Optional[set] = None
) -> Dict[str, FieldType]:
    """
    Convert an ES ``properties`` block into FieldTypes.

    Fields without an explicit type but with sub-properties are ES objects.
    Array-ness is looked up by field name, at every nesting level.

    Args:
        properties: ES mapping properties
        array_fields: Names of fields holding lists

    Returns:
        Ordered mapping of field name to FieldType
    """
    array_fields = array_fields or set()
    field_types: Dict[str, FieldType] = {}

    for field_name, field_props in properties.items():
        es_type = field_props.get("type", "object")
        sub_properties = None
        if "properties" in field_props:
            sub_properties = normalize_properties(field_props["properties"], array_fields)
        field_types[field_name] = FieldType(
            es_type=es_type,
            is_array=field_name in array_fields,
            properties=sub_properties,
        )

    return field_types
