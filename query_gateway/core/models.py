"""
Shared data models for the query gateway.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class FieldType(BaseModel):
    """Elasticsearch type information for a single field."""

    es_type: str
    is_array: bool = False
    properties: Optional[Dict[str, "FieldType"]] = None  # For nested/object fields


FieldType.model_rebuild()


class IndexConfig(BaseModel):
    """An Elasticsearch index exposed to clients under a type name."""

    index: str
    type: str


class NumericTextType(str, Enum):
    """Two-way classification of ES field types, driving legal filter operators."""

    TEXT = "text"
    NUMERIC = "numeric"


class Accessibility(str, Enum):
    """Which documents a query should see relative to the caller's resources."""

    ALL = "all"
    ACCESSIBLE = "accessible"
    UNACCESSIBLE = "unaccessible"


class Argument(BaseModel):
    """An argument of a generated field."""

    name: str
    type: str
    default: Optional[str] = None


class FieldDefinition(BaseModel):
    """A field of a generated object type."""

    name: str
    type: str
    arguments: List[Argument] = Field(default_factory=list)
    description: Optional[str] = None


class ObjectType(BaseModel):
    """A generated object type."""

    name: str
    fields: List[FieldDefinition] = Field(default_factory=list)


class EnumType(BaseModel):
    """A generated enum type."""

    name: str
    values: List[str]


class GeneratedSchema(BaseModel):
    """Structural description of the client-facing type system."""

    scalars: List[str] = Field(default_factory=list)
    enums: List[EnumType] = Field(default_factory=list)
    types: List[ObjectType] = Field(default_factory=list)

    def get_type(self, name: str) -> Optional[ObjectType]:
        """Return the object type called ``name``, if generated."""
        for object_type in self.types:
            if object_type.name == name:
                return object_type
        return None
