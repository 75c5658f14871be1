"""
Render a generated schema as GraphQL SDL text.
"""

from typing import List

from query_gateway.core.models import (
    Argument,
    EnumType,
    FieldDefinition,
    GeneratedSchema,
    ObjectType,
)

INDENT = "  "


def _render_argument(argument: Argument) -> str:
    if argument.default is not None:
        return f"{argument.name}: {argument.type} = {argument.default}"
    return f"{argument.name}: {argument.type}"


def _render_field(field: FieldDefinition) -> List[str]:
    lines = []
    if field.description:
        lines.append(f'{INDENT}"""{field.description}"""')
    signature = field.name
    if field.arguments:
        signature += "(" + ", ".join(_render_argument(a) for a in field.arguments) + ")"
    lines.append(f"{INDENT}{signature}: {field.type}")
    return lines


def render_object_type(object_type: ObjectType) -> str:
    lines = [f"type {object_type.name} {{"]
    for field in object_type.fields:
        lines.extend(_render_field(field))
    lines.append("}")
    return "\n".join(lines)


def render_enum_type(enum_type: EnumType) -> str:
    lines = [f"enum {enum_type.name} {{"]
    lines.extend(f"{INDENT}{value}" for value in enum_type.values)
    lines.append("}")
    return "\n".join(lines)


def render_schema(schema: GeneratedSchema) -> str:
    """
    Render scalars, enums and object types, in that order.

    Args:
        schema: Generated schema

    Returns:
        SDL text, one blank line between definitions
    """
    blocks = [f"scalar {name}" for name in schema.scalars]
    blocks.extend(render_enum_type(e) for e in schema.enums)
    blocks.extend(render_object_type(t) for t in schema.types)
    return "\n\n".join(blocks) + "\n"
