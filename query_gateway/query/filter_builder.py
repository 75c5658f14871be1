"""
Parse client filter arguments into filter expressions.

The wire form is a nested mapping whose keys are operators:
``{"AND": [...]}``, ``{"or": [...]}`` or ``{"<op>": {"<field>": value}}``.
It is parsed once into a tagged expression tree before compilation.
"""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from query_gateway.core.exceptions import InputError

FILTER_SYNTAX_ERROR = 'Please check your syntax for input "filter" argument'

# Deepest combinator nesting accepted from a client
MAX_FILTER_DEPTH = 64


class Leaf(BaseModel):
    """One operator applied to one field and value."""

    model_config = ConfigDict(frozen=True)

    op: str  # as sent by the client
    field: str
    value: Any = None



class Conjunction(BaseModel):
    """All children must match."""

    model_config = ConfigDict(frozen=True)

    children: List["FilterExpression"]


class Disjunction(BaseModel):
    """At least one child must match."""

    model_config = ConfigDict(frozen=True)

    children: List["FilterExpression"]


FilterExpression = Union[Conjunction, Disjunction, Leaf]

Conjunction.model_rebuild()
Disjunction.model_rebuild()


class FilterParser:
    """
    Builds filter expressions from client filter arguments.

    Only the shape is checked here. Fields and operators are validated by
    the compiler against the field type catalog.
    """

    @classmethod
    def parse(cls, filter_obj: Any, depth: int = 0) -> Optional[FilterExpression]:
        """
        Parse a wire filter.

        Args:
            filter_obj: Filter mapping, an already parsed expression, or None
            depth: Combinator nesting level of ``filter_obj``

        Returns:
            Filter expression, or None for an absent or empty filter

        Raises:
            InputError: If a level does not have exactly one key, or
                combinators nest deeper than MAX_FILTER_DEPTH
        """
        if filter_obj is None:
            return None
        if isinstance(filter_obj, (Conjunction, Disjunction, Leaf)):
            return filter_obj
        if not isinstance(filter_obj, dict):
            raise InputError(FILTER_SYNTAX_ERROR)
        if not filter_obj:
            return None
        if len(filter_obj) != 1:
            raise InputError(FILTER_SYNTAX_ERROR)

        top_level_op, operand = next(iter(filter_obj.items()))
        top_level_op_lower = str(top_level_op).lower()

        if top_level_op_lower in ("and", "or"):
            if depth >= MAX_FILTER_DEPTH:
                raise InputError(
                    f"{FILTER_SYNTAX_ERROR}: nested deeper than {MAX_FILTER_DEPTH} levels"
                )
            if not isinstance(operand, list):
                raise InputError(FILTER_SYNTAX_ERROR)
            children = [
                child
                for child in (cls.parse(item, depth + 1) for item in operand)
                if child is not None
            ]
            if top_level_op_lower == "and":
                return Conjunction(children=children)
            return Disjunction(children=children)

        if not isinstance(operand, dict) or len(operand) != 1:
            raise InputError(FILTER_SYNTAX_ERROR)
        field, value = next(iter(operand.items()))
        return Leaf(op=top_level_op, field=field, value=value)
