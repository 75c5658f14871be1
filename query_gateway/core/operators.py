"""
Filter operators and the spellings clients may use for them.
"""

from enum import Enum
from typing import Dict, Optional


class Operator(str, Enum):
    """Filter operators understood by the compiler."""

    EQ = "eq"
    IN = "in"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"


# Every spelling a client may send for each operator
OPERATOR_ALIASES: Dict[str, Operator] = {
    "=": Operator.EQ,
    "eq": Operator.EQ,
    "EQ": Operator.EQ,
    "in": Operator.IN,
    "IN": Operator.IN,
    ">": Operator.GT,
    "gt": Operator.GT,
    "GT": Operator.GT,
    ">=": Operator.GTE,
    "gte": Operator.GTE,
    "GTE": Operator.GTE,
    "<": Operator.LT,
    "lt": Operator.LT,
    "LT": Operator.LT,
    "<=": Operator.LTE,
    "lte": Operator.LTE,
    "LTE": Operator.LTE,
}


def resolve_operator(op: str) -> Optional[Operator]:
    """Return the operator an alias stands for, or None for an unknown alias."""
    return OPERATOR_ALIASES.get(op)
