"""Tests for parsing wire filters into expressions."""

import pytest

from query_gateway.core.exceptions import InputError
from query_gateway.core.operators import Operator, resolve_operator
from query_gateway.query.filter_builder import (
    MAX_FILTER_DEPTH,
    Conjunction,
    Disjunction,
    FilterParser,
    Leaf,
)


def test_parse_nested_tree():
    expression = FilterParser.parse(
        {"AND": [{"=": {"gender": "female"}}, {"or": [{"gt": {"age": 3}}]}]}
    )
    assert expression == Conjunction(
        children=[
            Leaf(op="=", field="gender", value="female"),
            Disjunction(children=[Leaf(op="gt", field="age", value=3)]),
        ]
    )


def test_leaf_keeps_client_operator():
    leaf = FilterParser.parse({"GTE": {"age": 3}})
    assert leaf.op == "GTE"
    assert resolve_operator(leaf.op) is Operator.GTE


def test_unknown_operator_is_parsed_for_later_validation():
    leaf = FilterParser.parse({"!=": {"gender": "male"}})
    assert isinstance(leaf, Leaf)
    assert resolve_operator(leaf.op) is None


@pytest.mark.parametrize(
    "filter_obj",
    [
        {"=": {"gender": "female"}, "in": {"age": [1]}},
        {"and": {"=": {"gender": "female"}}},
        {"=": {"gender": "female", "age": 3}},
        {"=": "female"},
        {"and": [{"=": {}}]},
        ["=", "gender"],
    ],
)
def test_malformed_filters_are_rejected(filter_obj):
    with pytest.raises(InputError, match='check your syntax for input "filter"'):
        FilterParser.parse(filter_obj)


def test_every_alias_resolves():
    assert {resolve_operator(op) for op in ("=", "eq", "EQ")} == {Operator.EQ}
    assert {resolve_operator(op) for op in ("in", "IN")} == {Operator.IN}
    assert {resolve_operator(op) for op in ("<=", "lte", "LTE")} == {Operator.LTE}
    assert resolve_operator("Gt") is None


def _nested_and(levels):
    filter_obj = {"=": {"gender": "female"}}
    for _ in range(levels):
        filter_obj = {"and": [filter_obj]}
    return filter_obj


def test_nesting_up_to_the_limit_is_accepted():
    expression = FilterParser.parse(_nested_and(MAX_FILTER_DEPTH))
    for _ in range(MAX_FILTER_DEPTH):
        assert isinstance(expression, Conjunction)
        expression = expression.children[0]
    assert expression == Leaf(op="=", field="gender", value="female")


@pytest.mark.parametrize("levels", [MAX_FILTER_DEPTH + 1, 600])
def test_excessive_nesting_is_rejected(levels):
    with pytest.raises(InputError, match="nested deeper than"):
        FilterParser.parse(_nested_and(levels))
