import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from grapl import (  # noqa: E402
    Disconnected,
    Identifier,
    components,
    contains_node,
    edges,
    node_set,
    nodes,
    normalize,
    parse_expression,
)

A, B, C, D, X = (Identifier(n) for n in "ABCDX")


def test_nodes_are_sorted_and_unique():
    assert nodes(parse_expression("{B, [A, C], A}")) == [A, B, C]
    assert nodes(parse_expression("[]")) == []
    assert node_set(parse_expression("[A, {A, B}]")) == frozenset({A, B})


def test_edges_of_leaves_and_disjoint_unions():
    assert edges(parse_expression("A")) == []
    assert edges(parse_expression("[A, B]")) == []
    assert edges(parse_expression("{}")) == []


def test_edges_are_symmetric_ordered_pairs():
    assert edges(parse_expression("{A, B}")) == [(A, B), (B, A)]
    assert edges(parse_expression("{A, [B, C]}")) == [(A, B), (A, C), (B, A), (C, A)]
    assert edges(parse_expression("[{A, B}, {C, D}]")) == [
        (A, B),
        (B, A),
        (C, D),
        (D, C),
    ]


def test_edges_never_include_self_loops():
    assert edges(parse_expression("{A, A}")) == []
    assert edges(parse_expression("{A, [A, B]}")) == [(A, B), (B, A)]


@pytest.mark.parametrize(
    "src",
    [
        "{X, [A, B]}",
        "{[A, B], [C, D]}",
        "[{A, [B, {C, [D, X]}]}, {A, B}]",
        "{{A,B}, {A,B,C}, A, {C,D}, {C,D,X}}",
    ],
)
def test_projection_is_normalization_invariant(src):
    expr = parse_expression(src)
    normal = normalize(expr)
    assert nodes(expr) == nodes(normal)
    assert edges(expr) == edges(normal)


def test_contains_node():
    expr = parse_expression("{X, [A, {B, C}]}")
    assert contains_node(expr, "C")
    assert contains_node(expr, Identifier("X"))
    assert not contains_node(expr, "D")
    assert contains_node(parse_expression("A"), "A")
    assert not contains_node(parse_expression("[]"), "A")


def test_components_ignore_sibling_order():
    assert components(parse_expression("{[A, B], [C, D]}")) == [
        [A, C],
        [A, D],
        [B, C],
        [B, D],
    ]
    assert components(parse_expression("[{D, C}, {B, A}]")) == components(
        parse_expression("[{A, B}, {C, D}]")
    )
    assert components(parse_expression("A")) == [[A]]
    assert components(Disconnected()) == []
