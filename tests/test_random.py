"""Property checks over seeded random expressions and statement lists."""

import math
import random
import sys
from itertools import combinations
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from grapl import (  # noqa: E402
    IDENTIFIER_PATTERN,
    Config,
    Connected,
    Disconnected,
    Environment,
    Leaf,
    RecursionViolation,
    contains_node,
    display_ratio,
    edges,
    generate_expression,
    generate_statements,
    node_set,
    nodes,
    normalize,
    resolve_statements,
)

ITERATIONS = 60


def join_edges(expr):
    """Edges read straight off the raw tree: connected groups join their members."""

    if isinstance(expr, Leaf):
        return set()
    found = set()
    for member in expr.members:
        found |= join_edges(member)
    if isinstance(expr, Connected):
        for left, right in combinations(expr.members, 2):
            for a in node_set(left):
                for b in node_set(right):
                    if a != b:
                        found.add((a, b))
                        found.add((b, a))
    return found


def is_normal(expr):
    if isinstance(expr, Leaf):
        return True
    if isinstance(expr, Connected):
        return len(expr.members) > 1 and all(isinstance(m, Leaf) for m in expr.members)
    if len(expr.members) == 1:
        return False
    if not all(isinstance(c, Leaf) or is_normal(c) for c in expr.members):
        return False
    if any(isinstance(c, Disconnected) for c in expr.members):
        return False
    sets = [node_set(c) for c in expr.members]
    return not any(
        sets[i] <= sets[j] for i in range(len(sets)) for j in range(len(sets)) if i != j
    )


@pytest.mark.parametrize("seed", range(5))
def test_random_nodes_and_edges(seed):
    rng = random.Random(seed)
    for _ in range(ITERATIONS):
        expr = generate_expression(rng, depth=rng.randint(0, 2), width=2)
        normalized = normalize(expr)
        assert nodes(expr) == nodes(normalized)
        assert edges(expr) == edges(normalized)
        assert set(edges(expr)) == join_edges(expr)


@pytest.mark.parametrize("seed", range(5))
def test_random_normal_form(seed):
    rng = random.Random(seed)
    for _ in range(ITERATIONS):
        normalized = normalize(generate_expression(rng, depth=rng.randint(0, 2), width=2))
        assert is_normal(normalized), str(normalized)
        assert normalize(normalized) == normalized


def test_generators_are_reproducible():
    first = generate_expression(random.Random(7), depth=2)
    second = generate_expression(random.Random(7), depth=2)
    assert first == second
    assert all(IDENTIFIER_PATTERN.match(ident.name) for ident in nodes(first))


@pytest.mark.parametrize("seed", range(5))
def test_random_statements_resolve(seed):
    rng = random.Random(seed)
    statements = generate_statements(rng, max_statements=20, depth=1)
    env = Environment(Config().with_shadowing())
    try:
        resolved = resolve_statements(statements, env)
    except RecursionViolation as exc:
        assert any(s.name == exc.name for s in statements)
    else:
        assert [a.name for a in resolved] == [s.name for s in statements]

    for name, expr in env.bindings.items():
        assert expr == Leaf(name) or not contains_node(expr, name)


def test_display_ratio_is_positive():
    ratio = display_ratio(random.Random(3), iterations=30)
    assert ratio > 0
    assert math.isfinite(ratio)
