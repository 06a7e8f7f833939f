"""Random grapl programs for property tests and stress runs.

Every generator takes an explicit :class:`random.Random` so runs can be
reproduced from a seed. Normalization cost grows with the product of group
widths across nesting levels, so keep ``depth`` and ``width`` small.
"""

from __future__ import annotations

import random
import string

from .core import Assignment, Connected, Disconnected, Expression, Identifier, Leaf
from .normal import normalize

_ALPHANUMERIC = string.ascii_letters + string.digits


def generate_identifier(rng: random.Random, max_len: int = 4) -> Identifier:
    length = rng.randint(0, max_len)
    return Identifier("N" + "".join(rng.choice(_ALPHANUMERIC) for _ in range(length)))


def _generate_group(rng, kind, depth, width, cweight, dweight, max_len):
    # Groups always start with a node so they are never empty.
    members: list[Expression] = [Leaf(generate_identifier(rng, max_len))]
    for _ in range(rng.randint(0, width)):
        if depth == 0:
            members.append(Leaf(generate_identifier(rng, max_len)))
        else:
            members.append(
                generate_expression(rng, depth - 1, width, cweight, dweight, max_len)
            )
    return kind(members)


def generate_expression(
    rng: random.Random,
    depth: int = 2,
    width: int = 3,
    cweight: int = 10,
    dweight: int = 10,
    max_len: int = 4,
) -> Expression:
    """Draw a leaf, connected or disconnected group weighted 1:cweight:dweight."""

    choice = rng.choices(("leaf", "connected", "disconnected"), weights=(1, cweight, dweight))[0]
    if choice == "leaf":
        return Leaf(generate_identifier(rng, max_len))
    kind = Connected if choice == "connected" else Disconnected
    return _generate_group(rng, kind, depth, width, cweight, dweight, max_len)


def generate_statements(
    rng: random.Random,
    max_statements: int = 10,
    depth: int = 2,
    width: int = 3,
    cweight: int = 10,
    dweight: int = 10,
    max_len: int = 4,
) -> list[Assignment]:
    """Draw assignments; roughly a third rebind an earlier name."""

    statements: list[Assignment] = []
    for _ in range(rng.randint(0, max_statements)):
        if statements and rng.random() >= 0.666:
            name = rng.choice(statements).name
        else:
            name = generate_identifier(rng, max_len)
        expr = generate_expression(rng, depth, width, cweight, dweight, max_len)
        statements.append(Assignment(name, expr))
    return statements


def display_ratio(
    rng: random.Random,
    iterations: int = 50,
    max_depth: int = 2,
    cweight: int = 10,
    dweight: int = 10,
) -> float:
    """Ratio of raw to normalized rendered length over random expressions."""

    raw_len = 0
    norm_len = 0
    for _ in range(iterations):
        depth = rng.randint(0, max_depth)
        expr = generate_expression(rng, depth, cweight=cweight, dweight=dweight)
        raw_len += len(str(expr))
        norm_len += len(str(normalize(expr)))
    return raw_len / norm_len


__all__ = [
    "display_ratio",
    "generate_expression",
    "generate_identifier",
    "generate_statements",
]
