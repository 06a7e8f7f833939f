"""Reductions of graph expressions to normal form.

- Empty graphs are fully disconnected: ``{} => []``
- Single node graphs are just the node: ``[{A}] => A``
- Fully connected graphs are flattened: ``{{A, B}, C} => {A, B, C}``
- Connected groups distribute over disconnected members::

    {[A, B], [C, D]} => [{A, C}, {A, D}, {B, C}, {B, D}]

- Components whose nodes are a subset of a sibling's are dropped::

    [{A, B}, {A, B, C}, A] => {A, B, C}

The normal form of any expression is therefore a single leaf, a single
connected group of leaves, or a disconnected group of such components with no
component contained in another.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .core import Assignment, Connected, Disconnected, Expression, Leaf, Program
from .projection import node_set

logger = logging.getLogger(__name__)


def _collapse(kind: type, members: Sequence[Expression]) -> Expression:
    """Build a group of ``kind``, collapsing the degenerate sizes."""

    if len(members) == 0:
        return Disconnected(())
    if len(members) == 1:
        return members[0]
    return kind(tuple(members))


def _branches(expr: Expression) -> list[tuple[Expression, ...]]:
    """Return the disjunctive branches of a flattened expression.

    Each branch is the tuple of leaves that one alternative contributes to an
    enclosing connected group.
    """

    if isinstance(expr, Leaf):
        return [(expr,)]
    if isinstance(expr, Connected):
        return [expr.members]
    branches = []
    for component in expr.members:
        if isinstance(component, Leaf):
            branches.append((component,))
        else:
            branches.append(component.members)
    return branches


def flatten(expr: Expression) -> Expression:
    """Distribute connectivity over disjointness and splice nested groups."""

    if isinstance(expr, Leaf):
        return expr

    if isinstance(expr, Disconnected):
        # [A, [B, C], {D, E}] => [A, B, C, {D, E}]
        components = []
        for member in expr.members:
            flat = flatten(member)
            if isinstance(flat, Disconnected):
                components.extend(flat.members)
            else:
                components.append(flat)
        return _collapse(Disconnected, components)

    if isinstance(expr, Connected):
        if len(expr.members) == 0:
            return Disconnected(())

        # {A, [B, C], D} =>
        # [(A,)] => [(A, B), (A, C)] => [(A, B, D), (A, C, D)]
        combinations: list[tuple[Expression, ...]] = [()]
        for member in expr.members:
            branches = _branches(flatten(member))
            if not branches:
                # The empty graph adds nothing to a connected group.
                continue
            combinations = [
                combination + branch
                for combination in combinations
                for branch in branches
            ]

        if len(combinations) == 1:
            return _collapse(Connected, combinations[0])
        return Disconnected(
            tuple(_collapse(Connected, combination) for combination in combinations)
        )

    raise TypeError(f"Cannot normalize {expr!r}")


def _irredundant(members: Sequence[Expression]) -> list[Expression]:
    """Drop every member whose node set is contained in a sibling's.

    Members with equal node sets keep the first occurrence.
    """

    sets = [node_set(member) for member in members]
    kept = []
    for i, member in enumerate(members):
        redundant = any(
            sets[i] < sets[j] or (sets[i] == sets[j] and j < i)
            for j in range(len(members))
            if j != i
        )
        if not redundant:
            kept.append(member)
    return kept


def deduplicate(expr: Expression) -> Expression:
    """Remove subsumed components from a flattened expression.

    The input must already be flat (see :func:`flatten`); inside an arbitrary
    connected group a subsumed member can still carry edges of its own.
    """

    if isinstance(expr, Leaf):
        return expr
    members = [deduplicate(member) for member in expr.members]
    return _collapse(type(expr), _irredundant(members))


def normalize(expr: Expression) -> Expression:
    """Rewrite ``expr`` into its canonical disjoint union of cliques."""

    current = flatten(expr)
    rounds = 1
    while True:
        reduced = flatten(deduplicate(current))
        if reduced == current:
            logger.debug("normalized %s in %d round(s)", expr, rounds)
            return reduced
        current = reduced
        rounds += 1


def normalize_assignment(assignment: Assignment) -> Assignment:
    return Assignment(assignment.name, normalize(assignment.expression))


def normalize_program(program: Program) -> Program:
    return Program(
        [normalize_assignment(a) for a in program.assignments],
        normalize(program.expression),
    )


def render(value) -> str:
    """Canonical text for an expression, assignment or program."""

    if isinstance(value, Expression):
        return str(normalize(value))
    if isinstance(value, Assignment):
        return str(normalize_assignment(value))
    if isinstance(value, Program):
        return str(normalize_program(value))
    if isinstance(value, (list, tuple)):
        return "\n".join(render(item) for item in value)
    raise TypeError(f"Cannot render {value!r}")


__all__ = [
    "deduplicate",
    "flatten",
    "normalize",
    "normalize_assignment",
    "normalize_program",
    "render",
]
