"""Node and edge sets implied by graph expressions."""

from __future__ import annotations

from itertools import permutations

from .core import Connected, Disconnected, Expression, Identifier, Leaf, as_identifier


def iter_leaves(expr: Expression):
    """Yield every leaf identifier of ``expr`` in depth-first order."""

    if isinstance(expr, Leaf):
        yield expr.identifier
        return
    for member in expr.members:
        yield from iter_leaves(member)


def node_set(expr: Expression) -> frozenset[Identifier]:
    return frozenset(iter_leaves(expr))


def nodes(expr: Expression) -> list[Identifier]:
    """All node identifiers of ``expr``, deduplicated and sorted."""

    return sorted(node_set(expr))


def contains_node(expr: Expression, name: "Identifier | str") -> bool:
    """Whether ``name`` occurs as a leaf anywhere in ``expr``."""

    target = as_identifier(name)
    return any(ident == target for ident in iter_leaves(expr))


def _normal_components(expr: Expression) -> list[Expression]:
    from .normal import normalize

    normal = normalize(expr)
    if isinstance(normal, Disconnected):
        return list(normal.members)
    return [normal]


def edges(expr: Expression) -> list[tuple[Identifier, Identifier]]:
    """Edges of the normal form of ``expr``.

    Every unordered pair appears in both directions; pairs never cross
    components. The result is deduplicated and sorted.
    """

    found = set()
    for component in _normal_components(expr):
        if isinstance(component, Connected):
            found.update(permutations(node_set(component), 2))
    return sorted(found)


def components(expr: Expression) -> list[list[Identifier]]:
    """Sorted node lists of every normal-form component, in sorted order.

    Sibling order in a normal form carries no meaning; this view compares
    equal for any two expressions with the same canonical form.
    """

    return sorted(sorted(node_set(c)) for c in _normal_components(expr))


__all__ = [
    "components",
    "contains_node",
    "edges",
    "iter_leaves",
    "node_set",
    "nodes",
]
