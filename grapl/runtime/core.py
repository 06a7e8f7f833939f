"""Core tree model for grapl programs."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable

from ..constants import CONNECTED_DELIMITERS, DISCONNECTED_DELIMITERS

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")


@dataclass(frozen=True, order=True)
class Identifier:
    """A node label or binding name."""

    name: str

    def __post_init__(self):
        if not isinstance(self.name, str) or not IDENTIFIER_PATTERN.match(self.name):
            raise ValueError(f"Invalid identifier: {self.name!r}")

    def __str__(self) -> str:
        return self.name


def as_identifier(value: "Identifier | str") -> Identifier:
    if isinstance(value, Identifier):
        return value
    return Identifier(value)


class Expression:
    """Base class for graph expressions.

    The methods below are thin conveniences over the normalizer and the
    projection functions, imported lazily to keep this module at the bottom
    of the dependency graph.
    """

    def normalize(self) -> "Expression":
        from .normal import normalize

        return normalize(self)

    def nodes(self) -> list[Identifier]:
        from .projection import nodes

        return nodes(self)

    def edges(self) -> list[tuple[Identifier, Identifier]]:
        from .projection import edges

        return edges(self)

    def components(self) -> list[list[Identifier]]:
        from .projection import components

        return components(self)

    def contains_node(self, name: "Identifier | str") -> bool:
        from .projection import contains_node

        return contains_node(self, name)


@dataclass(frozen=True)
class Leaf(Expression):
    """A single named node."""

    identifier: Identifier

    def __post_init__(self):
        object.__setattr__(self, "identifier", as_identifier(self.identifier))

    def __str__(self) -> str:
        return self.identifier.name


class Group(Expression):
    """Shared behaviour of the two grouping variants."""

    delimiters: tuple[str, str] = ("", "")
    members: tuple[Expression, ...]

    def __post_init__(self):
        members = tuple(self.members)
        for member in members:
            if not isinstance(member, Expression):
                raise TypeError(
                    f"{type(self).__name__} members must be expressions, got {member!r}"
                )
        object.__setattr__(self, "members", members)

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self):
        return iter(self.members)

    def __str__(self) -> str:
        left, right = self.delimiters
        return left + ", ".join(str(m) for m in self.members) + right


@dataclass(frozen=True)
class Connected(Group):
    """Members are pairwise adjacent (a clique)."""

    members: tuple[Expression, ...] = ()
    delimiters = CONNECTED_DELIMITERS


@dataclass(frozen=True)
class Disconnected(Group):
    """Members are pairwise non-adjacent (a disjoint union)."""

    members: tuple[Expression, ...] = ()
    delimiters = DISCONNECTED_DELIMITERS


@dataclass(frozen=True)
class Assignment:
    """Binds ``name`` to the value of ``expression`` at evaluation time."""

    name: Identifier
    expression: Expression

    def __post_init__(self):
        object.__setattr__(self, "name", as_identifier(self.name))

    def __str__(self) -> str:
        return f"{self.name} = {self.expression}"


@dataclass(frozen=True)
class Program:
    """A sequence of assignments followed by a final expression."""

    assignments: tuple[Assignment, ...]
    expression: Expression

    def __post_init__(self):
        object.__setattr__(self, "assignments", tuple(self.assignments))

    def __str__(self) -> str:
        lines = [str(a) for a in self.assignments]
        lines.append(str(self.expression))
        return "\n".join(lines)


def leaves(names: Iterable["Identifier | str"]) -> list[Leaf]:
    """Build a list of leaves from names, e.g. ``Connected(leaves("AB"))``."""

    return [Leaf(name) for name in names]


__all__ = [
    "Assignment",
    "Connected",
    "Disconnected",
    "Expression",
    "Group",
    "IDENTIFIER_PATTERN",
    "Identifier",
    "Leaf",
    "Program",
    "as_identifier",
    "leaves",
]
