"""Replacement of names bound by assignments.

An :class:`Environment` keeps track of the expressions bound so far and
substitutes them wherever a later statement refers to the bound name. A bound
expression is stored already resolved, so looking it up never resolves it
again::

    G = [A, B]
    {X, G}
    =>
    {X, [A, B]}

Rebinding a name (shadowing) and binding a name to an expression that
contains it (recursion) are governed by :class:`Config`. Shadowing can make a
binding look recursive without being so::

    G1 = G2
    G2 = G1
    =>
    G1 = G2
    G2 = G2
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Iterable

from .core import (
    Assignment,
    Connected,
    Disconnected,
    Expression,
    Identifier,
    Leaf,
    Program,
    as_identifier,
)
from .normal import normalize
from .projection import contains_node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    """Resolution policy shared by any number of environments."""

    shadowing: bool = False
    # Reserved: recursive bindings are stored as written and never unrolled.
    recursion: bool = False

    def with_shadowing(self) -> "Config":
        """Allow redefinition of names: ``G = A`` then ``G = B`` binds ``G`` to ``B``."""

        return replace(self, shadowing=True)

    def with_recursion(self) -> "Config":
        return replace(self, recursion=True)


class ResolutionError(Exception):
    """Base class for errors raised while binding a name."""

    kind = "resolution"

    def __init__(self, name: Identifier, message: str):
        super().__init__(message)
        self.name = name


class ShadowingViolation(ResolutionError):
    """``G = A`` followed by ``G = B`` without shadowing enabled."""

    kind = "shadowing"

    def __init__(self, name: Identifier):
        super().__init__(name, f"'{name}' is already bound and shadowing is disabled")


class RecursionViolation(ResolutionError):
    """``G = {G, B}`` without recursion enabled."""

    kind = "recursion"

    def __init__(self, name: Identifier):
        super().__init__(name, f"'{name}' refers to itself and recursion is disabled")


class Environment:
    """Running resolution state for one session."""

    def __init__(self, config: Config | None = None):
        self.config = config if config is not None else Config()
        self._bindings: dict[Identifier, Expression] = {}

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"Environment({len(self._bindings)} bindings, {self.config})"

    def __contains__(self, name) -> bool:
        return as_identifier(name) in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self):
        return iter(self._bindings)

    @property
    def bindings(self) -> dict[Identifier, Expression]:
        """Snapshot of the current bindings in insertion order."""

        return dict(self._bindings)

    def lookup(self, name: "Identifier | str") -> Expression:
        """Return the expression bound to ``name``, or ``name`` as a leaf."""

        ident = as_identifier(name)
        bound = self._bindings.get(ident)
        if bound is None:
            return Leaf(ident)
        return bound

    def insert(self, name: "Identifier | str", expr: Expression) -> None:
        """Bind ``name`` to ``expr``.

        Raises :class:`ShadowingViolation` or :class:`RecursionViolation`
        depending on what this environment's configuration allows.
        """

        ident = as_identifier(name)
        if not self.config.shadowing and ident in self._bindings:
            logger.debug("rejected rebinding of %s", ident)
            raise ShadowingViolation(ident)
        # Anything reducing to G itself leaves G an atomic node.
        if contains_node(expr, ident) and normalize(expr) != Leaf(ident):
            if not self.config.recursion:
                logger.debug("rejected self-referential binding of %s", ident)
                raise RecursionViolation(ident)
            logger.warning(
                "binding %s to an expression containing itself; "
                "the reference is kept as a plain node",
                ident,
            )
        self._bindings[ident] = expr
        logger.debug("bound %s = %s", ident, expr)


def resolve_expression(expr: Expression, env: Environment) -> Expression:
    """Substitute bound names in ``expr``; does not normalize."""

    if isinstance(expr, Leaf):
        return env.lookup(expr.identifier)
    if isinstance(expr, (Connected, Disconnected)):
        return type(expr)(tuple(resolve_expression(m, env) for m in expr.members))
    raise TypeError(f"Cannot resolve {expr!r}")


def resolve_assignment(assignment: Assignment, env: Environment) -> Assignment:
    resolved = resolve_expression(assignment.expression, env)
    env.insert(assignment.name, resolved)
    return Assignment(assignment.name, resolved)


def resolve_statements(
    statements: Iterable[Assignment], env: Environment
) -> list[Assignment]:
    """Resolve assignments in order; the first error aborts the rest."""

    return [resolve_assignment(statement, env) for statement in statements]


def resolve_program(program: Program, env: Environment) -> Expression:
    """Resolve every assignment, then return the resolved final expression."""

    resolve_statements(program.assignments, env)
    return resolve_expression(program.expression, env)


def resolve(value, env: Environment):
    """Resolve an expression, assignment, list of assignments or program."""

    if isinstance(value, Expression):
        return resolve_expression(value, env)
    if isinstance(value, Assignment):
        return resolve_assignment(value, env)
    if isinstance(value, Program):
        return resolve_program(value, env)
    if isinstance(value, (list, tuple)):
        return resolve_statements(value, env)
    raise TypeError(f"Cannot resolve {value!r}")


__all__ = [
    "Config",
    "Environment",
    "RecursionViolation",
    "ResolutionError",
    "ShadowingViolation",
    "resolve",
    "resolve_assignment",
    "resolve_expression",
    "resolve_program",
    "resolve_statements",
]
