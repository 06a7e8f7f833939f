"""Recursive descent front end for grapl source text.

Grammar::

    identifier  := ASCII letter, then ASCII letters/digits
    expression  := identifier | '{' sequence '}' | '[' sequence ']'
    sequence    := (expression (',' expression)* ','?)?
    assignment  := identifier '=' expression ';'?
    program     := assignment* expression

Whitespace between tokens is ignored.
"""

from __future__ import annotations

from ..constants import (
    ASSIGN,
    CONNECTED_DELIMITERS,
    DISCONNECTED_DELIMITERS,
    SEPARATOR,
    STATEMENT_TERMINATOR,
)
from .core import Assignment, Connected, Disconnected, Expression, Identifier, Leaf, Program


class ParseError(ValueError):
    """Raised when source text does not match the grammar."""

    def __init__(self, message: str, position: int):
        super().__init__(f"{message} at position {position}")
        self.position = position


GROUPS = {
    CONNECTED_DELIMITERS[0]: (CONNECTED_DELIMITERS[1], Connected),
    DISCONNECTED_DELIMITERS[0]: (DISCONNECTED_DELIMITERS[1], Disconnected),
}


class _Cursor:
    def __init__(self, src: str):
        self.src = src
        self.pos = 0

    def skip_whitespace(self) -> None:
        while self.pos < len(self.src) and self.src[self.pos].isspace():
            self.pos += 1

    def peek(self) -> str | None:
        self.skip_whitespace()
        if self.pos >= len(self.src):
            return None
        return self.src[self.pos]

    def at_end(self) -> bool:
        return self.peek() is None

    def expect(self, ch: str) -> None:
        found = self.peek()
        if found != ch:
            shown = "end of input" if found is None else repr(found)
            raise ParseError(f"Expected {ch!r} but found {shown}", self.pos)
        self.pos += 1

    def identifier(self) -> Identifier:
        ch = self.peek()
        if ch is None or not (ch.isascii() and ch.isalpha()):
            shown = "end of input" if ch is None else repr(ch)
            raise ParseError(f"Expected identifier but found {shown}", self.pos)
        start = self.pos
        while self.pos < len(self.src) and self.src[self.pos].isascii() and self.src[self.pos].isalnum():
            self.pos += 1
        return Identifier(self.src[start:self.pos])

    def expression(self) -> Expression:
        ch = self.peek()
        if ch in GROUPS:
            closer, kind = GROUPS[ch]
            self.pos += 1
            return kind(self.sequence(closer))
        return Leaf(self.identifier())

    def sequence(self, closer: str) -> list[Expression]:
        members = []
        while self.peek() != closer:
            members.append(self.expression())
            if self.peek() == SEPARATOR:
                self.pos += 1
                continue
            break
        self.expect(closer)
        return members

    def is_assignment(self) -> bool:
        """Look ahead for ``identifier '='`` without consuming input."""

        saved = self.pos
        try:
            ch = self.peek()
            if ch is None or not (ch.isascii() and ch.isalpha()):
                return False
            self.identifier()
            return self.peek() == ASSIGN
        finally:
            self.pos = saved

    def assignment(self) -> Assignment:
        name = self.identifier()
        self.expect(ASSIGN)
        expr = self.expression()
        if self.peek() == STATEMENT_TERMINATOR:
            self.pos += 1
        return Assignment(name, expr)

    def finish(self) -> None:
        ch = self.peek()
        if ch is not None:
            raise ParseError(f"Unexpected trailing input {ch!r}", self.pos)


def parse_identifier(src: str) -> Identifier:
    cursor = _Cursor(src)
    ident = cursor.identifier()
    cursor.finish()
    return ident


def parse_expression(src: str) -> Expression:
    """Parse a single expression, e.g. ``"{A, [B, C]}"``."""

    cursor = _Cursor(src)
    expr = cursor.expression()
    cursor.finish()
    return expr


def parse_assignment(src: str) -> Assignment:
    cursor = _Cursor(src)
    assignment = cursor.assignment()
    cursor.finish()
    return assignment


def parse_statements(src: str) -> list[Assignment]:
    """Parse zero or more assignments."""

    cursor = _Cursor(src)
    statements = []
    while not cursor.at_end():
        statements.append(cursor.assignment())
    return statements


def parse_program(src: str) -> Program:
    """Parse assignments followed by one trailing expression."""

    cursor = _Cursor(src)
    assignments = []
    while cursor.is_assignment():
        assignments.append(cursor.assignment())
    expr = cursor.expression()
    cursor.finish()
    return Program(assignments, expr)


def parse_statement(src: str) -> Assignment | Expression:
    """Parse one REPL line: an assignment or a bare expression."""

    cursor = _Cursor(src)
    if cursor.is_assignment():
        result = cursor.assignment()
    else:
        result = cursor.expression()
    cursor.finish()
    return result


__all__ = [
    "ParseError",
    "parse_assignment",
    "parse_expression",
    "parse_identifier",
    "parse_program",
    "parse_statement",
    "parse_statements",
]
