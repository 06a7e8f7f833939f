import sys
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from grapl import (  # noqa: E402
    Assignment,
    Connected,
    Disconnected,
    Identifier,
    Leaf,
    Program,
    leaves,
)


def test_identifier_validates_names():
    assert Identifier("A").name == "A"
    assert str(Identifier("node42")) == "node42"

    for bad in ("", "1A", "A_B", "A-B", " A", "é"):
        with pytest.raises(ValueError):
            Identifier(bad)


def test_identifiers_order_by_text():
    names = [Identifier("b"), Identifier("B"), Identifier("a"), Identifier("A2")]
    assert [i.name for i in sorted(names)] == ["A2", "B", "a", "b"]
    assert Identifier("A") == Identifier("A")
    assert len({Identifier("A"), Identifier("A")}) == 1


def test_leaf_accepts_strings_and_identifiers():
    assert Leaf("A") == Leaf(Identifier("A"))
    assert Leaf("A").identifier == Identifier("A")
    with pytest.raises(ValueError):
        Leaf("9")


def test_groups_store_members_as_tuples():
    group = Connected([Leaf("A"), Leaf("B")])
    assert group.members == (Leaf("A"), Leaf("B"))
    assert list(group) == [Leaf("A"), Leaf("B")]
    assert len(group) == 2
    assert Connected(leaves("AB")) == group
    assert Disconnected(leaves("AB")) != group
    assert Connected() == Connected(())


def test_groups_reject_non_expression_members():
    with pytest.raises(TypeError):
        Connected(["A"])
    with pytest.raises(TypeError):
        Disconnected([Leaf("A"), 3])


def test_tree_values_are_immutable_and_hashable():
    group = Disconnected([Connected(leaves("AB")), Leaf("C")])
    with pytest.raises(FrozenInstanceError):
        group.members = ()
    assert hash(group) == hash(Disconnected([Connected(leaves("AB")), Leaf("C")]))


def test_raw_rendering_uses_grammar_syntax():
    expr = Connected([Leaf("A"), Disconnected(leaves("BC"))])
    assert str(expr) == "{A, [B, C]}"
    assert str(Connected()) == "{}"
    assert str(Disconnected()) == "[]"

    assignment = Assignment("G", expr)
    assert assignment.name == Identifier("G")
    assert str(assignment) == "G = {A, [B, C]}"

    program = Program([assignment, Assignment("H", Leaf("G"))], Leaf("H"))
    assert str(program) == "G = {A, [B, C]}\nH = G\nH"
    assert isinstance(program.assignments, tuple)


def test_expression_convenience_methods():
    expr = Connected([Leaf("A"), Disconnected(leaves("BC"))])
    assert expr.normalize() == Disconnected(
        [Connected(leaves("AB")), Connected(leaves("AC"))]
    )
    assert expr.nodes() == [Identifier("A"), Identifier("B"), Identifier("C")]
    assert (Identifier("A"), Identifier("B")) in expr.edges()
    assert expr.contains_node("C")
    assert not expr.contains_node("D")
    assert expr.components() == [
        [Identifier("A"), Identifier("B")],
        [Identifier("A"), Identifier("C")],
    ]
