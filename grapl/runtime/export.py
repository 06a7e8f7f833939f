"""Graph export helpers: networkx graphs, JSON documents, Graphviz and plots."""

from __future__ import annotations

from datetime import datetime, timezone
import hashlib
import json
from pathlib import Path

try:
    import networkx as nx
except ModuleNotFoundError:  # pragma: no cover
    nx = None

try:
    import matplotlib.pyplot as plt
except ModuleNotFoundError:  # pragma: no cover
    plt = None

try:
    import pydot
except ModuleNotFoundError:  # pragma: no cover
    pydot = None

from ..constants import COMPONENT_COLORS, GRAPL_VERSION
from .core import Connected, Disconnected, Expression, Leaf, leaves
from .normal import normalize
from .parser import parse_expression
from .projection import components, edges, nodes


def _undirected_edges(expr):
    """Each edge once, as a sorted pair."""

    return [(a, b) for (a, b) in edges(expr) if a < b]


def _canonical_expression(expr):
    """The normal form rebuilt from sorted components, independent of input order."""

    parts = [
        Leaf(component[0]) if len(component) == 1 else Connected(leaves(component))
        for component in components(expr)
    ]
    if len(parts) == 1:
        return parts[0]
    return Disconnected(tuple(parts))


def _component_index(expr):
    """Map each node name to the first component that contains it."""

    index = {}
    for position, component in enumerate(components(expr)):
        for ident in component:
            index.setdefault(ident.name, position)
    return index


def to_networkx(expr: Expression):
    """Build an undirected ``networkx.Graph`` of the expression's nodes and edges."""

    if nx is None:
        raise RuntimeError("Graph export requires networkx to be installed")

    graph = nx.Graph()
    for name, index in _component_index(expr).items():
        graph.add_node(name, component=index)
    graph.add_edges_from((a.name, b.name) for a, b in _undirected_edges(expr))
    return graph


def build_graph_document(expr: Expression):
    """Create an in-memory, JSON-safe description of a graph expression."""

    return {
        "grapl_version": GRAPL_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "expression": str(_canonical_expression(expr)),
        "nodes": [ident.name for ident in nodes(expr)],
        "edges": [[a.name, b.name] for a, b in _undirected_edges(expr)],
        "components": [
            [ident.name for ident in component] for component in components(expr)
        ],
    }


def write_graph_document(doc, filename):
    """Persist a graph document to disk."""

    with open(filename, "w", encoding="utf-8") as f:
        json.dump(doc, f, indent=2)
    print(f"  ✓ Graph exported → {filename}")
    return doc


def export_graph(expr: Expression, filename):
    return write_graph_document(build_graph_document(expr), filename)


def verify_graph_document(doc):
    """Check that the stored nodes, edges and components match the stored expression."""

    if not isinstance(doc, dict):
        raise ValueError("Graph document must be a JSON object")
    for key in ("expression", "nodes", "edges", "components"):
        if key not in doc:
            raise ValueError(f"Graph document missing '{key}'")
    if not isinstance(doc["expression"], str):
        raise ValueError("Graph document expression must be a string")

    expr = parse_expression(doc["expression"])
    if doc["nodes"] != [ident.name for ident in nodes(expr)]:
        raise ValueError("Graph document nodes do not match its expression")
    if doc["edges"] != [[a.name, b.name] for a, b in _undirected_edges(expr)]:
        raise ValueError("Graph document edges do not match its expression")
    expected_components = [
        [ident.name for ident in component] for component in components(expr)
    ]
    if doc["components"] != expected_components:
        raise ValueError("Graph document components do not match its expression")
    return expr


def load_graph_document(filename):
    """Load a graph document and verify it against its own expression."""

    with open(filename, "r", encoding="utf-8") as f:
        doc = json.load(f)
    verify_graph_document(doc)
    return doc


def canonicalize_document(doc):
    """Return the document without fields that vary between runs."""

    return {key: value for key, value in doc.items() if key != "timestamp"}


def hash_graph_document(doc):
    canon = canonicalize_document(doc)
    payload = json.dumps(canon, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def hash_graph_file(filename):
    """Compute and print the SHA-256 of a stored graph document."""

    doc = load_graph_document(filename)
    digest = hash_graph_document(doc)
    print(f"SHA256({filename}) = {digest}")
    return digest


def build_graphviz(expr: Expression):
    """Build an undirected pydot graph with one cluster per component.

    A node shared by several components is drawn once, in the first cluster
    that contains it.
    """

    if pydot is None:
        raise RuntimeError("Graphviz export requires pydot to be installed")

    graph = pydot.Dot("grapl", graph_type="graph", fontname="Helvetica")
    owner = _component_index(expr)
    for index, component in enumerate(components(expr)):
        cluster = pydot.Cluster(
            f"component_{index}",
            label=f"component {index}",
            color="#7f8c8d",
            fontname="Helvetica",
            fontsize="10",
            style="rounded",
        )
        color = COMPONENT_COLORS[index % len(COMPONENT_COLORS)]
        for ident in component:
            if owner[ident.name] != index:
                continue
            cluster.add_node(
                pydot.Node(
                    ident.name,
                    shape="ellipse",
                    style="filled",
                    fillcolor=color,
                    fontname="Helvetica",
                )
            )
        graph.add_subgraph(cluster)

    for a, b in _undirected_edges(expr):
        graph.add_edge(pydot.Edge(a.name, b.name))
    return graph


def export_graphviz(expr: Expression, output_path):
    """Write a Graphviz rendering; ``.dot`` files are written as source."""

    graph = build_graphviz(expr)
    output_path = Path(output_path)
    if output_path.parent and not output_path.parent.exists():
        output_path.parent.mkdir(parents=True, exist_ok=True)

    suffix = output_path.suffix.lstrip(".").lower() or "dot"
    if suffix in ("dot", "gv"):
        output_path.write_text(graph.to_string(), encoding="utf-8")
    else:
        graph.write(str(output_path), format=suffix)
    print(f"  ✓ Graphviz visualization exported → {output_path}")
    return output_path


def visualize_graph(expr: Expression, title=None):  # pragma: no cover
    """Draw the graph with matplotlib, one colour per component."""

    if nx is None or plt is None:
        raise RuntimeError("Visualization requires networkx and matplotlib to be installed")

    graph = to_networkx(expr)
    colors = [
        COMPONENT_COLORS[graph.nodes[n]["component"] % len(COMPONENT_COLORS)]
        for n in graph.nodes
    ]
    positions = nx.spring_layout(graph, seed=42)
    plt.figure()
    nx.draw(
        graph,
        positions,
        with_labels=True,
        node_color=colors,
        edgecolors="black",
        font_size=8,
    )
    plt.title(title or str(normalize(expr)))
    plt.tight_layout()
    plt.show()


__all__ = [
    "build_graph_document",
    "build_graphviz",
    "canonicalize_document",
    "export_graph",
    "export_graphviz",
    "hash_graph_document",
    "hash_graph_file",
    "load_graph_document",
    "to_networkx",
    "verify_graph_document",
    "visualize_graph",
]
