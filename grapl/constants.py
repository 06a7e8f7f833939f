"""Shared constant values for the grapl runtime."""

GRAPL_VERSION = "0.1"

CONNECTED_DELIMITERS = ("{", "}")
DISCONNECTED_DELIMITERS = ("[", "]")
SEPARATOR = ","
ASSIGN = "="
STATEMENT_TERMINATOR = ";"

COMPONENT_COLORS = [
    "#8BC34A",
    "#FFEB3B",
    "#FF7043",
    "#9575CD",
    "#4FC3F7",
    "#F8BBD0",
    "#80CBC4",
    "#B0BEC5",
]

HISTORY_DIR = "grapl"
HISTORY_FILE = "grapl.history"
HISTORY_LIMIT = 1000
EXPORT_FILE = "graph.grapl.json"

__all__ = [
    "GRAPL_VERSION",
    "CONNECTED_DELIMITERS",
    "DISCONNECTED_DELIMITERS",
    "SEPARATOR",
    "ASSIGN",
    "STATEMENT_TERMINATOR",
    "COMPONENT_COLORS",
    "HISTORY_DIR",
    "HISTORY_FILE",
    "HISTORY_LIMIT",
    "EXPORT_FILE",
]
