"""Command-line interface and REPL for grapl."""
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
import sys

try:
    import readline
except ImportError:  # pragma: no cover - unavailable on some platforms
    readline = None

from ..constants import EXPORT_FILE, HISTORY_DIR, HISTORY_FILE, HISTORY_LIMIT
from .core import Assignment
from .export import (
    build_graph_document,
    export_graph,
    export_graphviz,
    hash_graph_document,
    hash_graph_file,
    visualize_graph,
    write_graph_document,
)
from .normal import normalize, render
from .parser import ParseError, parse_program, parse_statement
from .projection import edges, nodes
from .resolve import (
    Config,
    Environment,
    ResolutionError,
    resolve_assignment,
    resolve_expression,
    resolve_statements,
)

logger = logging.getLogger(__name__)

DEFAULT_SRC = "G = [A, B]\n{X, G}"

REPL_HELP = (
    "Statements: NAME = EXPR binds a graph, EXPR prints its normal form.\n"
    "Commands: :help, :quit, :env, :nodes [n], :edges [n], :save [n] [file], "
    ":hash [n], :dot [n] file, :viz [n]"
)


def history_path():
    """Location of the persistent REPL history, creating its directory."""

    state_home = os.environ.get("XDG_STATE_HOME") or str(Path.home() / ".local" / "state")
    directory = Path(state_home) / HISTORY_DIR
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning("history disabled: %s", exc)
        return None
    return directory / HISTORY_FILE


def load_history(path=None):  # pragma: no cover - depends on the terminal
    if readline is None:
        return
    path = path or history_path()
    if path is None or not Path(path).exists():
        return
    try:
        readline.read_history_file(str(path))
    except OSError as exc:
        logger.warning("could not read history %s: %s", path, exc)


def save_history(path=None):  # pragma: no cover - depends on the terminal
    if readline is None:
        return
    path = path or history_path()
    if path is None:
        return
    readline.set_history_length(HISTORY_LIMIT)
    try:
        readline.write_history_file(str(path))
    except OSError as exc:
        logger.warning("could not write history %s: %s", path, exc)


def _print_projection(expr, which):
    if which == "nodes":
        print(" ".join(ident.name for ident in nodes(expr)) or "(no nodes)")
    else:
        pairs = [(a, b) for a, b in edges(expr) if a < b]
        if not pairs:
            print("(no edges)")
        for a, b in pairs:
            print(f"{a} -- {b}")


def _resolve_entry(history, token=None):
    if not history:
        print("No evaluated expressions yet.")
        return None
    if token is None:
        return history[-1]
    try:
        target = int(token)
    except ValueError:
        print("Expression index must be an integer.")
        return None
    for entry in reversed(history):
        if entry["index"] == target:
            return entry
    print(f"No expression #{target}.")
    return None


def _handle_command(stripped, env, history):
    parts = stripped.split()
    cmd = parts[0]

    if cmd in (":quit", ":exit"):
        return False
    if cmd == ":help":
        print(REPL_HELP)
        return True
    if cmd == ":env":
        bindings = env.bindings
        if not bindings:
            print("No bindings.")
        for name, expr in bindings.items():
            print(render(Assignment(name, expr)))
        return True
    if cmd in (":nodes", ":edges"):
        entry = _resolve_entry(history, parts[1] if len(parts) > 1 else None)
        if entry:
            _print_projection(entry["expression"], cmd[1:])
        return True
    if cmd == ":save":
        entry = _resolve_entry(history, parts[1] if len(parts) > 1 else None)
        if entry:
            filename = parts[2] if len(parts) > 2 else f"graph_{entry['index']}.grapl.json"
            try:
                write_graph_document(build_graph_document(entry["expression"]), filename)
            except OSError as exc:
                print(f"Error: {exc}")
        return True
    if cmd == ":hash":
        entry = _resolve_entry(history, parts[1] if len(parts) > 1 else None)
        if entry:
            digest = hash_graph_document(build_graph_document(entry["expression"]))
            print(f"SHA256(graph_{entry['index']}) = {digest}")
        return True
    if cmd == ":dot":
        if len(parts) not in (2, 3):
            print("Usage: :dot [n] <file>")
            return True
        entry = _resolve_entry(history, parts[1] if len(parts) == 3 else None)
        if entry:
            try:
                export_graphviz(entry["expression"], parts[-1])
            except (RuntimeError, OSError) as exc:
                print(f"Error: {exc}")
        return True
    if cmd == ":viz":
        entry = _resolve_entry(history, parts[1] if len(parts) > 1 else None)
        if entry:
            try:
                visualize_graph(entry["expression"])
            except (RuntimeError, OSError) as exc:
                print(f"Error: {exc}")
        return True

    print(f"Unknown command: {cmd}")
    return True


def handle_line(line, env, history, history_limit=HISTORY_LIMIT):
    """Evaluate one REPL line against ``env``.

    Assignments bind silently; expressions print their normal form and are
    cached in ``history`` for the ``:nodes``/``:save``/... commands. Errors are
    reported and leave the environment untouched. Returns ``False`` once the
    session should end.
    """

    stripped = line.strip()
    if not stripped:
        return True
    if stripped.startswith(":"):
        return _handle_command(stripped, env, history)

    try:
        statement = parse_statement(stripped)
    except ParseError as exc:
        print(f"Error: Invalid syntax ({exc})")
        return True

    try:
        if isinstance(statement, Assignment):
            resolve_assignment(statement, env)
            return True
        resolved = normalize(resolve_expression(statement, env))
    except ResolutionError as exc:
        print(f"Error: {exc}")
        return True

    index = history[-1]["index"] + 1 if history else 1
    history.append({"index": index, "src": stripped, "expression": resolved})
    if len(history) > history_limit:
        history.pop(0)
    print(resolved)
    return True


def run_repl(config=None):  # pragma: no cover
    """Interactive grapl shell."""

    env = Environment(config or Config().with_shadowing())
    history = []
    load_history()
    print("grapl REPL — enter assignments or expressions (:help for help)")

    while True:
        try:
            line = input("> ")
        except EOFError:
            print("Ctrl-D pressed. Exiting.")
            break
        except KeyboardInterrupt:
            print("Ctrl-C pressed. Exiting.")
            break
        if not handle_line(line, env, history):
            break

    save_history()


def parse_args(args):
    argp = argparse.ArgumentParser(description="grapl graph expression language")

    source = argp.add_mutually_exclusive_group()
    source.add_argument("--src", help="Inline grapl program", default=DEFAULT_SRC)
    source.add_argument("--file", help="Read the grapl program from a file")
    argp.add_argument("--repl", action="store_true", help="Start an interactive REPL (names may be rebound)")
    argp.add_argument(
        "--shadowing", action="store_true", help="Allow names to be rebound"
    )
    argp.add_argument(
        "--recursion",
        action="store_true",
        help="Allow bindings that refer to their own name (kept unexpanded)",
    )
    argp.add_argument("--nodes", action="store_true", help="List the graph's nodes")
    argp.add_argument("--edges", action="store_true", help="List the graph's edges")
    argp.add_argument(
        "--export",
        nargs="?",
        const=EXPORT_FILE,
        metavar="OUTPUT",
        help="Write the resolved graph as a JSON document",
    )
    argp.add_argument("--hash", metavar="FILE", help="Hash a stored JSON graph document")
    argp.add_argument(
        "--dot",
        metavar="OUTPUT",
        help="Export a Graphviz rendering (.dot source, or .svg/.png via Graphviz)",
    )
    argp.add_argument(
        "--visualize", action="store_true", help="Draw the graph with matplotlib"
    )
    argp.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )

    return argp.parse_args(args)


def _config_from_params(params):
    config = Config()
    if params.shadowing:
        config = config.with_shadowing()
    if params.recursion:
        config = config.with_recursion()
    return config


def main(args):
    params = parse_args(args)
    logging.basicConfig(
        level=getattr(logging, params.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = _config_from_params(params)

    if params.hash:
        try:
            hash_graph_file(params.hash)
        except (OSError, ValueError) as exc:
            print(f"Error: {exc}")
            return 1
        return 0
    if params.repl:
        run_repl(config.with_shadowing())
        return 0

    if params.file:
        try:
            src = Path(params.file).read_text(encoding="utf-8")
        except OSError as exc:
            print(f"Error: {exc}")
            return 1
    else:
        src = params.src

    try:
        program = parse_program(src)
    except ParseError as exc:
        print(f"Error: Invalid syntax ({exc})")
        return 1

    env = Environment(config)
    try:
        assignments = resolve_statements(program.assignments, env)
        result = normalize(resolve_expression(program.expression, env))
    except ResolutionError as exc:
        print(f"Error: {exc}")
        return 1

    for assignment in assignments:
        print(render(assignment))
    print(result)

    if params.nodes:
        print("\nNodes:")
        _print_projection(result, "nodes")
    if params.edges:
        print("\nEdges:")
        _print_projection(result, "edges")
    try:
        if params.export:
            export_graph(result, params.export)
        if params.dot:
            export_graphviz(result, params.dot)
        if params.visualize:
            visualize_graph(result)
    except (RuntimeError, OSError) as exc:
        print(f"Error: {exc}")
        return 1
    return 0


def _run() -> None:
    sys.exit(main(sys.argv[1:]))


__all__ = [
    "handle_line",
    "history_path",
    "load_history",
    "main",
    "parse_args",
    "run_repl",
    "save_history",
]


if __name__ == "__main__":  # pragma: no cover
    _run()
