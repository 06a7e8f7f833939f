"""
grapl — graphs as nested sets of connected and disconnected groups.

    {A, B}        A and B are adjacent (a clique)
    [A, B]        A and B are not adjacent (a disjoint union)
    G = [A, B]    binds G for later statements
    {X, G}        => [{X, A}, {X, B}]

| Layer                 | Purpose                                      |
<---------------------- + -------------------------------------------- >
| **Parser**            | Source text → expression / program trees     |
| **Resolver**          | Substitutes bound names, shadowing policy    |
| **Normalizer**        | Canonical disjoint union of cliques          |
| **Projection**        | Node and edge sets                           |
| **Export**            | networkx, JSON documents, Graphviz, plots    |
"""

from . import core as _core
from . import parser as _parser
from . import projection as _projection
from . import normal as _normal
from . import resolve as _resolve
from . import export as _export
from . import fuzz as _fuzz
from .cli import main, parse_args, run_repl, handle_line

from .core import *
from .parser import *
from .projection import *
from .normal import *
from .resolve import *
from .export import *
from .fuzz import *

__all__ = []
for module in (_core, _parser, _projection, _normal, _resolve, _export, _fuzz):
    __all__.extend(getattr(module, '__all__', []))
__all__ += ['main', 'parse_args', 'run_repl', 'handle_line']
__all__ = list(dict.fromkeys(__all__))
