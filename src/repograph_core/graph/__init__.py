"""
Dependency graph construction.

License: MIT
"""

from .assembler import DEFAULT_CATEGORY, GraphAssembler, count_lines, next_epoch
from .construction import GraphConstructor, construct_graph
from .dependency_resolver import (
    DependencyResolver,
    edge_weight,
    normalize_import,
    strip_extension,
)

__all__ = [
    "GraphConstructor",
    "construct_graph",
    "GraphAssembler",
    "DependencyResolver",
    "DEFAULT_CATEGORY",
    "count_lines",
    "edge_weight",
    "next_epoch",
    "normalize_import",
    "strip_extension",
]
