"""
Data models for repograph.

Defines the validated graph shapes handed to callers (FunctionLocation,
FileNode, Edge, Graph), the categorization response model, and the internal
records passed between pipeline stages.

License: MIT
"""

from __future__ import annotations

import itertools
import json
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_epoch_counter = itertools.count(1)
_epoch_lock = threading.Lock()


def next_epoch() -> int:
    """Return the next graph epoch (thread-safe, strictly increasing)."""
    with _epoch_lock:
        return next(_epoch_counter)


class FunctionLocation(BaseModel):
    """Location of a detected function or method (1-based line numbers)."""

    model_config = ConfigDict(frozen=True)

    line_start: int = Field(..., ge=1)
    line_count: int = Field(..., ge=1)


class FileNode(BaseModel):
    """One source file: metrics, function inventory, and category assignment."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    filepath: str = Field(..., min_length=1)
    num_lines: int = Field(..., ge=0)
    num_characters: int = Field(..., ge=0)
    category: int = Field(default=0, ge=0)
    functions: Dict[str, FunctionLocation] = Field(default_factory=dict)
    description: str = ""
    file_dependencies: List[str] = Field(default_factory=list, alias="fileDependencies")


class Edge(BaseModel):
    """Directed, weighted dependency from node ``source`` to node ``target``."""

    model_config = ConfigDict(frozen=True)

    source: int = Field(..., ge=0)
    target: int = Field(..., ge=0)
    weight: float = Field(..., gt=0)

    @model_validator(mode="after")
    def check_not_self_loop(self) -> "Edge":
        if self.source == self.target:
            raise ValueError(f"edge cannot be a self-loop on node {self.source}")
        return self

    def as_triple(self) -> List[Any]:
        return [self.source, self.target, self.weight]


class Graph(BaseModel):
    """
    Dependency graph snapshot for one archive.

    Node indices correspond to list positions. ``epoch`` identifies the
    construction run that produced the snapshot and is not serialized; a
    graph built without one draws a fresh value from ``next_epoch()``.

    Example:
        >>> graph = construct_graph(archive_bytes)
        >>> payload = graph.to_dict()
        >>> payload["edges"][0]
        [1, 0, 1.79]
    """

    model_config = ConfigDict(frozen=True)

    categories: List[str] = Field(..., min_length=1)
    nodes: List[FileNode] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)
    epoch: int = Field(default_factory=next_epoch, ge=0, exclude=True)

    @model_validator(mode="after")
    def check_indices(self) -> "Graph":
        node_count = len(self.nodes)
        category_count = len(self.categories)

        seen = set()
        for node in self.nodes:
            if node.filepath in seen:
                raise ValueError(f"duplicate filepath in graph: {node.filepath}")
            seen.add(node.filepath)
            if node.category >= category_count:
                raise ValueError(
                    f"node {node.filepath} has category {node.category}, "
                    f"but only {category_count} categories exist"
                )

        for edge in self.edges:
            if edge.source >= node_count or edge.target >= node_count:
                raise ValueError(
                    f"edge ({edge.source}, {edge.target}) references a node "
                    f"outside 0..{node_count - 1}"
                )
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert graph to plain JSON-compatible data."""
        return {
            "categories": list(self.categories),
            "nodes": [node.model_dump(by_alias=True) for node in self.nodes],
            "edges": [edge.as_triple() for edge in self.edges],
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], epoch: Optional[int] = None) -> "Graph":
        """
        Rebuild a graph from ``to_dict()`` output.

        Edges may be given as ``[source, target, weight]`` triples or as
        mappings with those keys. Without ``epoch`` the rebuilt graph gets
        a fresh one, so it never collides with a graph already in use.
        """
        if epoch is None:
            epoch = next_epoch()
        edges = []
        for raw in data.get("edges", []):
            if isinstance(raw, dict):
                edges.append(Edge(**raw))
            else:
                source, target, weight = raw
                edges.append(Edge(source=source, target=target, weight=weight))
        return cls(
            categories=data.get("categories", []),
            nodes=[FileNode.model_validate(node) for node in data.get("nodes", [])],
            edges=edges,
            epoch=epoch,
        )


class CategorizationResult(BaseModel):
    """Response contract of a categorization adapter."""

    categories: List[str] = Field(default_factory=list)
    assignments: Dict[str, str] = Field(default_factory=dict)

    @field_validator("categories")
    @classmethod
    def strip_blank_categories(cls, v: List[str]) -> List[str]:
        """Drop blank names and duplicates, keeping first-seen order."""
        unique: List[str] = []
        for name in v:
            if name and name.strip() and name not in unique:
                unique.append(name)
        return unique


# ============================================================================
# Pipeline records
# ============================================================================


@dataclass(frozen=True)
class ArchiveEntry:
    """Admissible archive member: root-stripped path and decoded text."""

    path: str
    content: str

    @property
    def filename(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass
class FileAnalysis:
    """
    Heuristic extraction result for one file.

    Attributes:
        functions: Function name -> location, first signature wins
        imports: Raw import specifiers in source order
    """

    functions: Dict[str, FunctionLocation] = field(default_factory=dict)
    imports: List[str] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "FileAnalysis":
        return cls()

    def add_function(self, name: str, line_start: int, line_count: int) -> None:
        if name not in self.functions:
            self.functions[name] = FunctionLocation(
                line_start=line_start, line_count=max(line_count, 1)
            )


@dataclass
class ResolvedDependencies:
    """
    Output of the dependency resolver.

    Attributes:
        edges: Edges in row-major (source, target) order
        dependencies: Per-node ordered list of dependency filepaths
    """

    edges: List[Edge]
    dependencies: List[List[str]]

    @classmethod
    def for_nodes(cls, count: int) -> "ResolvedDependencies":
        return cls(edges=[], dependencies=[[] for _ in range(count)])


def node_filepaths(graph: Graph) -> List[str]:
    return [node.filepath for node in graph.nodes]
