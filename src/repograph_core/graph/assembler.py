"""
GraphAssembler - combine per-file results into an immutable Graph snapshot.

Node indices follow archive discovery order. Each snapshot carries an epoch
token from a process-wide, monotonically increasing counter so that callers
can tell successive construction runs apart.

License: MIT
"""

from __future__ import annotations

from typing import Sequence

import structlog

from ..models import (
    ArchiveEntry,
    FileAnalysis,
    FileNode,
    Graph,
    ResolvedDependencies,
    next_epoch,
)

logger = structlog.get_logger(__name__)

DEFAULT_CATEGORY = "General"


def count_lines(content: str) -> int:
    """Number of newline-delimited segments (an empty file has one)."""
    return len(content.split("\n"))


class GraphAssembler:
    """
    Builds the Graph handed to callers.

    Attributes:
        default_category: Name of the single placeholder category
    """

    def __init__(self, default_category: str = DEFAULT_CATEGORY) -> None:
        if not default_category:
            raise ValueError("default_category cannot be empty")
        self.default_category = default_category

    def assemble(
        self,
        entries: Sequence[ArchiveEntry],
        analyses: Sequence[FileAnalysis],
        resolved: ResolvedDependencies,
    ) -> Graph:
        """
        Assemble nodes and edges into a validated Graph.

        Args:
            entries: Files in discovery order
            analyses: Per-file analyses aligned with ``entries``
            resolved: Edges and dependency lists from the resolver

        Returns:
            Graph with every node in category 0 and a fresh epoch

        Raises:
            ValueError: If the inputs do not align
        """
        if not (len(entries) == len(analyses) == len(resolved.dependencies)):
            raise ValueError(
                "entries, analyses and dependency lists must have the same length "
                f"({len(entries)}, {len(analyses)}, {len(resolved.dependencies)})"
            )

        nodes = [
            FileNode(
                filepath=entry.path,
                num_lines=count_lines(entry.content),
                num_characters=len(entry.content),
                category=0,
                functions=dict(analysis.functions),
                description="",
                file_dependencies=list(dependencies),
            )
            for entry, analysis, dependencies in zip(entries, analyses, resolved.dependencies)
        ]

        graph = Graph(
            categories=[self.default_category],
            nodes=nodes,
            edges=list(resolved.edges),
            epoch=next_epoch(),
        )

        logger.info(
            "graph_assembled",
            epoch=graph.epoch,
            node_count=len(graph.nodes),
            edge_count=len(graph.edges),
        )
        return graph
