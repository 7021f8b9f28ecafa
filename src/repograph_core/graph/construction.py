"""
Graph construction pipeline: archive bytes -> Graph.

Archive Loader -> Per-File Analyzer -> Dependency Resolver -> Graph Assembler.
Construction holds no ambient state; the caller owns any notion of a
"current" graph.

License: MIT
"""

from __future__ import annotations

import time
from typing import Optional

import structlog

from ..analysis.file_analyzer import FileAnalyzer
from ..archive.loader import ArchiveLoader
from ..config import RepographSettings
from ..config import settings as default_settings
from ..models import Graph
from .assembler import GraphAssembler
from .dependency_resolver import DependencyResolver

logger = structlog.get_logger(__name__)


class GraphConstructor:
    """
    Configurable graph construction pipeline.

    Attributes:
        loader: ArchiveLoader used to unpack archives
        analyzer: FileAnalyzer used for per-file extraction
        resolver: DependencyResolver used for edges
        assembler: GraphAssembler used for the final snapshot

    Example:
        ```python
        constructor = GraphConstructor()
        graph = constructor.construct(zip_bytes)
        print(graph.to_json(indent=2))
        ```
    """

    def __init__(
        self,
        settings: Optional[RepographSettings] = None,
        loader: Optional[ArchiveLoader] = None,
        analyzer: Optional[FileAnalyzer] = None,
        resolver: Optional[DependencyResolver] = None,
        assembler: Optional[GraphAssembler] = None,
    ) -> None:
        cfg = settings or default_settings

        self.loader = loader or ArchiveLoader({"max_file_size": cfg.max_file_size})
        self.analyzer = analyzer or FileAnalyzer(
            max_workers=cfg.analysis_workers,
            max_scan_lines=cfg.max_block_scan_lines,
            lookahead_lines=cfg.brace_lookahead_lines,
        )
        self.resolver = resolver or DependencyResolver(
            import_match_score=cfg.import_match_score,
            max_reference_scan_chars=cfg.max_reference_scan_chars,
            max_workers=cfg.resolver_workers,
        )
        self.assembler = assembler or GraphAssembler(default_category=cfg.default_category)

    def construct(self, archive: bytes, root_folder: Optional[str] = None) -> Graph:
        """
        Build the dependency graph for ``archive``.

        Args:
            archive: Zip bytes of a repository snapshot
            root_folder: Folder to strip from entry paths (None = discover)

        Returns:
            Graph snapshot with default categories

        Raises:
            InvalidArchiveError: If the archive cannot be unpacked
            EmptyArchiveError: If the archive has no recognizable source files
        """
        start = time.perf_counter()

        entries = self.loader.load(archive, root_folder=root_folder)
        analyses = self.analyzer.analyze_files(entries)
        resolved = self.resolver.resolve(entries, analyses)
        graph = self.assembler.assemble(entries, analyses, resolved)

        logger.info(
            "graph_constructed",
            epoch=graph.epoch,
            node_count=len(graph.nodes),
            edge_count=len(graph.edges),
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return graph


def construct_graph(
    archive: bytes,
    root_folder: Optional[str] = None,
    settings: Optional[RepographSettings] = None,
) -> Graph:
    """Build a Graph from zip bytes with a one-off GraphConstructor."""
    return GraphConstructor(settings=settings).construct(archive, root_folder=root_folder)
