"""
DependencyResolver - infer weighted file-to-file dependency edges.

For every ordered pair of files (A, B) with A != B the raw score is:

- ``import_match_score`` when one of A's imports, reduced to its last path
  segment without extension, equals B's filename without extension;
- plus one point per whole-word occurrence of B's filename without extension
  in A's content.

A positive raw score yields the edge ``(A, B, round(ln(raw + 1), 2))``.

Direct-import candidates are looked up in a hash index keyed by basename,
so that part is linear in the number of imports. Content references are
counted from one token histogram per source file; that pass still visits
every (A, B) pair and is bounded by ``max_reference_scan_chars``.

License: MIT
"""

from __future__ import annotations

import math
import re
import time
from collections import Counter, defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import structlog

from ..models import ArchiveEntry, Edge, FileAnalysis, ResolvedDependencies

logger = structlog.get_logger(__name__)

DEFAULT_IMPORT_MATCH_SCORE = 5

_EXTENSION = re.compile(r"\.[^/.]+$")
_WORD = re.compile(r"\w+", re.ASCII)
_PURE_WORD = re.compile(r"^\w+$", re.ASCII)


def strip_extension(name: str) -> str:
    """Remove the last extension from a filename (``a.test.ts`` -> ``a.test``)."""
    return _EXTENSION.sub("", name)


def normalize_import(specifier: str) -> str:
    """Reduce an import specifier to its last path segment without extension."""
    last = specifier.split("/")[-1]
    return strip_extension(last) if last else ""


def edge_weight(raw_score: int) -> float:
    """Log-scale a positive raw score, rounded to 2 decimals."""
    return round(math.log(raw_score + 1), 2)


@dataclass
class _SourceFile:
    filepath: str
    name: str
    content: str
    imports: Tuple[str, ...]


class DependencyResolver:
    """
    Infers directed, weighted dependency edges over a full set of files.

    Attributes:
        import_match_score: Raw score for a direct import match
        max_reference_scan_chars: Characters of each file scanned for name
            references (0 scans the whole file)
        max_workers: Thread pool size; each worker owns a disjoint range of
            source rows and results are merged in row order after the join

    Example:
        ```python
        resolver = DependencyResolver()
        resolved = resolver.resolve(entries, analyses)
        resolved.edges  # [Edge(source=1, target=0, weight=1.95)]
        ```
    """

    def __init__(
        self,
        import_match_score: int = DEFAULT_IMPORT_MATCH_SCORE,
        max_reference_scan_chars: int = 0,
        max_workers: int = 1,
    ) -> None:
        if import_match_score < 1:
            raise ValueError(f"import_match_score must be >= 1, got {import_match_score}")
        if max_reference_scan_chars < 0:
            raise ValueError(
                f"max_reference_scan_chars must be >= 0, got {max_reference_scan_chars}"
            )
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")

        self.import_match_score = import_match_score
        self.max_reference_scan_chars = max_reference_scan_chars
        self.max_workers = max_workers

    def resolve(
        self,
        entries: Sequence[ArchiveEntry],
        analyses: Sequence[FileAnalysis],
    ) -> ResolvedDependencies:
        """
        Compute edges and per-node dependency lists.

        Args:
            entries: Files in node-index order
            analyses: Per-file analysis results, aligned with ``entries``

        Returns:
            ResolvedDependencies with edges in (source, target) order

        Raises:
            ValueError: If entries and analyses differ in length
        """
        if len(entries) != len(analyses):
            raise ValueError(
                f"entries ({len(entries)}) and analyses ({len(analyses)}) must align"
            )

        start = time.perf_counter()
        files = [
            _SourceFile(
                filepath=entry.path,
                name=strip_extension(entry.filename),
                content=self._scan_window(entry),
                imports=tuple(analysis.imports),
            )
            for entry, analysis in zip(entries, analyses)
        ]

        name_index: Dict[str, List[int]] = defaultdict(list)
        for index, source_file in enumerate(files):
            name_index[source_file.name].append(index)

        rows = self._row_ranges(len(files))
        if len(rows) == 1:
            chunks = [self._resolve_rows(files, name_index, *rows[0])]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                chunks = list(
                    executor.map(lambda row: self._resolve_rows(files, name_index, *row), rows)
                )

        resolved = ResolvedDependencies.for_nodes(len(files))
        for row_start, (edges, dependencies) in zip((row[0] for row in rows), chunks):
            resolved.edges.extend(edges)
            for offset, deps in enumerate(dependencies):
                resolved.dependencies[row_start + offset] = deps

        logger.debug(
            "dependencies_resolved",
            file_count=len(files),
            edge_count=len(resolved.edges),
            workers=len(rows),
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return resolved

    def _scan_window(self, entry: ArchiveEntry) -> str:
        limit = self.max_reference_scan_chars
        if limit and len(entry.content) > limit:
            logger.info(
                "reference_scan_truncated",
                filepath=entry.path,
                num_characters=len(entry.content),
                scanned_characters=limit,
            )
            return entry.content[:limit]
        return entry.content

    def _row_ranges(self, count: int) -> List[Tuple[int, int]]:
        workers = max(1, min(self.max_workers, count))
        size = math.ceil(count / workers) if count else 0
        if workers == 1 or size == 0:
            return [(0, count)]
        return [(start, min(start + size, count)) for start in range(0, count, size)]

    def _resolve_rows(
        self,
        files: List[_SourceFile],
        name_index: Dict[str, List[int]],
        row_start: int,
        row_stop: int,
    ) -> Tuple[List[Edge], List[List[str]]]:
        edges: List[Edge] = []
        dependencies: List[List[str]] = []

        for source in range(row_start, row_stop):
            scores = self._score_row(files, name_index, source)
            deps: List[str] = []
            for target in sorted(scores):
                edges.append(Edge(source=source, target=target, weight=edge_weight(scores[target])))
                deps.append(files[target].filepath)
            dependencies.append(deps)

        return edges, dependencies

    def _score_row(
        self,
        files: List[_SourceFile],
        name_index: Dict[str, List[int]],
        source: int,
    ) -> Dict[int, int]:
        source_file = files[source]
        scores: Dict[int, int] = defaultdict(int)

        imported = {normalize_import(specifier) for specifier in source_file.imports}
        for name in imported:
            for target in name_index.get(name, ()):
                if target != source:
                    scores[target] += self.import_match_score

        tokens = Counter(_WORD.findall(source_file.content))
        for name, targets in name_index.items():
            if _PURE_WORD.match(name):
                occurrences = tokens.get(name, 0)
            else:
                occurrences = count_word_occurrences(source_file.content, name)
            if not occurrences:
                continue
            for target in targets:
                if target != source:
                    scores[target] += occurrences

        return scores


def count_word_occurrences(content: str, name: str) -> int:
    """Count whole-word (ASCII word boundary) occurrences of ``name``."""
    if not name:
        return 0
    pattern = re.compile(rf"\b{re.escape(name)}\b", re.ASCII)
    return len(pattern.findall(content))
