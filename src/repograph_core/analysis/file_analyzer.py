"""
FileAnalyzer - language dispatch and failure boundary for per-file analysis.

Selects an analyzer by language tag and converts any exception raised while
analyzing a single file into an empty result, so one malformed file never
aborts a batch.

License: MIT
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Sequence

import structlog

from ..exceptions import AnalysisError
from ..models import ArchiveEntry, FileAnalysis
from .base import DEFAULT_LOOKAHEAD_LINES, DEFAULT_MAX_SCAN_LINES, BaseFileAnalyzer
from .c_family import CFamilyAnalyzer
from .go import GoAnalyzer
from .java import JavaAnalyzer
from .javascript import JavaScriptAnalyzer
from .languages import get_language_from_extension
from .python import PythonAnalyzer
from .rust import RustAnalyzer

logger = structlog.get_logger(__name__)

ANALYZER_CLASSES = (
    JavaScriptAnalyzer,
    PythonAnalyzer,
    JavaAnalyzer,
    CFamilyAnalyzer,
    GoAnalyzer,
    RustAnalyzer,
)


class FileAnalyzer:
    """
    Dispatches files to language analyzers and runs batches concurrently.

    Attributes:
        max_workers: Upper bound on concurrent analyses in ``analyze_files``.

    Example:
        ```python
        analyzer = FileAnalyzer(max_workers=4)
        analysis = analyzer.analyze("def main():\\n    pass\\n", "app/main.py")
        analysis.functions["main"].line_count  # 3
        ```
    """

    def __init__(
        self,
        max_workers: int = 4,
        max_scan_lines: int = DEFAULT_MAX_SCAN_LINES,
        lookahead_lines: int = DEFAULT_LOOKAHEAD_LINES,
        analyzers: Optional[Iterable[BaseFileAnalyzer]] = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")

        self.max_workers = max_workers
        self._analyzers: Dict[str, BaseFileAnalyzer] = {}

        if analyzers is None:
            analyzers = [
                cls(max_scan_lines=max_scan_lines, lookahead_lines=lookahead_lines)
                for cls in ANALYZER_CLASSES
            ]
        for analyzer in analyzers:
            self.register(analyzer)

    def register(self, analyzer: BaseFileAnalyzer) -> None:
        """Register ``analyzer`` for each language it declares, replacing earlier ones."""
        for language in analyzer.languages:
            self._analyzers[language] = analyzer

    def get_analyzer(self, language: str) -> Optional[BaseFileAnalyzer]:
        return self._analyzers.get(language)

    @property
    def supported_languages(self) -> List[str]:
        return sorted(self._analyzers)

    def analyze(self, content: str, filepath: str) -> FileAnalysis:
        """
        Analyze one file.

        Args:
            content: Decoded file text
            filepath: Archive-relative path, used for language detection

        Returns:
            FileAnalysis; empty for unsupported languages or when the
            language analyzer raises.
        """
        language = get_language_from_extension(filepath)
        analyzer = self._analyzers.get(language)
        if analyzer is None:
            return FileAnalysis.empty()

        try:
            return analyzer.analyze(content)
        except Exception as exc:
            error = AnalysisError(
                message=f"Failed to analyze {filepath}",
                details={"filepath": filepath, "language": language},
                original_exception=exc,
            )
            logger.warning(
                "file_analysis_failed",
                filepath=filepath,
                language=language,
                error=str(exc),
                error_code=error.error_code,
                correlation_id=error.correlation_id,
            )
            return FileAnalysis.empty()

    def analyze_files(self, entries: Sequence[ArchiveEntry]) -> List[FileAnalysis]:
        """
        Analyze a batch of archive entries.

        Results are returned in input order. Uses a thread pool when more
        than one worker is configured and there is more than one entry.
        """
        start = time.perf_counter()

        if self.max_workers == 1 or len(entries) < 2:
            results = [self.analyze(entry.content, entry.path) for entry in entries]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(
                    executor.map(lambda entry: self.analyze(entry.content, entry.path), entries)
                )

        logger.debug(
            "files_analyzed",
            file_count=len(entries),
            function_count=sum(len(result.functions) for result in results),
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return results


_default_analyzer: Optional[FileAnalyzer] = None


def analyze_file(content: str, filepath: str) -> FileAnalysis:
    """Analyze one file with a shared default FileAnalyzer."""
    global _default_analyzer
    if _default_analyzer is None:
        _default_analyzer = FileAnalyzer(max_workers=1)
    return _default_analyzer.analyze(content, filepath)
