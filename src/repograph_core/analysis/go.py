"""Go heuristic analyzer.

Handles ``func name(`` and method declarations with a receiver
(``func (s *Server) Start(``), plus single and grouped ``import`` forms.
"""

import re
from typing import Tuple

from ..models import FileAnalysis
from .base import BaseFileAnalyzer, split_lines

FUNC_PATTERN = re.compile(r"^func\s+(?:\([^)]*\)\s*)?(\w+)\s*[\[(]")
SINGLE_IMPORT_PATTERN = re.compile(r'^import\s+(?:[\w.]+\s+)?"([^"]+)"')
IMPORT_BLOCK_START = re.compile(r"^import\s*\(")
IMPORT_BLOCK_ENTRY = re.compile(r'^\s*(?:[\w.]+\s+)?"([^"]+)"')
IMPORT_BLOCK_END = re.compile(r"^\s*\)")


class GoAnalyzer(BaseFileAnalyzer):
    """Analyzer for Go sources."""

    @property
    def languages(self) -> Tuple[str, ...]:
        return ("go",)

    def analyze(self, content: str) -> FileAnalysis:
        lines = split_lines(content)
        analysis = FileAnalysis()
        in_import_block = False

        for index, line in enumerate(lines):
            if in_import_block:
                if IMPORT_BLOCK_END.match(line):
                    in_import_block = False
                    continue
                entry_match = IMPORT_BLOCK_ENTRY.match(line)
                if entry_match:
                    analysis.imports.append(entry_match.group(1))
                continue

            if IMPORT_BLOCK_START.match(line):
                in_import_block = True
                continue

            import_match = SINGLE_IMPORT_PATTERN.match(line)
            if import_match:
                analysis.imports.append(import_match.group(1))
                continue

            func_match = FUNC_PATTERN.match(line)
            if not func_match:
                continue

            name = func_match.group(1)
            if not self.is_valid_name(name) or name in analysis.functions:
                continue

            analysis.add_function(name, index + 1, self.measure_brace_block(lines, index))

        return analysis
