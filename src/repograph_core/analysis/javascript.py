"""JavaScript / TypeScript heuristic analyzer.

Detects named function declarations, arrow functions assigned to
``const``/``let``/``var``, and method-style ``name(...) {`` signatures.
Imports cover ES module ``import``/``export ... from``, side-effect and
dynamic ``import``, and CommonJS ``require``.
"""

import re
from typing import Tuple

from ..models import FileAnalysis
from .base import RESERVED_NAMES, BaseFileAnalyzer, split_lines


FUNCTION_PATTERN = re.compile(
    r"function\s*\*?\s+(\w+)"
    r"|(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s*)?(?:\(.*\)|[^=]*)\s*=>"
    r"|(\w+)\s*\([^)]*\)\s*(?::\s*[^{;=]+)?\{"
)

IMPORT_PATTERN = re.compile(
    r"""\b(?:import|export)\s+(?:type\s+)?[^'"]*?\bfrom\s+['"]([^'"]+)['"]"""
    r"""|\bimport\s*\(?\s*['"]([^'"]+)['"]"""
    r"""|\brequire\(\s*['"]([^'"]+)['"]\s*\)"""
    r"""|^\s*\}\s*from\s+['"]([^'"]+)['"]"""
)

JS_RESERVED_NAMES = RESERVED_NAMES | frozenset({"function", "return"})


class JavaScriptAnalyzer(BaseFileAnalyzer):
    """Analyzer for JavaScript and TypeScript sources (including JSX/TSX)."""

    reserved_names = JS_RESERVED_NAMES

    @property
    def languages(self) -> Tuple[str, ...]:
        return ("javascript", "typescript")

    def analyze(self, content: str) -> FileAnalysis:
        lines = split_lines(content)
        analysis = FileAnalysis()

        for index, line in enumerate(lines):
            for match in IMPORT_PATTERN.finditer(line):
                specifier = next(group for group in match.groups() if group)
                analysis.imports.append(specifier)

            func_match = FUNCTION_PATTERN.search(line)
            if not func_match:
                continue

            name = func_match.group(1) or func_match.group(2) or func_match.group(3)
            if not self.is_valid_name(name) or name in analysis.functions:
                continue

            analysis.add_function(name, index + 1, self.measure_brace_block(lines, index))

        return analysis
