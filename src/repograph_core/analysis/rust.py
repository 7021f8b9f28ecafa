"""Rust heuristic analyzer.

Recognizes ``fn`` items with visibility and qualifier prefixes
(``pub(crate) async unsafe fn``). ``use a::b::c`` is emitted as ``a/b/c``
and ``mod name;`` as ``name`` so the resolver can match module files.
"""

import re
from typing import Tuple

from ..models import FileAnalysis
from .base import BaseFileAnalyzer, split_lines

_VISIBILITY = r"(?:pub(?:\([^)]*\))?\s+)?"

FN_PATTERN = re.compile(
    r"^\s*" + _VISIBILITY + r"(?:default\s+)?(?:const\s+)?(?:async\s+)?(?:unsafe\s+)?"
    r"(?:extern\s+\"[^\"]*\"\s+)?fn\s+(\w+)"
)
USE_PATTERN = re.compile(r"^\s*" + _VISIBILITY + r"use\s+([\w:]+)")
MOD_PATTERN = re.compile(r"^\s*" + _VISIBILITY + r"mod\s+(\w+)\s*;")


class RustAnalyzer(BaseFileAnalyzer):
    """Analyzer for Rust sources."""

    @property
    def languages(self) -> Tuple[str, ...]:
        return ("rust",)

    def analyze(self, content: str) -> FileAnalysis:
        lines = split_lines(content)
        analysis = FileAnalysis()

        for index, line in enumerate(lines):
            use_match = USE_PATTERN.match(line)
            if use_match:
                path = use_match.group(1).rstrip(":").replace("::", "/")
                if path:
                    analysis.imports.append(path)
                continue

            mod_match = MOD_PATTERN.match(line)
            if mod_match:
                analysis.imports.append(mod_match.group(1))
                continue

            fn_match = FN_PATTERN.match(line)
            if not fn_match:
                continue

            name = fn_match.group(1)
            if not self.is_valid_name(name) or name in analysis.functions:
                continue

            analysis.add_function(name, index + 1, self.measure_brace_block(lines, index))

        return analysis
