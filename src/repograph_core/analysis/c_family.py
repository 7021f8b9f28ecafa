"""C and C++ heuristic analyzer.

Function definitions are recognized at column 0 as ``Type name(`` with
optional storage/qualifier keywords and C++ scope qualification
(``Widget::draw``). Prototypes are recorded with ``line_count = 1``.
``#include`` targets are collected verbatim.
"""

import re
from typing import Tuple

from ..models import FileAnalysis
from .base import RESERVED_NAMES, BaseFileAnalyzer, split_lines

INCLUDE_PATTERN = re.compile(r"^\s*#\s*include\s*[<\"]([^>\"]+)[>\"]")

FUNCTION_PATTERN = re.compile(
    r"^(?:(?:static|inline|extern|const|unsigned|signed|struct|enum|virtual|constexpr)\s+)*"
    r"(?P<type>[A-Za-z_][\w:<>,]*)[\s*&]+"
    r"(?P<name>(?:\w+::)*~?\w+)\s*\("
)

NON_TYPE_KEYWORDS = frozenset({"return", "else", "new", "delete", "case", "goto", "typedef"})

C_RESERVED_NAMES = RESERVED_NAMES | frozenset({"return", "sizeof", "defined"})


class CFamilyAnalyzer(BaseFileAnalyzer):
    """Analyzer for C and C++ sources and headers."""

    reserved_names = C_RESERVED_NAMES

    @property
    def languages(self) -> Tuple[str, ...]:
        return ("c", "cpp")

    def analyze(self, content: str) -> FileAnalysis:
        lines = split_lines(content)
        analysis = FileAnalysis()

        for index, line in enumerate(lines):
            include_match = INCLUDE_PATTERN.match(line)
            if include_match:
                analysis.imports.append(include_match.group(1))
                continue

            func_match = FUNCTION_PATTERN.match(line)
            if not func_match or func_match.group("type") in NON_TYPE_KEYWORDS:
                continue

            name = func_match.group("name")
            if not self.is_valid_name(name) or name in analysis.functions:
                continue

            analysis.add_function(name, index + 1, self.measure_brace_block(lines, index))

        return analysis
