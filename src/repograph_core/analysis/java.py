"""Java heuristic analyzer.

Methods are recognized by ``[modifiers] ReturnType name(`` at the start of a
line; constructors are picked up with their access modifier in the return
type slot. Imports are emitted in ``/`` form (``java.util.List`` ->
``java/util/List``) so the last segment names the class file.
"""

import re
from typing import Tuple

from ..models import FileAnalysis
from .base import RESERVED_NAMES, BaseFileAnalyzer, split_lines

IMPORT_PATTERN = re.compile(r"^\s*import\s+(?:static\s+)?([\w.]+(?:\.\*)?)\s*;")

METHOD_PATTERN = re.compile(
    r"^\s*(?:@\w+(?:\([^)]*\))?\s+)*"
    r"(?:(?:public|private|protected|static|final|abstract|synchronized|native|default)\s+)*"
    r"(?:<[^>]+>\s+)?"
    r"(?P<type>[\w.]+(?:\s*<[^()]*>)?(?:\s*\[\])*)\s+(?P<name>\w+)\s*\("
)

# Statement keywords that can occupy the return-type slot of METHOD_PATTERN.
NON_TYPE_KEYWORDS = frozenset({"return", "new", "throw", "else", "case", "yield", "assert"})

JAVA_RESERVED_NAMES = RESERVED_NAMES | frozenset({"synchronized", "return", "new"})


class JavaAnalyzer(BaseFileAnalyzer):
    """Analyzer for Java sources."""

    reserved_names = JAVA_RESERVED_NAMES

    @property
    def languages(self) -> Tuple[str, ...]:
        return ("java",)

    def analyze(self, content: str) -> FileAnalysis:
        lines = split_lines(content)
        analysis = FileAnalysis()

        for index, line in enumerate(lines):
            import_match = IMPORT_PATTERN.match(line)
            if import_match:
                analysis.imports.append(import_match.group(1).replace(".", "/"))
                continue

            method_match = METHOD_PATTERN.match(line)
            if not method_match or method_match.group("type") in NON_TYPE_KEYWORDS:
                continue

            name = method_match.group("name")
            if not self.is_valid_name(name) or name in analysis.functions:
                continue

            analysis.add_function(name, index + 1, self.measure_brace_block(lines, index))

        return analysis
