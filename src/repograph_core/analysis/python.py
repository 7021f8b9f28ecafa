"""Python heuristic analyzer.

Function extents follow indentation: a ``def`` block covers every following
line that is blank or indented strictly deeper than the ``def`` line, up to
the first line at the same or a shallower indentation.

Import specifiers are emitted in ``/`` form (``pkg.mod`` -> ``pkg/mod``,
leading relative dots dropped) so that the last path segment names the module
file. ``from . import a, b`` records ``a`` and ``b``.
"""

import re
from typing import List, Tuple

from ..models import FileAnalysis
from .base import BaseFileAnalyzer, split_lines

DEF_PATTERN = re.compile(r"^(\s*)(?:async\s+)?def\s+(\w+)")
FROM_IMPORT_PATTERN = re.compile(r"^\s*from\s+([\w.]+)\s+import\s+(.+)$")
IMPORT_PATTERN = re.compile(r"^\s*import\s+([\w.][\w.,\s]*)")
_ALIAS = re.compile(r"\s+as\s+\w+")


def _module_to_path(module: str) -> str:
    return module.lstrip(".").replace(".", "/")


def _split_names(names: str) -> List[str]:
    names = _ALIAS.sub("", names.split("#", 1)[0])
    cleaned = names.replace("(", " ").replace(")", " ").replace("\\", " ")
    return [part.strip() for part in cleaned.split(",") if part.strip()]


def _indentation(line: str) -> int:
    return len(line) - len(line.lstrip())


class PythonAnalyzer(BaseFileAnalyzer):
    """Analyzer for Python sources."""

    @property
    def languages(self) -> Tuple[str, ...]:
        return ("python",)

    def analyze(self, content: str) -> FileAnalysis:
        lines = split_lines(content)
        analysis = FileAnalysis()

        for index, line in enumerate(lines):
            analysis.imports.extend(self._extract_imports(line))

            def_match = DEF_PATTERN.match(line)
            if not def_match:
                continue

            name = def_match.group(2)
            if not self.is_valid_name(name) or name in analysis.functions:
                continue

            analysis.add_function(name, index + 1, self._measure_indented_block(lines, index))

        return analysis

    def _extract_imports(self, line: str) -> List[str]:
        from_match = FROM_IMPORT_PATTERN.match(line)
        if from_match:
            module = _module_to_path(from_match.group(1))
            if module:
                return [module]
            return [name for name in _split_names(from_match.group(2)) if name != "*"]

        import_match = IMPORT_PATTERN.match(line)
        if import_match:
            return [_module_to_path(name) for name in _split_names(import_match.group(1))]

        return []

    def _measure_indented_block(self, lines: List[str], start: int) -> int:
        base_indent = _indentation(lines[start])
        count = 1
        for line in lines[start + 1 :]:
            if not line.strip():
                count += 1
                continue
            if _indentation(line) > base_indent:
                count += 1
            else:
                break
        return count
