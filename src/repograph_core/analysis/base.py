"""Base class for heuristic per-file analyzers.

Analyzers scan raw text line by line. While searching they match a
language-specific signature pattern; on a match the block extent is measured
either by brace depth (C-family languages) or by indentation (Python).
"""

import re
from abc import ABC, abstractmethod
from typing import FrozenSet, List, Tuple

import structlog

from ..models import FileAnalysis

logger = structlog.get_logger(__name__)

DEFAULT_MAX_SCAN_LINES = 200
DEFAULT_LOOKAHEAD_LINES = 5

# Control-flow keywords that signature patterns tend to pick up as names.
RESERVED_NAMES: FrozenSet[str] = frozenset({"if", "for", "while", "switch", "catch"})

_STRING_LITERAL = re.compile(r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\'|`(?:\\.|[^`\\])*`')
_LINE_COMMENT = re.compile(r"//.*$")


def split_lines(content: str) -> List[str]:
    """Split content on newlines, keeping a trailing empty segment."""
    return content.split("\n")


def strip_literals(line: str) -> str:
    """Blank out string literals and ``//`` comments so braces inside them are ignored."""
    return _LINE_COMMENT.sub("", _STRING_LITERAL.sub('""', line))


class BaseFileAnalyzer(ABC):
    """Abstract base class for language-specific heuristic analyzers.

    Subclasses declare which language tags they handle and implement
    ``analyze``. Brace-delimited languages share ``measure_brace_block``.

    Attributes:
        max_scan_lines: Lines scanned for the end of a block before giving up.
        lookahead_lines: Lines (including the signature line) searched for an
            opening brace.

    Example:
        >>> class MyAnalyzer(BaseFileAnalyzer):
        ...     @property
        ...     def languages(self) -> tuple[str, ...]:
        ...         return ("mylang",)
        ...
        ...     def analyze(self, content: str) -> FileAnalysis:
        ...         return FileAnalysis.empty()
    """

    reserved_names: FrozenSet[str] = RESERVED_NAMES

    def __init__(
        self,
        max_scan_lines: int = DEFAULT_MAX_SCAN_LINES,
        lookahead_lines: int = DEFAULT_LOOKAHEAD_LINES,
    ) -> None:
        if max_scan_lines < 1:
            raise ValueError(f"max_scan_lines must be >= 1, got {max_scan_lines}")
        if lookahead_lines < 1:
            raise ValueError(f"lookahead_lines must be >= 1, got {lookahead_lines}")
        self.max_scan_lines = max_scan_lines
        self.lookahead_lines = lookahead_lines

    @property
    @abstractmethod
    def languages(self) -> Tuple[str, ...]:
        """Return the language tags handled by this analyzer."""
        ...

    @abstractmethod
    def analyze(self, content: str) -> FileAnalysis:
        """Extract the function inventory and import specifiers from ``content``.

        Args:
            content: Raw file text.

        Returns:
            FileAnalysis with functions keyed by name and raw imports.
        """
        ...

    def is_valid_name(self, name: str) -> bool:
        return bool(name) and name not in self.reserved_names

    def measure_brace_block(self, lines: List[str], start: int) -> int:
        """Count the lines of the brace-delimited block starting at ``start``.

        The opening brace may sit up to ``lookahead_lines - 1`` lines below the
        signature. A line ending in ``;`` before any brace means there is no
        body (prototype, abstract method, expression-bodied arrow). Returns 1
        when no body is found or the block does not close within
        ``max_scan_lines`` lines.

        Args:
            lines: All lines of the file.
            start: 0-based index of the signature line.

        Returns:
            Number of lines from the signature through the closing brace.
        """
        opening = None
        for index in range(start, min(start + self.lookahead_lines, len(lines))):
            code = strip_literals(lines[index])
            if "{" in code:
                opening = index
                break
            if code.rstrip().endswith(";"):
                break

        if opening is None:
            return 1

        depth = 0
        count = 0
        for index in range(start, len(lines)):
            code = strip_literals(lines[index])
            depth += code.count("{") - code.count("}")
            count += 1
            if index >= opening and depth <= 0:
                return count
            if count >= self.max_scan_lines:
                logger.debug("brace_block_scan_limit_reached", line_start=start + 1)
                return 1

        return 1

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(languages={self.languages!r})"
