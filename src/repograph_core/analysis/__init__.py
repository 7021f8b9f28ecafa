"""Heuristic per-file analysis.

This package classifies files by extension and extracts a best-effort
function inventory and import list from raw text, without parsing.

Classes:
    BaseFileAnalyzer: Abstract base class for language analyzers.
    FileAnalyzer: Language dispatch, failure boundary, batch execution.
    JavaScriptAnalyzer: JavaScript and TypeScript.
    PythonAnalyzer: Python (indentation-delimited blocks).
    JavaAnalyzer: Java.
    CFamilyAnalyzer: C and C++.
    GoAnalyzer: Go.
    RustAnalyzer: Rust.

License: MIT
"""

from .base import BaseFileAnalyzer
from .c_family import CFamilyAnalyzer
from .file_analyzer import FileAnalyzer, analyze_file
from .go import GoAnalyzer
from .java import JavaAnalyzer
from .javascript import JavaScriptAnalyzer
from .languages import (
    CODE_EXTENSIONS,
    LANGUAGES,
    get_extension,
    get_language_from_extension,
)
from .python import PythonAnalyzer
from .rust import RustAnalyzer

__all__ = [
    # Base class
    "BaseFileAnalyzer",
    # Dispatch
    "FileAnalyzer",
    "analyze_file",
    # Language analyzers
    "JavaScriptAnalyzer",
    "PythonAnalyzer",
    "JavaAnalyzer",
    "CFamilyAnalyzer",
    "GoAnalyzer",
    "RustAnalyzer",
    # Classification
    "LANGUAGES",
    "CODE_EXTENSIONS",
    "get_extension",
    "get_language_from_extension",
]
