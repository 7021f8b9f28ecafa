"""
repograph core.

Builds a file-level dependency graph from a zipped repository snapshot:
archive loading, heuristic per-file analysis, dependency resolution, graph
assembly, and optional categorization through a pluggable adapter.

License: MIT
"""

from .config import RepographSettings, get_config_summary, settings
from .exceptions import (
    AnalysisError,
    ArchiveError,
    CategorizationError,
    EmptyArchiveError,
    InvalidArchiveError,
    RepographError,
    TimeoutError,
    ValidationError,
)
from .graph import GraphConstructor, construct_graph
from .logging_service import LoggingConfig, LoggingService
from .models import (
    ArchiveEntry,
    CategorizationResult,
    Edge,
    FileAnalysis,
    FileNode,
    FunctionLocation,
    Graph,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Configuration
    "RepographSettings",
    "get_config_summary",
    "settings",
    # Exceptions
    "RepographError",
    "ValidationError",
    "ArchiveError",
    "InvalidArchiveError",
    "EmptyArchiveError",
    "AnalysisError",
    "CategorizationError",
    "TimeoutError",
    # Logging
    "LoggingConfig",
    "LoggingService",
    # Models
    "ArchiveEntry",
    "CategorizationResult",
    "Edge",
    "FileAnalysis",
    "FileNode",
    "FunctionLocation",
    "Graph",
    # Construction
    "GraphConstructor",
    "construct_graph",
]
