"""
File categorization.

Classes:
    Categorizer: Adapter protocol (filepaths -> categories and assignments).
    CallableCategorizer: Wraps a plain sync or async function.
    OllamaCategorizer: LLM-backed adapter using a local Ollama server.
    GraphSession: Current-graph holder that merges results by epoch.

License: MIT
"""

from .base import CallableCategorizer, Categorizer, apply_categorization, coerce_result
from .ollama import OllamaCategorizer
from .session import CategorizationOutcome, GraphSession

__all__ = [
    "Categorizer",
    "CallableCategorizer",
    "OllamaCategorizer",
    "GraphSession",
    "CategorizationOutcome",
    "apply_categorization",
    "coerce_result",
]
