"""
Archive loading for repograph.

License: MIT
"""

from .loader import DEFAULT_LOCKFILES, ArchiveLoader, discover_root

__all__ = [
    "ArchiveLoader",
    "DEFAULT_LOCKFILES",
    "discover_root",
]
