"""
ArchiveLoader for unpacking repository snapshots into code entries.

Provides functionality to:
- Open zip archives held in memory
- Discover and strip the common root folder (e.g. "repo-main/")
- Filter hidden files, lockfiles, oversized and non-code entries
- Decode admissible entries to text in archive order

License: MIT
"""

import io
import lzma
import zipfile
import zlib
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

import structlog

from repograph_core.analysis.languages import CODE_EXTENSIONS, get_extension
from repograph_core.exceptions import EmptyArchiveError, InvalidArchiveError, ValidationError
from repograph_core.models import ArchiveEntry

logger = structlog.get_logger(__name__)

# Dependency lockfiles are generated, never hand-written source.
DEFAULT_LOCKFILES: FrozenSet[str] = frozenset(
    {
        "package-lock.json",
        "yarn.lock",
        "pnpm-lock.yaml",
        "npm-shrinkwrap.json",
        "composer.lock",
        "Cargo.lock",
        "Gemfile.lock",
        "poetry.lock",
        "Pipfile.lock",
        "go.sum",
    }
)

# Resource-fork folder added by the macOS archiver.
MACOS_METADATA_DIR = "__MACOSX/"

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


def normalize_member_name(name: str) -> str:
    return name.replace("\\", "/")


def discover_root(names: Iterable[str]) -> str:
    """
    Return the common top-level folder shared by every file entry.

    Args:
        names: Archive member names (directories and macOS metadata ignored)

    Returns:
        Root prefix with a trailing slash (e.g. "repo-main/"), or "" when
        entries do not share a single top-level folder.

    Examples:
        >>> discover_root(["repo-main/src/a.ts", "repo-main/README.md"])
        'repo-main/'
        >>> discover_root(["src/a.ts", "main.py"])
        ''
    """
    root: Optional[str] = None
    for raw_name in names:
        name = normalize_member_name(raw_name)
        if name.endswith("/") or name.startswith(MACOS_METADATA_DIR):
            continue
        if "/" not in name:
            return ""
        segment = name.split("/", 1)[0]
        if root is None:
            root = segment
        elif segment != root:
            return ""

    return f"{root}/" if root else ""


class ArchiveLoader:
    """
    Unpacks an in-memory zip archive into a flat list of code entries.

    Attributes:
        config: Configuration dictionary
        code_extensions: Extensions (lower-case, no dot) admitted as code
        lockfiles: Basenames always skipped
        max_file_size: Entries larger than this (uncompressed bytes) are skipped
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize ArchiveLoader.

        Args:
            config: Configuration dictionary with optional keys:
                - code_extensions: Set of extensions to admit (default: CODE_EXTENSIONS)
                - lockfiles: Set of basenames to skip (default: DEFAULT_LOCKFILES)
                - max_file_size: Maximum entry size in bytes (default: 10MB)

        Raises:
            ValidationError: If config is invalid
        """
        self.config = config if config is not None else {}
        self._validate_config()

        self.code_extensions = frozenset(
            ext.lower().lstrip(".") for ext in self.config.get("code_extensions", CODE_EXTENSIONS)
        )
        self.lockfiles = frozenset(self.config.get("lockfiles", DEFAULT_LOCKFILES))
        self.max_file_size = self.config.get("max_file_size", DEFAULT_MAX_FILE_SIZE)

    def _validate_config(self) -> None:
        if not isinstance(self.config, dict):
            raise ValidationError(
                "Configuration must be a dictionary",
                error_code="VAL_001",
                details={"received_type": type(self.config).__name__},
            )

        if "max_file_size" in self.config:
            value = self.config["max_file_size"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValidationError(
                    "max_file_size must be a positive integer",
                    error_code="VAL_003",
                    details={"received_value": value},
                )

    def load(self, archive: bytes, root_folder: Optional[str] = None) -> List[ArchiveEntry]:
        """
        Unpack admissible code entries from ``archive``.

        Args:
            archive: Raw zip bytes
            root_folder: Folder to strip from every entry path. When None the
                common root is discovered; "" disables stripping. Entries
                outside the root are skipped.

        Returns:
            Entries in archive order with root-stripped paths and decoded text

        Raises:
            ValidationError: If archive is not bytes
            InvalidArchiveError: If the archive cannot be unpacked
            EmptyArchiveError: If no admissible code files remain
        """
        if not isinstance(archive, (bytes, bytearray, memoryview)):
            raise ValidationError(
                "Archive must be provided as bytes",
                error_code="VAL_002",
                details={"received_type": type(archive).__name__},
            )

        try:
            with zipfile.ZipFile(io.BytesIO(bytes(archive))) as zf:
                infos = zf.infolist()
                root = self._resolve_root(root_folder, [info.filename for info in infos])
                entries = self._read_entries(zf, infos, root)
        except zipfile.BadZipFile as exc:
            logger.error("archive_unpack_failed", error=str(exc))
            raise InvalidArchiveError(
                message="Invalid or corrupt archive: the upload is not a readable zip file",
                details={"size_bytes": len(archive)},
                original_exception=exc,
            )
        except (
            zipfile.LargeZipFile,
            NotImplementedError,
            RuntimeError,
            EOFError,
            zlib.error,
            lzma.LZMAError,
            OSError,
        ) as exc:
            logger.error("archive_unpack_failed", error=str(exc))
            raise InvalidArchiveError(
                message=f"Invalid or corrupt archive: {exc}",
                details={"size_bytes": len(archive)},
                original_exception=exc,
            )

        if not entries:
            logger.warning("archive_has_no_code_files", member_count=len(infos), root=root)
            raise EmptyArchiveError(
                message=(
                    "No valid files found: the archive contains no recognizable source "
                    f"files (supported extensions: {', '.join(sorted(self.code_extensions))})"
                ),
                details={"member_count": len(infos), "root": root},
            )

        logger.info("archive_loaded", file_count=len(entries), root=root)
        return entries

    def is_admissible(self, path: str) -> bool:
        """Check a root-stripped path against the hidden/lockfile/extension filters."""
        if not path or path.endswith("/"):
            return False

        filename = path.rsplit("/", 1)[-1]
        if not filename or filename.startswith("."):
            return False
        if filename in self.lockfiles:
            return False

        return get_extension(filename) in self.code_extensions

    def _resolve_root(self, root_folder: Optional[str], names: List[str]) -> str:
        if root_folder is None:
            return discover_root(names)

        root = normalize_member_name(root_folder).strip("/")
        return f"{root}/" if root else ""

    def _read_entries(
        self, zf: zipfile.ZipFile, infos: List[zipfile.ZipInfo], root: str
    ) -> List[ArchiveEntry]:
        entries: List[ArchiveEntry] = []
        seen = set()

        for info in infos:
            if info.is_dir():
                continue

            name = normalize_member_name(info.filename)
            if name.startswith(MACOS_METADATA_DIR) or not name.startswith(root):
                continue

            path = name[len(root) :]
            if not self.is_admissible(path):
                continue

            if info.file_size > self.max_file_size:
                logger.info(
                    "archive_entry_skipped_too_large",
                    path=path,
                    size_bytes=info.file_size,
                    max_file_size=self.max_file_size,
                )
                continue

            if path in seen:
                logger.warning("archive_entry_duplicate_skipped", path=path)
                continue
            seen.add(path)

            content = zf.read(info).decode("utf-8", errors="replace")
            entries.append(ArchiveEntry(path=path, content=content))

        return entries
