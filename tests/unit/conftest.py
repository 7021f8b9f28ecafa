"""
Unit test fixtures.

Isolates unit tests from environment variables (.env file)
to ensure tests verify actual default values, and provides
in-memory zip archive builders.

License: MIT
"""

import io
import os
import zipfile
from typing import Dict, Union

import pytest

# Environment variables that affect RepographSettings defaults
CONFIG_ENV_VARS = [
    "MAX_FILE_SIZE",
    "MAX_BLOCK_SCAN_LINES",
    "BRACE_LOOKAHEAD_LINES",
    "ANALYSIS_WORKERS",
    "IMPORT_MATCH_SCORE",
    "MAX_REFERENCE_SCAN_CHARS",
    "RESOLVER_WORKERS",
    "DEFAULT_CATEGORY",
    "CATEGORIZER_BASE_URL",
    "CATEGORIZER_MODEL",
    "CATEGORIZER_TIMEOUT",
    "CATEGORIZER_MAX_RETRIES",
    "LOG_LEVEL",
    "LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def clean_env_for_unit_tests(monkeypatch, tmp_path):
    """
    Remove all config-related environment variables and change working
    directory to avoid loading .env file.
    """
    for var in CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    original_dir = os.getcwd()
    os.chdir(tmp_path)
    yield
    os.chdir(original_dir)


def build_zip(files: Dict[str, Union[str, bytes]], directories=()) -> bytes:
    """Create zip bytes from a {member_name: content} mapping, preserving order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for directory in directories:
            archive.writestr(directory.rstrip("/") + "/", b"")
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def make_zip():
    """Factory fixture returning build_zip."""
    return build_zip


@pytest.fixture
def sample_repo_zip():
    """Small TypeScript project nested under a single top-level folder."""
    return build_zip(
        {
            "project/src/a.ts": "export function foo() {\n  return 1;\n}\n",
            "project/src/b.ts": (
                "import { foo } from './a';\n"
                "\n"
                "export function bar() {\n"
                "  return foo() + 1;\n"
                "}\n"
            ),
            "project/package-lock.json": "{}",
            "project/README.md": "# readme\n",
        }
    )
