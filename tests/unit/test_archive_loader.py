"""
Unit tests for ArchiveLoader.

Tests root discovery, filtering rules, ordering and archive-level errors.

License: MIT
"""

import io
import zipfile

import pytest

from repograph_core.archive import ArchiveLoader, discover_root
from repograph_core.exceptions import EmptyArchiveError, InvalidArchiveError, ValidationError


@pytest.fixture
def loader():
    return ArchiveLoader()


# === Root discovery ===


@pytest.mark.unit
def test_discover_root_single_folder():
    assert discover_root(["repo-main/", "repo-main/src/a.ts", "repo-main/b.py"]) == "repo-main/"


@pytest.mark.unit
def test_discover_root_mixed_top_level():
    assert discover_root(["src/a.ts", "main.py"]) == ""


@pytest.mark.unit
def test_discover_root_two_folders():
    assert discover_root(["a/x.ts", "b/y.ts"]) == ""


@pytest.mark.unit
def test_discover_root_ignores_macos_metadata():
    names = ["repo/a.ts", "__MACOSX/repo/._a.ts"]
    assert discover_root(names) == "repo/"


@pytest.mark.unit
def test_discover_root_empty():
    assert discover_root([]) == ""


# === Loading ===


@pytest.mark.unit
def test_load_strips_discovered_root(loader, sample_repo_zip):
    entries = loader.load(sample_repo_zip)

    assert [entry.path for entry in entries] == ["src/a.ts", "src/b.ts"]
    assert entries[0].filename == "a.ts"
    assert entries[0].content.startswith("export function foo()")


@pytest.mark.unit
def test_load_preserves_archive_order(loader, make_zip):
    archive = make_zip({"r/z.py": "z = 1\n", "r/a.py": "a = 1\n", "r/m.py": "m = 1\n"})

    entries = loader.load(archive)

    assert [entry.path for entry in entries] == ["z.py", "a.py", "m.py"]


@pytest.mark.unit
def test_load_skips_hidden_lockfiles_and_non_code(loader, make_zip):
    archive = make_zip(
        {
            "repo/.eslintrc.js": "module.exports = {};",
            "repo/src/.hidden.ts": "x",
            "repo/yarn.lock": "lock",
            "repo/package-lock.json": "{}",
            "repo/package.json": "{}",
            "repo/docs/guide.md": "# guide",
            "repo/logo.png": b"\x89PNG",
            "repo/src/index.ts": "export {}",
        },
        directories=["repo/", "repo/src/"],
    )

    entries = loader.load(archive)

    assert [entry.path for entry in entries] == ["package.json", "src/index.ts"]


@pytest.mark.unit
def test_load_ignores_macos_metadata(loader, make_zip):
    archive = make_zip({"repo/a.ts": "a", "__MACOSX/repo/._a.ts": "junk"})

    entries = loader.load(archive)

    assert [entry.path for entry in entries] == ["a.ts"]


@pytest.mark.unit
def test_load_without_common_root(loader, make_zip):
    archive = make_zip({"main.py": "print(1)\n", "pkg/util.py": "x = 1\n"})

    entries = loader.load(archive)

    assert [entry.path for entry in entries] == ["main.py", "pkg/util.py"]


@pytest.mark.unit
def test_explicit_root_folder(loader, make_zip):
    archive = make_zip({"repo/src/a.ts": "a", "other/b.ts": "b"})

    entries = loader.load(archive, root_folder="repo")

    assert [entry.path for entry in entries] == ["src/a.ts"]


@pytest.mark.unit
def test_empty_root_folder_disables_stripping(loader, sample_repo_zip):
    entries = loader.load(sample_repo_zip, root_folder="")

    assert [entry.path for entry in entries] == ["project/src/a.ts", "project/src/b.ts"]


@pytest.mark.unit
def test_duplicate_paths_keep_first(loader):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("repo/a.ts", "first")
        with pytest.warns(UserWarning):
            archive.writestr("repo/a.ts", "second")

    entries = loader.load(buffer.getvalue())

    assert len(entries) == 1
    assert entries[0].content == "first"


@pytest.mark.unit
def test_oversized_entries_skipped(make_zip):
    loader = ArchiveLoader({"max_file_size": 10})
    archive = make_zip({"repo/small.py": "x = 1", "repo/big.py": "x = 1\n" * 10})

    entries = loader.load(archive)

    assert [entry.path for entry in entries] == ["small.py"]


@pytest.mark.unit
def test_invalid_utf8_is_replaced(loader, make_zip):
    archive = make_zip({"repo/a.py": b"name = '\xff'\n"})

    entries = loader.load(archive)

    assert "�" in entries[0].content


@pytest.mark.unit
def test_custom_code_extensions(make_zip):
    loader = ArchiveLoader({"code_extensions": {".md"}})
    archive = make_zip({"repo/README.md": "# hi", "repo/a.ts": "a"})

    entries = loader.load(archive)

    assert [entry.path for entry in entries] == ["README.md"]


# === Errors ===


@pytest.mark.unit
def test_corrupt_archive_raises(loader):
    with pytest.raises(InvalidArchiveError) as exc_info:
        loader.load(b"this is not a zip file")

    assert exc_info.value.error_code == "ARCH_001"
    assert "Invalid or corrupt archive" in exc_info.value.message


@pytest.mark.unit
def test_corrupt_compressed_member_raises(loader, make_zip):
    name = b"repo/a.py"
    archive = bytearray(make_zip({"repo/a.py": "def handler():\n    return 1\n" * 200}))
    # Member data follows the first (local header) copy of the name.
    data_start = archive.index(name) + len(name)
    archive[data_start : data_start + 8] = b"\xff" * 8

    with pytest.raises(InvalidArchiveError) as exc_info:
        loader.load(bytes(archive))

    assert exc_info.value.error_code == "ARCH_001"
    assert "Invalid or corrupt archive" in exc_info.value.message


@pytest.mark.unit
def test_archive_without_code_raises(loader, make_zip):
    archive = make_zip({"repo/README.md": "# docs", "repo/logo.png": b"\x89PNG"})

    with pytest.raises(EmptyArchiveError) as exc_info:
        loader.load(archive)

    assert exc_info.value.error_code == "ARCH_002"
    assert "No valid files" in exc_info.value.message


@pytest.mark.unit
def test_empty_zip_raises(loader, make_zip):
    with pytest.raises(EmptyArchiveError):
        loader.load(make_zip({}))


@pytest.mark.unit
def test_non_bytes_input_rejected(loader):
    with pytest.raises(ValidationError) as exc_info:
        loader.load("repo.zip")

    assert exc_info.value.error_code == "VAL_002"


@pytest.mark.unit
@pytest.mark.parametrize("config", [{"max_file_size": 0}, {"max_file_size": "big"}])
def test_invalid_config_rejected(config):
    with pytest.raises(ValidationError):
        ArchiveLoader(config)


@pytest.mark.unit
def test_non_dict_config_rejected():
    with pytest.raises(ValidationError) as exc_info:
        ArchiveLoader(["max_file_size"])

    assert exc_info.value.error_code == "VAL_001"
